from functools import partial

import pytest

from graphsv.graph.partition import partition_graph, partitioning_predicate, repartitioning_predicate
from graphsv.interval import Interval

from ..util import linear_graph


@pytest.fixture
def nested_graph():
    # breakpoint edges over [100, 300) and [150, 250)
    graph, nodes = linear_graph('1', 0, 100, 150, 200, 250, 300, 400)
    graph.add_edge(nodes[1], nodes[5])
    graph.add_edge(nodes[2], nodes[4])
    return graph


class TestPartitioningPredicate:
    def test_staggered(self):
        assert partitioning_predicate(Interval('1', 0, 100), Interval('1', 50, 150), 0.9)
        assert partitioning_predicate(Interval('1', 50, 150), Interval('1', 0, 100), 0.9)

    def test_nested_without_reciprocal_overlap(self):
        assert not partitioning_predicate(Interval('1', 0, 100), Interval('1', 40, 50), 0.9)

    def test_nested_with_reciprocal_overlap(self):
        assert partitioning_predicate(Interval('1', 0, 100), Interval('1', 1, 99), 0.9)

    def test_no_overlap(self):
        assert not partitioning_predicate(Interval('1', 0, 100), Interval('1', 100, 150), 0)
        assert not partitioning_predicate(Interval('1', 0, 100), Interval('2', 0, 100), 0)

    def test_repartitioning_requires_reciprocal_overlap(self):
        assert not repartitioning_predicate(Interval('1', 0, 100), Interval('1', 90, 200), 0.1)
        assert repartitioning_predicate(Interval('1', 0, 100), Interval('1', 50, 150), 0.1)


class TestPartitionGraph:
    def test_nested_edges_split(self, nested_graph):
        partitions = partition_graph(nested_graph, partial(partitioning_predicate, min_reciprocal_overlap=0.9))
        assert len(partitions) == 4
        left, outer, inner, right = partitions
        assert left.contig_intervals() == [Interval('1', 0, 100)]
        assert right.contig_intervals() == [Interval('1', 300, 400)]
        assert outer.contig_intervals() == [Interval('1', 100, 300)]
        assert len(outer.reference_edges) == 4
        assert len(outer.breakpoint_edges) == 1
        assert inner.contig_intervals() == [Interval('1', 150, 250)]
        assert len(inner.reference_edges) == 2

    def test_nested_edges_joined_with_low_overlap(self, nested_graph):
        partitions = partition_graph(nested_graph, partial(repartitioning_predicate, min_reciprocal_overlap=0.1))
        assert len(partitions) == 3
        assert len(partitions[1].breakpoint_edges) == 2
        assert len(partitions[1].reference_edges) == 4
        assert [len(p.breakpoint_edges) for p in partitions] == [0, 2, 0]

    def test_reindexed(self, nested_graph):
        partitions = partition_graph(nested_graph, partial(partitioning_predicate, min_reciprocal_overlap=0.9))
        for partition in partitions:
            assert [e.index for e in partition.edges] == list(range(len(partition.edges)))
            partition.validate()

    def test_no_breakpoints(self):
        graph, _ = linear_graph('1', 0, 100, 200)
        partitions = partition_graph(graph, partial(partitioning_predicate, min_reciprocal_overlap=0.9))
        assert len(partitions) == 1
        assert partitions[0].contig_intervals() == [Interval('1', 0, 200)]
        assert len(partitions[0].reference_edges) == 2

    def test_empty_graph(self):
        graph, _ = linear_graph('1', 0)
        assert partition_graph(graph, partial(partitioning_predicate, min_reciprocal_overlap=0.9)) == []

    def test_reference_runs_split_by_contig(self):
        graph, _ = linear_graph('1', 0, 100)
        first = graph.add_node('2', 0)
        graph.add_edge(first, graph.add_node('2', 50), reference=True)
        partitions = partition_graph(graph, partial(partitioning_predicate, min_reciprocal_overlap=0.9))
        assert [p.contig_intervals() for p in partitions] == [[Interval('1', 0, 100)], [Interval('2', 0, 50)]]

    def test_disjoint_breakpoints(self):
        graph, nodes = linear_graph('1', 0, 100, 200, 300, 400)
        graph.add_edge(nodes[3], nodes[4])
        graph.add_edge(nodes[0], nodes[1])
        partitions = partition_graph(graph, partial(partitioning_predicate, min_reciprocal_overlap=0.9))
        assert [p.contig_intervals() for p in partitions] == [
            [Interval('1', 0, 100)],
            [Interval('1', 100, 300)],
            [Interval('1', 300, 400)],
        ]
        assert [len(p.breakpoint_edges) for p in partitions] == [1, 0, 1]

    def test_interchromosomal(self):
        graph, nodes = linear_graph('1', 0, 100, 200)
        other = graph.add_node('2', 0)
        other_end = graph.add_node('2', 100)
        graph.add_edge(other, other_end, reference=True)
        graph.add_edge(nodes[1], other, strand_a=True, strand_b=True)
        partitions = partition_graph(graph, partial(partitioning_predicate, min_reciprocal_overlap=0.9))
        assert len(partitions) == 2
        assert partitions[0].contig_intervals() == [Interval('1', 0, 100)]
        assert partitions[1].contig_intervals() == [Interval('1', 100, 200), Interval('2', 0, 100)]

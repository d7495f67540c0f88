"""
splits a breakpoint graph into independent subgraphs

Breakpoint edges are linked when any of their footprint intervals satisfy an overlap predicate. Each
connected component of linked breakpoint edges becomes a subgraph holding those edges together with every
reference edge overlapping the extent of the component.
Each maximal run of reference edges outside every component becomes a subgraph of its own, so a graph without
breakpoint edges is a single partition.
"""
from typing import Callable, List, Set

import networkx as nx

from ..interval import Interval
from .base import SVGraph, SVGraphEdge, contig_extent


def partitioning_predicate(first: Interval, second: Interval, min_reciprocal_overlap: float) -> bool:
    """
    intervals are dependent when they overlap and either they are staggered or they have sufficient
    reciprocal overlap. An interval nested well inside another is not dependent on it

    Example:
        >>> partitioning_predicate(Interval('1', 0, 100), Interval('1', 50, 150), 0.9)
        True
        >>> partitioning_predicate(Interval('1', 0, 100), Interval('1', 40, 50), 0.9)
        False
    """
    if not first.overlaps(second):
        return False
    if first.start <= second.start and first.end <= second.end:
        return True
    if second.start <= first.start and second.end <= first.end:
        return True
    return first.reciprocal_overlap(second, min_reciprocal_overlap)


def repartitioning_predicate(first: Interval, second: Interval, min_reciprocal_overlap: float) -> bool:
    """
    stricter predicate used to break up a partition which was too large to solve
    """
    return first.reciprocal_overlap(second, min_reciprocal_overlap)


def _link_breakpoint_edges(graph: SVGraph, predicate: Callable[[Interval, Interval], bool]) -> nx.Graph:
    links = nx.Graph()
    footprints = []
    for edge in graph.breakpoint_edges:
        links.add_node(edge.index)
        for itvl in edge.footprint:
            footprints.append((itvl, edge.index))
    footprints.sort(key=lambda x: (x[0].key(), x[1]))

    for i, (current, current_edge) in enumerate(footprints):
        for other, other_edge in footprints[i + 1:]:
            if other.contig != current.contig or other.start >= current.end:
                break
            if current_edge != other_edge and predicate(current, other):
                links.add_edge(current_edge, other_edge)
    return links


def _uncovered_reference_runs(graph: SVGraph, covered: Set[int]) -> List[List[SVGraphEdge]]:
    """
    maximal runs of consecutive reference edges which no breakpoint component covers
    """
    runs = []
    run: List[SVGraphEdge] = []
    for edge in graph.reference_edges:
        if edge.index in covered:
            if run:
                runs.append(run)
            run = []
            continue
        if run and (run[-1].interval.contig != edge.interval.contig or run[-1].interval.end != edge.interval.start):
            runs.append(run)
            run = []
        run.append(edge)
    if run:
        runs.append(run)
    return runs


def partition_graph(graph: SVGraph, predicate: Callable[[Interval, Interval], bool]) -> List[SVGraph]:
    """
    split the graph into independent subgraphs

    Args:
        graph: the graph to partition
        predicate: returns True when two edge intervals must be solved together

    Returns:
        the subgraphs, ordered by their first contig interval
    """
    links = _link_breakpoint_edges(graph, predicate)
    reference_edges = graph.reference_edges
    covered = set()
    partitions = []

    for component in nx.connected_components(links):
        members = [graph.edges[i] for i in component]
        hull = contig_extent(members)
        for edge in reference_edges:
            if any([edge.interval.overlaps(itvl) for itvl in hull]):
                members.append(edge)
                covered.add(edge.index)
        partitions.append(graph.subgraph(members))

    for run in _uncovered_reference_runs(graph, covered):
        partitions.append(graph.subgraph(run))

    partitions.sort(key=lambda g: [itvl.key() for itvl in g.contig_intervals()])
    return partitions

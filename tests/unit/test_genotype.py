import math

import numpy as np
import pytest

from graphsv.call.genotype import edge_posteriors, enumerate_genotypes
from graphsv.error import InconsistentCopyNumberStatesError
from graphsv.graph.base import GraphPath

from ..util import copy_number_index, linear_graph

FAVOUR_LOSS = [0.96, 0.01, 0.01, 0.01, 0.01]


@pytest.fixture
def single_edge():
    graph, _ = linear_graph('1', 0, 100)
    return graph


@pytest.fixture
def paths(single_edge):
    return [GraphPath(single_edge.reference_edges), GraphPath([])]


class TestEdgePosteriors:
    def test_full_overlap(self, single_edge):
        posteriors = edge_posteriors(single_edge, copy_number_index(('1', 0, 100, FAVOUR_LOSS)))
        assert posteriors.shape == (1, 5)
        assert np.allclose(np.exp(posteriors[0]), FAVOUR_LOSS)

    def test_partial_overlap_weighted(self, single_edge):
        posteriors = edge_posteriors(single_edge, copy_number_index(('1', 50, 150, FAVOUR_LOSS)))
        assert np.allclose(np.exp(posteriors[0]), [p * 0.5 for p in FAVOUR_LOSS])

    def test_contributions_summed(self, single_edge):
        index = copy_number_index(('1', 0, 50, [0.5, 0.5]), ('1', 50, 100, [1, 0]))
        posteriors = edge_posteriors(single_edge, index)
        assert np.allclose(np.exp(posteriors[0]), [1.5, 0.5])

    def test_zero_probability_state(self, single_edge):
        posteriors = edge_posteriors(single_edge, copy_number_index(('1', 0, 100, [1, 0])))
        assert posteriors[0][1] == float('-inf')

    def test_breakpoint_edges_uninformative(self):
        graph, nodes = linear_graph('1', 0, 100, 200)
        graph.add_edge(nodes[0], nodes[2])
        posteriors = edge_posteriors(graph, copy_number_index(('1', 0, 200, FAVOUR_LOSS)))
        assert posteriors[2].tolist() == [0, 0, 0, 0, 0]

    def test_no_evidence(self, single_edge):
        assert edge_posteriors(single_edge, copy_number_index(('2', 0, 100, FAVOUR_LOSS))) is None

    def test_inconsistent_states_error(self, single_edge):
        index = copy_number_index(('1', 0, 50, [0.5, 0.5]), ('1', 50, 100, [0.2, 0.3, 0.5]))
        with pytest.raises(InconsistentCopyNumberStatesError):
            edge_posteriors(single_edge, index)


class TestEnumerateGenotypes:
    def test_combinations(self, single_edge, paths):
        index = copy_number_index(('1', 0, 100, FAVOUR_LOSS))
        result = enumerate_genotypes(single_edge, 3, 2, index, paths)
        assert result.is_success()
        genotypes = result.value
        assert [g.genotype_id for g in genotypes] == [0, 1, 2, 3]
        assert [g.group_id for g in genotypes] == [3, 3, 3, 3]
        assert [len(g.haplotypes) for g in genotypes] == [2, 2, 2, 2]
        assert genotypes[1].haplotypes == [paths[0], paths[1]]
        assert genotypes[2].haplotypes == [paths[1], paths[0]]
        assert [g.depth_log_likelihood for g in genotypes] == pytest.approx(
            [math.log(0.01), math.log(0.01), math.log(0.01), math.log(0.96)]
        )

    def test_zero_baseline(self, single_edge, paths):
        index = copy_number_index(('1', 0, 100, FAVOUR_LOSS))
        result = enumerate_genotypes(single_edge, 0, 0, index, paths)
        assert result.is_success()
        assert result.value == []

    def test_no_evidence(self, single_edge, paths):
        result = enumerate_genotypes(single_edge, 0, 2, copy_number_index(), paths)
        assert result.is_success()
        assert result.value == []

    def test_combination_limit(self, single_edge, paths):
        index = copy_number_index(('1', 0, 100, FAVOUR_LOSS))
        paths = paths + [GraphPath(single_edge.reference_edges * 2)]
        result = enumerate_genotypes(single_edge, 0, 2, index, paths, max_genotype_combinations=8)
        assert result.is_too_large()
        assert result.size == 9
        result = enumerate_genotypes(single_edge, 0, 2, index, paths, max_genotype_combinations=9)
        assert len(result.value) == 9

    def test_ignored_reference_copies(self, single_edge, paths):
        index = copy_number_index(('1', 0, 100, FAVOUR_LOSS))
        result = enumerate_genotypes(single_edge, 0, 6, index, paths, max_non_ref_copies=2)
        genotypes = result.value
        assert len(genotypes) == 4
        # 4 copies are assumed to follow the reference
        assert genotypes[0].depth_log_likelihood == float('-inf')
        assert genotypes[3].depth_log_likelihood == pytest.approx(math.log(0.01))

    def test_state_beyond_evidence(self, single_edge):
        index = copy_number_index(('1', 0, 100, [0.5, 0.5]))
        paths = [GraphPath(single_edge.reference_edges * 2)]
        result = enumerate_genotypes(single_edge, 0, 1, index, paths)
        assert result.value[0].depth_log_likelihood == float('-inf')

import math

import pytest

from graphsv.call.genotype import Genotype
from graphsv.call.score import (
    breakpoint_visit_counts,
    score_genotypes,
    set_depth_probabilities,
    set_evidence_probabilities,
    set_probabilities,
)
from graphsv.graph.base import GraphPath

from ..util import linear_graph


@pytest.fixture
def deletion_graph():
    graph, nodes = linear_graph('1', 0, 100)
    graph.add_edge(nodes[0], nodes[1], prior=[math.log(0.25), math.log(0.5), math.log(0.25)])
    return graph


def genotypes_of(graph, *combinations, log_likelihoods=None):
    reference, deletion = GraphPath([graph.edges[0]]), GraphPath([graph.edges[1]])
    paths = {'ref': reference, 'del': deletion}
    log_likelihoods = log_likelihoods or [0] * len(combinations)
    return [
        Genotype(0, i, [paths[name] for name in combination], depth_log_likelihood=ll)
        for i, (combination, ll) in enumerate(zip(combinations, log_likelihoods))
    ]


class TestDepthProbabilities:
    def test_normalized(self, deletion_graph):
        genotypes = genotypes_of(
            deletion_graph, ['ref'], ['del'], log_likelihoods=[math.log(0.01), math.log(0.03)]
        )
        set_depth_probabilities(genotypes)
        assert [g.depth_probability for g in genotypes] == pytest.approx([0.25, 0.75])

    def test_large_magnitudes(self, deletion_graph):
        genotypes = genotypes_of(deletion_graph, ['ref'], ['del'], log_likelihoods=[-700, -700 + math.log(3)])
        set_depth_probabilities(genotypes)
        assert [g.depth_probability for g in genotypes] == pytest.approx([0.25, 0.75])

    def test_impossible_genotypes(self, deletion_graph):
        genotypes = genotypes_of(deletion_graph, ['ref'], ['del'], log_likelihoods=[float('-inf'), float('-inf')])
        set_depth_probabilities(genotypes)
        assert [g.depth_probability for g in genotypes] == [0, 0]

    def test_single_possible_genotype(self, deletion_graph):
        genotypes = genotypes_of(deletion_graph, ['ref'], ['del'], log_likelihoods=[float('-inf'), -5])
        set_depth_probabilities(genotypes)
        assert [g.depth_probability for g in genotypes] == pytest.approx([0, 1])

    def test_empty(self):
        set_depth_probabilities([])


class TestEvidenceProbabilities:
    def test_visit_counts(self, deletion_graph):
        genotype = genotypes_of(deletion_graph, ['ref', 'ref'])[0]
        assert breakpoint_visit_counts(genotype, deletion_graph) == {1: 0}
        genotype = genotypes_of(deletion_graph, ['del', 'del'])[0]
        assert breakpoint_visit_counts(genotype, deletion_graph) == {1: 2}

    def test_normalized_by_prior(self, deletion_graph):
        genotypes = genotypes_of(deletion_graph, ['ref', 'ref'], ['ref', 'del'], ['del', 'del'])
        set_evidence_probabilities(genotypes, deletion_graph)
        assert [g.evidence_probability for g in genotypes] == pytest.approx([0.25, 0.5, 0.25])

    def test_visits_beyond_prior(self, deletion_graph):
        genotypes = genotypes_of(deletion_graph, ['ref', 'ref'], ['del', 'del', 'del'])
        set_evidence_probabilities(genotypes, deletion_graph)
        assert [g.evidence_probability for g in genotypes] == [1, 0]

    def test_uniform_when_all_ruled_out(self, deletion_graph):
        genotypes = genotypes_of(deletion_graph, ['del', 'del', 'del'], ['del', 'del', 'del', 'del'])
        set_evidence_probabilities(genotypes, deletion_graph)
        assert [g.evidence_probability for g in genotypes] == [0.5, 0.5]


class TestProbabilities:
    def test_combined(self, deletion_graph):
        genotypes = genotypes_of(deletion_graph, ['ref'], ['del'])
        genotypes[0].depth_probability, genotypes[0].evidence_probability = 0.5, 0.2
        genotypes[1].depth_probability, genotypes[1].evidence_probability = 0.5, 0.6
        set_probabilities(genotypes)
        assert [g.probability for g in genotypes] == pytest.approx([0.25, 0.75])

    def test_disagreement(self, deletion_graph):
        genotypes = genotypes_of(deletion_graph, ['ref'], ['del'])
        genotypes[0].depth_probability, genotypes[0].evidence_probability = 1, 0
        genotypes[1].depth_probability, genotypes[1].evidence_probability = 0, 1
        set_probabilities(genotypes)
        assert [g.probability for g in genotypes] == [0, 0]

    def test_score_genotypes(self, deletion_graph):
        genotypes = genotypes_of(
            deletion_graph,
            ['ref', 'ref'],
            ['ref', 'del'],
            ['del', 'del'],
            log_likelihoods=[math.log(0.01), math.log(0.01), math.log(0.96)],
        )
        score_genotypes(genotypes, deletion_graph)
        assert sum([g.probability for g in genotypes]) == pytest.approx(1)
        assert [g.probability for g in genotypes] == pytest.approx([0.0025 / 0.2475, 0.005 / 0.2475, 0.24 / 0.2475])
        assert genotypes[2].probability == max([g.probability for g in genotypes])

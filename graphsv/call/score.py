"""
scores genotypes against the copy number (depth) evidence and the breakpoint evidence and combines the two
into a single posterior probability per genotype
"""
import sys
from typing import List

import numpy as np

from ..graph.base import SVGraph
from ..util import logger
from .genotype import Genotype

MIN_NORMAL = sys.float_info.min


def set_depth_probabilities(genotypes: List[Genotype]):
    """
    normalize the depth log-likelihoods. Each exponentiated term of the normalizing sum is floored at the
    smallest normal float
    """
    if not genotypes:
        return
    log_likelihoods = np.array([g.depth_log_likelihood for g in genotypes], dtype=float)
    floored = np.maximum(log_likelihoods, np.log(MIN_NORMAL))
    shift = floored.max()
    log_denominator = shift + np.log(np.exp(floored - shift).sum())
    probabilities = np.exp(log_likelihoods - log_denominator)
    for genotype, probability in zip(genotypes, probabilities):
        genotype.depth_probability = float(probability)


def breakpoint_visit_counts(genotype: Genotype, graph: SVGraph):
    """
    number of times each breakpoint edge is visited across all haplotypes of the genotype, unvisited edges included
    """
    counts = {edge.index: 0 for edge in graph.breakpoint_edges}
    for haplotype in genotype.haplotypes:
        for edge in haplotype:
            if not edge.reference:
                counts[edge.index] += 1
    return counts


def set_evidence_probabilities(genotypes: List[Genotype], graph: SVGraph):
    """
    score each genotype by the prior probability of its breakpoint edge visit counts, normalized across genotypes
    """
    if not genotypes:
        return
    log_evidence = []
    for genotype in genotypes:
        counts = breakpoint_visit_counts(genotype, graph)
        log_evidence.append(sum([graph.edges[index].log_prior(count) for index, count in counts.items()]))
    log_evidence = np.array(log_evidence, dtype=float)

    finite = log_evidence[np.isfinite(log_evidence)]
    if not finite.size:
        logger.warning(
            f'breakpoint evidence rules out all {len(genotypes)} genotypes of group {genotypes[0].group_id}; '
            'using uniform evidence probabilities'
        )
        probabilities = np.full(len(genotypes), 1 / len(genotypes))
    else:
        weights = np.exp(log_evidence - finite.max())
        probabilities = weights / weights.sum()
    for genotype, probability in zip(genotypes, probabilities):
        genotype.evidence_probability = float(probability)


def set_probabilities(genotypes: List[Genotype]):
    """
    combine the depth and evidence probabilities into a posterior probability per genotype
    """
    if not genotypes:
        return
    joint = np.array([g.depth_probability * g.evidence_probability for g in genotypes], dtype=float)
    denominator = joint.sum()
    if denominator == 0:
        logger.warning(
            f'depth and breakpoint evidence disagree on every genotype of group {genotypes[0].group_id}; '
            'all genotype probabilities set to 0'
        )
        probabilities = np.zeros(len(genotypes))
    else:
        probabilities = joint / denominator
    for genotype, probability in zip(genotypes, probabilities):
        genotype.probability = float(probability)


def score_genotypes(genotypes: List[Genotype], graph: SVGraph):
    set_depth_probabilities(genotypes)
    set_evidence_probabilities(genotypes, graph)
    set_probabilities(genotypes)
    return genotypes

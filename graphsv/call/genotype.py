"""
builds candidate genotypes (multisets of haplotype paths) for a partition and computes their
depth log-likelihood against the copy number posteriors
"""
import itertools
from typing import List, Optional

import numpy as np

from ..constants import SearchOutcome
from ..copy_number import CopyNumberIndex
from ..error import InconsistentCopyNumberStatesError
from ..graph.base import GraphPath, SVGraph
from ..util import logger
from .constants import DEFAULTS

GENOTYPE_BATCH_SIZE = 2 ** 14


class Genotype:
    """
    a set of haplotypes which together explain a partition

    Attributes:
        group_id (int): the partition the genotype belongs to
        genotype_id (int): the index of the genotype within its partition
        haplotypes (List[GraphPath]): the haplotype paths
        depth_log_likelihood (float): log-likelihood of the copy number evidence given the genotype
        depth_probability (float): normalized depth likelihood
        evidence_probability (float): normalized likelihood of the breakpoint evidence
        probability (float): combined posterior probability
    """

    def __init__(self, group_id, genotype_id, haplotypes, depth_log_likelihood=float('-inf')):
        self.group_id = group_id
        self.genotype_id = genotype_id
        self.haplotypes: List[GraphPath] = list(haplotypes)
        self.depth_log_likelihood = depth_log_likelihood
        self.depth_probability = 0.0
        self.evidence_probability = 0.0
        self.probability = 0.0

    def __repr__(self):
        return '{}(group={}, id={}, haplotypes=[{}], p={})'.format(
            self.__class__.__name__,
            self.group_id,
            self.genotype_id,
            ' | '.join([str(h) for h in self.haplotypes]),
            self.probability,
        )


def edge_posteriors(graph: SVGraph, copy_number_index: CopyNumberIndex) -> Optional[np.ndarray]:
    """
    per-edge log posterior over copy number states

    every copy number interval overlapping a reference edge contributes its posterior, weighted by the
    fraction of the interval overlapping the edge. Contributions are summed as probabilities and the
    result is logged. Breakpoint edges and reference edges without overlapping evidence get all-zero
    log posteriors

    Returns:
        numpy array of shape (edges, states) or None if no evidence overlaps the reference edges

    Raises:
        InconsistentCopyNumberStatesError: overlapping intervals do not share the same number of states
    """
    overlaps = {}
    num_states = None
    for edge in graph.reference_edges:
        overlaps[edge.index] = copy_number_index.overlappers(edge.interval)
        for cni in overlaps[edge.index]:
            if num_states is None:
                num_states = cni.num_states
            elif cni.num_states != num_states:
                raise InconsistentCopyNumberStatesError(
                    'copy number intervals overlapping a partition must have the same number of states',
                    cni.interval,
                    cni.num_states,
                    num_states,
                )
    if num_states is None:
        return None

    posteriors = np.zeros((len(graph.edges), num_states))
    for index, cnis in overlaps.items():
        if not cnis:
            continue
        edge_interval = graph.edges[index].interval
        linear = np.zeros(num_states)
        for cni in cnis:
            weight = cni.interval.overlap_length(edge_interval) / cni.interval.length()
            linear += np.exp(cni.log_posteriors) * weight
        with np.errstate(divide='ignore'):
            posteriors[index] = np.log(linear)
    return posteriors


def _log_likelihoods(combinations, path_states, posteriors, ignored_ref_copies):
    states = path_states[combinations].sum(axis=1) + ignored_ref_copies
    num_states = posteriors.shape[1]
    in_range = states < num_states
    lookup = posteriors[np.arange(posteriors.shape[0])[np.newaxis, :], np.minimum(states, num_states - 1)]
    return np.where(in_range, lookup, -np.inf).sum(axis=1)


def enumerate_genotypes(
    graph: SVGraph,
    group_id: int,
    baseline_copy_number: int,
    copy_number_index: CopyNumberIndex,
    paths: List[GraphPath],
    max_non_ref_copies: int = DEFAULTS.max_non_ref_copies,
    max_genotype_combinations: int = DEFAULTS.max_genotype_combinations,
) -> SearchOutcome:
    """
    enumerate all genotypes built from min(baseline, max_non_ref_copies) haplotypes and compute their depth
    log-likelihoods. Copies above the cap are assumed to follow the reference and add to every edge state

    Args:
        graph: the partition
        group_id: id assigned to every genotype
        baseline_copy_number: the expected copy number of the partition
        copy_number_index: the copy number posteriors
        paths: the candidate haplotypes
        max_non_ref_copies: maximum number of haplotypes combined into a genotype
        max_genotype_combinations: maximum size of the search space

    Returns:
        SearchOutcome: success holding the list of Genotype or too_large holding the number of combinations

    Raises:
        InconsistentCopyNumberStatesError: the copy number evidence does not share the same number of states
    """
    if baseline_copy_number == 0:
        return SearchOutcome.success([])
    posteriors = edge_posteriors(graph, copy_number_index)
    if posteriors is None:
        logger.debug(f'no copy number evidence overlaps group {group_id}')
        return SearchOutcome.success([])

    ignored_ref_copies = max(baseline_copy_number - max_non_ref_copies, 0)
    non_ref_copies = min(baseline_copy_number, max_non_ref_copies)
    combinations = len(paths) ** non_ref_copies
    if combinations > max_genotype_combinations:
        logger.info(f'too many genotype combinations for group {group_id}: {len(paths)} ^ {non_ref_copies}')
        return SearchOutcome.too_large(combinations)

    path_states = np.zeros((len(paths), len(graph.edges)), dtype=np.int64)
    for i, path in enumerate(paths):
        path_states[i] = path.visit_counts(len(graph.edges))

    genotypes = []
    product = itertools.product(range(len(paths)), repeat=non_ref_copies)
    while True:
        batch = list(itertools.islice(product, GENOTYPE_BATCH_SIZE))
        if not batch:
            break
        batch = np.array(batch, dtype=np.int64).reshape(len(batch), non_ref_copies)
        log_likelihoods = _log_likelihoods(batch, path_states, posteriors, ignored_ref_copies)
        for combination, log_likelihood in zip(batch, log_likelihoods):
            genotypes.append(
                Genotype(
                    group_id,
                    len(genotypes),
                    [paths[i] for i in combination],
                    depth_log_likelihood=float(log_likelihood),
                )
            )
    return SearchOutcome.success(genotypes)

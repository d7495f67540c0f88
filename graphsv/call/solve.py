"""
solves the partitions of a breakpoint graph

Partitions are solved in dependency order. A partition whose extent lies inside a larger partition is a
child of the smallest such partition and takes its baseline copy number from the genotype called for the
parent. A partition which is too large to solve is split further and any piece which is still too large
is reported as unresolved.
"""
from concurrent import futures
from functools import partial
from typing import List, Tuple

import networkx as nx

from ..constants import SearchOutcome
from ..copy_number import CopyNumberIndex
from ..graph.base import SVGraph, count_edges_by_type
from ..graph.enumerate import enumerate_haplotypes
from ..graph.partition import partition_graph, partitioning_predicate, repartitioning_predicate
from ..util import logger
from .constants import DEFAULTS
from .event import (
    CalledEvent,
    CalledGenotype,
    filter_events_by_probability,
    filter_events_by_size,
    filter_genotypes_by_probability,
    integrate_events,
    merge_adjacent_events,
    unresolved_event,
)
from .genotype import enumerate_genotypes
from .score import score_genotypes


def generate_events(
    graph: SVGraph,
    group_id: int,
    baseline_copy_number: int,
    copy_number_index: CopyNumberIndex,
    enumerator=enumerate_haplotypes,
    min_event_prob=DEFAULTS.min_event_prob,
    max_path_length_factor=DEFAULTS.max_path_length_factor,
    max_edge_visits=DEFAULTS.max_edge_visits,
    max_branches=DEFAULTS.max_branches,
    max_breakpoints_per_haplotype=DEFAULTS.max_breakpoints_per_haplotype,
    min_event_size=DEFAULTS.min_event_size,
    min_haplotype_prob=DEFAULTS.min_haplotype_prob,
    max_non_ref_copies=DEFAULTS.max_non_ref_copies,
    max_genotype_combinations=DEFAULTS.max_genotype_combinations,
) -> SearchOutcome:
    """
    call the genotypes and events of a single partition

    Returns:
        SearchOutcome: success holding a tuple of the reported genotypes and the called events, or too_large
        if either the haplotype search or the genotype enumeration exceeded its limit
    """
    if baseline_copy_number == 0:
        return SearchOutcome.success(([], []))

    paths = enumerator(graph, max_path_length_factor, max_edge_visits, max_branches, max_breakpoints_per_haplotype)
    if paths.is_too_large():
        return paths

    genotypes = enumerate_genotypes(
        graph,
        group_id,
        baseline_copy_number,
        copy_number_index,
        paths.value,
        max_non_ref_copies=max_non_ref_copies,
        max_genotype_combinations=max_genotype_combinations,
    )
    if genotypes.is_too_large():
        return genotypes
    genotypes = score_genotypes(genotypes.value, graph)

    events = filter_events_by_probability(integrate_events(genotypes, graph), min_event_prob)
    events = filter_events_by_size(merge_adjacent_events(events), min_event_size)
    called = [CalledGenotype(g) for g in filter_genotypes_by_probability(genotypes, min_haplotype_prob)]
    logger.debug(
        f'group {group_id}: {len(paths.value)} haplotypes, {len(genotypes)} genotypes, {len(events)} events'
    )
    return SearchOutcome.success((called, events))


def partition_dependencies(partitions: List[SVGraph]) -> nx.DiGraph:
    """
    dependency graph over partitions. There is an edge i -> j when i is the smallest partition (by interval
    length) whose contig interval contains one of the contig intervals of j and is strictly larger
    """
    dependencies = nx.DiGraph()
    dependencies.add_nodes_from(range(len(partitions)))
    intervals_by_contig = {}
    for index, partition in enumerate(partitions):
        for itvl in partition.contig_intervals():
            intervals_by_contig.setdefault(itvl.contig, []).append((itvl, index))

    for index, partition in enumerate(partitions):
        for itvl in partition.contig_intervals():
            parent = None
            parent_length = None
            for other, other_index in intervals_by_contig[itvl.contig]:
                if other_index == index or not other.contains(itvl) or other.length() <= itvl.length():
                    continue
                if parent is None or other.length() < parent_length:
                    parent = other_index
                    parent_length = other.length()
            if parent is not None:
                dependencies.add_edge(parent, index)
    return dependencies


def baseline_from_parent(partition: SVGraph, parent_genotypes: List[CalledGenotype], parent_baseline: int) -> int:
    """
    the number of reference edge visits overlapping the partition in the most probable parent genotype.
    Falls back to the baseline of the parent when the parent reported no genotypes
    """
    if not parent_genotypes:
        return parent_baseline
    best = parent_genotypes[0]
    for genotype in parent_genotypes[1:]:
        if genotype.probability > best.probability:
            best = genotype
    first_interval = partition.contig_intervals()[0]
    return sum(
        [
            1
            for haplotype in best.haplotypes
            for edge in haplotype
            if edge.reference and edge.interval.overlaps(first_interval)
        ]
    )


class PartitionSolver:
    """
    solves all partitions of a breakpoint graph

    Args:
        graph: the breakpoint graph
        copy_number_index: the copy number posteriors
        partitioner: function splitting a graph into independent subgraphs given an interval predicate
        enumerator: function enumerating the haplotype paths of a graph
        **kwargs: overrides for any of the call DEFAULTS
    """

    def __init__(
        self,
        graph: SVGraph,
        copy_number_index: CopyNumberIndex,
        partitioner=partition_graph,
        enumerator=enumerate_haplotypes,
        **kwargs,
    ):
        self.graph = graph
        self.copy_number_index = copy_number_index
        self.partitioner = partitioner
        self.enumerator = enumerator
        for name in DEFAULTS.keys():
            setattr(self, name, kwargs.pop(name, DEFAULTS[name]))
        if kwargs:
            raise TypeError('unexpected settings', sorted(kwargs))

    def generate_events(self, graph: SVGraph, group_id: int, baseline_copy_number: int) -> SearchOutcome:
        return generate_events(
            graph,
            group_id,
            baseline_copy_number,
            self.copy_number_index,
            enumerator=self.enumerator,
            min_event_prob=self.min_event_prob,
            max_path_length_factor=self.max_path_length_factor,
            max_edge_visits=self.max_edge_visits,
            max_branches=self.max_branches,
            max_breakpoints_per_haplotype=self.max_breakpoints_per_haplotype,
            min_event_size=self.min_event_size,
            min_haplotype_prob=self.min_haplotype_prob,
            max_non_ref_copies=self.max_non_ref_copies,
            max_genotype_combinations=self.max_genotype_combinations,
        )

    def partitions(self) -> List[SVGraph]:
        return self.partitioner(
            self.graph, partial(partitioning_predicate, min_reciprocal_overlap=self.partition_reciprocal_overlap)
        )

    def call_partition(
        self, partition: SVGraph, group_id: int, baseline_copy_number: int
    ) -> Tuple[List[CalledGenotype], List[CalledEvent]]:
        """
        call a partition, splitting it further if it is too large to solve as a whole
        """
        result = self.generate_events(partition, group_id, baseline_copy_number)
        if result.is_success():
            return result.value

        logger.info(
            f'group {group_id} ({count_edges_by_type(partition)}) is too large to solve (search size {result.size}), '
            'repartitioning'
        )
        genotypes = []
        events = []
        pieces = self.partitioner(
            partition,
            partial(repartitioning_predicate, min_reciprocal_overlap=self.repartition_reciprocal_overlap),
        )
        for piece in pieces:
            result = self.generate_events(piece, group_id, baseline_copy_number)
            if result.is_success():
                genotypes.extend(result.value[0])
                events.extend(result.value[1])
                continue
            logger.warning(
                f'group {group_id} could not be resolved after repartitioning: {piece.contig_intervals()} '
                f'(search size {result.size})'
            )
            for itvl in piece.contig_intervals():
                events.append(unresolved_event(itvl, group_id))
        return genotypes, events

    def solve_subtree(self, start: int, partitions: List[SVGraph], dependencies: nx.DiGraph, processed: set):
        """
        solve a partition and then, depth first, every partition depending on it which has not been processed yet
        """
        genotypes = []
        events = []
        stack = [(start, [], self.default_copy_number)]
        while stack:
            index, parent_genotypes, parent_baseline = stack.pop()
            if index in processed:
                continue
            processed.add(index)
            baseline = baseline_from_parent(partitions[index], parent_genotypes, parent_baseline)
            partition_genotypes, partition_events = self.call_partition(partitions[index], index, baseline)
            genotypes.extend(partition_genotypes)
            events.extend(partition_events)
            for child in sorted(dependencies.successors(index), reverse=True):
                stack.append((child, partition_genotypes, baseline))
        return genotypes, events

    def solve_order(self, dependencies: nx.DiGraph) -> List[int]:
        roots = [i for i in sorted(dependencies.nodes) if dependencies.in_degree(i) == 0]
        return roots + [i for i in sorted(dependencies.nodes) if dependencies.in_degree(i) > 0]

    def subtrees(self, dependencies: nx.DiGraph) -> List[List[int]]:
        """
        assign every partition to exactly one subtree. Partitions are assigned to the first subtree (in solve
        order) which reaches them
        """
        assigned = set()
        groups = []
        for start in self.solve_order(dependencies):
            if start in assigned:
                continue
            group = []
            stack = [start]
            while stack:
                index = stack.pop()
                if index in assigned:
                    continue
                assigned.add(index)
                group.append(index)
                stack.extend(sorted(dependencies.successors(index), reverse=True))
            groups.append(group)
        return groups

    def solve(self) -> Tuple[List[CalledGenotype], List[CalledEvent]]:
        """
        solve every partition of the graph

        Returns:
            the reported genotypes and the called events
        """
        partitions = self.partitions()
        dependencies = partition_dependencies(partitions)
        logger.info(
            f'solving {len(partitions)} partitions ({dependencies.number_of_edges()} dependencies) '
            f'of {self.graph}'
        )
        groups = self.subtrees(dependencies)

        if self.concurrency_limit > 1 and len(groups) > 1:
            logger.info(f'solving {len(groups)} independent subtrees with {self.concurrency_limit} processes')
            with futures.ProcessPoolExecutor(max_workers=self.concurrency_limit) as pool:
                jobs = [
                    pool.submit(_solve_group, self, group, partitions, dependencies) for group in groups
                ]
                results = [job.result() for job in jobs]
        else:
            results = [_solve_group(self, group, partitions, dependencies) for group in groups]

        genotypes = []
        events = []
        for group_genotypes, group_events in results:
            genotypes.extend(group_genotypes)
            events.extend(group_events)
        logger.info(f'called {len(events)} events and reported {len(genotypes)} genotypes')
        return genotypes, events


def _solve_group(solver: PartitionSolver, group: List[int], partitions: List[SVGraph], dependencies: nx.DiGraph):
    processed = set(range(len(partitions))) - set(group)
    return solver.solve_subtree(group[0], partitions, dependencies, processed)

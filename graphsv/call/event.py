"""
derives structural variant events from scored genotypes, integrates their probabilities over all genotypes
of a partition and cleans up the resulting calls
"""
from typing import Dict, List, Tuple

from ..constants import COLUMNS, EVENT_TYPE
from ..graph.base import GraphPath, SVGraph, SVGraphEdge
from ..interval import Interval
from .genotype import Genotype


class Event:
    """
    a single event hypothesis supported by one genotype at one reference edge
    """

    def __init__(self, event_type, interval, group_id, path_id, probability, evidence_probability, resolved=True):
        if event_type is None:
            raise TypeError('event type cannot be None')
        if interval is None:
            raise TypeError('event interval cannot be None')
        self.event_type = EVENT_TYPE.enforce(event_type)
        self.interval = interval
        self.group_id = group_id
        self.path_id = path_id
        self.probability = probability
        self.evidence_probability = evidence_probability
        self.resolved = resolved

    def __repr__(self):
        return '{}({}, {}, p={})'.format(self.__class__.__name__, self.event_type, self.interval, self.probability)


class CalledEvent:
    """
    an event call reported for a partition

    Attributes:
        event_type (EVENT_TYPE): the type of the event
        interval (Interval): the affected region
        group_id (int): the partition the event was called in
        path_id (int): the genotype which first contributed to the event
        resolved (bool): False for regions which could not be genotyped
        probability (float): integrated probability of the event
    """

    def __init__(self, event_type, interval, group_id, path_id, resolved, probability):
        if event_type is None:
            raise TypeError('event type cannot be None')
        if interval is None:
            raise TypeError('event interval cannot be None')
        self.event_type = EVENT_TYPE.enforce(event_type)
        self.interval = interval
        self.group_id = group_id
        self.path_id = path_id
        self.resolved = resolved
        self.probability = probability

    def flatten(self):
        return {
            COLUMNS.event_type: self.event_type,
            COLUMNS.contig: self.interval.contig,
            COLUMNS.start: self.interval.start,
            COLUMNS.end: self.interval.end,
            COLUMNS.group_id: self.group_id,
            COLUMNS.path_id: self.path_id,
            COLUMNS.resolved: self.resolved,
            COLUMNS.probability: self.probability,
        }

    def to_bed(self):
        return (
            self.interval.contig,
            self.interval.start,
            self.interval.end,
            '{}_{}_{}'.format(self.event_type, self.group_id, self.path_id),
        )

    def __eq__(self, other):
        if not isinstance(other, CalledEvent):
            return NotImplemented
        return self.flatten() == other.flatten()

    def __hash__(self):
        return hash(tuple(self.flatten().items()))

    def __repr__(self):
        return '{}({}, {}, group={}, path={}, resolved={}, p={})'.format(
            self.__class__.__name__,
            self.event_type,
            self.interval,
            self.group_id,
            self.path_id,
            self.resolved,
            self.probability,
        )


class CalledGenotype:
    """
    a genotype reported for a partition
    """

    def __init__(self, genotype: Genotype):
        self.group_id = genotype.group_id
        self.genotype_id = genotype.genotype_id
        self.haplotypes: List[GraphPath] = list(genotype.haplotypes)
        self.depth_log_likelihood = genotype.depth_log_likelihood
        self.depth_probability = genotype.depth_probability
        self.evidence_probability = genotype.evidence_probability
        self.probability = genotype.probability

    def flatten(self):
        return {
            COLUMNS.group_id: self.group_id,
            COLUMNS.genotype_id: self.genotype_id,
            COLUMNS.haplotypes: ';'.join([str(h) for h in self.haplotypes]),
            COLUMNS.depth_log_likelihood: self.depth_log_likelihood,
            COLUMNS.depth_probability: self.depth_probability,
            COLUMNS.evidence_probability: self.evidence_probability,
            COLUMNS.probability: self.probability,
        }

    def __repr__(self):
        return '{}(group={}, id={}, p={})'.format(
            self.__class__.__name__, self.group_id, self.genotype_id, self.probability
        )


def unresolved_event(interval: Interval, group_id: int) -> CalledEvent:
    return CalledEvent(EVENT_TYPE.UR, interval, group_id, 0, False, 0)


def edge_events(
    edge: SVGraphEdge, graph: SVGraph, genotype: Genotype, counts: List[Dict[int, int]], inversions: List[set]
) -> List[Event]:
    """
    event hypotheses of a genotype at a single reference edge

    - DEL: some haplotype does not visit the edge
    - DUP: some haplotype visits the edge more than once
    - INV: some haplotype traverses the edge inverted
    - DUP_INV: replaces DUP and INV when both apply
    """
    deletion = any([c.get(edge.index, 0) < 1 for c in counts])
    duplication = any([c.get(edge.index, 0) > 1 for c in counts])
    inversion = any([edge.index in inv for inv in inversions])

    node_a = graph.nodes[edge.node_a]
    node_b = graph.nodes[edge.node_b]
    interval = Interval(node_a.contig, node_a.position, node_b.position)
    types = []
    if deletion:
        types.append(EVENT_TYPE.DEL)
    if duplication and inversion:
        types.append(EVENT_TYPE.DUP_INV)
    elif duplication:
        types.append(EVENT_TYPE.DUP)
    elif inversion:
        types.append(EVENT_TYPE.INV)
    return [
        Event(
            event_type,
            interval,
            genotype.group_id,
            genotype.genotype_id,
            genotype.probability,
            genotype.evidence_probability,
        )
        for event_type in types
    ]


def genotype_events(genotype: Genotype, graph: SVGraph) -> List[List[Event]]:
    """
    event hypotheses of a genotype, one list per reference edge in reference path order
    """
    counts = []
    inversions = []
    for haplotype in genotype.haplotypes:
        haplotype_counts = {}
        haplotype_inversions = set()
        for edge in haplotype:
            if edge.reference:
                haplotype_counts[edge.index] = haplotype_counts.get(edge.index, 0) + 1
                if edge.inverted:
                    haplotype_inversions.add(edge.index)
        counts.append(haplotype_counts)
        inversions.append(haplotype_inversions)
    return [edge_events(edge, graph, genotype, counts, inversions) for edge in graph.reference_edges]


def integrate_events(genotypes: List[Genotype], graph: SVGraph) -> List[Tuple[CalledEvent, float]]:
    """
    sum the probability of each event type at each reference edge over all genotypes

    Returns:
        pairs of the integrated event and its total probability
    """
    slots: List[List[Event]] = [[] for _ in graph.reference_edges]
    for genotype in genotypes:
        for slot, events in zip(slots, genotype_events(genotype, graph)):
            slot.extend(events)

    result = []
    for slot in slots:
        by_type: Dict[str, List[Event]] = {}
        for event in slot:
            by_type.setdefault(event.event_type, []).append(event)
        for event_type in EVENT_TYPE.values():
            if event_type not in by_type:
                continue
            typed_events = by_type[event_type]
            total = sum([e.probability for e in typed_events])
            first = typed_events[0]
            result.append(
                (CalledEvent(event_type, first.interval, first.group_id, first.path_id, True, total), total)
            )
    return result


def filter_events_by_probability(events: List[Tuple[CalledEvent, float]], min_prob: float) -> List[CalledEvent]:
    return [event for event, probability in events if probability >= min_prob]


def filter_events_by_size(events: List[CalledEvent], min_size: int) -> List[CalledEvent]:
    return [event for event in events if event.interval.length() >= min_size]


def filter_genotypes_by_probability(genotypes: List[Genotype], min_prob: float) -> List[Genotype]:
    return [genotype for genotype in genotypes if genotype.depth_probability >= min_prob]


def _merge_run(run: List[CalledEvent]) -> CalledEvent:
    first = run[0]
    interval = Interval(first.interval.contig, first.interval.start, run[-1].interval.end)
    return CalledEvent(first.event_type, interval, first.group_id, first.path_id, first.resolved, first.probability)


def merge_adjacent_events(events: List[CalledEvent]) -> List[CalledEvent]:
    """
    merge runs of contiguous events with the same type and exactly equal probability. An event with the
    same interval as the previous event of its type is absorbed into the current run

    Example:
        >>> merge_adjacent_events([
        ...     CalledEvent('DEL', Interval('1', 0, 10), 0, 0, True, 0.9),
        ...     CalledEvent('DEL', Interval('1', 10, 20), 0, 1, True, 0.9),
        ... ])
        [CalledEvent(DEL, Interval(1:0-20), group=0, path=0, resolved=True, p=0.9)]
    """
    merged = []
    types = [t for t in EVENT_TYPE.values() if any([e.event_type == t for e in events])]
    for event_type in types:
        typed_events = sorted([e for e in events if e.event_type == event_type], key=lambda e: e.interval.key())
        run: List[CalledEvent] = []
        for event in typed_events:
            if not run:
                run.append(event)
                continue
            previous = run[-1]
            if (
                previous.interval.contig == event.interval.contig
                and previous.interval.end == event.interval.start
                and previous.probability == event.probability
            ):
                run.append(event)
            elif event.interval != previous.interval:
                merged.append(_merge_run(run))
                run = [event]
        if run:
            merged.append(_merge_run(run))
    return merged

"""
bounded breadth-first enumeration of the haplotype paths through a breakpoint graph

A haplotype starts at the first reference node moving forward and ends at the last reference node moving
forward. Reference edges may be traversed in either direction. A breakpoint edge is entered at node_a
moving in the direction given by strand_a and left at node_b moving in the direction given by strand_b,
or traversed the opposite way with both directions flipped.
"""
from collections import deque
from typing import Optional

from ..constants import SearchOutcome
from ..util import logger
from .base import GraphPath, SVGraph


def _adjacency(graph: SVGraph):
    """
    map each (node, forward) state to the (edge, next node, next forward) steps leaving it
    """
    steps = {}
    for edge in graph.edges:
        if edge.reference:
            steps.setdefault((edge.node_a, True), []).append((edge, edge.node_b, True))
            steps.setdefault((edge.node_b, False), []).append((edge.invert(), edge.node_a, False))
        else:
            steps.setdefault((edge.node_a, edge.strand_a), []).append((edge, edge.node_b, edge.strand_b))
            steps.setdefault((edge.node_b, not edge.strand_b), []).append((edge, edge.node_a, not edge.strand_a))
    return steps


def enumerate_haplotypes(
    graph: SVGraph,
    max_path_length_factor: float,
    max_edge_visits: int,
    max_queue_size: int,
    max_breakpoints_per_haplotype: Optional[int] = None,
) -> SearchOutcome:
    """
    find the distinct haplotype paths through the graph

    Args:
        graph: the graph to search
        max_path_length_factor: paths may cover at most this multiple of the total reference length
        max_edge_visits: the maximum number of times a path may use any single edge
        max_queue_size: abandon the search when the number of partial paths exceeds this
        max_breakpoints_per_haplotype: the maximum number of breakpoint edges a path may use (None for no limit)

    Returns:
        SearchOutcome: success holding the list of GraphPath or too_large holding the queue size
    """
    reference_edges = graph.reference_edges
    if not reference_edges:
        return SearchOutcome.success([])

    start = (reference_edges[0].node_a, True)
    end = (reference_edges[-1].node_b, True)
    max_length = max_path_length_factor * sum([e.interval.length() for e in reference_edges])
    steps = _adjacency(graph)

    paths = []
    seen = set()
    # partial path, visits per edge index, breakpoints used, reference length covered
    queue = deque([(start, (), {}, 0, 0)])

    while queue:
        if len(queue) > max_queue_size:
            logger.debug(f'haplotype search abandoned with {len(queue)} partial paths queued')
            return SearchOutcome.too_large(len(queue))
        state, path, visits, breakpoints, length = queue.popleft()
        if state == end:
            key = tuple(edge.key() for edge in path)
            if key not in seen:
                seen.add(key)
                paths.append(GraphPath(path))

        for edge, node, forward in steps.get(state, []):
            if visits.get(edge.index, 0) >= max_edge_visits:
                continue
            next_breakpoints = breakpoints
            next_length = length
            if edge.reference:
                next_length += edge.interval.length()
                if next_length > max_length:
                    continue
            else:
                next_breakpoints += 1
                if max_breakpoints_per_haplotype is not None and next_breakpoints > max_breakpoints_per_haplotype:
                    continue
            next_visits = dict(visits)
            next_visits[edge.index] = visits.get(edge.index, 0) + 1
            queue.append(((node, forward), path + (edge,), next_visits, next_breakpoints, next_length))

    logger.debug(f'found {len(paths)} haplotypes through {graph}')
    return SearchOutcome.success(paths)

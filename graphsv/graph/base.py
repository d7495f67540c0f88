import json
from typing import Dict, List

import numpy as np

from ..error import InvalidGraphError
from ..interval import Interval
from ..util import logger


class SVGraphNode:
    def __init__(self, contig, position):
        self.contig = str(contig)
        self.position = int(position)

    def key(self):
        return (self.contig, self.position)

    def __eq__(self, other):
        if not isinstance(other, SVGraphNode):
            return NotImplemented
        return self.key() == other.key()

    def __hash__(self):
        return hash(self.key())

    def __repr__(self):
        return '{}({}:{})'.format(self.__class__.__name__, self.contig, self.position)


class EdgePrior:
    """
    prior probability of the number of times a breakpoint edge is visited by a single haplotype

    Example:
        >>> prior = EdgePrior([-0.1, -2.3])
        >>> prior.log_prior(1)
        -2.3
        >>> prior.log_prior(2)
        -inf
    """

    def __init__(self, log_priors):
        self.log_priors = np.asarray(log_priors, dtype=float)

    def log_prior(self, count):
        if count < 0 or count >= self.log_priors.shape[0]:
            return float('-inf')
        return float(self.log_priors[count])

    def __len__(self):
        return self.log_priors.shape[0]

    def __repr__(self):
        return '{}({})'.format(self.__class__.__name__, list(self.log_priors))


class SVGraphEdge:
    """
    a reference segment or a candidate breakpoint junction between two graph nodes

    Attributes:
        index (int): position of the edge in the edge list of its graph
        node_a (int): index of the first node
        node_b (int): index of the second node
        reference (bool): True for segments of the reference genome
        inverted (bool): True when a reference edge is traversed right to left
        strand_a (bool): breakpoint edges only, True if the junction is entered moving forward at node_a
        strand_b (bool): breakpoint edges only, True if the junction is left moving forward at node_b
        interval (Interval): the genomic interval of the edge
        footprint (List[Interval]): the intervals the edge touches (two for edges joining contigs)
        prior (EdgePrior): breakpoint edges only, the prior over visit counts
    """

    def __init__(
        self,
        index,
        node_a,
        node_b,
        interval,
        reference=False,
        inverted=False,
        strand_a=True,
        strand_b=True,
        prior=None,
        footprint=None,
    ):
        self.index = index
        self.node_a = node_a
        self.node_b = node_b
        self.interval = interval
        self.reference = reference
        self.inverted = inverted
        self.strand_a = strand_a
        self.strand_b = strand_b
        self.prior = prior
        self.footprint = footprint if footprint is not None else [interval]

    def log_prior(self, count):
        if self.prior is None:
            return 0
        return self.prior.log_prior(count)

    def invert(self):
        """
        returns a copy of the edge traversed in the opposite direction
        """
        return SVGraphEdge(
            self.index,
            self.node_a,
            self.node_b,
            self.interval,
            reference=self.reference,
            inverted=not self.inverted,
            strand_a=self.strand_a,
            strand_b=self.strand_b,
            prior=self.prior,
            footprint=self.footprint,
        )

    def key(self):
        return (self.index, self.inverted)

    def __eq__(self, other):
        if not isinstance(other, SVGraphEdge):
            return NotImplemented
        return self.key() == other.key()

    def __hash__(self):
        return hash(self.key())

    def __str__(self):
        return '~{}'.format(self.index) if self.inverted else str(self.index)

    def __repr__(self):
        return '{}({}, {}->{}, {}{})'.format(
            self.__class__.__name__,
            self.index,
            self.node_a,
            self.node_b,
            'ref' if self.reference else 'bp',
            ', inverted' if self.inverted else '',
        )


class GraphPath(tuple):
    """
    immutable ordered sequence of edges making up a single haplotype. Edges may repeat
    """

    def visit_counts(self, num_edges):
        """
        the number of times each edge index is visited, inverted traversals included

        Example:
            >>> e0 = SVGraphEdge(0, 0, 1, Interval('1', 0, 10), reference=True)
            >>> GraphPath([e0, e0.invert()]).visit_counts(2)
            array([2, 0])
        """
        counts = np.zeros(num_edges, dtype=np.int64)
        for edge in self:
            counts[edge.index] += 1
        return counts

    def key(self):
        return tuple(edge.key() for edge in self)

    def __str__(self):
        return ','.join([str(edge) for edge in self])


class SVGraph:
    """
    breakpoint graph. Nodes are positions on the genome and edges are either reference segments or
    breakpoint junctions. Reference edges, in index order, form a contiguous path along each contig
    """

    def __init__(self):
        self.nodes: List[SVGraphNode] = []
        self.edges: List[SVGraphEdge] = []
        self._node_index: Dict[tuple, int] = {}

    def add_node(self, contig, position):
        """
        add a node to the graph (or return the existing node with the same position)

        Returns:
            int: the index of the node
        """
        node = SVGraphNode(contig, position)
        if node.key() in self._node_index:
            return self._node_index[node.key()]
        self.nodes.append(node)
        self._node_index[node.key()] = len(self.nodes) - 1
        return len(self.nodes) - 1

    def add_edge(self, node_a, node_b, reference=False, strand_a=True, strand_b=True, prior=None):
        """
        add an edge between two existing nodes

        Returns:
            SVGraphEdge: the new edge

        Raises:
            InvalidGraphError: the nodes do not exist or a reference edge does not run forward along a single contig
        """
        for node in [node_a, node_b]:
            if not isinstance(node, (int, np.integer)) or node < 0 or node >= len(self.nodes):
                raise InvalidGraphError('edge refers to a node which does not exist', node)
        first = self.nodes[node_a]
        second = self.nodes[node_b]
        if reference:
            if first.contig != second.contig:
                raise InvalidGraphError('reference edges cannot span contigs', first, second)
            if first.position >= second.position:
                raise InvalidGraphError('reference edges must run from the lower to the higher position', first, second)
            interval = Interval(first.contig, first.position, second.position)
            footprint = [interval]
            prior = None
        elif first.contig == second.contig:
            start = min(first.position, second.position)
            end = max(first.position, second.position, start + 1)
            interval = Interval(first.contig, start, end)
            footprint = [interval]
        else:
            interval = Interval(first.contig, first.position, first.position + 1)
            footprint = [interval, Interval(second.contig, second.position, second.position + 1)]
        if prior is not None and not isinstance(prior, EdgePrior):
            prior = EdgePrior(prior)
        edge = SVGraphEdge(
            len(self.edges),
            node_a,
            node_b,
            interval,
            reference=reference,
            strand_a=strand_a,
            strand_b=strand_b,
            prior=prior,
            footprint=footprint,
        )
        self.edges.append(edge)
        return edge

    @property
    def reference_edges(self) -> List[SVGraphEdge]:
        return [e for e in self.edges if e.reference]

    @property
    def breakpoint_edges(self) -> List[SVGraphEdge]:
        return [e for e in self.edges if not e.reference]

    def contig_intervals(self) -> List[Interval]:
        """
        the extent of the graph on each contig, sorted by contig and position
        """
        return contig_extent(self.edges)

    def validate(self):
        """
        checks that reference edges form a contiguous path per contig

        Raises:
            InvalidGraphError: if the reference path has gaps or runs backwards
        """
        last_by_contig: Dict[str, SVGraphEdge] = {}
        for edge in self.reference_edges:
            contig = self.nodes[edge.node_a].contig
            prev = last_by_contig.get(contig)
            if prev is not None and self.nodes[prev.node_b].position != self.nodes[edge.node_a].position:
                raise InvalidGraphError(
                    'reference edges must form a contiguous path along each contig', prev.interval, edge.interval
                )
            last_by_contig[contig] = edge
        return self

    def subgraph(self, edges) -> 'SVGraph':
        """
        new graph holding the given edges (in index order) and only the nodes they use. Indices are reassigned
        """
        graph = SVGraph()
        for edge in sorted(edges, key=lambda e: e.index):
            first = self.nodes[edge.node_a]
            second = self.nodes[edge.node_b]
            graph.add_edge(
                graph.add_node(first.contig, first.position),
                graph.add_node(second.contig, second.position),
                reference=edge.reference,
                strand_a=edge.strand_a,
                strand_b=edge.strand_b,
                prior=edge.prior,
            )
        return graph

    @classmethod
    def from_dict(cls, data) -> 'SVGraph':
        """
        build a graph from its dictionary (JSON) representation

        Example:
            >>> SVGraph.from_dict({
            ...     'nodes': [{'contig': '1', 'position': 0}, {'contig': '1', 'position': 100}],
            ...     'edges': [{'node_a': 0, 'node_b': 1, 'reference': True}]
            ... })
        SVGraph(nodes=2, edges=1, reference_edges=1)

        Raises:
            InvalidGraphError: the graph is malformed
        """
        graph = cls()
        try:
            for node in data['nodes']:
                graph.add_node(node['contig'], node['position'])
            if len(graph.nodes) != len(data['nodes']):
                raise InvalidGraphError('graph nodes must be unique')
            for edge in data['edges']:
                graph.add_edge(
                    edge['node_a'],
                    edge['node_b'],
                    reference=bool(edge.get('reference', False)),
                    strand_a=bool(edge.get('strand_a', True)),
                    strand_b=bool(edge.get('strand_b', True)),
                    prior=edge.get('log_prior'),
                )
        except KeyError as err:
            raise InvalidGraphError('graph is missing a required field', str(err))
        return graph.validate()

    def to_dict(self):
        edges = []
        for edge in self.edges:
            row = {'node_a': edge.node_a, 'node_b': edge.node_b, 'reference': edge.reference}
            if not edge.reference:
                row.update({'strand_a': edge.strand_a, 'strand_b': edge.strand_b})
                if edge.prior is not None:
                    row['log_prior'] = list(edge.prior.log_priors)
            edges.append(row)
        return {'nodes': [{'contig': n.contig, 'position': n.position} for n in self.nodes], 'edges': edges}

    def __repr__(self):
        return '{}(nodes={}, edges={}, reference_edges={})'.format(
            self.__class__.__name__, len(self.nodes), len(self.edges), len(self.reference_edges)
        )


def count_edges_by_type(graph: SVGraph):
    reference = len(graph.reference_edges)
    return {'reference': reference, 'breakpoint': len(graph.edges) - reference}


def contig_extent(edges) -> List[Interval]:
    """
    the smallest interval on each contig covering the footprints of all the given edges
    """
    extent: Dict[str, Interval] = {}
    for edge in edges:
        for itvl in edge.footprint:
            if itvl.contig in extent:
                extent[itvl.contig] = extent[itvl.contig].union(itvl)
            else:
                extent[itvl.contig] = itvl
    return sorted(extent.values())


def read_graph_file(filename) -> SVGraph:
    """
    read a breakpoint graph from a JSON file

    Raises:
        InvalidGraphError: the graph is malformed
    """
    logger.info(f'reading: {filename}')
    with open(filename, 'r') as fh:
        graph = SVGraph.from_dict(json.load(fh))
    logger.info(f'loaded {graph}')
    return graph

import glob
import math
import os

from graphsv.constants import SearchOutcome
from graphsv.copy_number import CopyNumberIndex, CopyNumberInterval
from graphsv.graph.base import GraphPath, SVGraph
from graphsv.interval import Interval

DATA_DIR = os.path.join(os.path.dirname(__file__), 'data')


def get_data(*paths):
    return os.path.join(DATA_DIR, *paths)


def glob_exists(*pos, strict=False, n=1):
    globexpr = os.path.join(*pos)
    file_list = glob.glob(globexpr)
    if strict and len(file_list) == n:
        return file_list[0] if len(file_list) == 1 else file_list
    elif not strict and len(file_list) > 0:
        return file_list
    return False


def linear_graph(contig, *positions):
    """
    graph with a node at each position and a reference edge between each consecutive pair of nodes
    """
    graph = SVGraph()
    nodes = [graph.add_node(contig, p) for p in positions]
    for node_a, node_b in zip(nodes, nodes[1:]):
        graph.add_edge(node_a, node_b, reference=True)
    return graph, nodes


def log_posteriors(*probabilities):
    return [math.log(p) if p > 0 else float('-inf') for p in probabilities]


def copy_number_index(*rows):
    """
    rows of (contig, start, end, [probability of each state])
    """
    return CopyNumberIndex(
        [CopyNumberInterval(Interval(contig, start, end), log_posteriors(*probs)) for contig, start, end, probs in rows]
    )


def stub_enumerator(*paths):
    def enumerator(graph, *pos):
        return SearchOutcome.success([GraphPath(p) for p in paths])

    return enumerator


def too_large_enumerator(graph, *pos):
    return SearchOutcome.too_large(10 ** 12)

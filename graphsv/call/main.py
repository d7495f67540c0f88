import os
import time

from shortuuid import uuid

from ..constants import COLUMNS
from ..copy_number import load_copy_number_index
from ..graph.base import read_graph_file
from ..util import generate_complete_stamp, logger, mkdirp, output_tabbed_file, write_bed_file
from .constants import DEFAULTS
from .solve import PartitionSolver

GENOTYPES_FILENAME = 'genotypes.tab'
EVENTS_FILENAME = 'events.tab'
EVENTS_BED_FILENAME = 'events.bed'

GENOTYPE_HEADER = {
    COLUMNS.group_id,
    COLUMNS.genotype_id,
    COLUMNS.haplotypes,
    COLUMNS.depth_log_likelihood,
    COLUMNS.depth_probability,
    COLUMNS.evidence_probability,
    COLUMNS.probability,
    COLUMNS.batch_id,
}
EVENT_HEADER = {
    COLUMNS.event_type,
    COLUMNS.contig,
    COLUMNS.start,
    COLUMNS.end,
    COLUMNS.group_id,
    COLUMNS.path_id,
    COLUMNS.resolved,
    COLUMNS.probability,
    COLUMNS.batch_id,
}


def main(
    graph,
    copy_number,
    output,
    batch_id=None,
    start_time=None,
    partitioner=None,
    enumerator=None,
    **kwargs,
):
    """
    Args:
        graph (str): path to the breakpoint graph (JSON)
        copy_number (:class:`List` of :class:`str`): paths to the copy number posterior files
        output (str): path to the output directory
        batch_id (str): identifier added to every output row (generated when not given)
        start_time (int): start time of the run, recorded in the complete stamp
        partitioner: replaces the default graph partitioner
        enumerator: replaces the default haplotype enumerator
        **kwargs: any of the call DEFAULTS

    Returns:
        tuple: the reported genotypes and the called events
    """
    start_time = int(time.time()) if start_time is None else start_time
    batch_id = 'batch-' + str(uuid()) if batch_id is None else batch_id
    settings = {k: v for k, v in kwargs.items() if k in DEFAULTS}

    mkdirp(output)
    sv_graph = read_graph_file(graph)
    copy_number_index = load_copy_number_index(*copy_number)

    solver_args = {}
    if partitioner is not None:
        solver_args['partitioner'] = partitioner
    if enumerator is not None:
        solver_args['enumerator'] = enumerator
    solver = PartitionSolver(sv_graph, copy_number_index, **solver_args, **settings)
    genotypes, events = solver.solve()

    genotype_rows = []
    for genotype in genotypes:
        row = genotype.flatten()
        row[COLUMNS.batch_id] = batch_id
        genotype_rows.append(row)
    event_rows = []
    for event in events:
        row = event.flatten()
        row[COLUMNS.batch_id] = batch_id
        event_rows.append(row)

    output_tabbed_file(genotype_rows, os.path.join(output, GENOTYPES_FILENAME), header=GENOTYPE_HEADER)
    output_tabbed_file(event_rows, os.path.join(output, EVENTS_FILENAME), header=EVENT_HEADER)
    write_bed_file(os.path.join(output, EVENTS_BED_FILENAME), [e.to_bed() for e in events])
    unresolved = len([e for e in events if not e.resolved])
    if unresolved:
        logger.warning(f'{unresolved} regions could not be resolved')
    generate_complete_stamp(
        output, start_time=start_time, extra={'batch_id': batch_id, 'events': len(events), 'genotypes': len(genotypes)}
    )
    return genotypes, events

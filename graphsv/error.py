class InvalidGraphError(Exception):
    """
    raised when a breakpoint graph is malformed

    for example an edge refers to a node that does not exist, or the reference edges
    do not form a contiguous path along a contig
    """
    pass


class InconsistentCopyNumberStatesError(ValueError):
    """
    raised when copy number posteriors overlapping the same graph do not have the same number of states
    """
    pass

"""
copy number posteriors over genomic intervals and the read-only index used to query them
"""
import re
from typing import Dict, List

import numpy as np
import pandas as pd

from .error import InconsistentCopyNumberStatesError
from .interval import Interval
from .util import logger

STATE_COLUMN_PATTERN = re.compile(r'^cn_(\d+)$')


class CopyNumberInterval:
    """
    an interval of the genome together with the log posterior probability of each copy number state
    """

    def __init__(self, interval: Interval, log_posteriors):
        if interval.length() <= 0:
            raise ValueError('copy number intervals cannot be empty', interval)
        self.interval = interval
        self.log_posteriors = np.asarray(log_posteriors, dtype=float)
        if self.log_posteriors.ndim != 1 or not self.log_posteriors.size:
            raise ValueError('copy number posteriors must be a non-empty vector', log_posteriors)

    @property
    def num_states(self):
        return self.log_posteriors.shape[0]

    def __repr__(self):
        return '{}({}, states={})'.format(self.__class__.__name__, self.interval, self.num_states)


class CopyNumberIndex:
    """
    read-only index of copy number posteriors supporting overlap queries

    intervals are stored per contig as sorted numpy arrays of start and end positions
    """

    def __init__(self, intervals):
        self._by_contig: Dict[str, List[CopyNumberInterval]] = {}
        for cni in intervals:
            self._by_contig.setdefault(cni.interval.contig, []).append(cni)
        self._starts = {}
        self._ends = {}
        self._max_length = {}
        for contig, cnis in self._by_contig.items():
            cnis.sort(key=lambda c: (c.interval.start, c.interval.end))
            self._starts[contig] = np.array([c.interval.start for c in cnis], dtype=np.int64)
            self._ends[contig] = np.array([c.interval.end for c in cnis], dtype=np.int64)
            self._max_length[contig] = int((self._ends[contig] - self._starts[contig]).max())

    def __len__(self):
        return sum([len(v) for v in self._by_contig.values()])

    def overlappers(self, interval: Interval) -> List[CopyNumberInterval]:
        """
        all copy number intervals which overlap the query interval, ordered by position

        Example:
            >>> index = CopyNumberIndex([CopyNumberInterval(Interval('1', 0, 100), [0, -1])])
            >>> index.overlappers(Interval('1', 50, 60))
            [CopyNumberInterval(Interval(1:0-100), states=2)]
        """
        if interval.contig not in self._by_contig:
            return []
        starts = self._starts[interval.contig]
        ends = self._ends[interval.contig]
        # nothing starting before query.start - max_length can reach the query
        first = np.searchsorted(starts, interval.start - self._max_length[interval.contig], side='left')
        last = np.searchsorted(starts, interval.end, side='left')
        candidates = np.arange(first, last)
        hits = candidates[ends[first:last] > interval.start]
        cnis = self._by_contig[interval.contig]
        return [cnis[i] for i in hits]


def read_copy_number_file(filename) -> List[CopyNumberInterval]:
    """
    read a tab-delimited file of copy number posteriors

    the file must contain the columns contig, start and end followed by one cn_<state> column per copy
    number state (cn_0, cn_1, ...) holding the log posterior of that state

    Raises:
        KeyError: a required column is missing
        InconsistentCopyNumberStatesError: the state columns do not form a contiguous range from 0
    """
    logger.info(f'reading: {filename}')
    df = pd.read_csv(filename, sep='\t', dtype={'contig': str}, comment='#')
    for col in ['contig', 'start', 'end']:
        if col not in df.columns:
            raise KeyError('missing required column', col, filename)
    states = {}
    for col in df.columns:
        match = STATE_COLUMN_PATTERN.match(col)
        if match:
            states[int(match.group(1))] = col
    if not states or sorted(states) != list(range(len(states))):
        raise InconsistentCopyNumberStatesError(
            'copy number state columns must be cn_0 ... cn_N', sorted(states.values()), filename
        )
    state_columns = [states[i] for i in range(len(states))]
    posteriors = df[state_columns].to_numpy(dtype=float)
    result = []
    for row, log_posteriors in zip(df[['contig', 'start', 'end']].itertuples(index=False), posteriors):
        result.append(CopyNumberInterval(Interval(row.contig, row.start, row.end), log_posteriors))
    logger.info(f'loaded {len(result)} copy number intervals with {len(state_columns)} states')
    return result


def load_copy_number_index(*filenames) -> CopyNumberIndex:
    intervals = []
    for filename in filenames:
        intervals.extend(read_copy_number_file(filename))
    return CopyNumberIndex(intervals)

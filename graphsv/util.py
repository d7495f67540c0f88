import errno
import logging
import os
import time
from glob import glob
from typing import Dict, Iterable, List, Optional

import pandas as pd
from braceexpand import braceexpand

from .constants import COMPLETE_STAMP, sort_columns

logger = logging.getLogger('graphsv')


def bash_expands(*expressions) -> List[str]:
    """
    expand a file glob expression, allowing bash-style brackets.

    Returns:
        list: a list of files

    Example:
        >>> bash_expands('./{test,doc}/*py')
        [...]
    """
    result = []
    for expression in expressions:
        eresult = []
        for name in braceexpand(expression):
            for fname in glob(name):
                eresult.append(fname)
        if not eresult:
            raise FileNotFoundError('The expression does not match any files', expression)
        result.extend(eresult)
    return [os.path.abspath(f) for f in result]


def log_arguments(args):
    """
    output the arguments to the console

    Args:
        args (Namespace): the namespace to print arguments for
    """
    logger.info('arguments')

    indent = ' '

    for arg, val in sorted(args.__dict__.items()):
        if isinstance(val, list):
            if len(val) <= 1:
                logger.info(f'{indent}{arg} = {val}')
                continue
            logger.info(f'{indent}{arg} = [')
            for v in val:
                logger.info(f'{indent * 2}{repr(v)}')
            logger.info(f'{indent}]')
        elif isinstance(val, (str, int, float, bool, tuple)) or val is None:
            logger.info(f'{indent}{arg} = {repr(val)}')
        else:
            logger.info(f'{indent}{arg} = {object.__repr__(val)}')


def mkdirp(dirname):
    """
    Make a directory or path of directories. Suppresses the error that is normally raised when the directory
    already exists
    """
    logger.info(f"creating output directory: '{dirname}'")
    try:
        os.makedirs(dirname)
    except OSError as exc:
        if exc.errno == errno.EEXIST and os.path.isdir(dirname):
            pass
        else:
            raise exc
    return dirname


def output_tabbed_file(rows: Iterable, filename: str, header=None):
    """
    write flattened rows (dicts or objects with a flatten method) to a tab-delimited file
    """
    if header is None:
        custom_header = False
        header = set()
    else:
        custom_header = True
    records = []
    for row in rows:
        if not isinstance(row, dict):
            row = row.flatten()
        records.append(row)
        if not custom_header:
            header.update(row.keys())
    header = sort_columns(header)
    logger.info(f'writing: {filename}')
    df = pd.DataFrame.from_records(records, columns=header)
    df = df.fillna('None')
    df.to_csv(filename, columns=header, index=False, sep='\t')


def write_bed_file(filename, bed_rows):
    logger.info(f'writing: {filename}')
    with open(filename, 'w') as fh:
        for bed in bed_rows:
            fh.write('\t'.join([str(c) for c in bed]) + '\n')


def generate_complete_stamp(output_dir: str, start_time: Optional[int] = None, extra: Optional[Dict] = None) -> str:
    """
    writes a complete stamp, optionally including the run time if start_time is given

    Args:
        output_dir: path to the output dir the stamp should be written in
        start_time: the start time
        extra: additional key/value pairs to record in the stamp (ex. counts of the outputs)

    Return:
        path to the complete stamp

    Example:
        >>> generate_complete_stamp('some_output_dir')
        'some_output_dir/GRAPHSV.COMPLETE'
    """
    stamp = os.path.join(output_dir, COMPLETE_STAMP)
    logger.info(f'complete: {stamp}')
    with open(stamp, 'w') as fh:
        if start_time is not None:
            duration = int(time.time()) - start_time
            hours = duration - duration % 3600
            minutes = duration - hours - (duration - hours) % 60
            seconds = duration - hours - minutes
            fh.write(
                'run time (hh/mm/ss): {}:{:02d}:{:02d}\n'.format(hours // 3600, minutes // 60, seconds)
            )
            fh.write('run time (s): {}\n'.format(duration))
        for key, value in sorted((extra or {}).items()):
            fh.write(f'{key}: {value}\n')
    return stamp

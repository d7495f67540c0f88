#!python
import argparse
import logging
import platform
import sys
import time
from typing import List, Optional

from . import __version__
from . import util as _util
from .call import main as call_main
from .call.constants import DEFAULTS as CALL_DEFAULTS
from .config import CustomHelpFormatter, augment_parser
from .constants import EXIT_OK, PROGNAME, SUBCOMMAND


def create_parser(argv):
    parser = argparse.ArgumentParser(prog=PROGNAME, formatter_class=CustomHelpFormatter)
    parser.add_argument(
        '-v',
        '--version',
        action='version',
        version='%(prog)s version ' + __version__,
        help='Outputs the version number',
    )
    subp = parser.add_subparsers(dest='command', help='specifies which subprogram to use')
    subp.required = True
    required = {}  # hold required argument group by subparser command name
    optional = {}  # hold optional argument group by subparser command name
    for command in SUBCOMMAND.values():
        subparser = subp.add_parser(command, formatter_class=CustomHelpFormatter, add_help=False)
        required[command] = subparser.add_argument_group('required arguments')
        optional[command] = subparser.add_argument_group('optional arguments')
        optional[command].add_argument('-h', '--help', action='help', help='show this help message and exit')
        optional[command].add_argument(
            '-v',
            '--version',
            action='version',
            version='%(prog)s version ' + __version__,
            help='Outputs the version number',
        )
        optional[command].add_argument('--log', help='redirect logging to a log file', default=None)
        optional[command].add_argument(
            '--log_level', help='level of logging to output', choices=['INFO', 'DEBUG'], default='INFO'
        )
        required[command].add_argument('-o', '--output', help='path to the output directory', required=True)

    required[SUBCOMMAND.CALL].add_argument(
        '-g', '--graph', help='path to the breakpoint graph (JSON)', required=True, metavar='FILEPATH'
    )
    required[SUBCOMMAND.CALL].add_argument(
        '-n',
        '--copy_number',
        nargs='+',
        help='path to the copy number posterior files',
        required=True,
        metavar='FILEPATH',
    )
    optional[SUBCOMMAND.CALL].add_argument(
        '--batch_id', default=None, help='identifier added to the output rows (generated when not given)'
    )
    augment_parser(CALL_DEFAULTS, optional[SUBCOMMAND.CALL])

    return parser, parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """
    sets up the parser and checks the validity of command line args
    then redirects into the subcommand main functions

    Args:
        argv: List of arguments, defaults to command line arguments
    """
    if argv is None:  # need to do at run time or patching will not behave as expected
        argv = sys.argv[1:]
    start_time = int(time.time())
    parser, args = create_parser(argv)

    log_conf = {
        'format': '{asctime} [{levelname}] {message}',
        'style': '{',
        'level': args.log_level,
    }

    original_logging_handlers = logging.root.handlers[:]
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    if args.log:
        log_conf['filename'] = args.log
    logging.basicConfig(**log_conf)

    _util.logger.info(f'{PROGNAME}: {__version__}')
    _util.logger.info(f'hostname: {platform.node()}')
    _util.log_arguments(args)

    try:
        try:
            args.graph = _util.bash_expands(args.graph)[0]
            args.copy_number = _util.bash_expands(*args.copy_number)
        except FileNotFoundError as err:
            parser.error('input file(s) for {} do not exist: {}'.format(args.command, err.args[1:]))

        if args.command == SUBCOMMAND.CALL:
            call_main.main(
                graph=args.graph,
                copy_number=args.copy_number,
                output=args.output,
                batch_id=args.batch_id,
                start_time=start_time,
                **{k: getattr(args, k) for k in CALL_DEFAULTS.keys()},
            )

        duration = int(time.time()) - start_time
        hours = duration - duration % 3600
        minutes = duration - hours - (duration - hours) % 60
        seconds = duration - hours - minutes
        _util.logger.info(
            'run time (hh/mm/ss): {}:{:02d}:{:02d}'.format(hours // 3600, minutes // 60, seconds)
        )
        _util.logger.info(f'run time (s): {duration}')
    finally:
        for handler in logging.root.handlers[:]:
            logging.root.removeHandler(handler)
        for handler in original_logging_handlers:
            logging.root.addHandler(handler)
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())

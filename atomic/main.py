"""Runs the Atomic interpreter on a source file. Also uses the error handling context manager. Called from the atomic
console script.
"""

import argparse
import sys

from atomic.lang.error import ErrorHandler
from atomic.lang.session import Session


def create_arg_parser():
    parser = argparse.ArgumentParser(prog="atomic", description="Atomic language interpreter")
    parser.add_argument("file", help="Atomic source file to interpret and run", nargs="?")
    parser.add_argument("-q", "--quiet", action="store_true", help="don't dump tokens and syntax tree before running")
    return parser


def main(argv=None):
    """Runs atomic interpreter. Called from atomic console script."""
    assert sys.version_info >= (3, 7), "atomic cannot be run with python < 3.7"

    with ErrorHandler() as error_handler:
        parser = create_arg_parser()
        args = parser.parse_args(argv)

        if args.file is None:
            parser.print_usage(sys.stderr)
            return

        Session(error_handler, args.file, debug=not args.quiet).run()

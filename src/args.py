"""Argument parsing functionality for spmresolve."""

import argparse


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="spmresolve",
        description=(
            "spmresolve - resolve an import specifier against an spm_modules layout"
        ),
        add_help=True,
    )

    parser.add_argument("specifier",
                        help="Import specifier, e.g. 'jquery' or 'jquery/dist/jquery.js'",
                        action="store", type=str)
    parser.add_argument("-f", "--from",
                        dest="REQUESTER",
                        help="Path of the file issuing the import",
                        action="store", type=str,
                        required=True)
    parser.add_argument("-r", "--root",
                        dest="ROOT",
                        help="Project root directory (default: current directory)",
                        action="store", type=str,
                        default=".")
    parser.add_argument("-q", "--query",
                        dest="QUERY",
                        help="Opaque query string forwarded into the result",
                        action="store", type=str,
                        default="")
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to a YAML config file",
                        action="store", type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: $SPMRESOLVE_LOG_LEVEL, else INFO)",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)

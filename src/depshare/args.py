"""Argument parsing functionality for depshare."""

import argparse

from depshare import __version__
from depshare.constants import Constants


def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="depshare",
        description=(
            "depshare - redirect shared dependency requests to a single compatible copy"
        ),
        add_help=True,
    )

    parser.add_argument("--version",
                        action="version",
                        version=f"%(prog)s {__version__}")
    parser.add_argument("--host",
                        dest="PROXY_HOST",
                        help=f"Address to bind (default: {Constants.DEFAULT_HOST})",
                        action="store", type=str)
    parser.add_argument("-p", "--port",
                        dest="PROXY_PORT",
                        help=f"Port to listen on (default: {Constants.DEFAULT_PORT})",
                        action="store", type=int)
    parser.add_argument("--prefix",
                        dest="PROXY_PREFIX",
                        help=f"Path prefix of dependency requests (default: {Constants.DEPS_PREFIX})",
                        action="store", type=str)
    parser.add_argument("-u", "--upstream",
                        dest="PROXY_UPSTREAM",
                        help="Origin to pass non-dependency requests through to",
                        action="store", type=str)
    parser.add_argument("--redirect-status",
                        dest="PROXY_REDIRECT_STATUS",
                        help=f"HTTP status used for redirects (default: {Constants.DEFAULT_REDIRECT_STATUS})",
                        action="store", type=int,
                        choices=Constants.REDIRECT_STATUSES)
    parser.add_argument("--timeout",
                        dest="PROXY_TIMEOUT",
                        help=f"Upstream timeout in seconds (default: {Constants.REQUEST_TIMEOUT})",
                        action="store", type=int)
    parser.add_argument("--allow-external",
                        dest="ALLOW_EXTERNAL",
                        help="Allow binding to a non-loopback address",
                        action="store_true")

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: $DEPSHARE_LOG_LEVEL, then INFO)",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)

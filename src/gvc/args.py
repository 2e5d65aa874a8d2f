"""Argument parsing functionality for gvc."""

import argparse

from gvc import __version__


def build_parser():
    """Builds the argument parser with its update/check/add/list subcommands."""
    parser = argparse.ArgumentParser(
        prog="gvc",
        description=(
            "gvc - Gradle version catalog updater"
        ),
        add_help=True,
    )

    parser.add_argument("-p", "--path",
                        dest="PROJECT_PATH",
                        help="Path to the Gradle project (default: current directory)",
                        action="store",
                        type=str,
                        default=".")
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("--version",
                        action="version",
                        version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="COMMAND", metavar="COMMAND")
    subparsers.required = True

    update = subparsers.add_parser("update",
                                   help="Update dependencies in the version catalog")
    update.add_argument("-i", "--interactive",
                        dest="INTERACTIVE",
                        help="Confirm each update, or pick versions for a filtered update",
                        action="store_true")
    update.add_argument("--stable-only",
                        dest="STABLE_ONLY",
                        help="Only consider stable versions",
                        action="store_true",
                        default=None)
    update.add_argument("--filter",
                        dest="FILTER",
                        help="Glob pattern selecting a single dependency to update",
                        action="store",
                        type=str)

    check = subparsers.add_parser("check",
                                  help="Report available updates without changing anything")
    check.add_argument("--include-unstable",
                       dest="INCLUDE_UNSTABLE",
                       help="Include alpha, beta, RC and other pre-release versions",
                       action="store_true")

    add = subparsers.add_parser("add",
                                help="Add a library or plugin to the version catalog")
    add.add_argument("COORDINATE",
                     help="group:artifact[:version] for a library, plugin.id[:version] with --plugin")
    kind = add.add_mutually_exclusive_group()
    kind.add_argument("--plugin",
                      dest="PLUGIN",
                      help="Add a plugin instead of a library",
                      action="store_true")
    kind.add_argument("--library",
                      dest="PLUGIN",
                      help="Add a library (default)",
                      action="store_false")
    add.set_defaults(PLUGIN=False)
    add.add_argument("--alias",
                     dest="ALIAS",
                     help="Entry name to use instead of the generated one",
                     action="store",
                     type=str)
    add.add_argument("--version-alias",
                     dest="VERSION_ALIAS",
                     help="[versions] key to use instead of the generated one",
                     action="store",
                     type=str)
    add.add_argument("--stable-only",
                     dest="STABLE_ONLY",
                     help="When no version is given, pick the newest stable one",
                     action="store_true",
                     default=None)

    subparsers.add_parser("list",
                          help="List the dependencies declared in the version catalog")

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)

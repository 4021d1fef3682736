#!/usr/bin/env python3

# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

"""Command line tool to start Contestmark servers."""

__copyright__ = "Copyright (C) 2023-2024 The Contestmark Project Developers"
__credits__ = "The Contestmark Project Developers"
__license__ = "AGPL-3.0-or-later"

import argparse
from pathlib import Path

from contestmark import __version__
from contestmark import Default_Port
from contestmark.server import confdir
from contestmark.server import theServer
from contestmark.server import (
    build_server_directories,
    create_server_config,
    check_server_directories,
    check_server_fully_configured,
)


server_instructions = f"""Overview of running the Contestmark server:

  0. Make a new directory and change into it.

  1. Run '%(prog)s init' - creates sub-directories and config files.

  2. Optionally, edit '{confdir}/serverDetails.toml', for example to
     use MySQL or to send email notifications.

  3. Now you can start the server with '%(prog)s launch'.  At first launch
     it prints the password of the "admin" account, who creates the
     other accounts.
"""


def initialise_server(basedir, *, port=None, name=None, db_name=None):
    """Build the directories and configuration of a new server.

    Args:
        basedir (str/pathlib.Path/None): where, default current directory.

    Keyword Args:
        port, name, db_name: see `create_server_config`.
    """
    basedir = Path(basedir) if basedir else Path(".")
    basedir.mkdir(parents=True, exist_ok=True)
    print("Build required directories")
    build_server_directories(basedir)
    print("Build server configuration")
    try:
        create_server_config(basedir / confdir, port=port, name=name, db_name=db_name)
    except FileExistsError as err:
        print(f"Skipping server config - {err}")
    print("Contestmark server initialised: now you can launch it")


def get_parser():
    parser = argparse.ArgumentParser(
        epilog="Use '%(prog)s <subcommand> -h' for detailed help.\n\n"
        + server_instructions,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s " + __version__
    )
    sub = parser.add_subparsers(
        dest="command", description="Perform various server-related tasks."
    )

    spI = sub.add_parser(
        "init",
        help="Initialise server",
        description="""
          Initialises a directory in preparation for starting a
          Contestmark server.  Creates sub-directories and config files.
        """,
    )
    spI.add_argument(
        "dir",
        nargs="?",
        help="The directory to use. If omitted, use the current directory.",
    )
    spI.add_argument(
        "--port",
        type=int,
        help=f"Use alternative port (defaults to {Default_Port} if omitted)",
    )
    spI.add_argument(
        "--server-name",
        metavar="NAME",
        type=str,
        help="""
            The server name such as "contest.example.com" or an IP address.
            Defaults to "localhost" if omitted, but you may, e.g., want to
            match your SSL certificate.
        """,
    )
    spI.add_argument(
        "--db-name",
        metavar="NAME",
        help="Use this MySQL database instead of a local SQLite file.",
    )

    spR = sub.add_parser(
        "launch", help="Start the server", description="Start the Contestmark server."
    )
    spR.add_argument(
        "dir",
        nargs="?",
        help="""The directory containing the filespace to be used by this server.
            If omitted the current directory will be used.""",
    )
    spR.add_argument(
        "--mastertoken",
        metavar="HEX",
        help="""A 32 hex-digit string used to encrypt tokens in the database.
            If you do not supply one then the server will create one.
            If you record the token somewhere you can hot-restart the server
            (i.e., restart the server without requiring users to log-off and
            log-in again).""",
    )
    spR.add_argument(
        "--logfile",
        help="""A filename to save the logs.  If its a bare filename it will
            be relative to DIR above, or you can specify a path relative to
            the current working directory.""",
    )
    spR.add_argument(
        "--no-logconsole",
        action="store_false",
        dest="logconsole",
        help="""By default the server echos the logs to stderr.  This disables
            that.  You can still see the logs in the logfile.""",
    )
    return parser


def main():
    parser = get_parser()
    args = parser.parse_args()

    if args.command == "init":
        initialise_server(
            args.dir, port=args.port, name=args.server_name, db_name=args.db_name
        )
    elif args.command == "launch":
        if args.dir is None:
            args.dir = Path(".")
        check_server_directories(args.dir)
        check_server_fully_configured(args.dir)
        theServer.launch(
            args.dir,
            master_token=args.mastertoken,
            logfile=args.logfile,
            logconsole=args.logconsole,
        )
    else:
        parser.print_help()


if __name__ == "__main__":
    main()

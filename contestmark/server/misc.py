# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

"""Misc utilities for the Contestmark Server"""

import logging
from pathlib import Path
import sys

from importlib import resources

if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib

import contestmark
from contestmark import Default_Port
from contestmark.server import specdir, confdir


server_dirs = (
    Path("."),
    specdir,
    confdir,
)


def build_server_directories(basedir=Path(".")):
    """Build some directories the server will need"""
    log = logging.getLogger("server")
    for d in server_dirs:
        log.debug("Making directory {}".format(d))
        (basedir / d).mkdir(exist_ok=True)


def check_server_directories(basedir=Path(".")):
    """Ensure some server directories exist"""

    for d in server_dirs:
        if not (basedir / d).is_dir():
            raise FileNotFoundError(
                "Required directory '{}' are not present. "
                "Have you run 'contestmark-server init'?".format(d)
            )


def check_server_fully_configured(basedir):
    if not (Path(basedir) / confdir / "serverDetails.toml").exists():
        raise FileNotFoundError(
            "Server configuration file not present. "
            "Have you run 'contestmark-server init'?"
        )


def create_server_config(dur=confdir, *, port=None, name=None, db_name=None):
    """Create a default server configuration file.

    args:
        dur (pathlib.Path): where to put the file.

    keyword args:
        port (int/None): port on which to run the server.
        name (str/None): the name of your server such as
            "contest.example.com" or an IP address.  Defaults to
            "localhost".
        db_name (str/None): the name of a MySQL database, omitted
            (so SQLite is used) if `None`.

    raises:
        FileExistsError: file is already there.

    Note the toml file is manipulated here with find-and-replace
    so as to preserve comments in the template.
    """
    sd = Path(dur) / "serverDetails.toml"
    if sd.exists():
        raise FileExistsError("Config already exists in {}".format(sd))
    template = (resources.files(contestmark) / "serverDetails.toml").read_text()
    if name:
        template = template.replace("localhost", name)
    if port:
        template = template.replace(f"{Default_Port}", str(port))
    if db_name:
        template = template.replace("#db_name =", f'db_name = "{db_name}"')
    with open(sd, "w") as fh:
        fh.write(template)


def get_server_info(basedir=Path(".")):
    """Read the server info from config file, falling back to defaults."""
    log = logging.getLogger("server")
    serverInfo = {"server": "127.0.0.1", "port": Default_Port, "LogLevel": "info"}
    try:
        with open(Path(basedir) / confdir / "serverDetails.toml", "rb") as data_file:
            serverInfo.update(tomllib.load(data_file))
        log.debug("Server details loaded: {}".format(serverInfo))
    except FileNotFoundError:
        log.warning("Cannot find server details, using defaults")
    return serverInfo

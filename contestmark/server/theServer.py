# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

import logging
from pathlib import Path
import ssl

from aiohttp import web

from contestmark import __version__
from contestmark import Contest_API_Version as serverAPI
from contestmark.db import ContestDB
from contestmark.misc_utils import utc_now_to_filename_string, working_directory
from contestmark.notify import Notifier
from contestmark.secret_codes import make_password
from contestmark.server import specdir, confdir
from contestmark.server import check_server_directories, get_server_info

from .authenticate import Authority

from .contestServer import (
    CodeHandler,
    CopyHandler,
    MarkHandler,
    PostHandler,
    UserInitHandler,
)


class Server:
    def __init__(self, db, masterToken, notifier=None):
        log = logging.getLogger("server")
        log.debug("Initialising server")
        self.authority = Authority(masterToken)
        self.DB = db
        self.notifier = notifier if notifier is not None else Notifier()
        self.API = serverAPI
        self.Version = __version__
        log.info(
            'Server launching with masterToken = "{}"'.format(
                self.authority.get_master_token(),
            )
        )
        if not self.DB.doesUserExist("admin"):
            log.info("No admin password: autogenerating and writing to stdout...")
            admin_pw = make_password()
            print(f"Initial admin password: {admin_pw}")
            hashpw = self.authority.create_password_hash(admin_pw)
            del admin_pw
            assert self.DB.createUser("admin", hashpw, "admin")

    from .contestServer.serverUserInit import (
        validate,
        checkPassword,
        createUser,
        giveUserToken,
        setUserEnable,
        getUserList,
        closeUser,
        updateUser,
        deleteUser,
    )
    from .contestServer.serverCode import (
        assignSecretCode,
        getSecretCodes,
        getCandidatesWithoutCode,
    )
    from .contestServer.serverCopy import (
        createModule,
        createCopy,
        getUnassignedCopies,
        getArbitrationCopies,
        getMarkedCopies,
        assignGraders,
        assignArbitrator,
        publishResults,
        getResults,
    )
    from .contestServer.serverMark import (
        MgetAssignedCopies,
        MsubmitMarks,
    )
    from .contestServer.serverPost import (
        createPost,
        getPosts,
        deletePost,
    )


def build_app(peon):
    """Construct the web application serving a `Server`.

    Args:
        peon (Server): does the actual work behind each route.

    Returns:
        aiohttp.web.Application
    """
    log = logging.getLogger("server")
    app = web.Application()
    log.info("Setting up routes")
    for handler in (
        UserInitHandler,
        CodeHandler,
        CopyHandler,
        MarkHandler,
        PostHandler,
    ):
        handler(peon).setUpRoutes(app.router)

    async def _stop_notifier(app):
        log.info("Sending any queued notifications")
        peon.notifier.shutdown()

    app.on_cleanup.append(_stop_notifier)
    return app


def _ssl_context(basedir):
    """An SSL context from our custom cert and key, or None if there are none."""
    log = logging.getLogger("server")
    sslContext = ssl.create_default_context(purpose=ssl.Purpose.CLIENT_AUTH)
    sslContext.check_hostname = False
    try:
        sslContext.load_cert_chain(
            basedir / confdir / "contestmark-custom.crt",
            basedir / confdir / "contestmark-custom.key",
        )
    except FileNotFoundError:
        log.warning("SSL: no custom cert and key found, serving plain HTTP")
        return None
    log.info("SSL: Loaded custom cert and key")
    return sslContext


def launch(basedir=Path("."), *, master_token=None, logfile=None, logconsole=True):
    """Launches the Contestmark server.

    args:
        basedir (pathlib.Path/str): the directory containing the file
            space to be used by this server.
        logfile (pathlib.Path/str/None): name-only then relative to basedir else
            If omitted, use a default name with date and time included.
        logconsole (bool): if True (default) then log to the stderr.
        master_token (None/str): a 32 hex-digit string used to encrypt tokens
            in the database.  Not needed on server unless you want to
            hot-restart the server without requiring users to log-off
            and log-in again.  If None, a new token is created.
    """
    basedir = Path(basedir)
    if not logfile:
        logfile = basedir / f"contestmark-server-{utc_now_to_filename_string()}.log"
    logfile = Path(logfile)
    # if just filename, make log in basedir
    if logfile.parent == Path("."):
        logfile = basedir / logfile
    # 5 is to keep debug/info lined up
    fmtstr = "%(asctime)s %(levelname)5s:%(name)s\t%(message)s"
    logging.basicConfig(format=fmtstr, datefmt="%b%d %H:%M:%S %Z", filename=logfile)
    if logconsole:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter(fmtstr, datefmt="%b%d %H:%M:%S %Z"))
        logging.getLogger().addHandler(h)

    log = logging.getLogger("server")
    # We will reset this later after we read the config
    logging.getLogger().setLevel("DEBUG")

    log.info(
        "Contestmark Server {} (communicates with api {})".format(
            __version__, serverAPI
        )
    )
    check_server_directories(basedir)
    server_info = get_server_info(basedir)
    logging.getLogger().setLevel(server_info["LogLevel"].upper())
    # Special treatment for chatty modules
    if server_info["LogLevel"].upper() == "INFO":
        logging.getLogger("aiohttp.access").setLevel("WARNING")
    log.info(f'Working from directory "{basedir}"')
    if not (basedir / specdir / "contest.db").exists():
        log.info("Database is not yet present: creating...")
    contestDB = ContestDB(
        basedir / specdir / "contest.db",
        db_name=server_info.get("db_name", None),
        db_host=server_info.get("db_host", None),
        db_port=server_info.get("db_port", None),
        db_username=server_info.get("db_username", None),
        db_password=server_info.get("db_password", None),
    )
    notifier = Notifier.from_server_info(server_info)
    if not notifier.smtp_host:
        log.info("No smtp_host configured: notifications will only be logged")

    with working_directory(basedir):
        peon = Server(contestDB, master_token, notifier)
        app = build_app(peon)

    sslContext = _ssl_context(basedir)
    log.info("Start the server!")
    with working_directory(basedir):
        web.run_app(app, ssl_context=sslContext, port=server_info["port"])

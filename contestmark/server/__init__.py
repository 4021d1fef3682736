# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

"""This is the Contestmark Server."""

__copyright__ = "Copyright (C) 2023-2024 The Contestmark Project Developers"
__credits__ = "The Contestmark Project Developers"
__license__ = "AGPL-3.0-or-later"

from pathlib import Path

specdir: Path = Path("contestData")
confdir: Path = Path("serverConfiguration")

from .misc import build_server_directories
from .misc import create_server_config
from .misc import check_server_directories, check_server_fully_configured
from .misc import get_server_info

from contestmark.server.theServer import launch

__all__ = [
    "launch",
    "build_server_directories",
    "create_server_config",
    "check_server_directories",
    "check_server_fully_configured",
    "get_server_info",
]

# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

"""Routes and server details for the Contestmark server.

Most routes have a corresponding server method to do the non-HTTP
work, which in turn mostly calls the database code in
:py:mod:`contestmark.db`.
"""

__copyright__ = "Copyright (C) 2023-2024 The Contestmark Project Developers"
__credits__ = "The Contestmark Project Developers"
__license__ = "AGPL-3.0-or-later"

from .routesCode import CodeHandler
from .routesCopy import CopyHandler
from .routesMark import MarkHandler
from .routesPost import PostHandler
from .routesUserInit import UserInitHandler

__all__ = [
    "CodeHandler",
    "CopyHandler",
    "MarkHandler",
    "PostHandler",
    "UserInitHandler",
]

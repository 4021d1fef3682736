# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023 The Contestmark Project Developers

"""Contestmark database stuff."""

__copyright__ = "Copyright (C) 2023-2024 The Contestmark Project Developers"
__credits__ = "The Contestmark Project Developers"
__license__ = "AGPL-3.0-or-later"


from .contestDB import ContestDB

__all__ = [
    "ContestDB",
]

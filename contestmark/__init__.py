# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

"""Contestmark is anonymous double-blind marking for doctoral contests.

Contestmark hides candidates behind secret codes, hands each examination
copy to two independent graders, escalates disagreements to a third
grader and publishes the per-candidate results.
"""

__copyright__ = "Copyright (C) 2023-2024 The Contestmark Project Developers"
__credits__ = "The Contestmark Project Developers"
__license__ = "AGPL-3.0-or-later"

from .version import __version__

Contest_API_Version = "3"
Default_Port = 41985

__all__ = ["__version__", "Contest_API_Version", "Default_Port"]

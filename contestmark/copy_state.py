# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

"""Classify the marking state of an examination copy.

Nothing in here touches the database: these functions only look at the
marks and graders they are given, so the same rules are used by the
listings, the mark submission and the publication of results.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from contestmark.contest_rules import MARK_DIFFERENCE_THRESHOLD


class CopyState(Enum):
    UNASSIGNED = "unassigned"
    AWAITING_MARKS = "awaiting_marks"
    PARTIALLY_MARKED = "partially_marked"
    REQUIRES_ARBITRATION = "requires_arbitration"
    RESOLVED = "resolved"


def copy_state(
    mark1: float | None,
    mark2: float | None,
    mark3: float | None = None,
    *,
    teacher1: Any = None,
    teacher2: Any = None,
    teacher3: Any = None,
    threshold: float = MARK_DIFFERENCE_THRESHOLD,
) -> CopyState:
    """The marking state of a copy from its marks and graders.

    Args:
        mark1: first mark or None.
        mark2: second mark or None.
        mark3: the arbitration mark or None.

    Keyword Args:
        teacher1: anything not-None if the first grader is assigned.
        teacher2: anything not-None if the second grader is assigned.
        teacher3: the arbitrator, unused by the classification but
            accepted so callers can pass a whole copy's worth of fields.
        threshold: marks this far apart (or more) disagree.

    Returns:
        The state.  Marks take precedence over graders: a copy with
        marks is classified by its marks alone.
    """
    if mark1 is None and mark2 is None:
        if teacher1 is None or teacher2 is None:
            return CopyState.UNASSIGNED
        return CopyState.AWAITING_MARKS
    if mark1 is None or mark2 is None:
        return CopyState.PARTIALLY_MARKED
    if mark3 is not None:
        return CopyState.RESOLVED
    if abs(mark1 - mark2) < threshold:
        return CopyState.RESOLVED
    return CopyState.REQUIRES_ARBITRATION


def is_resolved(mark1, mark2, mark3=None, **kwargs) -> bool:
    return copy_state(mark1, mark2, mark3, **kwargs) is CopyState.RESOLVED


def needs_arbitration(mark1, mark2, mark3=None, **kwargs) -> bool:
    return copy_state(mark1, mark2, mark3, **kwargs) is CopyState.REQUIRES_ARBITRATION


def final_mark(
    mark1: float | None,
    mark2: float | None,
    mark3: float | None = None,
    *,
    threshold: float = MARK_DIFFERENCE_THRESHOLD,
) -> float | None:
    """The decisive mark of a copy, or None if it is not yet resolved.

    The arbitration mark always wins, even when it is lower than both
    of the others.  Otherwise two close marks resolve to the higher one,
    not their average.
    """
    if copy_state(mark1, mark2, mark3, threshold=threshold) is not CopyState.RESOLVED:
        return None
    if mark3 is not None:
        return mark3
    return max(mark1, mark2)

# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

from contestmark.copy_state import CopyState, copy_state, final_mark
from contestmark.copy_state import is_resolved, needs_arbitration


def test_close_marks_resolve_to_max() -> None:
    assert copy_state(14, 13) is CopyState.RESOLVED
    assert final_mark(14, 13) == 14
    assert final_mark(13, 14) == 14


def test_close_marks_not_averaged() -> None:
    assert final_mark(12, 14.5) == 14.5


def test_difference_at_threshold_disagrees() -> None:
    assert copy_state(10, 13) is CopyState.REQUIRES_ARBITRATION
    assert copy_state(13, 10) is CopyState.REQUIRES_ARBITRATION
    assert final_mark(10, 13) is None


def test_difference_just_below_threshold_agrees() -> None:
    assert copy_state(10, 12.99) is CopyState.RESOLVED
    assert final_mark(10, 12.99) == 12.99


def test_arbitration_mark_overrides_even_when_lower() -> None:
    assert copy_state(8, 15, 5) is CopyState.RESOLVED
    assert final_mark(8, 15, 5) == 5


def test_arbitration_mark_zero_counts() -> None:
    assert final_mark(8, 15, 0) == 0


def test_no_marks_no_graders() -> None:
    assert copy_state(None, None) is CopyState.UNASSIGNED


def test_no_marks_one_grader_is_unassigned() -> None:
    assert copy_state(None, None, teacher1="alice") is CopyState.UNASSIGNED


def test_no_marks_both_graders() -> None:
    s = copy_state(None, None, teacher1="alice", teacher2="bob")
    assert s is CopyState.AWAITING_MARKS


def test_one_mark() -> None:
    assert copy_state(12, None) is CopyState.PARTIALLY_MARKED
    assert copy_state(None, 12) is CopyState.PARTIALLY_MARKED
    assert final_mark(12, None) is None


def test_custom_threshold() -> None:
    assert copy_state(10, 11, threshold=1) is CopyState.REQUIRES_ARBITRATION
    assert copy_state(10, 11, threshold=1.5) is CopyState.RESOLVED


def test_predicates() -> None:
    assert is_resolved(14, 13)
    assert not is_resolved(8, 15)
    assert needs_arbitration(8, 15)
    assert not needs_arbitration(8, 15, 10)

# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

from datetime import datetime, timezone
import logging
import math

from contestmark.contest_rules import MAX_MARK
from contestmark.contestmark_exceptions import (
    ContestConflict,
    ContestNoPermission,
    ContestNotEligible,
    ContestNotFound,
    ContestValidationError,
)
from contestmark.copy_state import CopyState
from contestmark.db.tables import User, Module, Copy

log = logging.getLogger("DB")

# how many times we re-read a copy after losing a race to another marker
MAX_MARK_ATTEMPTS = 5


def validate_mark(mark):
    """Check a mark is a number on the marking scale.

    Returns:
        float: the mark.

    Raises:
        ContestValidationError: not a number or out of range.
    """
    if isinstance(mark, bool) or not isinstance(mark, (int, float)):
        raise ContestValidationError(f"Mark must be a number, not {mark!r}")
    mark = float(mark)
    if math.isnan(mark) or not (0 <= mark <= MAX_MARK):
        raise ContestValidationError(f"Mark {mark} is not between 0 and {MAX_MARK:g}")
    return mark


def _first_empty_slot(copy):
    """Which mark field the next mark goes in, or None if it is not wanted.

    The third slot only opens once the first two marks disagree.
    """
    if copy.mark1 is None:
        return "mark1"
    if copy.mark2 is None:
        return "mark2"
    if copy.mark3 is None and copy.state() is CopyState.REQUIRES_ARBITRATION:
        return "mark3"
    return None


# the arbitrator is the only one who can give mark3, so it needs no marker
_markers = {"mark1": Copy.marker1, "mark2": Copy.marker2}


def _check_grader(copy, grader, slot):
    uref = User.get_or_none(name=grader)
    if uref is None:
        raise ContestNotFound(f'No such user "{grader}"')
    if uref.id not in (copy.teacher1_id, copy.teacher2_id, copy.teacher3_id):
        raise ContestNoPermission(f'Copy {copy.id} is not assigned to "{grader}"')
    if slot == "mark3" and uref.id != copy.teacher3_id:
        raise ContestNoPermission(
            f'Copy {copy.id} is waiting for its arbitrator, not "{grader}"'
        )
    if slot in ("mark1", "mark2") and uref.id == copy.teacher3_id:
        raise ContestNoPermission(
            f'"{grader}" is the arbitrator of copy {copy.id}: wait for the two first marks'
        )
    return uref


def submit_mark(self, copy_id, mark, *, grader=None):
    """Record a mark in the first empty mark slot of a copy.

    Slots are filled in the order mark1, mark2, mark3, whoever sends the
    mark, but the two first marks must come from two different graders:
    a grader sending a second mark for the same copy is ignored.  The
    write only happens if nobody else wrote to the copy since we read
    it; otherwise we read it again and retry.

    Args:
        copy_id (int): which copy.
        mark (float): the mark, between 0 and the maximum mark.

    Keyword Args:
        grader (str/None): name of the teacher sending the mark.  If
            given they must be one of the graders of the copy, and only
            the arbitrator can give the third mark.

    Returns:
        bool: True if the mark was recorded, False if the copy does not
        want any more marks, or not from this grader.  The latter is
        not an error: batches of marks can overlap with copies that
        were already graded.

    Raises:
        ContestValidationError: the mark is not a valid mark.
        ContestNotFound: no such copy (or grader).
        ContestNotEligible: the copy has no graders yet.
        ContestNoPermission: the grader is not a grader of this copy.
        ContestConflict: too many lost races for this copy.
    """
    mark = validate_mark(mark)
    for attempt in range(MAX_MARK_ATTEMPTS):
        with self._db.atomic():
            copy = self.get_copy(copy_id)
            if grader is not None and copy.state() is CopyState.UNASSIGNED:
                raise ContestNotEligible(f"Copy {copy_id} has no graders yet")
            slot = _first_empty_slot(copy)
            if slot is None:
                log.info("Copy %s needs no more marks: dropping mark %s", copy_id, mark)
                return False
            changes = {Copy.revision: Copy.revision + 1}
            if grader is not None:
                uref = _check_grader(copy, grader, slot)
                if slot == "mark2" and copy.marker1_id == uref.id:
                    log.info(
                        'Copy %s already has the mark of "%s": dropping mark %s',
                        copy_id,
                        grader,
                        mark,
                    )
                    return False
                if slot in _markers:
                    changes[_markers[slot]] = uref
            field = getattr(Copy, slot)
            changes[field] = mark
            updated = (
                Copy.update(changes)
                .where(
                    Copy.id == copy.id,
                    Copy.revision == copy.revision,
                    field.is_null(),
                )
                .execute()
            )
            if updated and grader is not None:
                uref.last_action = f"Marked copy {copy_id}"
                uref.last_activity = datetime.now(timezone.utc)
                uref.save()
        if updated:
            log.info("Copy %s %s = %s", copy_id, slot, mark)
            return True
        log.info(
            "Copy %s changed under us (attempt %d): reading it again",
            copy_id,
            attempt + 1,
        )
    raise ContestConflict(
        f"Copy {copy_id} kept changing while we tried to record a mark: try again"
    )


def submit_marks(self, marks, *, grader=None):
    """Record a batch of marks.

    Args:
        marks (list): pairs `(copy_id, mark)`.

    Keyword Args:
        grader (str/None): see `submit_mark`.

    Returns:
        int: how many copies were actually updated.  Unknown copies,
        copies that want no more marks and copies the grader may not
        mark are skipped.

    Raises:
        ContestValidationError: some mark is invalid.  All marks are
            checked before any is recorded.
    """
    marks = [(copy_id, validate_mark(mark)) for copy_id, mark in marks]
    updated = 0
    for copy_id, mark in marks:
        try:
            if self.submit_mark(copy_id, mark, grader=grader):
                updated += 1
        except (ContestNotFound, ContestNotEligible, ContestNoPermission) as e:
            log.warning("Skipping mark for copy %s: %s", copy_id, e)
    log.info(
        'Batch of %d marks from "%s": %d copies updated', len(marks), grader, updated
    )
    return updated


def get_assigned_copies(self, teacher):
    """The copies a teacher grades, without anything naming the candidate.

    Returns:
        list: of dicts with keys `copy`, `module`, `secret_code`,
        `grader` (one of "first", "second", "arbitrator"), `state` and
        `awaiting_mark`.
    """
    tref = self.get_user_ref(teacher, role="teacher")
    query = (
        Copy.select(Copy, Module)
        .join(Module)
        .where(
            (Copy.teacher1 == tref) | (Copy.teacher2 == tref) | (Copy.teacher3 == tref)
        )
        .order_by(Module.name, Copy.id)
    )
    rows = []
    for copy in query:
        if copy.teacher3_id == tref.id:
            which = "arbitrator"
            awaiting = copy.state() is CopyState.REQUIRES_ARBITRATION
        else:
            which = "first" if copy.teacher1_id == tref.id else "second"
            awaiting = (copy.mark1 is None or copy.mark2 is None) and tref.id not in (
                copy.marker1_id,
                copy.marker2_id,
            )
        rows.append(
            {
                "copy": copy.id,
                "module": copy.module.name,
                "secret_code": copy.secret_code,
                "grader": which,
                "state": copy.state().value,
                "awaiting_mark": awaiting,
            }
        )
    log.debug('Sending %d assigned copies to "%s"', len(rows), teacher)
    return rows

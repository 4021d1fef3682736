# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

from datetime import datetime, timezone
import logging

import peewee as pw

from contestmark.contestmark_exceptions import (
    ContestConflict,
    ContestNotEligible,
    ContestNotFound,
    ContestValidationError,
)
from contestmark.copy_state import CopyState
from contestmark.db.tables import User, Module, Copy

log = logging.getLogger("DB")


# ------------------
# Contest setup


def create_module(self, name):
    """Create a module (subject) of the contest.

    Raises:
        ContestValidationError: empty name.
        ContestConflict: already a module with that name.
    """
    name = name.strip()
    if not name:
        raise ContestValidationError("A module needs a name")
    try:
        with self._db.atomic():
            mref = Module.create(name=name)
    except pw.IntegrityError:
        raise ContestConflict(f'Module "{name}" already exists') from None
    log.info('Created module "%s"', name)
    return mref.id


def create_copy(self, candidate_name, module_name):
    """Create an unassigned copy for a candidate in a module.

    Returns:
        int: the id of the new copy.

    Raises:
        ContestNotFound: no such candidate or module.
        ContestValidationError: that user is not a candidate.
        ContestConflict: the candidate already has a copy in that module.
    """
    cref = self.get_user_ref(candidate_name, role="candidate")
    mref = Module.get_or_none(Module.name == module_name)
    if mref is None:
        raise ContestNotFound(f'No such module "{module_name}"')
    try:
        with self._db.atomic():
            copy = Copy.create(candidate=cref, module=mref)
    except pw.IntegrityError:
        raise ContestConflict(
            f'Candidate "{candidate_name}" already has a copy for "{module_name}"'
        ) from None
    log.info(
        'Created copy %s for candidate "%s" module "%s"',
        copy.id,
        candidate_name,
        module_name,
    )
    return copy.id


def get_copy(self, copy_id):
    """Find a copy by its id.

    Raises:
        ContestNotFound: no such copy, perhaps already published.
    """
    copy = Copy.get_or_none(Copy.id == copy_id)
    if copy is None:
        raise ContestNotFound(f"No such copy {copy_id}")
    return copy


# ------------------
# Listings for the contest president


def _president_view(copy):
    row = {
        "copy": copy.id,
        "module": copy.module.name,
        "candidate": copy.candidate.name,
        "secret_code": copy.secret_code,
        "state": copy.state().value,
        "teacher1": copy.teacher1.name if copy.teacher1 else None,
        "teacher2": copy.teacher2.name if copy.teacher2 else None,
        "teacher3": copy.teacher3.name if copy.teacher3 else None,
        "mark1": copy.mark1,
        "mark2": copy.mark2,
        "mark3": copy.mark3,
    }
    final = copy.final_mark()
    if final is not None:
        row["final_mark"] = final
    return row


def get_copies_in_state(self, *states):
    """All copies whose state is one of those given, as list of dicts."""
    query = (
        Copy.select(Copy, Module, User)
        .join(Module)
        .switch(Copy)
        .join(User, on=(Copy.candidate == User.id))
        .order_by(Module.name, Copy.id)
    )
    return [_president_view(c) for c in query if c.state() in states]


def get_unassigned_copies(self):
    return self.get_copies_in_state(CopyState.UNASSIGNED)


def get_copies_requiring_arbitration(self):
    """Copies whose marks disagree and which still need a third grader."""
    return [
        row
        for row in self.get_copies_in_state(CopyState.REQUIRES_ARBITRATION)
        if row["teacher3"] is None
    ]


def get_resolved_copies(self):
    return self.get_copies_in_state(CopyState.RESOLVED)


# ------------------
# Assigning graders


def _get_grader(self, name):
    tref = self.get_user_ref(name, role="teacher")
    if not tref.enabled:
        raise ContestValidationError(f'Teacher "{name}" is disabled')
    return tref


def assign_primary_graders(self, copy_id, teacher1, teacher2):
    """Give an unassigned copy to its two independent graders.

    Args:
        copy_id (int): which copy.
        teacher1 (str): name of the first grader.
        teacher2 (str): name of the second grader.

    Returns:
        tuple: the two user references, for the notifications.

    Raises:
        ContestNotFound: no such copy or teacher.
        ContestValidationError: not teachers, or the same teacher twice.
        ContestNotEligible: the copy is not unassigned.
    """
    if teacher1 == teacher2:
        raise ContestValidationError(
            f'The two graders of copy {copy_id} must differ, both are "{teacher1}"'
        )
    t1ref = _get_grader(self, teacher1)
    t2ref = _get_grader(self, teacher2)
    with self._db.atomic():
        copy = self.get_copy(copy_id)
        state = copy.state()
        if state is not CopyState.UNASSIGNED:
            raise ContestNotEligible(
                f"Copy {copy_id} is {state.value}: can only assign graders to unassigned copies"
            )
        copy.teacher1 = t1ref
        copy.teacher2 = t2ref
        copy.save()
        now = datetime.now(timezone.utc)
        for tref in (t1ref, t2ref):
            tref.last_action = f"Assigned copy {copy_id}"
            tref.last_activity = now
            tref.save()
    log.info('Copy %s assigned to "%s" and "%s"', copy_id, teacher1, teacher2)
    return t1ref, t2ref


def assign_arbitrator(self, copy_id, teacher3):
    """Give a copy whose two marks disagree to a third grader.

    Returns:
        User: reference to the arbitrator, for the notification.

    Raises:
        ContestNotFound: no such copy or teacher.
        ContestValidationError: not a teacher, or already one of the
            two first graders of this copy.
        ContestNotEligible: the marks do not disagree, or the copy
            already has an arbitrator.
    """
    t3ref = _get_grader(self, teacher3)
    with self._db.atomic():
        copy = self.get_copy(copy_id)
        state = copy.state()
        if state is not CopyState.REQUIRES_ARBITRATION:
            raise ContestNotEligible(
                f"Copy {copy_id} is {state.value}: it does not need an arbitrator"
            )
        if copy.teacher3_id is not None:
            raise ContestNotEligible(
                f'Copy {copy_id} already has arbitrator "{copy.teacher3.name}"'
            )
        if t3ref.id in (copy.teacher1_id, copy.teacher2_id):
            raise ContestValidationError(
                f'"{teacher3}" already graded copy {copy_id}: choose another arbitrator'
            )
        copy.teacher3 = t3ref
        copy.save()
        t3ref.last_action = f"Arbitrating copy {copy_id}"
        t3ref.last_activity = datetime.now(timezone.utc)
        t3ref.save()
    log.info('Copy %s sent to arbitrator "%s"', copy_id, teacher3)
    return t3ref

# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

from collections import defaultdict
from datetime import datetime, timezone
import logging

import peewee as pw

from contestmark.contest_rules import (
    MINIMUM_PASSING_MARK,
    REQUIRED_MODULES_PER_CANDIDATE,
    RESULT_CALCULATION_MULTIPLIER,
)
from contestmark.copy_state import CopyState
from contestmark.db.tables import User, Copy, Result

log = logging.getLogger("DB")


def publish_results(self):
    """Compute, save and publish the result of every candidate who is ready.

    A candidate is ready when exactly the required number of their
    copies are resolved and they have no other copies.  Each candidate
    is published in their own transaction: their result is saved and
    their copies deleted together, or not at all.  A database failure
    for one candidate is logged and the others carry on.

    Calling this twice in a row publishes nobody the second time: the
    copies of published candidates are gone.

    Returns:
        list: of dicts, one per published candidate, with keys
        `candidate`, `email`, `full_name`, `value`, `accepted`.
    """
    groups = defaultdict(list)
    for copy in Copy.select():
        if copy.state() is CopyState.RESOLVED:
            groups[copy.candidate_id].append(copy)

    published = []
    for candidate_id, copies in groups.items():
        if len(copies) != REQUIRED_MODULES_PER_CANDIDATE:
            log.info(
                "Candidate id %s has %d resolved copies, need %d: not publishing",
                candidate_id,
                len(copies),
                REQUIRED_MODULES_PER_CANDIDATE,
            )
            continue
        try:
            row = self.publish_candidate(candidate_id, copies)
        except pw.DatabaseError as e:
            log.error("Could not publish candidate id %s: %s", candidate_id, e)
            continue
        if row is not None:
            published.append(row)
    log.info("Published results for %d candidate(s)", len(published))
    return published


def publish_candidate(self, candidate_id, copies):
    """Save one candidate's result and delete their copies, atomically.

    Args:
        candidate_id (int): the candidate.
        copies (list): their resolved copies.

    Returns:
        dict/None: the published result, or None if the candidate turned
        out to have other copies too.

    Raises:
        peewee.DatabaseError: nothing was changed for this candidate.
    """
    finals = []
    for copy in copies:
        final = copy.final_mark()
        if final is None:
            log.warning("Copy %s has no final mark: counting it as zero", copy.id)
            final = 0.0
        finals.append(final)
    value = sum(finals) * RESULT_CALCULATION_MULTIPLIER
    accepted = value >= MINIMUM_PASSING_MARK

    with self._db.atomic():
        cref = User.get_by_id(candidate_id)
        total = Copy.select().where(Copy.candidate == cref).count()
        if total != len(copies):
            log.info(
                'Candidate "%s" still has %d unresolved copies: not publishing',
                cref.name,
                total - len(copies),
            )
            return None
        Result.create(
            candidate=cref,
            value=value,
            accepted=accepted,
            time=datetime.now(timezone.utc),
        )
        for copy in copies:
            copy.delete_instance()
    log.info(
        'Published candidate "%s": %s from %s, %s',
        cref.name,
        value,
        finals,
        "accepted" if accepted else "not accepted",
    )
    return {
        "candidate": cref.name,
        "email": cref.email,
        "full_name": cref.full_name,
        "value": value,
        "accepted": accepted,
    }


def get_results(self):
    """Published results, best first, with their rank."""
    query = (
        Result.select(Result, User)
        .join(User)
        .order_by(Result.value.desc(), User.name)
    )
    return [
        {
            "rank": n + 1,
            "candidate": rref.candidate.name,
            "full_name": rref.candidate.full_name,
            "value": rref.value,
            "accepted": rref.accepted,
            "time": rref.time,
        }
        for n, rref in enumerate(query)
    ]

# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

from datetime import datetime, timezone
import logging

from contestmark.contestmark_exceptions import ContestNotEligible
from contestmark.db.tables import User, SecretCode
from contestmark.secret_codes import generate_secret_code

log = logging.getLogger("DB")


def get_issued_codes(self):
    """All the secret codes issued so far, as a set of strings."""
    return set(sref.content for sref in SecretCode.select())


def assign_secret_code(self, candidate_name):
    """Generate and save a secret code for a candidate.

    Returns:
        tuple: `(code, candidate_ref)`.

    Raises:
        ContestNotFound: no such user.
        ContestValidationError: the user is not a candidate.
        ContestNotEligible: the candidate already has a code: codes are
            never reassigned.
        ContestExhaustedCodeSpace: no codes of the configured length
            are left; nothing is saved.
    """
    cref = self.get_user_ref(candidate_name, role="candidate")
    with self._db.atomic():
        existing = SecretCode.get_or_none(SecretCode.candidate == cref)
        if existing is not None:
            raise ContestNotEligible(
                f'Candidate "{candidate_name}" already has a secret code'
            )
        in_use = self.get_issued_codes()
        code = generate_secret_code(in_use)
        SecretCode.create(
            content=code, candidate=cref, time=datetime.now(timezone.utc)
        )
    log.info('Secret code assigned to candidate "%s"', candidate_name)
    return code, cref


def get_secret_codes(self):
    return [
        {
            "code": sref.content,
            "candidate": sref.candidate.name,
            "full_name": sref.candidate.full_name,
        }
        for sref in SecretCode.select(SecretCode, User)
        .join(User)
        .order_by(User.name)
    ]


def get_candidates_without_code(self):
    with_code = SecretCode.select(SecretCode.candidate)
    query = User.select().where(
        User.role == "candidate", User.id.not_in(with_code)
    )
    return [
        {"name": uref.name, "full_name": uref.full_name}
        for uref in query.order_by(User.name)
    ]

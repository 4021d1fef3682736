# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

import logging


log = logging.getLogger("server")


def assignSecretCode(self, candidate):
    """Give a candidate their secret code and tell them about it.

    Returns:
        str: the new code.

    Raises:
        ContestNotFound, ContestValidationError, ContestNotEligible,
        ContestExhaustedCodeSpace: see `ContestDB.assign_secret_code`.
    """
    code, cref = self.DB.assign_secret_code(candidate)
    self.notifier.post(
        cref.email,
        "secret_code_assigned",
        {"name": cref.full_name, "code": code},
    )
    return code


def getSecretCodes(self):
    return self.DB.get_secret_codes()


def getCandidatesWithoutCode(self):
    return self.DB.get_candidates_without_code()

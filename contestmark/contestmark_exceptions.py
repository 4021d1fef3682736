# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers


"""Exceptions for the Contestmark software.

Serious exceptions are for unexpected things that we probably cannot
sanely or safely recover from.  Benign are for signaling expected (or
at least not unexpected) situations, such as asking for a copy that
was already published and deleted.
"""


class ContestException(Exception):
    """Catch-all parent of all Contestmark-related exceptions."""

    pass


class ContestSeriousException(ContestException):
    """Serious or unexpected problems that are generally not recoverable."""

    pass


class ContestBenignException(ContestException):
    """A not-unexpected situation, often signaling an error condition."""

    pass


class ContestNotFound(ContestBenignException):
    """The copy, user, module or code referred to does not exist."""

    pass


class ContestNotEligible(ContestBenignException):
    """The copy is not in the right marking state for that action.

    For example, assigning an arbitrator to a copy whose two marks agree,
    or to a copy that already has one.
    """

    pass


class ContestValidationError(ContestBenignException):
    """Malformed input, rejected before anything was changed."""

    pass


class ContestConflict(ContestBenignException):
    """The action was contradictory to info already in the system."""

    pass


class ContestNoPermission(ContestBenignException):
    """You don't have permission, e.g., for that copy or that route."""

    pass


class ContestAuthenticationException(ContestBenignException):
    """You are not authenticated, with precisely that as the default message."""

    def __init__(self, msg=None):
        if not msg:
            msg = "You are not authenticated."
        super().__init__(msg)


class ContestTransportError(ContestBenignException):
    """A notification could not be delivered.

    The notifier catches these itself: they never reach an end user.
    """

    pass


class ContestExhaustedCodeSpace(ContestSeriousException):
    """Every possible secret code of this length has already been issued."""

    pass

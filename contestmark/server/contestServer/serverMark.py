# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

import logging


log = logging.getLogger("server")


def MgetAssignedCopies(self, username):
    """The copies this teacher grades, identified only by secret code."""
    return self.DB.get_assigned_copies(username)


def MsubmitMarks(self, username, marks):
    """Record a teacher's marks.

    Args:
        username (str): the teacher sending the marks.
        marks (list): of dicts with keys "copy" and "mark".

    Returns:
        int: how many copies were updated.

    Raises:
        ContestValidationError: malformed marks, nothing recorded.
    """
    pairs = [(row["copy"], row["mark"]) for row in marks]
    n = self.DB.submit_marks(pairs, grader=username)
    if n:
        log.info('Marks submitted by "%s" for %d copies', username, n)
    else:
        log.info('No marks were updated for "%s"', username)
    return n

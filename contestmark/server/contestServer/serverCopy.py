# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

"""Server side of the contest president's work: graders and results."""

import logging

from contestmark.misc_utils import datetime_to_json


log = logging.getLogger("server")


def _notify_assigned(self, tref):
    self.notifier.post(
        tref.email, "teacher_assigned", {"name": tref.full_name, "copies": 1}
    )


def createModule(self, name):
    return self.DB.create_module(name)


def createCopy(self, candidate, module):
    return self.DB.create_copy(candidate, module)


def getUnassignedCopies(self):
    """Copies waiting for graders, and the teachers to choose from."""
    return {
        "copies": self.DB.get_unassigned_copies(),
        "teachers": self.DB.getTeachers(),
    }


def getArbitrationCopies(self):
    """Copies whose marks disagree, and the teachers to choose from."""
    return {
        "copies": self.DB.get_copies_requiring_arbitration(),
        "teachers": self.DB.getTeachers(),
    }


def getMarkedCopies(self):
    return self.DB.get_resolved_copies()


def assignGraders(self, copy_id, teacher1, teacher2):
    """Assign the two independent graders of a copy and notify them.

    Notifications go out in the background.  A failed one is logged by
    the notifier and otherwise ignored: the assignment stands.
    """
    t1ref, t2ref = self.DB.assign_primary_graders(copy_id, teacher1, teacher2)
    for tref in (t1ref, t2ref):
        _notify_assigned(self, tref)


def assignArbitrator(self, copy_id, teacher3):
    t3ref = self.DB.assign_arbitrator(copy_id, teacher3)
    _notify_assigned(self, t3ref)


def publishResults(self):
    """Publish every candidate who is ready and notify them.

    Returns:
        int: how many candidates were published.
    """
    published = self.DB.publish_results()
    for row in published:
        self.notifier.post(
            row["email"],
            "results_published",
            {
                "name": row["full_name"],
                "value": row["value"],
                "accepted": row["accepted"],
            },
        )
    return len(published)


def getResults(self):
    results = self.DB.get_results()
    for row in results:
        row["time"] = datetime_to_json(row["time"])
    return results

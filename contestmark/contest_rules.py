# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023 The Contestmark Project Developers

"""The fixed rules of a contest: thresholds, scales and roles."""

# two marks at least this far apart need a third grader
MARK_DIFFERENCE_THRESHOLD = 3.0

# a published result at or above this is an acceptance
MINIMUM_PASSING_MARK = 10.0

# marks are given out of 20
MAX_MARK = 20.0

SECRET_CODE_LENGTH = 4

REQUIRED_MODULES_PER_CANDIDATE = 2

# scales the sum of the module marks back onto the published scale
RESULT_CALCULATION_MULTIPLIER = 2.0 / 3.0

ROLES = ("admin", "dean", "president", "teacher", "candidate")

# announcements posted by the dean
MAX_POST_TITLE_LENGTH = 200

# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

"""Secret codes that stand in for candidates, and auto-generated passwords."""

import secrets
import string

from contestmark.contest_rules import SECRET_CODE_LENGTH
from contestmark.contestmark_exceptions import ContestExhaustedCodeSpace


# no lowercase: codes get read aloud and copied by hand onto papers
ALPHANUMERIC = string.ascii_uppercase + string.digits


def code_space_size(length=SECRET_CODE_LENGTH, alphabet=ALPHANUMERIC):
    """How many distinct codes of this length there are."""
    return len(set(alphabet)) ** length


def generate_secret_code(avoiding, length=SECRET_CODE_LENGTH, alphabet=ALPHANUMERIC):
    """Draw a new secret code which is not already in use.

    Args:
        avoiding (set): codes already issued.  This set belongs to the
            caller: the new code is added to it before returning, so
            several codes can be made in one pass before any of them
            are saved anywhere.  Do not share it between concurrent
            callers.
        length (int): how many characters in the code.
        alphabet (str): the characters to draw from.

    Returns:
        str: a code of exactly `length` characters, not in `avoiding`.

    Raises:
        ContestExhaustedCodeSpace: every code of this length is taken.
        ValueError: non-positive length or empty alphabet.
    """
    if length < 1:
        raise ValueError(f"Secret code length must be positive, not {length}")
    alphabet = "".join(sorted(set(alphabet)))
    if not alphabet:
        raise ValueError("Cannot draw secret codes from an empty alphabet")
    in_use = sum(
        1 for c in avoiding if len(c) == length and all(x in alphabet for x in c)
    )
    if in_use >= code_space_size(length, alphabet):
        raise ContestExhaustedCodeSpace(
            f"All {in_use} secret codes of length {length} are already issued"
        )
    while True:
        code = "".join(secrets.choice(alphabet) for _ in range(length))
        if code not in avoiding:
            break
    avoiding.add(code)
    return code


def make_password(n=12):
    """Creates a new random password.

    Args:
        n (int): number of characters.  Default n = 12.

    Returns:
        str: Password.
    """
    return "".join(
        secrets.choice(string.ascii_letters + string.digits) for _ in range(n)
    )

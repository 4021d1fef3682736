# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

from contextlib import contextmanager
import os

import arrow


# ------------------------------------------------
# some time conversion tools put here nice and central


def datetime_to_json(timestamp):
    return arrow.get(timestamp).for_json()


def utc_now_to_filename_string():
    """Format the time now in UTC for use in a filename.

    Filenames must not have ":" (forbidden on win32), so we use
    "ZZZ" not "ZZ" as the latter has "+00:00".
    """
    return arrow.utcnow().format("YYYY-MM-DD_HH-mm-ss_ZZZ")


@contextmanager
def working_directory(path):
    """Temporarily change the current working directory.

    Usage:
    ```
    with working_directory(path):
        do_things()   # working in the given path
    do_other_things() # back to original path
    ```
    """
    current_directory = os.getcwd()
    os.chdir(path)
    try:
        yield
    finally:
        os.chdir(current_directory)

# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

from pytest import raises

from contestmark.contest_rules import SECRET_CODE_LENGTH
from contestmark.contestmark_exceptions import ContestExhaustedCodeSpace
from contestmark.secret_codes import ALPHANUMERIC, code_space_size
from contestmark.secret_codes import generate_secret_code, make_password


def test_code_shape() -> None:
    code = generate_secret_code(set())
    assert len(code) == SECRET_CODE_LENGTH
    assert all(c in ALPHANUMERIC for c in code)


def test_codes_distinct_and_added_to_set() -> None:
    used = set()
    codes = [generate_secret_code(used) for _ in range(500)]
    assert len(set(codes)) == 500
    assert used == set(codes)


def test_avoids_existing() -> None:
    used = {"AAAA", "BBBB"}
    code = generate_secret_code(used)
    assert code not in ("AAAA", "BBBB")
    assert len(used) == 3


def test_fills_small_space_then_exhausted() -> None:
    used = set()
    codes = [generate_secret_code(used, length=2, alphabet="AB") for _ in range(4)]
    assert sorted(codes) == ["AA", "AB", "BA", "BB"]
    with raises(ContestExhaustedCodeSpace):
        generate_secret_code(used, length=2, alphabet="AB")
    assert len(used) == 4


def test_other_codes_do_not_count_towards_exhaustion() -> None:
    used = {"A", "B", "ZZZZZZ", "aa"}
    code = generate_secret_code(used, length=2, alphabet="AB")
    assert len(code) == 2


def test_bad_parameters() -> None:
    with raises(ValueError):
        generate_secret_code(set(), length=0)
    with raises(ValueError):
        generate_secret_code(set(), alphabet="")


def test_code_space_size() -> None:
    assert code_space_size() == 36**4
    assert code_space_size(2, "AAB") == 4


def test_make_password() -> None:
    assert len(make_password()) == 12
    assert len(make_password(n=20)) == 20
    assert make_password().isalnum()

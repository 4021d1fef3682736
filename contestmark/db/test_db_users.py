# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

from pathlib import Path

from pytest import raises

from contestmark.contestmark_exceptions import (
    ContestNotEligible,
    ContestNotFound,
    ContestValidationError,
)
from contestmark.db import ContestDB


def test_create_user(tmpdir) -> None:
    db = ContestDB(Path(tmpdir) / "test.db")
    assert db.createUser("ada", "hash", "teacher", email="ada@example.com")
    assert db.doesUserExist("ada")
    assert db.getUserRole("ada") == "teacher"
    assert db.getUserPasswordHash("ada") == "hash"
    assert db.isUserEnabled("ada")


def test_create_user_twice(tmpdir) -> None:
    db = ContestDB(Path(tmpdir) / "test.db")
    assert db.createUser("ada", "hash", "teacher")
    assert not db.createUser("ada", "hash", "dean")
    assert db.getUserRole("ada") == "teacher"


def test_create_user_unknown_role(tmpdir) -> None:
    db = ContestDB(Path(tmpdir) / "test.db")
    with raises(ContestValidationError):
        db.createUser("ada", "hash", "janitor")
    assert not db.doesUserExist("ada")


def test_unknown_user(tmpdir) -> None:
    db = ContestDB(Path(tmpdir) / "test.db")
    assert db.getUserRole("nobody") is None
    assert db.getUserPasswordHash("nobody") is None
    assert not db.isUserEnabled("nobody")
    assert not db.userHasToken("nobody")
    with raises(ValueError):
        db.getUserToken("nobody")
    with raises(ContestNotFound):
        db.get_user_ref("nobody")
    with raises(ContestNotFound):
        db.disableUser("nobody")


def test_user_ref_role(tmpdir) -> None:
    db = ContestDB(Path(tmpdir) / "test.db")
    db.createUser("ada", "hash", "teacher")
    assert db.get_user_ref("ada", role="teacher").name == "ada"
    with raises(ContestValidationError):
        db.get_user_ref("ada", role="candidate")


def test_tokens(tmpdir) -> None:
    db = ContestDB(Path(tmpdir) / "test.db")
    db.createUser("ada", "hash", "teacher")
    assert db.getUserToken("ada") is None
    db.setUserToken("ada", "0xabc")
    assert db.userHasToken("ada")
    assert db.getUserToken("ada") == "0xabc"
    db.clearUserToken("ada")
    assert not db.userHasToken("ada")


def test_disable_clears_token(tmpdir) -> None:
    db = ContestDB(Path(tmpdir) / "test.db")
    db.createUser("ada", "hash", "teacher")
    db.setUserToken("ada", "0xabc")
    db.disableUser("ada")
    assert not db.isUserEnabled("ada")
    assert not db.userHasToken("ada")
    db.enableUser("ada")
    assert db.isUserEnabled("ada")


def test_change_password_hash(tmpdir) -> None:
    db = ContestDB(Path(tmpdir) / "test.db")
    db.createUser("ada", "hash", "teacher")
    assert db.setUserPasswordHash("ada", "newhash")
    assert db.getUserPasswordHash("ada") == "newhash"
    assert not db.setUserPasswordHash("nobody", "newhash")


def test_teacher_list_omits_others_and_disabled(tmpdir) -> None:
    db = ContestDB(Path(tmpdir) / "test.db")
    db.createUser("ada", "hash", "teacher", first_name="Ada", last_name="Lovelace")
    db.createUser("bob", "hash", "teacher")
    db.createUser("cyd", "hash", "teacher")
    db.createUser("dee", "hash", "dean")
    db.disableUser("cyd")
    teachers = db.getTeachers()
    assert [t["name"] for t in teachers] == ["ada", "bob"]
    assert teachers[0]["full_name"] == "Ada Lovelace"
    assert teachers[1]["full_name"] == "bob"
    assert len(db.getUserList()) == 4


def test_update_user(tmpdir) -> None:
    db = ContestDB(Path(tmpdir) / "test.db")
    db.createUser("ada", "hash", "teacher", email="ada@example.com")
    db.updateUser(
        "ada", role="dean", email="dean@example.com", first_name="Ada", last_name="L"
    )
    (row,) = db.getUserList()
    assert row["role"] == "dean"
    assert row["email"] == "dean@example.com"
    assert row["full_name"] == "Ada L"
    assert row["last_action"] == "Details updated"
    with raises(ContestValidationError):
        db.updateUser("ada", role="janitor", email=None, first_name="", last_name="")
    with raises(ContestNotFound):
        db.updateUser("bob", role="dean", email=None, first_name="", last_name="")


def test_role_fixed_once_in_contest(tmpdir) -> None:
    db = ContestDB(Path(tmpdir) / "test.db")
    db.createUser("tina", "hash", "teacher")
    db.createUser("tom", "hash", "teacher")
    db.createUser("cara", "hash", "candidate")
    db.create_module("Algebra")
    c = db.create_copy("cara", "Algebra")
    db.assign_primary_graders(c, "tina", "tom")
    with raises(ContestNotEligible):
        db.updateUser("tina", role="candidate", email=None, first_name="", last_name="")
    assert db.getUserRole("tina") == "teacher"
    # other details can still change
    db.updateUser(
        "cara", role="candidate", email="c@example.com", first_name="C", last_name="A"
    )
    assert db.get_user_ref("cara").email == "c@example.com"


def test_delete_user(tmpdir) -> None:
    db = ContestDB(Path(tmpdir) / "test.db")
    db.createUser("ada", "hash", "teacher")
    db.createUser("cara", "hash", "candidate")
    db.assign_secret_code("cara")
    db.deleteUser("ada")
    assert not db.doesUserExist("ada")
    with raises(ContestNotFound):
        db.deleteUser("ada")
    with raises(ContestNotEligible):
        db.deleteUser("cara")
    assert db.doesUserExist("cara")

# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 The Contestmark Project Developers

from pathlib import Path

from pytest import raises

from contestmark.contestmark_exceptions import (
    ContestNotEligible,
    ContestNotFound,
    ContestValidationError,
)
from contestmark.db import ContestDB


def _db_with_deans(tmpdir):
    db = ContestDB(Path(tmpdir) / "test.db")
    db.createUser("dean", "hash", "dean", first_name="Dora", last_name="Dean")
    db.createUser("vice", "hash", "dean")
    db.createUser("tina", "hash", "teacher")
    return db


def test_posts_newest_first(tmpdir) -> None:
    db = _db_with_deans(tmpdir)
    p1 = db.create_post("dean", "Timetable", "Exams start on Monday.")
    p2 = db.create_post("vice", "  Rooms ", " Room B12 ", link="https://example.com")
    posts = db.get_posts()
    assert [p["id"] for p in posts] == [p2, p1]
    assert posts[0]["title"] == "Rooms"
    assert posts[0]["content"] == "Room B12"
    assert posts[0]["link"] == "https://example.com"
    assert posts[1]["author"] == "dean"
    assert posts[1]["author_name"] == "Dora Dean"
    assert posts[1]["link"] is None
    assert [p["id"] for p in db.get_posts(author="dean")] == [p1]


def test_post_checks(tmpdir) -> None:
    db = _db_with_deans(tmpdir)
    with raises(ContestValidationError):
        db.create_post("tina", "Hello", "From a teacher")
    with raises(ContestNotFound):
        db.create_post("nobody", "Hello", "?")
    with raises(ContestValidationError):
        db.create_post("dean", "   ", "no title")
    with raises(ContestValidationError):
        db.create_post("dean", "x" * 201, "title too long")
    with raises(ContestValidationError):
        db.create_post("dean", "No content", "")
    db.create_post("dean", "x" * 200, "longest title")
    assert len(db.get_posts()) == 1


def test_delete_post(tmpdir) -> None:
    db = _db_with_deans(tmpdir)
    p = db.create_post("dean", "Oops", "Wrong date")
    db.delete_post(p)
    assert db.get_posts() == []
    with raises(ContestNotFound):
        db.delete_post(p)


def test_author_of_posts_cannot_be_deleted(tmpdir) -> None:
    db = _db_with_deans(tmpdir)
    p = db.create_post("dean", "Welcome", "Good luck to all")
    with raises(ContestNotEligible):
        db.deleteUser("dean")
    db.delete_post(p)
    db.deleteUser("dean")
    assert not db.doesUserExist("dean")

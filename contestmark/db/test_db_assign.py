# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

from pathlib import Path

from pytest import raises

from contestmark.contestmark_exceptions import (
    ContestConflict,
    ContestNotEligible,
    ContestNotFound,
    ContestValidationError,
)
from contestmark.db import ContestDB


def _setup_contest(tmpdir):
    db = ContestDB(Path(tmpdir) / "test.db")
    for t in ("tina", "tom", "tara"):
        db.createUser(t, "hash", "teacher", email=f"{t}@example.com")
    db.createUser("cara", "hash", "candidate", email="cara@example.com")
    db.createUser("prez", "hash", "president")
    db.create_module("Algebra")
    db.create_module("Analysis")
    return db


def test_module_and_copy_creation(tmpdir) -> None:
    db = _setup_contest(tmpdir)
    c = db.create_copy("cara", "Algebra")
    copy = db.get_copy(c)
    assert copy.candidate.name == "cara"
    assert copy.module.name == "Algebra"
    assert copy.mark1 is None and copy.teacher1 is None


def test_module_errors(tmpdir) -> None:
    db = _setup_contest(tmpdir)
    with raises(ContestConflict):
        db.create_module("Algebra")
    with raises(ContestValidationError):
        db.create_module("   ")


def test_copy_errors(tmpdir) -> None:
    db = _setup_contest(tmpdir)
    db.create_copy("cara", "Algebra")
    with raises(ContestConflict):
        db.create_copy("cara", "Algebra")
    with raises(ContestNotFound):
        db.create_copy("cara", "Topology")
    with raises(ContestNotFound):
        db.create_copy("nobody", "Algebra")
    with raises(ContestValidationError):
        db.create_copy("tina", "Algebra")
    with raises(ContestNotFound):
        db.get_copy(9999)


def test_unassigned_listing(tmpdir) -> None:
    db = _setup_contest(tmpdir)
    c1 = db.create_copy("cara", "Algebra")
    c2 = db.create_copy("cara", "Analysis")
    assert [r["copy"] for r in db.get_unassigned_copies()] == [c1, c2]
    db.assign_primary_graders(c1, "tina", "tom")
    rows = db.get_unassigned_copies()
    assert [r["copy"] for r in rows] == [c2]
    assert rows[0]["state"] == "unassigned"
    assert rows[0]["candidate"] == "cara"


def test_assign_graders(tmpdir) -> None:
    db = _setup_contest(tmpdir)
    c = db.create_copy("cara", "Algebra")
    t1, t2 = db.assign_primary_graders(c, "tina", "tom")
    assert (t1.name, t2.name) == ("tina", "tom")
    copy = db.get_copy(c)
    assert copy.teacher1.name == "tina"
    assert copy.teacher2.name == "tom"
    assert copy.state().value == "awaiting_marks"


def test_assign_graders_errors(tmpdir) -> None:
    db = _setup_contest(tmpdir)
    c = db.create_copy("cara", "Algebra")
    with raises(ContestValidationError):
        db.assign_primary_graders(c, "tina", "tina")
    with raises(ContestValidationError):
        db.assign_primary_graders(c, "tina", "prez")
    with raises(ContestNotFound):
        db.assign_primary_graders(c, "tina", "nobody")
    with raises(ContestNotFound):
        db.assign_primary_graders(9999, "tina", "tom")
    db.disableUser("tom")
    with raises(ContestValidationError):
        db.assign_primary_graders(c, "tina", "tom")
    assert db.get_copy(c).teacher1 is None


def test_assign_graders_only_once(tmpdir) -> None:
    db = _setup_contest(tmpdir)
    c = db.create_copy("cara", "Algebra")
    db.assign_primary_graders(c, "tina", "tom")
    with raises(ContestNotEligible):
        db.assign_primary_graders(c, "tara", "tom")
    assert db.get_copy(c).teacher1.name == "tina"


def test_arbitrator(tmpdir) -> None:
    db = _setup_contest(tmpdir)
    c = db.create_copy("cara", "Algebra")
    db.assign_primary_graders(c, "tina", "tom")
    db.submit_mark(c, 8, grader="tina")
    db.submit_mark(c, 15, grader="tom")
    rows = db.get_copies_requiring_arbitration()
    assert [r["copy"] for r in rows] == [c]
    assert rows[0]["mark1"] == 8 and rows[0]["mark2"] == 15
    assert "final_mark" not in rows[0]
    t3 = db.assign_arbitrator(c, "tara")
    assert t3.name == "tara"
    # still disagreeing, but no longer waiting for an arbitrator
    assert db.get_copies_requiring_arbitration() == []
    assert db.get_copy(c).teacher3.name == "tara"


def test_arbitrator_errors(tmpdir) -> None:
    db = _setup_contest(tmpdir)
    c = db.create_copy("cara", "Algebra")
    db.assign_primary_graders(c, "tina", "tom")
    db.submit_mark(c, 14, grader="tina")
    with raises(ContestNotEligible):
        db.assign_arbitrator(c, "tara")
    db.submit_mark(c, 13, grader="tom")
    # marks agree
    with raises(ContestNotEligible):
        db.assign_arbitrator(c, "tara")

    c2 = db.create_copy("cara", "Analysis")
    db.assign_primary_graders(c2, "tina", "tom")
    db.submit_mark(c2, 2, grader="tina")
    db.submit_mark(c2, 19, grader="tom")
    with raises(ContestValidationError):
        db.assign_arbitrator(c2, "tina")
    with raises(ContestValidationError):
        db.assign_arbitrator(c2, "tom")
    db.assign_arbitrator(c2, "tara")
    with raises(ContestNotEligible):
        db.assign_arbitrator(c2, "tara")


def test_secret_codes(tmpdir) -> None:
    db = _setup_contest(tmpdir)
    db.createUser("carl", "hash", "candidate")
    assert [r["name"] for r in db.get_candidates_without_code()] == ["cara", "carl"]
    code, cref = db.assign_secret_code("cara")
    assert len(code) == 4
    assert cref.name == "cara"
    assert [r["name"] for r in db.get_candidates_without_code()] == ["carl"]
    assert db.get_secret_codes() == [
        {"code": code, "candidate": "cara", "full_name": "cara"}
    ]
    assert db.get_issued_codes() == {code}


def test_secret_code_never_reassigned(tmpdir) -> None:
    db = _setup_contest(tmpdir)
    code, _ = db.assign_secret_code("cara")
    with raises(ContestNotEligible):
        db.assign_secret_code("cara")
    assert db.get_issued_codes() == {code}


def test_secret_code_only_for_candidates(tmpdir) -> None:
    db = _setup_contest(tmpdir)
    with raises(ContestValidationError):
        db.assign_secret_code("tina")
    with raises(ContestNotFound):
        db.assign_secret_code("nobody")
    assert db.get_issued_codes() == set()


def test_copy_shows_secret_code(tmpdir) -> None:
    db = _setup_contest(tmpdir)
    c = db.create_copy("cara", "Algebra")
    assert db.get_copy(c).secret_code is None
    code, _ = db.assign_secret_code("cara")
    assert db.get_copy(c).secret_code == code
    assert db.get_unassigned_copies()[0]["secret_code"] == code

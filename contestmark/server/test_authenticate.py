# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

import uuid

from pytest import raises

from contestmark.server.authenticate import Authority
from contestmark.server.authenticate import basic_username_check
from contestmark.server.authenticate import basic_user_details_check


def test_usernames():
    assert basic_username_check("ada")[0]
    assert basic_username_check("teacher3")[0]
    assert not basic_username_check("ab")[0]
    assert not basic_username_check("3teacher")[0]
    assert not basic_username_check("ada lovelace")[0]
    assert not basic_username_check("a" * 101)[0]


def test_user_details():
    assert basic_user_details_check("ada", "enigma42")[0]
    r, msg = basic_user_details_check("ada", "short")
    assert not r and "short" in msg
    assert not basic_user_details_check("adalovelace", "adalovelace")[0]
    assert basic_user_details_check("ada", "enigma42", email="ada@example.com")[0]
    r, msg = basic_user_details_check("ada", "enigma42", email="ada-at-example")
    assert not r and "email" in msg


def test_password_hash():
    a = Authority(None)
    h = a.create_password_hash("enigma42")
    assert h != "enigma42"
    assert a.check_password("enigma42", h)
    assert not a.check_password("enigma43", h)
    assert not a.check_password("enigma42", None)
    assert not a.check_password(None, h)


def test_token_roundtrip():
    a = Authority(None)
    client, stored = a.create_token()
    assert client != stored
    assert a.validate_token(client, stored)
    other, _ = a.create_token()
    assert a.validate_token(other, stored) is False
    assert a.validate_token(client, None) is False


def test_malformed_tokens():
    a = Authority(None)
    _, stored = a.create_token()
    assert a.validate_token("not hex", stored) is None
    assert a.validate_token("f" * 65, stored) is None
    assert a.validate_token(42, stored) is None


def test_master_token_survives_restart():
    mt = uuid.uuid4().hex
    a = Authority(mt)
    assert a.get_master_token() == mt
    client, stored = a.create_token()
    b = Authority(mt)
    assert b.validate_token(client, stored)
    c = Authority(None)
    assert not c.validate_token(client, stored)


def test_bad_master_token():
    with raises(ValueError):
        Authority("deadbeef")

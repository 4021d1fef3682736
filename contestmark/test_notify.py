# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

import smtplib
import threading

from pytest import raises

from contestmark.contestmark_exceptions import ContestTransportError
from contestmark.notify import Notifier, render


def test_render_results() -> None:
    subject, body = render(
        "results_published", {"name": "Ada", "value": 16.0, "accepted": True}
    )
    assert "Results" in subject
    assert "Dear Ada" in body
    assert "16.00/20" in body
    assert "Status: Accepted" in body


def test_render_results_not_accepted() -> None:
    _, body = render(
        "results_published", {"name": "Ada", "value": 9.5, "accepted": False}
    )
    assert "Not Accepted" in body


def test_render_code() -> None:
    subject, body = render("secret_code_assigned", {"name": "Ada", "code": "X7Q2"})
    assert "Secret Code: X7Q2" in body


def test_render_unknown_kind() -> None:
    with raises(ValueError):
        render("birthday", {"name": "Ada"})


def test_notify_without_smtp_only_logs(caplog) -> None:
    caplog.set_level("INFO", logger="notify")
    n = Notifier()
    assert n.notify("ada@example.com", "teacher_assigned", {"name": "Ada"})
    assert "ada@example.com" in caplog.text


def test_notify_no_recipient() -> None:
    n = Notifier()
    assert not n.notify("", "teacher_assigned", {"name": "Ada"})
    assert not n.notify(None, "teacher_assigned", {"name": "Ada"})


class _BrokenSMTP:
    def __init__(self, *args, **kwargs):
        raise ConnectionRefusedError("nobody home")


def test_transport_failure_is_not_raised(monkeypatch) -> None:
    monkeypatch.setattr(smtplib, "SMTP", _BrokenSMTP)
    n = Notifier(smtp_host="mail.example.com")
    with raises(ContestTransportError):
        n.deliver("ada@example.com", "hi", "hello")
    assert not n.notify("ada@example.com", "teacher_assigned", {"name": "Ada"})


class _RecordingSMTP:
    sent = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False

    def send_message(self, msg):
        self.sent.append(msg)


def test_notify_sends_email(monkeypatch) -> None:
    monkeypatch.setattr(smtplib, "SMTP", _RecordingSMTP)
    n = Notifier.from_server_info(
        {"smtp_host": "mail.example.com", "smtp_from": "contest@example.com"}
    )
    assert n.smtp_port == 25
    assert n.notify(
        "ada@example.com", "secret_code_assigned", {"name": "Ada", "code": "AB12"}
    )
    (msg,) = _RecordingSMTP.sent
    assert msg["To"] == "ada@example.com"
    assert msg["From"] == "contest@example.com"
    assert "AB12" in msg.get_content()


class _SlowSMTP(_RecordingSMTP):
    sent = []
    gate = threading.Event()

    def __init__(self, host, port, timeout=None):
        assert self.gate.wait(timeout=5)
        super().__init__(host, port, timeout=timeout)


def test_post_does_not_wait_for_smtp(monkeypatch) -> None:
    monkeypatch.setattr(smtplib, "SMTP", _SlowSMTP)
    n = Notifier(smtp_host="mail.example.com")
    try:
        fut = n.post("ada@example.com", "teacher_assigned", {"name": "Ada"})
        # still stuck connecting, but we got control back
        assert not fut.done()
        assert _SlowSMTP.sent == []
        _SlowSMTP.gate.set()
        assert fut.result(timeout=5)
    finally:
        _SlowSMTP.gate.set()
        n.shutdown()
    (msg,) = _SlowSMTP.sent
    assert msg["To"] == "ada@example.com"


def test_post_without_smtp_logs_right_away(caplog) -> None:
    caplog.set_level("INFO", logger="notify")
    n = Notifier()
    assert n.post("ada@example.com", "teacher_assigned", {"name": "Ada"})
    assert "ada@example.com" in caplog.text
    n.shutdown()
    n.shutdown()

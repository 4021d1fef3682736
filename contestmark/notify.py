# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

"""Email notifications to teachers and candidates.

Notifications are fire-and-forget: a failure to deliver is logged and
reported by a False return value, but never raised.  The server hands
them over with `Notifier.post`, which sends by SMTP from a worker
thread, so that a slow or broken mail server cannot hold up the event
loop while assigning, marking or publishing.
"""

from concurrent.futures import ThreadPoolExecutor
from email.message import EmailMessage
import logging
import smtplib

from contestmark.contest_rules import MAX_MARK
from contestmark.contestmark_exceptions import ContestTransportError


log = logging.getLogger("notify")


def _teacher_assigned(payload):
    subject = "New Examination Papers Assigned"
    body = f"""Dear {payload['name']},

You have been assigned {payload.get('copies', 1)} examination paper(s) to grade.

Please log into the system to access and grade the assigned papers.

Best regards,
Examination Committee
"""
    return subject, body


def _secret_code_assigned(payload):
    subject = "Secret Code Assigned - Examination System"
    body = f"""Dear {payload['name']},

Your secret code for anonymous examination has been assigned.

Secret Code: {payload['code']}

Please keep this code confidential.  It will be used to identify your
examination papers anonymously.

Important: Do not share this code with anyone.

Best regards,
Examination Committee
"""
    return subject, body


def _results_published(payload):
    subject = "Examination Results Published"
    status = "Accepted" if payload["accepted"] else "Not Accepted"
    body = f"""Dear {payload['name']},

Your examination results have been published.

Final Mark: {payload['value']:.2f}/{MAX_MARK:g}
Status: {status}

You can view detailed results by logging into the system.

Best regards,
Examination Committee
"""
    return subject, body


templates = {
    "teacher_assigned": _teacher_assigned,
    "secret_code_assigned": _secret_code_assigned,
    "results_published": _results_published,
}


def render(kind, payload):
    """Build the subject and body of a notification.

    Args:
        kind (str): one of the keys of `templates`.
        payload (dict): values for the template, always including "name".

    Returns:
        tuple: `(subject, body)`.

    Raises:
        ValueError: no such kind of notification.
    """
    try:
        template = templates[kind]
    except KeyError:
        raise ValueError(f'No such notification "{kind}"') from None
    return template(payload)


class Notifier:
    """Send notifications by SMTP, or just log them if no SMTP host is set."""

    def __init__(self, smtp_host=None, smtp_port=25, sender="noreply@localhost"):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.sender = sender
        self._executor = None
        if smtp_host:
            self._executor = ThreadPoolExecutor(
                max_workers=2, thread_name_prefix="notify"
            )

    @classmethod
    def from_server_info(cls, server_info):
        return cls(
            smtp_host=server_info.get("smtp_host"),
            smtp_port=server_info.get("smtp_port", 25),
            sender=server_info.get("smtp_from", "noreply@localhost"),
        )

    def deliver(self, recipient, subject, body):
        """Hand one message to the mail transport.

        Raises:
            ContestTransportError: the transport failed.
        """
        if not self.smtp_host:
            log.info('Email to "%s": "%s"\n%s', recipient, subject, body)
            return
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = recipient
        msg["Subject"] = subject
        msg.set_content(body)
        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=10) as s:
                s.send_message(msg)
        except (OSError, smtplib.SMTPException) as e:
            raise ContestTransportError(f"Could not email {recipient}: {e}") from e

    def notify(self, recipient, kind, payload):
        """Send a notification, without ever failing the caller.

        Args:
            recipient (str): an email address.
            kind (str): see `templates`.
            payload (dict): template values.

        Returns:
            bool: True if the message was handed over, False otherwise.
        """
        if not recipient:
            log.warning('No email address for "%s": not sending %s', payload, kind)
            return False
        subject, body = render(kind, payload)
        try:
            self.deliver(recipient, subject, body)
        except ContestTransportError as e:
            log.warning("Notification %s failed: %s", kind, e)
            return False
        log.debug('Sent %s notification to "%s"', kind, recipient)
        return True

    def post(self, recipient, kind, payload):
        """Queue a notification and return at once.

        With an SMTP host the message is sent by a worker thread;
        otherwise logging it is quick and done right away.

        Returns:
            concurrent.futures.Future/bool: resolving to, or being, the
            result of `notify`.
        """
        if self._executor is None:
            return self.notify(recipient, kind, payload)
        return self._executor.submit(self.notify, recipient, kind, payload)

    def shutdown(self, wait=True):
        """Stop taking notifications, by default sending the queued ones first."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

"""Passwords and tokens: who is the acting user."""

import logging
import re
import uuid

from passlib.context import CryptContext


_email_re = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")


def basic_username_check(username):
    """Sanity check for potential usernames.

    Arguments:
        username (str)

    Returns:
        tuple: (True, "") if valid, (False, msg) otherwise, where msg
            is a string explaining why not.
    """
    if len(username) < 3:
        return False, "Username too short, should be at least 3 chars"
    if len(username) > 100:
        return False, "Username too long, should be at most 100 chars"
    if not (username.isalnum() and username[0].isalpha()):
        return False, "Username should be alphanumeric and start with a letter"
    return True, ""


def basic_email_check(email):
    """Is this plausibly an email address? Same return form as the others."""
    if not _email_re.match(email.strip()):
        return False, f'"{email}" does not look like an email address'
    return True, ""


def basic_user_details_check(username, password, *, email=None):
    """Sanity check for the details of a new account.

    Arguments:
        username (str)
        password (str)

    Keyword Arguments:
        email (str/None): checked for plausible form if given.

    Returns:
        tuple: (True, "") if valid, (False, msg) otherwise, where msg
            is a string explaining why not.
    """
    r = basic_username_check(username)
    if not r[0]:
        return r
    if len(password) < 6:
        return False, "Password too short, should be at least 6 chars"
    if password == username:
        return False, "Password is too close to the username"
    if email is not None:
        return basic_email_check(email)
    return True, ""


class Authority:
    """A class to do all our authentication - passwords and tokens."""

    def __init__(self, masterToken):
        """Set up cryptocontext and the master token used to store tokens."""
        self.ctx = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")
        # is hex string of uuid4
        self.masterToken = self.build_master_token(masterToken)
        # as an int for xor-ing
        self.mti = int(self.masterToken, 16)

    def build_master_token(self, token):
        """Creates a new masterToken or validates existing masterToken.

        Arguments:
            token (str/None): Current masterToken, if None, a new one is created.

        Returns:
            str: a valid masterToken.

        Raises:
            ValueError: invalid token.
        """
        log = logging.getLogger("auth")
        if token is None:
            log.info("No master token given, creating one")
            return uuid.uuid4().hex
        try:
            masterToken = uuid.UUID(token).hex
        except ValueError as e:
            raise ValueError(f"Supplied master token not valid UUID: {e}") from None
        log.info("Supplied master token is valid, using it.")
        return masterToken

    def get_master_token(self):
        return self.masterToken

    def check_password(self, password, expected_hash):
        """Check the password against expected hashed password.

        Arguments:
            password (str): password to check.
            expected_hash (str/None): hashed password on file or None
                if we have no such user on file.

        Returns:
            bool: True on match, False otherwise.
        """
        if expected_hash is None:
            return False
        if not isinstance(password, str):
            password = ""
        return self.ctx.verify(password, expected_hash)

    def create_token(self):
        """Create a token for a validated user.

        Returns:
            list: `[clientToken, storageToken]`, the hex token for the
            client and the xor'd version we store in the database.
        """
        clientToken = uuid.uuid4().hex
        storageToken = hex(int(clientToken, 16) ^ self.mti)
        return [clientToken, storageToken]

    def validate_token(self, clientToken, stored_token):
        """Validates a given token against the storageToken.

        Arguments:
            clientToken (str): The token, a hex string provided by the
                client.  This may be untrusted unsanitized input.
            stored_token (str/None): The token we are checking against.

        Returns:
            bool/None: True if validated, False if not matching
            (including when nothing is stored), None if the token was
            malformed.
        """
        if not isinstance(clientToken, str):
            return None
        # should not be significantly longer than UUID's 32 hex digits
        if len(clientToken) > 64:
            return None
        try:
            clientTokenInt = int(clientToken, 16)
        except ValueError:
            return None
        return hex(clientTokenInt ^ self.mti) == stored_token

    def basic_user_details_check(self, username, password, *, email=None):
        return basic_user_details_check(username, password, email=email)

    def create_password_hash(self, password):
        """Creates a hash of a string password.

        Arguments:
            password (str)

        Returns:
            str: Hashed password.
        """
        return self.ctx.hash(password)

# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

import logging

from contestmark.contest_rules import ROLES
from contestmark.server.authenticate import basic_email_check

log = logging.getLogger("servUI")


def validate(self, user, token):
    """Check the user's token is valid.

    Returns:
        bool
    """
    try:
        dbToken = self.DB.getUserToken(user)
    except ValueError:
        log.warning(f'User "{user}" tried a token but we have no such user!')
        return False
    if not dbToken:
        log.info(f'User "{user}" tried a token but they are not logged in')
        return False
    r = self.authority.validate_token(token, dbToken)
    # gives None/False/True
    if r is None:
        log.warning(
            f'User "{user}" tried a malformed token: client bug? malicious probing?'
        )
    elif not r:
        log.info(f'User "{user}" tried to use a stale or invalid token')
    return bool(r)


def checkPassword(self, user, password):
    """Does user's password match the hashed one on file?"""
    hashed_pwd = self.DB.getUserPasswordHash(user)
    return self.authority.check_password(password, hashed_pwd)


def giveUserToken(self, user, password, remote_ip):
    """Verify a user's password and give them back a token for quicker future actions.

    returns:
        tuple: `(True, token, role)` on success, `(False, code, user_readable)`
        on failure.  Here `code` can be one of the strings "NotAuth",
        "Disabled", "HasToken" and `user_readable` is a longer string
        appropriate for an user-centred error message.
    """
    if not self.checkPassword(user, password):
        log.warning(
            'Invalid password login attempt by "{}" from {}'.format(user, remote_ip)
        )
        return (False, "NotAuth", "The name / password pair is not authorised")

    if not self.DB.isUserEnabled(user):
        log.info('User "{}" logged in but account is disabled'.format(user))
        return (
            False,
            "Disabled",
            "User login has been disabled. Contact your administrator?",
        )

    if self.DB.userHasToken(user):
        log.debug('User "{}" already has token'.format(user))
        return (
            False,
            "HasToken",
            "User already has token: perhaps logged in elsewhere or previous session crashed?",
        )
    # give user a token, and store the xor'd version.
    [clientToken, storageToken] = self.authority.create_token()
    self.DB.setUserToken(user, storageToken)
    log.info('Authorising user "{}" from {}'.format(user, remote_ip))
    return (True, clientToken, self.DB.getUserRole(user))


def createUser(self, username, password, role, email, first_name, last_name):
    """Create a new account.

    Returns:
        list: `[True, True]` or `[False, msg]` with a reason.
    """
    r, msg = self.authority.basic_user_details_check(username, password, email=email)
    if not r:
        return [False, f"User details fail basic checks: {msg}"]
    if role not in ROLES:
        return [False, f'Unknown role "{role}", expected one of {", ".join(ROLES)}']
    if self.DB.doesUserExist(username):
        return [False, "User already exists."]

    passwordHash = self.authority.create_password_hash(password)
    if self.DB.createUser(
        username,
        passwordHash,
        role,
        email=email.strip().lower(),
        first_name=first_name.strip(),
        last_name=last_name.strip(),
    ):
        return [True, True]

    return [False, "User creation error."]


def updateUser(self, username, role, email, first_name, last_name):
    """Change the role, email and names of an account.

    Returns:
        list: `[True, True]` or `[False, msg]` with a reason.

    Raises:
        ContestNotFound, ContestNotEligible: see `ContestDB.updateUser`.
    """
    r, msg = basic_email_check(email)
    if not r:
        return [False, msg]
    if role not in ROLES:
        return [False, f'Unknown role "{role}", expected one of {", ".join(ROLES)}']
    self.DB.updateUser(
        username,
        role=role,
        email=email.strip().lower(),
        first_name=first_name.strip(),
        last_name=last_name.strip(),
    )
    return [True, True]


def deleteUser(self, username):
    self.DB.deleteUser(username)


def setUserEnable(self, user, enableFlag):
    if enableFlag:
        self.DB.enableUser(user)
    else:
        self.DB.disableUser(user)


def getUserList(self):
    return self.DB.getUserList()


def closeUser(self, user):
    """Client is closing down their app, so remove the authorisation token"""
    log.info("Revoking auth token from user {}".format(user))
    self.DB.clearUserToken(user)

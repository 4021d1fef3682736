# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

from datetime import datetime, timezone
import logging

import peewee as pw

from contestmark.contest_rules import ROLES
from contestmark.contestmark_exceptions import (
    ContestNotEligible,
    ContestNotFound,
    ContestValidationError,
)
from contestmark.db.tables import User, SecretCode, Copy, Result, Post

log = logging.getLogger("DB")


def createUser(
    self, uname, passwordHash, role, *, email=None, first_name="", last_name=""
):
    """Create a new user.

    Returns:
        bool: True if created, False if the name is already taken.

    Raises:
        ContestValidationError: unknown role.
    """
    if role not in ROLES:
        raise ContestValidationError(f'Unknown role "{role}", expected one of {ROLES}')
    try:
        User.create(
            name=uname,
            password=passwordHash,
            role=role,
            email=email,
            first_name=first_name,
            last_name=last_name,
            last_activity=datetime.now(timezone.utc),
            last_action="Created",
        )
    except pw.IntegrityError as e:
        log.error('Create User "%s" error - %s', uname, e)
        return False
    log.info('Created %s "%s"', role, uname)
    return True


def doesUserExist(self, uname):
    return User.get_or_none(name=uname) is not None


def get_user_ref(self, uname, *, role=None):
    """Find a user, optionally insisting on their role.

    Raises:
        ContestNotFound: no such user.
        ContestValidationError: the user does not have that role.
    """
    uref = User.get_or_none(name=uname)
    if uref is None:
        raise ContestNotFound(f'No such user "{uname}"')
    if role is not None and uref.role != role:
        raise ContestValidationError(f'User "{uname}" is a {uref.role}, not a {role}')
    return uref


def getUserRole(self, uname):
    uref = User.get_or_none(name=uname)
    if uref is None:
        return None
    return uref.role


def setUserPasswordHash(self, uname, passwordHash):
    uref = User.get_or_none(name=uname)
    if uref is None:
        return False
    with self._db.atomic():
        uref.password = passwordHash
        uref.last_activity = datetime.now(timezone.utc)
        uref.last_action = "Password set"
        uref.save()
    return True


def getUserPasswordHash(self, uname):
    uref = User.get_or_none(name=uname)
    if uref is None:
        return None
    return uref.password


def isUserEnabled(self, uname):
    uref = User.get_or_none(name=uname)
    if uref is None:
        return False
    return uref.enabled


def _set_enabled(uname, flag):
    uref = User.get_or_none(name=uname)
    if uref is None:
        raise ContestNotFound(f'No such user "{uname}"')
    uref.enabled = flag
    uref.save()
    log.info('User "%s" %s', uname, "enabled" if flag else "disabled")


def enableUser(self, uname):
    with self._db.atomic():
        _set_enabled(uname, True)


def disableUser(self, uname):
    with self._db.atomic():
        _set_enabled(uname, False)
        # a disabled user may not keep their token
        User.update(token=None).where(User.name == uname).execute()


def setUserToken(self, uname, token):
    uref = User.get_or_none(name=uname)
    if uref is None:
        return False
    with self._db.atomic():
        uref.token = token
        uref.last_activity = datetime.now(timezone.utc)
        uref.last_action = "Log on"
        uref.save()
    return True


def clearUserToken(self, uname):
    uref = User.get_or_none(name=uname)
    if uref is None:
        return False
    with self._db.atomic():
        uref.token = None
        uref.last_activity = datetime.now(timezone.utc)
        uref.last_action = "Log off"
        uref.save()
    return True


def getUserToken(self, uname):
    """The stored token of a user, or None if they are not logged in.

    Raises:
        ValueError: no such user.
    """
    uref = User.get_or_none(name=uname)
    if uref is None:
        raise ValueError(f'No such user "{uname}"')
    return uref.token


def userHasToken(self, uname):
    uref = User.get_or_none(name=uname)
    if uref is None:
        return False
    return uref.token is not None


def getUserList(self):
    return [
        {
            "name": uref.name,
            "role": uref.role,
            "email": uref.email,
            "full_name": uref.full_name,
            "enabled": uref.enabled,
            "logged_in": uref.token is not None,
            "last_action": uref.last_action,
        }
        for uref in User.select().order_by(User.role, User.name)
    ]


def getTeachers(self):
    return [
        {"name": uref.name, "full_name": uref.full_name}
        for uref in User.select()
        .where(User.role == "teacher", User.enabled == True)  # noqa: E712
        .order_by(User.name)
    ]


def _contest_records(uref):
    """Does the contest refer to this user anywhere?"""
    copies = Copy.select().where(
        (Copy.candidate == uref)
        | (Copy.teacher1 == uref)
        | (Copy.teacher2 == uref)
        | (Copy.teacher3 == uref)
        | (Copy.marker1 == uref)
        | (Copy.marker2 == uref)
    )
    return (
        copies.exists()
        or SecretCode.select().where(SecretCode.candidate == uref).exists()
        or Result.select().where(Result.candidate == uref).exists()
        or Post.select().where(Post.author == uref).exists()
    )


def updateUser(self, uname, *, role, email, first_name, last_name):
    """Change the details of an account.

    Raises:
        ContestNotFound: no such user.
        ContestValidationError: unknown role.
        ContestNotEligible: a change of role for someone the contest
            already refers to, as a candidate, grader or author.
    """
    if role not in ROLES:
        raise ContestValidationError(f'Unknown role "{role}", expected one of {ROLES}')
    with self._db.atomic():
        uref = self.get_user_ref(uname)
        if role != uref.role and _contest_records(uref):
            raise ContestNotEligible(
                f'"{uname}" already takes part in the contest as a {uref.role}:'
                " their role cannot change"
            )
        uref.role = role
        uref.email = email
        uref.first_name = first_name
        uref.last_name = last_name
        uref.last_action = "Details updated"
        uref.last_activity = datetime.now(timezone.utc)
        uref.save()
    log.info('Updated %s "%s"', role, uname)


def deleteUser(self, uname):
    """Remove an account the contest does not refer to.

    Raises:
        ContestNotFound: no such user.
        ContestNotEligible: the user has copies, marks, a code, a
            result or posts: disable them instead.
    """
    with self._db.atomic():
        uref = self.get_user_ref(uname)
        if _contest_records(uref):
            raise ContestNotEligible(
                f'"{uname}" takes part in the contest: disable them instead'
            )
        uref.delete_instance()
    log.info('Deleted user "%s"', uname)

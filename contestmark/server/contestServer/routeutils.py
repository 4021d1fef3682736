# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

"""Misc routing utilities"""

import logging
import functools
from aiohttp import web

from contestmark.contestmark_exceptions import (
    ContestConflict,
    ContestExhaustedCodeSpace,
    ContestNoPermission,
    ContestNotEligible,
    ContestNotFound,
    ContestValidationError,
)

log = logging.getLogger("routes")


def validate_required_fields(user_login_info, user_login_required_fields):
    """Check that input dict has (and only has) expected fields.

    Arguments:
        user_login_info (dict): A user's login info.
        user_login_required_fields (iterable): the required fields.

    Returns:
        bool: True iff the fields are present.
    """
    return set(user_login_info.keys()) == set(user_login_required_fields)


def log_request(request_name, request):
    """Logs the requests done by the server.

    Arguments:
        request_name (str): Name of the request function.
        request (aiohttp.web_request.Request): an `aiohttp` request object.
    """
    log.info("{} {} {}".format(request_name, request.method, request.rel_url))


async def _json_or_bad_request(request):
    try:
        data = await request.json()
    except ValueError:
        raise web.HTTPBadRequest(reason="request body must be JSON") from None
    if not isinstance(data, dict):
        raise web.HTTPBadRequest(reason="request body must be a JSON object")
    return data


def authenticate_by_token_required_fields(fields):
    """Decorator for field validation, authentication by token, and logging.

    The decorated function raises `web.HTTPBadRequest` (400) if the
    input request does not contain exactly the fields
    `Union(fields, ["user", "token"])` and `web.HTTPUnauthorized` (401)
    if the token does not match.

    Example
    -------
    ```
    @authenticate_by_token_required_fields(["bar", "baz"])
    def foo(zelf, data, request):
        return ...
    ```
    Here `data` is the result of `request.json()` and `request` is the
    original request (don't try to take data from it again!)

    Arguments:
        fields (iterable): The fields for this request.  `user` and
            `token` will be added to this list.

    Returns:
        function: a decorator wrapping the original with authentication.
    """
    fields = list(fields) + ["user", "token"]

    def _decorate(f):
        @functools.wraps(f)
        async def wrapped(zelf, request):
            log_request(f.__name__, request)
            data = await _json_or_bad_request(request)
            log.debug("{} validating fields {}".format(f.__name__, fields))
            if not validate_required_fields(data, fields):
                log.warning(
                    "%s: fields %s do not match expected %s",
                    f.__name__,
                    list(data.keys()),
                    fields,
                )
                raise web.HTTPBadRequest(
                    reason=f"fields {list(data.keys())} do not match expected {fields}"
                )
            if not zelf.server.validate(data["user"], data["token"]):
                log.warning(
                    '%s user "%s": login token could not be validated',
                    f.__name__,
                    data["user"],
                )
                raise web.HTTPUnauthorized(reason="login token could not be validated")
            log.info('%s authenticated "%s" via token', f.__name__, data["user"])
            return f(zelf, data, request)

        return wrapped

    return _decorate


def no_authentication_only_log_request(f):
    """Decorator for logging requests only.

    Arguments:
        f (function): a routing method associated with the server.

    Returns:
        function: the original wrapped with logging.
    """

    @functools.wraps(f)
    def wrapped(zelf, request):
        log_request(f.__name__, request)
        return f(zelf, request)

    return wrapped


def require_role(*roles):
    """Decorator for requiring the acting user to hold one of some roles.

    Use it below `@authenticate_by_token_required_fields`, as it needs
    the already-authenticated `data`.

    Arguments:
        roles (str): the acceptable roles, e.g., "president".

    Returns:
        function: a decorator raising `web.HTTPForbidden` for other users.
    """

    def _decorate(f):
        @functools.wraps(f)
        def wrapped(zelf, data, request):
            role = zelf.server.DB.getUserRole(data["user"])
            if role not in roles:
                log.warning(
                    '%s user "%s" (%s): tried to use a %s feature',
                    f.__name__,
                    data["user"],
                    role,
                    "/".join(roles),
                )
                raise web.HTTPForbidden(
                    reason=f"Only {' or '.join(roles)} users can do that"
                )
            return f(zelf, data, request)

        return wrapped

    return _decorate


def contest_errors_as_http(f):
    """Decorator to turn our exceptions into the matching HTTP errors.

    ========================= ====
    ContestValidationError    400
    ContestNoPermission       403
    ContestNotFound           404
    ContestNotEligible        409
    ContestConflict           409
    ContestExhaustedCodeSpace 500
    ========================= ====
    """

    @functools.wraps(f)
    def wrapped(zelf, data, request):
        try:
            return f(zelf, data, request)
        except ContestValidationError as e:
            raise web.HTTPBadRequest(reason=str(e)) from None
        except ContestNoPermission as e:
            raise web.HTTPForbidden(reason=str(e)) from None
        except ContestNotFound as e:
            raise web.HTTPNotFound(reason=str(e)) from None
        except (ContestNotEligible, ContestConflict) as e:
            raise web.HTTPConflict(reason=str(e)) from None
        except ContestExhaustedCodeSpace as e:
            log.error("%s: %s", f.__name__, e)
            raise web.HTTPInternalServerError(reason=str(e)) from None

    return wrapped


def int_or_bad_request(value, what):
    """Convert to int or raise a 400 error mentioning `what`."""
    try:
        return int(value)
    except (ValueError, TypeError):
        raise web.HTTPBadRequest(reason=f"{what} must be an integer") from None

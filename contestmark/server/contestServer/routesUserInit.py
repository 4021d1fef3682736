# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

from aiohttp import web

from .routeutils import authenticate_by_token_required_fields
from .routeutils import no_authentication_only_log_request
from .routeutils import validate_required_fields, log_request
from .routeutils import require_role, contest_errors_as_http
from .routeutils import log


class UserInitHandler:
    """The UserInit Handler interfaces between the HTTP API and the server itself.

    These routes handle logging in and out, and the admin's accounts.
    """

    def __init__(self, contestServer):
        self.server = contestServer

    def _version_string(self):
        return "Contestmark server version {} with API {}".format(
            self.server.Version, self.server.API
        )

    # @routes.get("/Version")
    @no_authentication_only_log_request
    async def version(self, request):
        return web.Response(text=self._version_string(), status=200)

    # @routes.put("/users/{user}")
    async def giveUserToken(self, request):
        """Log in: trade a password for a token.

        Returns:
            aiohttp.json_response: 200 and `{"token", "role"}`, or 400
            for malformed requests, 401 for bad passwords or disabled
            accounts and 409 if already logged in.
        """
        log_request("giveUserToken", request)
        ip = request.remote
        try:
            data = await request.json()
        except ValueError:
            return web.Response(status=400)
        if not isinstance(data, dict) or not validate_required_fields(
            data, ["user", "pw"]
        ):
            return web.Response(status=400)  # malformed request.
        if data["user"] != request.match_info["user"]:
            return web.Response(status=400)  # malformed request.

        rmsg = self.server.giveUserToken(data["user"], data["pw"], ip)
        if rmsg[0]:
            return web.json_response({"token": rmsg[1], "role": rmsg[2]}, status=200)
        elif rmsg[1] == "HasToken":
            return web.json_response(rmsg[2], status=409)
        else:
            # various sorts of non-auth conflated: response has details
            return web.json_response(rmsg[2], status=401)

    # @routes.delete("/users/{user}")
    @authenticate_by_token_required_fields([])
    def closeUser(self, data, request):
        """User self-indicates they are logging out, revoke token.

        Returns:
            aiohttp.web.Response: 200 for success, 400 if a user tries
            to close another.
        """
        if data["user"] != request.match_info["user"]:
            raise web.HTTPBadRequest(reason="You cannot close other users")
        self.server.closeUser(data["user"])
        return web.Response(status=200)

    # @routes.get("/users")
    @authenticate_by_token_required_fields([])
    @require_role("admin")
    def getUserList(self, data, request):
        return web.json_response(self.server.getUserList(), status=200)

    # @routes.post("/authorisation/{user}")
    @authenticate_by_token_required_fields(
        ["password", "role", "email", "first_name", "last_name"]
    )
    @require_role("admin")
    def createUser(self, data, request):
        """Create a new account of any role.

        Returns:
            aiohttp.web.Response: 200, or 406 with a reason if the
            details are not acceptable.
        """
        theuser = request.match_info["user"]
        if not all(isinstance(v, str) for v in data.values()):
            raise web.HTTPBadRequest(reason="user details must be strings")
        ok, val = self.server.createUser(
            theuser,
            data["password"],
            data["role"],
            data["email"],
            data["first_name"],
            data["last_name"],
        )
        if not ok:
            log.info('Admin failed to create user "%s"', theuser)
            raise web.HTTPNotAcceptable(reason=val)
        log.info('Admin created new %s "%s"', data["role"], theuser)
        return web.Response(status=200)

    # @routes.put("/authorisation/{user}")
    @authenticate_by_token_required_fields(
        ["role", "email", "first_name", "last_name"]
    )
    @require_role("admin")
    @contest_errors_as_http
    def updateUser(self, data, request):
        """Change the role, email and names of an account.

        Returns:
            aiohttp.web.Response: 200, 404 for no such user, 406 with a
            reason if the details are not acceptable and 409 for a change
            of role of someone already taking part in the contest.
        """
        theuser = request.match_info["user"]
        fields = ("role", "email", "first_name", "last_name")
        if not all(isinstance(data[k], str) for k in fields):
            raise web.HTTPBadRequest(reason="user details must be strings")
        if theuser == data["user"] and data["role"] != "admin":
            raise web.HTTPBadRequest(reason="You cannot change your own role")
        ok, val = self.server.updateUser(theuser, *(data[k] for k in fields))
        if not ok:
            log.info('Admin failed to update user "%s"', theuser)
            raise web.HTTPNotAcceptable(reason=val)
        return web.Response(status=200)

    # @routes.delete("/authorisation/{user}")
    @authenticate_by_token_required_fields([])
    @require_role("admin")
    @contest_errors_as_http
    def deleteUser(self, data, request):
        theuser = request.match_info["user"]
        if theuser == data["user"]:
            raise web.HTTPBadRequest(reason="You cannot delete yourself")
        self.server.deleteUser(theuser)
        return web.Response(status=200)

    # @routes.put("/enable/{user}")
    @authenticate_by_token_required_fields([])
    @require_role("admin")
    @contest_errors_as_http
    def enableUser(self, data, request):
        theuser = request.match_info["user"]
        self.server.setUserEnable(theuser, True)
        return web.Response(status=200)

    # @routes.put("/disable/{user}")
    @authenticate_by_token_required_fields([])
    @require_role("admin")
    @contest_errors_as_http
    def disableUser(self, data, request):
        theuser = request.match_info["user"]
        if theuser == data["user"]:
            raise web.HTTPBadRequest(reason="You cannot disable yourself")
        self.server.setUserEnable(theuser, False)
        return web.Response(status=200)

    def setUpRoutes(self, router):
        router.add_get("/Version", self.version)
        router.add_put("/users/{user}", self.giveUserToken)
        router.add_delete("/users/{user}", self.closeUser)
        router.add_get("/users", self.getUserList)
        router.add_post("/authorisation/{user}", self.createUser)
        router.add_put("/authorisation/{user}", self.updateUser)
        router.add_delete("/authorisation/{user}", self.deleteUser)
        router.add_put("/enable/{user}", self.enableUser)
        router.add_put("/disable/{user}", self.disableUser)

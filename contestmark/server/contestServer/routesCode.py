# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

from aiohttp import web

from .routeutils import authenticate_by_token_required_fields
from .routeutils import require_role, contest_errors_as_http


class CodeHandler:
    """The dean's routes: anonymising candidates with secret codes."""

    def __init__(self, contestServer):
        self.server = contestServer

    # @routes.get("/codes")
    @authenticate_by_token_required_fields([])
    @require_role("dean")
    def getSecretCodes(self, data, request):
        """The secret codes issued so far and their candidates.

        Returns:
            aiohttp.web.json_response: list of dicts with keys
            `code`, `candidate`, `full_name`.
        """
        return web.json_response(self.server.getSecretCodes(), status=200)

    # @routes.get("/codes/pending")
    @authenticate_by_token_required_fields([])
    @require_role("dean")
    def getCandidatesWithoutCode(self, data, request):
        return web.json_response(self.server.getCandidatesWithoutCode(), status=200)

    # @routes.put("/codes/{candidate}")
    @authenticate_by_token_required_fields([])
    @require_role("dean")
    @contest_errors_as_http
    def assignSecretCode(self, data, request):
        """Issue a fresh secret code to a candidate.

        Returns:
            aiohttp.web.json_response: the code, or 404 for no such
            user, 400 if that user is not a candidate, 409 if they
            already have a code and 500 if no code is left to issue.
        """
        candidate = request.match_info["candidate"]
        code = self.server.assignSecretCode(candidate)
        return web.json_response(code, status=200)

    def setUpRoutes(self, router):
        router.add_get("/codes", self.getSecretCodes)
        router.add_get("/codes/pending", self.getCandidatesWithoutCode)
        router.add_put("/codes/{candidate}", self.assignSecretCode)

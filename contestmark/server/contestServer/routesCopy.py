# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

from aiohttp import web

from .routeutils import authenticate_by_token_required_fields
from .routeutils import require_role, contest_errors_as_http
from .routeutils import int_or_bad_request


class CopyHandler:
    """Routes for setting up the contest, grader assignment and results."""

    def __init__(self, contestServer):
        self.server = contestServer

    # @routes.post("/modules")
    @authenticate_by_token_required_fields(["module"])
    @require_role("admin", "president")
    @contest_errors_as_http
    def createModule(self, data, request):
        """Create a new module.

        Returns:
            aiohttp.web.json_response: the id of the module, or 400 for
            an empty name and 409 if the module already exists.
        """
        if not isinstance(data["module"], str):
            raise web.HTTPBadRequest(reason="module name must be a string")
        return web.json_response(self.server.createModule(data["module"]), status=200)

    # @routes.post("/copies")
    @authenticate_by_token_required_fields(["candidate", "module"])
    @require_role("admin", "president")
    @contest_errors_as_http
    def createCopy(self, data, request):
        """Create a new copy of a candidate in a module.

        Returns:
            aiohttp.web.json_response: the id of the copy, or 404 if no
            such candidate or module, 400 if the user is not a candidate,
            409 if the candidate already has a copy in that module.
        """
        copy_id = self.server.createCopy(data["candidate"], data["module"])
        return web.json_response(copy_id, status=200)

    # @routes.get("/copies/unassigned")
    @authenticate_by_token_required_fields([])
    @require_role("president")
    def getUnassignedCopies(self, data, request):
        return web.json_response(self.server.getUnassignedCopies(), status=200)

    # @routes.get("/copies/arbitration")
    @authenticate_by_token_required_fields([])
    @require_role("president")
    def getArbitrationCopies(self, data, request):
        return web.json_response(self.server.getArbitrationCopies(), status=200)

    # @routes.get("/copies/marked")
    @authenticate_by_token_required_fields([])
    @require_role("president")
    def getMarkedCopies(self, data, request):
        return web.json_response(self.server.getMarkedCopies(), status=200)

    # @routes.put("/copies/{copy}/graders")
    @authenticate_by_token_required_fields(["teacher1", "teacher2"])
    @require_role("president")
    @contest_errors_as_http
    def assignGraders(self, data, request):
        """Give an unassigned copy to two teachers.

        Returns:
            aiohttp.web.Response: 200, or 400 if the teachers are the
            same person or not teachers, 404 for no such copy or user,
            409 if the copy already has graders.
        """
        copy_id = int_or_bad_request(request.match_info["copy"], "copy")
        self.server.assignGraders(copy_id, data["teacher1"], data["teacher2"])
        return web.Response(status=200)

    # @routes.put("/copies/{copy}/arbitrator")
    @authenticate_by_token_required_fields(["teacher3"])
    @require_role("president")
    @contest_errors_as_http
    def assignArbitrator(self, data, request):
        """Give a copy with disagreeing marks to a third teacher.

        Returns:
            aiohttp.web.Response: 200, or 400 if the teacher already
            graded this copy, 404 for no such copy or user, 409 if the
            copy does not need arbitration.
        """
        copy_id = int_or_bad_request(request.match_info["copy"], "copy")
        self.server.assignArbitrator(copy_id, data["teacher3"])
        return web.Response(status=200)

    # @routes.put("/results")
    @authenticate_by_token_required_fields([])
    @require_role("president")
    def publishResults(self, data, request):
        """Publish every candidate whose copies are all resolved.

        Returns:
            aiohttp.web.json_response: how many candidates were
            published.  Publishing again publishes nobody new.
        """
        return web.json_response(self.server.publishResults(), status=200)

    # @routes.get("/results")
    @authenticate_by_token_required_fields([])
    def getResults(self, data, request):
        return web.json_response(self.server.getResults(), status=200)

    def setUpRoutes(self, router):
        router.add_post("/modules", self.createModule)
        router.add_post("/copies", self.createCopy)
        router.add_get("/copies/unassigned", self.getUnassignedCopies)
        router.add_get("/copies/arbitration", self.getArbitrationCopies)
        router.add_get("/copies/marked", self.getMarkedCopies)
        router.add_put("/copies/{copy}/graders", self.assignGraders)
        router.add_put("/copies/{copy}/arbitrator", self.assignArbitrator)
        router.add_put("/results", self.publishResults)
        router.add_get("/results", self.getResults)

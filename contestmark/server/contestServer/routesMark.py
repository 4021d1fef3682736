# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2023-2024 The Contestmark Project Developers

from aiohttp import web

from .routeutils import authenticate_by_token_required_fields
from .routeutils import require_role, contest_errors_as_http
from .routeutils import int_or_bad_request


class MarkHandler:
    """Routes for the teachers who grade copies."""

    def __init__(self, contestServer):
        self.server = contestServer

    # @routes.get("/MK/tasks")
    @authenticate_by_token_required_fields([])
    @require_role("teacher")
    @contest_errors_as_http
    def MgetAssignedCopies(self, data, request):
        """The copies assigned to this teacher.

        Copies are identified by their id and the candidate's secret
        code: the candidate's name is never sent to a grader.

        Returns:
            aiohttp.web.json_response: list of dicts with keys `copy`,
            `module`, `secret_code`, `grader`, `state`, `awaiting_mark`.
        """
        return web.json_response(
            self.server.MgetAssignedCopies(data["user"]), status=200
        )

    # @routes.put("/MK/marks")
    @authenticate_by_token_required_fields(["marks"])
    @require_role("teacher")
    @contest_errors_as_http
    def MsubmitMarks(self, data, request):
        """Send a batch of marks.

        The `marks` field is a list of `{"copy": int, "mark": float}`.
        Copies that already have all the marks they need, or that are
        not assigned to this teacher, are skipped.

        Returns:
            aiohttp.web.json_response: how many copies were updated, or
            400 if any of the marks is malformed, in which case nothing
            is recorded.
        """
        marks = data["marks"]
        if not isinstance(marks, list):
            raise web.HTTPBadRequest(reason="marks must be a list")
        rows = []
        for row in marks:
            if not isinstance(row, dict) or set(row.keys()) != {"copy", "mark"}:
                raise web.HTTPBadRequest(
                    reason='each mark must have exactly the keys "copy" and "mark"'
                )
            rows.append(
                {"copy": int_or_bad_request(row["copy"], "copy"), "mark": row["mark"]}
            )
        n = self.server.MsubmitMarks(data["user"], rows)
        return web.json_response(n, status=200)

    def setUpRoutes(self, router):
        router.add_get("/MK/tasks", self.MgetAssignedCopies)
        router.add_put("/MK/marks", self.MsubmitMarks)

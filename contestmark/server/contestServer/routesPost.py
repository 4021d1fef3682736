# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 The Contestmark Project Developers

from aiohttp import web

from .routeutils import authenticate_by_token_required_fields
from .routeutils import require_role, contest_errors_as_http, int_or_bad_request


class PostHandler:
    """Announcements: the dean writes them, everyone can read them."""

    def __init__(self, contestServer):
        self.server = contestServer

    # @routes.get("/posts")
    @authenticate_by_token_required_fields([])
    def getPosts(self, data, request):
        """All the announcements, newest first.

        Returns:
            aiohttp.web.json_response: list of dicts with keys `id`,
            `author`, `author_name`, `title`, `content`, `link` and
            `posted_at`.
        """
        return web.json_response(self.server.getPosts(), status=200)

    # @routes.get("/posts/mine")
    @authenticate_by_token_required_fields([])
    @require_role("dean")
    def getMyPosts(self, data, request):
        return web.json_response(self.server.getPosts(data["user"]), status=200)

    # @routes.post("/posts")
    @authenticate_by_token_required_fields(["title", "content", "link"])
    @require_role("dean")
    @contest_errors_as_http
    def createPost(self, data, request):
        """Post an announcement.  `link` can be null.

        Returns:
            aiohttp.web.json_response: the id of the new post, or 400 if
            the title or content is missing or too long.
        """
        if not isinstance(data["title"], str) or not isinstance(data["content"], str):
            raise web.HTTPBadRequest(reason="title and content must be strings")
        if data["link"] is not None and not isinstance(data["link"], str):
            raise web.HTTPBadRequest(reason="link must be a string or null")
        post_id = self.server.createPost(
            data["user"], data["title"], data["content"], data["link"]
        )
        return web.json_response(post_id, status=200)

    # @routes.delete("/posts/{post}")
    @authenticate_by_token_required_fields([])
    @require_role("dean")
    @contest_errors_as_http
    def deletePost(self, data, request):
        post_id = int_or_bad_request(request.match_info["post"], "post")
        self.server.deletePost(post_id)
        return web.Response(status=200)

    def setUpRoutes(self, router):
        router.add_get("/posts", self.getPosts)
        router.add_get("/posts/mine", self.getMyPosts)
        router.add_post("/posts", self.createPost)
        router.add_delete("/posts/{post}", self.deletePost)

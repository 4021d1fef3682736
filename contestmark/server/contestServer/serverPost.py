# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 The Contestmark Project Developers

"""Server side of the dean's announcements."""

from contestmark.misc_utils import datetime_to_json


def createPost(self, author, title, content, link=None):
    return self.DB.create_post(author, title, content, link)


def getPosts(self, author=None):
    posts = self.DB.get_posts(author=author)
    for row in posts:
        row["posted_at"] = datetime_to_json(row["posted_at"])
    return posts


def deletePost(self, post_id):
    self.DB.delete_post(post_id)

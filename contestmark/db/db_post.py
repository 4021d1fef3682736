# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 The Contestmark Project Developers

from datetime import datetime, timezone
import logging

from contestmark.contest_rules import MAX_POST_TITLE_LENGTH
from contestmark.contestmark_exceptions import ContestNotFound, ContestValidationError
from contestmark.db.tables import User, Post

log = logging.getLogger("DB")


def create_post(self, author, title, content, link=None):
    """Save a new announcement from the dean.

    Args:
        author (str): name of the dean posting it.
        title (str): non-empty, at most `MAX_POST_TITLE_LENGTH` chars.
        content (str): non-empty.
        link (str/None): an optional URL to go with it.

    Returns:
        int: the id of the new post.

    Raises:
        ContestNotFound: no such author.
        ContestValidationError: the author is not a dean, or the title
            or content are empty or too long.
    """
    aref = self.get_user_ref(author, role="dean")
    title = title.strip()
    content = content.strip()
    if not title or len(title) > MAX_POST_TITLE_LENGTH:
        raise ContestValidationError(
            f"Title is required, at most {MAX_POST_TITLE_LENGTH} characters"
        )
    if not content:
        raise ContestValidationError("Content is required")
    if link is not None:
        link = link.strip() or None
    pref = Post.create(
        author=aref,
        title=title,
        content=content,
        link=link,
        posted_at=datetime.now(timezone.utc),
    )
    log.info('Post %s "%s" by "%s"', pref.id, title, author)
    return pref.id


def get_posts(self, *, author=None):
    """Announcements, newest first, optionally only those of one author."""
    query = Post.select(Post, User).join(User)
    if author is not None:
        query = query.where(User.name == author)
    return [
        {
            "id": pref.id,
            "author": pref.author.name,
            "author_name": pref.author.full_name,
            "title": pref.title,
            "content": pref.content,
            "link": pref.link,
            "posted_at": pref.posted_at,
        }
        for pref in query.order_by(Post.posted_at.desc(), Post.id.desc())
    ]


def delete_post(self, post_id):
    """Remove an announcement.

    Raises:
        ContestNotFound: no such post.
    """
    pref = Post.get_or_none(Post.id == post_id)
    if pref is None:
        raise ContestNotFound(f"No such post {post_id}")
    pref.delete_instance()
    log.info("Deleted post %s", post_id)

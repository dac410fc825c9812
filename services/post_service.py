"""
Post and Feed Service.

This module defines the `PostService`, which manages feed posts and the likes
and comments embedded in each of them.

Key Components:
- Posts: `create_post`, `list_posts` (newest first), `get_post` and
  `delete_post` (author only).
- Likes: `like` / `unlike` toggle the caller's entry in a post's like list. A
  user appears in that list at most once.
- Comments: `add_comment` prepends a comment; `remove_comment` deletes exactly
  the comment with the requested id, and only for its author.

Architectural Design:
- Denormalized Snapshots: Posts and comments copy the author's name and avatar
  at write time. Later changes to the user are not reflected in old entries.
- Whole-List Writes: Embedded lists are rebuilt and reassigned on every change,
  then committed in the same session that performed the presence check.
"""

import logging
from typing import Any, Dict, List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from core.exceptions import (
    AlreadyLikedError,
    ForbiddenError,
    NotFoundError,
    NotLikedError,
)
from core.models import Comment, Like, Post, User, to_document
from core.validation import InputValidator

logger = logging.getLogger(__name__)


class PostService:
    """Service that manages posts, likes and comments"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_post(self, user_id: str, text: str) -> Post:
        """Create a post with a snapshot of the author's name and avatar"""
        text = InputValidator.validate_required("text", text, "Text is required")
        author = await self._require_user(user_id)

        post = Post(user_id=user_id, text=text, name=author.name, avatar=author.avatar)
        self.session.add(post)
        await self.session.commit()

        logger.info(f"User {user_id} created post {post.id}")
        return post

    async def list_posts(self) -> List[Post]:
        """All posts, newest first"""
        result = await self.session.exec(select(Post).order_by(Post.date.desc()))
        return list(result.all())

    async def get_post(self, post_id: str) -> Post:
        post = await self.session.get(Post, post_id)
        if post is None:
            raise NotFoundError("Post", "Post not found")
        return post

    async def delete_post(self, user_id: str, post_id: str) -> None:
        """Delete a post; only its author may do so"""
        post = await self.get_post(post_id)
        if post.user_id != user_id:
            logger.warning(f"User {user_id} tried to delete post {post_id} of {post.user_id}")
            raise ForbiddenError()

        await self.session.delete(post)
        await self.session.commit()
        logger.info(f"User {user_id} deleted post {post_id}")

    async def like(self, user_id: str, post_id: str) -> List[Dict[str, Any]]:
        """Add the caller's like; returns the updated like list"""
        post = await self.get_post(post_id)
        if any(like.get("user") == user_id for like in post.likes):
            raise AlreadyLikedError(post_id)

        post.likes = [to_document(Like(user=user_id))] + list(post.likes)
        await self._save(post)
        return post.likes

    async def unlike(self, user_id: str, post_id: str) -> List[Dict[str, Any]]:
        """Remove the caller's like; returns the updated like list"""
        post = await self.get_post(post_id)
        remaining = [like for like in post.likes if like.get("user") != user_id]
        if len(remaining) == len(post.likes):
            raise NotLikedError(post_id)

        post.likes = remaining
        await self._save(post)
        return post.likes

    async def add_comment(self, user_id: str, post_id: str, text: str) -> List[Dict[str, Any]]:
        """Prepend a comment; returns the updated comment list"""
        text = InputValidator.validate_required("text", text, "Text is required")
        post = await self.get_post(post_id)
        author = await self._require_user(user_id)

        comment = Comment(user=user_id, text=text, name=author.name, avatar=author.avatar)
        post.comments = [to_document(comment)] + list(post.comments)
        await self._save(post)

        logger.info(f"User {user_id} commented on post {post_id}")
        return post.comments

    async def remove_comment(
        self, user_id: str, post_id: str, comment_id: str
    ) -> List[Dict[str, Any]]:
        """Remove one comment by id; only its author may do so"""
        post = await self.get_post(post_id)
        comment = next((c for c in post.comments if c.get("id") == comment_id), None)
        if comment is None:
            raise NotFoundError("Comment", "Comment does not exist")
        if comment.get("user") != user_id:
            raise ForbiddenError()

        post.comments = [c for c in post.comments if c.get("id") != comment_id]
        await self._save(post)
        return post.comments

    async def _save(self, post: Post):
        self.session.add(post)
        await self.session.commit()

    async def _require_user(self, user_id: str) -> User:
        user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User", "User not found")
        return user

"""
Post service: business logic for the Post aggregate.

Design notes
------------
- The service builds and mutates ``Post`` entities and hands them to a
  ``PostRepository``; it never talks to a store directly.
- Errors are re-raised with added context but always as the same class
  (``PostError.with_context``), so callers can branch on the kind.
- Validation failures stop an operation before any repository write.
- Pagination defaults come from ``news_app.domain.pagination``, the same
  functions every repository applies on entry.
- Every method takes a keyword-only ``deadline`` (``time.monotonic()``
  instant) that is passed through to the repository untouched.
"""
from __future__ import annotations

import logging

from news_app.domain import Post, PostError, PostPage, StorageError, ValidationError
from news_app.domain.pagination import normalize_limit, normalize_page_window
from news_app.repositories.base import PostRepository


class PostService:

    def __init__(self, repository: PostRepository, logger: logging.Logger | None = None) -> None:
        self._repository = repository
        self._logger = logger or logging.getLogger(__name__)

    def _log_failure(self, action: str, exc: PostError) -> None:
        if isinstance(exc, StorageError):
            self._logger.warning("Failed to %s: %s", action, exc)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, title: str, content: str, *, deadline: float | None = None) -> Post:
        """
        Validate and persist a new post.

        A ``ValidationError`` is raised unchanged and the repository is not
        called.  On any error nothing has been persisted.
        """
        post = Post.create(title, content)
        try:
            await self._repository.create(post, deadline=deadline)
        except PostError as exc:
            self._log_failure("save post", exc)
            raise exc.with_context("failed to save post") from exc

        self._logger.info("Created post id=%s title=%r", post.id, post.title)
        return post

    async def update(
        self,
        post_id: str,
        title: str,
        content: str,
        *,
        deadline: float | None = None,
    ) -> Post:
        """
        Replace the title and content of an existing post.

        The current post is fetched first; a missing post or invalid new
        data ends the call without writing anything.
        """
        try:
            post = await self._repository.get_by_id(post_id, deadline=deadline)
        except PostError as exc:
            self._log_failure("get post for update", exc)
            raise exc.with_context("failed to get post for update") from exc

        try:
            post.update(title, content)
        except ValidationError as exc:
            raise exc.with_context("failed to update post") from exc

        try:
            await self._repository.update(post, deadline=deadline)
        except PostError as exc:
            self._log_failure("save updated post", exc)
            raise exc.with_context("failed to save updated post") from exc

        self._logger.info("Updated post id=%s", post.id)
        return post

    async def delete(self, post_id: str, *, deadline: float | None = None) -> None:
        try:
            await self._repository.delete(post_id, deadline=deadline)
        except PostError as exc:
            self._log_failure("delete post", exc)
            raise exc.with_context("failed to delete post") from exc
        self._logger.info("Deleted post id=%s", post_id)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_by_id(self, post_id: str, *, deadline: float | None = None) -> Post:
        try:
            return await self._repository.get_by_id(post_id, deadline=deadline)
        except PostError as exc:
            self._log_failure("get post", exc)
            raise exc.with_context("failed to get post") from exc

    async def get_all(self, *, deadline: float | None = None) -> list[Post]:
        try:
            return await self._repository.get_all(deadline=deadline)
        except PostError as exc:
            self._log_failure("get posts", exc)
            raise exc.with_context("failed to get posts") from exc

    async def get_recent(self, limit: int, *, deadline: float | None = None) -> list[Post]:
        limit = normalize_limit(limit)
        try:
            return await self._repository.get_recent(limit, deadline=deadline)
        except PostError as exc:
            self._log_failure("get recent posts", exc)
            raise exc.with_context("failed to get recent posts") from exc

    async def get_paginated(
        self,
        page: int,
        page_size: int,
        search: str = "",
        *,
        deadline: float | None = None,
    ) -> PostPage:
        page, page_size = normalize_page_window(page, page_size)
        try:
            return await self._repository.get_paginated(
                page, page_size, search, deadline=deadline
            )
        except PostError as exc:
            self._log_failure("get paginated posts", exc)
            raise exc.with_context("failed to get paginated posts") from exc

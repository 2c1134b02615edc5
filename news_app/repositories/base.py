"""
Abstract interface for post persistence.

The service layer depends only on this contract, so the SQL store, the
in-memory store used by tests and the Redis cache decorator are
interchangeable.
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from news_app.domain import Post, PostPage


class PostRepository(ABC):
    """
    Persistence capability for posts.

    Every method accepts a keyword-only ``deadline``: an absolute
    ``time.monotonic()`` instant, or None for no deadline.  An expired
    deadline fails the call with a timed-out ``StorageError`` before the
    store is touched.
    """

    @abstractmethod
    async def create(self, post: Post, *, deadline: float | None = None) -> None:
        """
        Persist a new post.

        Assigns a generated id onto *post* when ``post.id`` is None.

        Raises:
            ValidationError: If the post breaks the length rules
            DuplicateError: If a post with the same id already exists
            StorageError: If the store fails or the deadline expires
        """

    @abstractmethod
    async def get_by_id(self, post_id: str, *, deadline: float | None = None) -> Post:
        """
        Raises:
            InvalidIDError: If *post_id* is not a well-formed identifier
            NotFoundError: If no post has that id
        """

    @abstractmethod
    async def update(self, post: Post, *, deadline: float | None = None) -> None:
        """
        Write title, content and a fresh ``updated_at``.

        ``id`` and ``created_at`` are never written.

        Raises:
            ValidationError: If the post breaks the length rules
            InvalidIDError: If ``post.id`` is not a well-formed identifier
            NotFoundError: If no post has that id
        """

    @abstractmethod
    async def delete(self, post_id: str, *, deadline: float | None = None) -> None:
        """
        Permanently remove a post.

        Raises:
            InvalidIDError: If *post_id* is not a well-formed identifier
            NotFoundError: If no post has that id
        """

    @abstractmethod
    async def get_all(self, *, deadline: float | None = None) -> list[Post]:
        """Return every post, in no particular order.  Small datasets only."""

    @abstractmethod
    async def get_recent(self, limit: int, *, deadline: float | None = None) -> list[Post]:
        """Return up to *limit* posts, newest first; non-positive limits mean 5."""

    @abstractmethod
    async def get_paginated(
        self,
        page: int,
        page_size: int,
        search: str = "",
        *,
        deadline: float | None = None,
    ) -> PostPage:
        """
        Return one newest-first page of the posts matching *search*.

        An empty *search* matches everything; otherwise a post matches when
        its title or content contains *search*, ignoring case.
        ``total_count`` counts all matches, not just the returned window.
        """

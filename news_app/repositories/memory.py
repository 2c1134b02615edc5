"""
Dict-backed ``PostRepository``.

Used by the test suite and for running the app without a database.
Posts are copied on the way in and on the way out so callers can never
mutate stored state by holding on to a returned object.
"""
from __future__ import annotations

import dataclasses

from news_app.domain import DuplicateError, InvalidIDError, NotFoundError, Post, PostPage
from news_app.domain.ids import canonical_id, is_valid_id, new_id
from news_app.domain.pagination import normalize_limit, normalize_page_window, page_offset
from news_app.repositories.base import PostRepository
from news_app.repositories.deadline import call_with_deadline


def _checked_id(post_id: str | None) -> str:
    if post_id is None or not is_valid_id(post_id):
        raise InvalidIDError(f"invalid id format: {post_id!r}")
    return canonical_id(post_id)


def _newest_first(posts: list[Post]) -> list[Post]:
    return sorted(posts, key=lambda p: (p.created_at, p.id), reverse=True)


def _matches(post: Post, needle: str) -> bool:
    return needle in post.title.lower() or needle in post.content.lower()


class InMemoryPostRepository(PostRepository):

    def __init__(self) -> None:
        self._posts: dict[str, Post] = {}

    async def create(self, post: Post, *, deadline: float | None = None) -> None:
        post.validate()
        await call_with_deadline(deadline, self._create, post)

    async def _create(self, post: Post) -> None:
        post.id = new_id() if post.id is None else _checked_id(post.id)
        if post.id in self._posts:
            raise DuplicateError(f"post {post.id} already exists")
        self._posts[post.id] = dataclasses.replace(post)

    async def get_by_id(self, post_id: str, *, deadline: float | None = None) -> Post:
        return await call_with_deadline(deadline, self._get_by_id, post_id)

    async def _get_by_id(self, post_id: str) -> Post:
        stored = self._posts.get(_checked_id(post_id))
        if stored is None:
            raise NotFoundError()
        return dataclasses.replace(stored)

    async def update(self, post: Post, *, deadline: float | None = None) -> None:
        post.validate()
        await call_with_deadline(deadline, self._update, post)

    async def _update(self, post: Post) -> None:
        stored = self._posts.get(_checked_id(post.id))
        if stored is None:
            raise NotFoundError()
        post.touch()
        stored.title = post.title
        stored.content = post.content
        stored.updated_at = post.updated_at

    async def delete(self, post_id: str, *, deadline: float | None = None) -> None:
        await call_with_deadline(deadline, self._delete, post_id)

    async def _delete(self, post_id: str) -> None:
        if self._posts.pop(_checked_id(post_id), None) is None:
            raise NotFoundError()

    async def get_all(self, *, deadline: float | None = None) -> list[Post]:
        return await call_with_deadline(deadline, self._get_all)

    async def _get_all(self) -> list[Post]:
        return [dataclasses.replace(p) for p in self._posts.values()]

    async def get_recent(self, limit: int, *, deadline: float | None = None) -> list[Post]:
        return await call_with_deadline(deadline, self._get_recent, normalize_limit(limit))

    async def _get_recent(self, limit: int) -> list[Post]:
        return [dataclasses.replace(p) for p in _newest_first(list(self._posts.values()))[:limit]]

    async def get_paginated(
        self,
        page: int,
        page_size: int,
        search: str = "",
        *,
        deadline: float | None = None,
    ) -> PostPage:
        page, page_size = normalize_page_window(page, page_size)
        return await call_with_deadline(deadline, self._get_paginated, page, page_size, search)

    async def _get_paginated(self, page: int, page_size: int, search: str) -> PostPage:
        posts = list(self._posts.values())
        if search:
            needle = search.lower()
            posts = [p for p in posts if _matches(p, needle)]
        ordered = _newest_first(posts)
        start = page_offset(page, page_size)
        window = ordered[start:start + page_size]
        return PostPage(
            items=[dataclasses.replace(p) for p in window],
            total_count=len(posts),
            page=page,
            page_size=page_size,
        )

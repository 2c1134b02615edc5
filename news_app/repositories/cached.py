"""
Cache-aside decorator for any ``PostRepository``.

Reads (detail, paginated list, recent) try Redis first and fall back to
the wrapped repository.  Cache keys encode every argument that affects
the result.  Writes go straight to the wrapped repository and, once they
succeed, purge every list/recent entry plus the touched detail entry.
Errors from the wrapped repository propagate untouched.
"""
from __future__ import annotations

from datetime import datetime

from news_app.cache import CacheManager
from news_app.domain import Post, PostPage
from news_app.domain.ids import canonical_id, is_valid_id
from news_app.domain.pagination import normalize_limit, normalize_page_window
from news_app.repositories.base import PostRepository
from news_app.repositories.deadline import remaining_time

# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _post_to_dict(post: Post) -> dict:
    return {
        "id": post.id,
        "title": post.title,
        "content": post.content,
        "created_at": post.created_at.isoformat(),
        "updated_at": post.updated_at.isoformat(),
    }


def _post_from_dict(data: dict) -> Post:
    return Post(
        id=data["id"],
        title=data["title"],
        content=data["content"],
        created_at=datetime.fromisoformat(data["created_at"]),
        updated_at=datetime.fromisoformat(data["updated_at"]),
    )


def _page_to_dict(page: PostPage) -> dict:
    return {
        "items": [_post_to_dict(p) for p in page.items],
        "total_count": page.total_count,
        "page": page.page,
        "page_size": page.page_size,
    }


def _page_from_dict(data: dict) -> PostPage:
    return PostPage(
        items=[_post_from_dict(p) for p in data["items"]],
        total_count=data["total_count"],
        page=data["page"],
        page_size=data["page_size"],
    )


class CachedPostRepository(PostRepository):

    def __init__(
        self,
        inner: PostRepository,
        cache: CacheManager,
        list_ttl: int | None = None,
        detail_ttl: int | None = None,
    ) -> None:
        self._inner = inner
        self._cache = cache
        self._list_ttl = list_ttl
        self._detail_ttl = detail_ttl

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, post: Post, *, deadline: float | None = None) -> None:
        await self._inner.create(post, deadline=deadline)
        await self._cache.invalidate_post()

    async def update(self, post: Post, *, deadline: float | None = None) -> None:
        await self._inner.update(post, deadline=deadline)
        await self._cache.invalidate_post(post.id)

    async def delete(self, post_id: str, *, deadline: float | None = None) -> None:
        await self._inner.delete(post_id, deadline=deadline)
        await self._cache.invalidate_post(canonical_id(post_id))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_by_id(self, post_id: str, *, deadline: float | None = None) -> Post:
        remaining_time(deadline)
        if not is_valid_id(post_id):
            # Let the wrapped store raise the proper InvalidIDError.
            return await self._inner.get_by_id(post_id, deadline=deadline)

        cache_key = f"posts:detail:{canonical_id(post_id)}"
        cached = await self._cache.get(cache_key)
        if cached:
            return _post_from_dict(cached)

        post = await self._inner.get_by_id(post_id, deadline=deadline)
        await self._cache.set(cache_key, _post_to_dict(post), ttl=self._detail_ttl)
        return post

    async def get_all(self, *, deadline: float | None = None) -> list[Post]:
        return await self._inner.get_all(deadline=deadline)

    async def get_recent(self, limit: int, *, deadline: float | None = None) -> list[Post]:
        remaining_time(deadline)
        limit = normalize_limit(limit)
        cache_key = f"posts:recent:{limit}"
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return [_post_from_dict(p) for p in cached]

        posts = await self._inner.get_recent(limit, deadline=deadline)
        await self._cache.set(cache_key, [_post_to_dict(p) for p in posts], ttl=self._list_ttl)
        return posts

    async def get_paginated(
        self,
        page: int,
        page_size: int,
        search: str = "",
        *,
        deadline: float | None = None,
    ) -> PostPage:
        remaining_time(deadline)
        page, page_size = normalize_page_window(page, page_size)
        cache_key = f"posts:list:{page}:{page_size}:{search}"
        cached = await self._cache.get(cache_key)
        if cached:
            return _page_from_dict(cached)

        result = await self._inner.get_paginated(page, page_size, search, deadline=deadline)
        await self._cache.set(cache_key, _page_to_dict(result), ttl=self._list_ttl)
        return result

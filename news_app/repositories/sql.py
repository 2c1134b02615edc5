"""
SQLAlchemy implementation of ``PostRepository``.

Design notes
------------
- Each call opens its own session and transaction; nothing is shared
  between calls except the session factory handed in at startup.
- Pagination issues two statements: a COUNT over the filtered set and a
  SELECT with ORDER BY / OFFSET / LIMIT.  ``total_count`` therefore never
  depends on the window.
- Search is a case-insensitive literal substring match
  (``lower(col) LIKE '%term%'`` with ``%`` and ``_`` escaped).  On SQLite
  ``lower`` is swapped for ``str.lower`` by ``database.create_engine``.
- Windows beyond the 64-bit OFFSET range come back empty instead of
  reaching the driver.
- Ties on ``created_at`` are broken by ``_id`` descending; ids grow
  monotonically, so the order is stable.
- Driver failures become ``StorageError`` and unique-key violations
  ``DuplicateError``; domain errors raised inside an operation pass
  through untouched.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from news_app.domain import (
    DuplicateError,
    InvalidIDError,
    NotFoundError,
    Post,
    PostPage,
    StorageError,
)
from news_app.domain.ids import canonical_id, is_valid_id, new_id
from news_app.domain.pagination import normalize_limit, normalize_page_window, page_offset
from news_app.models import PostRecord
from news_app.repositories.base import PostRepository
from news_app.repositories.deadline import call_with_deadline

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Mapping helpers
# ---------------------------------------------------------------------------

def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were written as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _record_to_post(record: PostRecord) -> Post:
    return Post(
        id=record.id,
        title=record.title,
        content=record.content,
        created_at=_as_utc(record.created_at),
        updated_at=_as_utc(record.updated_at),
    )


def _post_to_record(post: Post) -> PostRecord:
    return PostRecord(
        id=post.id,
        title=post.title,
        content=post.content,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


def _checked_id(post_id: str | None) -> str:
    if post_id is None or not is_valid_id(post_id):
        raise InvalidIDError(f"invalid id format: {post_id!r}")
    return canonical_id(post_id)


def _search_filter(search: str):
    """Return the WHERE clause for *search*, or None to match everything."""
    if not search:
        return None
    return or_(
        PostRecord.title.icontains(search, autoescape=True),
        PostRecord.content.icontains(search, autoescape=True),
    )


_NEWEST_FIRST = (PostRecord.created_at.desc(), PostRecord.id.desc())

# Largest OFFSET / LIMIT a signed 64-bit column type accepts.
_MAX_SQL_INTEGER = 2**63 - 1


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class SQLPostRepository(PostRepository):
    """Stores posts in the ``posts`` table through an async session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _run(self, deadline: float | None, operation, *args):
        try:
            return await call_with_deadline(deadline, operation, *args)
        except IntegrityError as exc:
            raise DuplicateError(f"failed to insert post: {exc.orig}") from exc
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("Post store operation failed: %s", exc)
            raise StorageError(f"post store operation failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, post: Post, *, deadline: float | None = None) -> None:
        post.validate()
        if post.id is None:
            post.id = new_id()
        else:
            post.id = _checked_id(post.id)
        await self._run(deadline, self._insert, post)

    async def _insert(self, post: Post) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                session.add(_post_to_record(post))

    async def update(self, post: Post, *, deadline: float | None = None) -> None:
        post.validate()
        post_id = _checked_id(post.id)
        previous = post.updated_at
        post.touch()
        try:
            await self._run(deadline, self._write_fields, post_id, post)
        except Exception:
            post.updated_at = previous
            raise

    async def _write_fields(self, post_id: str, post: Post) -> None:
        stmt = (
            update(PostRecord)
            .where(PostRecord.id == post_id)
            .values(title=post.title, content=post.content, updated_at=post.updated_at)
        )
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(stmt)
                if result.rowcount == 0:
                    raise NotFoundError()

    async def delete(self, post_id: str, *, deadline: float | None = None) -> None:
        await self._run(deadline, self._delete, _checked_id(post_id))

    async def _delete(self, post_id: str) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(delete(PostRecord).where(PostRecord.id == post_id))
                if result.rowcount == 0:
                    raise NotFoundError()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_by_id(self, post_id: str, *, deadline: float | None = None) -> Post:
        return await self._run(deadline, self._fetch_one, _checked_id(post_id))

    async def _fetch_one(self, post_id: str) -> Post:
        async with self._session_factory() as session:
            record = await session.get(PostRecord, post_id)
            if record is None:
                raise NotFoundError()
            return _record_to_post(record)

    async def get_all(self, *, deadline: float | None = None) -> list[Post]:
        return await self._run(deadline, self._fetch_many, select(PostRecord))

    async def get_recent(self, limit: int, *, deadline: float | None = None) -> list[Post]:
        stmt = (
            select(PostRecord)
            .order_by(*_NEWEST_FIRST)
            .limit(min(normalize_limit(limit), _MAX_SQL_INTEGER))
        )
        return await self._run(deadline, self._fetch_many, stmt)

    async def _fetch_many(self, stmt) -> list[Post]:
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [_record_to_post(r) for r in result.scalars().all()]

    async def get_paginated(
        self,
        page: int,
        page_size: int,
        search: str = "",
        *,
        deadline: float | None = None,
    ) -> PostPage:
        page, page_size = normalize_page_window(page, page_size)
        return await self._run(deadline, self._fetch_page, page, page_size, search)

    async def _fetch_page(self, page: int, page_size: int, search: str) -> PostPage:
        condition = _search_filter(search)
        offset = page_offset(page, page_size)

        count_q = select(func.count()).select_from(PostRecord)
        rows_q = (
            select(PostRecord)
            .order_by(*_NEWEST_FIRST)
            .offset(offset)
            .limit(min(page_size, _MAX_SQL_INTEGER))
        )
        if condition is not None:
            count_q = count_q.where(condition)
            rows_q = rows_q.where(condition)

        async with self._session_factory() as session:
            total: int = (await session.execute(count_q)).scalar_one()
            if offset > _MAX_SQL_INTEGER:
                # No table holds that many rows; the window is past the end.
                items = []
            else:
                result = await session.execute(rows_q)
                items = [_record_to_post(r) for r in result.scalars().all()]

        return PostPage(items=items, total_count=total, page=page, page_size=page_size)

"""
Direct service-layer tests: exercise orchestration without HTTP overhead.

Most tests run the service over the in-memory repository.  Where the
question is "was the repository called at all?", an ``AsyncMock`` built
from ``PostRepository`` stands in for the store.
"""
import logging
import time
from unittest.mock import AsyncMock

import pytest

from conftest import seed_posts
from news_app.domain import (
    InvalidIDError,
    NotFoundError,
    Post,
    StorageError,
    ValidationError,
    ValidationReason,
)
from news_app.repositories import PostRepository
from news_app.services import PostService


def _mock_repository() -> AsyncMock:
    return AsyncMock(spec=PostRepository)


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_persists_post(service: PostService, memory_repository):
    post = await service.create("Service title", "Service content body")
    stored = await memory_repository.get_by_id(post.id)
    assert stored.title == "Service title"
    assert stored.content == "Service content body"
    assert stored.created_at == stored.updated_at


@pytest.mark.asyncio
async def test_create_invalid_title_never_reaches_repository():
    repository = _mock_repository()
    service = PostService(repository)

    with pytest.raises(ValidationError) as exc_info:
        await service.create("no", "Perfectly fine content")

    assert exc_info.value.reason is ValidationReason.INVALID_TITLE
    assert str(exc_info.value) == "title must be between 3 and 200 characters"
    repository.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_invalid_content_never_reaches_repository():
    repository = _mock_repository()
    service = PostService(repository)

    with pytest.raises(ValidationError) as exc_info:
        await service.create("Fine title", "short")

    assert exc_info.value.reason is ValidationReason.INVALID_CONTENT
    repository.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_storage_failure_keeps_kind_and_logs(caplog):
    repository = _mock_repository()
    repository.create.side_effect = StorageError("connection refused")
    service = PostService(repository)

    with caplog.at_level(logging.WARNING):
        with pytest.raises(StorageError) as exc_info:
            await service.create("Fine title", "Perfectly fine content")

    assert str(exc_info.value) == "failed to save post: connection refused"
    assert isinstance(exc_info.value.__cause__, StorageError)
    assert "connection refused" in caplog.text


@pytest.mark.asyncio
async def test_create_with_expired_deadline_stores_nothing(service: PostService, memory_repository):
    with pytest.raises(StorageError) as exc_info:
        await service.create("Fine title", "Perfectly fine content", deadline=time.monotonic() - 1)
    assert exc_info.value.timed_out is True
    assert await memory_repository.get_all() == []


# ---------------------------------------------------------------------------
# update
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_update_changes_post(service: PostService, memory_repository):
    created = await service.create("Before update", "Content before update")

    updated = await service.update(created.id, "After update", "Content after update")

    stored = await memory_repository.get_by_id(created.id)
    assert updated.id == created.id
    assert stored.title == "After update"
    assert stored.content == "Content after update"
    assert stored.created_at == created.created_at
    assert stored.updated_at > stored.created_at


@pytest.mark.asyncio
async def test_update_missing_post_skips_write():
    repository = _mock_repository()
    repository.get_by_id.side_effect = NotFoundError()
    service = PostService(repository)

    with pytest.raises(NotFoundError) as exc_info:
        await service.update("0123456789abcdef01234567", "Some title", "Some content here")

    assert str(exc_info.value).startswith("failed to get post for update")
    repository.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_invalid_id(service: PostService):
    with pytest.raises(InvalidIDError):
        await service.update("bogus", "Some title", "Some content here")


@pytest.mark.asyncio
async def test_update_validation_failure_skips_write():
    repository = _mock_repository()
    repository.get_by_id.return_value = Post.create("Stored title", "Stored content body")
    service = PostService(repository)

    with pytest.raises(ValidationError) as exc_info:
        await service.update("0123456789abcdef01234567", "Valid title", "tiny")

    assert exc_info.value.reason is ValidationReason.INVALID_CONTENT
    repository.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_failed_update_leaves_stored_post_identical(service: PostService, memory_repository):
    created = await service.create("Stored title", "Stored content body")
    before = await memory_repository.get_by_id(created.id)

    with pytest.raises(ValidationError):
        await service.update(created.id, "x" * 201, "Another valid content")

    assert await memory_repository.get_by_id(created.id) == before


# ---------------------------------------------------------------------------
# delete / get
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_delete_then_get_fails(service: PostService):
    created = await service.create("Short lived", "This will be deleted")
    await service.delete(created.id)

    with pytest.raises(NotFoundError):
        await service.get_by_id(created.id)
    with pytest.raises(NotFoundError) as exc_info:
        await service.delete(created.id)
    assert str(exc_info.value).startswith("failed to delete post")


@pytest.mark.asyncio
async def test_delete_invalid_id(service: PostService):
    with pytest.raises(InvalidIDError):
        await service.delete("bogus")


@pytest.mark.asyncio
async def test_get_by_id_round_trip(service: PostService):
    created = await service.create("Round trip", "Round trip content")
    fetched = await service.get_by_id(created.id)
    assert fetched == created
    assert fetched == await service.get_by_id(created.id)


@pytest.mark.asyncio
async def test_get_all(service: PostService, memory_repository):
    await seed_posts(memory_repository, 3)
    assert len(await service.get_all()) == 3


# ---------------------------------------------------------------------------
# Normalisation before delegation
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize(
    "page, page_size, expected",
    [(0, 0, (1, 9)), (-1, 5, (1, 5)), (3, -7, (3, 9)), (2, 10, (2, 10))],
)
async def test_get_paginated_normalizes_before_delegating(page, page_size, expected):
    repository = _mock_repository()
    service = PostService(repository)

    await service.get_paginated(page, page_size, "needle")

    repository.get_paginated.assert_awaited_once_with(*expected, "needle", deadline=None)


@pytest.mark.asyncio
async def test_get_recent_normalizes_before_delegating():
    repository = _mock_repository()
    service = PostService(repository)

    await service.get_recent(0)

    repository.get_recent.assert_awaited_once_with(5, deadline=None)


@pytest.mark.asyncio
async def test_get_paginated_over_store(service: PostService, memory_repository):
    await seed_posts(memory_repository, 15)
    page = await service.get_paginated(1, 0, "")
    assert page.page_size == 9
    assert len(page.items) == 9
    assert page.total_count == 15
    assert page.total_pages == 2


@pytest.mark.asyncio
async def test_get_recent_over_store(service: PostService, memory_repository):
    await seed_posts(memory_repository, 7)
    recent = await service.get_recent(5)
    assert [p.title for p in recent] == ["Title 7", "Title 6", "Title 5", "Title 4", "Title 3"]


@pytest.mark.asyncio
async def test_read_timeout_keeps_flag():
    repository = _mock_repository()
    repository.get_paginated.side_effect = StorageError("deadline exceeded", timed_out=True)
    service = PostService(repository)

    with pytest.raises(StorageError) as exc_info:
        await service.get_paginated(1, 9, "")

    assert exc_info.value.timed_out is True
    assert str(exc_info.value) == "failed to get paginated posts: deadline exceeded"

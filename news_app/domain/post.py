"""
Post entity: the only aggregate of the news app.

A ``Post`` owns its validation rules.  It is constructed through
``Post.create`` and mutated only through ``Post.update``; both validate
title and content as a pair before any field is touched, so a failed
call never leaves a half-updated post behind.

No I/O happens here.  Persistence is the repository's job.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from news_app.domain.errors import ValidationError, ValidationReason
from news_app.domain.ids import new_id

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 200
CONTENT_MIN_LENGTH = 10


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_post_data(title: str, content: str) -> None:
    """
    Raise ``ValidationError`` when *title* or *content* break the length
    rules.  The title is checked first, so an invalid title wins when both
    fields are wrong.
    """
    if not TITLE_MIN_LENGTH <= len(title) <= TITLE_MAX_LENGTH:
        raise ValidationError(ValidationReason.INVALID_TITLE)
    if len(content) < CONTENT_MIN_LENGTH:
        raise ValidationError(ValidationReason.INVALID_CONTENT)


@dataclass
class Post:
    id: str | None
    title: str
    content: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(cls, title: str, content: str) -> "Post":
        """Build a new, validated post with a fresh id and matching timestamps."""
        validate_post_data(title, content)
        now = utcnow()
        return cls(
            id=new_id(),
            title=title,
            content=content,
            created_at=now,
            updated_at=now,
        )

    def validate(self) -> None:
        validate_post_data(self.title, self.content)

    def update(self, title: str, content: str) -> None:
        """
        Replace title and content after validating the new pair, then
        refresh ``updated_at``.  Nothing changes when validation fails.
        """
        validate_post_data(title, content)
        self.title = title
        self.content = content
        self.touch()

    def touch(self) -> None:
        """Set ``updated_at`` to now, never earlier than its current value."""
        now = utcnow()
        if now <= self.updated_at:
            now = self.updated_at + timedelta(microseconds=1)
        self.updated_at = now

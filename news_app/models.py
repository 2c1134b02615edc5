from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from news_app.database import Base


# ---------------------------------------------------------------------------
# Post record: one row per post, laid out like the "posts" document
# collection: _id, title, content, created_at, updated_at.
# ---------------------------------------------------------------------------
class PostRecord(Base):
    __tablename__ = "posts"

    __table_args__ = (
        # Newest-first feed, recent posts and paginated listing
        Index("ix_posts_created_at", "created_at"),
    )

    id: Mapped[str] = mapped_column("_id", String(24), primary_key=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

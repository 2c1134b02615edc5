from news_app.domain.errors import (
    DuplicateError,
    InvalidIDError,
    NotFoundError,
    PostError,
    StorageError,
    ValidationError,
    ValidationReason,
)
from news_app.domain.pagination import PostPage
from news_app.domain.post import Post

__all__ = [
    "DuplicateError",
    "InvalidIDError",
    "NotFoundError",
    "Post",
    "PostError",
    "PostPage",
    "StorageError",
    "ValidationError",
    "ValidationReason",
]

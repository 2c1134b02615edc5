"""
Domain-level exception hierarchy shared by the entity, repository and
service layers.

Every layer may add context to an error on its way up, but the *class*
of the error is preserved so callers can branch on it::

    try:
        await service.update(post_id, title, content)
    except NotFoundError:
        ...
    except ValidationError as exc:
        show_form_error(exc.reason)
"""
from __future__ import annotations

import enum


class ValidationReason(str, enum.Enum):
    INVALID_TITLE = "invalid_title"
    INVALID_CONTENT = "invalid_content"


_VALIDATION_MESSAGES = {
    ValidationReason.INVALID_TITLE: "title must be between 3 and 200 characters",
    ValidationReason.INVALID_CONTENT: "content must be at least 10 characters",
}


class PostError(Exception):
    """Base class for every failure raised by the post core."""

    def with_context(self, context: str) -> "PostError":
        """
        Return a copy of this error, of the same class and carrying the
        same attributes, whose message is prefixed with *context*.
        """
        clone = self.__class__.__new__(self.__class__)
        clone.__dict__.update(self.__dict__)
        clone.args = (f"{context}: {self}",)
        return clone


class ValidationError(PostError):
    """Caller input violates the post invariants."""

    def __init__(self, reason: ValidationReason, message: str | None = None) -> None:
        detail = message or _VALIDATION_MESSAGES[reason]
        super().__init__(detail)
        self.reason = reason
        self.detail = detail


class NotFoundError(PostError):
    """The referenced post does not exist."""

    def __init__(self, message: str = "post not found") -> None:
        super().__init__(message)


class InvalidIDError(PostError):
    """The identifier is not in the format the store expects."""

    def __init__(self, message: str = "invalid id format") -> None:
        super().__init__(message)


class DuplicateError(PostError):
    """A post with the same identifier already exists."""

    def __init__(self, message: str = "post already exists") -> None:
        super().__init__(message)


class StorageError(PostError):
    """The underlying store is unreachable, timed out or failed unexpectedly."""

    def __init__(self, message: str = "storage failure", *, timed_out: bool = False) -> None:
        super().__init__(message)
        self.timed_out = timed_out

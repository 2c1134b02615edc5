import time

from fastapi import Query, Request

from news_app.config import settings
from news_app.domain.pagination import DEFAULT_PAGE_SIZE
from news_app.services import PostService


class PaginationParams:
    """
    Reusable FastAPI dependency that parses pagination / search query
    parameters.

    Usage in a router::

        @router.get("/posts")
        async def list_posts(pagination: PaginationParams = Depends()):
            ...

    Attributes
    ----------
    page:
        1-based page number.  Values below 1 are passed through; the post
        service clamps them.
    page_size:
        Number of items per page, capped at ``settings.MAX_PAGE_SIZE``.
        Non-positive values fall back to the default of 9 in the service.
    search:
        Case-insensitive substring matched against title and content,
        used verbatim (surrounding whitespace is part of the term).
    """

    def __init__(
        self,
        page: int = Query(1, description="Page number (1-based)."),
        page_size: int = Query(
            DEFAULT_PAGE_SIZE,
            description="Number of posts returned per page.",
        ),
        search: str = Query("", description="Filter posts by title or content."),
    ) -> None:
        self.page = page
        self.page_size = min(page_size, settings.MAX_PAGE_SIZE)
        self.search = search


def get_deadline() -> float:
    """Absolute ``time.monotonic()`` deadline for the current request."""
    return time.monotonic() + settings.REQUEST_TIMEOUT_SECONDS


def get_post_service(request: Request) -> PostService:
    """Return the process-wide ``PostService`` built by the lifespan."""
    return request.app.state.post_service

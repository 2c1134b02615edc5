from fastapi import APIRouter, Depends, Request

from news_app.dependencies import get_deadline, get_post_service
from news_app.schemas import MetricsResponse
from news_app.services import PostService

router = APIRouter(prefix="/api/v1/metrics", tags=["metrics"])


@router.get("", response_model=MetricsResponse)
async def get_metrics(
    request: Request,
    service: PostService = Depends(get_post_service),
    deadline: float = Depends(get_deadline),
):
    # A one-item window is enough: total_count ignores pagination.
    page = await service.get_paginated(1, 1, deadline=deadline)
    cache = getattr(request.app.state, "cache", None)
    return MetricsResponse(
        total_posts=page.total_count,
        cache_info=cache.stats if cache is not None else {},
    )

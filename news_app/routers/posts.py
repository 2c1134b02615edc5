from fastapi import APIRouter, Depends, HTTPException, Query, Response

from news_app.dependencies import PaginationParams, get_deadline, get_post_service
from news_app.domain.pagination import DEFAULT_RECENT_LIMIT
from news_app.exception_handlers import HX_ERROR_HEADER, HX_TRIGGER_HEADER
from news_app.schemas import PostCreate, PostPageResponse, PostResponse, PostUpdate
from news_app.services import PostService

router = APIRouter(prefix="/api/v1/posts", tags=["posts"])

TRIGGER_POST_CREATED = "postCreated"
TRIGGER_POST_UPDATED = "postUpdated"
TRIGGER_POST_DELETED = "postDeleted"

EMPTY_FIELDS_MESSAGE = "Title and content are required"


def _require_fields(data: PostCreate) -> None:
    if not data.title or not data.content:
        raise HTTPException(
            status_code=400,
            detail=EMPTY_FIELDS_MESSAGE,
            headers={HX_ERROR_HEADER: EMPTY_FIELDS_MESSAGE},
        )


@router.get("", response_model=PostPageResponse)
async def list_posts(
    pagination: PaginationParams = Depends(),
    service: PostService = Depends(get_post_service),
    deadline: float = Depends(get_deadline),
):
    result = await service.get_paginated(
        pagination.page, pagination.page_size, pagination.search, deadline=deadline
    )
    return PostPageResponse(
        items=[PostResponse.model_validate(p) for p in result.items],
        total_count=result.total_count,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
        has_previous=result.has_previous,
        has_next=result.has_next,
        search=pagination.search,
    )


@router.get("/recent", response_model=list[PostResponse])
async def recent_posts(
    limit: int = Query(DEFAULT_RECENT_LIMIT, description="Maximum number of posts."),
    service: PostService = Depends(get_post_service),
    deadline: float = Depends(get_deadline),
):
    return await service.get_recent(limit, deadline=deadline)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    service: PostService = Depends(get_post_service),
    deadline: float = Depends(get_deadline),
):
    return await service.get_by_id(post_id, deadline=deadline)


@router.post("", status_code=201, response_model=PostResponse)
async def create_post(
    data: PostCreate,
    response: Response,
    service: PostService = Depends(get_post_service),
    deadline: float = Depends(get_deadline),
):
    _require_fields(data)
    post = await service.create(data.title, data.content, deadline=deadline)
    response.headers[HX_TRIGGER_HEADER] = TRIGGER_POST_CREATED
    return post


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    data: PostUpdate,
    response: Response,
    service: PostService = Depends(get_post_service),
    deadline: float = Depends(get_deadline),
):
    _require_fields(data)
    post = await service.update(post_id, data.title, data.content, deadline=deadline)
    response.headers[HX_TRIGGER_HEADER] = TRIGGER_POST_UPDATED
    return post


@router.delete("/{post_id}", status_code=204)
async def delete_post(
    post_id: str,
    service: PostService = Depends(get_post_service),
    deadline: float = Depends(get_deadline),
):
    await service.delete(post_id, deadline=deadline)
    return Response(status_code=204, headers={HX_TRIGGER_HEADER: TRIGGER_POST_DELETED})

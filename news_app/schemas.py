from datetime import datetime

from pydantic import BaseModel, ConfigDict


# --- Post ---
#
# Length rules live on the Post entity; request schemas accept any string
# so that violations surface as domain ValidationErrors (400), not 422s.

class PostCreate(BaseModel):
    title: str = ""
    content: str = ""


class PostUpdate(PostCreate):
    pass


class PostResponse(BaseModel):
    id: str
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


# --- Pagination ---

class PostPageResponse(BaseModel):
    items: list[PostResponse]
    total_count: int
    page: int
    page_size: int
    total_pages: int
    has_previous: bool
    has_next: bool
    search: str = ""


# --- Metrics ---

class MetricsResponse(BaseModel):
    total_posts: int
    cache_info: dict = {}

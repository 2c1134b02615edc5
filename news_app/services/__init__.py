# Services package.
#
#   post_service : PostService: create / update / delete / paginated,
#                   recent and detail reads for the Post aggregate
#
# Services receive their repository (and optionally a logger) through the
# constructor; the FastAPI lifespan builds one instance per process.
from news_app.services.post_service import PostService

__all__ = ["PostService"]

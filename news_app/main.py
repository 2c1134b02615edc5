import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from news_app.cache import CacheManager
from news_app.config import settings
from news_app.database import create_engine, create_session_factory
from news_app.exception_handlers import register_exception_handlers
from news_app.logging_config import setup_logging
from news_app.middleware import TimingMiddleware
from news_app.repositories import CachedPostRepository, SQLPostRepository
from news_app.routers import metrics, posts
from news_app.services import PostService

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: process-wide resources are built once and passed explicitly.
    setup_logging(settings.LOG_LEVEL)
    engine = create_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    repository = SQLPostRepository(create_session_factory(engine))

    cache = CacheManager()
    if settings.CACHE_ENABLED:
        await cache.connect(settings.REDIS_URL)
    if cache.enabled:
        repository = CachedPostRepository(
            repository,
            cache,
            list_ttl=settings.CACHE_TTL_LIST,
            detail_ttl=settings.CACHE_TTL_DETAIL,
        )

    app.state.cache = cache
    app.state.post_service = PostService(repository, logging.getLogger("news_app.posts"))
    logger.info("News app started (env=%s)", settings.APP_ENV)
    yield
    # Shutdown
    await cache.disconnect()
    await engine.dispose()
    logger.info("News app stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="News App API",
        description="Posts with CRUD, keyword search and pagination",
        version=VERSION,
        lifespan=lifespan,
    )

    # Middleware
    app.add_middleware(TimingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["HX-Trigger", "HX-Error-Message", "X-Request-ID"],
    )

    register_exception_handlers(app)

    # Routers
    app.include_router(posts.router)
    app.include_router(metrics.router)

    @app.get("/health")
    async def health():
        return {"status": "healthy", "version": VERSION}

    return app


app = create_app()

# Repositories package.
#
# PostRepository is the persistence contract the service depends on:
#
#   base   : abstract PostRepository interface
#   sql    : SQLAlchemy async implementation over the "posts" table
#   memory : dict-backed implementation for tests and local runs
#   cached : Redis cache-aside decorator around any other implementation
from news_app.repositories.base import PostRepository
from news_app.repositories.cached import CachedPostRepository
from news_app.repositories.memory import InMemoryPostRepository
from news_app.repositories.sql import SQLPostRepository

__all__ = [
    "CachedPostRepository",
    "InMemoryPostRepository",
    "PostRepository",
    "SQLPostRepository",
]

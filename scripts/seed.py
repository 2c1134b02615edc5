"""Database seeder for local development and manual pagination checks."""
import argparse
import asyncio
import random
import time
from datetime import datetime, timedelta, timezone

from news_app.config import settings
from news_app.database import Base, create_engine, create_schema, create_session_factory
from news_app.domain import Post
from news_app.domain.ids import new_id
from news_app.repositories import SQLPostRepository

TOPICS = ["python", "fastapi", "postgresql", "redis", "docker", "kubernetes",
          "htmx", "typescript", "aws", "devops", "testing", "performance"]


async def seed(count: int, reset: bool = True) -> None:
    print(f"Seeding {count} posts into {settings.DATABASE_URL}")
    start = time.perf_counter()

    engine = create_engine(settings.DATABASE_URL)
    if reset:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
    await create_schema(engine)

    repository = SQLPostRepository(create_session_factory(engine))
    now = datetime.now(timezone.utc)
    for i in range(1, count + 1):
        topic = random.choice(TOPICS)
        created = now - timedelta(days=random.randint(0, 365), minutes=random.randint(0, 1440))
        post = Post(
            id=new_id(),
            title=f"Post {i}: Notes on {topic}",
            content=f"This is the full content of post {i} about {topic}. " * 5,
            created_at=created,
            updated_at=created,
        )
        await repository.create(post)
        if i % 100 == 0:
            print(f"  {i} posts created")

    await engine.dispose()
    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")


def main():
    parser = argparse.ArgumentParser(description="Seed the news app database")
    parser.add_argument("--count", type=int, default=1000, help="Number of posts to create")
    parser.add_argument("--small", action="store_true", help="Use a small dataset (30 posts)")
    parser.add_argument("--keep", action="store_true", help="Keep existing posts")
    args = parser.parse_args()
    asyncio.run(seed(30 if args.small else args.count, reset=not args.keep))


if __name__ == "__main__":
    main()

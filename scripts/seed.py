#!/usr/bin/env python3
"""Seed all three stores with generated sample data.

Creates:
- N content rows (PostgreSQL main) with a few cast/crew credits each
- N users (PostgreSQL analytics)
- 3N reviews (MongoDB) and 3N watch-history rows (PostgreSQL analytics)
- Warm metadata cache entries and daily trending scores (Redis)

Destructive: truncates the catalog tables, empties the reviews collection
and flushes the Redis DB before inserting.

Usage:
    python -m scripts.seed
    python -m scripts.seed --count 200
"""

import argparse
import asyncio
from datetime import date, datetime, timedelta, timezone
import logging
import os
import random
import sys
from uuid import uuid4

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv  # noqa: E402
from sqlalchemy import text  # noqa: E402

from catalog_api.models import (  # noqa: E402
    CastCrew,
    ContentCastCrew,
    ContentMetadata,
    ContentType,
    User,
    UserWatchHistory,
)
from catalog_api.services.bootstrap import Stores, connect_with_retry  # noqa: E402
from catalog_api.settings import get_settings  # noqa: E402
from catalog_api.stores.catalog import serialize_metadata  # noqa: E402
from catalog_api.stores.postgres import PostgresStore  # noqa: E402
from catalog_api.stores.redis import KEY_TRENDING_DAILY, metadata_key  # noqa: E402

load_dotenv()
logger = logging.getLogger("seed")

# ============================================================
# Vocabulary for generated data
# ============================================================

TITLE_ADJECTIVES = [
    "Silent", "Crimson", "Hidden", "Last", "Broken", "Golden", "Endless", "Forgotten",
    "Midnight", "Electric", "Frozen", "Wild", "Hollow", "Distant", "Burning",
]
TITLE_NOUNS = [
    "Harbor", "Kingdom", "Signal", "River", "Empire", "Garden", "Orbit", "Witness",
    "Frontier", "Echo", "Lantern", "Voyage", "Archive", "Horizon", "Island",
]
FIRST_NAMES = [
    "Ayu", "Budi", "Citra", "Dewi", "Eko", "Fajar", "Gita", "Hadi", "Indah", "Joko",
    "Kartika", "Lestari", "Made", "Nadia", "Putri", "Rizky", "Sari", "Taufik", "Wulan", "Yusuf",
]
LAST_NAMES = [
    "Santoso", "Wijaya", "Saputra", "Hidayat", "Pratama", "Nugroho", "Kusuma",
    "Siregar", "Halim", "Gunawan", "Setiawan", "Rahman",
]
CAST_ROLES = ["actor", "actor", "actor", "director", "writer"]
SUMMARY_SENTENCES = [
    "A reluctant hero is pulled back into a world they swore to leave behind.",
    "Two strangers uncover a secret that binds their families together.",
    "An expedition goes wrong in the most unexpected way.",
    "A small town hides a mystery older than anyone remembers.",
    "Old rivals must cooperate to survive a single night.",
    "A journey across the country becomes a search for identity.",
]
REVIEW_COMMENTS = [
    "Loved every minute of it.",
    "Great cast, weak ending.",
    "Slow start but worth it.",
    "Not my thing, honestly.",
    "The soundtrack alone is worth watching.",
    "Would watch again with friends.",
]


def _title() -> str:
    return f"The {random.choice(TITLE_ADJECTIVES)} {random.choice(TITLE_NOUNS)}"


def _person_name() -> str:
    return f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}"


def _release_date() -> date:
    return date.today() - timedelta(days=random.randint(0, 3650))


def build_content(count: int) -> list[ContentMetadata]:
    return [
        ContentMetadata(
            content_id=str(uuid4()),
            title=_title(),
            original_title=_title(),
            release_date=_release_date(),
            content_type=random.choice(list(ContentType)),
            summary=" ".join(random.sample(SUMMARY_SENTENCES, 2)),
            rating=float(random.randint(6, 10)),
        )
        for _ in range(count)
    ]


def build_users(count: int) -> list[User]:
    users = []
    for i in range(count):
        first, last = random.choice(FIRST_NAMES), random.choice(LAST_NAMES)
        username = f"{first.lower()}.{last.lower()}{i}"
        users.append(User(user_id=str(uuid4()), username=username, email=f"{username}@example.com"))
    return users


def build_cast(contents: list[ContentMetadata]) -> tuple[list[CastCrew], list[ContentCastCrew]]:
    people = [
        CastCrew(person_id=str(uuid4()), name=_person_name(), role=random.choice(CAST_ROLES))
        for _ in range(max(len(contents), 5))
    ]
    credits = []
    for content in contents:
        for person in random.sample(people, min(3, len(people))):
            credits.append(
                ContentCastCrew(
                    content_id=content.content_id,
                    person_id=person.person_id,
                    character_name=_person_name() if person.role == "actor" else None,
                )
            )
    return people, credits


def build_activity(
    contents: list[ContentMetadata], users: list[User], count: int
) -> tuple[list[dict], list[UserWatchHistory]]:
    """Random reviews and watch sessions linking users to content."""
    now = datetime.now(timezone.utc)
    reviews: list[dict] = []
    history: list[UserWatchHistory] = []
    for _ in range(count):
        content = random.choice(contents)
        user = random.choice(users)
        reviews.append(
            {
                "content_id": content.content_id,
                "user_id": user.user_id,
                "rating": random.randint(1, 10),
                "comment": random.choice(REVIEW_COMMENTS),
            }
        )
        history.append(
            UserWatchHistory(
                user_id=user.user_id,
                content_id=content.content_id,
                watched_at=now - timedelta(minutes=random.randint(0, 60 * 24 * 30)),
                duration_watched_seconds=random.randint(60, 7200),
                last_position_seconds=random.randint(60, 7200),
            )
        )
    return reviews, history


async def seed(count: int) -> None:
    settings = get_settings()
    stores = Stores.from_settings(settings)
    separate_analytics = settings.async_analytics_database_url != settings.async_database_url
    analytics = PostgresStore(settings.async_analytics_database_url) if separate_analytics else stores.postgres

    try:
        await connect_with_retry(stores, max_retries=settings.bootstrap_max_retries, retry_delay=5.0)
        if separate_analytics:
            await analytics.ping()

        # Tables (development convenience, not migrations)
        content_tables = [ContentMetadata.__table__, CastCrew.__table__, ContentCastCrew.__table__]
        analytics_tables = [User.__table__, UserWatchHistory.__table__]
        if separate_analytics:
            await stores.postgres.create_tables(content_tables)
            await analytics.create_tables(analytics_tables)
        else:
            await stores.postgres.create_tables()

        logger.info("Clearing old data from databases...")
        async with stores.postgres.session() as session:
            await session.execute(text("TRUNCATE content_metadata, content_cast_crew, cast_crew CASCADE"))
        async with analytics.session() as session:
            await session.execute(text("TRUNCATE users, user_watch_history CASCADE"))
        await stores.reviews.clear()
        await stores.cache.flush()

        logger.info(f"Generating and inserting {count} content records and {count} users...")
        contents = build_content(count)
        users = build_users(count)
        people, credits = build_cast(contents)
        reviews, history = build_activity(contents, users, count * 3)

        async with stores.postgres.session() as session:
            session.add_all(contents)
            session.add_all(people)
            await session.flush()
            session.add_all(credits)
        async with analytics.session() as session:
            session.add_all(users)
            session.add_all(history)

        logger.info(f"Inserting {len(reviews)} reviews into MongoDB...")
        await stores.reviews.ensure_indexes()
        await stores.reviews.insert_many(reviews)

        logger.info("Setting Redis cache and trending data...")
        for content in contents:
            await stores.cache.set_json(
                metadata_key(content.content_id),
                serialize_metadata(content),
                settings.metadata_cache_ttl,
            )
            await stores.cache.incr_score(KEY_TRENDING_DAILY, content.content_id, random.randint(10, 1000))

        logger.info("Seeding complete!")
        logger.info(f"- Inserted {len(contents)} content records")
        logger.info(f"- Inserted {len(users)} user records")
        logger.info(f"- Inserted {len(reviews)} reviews")
        logger.info(f"- Inserted {len(history)} watch history records")
        logger.info(f"Sample Content ID: {contents[0].content_id}")
        logger.info(f"Sample User ID: {users[0].user_id}")
    finally:
        logger.info("Closing all database connections.")
        if separate_analytics:
            await analytics.close()
        await stores.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the catalog stores with sample data")
    parser.add_argument("--count", type=int, default=50, help="Number of content rows and users")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    asyncio.run(seed(args.count))


if __name__ == "__main__":
    main()

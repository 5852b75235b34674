"""Analytics models: users and their watch history.

These tables live on the analytics PostgreSQL instance and are exposed to
the main database as foreign tables, so the watch-history join runs as a
single query from the main connection pool. No foreign keys are declared
across the two instances.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from catalog_api.stores.postgres import Base


class User(Base):
    """Catalog user."""

    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    username: Mapped[str] = mapped_column(String(100), unique=True)
    email: Mapped[str | None] = mapped_column(String(255))

    def __repr__(self) -> str:
        return f"<User {self.username}>"


class UserWatchHistory(Base):
    """One playback session of a user on a piece of content."""

    __tablename__ = "user_watch_history"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    user_id: Mapped[str] = mapped_column(String(36), index=True)
    content_id: Mapped[str] = mapped_column(String(36), index=True)

    watched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
    )
    duration_watched_seconds: Mapped[int] = mapped_column(Integer, default=0)
    last_position_seconds: Mapped[int] = mapped_column(Integer, default=0)

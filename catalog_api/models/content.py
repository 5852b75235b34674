"""Content catalog models.

ContentMetadata is the authoritative existence signal for a content id:
the metadata cache and the detail aggregation both key off this table.

Cast and crew are a many-to-many junction (content_cast_crew) over the
people table (cast_crew).
"""

from datetime import date
import enum

from sqlalchemy import Date, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from catalog_api.stores.postgres import Base


class ContentType(str, enum.Enum):
    MOVIE = "movie"
    SERIES = "series"
    DOCUMENTARY = "documentary"


class ContentMetadata(Base):
    """Descriptive metadata for a single piece of content."""

    __tablename__ = "content_metadata"

    # UUID text, generated by the seed/ingest side
    content_id: Mapped[str] = mapped_column(String(36), primary_key=True)

    title: Mapped[str] = mapped_column(String(255))
    original_title: Mapped[str | None] = mapped_column(String(255))
    release_date: Mapped[date | None] = mapped_column(Date)
    content_type: Mapped[ContentType] = mapped_column(
        Enum(
            ContentType,
            name="content_type",
            values_callable=lambda members: [m.value for m in members],
        )
    )
    summary: Mapped[str | None] = mapped_column(Text)
    rating: Mapped[float | None] = mapped_column()

    def __repr__(self) -> str:
        return f"<ContentMetadata {self.content_id} {self.title!r}>"


class CastCrew(Base):
    """A person who appears in or works on content."""

    __tablename__ = "cast_crew"

    person_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    role: Mapped[str | None] = mapped_column(String(100))  # actor, director, writer...


class ContentCastCrew(Base):
    """Junction between content and cast/crew."""

    __tablename__ = "content_cast_crew"

    content_id: Mapped[str] = mapped_column(
        ForeignKey("content_metadata.content_id", ondelete="CASCADE"),
        primary_key=True,
    )
    person_id: Mapped[str] = mapped_column(
        ForeignKey("cast_crew.person_id", ondelete="CASCADE"),
        primary_key=True,
    )
    character_name: Mapped[str | None] = mapped_column(String(255))

"""
NoteShelf Backend — Note SQLAlchemy Model
==========================================

What:  ORM model representing the `notes` table in SQLite.
How:   Inherits from the declarative Base; `NoteStore.initialize()` creates the
       table from this definition when it does not exist yet.
Who:   Used by NoteStore for every statement and by NoteResponse for serialization.

Table Design:
    - id: INTEGER PRIMARY KEY AUTOINCREMENT, so a deleted id is never handed out again
    - title / description: TEXT NOT NULL, guaranteed non-blank by NoteService
    - category: TEXT DEFAULT 'Others'
    - created_at / updated_at: DATETIME DEFAULT CURRENT_TIMESTAMP, naive UTC

    Index on created_at:
        Serves the only listing order, newest notes first.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from noteshelf.models.base import Base

DEFAULT_CATEGORY = "Others"


def utcnow() -> datetime:
    """
    Current UTC time without tzinfo.

    SQLite has no timezone-aware column type and CURRENT_TIMESTAMP is naive
    UTC, so values written from Python use the same representation.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Note(Base):
    """
    A titled text note with an optional category.

    Lifecycle:
        1. Inserted by NoteStore.create() with created_at == updated_at
        2. Updated in place by NoteStore.update(); updated_at refreshed
        3. Removed by NoteStore.delete() (hard delete, no tombstone)
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False)

    category: Mapped[str] = mapped_column(
        Text,
        nullable=True,
        default=DEFAULT_CATEGORY,
        server_default=text("'Others'"),
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_notes_created_at", "created_at"),
        # Emits AUTOINCREMENT so SQLite never reuses the id of a deleted row
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        """Developer-friendly string representation for debugging."""
        return (
            f"<Note(id={self.id}, title='{self.title}', "
            f"category='{self.category}', created_at='{self.created_at}')>"
        )

"""ORM models for the notes table."""

from noteshelf.models.base import Base
from noteshelf.models.note import Note

__all__ = ["Base", "Note"]

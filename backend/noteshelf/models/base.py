"""
NoteShelf Backend — Declarative Base
=====================================

What:  Base class shared by every SQLAlchemy model.
How:   SQLAlchemy 2.0 `DeclarativeBase`; its metadata drives the schema
       bootstrap in `NoteStore.initialize()` (create-if-absent).
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models register their tables on `Base.metadata`, which the store
    uses to create the schema on startup.
    """
    pass

"""
NoteShelf Backend — Application Package Initializer
====================================================

What: Marks the `noteshelf` directory as a Python package.
Who:  Imported by uvicorn (`noteshelf.main:app`), pytest, and the `noteshelf` console script.

Architecture Note:
    The backend is layered so each layer can be tested on its own:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Validation & Mapping)   │  ← Trimming, defaults, not-found
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        NoteStore (Persistence)      │  ← Async SQLAlchemy over SQLite
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"

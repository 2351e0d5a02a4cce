"""
NoteShelf Backend — Pydantic Request/Response Schemas
======================================================

What:  Pydantic models defining the JSON contract of the notes API.
How:   FastAPI parses request bodies into NotePayload and serializes the
       response models; OpenAPI docs are generated from both.

Design Decision:
    NotePayload fields are all optional. Presence and blankness of title and
    description are business rules checked by NoteService, so a missing
    field produces the same 400 message as a whitespace-only one instead of
    FastAPI's generic 422.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NotePayload(BaseModel):
    """Body of POST /notes and PUT /notes/{id}."""

    title: Optional[str] = Field(default=None, description="Note title (required, non-blank)")
    description: Optional[str] = Field(
        default=None,
        description="Note body text (required, non-blank)",
    )
    category: Optional[str] = Field(
        default=None,
        description="Free-form category; 'Others' when omitted on create",
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    Full representation of a stored note.

    Returned as the items of GET /notes and inside the POST /notes response.
    Timestamps are UTC.
    """

    id: int = Field(description="Store-assigned note identifier")
    title: str
    description: str
    category: Optional[str] = None
    created_at: datetime = Field(description="When the note was created (UTC)")
    updated_at: datetime = Field(description="When the note was last changed (UTC)")

    model_config = {"from_attributes": True}


class NoteCreatedResponse(BaseModel):
    """Returned by POST /notes with HTTP 201."""

    id: int
    message: str = Field(default="Note created successfully")
    note: NoteResponse


class NoteChangedResponse(BaseModel):
    """Returned by successful PUT and DELETE on /notes/{id}."""

    message: str
    id: int


class ErrorResponse(BaseModel):
    """
    Error body shared by every failure response.

    Example:
        {"error": "Invalid note ID"}
    """

    error: str = Field(description="Human-readable error description")

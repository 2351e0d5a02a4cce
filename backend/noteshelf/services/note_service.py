"""
NoteShelf Backend — Note Service (Validation & Orchestration)
==============================================================

What:  Validates and normalizes note input, calls NoteStore, and turns store
       results into response models or typed exceptions.
How:   One method per API operation. Validation always runs before the store
       is touched; a changed-row count of zero becomes NotFoundError.
Who:   Called by the route handlers in routes/notes.py.

Request Flow (PUT /notes/{id}):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────┐
    │  Route   │───▶│  Parse id   │───▶│ Validate and │───▶│  Store   │
    │          │    │  (400)      │    │ trim (400)   │    │ (404/500)│
    └──────────┘    └─────────────┘    └──────────────┘    └──────────┘
"""

import logging
from typing import List, Optional, Tuple

from noteshelf.database import NoteStore
from noteshelf.exceptions import NotFoundError, ValidationError
from noteshelf.models.note import DEFAULT_CATEGORY
from noteshelf.schemas.note import (
    NoteChangedResponse,
    NoteCreatedResponse,
    NotePayload,
    NoteResponse,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Title and description are required and cannot be empty"
INVALID_ID_MESSAGE = "Invalid note ID"


def parse_note_id(raw_id: str) -> int:
    """
    Parse a path segment into a note id.

    Raises:
        ValidationError: The segment is not an integer.
    """
    # Strict: "12abc" and "1.5" are rejected rather than truncated to a prefix
    try:
        return int(raw_id)
    except (TypeError, ValueError):
        raise ValidationError(message=INVALID_ID_MESSAGE, field="id")


def normalize_category(category: Optional[str]) -> Optional[str]:
    """Trimmed category, or None when it is absent or blank."""
    if category is None:
        return None
    return category.strip() or None


def require_text(payload: Optional[NotePayload]) -> Tuple[str, str]:
    """
    Return the trimmed (title, description) pair.

    Raises:
        ValidationError: Either field is missing or blank after trimming.
    """
    title = (payload.title or "").strip() if payload else ""
    description = (payload.description or "").strip() if payload else ""
    if not title or not description:
        raise ValidationError(
            message=REQUIRED_FIELDS_MESSAGE,
            field="title" if not title else "description",
        )
    return title, description


class NoteService:
    """
    API-side business rules for notes.

    Holds a reference to the injected NoteStore and nothing else; a new
    instance per request is cheap.
    """

    def __init__(self, store: NoteStore):
        self.store = store

    async def list_notes(self, search: Optional[str] = None) -> List[NoteResponse]:
        """All notes, or those matching `search`, newest first."""
        notes = await self.store.list(search)
        return [NoteResponse.model_validate(note) for note in notes]

    async def create_note(self, payload: Optional[NotePayload]) -> NoteCreatedResponse:
        """
        Validate, normalize and persist a new note.

        Title and description are trimmed; category is trimmed and falls back
        to "Others" when absent or blank.

        Raises:
            ValidationError: Title or description missing/blank (→ 400)
            PersistenceError: Insert failed (→ 500)
        """
        title, description = require_text(payload)
        category = normalize_category(payload.category) or DEFAULT_CATEGORY

        note = await self.store.create(title, description, category)
        return NoteCreatedResponse(
            id=note.id,
            message="Note created successfully",
            note=NoteResponse.model_validate(note),
        )

    async def update_note(
        self, raw_id: str, payload: Optional[NotePayload]
    ) -> NoteChangedResponse:
        """
        Replace title and description of an existing note.

        The id is checked before the body. A blank or absent category keeps
        the category already stored.

        Raises:
            ValidationError: Non-integer id, or title/description missing (→ 400)
            NotFoundError: No note has this id (→ 404)
            PersistenceError: Update failed (→ 500)
        """
        note_id = parse_note_id(raw_id)
        title, description = require_text(payload)
        category = normalize_category(payload.category)

        changed = await self.store.update(note_id, title, description, category)
        if changed == 0:
            raise NotFoundError(resource_id=note_id)

        logger.info("Note %d updated", note_id)
        return NoteChangedResponse(message="Note updated successfully", id=note_id)

    async def delete_note(self, raw_id: str) -> NoteChangedResponse:
        """
        Hard-delete a note.

        Raises:
            ValidationError: Non-integer id (→ 400)
            NotFoundError: No note has this id (→ 404)
            PersistenceError: Delete failed (→ 500)
        """
        note_id = parse_note_id(raw_id)

        changed = await self.store.delete(note_id)
        if changed == 0:
            raise NotFoundError(resource_id=note_id)

        logger.info("Note %d deleted", note_id)
        return NoteChangedResponse(message="Note deleted successfully", id=note_id)

"""
NoteShelf Backend — Notes Route Handlers
=========================================

What:  GET/POST /notes and PUT/DELETE /notes/{note_id}.
How:   Extracts query/path/body values, delegates to NoteService, returns the
       response model. Errors are raised as exceptions and rendered by the
       global handlers in main.py.

Why `note_id: str`:
    The id is validated by NoteService so that a non-integer segment yields
    400 {"error": "Invalid note ID"} rather than FastAPI's 422.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from noteshelf.database import NoteStore
from noteshelf.schemas.note import (
    ErrorResponse,
    NoteChangedResponse,
    NoteCreatedResponse,
    NotePayload,
    NoteResponse,
)
from noteshelf.services.note_service import NoteService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])


def get_note_store(request: Request) -> NoteStore:
    """Store instance injected into the app by `create_app()`."""
    return request.app.state.store


def get_note_service(store: NoteStore = Depends(get_note_store)) -> NoteService:
    return NoteService(store)


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    responses={500: {"description": "Store failure", "model": ErrorResponse}},
    summary="List notes, optionally filtered by a search term",
    description=(
        "Returns every note newest first. With `search`, only notes whose title, "
        "category or description contain the term are returned."
    ),
)
async def list_notes(
    search: Optional[str] = Query(
        default=None,
        description="Substring matched against title, category and description",
    ),
    service: NoteService = Depends(get_note_service),
) -> List[NoteResponse]:
    return await service.list_notes(search)


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteCreatedResponse,
    responses={
        400: {"description": "Missing/blank title or description, or invalid JSON", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Create a note",
)
async def create_note(
    payload: Optional[NotePayload] = None,
    service: NoteService = Depends(get_note_service),
) -> NoteCreatedResponse:
    return await service.create_note(payload)


@router.put(
    "/notes/{note_id}",
    response_model=NoteChangedResponse,
    responses={
        400: {"description": "Invalid id or missing/blank fields", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Update a note",
)
async def update_note(
    note_id: str,
    payload: Optional[NotePayload] = None,
    service: NoteService = Depends(get_note_service),
) -> NoteChangedResponse:
    return await service.update_note(note_id, payload)


@router.delete(
    "/notes/{note_id}",
    response_model=NoteChangedResponse,
    responses={
        400: {"description": "Invalid id", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> NoteChangedResponse:
    return await service.delete_note(note_id)

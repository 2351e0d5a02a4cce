"""
NoteShelf Backend — Note Service Unit Tests
============================================

What:  Tests for NoteService validation, normalization and not-found mapping.
How:   Uses a mock NoteStore (no database); asserts on what reaches the store.

What we test:
    ✅ Blank/missing title or description rejected before the store is called
    ✅ Trimming and the "Others" category default
    ✅ Non-integer ids rejected; zero changed rows → NotFoundError
    ✅ PersistenceError propagates untouched
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from noteshelf.exceptions import NotFoundError, PersistenceError, ValidationError
from noteshelf.schemas.note import NotePayload
from noteshelf.services.note_service import (
    NoteService,
    normalize_category,
    parse_note_id,
)


def make_note(note_id=1, title="Buy milk", description="2%", category="Errand"):
    now = datetime(2024, 1, 15, 12, 0, 0)
    note = MagicMock()
    note.id = note_id
    note.title = title
    note.description = description
    note.category = category
    note.created_at = now
    note.updated_at = now
    return note


class TestHelpers:
    """Tests for the module-level parsing helpers."""

    @pytest.mark.parametrize("raw, expected", [("1", 1), ("42", 42), ("-3", -3)])
    def test_parse_note_id_accepts_integers(self, raw, expected):
        assert parse_note_id(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "1.5", "", "12abc", "1e3", " 7x"])
    def test_parse_note_id_rejects_non_integers(self, raw):
        with pytest.raises(ValidationError, match="Invalid note ID"):
            parse_note_id(raw)

    def test_normalize_category(self):
        assert normalize_category(None) is None
        assert normalize_category("   ") is None
        assert normalize_category("  Work ") == "Work"


class TestNoteServiceCreate:
    """Tests for create_note."""

    @pytest.mark.asyncio
    async def test_create_trims_fields(self, mock_store):
        mock_store.create.return_value = make_note(title="Title", description="Body", category="Work")
        service = NoteService(mock_store)

        result = await service.create_note(
            NotePayload(title="  Title ", description="\tBody\n", category=" Work ")
        )

        mock_store.create.assert_awaited_once_with("Title", "Body", "Work")
        assert result.id == 1
        assert result.message == "Note created successfully"
        assert result.note.title == "Title"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("category", [None, "", "   "])
    async def test_create_defaults_blank_category(self, mock_store, category):
        mock_store.create.return_value = make_note(category="Others")
        service = NoteService(mock_store)

        await service.create_note(NotePayload(title="t", description="d", category=category))

        mock_store.create.assert_awaited_once_with("t", "d", "Others")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            None,
            NotePayload(),
            NotePayload(title="t"),
            NotePayload(description="d"),
            NotePayload(title="   ", description="d"),
            NotePayload(title="t", description=""),
        ],
    )
    async def test_create_rejects_missing_text(self, mock_store, payload):
        service = NoteService(mock_store)

        with pytest.raises(ValidationError, match="Title and description are required"):
            await service.create_note(payload)

        mock_store.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_propagates_persistence_error(self, mock_store):
        mock_store.create.side_effect = PersistenceError(message="Failed to create note")
        service = NoteService(mock_store)

        with pytest.raises(PersistenceError, match="Failed to create note"):
            await service.create_note(NotePayload(title="t", description="d"))


class TestNoteServiceUpdate:
    """Tests for update_note."""

    @pytest.mark.asyncio
    async def test_update_success(self, mock_store):
        service = NoteService(mock_store)

        result = await service.update_note("7", NotePayload(title=" New ", description="Body"))

        mock_store.update.assert_awaited_once_with(7, "New", "Body", None)
        assert result.id == 7
        assert result.message == "Note updated successfully"

    @pytest.mark.asyncio
    async def test_update_passes_trimmed_category(self, mock_store):
        service = NoteService(mock_store)

        await service.update_note("7", NotePayload(title="t", description="d", category=" Home "))

        mock_store.update.assert_awaited_once_with(7, "t", "d", "Home")

    @pytest.mark.asyncio
    async def test_update_not_found(self, mock_store):
        mock_store.update.return_value = 0
        service = NoteService(mock_store)

        with pytest.raises(NotFoundError, match="Note not found"):
            await service.update_note("99", NotePayload(title="t", description="d"))

    @pytest.mark.asyncio
    async def test_update_checks_id_before_body(self, mock_store):
        service = NoteService(mock_store)

        with pytest.raises(ValidationError, match="Invalid note ID"):
            await service.update_note("abc", NotePayload())

        mock_store.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_rejects_blank_text(self, mock_store):
        service = NoteService(mock_store)

        with pytest.raises(ValidationError, match="Title and description are required"):
            await service.update_note("1", NotePayload(title="t", description="  "))

        mock_store.update.assert_not_awaited()


class TestNoteServiceDeleteAndList:
    """Tests for delete_note and list_notes."""

    @pytest.mark.asyncio
    async def test_delete_success(self, mock_store):
        service = NoteService(mock_store)

        result = await service.delete_note("3")

        mock_store.delete.assert_awaited_once_with(3)
        assert result.message == "Note deleted successfully"
        assert result.id == 3

    @pytest.mark.asyncio
    async def test_delete_not_found(self, mock_store):
        mock_store.delete.return_value = 0
        service = NoteService(mock_store)

        with pytest.raises(NotFoundError):
            await service.delete_note("3")

    @pytest.mark.asyncio
    async def test_delete_invalid_id(self, mock_store):
        service = NoteService(mock_store)

        with pytest.raises(ValidationError, match="Invalid note ID"):
            await service.delete_note("x")

        mock_store.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_passes_search_through(self, mock_store):
        mock_store.list.return_value = [make_note(2, title="foo"), make_note(1)]
        service = NoteService(mock_store)

        result = await service.list_notes("foo")

        mock_store.list.assert_awaited_once_with("foo")
        assert [n.id for n in result] == [2, 1]

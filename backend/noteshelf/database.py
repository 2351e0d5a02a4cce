"""
NoteShelf Backend — Note Store (Persistence)
=============================================

What:  The only component that touches the `notes` table.
How:   Wraps an async SQLAlchemy engine (aiosqlite driver) and a session
       factory. Every operation is one parameterized statement run in its own
       session: commit on success, rollback on error.
Who:   Constructed by the application factory (or a test), initialized by the
       lifespan handler, injected into NoteService through `app.state.store`.
When:  `initialize()` on startup, `close()` on shutdown, operations per request.

Lifecycle:
    store = NoteStore("sqlite+aiosqlite:///./notes.db")
    await store.initialize()   # open/create file, CREATE TABLE IF NOT EXISTS
    ...                         # list / create / update / delete
    await store.close()        # dispose pooled connections

Error Contract:
    initialize() → StoreInitializationError (fatal, raised to the caller)
    operations   → PersistenceError("Failed to <verb> note(s)"), engine error
                   kept in `context` for the server log only
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, List, Optional

from sqlalchemy import delete, desc, or_, select, update
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from noteshelf.exceptions import PersistenceError, StoreInitializationError
from noteshelf.models import Base, Note
from noteshelf.models.note import DEFAULT_CATEGORY, utcnow

logger = logging.getLogger(__name__)

# SQLite INTEGER is a signed 64-bit value; no row can carry an id outside it
MIN_ROW_ID = -(2 ** 63)
MAX_ROW_ID = 2 ** 63 - 1


class NoteStore:
    """
    Durable persistence of notes, schema bootstrap and filtered retrieval.

    The store holds no state besides its engine; correctness under
    concurrent writers is left to SQLite's own locking.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_initialized(self) -> bool:
        return self._session_factory is not None

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def initialize(self) -> None:
        """
        Open (creating if absent) the backing file and ensure the schema exists.

        Idempotent: calling it again reuses the engine and `create_all`
        skips tables that already exist.

        Raises:
            StoreInitializationError: The file or the table could not be created.
        """
        try:
            self._ensure_parent_directory()
            if self._engine is None:
                self._engine = create_async_engine(self.database_url, echo=self.echo)
                # expire_on_commit=False keeps returned notes readable after commit
                self._session_factory = async_sessionmaker(
                    self._engine,
                    class_=AsyncSession,
                    expire_on_commit=False,
                )
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (OSError, SQLAlchemyError) as e:
            logger.critical("Cannot open note store at %s: %s", self.database_url, e)
            await self.close()
            raise StoreInitializationError(
                context={
                    "database_url": self.database_url,
                    "original_error": str(e),
                },
            ) from e

        logger.info("Note store ready: %s", self.database_url)

    async def close(self) -> None:
        """Dispose the engine and its pooled connections. Safe to call twice."""
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_factory = None

    def _ensure_parent_directory(self) -> None:
        database = make_url(self.database_url).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Yield a session that commits on success and rolls back on any error.

        Raises:
            PersistenceError: The store has not been initialized.
        """
        if self._session_factory is None:
            raise PersistenceError(message="Note store is not initialized")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    # ── Operations ────────────────────────────────────────────────────────

    async def list(self, search: Optional[str] = None) -> List[Note]:
        """
        Return notes newest first, optionally filtered by a search term.

        With a non-empty `search`, only notes whose title, category or
        description match `LIKE '%search%'` are returned. SQLite's LIKE is
        case-insensitive for ASCII letters.
        """
        query = select(Note)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    Note.title.like(pattern),
                    Note.category.like(pattern),
                    Note.description.like(pattern),
                )
            )
        # id breaks ties between notes created within the same clock tick
        query = query.order_by(desc(Note.created_at), desc(Note.id))

        try:
            async with self.session() as session:
                result = await session.execute(query)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._persistence_error("retrieve notes", e) from e

    async def create(
        self,
        title: str,
        description: str,
        category: str = DEFAULT_CATEGORY,
    ) -> Note:
        """Insert a note with created_at == updated_at and return it with its id."""
        now = utcnow()
        note = Note(
            title=title,
            description=description,
            category=category,
            created_at=now,
            updated_at=now,
        )
        try:
            async with self.session() as session:
                session.add(note)
                await session.flush()  # assigns the AUTOINCREMENT id
        except SQLAlchemyError as e:
            raise self._persistence_error("create note", e) from e

        logger.info("Note %d created", note.id)
        return note

    async def update(
        self,
        note_id: int,
        title: str,
        description: str,
        category: Optional[str] = None,
    ) -> int:
        """
        Update a note in place and refresh its updated_at.

        A `category` of None leaves the stored category untouched.

        Returns:
            Number of rows changed: 0 when no note has this id, otherwise 1.
        """
        values = {
            "title": title,
            "description": description,
            "updated_at": utcnow(),
        }
        if category is not None:
            values["category"] = category

        if not MIN_ROW_ID <= note_id <= MAX_ROW_ID:
            return 0

        statement = (
            update(Note)
            .where(Note.id == note_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            async with self.session() as session:
                result = await session.execute(statement)
                changed = result.rowcount
        except SQLAlchemyError as e:
            raise self._persistence_error("update note", e) from e

        logger.debug("Update of note %d changed %d row(s)", note_id, changed)
        return changed

    async def delete(self, note_id: int) -> int:
        """
        Hard-delete a note.

        Returns:
            Number of rows changed: 0 when no note has this id, otherwise 1.
        """
        if not MIN_ROW_ID <= note_id <= MAX_ROW_ID:
            return 0

        statement = (
            delete(Note)
            .where(Note.id == note_id)
            .execution_options(synchronize_session=False)
        )
        try:
            async with self.session() as session:
                result = await session.execute(statement)
                changed = result.rowcount
        except SQLAlchemyError as e:
            raise self._persistence_error("delete note", e) from e

        logger.debug("Delete of note %d changed %d row(s)", note_id, changed)
        return changed

    def _persistence_error(self, action: str, error: Exception) -> PersistenceError:
        logger.error("Error trying to %s: %s", action, error)
        return PersistenceError(
            message=f"Failed to {action}",
            context={
                "original_error": str(error),
                "error_type": type(error).__name__,
            },
        )

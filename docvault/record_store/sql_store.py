"""
docvault/record_store/sql_store.py

SQLAlchemy Core implementation of the RecordStore interface.

Schema handling: on open() the documents table is created when absent and
its columns are inspected. Tables created by older deployments lack the
original_filename column; with auto_migrate on it is added, otherwise the
store runs in legacy mode and writes only filename/filepath/filesize.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    Table,
    Text,
    create_engine,
    func,
    inspect,
    select,
    text,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from docvault.core.config import settings
from docvault.core.exceptions import RecordStoreError
from docvault.core.logger import get_logger
from docvault.record_store.base import Document, NewDocument, RecordStore

logger = get_logger(__name__)

DISPLAY_NAME_COLUMN = "original_filename"

metadata = MetaData()

documents_table = Table(
    "documents",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("filename", Text, nullable=False),
    Column(DISPLAY_NAME_COLUMN, Text, nullable=True),
    Column("filepath", Text, nullable=False),
    Column("filesize", Integer, nullable=False),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
    # AUTOINCREMENT keeps SQLite from handing out ids of deleted rows again.
    sqlite_autoincrement=True,
)


class SqlRecordStore(RecordStore):
    """
    RecordStore backed by any SQLAlchemy-supported database (SQLite by default).

    The engine is created in open() and disposed in close(); the store
    object itself is built once and injected into the services.
    """

    def __init__(
        self,
        database_url: str | None = None,
        auto_migrate: bool | None = None,
    ) -> None:
        """
        Args:
            database_url : SQLAlchemy URL. Defaults to ``settings.database_url``.
            auto_migrate : Add a missing original_filename column on open().
                           Defaults to ``settings.auto_migrate``.
        """
        self._url = database_url or settings.database_url
        self._auto_migrate = settings.auto_migrate if auto_migrate is None else auto_migrate
        self._engine: Engine | None = None
        self._has_display_name = True

    # ── Lifecycle ──────────────────────────────────────────────────────────────

    def open(self) -> None:
        url = make_url(self._url)
        connect_args: dict[str, Any] = {}
        if url.get_backend_name() == "sqlite":
            # Requests are served from FastAPI's worker threads.
            connect_args["check_same_thread"] = False
            if url.database and url.database != ":memory:":
                Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        try:
            self._engine = create_engine(self._url, connect_args=connect_args)
            metadata.create_all(self._engine)
            self._has_display_name = self._inspect_display_name()
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Failed to open record store: {exc}") from exc

        if not self._has_display_name and self._auto_migrate:
            self._migrate_display_name()

        logger.info(
            "SqlRecordStore ready — backend=%s  %s column=%s",
            url.get_backend_name(),
            DISPLAY_NAME_COLUMN,
            "present" if self._has_display_name else "absent (legacy schema)",
        )

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.info("SqlRecordStore closed.")

    @property
    def supports_display_name(self) -> bool:
        return self._has_display_name

    # ── RecordStore interface ──────────────────────────────────────────────────

    def insert(self, new: NewDocument) -> Document:
        if self._has_display_name:
            try:
                return self._insert(new, with_display_name=True)
            except RecordStoreError:
                # Only a column that vanished since open() earns a retry.
                if self._inspect_display_name():
                    raise
                self._has_display_name = False
                logger.warning(
                    "%s column is gone — retrying insert of '%s' without it.",
                    DISPLAY_NAME_COLUMN,
                    new.storage_key,
                )
        return self._insert(new, with_display_name=False)

    def get(self, document_id: int) -> Optional[Document]:
        stmt = select(*self._columns()).where(documents_table.c.id == document_id)
        try:
            with self._require_engine().connect() as conn:
                row = conn.execute(stmt).first()
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Lookup of document {document_id} failed: {exc}") from exc
        return self._to_document(row) if row is not None else None

    def list_all(self) -> List[Document]:
        stmt = select(*self._columns()).order_by(
            documents_table.c.created_at.desc(),
            documents_table.c.id.desc(),
        )
        try:
            with self._require_engine().connect() as conn:
                rows = conn.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Listing documents failed: {exc}") from exc
        return [self._to_document(row) for row in rows]

    def delete(self, document_id: int) -> bool:
        stmt = documents_table.delete().where(documents_table.c.id == document_id)
        try:
            with self._require_engine().begin() as conn:
                deleted = conn.execute(stmt).rowcount
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Deleting document {document_id} failed: {exc}") from exc
        return deleted > 0

    # ── Internals ──────────────────────────────────────────────────────────────

    def _require_engine(self) -> Engine:
        if self._engine is None:
            raise RecordStoreError("Record store is not open. Call open() first.")
        return self._engine

    def _inspect_display_name(self) -> bool:
        try:
            columns = inspect(self._require_engine()).get_columns(documents_table.name)
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Schema inspection failed: {exc}") from exc
        return any(col["name"] == DISPLAY_NAME_COLUMN for col in columns)

    def _migrate_display_name(self) -> None:
        logger.info("Adding %s column to legacy documents table.", DISPLAY_NAME_COLUMN)
        try:
            with self._require_engine().begin() as conn:
                conn.execute(
                    text(f"ALTER TABLE {documents_table.name} ADD COLUMN {DISPLAY_NAME_COLUMN} TEXT")
                )
        except SQLAlchemyError as exc:
            logger.warning(
                "Could not add %s column, continuing with legacy schema: %s",
                DISPLAY_NAME_COLUMN,
                exc,
            )
            return
        self._has_display_name = self._inspect_display_name()

    def _columns(self) -> list:
        t = documents_table.c
        columns = [t.id, t.filename, t.filepath, t.filesize, t.created_at]
        if self._has_display_name:
            columns.append(t[DISPLAY_NAME_COLUMN])
        return columns

    def _insert(self, new: NewDocument, with_display_name: bool) -> Document:
        values: dict[str, Any] = {
            "filename": new.storage_key,
            "filepath": new.blob_location,
            "filesize": new.size_bytes,
        }
        if with_display_name:
            values[DISPLAY_NAME_COLUMN] = new.display_name

        try:
            with self._require_engine().begin() as conn:
                result = conn.execute(documents_table.insert().values(**values))
                new_id = result.inserted_primary_key[0]
                row = conn.execute(
                    select(*self._columns()).where(documents_table.c.id == new_id)
                ).one()
        except SQLAlchemyError as exc:
            raise RecordStoreError(
                f"Could not record document '{new.storage_key}': {exc}"
            ) from exc

        logger.debug("Inserted document %d ('%s').", new_id, new.storage_key)
        return self._to_document(row)

    @staticmethod
    def _to_document(row: Any) -> Document:
        mapping = row._mapping
        return Document(
            id=mapping["id"],
            storage_key=mapping["filename"],
            display_name=mapping.get(DISPLAY_NAME_COLUMN),
            blob_location=mapping["filepath"],
            size_bytes=mapping["filesize"],
            created_at=mapping["created_at"],
        )

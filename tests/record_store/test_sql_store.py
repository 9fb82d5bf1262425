"""
tests/record_store/test_sql_store.py

Unit tests for SqlRecordStore against throwaway SQLite files.

Legacy deployments are reproduced by creating the documents table by
hand, without the original_filename column, before the store opens it.
"""

from datetime import datetime
from pathlib import Path

import pytest
from sqlalchemy import create_engine, text

from docvault.core.exceptions import RecordStoreError
from docvault.record_store.base import NewDocument
from docvault.record_store.sql_store import SqlRecordStore, documents_table

LEGACY_DDL = """
CREATE TABLE documents (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    filename TEXT NOT NULL,
    filepath TEXT NOT NULL,
    filesize INTEGER NOT NULL,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
)
"""


# ── Helpers ────────────────────────────────────────────────────────────────────

def _new(key: str = "1-aa-report.pdf", display: str = "report.pdf", size: int = 10) -> NewDocument:
    return NewDocument(
        storage_key=key,
        display_name=display,
        blob_location=f"/blobs/{key}",
        size_bytes=size,
    )


def _legacy_store(database_url: str, auto_migrate: bool) -> SqlRecordStore:
    engine = create_engine(database_url)
    with engine.begin() as conn:
        conn.execute(text(LEGACY_DDL))
        conn.execute(
            text("INSERT INTO documents (filename, filepath, filesize) VALUES ('old.pdf', '/blobs/old.pdf', 3)")
        )
    engine.dispose()

    store = SqlRecordStore(database_url, auto_migrate=auto_migrate)
    store.open()
    return store


@pytest.fixture
def legacy_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'legacy.sqlite'}"


# ── Current schema ─────────────────────────────────────────────────────────────

class TestSqlRecordStore:

    def test_open_creates_database_file_and_parent_dir(self, records, tmp_path: Path) -> None:
        assert (tmp_path / "data" / "documents.sqlite").is_file()
        assert records.supports_display_name is True

    def test_insert_returns_populated_document(self, records) -> None:
        doc = records.insert(_new())

        assert doc.id >= 1
        assert doc.storage_key == "1-aa-report.pdf"
        assert doc.display_name == "report.pdf"
        assert doc.blob_location == "/blobs/1-aa-report.pdf"
        assert doc.size_bytes == 10
        assert isinstance(doc.created_at, datetime)

    def test_get_round_trips_and_missing_is_none(self, records) -> None:
        doc = records.insert(_new())

        assert records.get(doc.id) == doc
        assert records.get(doc.id + 100) is None

    def test_ids_are_not_reused_after_delete(self, records) -> None:
        first = records.insert(_new("1-a-x.pdf"))
        records.delete(first.id)

        second = records.insert(_new("2-b-x.pdf"))

        assert second.id > first.id

    def test_list_is_newest_first_with_id_tiebreak(self, records) -> None:
        a = records.insert(_new("1-a-a.pdf"))
        b = records.insert(_new("2-b-b.pdf"))
        c = records.insert(_new("3-c-c.pdf"))

        # a is backdated, b and c share a timestamp.
        with records._require_engine().begin() as conn:
            conn.execute(
                documents_table.update()
                .where(documents_table.c.id == a.id)
                .values(created_at=datetime(2020, 1, 1))
            )
            conn.execute(
                documents_table.update()
                .where(documents_table.c.id.in_([b.id, c.id]))
                .values(created_at=datetime(2024, 6, 1, 12, 0, 0))
            )

        assert [d.id for d in records.list_all()] == [c.id, b.id, a.id]

    def test_list_empty(self, records) -> None:
        assert records.list_all() == []

    def test_delete_reports_whether_a_row_matched(self, records) -> None:
        doc = records.insert(_new())

        assert records.delete(doc.id) is True
        assert records.delete(doc.id) is False
        assert records.get(doc.id) is None

    def test_constraint_violation_is_wrapped_and_not_retried(self, records) -> None:
        bad = NewDocument(storage_key=None, display_name="x.pdf", blob_location="/b", size_bytes=1)  # type: ignore[arg-type]

        with pytest.raises(RecordStoreError, match="Could not record"):
            records.insert(bad)

        assert records.supports_display_name is True
        assert records.list_all() == []

    def test_closed_store_raises(self, database_url: str) -> None:
        store = SqlRecordStore(database_url)
        store.open()
        store.close()

        with pytest.raises(RecordStoreError, match="not open"):
            store.get(1)

    def test_unopened_store_raises(self, database_url: str) -> None:
        with pytest.raises(RecordStoreError):
            SqlRecordStore(database_url).list_all()


# ── Legacy schema ──────────────────────────────────────────────────────────────

class TestLegacySchema:

    def test_without_migration_runs_in_legacy_mode(self, legacy_url: str) -> None:
        store = _legacy_store(legacy_url, auto_migrate=False)
        try:
            doc = store.insert(_new())

            assert store.supports_display_name is False
            assert doc.display_name is None
            assert doc.download_name == doc.storage_key
            assert {d.storage_key for d in store.list_all()} == {"old.pdf", doc.storage_key}
        finally:
            store.close()

    def test_migration_adds_the_column(self, legacy_url: str) -> None:
        store = _legacy_store(legacy_url, auto_migrate=True)
        try:
            doc = store.insert(_new())
            old = [d for d in store.list_all() if d.storage_key == "old.pdf"][0]

            assert store.supports_display_name is True
            assert doc.display_name == "report.pdf"
            assert old.display_name is None
        finally:
            store.close()

    def test_insert_retries_once_when_column_vanished(self, legacy_url: str) -> None:
        """
        The store believes the column exists but the table lacks it: the
        failed insert triggers a re-inspection and a single reduced retry.
        """
        store = _legacy_store(legacy_url, auto_migrate=False)
        store._has_display_name = True
        try:
            doc = store.insert(_new())

            assert doc.display_name is None
            assert store.supports_display_name is False
            assert store.get(doc.id) == doc
        finally:
            store.close()

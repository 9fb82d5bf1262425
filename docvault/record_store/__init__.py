"""docvault/record_store/__init__.py — public API of the record_store package."""

from docvault.record_store.base import Document, NewDocument, RecordStore
from docvault.record_store.sql_store import SqlRecordStore

__all__ = [
    "RecordStore",
    "Document",
    "NewDocument",
    "SqlRecordStore",
]

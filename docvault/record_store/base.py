"""
docvault/record_store/base.py

Abstract interface for the record store layer.

Design goals:
  - Services depend only on this interface, never on a concrete backend.
  - Document and NewDocument are the shared vocabulary across all layers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional


# ── Shared data-transfer objects ──────────────────────────────────────────────

@dataclass(frozen=True)
class NewDocument:
    """
    Insert payload for a freshly verified upload.

    Attributes:
        storage_key   : Sanitized, salted blob key.
        display_name  : Normalized original filename shown to the user.
        blob_location : Location returned by BlobStore.location_for().
        size_bytes    : Bytes actually written to the blob.
    """

    storage_key: str
    display_name: str
    blob_location: str
    size_bytes: int


@dataclass(frozen=True)
class Document:
    """
    The durable record of one stored file.

    ``display_name`` is None on rows written while the table had no
    original_filename column.
    """

    id: int
    storage_key: str
    display_name: Optional[str]
    blob_location: str
    size_bytes: int
    created_at: Optional[datetime]

    @property
    def download_name(self) -> str:
        """Filename offered to the client on download."""
        return self.display_name or self.storage_key


# ── Abstract base ──────────────────────────────────────────────────────────────

class RecordStore(ABC):
    """
    Contract every record-store backend must fulfil.

    Backends are opened once at startup and closed at shutdown; every
    backend failure surfaces as RecordStoreError.
    """

    @abstractmethod
    def open(self) -> None:
        """Connect, create the schema if absent and bring it up to date."""

    @abstractmethod
    def close(self) -> None:
        """Release all connections."""

    @property
    @abstractmethod
    def supports_display_name(self) -> bool:
        """False while running against a schema without original_filename."""

    @abstractmethod
    def insert(self, new: NewDocument) -> Document:
        """Persist a new row and return it with its assigned id and timestamp."""

    @abstractmethod
    def get(self, document_id: int) -> Optional[Document]:
        """Return the row for ``document_id``, or None."""

    @abstractmethod
    def list_all(self) -> List[Document]:
        """Return every row, newest first (ties broken by id, descending)."""

    @abstractmethod
    def delete(self, document_id: int) -> bool:
        """Delete the row; return False when no row matched."""

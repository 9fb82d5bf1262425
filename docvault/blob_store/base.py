"""
docvault/blob_store/base.py

Abstract interface for the blob store layer.

Design goals:
  - Services depend only on this interface, never on a concrete backend.
  - Blobs are addressed by a "location" string the backend hands out via
    location_for(); callers persist it verbatim and pass it back later.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from pathlib import Path
from typing import BinaryIO


class BlobStore(ABC):
    """
    Contract every blob-store backend must fulfil.

    All backend failures must surface as BlobStoreError.
    """

    @abstractmethod
    def prepare(self) -> None:
        """Make the store ready for use (e.g. create its root directory)."""

    @abstractmethod
    def location_for(self, storage_key: str) -> str:
        """Return the fully-qualified location for a storage key."""

    @abstractmethod
    def open_for_write(self, location: str) -> AbstractContextManager[BinaryIO]:
        """
        Open a new blob for writing.

        Must never overwrite an existing blob; an existing location raises
        BlobStoreError.
        """

    @abstractmethod
    def read_head(self, location: str, size: int) -> bytes:
        """Return at most the first ``size`` bytes of the blob."""

    @abstractmethod
    def exists(self, location: str) -> bool:
        """Return True when a blob is present at ``location``."""

    @abstractmethod
    def local_path(self, location: str) -> Path:
        """Return a local filesystem path that can be streamed to a client."""

    @abstractmethod
    def delete(self, location: str) -> bool:
        """
        Remove the blob at ``location``.

        Returns:
            True if a blob was removed, False if nothing was there.

        Raises:
            BlobStoreError: If the blob exists but could not be removed.
        """

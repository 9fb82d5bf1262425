"""
docvault/blob_store/filesystem_store.py

Local-directory implementation of the BlobStore interface.

One file per document, named by its storage key, directly under the
configured upload directory. Locations are absolute paths.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from docvault.blob_store.base import BlobStore
from docvault.core.config import settings
from docvault.core.exceptions import BlobStoreError
from docvault.core.logger import get_logger

logger = get_logger(__name__)


class FilesystemBlobStore(BlobStore):
    """BlobStore backed by a directory on the local filesystem."""

    def __init__(self, root: str | Path | None = None) -> None:
        """
        Args:
            root : Directory holding the blobs.
                   Defaults to ``settings.upload_dir``.
        """
        self._root = Path(root or settings.upload_dir).resolve()

    @property
    def root(self) -> Path:
        return self._root

    # ── BlobStore interface ────────────────────────────────────────────────────

    def prepare(self) -> None:
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise BlobStoreError(
                f"Could not create upload directory '{self._root}': {exc}"
            ) from exc
        logger.info("FilesystemBlobStore ready — root=%s", self._root)

    def location_for(self, storage_key: str) -> str:
        return str(self._root / storage_key)

    @contextmanager
    def open_for_write(self, location: str) -> Iterator[BinaryIO]:
        try:
            # "xb" refuses to clobber an existing blob.
            handle = open(location, "xb")
        except OSError as exc:
            raise BlobStoreError(f"Could not create blob '{location}': {exc}") from exc

        with handle:
            try:
                yield handle
            except OSError as exc:
                raise BlobStoreError(f"Write to blob '{location}' failed: {exc}") from exc

    def read_head(self, location: str, size: int) -> bytes:
        try:
            with open(location, "rb") as handle:
                return handle.read(size)
        except OSError as exc:
            raise BlobStoreError(f"Could not read blob '{location}': {exc}") from exc

    def exists(self, location: str) -> bool:
        return Path(location).is_file()

    def local_path(self, location: str) -> Path:
        return Path(location)

    def delete(self, location: str) -> bool:
        try:
            Path(location).unlink()
        except FileNotFoundError:
            logger.debug("delete() — blob '%s' already absent.", location)
            return False
        except OSError as exc:
            raise BlobStoreError(f"Could not delete blob '{location}': {exc}") from exc

        logger.debug("Deleted blob '%s'.", location)
        return True

"""docvault/blob_store/__init__.py — public API of the blob_store package."""

from docvault.blob_store.base import BlobStore
from docvault.blob_store.filesystem_store import FilesystemBlobStore

__all__ = [
    "BlobStore",
    "FilesystemBlobStore",
]

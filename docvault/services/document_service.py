"""
docvault/services/document_service.py

Read and delete paths over the two stores:

    list_documents()   RecordStore.list_all()
    open_download(id)  RecordStore.get() → BlobStore.exists()
    delete_document(id)
                       RecordStore.get() → BlobStore.delete() (best-effort)
                                         → RecordStore.delete() (authoritative)

Same constructor-injection pattern as IngestService.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

from docvault.blob_store.base import BlobStore
from docvault.core.exceptions import BlobMissingError, BlobStoreError, DocumentNotFoundError
from docvault.core.logger import get_logger
from docvault.models.document_models import DocumentSummary
from docvault.record_store.base import Document, RecordStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class DownloadTarget:
    """Where to stream a document from and what to call it."""

    path: Path
    filename: str


class DocumentService:
    """
    Lists, serves and deletes stored documents.

    The document row is the source of truth: once it is gone the document
    no longer exists, whatever happened to its blob.
    """

    def __init__(self, records: RecordStore, blobs: BlobStore) -> None:
        self._records = records
        self._blobs = blobs

    # ── Public API ─────────────────────────────────────────────────────────────

    def list_documents(self) -> List[DocumentSummary]:
        """All documents, newest first."""
        docs = self._records.list_all()
        logger.debug("Listing %d document(s).", len(docs))
        return [DocumentSummary.from_document(doc) for doc in docs]

    def open_download(self, document_id: int) -> DownloadTarget:
        """
        Resolve a document id to a streamable file.

        Raises:
            DocumentNotFoundError : No row for ``document_id``.
            BlobMissingError      : The row exists but its blob does not.
        """
        doc = self._get_or_raise(document_id)

        if not self._blobs.exists(doc.blob_location):
            logger.error(
                "Document %d points at missing blob '%s'.", doc.id, doc.blob_location
            )
            raise BlobMissingError()

        return DownloadTarget(
            path=self._blobs.local_path(doc.blob_location),
            filename=doc.download_name,
        )

    def delete_document(self, document_id: int) -> None:
        """
        Delete the blob (best-effort) and then the row.

        Raises:
            DocumentNotFoundError : No row for ``document_id`` (also when a
                                    concurrent delete won the race).
            RecordStoreError      : The row could not be deleted; it is left
                                    in place even if the blob is already gone.
        """
        doc = self._get_or_raise(document_id)

        try:
            if not self._blobs.delete(doc.blob_location):
                logger.info(
                    "Blob for document %d was already absent ('%s').",
                    doc.id,
                    doc.blob_location,
                )
        except BlobStoreError as exc:
            logger.error("Error deleting blob for document %d: %s", doc.id, exc)

        if not self._records.delete(doc.id):
            raise DocumentNotFoundError()

        logger.info("Deleted document %d ('%s').", doc.id, doc.storage_key)

    # ── Internals ──────────────────────────────────────────────────────────────

    def _get_or_raise(self, document_id: int) -> Document:
        doc = self._records.get(document_id)
        if doc is None:
            raise DocumentNotFoundError()
        return doc

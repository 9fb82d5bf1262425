"""
docvault/services/ingest_service.py

Orchestrates the upload ingestion pipeline:

    UploadFile
      └─ content-type pre-filter           (nothing written yet)
           └─ FilenameSanitizer + UniqueNameGenerator → storage key
                └─ BlobStore.open_for_write()  streamed, size-capped
                     └─ PdfVerifier.is_pdf()   magic bytes on the stored blob
                          └─ RecordStore.insert()

Every failure after the blob has been created runs a compensating delete
of that blob before the error propagates. A compensating delete that
itself fails is logged as an orphan and not retried.

All dependencies are constructor-injected; the application lifespan wires
in the real stores, tests pass mocks or temp-dir backed instances.

The stores are synchronous; their calls run in Starlette's threadpool so a
slow disk or database does not stall the event loop.
"""

from __future__ import annotations

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from docvault.blob_store.base import BlobStore
from docvault.core.config import settings
from docvault.core.exceptions import (
    BlobStoreError,
    FileTooLargeError,
    NoFileProvidedError,
    NotAPdfError,
    RecordStoreError,
    UnsupportedMediaTypeError,
)
from docvault.core.logger import get_logger
from docvault.models.document_models import UploadResponse
from docvault.naming.filename_sanitizer import FilenameSanitizer
from docvault.naming.unique_name import UniqueNameGenerator
from docvault.record_store.base import NewDocument, RecordStore
from docvault.verifier.pdf_verifier import PdfVerifier, is_pdf_content_type

logger = get_logger(__name__)

UPLOAD_OK = "File uploaded successfully"
UPLOAD_OK_LEGACY = "File uploaded successfully (original_filename column not present)"


class IngestService:
    """
    Turns one untrusted upload into a verified blob plus a document row.

    Either both stores end up holding the document or neither does; the
    only exceptions are a failed compensating delete (logged) and a client
    that disconnects mid-stream.
    """

    def __init__(
        self,
        records: RecordStore,
        blobs: BlobStore,
        verifier: PdfVerifier | None = None,
        sanitizer: FilenameSanitizer | None = None,
        namer: UniqueNameGenerator | None = None,
        max_upload_bytes: int | None = None,
        chunk_size: int | None = None,
    ) -> None:
        self._records = records
        self._blobs = blobs
        self._verifier = verifier or PdfVerifier(blobs)
        self._sanitizer = sanitizer or FilenameSanitizer()
        self._namer = namer or UniqueNameGenerator()
        self._max_bytes = max_upload_bytes or settings.max_upload_bytes
        self._chunk_size = chunk_size or settings.upload_chunk_size

    @property
    def max_upload_bytes(self) -> int:
        """Largest accepted document, in bytes."""
        return self._max_bytes

    # ── Public API ─────────────────────────────────────────────────────────────

    async def ingest(self, upload: UploadFile | None) -> UploadResponse:
        """
        Run the full pipeline for a single upload.

        Args:
            upload: The file from the 'document' multipart field, or None.

        Returns:
            UploadResponse describing the stored document.

        Raises:
            NoFileProvidedError       : No file was supplied.
            UnsupportedMediaTypeError : Declared type is not application/pdf.
            FileTooLargeError         : Stream exceeded the size cap.
            NotAPdfError              : Stored bytes lack the PDF header.
            BlobStoreError            : The blob could not be written.
            RecordStoreError          : The row could not be inserted.
        """
        # ── 1. Received ────────────────────────────────────────────────────────
        if upload is None:
            raise NoFileProvidedError()

        # ── 2. Type-checked (declared type only) ───────────────────────────────
        if not is_pdf_content_type(upload.content_type):
            raise UnsupportedMediaTypeError(
                f"Only PDF files are allowed (mimetype check); got '{upload.content_type}'."
            )

        # ── 3. Stored (tentative) ──────────────────────────────────────────────
        safe_name = self._sanitizer.sanitize(upload.filename)
        display_name = self._sanitizer.display_name(upload.filename) or safe_name
        storage_key = self._namer.generate(safe_name)
        location = self._blobs.location_for(storage_key)

        size = await self._store_blob(upload, location)

        # ── 4. Verified ────────────────────────────────────────────────────────
        if not await run_in_threadpool(self._verifier.is_pdf, location):
            await run_in_threadpool(self._discard, location, "failed PDF verification")
            raise NotAPdfError()

        # ── 5. Recorded ────────────────────────────────────────────────────────
        try:
            doc = await run_in_threadpool(
                self._records.insert,
                NewDocument(
                    storage_key=storage_key,
                    display_name=display_name,
                    blob_location=location,
                    size_bytes=size,
                ),
            )
        except RecordStoreError:
            await run_in_threadpool(self._discard, location, "record insert failed")
            raise

        logger.info(
            "Stored document %d — '%s' as '%s' (%d bytes).",
            doc.id,
            display_name,
            storage_key,
            size,
        )

        if doc.display_name is None:
            return UploadResponse(
                id=doc.id,
                filename=doc.storage_key,
                filesize=doc.size_bytes,
                message=UPLOAD_OK_LEGACY,
            )
        return UploadResponse(
            id=doc.id,
            filename=doc.storage_key,
            original_filename=doc.display_name,
            filesize=doc.size_bytes,
            message=UPLOAD_OK,
        )

    # ── Internals ──────────────────────────────────────────────────────────────

    async def _store_blob(self, upload: UploadFile, location: str) -> int:
        """
        Stream ``upload`` into a new blob at ``location``.

        Returns:
            Number of bytes written.

        Raises:
            FileTooLargeError: The stream exceeded ``max_upload_bytes``;
                               the partial blob has been removed.
            BlobStoreError:    The blob could not be created or written.
        """
        written = 0
        created = False
        try:
            with self._blobs.open_for_write(location) as handle:
                created = True
                while True:
                    chunk = await upload.read(self._chunk_size)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self._max_bytes:
                        raise FileTooLargeError.for_limit(self._max_bytes)
                    await run_in_threadpool(handle.write, chunk)
        except (FileTooLargeError, BlobStoreError) as exc:
            # An uncreated blob may belong to someone else; leave it alone.
            if created:
                await run_in_threadpool(self._discard, location, str(exc))
            raise

        return written

    def _discard(self, location: str, reason: str) -> None:
        """Compensating delete of a tentative blob. Never raises."""
        try:
            self._blobs.delete(location)
        except BlobStoreError as exc:
            logger.error("Orphan blob left at '%s' (%s): %s", location, reason, exc)
            return
        logger.info("Discarded blob '%s' — %s.", location, reason)

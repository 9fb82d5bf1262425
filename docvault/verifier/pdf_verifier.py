"""
docvault/verifier/pdf_verifier.py

Confirms that stored bytes really are a PDF by inspecting the magic bytes.

The client-declared content type is only a cheap pre-filter
(is_pdf_content_type); the header check on the bytes actually written to
the blob store is the authoritative test.
"""

from __future__ import annotations

from docvault.blob_store.base import BlobStore
from docvault.core.constants import PDF_CONTENT_TYPE, PDF_MAGIC
from docvault.core.exceptions import BlobStoreError
from docvault.core.logger import get_logger

logger = get_logger(__name__)


def is_pdf_content_type(content_type: str | None) -> bool:
    """True when the declared media type is application/pdf (parameters ignored)."""
    if not content_type:
        return False
    return content_type.split(";", 1)[0].strip().lower() == PDF_CONTENT_TYPE


class PdfVerifier:
    """Reads the first four bytes of a stored blob and compares them with "%PDF"."""

    def __init__(self, blobs: BlobStore) -> None:
        self._blobs = blobs

    def is_pdf(self, location: str) -> bool:
        """
        Return True if the blob at ``location`` starts with the PDF header.

        An unreadable or short blob counts as a failed verification; this
        method never raises.
        """
        try:
            head = self._blobs.read_head(location, len(PDF_MAGIC))
        except (BlobStoreError, OSError) as exc:
            logger.error("PDF magic-byte check failed for '%s': %s", location, exc)
            return False

        if head != PDF_MAGIC:
            logger.info("'%s' does not start with %r (got %r).", location, PDF_MAGIC, head)
            return False
        return True

"""docvault/verifier/__init__.py — public API of the verifier package."""

from docvault.verifier.pdf_verifier import PdfVerifier, is_pdf_content_type

__all__ = [
    "PdfVerifier",
    "is_pdf_content_type",
]

"""
docvault/core/exceptions.py

Custom exception hierarchy for the application.

Every exception carries the HTTP status code the API layer answers with,
so controllers can translate service failures without leaking internals.
"""


class AppBaseException(Exception):
    """Root exception — catch-all for any application-level error."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# ── Upload exceptions ──────────────────────────────────────────────────────────

class NoFileProvidedError(AppBaseException):
    """Raised when the upload request carries no file in the 'document' field."""

    status_code = 400
    default_message = "No file uploaded"


class UnsupportedMediaTypeError(AppBaseException):
    """Raised when the declared content type is not application/pdf."""

    status_code = 400
    default_message = "Only PDF files are allowed (mimetype check)"


class FileTooLargeError(AppBaseException):
    """Raised when an upload stream exceeds the configured size cap."""

    status_code = 400
    default_message = "File size exceeds 10MB limit"

    @classmethod
    def for_limit(cls, max_bytes: int) -> "FileTooLargeError":
        """10485760 -> 'File size exceeds 10MB limit'; odd sizes stay in bytes."""
        mib = 1024 * 1024
        label = f"{max_bytes // mib}MB" if max_bytes % mib == 0 else f"{max_bytes} bytes"
        return cls(f"File size exceeds {label} limit")


class NotAPdfError(AppBaseException):
    """Raised when the stored bytes do not start with the PDF magic bytes."""

    status_code = 400
    default_message = "Uploaded file is not a valid PDF"


# ── Storage exceptions ─────────────────────────────────────────────────────────

class RecordStoreError(AppBaseException):
    """Raised when an insert, query or delete against the record store fails."""

    default_message = "Database error"


class BlobStoreError(AppBaseException):
    """Raised when reading, writing or deleting a blob fails."""

    default_message = "File storage error"


# ── Lookup exceptions ──────────────────────────────────────────────────────────

class DocumentNotFoundError(AppBaseException):
    """Raised when no document row exists for the requested id."""

    status_code = 404
    default_message = "Document not found"


class BlobMissingError(AppBaseException):
    """Raised when a document row exists but its blob is gone."""

    status_code = 404
    default_message = "File not found on server"

"""
docvault/core/constants.py

Application-wide fixed constants.

These are business rules that are part of the system's contract and are
NOT configurable via environment variables.
"""

# ── Accepted content ───────────────────────────────────────────────────────────

#: Every stored document carries this extension.
PDF_EXTENSION: str = ".pdf"

#: Declared MIME type required on upload (cheap pre-filter only).
PDF_CONTENT_TYPE: str = "application/pdf"

#: Leading bytes of every genuine PDF file.
PDF_MAGIC: bytes = b"%PDF"

# ── Filenames ──────────────────────────────────────────────────────────────────

#: Bits of randomness in the storage-key salt.
SALT_BITS: int = 32

#: Sanitized names are truncated to this many characters before ".pdf" is added.
MAX_NAME_LEN: int = 200

#: Longest filename most filesystems accept, in bytes.
MAX_KEY_BYTES: int = 255

#: "{13-digit ms}-{8 hex}-" prepended to every sanitized name.
KEY_PREFIX_BYTES: int = 13 + 1 + SALT_BITS // 4 + 1

#: UTF-8 byte budget for a sanitized name, ".pdf" included.
MAX_NAME_BYTES: int = MAX_KEY_BYTES - KEY_PREFIX_BYTES

#: Used when sanitization leaves nothing behind.
FALLBACK_FILENAME: str = "file.pdf"

# ── HTTP ───────────────────────────────────────────────────────────────────────

#: Multipart field carrying the uploaded document.
UPLOAD_FIELD: str = "document"

#: Allowance for multipart boundaries and part headers on top of the file size.
MULTIPART_OVERHEAD_BYTES: int = 64 * 1024

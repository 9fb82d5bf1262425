"""
docvault/naming/filename_sanitizer.py

Turns an arbitrary client-supplied filename into a safe, bounded,
extension-correct name suitable for the blob store.

Two views of the same input are produced:

  display_name()  NFC-normalized, control characters removed, trimmed.
                  Kept for showing to the user and for downloads.
  sanitize()      everything display_name() does, plus filesystem-safe
                  character filtering, whitespace collapsing, truncation,
                  a fallback name and a guaranteed ".pdf" suffix.

Both are pure functions of their input.
"""

from __future__ import annotations

import re
import unicodedata

from pathvalidate import sanitize_filename

from docvault.core.constants import (
    FALLBACK_FILENAME,
    MAX_NAME_BYTES,
    MAX_NAME_LEN,
    PDF_EXTENSION,
)

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_WHITESPACE_RUN = re.compile(r"\s+")
_LEADING_DOTS_AND_SPACES = re.compile(r"^[.\s]+")


class FilenameSanitizer:
    """
    Filename normalization and sanitization rules.

    Path separators, traversal sequences and characters reserved by common
    filesystems are removed by ``pathvalidate.sanitize_filename``; the
    remaining steps are applied here in a fixed order.
    """

    def __init__(
        self,
        max_len: int = MAX_NAME_LEN,
        fallback: str = FALLBACK_FILENAME,
        max_bytes: int = MAX_NAME_BYTES,
    ) -> None:
        self.max_len = max_len
        self.fallback = fallback
        self.max_bytes = max_bytes

    # ── Public API ─────────────────────────────────────────────────────────────

    def display_name(self, raw: str | None) -> str:
        """
        Normalize ``raw`` for display: NFC form, no control characters,
        no surrounding whitespace. May return an empty string.
        """
        text = unicodedata.normalize("NFC", raw or "")
        return _CONTROL_CHARS.sub("", text).strip()

    def sanitize(self, raw: str | None) -> str:
        """
        Return a filesystem-safe name for ``raw``.

        The result never starts with "." or whitespace, ends with ".pdf"
        (case-insensitive), is at most ``max_len`` + 4 characters long and
        encodes to at most ``max_bytes`` bytes of UTF-8, so the storage key
        built from it stays within the filesystem's 255-byte name limit.
        """
        name = self.display_name(raw)
        name = sanitize_filename(name)
        name = _WHITESPACE_RUN.sub(" ", name).strip()
        name = name[: self.max_len].rstrip()

        # Stripped before the fallback/suffix steps so ".pdf" cannot become "pdf".
        name = _LEADING_DOTS_AND_SPACES.sub("", name)

        if not name:
            name = self.fallback
        if not name.lower().endswith(PDF_EXTENSION):
            name += PDF_EXTENSION
        return self._fit_bytes(name)

    # ── Internals ──────────────────────────────────────────────────────────────

    def _fit_bytes(self, name: str) -> str:
        """Trim the stem of ``name`` on a character boundary to fit ``max_bytes``."""
        if len(name.encode("utf-8")) <= self.max_bytes:
            return name

        stem, ext = name[: -len(PDF_EXTENSION)], name[-len(PDF_EXTENSION):]
        budget = self.max_bytes - len(ext.encode("utf-8"))
        stem = stem.encode("utf-8")[:budget].decode("utf-8", "ignore").rstrip()
        return stem + ext

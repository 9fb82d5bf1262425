"""docvault/naming/__init__.py — public API of the naming package."""

from docvault.naming.filename_sanitizer import FilenameSanitizer
from docvault.naming.unique_name import UniqueNameGenerator

__all__ = [
    "FilenameSanitizer",
    "UniqueNameGenerator",
]

"""
docvault/models/document_models.py

Pydantic DTOs for the documents API.
The upload request has no DTO — the multipart form is parsed in the
controller; only response shapes are defined here.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from docvault.record_store.base import Document


class UploadResponse(BaseModel):
    """
    Successful response for POST /api/documents/upload.

        {
            "id": 7,
            "filename": "1718035200123-9f3a0c41-Resume (final).pdf",
            "original_filename": "Résumé (final).pdf",
            "filesize": 48213,
            "message": "File uploaded successfully"
        }

    ``original_filename`` is omitted when the record store has no column
    for it; ``filename`` (the storage key) then doubles as the display name.
    """

    id: int
    filename: str
    original_filename: Optional[str] = None
    filesize: int
    message: str


class DocumentSummary(BaseModel):
    """One item of GET /api/documents."""

    id: int
    filename: str
    original_filename: Optional[str] = None
    filepath: str
    filesize: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Document) -> "DocumentSummary":
        return cls(
            id=doc.id,
            filename=doc.storage_key,
            original_filename=doc.display_name,
            filepath=doc.blob_location,
            filesize=doc.size_bytes,
            created_at=doc.created_at,
        )


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. for DELETE /api/documents/{id}."""

    message: str

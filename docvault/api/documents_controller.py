"""
docvault/api/documents_controller.py

Handles incoming requests under /api/documents.

This layer is responsible only for HTTP concerns:
  - Parsing the multipart form (with the body size capped) and picking
    the 'document' file field.
  - Delegating upload, listing, download and deletion to the services.
  - Translating service-level errors into appropriate HTTP responses.

Responses:
  201  Upload stored.  Body: id, filename, original_filename (if recorded),
       filesize and a message.
  200  Listing, download (binary body) or deletion succeeded.
  400  The upload was rejected: no file, wrong declared type, too large,
       or the bytes are not a real PDF.
  404  Unknown document id, or the document's file is missing on disk.
  500  The record store or the blob store failed.
"""

from typing import List

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse, JSONResponse
from starlette.datastructures import UploadFile as StarletteUploadFile

from docvault.api.dependencies import get_document_service, get_ingest_service
from docvault.api.form_reader import read_upload_form
from docvault.core.constants import PDF_CONTENT_TYPE, UPLOAD_FIELD
from docvault.core.exceptions import AppBaseException
from docvault.core.logger import get_logger
from docvault.models.document_models import DocumentSummary, MessageResponse, UploadResponse
from docvault.services.document_service import DocumentService
from docvault.services.ingest_service import IngestService

logger = get_logger(__name__)

router = APIRouter(prefix="/api/documents", tags=["Documents"])


# ── Helpers ────────────────────────────────────────────────────────────────────

def _err(message: str, status: int = 400) -> JSONResponse:
    """Return a JSON error response with the standard error shape."""
    return JSONResponse(status_code=status, content={"error": message})


def _from_exception(exc: AppBaseException, action: str) -> JSONResponse:
    """
    Map a service exception to a response. Client errors echo their
    message; server errors are logged with traceback and answered with the
    exception's generic message.
    """
    if exc.status_code >= 500:
        logger.error("%s failed: %s", action, exc, exc_info=exc)
        return _err(exc.default_message, status=exc.status_code)

    logger.warning("%s rejected: %s", action, exc.message)
    return _err(exc.message, status=exc.status_code)


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.post(
    "/upload",
    status_code=201,
    response_model=UploadResponse,
    summary="Upload a PDF document",
)
async def upload_document(
    request: Request,
    service: IngestService = Depends(get_ingest_service),
) -> JSONResponse:
    """
    Accepts multipart/form-data with the PDF in the 'document' field:

        curl -F "document=@report.pdf;type=application/pdf" .../api/documents/upload
    """
    # ── 1. Parse multipart form (body size-capped) ─────────────────────────────
    try:
        form = await read_upload_form(request, service.max_upload_bytes)
    except AppBaseException as exc:
        return _from_exception(exc, "Upload")
    except Exception:  # noqa: BLE001
        return _err("Invalid multipart/form-data payload.")

    # ── 2. Pick the file field (anything else counts as "no file") ─────────────
    value = form.get(UPLOAD_FIELD)
    upload = value if isinstance(value, StarletteUploadFile) else None

    logger.info(
        "Upload request received — %s",
        f"'{upload.filename}' ({upload.content_type})" if upload else "no file",
    )

    # ── 3. Delegate to service ─────────────────────────────────────────────────
    try:
        result = await service.ingest(upload)
    except AppBaseException as exc:
        return _from_exception(exc, "Upload")
    finally:
        await form.close()

    return JSONResponse(status_code=201, content=result.model_dump(exclude_none=True))


@router.get("", response_model=List[DocumentSummary], summary="List all documents")
def list_documents(service: DocumentService = Depends(get_document_service)) -> JSONResponse:
    """Every stored document, most recent upload first."""
    try:
        docs = service.list_documents()
    except AppBaseException as exc:
        return _from_exception(exc, "Listing")

    return JSONResponse(status_code=200, content=[d.model_dump(mode="json") for d in docs])


@router.get("/{document_id}", summary="Download a document")
def download_document(
    document_id: int,
    service: DocumentService = Depends(get_document_service),
):
    """Streams the PDF back under its display name."""
    try:
        target = service.open_download(document_id)
    except AppBaseException as exc:
        return _from_exception(exc, f"Download of document {document_id}")

    return FileResponse(target.path, media_type=PDF_CONTENT_TYPE, filename=target.filename)


@router.delete("/{document_id}", response_model=MessageResponse, summary="Delete a document")
def delete_document(
    document_id: int,
    service: DocumentService = Depends(get_document_service),
) -> JSONResponse:
    """Removes the file and its record."""
    try:
        service.delete_document(document_id)
    except AppBaseException as exc:
        return _from_exception(exc, f"Deletion of document {document_id}")

    return JSONResponse(
        status_code=200,
        content=MessageResponse(message="Document deleted successfully").model_dump(),
    )

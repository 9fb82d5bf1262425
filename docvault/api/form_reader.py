"""
docvault/api/form_reader.py

Reads the upload form without letting an oversized request body through.

The document size cap in IngestService only bounds what is copied into the
blob store; Starlette's form parser would otherwise spool the entire body
to a temp file first. Two guards run here, before the service sees
anything:

  - A declared Content-Length above the cap (plus multipart overhead) is
    refused without reading the body.
  - The body stream itself is counted as it arrives and parsing stops
    as soon as the same limit is passed, which also covers chunked
    requests that declare no length.
"""

from typing import AsyncIterator

from fastapi import Request
from starlette.datastructures import FormData
from starlette.formparsers import FormParser, MultiPartParser

from docvault.core.constants import MULTIPART_OVERHEAD_BYTES
from docvault.core.exceptions import FileTooLargeError
from docvault.core.logger import get_logger

logger = get_logger(__name__)


async def capped_stream(stream: AsyncIterator[bytes], limit: int) -> AsyncIterator[bytes]:
    """Yield ``stream`` unchanged, raising FileTooLargeError once ``limit`` bytes are passed."""
    received = 0
    async for chunk in stream:
        received += len(chunk)
        if received > limit:
            raise FileTooLargeError()
        yield chunk


def _declared_length(request: Request) -> int | None:
    value = request.headers.get("content-length", "")
    return int(value) if value.isdigit() else None


async def read_upload_form(request: Request, max_file_bytes: int) -> FormData:
    """
    Parse the request form, refusing bodies that cannot hold an acceptable file.

    Args:
        request:        The incoming upload request.
        max_file_bytes: Largest accepted document; the body may exceed it by
                        MULTIPART_OVERHEAD_BYTES.

    Raises:
        FileTooLargeError: The body is, or declares itself, too large.
    """
    limit = max_file_bytes + MULTIPART_OVERHEAD_BYTES

    declared = _declared_length(request)
    if declared is not None and declared > limit:
        logger.warning("Refusing upload body of %d bytes (limit %d).", declared, limit)
        raise FileTooLargeError.for_limit(max_file_bytes)

    content_type = request.headers.get("content-type", "").lower()
    stream = capped_stream(request.stream(), limit)
    if content_type.startswith("multipart/form-data"):
        parser = MultiPartParser(request.headers, stream)
    elif content_type.startswith("application/x-www-form-urlencoded"):
        parser = FormParser(request.headers, stream)
    else:
        return FormData()

    try:
        return await parser.parse()
    except FileTooLargeError:
        logger.warning("Upload body passed %d bytes; stopped reading.", limit)
        raise FileTooLargeError.for_limit(max_file_bytes) from None

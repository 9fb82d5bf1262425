"""
tests/api/test_form_reader.py

Tests for the size-capped upload form reader.

Requests are built straight from an ASGI scope with a ``receive`` callable
that records every pull, so the tests can tell how much of a body was read
before it was refused.
"""

import pytest
from starlette.datastructures import UploadFile
from starlette.requests import Request

from docvault.api.form_reader import capped_stream, read_upload_form
from docvault.core.constants import MULTIPART_OVERHEAD_BYTES
from docvault.core.exceptions import FileTooLargeError

BOUNDARY = "docvault-boundary"
PART_HEAD = (
    f"--{BOUNDARY}\r\n"
    'Content-Disposition: form-data; name="document"; filename="big.pdf"\r\n'
    "Content-Type: application/pdf\r\n\r\n"
).encode()
PART_TAIL = f"\r\n--{BOUNDARY}--\r\n".encode()


def _request(chunks: list[bytes], pulls: list[int], headers: dict[str, str]) -> Request:
    pending = list(chunks)

    async def receive() -> dict:
        pulls.append(len(pending))
        if pending:
            body = pending.pop(0)
            return {"type": "http.request", "body": body, "more_body": bool(pending)}
        return {"type": "http.request", "body": b"", "more_body": False}

    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/documents/upload",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
    }
    return Request(scope, receive)


def _multipart_headers(**extra: str) -> dict[str, str]:
    return {"content-type": f"multipart/form-data; boundary={BOUNDARY}", **extra}


async def _chunks(count: int, size: int, pulled: list[int]):
    for i in range(count):
        pulled.append(i)
        yield b"x" * size


# ── capped_stream ──────────────────────────────────────────────────────────────

class TestCappedStream:

    @pytest.mark.asyncio
    async def test_passes_chunks_through_up_to_the_limit(self) -> None:
        pulled: list[int] = []

        received = [c async for c in capped_stream(_chunks(4, 1024, pulled), limit=4096)]

        assert b"".join(received) == b"x" * 4096

    @pytest.mark.asyncio
    async def test_stops_pulling_once_the_limit_is_passed(self) -> None:
        pulled: list[int] = []

        with pytest.raises(FileTooLargeError):
            async for _ in capped_stream(_chunks(100, 1024, pulled), limit=4096):
                pass

        assert len(pulled) == 5


# ── read_upload_form ───────────────────────────────────────────────────────────

class TestReadUploadForm:

    @pytest.mark.asyncio
    async def test_small_multipart_body_is_parsed(self) -> None:
        pulls: list[int] = []
        request = _request([PART_HEAD, b"%PDF-1.4 tiny", PART_TAIL], pulls, _multipart_headers())

        form = await read_upload_form(request, max_file_bytes=1024)
        try:
            upload = form.get("document")
            assert isinstance(upload, UploadFile)
            assert upload.filename == "big.pdf"
            assert await upload.read() == b"%PDF-1.4 tiny"
        finally:
            await form.close()

    @pytest.mark.asyncio
    async def test_declared_oversized_body_is_refused_unread(self) -> None:
        pulls: list[int] = []
        declared = str(1024 + MULTIPART_OVERHEAD_BYTES + 1)
        request = _request([PART_HEAD, b"%PDF", PART_TAIL], pulls, _multipart_headers(**{"content-length": declared}))

        with pytest.raises(FileTooLargeError, match="exceeds 1024 bytes limit"):
            await read_upload_form(request, max_file_bytes=1024)

        assert pulls == []

    @pytest.mark.asyncio
    async def test_undeclared_oversized_body_stops_early(self) -> None:
        pulls: list[int] = []
        body = [PART_HEAD] + [b"x" * 16 * 1024] * 100 + [PART_TAIL]
        request = _request(body, pulls, _multipart_headers())

        with pytest.raises(FileTooLargeError, match="exceeds 1024 bytes limit"):
            await read_upload_form(request, max_file_bytes=1024)

        assert 0 < len(pulls) < 10

    @pytest.mark.asyncio
    async def test_urlencoded_body_is_capped_too(self) -> None:
        pulls: list[int] = []
        body = [b"document="] + [b"a" * 16 * 1024] * 100
        request = _request(body, pulls, {"content-type": "application/x-www-form-urlencoded"})

        with pytest.raises(FileTooLargeError):
            await read_upload_form(request, max_file_bytes=1024)

        assert len(pulls) < 10

    @pytest.mark.asyncio
    async def test_other_content_types_give_an_empty_form(self) -> None:
        pulls: list[int] = []
        request = _request([b'{"document": "x"}'], pulls, {"content-type": "application/json"})

        form = await read_upload_form(request, max_file_bytes=1024)

        assert form.get("document") is None
        assert pulls == []

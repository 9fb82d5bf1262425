"""
docvault/api/dependencies.py

FastAPI dependency providers.

Services are built once in the application lifespan and parked on
``app.state``; controllers receive them through ``Depends`` so tests can
swap them with ``app.dependency_overrides``.
"""

from fastapi import Request

from docvault.services.document_service import DocumentService
from docvault.services.ingest_service import IngestService


def get_ingest_service(request: Request) -> IngestService:
    return request.app.state.ingest_service


def get_document_service(request: Request) -> DocumentService:
    return request.app.state.document_service

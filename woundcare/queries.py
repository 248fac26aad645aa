from __future__ import annotations

from fastapi import HTTPException
from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from woundcare.models import Document, Extraction


def api_error(status_code: int, error: str, code: str, **extra: object) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"error": error, "code": code, **extra})


def get_document_or_404(db: Session, document_id: str) -> Document:
    document = db.get(Document, document_id)
    if document is None:
        raise api_error(404, "Document not found", "DOCUMENT_NOT_FOUND")
    return document


def get_latest_extraction(db: Session, document_id: str) -> Extraction | None:
    return db.scalar(
        select(Extraction)
        .where(Extraction.document_id == document_id)
        .order_by(desc(Extraction.version), desc(Extraction.id))
    )

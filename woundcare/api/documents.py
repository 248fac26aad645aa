from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from woundcare.database import get_db
from woundcare.models import Document
from woundcare.queries import get_document_or_404, get_latest_extraction
from woundcare.schemas import DocumentDetail, DocumentListItem, DocumentStatusResponse, ValidationResult

router = APIRouter(prefix="/api/documents", tags=["documents"])


@router.get("", response_model=list[DocumentListItem])
def list_documents(db: Session = Depends(get_db)) -> list[DocumentListItem]:
    documents = db.scalars(select(Document).order_by(desc(Document.created_at))).all()
    return [DocumentListItem.model_validate(doc) for doc in documents]


@router.get("/{document_id}", response_model=DocumentDetail)
def get_document(document_id: str, db: Session = Depends(get_db)) -> DocumentDetail:
    document = get_document_or_404(db, document_id)
    extraction = get_latest_extraction(db, document_id)

    payload = DocumentDetail.model_validate(document)
    if extraction is not None:
        payload.extraction = extraction.form_data
        payload.validation = ValidationResult.model_validate(extraction.validation_data)
    return payload


@router.get("/{document_id}/status", response_model=DocumentStatusResponse)
def document_status(document_id: str, db: Session = Depends(get_db)) -> DocumentStatusResponse:
    document = get_document_or_404(db, document_id)
    extraction = get_latest_extraction(db, document_id)
    return DocumentStatusResponse(
        document_id=document.id,
        status=document.status.value,
        valid=extraction.valid if extraction else None,
    )

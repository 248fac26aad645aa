from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from woundcare.database import get_db
from woundcare.models import Document, ProcessingStatus
from woundcare.processors.pipeline import (
    UploadRejectedError,
    check_upload,
    process_document,
    reject_document,
    store_upload,
)
from woundcare.queries import api_error, get_latest_extraction
from woundcare.schemas import FileInfo, ProcessDocumentsResponse, ProcessingResult, ValidationResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["documents"])


def _handle_file(db: Session, file: UploadFile) -> ProcessingResult:
    # Starlette reports the size of spooled uploads; only read the body once it is known to fit.
    content: bytes | None = None
    size = file.size
    if size is None:
        content = file.file.read()
        size = len(content)

    document = Document(
        original_filename=file.filename or "unknown",
        content_type=file.content_type or "application/octet-stream",
        size=size,
    )
    db.add(document)
    db.commit()
    db.refresh(document)

    try:
        check_upload(document.original_filename, document.size)
    except UploadRejectedError as exc:
        document = reject_document(db, document, exc)
        return ProcessingResult(success=False, file_info=FileInfo.from_document(document), error=str(exc))

    if content is None:
        content = file.file.read()
    document.storage_path = store_upload(document, content)
    document = process_document(db, document)
    if document.status != ProcessingStatus.completed:
        return ProcessingResult(
            success=False,
            file_info=FileInfo.from_document(document),
            error=document.error_message or "Unknown processing error",
        )

    extraction = get_latest_extraction(db, document.id)
    return ProcessingResult(
        success=True,
        file_info=FileInfo.from_document(document),
        extracted_data=extraction.form_data if extraction else {},
        validation_result=ValidationResult.model_validate(extraction.validation_data) if extraction else None,
    )


@router.post("/process-document", response_model=ProcessDocumentsResponse, response_model_exclude_none=True)
def process_documents(
    files: list[UploadFile] = File(default=[]),
    db: Session = Depends(get_db),
) -> ProcessDocumentsResponse:
    if not files:
        raise api_error(400, "No files uploaded", "DOCUMENT_PROCESSING_ERROR")

    results = [_handle_file(db, file) for file in files]
    logger.info(
        "Processed %d document(s), %d succeeded",
        len(results),
        sum(1 for result in results if result.success),
    )
    return ProcessDocumentsResponse(results=results)

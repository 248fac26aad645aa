from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from woundcare.config import settings
from woundcare.models import Document, Extraction, ProcessingStatus
from woundcare.processors.extractor import extract_form_data
from woundcare.processors.ocr import read_document_text
from woundcare.validation import validate_sections

logger = logging.getLogger(__name__)

# Only these sections can be populated from a scanned document.
DOCUMENT_CATEGORIES = ("patient", "insurance")


class UploadRejectedError(ValueError):
    pass


def file_extension(filename: str) -> str:
    return Path(filename).suffix.lower()


def check_upload(filename: str, size: int) -> None:
    if size > settings.max_upload_size_bytes:
        raise UploadRejectedError(
            f"File size exceeds the maximum allowed size of {settings.max_upload_size_mb}MB"
        )
    ext = file_extension(filename)
    if ext not in settings.supported_upload_formats:
        raise UploadRejectedError(
            f"File type {ext or '(none)'} is not supported. "
            f"Supported formats: {', '.join(settings.supported_upload_formats)}"
        )


def store_upload(document: Document, content: bytes) -> str:
    target_dir = Path(settings.storage_path) / document.id
    target_dir.mkdir(parents=True, exist_ok=True)
    # Keep only the basename so a crafted filename cannot escape the upload dir.
    target_path = target_dir / Path(document.original_filename).name
    target_path.write_bytes(content)
    return str(target_path)


def _next_extraction_version(db: Session, document_id: str) -> int:
    stmt = select(func.max(Extraction.version)).where(Extraction.document_id == document_id)
    current = db.scalar(stmt)
    return (current or 0) + 1


def _mark_failed(db: Session, document: Document, message: str) -> Document:
    document.status = ProcessingStatus.failed
    document.error_message = message
    db.add(document)
    db.commit()
    db.refresh(document)
    return document


def reject_document(db: Session, document: Document, exc: UploadRejectedError) -> Document:
    logger.info("Rejected upload %s: %s", document.id, exc)
    return _mark_failed(db, document, str(exc))


def process_document(db: Session, document: Document) -> Document:
    """Extract and partially validate one stored document.

    Failures are recorded on the document (status ``failed``) rather than raised.
    """
    document.status = ProcessingStatus.processing
    db.add(document)
    db.commit()

    try:
        text = read_document_text(document.storage_path) if settings.enable_ocr and document.storage_path else ""
        form_data = extract_form_data(text)
        verdict = validate_sections(form_data, DOCUMENT_CATEGORIES)

        db.add(
            Extraction(
                document_id=document.id,
                version=_next_extraction_version(db, document.id),
                form_data=form_data,
                validation_data=verdict.model_dump(mode="json"),
                valid=verdict.valid,
            )
        )
        document.status = ProcessingStatus.completed
        document.error_message = None
        db.add(document)
        db.commit()
        db.refresh(document)
        logger.info(
            "Processed document %s: valid=%s, %d validation error(s)",
            document.id,
            verdict.valid,
            len(verdict.errors),
        )
        return document
    except Exception as exc:
        logger.exception("Document processing failed for %s", document.id)
        db.rollback()
        return _mark_failed(db, document, str(exc) or exc.__class__.__name__)

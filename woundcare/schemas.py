from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Validation verdicts
# ---------------------------------------------------------------------------

class FieldError(BaseModel):
    field: str
    message: str


class ValidationResult(BaseModel):
    valid: bool = True
    errors: list[FieldError] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Document processing DTOs
# ---------------------------------------------------------------------------

class CamelModel(BaseModel):
    """JSON keys are camelCase; Python code uses snake_case names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FileInfo(CamelModel):
    id: str
    name: str
    type: str
    size: int
    upload_date: datetime
    processing_status: str
    original_url: str | None = None

    @classmethod
    def from_document(cls, doc: Any) -> FileInfo:
        return cls(
            id=doc.id,
            name=doc.original_filename,
            type=doc.content_type,
            size=doc.size,
            upload_date=doc.created_at,
            processing_status=doc.status.value if hasattr(doc.status, "value") else str(doc.status),
            original_url=f"/uploads/{doc.id}/{Path(doc.original_filename).name}" if doc.storage_path else None,
        )


class ProcessingResult(CamelModel):
    success: bool
    file_info: FileInfo
    extracted_data: dict[str, Any] = Field(default_factory=dict)
    validation_result: ValidationResult | None = None
    error: str | None = None


class ProcessDocumentsResponse(BaseModel):
    success: bool = True
    message: str = "Documents processed successfully"
    results: list[ProcessingResult]


class DocumentStatusResponse(BaseModel):
    document_id: str
    status: str
    valid: bool | None = None


class DocumentListItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    original_filename: str
    content_type: str
    size: int
    status: str
    created_at: datetime


class DocumentDetail(DocumentListItem):
    error_message: str | None
    updated_at: datetime
    extraction: dict[str, Any] | None = None
    validation: ValidationResult | None = None


# ---------------------------------------------------------------------------
# Form DTOs
# ---------------------------------------------------------------------------

class FormValidationResponse(BaseModel):
    success: bool = True
    valid: bool
    errors: list[FieldError]


class FormStatusItem(CamelModel):
    id: str
    form_date: date = Field(alias="date")
    patient_name: str
    form_type: str
    manufacturer: str
    status: str

    @classmethod
    def from_submission(cls, submission: Any, manufacturer_name: str) -> FormStatusItem:
        return cls(
            id=submission.id,
            form_date=submission.created_on,
            patient_name=submission.patient_name,
            form_type=submission.form_type,
            manufacturer=manufacturer_name,
            status=submission.status.value if hasattr(submission.status, "value") else str(submission.status),
        )


class FormStatusResponse(BaseModel):
    success: bool = True
    forms: list[FormStatusItem]


class SubmissionResponse(CamelModel):
    success: bool = True
    message: str = "Form submitted successfully"
    form_id: str
    preview_url: str
    download_url: str

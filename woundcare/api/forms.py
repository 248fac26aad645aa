from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from woundcare.config import settings
from woundcare.database import get_db
from woundcare.models import FormSubmission, SubmissionStatus
from woundcare.queries import api_error
from woundcare.schemas import FormStatusItem, FormStatusResponse, FormValidationResponse, SubmissionResponse
from woundcare.validation import validate_complete_form

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["forms"])


def _require_object(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise api_error(400, "Invalid request body", "INVALID_REQUEST")
    return payload


def _patient_name(form_data: dict[str, Any]) -> str:
    patient = form_data.get("patient") or {}
    return " ".join(str(patient.get(key, "")).strip() for key in ("firstName", "lastName")).strip()


@router.post("/validate-form", response_model=FormValidationResponse)
def validate_form(payload: Any = Body(default=None)) -> FormValidationResponse:
    form_data = _require_object(payload)
    verdict = validate_complete_form(form_data)
    return FormValidationResponse(valid=verdict.valid, errors=verdict.errors)


@router.post("/submit-form", response_model=SubmissionResponse)
def submit_form(payload: Any = Body(default=None), db: Session = Depends(get_db)) -> SubmissionResponse:
    form_data = _require_object(payload)
    for key in ("manufacturerId", "formType"):
        if not form_data.get(key):
            raise api_error(400, f"Missing required field: {key}", "MISSING_FIELD")

    manufacturer_id = str(form_data["manufacturerId"])
    if manufacturer_id not in settings.manufacturers:
        raise api_error(400, f"Unknown manufacturer: {manufacturer_id}", "UNKNOWN_MANUFACTURER")

    verdict = validate_complete_form(form_data)
    if not verdict.valid:
        raise api_error(
            400,
            "Form validation failed",
            "VALIDATION_FAILED",
            validationErrors=[error.model_dump() for error in verdict.errors],
        )

    submission = FormSubmission(
        manufacturer_id=manufacturer_id,
        form_type=str(form_data["formType"]),
        patient_name=_patient_name(form_data),
        form_data=form_data,
    )
    db.add(submission)
    db.commit()
    db.refresh(submission)
    logger.info("Accepted form %s for manufacturer %s", submission.id, manufacturer_id)

    return SubmissionResponse(
        form_id=submission.id,
        preview_url=f"/forms/{submission.id}/preview.pdf",
        download_url=f"/forms/{submission.id}/download.pdf",
    )


@router.get("/forms/status", response_model=FormStatusResponse)
def forms_status(
    patient: str | None = None,
    form_type: str | None = Query(default=None, alias="type"),
    status: str | None = None,
    manufacturer: str | None = None,
    from_date: date | None = Query(default=None, alias="fromDate"),
    to_date: date | None = Query(default=None, alias="toDate"),
    db: Session = Depends(get_db),
) -> FormStatusResponse:
    stmt = select(FormSubmission).order_by(desc(FormSubmission.created_on), desc(FormSubmission.id))

    if patient:
        stmt = stmt.where(func.lower(FormSubmission.patient_name).contains(patient.lower(), autoescape=True))
    if form_type:
        stmt = stmt.where(func.lower(FormSubmission.form_type) == form_type.lower())
    if status:
        try:
            stmt = stmt.where(FormSubmission.status == SubmissionStatus(status.lower()))
        except ValueError:
            return FormStatusResponse(forms=[])
    if manufacturer:
        needle = manufacturer.lower()
        matching = [key for key, name in settings.manufacturers.items() if needle in name.lower()]
        stmt = stmt.where(FormSubmission.manufacturer_id.in_(matching))
    if from_date:
        stmt = stmt.where(FormSubmission.created_on >= from_date)
    if to_date:
        stmt = stmt.where(FormSubmission.created_on <= to_date)

    submissions = db.scalars(stmt).all()
    return FormStatusResponse(
        forms=[
            FormStatusItem.from_submission(item, settings.manufacturers.get(item.manufacturer_id, item.manufacturer_id))
            for item in submissions
        ]
    )

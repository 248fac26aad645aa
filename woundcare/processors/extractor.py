from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from woundcare.rules import CATEGORIES

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Lookup tables (list order is match priority)
# ---------------------------------------------------------------------------

INSURANCE_PROVIDERS = [
    "Aetna", "Anthem", "Blue Cross", "Blue Shield", "Cigna", "Humana",
    "Kaiser", "Medicaid", "Medicare", "Tricare", "UnitedHealthcare", "UHC",
]

DIAGNOSES = [
    "diabetic ulcer", "diabetic foot ulcer", "pressure ulcer", "venous ulcer",
    "arterial ulcer", "surgical wound", "traumatic wound",
]

WOUND_TYPE_KEYWORDS = [
    ("diabetic", "diabetic_ulcer"),
    ("pressure", "pressure_ulcer"),
    ("venous", "venous_ulcer"),
    ("arterial", "arterial_ulcer"),
    ("surgical", "surgical_wound"),
    ("traumatic", "traumatic_wound"),
]

# ---------------------------------------------------------------------------
# Single-field regex matchers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldMatcher:
    category: str
    field: str
    regex: re.Pattern[str]


NAME_REGEX = re.compile(r"\b([A-Z][a-z]+)\s+([A-Z][a-z]+)\b")

FIELD_MATCHERS: list[FieldMatcher] = [
    FieldMatcher(
        "patient", "dateOfBirth",
        re.compile(r"\b(?:0[1-9]|1[0-2])/(?:0[1-9]|[12][0-9]|3[01])/(?:19|20)\d\d\b"),
    ),
    FieldMatcher(
        "patient", "phone",
        re.compile(r"(?:\(\d{3}\)|\b\d{3})[-.\s]?\d{3}[-.\s]?\d{4}\b"),
    ),
    FieldMatcher(
        "patient", "email",
        re.compile(r"(?<![A-Za-z0-9._%+-])[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),
    ),
]

POLICY_REGEX = re.compile(r"\b[A-Z0-9]{5,}\b")
ICD_REGEX = re.compile(r"\b[A-Z]\d{2}(?:\.\d{1,4})?\b")


def _empty_form() -> dict[str, dict[str, Any]]:
    return {category: {} for category in CATEGORIES}


def wound_type_for(diagnosis: str) -> str:
    for keyword, wound_type in WOUND_TYPE_KEYWORDS:
        if keyword in diagnosis:
            return wound_type
    return "other"


def _extract_name(text: str, patient: dict[str, Any]) -> None:
    match = NAME_REGEX.search(text)
    if match:
        patient["firstName"], patient["lastName"] = match.group(1), match.group(2)


def _extract_provider(text: str, insurance: dict[str, Any]) -> None:
    provider = next((name for name in INSURANCE_PROVIDERS if name in text), None)
    if provider is not None:
        insurance["provider"] = provider


def _extract_diagnosis(text: str, diagnosis: dict[str, Any]) -> None:
    lowered = text.lower()
    phrase = next((entry for entry in DIAGNOSES if entry in lowered), None)
    if phrase is not None:
        diagnosis["primaryDiagnosis"] = phrase
        diagnosis["woundType"] = wound_type_for(phrase)


def _first_match(regex: re.Pattern[str], text: str) -> str | None:
    match = regex.search(text)
    return match.group(0) if match else None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_form_data(text: str | None) -> dict[str, dict[str, Any]]:
    """Populate a partial intake form from free text.

    Every matcher scans the whole text and keeps its first hit; unmatched
    fields are left out. ``physician`` and ``treatment`` have no matchers and
    always come back empty.
    """
    form = _empty_form()
    if not text:
        return form

    _extract_name(text, form["patient"])
    for matcher in FIELD_MATCHERS:
        value = _first_match(matcher.regex, text)
        if value is not None:
            form[matcher.category][matcher.field] = value

    _extract_provider(text, form["insurance"])
    policy_number = _first_match(POLICY_REGEX, text)
    if policy_number is not None:
        form["insurance"]["policyNumber"] = policy_number

    _extract_diagnosis(text, form["diagnosis"])
    icd_code = _first_match(ICD_REGEX, text)
    if icd_code is not None:
        form["diagnosis"]["icdCode"] = icd_code

    logger.debug(
        "Extracted %d field(s) from %d characters",
        sum(len(section) for section in form.values()),
        len(text),
    )
    return form

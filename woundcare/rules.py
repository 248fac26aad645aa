"""Declarative field rules for every intake form category.

Consumed by ``woundcare.validation``; field order within a category is the
order errors are reported in.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class FieldRule:
    required: bool = False
    min_length: int | None = None
    exact_length: int | None = None
    pattern: re.Pattern[str] | None = None
    one_of: tuple[str, ...] | None = None
    min_items: int | None = None


NAME_PATTERN = re.compile(r"[A-Za-z\s\-']+")
DATE_PATTERN = re.compile(r"(0[1-9]|1[0-2])/(0[1-9]|[12][0-9]|3[01])/(19|20)\d\d")
EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_PATTERN = re.compile(r"\(\d{3}\) \d{3}-\d{4}|\d{10}|\d{3}-\d{3}-\d{4}")
ZIP_PATTERN = re.compile(r"\d{5}(-\d{4})?")
NPI_PATTERN = re.compile(r"\d{10}")
ICD_PATTERN = re.compile(r"[A-Z0-9]{1,7}(\.[A-Z0-9]{1,4})?")

GENDERS = ("male", "female", "other", "prefer_not_to_say")
RELATIONSHIPS = ("self", "spouse", "child", "other")
WOUND_TYPES = (
    "diabetic_ulcer",
    "pressure_ulcer",
    "venous_ulcer",
    "arterial_ulcer",
    "surgical_wound",
    "traumatic_wound",
    "other",
)

# Whole-form validation order.
CATEGORIES = ("patient", "insurance", "physician", "diagnosis", "treatment")


def _freeze(rules: dict[str, dict[str, FieldRule]]) -> Mapping[str, Mapping[str, FieldRule]]:
    return MappingProxyType({category: MappingProxyType(fields) for category, fields in rules.items()})


RULE_TABLE: Mapping[str, Mapping[str, FieldRule]] = _freeze(
    {
        "patient": {
            "firstName": FieldRule(required=True, min_length=2, pattern=NAME_PATTERN),
            "lastName": FieldRule(required=True, min_length=2, pattern=NAME_PATTERN),
            "dateOfBirth": FieldRule(required=True, pattern=DATE_PATTERN),
            "gender": FieldRule(required=True, one_of=GENDERS),
            "email": FieldRule(pattern=EMAIL_PATTERN),
            "phone": FieldRule(required=True, pattern=PHONE_PATTERN),
            "address": FieldRule(required=True, min_length=5),
            "city": FieldRule(required=True, min_length=2),
            "state": FieldRule(required=True, exact_length=2),
            "zipCode": FieldRule(required=True, pattern=ZIP_PATTERN),
        },
        "insurance": {
            "provider": FieldRule(required=True, min_length=2),
            "policyNumber": FieldRule(required=True, min_length=5),
            "groupNumber": FieldRule(),
            "primaryInsured": FieldRule(required=True, min_length=2),
            "relationshipToPatient": FieldRule(required=True, one_of=RELATIONSHIPS),
            "secondaryInsurance": FieldRule(),
        },
        "physician": {
            "name": FieldRule(required=True, min_length=2),
            "npi": FieldRule(required=True, pattern=NPI_PATTERN),
            "facilityName": FieldRule(required=True, min_length=2),
            "facilityAddress": FieldRule(required=True, min_length=5),
            "facilityPhone": FieldRule(required=True, pattern=PHONE_PATTERN),
            "facilityFax": FieldRule(pattern=PHONE_PATTERN),
        },
        "diagnosis": {
            "primaryDiagnosis": FieldRule(required=True, min_length=2),
            "icdCode": FieldRule(required=True, pattern=ICD_PATTERN),
            "secondaryDiagnosis": FieldRule(),
            "woundType": FieldRule(required=True, one_of=WOUND_TYPES),
            "woundLocation": FieldRule(required=True),
            "woundDuration": FieldRule(required=True),
        },
        "treatment": {
            "productCodes": FieldRule(required=True, min_items=1),
            "treatmentStartDate": FieldRule(required=True, pattern=DATE_PATTERN),
            "treatmentFrequency": FieldRule(required=True),
            "treatmentDuration": FieldRule(required=True),
            "previousTreatments": FieldRule(),
        },
    }
)


def required_field_names(category: str) -> list[str]:
    return [name for name, rule in RULE_TABLE[category].items() if rule.required]

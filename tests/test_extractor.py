from __future__ import annotations

import time

import pytest

from samples import DOC_SAMPLE_TEXT, IMAGE_SAMPLE_TEXT, PDF_SAMPLE_TEXT, SCENARIO_TEXT
from woundcare.processors.extractor import extract_form_data, wound_type_for
from woundcare.rules import CATEGORIES


def _values(form: dict) -> list:
    return [value for section in form.values() for value in section.values()]


@pytest.mark.parametrize("text", ["", None, "   \n\t"])
def test_blank_text_returns_empty_categories(text) -> None:
    assert extract_form_data(text) == {category: {} for category in CATEGORIES}


def test_intake_scenario() -> None:
    form = extract_form_data(SCENARIO_TEXT)

    assert form["patient"] == {
        "firstName": "John",
        "lastName": "Smith",
        "dateOfBirth": "05/12/1965",
        "phone": "(555) 123-4567",
    }
    assert form["insurance"] == {"provider": "UnitedHealthcare"}
    assert form["diagnosis"] == {
        "primaryDiagnosis": "diabetic foot ulcer",
        "woundType": "diabetic_ulcer",
        "icdCode": "E11.621",
    }
    assert form["physician"] == {}
    assert form["treatment"] == {}


def test_pdf_sample_text() -> None:
    form = extract_form_data(PDF_SAMPLE_TEXT)

    # The first capitalised word pair wins, even when it is a heading.
    assert (form["patient"]["firstName"], form["patient"]["lastName"]) == ("Patient", "Information")
    assert form["patient"]["email"] == "john.smith@example.com"
    assert form["insurance"] == {"provider": "UnitedHealthcare", "policyNumber": "UHC7654321"}
    assert form["diagnosis"]["icdCode"] == "E11.621"


def test_image_sample_text() -> None:
    form = extract_form_data(IMAGE_SAMPLE_TEXT)

    assert form["patient"]["firstName"] == "Sarah"
    assert form["patient"]["lastName"] == "Johnson"
    assert form["patient"]["dateOfBirth"] == "11/22/1978"
    assert form["patient"]["phone"] == "(555) 987-6543"
    assert form["insurance"]["provider"] == "Blue Cross"
    # Any uppercase run of five or more characters is taken as the policy number.
    assert form["insurance"]["policyNumber"] == "WOUND"
    assert form["diagnosis"] == {
        "primaryDiagnosis": "pressure ulcer",
        "woundType": "pressure_ulcer",
        "icdCode": "L89.150",
    }


def test_doc_sample_text() -> None:
    form = extract_form_data(DOC_SAMPLE_TEXT)

    assert form["patient"]["dateOfBirth"] == "03/15/1957"
    assert form["insurance"]["provider"] == "Medicare"
    assert form["diagnosis"]["woundType"] == "venous_ulcer"
    assert "icdCode" not in form["diagnosis"]


def test_extraction_never_sets_none() -> None:
    for text in (SCENARIO_TEXT, PDF_SAMPLE_TEXT, IMAGE_SAMPLE_TEXT, DOC_SAMPLE_TEXT, "nothing to see"):
        form = extract_form_data(text)
        assert set(form) == set(CATEGORIES)
        assert all(value is not None for value in _values(form))


@pytest.mark.parametrize(
    "phone",
    ["(555) 123-4567", "555-123-4567", "555.123.4567", "555 123 4567", "5551234567"],
)
def test_phone_formats(phone) -> None:
    form = extract_form_data(f"call me at {phone} after lunch")
    assert form["patient"]["phone"] == phone


def test_out_of_range_date_is_ignored() -> None:
    form = extract_form_data("seen 13/01/1990 and 01/32/1990 and 01/01/1890")
    assert "dateOfBirth" not in form["patient"]
    # Day ranges are not calendar aware.
    assert extract_form_data("seen 02/30/2010")["patient"]["dateOfBirth"] == "02/30/2010"


def test_provider_priority_follows_list_order() -> None:
    form = extract_form_data("secondary: Medicare, primary: Aetna")
    assert form["insurance"]["provider"] == "Aetna"


def test_provider_match_is_case_sensitive() -> None:
    assert "provider" not in extract_form_data("covered by aetna")["insurance"]


def test_diagnosis_match_is_case_insensitive() -> None:
    form = extract_form_data("ASSESSMENT: SURGICAL WOUND, DEHISCED")
    assert form["diagnosis"]["primaryDiagnosis"] == "surgical wound"
    assert form["diagnosis"]["woundType"] == "surgical_wound"


@pytest.mark.parametrize(
    ("phrase", "wound_type"),
    [
        ("diabetic foot ulcer", "diabetic_ulcer"),
        ("arterial ulcer", "arterial_ulcer"),
        ("traumatic wound", "traumatic_wound"),
        ("skin tear", "other"),
    ],
)
def test_wound_type_for(phrase, wound_type) -> None:
    assert wound_type_for(phrase) == wound_type


@pytest.mark.parametrize(("text", "code"), [("dx L97.511 left", "L97.511"), ("code E11 only", "E11"), ("Z48.0", "Z48.0")])
def test_icd_code(text, code) -> None:
    assert extract_form_data(text)["diagnosis"]["icdCode"] == code


def test_matchers_may_overlap() -> None:
    form = extract_form_data("Member ID 5551234567")
    assert form["patient"]["phone"] == "5551234567"
    assert form["insurance"]["policyNumber"] == "5551234567"


@pytest.mark.parametrize("chunk", ["a.", "A-", "a@", "x_"])
def test_long_punctuated_runs_are_scanned_in_linear_time(chunk) -> None:
    started = time.perf_counter()
    form = extract_form_data(chunk * 50_000)
    assert time.perf_counter() - started < 1.0
    assert "email" not in form["patient"]


def test_email_match_starts_at_the_beginning_of_the_run() -> None:
    form = extract_form_data("contact: jane.doe+wound@clinic.example.org, fax only")
    assert form["patient"]["email"] == "jane.doe+wound@clinic.example.org"

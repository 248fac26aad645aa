"""Rule-driven validation of intake records.

``validate`` checks one category record against ``RULE_TABLE``;
``validate_complete_form`` replays it over every category of a form. Rule
violations are reported in the returned ``ValidationResult``; only an unknown
category raises.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from woundcare.rules import CATEGORIES, RULE_TABLE, FieldRule
from woundcare.schemas import FieldError, ValidationResult

_CAPITAL = re.compile(r"([A-Z])")
_FIRST_CHAR = re.compile(r"^.")


class UnknownCategoryError(KeyError):
    """Raised when a record is validated against a category with no rule set."""

    def __init__(self, category: str) -> None:
        super().__init__(category)
        self.category = category

    def __str__(self) -> str:
        return f"Validation rules not found for: {self.category}"


def format_field_name(field: str) -> str:
    """``dateOfBirth`` -> ``Date Of Birth``, ``zip_code`` -> ``Zip code``."""
    label = _CAPITAL.sub(r" \1", field)
    label = label.replace("_", " ")
    label = _FIRST_CHAR.sub(lambda m: m.group(0).upper(), label)
    return label.strip()


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def _length(value: Any) -> int | None:
    if isinstance(value, (str, list, tuple)):
        return len(value)
    return None


# ---------------------------------------------------------------------------
# Constraint checks, applied in this order to every non-blank value
# ---------------------------------------------------------------------------

Check = Callable[[str, Any, FieldRule], str | None]


def _check_min_length(label: str, value: Any, rule: FieldRule) -> str | None:
    length = _length(value)
    if rule.min_length and length is not None and length < rule.min_length:
        return f"{label} must be at least {rule.min_length} characters"
    return None


def _check_exact_length(label: str, value: Any, rule: FieldRule) -> str | None:
    length = _length(value)
    if rule.exact_length and length is not None and length != rule.exact_length:
        return f"{label} must be exactly {rule.exact_length} characters"
    return None


def _check_pattern(label: str, value: Any, rule: FieldRule) -> str | None:
    if rule.pattern is None:
        return None
    if isinstance(value, (list, tuple, dict)) or rule.pattern.fullmatch(str(value)) is None:
        return f"{label} has an invalid format"
    return None


def _check_one_of(label: str, value: Any, rule: FieldRule) -> str | None:
    if rule.one_of and value not in rule.one_of:
        return f"{label} must be one of: {', '.join(rule.one_of)}"
    return None


def _check_min_items(label: str, value: Any, rule: FieldRule) -> str | None:
    if isinstance(value, (list, tuple)) and rule.min_items and len(value) < rule.min_items:
        return f"{label} must have at least {rule.min_items} item(s)"
    return None


CHECKS: tuple[Check, ...] = (
    _check_min_length,
    _check_exact_length,
    _check_pattern,
    _check_one_of,
    _check_min_items,
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate(data: Mapping[str, Any], category: str) -> ValidationResult:
    """Validate one record against the rules declared for ``category``.

    Every declared field is evaluated in declaration order, including fields
    absent from ``data``. A missing required field yields exactly one error;
    any other field may collect several.

    Raises:
        UnknownCategoryError: ``category`` has no entry in the rule table.
    """
    rules = RULE_TABLE.get(category)
    if rules is None:
        raise UnknownCategoryError(category)

    errors: list[FieldError] = []
    for field, rule in rules.items():
        value = data.get(field)
        label = format_field_name(field)

        if _is_blank(value):
            if rule.required:
                errors.append(FieldError(field=field, message=f"{label} is required"))
            continue

        for check in CHECKS:
            message = check(label, value, rule)
            if message is not None:
                errors.append(FieldError(field=field, message=message))

    return ValidationResult(valid=not errors, errors=errors)


def _section(form: Mapping[str, Any], category: str) -> Mapping[str, Any]:
    section = form.get(category)
    return section if isinstance(section, Mapping) else {}


def validate_sections(form: Mapping[str, Any], categories: Iterable[str]) -> ValidationResult:
    """Validate the given categories of ``form`` and concatenate their verdicts in order.

    A category that is missing from ``form`` or is not a mapping is validated as
    an empty record.
    """
    results = [validate(_section(form, category), category) for category in categories]
    return ValidationResult(
        valid=all(result.valid for result in results),
        errors=[error for result in results for error in result.errors],
    )


def validate_complete_form(form: Mapping[str, Any]) -> ValidationResult:
    return validate_sections(form, CATEGORIES)

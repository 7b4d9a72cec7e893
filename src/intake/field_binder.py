"""
Field Binder.

Applies single-field edits to a member's demographics. Each field category
has its own update function; every function takes the owning IntakeForm
explicitly and changes exactly one field, leaving siblings and other
members untouched.

Values are validated before anything is written, so a rejected edit is a
no-op on the form.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Optional, Union

from intake.exceptions import InvalidFieldValue
from intake.field_paths import FieldCategory, FieldPath, parse_field_path
from intake.form_model import Gender, IncomeSourceKey, IntakeForm, Number

logger = logging.getLogger(__name__)

DATE_FORMAT = "MM/DD/YYYY"
_DATE_PATTERN = re.compile(r"^\d{2}/\d{2}/\d{4}$")

DATE_FIELDS = ("DOB",)
NUMERIC_FIELDS = ("employer", "SSN")
_NUMBER_PATTERN = re.compile(r"^-?\d+(\.\d+)?$")
SSN_LAST4_MAX = 9999


# =============================================================================
# VALUE COERCION
# =============================================================================

def _coerce_date(field: str, value: Any) -> str:
    if not isinstance(value, str) or not _DATE_PATTERN.match(value):
        raise InvalidFieldValue(field, value, f"expected a date formatted {DATE_FORMAT}")
    return value


def _coerce_number(field: str, value: Any) -> Optional[Number]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidFieldValue(field, value, "expected a number")

    if isinstance(value, (int, float)):
        number: Number = value
    elif isinstance(value, str):
        text = value.replace("$", "").replace(",", "").strip()
        match = _NUMBER_PATTERN.match(text)
        if match is None:
            raise InvalidFieldValue(field, value, "expected a number")
        number = float(text) if match.group(1) else int(text)
    else:
        raise InvalidFieldValue(field, value, "expected a number")

    if isinstance(number, float) and not math.isfinite(number):
        raise InvalidFieldValue(field, value, "expected a finite number")
    return number


def _validate_number(field: str, number: Optional[Number]) -> Optional[Number]:
    if number is None:
        return None
    if field == "SSN":
        if isinstance(number, float):
            if not number.is_integer():
                raise InvalidFieldValue(field, number, "expected the last 4 digits")
            number = int(number)
        if not 0 <= number <= SSN_LAST4_MAX:
            raise InvalidFieldValue(field, number, "expected the last 4 digits")
    elif number < 0:
        raise InvalidFieldValue(field, number, "must not be negative")
    return number


def _coerce_gender(value: Any) -> Gender:
    try:
        return Gender(value)
    except ValueError:
        options = ", ".join(g.value for g in Gender)
        raise InvalidFieldValue("gender", value, f"expected one of: {options}") from None


def _coerce_income_source_key(key: Union[IncomeSourceKey, str]) -> IncomeSourceKey:
    try:
        return IncomeSourceKey(key)
    except ValueError:
        raise InvalidFieldValue("income_source", key, "unknown income source") from None


# =============================================================================
# CATEGORY UPDATES
# =============================================================================

def set_first_name(form: IntakeForm, member_key: str, value: Any) -> None:
    """Rename a member. The name doubles as its section label, so it cannot be blank."""
    member = form.get_member(member_key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidFieldValue("first_name", value, "must be a non-empty string")
    member.demographics.first_name = value.strip()


def set_date(form: IntakeForm, member_key: str, value: Any, field: str = "DOB") -> None:
    """Store a formatted date string verbatim."""
    if field not in DATE_FIELDS:
        raise InvalidFieldValue(field, value, "not a date field")
    member = form.get_member(member_key)
    setattr(member.demographics, field, _coerce_date(field, value))


def set_number(form: IntakeForm, member_key: str, field: str, value: Any) -> None:
    """Store a numeric field (monthly income or last 4 of SSN). ``None`` clears it."""
    if field not in NUMERIC_FIELDS:
        raise InvalidFieldValue(field, value, "not a numeric field")
    member = form.get_member(member_key)
    number = _validate_number(field, _coerce_number(field, value))
    setattr(member.demographics, field, number)


def set_gender(form: IntakeForm, member_key: str, value: Any) -> None:
    member = form.get_member(member_key)
    member.demographics.gender = _coerce_gender(value)


def set_income_source(
    form: IntakeForm,
    member_key: str,
    key: Union[IncomeSourceKey, str],
    value: Any,
) -> None:
    """Set exactly one income-source flag."""
    member = form.get_member(member_key)
    source = _coerce_income_source_key(key)
    if not isinstance(value, bool):
        raise InvalidFieldValue(f"income_source.{source.value}", value, "expected true or false")
    member.demographics.income_source[source] = value


def toggle_income_source(
    form: IntakeForm,
    member_key: str,
    key: Union[IncomeSourceKey, str],
) -> bool:
    """Flip one income-source flag and return its new value."""
    member = form.get_member(member_key)
    source = _coerce_income_source_key(key)
    new_value = not member.demographics.has_income_source(source)
    member.demographics.income_source[source] = new_value
    return new_value


# =============================================================================
# PATH DISPATCH
# =============================================================================

def apply_field(form: IntakeForm, path: Union[str, FieldPath], value: Any) -> FieldPath:
    """
    Apply an edit addressed by a dotted input name.

    Args:
        form: The form owned by the calling session
        path: Dotted name such as ``m1.demographics.DOB``
        value: New value from the input element

    Returns:
        The parsed FieldPath

    Raises:
        MalformedPath: path does not parse
        MemberNotFound: member key is not on the form
        InvalidFieldValue: value rejected by validation
    """
    field_path = path if isinstance(path, FieldPath) else parse_field_path(path)
    category = field_path.category
    member_key = field_path.member_key

    if category is FieldCategory.TEXT:
        set_first_name(form, member_key, value)
    elif category is FieldCategory.DATE:
        set_date(form, member_key, value, field=field_path.field)
    elif category is FieldCategory.NUMBER:
        set_number(form, member_key, field_path.field, value)
    elif category is FieldCategory.ENUM:
        set_gender(form, member_key, value)
    elif category is FieldCategory.BOOLEAN_SET:
        set_income_source(form, member_key, field_path.subkey, value)

    # Values are not logged: SSN digits must stay out of the logs.
    logger.debug(f"[INTAKE] Applied edit to {field_path}")
    return field_path

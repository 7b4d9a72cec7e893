"""
Dotted field paths.

Rendered inputs are named ``memberKey.section.field[.subkey]``, for example
``m1.demographics.DOB`` or ``m1.demographics.income_source.job``. Parsing
is an explicit lookup against the known fields of each section rather than
attribute traversal, so unknown names fail early with MalformedPath.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from intake.exceptions import MalformedPath
from intake.form_model import IncomeSourceKey

DEMOGRAPHICS_SECTION = "demographics"


class FieldCategory(Enum):
    """How a field's value is validated and stored."""
    TEXT = "text"
    DATE = "date"
    NUMBER = "number"
    ENUM = "enum"
    BOOLEAN_SET = "boolean_set"


DEMOGRAPHICS_FIELDS: Dict[str, FieldCategory] = {
    "first_name": FieldCategory.TEXT,
    "DOB": FieldCategory.DATE,
    "gender": FieldCategory.ENUM,
    "employer": FieldCategory.NUMBER,
    "SSN": FieldCategory.NUMBER,
    "income_source": FieldCategory.BOOLEAN_SET,
}

SECTIONS: Dict[str, Dict[str, FieldCategory]] = {
    DEMOGRAPHICS_SECTION: DEMOGRAPHICS_FIELDS,
}


@dataclass(frozen=True)
class FieldPath:
    """A parsed dotted path."""
    member_key: str
    section: str
    field: str
    subkey: Optional[str] = None

    @property
    def category(self) -> FieldCategory:
        return SECTIONS[self.section][self.field]

    @property
    def relative(self) -> str:
        """Path without the member key, e.g. ``demographics.DOB``."""
        parts = [self.section, self.field]
        if self.subkey is not None:
            parts.append(self.subkey)
        return ".".join(parts)

    def __str__(self) -> str:
        return f"{self.member_key}.{self.relative}"


def parse_field_path(path: str) -> FieldPath:
    """
    Parse a dotted input name into a FieldPath.

    Raises:
        MalformedPath: if the path does not have the expected segments or
            names an unknown section, field or income source.
    """
    if not isinstance(path, str) or not path:
        raise MalformedPath(path, "path must be a non-empty string")

    parts = path.split(".")
    if any(part == "" for part in parts):
        raise MalformedPath(path, "empty segment")
    if len(parts) not in (3, 4):
        raise MalformedPath(path, "expected memberKey.section.field[.subkey]")

    member_key, section, field_key = parts[0], parts[1], parts[2]
    subkey = parts[3] if len(parts) == 4 else None

    fields = SECTIONS.get(section)
    if fields is None:
        raise MalformedPath(path, f"unknown section '{section}'")
    category = fields.get(field_key)
    if category is None:
        raise MalformedPath(path, f"unknown field '{field_key}'")

    if category is FieldCategory.BOOLEAN_SET:
        if subkey is None:
            raise MalformedPath(path, f"'{field_key}' requires a subkey")
        try:
            IncomeSourceKey(subkey)
        except ValueError:
            raise MalformedPath(path, f"unknown income source '{subkey}'") from None
    elif subkey is not None:
        raise MalformedPath(path, f"'{field_key}' does not take a subkey")

    return FieldPath(member_key=member_key, section=section, field=field_key, subkey=subkey)


def field_name(member_key: str, relative_path: str) -> str:
    """Build the dotted input name for a member, e.g. ``m1.demographics.DOB``."""
    name = f"{member_key}.{relative_path}"
    # Names must parse back into the same FieldPath.
    parse_field_path(name)
    return name

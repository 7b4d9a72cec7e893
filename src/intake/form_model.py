"""
Intake Form Data Model.

An IntakeForm describes one household: an ordered mapping of member keys
to FamilyMember records, each carrying a Demographics record. Insertion
order of members is the display order.

The serialized shape keeps the field names used by the intake client:

    {"familyMember": {"m1": {"demographics": {"first_name": "Alice",
                                              "DOB": "02/14/1990",
                                              "income_source": {"job": true}}}}}

Absent fields are omitted rather than written as null.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from intake.exceptions import DuplicateMember, IncompleteMember, InvalidFieldValue, MemberNotFound

Number = Union[int, float]


class Gender(str, Enum):
    """Gender options offered on the demographics step."""
    MALE = "Male"
    FEMALE = "Female"
    DECLINE_TO_ANSWER = "Decline to Answer"


class IncomeSourceKey(str, Enum):
    """Household income types. Each key is toggled independently."""
    JOB = "job"
    TANF = "TANF"
    SSI = "SSI"
    SSDI = "SSDI"
    CHILD_SUPPORT = "child_support"
    OTHER = "other"

    @property
    def label(self) -> str:
        return INCOME_SOURCE_LABELS[self]


INCOME_SOURCE_LABELS: Dict[IncomeSourceKey, str] = {
    IncomeSourceKey.JOB: "Job",
    IncomeSourceKey.TANF: "TANF",
    IncomeSourceKey.SSI: "SSI",
    IncomeSourceKey.SSDI: "SSDI",
    IncomeSourceKey.CHILD_SUPPORT: "Child Support",
    IncomeSourceKey.OTHER: "Other",
}


@dataclass
class Demographics:
    """Per-member demographic answers."""
    first_name: str = ""
    DOB: Optional[str] = None  # MM/DD/YYYY
    gender: Optional[Gender] = None
    employer: Optional[Number] = None  # Monthly income
    SSN: Optional[int] = None  # Last 4 digits only
    income_source: Dict[IncomeSourceKey, bool] = field(default_factory=dict)

    def has_income_source(self, key: IncomeSourceKey) -> bool:
        """Absent keys count as False."""
        return bool(self.income_source.get(IncomeSourceKey(key), False))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"first_name": self.first_name}
        if self.DOB is not None:
            data["DOB"] = self.DOB
        if self.gender is not None:
            data["gender"] = self.gender.value
        if self.employer is not None:
            data["employer"] = self.employer
        if self.SSN is not None:
            data["SSN"] = self.SSN
        data["income_source"] = {key.value: value for key, value in self.income_source.items()}
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Demographics":
        """Load demographics from the client's JSON. Unknown options raise ``InvalidFieldValue``."""
        gender = data.get("gender")
        if gender is not None:
            try:
                gender = Gender(gender)
            except ValueError:
                raise InvalidFieldValue("gender", gender, "unknown option") from None

        income_source: Dict[IncomeSourceKey, bool] = {}
        for key, value in (data.get("income_source") or {}).items():
            try:
                income_source[IncomeSourceKey(key)] = bool(value)
            except ValueError:
                raise InvalidFieldValue("income_source", key, "unknown income source") from None

        return cls(
            first_name=data.get("first_name") or "",
            DOB=data.get("DOB"),
            gender=gender,
            employer=data.get("employer"),
            SSN=data.get("SSN"),
            income_source=income_source,
        )


@dataclass
class FamilyMember:
    """One household member."""
    key: str
    demographics: Demographics = field(default_factory=Demographics)

    @property
    def label(self) -> str:
        """Section label used by renderers."""
        if not self.demographics.first_name:
            raise IncompleteMember(self.key)
        return self.demographics.first_name

    def to_dict(self) -> Dict[str, Any]:
        return {"demographics": self.demographics.to_dict()}


@dataclass
class IntakeForm:
    """
    Household intake record owned by a single wizard session.

    Members are kept in a dict, so iteration follows insertion order.
    """
    family_member: Dict[str, FamilyMember] = field(default_factory=dict)

    def add_member(self, key: str, first_name: str) -> FamilyMember:
        """Append a new member. The first name becomes its section label."""
        if not key or "." in key:
            raise ValueError(f"Invalid member key: {key!r}")
        if not first_name or not first_name.strip():
            raise IncompleteMember(key)
        if key in self.family_member:
            raise DuplicateMember(key)

        member = FamilyMember(key=key, demographics=Demographics(first_name=first_name.strip()))
        self.family_member[key] = member
        return member

    def get_member(self, key: str) -> FamilyMember:
        try:
            return self.family_member[key]
        except KeyError:
            raise MemberNotFound(key) from None

    def remove_member(self, key: str) -> FamilyMember:
        member = self.get_member(key)
        del self.family_member[key]
        return member

    def member_keys(self) -> List[str]:
        return list(self.family_member)

    def members(self) -> List[FamilyMember]:
        return list(self.family_member.values())

    def __len__(self) -> int:
        return len(self.family_member)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "familyMember": {
                key: member.to_dict() for key, member in self.family_member.items()
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IntakeForm":
        form = cls()
        for key, member_data in (data.get("familyMember") or {}).items():
            demographics = Demographics.from_dict(member_data.get("demographics") or {})
            form.family_member[key] = FamilyMember(key=key, demographics=demographics)
        return form

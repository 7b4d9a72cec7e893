"""
Tests for the intake form data model.
"""

import pytest

from intake.exceptions import DuplicateMember, IncompleteMember, InvalidFieldValue, MemberNotFound
from intake.form_model import (
    Demographics,
    FamilyMember,
    Gender,
    IncomeSourceKey,
    IntakeForm,
)


class TestIntakeForm:
    """Tests for member management on IntakeForm."""

    def test_members_keep_insertion_order(self, empty_form):
        for key, name in [("m3", "Carol"), ("m1", "Alice"), ("m2", "Bob")]:
            empty_form.add_member(key, name)

        assert empty_form.member_keys() == ["m3", "m1", "m2"]
        assert [m.label for m in empty_form.members()] == ["Carol", "Alice", "Bob"]

    def test_add_member_strips_name(self, empty_form):
        member = empty_form.add_member("m1", "  Alice ")
        assert member.demographics.first_name == "Alice"

    def test_add_member_rejects_blank_name(self, empty_form):
        with pytest.raises(IncompleteMember):
            empty_form.add_member("m1", "   ")
        assert len(empty_form) == 0

    def test_add_member_rejects_duplicate_key(self, household):
        with pytest.raises(DuplicateMember):
            household.add_member("m1", "Another Alice")
        assert household.get_member("m1").demographics.first_name == "Alice"

    def test_add_member_rejects_dotted_key(self, empty_form):
        with pytest.raises(ValueError):
            empty_form.add_member("m.1", "Alice")

    def test_get_missing_member(self, household):
        with pytest.raises(MemberNotFound) as exc_info:
            household.get_member("m9")
        assert exc_info.value.member_key == "m9"

    def test_remove_member(self, household):
        household.remove_member("m1")
        assert household.member_keys() == ["m2"]


class TestDemographics:
    """Tests for demographics defaults and serialization."""

    def test_new_member_has_no_optional_fields(self):
        demographics = Demographics(first_name="Alice")
        assert demographics.DOB is None
        assert demographics.gender is None
        assert demographics.employer is None
        assert demographics.SSN is None
        assert demographics.income_source == {}

    def test_absent_income_source_is_false(self):
        demographics = Demographics(first_name="Alice")
        for key in IncomeSourceKey:
            assert demographics.has_income_source(key) is False

    def test_to_dict_omits_absent_fields(self):
        data = Demographics(first_name="Alice").to_dict()
        assert data == {"first_name": "Alice", "income_source": {}}

    def test_to_dict_uses_wire_names(self):
        demographics = Demographics(
            first_name="Alice",
            DOB="02/14/1990",
            gender=Gender.FEMALE,
            employer=1200,
            SSN=1234,
            income_source={IncomeSourceKey.CHILD_SUPPORT: True},
        )
        assert demographics.to_dict() == {
            "first_name": "Alice",
            "DOB": "02/14/1990",
            "gender": "Female",
            "employer": 1200,
            "SSN": 1234,
            "income_source": {"child_support": True},
        }

    def test_label_requires_first_name(self):
        member = FamilyMember(key="m1")
        with pytest.raises(IncompleteMember):
            _ = member.label


class TestSerialization:
    """Tests for loading forms from the client's JSON shape."""

    def test_from_dict_preserves_order_and_values(self):
        data = {
            "familyMember": {
                "kid": {"demographics": {"first_name": "Dana", "gender": "Decline to Answer"}},
                "mom": {"demographics": {"first_name": "Erin", "income_source": {"TANF": True}}},
            }
        }
        form = IntakeForm.from_dict(data)

        assert form.member_keys() == ["kid", "mom"]
        assert form.get_member("kid").demographics.gender is Gender.DECLINE_TO_ANSWER
        assert form.get_member("mom").demographics.has_income_source(IncomeSourceKey.TANF)
        assert form.to_dict() == {
            "familyMember": {
                "kid": {"demographics": {
                    "first_name": "Dana",
                    "gender": "Decline to Answer",
                    "income_source": {},
                }},
                "mom": {"demographics": {"first_name": "Erin", "income_source": {"TANF": True}}},
            }
        }

    def test_unknown_gender_raises_field_error(self):
        with pytest.raises(InvalidFieldValue) as exc_info:
            IntakeForm.from_dict({"familyMember": {"m1": {"demographics": {"first_name": "Al", "gender": "Robot"}}}})
        assert exc_info.value.field == "gender"

    def test_unknown_income_source_raises_field_error(self):
        with pytest.raises(InvalidFieldValue) as exc_info:
            Demographics.from_dict({"first_name": "Al", "income_source": {"lottery": True}})
        assert exc_info.value.field == "income_source"
        assert exc_info.value.value == "lottery"

    def test_income_source_labels(self):
        labels = [key.label for key in IncomeSourceKey]
        assert labels == ["Job", "TANF", "SSI", "SSDI", "Child Support", "Other"]

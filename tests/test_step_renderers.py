"""
Tests for step renderers.
"""

import copy

import pytest

from intake.exceptions import IncompleteMember, MalformedPath, StepNotFound
from intake.field_binder import apply_field
from intake.field_paths import FieldCategory, parse_field_path
from intake.form_model import IntakeForm
from intake.renderers import (
    DEFAULT_DOB,
    FamilyDemographicsRenderer,
    ReviewRenderer,
    get_renderer,
)
from intake.step_registry import DEFAULT_STEPS, default_registry


def _fields_by_name(section):
    return {f.name: f for f in section.fields}


class TestFamilyDemographicsRenderer:

    @pytest.fixture
    def renderer(self):
        return FamilyDemographicsRenderer()

    def test_progress_and_title(self, renderer, household):
        rendered = renderer.render(household, default_registry(), "family_demographics")
        assert rendered.title == "Family Demographics"
        assert rendered.percent == pytest.approx(2 / 3 * 100)

    @pytest.mark.parametrize("step", ["review", "family_members"])
    def test_rejects_step_it_does_not_render(self, renderer, household, step):
        with pytest.raises(StepNotFound):
            renderer.render(household, default_registry(), step)

    def test_accepts_step_object(self, renderer, household):
        step = default_registry().get("family_demographics")
        rendered = renderer.render(household, default_registry(), step)
        assert rendered.step_id == "family_demographics"

    def test_accepts_plain_step_list(self, renderer, household):
        steps = [step.id for step in DEFAULT_STEPS]
        rendered = renderer.render(household, steps, "family_demographics")
        assert rendered.percent == pytest.approx(2 / 3 * 100)

    def test_sections_follow_member_order(self, renderer):
        form = IntakeForm()
        for key, name in [("z", "Zed"), ("a", "Amy"), ("k", "Kai")]:
            form.add_member(key, name)

        first = renderer.render(form, default_registry(), "family_demographics")
        second = renderer.render(form, default_registry(), "family_demographics")

        assert first.member_order == ["z", "a", "k"]
        assert second.member_order == first.member_order
        assert [s.label for s in first.sections] == ["Zed", "Amy", "Kai"]

    def test_missing_dob_renders_default_without_persisting(self, renderer, household):
        before = copy.deepcopy(household.to_dict())

        rendered = renderer.render(household, default_registry(), "family_demographics")

        dob = _fields_by_name(rendered.sections[0])["m1.demographics.DOB"]
        assert dob.value == DEFAULT_DOB == "01/01/2020"
        assert dob.is_default is True
        assert household.get_member("m1").demographics.DOB is None
        assert "DOB" not in household.to_dict()["familyMember"]["m1"]["demographics"]
        assert household.to_dict() == before

    def test_explicit_dob_replaces_default(self, renderer, household):
        apply_field(household, "m1.demographics.DOB", "05/06/1977")
        rendered = renderer.render(household, default_registry(), "family_demographics")
        dob = _fields_by_name(rendered.sections[0])["m1.demographics.DOB"]
        assert dob.value == "05/06/1977"
        assert dob.is_default is False

    def test_field_names_round_trip_through_binder(self, renderer, household):
        rendered = renderer.render(household, default_registry(), "family_demographics")
        fields = _fields_by_name(rendered.sections[1])

        assert fields["m2.demographics.gender"].options == ["Male", "Female", "Decline to Answer"]
        checkbox_names = [f.name for f in rendered.sections[1].fields if f.kind is FieldCategory.BOOLEAN_SET]
        assert checkbox_names == [
            "m2.demographics.income_source.job",
            "m2.demographics.income_source.TANF",
            "m2.demographics.income_source.SSI",
            "m2.demographics.income_source.SSDI",
            "m2.demographics.income_source.child_support",
            "m2.demographics.income_source.other",
        ]

        apply_field(household, checkbox_names[4], True)
        rendered = renderer.render(household, default_registry(), "family_demographics")
        fields = _fields_by_name(rendered.sections[1])
        assert fields["m2.demographics.income_source.child_support"].value is True
        assert fields["m2.demographics.income_source.job"].value is False

    def test_member_without_name_is_rejected(self, renderer):
        form = IntakeForm.from_dict({"familyMember": {"m1": {"demographics": {}}}})
        with pytest.raises(IncompleteMember):
            renderer.render(form, default_registry(), "family_demographics")

    def test_rendering_does_not_mutate(self, renderer, household):
        before = copy.deepcopy(household.to_dict())
        renderer.render(household, default_registry(), "family_demographics")
        renderer.render(household, default_registry(), "family_demographics")
        assert household.to_dict() == before


class TestReviewRenderer:

    def test_summary_is_read_only(self, household):
        apply_field(household, "m1.demographics.income_source.job", True)
        apply_field(household, "m1.demographics.income_source.SSI", True)

        rendered = ReviewRenderer().render(household, default_registry(), "review")

        assert rendered.percent == pytest.approx(100)
        fields = _fields_by_name(rendered.sections[0])
        assert all(f.read_only for f in rendered.sections[0].fields)
        assert fields["m1:income_sources"].value == ["Job", "SSI"]
        assert fields["m1.demographics.DOB"].value is None

    def test_income_summary_is_not_an_input_name(self, household):
        rendered = ReviewRenderer().render(household, default_registry(), "review")
        summary = _fields_by_name(rendered.sections[0])["m1:income_sources"]
        with pytest.raises(MalformedPath):
            parse_field_path(summary.name)

    def test_ssn_not_shown(self, household):
        apply_field(household, "m1.demographics.SSN", 1234)
        rendered = ReviewRenderer().render(household, default_registry(), "review")
        assert "m1.demographics.SSN" not in _fields_by_name(rendered.sections[0])


class TestGetRenderer:

    @pytest.mark.parametrize("step", DEFAULT_STEPS)
    def test_every_default_step_has_renderer(self, step):
        assert get_renderer(step).step == step

    def test_unknown_step(self):
        with pytest.raises(StepNotFound):
            get_renderer("payment")

    def test_to_dict(self, household):
        data = get_renderer("family_members").render(household, default_registry(), "family_members").to_dict()
        assert data["step_id"] == "family_members"
        assert data["sections"][0]["fields"][0] == {
            "name": "m1.demographics.first_name",
            "label": "First Name",
            "kind": "text",
            "value": "Alice",
            "options": [],
            "is_default": False,
            "read_only": False,
            "placeholder": None,
        }

"""
Step Renderers.

A renderer turns the current form and step into a presentation-neutral
description: one section per family member, in the form's member order,
each listing the fields the step shows with their current values and the
dotted input names edits must be sent to. Renderers never write to the
form; display defaults live only in the rendered output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from intake.exceptions import StepNotFound
from intake.field_paths import FieldCategory, field_name
from intake.form_model import FamilyMember, Gender, IncomeSourceKey, IntakeForm
from intake.navigation import progress_percent
from intake.step_registry import (
    FAMILY_DEMOGRAPHICS,
    FAMILY_MEMBERS,
    REVIEW,
    Step,
    StepRegistry,
)

DEFAULT_DOB = "01/01/2020"


@dataclass
class RenderedField:
    """One input element."""
    name: str
    label: str
    kind: FieldCategory
    value: Any = None
    options: List[str] = field(default_factory=list)
    is_default: bool = False
    read_only: bool = False
    placeholder: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "kind": self.kind.value,
            "value": self.value,
            "options": self.options,
            "is_default": self.is_default,
            "read_only": self.read_only,
            "placeholder": self.placeholder,
        }


@dataclass
class MemberSection:
    """All fields for one family member, labelled with the member's first name."""
    member_key: str
    label: str
    fields: List[RenderedField] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "member_key": self.member_key,
            "label": self.label,
            "fields": [f.to_dict() for f in self.fields],
        }


@dataclass
class RenderedStep:
    """Renderable description of one wizard step."""
    step_id: str
    title: str
    percent: float
    sections: List[MemberSection] = field(default_factory=list)

    @property
    def member_order(self) -> List[str]:
        return [section.member_key for section in self.sections]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_id": self.step_id,
            "title": self.title,
            "percent": self.percent,
            "sections": [s.to_dict() for s in self.sections],
        }


class StepRenderer:
    """Base renderer. Subclasses describe the fields of one member."""

    step: Step

    def render(
        self,
        form: IntakeForm,
        steps: Union[Sequence[Any], StepRegistry],
        step: Union[Step, str],
    ) -> RenderedStep:
        step_id = step.id if isinstance(step, Step) else step
        if step_id != self.step.id:
            raise StepNotFound(step_id)
        percent = progress_percent(step, steps)
        sections = [
            MemberSection(
                member_key=member.key,
                label=member.label,
                fields=self.render_member(member),
            )
            for member in form.members()
        ]
        return RenderedStep(
            step_id=self.step.id,
            title=self.step.title,
            percent=percent,
            sections=sections,
        )

    def render_member(self, member: FamilyMember) -> List[RenderedField]:
        raise NotImplementedError


class FamilyMembersRenderer(StepRenderer):
    """Names of everyone in the household."""

    step = FAMILY_MEMBERS

    def render_member(self, member: FamilyMember) -> List[RenderedField]:
        return [
            RenderedField(
                name=field_name(member.key, "demographics.first_name"),
                label="First Name",
                kind=FieldCategory.TEXT,
                value=member.demographics.first_name,
            )
        ]


class FamilyDemographicsRenderer(StepRenderer):
    """Gender, birthdate, last 4 of SSN, monthly income and income sources."""

    step = FAMILY_DEMOGRAPHICS

    def render_member(self, member: FamilyMember) -> List[RenderedField]:
        demographics = member.demographics
        dob_missing = demographics.DOB is None

        fields = [
            RenderedField(
                name=field_name(member.key, "demographics.gender"),
                label="Gender",
                kind=FieldCategory.ENUM,
                value=demographics.gender.value if demographics.gender else None,
                options=[g.value for g in Gender],
                placeholder="Please select an option",
            ),
            RenderedField(
                name=field_name(member.key, "demographics.DOB"),
                label="Birthdate",
                kind=FieldCategory.DATE,
                value=DEFAULT_DOB if dob_missing else demographics.DOB,
                is_default=dob_missing,
                placeholder="MM/DD/YYYY",
            ),
            RenderedField(
                name=field_name(member.key, "demographics.SSN"),
                label="Last 4 of SSN",
                kind=FieldCategory.NUMBER,
                value=demographics.SSN,
                placeholder="0000",
            ),
            RenderedField(
                name=field_name(member.key, "demographics.employer"),
                label="Monthly Income",
                kind=FieldCategory.NUMBER,
                value=demographics.employer,
            ),
        ]

        for source in IncomeSourceKey:
            fields.append(
                RenderedField(
                    name=field_name(member.key, f"demographics.income_source.{source.value}"),
                    label=source.label,
                    kind=FieldCategory.BOOLEAN_SET,
                    value=demographics.has_income_source(source),
                )
            )
        return fields


class ReviewRenderer(StepRenderer):
    """Read-only summary of every member's answers."""

    step = REVIEW

    def render_member(self, member: FamilyMember) -> List[RenderedField]:
        demographics = member.demographics
        sources = [s.label for s in IncomeSourceKey if demographics.has_income_source(s)]
        summary = [
            ("demographics.first_name", "First Name", FieldCategory.TEXT, demographics.first_name),
            ("demographics.DOB", "Birthdate", FieldCategory.DATE, demographics.DOB),
            (
                "demographics.gender",
                "Gender",
                FieldCategory.ENUM,
                demographics.gender.value if demographics.gender else None,
            ),
            ("demographics.employer", "Monthly Income", FieldCategory.NUMBER, demographics.employer),
        ]
        fields = [
            RenderedField(
                name=field_name(member.key, path),
                label=label,
                kind=kind,
                value=value,
                read_only=True,
            )
            for path, label, kind, value in summary
        ]
        # Summary row id, not an input name. It never parses as a field path.
        fields.append(
            RenderedField(
                name=f"{member.key}:income_sources",
                label="Income Sources",
                kind=FieldCategory.BOOLEAN_SET,
                value=sources,
                read_only=True,
            )
        )
        return fields


RENDERERS: Dict[str, StepRenderer] = {
    renderer.step.id: renderer
    for renderer in (FamilyMembersRenderer(), FamilyDemographicsRenderer(), ReviewRenderer())
}


def get_renderer(step: Union[Step, str]) -> StepRenderer:
    step_id = step.id if isinstance(step, Step) else step
    try:
        return RENDERERS[step_id]
    except KeyError:
        raise StepNotFound(step_id) from None

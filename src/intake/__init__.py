"""Family Intake Wizard.

Multi-step household intake: per-member demographics, a linear step
registry, dotted-path field edits and step rendering with progress.
"""

from intake.exceptions import (
    IntakeError,
    MemberNotFound,
    DuplicateMember,
    MalformedPath,
    InvalidFieldValue,
    StepNotFound,
    IncompleteMember,
    SessionNotFound,
    SessionClosed,
    SessionLimitReached,
)
from intake.form_model import IntakeForm, FamilyMember, Demographics, Gender, IncomeSourceKey
from intake.field_paths import FieldPath, parse_field_path, field_name
from intake.field_binder import (
    apply_field,
    set_date,
    set_number,
    set_gender,
    set_income_source,
    toggle_income_source,
    set_first_name,
)
from intake.step_registry import Step, StepRegistry, DEFAULT_STEPS, default_registry
from intake.navigation import NavigationController, current_step_index, progress_percent
from intake.renderers import DEFAULT_DOB, RenderedStep, StepRenderer, get_renderer
from intake.session import IntakeSession, SessionStore, get_session_store

__all__ = [
    "IntakeError",
    "MemberNotFound",
    "DuplicateMember",
    "MalformedPath",
    "InvalidFieldValue",
    "StepNotFound",
    "IncompleteMember",
    "SessionNotFound",
    "SessionClosed",
    "SessionLimitReached",
    "IntakeForm",
    "FamilyMember",
    "Demographics",
    "Gender",
    "IncomeSourceKey",
    "FieldPath",
    "parse_field_path",
    "field_name",
    "apply_field",
    "set_date",
    "set_number",
    "set_gender",
    "set_income_source",
    "toggle_income_source",
    "set_first_name",
    "Step",
    "StepRegistry",
    "DEFAULT_STEPS",
    "default_registry",
    "NavigationController",
    "current_step_index",
    "progress_percent",
    "DEFAULT_DOB",
    "RenderedStep",
    "StepRenderer",
    "get_renderer",
    "IntakeSession",
    "SessionStore",
    "get_session_store",
]

"""
Intake Session.

A session owns one IntakeForm and the navigation state of one wizard run.
All edits, renders and transitions for that form go through the session,
one at a time. SessionStore keeps live sessions in memory for the web
layer.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional

from intake.exceptions import IntakeError, SessionClosed, SessionLimitReached, SessionNotFound
from intake.field_binder import apply_field
from intake.field_paths import FieldPath
from intake.form_model import FamilyMember, IntakeForm
from intake.navigation import NavigationController
from intake.renderers import RenderedStep, get_renderer
from intake.step_registry import StepRegistry, default_registry

logger = logging.getLogger(__name__)

SubmissionHandler = Callable[[Dict[str, Any]], Any]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def log_submission(payload: Dict[str, Any]) -> None:
    """Default submission handler: records the hand-off and nothing else."""
    members = payload.get("form", {}).get("familyMember", {})
    logger.info(
        f"[INTAKE] Submission received for session {payload.get('session_id')} "
        f"with {len(members)} family member(s)"
    )


class SessionStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"


class IntakeSession:
    """One wizard run over one household form."""

    def __init__(
        self,
        session_id: Optional[str] = None,
        form: Optional[IntakeForm] = None,
        registry: Optional[StepRegistry] = None,
        max_members: Optional[int] = None,
    ):
        self.session_id = session_id or str(uuid.uuid4())
        self.form = form if form is not None else IntakeForm()
        self.registry = registry or default_registry()
        self.navigation = NavigationController(self.registry)
        self.max_members = max_members
        self.status = SessionStatus.IN_PROGRESS
        self.created_at = _now()
        self.updated_at = self.created_at
        self.submitted_at: Optional[datetime] = None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def is_submitted(self) -> bool:
        return self.status is SessionStatus.SUBMITTED

    @property
    def current_step(self):
        return self.navigation.current

    @property
    def progress(self) -> float:
        return self.navigation.percent

    def _ensure_open(self) -> None:
        if self.is_submitted:
            raise SessionClosed(self.session_id, "session already submitted")

    def _touch(self) -> None:
        self.updated_at = _now()

    # -------------------------------------------------------------------------
    # Form edits
    # -------------------------------------------------------------------------

    def add_member(self, member_key: str, first_name: str) -> FamilyMember:
        self._ensure_open()
        if self.max_members is not None and len(self.form) >= self.max_members:
            raise IntakeError(
                f"A household can list at most {self.max_members} family members",
                details={"max_members": self.max_members},
            )
        member = self.form.add_member(member_key, first_name)
        self._touch()
        logger.info(f"[INTAKE] Session {self.session_id}: added member {member_key}")
        return member

    def remove_member(self, member_key: str) -> FamilyMember:
        self._ensure_open()
        member = self.form.remove_member(member_key)
        self._touch()
        logger.info(f"[INTAKE] Session {self.session_id}: removed member {member_key}")
        return member

    def edit(self, path: str, value: Any) -> FieldPath:
        """Apply one field edit. A rejected edit leaves the form as it was."""
        self._ensure_open()
        try:
            field_path = apply_field(self.form, path, value)
        except IntakeError as e:
            logger.warning(f"[INTAKE] Session {self.session_id}: edit rejected: {e.message}")
            raise
        self._touch()
        return field_path

    # -------------------------------------------------------------------------
    # Rendering and navigation
    # -------------------------------------------------------------------------

    def render(self) -> RenderedStep:
        step = self.navigation.current
        return get_renderer(step).render(self.form, self.registry, step)

    def next(self) -> bool:
        self._ensure_open()
        moved = self.navigation.next()
        if moved:
            self._touch()
        return moved

    def previous(self) -> bool:
        self._ensure_open()
        moved = self.navigation.previous()
        if moved:
            self._touch()
        return moved

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def submit(self, handler: Optional[SubmissionHandler] = None) -> Dict[str, Any]:
        """
        Hand the completed form to the submission boundary.

        Only allowed once, from the last step, with at least one member.

        Returns:
            The payload passed to the handler
        """
        self._ensure_open()
        if not self.navigation.is_last:
            raise SessionClosed(self.session_id, "submission is only allowed from the last step")
        if len(self.form) == 0:
            raise IntakeError(
                "Cannot submit an intake form without family members",
                details={"session_id": self.session_id},
            )

        payload = {
            "session_id": self.session_id,
            "submitted_at": _now().isoformat(),
            "form": self.form.to_dict(),
        }
        (handler or log_submission)(payload)

        self.status = SessionStatus.SUBMITTED
        self.submitted_at = _now()
        self._touch()
        logger.info(f"[INTAKE] Session {self.session_id} submitted")
        return payload

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "status": self.status.value,
            "current_step": self.navigation.current.id,
            "percent": self.progress,
            "steps": self.registry.to_list(),
            "form": self.form.to_dict(),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
        }


class SessionStore:
    """
    In-memory session map, bounded by ``max_sessions``.

    The lock guards the map only; each session is still driven by one
    client at a time. Sessions leave the map when they are discarded or
    once their form has been submitted.
    """

    def __init__(self, max_members: Optional[int] = None, max_sessions: Optional[int] = None):
        self._sessions: Dict[str, IntakeSession] = {}
        self._lock = threading.Lock()
        self.max_members = max_members
        self.max_sessions = max_sessions

    def create(self, registry: Optional[StepRegistry] = None) -> IntakeSession:
        session = IntakeSession(registry=registry, max_members=self.max_members)
        with self._lock:
            if self.max_sessions is not None and len(self._sessions) >= self.max_sessions:
                logger.warning(f"[INTAKE] Session limit reached ({self.max_sessions})")
                raise SessionLimitReached(self.max_sessions)
            self._sessions[session.session_id] = session
        logger.info(f"[INTAKE] Started new session: {session.session_id}")
        return session

    def get(self, session_id: str) -> IntakeSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def delete(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise SessionNotFound(session_id)
        logger.info(f"[INTAKE] Discarded session: {session_id}")

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def reset(self) -> None:
        with self._lock:
            self._sessions.clear()


_session_store: Optional[SessionStore] = None


def get_session_store() -> SessionStore:
    """Get the process-wide session store."""
    global _session_store
    if _session_store is None:
        from config.settings import get_settings

        settings = get_settings()
        _session_store = SessionStore(
            max_members=settings.max_family_members,
            max_sessions=settings.max_sessions,
        )
    return _session_store


def reset_session_store() -> None:
    global _session_store
    _session_store = None

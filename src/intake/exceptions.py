"""
Intake Wizard Errors.

Every error raised by the wizard core is local to a single operation:
a failed field edit leaves the rest of the form untouched.
"""

from typing import Any, Dict, Optional


class IntakeError(Exception):
    """Base class for all intake wizard errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class MemberNotFound(IntakeError):
    """Raised when a member key does not exist on the form."""

    def __init__(self, member_key: str):
        self.member_key = member_key
        super().__init__(
            f"Family member '{member_key}' not found",
            details={"member_key": member_key},
        )


class DuplicateMember(IntakeError):
    """Raised when adding a member whose key is already taken."""

    def __init__(self, member_key: str):
        self.member_key = member_key
        super().__init__(
            f"Family member '{member_key}' already exists",
            details={"member_key": member_key},
        )


class MalformedPath(IntakeError):
    """Raised when a dotted field path does not parse."""

    def __init__(self, path: Any, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(
            f"Malformed field path '{path}': {reason}",
            details={"path": str(path), "reason": reason},
        )


class InvalidFieldValue(IntakeError):
    """Raised when a value is rejected by the binder."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid value for '{field}': {reason}",
            details={"field": field, "reason": reason},
        )


class StepNotFound(IntakeError):
    """Raised when a step is not part of the step registry."""

    def __init__(self, step: Any):
        self.step = step
        super().__init__(f"Step '{step}' is not registered", details={"step": str(step)})


class IncompleteMember(IntakeError):
    """Raised when a member without a first name reaches a renderer."""

    def __init__(self, member_key: str):
        self.member_key = member_key
        super().__init__(
            f"Family member '{member_key}' has no first name",
            details={"member_key": member_key},
        )


class SessionNotFound(IntakeError):
    """Raised when a wizard session id is unknown."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session '{session_id}' not found", details={"session_id": session_id})


class SessionClosed(IntakeError):
    """Raised when an operation is not allowed in the session's current state."""

    def __init__(self, session_id: str, reason: str):
        self.session_id = session_id
        self.reason = reason
        super().__init__(
            f"Session '{session_id}' cannot accept this operation: {reason}",
            details={"session_id": session_id, "reason": reason},
        )


class SessionLimitReached(IntakeError):
    """Raised when the session store is full."""

    def __init__(self, max_sessions: int):
        self.max_sessions = max_sessions
        super().__init__(
            f"No more than {max_sessions} intake sessions may be open at once",
            details={"max_sessions": max_sessions},
        )

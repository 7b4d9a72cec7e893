"""
Family Intake API

Step-by-step household intake with progress tracking. Each session holds
one intake form; the client adds members, sends field edits addressed by
dotted input names, renders the current step and moves through the steps
in order before submitting.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from intake.session import SessionStore, SubmissionHandler, get_session_store, log_submission

router = APIRouter(prefix="/api/intake", tags=["intake"])


# =============================================================================
# MODELS
# =============================================================================

class AddMemberRequest(BaseModel):
    """Add a family member to the form"""
    member_key: str = Field(..., min_length=1, max_length=64, pattern=r"^[^.\s]+$")
    first_name: str = Field(..., min_length=1, max_length=100)


class FieldEditRequest(BaseModel):
    """Edit one field, addressed by its dotted input name"""
    path: str = Field(..., min_length=1, examples=["m1.demographics.DOB"])
    value: Any = None


def get_submission_handler() -> SubmissionHandler:
    """Submission boundary used by the submit endpoint."""
    return log_submission


def _navigation_payload(session) -> Dict[str, Any]:
    return {
        "session_id": session.session_id,
        "current_step": session.current_step.id,
        "percent": session.progress,
        "can_go_next": session.navigation.can_go_next(),
        "can_go_previous": session.navigation.can_go_previous(),
    }


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("/start")
async def start_intake(store: SessionStore = Depends(get_session_store)) -> Dict[str, Any]:
    """Start a new intake session at the first step."""
    session = store.create()
    return {
        "session_id": session.session_id,
        "current_step": session.current_step.id,
        "steps": session.registry.to_list(),
        "percent": session.progress,
    }


@router.get("/{session_id}")
async def get_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> Dict[str, Any]:
    """Get the session snapshot, including the serialized form."""
    return store.get(session_id).to_dict()


@router.delete("/{session_id}")
async def discard_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> Dict[str, Any]:
    """Discard an unfinished session and its form."""
    store.delete(session_id)
    return {"success": True, "session_id": session_id}


@router.post("/{session_id}/members", status_code=201)
async def add_member(
    session_id: str,
    request: AddMemberRequest,
    store: SessionStore = Depends(get_session_store),
) -> Dict[str, Any]:
    """Append a family member. Members render in the order they were added."""
    session = store.get(session_id)
    member = session.add_member(request.member_key, request.first_name)
    return {
        "session_id": session_id,
        "member_key": member.key,
        "member": member.to_dict(),
        "member_keys": session.form.member_keys(),
    }


@router.delete("/{session_id}/members/{member_key}")
async def remove_member(
    session_id: str,
    member_key: str,
    store: SessionStore = Depends(get_session_store),
) -> Dict[str, Any]:
    session = store.get(session_id)
    session.remove_member(member_key)
    return {"session_id": session_id, "member_keys": session.form.member_keys()}


@router.patch("/{session_id}/fields")
async def edit_field(
    session_id: str,
    request: FieldEditRequest,
    store: SessionStore = Depends(get_session_store),
) -> Dict[str, Any]:
    """Apply one field edit. Rejected edits leave the form unchanged."""
    session = store.get(session_id)
    field_path = session.edit(request.path, request.value)
    member = session.form.get_member(field_path.member_key)
    return {
        "session_id": session_id,
        "path": str(field_path),
        "member": member.to_dict(),
    }


@router.get("/{session_id}/render")
async def render_step(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> Dict[str, Any]:
    """Describe the current step's fields for every member."""
    session = store.get(session_id)
    return session.render().to_dict()


@router.post("/{session_id}/next")
async def next_step(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> Dict[str, Any]:
    session = store.get(session_id)
    moved = session.next()
    return {"moved": moved, **_navigation_payload(session)}


@router.post("/{session_id}/previous")
async def previous_step(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> Dict[str, Any]:
    session = store.get(session_id)
    moved = session.previous()
    return {"moved": moved, **_navigation_payload(session)}


@router.post("/{session_id}/submit")
async def submit_intake(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
    handler: SubmissionHandler = Depends(get_submission_handler),
) -> Dict[str, Any]:
    """Hand the completed form to the submission boundary, then drop the session."""
    session = store.get(session_id)
    payload = session.submit(handler)
    store.delete(session_id)
    return {
        "success": True,
        "session_id": session_id,
        "status": session.status.value,
        "submitted_at": payload["submitted_at"],
    }

"""
Tests for IntakeSession and SessionStore.
"""

import threading

import pytest

from intake.exceptions import (
    IntakeError,
    InvalidFieldValue,
    MemberNotFound,
    SessionClosed,
    SessionLimitReached,
    SessionNotFound,
)
from intake.session import IntakeSession, SessionStatus, SessionStore


def _walk_to_last_step(session: IntakeSession) -> None:
    while session.next():
        pass


class TestIntakeSession:

    def test_starts_at_first_step(self, session):
        assert session.current_step.id == "family_members"
        assert session.progress == pytest.approx(100 / 3)
        assert session.status is SessionStatus.IN_PROGRESS

    def test_edit_and_render(self, session):
        session.next()
        session.edit("m2.demographics.DOB", "12/25/2001")

        rendered = session.render()

        assert rendered.step_id == "family_demographics"
        assert rendered.member_order == ["m1", "m2"]
        dob = {f.name: f for f in rendered.sections[1].fields}["m2.demographics.DOB"]
        assert dob.value == "12/25/2001"

    def test_rejected_edit_keeps_form(self, session):
        session.edit("m1.demographics.gender", "Female")
        before = session.form.to_dict()

        with pytest.raises(InvalidFieldValue):
            session.edit("m1.demographics.gender", "Other")
        with pytest.raises(MemberNotFound):
            session.edit("ghost.demographics.gender", "Male")

        assert session.form.to_dict() == before

    def test_navigation_bounds(self, session):
        assert session.previous() is False
        _walk_to_last_step(session)
        assert session.current_step.id == "review"
        assert session.next() is False
        assert session.progress == pytest.approx(100)

    def test_max_members(self):
        session = IntakeSession(max_members=1)
        session.add_member("m1", "Alice")
        with pytest.raises(IntakeError):
            session.add_member("m2", "Bob")
        assert session.form.member_keys() == ["m1"]


class TestSubmission:

    def test_submit_hands_off_form(self, session):
        received = []
        session.edit("m1.demographics.income_source.job", True)
        _walk_to_last_step(session)

        payload = session.submit(received.append)

        assert received == [payload]
        assert payload["session_id"] == "test-session"
        assert payload["form"]["familyMember"]["m1"]["demographics"]["income_source"] == {"job": True}
        assert session.is_submitted
        assert session.submitted_at is not None

    def test_submit_requires_last_step(self, session):
        with pytest.raises(SessionClosed):
            session.submit(lambda payload: None)
        assert not session.is_submitted

    def test_submit_requires_members(self):
        session = IntakeSession()
        _walk_to_last_step(session)
        with pytest.raises(IntakeError):
            session.submit(lambda payload: None)

    def test_submitted_session_is_closed(self, session):
        _walk_to_last_step(session)
        session.submit()

        with pytest.raises(SessionClosed):
            session.edit("m1.demographics.DOB", "01/01/2001")
        with pytest.raises(SessionClosed):
            session.add_member("m3", "Carol")
        with pytest.raises(SessionClosed):
            session.previous()
        with pytest.raises(SessionClosed):
            session.submit()

    def test_failed_handler_leaves_session_open(self, session):
        _walk_to_last_step(session)

        def failing_handler(payload):
            raise RuntimeError("submission endpoint unavailable")

        with pytest.raises(RuntimeError):
            session.submit(failing_handler)
        assert not session.is_submitted

    def test_to_dict(self, session):
        data = session.to_dict()
        assert data["status"] == "in_progress"
        assert data["current_step"] == "family_members"
        assert [s["id"] for s in data["steps"]] == ["family_members", "family_demographics", "review"]
        assert list(data["form"]["familyMember"]) == ["m1", "m2"]


class TestSessionStore:

    def test_create_and_get(self):
        store = SessionStore()
        session = store.create()
        assert store.get(session.session_id) is session
        assert store.count() == 1

    def test_unknown_session(self):
        with pytest.raises(SessionNotFound):
            SessionStore().get("missing")

    def test_delete(self):
        store = SessionStore()
        session = store.create()
        store.delete(session.session_id)
        assert store.count() == 0
        with pytest.raises(SessionNotFound):
            store.delete(session.session_id)

    def test_session_limit(self):
        store = SessionStore(max_sessions=2)
        first = store.create()
        store.create()

        with pytest.raises(SessionLimitReached):
            store.create()
        assert store.count() == 2

        store.delete(first.session_id)
        store.create()
        assert store.count() == 2

    def test_store_applies_member_limit(self):
        store = SessionStore(max_members=2)
        assert store.create().max_members == 2

    def test_sessions_do_not_share_forms(self):
        store = SessionStore()
        first, second = store.create(), store.create()
        first.add_member("m1", "Alice")
        assert len(second.form) == 0

    def test_concurrent_creates(self):
        store = SessionStore()
        threads = [threading.Thread(target=store.create) for _ in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert store.count() == 20

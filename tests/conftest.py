"""Pytest configuration and fixtures for test suite."""

import os
import sys
from pathlib import Path

import pytest

# Set test environment BEFORE any other imports
os.environ.setdefault("INTAKE_ENVIRONMENT", "test")

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture
def empty_form():
    from intake.form_model import IntakeForm
    return IntakeForm()


@pytest.fixture
def household():
    """Two-member household: Alice then Bob."""
    from intake.form_model import IntakeForm

    form = IntakeForm()
    form.add_member("m1", "Alice")
    form.add_member("m2", "Bob")
    return form


@pytest.fixture
def session():
    from intake.session import IntakeSession

    session = IntakeSession(session_id="test-session")
    session.add_member("m1", "Alice")
    session.add_member("m2", "Bob")
    return session

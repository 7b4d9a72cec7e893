"""
Root pytest configuration.

This conftest is loaded before test collection to ensure
src is in the Python path for all imports.
"""

import sys
from pathlib import Path

src_path = Path(__file__).parent / "src"
src_str = str(src_path.absolute())

if src_str in sys.path:
    sys.path.remove(src_str)
sys.path.insert(0, src_str)


import pytest


@pytest.fixture(autouse=True)
def _reset_session_store():
    """Reset the process-wide session store and settings cache between tests."""
    yield
    from config.settings import get_settings
    from intake.session import reset_session_store

    reset_session_store()
    get_settings.cache_clear()

"""Pytest configuration and fixtures for test suite.

This is the root-level conftest.py that provides:
- Python path setup (so the package imports without installing)
- A clean REGEX_RECORD_* environment for every test

Shared record types and patterns live in tests/helpers.py
"""
import sys
from pathlib import Path

import pytest
import structlog

# Add project root to Python path so we can import regex_record and tests.helpers
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from regex_record.config import get_settings  # noqa: E402

SETTINGS_ENV_VARS = (
    "REGEX_RECORD_LOG_LEVEL",
    "REGEX_RECORD_JSON_LOGS",
    "REGEX_RECORD_NO_MATCH",
    "REGEX_RECORD_FIELD_NAMING",
    "REGEX_RECORD_MISSING_FIELDS",
    "REGEX_RECORD_PATTERN_CACHE_SIZE",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Run every test against default settings.

    Tests that need different settings set REGEX_RECORD_* variables with
    monkeypatch and call get_settings.cache_clear().
    """
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def reset_structlog():
    """Restore structlog defaults after tests that configure logging."""
    yield
    structlog.reset_defaults()

"""Pytest configuration and shared fixtures.

This module contains pytest configuration and shared fixtures used
across all test files.
"""

import os
from unittest.mock import Mock, patch

import pytest

import validy.config
from validy.config import ValidySettings


@pytest.fixture
def settings() -> ValidySettings:
    """Create settings isolated from the environment and `.env` file."""
    return ValidySettings(_env_file=None)


@pytest.fixture
def on_failure() -> Mock:
    """Create a mock failure callback."""
    return Mock(return_value=None)


@pytest.fixture(autouse=True)
def clear_settings():
    """Reset cached settings before and after each test.

    Each test starts without cached settings and without VALIDY_* variables
    leaking in from the shell.
    """
    clean_env = {
        key: value for key, value in os.environ.items()
        if not key.upper().startswith("VALIDY_")
    }
    validy.config._settings = None
    with patch.dict(os.environ, clean_env, clear=True):
        yield
    validy.config._settings = None

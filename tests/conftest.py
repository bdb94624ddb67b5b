"""Shared fixtures for q3text tests."""

import pytest


@pytest.fixture
def printed():
    """List collecting everything handed to a print sink (pass printed.append)."""
    return []

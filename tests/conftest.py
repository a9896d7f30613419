"""
Pytest configuration and shared fixtures for nativegen tests.
"""

import logging

import pytest

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.projects import (
    core_app_project,
    make_context,
    write_project,
)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo the root logger configuration done by CLI runs."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, logging.StreamHandler) and not hasattr(
            handler, "records"
        ):
            root.removeHandler(handler)
    root.setLevel(logging.WARNING)

"""Shared fixtures for the thicket test suite."""

import pytest


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"

"""Shared fixtures for finch tests."""

import pytest


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"

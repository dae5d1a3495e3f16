"""Pytest configuration for MCP server tests."""

import pytest


# Server handlers are plain asyncio coroutines
@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"

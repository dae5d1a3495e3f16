"""Pytest configuration for the finance engine test suite."""

# The MCP server tests are coroutines; pytest-asyncio runs them
pytest_plugins = ('pytest_asyncio',)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as an async test"
    )

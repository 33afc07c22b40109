"""Pytest configuration and shared fixtures."""

import pytest

# The meraghar testing plugin is registered via a ``pytest11`` entry
# point (pyproject.toml) for external consumers.  In our own test
# suite we disable it (``-p no:meraghar``) and load explicitly here
# instead, so the import chain is measured by pytest-cov.
pytest_plugins = ["meraghar.testing._plugin"]


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (local sockets only)"
    )

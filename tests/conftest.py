"""Pytest configuration and shared fixtures."""

import logfire
import pytest


@pytest.fixture(scope="session", autouse=True)
def configure_test_logfire():
    """Keep spans local during tests."""
    logfire.configure(send_to_logfire=False, console=False)

"""
Pytest configuration and shared fixtures.

This file contains pytest configuration and fixtures that are available
to all test modules in the project.
"""

import io
import logging
import os

import pytest

# Import all fixtures from the fixtures module
from tests.fixtures import *


def pytest_configure(config):
    """Configure pytest settings."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test component interactions"
    )
    config.addinivalue_line(
        "markers", "graph: Role graph and inheritance tests"
    )
    config.addinivalue_line(
        "markers", "resolver: Privilege resolution tests"
    )
    config.addinivalue_line(
        "markers", "config: Configuration-related tests"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location and content."""
    for item in items:
        if "unit" in str(item.path):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.path):
            item.add_marker(pytest.mark.integration)

        if "belongs" in item.name or "role" in item.name or "parent" in item.name:
            item.add_marker(pytest.mark.graph)

        if "allowed" in item.name or "resolve" in item.name:
            item.add_marker(pytest.mark.resolver)

        if "config" in item.name:
            item.add_marker(pytest.mark.config)


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Set up the test environment before any tests run."""
    os.environ["ENVIRONMENT"] = "test"

    yield

    os.environ.pop("ENVIRONMENT", None)


@pytest.fixture(autouse=True)
def isolate_tests():
    """Reset the cached configuration between tests."""
    import roleacl.config

    roleacl.config._acl_config = None

    yield

    roleacl.config._acl_config = None


@pytest.fixture
def capture_logs():
    """Capture roleacl log output during tests."""
    log_buffer = io.StringIO()

    handler = logging.StreamHandler(log_buffer)
    handler.setLevel(logging.DEBUG)

    acl_logger = logging.getLogger("roleacl")
    acl_logger.addHandler(handler)
    original_level = acl_logger.level
    acl_logger.setLevel(logging.DEBUG)

    yield log_buffer

    acl_logger.removeHandler(handler)
    acl_logger.setLevel(original_level)

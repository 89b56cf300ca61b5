"""
Pytest configuration and fixtures for rulechain tests

This module provides shared fixtures for unit and integration tests.
"""
from pathlib import Path

import pytest
import yaml

from rulechain.core.rules import ConstraintRegistry


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that exercise the command-line front-end end to end"
    )


# =======================
# REGISTRY FIXTURES
# =======================

@pytest.fixture(scope="function")
def registry() -> ConstraintRegistry:
    """
    Fresh registry per test, so custom registrations never leak

    Returns:
        ConstraintRegistry holding the built-in catalogue
    """
    return ConstraintRegistry()


# =======================
# TEST DATA FIXTURES
# =======================

@pytest.fixture
def signup_record() -> dict:
    """A valid signup record"""
    return {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "age": "36",
        "password": "s3cret!",
        "password_confirmation": "s3cret!",
        "terms": "yes",
    }


@pytest.fixture
def signup_rules() -> dict:
    """Rules matching signup_record"""
    return {
        "name": "required|string|max:50",
        "email": "required|email",
        "age": "required|integer|between:18,120",
        "password": "required|min:6|confirmed",
        "terms": "accepted",
    }


@pytest.fixture
def users_record() -> dict:
    """Nested record with a list of users, the second one invalid"""
    return {
        "users": [
            {"name": "ann", "email": "ann@example.com"},
            {"name": "bob", "email": "not-an-email"},
        ]
    }


@pytest.fixture
def rules_file(tmp_path):
    """
    Factory writing a rules YAML file into a temp directory

    Usage:
        path = rules_file({"rules": {"email": "required|email"}})
    """
    def write(config: dict, name: str = "rules.yaml") -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(config, sort_keys=False))
        return path

    return write

"""Shared fixtures for tagcheck tests."""

import pytest

from tagcheck import Validator

ALLOWED_VALUES = ["allowed1", "allowed2"]


@pytest.fixture
def validator():
    """Fresh validator for each test."""
    return Validator()


@pytest.fixture
def collection_validator():
    """Validator with the my-value / my-values collection rules registered."""
    v = Validator()
    v.register_collection_validator("my-value", "my-values", ALLOWED_VALUES)
    return v

"""Shared fixtures for unit and integration tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from teacherpay.core.logging import reset_logging
from teacherpay.models.batch import PayPeriod

FIXED_NOW = datetime(2025, 1, 15, 9, 30, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _restore_logging():
    """Entry points install a non-propagating handler; undo it so caplog works."""
    yield
    reset_logging()


@pytest.fixture
def period() -> PayPeriod:
    return PayPeriod(month="January", year="2025")


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW

"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from recall.core import ReviewScheduler, ReviewState
from recall.core.review_state import DAY

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def t0():
    """A fixed, timezone-aware reference instant."""
    return T0


@pytest.fixture
def scheduler():
    """Scheduler whose clock is frozen at T0."""
    return ReviewScheduler(clock=lambda: T0)


@pytest.fixture
def make_state():
    """
    Build a ReviewState due at next_review.

    last_reviewed is derived as next_review - interval days, matching
    what the scheduler itself produces.
    """

    def _make(next_review=T0, interval=1, ease_factor=2.5, repetitions=1):
        return ReviewState(
            ease_factor=ease_factor,
            interval=interval,
            repetitions=repetitions,
            next_review=next_review,
            last_reviewed=next_review - interval * DAY,
        )

    return _make


@pytest.fixture
def sample_record():
    """A stored review_data record as the notes table keeps it."""
    return {
        "easeFactor": 2.6,
        "interval": 6,
        "repetitions": 2,
        "nextReview": "2024-03-08T09:00:00.000Z",
        "lastReviewed": "2024-03-02T09:00:00.000Z",
    }

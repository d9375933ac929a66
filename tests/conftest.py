"""Global test configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
import structlog

from stepseries.logging import configure_logging
from stepseries.series import TimeSeries, new_time_series


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    """Keep library debug events off stdout while tests run."""
    configure_logging(level="warning")
    yield
    structlog.reset_defaults()


@pytest.fixture
def t0() -> datetime:
    return datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def step() -> timedelta:
    return timedelta(minutes=15)


@pytest.fixture
def seeded(t0, step) -> TimeSeries:
    """Five explicit samples starting at ``t0``."""
    return new_time_series("cpu", t0, None, step, 1.0, 2.0, 3.0, 4.0, 5.0)


@pytest.fixture
def empty(t0, step) -> TimeSeries:
    return new_time_series("empty", t0, t0, step)

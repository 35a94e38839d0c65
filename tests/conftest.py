"""Root test fixtures shared across all test types.

HTTP client fixtures are in tests/integration/conftest.py.
"""

import os

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("SEED_DEMO_DATA", "false")

# ruff: noqa: E402 - Imports must be after env var setup
from datetime import UTC, datetime, timedelta

import pytest

from src.director.core.config import Settings, get_settings
from src.director.repositories import AutomationStore
from src.director.services.automation_service import AutomationService
from src.director.services.run_engine import RunEngine

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()

T0 = datetime(2025, 1, 31, 9, 0, tzinfo=UTC)


class FakeClock:
    """Deterministic clock; advances only when told to."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> datetime:
        self.now += delta
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(custom_cadence_days=7, run_timeout_seconds=5)


@pytest.fixture
def store() -> AutomationStore:
    """Fresh isolated store per test."""
    return AutomationStore()


@pytest.fixture
def service(store: AutomationStore, clock: FakeClock, settings: Settings) -> AutomationService:
    return AutomationService(store, clock=clock, settings=settings)


@pytest.fixture
def engine(store: AutomationStore, clock: FakeClock, settings: Settings) -> RunEngine:
    return RunEngine(store, clock=clock, settings=settings)

"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from hunch.config import Settings
from hunch.models import MemoryRecord, MemoryType, Observation
from hunch.service import HunchService
from hunch.storage import InMemoryLogRepository, MemoryStore

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation time so day arithmetic is exact."""
    return NOW


@pytest.fixture
def make_record():
    """Factory for memory records with sensible defaults."""

    def _make(**overrides) -> MemoryRecord:
        values = {
            "memory_type": MemoryType.WHAT_WORKED,
            "symptom": "Headache",
            "resolution": "Magnesium",
            "last_occurrence": NOW,
            "created_at": NOW,
            "last_updated": NOW,
        }
        values.update(overrides)
        return MemoryRecord(**values)

    return _make


@pytest.fixture
def make_observation():
    """Factory for observations with sensible defaults."""

    def _make(**overrides) -> Observation:
        values = {
            "memory_type": MemoryType.TRIGGER,
            "symptom": "Headache",
            "trigger": "Red wine",
            "timestamp": NOW,
        }
        values.update(overrides)
        return Observation(**values)

    return _make


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def log_repository() -> InMemoryLogRepository:
    return InMemoryLogRepository()


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the developer's environment."""
    return Settings(env="test", log_format="text", _env_file=None)


@pytest.fixture
def service(test_settings, log_repository) -> HunchService:
    return HunchService.create(test_settings, log_repository)

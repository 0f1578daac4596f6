"""Shared fixtures for plantcare_lite tests."""

from collections.abc import Generator
from datetime import datetime
from typing import Any, Callable

import pytest

from plantcare_lite.care_models import CareTaskRule, PlantMeta
from plantcare_lite.occurrence_expander import clear_expansion_cache

# Monday 2024-01-01 .. Sunday 2024-01-07
WEEK_START = datetime(2024, 1, 1)
WEEK_END = datetime(2024, 1, 7, 23, 59, 59, 999999)


@pytest.fixture
def week_range() -> tuple[datetime, datetime]:
    """Inclusive bounds of the week of Monday 2024-01-01."""
    return WEEK_START, WEEK_END


@pytest.fixture
def plants() -> list[PlantMeta]:
    return [
        PlantMeta(id="p1", name="Monstera"),
        PlantMeta(id="p2", name="Fern", primary_photo_url="https://example.com/fern.png"),
    ]


@pytest.fixture
def make_rule() -> Callable[..., CareTaskRule]:
    """Factory for CareTaskRule with sensible defaults.

    Defaults: task t1 on plant p1, weekly watering at 09:00 anchored on
    Monday 2024-01-01, not paused. Keyword arguments override fields.
    """

    def _make(**overrides: Any) -> CareTaskRule:
        fields: dict[str, Any] = {
            "id": "t1",
            "plant_id": "p1",
            "name": "Watering",
            "frequency": "Weekly",
            "time_of_day": "09:00",
            "anchor_due_date": "2024-01-01T00:00:00",
            "is_paused": False,
            "resume_date": None,
        }
        fields.update(overrides)
        return CareTaskRule(**fields)

    return _make


@pytest.fixture(autouse=True)
def reset_expansion_cache() -> Generator[None, Any, None]:
    """Keep memoized expansions from leaking between tests."""
    clear_expansion_cache()
    yield
    clear_expansion_cache()


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: Any) -> Generator[None, Any, None]:
    """Clear PLANTCARE_* variables that tests may set."""
    for name in (
        "PLANTCARE_TEST_TIME",
        "PLANTCARE_DEBUG",
        "PLANTCARE_LOG_LEVEL",
        "PLANTCARE_WEEK_STARTS_ON",
        "PLANTCARE_DEFAULT_VIEW",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


def pytest_configure(config: Any) -> None:
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "critical_path: Core functionality tests")
    config.addinivalue_line("markers", "smoke: Basic smoke tests")

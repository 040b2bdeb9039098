"""
Pytest configuration and fixtures for recurrence engine tests.

Provides template event factories and settings isolation.
"""

from datetime import date, time
from typing import Callable, Generator

import pytest

from recurrence_engine.config import get_settings
from recurrence_engine.models.events import TemplateEvent


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch) -> Generator[None, None, None]:
    """
    Isolate tests from the developer's environment and .env file.

    Clears the cached settings before and after each test.
    """
    for name in ("RECURRENCE_FIRST_DAY_OF_WEEK", "RECURRENCE_LOG_LEVEL",
                 "RECURRENCE_DEFAULT_END_AFTER_OCCURRENCES"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_template() -> Callable[..., TemplateEvent]:
    """
    Factory for template events.

    Defaults to a one-hour meeting on Monday 2024-05-06 at 10:00.

    Returns:
        Callable accepting TemplateEvent field overrides
    """
    def _make(**overrides) -> TemplateEvent:
        fields = {
            "title": "Team sync",
            "start_date": date(2024, 5, 6),
            "end_date": date(2024, 5, 6),
            "start_time": time(10, 0),
            "end_time": time(11, 0),
            "category_id": "work",
            "location": "Room 4",
            "description": "Weekly planning",
        }
        fields.update(overrides)
        return TemplateEvent(**fields)

    return _make


@pytest.fixture
def all_day_template(make_template) -> TemplateEvent:
    """All-day template on Wednesday 2024-01-31."""
    return make_template(
        title="Pay rent",
        start_date=date(2024, 1, 31),
        end_date=date(2024, 1, 31),
        is_all_day=True,
        category_id="home",
    )

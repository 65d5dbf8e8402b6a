"""Shared test fixtures and data loading for opening-times.

All test data lives in data/fixtures/ as JSON files.  This module loads
that data and exposes helper functions + pytest fixtures for the tests.

Reference week: Mon 2019-12-02 through Sun 2019-12-08.
"""

from __future__ import annotations

import json
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
FIXTURES_DIR = Path(__file__).resolve().parent.parent / "data" / "fixtures"
SCENARIOS_DIR = FIXTURES_DIR / "scenarios"


# ---------------------------------------------------------------------------
# Data loaders
# ---------------------------------------------------------------------------
def _load_json(path: Path):
    with open(path) as f:
        return json.load(f)


_reference = _load_json(FIXTURES_DIR / "reference.json")
_rulesets = _load_json(FIXTURES_DIR / "rulesets.json")

# Day lookup:  DAYS["wed"] -> date(2019, 12, 4)
DAYS: dict[str, date] = {
    d["name"]: date.fromisoformat(d["date"]) for d in _reference["days"]
}


# ---------------------------------------------------------------------------
# Convenience helpers (importable by test modules)
# ---------------------------------------------------------------------------
def utc(day: str, clock: str) -> datetime:
    """UTC instant from a reference day name and 'HH:MM'.

    >>> utc("wed", "19:00")
    datetime(2019, 12, 4, 19, 0, tzinfo=timezone.utc)
    """
    d = DAYS[day]
    hour, minute = (int(p) for p in clock.split(":"))
    return datetime(d.year, d.month, d.day, hour, minute, tzinfo=timezone.utc)


def parse_instant(value: str | None) -> datetime | None:
    """Aware datetime from an ISO string in a scenario file; null stays None."""
    if value is None:
        return None
    return datetime.fromisoformat(value)


def as_utc(value: datetime | None) -> datetime | None:
    """Comparable UTC form of an aware datetime; None stays None.

    Aware datetimes in a DST fold never compare equal across zones.
    """
    return None if value is None else value.astimezone(timezone.utc)


def ruleset(name: str) -> list[dict]:
    """Raw rule dicts from rulesets.json by name (a fresh copy each call)."""
    return json.loads(json.dumps(_rulesets[name]))


def make_hours(name: str, tz: str | None = "UTC", **kwargs):
    """Build an OpeningHours from rulesets.json by name."""
    from opening_times.calendar import OpeningHours

    return OpeningHours(ruleset(name), tz, **kwargs)


# ---------------------------------------------------------------------------
# Scenario loader
# ---------------------------------------------------------------------------
def load_scenarios(name: str):
    """Load a scenario file from data/fixtures/scenarios/{name}.json."""
    return _load_json(SCENARIOS_DIR / f"{name}.json")


# ---------------------------------------------------------------------------
# pytest fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def daily_hours():
    """Every day 08:00-18:00, rules in UTC."""
    return make_hours("daily")


@pytest.fixture
def friday_closed_hours():
    """Every day 08:00-18:00 except Fridays, rules in UTC."""
    return make_hours("friday_closed")


@pytest.fixture
def basic_hours():
    """Weekdays 08:00-18:00, Saturday 08:00-16:00, Sunday 10:00-12:00 (UTC)."""
    return make_hours("basic")

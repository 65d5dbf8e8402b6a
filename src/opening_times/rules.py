"""Rule model, specificity ranking and day applicability.

A rule set is an ordered collection of Rule objects. Input order is not the
evaluation order: rank_by_specificity() produces a fresh ordering per query,
and the first rule that applies to a day governs that whole day. Rules are
never merged. A narrower rule replaces a broader one outright, so
"Tuesdays in January 10:00-18:00" on top of "every day 08:00-18:00" means
10:00-18:00 on those Tuesdays and nothing about the other January days.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime

from opening_times.resolution import parse_clock

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

CLOSED_ALL_DAY = ("00:00", "00:00")
OPEN_ALL_DAY = ("00:00", "23:59")

_SCHEMA_PREFIXES = ("https://schema.org/", "http://schema.org/", "schema:")


def parse_weekday(value: str | int) -> int:
    """Weekday name, schema.org weekday URL or 0-6 int -> date.weekday() int."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid weekday: {value!r}")
    if isinstance(value, int):
        if 0 <= value <= 6:
            return value
        raise ValueError(f"Invalid weekday: {value} (must be 0-6)")
    if not isinstance(value, str):
        raise ValueError(f"Invalid weekday: {value!r}")
    name = value.strip()
    for prefix in _SCHEMA_PREFIXES:
        if name.startswith(prefix):
            name = name[len(prefix):]
            break
    try:
        return WEEKDAY_NAMES.index(name.lower())
    except ValueError:
        raise ValueError(f"Invalid weekday: {value!r}") from None


def _parse_weekdays(value) -> frozenset[int] | None:
    if value is None:
        return None
    if isinstance(value, (str, int)):
        value = [value]
    days = frozenset(parse_weekday(v) for v in value)
    # An empty collection scopes nothing, same as leaving it out.
    return days or None


def _parse_date(value) -> date | None:
    """ISO date string or date -> date. Accepts unpadded '2019-11-5'."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid date: {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    parts = value.split("-")
    if len(parts) != 3:
        raise ValueError(f"Invalid date: {value!r}")
    try:
        return date(int(parts[0]), int(parts[1]), int(parts[2]))
    except ValueError as exc:
        raise ValueError(f"Invalid date: {value!r} - {exc}") from exc


@dataclass(frozen=True)
class Rule:
    """One opening window, optionally scoped by weekday and date range.

    opens/closes are 24-hour 'HH:MM' strings, checked on construction so
    one malformed rule fails the whole rule set.

    The scoping fields are coerced in __post_init__: day_of_week accepts a
    weekday name, schema.org weekday URL, 0-6 int or a collection of those
    and is stored as a frozenset of date.weekday() ints. valid_from and
    valid_through accept ISO date strings, dates or datetimes and are stored
    as dates.
    """

    opens: str
    closes: str
    day_of_week: frozenset[int] | None = None
    valid_from: date | None = None
    valid_through: date | None = None

    def __post_init__(self) -> None:
        parse_clock(self.opens)
        parse_clock(self.closes)
        object.__setattr__(self, "day_of_week", _parse_weekdays(self.day_of_week))
        object.__setattr__(self, "valid_from", _parse_date(self.valid_from))
        object.__setattr__(self, "valid_through", _parse_date(self.valid_through))

    @classmethod
    def from_dict(cls, data: Mapping) -> Rule:
        """Build a Rule from OpeningHoursSpecification-style keys.

        {"dayOfWeek": [...], "opens": "08:00", "closes": "18:00",
         "validFrom": "2019-12-01", "validThrough": "2019-12-24"}
        """
        for key in ("opens", "closes"):
            if key not in data:
                raise ValueError(f"Rule is missing {key!r}: {dict(data)!r}")
        return cls(
            opens=data["opens"],
            closes=data["closes"],
            day_of_week=data.get("dayOfWeek"),
            valid_from=data.get("validFrom"),
            valid_through=data.get("validThrough"),
        )

    @property
    def is_closed_all_day(self) -> bool:
        return (self.opens, self.closes) == CLOSED_ALL_DAY

    @property
    def is_open_all_day(self) -> bool:
        return (self.opens, self.closes) == OPEN_ALL_DAY


def specificity(rule: Rule) -> tuple[int, int]:
    """Sort key: (number of date bounds set, 1 if weekday-scoped else 0)."""
    bounds = (rule.valid_from is not None) + (rule.valid_through is not None)
    return (bounds, 1 if rule.day_of_week else 0)


def rank_by_specificity(rules: Iterable[Rule]) -> list[Rule]:
    """Return a new list, most specific first. Ties keep input order."""
    return sorted(rules, key=lambda r: tuple(-k for k in specificity(r)))


def applies_to_day(rule: Rule, day: date) -> bool:
    """Whether `rule` governs the calendar date `day`.

    `day` must already be expressed in the rules timezone; bounds are
    inclusive calendar-date comparisons.
    """
    if rule.day_of_week and day.weekday() not in rule.day_of_week:
        return False
    if rule.valid_from is not None and day < rule.valid_from:
        return False
    if rule.valid_through is not None and day > rule.valid_through:
        return False
    return True


def governing_rule(ranked: Sequence[Rule], day: date) -> Rule | None:
    """First rule in `ranked` that applies to `day`, or None."""
    for rule in ranked:
        if applies_to_day(rule, day):
            return rule
    return None

"""OpeningHours: current open/closed state and the next state change.

Answers queries by a lazy day-by-day walk, one governing rule per day.
All instants are compared in UTC; results are handed back in the rules
timezone.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import date, datetime, timedelta, tzinfo

from opening_times.resolution import (
    UTC,
    calendar_day,
    end_of_day,
    get_zone,
    resolve,
    start_of_day,
    to_instant,
)
from opening_times.rules import Rule, governing_rule, rank_by_specificity
from opening_times.types import OpeningState, Query

logger = logging.getLogger(__name__)

OPEN = "open"
CLOSE = "close"

# One year and a day covers every weekday of every date-bounded rule once.
DEFAULT_LOOKAHEAD_DAYS = 366


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _as_rule(rule: Rule | Mapping) -> Rule:
    return rule if isinstance(rule, Rule) else Rule.from_dict(rule)


class OpeningHours:
    """A rule set bound to the timezone its 'HH:MM' strings are written in.

    Holds no derived state: the specificity ranking is rebuilt on every
    query, and the rules themselves are immutable.
    """

    def __init__(
        self,
        rules: Iterable[Rule | Mapping],
        timezone: str | tzinfo | None = None,
        *,
        max_days: int = DEFAULT_LOOKAHEAD_DAYS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if max_days < 1:
            raise ValueError(f"max_days must be at least 1, got {max_days}")
        self.rules: tuple[Rule, ...] = tuple(_as_rule(r) for r in rules)
        self.zone = get_zone(timezone)
        self.max_days = max_days
        self._clock = clock or _utc_now

    def __repr__(self) -> str:
        return (
            f"OpeningHours({len(self.rules)} rules, zone={self.zone!r}, "
            f"max_days={self.max_days})"
        )

    # ------------------------------------------------------------------
    # Per-day resolution
    # ------------------------------------------------------------------

    def _instant(self, at: datetime | str | None) -> datetime:
        return to_instant(self._clock() if at is None else at, self.zone)

    def _window(self, rule: Rule | None, d: date) -> tuple[datetime, datetime] | None:
        """UTC (opens, closes) for `rule` on `d`; None if closed all day.

        The open-all-day sentinel spans midnight to the next midnight.
        """
        if rule is None or rule.is_closed_all_day:
            return None
        if rule.is_open_all_day:
            return (start_of_day(d, self.zone), end_of_day(d, self.zone))
        return (resolve(rule.opens, d, self.zone), resolve(rule.closes, d, self.zone))

    def governing_rule(self, d: date) -> Rule | None:
        """The rule that governs calendar date `d`, or None."""
        return governing_rule(rank_by_specificity(self.rules), d)

    def window_for_date(self, d: date) -> tuple[datetime, datetime] | None:
        """Opening window on `d` in the rules timezone, or None if closed."""
        window = self._window(self.governing_rule(d), d)
        if window is None:
            return None
        opens, closes = window
        return (opens.astimezone(self.zone), closes.astimezone(self.zone))

    # ------------------------------------------------------------------
    # Current state
    # ------------------------------------------------------------------

    def state_at(self, at: datetime | str | None = None) -> OpeningState:
        """Open/closed at `at` (default: now) and when that next changes."""
        now = self._instant(at)
        if not self.rules:
            return OpeningState(is_open=False)

        ranked = rank_by_specificity(self.rules)
        today = calendar_day(now, self.zone)
        rule = governing_rule(ranked, today)
        logger.debug("governing rule for %s: %r", today, rule)

        if rule is None or rule.is_closed_all_day:
            is_open = False
        elif rule.is_open_all_day:
            is_open = True
        else:
            opens, closes = self._window(rule, today)
            is_open = opens < now < closes

        change = self._search(ranked, now, CLOSE if is_open else OPEN)
        if change is not None:
            change = change.astimezone(self.zone)
        if is_open:
            return OpeningState(is_open=True, closes_at=change)
        return OpeningState(is_open=False, opens_at=change)

    def is_open(self, at: datetime | str | None = None) -> bool:
        return self.state_at(at).is_open

    # ------------------------------------------------------------------
    # Next-transition search
    # ------------------------------------------------------------------

    def next_change(
        self, looking_for: str, start: datetime | str | None = None
    ) -> datetime | None:
        """Next opening or closing instant at or after `start`.

        Returns None when nothing is found within max_days calendar days.
        """
        if looking_for not in (OPEN, CLOSE):
            raise ValueError(
                f"looking_for must be {OPEN!r} or {CLOSE!r}, got {looking_for!r}"
            )
        found = self._search(
            rank_by_specificity(self.rules), self._instant(start), looking_for
        )
        return None if found is None else found.astimezone(self.zone)

    def _search(
        self, ranked: Sequence[Rule], start: datetime, looking_for: str
    ) -> datetime | None:
        """Walk forward one calendar day at a time. UTC in, UTC out."""
        first_day = calendar_day(start, self.zone)
        # Set while an open-all-day run is still open at the end of a day.
        open_past_midnight = False

        for offset in range(self.max_days):
            d = first_day + timedelta(days=offset)
            rule = governing_rule(ranked, d)
            window = self._window(rule, d)

            if looking_for == OPEN:
                if window is None:
                    continue
                opens = window[0]
                if offset == 0 and opens < start:
                    continue
                logger.debug("opens at %s (rule %r)", opens, rule)
                return opens

            midnight = start_of_day(d, self.zone)
            if window is None:
                if open_past_midnight:
                    return midnight
                continue
            opens, closes = window
            if open_past_midnight and opens > midnight:
                return midnight
            if rule.is_open_all_day:
                open_past_midnight = True
                continue
            open_past_midnight = False
            if offset == 0 and closes <= start:
                continue
            logger.debug("closes at %s (rule %r)", closes, rule)
            return closes

        logger.debug(
            "no %s transition within %d days of %s", looking_for, self.max_days, start
        )
        return None


def evaluate(
    rules: Iterable[Rule | Mapping],
    query: Query | None = None,
    *,
    max_days: int = DEFAULT_LOOKAHEAD_DAYS,
    clock: Callable[[], datetime] | None = None,
) -> OpeningState:
    """Evaluate `rules` for `query` (default: now, local timezone)."""
    query = query or Query()
    hours = OpeningHours(rules, query.timezone, max_days=max_days, clock=clock)
    return hours.state_at(query.at)


def get_current_state(
    rules: Iterable[Rule | Mapping],
    at: datetime | str | None = None,
    timezone: str | tzinfo | None = None,
    *,
    max_days: int = DEFAULT_LOOKAHEAD_DAYS,
    clock: Callable[[], datetime] | None = None,
) -> OpeningState:
    """Shorthand for evaluate() with the query fields as arguments."""
    return evaluate(
        rules, Query(at=at, timezone=timezone), max_days=max_days, clock=clock
    )


def next_state_change(
    rules: Iterable[Rule | Mapping],
    start: datetime | str,
    looking_for: str,
    timezone: str | tzinfo | None = None,
    *,
    max_days: int = DEFAULT_LOOKAHEAD_DAYS,
) -> datetime | None:
    """Next opening/closing instant at or after `start`, or None."""
    hours = OpeningHours(rules, timezone, max_days=max_days)
    return hours.next_change(looking_for, start)

"""Shared types: OpeningState, Query and the engine's errors."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo


@dataclass(frozen=True)
class OpeningState:
    """Result of evaluating a rule set at one instant.

    Invariants:
        - closes_at is only set when is_open
        - opens_at is only set when not is_open
        - A missing transition means none was found within the lookahead
    """

    is_open: bool
    closes_at: datetime | None = None
    opens_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.is_open and self.opens_at is not None:
            raise ValueError("an open state cannot carry opens_at")
        if not self.is_open and self.closes_at is not None:
            raise ValueError("a closed state cannot carry closes_at")

    @property
    def next_change(self) -> datetime | None:
        """The instant at which is_open flips, if known."""
        return self.closes_at if self.is_open else self.opens_at

    def as_dict(self) -> dict:
        """camelCase mapping with ISO instants; unknown transitions omitted."""
        result: dict = {"isOpen": self.is_open}
        if self.closes_at is not None:
            result["closesAt"] = self.closes_at.isoformat()
        if self.opens_at is not None:
            result["opensAt"] = self.opens_at.isoformat()
        return result


@dataclass(frozen=True)
class Query:
    """The instant to evaluate and the timezone the rules are written in.

    at=None means "now" according to the evaluator's clock.
    timezone=None means the local system zone.
    """

    at: datetime | str | None = None
    timezone: str | tzinfo | None = None


class InvalidClockTimeError(ValueError):
    """Raised when an opens/closes value is not a 24-hour 'HH:MM' string."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(
            f"Invalid clock time {value!r}: expected a 24-hour 'HH:MM' string"
        )


class UnknownTimezoneError(ValueError):
    """Raised when a timezone name cannot be loaded from the tz database."""

    def __init__(self, name: object, reason: str = "not found") -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Unknown timezone {name!r} ({reason})")

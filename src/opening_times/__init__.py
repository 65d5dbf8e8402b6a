"""opening-times: is a place open now, and when does that change?"""

from opening_times.calendar import (
    CLOSE,
    DEFAULT_LOOKAHEAD_DAYS,
    OPEN,
    OpeningHours,
    evaluate,
    get_current_state,
    next_state_change,
)
from opening_times.resolution import resolve_clock_time
from opening_times.rules import (
    Rule,
    applies_to_day,
    governing_rule,
    rank_by_specificity,
)
from opening_times.types import (
    InvalidClockTimeError,
    OpeningState,
    Query,
    UnknownTimezoneError,
)

__all__ = [
    "CLOSE",
    "DEFAULT_LOOKAHEAD_DAYS",
    "InvalidClockTimeError",
    "OPEN",
    "OpeningHours",
    "OpeningState",
    "Query",
    "Rule",
    "UnknownTimezoneError",
    "applies_to_day",
    "evaluate",
    "get_current_state",
    "governing_rule",
    "next_state_change",
    "rank_by_specificity",
    "resolve_clock_time",
]

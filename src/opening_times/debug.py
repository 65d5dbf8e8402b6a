"""ASCII visualisation for development-time verification.

This module is dev-only and not imported by production code.
"""

from __future__ import annotations

from datetime import date, timedelta


def show_week(
    hours: "OpeningHours",  # noqa: F821
    start: date,
    end: date,
) -> str:
    """Print ASCII view of opening windows for a date range.

    Each row is one day in the rules timezone. Open time is shown as '#'.
    Returns the string and also prints to stdout.

    Args:
        hours: OpeningHours instance
        start: First date to show (inclusive)
        end: Last date to show (exclusive)
    """
    lines: list[str] = []
    day_names = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

    # 24-hour timeline, each char = 30 minutes (48 chars per day)
    chars_per_day = 48
    minutes_per_char = 30

    header_hours = "".join(f"{h:02d}" if h % 3 == 0 else "  " for h in range(24))
    lines.append(f"{'':>16s}  {header_hours}")

    current = start
    while current < end:
        day_name = day_names[current.weekday()]
        label = f"{day_name} {current.strftime('%d %b')}"

        row = list("." * chars_per_day)
        window = hours.window_for_date(current)
        if window is not None:
            opens, closes = window
            start_min = opens.hour * 60 + opens.minute
            if closes.date() > current:
                end_min = 24 * 60
            else:
                end_min = closes.hour * 60 + closes.minute

            start_char = start_min // minutes_per_char
            end_char = -(-end_min // minutes_per_char)
            for i in range(start_char, min(end_char, chars_per_day)):
                row[i] = "#"

        lines.append(f"{label:>16s}  {''.join(row)}")
        current += timedelta(days=1)

    result = "\n".join(lines)
    print(result)
    return result

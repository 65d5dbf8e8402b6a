#!/usr/bin/env python
"""Visual verification report for opening-times.

Run:  uv run python scripts/verify.py

Produces a formatted report showing:
  1. Reference week (day names and dates)
  2. Rule sets (rules as tables, specificity order, ASCII week)
  3. Current-state scenarios  -- input/output tables with PASS/FAIL
  4. Next-change scenarios  -- input/output tables with PASS/FAIL
"""

from __future__ import annotations

import json
import sys
from datetime import date, datetime, timezone
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths and data loading
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
FIXTURES = ROOT / "data" / "fixtures"
SCENARIOS = FIXTURES / "scenarios"

sys.path.insert(0, str(ROOT / "src"))

from opening_times.calendar import OpeningHours
from opening_times.debug import show_week
from opening_times.rules import Rule, rank_by_specificity, specificity


def _load(path: Path):
    with open(path) as f:
        return json.load(f)


_ref = _load(FIXTURES / "reference.json")
_rulesets = _load(FIXTURES / "rulesets.json")

DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
WEEK_START = date.fromisoformat(_ref["days"][0]["date"])
WEEK_END = date.fromisoformat(_ref["days"][-1]["date"])

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------
WIDTH = 90


def banner(title: str):
    print()
    print("=" * WIDTH)
    print(f"  {title}")
    print("=" * WIDTH)


def heading(title: str):
    print()
    print(f"  {title}")
    print(f"  {'-' * (len(title) + 2)}")


def table(headers: list[str], rows: list[list[str]], indent: int = 4):
    """Print a formatted table with auto-sized columns."""
    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            col_widths[i] = max(col_widths[i], len(cell))

    pad = " " * indent
    fmt = pad + "  ".join(f"{{:<{w}}}" for w in col_widths)
    sep = pad + "  ".join("-" * w for w in col_widths)

    print(fmt.format(*headers))
    print(sep)
    for row in rows:
        print(fmt.format(*row))


def _fmt_instant(value: datetime | str | None) -> str:
    """Format an instant as 'Wed 04 Dec 19:00 +0000'; None as '-'."""
    if value is None:
        return "-"
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return f"{DAY_NAMES[value.weekday()]} {value.strftime('%d %b %H:%M %z')}".strip()


def _same(actual: datetime | None, expected: str | None) -> bool:
    if actual is None or expected is None:
        return actual is None and expected is None
    return actual.astimezone(timezone.utc) == datetime.fromisoformat(expected)


def _fmt_days(rule: Rule) -> str:
    if not rule.day_of_week:
        return "every day"
    return ",".join(DAY_NAMES[d] for d in sorted(rule.day_of_week))


# ---------------------------------------------------------------------------
# Section 1: Reference week
# ---------------------------------------------------------------------------
def section_reference():
    banner("REFERENCE WEEK")
    rows = []
    for d in _ref["days"]:
        rows.append([d["name"], d["date"], DAY_NAMES[d["weekday"]]])
    table(["Name", "Date", "Day"], rows)


# ---------------------------------------------------------------------------
# Section 2: Rule sets
# ---------------------------------------------------------------------------
def section_rulesets():
    banner("RULE SETS")
    for name, raw in _rulesets.items():
        heading(f"{name}  (specificity order)")
        ranked = rank_by_specificity(Rule.from_dict(r) for r in raw)
        if not ranked:
            print("    (no rules)")
            continue
        rows = [
            [
                str(i),
                _fmt_days(rule),
                f"{rule.opens}-{rule.closes}",
                str(rule.valid_from or ""),
                str(rule.valid_through or ""),
                str(specificity(rule)),
            ]
            for i, rule in enumerate(ranked)
        ]
        table(["#", "Days", "Window", "From", "Through", "Rank key"], rows)
        print()
        show_week(OpeningHours(raw, "UTC"), WEEK_START, WEEK_END)


# ---------------------------------------------------------------------------
# Section 3 and 4: Scenarios
# ---------------------------------------------------------------------------
def section_current_state() -> int:
    banner("CURRENT STATE")
    failures = 0
    rows = []
    for spec in _load(SCENARIOS / "current_state.json"):
        hours = OpeningHours(_rulesets[spec["rules"]], spec["timezone"])
        state = hours.state_at(spec["at"])
        ok = state.is_open is spec["is_open"] and _same(
            state.next_change, spec["next_change"]
        )
        failures += not ok
        rows.append([
            spec["id"],
            _fmt_instant(spec["at"]),
            "open" if state.is_open else "closed",
            _fmt_instant(state.next_change),
            "PASS" if ok else "FAIL",
        ])
    table(["Scenario", "At", "State", "Next change", "Result"], rows)
    return failures


def section_next_change() -> int:
    banner("NEXT CHANGE")
    failures = 0
    rows = []
    for spec in _load(SCENARIOS / "next_change.json"):
        hours = OpeningHours(
            _rulesets[spec["rules"]],
            spec["timezone"],
            max_days=spec.get("max_days", 366),
        )
        found = hours.next_change(spec["looking_for"], spec["start"])
        ok = _same(found, spec["expected"])
        failures += not ok
        rows.append([
            spec["id"],
            spec["looking_for"],
            _fmt_instant(spec["start"]),
            _fmt_instant(found),
            "PASS" if ok else "FAIL",
        ])
    table(["Scenario", "Looking for", "Start", "Found", "Result"], rows)
    return failures


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main() -> int:
    banner("OPENING-TIMES   --  VISUAL VERIFICATION REPORT")
    print(f"    Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    print(f"    Fixture data: {FIXTURES.relative_to(ROOT)}/")

    section_reference()
    section_rulesets()
    failures = section_current_state() + section_next_change()

    banner(f"END OF REPORT  --  {failures} failure(s)")
    print()
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())

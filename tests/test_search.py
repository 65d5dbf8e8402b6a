"""Tests for the next-transition search: OpeningHours.next_change and
next_state_change.

Test data loaded from: data/fixtures/scenarios/next_change.json
"""

from __future__ import annotations

import pytest

from conftest import as_utc, load_scenarios, make_hours, parse_instant, ruleset, utc

_scenarios = load_scenarios("next_change")


class TestNextChange:
    """Forward day-by-day walk for the next opening or closing."""

    @pytest.mark.parametrize("spec", _scenarios, ids=lambda s: s["id"])
    def test_next_change(self, spec):
        kwargs = {"max_days": spec["max_days"]} if "max_days" in spec else {}
        hours = make_hours(spec["rules"], spec["timezone"], **kwargs)
        result = hours.next_change(spec["looking_for"], spec["start"])
        assert as_utc(result) == parse_instant(spec["expected"]), spec["notes"]

    @pytest.mark.parametrize("spec", _scenarios, ids=lambda s: s["id"])
    def test_module_function(self, spec):
        from opening_times import next_state_change

        result = next_state_change(
            ruleset(spec["rules"]),
            spec["start"],
            spec["looking_for"],
            spec["timezone"],
            max_days=spec.get("max_days", 366),
        )
        assert as_utc(result) == parse_instant(spec["expected"]), spec["notes"]


class TestFirstDay:
    """On the first day only transitions not before the start qualify."""

    def test_opening_at_start_instant_qualifies(self, daily_hours):
        assert daily_hours.next_change("open", utc("wed", "08:00")) == utc("wed", "08:00")

    def test_opening_just_passed_rolls_over(self, daily_hours):
        assert daily_hours.next_change("open", utc("wed", "08:01")) == utc("thu", "08:00")

    def test_closing_at_start_instant_rolls_over(self, daily_hours):
        assert daily_hours.next_change("close", utc("wed", "18:00")) == utc("thu", "18:00")

    def test_later_days_any_time_qualifies(self, basic_hours):
        # Saturday evening: Sunday opens at 10:00, earlier than the start clock
        assert basic_hours.next_change("open", utc("sat", "23:00")) == utc("sun", "10:00")


class TestClosedDays:
    """Closed-all-day and rule-less days never yield a transition."""

    def test_no_rule_is_closed(self):
        from opening_times import OpeningHours

        hours = OpeningHours(
            [{"dayOfWeek": "monday", "opens": "09:00", "closes": "17:00"}], "UTC"
        )
        assert hours.next_change("open", utc("tue", "12:00")) == utc("next_mon", "09:00")
        assert hours.next_change("close", utc("tue", "12:00")) == utc("next_mon", "17:00")

    def test_open_run_ends_at_rule_less_day(self):
        from opening_times import OpeningHours

        hours = OpeningHours(
            [{"dayOfWeek": ["saturday", "sunday"], "opens": "00:00", "closes": "23:59"}],
            "UTC",
        )
        assert hours.next_change("close", utc("sat", "09:00")) == utc("next_mon", "00:00")

    def test_open_run_ends_at_closed_day(self):
        from opening_times import OpeningHours

        hours = OpeningHours(
            [
                {"opens": "00:00", "closes": "23:59"},
                {"dayOfWeek": "friday", "opens": "00:00", "closes": "00:00"},
            ],
            "UTC",
        )
        assert hours.next_change("close", utc("wed", "09:00")) == utc("fri", "00:00")


class TestHorizon:
    """The search never runs past max_days."""

    def test_horizon_returns_none(self):
        hours = make_hours("never_open", max_days=7)
        assert hours.next_change("open", utc("wed", "12:00")) is None

    def test_state_omits_transition_past_horizon(self):
        hours = make_hours("single_future_day", max_days=5)
        state = hours.state_at(utc("wed", "12:00"))
        assert state.is_open is False
        assert state.opens_at is None

    def test_state_finds_transition_within_horizon(self):
        hours = make_hours("single_future_day", max_days=30)
        state = hours.state_at(utc("wed", "12:00"))
        assert state.opens_at == parse_instant("2019-12-20T08:00:00+00:00")

    def test_default_horizon(self):
        from opening_times import DEFAULT_LOOKAHEAD_DAYS

        assert make_hours("daily").max_days == DEFAULT_LOOKAHEAD_DAYS == 366


class TestArguments:

    def test_unknown_direction(self, daily_hours):
        with pytest.raises(ValueError, match="looking_for"):
            daily_hours.next_change("reopen", utc("wed", "12:00"))

    def test_constants(self, daily_hours):
        from opening_times import CLOSE, OPEN

        assert daily_hours.next_change(OPEN, utc("wed", "19:00")) == utc("thu", "08:00")
        assert daily_hours.next_change(CLOSE, utc("wed", "09:00")) == utc("wed", "18:00")

    def test_start_defaults_to_clock(self):
        hours = make_hours("daily", clock=lambda: utc("wed", "19:00"))
        assert hours.next_change("open") == utc("thu", "08:00")

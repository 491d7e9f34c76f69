"""Unit tests for RateResolver."""

from datetime import date
from zoneinfo import ZoneInfo

import pytest

from shift_ledger.calculators.rate_resolver import RateResolver, matches_window
from shift_ledger.calculators.types import (
    DayOfWeek,
    ExtraKind,
    FixedAmount,
    Multiplier,
    PricingRule,
)
from shift_ledger.money import Money
from tests.conftest import LISBON, lisbon


@pytest.fixture
def tz() -> ZoneInfo:
    return ZoneInfo(LISBON)


class TestWindowMatching:
    """Test time window predicates."""

    @pytest.mark.parametrize(
        "clock,expected",
        [
            (23 * 60 + 30, True),  # 23:30
            (2 * 60, True),  # 02:00
            (22 * 60, True),  # start is inclusive
            (6 * 60, False),  # end is exclusive
            (12 * 60, False),
        ],
    )
    def test_overnight_window(self, night_rule, clock, expected):
        assert night_rule.is_overnight
        assert matches_window(night_rule, clock) is expected

    @pytest.mark.parametrize(
        "clock,expected",
        [(8 * 60, True), (19 * 60 + 59, True), (20 * 60, False), (7 * 60 + 59, False)],
    )
    def test_normal_window(self, clock, expected):
        rule = PricingRule("Day", 1, Multiplier(1.2), time_start="08:00", time_end="20:00")
        assert matches_window(rule, clock) is expected

    def test_half_open_window_is_unrestricted(self):
        """A window with only one end set does not restrict matching."""
        rule = PricingRule("Evening", 1, Multiplier(1.2), time_start="18:00")
        assert matches_window(rule, 3 * 60)
        assert matches_window(rule, 12 * 60)

    def test_empty_window_never_matches(self):
        rule = PricingRule("Empty", 1, Multiplier(1.2), time_start="08:00", time_end="08:00")
        assert not matches_window(rule, 8 * 60)
        assert not matches_window(rule, 12 * 60)


class TestRuleMatching:
    """Test date and weekday predicates."""

    def test_weekday_filter(self, hourly_workplace, weekend_rule, tz):
        resolver = RateResolver(hourly_workplace, [weekend_rule], tz)

        assert resolver.rule_matches(weekend_rule, lisbon(2026, 1, 10, 12))  # Saturday
        assert not resolver.rule_matches(weekend_rule, lisbon(2026, 1, 9, 12))  # Friday

    def test_specific_dates_replace_weekdays(self, hourly_workplace, christmas_rule, tz):
        resolver = RateResolver(hourly_workplace, [christmas_rule], tz)

        assert resolver.rule_matches(christmas_rule, lisbon(2025, 12, 25, 10))
        assert not resolver.rule_matches(christmas_rule, lisbon(2025, 12, 22, 10))

    def test_weekday_read_on_local_clock(self, hourly_workplace, tz):
        """00:30 in Lisbon on a summer Saturday is still Friday in UTC."""
        saturday = PricingRule("Sat", 1, FixedAmount(Money(4000)), days_of_week={"sat"})
        resolver = RateResolver(hourly_workplace, [saturday], tz)

        instant = lisbon(2026, 7, 4, 0, 30)
        assert instant.astimezone(ZoneInfo("UTC")).weekday() == 4

        assert resolver.rule_matches(saturday, instant)

    def test_unconstrained_rule_always_matches(self, hourly_workplace, tz):
        rule = PricingRule("Always", 5, Multiplier(2.0))
        resolver = RateResolver(hourly_workplace, [rule], tz)

        assert resolver.rule_matches(rule, lisbon(2026, 1, 5, 3))
        assert resolver.rule_matches(rule, lisbon(2026, 1, 11, 15))


class TestResolve:
    """Test rate selection."""

    def test_no_match_falls_back_to_base(self, hourly_workplace, weekend_rule, tz):
        resolver = RateResolver(hourly_workplace, [weekend_rule], tz)

        rate, rule = resolver.resolve(lisbon(2026, 1, 5, 10))

        assert rate == Money(2500)
        assert rule is None
        assert resolver.resolve_named(lisbon(2026, 1, 5, 10)) == (Money(2500), "base")

    def test_multiplier_applies_to_base(self, hourly_workplace, night_rule, tz):
        resolver = RateResolver(hourly_workplace, [night_rule], tz)

        rate, rule = resolver.resolve(lisbon(2026, 1, 5, 23))

        assert rate == Money(3750)
        assert rule is night_rule

    def test_rules_sorted_by_priority(self, hourly_workplace, night_rule, weekend_rule, christmas_rule, tz):
        resolver = RateResolver(hourly_workplace, [weekend_rule, night_rule, christmas_rule], tz)

        assert [r.priority for r in resolver.rules] == [0, 1, 2]

    def test_weekend_night_picks_night(self, hourly_workplace, night_rule, weekend_rule, tz):
        """Night (priority 1) beats Weekend (priority 2) on a Saturday night."""
        resolver = RateResolver(hourly_workplace, [weekend_rule, night_rule], tz)

        _, rule = resolver.resolve(lisbon(2026, 1, 10, 23))

        assert rule.name == "Night"

    def test_equal_priorities_keep_input_order(self, hourly_workplace, tz):
        first = PricingRule("First", 1, FixedAmount(Money(1000)))
        second = PricingRule("Second", 1, FixedAmount(Money(2000)))
        resolver = RateResolver(hourly_workplace, [first, second], tz)

        assert resolver.resolve_named(lisbon(2026, 1, 5, 10)) == (Money(1000), "First")

    def test_day_of_week_tags_coerced(self, weekend_rule):
        assert weekend_rule.days_of_week == frozenset({DayOfWeek.SAT, DayOfWeek.SUN})
        assert date(2026, 1, 10).weekday() == 5


class TestResolveUnitRate:
    """Test per-unit rate lookup for consultations and outside visits."""

    def test_first_matching_rule_with_rate(self, hourly_workplace, tz):
        """A higher-priority rule without a consultation rate is skipped."""
        boost = PricingRule("Boost", 0, Multiplier(2.0))
        day = PricingRule(
            "Day", 1, Multiplier(1.0), time_start="08:00", time_end="20:00",
            consultation_rate=Money(500),
        )
        resolver = RateResolver(hourly_workplace, [day, boost], tz)

        assert resolver.resolve_unit_rate(ExtraKind.CONSULTATION, lisbon(2026, 1, 5, 9)) == (
            Money(500),
            "Day",
        )

    def test_no_match_returns_none(self, hourly_workplace, tz):
        day = PricingRule(
            "Day", 1, Multiplier(1.0), time_start="08:00", time_end="20:00",
            consultation_rate=Money(500),
        )
        resolver = RateResolver(hourly_workplace, [day], tz)

        assert resolver.resolve_unit_rate(ExtraKind.CONSULTATION, lisbon(2026, 1, 5, 21)) is None
        assert resolver.resolve_unit_rate(ExtraKind.OUTSIDE_VISIT, lisbon(2026, 1, 5, 9)) is None

"""Pricing rule resolution by priority, date, weekday and time window."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable
from zoneinfo import ZoneInfo

from shift_ledger.calculators.clock import local_date, local_minutes, weekday_tag
from shift_ledger.calculators.types import (
    BASE_RULE_NAME,
    DayOfWeek,
    ExtraKind,
    PricingRule,
    Workplace,
)
from shift_ledger.money import Money

logger = logging.getLogger(__name__)


class RateResolver:
    """Resolves the rate that applies at an instant of a shift.

    Rate selection:
    1. Rules are ordered by priority ascending (lower number wins); rules
       sharing a priority keep their input order
    2. The first rule whose predicate matches the instant supplies the rate
    3. With no match, the workplace base rate applies under the name "base"

    Rule predicate, evaluated on the local wall clock:
    - specific_dates, when non-empty, must contain the local date; weekdays
      are then ignored
    - otherwise days_of_week, when non-empty, must contain the local weekday
    - a window with both ends set must contain the local clock time;
      windows with start > end wrap past midnight
    """

    def __init__(self, workplace: Workplace, rules: Iterable[PricingRule], tz: ZoneInfo):
        self.workplace = workplace
        self.tz = tz
        # sorted() is stable, so equal priorities keep their input order
        self.rules: tuple[PricingRule, ...] = tuple(sorted(rules, key=lambda r: r.priority))

    def resolve(self, instant: datetime) -> tuple[Money, PricingRule | None]:
        """Resolve the rate at ``instant`` and the rule that supplied it."""
        for rule in self.rules:
            if self.rule_matches(rule, instant):
                rate = rule.pricing.apply(self.workplace.base_rate)
                logger.debug("Rule %r (priority %d) matched at %s", rule.name, rule.priority, instant)
                return rate, rule
        return self.workplace.base_rate, None

    def resolve_named(self, instant: datetime) -> tuple[Money, str]:
        rate, rule = self.resolve(instant)
        return rate, rule.name if rule is not None else BASE_RULE_NAME

    def resolve_unit_rate(self, kind: ExtraKind, instant: datetime) -> tuple[Money, str] | None:
        """Per-unit rate of ``kind`` at ``instant``.

        The first matching rule that sets a rate for ``kind`` supplies it;
        there is no base fallback.
        """
        for rule in self.rules:
            unit_rate = rule.unit_rate(kind)
            if unit_rate is not None and self.rule_matches(rule, instant):
                return unit_rate, rule.name
        return None

    def rule_matches(self, rule: PricingRule, instant: datetime) -> bool:
        """Check whether ``rule`` applies at ``instant``."""
        if rule.specific_dates:
            if local_date(instant, self.tz) not in rule.specific_dates:
                return False
        elif rule.days_of_week:
            if DayOfWeek(weekday_tag(instant, self.tz)) not in rule.days_of_week:
                return False

        return matches_window(rule, local_minutes(instant, self.tz))


def matches_window(rule: PricingRule, clock: int) -> bool:
    """Check a minutes-since-midnight clock against the rule's time window."""
    start, end = rule.start_minutes, rule.end_minutes
    if start is None or end is None:
        return True  # No time restriction

    if start <= end:
        # Normal window, e.g. 08:00-20:00
        return start <= clock < end
    # Overnight window, e.g. 22:00-08:00
    return clock >= start or clock < end

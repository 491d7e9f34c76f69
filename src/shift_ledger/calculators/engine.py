"""Shift earnings engine - splits a shift and prices each segment."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Sequence
from zoneinfo import ZoneInfo

from shift_ledger.calculators.clock import (
    at_local_clock,
    duration_hours,
    duration_microseconds,
    local_date,
    resolve_zone,
    split_at_local_midnights,
    to_utc,
)
from shift_ledger.calculators.errors import InvalidShiftError
from shift_ledger.calculators.rate_resolver import RateResolver
from shift_ledger.calculators.segment_builder import SegmentBuilder
from shift_ledger.calculators.types import (
    EarningExtra,
    EarningSegment,
    EarningsResult,
    EarningsWarning,
    ExtraKind,
    PayModel,
    PricingRule,
    Shift,
    Workplace,
)
from shift_ledger.money import Money, sum_money

logger = logging.getLogger(__name__)

ENGINE_VERSION = "1.0.0"


class EarningsResolver:
    """Resolves a shift into priced earning segments.

    Pipeline (stable order per shift):
    1) Order rules by priority (stable, lower number first)
    2) Split the shift at every local midnight inside it
    3) Split each day piece at every rule time_start/time_end on that day
    4) Resolve each segment's rate at its start instant
    5) Convert rate and duration to an amount per the workplace pay model

    Segments are contiguous, chronological, and their hours sum to the
    shift's duration. Inputs are never mutated.
    """

    def __init__(self, engine_version: str = ENGINE_VERSION):
        self.engine_version = engine_version

    def resolve(
        self,
        shift_start: datetime,
        shift_end: datetime,
        workplace: Workplace,
        rules: Iterable[PricingRule],
        timezone: str | ZoneInfo = "UTC",
    ) -> list[EarningSegment]:
        """Split and price ``[shift_start, shift_end)``.

        Naive datetimes are read as local to ``timezone``.

        Raises:
            InvalidShiftError: If the range is empty or inverted
        """
        tz = timezone if isinstance(timezone, ZoneInfo) else resolve_zone(timezone)
        start = to_utc(shift_start, tz)
        end = to_utc(shift_end, tz)
        shift_us = duration_microseconds(start, end)
        if shift_us <= 0:
            raise InvalidShiftError(
                "shift_end", shift_end, f"must be after shift_start {shift_start}"
            )

        resolver = RateResolver(workplace, rules, tz)

        segments: list[EarningSegment] = []
        for seg_start, seg_end in self._split(start, end, resolver.rules, tz):
            rate, rule_name = resolver.resolve_named(seg_start)
            segments.append(
                SegmentBuilder.create_segment(
                    workplace, seg_start, seg_end, rate, rule_name, shift_us, tz
                )
            )

        logger.debug(
            "Resolved %s-%s at %r into %d segment(s)",
            start.isoformat(),
            end.isoformat(),
            workplace.name,
            len(segments),
        )
        return segments

    def resolve_shift(
        self,
        shift: Shift,
        workplace: Workplace,
        rules: Iterable[PricingRule],
    ) -> EarningsResult:
        """Resolve a shift and bundle segments, extras, totals and warnings.

        Consultations and outside visits are paid per unit at the rate of the
        first rule matching the shift start that sets one, and only when the
        workplace enables that kind of pay.
        """
        rules = tuple(rules)
        segments = self.resolve(
            shift.start_time, shift.end_time, workplace, rules, shift.zone
        )

        warnings: list[EarningsWarning] = []
        if workplace.pay_model == PayModel.MONTHLY and not (
            workplace.monthly_expected_hours and workplace.monthly_expected_hours > 0
        ):
            logger.warning(
                "Workplace %r uses the monthly pay model without expected hours; "
                "earnings resolve to zero",
                workplace.name,
            )
            warnings.append(EarningsWarning.MONTHLY_HOURS_NOT_CONFIGURED)

        extras = self._extras(shift, workplace, rules)

        return EarningsResult(
            segments=tuple(segments),
            total=total_earnings(segments),
            hours=duration_hours(
                to_utc(shift.start_time, shift.zone), to_utc(shift.end_time, shift.zone)
            ),
            fingerprint=SegmentBuilder.compute_fingerprint(
                segments, self.engine_version, extras
            ),
            warnings=tuple(warnings),
            extras=tuple(extras),
        )

    def _extras(
        self,
        shift: Shift,
        workplace: Workplace,
        rules: Sequence[PricingRule],
    ) -> list[EarningExtra]:
        """Per-unit lines for consultations and outside visits."""
        resolver = RateResolver(workplace, rules, shift.zone)
        start = to_utc(shift.start_time, shift.zone)

        extras: list[EarningExtra] = []
        for kind in ExtraKind:
            count = shift.extra_count(kind)
            if count == 0:
                continue
            if not workplace.pays_extra(kind):
                logger.debug(
                    "Workplace %r does not pay %s; ignoring %d", workplace.name, kind.value, count
                )
                continue
            resolved = resolver.resolve_unit_rate(kind, start)
            if resolved is None:
                logger.debug("No %s rate matches at %s", kind.value, start.isoformat())
                continue
            unit_rate, rule_name = resolved
            extras.append(SegmentBuilder.create_extra(kind, count, unit_rate, rule_name))
        return extras

    def _split(
        self,
        start: datetime,
        end: datetime,
        rules: Sequence[PricingRule],
        tz: ZoneInfo,
    ) -> list[tuple[datetime, datetime]]:
        """Break ``[start, end)`` at local midnights and rule boundaries."""
        pieces: list[tuple[datetime, datetime]] = []
        for day_start, day_end in split_at_local_midnights(start, end, tz):
            boundaries = self._day_boundaries(day_start, day_end, rules, tz)
            pieces.extend(zip(boundaries, boundaries[1:]))
        return pieces

    @staticmethod
    def _day_boundaries(
        day_start: datetime,
        day_end: datetime,
        rules: Sequence[PricingRule],
        tz: ZoneInfo,
    ) -> list[datetime]:
        """Sorted, de-duplicated cut points of a day-bounded piece."""
        day = local_date(day_start, tz)
        candidates = [day_start, day_end]
        for rule in rules:
            for minutes in (rule.start_minutes, rule.end_minutes):
                if minutes is None:
                    continue
                cut = at_local_clock(day, minutes, tz)
                if day_start < cut < day_end:
                    candidates.append(cut)

        candidates.sort()
        boundaries = [candidates[0]]
        for cut in candidates[1:]:
            if cut != boundaries[-1]:
                boundaries.append(cut)
        return boundaries


def total_earnings(segments: Iterable[EarningSegment]) -> Money:
    """Sum segment amounts."""
    return sum_money(s.amount for s in segments)


def resolve_shift_earnings(
    shift_start: datetime,
    shift_end: datetime,
    workplace: Workplace,
    rules: Iterable[PricingRule],
    timezone: str | ZoneInfo = "UTC",
) -> list[EarningSegment]:
    """Module-level shortcut for :meth:`EarningsResolver.resolve`."""
    return EarningsResolver().resolve(shift_start, shift_end, workplace, rules, timezone)

"""Earning segment builder with deterministic fingerprints."""

from __future__ import annotations

import hashlib
import json
from datetime import datetime
from typing import Sequence
from zoneinfo import ZoneInfo

from shift_ledger.calculators.clock import (
    MICROSECONDS_PER_HOUR,
    duration_hours,
    duration_microseconds,
)
from shift_ledger.calculators.types import (
    EarningExtra,
    EarningSegment,
    ExtraKind,
    PayModel,
    Workplace,
)
from shift_ledger.money import Money, to_decimal


class SegmentBuilder:
    """Builds earning segments and converts rates into amounts.

    Amount conventions per pay model (all truncated toward zero to the cent):
    - HOURLY: rate is per hour; amount = rate * hours
    - PER_TURN: rate is for the whole shift; each segment gets
      rate * segment_duration / shift_duration
    - MONTHLY: rate is per month; amount = rate / monthly_expected_hours * hours,
      zero when the expected hours are unset or not positive

    Durations are measured in exact microseconds so that segment amounts do
    not depend on float rounding of the hour count.
    """

    @staticmethod
    def compute_amount(
        workplace: Workplace,
        rate: Money,
        segment_us: int,
        shift_us: int,
    ) -> Money:
        """Convert a segment's rate and duration into an amount."""
        if workplace.pay_model == PayModel.HOURLY:
            return rate.prorate(segment_us, MICROSECONDS_PER_HOUR)

        if workplace.pay_model == PayModel.PER_TURN:
            if shift_us <= 0:
                return Money(0)
            return rate.prorate(segment_us, shift_us)

        if workplace.pay_model == PayModel.MONTHLY:
            expected = workplace.monthly_expected_hours
            if expected is None or expected <= 0:
                return Money(0)
            return rate.prorate(segment_us, to_decimal(expected) * MICROSECONDS_PER_HOUR)

        raise ValueError(f"Unhandled pay model: {workplace.pay_model}")

    @staticmethod
    def create_segment(
        workplace: Workplace,
        start: datetime,
        end: datetime,
        rate: Money,
        rule_name: str,
        shift_us: int,
        tz: ZoneInfo,
    ) -> EarningSegment:
        """Create a segment; ``start``/``end`` are presented in ``tz``."""
        return EarningSegment(
            start=start.astimezone(tz),
            end=end.astimezone(tz),
            hours=duration_hours(start, end),
            rate=rate,
            amount=SegmentBuilder.compute_amount(
                workplace, rate, duration_microseconds(start, end), shift_us
            ),
            rule_name=rule_name,
        )

    @staticmethod
    def create_extra(kind: ExtraKind, count: int, unit_rate: Money, rule_name: str) -> EarningExtra:
        """Per-unit line: ``unit_rate * count``."""
        return EarningExtra(
            kind=kind,
            count=count,
            unit_rate=unit_rate,
            amount=unit_rate.multiply(count),
            rule_name=rule_name,
        )

    @staticmethod
    def compute_segment_hash(segment: EarningSegment) -> str:
        """Compute deterministic hash for a segment.

        The hash is based on the canonical representation of defining fields,
        ensuring identical inputs produce identical hashes.
        """
        canonical = segment.to_canonical_dict()
        json_str = json.dumps(canonical, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]

    @staticmethod
    def compute_fingerprint(
        segments: Sequence[EarningSegment],
        engine_version: str = "",
        extras: Sequence[EarningExtra] = (),
    ) -> str:
        """Fingerprint an ordered segment list (order-sensitive) and its extras."""
        payload = {
            "engine_version": engine_version,
            "segments": [SegmentBuilder.compute_segment_hash(s) for s in segments],
            "extras": [e.to_canonical_dict() for e in extras],
        }
        json_str = json.dumps(payload, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()

"""Worked-time aggregation from clock events and shift spans."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, timezone

from event_payroll.calculators.types import (
    ClockAction,
    ClockEvent,
    DayWindow,
    PayrollPolicy,
    ShiftSpan,
    WorkedTime,
)

logger = logging.getLogger(__name__)

ONE_MS = timedelta(milliseconds=1)
END_OF_DAY = time(23, 59, 59, 999000)

_Punch = tuple[datetime, ClockAction]


def parse_timestamp(value: datetime | str | None) -> datetime | None:
    """Parse a clock timestamp into an aware UTC datetime.

    Naive values are taken as UTC. Returns None when unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            moment = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None

    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def duration_ms(start: datetime, end: datetime) -> int:
    """Signed duration in whole milliseconds."""
    return (end - start) // ONE_MS


class ShiftAggregator:
    """Converts clock events into worked time for one vendor.

    Two modes:
    - paired events: clock_in/clock_out pairs scanned in timestamp order
    - precomputed span: last_out - first_in minus meal windows, falling
      back to the paired total when the span is incomplete

    A lead-time offset (gate/phone prep) is reported on top of worked
    time whenever worked time is positive and a clock-in exists. It is
    never subtracted.
    """

    def __init__(self, policy: PayrollPolicy | None = None):
        self.policy = policy or PayrollPolicy()

    @staticmethod
    def day_window(
        event_date: date,
        start_time: time | None = None,
        end_time: time | None = None,
        ends_next_day: bool = False,
    ) -> DayWindow:
        """UTC calendar-day window of an event, extended for overnight events."""
        start = datetime.combine(event_date, time.min, tzinfo=timezone.utc)
        end = datetime.combine(event_date, END_OF_DAY, tzinfo=timezone.utc)
        crosses_midnight = (
            start_time is not None and end_time is not None and end_time <= start_time
        )
        if ends_next_day or crosses_midnight:
            end += timedelta(days=1)
        return DayWindow(start=start, end=end)

    def paired_worked_ms(
        self, events: Iterable[ClockEvent], window: DayWindow | None = None
    ) -> int:
        """Total worked milliseconds from clock_in/clock_out pairs."""
        punches, _ = self._parse(events, window)
        total, _ = self._pair(punches)
        return total

    def build_span(
        self, events: Iterable[ClockEvent], window: DayWindow | None = None
    ) -> ShiftSpan:
        """Derive first/last punches and meal windows from raw events."""
        punches, _ = self._parse(events, window)
        _, intervals = self._pair(punches)
        return self._span_from(punches, intervals)

    def span_worked_ms(self, span: ShiftSpan, fallback_ms: int = 0) -> int:
        """Worked milliseconds from a span, minus meal windows.

        Each subtraction is clamped at zero. Meal windows are clipped to
        the shift when both ends of the shift are known.
        """
        if span.first_in is not None and span.last_out is not None:
            total = max(0, duration_ms(span.first_in, span.last_out))
        else:
            total = max(0, fallback_ms)

        meals = (
            (span.first_meal_start, span.last_meal_end),
            (span.second_meal_start, span.second_meal_end),
        )
        for meal_start, meal_end in meals:
            if meal_start is None or meal_end is None:
                continue
            if span.first_in is not None and span.last_out is not None:
                meal_start = max(meal_start, span.first_in)
                meal_end = min(meal_end, span.last_out)
            meal_ms = duration_ms(meal_start, meal_end)
            if meal_ms > 0:
                total = max(0, total - meal_ms)
        return total

    def lead_time_ms(self, worked_ms: int, has_clock_in: bool) -> int:
        if worked_ms > 0 and has_clock_in:
            return self.policy.lead_time_minutes * 60 * 1000
        return 0

    def summarize(
        self,
        events: Iterable[ClockEvent],
        window: DayWindow | None = None,
        span: ShiftSpan | None = None,
    ) -> WorkedTime:
        """Worked time for one vendor.

        Uses paired mode unless a precomputed span is supplied, in which
        case span mode runs with the paired total as its fallback.
        """
        punches, skipped = self._parse(events, window)
        paired_ms, intervals = self._pair(punches)
        derived = self._span_from(punches, intervals)

        if span is not None:
            worked_ms = self.span_worked_ms(span, fallback_ms=paired_ms)
            used_span = span
        else:
            worked_ms = paired_ms
            used_span = derived

        has_clock_in = used_span.first_in is not None or derived.first_in is not None
        return WorkedTime(
            worked_ms=worked_ms,
            lead_time_ms=self.lead_time_ms(worked_ms, has_clock_in),
            span=used_span,
            skipped_events=skipped,
        )

    def _parse(
        self, events: Iterable[ClockEvent], window: DayWindow | None
    ) -> tuple[list[_Punch], int]:
        """Parse, filter to the window and sort punches by timestamp."""
        punches: list[_Punch] = []
        skipped = 0
        for event in events:
            moment = parse_timestamp(event.timestamp)
            if moment is None:
                skipped += 1
                logger.debug(
                    "Skipping clock event with malformed timestamp %r for user %s",
                    event.timestamp,
                    event.user_id,
                )
                continue
            try:
                action = ClockAction(event.action)
            except ValueError:
                continue
            if window is not None and not window.contains(moment):
                continue
            punches.append((moment, action))

        punches.sort(key=lambda p: p[0])
        return punches, skipped

    @staticmethod
    def _pair(punches: list[_Punch]) -> tuple[int, list[tuple[datetime, datetime]]]:
        total = 0
        intervals: list[tuple[datetime, datetime]] = []
        open_in: datetime | None = None

        for moment, action in punches:
            if action == ClockAction.CLOCK_IN:
                if open_in is None:
                    open_in = moment
            elif action == ClockAction.CLOCK_OUT:
                if open_in is not None:
                    elapsed = duration_ms(open_in, moment)
                    if elapsed > 0:
                        total += elapsed
                        intervals.append((open_in, moment))
                    open_in = None

        return total, intervals

    @staticmethod
    def _span_from(
        punches: list[_Punch], intervals: list[tuple[datetime, datetime]]
    ) -> ShiftSpan:
        clock_ins = [m for m, a in punches if a == ClockAction.CLOCK_IN]
        clock_outs = [m for m, a in punches if a == ClockAction.CLOCK_OUT]
        meal_starts = [m for m, a in punches if a == ClockAction.MEAL_START]
        meal_ends = [m for m, a in punches if a == ClockAction.MEAL_END]

        meals: list[tuple[datetime | None, datetime | None]] = [(None, None), (None, None)]
        if meal_starts or meal_ends:
            for i in range(2):
                meals[i] = (
                    meal_starts[i] if len(meal_starts) > i else None,
                    meal_ends[i] if len(meal_ends) > i else None,
                )
        elif len(intervals) >= 2:
            # No explicit meal punches: gaps between work intervals are meals
            gaps = [
                (prev_end, next_start)
                for (_, prev_end), (next_start, _) in zip(intervals, intervals[1:])
                if next_start > prev_end
            ]
            for i, gap in enumerate(gaps[:2]):
                meals[i] = gap

        return ShiftSpan(
            first_in=clock_ins[0] if clock_ins else None,
            last_out=clock_outs[-1] if clock_outs else None,
            first_meal_start=meals[0][0],
            last_meal_end=meals[0][1],
            second_meal_start=meals[1][0],
            second_meal_end=meals[1][1],
        )

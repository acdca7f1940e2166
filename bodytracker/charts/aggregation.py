# -*- coding: utf-8 -*-
"""Charts — calendar windows and per-day bucketing.

Everything here is pure: the same entries, window and anchor always give the
same buckets. Entries whose ``occurred_on`` does not parse are left out of
every window instead of failing the whole aggregation.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from ..config import settings
from ..entries.models import Entry, EntryKind
from .models import DayBucket, WindowKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Window:
    kind: WindowKind
    start: Optional[date] = None
    end: Optional[date] = None

    def contains(self, day: date) -> bool:
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True


def parse_day(value: object) -> Optional[date]:
    try:
        return date.fromisoformat(str(value).strip())
    except (TypeError, ValueError):
        return None


def _add_months(day: date, months: int) -> date:
    years, month_index = divmod(day.month - 1 + months, 12)
    year = day.year + years
    month = month_index + 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def window_bounds(kind: WindowKind | str, anchor: date, week_start: Optional[int] = None) -> Window:
    """Inclusive calendar bounds of the window containing ``anchor``."""
    kind = WindowKind(kind)
    if kind is WindowKind.all:
        return Window(kind)
    if kind is WindowKind.week:
        first = settings.week_start if week_start is None else week_start % 7
        start = anchor - timedelta(days=(anchor.weekday() - first) % 7)
        return Window(kind, start, start + timedelta(days=6))
    if kind is WindowKind.month:
        last = calendar.monthrange(anchor.year, anchor.month)[1]
        return Window(kind, anchor.replace(day=1), anchor.replace(day=last))
    return Window(kind, date(anchor.year, 1, 1), date(anchor.year, 12, 31))


def navigate(kind: WindowKind | str, anchor: date, direction: int) -> date:
    """Shift ``anchor`` by ``direction`` window units; the all-time window does not move."""
    kind = WindowKind(kind)
    if kind is WindowKind.week:
        return anchor + timedelta(days=7 * direction)
    if kind is WindowKind.month:
        return _add_months(anchor, direction)
    if kind is WindowKind.year:
        return _add_months(anchor, 12 * direction)
    return anchor


def display_label(day: date, kind: WindowKind | str) -> str:
    if WindowKind(kind) is WindowKind.year:
        return f"{day:%b} {day.day}"
    return f"{day:%a} {day.day}"


def window_label(kind: WindowKind | str, anchor: date, week_start: Optional[int] = None) -> str:
    window = window_bounds(kind, anchor, week_start)
    if window.kind is WindowKind.all:
        return "All Time"
    if window.kind is WindowKind.week:
        s, e = window.start, window.end
        return f"{s:%b} {s.day} - {e:%b} {e.day}"
    if window.kind is WindowKind.month:
        return f"{anchor:%B %Y}"
    return str(anchor.year)


def write_rank(entry: Entry, index: int) -> Tuple[bool, float, int]:
    # A pending write (no server timestamp yet) is the newest thing the user did.
    ts = entry.recorded_at
    return (ts is None, ts.timestamp() if ts is not None else 0.0, index)


@dataclass
class _DayAgg:
    weight: Optional[float] = None
    weight_rank: Optional[Tuple[bool, float, int]] = None
    calories: float = 0.0
    minutes: float = 0.0


def aggregate(
    entries: Iterable[Entry],
    kind: WindowKind | str,
    anchor: date,
    *,
    week_start: Optional[int] = None,
) -> List[DayBucket]:
    """Bucket entries per ``occurred_on`` inside the window, oldest day first.

    Weight is last-write-wins per day, where "last" is the greatest
    ``recorded_at`` (input order breaks remaining ties). Food calories and
    exercise minutes are summed.
    """
    kind = WindowKind(kind)
    window = window_bounds(kind, anchor, week_start)
    per_day: Dict[date, _DayAgg] = {}

    for index, entry in enumerate(entries):
        day = parse_day(entry.occurred_on)
        if day is None:
            logger.debug("Skipping entry %s with malformed date %r", entry.id, entry.occurred_on)
            continue
        if not window.contains(day):
            continue
        agg = per_day.setdefault(day, _DayAgg())
        if entry.kind is EntryKind.weight:
            rank = write_rank(entry, index)
            if agg.weight_rank is None or rank > agg.weight_rank:
                agg.weight = entry.value
                agg.weight_rank = rank
        elif entry.kind is EntryKind.food:
            agg.calories += entry.value
        elif entry.kind is EntryKind.exercise:
            agg.minutes += entry.value

    return [
        DayBucket(
            date=day.isoformat(),
            display_date=display_label(day, kind),
            weight=agg.weight,
            calories_total=agg.calories,
            active_minutes_total=agg.minutes,
        )
        for day, agg in sorted(per_day.items())
    ]

# -*- coding: utf-8 -*-
"""Charts — dashboard numbers and diary grouping."""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Sequence

from ..entries.models import Entry, EntryKind
from .aggregation import write_rank, parse_day
from .models import DashboardSummary, DayGroup

RECENT_LIMIT = 5


def dashboard_summary(entries: Sequence[Entry], today: date) -> DashboardSummary:
    weights = []
    for index, entry in enumerate(entries):
        if entry.kind is not EntryKind.weight:
            continue
        day = parse_day(entry.occurred_on)
        if day is None:
            continue
        weights.append(((day, write_rank(entry, index)), entry.value))
    weights.sort(key=lambda item: item[0])

    current = weights[-1][1] if weights else None
    start = weights[0][1] if weights else None
    today_str = today.isoformat()
    todays_calories = sum(
        e.value for e in entries if e.kind is EntryKind.food and e.occurred_on == today_str
    )
    return DashboardSummary(
        current_weight=current,
        start_weight=start,
        weight_change=round((current or 0.0) - (start or 0.0), 2),
        todays_calories=todays_calories,
        entry_count=len(entries),
        recent=list(entries[:RECENT_LIMIT]),
    )


def group_by_day(entries: Sequence[Entry]) -> List[DayGroup]:
    """Diary view: one group per ``occurred_on``, newest day first."""
    groups: Dict[str, List[int]] = {}
    for index, entry in enumerate(entries):
        groups.setdefault(entry.occurred_on, []).append(index)

    def day_key(key: str) -> date:
        return parse_day(key) or date.min

    out: List[DayGroup] = []
    for key in sorted(groups, key=day_key, reverse=True):
        items = [entries[i] for i in groups[key]]
        weight_rank = None
        weight = None
        calories = 0.0
        minutes = 0.0
        for index in groups[key]:
            entry = entries[index]
            if entry.kind is EntryKind.weight:
                rank = write_rank(entry, index)
                if weight_rank is None or rank > weight_rank:
                    weight_rank, weight = rank, entry.value
            elif entry.kind is EntryKind.food:
                calories += entry.value
            else:
                minutes += entry.value
        out.append(
            DayGroup(
                date=key,
                entries=items,
                weight=weight,
                calories_total=calories,
                active_minutes_total=minutes,
            )
        )
    return out

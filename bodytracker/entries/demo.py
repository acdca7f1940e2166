# -*- coding: utf-8 -*-
"""Entries — demo history for an empty account."""

from __future__ import annotations

import random
from datetime import date, timedelta
from typing import List, Optional

from .models import EntryFields, EntryKind

# (days ago, weight kg, food kcal, exercise mins, meal, activity, note)
_RECENT_DAYS = [
    (7, 85.0, 2800, 0, "Cheat Day Pizza", "", "Felt heavy"),
    (6, 85.2, 1800, 30, "Salad & Chicken", "Jogging", ""),
    (5, 84.9, 1900, 60, "Healthy Wrap", "Weight Lifting", ""),
    (4, 84.7, 2000, 0, "Steak Dinner", "", "Rest day"),
    (3, 84.5, 1700, 45, "Smoothie Bowl", "HIIT", ""),
    (2, 84.3, 1800, 0, "Fish & Rice", "", ""),
    (1, 84.1, 1900, 90, "Protein Pasta", "Long Run", ""),
    (0, 84.0, 500, 0, "Oatmeal Breakfast", "", "Morning weigh-in"),
]


def _entry(kind: EntryKind, value: float, day: date, label: str = "", note: str = "") -> EntryFields:
    return EntryFields(kind=kind, value=value, label=label, note=note, occurred_on=day.isoformat())


def build_demo_entries(today: date, rng: Optional[random.Random] = None) -> List[EntryFields]:
    """A year of sparse history, a month of denser logging and a detailed last week."""
    rng = rng or random.Random()
    out: List[EntryFields] = []

    for days_ago in range(365, 30, -14):
        day = today - timedelta(days=days_ago)
        progress = (365 - days_ago) / 365
        weight = 95 - progress * 9 + (rng.random() - 0.5)
        out.append(_entry(EntryKind.weight, round(weight, 1), day))
        if rng.random() > 0.5:
            out.append(_entry(EntryKind.exercise, 30 + rng.randrange(30), day, "Walking"))

    for days_ago in range(30, 7, -3):
        day = today - timedelta(days=days_ago)
        weight = 86 - ((30 - days_ago) / 30) + (rng.random() * 0.6 - 0.3)
        out.append(_entry(EntryKind.weight, round(weight, 1), day))
        out.append(_entry(EntryKind.food, 2000 + rng.randrange(600), day, "Daily Total"))
        if rng.random() > 0.3:
            out.append(_entry(EntryKind.exercise, 45 + rng.randrange(30), day, "Gym Session"))

    for days_ago, weight, kcal, mins, meal, activity, note in _RECENT_DAYS:
        day = today - timedelta(days=days_ago)
        out.append(_entry(EntryKind.weight, weight, day, note=note))
        if kcal:
            out.append(_entry(EntryKind.food, kcal, day, meal))
        if mins:
            out.append(_entry(EntryKind.exercise, mins, day, activity or "Workout"))

    return out

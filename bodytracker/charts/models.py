# -*- coding: utf-8 -*-
"""Charts — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from ..entries.models import Entry


class WindowKind(str, Enum):
    week = "week"
    month = "month"
    year = "year"
    all = "all"


class DayBucket(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    display_date: str = ""
    weight: Optional[float] = None
    calories_total: float = 0.0
    active_minutes_total: float = 0.0


class ChartResponse(BaseModel):
    window: WindowKind
    anchor: str
    label: str
    start: Optional[str] = None
    end: Optional[str] = None
    buckets: List[DayBucket]


class DayGroup(BaseModel):
    """One diary day: its entries in list order plus the day's totals."""

    date: str
    entries: List[Entry]
    weight: Optional[float] = None
    calories_total: float = 0.0
    active_minutes_total: float = 0.0


class DashboardSummary(BaseModel):
    current_weight: Optional[float] = None
    start_weight: Optional[float] = None
    weight_change: float = 0.0
    todays_calories: float = 0.0
    entry_count: int = Field(0, ge=0)
    recent: List[Entry] = []

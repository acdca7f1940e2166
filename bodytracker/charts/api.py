# -*- coding: utf-8 -*-
"""Charts — API endpoints over the stored entries."""

from __future__ import annotations

import logging
import sqlite3
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from ..entries.models import Entry
from ..entries.storage import list_entries
from ..identity import get_user_id
from .aggregation import aggregate, window_bounds, window_label
from .models import ChartResponse, DashboardSummary, DayGroup, WindowKind
from .summary import dashboard_summary, group_by_day

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Charts"])


def _entries_or_500(user_id: str) -> List[Entry]:
    try:
        return list_entries(user_id)
    except sqlite3.Error as exc:
        logger.error("Error fetching entries: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to fetch entries") from exc


def _parse_date_or_400(value: str | None, name: str) -> date:
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"{name} must be YYYY-MM-DD") from exc


@router.get("/charts", response_model=ChartResponse, summary="Per-day buckets for a calendar window")
def chart(
    window: WindowKind = Query(default=WindowKind.month),
    anchor: str | None = Query(default=None, description="YYYY-MM-DD, defaults to today"),
    user_id: str = Depends(get_user_id),
):
    anchor_day = _parse_date_or_400(anchor, "anchor")
    bounds = window_bounds(window, anchor_day)
    buckets = aggregate(_entries_or_500(user_id), window, anchor_day)
    return ChartResponse(
        window=window,
        anchor=anchor_day.isoformat(),
        label=window_label(window, anchor_day),
        start=bounds.start.isoformat() if bounds.start else None,
        end=bounds.end.isoformat() if bounds.end else None,
        buckets=buckets,
    )


@router.get("/summary", response_model=DashboardSummary, summary="Dashboard numbers")
def summary(
    today: str | None = Query(default=None, description="YYYY-MM-DD, defaults to today"),
    user_id: str = Depends(get_user_id),
):
    return dashboard_summary(_entries_or_500(user_id), _parse_date_or_400(today, "today"))


@router.get("/diary", response_model=List[DayGroup], summary="Entries grouped by day")
def diary(user_id: str = Depends(get_user_id)):
    return group_by_day(_entries_or_500(user_id))

# -*- coding: utf-8 -*-
"""Insights — API endpoints."""

from __future__ import annotations

import logging
import sqlite3

from fastapi import APIRouter, Depends, HTTPException

from ..entries.storage import list_entries
from ..identity import get_user_id
from .llm import SUMMARY_ENTRY_LIMIT, estimate_calories, summarize
from .models import ESTIMATE_UNAVAILABLE, NOT_ENOUGH_DATA, EstimateRequest, EstimateResponse, InsightResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/insights", tags=["Insights"])


@router.post("/estimate", response_model=EstimateResponse, summary="Guess calories for a meal name")
async def estimate(request: EstimateRequest, user_id: str = Depends(get_user_id)):  # noqa: ARG001
    calories = await estimate_calories(request.text)
    if calories is None:
        return EstimateResponse(available=False, message=ESTIMATE_UNAVAILABLE)
    return EstimateResponse(available=True, calories_kcal=calories)


@router.post("/summary", response_model=InsightResponse, summary="Coach-style read of recent entries")
async def insight(user_id: str = Depends(get_user_id)):
    try:
        entries = list_entries(user_id)[:SUMMARY_ENTRY_LIMIT]
    except sqlite3.Error as exc:
        logger.error("Error fetching entries for insight: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to fetch entries") from exc
    text = await summarize(entries)
    if not text:
        return InsightResponse(available=False, insight=NOT_ENOUGH_DATA, entry_count=len(entries))
    return InsightResponse(available=True, insight=text, entry_count=len(entries))

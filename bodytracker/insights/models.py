# -*- coding: utf-8 -*-
"""Insights — Pydantic models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

NOT_ENOUGH_DATA = "Not enough data to analyze yet. Log more entries!"
ESTIMATE_UNAVAILABLE = "Calorie estimate unavailable."


class EstimateRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=200, description="Meal name, e.g. 'Grilled Chicken Salad'")


class EstimateResponse(BaseModel):
    available: bool
    calories_kcal: Optional[int] = None
    message: Optional[str] = None


class InsightResponse(BaseModel):
    available: bool
    insight: str
    entry_count: int = Field(0, ge=0)

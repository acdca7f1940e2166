# -*- coding: utf-8 -*-
"""Entries — Pydantic models."""

from __future__ import annotations

import math
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EntryKind(str, Enum):
    weight = "weight"
    food = "food"
    exercise = "exercise"


UNITS = {
    EntryKind.weight: "kg",
    EntryKind.food: "kcal",
    EntryKind.exercise: "mins",
}


class EntryFields(BaseModel):
    """Writable part of an entry; identity and ordering belong to the store."""

    kind: EntryKind
    value: float = Field(..., description="kg for weight, kcal for food, minutes for exercise")
    label: str = Field("", max_length=200, description="Meal or activity name")
    note: Optional[str] = Field(None, max_length=2000)
    occurred_on: str = Field(..., description="YYYY-MM-DD")

    @field_validator("value")
    @classmethod
    def _finite_value(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("value must be a finite number")
        return value

    @field_validator("label", mode="before")
    @classmethod
    def _coerce_label(cls, value: object) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("note", mode="before")
    @classmethod
    def _blank_note_is_none(cls, value: object) -> Optional[str]:
        if value is None:
            return None
        s = str(value).strip()
        return s or None

    @field_validator("occurred_on")
    @classmethod
    def _valid_date(cls, value: str) -> str:
        try:
            return date.fromisoformat(value.strip()).isoformat()
        except ValueError as exc:
            raise ValueError(f"occurred_on must be YYYY-MM-DD: {value!r}") from exc


class Entry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    kind: EntryKind
    value: float
    label: str = ""
    note: Optional[str] = None
    # Kept as a plain string: rows written before validation existed may hold junk.
    occurred_on: str
    # None while the write that produced this entry is still pending.
    recorded_at: Optional[datetime] = None

    def to_fields(self) -> EntryFields:
        """Writable fields, validated; raises ``ValidationError`` for legacy junk rows."""
        return EntryFields.model_validate(
            {
                "kind": self.kind,
                "value": self.value,
                "label": self.label,
                "note": self.note,
                "occurred_on": self.occurred_on,
            }
        )

    @property
    def unit(self) -> str:
        return UNITS[self.kind]


class EntriesResponse(BaseModel):
    user_id: str
    count: int
    entries: List[Entry]


class DeleteEntryResponse(BaseModel):
    success: bool = True


class DemoDataResponse(BaseModel):
    success: bool = True
    count: int = Field(0, ge=0)

# -*- coding: utf-8 -*-
"""Entries — API endpoints."""

from __future__ import annotations

import logging
import sqlite3
from datetime import date

from fastapi import APIRouter, Depends, HTTPException

from ..identity import get_user_id
from .demo import build_demo_entries
from .models import DeleteEntryResponse, DemoDataResponse, EntriesResponse, Entry, EntryFields
from .storage import create_entries, create_entry, delete_entry, list_entries, update_entry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/entries", tags=["Entries"])


@router.get("", response_model=EntriesResponse, summary="List all entries, newest first")
def list_all(user_id: str = Depends(get_user_id)):
    try:
        entries = list_entries(user_id)
    except sqlite3.Error as exc:
        logger.error("Error fetching entries: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to fetch entries") from exc
    return EntriesResponse(user_id=user_id, count=len(entries), entries=entries)


@router.post("", response_model=Entry, status_code=201, summary="Create an entry")
def create(request: EntryFields, user_id: str = Depends(get_user_id)):
    try:
        return create_entry(user_id, request)
    except sqlite3.Error as exc:
        logger.error("Error creating entry: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to create entry") from exc


@router.post("/demo", response_model=DemoDataResponse, summary="Load demo history")
def load_demo(user_id: str = Depends(get_user_id)):
    items = build_demo_entries(date.today())
    try:
        count = create_entries(user_id, items)
    except sqlite3.Error as exc:
        logger.error("Error generating demo data: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to generate demo data") from exc
    return DemoDataResponse(count=count)


@router.put("/{entry_id}", response_model=Entry, summary="Replace an entry's fields")
def update(entry_id: str, request: EntryFields, user_id: str = Depends(get_user_id)):
    try:
        entry = update_entry(user_id, entry_id, request)
    except sqlite3.Error as exc:
        logger.error("Error updating entry %s: %s", entry_id, exc)
        raise HTTPException(status_code=500, detail="Failed to update entry") from exc
    if entry is None:
        raise HTTPException(status_code=404, detail="Entry not found")
    return entry


@router.delete("/{entry_id}", response_model=DeleteEntryResponse, summary="Delete an entry")
def delete(entry_id: str, user_id: str = Depends(get_user_id)):
    try:
        deleted = delete_entry(user_id, entry_id)
    except sqlite3.Error as exc:
        logger.error("Error deleting entry %s: %s", entry_id, exc)
        raise HTTPException(status_code=500, detail="Failed to delete entry") from exc
    if not deleted:
        raise HTTPException(status_code=404, detail="Entry not found")
    return DeleteEntryResponse()

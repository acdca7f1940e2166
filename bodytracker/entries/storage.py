# -*- coding: utf-8 -*-
"""Entries — SQLite storage.

This is the authoritative store. ``recorded_at`` is assigned here on every
write and is strictly increasing across the whole database, so it can be
used to order entries that share the same ``occurred_on``.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings
from .models import Entry, EntryFields


def _db(db_path: Path | None) -> Path:
    return db_path or settings.app_db_path


def _next_recorded_at(conn: sqlite3.Connection) -> str:
    now = datetime.now(timezone.utc)
    row = conn.execute("SELECT MAX(recorded_at) AS last FROM entries").fetchone()
    if row and row["last"]:
        last = datetime.fromisoformat(row["last"])
        if now <= last:
            now = last + timedelta(microseconds=1)
    return now.isoformat(timespec="microseconds")


def _row_to_entry(row: sqlite3.Row) -> Entry:
    return Entry(
        id=row["id"],
        kind=row["kind"],
        value=row["value"],
        label=row["label"] or "",
        note=row["note"],
        occurred_on=row["occurred_on"],
        recorded_at=row["recorded_at"],
    )


def list_entries(user_id: str, db_path: Path | None = None) -> List[Entry]:
    """All entries of a user, newest day first, newest write first within a day."""
    with db_conn(_db(db_path)) as conn:
        rows = conn.execute(
            """
            SELECT * FROM entries WHERE user_id = ?
            ORDER BY occurred_on DESC, recorded_at DESC
            """,
            (user_id,),
        ).fetchall()
    return [_row_to_entry(r) for r in rows]


def get_entry(user_id: str, entry_id: str, db_path: Path | None = None) -> Optional[Entry]:
    with db_conn(_db(db_path)) as conn:
        row = conn.execute(
            "SELECT * FROM entries WHERE user_id = ? AND id = ?", (user_id, entry_id)
        ).fetchone()
    return _row_to_entry(row) if row else None


def _insert(conn: sqlite3.Connection, user_id: str, fields: EntryFields) -> str:
    entry_id = uuid4().hex
    conn.execute(
        """
        INSERT INTO entries (id, user_id, kind, value, label, note, occurred_on, recorded_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            entry_id,
            user_id,
            fields.kind.value,
            float(fields.value),
            fields.label or "",
            fields.note,
            fields.occurred_on,
            _next_recorded_at(conn),
        ),
    )
    return entry_id


def create_entry(user_id: str, fields: EntryFields, db_path: Path | None = None) -> Entry:
    with db_conn(_db(db_path)) as conn:
        conn.execute("BEGIN IMMEDIATE")
        entry_id = _insert(conn, user_id, fields)
        row = conn.execute("SELECT * FROM entries WHERE id = ?", (entry_id,)).fetchone()
    return _row_to_entry(row)


def create_entries(user_id: str, items: Iterable[EntryFields], db_path: Path | None = None) -> int:
    count = 0
    with db_conn(_db(db_path)) as conn:
        conn.execute("BEGIN IMMEDIATE")
        for fields in items:
            _insert(conn, user_id, fields)
            count += 1
    return count


def update_entry(
    user_id: str,
    entry_id: str,
    fields: EntryFields,
    db_path: Path | None = None,
) -> Optional[Entry]:
    """Overwrite an entry's fields; ``recorded_at`` is refreshed like on create."""
    with db_conn(_db(db_path)) as conn:
        conn.execute("BEGIN IMMEDIATE")
        cur = conn.execute(
            """
            UPDATE entries
            SET kind = ?, value = ?, label = ?, note = ?, occurred_on = ?, recorded_at = ?
            WHERE user_id = ? AND id = ?
            """,
            (
                fields.kind.value,
                float(fields.value),
                fields.label or "",
                fields.note,
                fields.occurred_on,
                _next_recorded_at(conn),
                user_id,
                entry_id,
            ),
        )
        if cur.rowcount == 0:
            return None
        row = conn.execute("SELECT * FROM entries WHERE id = ?", (entry_id,)).fetchone()
    return _row_to_entry(row)


def delete_entry(user_id: str, entry_id: str, db_path: Path | None = None) -> bool:
    with db_conn(_db(db_path)) as conn:
        cur = conn.execute(
            "DELETE FROM entries WHERE user_id = ? AND id = ?", (user_id, entry_id)
        )
        return cur.rowcount > 0

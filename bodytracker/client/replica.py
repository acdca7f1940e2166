# -*- coding: utf-8 -*-
"""Client — local replica of a user's entry collection.

Writes are applied to the replica immediately and announced as ``cache``
snapshots with pending writes; once the backend confirms, a ``server``
snapshot follows. Every snapshot carries the whole current result set.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple
from uuid import uuid4

from ..entries.models import Entry, EntryFields
from .backend import EntryBackend, StoreError

logger = logging.getLogger(__name__)


class SnapshotOrigin(str, Enum):
    cache = "cache"
    server = "server"


@dataclass(frozen=True)
class Snapshot:
    entries: Tuple[Entry, ...]
    origin: SnapshotOrigin
    has_pending_writes: bool


@dataclass(frozen=True)
class _PendingOp:
    action: str  # create | update | delete
    entry_id: str
    entry: Optional[Entry] = None


SnapshotCallback = Callable[[Snapshot], None]
ErrorCallback = Callable[[StoreError], None]


class ListenerRegistration:
    def __init__(
        self,
        collection: "ReplicatedCollection",
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback],
    ) -> None:
        self._collection = collection
        self.on_snapshot = on_snapshot
        self.on_error = on_error
        self.active = True

    def remove(self) -> None:
        if not self.active:
            return
        self.active = False
        self._collection._detach(self)


def _local_entry(entry_id: str, fields: EntryFields) -> Entry:
    return Entry(id=entry_id, recorded_at=None, **fields.model_dump())


class ReplicatedCollection:
    def __init__(self, backend: EntryBackend) -> None:
        self._backend = backend
        self._confirmed: Dict[str, Entry] = {}
        self._ops: Dict[int, _PendingOp] = {}
        self._op_ids = itertools.count(1)
        self._write_seq = 0
        self._listeners: List[ListenerRegistration] = []
        self._sync_task: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def has_pending_writes(self) -> bool:
        return bool(self._ops)

    def _view(self) -> Tuple[Entry, ...]:
        docs = dict(self._confirmed)
        for op in self._ops.values():
            if op.action == "delete":
                docs.pop(op.entry_id, None)
            elif op.action == "update" and op.entry_id not in docs:
                continue
            else:
                docs[op.entry_id] = op.entry
        return tuple(docs.values())

    def snapshot(self, origin: SnapshotOrigin) -> Snapshot:
        return Snapshot(entries=self._view(), origin=origin, has_pending_writes=self.has_pending_writes)

    # ---- listeners ----

    def listen(
        self,
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> ListenerRegistration:
        """Deliver the cached view now and a server snapshot once loaded."""
        if self._closed:
            raise RuntimeError("collection is closed")
        reg = ListenerRegistration(self, on_snapshot, on_error)
        self._listeners.append(reg)
        loop = asyncio.get_running_loop()
        loop.call_soon(self._deliver, reg, self.snapshot(SnapshotOrigin.cache))
        if self._sync_task is None or self._sync_task.done():
            self._sync_task = loop.create_task(self._initial_sync())
        return reg

    def _detach(self, reg: ListenerRegistration) -> None:
        if reg in self._listeners:
            self._listeners.remove(reg)

    def _deliver(self, reg: ListenerRegistration, snapshot: Snapshot) -> None:
        # Checked at delivery time so nothing arrives after remove().
        if reg.active:
            reg.on_snapshot(snapshot)

    def _broadcast(self, origin: SnapshotOrigin) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot(origin)
        loop = asyncio.get_running_loop()
        for reg in list(self._listeners):
            loop.call_soon(self._deliver, reg, snapshot)

    def _fail_listeners(self, exc: StoreError) -> None:
        for reg in list(self._listeners):
            reg.remove()
            if reg.on_error is not None:
                reg.on_error(exc)

    async def _initial_sync(self) -> None:
        try:
            await self.refresh()
        except StoreError as exc:
            logger.warning("Entry listing failed: %s", exc)
            self._fail_listeners(exc)
        except Exception as exc:
            logger.exception("Unexpected error listing entries")
            self._fail_listeners(StoreError(f"listing failed: {exc}"))

    async def refresh(self) -> Snapshot:
        """Reload confirmed state from the backend and announce it."""
        while True:
            seq = self._write_seq
            entries = await self._backend.list_entries()
            if seq == self._write_seq:
                break
            # A write was confirmed while listing; the listing may predate it.
            logger.debug("Discarding stale listing, reloading")
        self._confirmed = {e.id: e for e in entries}
        self._broadcast(SnapshotOrigin.server)
        return self.snapshot(SnapshotOrigin.server)

    # ---- writes ----

    def _rollback(self, op_id: int) -> None:
        self._ops.pop(op_id, None)
        self._broadcast(SnapshotOrigin.cache)

    async def _apply(self, op: _PendingOp, commit: Callable[[], Awaitable[Any]]) -> Any:
        if self._closed:
            raise StoreError("collection is closed")
        op_id = next(self._op_ids)
        self._ops[op_id] = op
        self._broadcast(SnapshotOrigin.cache)
        try:
            result = await commit()
        except StoreError:
            self._rollback(op_id)
            raise
        except Exception as exc:
            self._rollback(op_id)
            logger.exception("Unexpected error during %s of %s", op.action, op.entry_id)
            raise StoreError(f"{op.action} failed: {exc}") from exc
        except asyncio.CancelledError:
            self._rollback(op_id)
            raise
        self._ops.pop(op_id, None)
        self._write_seq += 1
        if op.action == "delete":
            self._confirmed.pop(op.entry_id, None)
        else:
            self._confirmed[result.id] = result
        self._broadcast(SnapshotOrigin.server)
        return result

    async def add(self, fields: EntryFields) -> Entry:
        local_id = f"pending-{uuid4().hex}"
        op = _PendingOp("create", local_id, _local_entry(local_id, fields))
        return await self._apply(op, lambda: self._backend.create(fields))

    async def update(self, entry_id: str, fields: EntryFields) -> Entry:
        op = _PendingOp("update", entry_id, _local_entry(entry_id, fields))
        return await self._apply(op, lambda: self._backend.update(entry_id, fields))

    async def remove(self, entry_id: str) -> None:
        await self._apply(_PendingOp("delete", entry_id), lambda: self._backend.delete(entry_id))

    def close(self) -> None:
        self._closed = True
        for reg in list(self._listeners):
            reg.remove()
        if self._sync_task is not None and not self._sync_task.done():
            self._sync_task.cancel()
        self._sync_task = None

# -*- coding: utf-8 -*-
"""Sync — reconcile replica snapshots into the one list the UI renders.

Each accepted snapshot replaces the list wholesale; nothing is merged
incrementally. A snapshot is accepted when it comes from the server, when
it carries no pending writes, or when nothing has been shown yet (first
paint must not wait for the network).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

from ..client.backend import StoreError
from ..client.replica import ListenerRegistration, ReplicatedCollection, Snapshot, SnapshotOrigin
from ..entries.models import Entry, EntryFields

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WriteResult:
    ok: bool
    entry_id: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class SyncFailure:
    message: str
    error: Optional[BaseException] = None


def order_entries(entries: Iterable[Entry]) -> Tuple[Entry, ...]:
    """Newest day first; within a day, newest write first (pending writes on top)."""

    def key(entry: Entry) -> Tuple[str, bool, float]:
        ts = entry.recorded_at
        return (entry.occurred_on, ts is None, ts.timestamp() if ts is not None else 0.0)

    return tuple(sorted(entries, key=key, reverse=True))


class Subscription:
    def __init__(self, coordinator: "SyncCoordinator") -> None:
        self._coordinator = coordinator
        self._registration: Optional[ListenerRegistration] = None
        self.active = True

    def cancel(self) -> None:
        if not self.active:
            return
        self.active = False
        if self._registration is not None:
            self._registration.remove()
            self._registration = None
        self._coordinator._released(self)


class SyncCoordinator:
    def __init__(self, collection: ReplicatedCollection) -> None:
        self._collection = collection
        self._entries: Tuple[Entry, ...] = ()
        self._subscription: Optional[Subscription] = None

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return self._entries

    @property
    def subscribed(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def find(self, entry_id: str) -> Optional[Entry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def accepts(self, snapshot: Snapshot) -> bool:
        return (
            snapshot.origin is SnapshotOrigin.server
            or not snapshot.has_pending_writes
            or not self._entries
        )

    def subscribe(
        self,
        on_change: Callable[[Tuple[Entry, ...]], None],
        on_error: Optional[Callable[[SyncFailure], None]] = None,
    ) -> Subscription:
        """Start live delivery; a previous subscription is cancelled first."""
        if self._subscription is not None:
            self._subscription.cancel()
        sub = Subscription(self)
        self._subscription = sub

        def handle_snapshot(snapshot: Snapshot) -> None:
            if not sub.active:
                return
            if not self.accepts(snapshot):
                logger.debug(
                    "Suppressed %s snapshot with pending writes (%d entries)",
                    snapshot.origin.value,
                    len(snapshot.entries),
                )
                return
            self._entries = order_entries(snapshot.entries)
            logger.info("Entries synced from %s (%d total)", snapshot.origin.value, len(self._entries))
            on_change(self._entries)

        def handle_error(exc: StoreError) -> None:
            if not sub.active:
                return
            logger.warning("Entry subscription failed: %s", exc)
            sub.cancel()
            if on_error is not None:
                on_error(SyncFailure(str(exc), exc))

        sub._registration = self._collection.listen(handle_snapshot, handle_error)
        return sub

    def _released(self, sub: Subscription) -> None:
        if self._subscription is sub:
            self._subscription = None

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()

    async def create(self, fields: EntryFields) -> WriteResult:
        try:
            entry = await self._collection.add(fields)
        except StoreError as exc:
            logger.warning("Error saving entry: %s", exc)
            return WriteResult(ok=False, error=str(exc))
        return WriteResult(ok=True, entry_id=entry.id)

    async def update(self, entry_id: str, fields: EntryFields) -> WriteResult:
        try:
            entry = await self._collection.update(entry_id, fields)
        except StoreError as exc:
            logger.warning("Error updating entry %s: %s", entry_id, exc)
            return WriteResult(ok=False, entry_id=entry_id, error=str(exc))
        return WriteResult(ok=True, entry_id=entry.id)

    async def delete(self, entry_id: str) -> WriteResult:
        try:
            await self._collection.remove(entry_id)
        except StoreError as exc:
            logger.warning("Error deleting entry %s: %s", entry_id, exc)
            return WriteResult(ok=False, entry_id=entry_id, error=str(exc))
        return WriteResult(ok=True, entry_id=entry_id)

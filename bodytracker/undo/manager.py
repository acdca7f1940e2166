# -*- coding: utf-8 -*-
"""Undo — reversible delete with a grace window.

The delete itself is committed at the store right away. Undo recreates the
entry from its remembered fields, so the restored entry gets a new id and a
new ``recorded_at``. Only the most recent deletion can be undone.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from pydantic import ValidationError

from ..config import settings
from ..entries.models import Entry
from ..sync.coordinator import SyncCoordinator, WriteResult

logger = logging.getLogger(__name__)


class UndoState(str, Enum):
    idle = "idle"
    pending = "pending"


@dataclass
class PendingDeletion:
    entry_id: str
    entry: Entry
    handle: Optional[asyncio.TimerHandle] = field(default=None, repr=False)
    restoring: bool = False


class UndoDeleteManager:
    def __init__(
        self,
        coordinator: SyncCoordinator,
        *,
        grace_seconds: Optional[float] = None,
        on_change: Optional[Callable[[Optional[PendingDeletion]], None]] = None,
    ) -> None:
        self._coordinator = coordinator
        self.grace_seconds = settings.undo_grace_seconds if grace_seconds is None else grace_seconds
        self.on_change = on_change
        self._pending: Optional[PendingDeletion] = None

    @property
    def state(self) -> UndoState:
        return UndoState.pending if self._pending is not None else UndoState.idle

    @property
    def pending(self) -> Optional[PendingDeletion]:
        return self._pending

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self._pending)

    def _arm(self, pending: PendingDeletion) -> None:
        loop = asyncio.get_running_loop()
        pending.handle = loop.call_later(self.grace_seconds, self._expire, pending)

    def _disarm(self, pending: Optional[PendingDeletion]) -> None:
        if pending is not None and pending.handle is not None:
            pending.handle.cancel()
            pending.handle = None

    def _expire(self, pending: PendingDeletion) -> None:
        # A cancelled or replaced deletion must not expire the current one.
        if self._pending is not pending or pending.handle is None:
            return
        pending.handle = None
        self._pending = None
        logger.debug("Undo window closed for entry %s", pending.entry_id)
        self._notify()

    async def delete(self, entry_id: str) -> WriteResult:
        """Delete through the coordinator and open the undo window on success."""
        entry = self._coordinator.find(entry_id)
        if entry is None:
            return WriteResult(ok=False, entry_id=entry_id, error=f"Entry not found: {entry_id}")
        result = await self._coordinator.delete(entry_id)
        if not result.ok:
            return result
        # A newer deletion replaces the older one, which can no longer be undone.
        self._disarm(self._pending)
        pending = PendingDeletion(entry_id=entry.id, entry=entry)
        self._arm(pending)
        self._pending = pending
        self._notify()
        return result

    async def undo(self) -> Optional[WriteResult]:
        """Recreate the pending deletion; ``None`` when there is nothing to undo."""
        pending = self._pending
        if pending is None or pending.restoring:
            return None
        try:
            fields = pending.entry.to_fields()
        except ValidationError as exc:
            logger.warning("Cannot restore entry %s: %s", pending.entry_id, exc)
            return WriteResult(ok=False, entry_id=pending.entry_id, error=f"Invalid stored entry: {exc}")
        self._disarm(pending)
        pending.restoring = True
        result = await self._coordinator.create(fields)
        pending.restoring = False
        if self._pending is not pending:
            return result
        if result.ok:
            self._pending = None
            logger.info("Restored deleted entry %s as %s", pending.entry_id, result.entry_id)
            self._notify()
        else:
            logger.warning("Error restoring entry %s: %s", pending.entry_id, result.error)
            self._arm(pending)
        return result

    def close(self) -> None:
        self._disarm(self._pending)
        self._pending = None

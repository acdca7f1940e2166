# -*- coding: utf-8 -*-
"""Client — per-identity context owning the store handle and the sync core.

Build one on sign-in, close it on sign-out or when the view goes away.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Set

import httpx

from ..charts.aggregation import aggregate
from ..charts.models import DayBucket, WindowKind
from ..entries.models import Entry
from ..gestures.swipe import SwipeRecognizer
from ..sync.coordinator import SyncCoordinator
from ..undo.manager import UndoDeleteManager
from .backend import EntryBackend, HttpEntryBackend, SqliteEntryBackend
from .replica import ReplicatedCollection

logger = logging.getLogger(__name__)


class ClientContext:
    def __init__(self, backend: EntryBackend, *, grace_seconds: Optional[float] = None) -> None:
        self.backend = backend
        self.collection = ReplicatedCollection(backend)
        self.coordinator = SyncCoordinator(self.collection)
        self.undo = UndoDeleteManager(self.coordinator, grace_seconds=grace_seconds)
        self._tasks: Set[asyncio.Task] = set()
        self.closed = False

    @classmethod
    def for_sqlite(cls, user_id: str, db_path: Path | None = None, **kwargs) -> "ClientContext":
        return cls(SqliteEntryBackend(user_id, db_path), **kwargs)

    @classmethod
    def for_http(
        cls,
        base_url: str,
        user_id: str,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs,
    ) -> "ClientContext":
        return cls(HttpEntryBackend(base_url, user_id, transport=transport), **kwargs)

    @property
    def user_id(self) -> str:
        return self.backend.user_id

    def chart(self, kind: WindowKind | str, anchor: date) -> List[DayBucket]:
        return aggregate(self.coordinator.entries, kind, anchor)

    def _spawn(self, coro: Awaitable[object]) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def swipe_for(
        self,
        entry: Entry,
        on_edit: Optional[Callable[[Entry], object]] = None,
    ) -> SwipeRecognizer:
        """A recognizer whose delete zone goes through the undo manager."""
        return SwipeRecognizer(entry, lambda entry_id: self._spawn(self.undo.delete(entry_id)), on_edit)

    async def drain(self) -> None:
        """Wait for writes started from swipe callbacks."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.undo.close()
        for task in list(self._tasks):
            task.cancel()
        self.coordinator.close()
        self.collection.close()
        await self.backend.aclose()
        logger.debug("Client context closed for %s", self.user_id)

    async def __aenter__(self) -> "ClientContext":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

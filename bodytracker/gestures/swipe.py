# -*- coding: utf-8 -*-
"""Swipe-to-act recognizer for one diary row.

A drag to the left reveals two actions: past the edit threshold the row is
edited, past the delete threshold it is deleted. Only the offset at release
decides what fires; dragging into the delete zone and back out is a reset.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..config import settings
from ..entries.models import Entry

logger = logging.getLogger(__name__)


class SwipeState(str, Enum):
    idle = "idle"
    dragging = "dragging"


class SwipeAction(str, Enum):
    reset = "reset"
    edit = "edit"
    delete = "delete"


@dataclass
class DragSession:
    origin_x: float
    offset: float = 0.0


class SwipeRecognizer:
    def __init__(
        self,
        entry: Entry,
        on_delete: Callable[[str], object],
        on_edit: Optional[Callable[[Entry], object]] = None,
        *,
        edit_threshold: Optional[float] = None,
        delete_threshold: Optional[float] = None,
        max_swipe: Optional[float] = None,
    ) -> None:
        self.entry = entry
        self.on_delete = on_delete
        self.on_edit = on_edit
        self.edit_threshold = abs(settings.swipe_edit_threshold if edit_threshold is None else edit_threshold)
        self.delete_threshold = abs(
            settings.swipe_delete_threshold if delete_threshold is None else delete_threshold
        )
        self.max_swipe = abs(settings.swipe_max if max_swipe is None else max_swipe)
        if not 0 < self.edit_threshold <= self.delete_threshold <= self.max_swipe:
            raise ValueError("swipe thresholds must satisfy 0 < edit <= delete <= max")
        self._session: Optional[DragSession] = None

    @property
    def state(self) -> SwipeState:
        return SwipeState.dragging if self._session is not None else SwipeState.idle

    @property
    def offset(self) -> float:
        """Current horizontal offset, zero or negative."""
        return self._session.offset if self._session is not None else 0.0

    def zone(self, offset: Optional[float] = None) -> SwipeAction:
        distance = abs(self.offset if offset is None else offset)
        if distance >= self.delete_threshold:
            return SwipeAction.delete
        if distance >= self.edit_threshold:
            # Without an edit handler the middle zone does nothing.
            return SwipeAction.edit if self.on_edit is not None else SwipeAction.reset
        return SwipeAction.reset

    def press(self, x: float) -> None:
        self._session = DragSession(origin_x=x)

    def move(self, x: float) -> None:
        if self._session is None:
            return
        delta = min(x - self._session.origin_x, 0.0)
        self._session.offset = max(delta, -self.max_swipe)

    def release(self) -> SwipeAction:
        if self._session is None:
            return SwipeAction.reset
        action = self.zone(self._session.offset)
        self._session = None
        if action is SwipeAction.delete:
            logger.debug("Swipe delete on entry %s", self.entry.id)
            self.on_delete(self.entry.id)
        elif action is SwipeAction.edit and self.on_edit is not None:
            logger.debug("Swipe edit on entry %s", self.entry.id)
            self.on_edit(self.entry)
        return action

    def leave(self) -> Optional[SwipeAction]:
        """Pointer left the row: finish an active drag as if released."""
        if self._session is None:
            return None
        return self.release()

    @property
    def edit_indicator_opacity(self) -> float:
        distance = abs(self.offset)
        if distance >= self.edit_threshold:
            return 1.0
        return distance / self.edit_threshold

    @property
    def delete_indicator_opacity(self) -> float:
        return 1.0 if abs(self.offset) >= self.delete_threshold else 0.0

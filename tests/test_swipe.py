# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest
from typing import List

from bodytracker.entries.models import Entry, EntryKind
from bodytracker.gestures.swipe import SwipeAction, SwipeRecognizer, SwipeState


class TestSwipeRecognizer(unittest.TestCase):
    def setUp(self) -> None:
        self.entry = Entry(id="e1", kind=EntryKind.food, value=450, label="Bowl", occurred_on="2024-01-01")
        self.deleted: List[str] = []
        self.edited: List[Entry] = []

    def _recognizer(self, with_edit: bool = True) -> SwipeRecognizer:
        return SwipeRecognizer(
            self.entry,
            self.deleted.append,
            self.edited.append if with_edit else None,
            edit_threshold=80,
            delete_threshold=160,
            max_swipe=200,
        )

    def _drag(self, rec: SwipeRecognizer, *xs: float) -> SwipeAction:
        rec.press(300)
        for x in xs:
            rec.move(x)
        return rec.release()

    def test_light_drag_resets(self) -> None:
        rec = self._recognizer()
        self.assertEqual(self._drag(rec, 221), SwipeAction.reset)
        self.assertEqual(self.deleted, [])
        self.assertEqual(self.edited, [])

    def test_edit_threshold_is_inclusive(self) -> None:
        rec = self._recognizer()
        self.assertEqual(self._drag(rec, 220), SwipeAction.edit)
        self.assertEqual(self.edited, [self.entry])
        self.assertEqual(self.deleted, [])

    def test_delete_threshold_is_inclusive(self) -> None:
        rec = self._recognizer()
        self.assertEqual(self._drag(rec, 140), SwipeAction.delete)
        self.assertEqual(self.deleted, ["e1"])
        self.assertEqual(self.edited, [])

    def test_release_snaps_back(self) -> None:
        rec = self._recognizer()
        rec.press(300)
        rec.move(200)
        self.assertEqual(rec.state, SwipeState.dragging)
        self.assertEqual(rec.offset, -100)
        rec.release()
        self.assertEqual(rec.state, SwipeState.idle)
        self.assertEqual(rec.offset, 0)

    def test_only_final_zone_fires(self) -> None:
        rec = self._recognizer()
        self.assertEqual(self._drag(rec, 100, 250), SwipeAction.reset)
        self.assertEqual(self.deleted, [])

    def test_offset_clamped_both_ways(self) -> None:
        rec = self._recognizer()
        rec.press(300)
        rec.move(380)
        self.assertEqual(rec.offset, 0)
        rec.move(0)
        self.assertEqual(rec.offset, -200)
        self.assertEqual(rec.release(), SwipeAction.delete)

    def test_missing_edit_callback_collapses_to_reset(self) -> None:
        rec = self._recognizer(with_edit=False)
        self.assertEqual(self._drag(rec, 200), SwipeAction.reset)
        self.assertEqual(self.deleted, [])
        self.assertEqual(self._drag(rec, 100), SwipeAction.delete)
        self.assertEqual(self.deleted, ["e1"])

    def test_indicator_opacity(self) -> None:
        rec = self._recognizer()
        rec.press(300)
        rec.move(260)
        self.assertAlmostEqual(rec.edit_indicator_opacity, 0.5)
        self.assertEqual(rec.delete_indicator_opacity, 0.0)
        rec.move(200)
        self.assertEqual(rec.edit_indicator_opacity, 1.0)
        self.assertEqual(rec.delete_indicator_opacity, 0.0)
        rec.move(130)
        self.assertEqual(rec.edit_indicator_opacity, 1.0)
        self.assertEqual(rec.delete_indicator_opacity, 1.0)

    def test_leave_and_idle_input(self) -> None:
        rec = self._recognizer()
        self.assertIsNone(rec.leave())
        rec.move(10)
        self.assertEqual(rec.offset, 0)
        self.assertEqual(rec.release(), SwipeAction.reset)
        rec.press(300)
        rec.move(100)
        self.assertEqual(rec.leave(), SwipeAction.delete)
        self.assertEqual(rec.state, SwipeState.idle)

    def test_bad_thresholds(self) -> None:
        with self.assertRaises(ValueError):
            SwipeRecognizer(self.entry, self.deleted.append, edit_threshold=200, delete_threshold=100)


if __name__ == "__main__":
    unittest.main()

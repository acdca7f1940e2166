# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

from pydantic import ValidationError

from bodytracker.entries.models import Entry, EntryFields, EntryKind


class TestEntryFields(unittest.TestCase):
    def test_numeric_string_is_accepted(self) -> None:
        fields = EntryFields(kind="food", value="12.5", occurred_on="2024-01-01")
        self.assertEqual(fields.value, 12.5)
        self.assertEqual(fields.kind, EntryKind.food)

    def test_non_numeric_value_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            EntryFields(kind="food", value="lots", occurred_on="2024-01-01")

    def test_non_finite_value_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            EntryFields(kind="weight", value=float("nan"), occurred_on="2024-01-01")

    def test_invalid_date_is_rejected(self) -> None:
        for bad in ("2024-02-30", "yesterday", ""):
            with self.assertRaises(ValidationError):
                EntryFields(kind="weight", value=70, occurred_on=bad)

    def test_unknown_kind_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            EntryFields(kind="sleep", value=8, occurred_on="2024-01-01")

    def test_text_normalization(self) -> None:
        fields = EntryFields(kind="exercise", value=30, label="  Run ", note="   ", occurred_on="2024-01-01")
        self.assertEqual(fields.label, "Run")
        self.assertIsNone(fields.note)
        self.assertEqual(EntryFields(kind="weight", value=70, label=None, occurred_on="2024-01-01").label, "")

    def test_entry_round_trips_to_fields(self) -> None:
        entry = Entry(id="x", kind=EntryKind.food, value=450, label="Bowl", note="tasty", occurred_on="2024-01-01")
        fields = entry.to_fields()
        self.assertEqual(
            fields.model_dump(),
            {"kind": EntryKind.food, "value": 450.0, "label": "Bowl", "note": "tasty", "occurred_on": "2024-01-01"},
        )
        self.assertEqual(entry.unit, "kcal")

    def test_to_fields_rejects_malformed_stored_date(self) -> None:
        entry = Entry(id="x", kind=EntryKind.weight, value=70, occurred_on="2024-02-30")
        with self.assertRaises(ValidationError):
            entry.to_fields()


if __name__ == "__main__":
    unittest.main()

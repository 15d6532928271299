"""Tests for action_catalog.py: lookup tables and identifier resolution."""

import sys
import unittest
from pathlib import Path

# Ensure src/ is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from action_catalog import (
    ACTION_INFO,
    CF_CONDITIONAL,
    CF_MENU,
    CF_REPEAT_EACH,
    CONDITION_PHRASES,
    DEFAULT_ICON,
    condition_phrase,
    icon_for_pattern,
    lookup_action,
    resolve_identifier,
)


class TestResolveIdentifier(unittest.TestCase):

    def test_full_identifier_passes_through(self):
        self.assertEqual(resolve_identifier("is.workflow.actions.gettext"), "is.workflow.actions.gettext")

    def test_third_party_passes_through(self):
        ident = "com.apple.mobilenotes.SharingExtension"
        self.assertEqual(resolve_identifier(ident), ident)

    def test_aliases(self):
        self.assertEqual(resolve_identifier("conditional"), CF_CONDITIONAL)
        self.assertEqual(resolve_identifier("choose-from-menu"), CF_MENU)
        self.assertEqual(resolve_identifier("repeat-each"), CF_REPEAT_EACH)

    def test_short_name(self):
        self.assertEqual(resolve_identifier("gettext"), "is.workflow.actions.gettext")

    def test_lookup_by_short_name(self):
        self.assertEqual(lookup_action("alert").display_name, "Show Alert")
        self.assertIsNone(lookup_action("com.example.unknown"))


class TestTables(unittest.TestCase):

    def test_tables_are_read_only(self):
        with self.assertRaises(TypeError):
            ACTION_INFO["x"] = None  # type: ignore[index]
        with self.assertRaises(TypeError):
            CONDITION_PHRASES[999] = "nope"  # type: ignore[index]

    def test_subtitle_keys_are_tuples(self):
        for identifier, info in ACTION_INFO.items():
            with self.subTest(identifier=identifier):
                self.assertIsInstance(info.subtitle_keys, tuple)
                self.assertTrue(info.display_name)
                self.assertTrue(info.icon_name)

    def test_condition_phrases(self):
        self.assertEqual(condition_phrase(2, "Notes"), "contains Notes")
        self.assertEqual(condition_phrase(100), "has any value")
        self.assertEqual(condition_phrase(101, "ignored"), "does not have any value")
        self.assertEqual(condition_phrase(203), "is less than or equal to ?")
        self.assertEqual(condition_phrase(42), "condition #42")

    def test_icon_for_pattern_default(self):
        self.assertEqual(icon_for_pattern("com.example.nothing"), DEFAULT_ICON)


if __name__ == "__main__":
    unittest.main()

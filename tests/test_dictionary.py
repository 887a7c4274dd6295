# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Unit tests for dictionary module."""

import os
import sys
import tempfile
import unittest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from dictionary import DictionaryLoader, DEFAULT_DICTIONARY_PATHS


class TestDictionaryLoader(unittest.TestCase):
    """Tests for DictionaryLoader."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, "words.txt")
        with open(self.path, 'w', encoding='utf-8') as f:
            f.write("kettu\norava\n a \n\nmänty\n")

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_default_registry(self):
        self.assertIn("fi-kotus-2024", DEFAULT_DICTIONARY_PATHS)
        self.assertTrue(DictionaryLoader().is_registered("fi-kotus-2024"))

    def test_load_uppercases_and_filters_short(self):
        loader = DictionaryLoader({"test": self.path})
        self.assertEqual(loader.load("test"), {"KETTU", "ORAVA", "MÄNTY"})

    def test_none_and_unknown_names(self):
        loader = DictionaryLoader({"test": self.path})
        self.assertIsNone(loader.load(None))
        self.assertIsNone(loader.load("nope"))

    def test_unreadable_file_gives_empty_set(self):
        loader = DictionaryLoader({"missing": os.path.join(self.tmpdir.name, "x.txt")})
        with self.assertLogs('dictionary', level='WARNING'):
            self.assertEqual(loader.load("missing"), set())

    def test_relative_path_uses_base_dir(self):
        loader = DictionaryLoader({"test": "words.txt"}, base_dir=self.tmpdir.name)
        self.assertIn("KETTU", loader.load("test"))

    def test_cached_after_first_load(self):
        loader = DictionaryLoader({"test": self.path})
        first = loader.load("test")
        os.remove(self.path)
        self.assertIs(loader.load("test"), first)


if __name__ == '__main__':
    unittest.main()

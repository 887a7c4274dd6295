# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Unit tests for word_validator module."""

import os
import sys
import unittest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from models import GameData
from word_validator import (
    MissingDictionaryPolicy, WordType, REASON_TOO_SHORT,
    REASON_NOT_A_VALID_WORD, is_valid_word, validate_word
)


def make_game(**overrides):
    data = dict(
        id="2024-11-01",
        grid=[["K", "E", "T"], ["U", "T", "T"]],
        solution_words=["KETTU", "AB"],
        additional_valid_words=["TUTKA"],
        valid_words_dictionary_name="fi-kotus-2024",
    )
    data.update(overrides)
    return GameData(**data)


class TestValidateWord(unittest.TestCase):
    """Tests for validate_word."""

    def setUp(self):
        self.game = make_game()
        self.dictionary = {"ORAVA", "KUUSI"}

    def test_solution_word(self):
        result = validate_word(self.game, "KETTU", self.dictionary)
        self.assertTrue(result.valid)
        self.assertEqual(result.word_type, WordType.SOLUTION)
        self.assertIsNone(result.reason)

    def test_case_insensitive(self):
        result = validate_word(self.game, "  kettu ", self.dictionary)
        self.assertTrue(result)
        self.assertEqual(result.word, "KETTU")

    def test_additional_word(self):
        result = validate_word(self.game, "tutka", self.dictionary)
        self.assertEqual(result.word_type, WordType.ADDITIONAL)

    def test_dictionary_word(self):
        result = validate_word(self.game, "orava", self.dictionary)
        self.assertEqual(result.word_type, WordType.DICTIONARY)

    def test_too_short_even_if_solution(self):
        """A 2-letter solution word is still rejected at min length 3."""
        result = validate_word(self.game, "AB", self.dictionary)
        self.assertFalse(result.valid)
        self.assertEqual(result.reason, REASON_TOO_SHORT)

    def test_unknown_word(self):
        result = validate_word(self.game, "HIRVI", self.dictionary)
        self.assertFalse(result.valid)
        self.assertEqual(result.reason, REASON_NOT_A_VALID_WORD)
        self.assertIsNone(result.word_type)

    def test_empty_word(self):
        self.assertFalse(validate_word(self.game, "", self.dictionary).valid)
        self.assertFalse(validate_word(self.game, None, self.dictionary).valid)

    def test_empty_dictionary_rejects(self):
        """An unreadable dictionary loads as an empty set."""
        self.assertFalse(is_valid_word(self.game, "HIRVI", set()))

    def test_missing_dictionary_accept(self):
        result = validate_word(
            self.game, "HIRVI", None, MissingDictionaryPolicy.ACCEPT
        )
        self.assertTrue(result.valid)
        self.assertEqual(result.word_type, WordType.DICTIONARY)

    def test_missing_dictionary_reject(self):
        self.assertFalse(is_valid_word(
            self.game, "HIRVI", None, MissingDictionaryPolicy.REJECT
        ))
        # Solution words stay valid
        self.assertTrue(is_valid_word(
            self.game, "KETTU", None, MissingDictionaryPolicy.REJECT
        ))

    def test_missing_dictionary_still_checks_length(self):
        self.assertFalse(is_valid_word(
            self.game, "XY", None, MissingDictionaryPolicy.ACCEPT
        ))

    def test_custom_min_length(self):
        game = make_game(min_valid_word_length=2)
        self.assertTrue(is_valid_word(game, "ab", set()))


if __name__ == '__main__':
    unittest.main()

# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Unit tests for game_generator module."""

import asyncio
import os
import random
import sys
import time
import unittest
from unittest.mock import patch

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from ai_word_generator import Theme, ThemeWords
from game_generator import GameGenerator, GenerationFailed, prepare_candidate_words
from grid_packer import GridPacker, InvalidGeneratorParameters, PlacementExhausted
from models import are_adjacent
from word_selector import NoValidCombination


class FakeWordSource:
    """Word source returning a fixed word list."""

    def __init__(self, words, theme="Test"):
        self.words = words
        self.theme = theme
        self.languages = []

    async def get_theme_words(self, language):
        self.languages.append(language)
        if self.words is None:
            return None
        return ThemeWords(Theme(self.theme, "", language), list(self.words))


class TestPrepareCandidateWords(unittest.TestCase):

    def test_normalize_dedupe_filter(self):
        words = ["kettu", "KETTU", " orava ", "ox", "karhu-emo", "r2d2", ""]
        self.assertEqual(
            prepare_candidate_words(words, 3),
            ["KETTU", "ORAVA", "KARHUEMO"]
        )


class TestGameGenerator(unittest.IsolatedAsyncioTestCase):
    """Tests for GameGenerator.generate_game_data."""

    async def test_two_by_two(self):
        source = FakeWordSource(["abc", "cde", "ab", "cd"])
        generator = GameGenerator(
            source,
            language_dictionaries={"finnish": "fi-kotus-2024"},
            min_valid_word_length=2,
            rng=random.Random(0),
        )

        game = await generator.generate_game_data("2024-11-01", "finnish", 2, 2)

        self.assertEqual(source.languages, ["finnish"])
        self.assertEqual(game.id, "2024-11-01")
        self.assertEqual(game.solution_words, ["AB", "CD"])
        self.assertEqual(game.min_valid_word_length, 2)
        self.assertEqual(game.additional_valid_words, [])
        self.assertEqual(game.valid_words_dictionary_name, "fi-kotus-2024")
        self.assertEqual(sorted(c for row in game.grid for c in row), ["A", "B", "C", "D"])
        self.assertGreater(game.timestamp, 0)

    async def test_exact_fit_and_coverage(self):
        words = ["CAT", "DOG", "EMU", "YAK", "OWL", "BEAR", "LION"]
        generator = GameGenerator(FakeWordSource(words), rng=random.Random(3))

        for _ in range(10):
            game = await generator.generate_game_data("g", "english", 3, 3)
            self.assertEqual(sum(len(w) for w in game.solution_words), 9)
            self.assertEqual(len(game.grid), 3)
            for row in game.grid:
                self.assertEqual(len(row), 3)
                for cell in row:
                    self.assertEqual(len(cell), 1)
                    self.assertTrue(cell.isupper())

    async def test_language_without_dictionary(self):
        generator = GameGenerator(
            FakeWordSource(["ABC", "DEF"]),
            language_dictionaries={"finnish": "fi-kotus-2024", "english": None},
        )
        game = await generator.generate_game_data("g", "english", 2, 3)
        self.assertIsNone(game.valid_words_dictionary_name)

    async def test_source_failure(self):
        generator = GameGenerator(FakeWordSource(None))
        with self.assertRaises(GenerationFailed):
            await generator.generate_game_data("g", "finnish", 2, 2)

    async def test_no_usable_words(self):
        generator = GameGenerator(FakeWordSource(["ab", "c-d", "1234"]))
        with self.assertRaises(GenerationFailed):
            await generator.generate_game_data("g", "finnish", 2, 2)

    async def test_no_combination(self):
        generator = GameGenerator(FakeWordSource(["ABC", "DEFGH"]))
        with self.assertRaises(NoValidCombination):
            await generator.generate_game_data("g", "finnish", 2, 2)

    async def test_invalid_dimensions(self):
        generator = GameGenerator(FakeWordSource(["ABC"]), min_valid_word_length=3)
        with self.assertRaises(InvalidGeneratorParameters):
            await generator.generate_game_data("g", "finnish", 1, 3)

    async def test_bad_shape_rejected_before_word_source(self):
        for rows, columns in ((-1, 5), (1, 10), (0, 4), (True, 4)):
            source = FakeWordSource(["ABC", "DEF"])
            generator = GameGenerator(source)
            with self.assertRaises(InvalidGeneratorParameters):
                await generator.generate_game_data("g", "finnish", rows, columns)
            self.assertEqual(source.languages, [])

    async def test_cancelled_generation_stops_packing(self):
        calls = []

        def never_places(words, rows, columns, rng):
            calls.append(1)
            time.sleep(0.001)
            return None

        generator = GameGenerator(
            FakeWordSource(["AB", "CD"]), min_valid_word_length=2
        )
        with patch('grid_packer.attempt_placement', never_places):
            with self.assertRaises(asyncio.TimeoutError):
                await asyncio.wait_for(
                    generator.generate_game_data("g", "finnish", 2, 2), timeout=0.05
                )
            await asyncio.sleep(0.05)
            attempts_after_cancel = len(calls)
            await asyncio.sleep(0.05)

        self.assertGreater(attempts_after_cancel, 0)
        self.assertEqual(len(calls), attempts_after_cancel)

    async def test_serpentine_strategy(self):
        generator = GameGenerator(
            FakeWordSource(["ABC", "DEF"]), placement_strategy="serpentine"
        )
        game = await generator.generate_game_data("g", "finnish", 2, 3)
        self.assertEqual(game.grid, [["A", "B", "C"], ["F", "E", "D"]])

    async def test_exhausted_placement_falls_back_to_serpentine(self):
        original = GridPacker.generate

        def exhausted_random(packer, stop_event=None):
            if packer.strategy == "random":
                raise PlacementExhausted(packer.max_attempts)
            return original(packer, stop_event)

        generator = GameGenerator(
            FakeWordSource(["ABC", "DEF"]), max_placement_attempts=5
        )
        with patch.object(GridPacker, 'generate', exhausted_random):
            with self.assertLogs('game_generator', level='WARNING'):
                game = await generator.generate_game_data("g", "finnish", 2, 3)

        self.assertEqual(game.grid, [["A", "B", "C"], ["F", "E", "D"]])

    async def test_solution_words_trace_adjacent_paths(self):
        """Each solution word can be traced through adjacent grid cells."""
        generator = GameGenerator(
            FakeWordSource(["KETTU", "ORAVA"]), rng=random.Random(11)
        )
        game = await generator.generate_game_data("g", "finnish", 2, 5)
        cells = [c for row in game.grid for c in row]

        def traceable(word, used, previous):
            if not word:
                return True
            for index, letter in enumerate(cells):
                if letter != word[0] or index in used:
                    continue
                if previous is not None and not are_adjacent(previous, index, 5):
                    continue
                if traceable(word[1:], used | {index}, index):
                    return True
            return False

        for word in game.solution_words:
            self.assertTrue(traceable(word, set(), None), word)


if __name__ == '__main__':
    unittest.main()

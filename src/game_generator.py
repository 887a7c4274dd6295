# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Game assembly.

Builds one day's puzzle from a themed word pool:
1. Ask the word source for a theme and its candidate words
2. Select a word combination that exactly fills the grid
3. Pack the combination into the grid
4. Assemble the GameData record

Persistence is left to the caller (see game_service).
"""

import asyncio
import logging
import random
import threading
from typing import Dict, List, Optional

from grid_packer import (
    GridPacker, PlacementExhausted, STRATEGY_RANDOM, STRATEGY_SERPENTINE,
    check_dimensions
)
from models import (
    GameData, GridLayout, DEFAULT_ROWS, DEFAULT_COLUMNS,
    DEFAULT_MIN_VALID_WORD_LENGTH, normalize_word
)
from word_selector import select_word_combination


class GenerationFailed(Exception):
    """Raised when the word source yields no usable theme or words."""
    pass


def prepare_candidate_words(words: List[str], min_length: int) -> List[str]:
    """
    Normalize a raw word pool.

    Words are uppercased, stripped of spaces and hyphens, deduplicated in
    first-seen order, and dropped if shorter than min_length or not purely
    alphabetic.
    """
    result: List[str] = []
    for word in words:
        word = normalize_word(word or "")
        if len(word) < min_length or not word.isalpha():
            continue
        if word not in result:
            result.append(word)
    return result


class GameGenerator:
    """
    Assembles complete games from a word source.

    The word source is any object with an async
    get_theme_words(language) method returning ThemeWords or None.
    """

    def __init__(
        self,
        word_source,
        language_dictionaries: Optional[Dict[str, Optional[str]]] = None,
        placement_strategy: str = STRATEGY_RANDOM,
        max_placement_attempts: Optional[int] = None,
        min_valid_word_length: int = DEFAULT_MIN_VALID_WORD_LENGTH,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the generator.

        Args:
            word_source: Collaborator supplying themed candidate words
            language_dictionaries: Language -> dictionary name for new games
            placement_strategy: 'random' or 'serpentine'
            max_placement_attempts: Cap on random restarts before falling
                back to the serpentine layout (None = unbounded)
            min_valid_word_length: Minimum word length stored on new games
            rng: Optional random source shared by selection and packing
            logger: Logger instance (uses module logger if not provided)
        """
        self.word_source = word_source
        self.language_dictionaries = dict(language_dictionaries or {})
        self.placement_strategy = placement_strategy
        self.max_placement_attempts = max_placement_attempts
        self.min_valid_word_length = min_valid_word_length
        self.rng = rng or random.Random()
        self.logger = logger if logger else logging.getLogger(__name__)

    async def generate_game_data(
        self,
        game_id: str,
        language: str = "finnish",
        rows: int = DEFAULT_ROWS,
        columns: int = DEFAULT_COLUMNS
    ) -> GameData:
        """
        Generate a complete game.

        Args:
            game_id: Identifier for the new game (normally YYYY-MM-DD)
            language: Language of the word pool
            rows: Grid rows
            columns: Grid columns

        Returns:
            GameData ready to be stored

        Raises:
            GenerationFailed: If the word source produced nothing usable
            NoValidCombination: If no subset of words fills the grid exactly
            InvalidGeneratorParameters: If the grid shape is unusable
        """
        check_dimensions(rows, columns)

        self.logger.info(
            f"Generating game {game_id} ({language}, {rows}x{columns})"
        )

        theme_words = await self.word_source.get_theme_words(language)
        if theme_words is None:
            raise GenerationFailed(f"No theme words generated for {language}")

        words = prepare_candidate_words(theme_words.words, self.min_valid_word_length)
        if not words:
            raise GenerationFailed(
                f"Theme '{theme_words.theme.theme}' produced no usable words"
            )

        self.logger.info(f"Theme: {theme_words.theme.theme}")
        self.logger.info(f"Candidate words ({len(words)}): {', '.join(words)}")

        selected = select_word_combination(words, rows * columns, self.rng)
        self.logger.info(f"Selected words: {', '.join(selected)}")

        stop_event = threading.Event()
        try:
            layout = await asyncio.to_thread(
                self._pack, selected, rows, columns, stop_event
            )
        except asyncio.CancelledError:
            stop_event.set()
            raise
        self.logger.info(
            f"Placed {len(selected)} words in {layout.attempts} attempt(s)"
        )

        return GameData(
            id=game_id,
            grid=layout.to_grid(),
            solution_words=list(selected),
            min_valid_word_length=self.min_valid_word_length,
            additional_valid_words=[],
            valid_words_dictionary_name=self.language_dictionaries.get(language),
        )

    def _pack(
        self,
        words: List[str],
        rows: int,
        columns: int,
        stop_event: Optional[threading.Event] = None
    ) -> GridLayout:
        """Pack words with the configured strategy."""
        packer = GridPacker(
            words,
            rows,
            columns,
            strategy=self.placement_strategy,
            max_attempts=self.max_placement_attempts,
            rng=self.rng,
        )
        try:
            return packer.generate(stop_event)
        except PlacementExhausted as e:
            self.logger.warning(f"{e}; using serpentine layout")
            fallback = GridPacker(words, rows, columns, strategy=STRATEGY_SERPENTINE)
            return fallback.generate()

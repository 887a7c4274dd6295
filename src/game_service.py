# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Game service.

Ties together storage, caching, dictionaries and game assembly:
- Look up games by id, the latest game, and the list of game dates
- Create a game for a date, refusing ids that already exist
- Check submitted words and completion against a stored game
"""

import asyncio
import logging
import os
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Set

from ai_limiter import AICallbackLimiter
from ai_word_generator import AIWordGenerator
from cache import TTLCache, game_key
from completion import CompletionPolicy, CompletionResult, check_completion
from config import ServiceConfig, discover_api_key, get_model
from dictionary import DictionaryLoader
from game_generator import GameGenerator, GenerationFailed
from models import GameData
from prompt_loader import PromptLoader, PromptSchemaError
from storage import (
    AlreadyExists, GameNotFoundError, GameStore, MemoryGameStore,
    YAMLGameStore, date_score
)
from word_validator import MissingDictionaryPolicy, WordCheck, validate_word


def today_id() -> str:
    """Game id for the current UTC date."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


class GameService:
    """
    Storage-backed access to daily games.

    Usage:
        service = create_service(config)
        game = await service.create_game('2024-11-01')
        check = service.check_word('2024-11-01', 'kettu')
    """

    def __init__(
        self,
        config: ServiceConfig,
        store: GameStore,
        generator: GameGenerator,
        dictionary_loader: DictionaryLoader,
        cache: Optional[TTLCache] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.config = config
        self.store = store
        self.generator = generator
        self.dictionary_loader = dictionary_loader
        self.cache = cache if cache is not None else TTLCache(
            default_ttl=config.storage.game_cache_ttl
        )
        self.logger = logger if logger else logging.getLogger(__name__)

    def get_game(self, game_id: str) -> Optional[GameData]:
        """Return a game from the cache or the store, or None."""
        key = game_key(game_id)
        game = self.cache.get(key)
        if game is not None:
            return game

        game = self.store.get(game_id)
        if game is not None:
            self.cache.set(key, game)
        return game

    def get_latest_game_id(self) -> Optional[str]:
        return self.store.latest_id()

    def list_game_dates(self) -> List[str]:
        """Stored game ids, newest first."""
        return list(reversed(self.store.list_ids_ordered_by_date()))

    def require_game(self, game_id: Optional[str]) -> GameData:
        if game_id is None:
            game_id = self.get_latest_game_id()
        game = self.get_game(game_id) if game_id else None
        if game is None:
            raise GameNotFoundError(game_id)
        return game

    async def create_game(
        self,
        game_id: Optional[str] = None,
        language: Optional[str] = None,
        rows: Optional[int] = None,
        columns: Optional[int] = None
    ) -> GameData:
        """
        Generate and store a new game.

        Args:
            game_id: Id of the new game (default: today's date)
            language: Puzzle language (default from config)
            rows: Grid rows (default from config)
            columns: Grid columns (default from config)

        Returns:
            The stored GameData

        Raises:
            AlreadyExists: If a game with this id is already stored
            GenerationFailed: If the word source failed or generation timed out
            NoValidCombination: If the word pool cannot fill the grid
            InvalidGeneratorParameters: If the grid shape is unusable
        """
        game_id = game_id or today_id()
        language = language or self.config.puzzle.language
        rows = rows or self.config.puzzle.rows
        columns = columns or self.config.puzzle.columns

        if self.store.exists(game_id):
            raise AlreadyExists(game_id)

        timeout = self.config.generation.timeout_seconds
        try:
            game = await asyncio.wait_for(
                self.generator.generate_game_data(game_id, language, rows, columns),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            raise GenerationFailed(
                f"Generation of game {game_id} exceeded {timeout} seconds"
            )

        self.store.put(game_id, game)
        self.store.add_date(game_id, date_score(game_id, fallback=game.timestamp))
        self.cache.set(game_key(game_id), game)
        self.logger.info(f"Game {game_id} created and stored")
        return game

    async def get_or_create_game(self, game_id: Optional[str] = None) -> GameData:
        """
        Return an existing game, generating it when missing.

        Without an id the latest game is returned; if there are no games at
        all, today's game is generated.
        """
        if game_id is None:
            game_id = self.get_latest_game_id()
            if game_id is None:
                return await self.create_game(today_id())

        game = self.get_game(game_id)
        if game is not None:
            return game
        return await self.create_game(game_id)

    def _load_dictionary(self, game: GameData) -> Optional[Set[str]]:
        return self.dictionary_loader.load(game.valid_words_dictionary_name)

    def check_word(self, game_id: Optional[str], word: str) -> WordCheck:
        """
        Check one submitted word against a game.

        Raises:
            GameNotFoundError: If the game does not exist
        """
        game = self.require_game(game_id)
        policy = MissingDictionaryPolicy(self.config.validation.missing_dictionary_policy)
        result = validate_word(game, word, self._load_dictionary(game), policy)

        if result.valid:
            self.logger.debug(f"{game.id}: {result.word} valid ({result.word_type.value})")
        else:
            self.logger.debug(f"{game.id}: {result.word} rejected ({result.reason})")
        return result

    def check_completion(
        self,
        game_id: Optional[str],
        found_words: Iterable[str]
    ) -> CompletionResult:
        """
        Check whether found words complete a game.

        Raises:
            GameNotFoundError: If the game does not exist
        """
        game = self.require_game(game_id)
        validation = self.config.validation
        result = check_completion(
            game,
            found_words,
            policy=CompletionPolicy(validation.completion_policy),
            dictionary=self._load_dictionary(game),
            missing_dictionary_policy=MissingDictionaryPolicy(
                validation.completion_missing_dictionary_policy
            ),
            reward=validation.completion_reward,
        )
        self.logger.debug(
            f"{game.id}: completion {result.complete} "
            f"({result.letters_used}/{result.grid_cells} letters)"
        )
        return result


def create_store(config: ServiceConfig) -> GameStore:
    """Build the configured storage backend."""
    if config.storage.backend == "memory":
        return MemoryGameStore()
    return YAMLGameStore(config.storage.directory)


def create_word_source(config: ServiceConfig) -> AIWordGenerator:
    """Build the AI word source from configuration."""
    logger = logging.getLogger(__name__)

    prompt_loader = None
    if os.path.exists(config.ai.prompt_config):
        try:
            prompt_loader = PromptLoader(config.ai.prompt_config)
        except PromptSchemaError as e:
            logger.warning(f"Could not load prompts: {e}")

    api_key = discover_api_key(config)
    if not api_key:
        logger.info("No API key found; AI word generation unavailable")

    return AIWordGenerator(
        api_key=api_key,
        model=get_model(config),
        limiter=AICallbackLimiter.from_config(config.generation),
        prompt_loader=prompt_loader,
        fallback_to_builtin_themes=config.generation.fallback_to_builtin_themes,
        min_word_length=config.puzzle.min_valid_word_length,
    )


def create_service(config: ServiceConfig, word_source=None) -> GameService:
    """
    Build a GameService from configuration.

    Args:
        config: Validated ServiceConfig
        word_source: Optional word source (default: AIWordGenerator)
    """
    if word_source is None:
        word_source = create_word_source(config)

    generator = GameGenerator(
        word_source,
        language_dictionaries=config.dictionaries.language_dictionaries,
        placement_strategy=config.generation.placement_strategy,
        max_placement_attempts=config.generation.max_placement_attempts,
        min_valid_word_length=config.puzzle.min_valid_word_length,
    )
    dictionary_loader = DictionaryLoader(
        paths=config.dictionaries.paths,
        cache=TTLCache(default_ttl=config.dictionaries.cache_ttl, check_period=3600),
    )
    return GameService(
        config,
        store=create_store(config),
        generator=generator,
        dictionary_loader=dictionary_loader,
    )

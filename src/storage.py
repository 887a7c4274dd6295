# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Game storage backends.

Stores generated games keyed by id, plus an index of game ids ordered by
date. Two backends are provided:
- MemoryGameStore for tests and single-process use
- YAMLGameStore writing one YAML file per game and a date index file
"""

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from models import GameData


DATE_INDEX_FILE = "game_dates.yaml"


class StorageError(Exception):
    """Raised when a storage backend cannot read or write."""
    pass


class AlreadyExists(Exception):
    """Raised when creating a game whose id is already stored."""

    def __init__(self, game_id: str):
        self.game_id = game_id
        super().__init__(f"Game with ID {game_id} already exists")


class GameNotFoundError(LookupError):
    """Raised when a requested game is not stored."""

    def __init__(self, game_id: Optional[str]):
        self.game_id = game_id
        super().__init__(
            f"Game {game_id} not found" if game_id else "No games available"
        )


def date_score(game_id: str, fallback: int = 0) -> int:
    """Epoch milliseconds of an ISO date id, or fallback if not a date."""
    try:
        parsed = datetime.strptime(game_id, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError:
        return fallback
    return int(parsed.timestamp() * 1000)


class GameStore:
    """Base class for game storage backends."""

    def exists(self, game_id: str) -> bool:
        raise NotImplementedError

    def get(self, game_id: str) -> Optional[GameData]:
        raise NotImplementedError

    def put(self, game_id: str, game: GameData) -> None:
        raise NotImplementedError

    def add_date(self, game_id: str, score: int) -> None:
        raise NotImplementedError

    def list_ids_ordered_by_date(self) -> List[str]:
        """Game ids, oldest first."""
        raise NotImplementedError

    def latest_id(self) -> Optional[str]:
        ids = self.list_ids_ordered_by_date()
        return ids[-1] if ids else None


class MemoryGameStore(GameStore):
    """Dictionary-backed store."""

    def __init__(self):
        self._games: Dict[str, GameData] = {}
        self._dates: Dict[str, int] = {}

    def exists(self, game_id: str) -> bool:
        return game_id in self._games

    def get(self, game_id: str) -> Optional[GameData]:
        return self._games.get(game_id)

    def put(self, game_id: str, game: GameData) -> None:
        self._games[game_id] = game

    def add_date(self, game_id: str, score: int) -> None:
        self._dates[game_id] = score

    def list_ids_ordered_by_date(self) -> List[str]:
        return [k for k, _ in sorted(self._dates.items(), key=lambda kv: (kv[1], kv[0]))]


class YAMLGameStore(GameStore):
    """
    Stores each game as <directory>/<id>.yaml with a shared date index.

    Usage:
        store = YAMLGameStore('./games')
        store.put(game.id, game)
        store.add_date(game.id, date_score(game.id))
    """

    def __init__(self, directory: str, logger: Optional[logging.Logger] = None):
        self.directory = Path(directory)
        self.logger = logger if logger else logging.getLogger(__name__)
        os.makedirs(self.directory, exist_ok=True)

    def _game_path(self, game_id: str) -> Path:
        if not game_id or "/" in game_id or "\\" in game_id or game_id.startswith("."):
            raise StorageError(f"Invalid game id: {game_id!r}")
        return self.directory / f"{game_id}.yaml"

    def _read_yaml(self, path: Path):
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise StorageError(f"Invalid YAML in {path}: {e}")
        except OSError as e:
            raise StorageError(f"Could not read {path}: {e}")

    def _write_yaml(self, path: Path, data) -> None:
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(
                    data, f,
                    default_flow_style=False,
                    allow_unicode=True,
                    sort_keys=False,
                )
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}")

    def exists(self, game_id: str) -> bool:
        return self._game_path(game_id).exists()

    def get(self, game_id: str) -> Optional[GameData]:
        path = self._game_path(game_id)
        if not path.exists():
            return None
        data = self._read_yaml(path)
        if not isinstance(data, dict):
            raise StorageError(f"Game file {path} must contain a YAML mapping")
        try:
            return GameData.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Invalid game file {path}: {e}") from e

    def put(self, game_id: str, game: GameData) -> None:
        self._write_yaml(self._game_path(game_id), game.to_dict())
        self.logger.debug(f"Stored game {game_id} in {self.directory}")

    def _load_index(self) -> Dict[str, int]:
        path = self.directory / DATE_INDEX_FILE
        if not path.exists():
            return {}
        data = self._read_yaml(path) or {}
        if not isinstance(data, dict):
            raise StorageError(f"Date index {path} must contain a YAML mapping")
        return {str(k): int(v) for k, v in data.items()}

    def add_date(self, game_id: str, score: int) -> None:
        index = self._load_index()
        index[game_id] = score
        self._write_yaml(self.directory / DATE_INDEX_FILE, index)

    def list_ids_ordered_by_date(self) -> List[str]:
        index = self._load_index()
        return [k for k, _ in sorted(index.items(), key=lambda kv: (kv[1], kv[0]))]

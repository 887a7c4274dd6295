"""
Dictionary loading for word validation.

Dictionaries are plain text word lists (one word per line) registered by
name. Loaded sets are kept in an injected TTLCache.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Set

from cache import TTLCache, DICTIONARY_CACHE_TTL, dictionary_key


MIN_DICTIONARY_WORD_LENGTH = 2

DEFAULT_DICTIONARY_PATHS = {
    "fi-kotus-2024": "data/fi-dictionary-kotus-2024.txt",
}


class DictionaryLoader:
    """
    Loads named dictionaries into uppercase word sets.

    Usage:
        loader = DictionaryLoader({'fi-kotus-2024': 'data/fi.txt'})
        words = loader.load('fi-kotus-2024')
    """

    def __init__(
        self,
        paths: Optional[Dict[str, str]] = None,
        cache: Optional[TTLCache] = None,
        base_dir: Optional[str] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the loader.

        Args:
            paths: Mapping of dictionary name to word list file
            cache: Shared cache (a private one is created if omitted)
            base_dir: Directory that relative paths resolve against
            logger: Logger instance (uses module logger if not provided)
        """
        self.paths = dict(DEFAULT_DICTIONARY_PATHS if paths is None else paths)
        self.cache = cache if cache is not None else TTLCache(
            default_ttl=DICTIONARY_CACHE_TTL, check_period=3600
        )
        self.base_dir = Path(base_dir) if base_dir else Path.cwd()
        self.logger = logger if logger else logging.getLogger(__name__)

    def is_registered(self, name: Optional[str]) -> bool:
        return name is not None and name in self.paths

    def load(self, name: Optional[str]) -> Optional[Set[str]]:
        """
        Load a dictionary by name.

        Args:
            name: Registered dictionary name, or None

        Returns:
            Set of uppercase words; None if the name is None or unknown;
            an empty set if the file could not be read
        """
        if not self.is_registered(name):
            return None

        key = dictionary_key(name)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        path = Path(self.paths[name])
        if not path.is_absolute():
            path = self.base_dir / path

        try:
            with open(path, 'r', encoding='utf-8') as f:
                words = {
                    line.strip().upper()
                    for line in f
                    if len(line.strip()) >= MIN_DICTIONARY_WORD_LENGTH
                }
        except OSError as e:
            self.logger.warning(f"Failed to load dictionary {name} from {path}: {e}")
            return set()

        self.cache.set(key, words)
        self.logger.info(f"Loaded dictionary {name} from {path} with {len(words)} words")
        return words

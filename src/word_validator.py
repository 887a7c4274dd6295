"""
Word Validator

Decides whether a submitted word counts for a game:
1. It must be at least the game's minimum length
2. It must be a solution word, an additional valid word, or a dictionary word

An invalid word is an ordinary result, never an error.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Set

from models import GameData


class MissingDictionaryPolicy(Enum):
    """What a game without a dictionary means for dictionary-only words."""
    ACCEPT = "accept"
    REJECT = "reject"


class WordType(Enum):
    SOLUTION = "solution"
    ADDITIONAL = "additional"
    DICTIONARY = "dictionary"


REASON_TOO_SHORT = "too_short"
REASON_NOT_A_VALID_WORD = "not_a_valid_word"


@dataclass
class WordCheck:
    """Result of checking one submitted word."""
    word: str
    valid: bool
    word_type: Optional[WordType] = None
    reason: Optional[str] = None

    def __bool__(self):
        return self.valid


def classify_word(
    game: GameData,
    word: str,
    dictionary: Optional[Set[str]] = None,
    missing_dictionary_policy: MissingDictionaryPolicy = MissingDictionaryPolicy.REJECT
) -> Optional[WordType]:
    """
    Find which accepted word list a word belongs to, ignoring length.

    Solution words win over additional words, which win over the dictionary.
    """
    if word in game.solution_words:
        return WordType.SOLUTION
    if word in game.additional_valid_words:
        return WordType.ADDITIONAL
    if dictionary is None:
        if missing_dictionary_policy == MissingDictionaryPolicy.ACCEPT:
            return WordType.DICTIONARY
        return None
    if word in dictionary:
        return WordType.DICTIONARY
    return None


def validate_word(
    game: GameData,
    word: str,
    dictionary: Optional[Set[str]] = None,
    missing_dictionary_policy: MissingDictionaryPolicy = MissingDictionaryPolicy.REJECT
) -> WordCheck:
    """
    Validate a submitted word against a game.

    Args:
        game: The game being played
        word: Submitted word (case-insensitive)
        dictionary: Dictionary words, or None when the game has none
        missing_dictionary_policy: How to treat dictionary-only words when
            dictionary is None

    Returns:
        WordCheck describing the outcome
    """
    word = (word or "").strip().upper()

    if len(word) < game.min_valid_word_length:
        return WordCheck(word=word, valid=False, reason=REASON_TOO_SHORT)

    word_type = classify_word(game, word, dictionary, missing_dictionary_policy)
    if word_type is None:
        return WordCheck(word=word, valid=False, reason=REASON_NOT_A_VALID_WORD)

    return WordCheck(word=word, valid=True, word_type=word_type)


def is_valid_word(
    game: GameData,
    word: str,
    dictionary: Optional[Set[str]] = None,
    missing_dictionary_policy: MissingDictionaryPolicy = MissingDictionaryPolicy.REJECT
) -> bool:
    return validate_word(game, word, dictionary, missing_dictionary_policy).valid

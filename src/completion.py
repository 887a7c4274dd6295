"""
Completion Checker

Decides whether a player's found words win the game. Two policies:
- exact_set: the found words are exactly the solution words
- letter_sum: every found word is an accepted word and together they use
  as many letters as the grid has cells
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Set

from models import GameData
from word_validator import MissingDictionaryPolicy, classify_word


class CompletionPolicy(Enum):
    EXACT_SET = "exact_set"
    LETTER_SUM = "letter_sum"


@dataclass
class CompletionResult:
    """Outcome of a completion check."""
    complete: bool
    letters_used: int
    grid_cells: int
    reward: Optional[str] = None

    def __bool__(self):
        return self.complete


def normalize_found_words(found_words: Iterable[str]) -> List[str]:
    """Uppercase, strip and deduplicate found words, keeping first-seen order."""
    seen = []
    for word in found_words:
        word = (word or "").strip().upper()
        if word and word not in seen:
            seen.append(word)
    return seen


def check_completion(
    game: GameData,
    found_words: Iterable[str],
    policy: CompletionPolicy = CompletionPolicy.LETTER_SUM,
    dictionary: Optional[Set[str]] = None,
    missing_dictionary_policy: MissingDictionaryPolicy = MissingDictionaryPolicy.REJECT,
    reward: Optional[str] = None
) -> CompletionResult:
    """
    Check whether found words complete a game.

    Args:
        game: The game being played
        found_words: Words the player has found; order and duplicates ignored
        policy: Acceptance policy
        dictionary: Dictionary words, or None when the game has none
        missing_dictionary_policy: Used by letter_sum when dictionary is None
        reward: Value reported in the result when the game is complete

    Returns:
        CompletionResult
    """
    words = normalize_found_words(found_words)
    letters_used = sum(len(w) for w in words)
    grid_cells = game.cell_count

    if policy == CompletionPolicy.EXACT_SET:
        solution = set(w.upper() for w in game.solution_words)
        complete = (
            all(w in words for w in solution) and
            len(words) == len(solution)
        )
    else:
        all_words_valid = all(
            classify_word(game, w, dictionary, missing_dictionary_policy) is not None
            for w in words
        )
        complete = bool(words) and all_words_valid and letters_used == grid_cells

    return CompletionResult(
        complete=complete,
        letters_used=letters_used,
        grid_cells=grid_cells,
        reward=reward if complete else None,
    )

"""
Word Combination Selector

Picks the subset of candidate words whose letters exactly fill the grid:
- Enumerates every subset whose total length equals the cell count
- Scores each subset by word length and shared letters
- Chooses randomly among the three highest scoring subsets
"""

import logging
import random
from typing import List, Optional, Dict

from models import WordCombination


LENGTH_EXPONENT = 1.5
LENGTH_WEIGHT = 0.6
SHARED_LETTER_WEIGHT = 0.4
SHARED_LETTER_MULTIPLIER = 1.5
TOP_COMBINATIONS = 3

logger = logging.getLogger(__name__)


class NoValidCombination(Exception):
    """Raised when no subset of the words sums exactly to the grid size."""

    def __init__(self, target_length: int, word_count: int):
        self.target_length = target_length
        self.word_count = word_count
        super().__init__(
            f"No valid word combinations found for grid size {target_length} "
            f"({word_count} candidate words)"
        )


def calculate_difficulty_score(words: List[str]) -> float:
    """
    Score a word combination; higher means harder.

    Longer words score exponentially higher, and letters shared by two or
    more words add to the score.
    """
    if not words:
        return 0.0

    length_score = sum(len(word) ** LENGTH_EXPONENT for word in words) / len(words)

    letter_frequency: Dict[str, int] = {}
    for word in words:
        for letter in set(word.lower()):
            letter_frequency[letter] = letter_frequency.get(letter, 0) + 1

    shared_letter_score = sum(
        freq * SHARED_LETTER_MULTIPLIER
        for freq in letter_frequency.values()
        if freq > 1
    )

    return length_score * LENGTH_WEIGHT + shared_letter_score * SHARED_LETTER_WEIGHT


def find_word_combinations(
    words: List[str],
    target_length: int
) -> List[WordCombination]:
    """
    Find every order-preserving subset of words totalling target_length.

    Args:
        words: Candidate words
        target_length: Exact number of letters required

    Returns:
        List of WordCombination, in enumeration order
    """
    results: List[WordCombination] = []
    current: List[str] = []

    def search(index: int, current_length: int):
        if current_length == target_length:
            results.append(WordCombination(
                words=list(current),
                total_length=current_length,
                difficulty_score=calculate_difficulty_score(current),
            ))
            return
        if current_length > target_length or index >= len(words):
            return

        # Include the word
        word = words[index]
        if current_length + len(word) <= target_length:
            current.append(word)
            search(index + 1, current_length + len(word))
            current.pop()

        # Skip the word
        search(index + 1, current_length)

    search(0, 0)
    return results


def select_word_combination(
    words: List[str],
    target_length: int,
    rng: Optional[random.Random] = None
) -> List[str]:
    """
    Select words that exactly fill a grid of target_length cells.

    Args:
        words: Candidate words (already case-normalized)
        target_length: Grid cell count (rows * columns)
        rng: Optional random source

    Returns:
        The chosen words

    Raises:
        NoValidCombination: If no subset sums to target_length
    """
    rng = rng or random.Random()

    valid_words = [w for w in words if len(w) <= target_length]
    combinations = find_word_combinations(valid_words, target_length)

    if not combinations:
        raise NoValidCombination(target_length, len(valid_words))

    # Stable sort keeps enumeration order among equal scores
    combinations.sort(key=lambda c: c.difficulty_score, reverse=True)
    top = combinations[:min(TOP_COMBINATIONS, len(combinations))]
    selected = rng.choice(top)

    logger.debug(
        f"Found {len(combinations)} combinations for {target_length} cells, "
        f"selected {selected.words} (score {selected.difficulty_score:.2f})"
    )
    return list(selected.words)

"""
Data models for the daily word grid game.
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Tuple


DEFAULT_ROWS = 6
DEFAULT_COLUMNS = 5
DEFAULT_MIN_VALID_WORD_LENGTH = 3


@dataclass
class GameData:
    """One day's letter grid plus its accepted words and metadata."""
    id: str
    grid: List[List[str]]
    solution_words: List[str]
    min_valid_word_length: int = DEFAULT_MIN_VALID_WORD_LENGTH
    additional_valid_words: List[str] = field(default_factory=list)
    valid_words_dictionary_name: Optional[str] = None
    timestamp: int = field(default_factory=lambda: int(time.time() * 1000))

    @property
    def rows(self) -> int:
        return len(self.grid)

    @property
    def columns(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    @property
    def cell_count(self) -> int:
        return self.rows * self.columns

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the stored field names."""
        return {
            'id': self.id,
            'grid': [list(row) for row in self.grid],
            'minValidWordLength': self.min_valid_word_length,
            'solutionWords': list(self.solution_words),
            'additionalValidWords': list(self.additional_valid_words),
            'validWordsDictionaryName': self.valid_words_dictionary_name,
            'timestamp': self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameData':
        """Create GameData from a stored dictionary."""
        return cls(
            id=str(data['id']),
            grid=[[str(c) for c in row] for row in data['grid']],
            solution_words=list(data.get('solutionWords', [])),
            min_valid_word_length=int(data.get(
                'minValidWordLength', DEFAULT_MIN_VALID_WORD_LENGTH
            )),
            additional_valid_words=list(data.get('additionalValidWords', [])),
            valid_words_dictionary_name=data.get('validWordsDictionaryName'),
            timestamp=data.get('timestamp', 0),
        )

    def to_string(self) -> str:
        """Convert grid to string representation."""
        return "\n".join(" ".join(row) for row in self.grid)


@dataclass
class WordCombination:
    """A candidate subset of words that exactly fills the grid."""
    words: List[str]
    total_length: int
    difficulty_score: float = 0.0


@dataclass
class GridLayout:
    """
    A finished placement: flat cell letters plus the cell path of each word.

    paths[i] lists the flat cell indices used by words[i], in letter order.
    """
    rows: int
    columns: int
    words: List[str]
    cells: List[str]
    paths: List[List[int]]
    attempts: int = 1

    def to_grid(self) -> List[List[str]]:
        """Reshape the flat cells into rows of uppercase letters."""
        return [
            [c.upper() for c in self.cells[r * self.columns:(r + 1) * self.columns]]
            for r in range(self.rows)
        ]


# Adjacency utilities
def cell_position(index: int, columns: int) -> Tuple[int, int]:
    """Convert a flat cell index to (row, col)."""
    return divmod(index, columns)


def are_adjacent(first: int, second: int, columns: int) -> bool:
    """
    Check king-move adjacency of two flat cell indices.

    Cells are adjacent when they differ by at most one row and one
    column and are not the same cell.
    """
    if first == second:
        return False
    r1, c1 = cell_position(first, columns)
    r2, c2 = cell_position(second, columns)
    return abs(r1 - r2) <= 1 and abs(c1 - c2) <= 1


def adjacent_cells(index: int, rows: int, columns: int) -> List[int]:
    """List the up-to-8 neighbours of a cell, bounded by the grid edges."""
    row, col = cell_position(index, columns)
    result = []
    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            if dr == 0 and dc == 0:
                continue
            nr, nc = row + dr, col + dc
            if 0 <= nr < rows and 0 <= nc < columns:
                result.append(nr * columns + nc)
    return result


def normalize_word(word: str) -> str:
    """Uppercase a word and drop whitespace and hyphens."""
    return word.strip().upper().replace(" ", "").replace("-", "")

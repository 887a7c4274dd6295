"""
Grid Packer

Lays out an exact-fit word list on a letter grid:
- Every word traces a path of king-move adjacent cells
- No cell is shared between words
- Every cell of the grid receives exactly one letter

The random strategy draws free cells at random and restarts the whole
attempt when a letter cannot be placed. The serpentine strategy walks the
grid row by row, alternating direction.
"""

import logging
import random
import threading
from typing import List, Optional

from models import GridLayout, are_adjacent


# Random draws allowed while placing a single letter
MAX_DRAWS_PER_LETTER = 1000

STRATEGY_RANDOM = "random"
STRATEGY_SERPENTINE = "serpentine"
VALID_STRATEGIES = [STRATEGY_RANDOM, STRATEGY_SERPENTINE]

MIN_DIMENSION = 2

logger = logging.getLogger(__name__)


class InvalidGeneratorParameters(Exception):
    """Raised when the packer is constructed with unusable inputs."""
    pass


class PlacementCancelled(Exception):
    """Raised when a stop event is set between placement attempts."""
    pass


class PlacementExhausted(Exception):
    """Raised when an explicit attempt cap is reached without a layout."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"No valid layout found after {attempts} attempts")


def dimension_errors(rows, columns) -> List[str]:
    """Return problems with a grid shape (empty when usable)."""
    errors = []
    for name, value in (("Row", rows), ("Column", columns)):
        if isinstance(value, bool) or not isinstance(value, int):
            errors.append(f"{name} count must be integer, got {value!r}")
        elif value < MIN_DIMENSION:
            errors.append(f"{name} count must be at least {MIN_DIMENSION}, got {value}")
    return errors


def check_dimensions(rows, columns) -> None:
    """
    Validate a grid shape.

    Raises:
        InvalidGeneratorParameters: If rows or columns is not an integer
            of at least MIN_DIMENSION
    """
    errors = dimension_errors(rows, columns)
    if errors:
        raise InvalidGeneratorParameters("; ".join(errors))


def _place_letter(
    cells: List[Optional[str]],
    previous: Optional[int],
    columns: int,
    rng: random.Random
) -> Optional[int]:
    """
    Find a free cell for the next letter of a word.

    Returns the chosen cell index, or None when every free cell has been
    rejected or the draw ceiling is reached.
    """
    free = [i for i, c in enumerate(cells) if c is None]
    rejected = set()

    for _ in range(MAX_DRAWS_PER_LETTER):
        if len(rejected) >= len(free):
            return None

        candidate = rng.choice(free)
        if candidate in rejected:
            continue

        if previous is None or are_adjacent(candidate, previous, columns):
            return candidate
        rejected.add(candidate)

    return None


def attempt_placement(
    words: List[str],
    rows: int,
    columns: int,
    rng: Optional[random.Random] = None
) -> Optional[GridLayout]:
    """
    Make one randomized placement attempt.

    Args:
        words: Words whose letters exactly fill rows * columns cells
        rows: Grid rows
        columns: Grid columns
        rng: Optional random source

    Returns:
        GridLayout on success, None if some letter could not be placed
    """
    rng = rng or random.Random()
    cells: List[Optional[str]] = [None] * (rows * columns)
    paths: List[List[int]] = []

    for word in words:
        path: List[int] = []
        previous = None
        for letter in word:
            cell = _place_letter(cells, previous, columns, rng)
            if cell is None:
                return None
            cells[cell] = letter
            path.append(cell)
            previous = cell
        paths.append(path)

    if any(c is None for c in cells):
        return None

    return GridLayout(
        rows=rows,
        columns=columns,
        words=list(words),
        cells=list(cells),
        paths=paths,
    )


def serpentine_placement(
    words: List[str],
    rows: int,
    columns: int
) -> GridLayout:
    """
    Place words in reading order along a boustrophedon path.

    Even rows run left to right and odd rows right to left, so consecutive
    letters always land in adjacent cells.
    """
    order = []
    for row in range(rows):
        cols = range(columns) if row % 2 == 0 else range(columns - 1, -1, -1)
        order.extend(row * columns + col for col in cols)

    cells: List[str] = [""] * (rows * columns)
    paths: List[List[int]] = []
    position = 0
    for word in words:
        path = []
        for letter in word:
            cell = order[position]
            cells[cell] = letter
            path.append(cell)
            position += 1
        paths.append(path)

    return GridLayout(
        rows=rows,
        columns=columns,
        words=list(words),
        cells=cells,
        paths=paths,
    )


class GridPacker:
    """Packs an exact-fit word list into a fully filled letter grid."""

    def __init__(
        self,
        words: List[str],
        rows: int,
        columns: int,
        strategy: str = STRATEGY_RANDOM,
        max_attempts: Optional[int] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize and validate the packer.

        Args:
            words: Words to place, in placement order
            rows: Grid rows (>= 2)
            columns: Grid columns (>= 2)
            strategy: 'random' or 'serpentine'
            max_attempts: Optional cap on random restarts (None = unbounded)
            rng: Optional random source

        Raises:
            InvalidGeneratorParameters: If the inputs cannot form a grid
        """
        errors = dimension_errors(rows, columns)

        if strategy not in VALID_STRATEGIES:
            errors.append(
                f"Invalid strategy '{strategy}'. Must be one of: {VALID_STRATEGIES}"
            )

        if max_attempts is not None and max_attempts < 1:
            errors.append("max_attempts must be positive")

        self.words = [(w or "").strip().upper() for w in words]
        self.character_count = sum(len(w) for w in self.words)

        if self.character_count == 0:
            errors.append("Words cannot be empty")
        elif not errors:
            cell_count = rows * columns
            if self.character_count > cell_count:
                errors.append(
                    f"Too many characters: {self.character_count} for {cell_count} cells"
                )
            elif self.character_count < cell_count:
                errors.append(
                    f"Too few characters: {self.character_count} for {cell_count} cells"
                )

        if errors:
            raise InvalidGeneratorParameters("; ".join(errors))

        self.rows = rows
        self.columns = columns
        self.strategy = strategy
        self.max_attempts = max_attempts
        self.rng = rng or random.Random()

    def generate(self, stop_event: Optional[threading.Event] = None) -> GridLayout:
        """
        Produce a complete layout.

        Failed random attempts are restarted from an empty grid with the
        same word order until one succeeds.

        Args:
            stop_event: Optional event checked before each attempt

        Raises:
            PlacementExhausted: Only when max_attempts is set and reached
            PlacementCancelled: If stop_event is set before a layout is found
        """
        if self.strategy == STRATEGY_SERPENTINE:
            return serpentine_placement(self.words, self.rows, self.columns)

        attempts = 0
        while self.max_attempts is None or attempts < self.max_attempts:
            if stop_event is not None and stop_event.is_set():
                raise PlacementCancelled(f"Placement stopped after {attempts} attempt(s)")
            attempts += 1
            layout = attempt_placement(self.words, self.rows, self.columns, self.rng)
            if layout is not None:
                layout.attempts = attempts
                logger.debug(
                    f"Placed {len(self.words)} words on {self.rows}x{self.columns} "
                    f"grid after {attempts} attempt(s)"
                )
                return layout

        raise PlacementExhausted(attempts)

    def get_grid(self) -> List[List[str]]:
        """Generate a layout and return it as rows of letters."""
        return self.generate().to_grid()

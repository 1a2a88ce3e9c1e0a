"""
Board module for Minesweeper game.

Implements the grid of cells with difficulty validation, first-click-safe
mine placement, adjacency counting and flood-fill revealing. Game rules
(status, flags, timing) live in the engine, which owns the board.
"""
import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple, Union

import numpy as np

from .cell import Cell, CellSnapshot, CellState


logger = logging.getLogger(__name__)

Position = Tuple[int, int]

# Clicked cell plus its eight neighbours
SAFE_ZONE_SIZE = 9


# ============================================================================
# Configuration
# ============================================================================

class InvalidConfiguration(ValueError):
    """Raised when a difficulty cannot be played."""


@dataclass(frozen=True)
class Difficulty:
    """
    Dimensions and mine count of a board.

    Attributes:
        rows: Number of rows.
        cols: Number of columns.
        mine_count: Total mines to place.
    """

    rows: int = 9
    cols: int = 9
    mine_count: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.rows < 1 or self.cols < 1:
            raise InvalidConfiguration("Board dimensions must be positive")
        if self.mine_count < 0:
            raise InvalidConfiguration("Number of mines cannot be negative")
        max_mines = self.max_mines(self.rows, self.cols)
        if self.mine_count > max_mines:
            raise InvalidConfiguration(f"Too many mines (max {max_mines})")

    @staticmethod
    def max_mines(rows: int, cols: int) -> int:
        """
        Largest mine count that still leaves room for a safe first click.

        Boards of at least ten cells keep a full 3x3 safe zone free. Smaller
        boards only guarantee the clicked cell itself.
        """
        total = rows * cols
        if total <= SAFE_ZONE_SIZE:
            return total - 1
        return total - SAFE_ZONE_SIZE - 1

    @property
    def total_cells(self) -> int:
        return self.rows * self.cols

    @property
    def safe_cells(self) -> int:
        return self.total_cells - self.mine_count


# Preset difficulty levels
EASY = Difficulty(9, 9, 10)
MEDIUM = Difficulty(16, 16, 40)
HARD = Difficulty(16, 30, 99)

DIFFICULTIES: Dict[str, Difficulty] = {
    "easy": EASY,
    "medium": MEDIUM,
    "hard": HARD,
}


def resolve_difficulty(difficulty: Union[str, Difficulty]) -> Difficulty:
    """
    Turn a preset name or an explicit Difficulty into a Difficulty.

    Raises:
        InvalidConfiguration: If the name is not a known preset.
    """
    if isinstance(difficulty, Difficulty):
        return difficulty
    try:
        return DIFFICULTIES[difficulty.lower()]
    except (KeyError, AttributeError):
        raise InvalidConfiguration(
            f"Unknown difficulty {difficulty!r}"
        ) from None


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Minesweeper grid.

    Manages the cells, mine placement and revealing. Callers are expected
    to check game status before mutating; the board only enforces the
    per-cell rules (a flagged or revealed cell is never revealed again).
    """

    difficulty: Difficulty = field(default_factory=Difficulty)
    rng: random.Random = field(default_factory=random.Random, repr=False)
    _grid: List[List[Cell]] = field(default_factory=list, repr=False)
    _mines_placed: bool = False
    _cells_revealed: int = 0

    def __post_init__(self) -> None:
        """Initialize the grid after dataclass creation."""
        self._init_grid()

    @property
    def rows(self) -> int:
        return self.difficulty.rows

    @property
    def cols(self) -> int:
        return self.difficulty.cols

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create empty grid of cells."""
        self._grid = [
            [Cell() for _ in range(self.cols)]
            for _ in range(self.rows)
        ]
        self._mines_placed = False
        self._cells_revealed = 0

    def place_mines(self, safe: Position) -> List[Position]:
        """
        Place mines randomly, keeping the safe zone around a click clear.

        Uses rejection sampling: random cells are drawn until enough
        unmined cells outside the excluded set have been picked. When the
        board is too small to leave the whole 3x3 zone empty, only the
        clicked cell is excluded.

        Args:
            safe: (row, col) of the first reveal.

        Returns:
            Mine positions in the order they were placed.
        """
        excluded = self.safe_zone(*safe)
        if self.difficulty.total_cells - len(excluded) < self.difficulty.mine_count:
            logger.debug(
                "Board %dx%d too small for a full safe zone, excluding only %s",
                self.rows, self.cols, safe,
            )
            excluded = {safe}

        chosen: List[Position] = []
        taken: Set[Position] = set()
        while len(chosen) < self.difficulty.mine_count:
            position = (
                self.rng.randrange(self.rows),
                self.rng.randrange(self.cols),
            )
            if position in excluded or position in taken:
                continue
            taken.add(position)
            chosen.append(position)

        self.place_mines_at(chosen)
        return chosen

    def place_mines_at(self, positions: List[Position]) -> None:
        """
        Put mines on exactly the given cells and compute adjacency counts.

        Args:
            positions: (row, col) cells that hold a mine.
        """
        for row, col in positions:
            self._grid[row][col].is_mine = True
        self._calculate_adjacent_mines()
        self._mines_placed = True
        logger.debug("Placed %d mines on %dx%d board", len(positions),
                     self.rows, self.cols)

    def safe_zone(self, row: int, col: int) -> Set[Position]:
        """The cell itself plus its in-bounds neighbours."""
        zone = set(self.get_neighbors(row, col))
        zone.add((row, col))
        return zone

    def _calculate_adjacent_mines(self) -> None:
        """Calculate adjacent mine counts for all non-mine cells."""
        for row in range(self.rows):
            for col in range(self.cols):
                cell = self._grid[row][col]
                cell.adjacent_mines = (
                    0 if cell.is_mine else self._count_adjacent_mines(row, col)
                )

    def _count_adjacent_mines(self, row: int, col: int) -> int:
        """Count mines adjacent to a specific cell."""
        count = 0
        for neighbor_row, neighbor_col in self.get_neighbors(row, col):
            if self._grid[neighbor_row][neighbor_col].is_mine:
                count += 1
        return count

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def get_neighbors(self, row: int, col: int) -> List[Position]:
        """
        Get valid neighboring cell positions (Moore neighbourhood).

        Args:
            row: Row index of center cell.
            col: Column index of center cell.

        Returns:
            List of (row, col) tuples for valid neighbors.
        """
        neighbors = []
        for delta_row in (-1, 0, 1):
            for delta_col in (-1, 0, 1):
                if delta_row == 0 and delta_col == 0:
                    continue
                new_row = row + delta_row
                new_col = col + delta_col
                if self.is_valid_position(new_row, new_col):
                    neighbors.append((new_row, new_col))
        return neighbors

    def is_valid_position(self, row: int, col: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= row < self.rows and 0 <= col < self.cols

    # ========================================================================
    # Revealing (Mid-level)
    # ========================================================================

    def flood_reveal(self, row: int, col: int) -> List[Position]:
        """
        Reveal a safe cell, cascading through zero-count regions.

        Cells with no adjacent mines push their hidden neighbours onto a
        work stack; numbered cells are revealed without cascading. Flagged
        and already revealed cells are skipped.

        Args:
            row: Row index to start from.
            col: Column index to start from.

        Returns:
            Positions revealed by this call, in reveal order.
        """
        revealed: List[Position] = []
        stack = [(row, col)]
        while stack:
            current_row, current_col = stack.pop()
            cell = self._grid[current_row][current_col]
            if not cell.reveal():
                continue
            self._cells_revealed += 1
            revealed.append((current_row, current_col))

            if cell.adjacent_mines == 0:
                for neighbor in self.get_neighbors(current_row, current_col):
                    neighbor_cell = self._grid[neighbor[0]][neighbor[1]]
                    if neighbor_cell.is_hidden:
                        stack.append(neighbor)
        return revealed

    def reveal_mines(self) -> List[Position]:
        """
        Expose every mine, flagged or not, for the end-of-game display.

        Returns:
            Positions whose state changed, in row-major order.
        """
        exposed = []
        for row, col in self.mine_positions():
            if self._grid[row][col].expose():
                self._cells_revealed += 1
                exposed.append((row, col))
        return exposed

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def mines_placed(self) -> bool:
        return self._mines_placed

    @property
    def revealed_count(self) -> int:
        """Number of revealed cells."""
        return self._cells_revealed

    @property
    def all_safe_cells_revealed(self) -> bool:
        return self._cells_revealed == self.difficulty.safe_cells

    def count_flagged(self) -> int:
        """Number of flagged cells."""
        return sum(
            1 for grid_row in self._grid for cell in grid_row if cell.is_flagged
        )

    def mine_positions(self) -> List[Position]:
        """All mined cells in row-major order."""
        return [
            (row, col)
            for row in range(self.rows)
            for col in range(self.cols)
            if self._grid[row][col].is_mine
        ]

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        """Get cell at position, or None if invalid."""
        if not self.is_valid_position(row, col):
            return None
        return self._grid[row][col]

    def snapshot_cell(self, row: int, col: int) -> CellSnapshot:
        return self._grid[row][col].snapshot(row, col)

    def get_observation(self) -> np.ndarray:
        """
        Get board state as numpy array.

        Returns:
            2D numpy array where:
                -1 = hidden
                -2 = flagged
                0-8 = revealed with adjacent count
                9 = revealed mine
        """
        obs = np.zeros((self.rows, self.cols), dtype=np.int8)
        for row in range(self.rows):
            for col in range(self.cols):
                obs[row, col] = self._grid[row][col].to_observation()
        return obs

    def get_hidden_positions(self) -> List[Position]:
        """
        Get list of cells that can still be revealed.

        Returns:
            List of (row, col) positions that are hidden and unflagged.
        """
        return [
            (row, col)
            for row in range(self.rows)
            for col in range(self.cols)
            if self._grid[row][col].state == CellState.HIDDEN
        ]

    def reset(self) -> None:
        """Clear all cells for a new game."""
        self._init_grid()

"""
Game engine for Minesweeper.

Owns the board and the game rules: first-click mine placement, revealing,
flagging, elapsed ticks and win/lose detection. Every mutating call returns
a ChangeSet describing what became visible, and the same ChangeSet is
pushed to subscribed listeners. Invalid input is ignored rather than
raised; only an unusable difficulty is an error.
"""
import logging
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Iterator, List, Optional, Tuple, Union

import numpy as np

from .board import Board, Difficulty, Position, resolve_difficulty
from .cell import CellSnapshot


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class GameStatus(Enum):
    """Possible states of the game."""

    NOT_STARTED = auto()
    IN_PROGRESS = auto()
    WON = auto()
    LOST = auto()

    @property
    def is_terminal(self) -> bool:
        return self in (GameStatus.WON, GameStatus.LOST)


# ============================================================================
# Engine Outputs
# ============================================================================

@dataclass(frozen=True)
class GameState:
    """
    Read-only summary of the current game.

    Attributes:
        status: Lifecycle stage of the game.
        elapsed_ticks: Ticks counted while the game was in progress.
        flag_count: Number of currently flagged cells.
        mine_count: Mines on the board (placed or to be placed).
        rows: Board height.
        cols: Board width.
        triggered: Mine that lost the game, if any.
    """

    status: GameStatus
    elapsed_ticks: int
    flag_count: int
    mine_count: int
    rows: int
    cols: int
    triggered: Optional[Position] = None

    @property
    def mines_remaining(self) -> int:
        """Mines minus flags; negative when over-flagged."""
        return self.mine_count - self.flag_count

    @property
    def is_over(self) -> bool:
        return self.status.is_terminal


@dataclass(frozen=True)
class CellChange:
    """A cell whose visible attributes changed."""

    row: int
    col: int
    cell: CellSnapshot


@dataclass(frozen=True)
class ChangeSet:
    """
    Result of an engine call.

    Attributes:
        status: Game status after the call.
        flag_count: Flag count after the call.
        changes: Changed cells in the order they changed.
        triggered: Mine that was hit, when the call lost the game.
        mines: Every mine position, when the call ended the game.
        cleared: True for the full-board notification of a new game.
    """

    status: GameStatus
    flag_count: int
    changes: Tuple[CellChange, ...] = ()
    triggered: Optional[Position] = None
    mines: Tuple[Position, ...] = ()
    cleared: bool = False

    def __len__(self) -> int:
        return len(self.changes)

    def __iter__(self) -> Iterator[CellChange]:
        return iter(self.changes)

    @property
    def is_empty(self) -> bool:
        return not self.changes

    @property
    def positions(self) -> List[Position]:
        return [(change.row, change.col) for change in self.changes]


Listener = Callable[[ChangeSet], None]


# ============================================================================
# Game Engine
# ============================================================================

class GameEngine:
    """
    Minesweeper rules and state machine.

    Lifecycle: NOT_STARTED -> IN_PROGRESS on the first reveal, then
    WON or LOST exactly once. A finished game ignores everything but
    new_game. The engine is not thread-safe; callers serialise access.
    """

    def __init__(
        self,
        difficulty: Union[str, Difficulty] = "easy",
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Initialize the engine with a fresh, unstarted game.

        Args:
            difficulty: Preset name or explicit Difficulty.
            seed: Seed for mine placement (ignored when rng is given).
            rng: Random source for mine placement.
        """
        self._rng = rng if rng is not None else random.Random(seed)
        self._listeners: List[Listener] = []
        self._start_fresh(resolve_difficulty(difficulty))

    # ========================================================================
    # Listeners
    # ========================================================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callback for every non-empty ChangeSet.

        Returns:
            Function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, change_set: ChangeSet) -> None:
        for listener in list(self._listeners):
            listener(change_set)

    # ========================================================================
    # Game Actions
    # ========================================================================

    def new_game(self, difficulty: Union[str, Difficulty]) -> None:
        """
        Discard the current game and start an unstarted one.

        Args:
            difficulty: Preset name or explicit Difficulty.

        Raises:
            InvalidConfiguration: If the difficulty is unknown or invalid.
                The current game is left untouched.
        """
        resolved = resolve_difficulty(difficulty)
        self._start_fresh(resolved)
        logger.debug(
            "New game %dx%d with %d mines",
            resolved.rows, resolved.cols, resolved.mine_count,
        )
        self._notify(self._build_change_set(
            [
                (row, col)
                for row in range(resolved.rows)
                for col in range(resolved.cols)
            ],
            cleared=True,
        ))

    def _start_fresh(self, difficulty: Difficulty) -> None:
        self._difficulty = difficulty
        self._board = Board(difficulty, self._rng)
        self._status = GameStatus.NOT_STARTED
        self._elapsed_ticks = 0
        self._flag_count = 0
        self._triggered: Optional[Position] = None

    def reveal(self, row: int, col: int) -> ChangeSet:
        """
        Reveal a cell.

        The first reveal of a game places the mines around it, so it is
        always safe. Hitting a mine loses the game and exposes all mines;
        revealing the last safe cell wins it.

        Args:
            row: Row index to reveal.
            col: Column index to reveal.

        Returns:
            Changed cells and resulting status. Empty when the reveal was
            ignored (finished game, out of bounds, flagged or revealed).
        """
        if not self._can_reveal(row, col):
            return self._empty_change_set()

        if self._status == GameStatus.NOT_STARTED:
            self._handle_first_click(row, col)

        if self._board.get_cell(row, col).is_mine:
            change_set = self._lose(row, col)
        else:
            revealed = self._board.flood_reveal(row, col)
            if self._board.all_safe_cells_revealed:
                self._finish(GameStatus.WON)
            change_set = self._build_change_set(revealed)

        self._notify(change_set)
        return change_set

    def _can_reveal(self, row: int, col: int) -> bool:
        """Check if a cell can be revealed."""
        if self._status.is_terminal:
            return False
        cell = self._board.get_cell(row, col)
        return cell is not None and cell.is_hidden

    def _handle_first_click(self, row: int, col: int) -> None:
        """Handle first click: place mines and start the clock."""
        self._board.place_mines((row, col))
        self._status = GameStatus.IN_PROGRESS

    def _lose(self, row: int, col: int) -> ChangeSet:
        """Expose every mine, hit one first, and end the game."""
        self._triggered = (row, col)
        exposed = self._board.reveal_mines()
        exposed.remove((row, col))
        self._flag_count = self._board.count_flagged()
        self._finish(GameStatus.LOST)
        return self._build_change_set([(row, col)] + exposed)

    def _finish(self, status: GameStatus) -> None:
        self._status = status
        logger.info(
            "Game %s after %d ticks",
            "won" if status == GameStatus.WON else "lost",
            self._elapsed_ticks,
        )

    def toggle_flag(self, row: int, col: int) -> ChangeSet:
        """
        Toggle flag on a hidden cell.

        Flags never end the game.

        Args:
            row: Row index.
            col: Column index.

        Returns:
            The changed cell and new flag count, or an empty ChangeSet
            when the cell is revealed, out of bounds or the game is over.
        """
        if self._status.is_terminal:
            return self._empty_change_set()
        cell = self._board.get_cell(row, col)
        if cell is None or not cell.toggle_flag():
            return self._empty_change_set()

        self._flag_count += 1 if cell.is_flagged else -1
        change_set = self._build_change_set([(row, col)])
        self._notify(change_set)
        return change_set

    def tick(self) -> None:
        """Advance the elapsed time by one tick while a game is running."""
        if self._status == GameStatus.IN_PROGRESS:
            self._elapsed_ticks += 1

    # ========================================================================
    # Change Sets
    # ========================================================================

    def _build_change_set(
        self, positions: List[Position], cleared: bool = False
    ) -> ChangeSet:
        return ChangeSet(
            status=self._status,
            flag_count=self._flag_count,
            changes=tuple(
                CellChange(row, col, self._board.snapshot_cell(row, col))
                for row, col in positions
            ),
            triggered=self._triggered,
            mines=(
                tuple(self._board.mine_positions())
                if self._status.is_terminal else ()
            ),
            cleared=cleared,
        )

    def _empty_change_set(self) -> ChangeSet:
        return ChangeSet(
            status=self._status,
            flag_count=self._flag_count,
            triggered=self._triggered,
        )

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @property
    def status(self) -> GameStatus:
        return self._status

    def get_state(self) -> GameState:
        """Get a snapshot of the game summary."""
        return GameState(
            status=self._status,
            elapsed_ticks=self._elapsed_ticks,
            flag_count=self._flag_count,
            mine_count=self._difficulty.mine_count,
            rows=self._difficulty.rows,
            cols=self._difficulty.cols,
            triggered=self._triggered,
        )

    def cell(self, row: int, col: int) -> Optional[CellSnapshot]:
        """Get a snapshot of one cell, or None if out of bounds."""
        if not self._board.is_valid_position(row, col):
            return None
        return self._board.snapshot_cell(row, col)

    def snapshot(self) -> Tuple[Tuple[CellSnapshot, ...], ...]:
        """Snapshots of every cell, one tuple per row."""
        return tuple(
            tuple(
                self._board.snapshot_cell(row, col)
                for col in range(self._difficulty.cols)
            )
            for row in range(self._difficulty.rows)
        )

    @property
    def revealed_count(self) -> int:
        return self._board.revealed_count

    def get_observation(self) -> np.ndarray:
        """Board as an int8 array (see Board.get_observation)."""
        return self._board.get_observation()

    def get_hidden_positions(self) -> List[Position]:
        """Cells that a reveal would currently act on."""
        if self._status.is_terminal:
            return []
        return self._board.get_hidden_positions()

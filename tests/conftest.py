"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path
from typing import Callable, List

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minesweeper import (
    Board,
    Cell,
    Difficulty,
    GameEngine,
    GameStatus,
    ScheduledCall,
    Scheduler,
)


# ============================================================================
# Scheduler Double
# ============================================================================

class ManualCall(ScheduledCall):
    """Pending callback of a ManualScheduler."""

    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Scheduler whose clock only moves when a test advances it."""

    def __init__(self) -> None:
        self.now = 0.0
        self._calls: List[ManualCall] = []

    def call_later(
        self, delay: float, callback: Callable[[], None]
    ) -> ScheduledCall:
        call = ManualCall(self.now + delay, callback)
        self._calls.append(call)
        return call

    @property
    def pending(self) -> List[ManualCall]:
        return [call for call in self._calls if not call.cancelled]

    def advance(self, seconds: float) -> None:
        """Run every callback due within the next `seconds`, in order."""
        target = self.now + seconds
        while True:
            due = [call for call in self.pending if call.due <= target]
            if not due:
                break
            call = min(due, key=lambda item: item.due)
            self._calls.remove(call)
            self.now = call.due
            call.callback()
        self.now = target


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def default_board() -> Board:
    """Create a default 9x9 board with 10 mines."""
    return Board()


@pytest.fixture
def wall_board() -> Board:
    """
    3x5 board with a wall of mines down the middle column.

        0 2 * 2 0
        0 3 * 3 0
        0 2 * 2 0
    """
    board = Board(Difficulty(3, 5, 3))
    board.place_mines_at([(0, 2), (1, 2), (2, 2)])
    return board


# ============================================================================
# Engine Fixtures
# ============================================================================

@pytest.fixture
def engine() -> GameEngine:
    """Create an unstarted easy game with a fixed seed."""
    return GameEngine("easy", seed=1234)


@pytest.fixture
def started_engine() -> GameEngine:
    """Easy game after a first reveal at the centre that did not finish it."""
    seed = 0
    while True:
        engine = GameEngine("easy", seed=seed)
        engine.reveal(4, 4)
        if engine.status == GameStatus.IN_PROGRESS:
            return engine
        seed += 1


@pytest.fixture
def empty_engine() -> GameEngine:
    """Engine with a mine-free board for cascade testing."""
    return GameEngine(Difficulty(2, 2, 0), seed=0)


def hidden_mines(engine: GameEngine) -> List[tuple]:
    """Positions of mines that are still hidden."""
    return [
        (cell.row, cell.col)
        for row in engine.snapshot()
        for cell in row
        if cell.is_mine and cell.is_hidden
    ]


def hidden_safe_cells(engine: GameEngine) -> List[tuple]:
    """Positions of safe cells that are still hidden."""
    return [
        (cell.row, cell.col)
        for row in engine.snapshot()
        for cell in row
        if not cell.is_mine and cell.is_hidden
    ]


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(is_mine=True)

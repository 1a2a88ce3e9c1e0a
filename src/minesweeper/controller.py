"""
Presentation adapter for the Minesweeper engine.

GameController sits between an input/output surface (the terminal in
main.py) and the GameEngine. It forwards coordinates to the engine,
listens to the resulting ChangeSets to keep a text display model, drives
the engine clock and shows the end-of-game dialog.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from .board import Difficulty
from .cell import CellSnapshot
from .engine import ChangeSet, GameEngine, GameStatus
from .scheduler import ScheduledCall, Scheduler, ThreadingScheduler


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

FACE_PLAYING = "\N{SMILING FACE WITH SUNGLASSES}"
FACE_WON = "\N{FACE WITH PARTY HORN AND PARTY HAT}"
FACE_LOST = "\N{DIZZY FACE}"

HIDDEN_SYMBOL = "."
FLAG_SYMBOL = "F"
MINE_SYMBOL = "*"
HIT_MINE_SYMBOL = "X"
EMPTY_SYMBOL = " "


@dataclass(frozen=True)
class Dialog:
    """End-of-game message."""

    title: str
    message: str


WIN_DIALOG = Dialog("YOU WIN!", "Mission Accomplished! Good job.")
LOSS_DIALOG = Dialog("GAME OVER", "You hit a mine! Better luck next time.")


@dataclass
class ControllerConfig:
    """
    Timing settings for the controller.

    Attributes:
        tick_interval: Seconds between engine ticks.
        loss_dialog_delay: Seconds the board stays visible after a loss
            before the dialog appears.
    """

    tick_interval: float = 1.0
    loss_dialog_delay: float = 3.0

    def __post_init__(self) -> None:
        if self.tick_interval <= 0:
            raise ValueError("Tick interval must be positive")
        if self.loss_dialog_delay < 0:
            raise ValueError("Dialog delay cannot be negative")


# ============================================================================
# Formatting
# ============================================================================

def format_counter(value: int) -> str:
    """Zero-pad a counter to three characters ("007", "-05")."""
    return f"{value:03d}"


def symbol_for(cell: CellSnapshot, hit: bool = False) -> str:
    """Text symbol for one cell."""
    if cell.is_flagged:
        return FLAG_SYMBOL
    if cell.is_hidden:
        return HIDDEN_SYMBOL
    if cell.is_mine:
        return HIT_MINE_SYMBOL if hit else MINE_SYMBOL
    if cell.adjacent_mines == 0:
        return EMPTY_SYMBOL
    return str(cell.adjacent_mines)


def render_grid(symbols: List[List[str]], coordinates: bool = False) -> str:
    """
    Render rows of symbols as text.

    Args:
        symbols: One list of symbols per row.
        coordinates: Prefix rows and columns with their indices.
    """
    lines = []
    margin = len(str(max(len(symbols) - 1, 0)))
    if coordinates and symbols:
        header = " ".join(str(col % 10) for col in range(len(symbols[0])))
        lines.append(" " * (margin + 1) + header)
    for row, row_symbols in enumerate(symbols):
        line = " ".join(row_symbols) + " "
        if coordinates:
            line = f"{row:>{margin}} " + line
        lines.append(line)
    return "\n".join(lines)


# ============================================================================
# Game Controller
# ============================================================================

class GameController:
    """
    Adapter that drives a GameEngine from user input.

    Features:
        - Text display model updated from engine ChangeSets
        - Mines-remaining counter, timer and status face
        - Engine ticks while a game is in progress
        - Win dialog at once, loss dialog after a delay; starting a new
          game cancels a pending dialog

    All engine access goes through a lock since scheduler callbacks may
    run on other threads.
    """

    def __init__(
        self,
        engine: GameEngine,
        scheduler: Optional[Scheduler] = None,
        config: Optional[ControllerConfig] = None,
        on_dialog: Optional[Callable[[Dialog], None]] = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            engine: Engine to drive.
            scheduler: Source of delayed callbacks (default: threads).
            config: Timing settings.
            on_dialog: Called whenever a dialog is shown.
        """
        self.engine = engine
        self.scheduler = scheduler or ThreadingScheduler()
        self.config = config or ControllerConfig()
        self.on_dialog = on_dialog
        self.current_difficulty: Union[str, Difficulty] = engine.difficulty
        self.dialog: Optional[Dialog] = None

        self._lock = threading.RLock()
        self._generation = 0
        self._tick_call: Optional[ScheduledCall] = None
        self._dialog_call: Optional[ScheduledCall] = None
        self._symbols: List[List[str]] = []
        self._rebuild_symbols()
        self._unsubscribe = engine.subscribe(self._on_change)

    # ========================================================================
    # User Actions
    # ========================================================================

    def new_game(
        self, difficulty: Optional[Union[str, Difficulty]] = None
    ) -> None:
        """
        Start a new game, cancelling the clock and any pending dialog.

        Args:
            difficulty: Preset name or Difficulty (default: the current one).

        Raises:
            InvalidConfiguration: If the difficulty is unusable.
        """
        with self._lock:
            chosen = difficulty if difficulty is not None else self.current_difficulty
            self.engine.new_game(chosen)
            self.current_difficulty = chosen

    def restart(self) -> None:
        """Start a new game with the current difficulty."""
        self.new_game()

    def reveal(self, row: int, col: int) -> ChangeSet:
        with self._lock:
            return self.engine.reveal(row, col)

    def toggle_flag(self, row: int, col: int) -> ChangeSet:
        with self._lock:
            return self.engine.toggle_flag(row, col)

    def close(self) -> None:
        """Stop timers and detach from the engine."""
        with self._lock:
            self._cancel_pending()
            self._unsubscribe()

    # ========================================================================
    # Engine Notifications
    # ========================================================================

    def _on_change(self, change_set: ChangeSet) -> None:
        """Apply a ChangeSet to the display and react to status changes."""
        if change_set.cleared:
            self._generation += 1
            self._cancel_pending()
            self.dialog = None
            self._rebuild_symbols()
            return

        for change in change_set:
            hit = (change.row, change.col) == change_set.triggered
            self._symbols[change.row][change.col] = symbol_for(change.cell, hit)

        if change_set.status == GameStatus.IN_PROGRESS:
            if self._tick_call is None:
                self._schedule_tick()
        elif change_set.status == GameStatus.WON:
            self._stop_ticking()
            self._show_dialog(WIN_DIALOG)
        elif change_set.status == GameStatus.LOST:
            self._stop_ticking()
            self._schedule_loss_dialog()

    def _rebuild_symbols(self) -> None:
        self._symbols = [
            [symbol_for(cell) for cell in row]
            for row in self.engine.snapshot()
        ]

    # ========================================================================
    # Scheduling
    # ========================================================================

    def _schedule_tick(self) -> None:
        generation = self._generation
        self._tick_call = self.scheduler.call_later(
            self.config.tick_interval, lambda: self._on_tick(generation)
        )

    def _on_tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._tick_call = None
            if self.engine.status != GameStatus.IN_PROGRESS:
                return
            self.engine.tick()
            self._schedule_tick()

    def _stop_ticking(self) -> None:
        if self._tick_call is not None:
            self._tick_call.cancel()
            self._tick_call = None

    def _schedule_loss_dialog(self) -> None:
        generation = self._generation
        self._dialog_call = self.scheduler.call_later(
            self.config.loss_dialog_delay,
            lambda: self._on_loss_dialog(generation),
        )

    def _on_loss_dialog(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._dialog_call = None
            self._show_dialog(LOSS_DIALOG)

    def _cancel_pending(self) -> None:
        self._stop_ticking()
        if self._dialog_call is not None:
            self._dialog_call.cancel()
            self._dialog_call = None

    def _show_dialog(self, dialog: Dialog) -> None:
        logger.debug("Showing dialog %r", dialog.title)
        self.dialog = dialog
        if self.on_dialog:
            self.on_dialog(dialog)

    def hide_dialog(self) -> None:
        with self._lock:
            self.dialog = None

    # ========================================================================
    # Display Model
    # ========================================================================

    @property
    def has_pending_dialog(self) -> bool:
        return self._dialog_call is not None

    @property
    def mine_counter(self) -> str:
        """Mines remaining, as shown on the counter."""
        return format_counter(self.engine.get_state().mines_remaining)

    @property
    def timer(self) -> str:
        return format_counter(self.engine.get_state().elapsed_ticks)

    @property
    def face(self) -> str:
        status = self.engine.status
        if status == GameStatus.WON:
            return FACE_WON
        if status == GameStatus.LOST:
            return FACE_LOST
        return FACE_PLAYING

    def symbol_at(self, row: int, col: int) -> str:
        return self._symbols[row][col]

    def render(self, coordinates: bool = False) -> str:
        """Render counters and board as text."""
        with self._lock:
            header = f"{self.mine_counter}  {self.face}  {self.timer}"
            return header + "\n" + render_grid(self._symbols, coordinates)

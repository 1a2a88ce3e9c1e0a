"""
Minesweeper game module.

Provides the game engine (board, cells, rules and state machine), a
presentation adapter for driving it interactively, and a Gymnasium
environment.
"""
from .cell import Cell, CellSnapshot, CellState
from .board import (
    Board,
    Difficulty,
    InvalidConfiguration,
    DIFFICULTIES,
    EASY,
    MEDIUM,
    HARD,
    resolve_difficulty,
)
from .engine import CellChange, ChangeSet, GameEngine, GameState, GameStatus
from .scheduler import ScheduledCall, Scheduler, ThreadingScheduler
from .controller import ControllerConfig, Dialog, GameController
from .environment import MinesweeperEnv

__all__ = [
    "Cell",
    "CellSnapshot",
    "CellState",
    "Board",
    "Difficulty",
    "InvalidConfiguration",
    "DIFFICULTIES",
    "EASY",
    "MEDIUM",
    "HARD",
    "resolve_difficulty",
    "CellChange",
    "ChangeSet",
    "GameEngine",
    "GameState",
    "GameStatus",
    "ScheduledCall",
    "Scheduler",
    "ThreadingScheduler",
    "ControllerConfig",
    "Dialog",
    "GameController",
    "MinesweeperEnv",
]

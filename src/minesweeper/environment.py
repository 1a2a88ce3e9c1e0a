"""
Gymnasium environment wrapper for Minesweeper.

Exposes the engine through the standard RL interface so scripted or
learning players can drive it.
"""
import random
from typing import Any, Dict, Optional, Tuple, SupportsFloat, Union

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import Difficulty
from .controller import render_grid, symbol_for
from .engine import GameEngine, GameStatus


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D array where:
        - -1 = hidden cell
        - -2 = flagged cell
        - 0-8 = revealed cell with adjacent mine count
        - 9 = revealed mine

    Actions:
        Discrete action space of size 2 * rows * cols.
        Action i < rows * cols reveals cell (i // cols, i % cols);
        the second half toggles the flag on the same cells.

    Rewards:
        - +1 for revealing a safe cell
        - +10 for winning the game
        - -10 for hitting a mine
        - 0 for toggling a flag
        - -0.1 for an action the engine ignored
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        difficulty: Union[str, Difficulty, None] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            difficulty: Preset name or Difficulty (default: easy).
            render_mode: How to render the environment.
        """
        super().__init__()

        self._rng = random.Random()
        self.engine = GameEngine(difficulty or "easy", rng=self._rng)
        self.difficulty = self.engine.difficulty
        self.render_mode = render_mode

        self.observation_space = spaces.Box(
            low=-2,
            high=9,
            shape=(self.difficulty.rows, self.difficulty.cols),
            dtype=np.int8,
        )

        self._cell_count = self.difficulty.total_cells
        self.action_space = spaces.Discrete(2 * self._cell_count)

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new episode.

        Args:
            seed: Random seed for mine placement.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        if seed is not None:
            self._rng.seed(seed)
        self.engine.new_game(self.difficulty)
        self._steps = 0

        return self.engine.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Cell index to reveal, or cell index + rows * cols to
                toggle a flag.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        flag, row, col = self._decode_action(int(action))
        self._steps += 1

        if flag:
            change_set = self.engine.toggle_flag(row, col)
            reward = -0.1 if change_set.is_empty else 0.0
        else:
            reward = self._reveal_reward(row, col)

        observation = self.engine.get_observation()
        terminated = self.engine.status.is_terminal
        truncated = False

        return observation, reward, terminated, truncated, self._get_info()

    def _decode_action(self, action: int) -> Tuple[bool, int, int]:
        """Convert flat action index to (is_flag, row, col)."""
        flag = action >= self._cell_count
        row, col = divmod(action % self._cell_count, self.difficulty.cols)
        return flag, row, col

    def _reveal_reward(self, row: int, col: int) -> float:
        """
        Reveal a cell and score the outcome.

        Args:
            row: Row index.
            col: Column index.

        Returns:
            Reward value.
        """
        change_set = self.engine.reveal(row, col)

        if change_set.is_empty:
            return -0.1
        if change_set.status == GameStatus.WON:
            return 10.0
        if change_set.status == GameStatus.LOST:
            return -10.0
        return 1.0

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        state = self.engine.get_state()
        return {
            "steps": self._steps,
            "revealed": self.engine.revealed_count,
            "total_safe": self.difficulty.safe_cells,
            "flags": state.flag_count,
            "game_state": state.status.name,
            "valid_actions": int(self.get_action_mask().sum()),
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return self._render_ansi()
        if self.render_mode == "human":
            print(self._render_ansi())
        return None

    def _render_ansi(self) -> str:
        """Render board as ASCII string."""
        triggered = self.engine.get_state().triggered
        symbols = [
            [
                symbol_for(cell, (cell.row, cell.col) == triggered)
                for cell in row
            ]
            for row in self.engine.snapshot()
        ]
        return render_grid(symbols)

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions.

        Returns:
            Boolean array where True = action the engine would act on.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        if self.engine.status.is_terminal:
            return mask
        observation = self.engine.get_observation().flatten()
        mask[:self._cell_count] = observation == -1
        mask[self._cell_count:] = observation < 0
        return mask

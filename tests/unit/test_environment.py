"""
Unit tests for MinesweeperEnv.

Tests spaces, rewards, flag actions, masks and rendering.
"""
import numpy as np
import pytest
from conftest import hidden_mines
from minesweeper import Difficulty, MinesweeperEnv


@pytest.fixture
def env() -> MinesweeperEnv:
    environment = MinesweeperEnv("medium", render_mode="ansi")
    environment.reset(seed=11)
    return environment


def cell_action(env: MinesweeperEnv, row: int, col: int, flag: bool = False) -> int:
    action = row * env.difficulty.cols + col
    if flag:
        action += env.difficulty.total_cells
    return action


# ============================================================================
# Space Tests
# ============================================================================

class TestSpaces:
    """Test observation and action spaces."""

    def test_action_space_covers_reveal_and_flag(self) -> None:
        env = MinesweeperEnv()
        assert env.action_space.n == 2 * 81

    def test_reset_returns_hidden_board(self) -> None:
        env = MinesweeperEnv(Difficulty(4, 6, 3))
        obs, info = env.reset(seed=0)
        assert obs.shape == (4, 6)
        assert np.all(obs == -1)
        assert info["game_state"] == "NOT_STARTED"
        assert info["total_safe"] == 21

    def test_observation_in_space(self, env: MinesweeperEnv) -> None:
        obs, *_ = env.step(cell_action(env, 8, 8))
        assert env.observation_space.contains(obs)


# ============================================================================
# Step Tests
# ============================================================================

class TestStep:
    """Test rewards and termination."""

    def test_safe_reveal_rewards_one(self, env: MinesweeperEnv) -> None:
        _, reward, terminated, truncated, info = env.step(cell_action(env, 8, 8))
        assert reward == 1.0
        assert terminated is False
        assert truncated is False
        assert info["game_state"] == "IN_PROGRESS"

    def test_repeated_reveal_is_penalised(self, env: MinesweeperEnv) -> None:
        env.step(cell_action(env, 8, 8))
        _, reward, *_ = env.step(cell_action(env, 8, 8))
        assert reward == pytest.approx(-0.1)

    def test_hitting_mine_terminates(self, env: MinesweeperEnv) -> None:
        env.step(cell_action(env, 8, 8))
        row, col = hidden_mines(env.engine)[0]
        obs, reward, terminated, _, info = env.step(cell_action(env, row, col))
        assert reward == -10.0
        assert terminated is True
        assert obs[row, col] == 9
        assert info["game_state"] == "LOST"

    def test_winning_rewards_ten(self) -> None:
        env = MinesweeperEnv(Difficulty(2, 2, 0))
        env.reset()
        _, reward, terminated, _, info = env.step(0)
        assert reward == 10.0
        assert terminated is True
        assert info["game_state"] == "WON"

    def test_flag_action_toggles_flag(self, env: MinesweeperEnv) -> None:
        obs, reward, *_, info = env.step(cell_action(env, 0, 0, flag=True))
        assert reward == 0.0
        assert obs[0, 0] == -2
        assert info["flags"] == 1

    def test_reset_with_seed_is_reproducible(self) -> None:
        first = MinesweeperEnv("medium")
        second = MinesweeperEnv("medium")
        first.reset(seed=3)
        second.reset(seed=3)
        first_obs, *_ = first.step(100)
        second_obs, *_ = second.step(100)
        assert np.array_equal(first_obs, second_obs)


# ============================================================================
# Mask and Render Tests
# ============================================================================

class TestMaskAndRender:
    """Test action masks and text output."""

    def test_new_game_mask_allows_everything(self, env: MinesweeperEnv) -> None:
        assert env.get_action_mask().all()

    def test_revealed_cells_are_masked(self, env: MinesweeperEnv) -> None:
        env.step(cell_action(env, 8, 8))
        mask = env.get_action_mask()
        assert not mask[cell_action(env, 8, 8)]
        assert not mask[cell_action(env, 8, 8, flag=True)]

    def test_flagged_cell_can_only_be_unflagged(self, env: MinesweeperEnv) -> None:
        env.step(cell_action(env, 0, 0, flag=True))
        mask = env.get_action_mask()
        assert not mask[cell_action(env, 0, 0)]
        assert mask[cell_action(env, 0, 0, flag=True)]

    def test_finished_game_masks_everything(self) -> None:
        env = MinesweeperEnv(Difficulty(2, 2, 0))
        env.reset()
        env.step(0)
        assert not env.get_action_mask().any()

    def test_render_ansi(self, env: MinesweeperEnv) -> None:
        env.step(cell_action(env, 0, 1, flag=True))
        lines = env.render().split("\n")
        assert len(lines) == 16
        assert lines[0].split()[:2] == [".", "F"]

"""
Unit tests for Cell class.

Tests cell state management, reveal/flag behavior, snapshots and
observation conversion.
"""
import dataclasses

import pytest
from minesweeper import Cell, CellState


# ============================================================================
# Cell Initialization Tests
# ============================================================================

class TestCellInitialization:
    """Test cell creation and default values."""

    def test_default_cell_is_not_mine(self) -> None:
        """New cell should not be a mine by default."""
        cell = Cell()
        assert cell.is_mine is False

    def test_default_cell_is_hidden(self) -> None:
        """New cell should be hidden by default."""
        cell = Cell()
        assert cell.state == CellState.HIDDEN
        assert cell.is_hidden is True

    def test_default_cell_has_zero_adjacent_mines(self) -> None:
        """New cell should have 0 adjacent mines by default."""
        cell = Cell()
        assert cell.adjacent_mines == 0


# ============================================================================
# Cell Reveal Tests
# ============================================================================

class TestCellReveal:
    """Test cell reveal behavior."""

    def test_reveal_hidden_cell_returns_true(self, hidden_cell: Cell) -> None:
        """Revealing a hidden cell should succeed."""
        assert hidden_cell.reveal() is True
        assert hidden_cell.is_revealed is True

    def test_reveal_already_revealed_returns_false(
        self, hidden_cell: Cell
    ) -> None:
        """Revealing an already revealed cell should fail."""
        hidden_cell.reveal()
        assert hidden_cell.reveal() is False

    def test_reveal_flagged_cell_returns_false(self, hidden_cell: Cell) -> None:
        """Cannot reveal a flagged cell."""
        hidden_cell.toggle_flag()
        assert hidden_cell.reveal() is False
        assert hidden_cell.is_flagged is True

    def test_expose_overrides_flag(self, mine_cell: Cell) -> None:
        """End-of-game exposure reveals flagged cells too."""
        mine_cell.toggle_flag()
        assert mine_cell.expose() is True
        assert mine_cell.is_revealed is True
        assert mine_cell.is_flagged is False

    def test_expose_revealed_cell_returns_false(self, mine_cell: Cell) -> None:
        mine_cell.expose()
        assert mine_cell.expose() is False


# ============================================================================
# Cell Flag Tests
# ============================================================================

class TestCellFlag:
    """Test cell flagging behavior."""

    def test_flag_changes_state_to_flagged(self, hidden_cell: Cell) -> None:
        """Flagging a cell should change its state."""
        assert hidden_cell.toggle_flag() is True
        assert hidden_cell.state == CellState.FLAGGED

    def test_unflag_returns_to_hidden(self, hidden_cell: Cell) -> None:
        """Unflagging a cell should return it to hidden."""
        hidden_cell.toggle_flag()
        hidden_cell.toggle_flag()
        assert hidden_cell.is_hidden is True

    def test_flag_revealed_cell_returns_false(self, hidden_cell: Cell) -> None:
        """Cannot flag a revealed cell."""
        hidden_cell.reveal()
        assert hidden_cell.toggle_flag() is False
        assert hidden_cell.is_revealed is True


# ============================================================================
# Cell Snapshot Tests
# ============================================================================

class TestCellSnapshot:
    """Test frozen cell copies."""

    def test_snapshot_copies_fields(self) -> None:
        cell = Cell(adjacent_mines=3)
        cell.reveal()
        snapshot = cell.snapshot(2, 5)
        assert (snapshot.row, snapshot.col) == (2, 5)
        assert snapshot.is_revealed is True
        assert snapshot.adjacent_mines == 3
        assert snapshot.is_mine is False

    def test_snapshot_does_not_follow_cell(self, hidden_cell: Cell) -> None:
        """Later changes to the cell are not visible in an old snapshot."""
        snapshot = hidden_cell.snapshot(0, 0)
        hidden_cell.toggle_flag()
        assert snapshot.is_hidden is True

    def test_snapshot_is_read_only(self, hidden_cell: Cell) -> None:
        snapshot = hidden_cell.snapshot(0, 0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.is_mine = True


# ============================================================================
# Cell Observation Tests
# ============================================================================

class TestCellObservation:
    """Test cell observation values."""

    def test_hidden_cell_observation_is_negative_one(
        self, hidden_cell: Cell
    ) -> None:
        assert hidden_cell.to_observation() == -1

    def test_flagged_cell_observation_is_negative_two(
        self, hidden_cell: Cell
    ) -> None:
        hidden_cell.toggle_flag()
        assert hidden_cell.to_observation() == -2

    @pytest.mark.parametrize("count", [0, 1, 4, 8])
    def test_revealed_cell_observation_matches_adjacent_count(
        self, count: int
    ) -> None:
        """Revealed cell returns its adjacent mine count."""
        cell = Cell(adjacent_mines=count)
        cell.reveal()
        assert cell.to_observation() == count

    def test_revealed_mine_observation_is_nine(self, mine_cell: Cell) -> None:
        mine_cell.reveal()
        assert mine_cell.to_observation() == 9

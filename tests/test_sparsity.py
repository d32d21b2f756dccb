# test_sparsity.py
"""
Tests for sparse Jacobian assembly and row-offset chaining.
"""

import logging

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from trajcon import (
    BlockDynamics,
    ConfigurationError,
    DataIntegrityError,
    KinematicDefect,
    KinematicDefectGradient,
    KinematicGoalSquare,
    KinematicGoalSquareGradient,
    SparseJacobianBuilder,
    StackConstraintGradients,
    StackConstraints,
    kinematic_defect_gradient_indices,
    kinematic_goal_square_gradient_indices,
)


NUMBER_OF_POINTS = 3
POINT_DIMENSION = 6
POSITION_DIMENSION = 2
KINEMATIC_DIMENSION = 4
DT = 0.5


@pytest.fixture
def trajectory():
    return np.array(
        [0, 0, 3, 4, 1, 2, 1.5, 2, 3.5, 5, 2, 4, 2.5, 3, 4.5, 6, 3, 5], dtype=np.float64
    )


class TestSparseJacobianBuilder:
    """Test offset tracking and COO assembly in the Jacobian builder."""

    def test_offsets_chain_without_gaps(self):
        """Test that consecutive blocks occupy contiguous row ranges."""
        builder = SparseJacobianBuilder()

        rows_goal, _ = builder.add_indices(
            kinematic_goal_square_gradient_indices, POINT_DIMENSION, KINEMATIC_DIMENSION, 0
        )
        rows_defect_zero, _ = builder.add_indices(
            kinematic_defect_gradient_indices, POINT_DIMENSION, POSITION_DIMENSION, 0
        )
        rows_defect_one, _ = builder.add_indices(
            kinematic_defect_gradient_indices, POINT_DIMENSION, POSITION_DIMENSION, 1
        )

        assert_array_equal(np.unique(rows_goal), [0, 1, 2, 3])
        assert_array_equal(np.unique(rows_defect_zero), [4, 5, 6, 7])
        assert_array_equal(np.unique(rows_defect_one), [8, 9, 10, 11])
        assert builder.num_constraints == 12
        assert builder.num_nonzeros == 4 + 16 + 16
        assert [block.row_start for block in builder.blocks] == [0, 4, 8]

    def test_matches_manual_offset_threading(self):
        """Test that the builder matches threading offsets by hand."""
        builder = SparseJacobianBuilder()
        builder.add_indices(kinematic_defect_gradient_indices, POINT_DIMENSION, POSITION_DIMENSION, 0)
        builder.add_indices(kinematic_defect_gradient_indices, POINT_DIMENSION, POSITION_DIMENSION, 1)

        count_zero, rows_zero, cols_zero = kinematic_defect_gradient_indices(
            0, POINT_DIMENSION, POSITION_DIMENSION, 0
        )
        _, rows_one, cols_one = kinematic_defect_gradient_indices(
            count_zero, POINT_DIMENSION, POSITION_DIMENSION, 1
        )

        assert_array_equal(builder.rows, np.concatenate([rows_zero, rows_one]))
        assert_array_equal(builder.cols, np.concatenate([cols_zero, cols_one]))

    def test_add_block_shifts_local_rows(self):
        """Test that local block rows are shifted by the running offset."""
        builder = SparseJacobianBuilder(num_variables=10)
        builder.add_block(2, [0, 1], [0, 1], name="first")

        rows, cols = builder.add_block(3, [0, 0, 2], [4, 5, 9], name="second")

        assert_array_equal(rows, [2, 2, 4])
        assert_array_equal(cols, [4, 5, 9])
        assert builder.row_offset == 5
        assert builder.blocks[1].name == "second"

    def test_empty_row_block_advances_nothing(self):
        """Test that a zero-row block leaves the offset unchanged."""
        builder = SparseJacobianBuilder()

        rows, cols = builder.add_block(0, [], [])

        assert rows.size == cols.size == 0
        assert builder.num_constraints == 0

    @pytest.mark.parametrize(
        "row_count, local_rows, local_cols, message",
        [
            (2, [0, 2], [0, 1], "outside"),
            (2, [-1, 0], [0, 1], "outside"),
            (2, [0, 1], [0], "rows but"),
            (2, [0, 1], [0, -3], "Negative column"),
            (2, [0, 1], [0, 10], "beyond trajectory length"),
            (2, [0.0, 1.0], [0, 1], "must hold integers"),
        ],
    )
    def test_add_block_rejects_inconsistent_blocks(self, row_count, local_rows, local_cols, message):
        """Test that malformed blocks are rejected without changing state."""
        builder = SparseJacobianBuilder(num_variables=10)

        with pytest.raises(ConfigurationError, match=message):
            builder.add_block(row_count, local_rows, local_cols)

        assert builder.num_constraints == 0

    def test_to_coo_rejects_wrong_value_count(self):
        """Test that a value array of the wrong length is rejected."""
        builder = SparseJacobianBuilder(num_variables=12)
        builder.add_indices(
            kinematic_goal_square_gradient_indices, POINT_DIMENSION, KINEMATIC_DIMENSION, 1
        )

        with pytest.raises(DataIntegrityError, match="expected 4"):
            builder.to_coo(np.ones(3))

    def test_to_coo_infers_width(self):
        """Test that the matrix width defaults to the largest column."""
        builder = SparseJacobianBuilder()
        builder.add_indices(
            kinematic_goal_square_gradient_indices, POINT_DIMENSION, KINEMATIC_DIMENSION, 1
        )

        matrix = builder.to_coo(np.arange(4.0))

        assert matrix.shape == (4, 10)
        assert_array_equal(matrix.toarray()[:, 6:10], np.diag(np.arange(4.0)))

    def test_summary_lists_blocks(self, caplog):
        """Test the block summary text and its log output."""
        builder = SparseJacobianBuilder()
        builder.add_indices(
            kinematic_goal_square_gradient_indices,
            POINT_DIMENSION,
            KINEMATIC_DIMENSION,
            1,
            name="goal at t=1",
        )

        with caplog.at_level(logging.INFO, logger="trajcon"):
            text = builder.summary()

        assert "goal at t=1" in text
        assert "0..3" in text
        assert "Sparse Jacobian structure" in caplog.text


class TestAssembledSystem:
    """Test a full stacked system against its assembled Jacobian."""

    def test_stacked_values_line_up_with_structure(self, trajectory):
        """Test stacked gradients against central differences of stacked values."""
        goal = [2.5, 3.0, 4.5, 6.0]
        values = StackConstraints(
            [
                KinematicDefect(BlockDynamics(), POINT_DIMENSION, POSITION_DIMENSION, 0, DT),
                KinematicDefect(BlockDynamics(), POINT_DIMENSION, POSITION_DIMENSION, 1, DT),
                KinematicGoalSquare(
                    NUMBER_OF_POINTS, POINT_DIMENSION, KINEMATIC_DIMENSION, 2, goal
                ),
            ]
        )
        gradients = StackConstraintGradients(
            [
                KinematicDefectGradient(
                    BlockDynamics(), POINT_DIMENSION, POSITION_DIMENSION, 0, DT
                ),
                KinematicDefectGradient(
                    BlockDynamics(), POINT_DIMENSION, POSITION_DIMENSION, 1, DT
                ),
                KinematicGoalSquareGradient(
                    NUMBER_OF_POINTS, POINT_DIMENSION, KINEMATIC_DIMENSION, 2, goal
                ),
            ]
        )
        builder = SparseJacobianBuilder(num_variables=trajectory.size)
        for time_index in (0, 1):
            builder.add_indices(
                kinematic_defect_gradient_indices, POINT_DIMENSION, POSITION_DIMENSION, time_index
            )
        builder.add_indices(
            kinematic_goal_square_gradient_indices, POINT_DIMENSION, KINEMATIC_DIMENSION, 2
        )

        residual = values(trajectory)
        jacobian = builder.to_coo(gradients(trajectory)).toarray()

        assert residual.size == builder.num_constraints == 12
        assert jacobian.shape == (12, trajectory.size)

        step = 1e-6
        for col in range(trajectory.size):
            bump = np.zeros_like(trajectory)
            bump[col] = step
            numeric = (values(trajectory + bump) - values(trajectory - bump)) / (2 * step)
            np.testing.assert_allclose(jacobian[:, col], numeric, atol=1e-6)

# test_trajectory.py
"""
Tests for trajectory buffer access, seeding, output and error formatting.
"""

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from trajcon import (
    ConfigurationError,
    DataIntegrityError,
    TrajconBaseError,
    as_trajectory,
    get_point,
    split_point,
    trajectory_with_identical_points,
    write_position_velocity_control,
)


@pytest.fixture
def trajectory():
    return np.array([0, 0, 3, 4, 1, 2, 1.5, 2, 3.5, 5, 2, 4], dtype=np.float64)


class TestPointAccess:
    """Test point extraction and splitting."""

    def test_get_point(self, trajectory):
        """Test extracting the second point."""
        assert_array_equal(get_point(trajectory, 1, 6), [1.5, 2, 3.5, 5, 2, 4])

    def test_get_point_is_a_view(self, trajectory):
        """Test that extracted points share memory with the trajectory."""
        point = get_point(trajectory, 0, 6)

        assert np.shares_memory(point, trajectory)

    def test_as_trajectory_does_not_copy_float_arrays(self, trajectory):
        """Test that float64 trajectories are not copied."""
        assert as_trajectory(trajectory) is trajectory or np.shares_memory(
            as_trajectory(trajectory), trajectory
        )

    def test_as_trajectory_converts_lists(self):
        """Test that lists are converted to float64 arrays."""
        buffer = as_trajectory([1, 2, 3])

        assert buffer.dtype == np.float64
        assert_array_equal(buffer, [1.0, 2.0, 3.0])

    def test_split_point(self, trajectory):
        """Test splitting a point into position, velocity and control."""
        position, velocity, control = split_point(get_point(trajectory, 1, 6), 2, 2, 2)

        assert_array_equal(position, [1.5, 2])
        assert_array_equal(velocity, [3.5, 5])
        assert_array_equal(control, [2, 4])

    def test_split_point_without_control(self):
        """Test splitting a point that carries no control."""
        position, velocity, control = split_point(np.array([1.0, 2.0]), 1, 1, 0)

        assert_array_equal(position, [1.0])
        assert_array_equal(velocity, [2.0])
        assert control.size == 0

    def test_split_point_length_mismatch(self, trajectory):
        """Test that a point of the wrong length is rejected."""
        with pytest.raises(DataIntegrityError, match="expected 5"):
            split_point(get_point(trajectory, 0, 6), 2, 2, 1)


class TestSeedingAndOutput:
    """Test trajectory seeding and text output."""

    def test_identical_points(self):
        """Test seeding a trajectory by repeating one point."""
        seeded = trajectory_with_identical_points(3, [1.0, 2.0])

        assert_array_equal(seeded, [1.0, 2.0, 1.0, 2.0, 1.0, 2.0])

    def test_identical_points_requires_positive_count(self):
        """Test that a zero point count is rejected."""
        with pytest.raises(ConfigurationError):
            trajectory_with_identical_points(0, [1.0, 2.0])

    def test_write_position_velocity_control(self, trajectory, tmp_path):
        """Test writing position, velocity and control files."""
        paths = [tmp_path / name for name in ("position.txt", "velocity.txt", "control.txt")]

        write_position_velocity_control(trajectory, 2, 6, 2, *paths)

        position, velocity, control = (np.loadtxt(path, ndmin=2) for path in paths)
        assert_array_equal(position, [[0, 0], [1.5, 2]])
        assert_array_equal(velocity, [[3, 4], [3.5, 5]])
        assert_array_equal(control, [[1, 2], [2, 4]])

    def test_write_rejects_wrong_length(self, trajectory, tmp_path):
        """Test that writing a trajectory of the wrong length is rejected."""
        with pytest.raises(DataIntegrityError):
            write_position_velocity_control(
                trajectory, 3, 6, 2, tmp_path / "p", tmp_path / "v", tmp_path / "c"
            )


class TestExceptions:
    """Test error messages and context formatting."""

    def test_context_in_message(self):
        """Test that the context is appended to the message."""
        error = ConfigurationError("bad dimension", "goal constraint")

        assert str(error) == "bad dimension (Context: goal constraint)"
        assert error.message == "bad dimension"
        assert isinstance(error, TrajconBaseError)

    def test_message_without_context(self):
        """Test that a missing context leaves the message unchanged."""
        assert str(DataIntegrityError("mismatch")) == "mismatch"

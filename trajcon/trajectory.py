"""
Trajectory buffer access: point extraction, layout splitting, seeding and text output.

A trajectory is a flat float vector of number_of_points * point_dimension scalars,
each point laid out as position ++ velocity ++ control.
"""

import logging
from pathlib import Path

import numpy as np

from .input_validation import (
    validate_array_length,
    validate_point_layout,
    validate_positive_integer,
)
from .tc_types import FloatArray, TrajectoryLike


logger = logging.getLogger(__name__)


def as_trajectory(values: TrajectoryLike) -> FloatArray:
    """Flat float64 view of a trajectory buffer; no copy when already float64."""
    return np.asarray(values, dtype=np.float64).reshape(-1)


def get_point(trajectory: TrajectoryLike, time_index: int, point_dimension: int) -> FloatArray:
    """Point at time_index as a view into the trajectory buffer."""
    start = time_index * point_dimension
    return as_trajectory(trajectory)[start : start + point_dimension]


def split_point(
    point: FloatArray,
    position_dimension: int,
    velocity_dimension: int,
    control_dimension: int,
) -> tuple[FloatArray, FloatArray, FloatArray]:
    """Split a point into (position, velocity, control) views."""
    validate_array_length(
        point, position_dimension + velocity_dimension + control_dimension, "point", "split_point"
    )
    velocity_start = position_dimension
    control_start = velocity_start + velocity_dimension
    return (
        point[:velocity_start],
        point[velocity_start:control_start],
        point[control_start:],
    )


def trajectory_with_identical_points(number_of_points: int, point: TrajectoryLike) -> FloatArray:
    """Seed a trajectory by repeating one point number_of_points times."""
    validate_positive_integer(number_of_points, "number of points")
    return np.tile(as_trajectory(point), number_of_points)


def write_position_velocity_control(
    trajectory: TrajectoryLike,
    number_of_points: int,
    point_dimension: int,
    position_dimension: int,
    position_path: str | Path,
    velocity_path: str | Path,
    control_path: str | Path,
) -> None:
    """
    Write the position, velocity and control columns of a trajectory to text files.

    Each file receives one whitespace-separated row per time step. Existing files
    are overwritten.

    Args:
        trajectory: Flat trajectory buffer
        number_of_points: Number of time steps in the trajectory
        point_dimension: Scalars per point
        position_dimension: Position (and velocity) scalars per point
        position_path: Output file for positions
        velocity_path: Output file for velocities
        control_path: Output file for controls
    """
    control_dimension = validate_point_layout(point_dimension, position_dimension)
    buffer = as_trajectory(trajectory)
    validate_array_length(
        buffer, number_of_points * point_dimension, "trajectory", "write_position_velocity_control"
    )

    points = buffer.reshape(number_of_points, point_dimension)
    velocity_start = position_dimension
    control_start = 2 * position_dimension
    columns = {
        Path(position_path): points[:, :velocity_start],
        Path(velocity_path): points[:, velocity_start:control_start],
        Path(control_path): points[:, control_start : control_start + control_dimension],
    }
    for path, values in columns.items():
        np.savetxt(path, values, fmt="%.17g")
        logger.debug("Wrote %d rows to %s", values.shape[0], path)

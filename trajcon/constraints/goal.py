"""
Squared distance to a kinematic goal at one time index.
"""

import logging

import numpy as np

from ..input_validation import (
    validate_goal_vector,
    validate_kinematic_layout,
    validate_positive_integer,
    validate_time_index,
)
from ..tc_types import FloatArray, GradientIndices, TrajectoryLike
from ..trajectory import as_trajectory
from ..utils.constants import GOAL_GRADIENT_FACTOR


logger = logging.getLogger(__name__)


class _KinematicGoalBase:
    def __init__(
        self,
        number_of_points: int,
        point_dimension: int,
        kinematic_dimension: int,
        goal_time_index: int,
        kinematic_goal: TrajectoryLike,
    ) -> None:
        validate_positive_integer(number_of_points, "number of points")
        validate_kinematic_layout(point_dimension, kinematic_dimension)
        validate_time_index(goal_time_index, number_of_points, "goal time index")

        self.number_of_points = number_of_points
        self.point_dimension = point_dimension
        self.kinematic_dimension = kinematic_dimension
        self.goal_time_index = goal_time_index
        self.kinematic_goal = validate_goal_vector(kinematic_goal, kinematic_dimension)
        self.kinematic_start_index = goal_time_index * point_dimension

        logger.debug(
            "%s at time index %d: kinematic_dimension=%d, columns %d..%d",
            type(self).__name__,
            goal_time_index,
            kinematic_dimension,
            self.kinematic_start_index,
            self.kinematic_start_index + kinematic_dimension - 1,
        )

    def _goal_difference(self, trajectory: TrajectoryLike) -> FloatArray:
        start = self.kinematic_start_index
        current = as_trajectory(trajectory)[start : start + self.kinematic_dimension]
        return self.kinematic_goal - current

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(goal_time_index={self.goal_time_index}, "
            f"kinematic_goal={self.kinematic_goal.tolist()})"
        )


class KinematicGoalSquare(_KinematicGoalBase):
    """
    Residual (goal[i] - x[T * point_dimension + i])**2 for each kinematic slot.

    A zero residual means the position and velocity at the goal time index
    match the goal exactly.
    """

    def __call__(self, trajectory: TrajectoryLike) -> FloatArray:
        return np.square(self._goal_difference(trajectory))


class KinematicGoalSquareGradient(_KinematicGoalBase):
    """Nonzero partials -2 * (goal[i] - x[T * point_dimension + i]), one per residual row."""

    def __call__(self, trajectory: TrajectoryLike) -> FloatArray:
        return GOAL_GRADIENT_FACTOR * self._goal_difference(trajectory)


def kinematic_goal_square_gradient_indices(
    row_offset: int,
    point_dimension: int,
    kinematic_dimension: int,
    goal_time_index: int,
) -> GradientIndices:
    """
    Sparsity of the goal constraint gradient.

    Args:
        row_offset: First global row of this block
        point_dimension: Scalars per trajectory point
        kinematic_dimension: Position plus velocity scalars
        goal_time_index: Time index the goal applies to

    Returns:
        (kinematic_dimension, rows, cols); one nonzero per row. The count is the
        amount to advance the row offset by for the next block.
    """
    kinematic_start_index = goal_time_index * point_dimension
    rows = np.arange(row_offset, row_offset + kinematic_dimension, dtype=np.int64)
    cols = np.arange(
        kinematic_start_index, kinematic_start_index + kinematic_dimension, dtype=np.int64
    )
    return kinematic_dimension, rows, cols

"""
Trapezoidal collocation defects between consecutive trajectory points.

For steps T and T+1 with time step dt the defect rows are

    position: (q[T+1] - q[T]) - dt / 2 * (v[T] + v[T+1])
    velocity: (v[T+1] - v[T]) - dt / 2 * (a[T] + a[T+1])

where a = dynamics(q, v, u). A zero defect means the two points are consistent
with the dynamics to trapezoidal accuracy.

Two gradient encodings are provided. ``KinematicDefectGradient`` emits the fixed
four-entry pattern per row, which is exact only when the acceleration equals the
control. ``KinematicDefectJacobian`` composes the dynamics model's own Jacobian
with the trapezoid coefficients and is exact for any model.
"""

import logging

import numpy as np

from ..dynamics import as_dynamics
from ..exceptions import ConfigurationError
from ..input_validation import (
    validate_fixed_pattern_layout,
    validate_point_layout,
    validate_positive_integer,
    validate_positive_number,
)
from ..tc_types import DynamicsFunction, DynamicsModel, FloatArray, GradientIndices, TrajectoryLike
from ..trajectory import get_point, split_point
from ..utils.constants import DEFECT_DERIVATIVES_PER_ROW, TRAPEZOID_WEIGHT


logger = logging.getLogger(__name__)


class _KinematicDefectBase:
    def __init__(
        self,
        dynamics: DynamicsModel | DynamicsFunction,
        point_dimension: int,
        position_dimension: int,
        time_index: int,
        dt: float,
    ) -> None:
        self.control_dimension = validate_point_layout(point_dimension, position_dimension)
        validate_positive_integer(time_index, "time index", min_value=0)
        validate_positive_number(dt, "dt")

        self.dynamics = as_dynamics(dynamics)
        check_layout = getattr(self.dynamics, "check_layout", None)
        if callable(check_layout):
            check_layout(position_dimension, self.control_dimension)
        self.point_dimension = point_dimension
        self.position_dimension = position_dimension
        self.velocity_dimension = position_dimension
        self.time_index = time_index
        self.dt = float(dt)
        self.half_dt = TRAPEZOID_WEIGHT * self.dt

        logger.debug(
            "%s between time indices %d and %d: dt=%g, dynamics=%r",
            type(self).__name__,
            time_index,
            time_index + 1,
            self.dt,
            self.dynamics,
        )

    @property
    def num_constraints(self) -> int:
        return self.position_dimension + self.velocity_dimension

    def _split(self, trajectory: TrajectoryLike, time_index: int):
        point = get_point(trajectory, time_index, self.point_dimension)
        return split_point(
            point, self.position_dimension, self.velocity_dimension, self.control_dimension
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(time_index={self.time_index}, dt={self.dt}, "
            f"dynamics={self.dynamics!r})"
        )


class KinematicDefect(_KinematicDefectBase):
    """Position defects followed by velocity defects, 2 * position_dimension rows."""

    def __call__(self, trajectory: TrajectoryLike) -> FloatArray:
        now_position, now_velocity, now_control = self._split(trajectory, self.time_index)
        next_position, next_velocity, next_control = self._split(trajectory, self.time_index + 1)

        position_defect = (next_position - now_position) - self.half_dt * (
            now_velocity + next_velocity
        )

        now_acceleration = self.dynamics.evaluate(now_position, now_velocity, now_control)
        next_acceleration = self.dynamics.evaluate(next_position, next_velocity, next_control)

        velocity_defect = (next_velocity - now_velocity) - self.half_dt * (
            now_acceleration + next_acceleration
        )
        return np.concatenate([position_defect, velocity_defect])


class KinematicDefectGradient(_KinematicDefectBase):
    """
    Fixed-pattern defect gradient: [-1, -dt/2, +1, -dt/2] for every row.

    The entries are d/d(now), d/d(derivative now), d/d(next), d/d(derivative next),
    where the derivative slot is the velocity for position rows and the matching
    control for velocity rows. Points may carry extra controls beyond the first
    position_dimension. Velocity rows are exact only when the acceleration is those
    leading controls; use ``KinematicDefectJacobian`` otherwise.
    """

    def __init__(
        self,
        dynamics: DynamicsModel | DynamicsFunction,
        point_dimension: int,
        position_dimension: int,
        time_index: int,
        dt: float,
    ) -> None:
        validate_fixed_pattern_layout(point_dimension, position_dimension)
        super().__init__(dynamics, point_dimension, position_dimension, time_index, dt)
        if getattr(self.dynamics, "control_is_acceleration", None) is False:
            logger.warning(
                "%r does not map control to acceleration; fixed-pattern velocity defect "
                "partials are inexact. Use KinematicDefectJacobian for this model.",
                self.dynamics,
            )

        row_pattern = np.array([-1.0, -self.half_dt, 1.0, -self.half_dt])
        self._values = np.tile(row_pattern, self.num_constraints)

    def __call__(self, trajectory: TrajectoryLike) -> FloatArray:
        return self._values.copy()


class KinematicDefectJacobian(_KinematicDefectBase):
    """
    Exact defect gradient built from the dynamics model's Jacobian.

    Position rows keep the four-entry trapezoid pattern. Each velocity row covers
    every slot of the current point followed by every slot of the next point, as
    laid out by ``kinematic_defect_jacobian_indices``.
    """

    def __init__(
        self,
        dynamics: DynamicsModel | DynamicsFunction,
        point_dimension: int,
        position_dimension: int,
        time_index: int,
        dt: float,
    ) -> None:
        super().__init__(dynamics, point_dimension, position_dimension, time_index, dt)
        if not callable(getattr(self.dynamics, "jacobian", None)):
            raise ConfigurationError(
                f"{self.dynamics!r} does not provide jacobian()", "KinematicDefectJacobian"
            )
        row_pattern = np.array([-1.0, -self.half_dt, 1.0, -self.half_dt])
        self._position_values = np.tile(row_pattern, self.position_dimension)

    def _point_partials(self, position, velocity, control, velocity_sign: float) -> FloatArray:
        d_position, d_velocity, d_control = self.dynamics.jacobian(position, velocity, control)
        partials = -self.half_dt * np.hstack(
            [
                np.reshape(d_position, (self.position_dimension, self.position_dimension)),
                np.reshape(d_velocity, (self.position_dimension, self.velocity_dimension)),
                np.reshape(d_control, (self.position_dimension, self.control_dimension)),
            ]
        )
        velocity_slice = slice(self.position_dimension, 2 * self.position_dimension)
        partials[:, velocity_slice] += velocity_sign * np.eye(self.velocity_dimension)
        return partials

    def __call__(self, trajectory: TrajectoryLike) -> FloatArray:
        now_partials = self._point_partials(*self._split(trajectory, self.time_index), -1.0)
        next_partials = self._point_partials(*self._split(trajectory, self.time_index + 1), 1.0)
        velocity_values = np.hstack([now_partials, next_partials]).reshape(-1)
        return np.concatenate([self._position_values, velocity_values])


def kinematic_defect_gradient_indices(
    row_offset: int,
    point_dimension: int,
    position_dimension: int,
    time_index: int,
) -> GradientIndices:
    """
    Sparsity of ``KinematicDefectGradient``.

    Every defect row i in [0, 2p) is repeated four times with columns
    now, now + p, now + point_dimension, now + point_dimension + p, where
    now = time_index * point_dimension + i.

    Returns:
        (2 * position_dimension, rows, cols)

    Raises:
        ConfigurationError: If the point holds fewer controls than positions, which
            would push velocity-row columns past the end of the next point
    """
    validate_fixed_pattern_layout(point_dimension, position_dimension)
    num_constraints = 2 * position_dimension
    now = time_index * point_dimension + np.arange(num_constraints, dtype=np.int64)
    nxt = now + point_dimension

    rows = np.repeat(
        np.arange(row_offset, row_offset + num_constraints, dtype=np.int64),
        DEFECT_DERIVATIVES_PER_ROW,
    )
    cols = np.column_stack(
        [now, now + position_dimension, nxt, nxt + position_dimension]
    ).reshape(-1)
    return num_constraints, rows, cols


def kinematic_defect_jacobian_indices(
    row_offset: int,
    point_dimension: int,
    position_dimension: int,
    time_index: int,
) -> GradientIndices:
    """
    Sparsity of ``KinematicDefectJacobian``.

    Position rows use the four-entry pattern of ``kinematic_defect_gradient_indices``.
    Each velocity row lists all point_dimension columns of point time_index, then
    all point_dimension columns of point time_index + 1.

    Returns:
        (2 * position_dimension, rows, cols)
    """
    now_start = time_index * point_dimension
    next_start = now_start + point_dimension

    position_now = now_start + np.arange(position_dimension, dtype=np.int64)
    position_next = position_now + point_dimension
    position_rows = np.repeat(
        np.arange(row_offset, row_offset + position_dimension, dtype=np.int64),
        DEFECT_DERIVATIVES_PER_ROW,
    )
    position_cols = np.column_stack(
        [
            position_now,
            position_now + position_dimension,
            position_next,
            position_next + position_dimension,
        ]
    ).reshape(-1)

    velocity_row_start = row_offset + position_dimension
    velocity_rows = np.repeat(
        np.arange(velocity_row_start, velocity_row_start + position_dimension, dtype=np.int64),
        2 * point_dimension,
    )
    two_point_cols = np.concatenate(
        [
            np.arange(now_start, now_start + point_dimension, dtype=np.int64),
            np.arange(next_start, next_start + point_dimension, dtype=np.int64),
        ]
    )
    velocity_cols = np.tile(two_point_cols, position_dimension)

    return (
        2 * position_dimension,
        np.concatenate([position_rows, velocity_rows]),
        np.concatenate([position_cols, velocity_cols]),
    )

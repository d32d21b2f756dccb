# trajcon/tc_types.py
"""
Core type definitions for trajcon constraint blocks.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol, TypeAlias

import numpy as np
from numpy.typing import NDArray


# --- NUMERICAL TYPES ---
FloatArray: TypeAlias = NDArray[np.float64]
IntArray: TypeAlias = NDArray[np.int64]
TrajectoryLike: TypeAlias = (
    NDArray[np.floating[Any]] | NDArray[np.integer[Any]] | Sequence[float] | Sequence[int]
)
"""Flat trajectory buffer: number_of_points * point_dimension scalars."""


# --- FUNCTION CONTRACTS ---
ConstraintFunction: TypeAlias = Callable[[TrajectoryLike], FloatArray]
"""Reduces a trajectory to residuals, or to gradient values in sparsity order."""

GradientIndices: TypeAlias = tuple[int, IntArray, IntArray]
"""(constraint_count, rows, cols) of one sparse Jacobian block."""

IndexGenerator: TypeAlias = Callable[..., GradientIndices]
"""Index generator whose first positional argument is the running row offset."""

DynamicsFunction: TypeAlias = Callable[[FloatArray, FloatArray, FloatArray], Any]
"""Bare acceleration callable: f(position, velocity, control)."""


# --- EXTERNAL INTERFACE PROTOCOLS ---
class DynamicsModel(Protocol):
    """Pluggable acceleration model consumed by the kinematic defect constraint."""

    control_is_acceleration: bool | None

    def evaluate(
        self, position: FloatArray, velocity: FloatArray, control: FloatArray
    ) -> FloatArray:
        """Acceleration, length position_dimension."""
        ...

    def jacobian(
        self, position: FloatArray, velocity: FloatArray, control: FloatArray
    ) -> tuple[FloatArray, FloatArray, FloatArray]:
        """Partials of acceleration: (p, p) position, (p, p) velocity, (p, c) control."""
        ...

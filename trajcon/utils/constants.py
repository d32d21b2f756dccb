from typing import TypeAlias


_Weight: TypeAlias = float
_Step: TypeAlias = float

TRAPEZOID_WEIGHT: _Weight = 0.5
"""Weight of each endpoint derivative in the trapezoidal rule."""

GOAL_GRADIENT_FACTOR: float = -2.0
"""Derivative of (goal - x)**2 with respect to x, per unit of (goal - x)."""

DEFECT_DERIVATIVES_PER_ROW: int = 4
"""Nonzeros emitted per defect row by the fixed trapezoidal pattern."""

DEFAULT_FINITE_DIFFERENCE_STEP: _Step = 1.4901161193847656e-08
"""Forward-difference step for dynamics Jacobians (square root of float64 eps)."""

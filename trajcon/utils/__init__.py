# trajcon/utils/__init__.py
"""
Shared constants for trajcon.
"""

from .constants import (
    DEFAULT_FINITE_DIFFERENCE_STEP,
    DEFECT_DERIVATIVES_PER_ROW,
    GOAL_GRADIENT_FACTOR,
    TRAPEZOID_WEIGHT,
)


__all__ = [
    "DEFAULT_FINITE_DIFFERENCE_STEP",
    "DEFECT_DERIVATIVES_PER_ROW",
    "GOAL_GRADIENT_FACTOR",
    "TRAPEZOID_WEIGHT",
]

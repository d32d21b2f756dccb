# trajcon/constraints/__init__.py
"""
Constraint value functions, gradient value functions and their index generators.
"""

from .defect import (
    KinematicDefect,
    KinematicDefectGradient,
    KinematicDefectJacobian,
    kinematic_defect_gradient_indices,
    kinematic_defect_jacobian_indices,
)
from .goal import (
    KinematicGoalSquare,
    KinematicGoalSquareGradient,
    kinematic_goal_square_gradient_indices,
)
from .stacking import StackConstraintGradients, StackConstraints


__all__ = [
    "KinematicDefect",
    "KinematicDefectGradient",
    "KinematicDefectJacobian",
    "KinematicGoalSquare",
    "KinematicGoalSquareGradient",
    "StackConstraintGradients",
    "StackConstraints",
    "kinematic_defect_gradient_indices",
    "kinematic_defect_jacobian_indices",
    "kinematic_goal_square_gradient_indices",
]

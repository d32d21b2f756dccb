# trajcon/__init__.py
"""
trajcon: constraint encoding for discretized trajectory optimization

This package turns a flat trajectory vector into goal and trapezoidal-defect
constraint residuals, their nonzero partial derivatives, and the matching sparse
(row, column) structure consumed by a sparse NLP solver.

Logging:
By default, trajcon produces no output. To enable logging::

    import logging
    logging.basicConfig()
    logging.getLogger('trajcon').setLevel(logging.INFO)  # Structure summaries
    logging.getLogger('trajcon').setLevel(logging.DEBUG)  # Per-block construction
"""

import logging

from trajcon.constraints import (
    KinematicDefect,
    KinematicDefectGradient,
    KinematicDefectJacobian,
    KinematicGoalSquare,
    KinematicGoalSquareGradient,
    StackConstraintGradients,
    StackConstraints,
    kinematic_defect_gradient_indices,
    kinematic_defect_jacobian_indices,
    kinematic_goal_square_gradient_indices,
)
from trajcon.dynamics import (
    BlockDynamics,
    CallableDynamics,
    CasadiDynamics,
    PointMassDynamics,
    as_dynamics,
)
from trajcon.exceptions import ConfigurationError, DataIntegrityError, TrajconBaseError
from trajcon.sparsity import JacobianBlock, SparseJacobianBuilder
from trajcon.trajectory import (
    as_trajectory,
    get_point,
    split_point,
    trajectory_with_identical_points,
    write_position_velocity_control,
)


__all__ = [
    "BlockDynamics",
    "CallableDynamics",
    "CasadiDynamics",
    "ConfigurationError",
    "DataIntegrityError",
    "JacobianBlock",
    "KinematicDefect",
    "KinematicDefectGradient",
    "KinematicDefectJacobian",
    "KinematicGoalSquare",
    "KinematicGoalSquareGradient",
    "PointMassDynamics",
    "SparseJacobianBuilder",
    "StackConstraintGradients",
    "StackConstraints",
    "TrajconBaseError",
    "as_dynamics",
    "as_trajectory",
    "get_point",
    "kinematic_defect_gradient_indices",
    "kinematic_defect_jacobian_indices",
    "kinematic_goal_square_gradient_indices",
    "split_point",
    "trajectory_with_identical_points",
    "write_position_velocity_control",
]

__version__ = "0.1.0"


# Silent by default, user controls everything
logging.getLogger(__name__).addHandler(logging.NullHandler())

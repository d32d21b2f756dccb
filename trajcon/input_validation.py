import logging
import math
from collections.abc import Sequence
from typing import Any

import numpy as np

from .exceptions import ConfigurationError, DataIntegrityError
from .tc_types import FloatArray


logger = logging.getLogger(__name__)


# ============================================================================
# CORE VALIDATION PRIMITIVES
# ============================================================================


def validate_positive_integer(value: Any, name: str, min_value: int = 1) -> None:
    """Single source for integer validation."""
    if isinstance(value, bool) or not isinstance(value, int | np.integer):
        raise ConfigurationError(f"{name} must be integer, got {type(value)}")
    if value < min_value:
        raise ConfigurationError(f"{name} must be >= {min_value}, got {value}")


def validate_positive_number(value: Any, name: str) -> None:
    """Single source for positive finite number validation."""
    if isinstance(value, bool) or not isinstance(value, int | float | np.integer | np.floating):
        raise ConfigurationError(f"{name} must be numeric, got {type(value)}")
    if math.isnan(value) or math.isinf(value):
        raise ConfigurationError(f"{name} cannot be NaN or infinite, got {value}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")


def validate_array_numerical_integrity(
    array: FloatArray, name: str, context: str = "validation"
) -> None:
    """Single source for NaN/Inf validation."""
    if np.any(np.isnan(array)) or np.any(np.isinf(array)):
        raise ConfigurationError(f"{name} contains NaN or Inf values", context)


def validate_array_length(
    array: FloatArray | Sequence[Any], expected_length: int, name: str, context: str = "validation"
) -> None:
    """Single source for length validation."""
    if len(array) != expected_length:
        raise DataIntegrityError(
            f"{name} has length {len(array)}, expected {expected_length}",
            f"Length mismatch in {context}",
        )


# ============================================================================
# TRAJECTORY LAYOUT VALIDATION
# ============================================================================


def validate_time_index(time_index: Any, number_of_points: int, name: str = "time index") -> None:
    """Time index must address an existing point."""
    validate_positive_integer(time_index, name, min_value=0)
    if time_index >= number_of_points:
        raise ConfigurationError(
            f"{name} {time_index} out of range for {number_of_points} points"
        )


def validate_kinematic_layout(point_dimension: int, kinematic_dimension: int) -> None:
    """Kinematic slice (position + velocity) must fit inside a point."""
    validate_positive_integer(point_dimension, "point dimension")
    validate_positive_integer(kinematic_dimension, "kinematic dimension")
    if kinematic_dimension > point_dimension:
        raise ConfigurationError(
            f"Kinematic dimension {kinematic_dimension} exceeds point dimension {point_dimension}"
        )


def validate_point_layout(point_dimension: int, position_dimension: int) -> int:
    """
    Validate a position/velocity/control point layout.

    Returns:
        The control dimension, point_dimension - 2 * position_dimension
    """
    validate_positive_integer(point_dimension, "point dimension")
    validate_positive_integer(position_dimension, "position dimension")
    control_dimension = point_dimension - 2 * position_dimension
    if control_dimension < 0:
        raise ConfigurationError(
            f"Position and velocity ({2 * position_dimension} scalars) do not fit "
            f"in a point of dimension {point_dimension}"
        )
    return control_dimension


def validate_fixed_pattern_layout(point_dimension: int, position_dimension: int) -> int:
    """
    Validate a point layout for the fixed four-entry defect pattern.

    Velocity rows address control slot i as the derivative of velocity i, so the
    point needs at least one control per position axis.

    Returns:
        The control dimension
    """
    control_dimension = validate_point_layout(point_dimension, position_dimension)
    if control_dimension < position_dimension:
        raise ConfigurationError(
            f"Fixed defect pattern needs at least one control per position axis, got "
            f"control_dimension={control_dimension}, position_dimension={position_dimension}",
            "fixed defect pattern",
        )
    return control_dimension


def validate_goal_vector(kinematic_goal: Any, kinematic_dimension: int) -> FloatArray:
    """
    Validate a kinematic goal and return it as a read-only float array.

    Goals longer than the kinematic dimension are accepted; only the leading
    kinematic_dimension entries are compared against the trajectory.
    """
    goal = np.array(kinematic_goal, dtype=np.float64)
    if goal.ndim != 1:
        raise ConfigurationError(f"Kinematic goal must be one-dimensional, got shape {goal.shape}")
    if goal.size < kinematic_dimension:
        raise ConfigurationError(
            f"Kinematic goal has {goal.size} entries, expected {kinematic_dimension}"
        )
    validate_array_numerical_integrity(goal, "Kinematic goal", "goal constraint")
    if goal.size > kinematic_dimension:
        logger.debug(
            "Kinematic goal has %d entries, comparing the leading %d",
            goal.size,
            kinematic_dimension,
        )
    goal = goal[:kinematic_dimension]
    goal.setflags(write=False)
    return goal

"""
Acceleration models consumed by the kinematic defect constraint.

Every model offers ``evaluate(position, velocity, control)`` and
``jacobian(position, velocity, control)``. Models are plain classes that satisfy
the ``DynamicsModel`` protocol structurally; none of them share a base class.

Models may also offer ``check_layout(position_dimension, control_dimension)``;
the defect constraints call it once at construction to reject point layouts the
model cannot serve.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

import casadi as ca
import numpy as np
from scipy.optimize import approx_fprime

from .exceptions import ConfigurationError
from .input_validation import (
    validate_array_length,
    validate_array_numerical_integrity,
    validate_positive_integer,
    validate_positive_number,
)
from .tc_types import DynamicsFunction, DynamicsModel, FloatArray
from .utils.constants import DEFAULT_FINITE_DIFFERENCE_STEP


logger = logging.getLogger(__name__)


def _as_vector(values: Any) -> FloatArray:
    return np.asarray(values, dtype=np.float64).reshape(-1)


class BlockDynamics:
    """Reference model: the leading control slots are the acceleration."""

    control_is_acceleration: bool | None = True

    def check_layout(self, position_dimension: int, control_dimension: int) -> None:
        if control_dimension < position_dimension:
            raise ConfigurationError(
                f"Block dynamics needs at least one control per position axis, got "
                f"control_dimension={control_dimension}, position_dimension={position_dimension}",
                "BlockDynamics",
            )

    def evaluate(
        self, position: FloatArray, velocity: FloatArray, control: FloatArray
    ) -> FloatArray:
        return np.array(control[: len(position)], dtype=np.float64)

    def jacobian(
        self, position: FloatArray, velocity: FloatArray, control: FloatArray
    ) -> tuple[FloatArray, FloatArray, FloatArray]:
        p = len(position)
        return np.zeros((p, p)), np.zeros((p, p)), np.eye(p, len(control))

    def __repr__(self) -> str:
        return "BlockDynamics()"


class PointMassDynamics:
    """
    Damped point mass under a constant field: a = (u - damping * v) / mass + gravity.

    The control slots are forces, one per position axis.
    """

    def __init__(
        self,
        mass: float = 1.0,
        damping: float = 0.0,
        gravity: Sequence[float] | FloatArray | None = None,
    ) -> None:
        validate_positive_number(mass, "mass")
        if damping < 0:
            raise ConfigurationError(f"damping must be non-negative, got {damping}")
        self.mass = float(mass)
        self.damping = float(damping)
        self.gravity = None if gravity is None else _as_vector(gravity)
        if self.gravity is not None:
            validate_array_numerical_integrity(self.gravity, "gravity", "point mass dynamics")

    @property
    def control_is_acceleration(self) -> bool | None:
        no_field = self.gravity is None or not np.any(self.gravity)
        return self.mass == 1.0 and self.damping == 0.0 and no_field

    def check_layout(self, position_dimension: int, control_dimension: int) -> None:
        if control_dimension != position_dimension:
            raise ConfigurationError(
                f"Point mass dynamics needs one force per position axis, got "
                f"control_dimension={control_dimension}, position_dimension={position_dimension}",
                "PointMassDynamics",
            )
        if self.gravity is not None and len(self.gravity) != position_dimension:
            raise ConfigurationError(
                f"gravity has {len(self.gravity)} entries, expected {position_dimension}",
                "PointMassDynamics",
            )

    def evaluate(
        self, position: FloatArray, velocity: FloatArray, control: FloatArray
    ) -> FloatArray:
        acceleration = (_as_vector(control) - self.damping * _as_vector(velocity)) / self.mass
        if self.gravity is not None:
            acceleration = acceleration + self.gravity
        return acceleration

    def jacobian(
        self, position: FloatArray, velocity: FloatArray, control: FloatArray
    ) -> tuple[FloatArray, FloatArray, FloatArray]:
        p = len(position)
        return (
            np.zeros((p, p)),
            -self.damping / self.mass * np.eye(p),
            np.eye(p, len(control)) / self.mass,
        )

    def __repr__(self) -> str:
        return f"PointMassDynamics(mass={self.mass}, damping={self.damping}, gravity={self.gravity})"


class CallableDynamics:
    """
    Adapter for a bare ``f(position, velocity, control)`` acceleration callable.

    The Jacobian is approximated by forward differences over the concatenated
    (position, velocity, control) vector.
    """

    control_is_acceleration: bool | None = None

    def __init__(
        self, function: DynamicsFunction, step: float = DEFAULT_FINITE_DIFFERENCE_STEP
    ) -> None:
        if not callable(function):
            raise ConfigurationError(f"Dynamics function must be callable, got {type(function)}")
        validate_positive_number(step, "finite difference step")
        self.function = function
        self.step = float(step)

    def __call__(
        self, position: FloatArray, velocity: FloatArray, control: FloatArray
    ) -> FloatArray:
        return self.evaluate(position, velocity, control)

    def evaluate(
        self, position: FloatArray, velocity: FloatArray, control: FloatArray
    ) -> FloatArray:
        acceleration = _as_vector(self.function(position, velocity, control))
        validate_array_length(acceleration, len(position), "dynamics output")
        return acceleration

    def jacobian(
        self, position: FloatArray, velocity: FloatArray, control: FloatArray
    ) -> tuple[FloatArray, FloatArray, FloatArray]:
        p = len(position)
        v = len(velocity)

        def stacked(state: FloatArray) -> FloatArray:
            return self.evaluate(state[:p], state[p : p + v], state[p + v :])

        state = np.concatenate([_as_vector(position), _as_vector(velocity), _as_vector(control)])
        full = np.atleast_2d(approx_fprime(state, stacked, self.step))
        return full[:, :p], full[:, p : p + v], full[:, p + v :]

    def __repr__(self) -> str:
        return f"CallableDynamics({getattr(self.function, '__name__', self.function)!r})"


class CasadiDynamics:
    """
    Dynamics defined on CasADi symbols.

    Evaluation and the exact acceleration Jacobian both run through compiled
    ``casadi.Function`` objects.
    """

    def __init__(
        self,
        function: ca.Function,
        jacobian_function: ca.Function,
        control_is_acceleration: bool | None = None,
    ) -> None:
        self._function = function
        self._jacobian_function = jacobian_function
        self.control_is_acceleration = control_is_acceleration

    @classmethod
    def from_expression(
        cls,
        build: Callable[[ca.MX, ca.MX, ca.MX], Any],
        position_dimension: int,
        control_dimension: int,
        control_is_acceleration: bool | None = None,
    ) -> "CasadiDynamics":
        """
        Compile a symbolic acceleration expression.

        Args:
            build: Maps (position, velocity, control) symbols to the acceleration,
                either an MX column or a list of scalar expressions
            position_dimension: Position (and velocity) length
            control_dimension: Control length
            control_is_acceleration: Whether the expression is the identity on control

        Raises:
            ConfigurationError: If the expression is not a position_dimension column
        """
        validate_positive_integer(position_dimension, "position dimension")
        validate_positive_integer(control_dimension, "control dimension", min_value=0)

        position = ca.MX.sym("position", position_dimension)
        velocity = ca.MX.sym("velocity", position_dimension)
        control = ca.MX.sym("control", control_dimension)

        acceleration = build(position, velocity, control)
        if isinstance(acceleration, list | tuple):
            acceleration = ca.vertcat(*acceleration)
        acceleration = ca.MX(acceleration)
        if acceleration.shape != (position_dimension, 1):
            raise ConfigurationError(
                f"Acceleration expression has shape {acceleration.shape}, "
                f"expected ({position_dimension}, 1)",
                "CasADi dynamics",
            )

        inputs = [position, velocity, control]
        function = ca.Function("dynamics", inputs, [acceleration])
        jacobian_function = ca.Function(
            "dynamics_jacobian",
            inputs,
            [
                ca.jacobian(acceleration, position),
                ca.jacobian(acceleration, velocity),
                ca.jacobian(acceleration, control),
            ],
        )
        logger.debug(
            "Compiled CasADi dynamics: position_dimension=%d, control_dimension=%d",
            position_dimension,
            control_dimension,
        )
        return cls(function, jacobian_function, control_is_acceleration)

    def check_layout(self, position_dimension: int, control_dimension: int) -> None:
        compiled = (self._function.size1_in(0), self._function.size1_in(2))
        if compiled != (position_dimension, control_dimension):
            raise ConfigurationError(
                f"Compiled for position_dimension={compiled[0]}, "
                f"control_dimension={compiled[1]}, got position_dimension={position_dimension}, "
                f"control_dimension={control_dimension}",
                "CasadiDynamics",
            )

    @staticmethod
    def _column(values: FloatArray) -> ca.DM:
        return ca.DM(np.asarray(values, dtype=np.float64).reshape(-1, 1))

    def evaluate(
        self, position: FloatArray, velocity: FloatArray, control: FloatArray
    ) -> FloatArray:
        result = self._function(
            self._column(position), self._column(velocity), self._column(control)
        )
        return np.array(result.full(), dtype=np.float64).reshape(-1)

    def jacobian(
        self, position: FloatArray, velocity: FloatArray, control: FloatArray
    ) -> tuple[FloatArray, FloatArray, FloatArray]:
        d_position, d_velocity, d_control = self._jacobian_function(
            self._column(position), self._column(velocity), self._column(control)
        )
        return (
            np.array(d_position.full(), dtype=np.float64),
            np.array(d_velocity.full(), dtype=np.float64),
            np.array(d_control.full(), dtype=np.float64),
        )

    def __repr__(self) -> str:
        return f"CasadiDynamics({self._function.name()!r})"


def as_dynamics(dynamics: DynamicsModel | DynamicsFunction) -> DynamicsModel:
    """
    Normalize a dynamics argument to a model with ``evaluate`` and ``jacobian``.

    Objects exposing ``evaluate`` are used as-is; bare callables are wrapped in
    :class:`CallableDynamics`.

    Raises:
        ConfigurationError: If the argument is a class, or neither a model nor callable
    """
    if isinstance(dynamics, type):
        raise ConfigurationError(
            f"Dynamics must be an instance, got the class {dynamics.__name__}; "
            f"pass {dynamics.__name__}() instead"
        )
    if callable(getattr(dynamics, "evaluate", None)):
        return dynamics  # type: ignore[return-value]
    if callable(dynamics):
        return CallableDynamics(dynamics)
    raise ConfigurationError(
        f"Dynamics must be a model with evaluate() or a callable, got {type(dynamics)}"
    )

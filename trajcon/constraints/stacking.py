"""
Concatenation of per-block constraint functions into one vector function.

The combinators know nothing about sparsity. Callers run the matching index
generators in the same order, threading the row offset (see
``SparseJacobianBuilder``), so the stacked values line up with the stacked rows.
"""

import logging
from collections.abc import Iterable

import numpy as np

from ..exceptions import ConfigurationError
from ..tc_types import ConstraintFunction, FloatArray, TrajectoryLike


logger = logging.getLogger(__name__)


class _Stack:
    def __init__(self, functions: Iterable[ConstraintFunction]) -> None:
        self.functions: list[ConstraintFunction] = list(functions)
        for i, function in enumerate(self.functions):
            if not callable(function):
                raise ConfigurationError(
                    f"Entry {i} is not callable: {type(function)}", type(self).__name__
                )
        logger.debug("%s over %d functions", type(self).__name__, len(self.functions))

    def __len__(self) -> int:
        return len(self.functions)

    def __call__(self, trajectory: TrajectoryLike) -> FloatArray:
        if not self.functions:
            return np.array([], dtype=np.float64)
        return np.concatenate(
            [np.asarray(function(trajectory), dtype=np.float64) for function in self.functions]
        )


class StackConstraints(_Stack):
    """Residuals of every constraint function, concatenated in call order."""


class StackConstraintGradients(_Stack):
    """Gradient values of every gradient function, concatenated in call order."""

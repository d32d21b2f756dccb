"""
Sparse Jacobian structure assembly with internal row-offset tracking.

Blocks are appended in the same order their value functions are stacked. The
builder shifts each block's local rows by the running offset, so callers never
thread offsets by hand. The structure is built once; only the values change
between solver iterations.
"""

import logging
from dataclasses import dataclass

import numpy as np
from scipy.sparse import coo_matrix

from .exceptions import ConfigurationError, DataIntegrityError
from .input_validation import validate_array_length, validate_positive_integer
from .tc_types import IndexGenerator, IntArray, TrajectoryLike


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JacobianBlock:
    """One contiguous row range of the global Jacobian."""

    name: str
    row_start: int
    row_count: int
    rows: IntArray
    cols: IntArray

    @property
    def row_stop(self) -> int:
        return self.row_start + self.row_count

    @property
    def num_nonzeros(self) -> int:
        return len(self.rows)


def _as_index_array(values, name: str) -> IntArray:
    array = np.asarray(values)
    if array.ndim != 1:
        raise ConfigurationError(f"{name} must be one-dimensional, got shape {array.shape}")
    if array.size and not np.issubdtype(array.dtype, np.integer):
        raise ConfigurationError(f"{name} must hold integers, got {array.dtype}")
    return array.astype(np.int64)


class SparseJacobianBuilder:
    """
    Ordered collection of Jacobian blocks in coordinate (COO) form.

    Args:
        num_variables: Trajectory length; when given, every column is checked
            against it and it becomes the default matrix width

    Examples:
        >>> builder = SparseJacobianBuilder(num_variables=18)
        >>> rows, cols = builder.add_indices(kinematic_goal_square_gradient_indices, 6, 4, 0)
        >>> rows, cols = builder.add_indices(kinematic_defect_gradient_indices, 6, 2, 0)
        >>> builder.num_constraints
        8
    """

    def __init__(self, num_variables: int | None = None) -> None:
        if num_variables is not None:
            validate_positive_integer(num_variables, "number of variables")
        self.num_variables = num_variables
        self._blocks: list[JacobianBlock] = []
        self._row_offset = 0

    @property
    def row_offset(self) -> int:
        """First row of the next block."""
        return self._row_offset

    @property
    def num_constraints(self) -> int:
        return self._row_offset

    @property
    def blocks(self) -> tuple[JacobianBlock, ...]:
        return tuple(self._blocks)

    @property
    def num_nonzeros(self) -> int:
        return sum(block.num_nonzeros for block in self._blocks)

    @property
    def rows(self) -> IntArray:
        if not self._blocks:
            return np.array([], dtype=np.int64)
        return np.concatenate([block.rows for block in self._blocks])

    @property
    def cols(self) -> IntArray:
        if not self._blocks:
            return np.array([], dtype=np.int64)
        return np.concatenate([block.cols for block in self._blocks])

    def add_block(
        self,
        row_count: int,
        local_rows: TrajectoryLike,
        local_cols: TrajectoryLike,
        name: str | None = None,
    ) -> tuple[IntArray, IntArray]:
        """
        Append a block whose rows are numbered from zero.

        Args:
            row_count: Constraint rows the block occupies
            local_rows: Row of each nonzero, in [0, row_count)
            local_cols: Trajectory column of each nonzero
            name: Label used in summaries and plots

        Returns:
            (global_rows, global_cols) for the block

        Raises:
            ConfigurationError: If the block is inconsistent with row_count or
                the trajectory width
        """
        validate_positive_integer(row_count, "row count", min_value=0)
        rows = _as_index_array(local_rows, "local rows")
        cols = _as_index_array(local_cols, "local cols")
        block_name = name or f"block {len(self._blocks)}"

        if rows.size != cols.size:
            raise ConfigurationError(
                f"{rows.size} rows but {cols.size} cols", f"Jacobian block '{block_name}'"
            )
        if rows.size and (rows.min() < 0 or rows.max() >= row_count):
            raise ConfigurationError(
                f"Local rows span [{rows.min()}, {rows.max()}], outside [0, {row_count})",
                f"Jacobian block '{block_name}'",
            )
        if cols.size and cols.min() < 0:
            raise ConfigurationError(
                f"Negative column {cols.min()}", f"Jacobian block '{block_name}'"
            )
        if cols.size and self.num_variables is not None and cols.max() >= self.num_variables:
            raise ConfigurationError(
                f"Column {cols.max()} beyond trajectory length {self.num_variables}",
                f"Jacobian block '{block_name}'",
            )

        block = JacobianBlock(
            name=block_name,
            row_start=self._row_offset,
            row_count=int(row_count),
            rows=rows + self._row_offset,
            cols=cols,
        )
        self._blocks.append(block)
        self._row_offset = block.row_stop

        logger.debug(
            "Added %s: rows %d..%d, %d nonzeros",
            block.name,
            block.row_start,
            block.row_stop - 1,
            block.num_nonzeros,
        )
        return block.rows, block.cols

    def add_indices(
        self, index_generator: IndexGenerator, *args, name: str | None = None
    ) -> tuple[IntArray, IntArray]:
        """
        Call an index generator at the current row offset and append its block.

        Args:
            index_generator: Function taking the row offset first, returning
                (constraint_count, rows, cols)
            *args: Remaining generator arguments
            name: Label; defaults to the generator name and arguments

        Returns:
            (global_rows, global_cols) for the block
        """
        offset = self._row_offset
        count, rows, cols = index_generator(offset, *args)
        label = name or f"{getattr(index_generator, '__name__', 'block')}{tuple(args)}"
        return self.add_block(count, np.asarray(rows) - offset, cols, label)

    def to_coo(self, values: TrajectoryLike, num_variables: int | None = None) -> coo_matrix:
        """
        Assemble the Jacobian from gradient values stacked in block order.

        Raises:
            DataIntegrityError: If the values do not match the recorded nonzeros
        """
        data = np.asarray(values, dtype=np.float64).reshape(-1)
        validate_array_length(data, self.num_nonzeros, "Jacobian values", "to_coo")

        cols = self.cols
        width = num_variables if num_variables is not None else self.num_variables
        if width is None:
            width = int(cols.max()) + 1 if cols.size else 0
        elif cols.size and cols.max() >= width:
            raise DataIntegrityError(
                f"Column {cols.max()} beyond matrix width {width}", "to_coo"
            )
        return coo_matrix((data, (self.rows, cols)), shape=(self.num_constraints, width))

    def summary(self) -> str:
        """Block table: name, row range and nonzero count, also logged at INFO."""
        lines = [f"{'block':<48} {'rows':>12} {'nnz':>6}"]
        for block in self._blocks:
            row_range = f"{block.row_start}..{block.row_stop - 1}" if block.row_count else "-"
            lines.append(f"{block.name:<48} {row_range:>12} {block.num_nonzeros:>6}")
        lines.append(
            f"{'total':<48} {self.num_constraints:>12} {self.num_nonzeros:>6}"
        )
        text = "\n".join(lines)
        logger.info("Sparse Jacobian structure:\n%s", text)
        return text

    def __repr__(self) -> str:
        return (
            f"SparseJacobianBuilder(blocks={len(self._blocks)}, "
            f"constraints={self.num_constraints}, nonzeros={self.num_nonzeros})"
        )

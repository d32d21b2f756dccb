"""
Sparsity pattern plots for assembled constraint Jacobians.
"""

import logging

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes as MplAxes
from matplotlib.figure import Figure as MplFigure

from .sparsity import SparseJacobianBuilder


logger = logging.getLogger(__name__)


def plot_jacobian_sparsity(
    builder: SparseJacobianBuilder,
    num_variables: int | None = None,
    ax: MplAxes | None = None,
    show: bool = False,
    show_block_boundaries: bool = True,
    markersize: float = 4.0,
) -> MplFigure:
    """
    Plot the nonzero pattern of the Jacobian recorded in a builder.

    Args:
        builder: Builder holding the block structure
        num_variables: Matrix width; defaults to the builder's trajectory length
        ax: Axes to draw into; a new figure is created when omitted
        show: Whether to call ``plt.show()``
        show_block_boundaries: Whether to draw a line between consecutive blocks
        markersize: Marker size for each nonzero

    Returns:
        The figure containing the plot

    Examples:
        >>> fig = plot_jacobian_sparsity(builder)
        >>> fig.savefig("jacobian.png")
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8.0, 6.0))
    else:
        fig = ax.figure

    if builder.num_nonzeros == 0:
        logger.warning("Jacobian structure has no nonzeros; plotting empty axes")
        num_rows = builder.num_constraints
        num_cols = num_variables or builder.num_variables or 0
    else:
        structure = builder.to_coo(np.ones(builder.num_nonzeros), num_variables)
        num_rows, num_cols = structure.shape
        ax.spy(structure, markersize=markersize)

    if show_block_boundaries:
        for block in builder.blocks[:-1]:
            ax.axhline(block.row_stop - 0.5, color="tab:red", linewidth=0.6, alpha=0.6)

    ax.set_title(
        f"Constraint Jacobian: {num_rows} x {num_cols}, {builder.num_nonzeros} nonzeros"
    )
    ax.set_xlabel("Trajectory column")
    ax.set_ylabel("Constraint row")

    if show:
        plt.show()
    return fig

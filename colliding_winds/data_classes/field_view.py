from functools import partial
from typing import NamedTuple

import jax
import jax.numpy as jnp
from beartype import beartype as typechecker
from jaxtyping import Array, Float, jaxtyped

from colliding_winds.option_classes.condition_config import (
    BLOCKED_STATE_TYPE,
    STATE_TYPE,
    ConditionConfig,
)

# The host hands over its conserved variables per block, ghost cells
# included. A field view couples such an array with the information
# needed to find the physical position of every cell, so the wind
# kernels do not depend on the host's grid machinery.


class FieldView(NamedTuple):
    """Conserved variables of a single block."""

    #: The conserved state, (num_vars, nx, ny, nz) incl. ghost cells.
    conserved_state: STATE_TYPE

    #: Physical coordinates of the lower corner of the
    #: first physical (non-ghost) cell.
    lower_corner: Float[Array, "3"]

    #: Cell widths along x, y and z.
    grid_spacing: Float[Array, "3"]


class BlockedField(NamedTuple):
    """Conserved variables of a stack of equally shaped blocks,
    laid out as (block, equation, i, j, k)."""

    #: The conserved states of all blocks.
    conserved_states: BLOCKED_STATE_TYPE

    #: Lower corner of the first physical cell of every block.
    lower_corners: Float[Array, "num_blocks 3"]

    #: Cell widths along x, y and z, per block.
    grid_spacings: Float[Array, "num_blocks 3"]


def get_field_view(
    conserved_state: STATE_TYPE,
    lower_corner,
    grid_spacing,
) -> FieldView:
    """Wrap a block of the host array into a field view.

    Args:
        conserved_state: The conserved state of the block.
        lower_corner: Lower corner of the first physical cell.
        grid_spacing: Cell width, scalar or one per axis.

    Returns:
        The field view.
    """
    dtype = conserved_state.dtype
    lower_corner = jnp.asarray(lower_corner, dtype=dtype) * jnp.ones(3, dtype=dtype)
    grid_spacing = jnp.asarray(grid_spacing, dtype=dtype) * jnp.ones(3, dtype=dtype)
    return FieldView(conserved_state, lower_corner, grid_spacing)


def get_blocked_field(
    conserved_states: BLOCKED_STATE_TYPE,
    lower_corners,
    grid_spacing,
) -> BlockedField:
    """Wrap the host's (block, equation, i, j, k) array.

    Args:
        conserved_states: The conserved states of all blocks.
        lower_corners: Lower corner of the first physical cell of every block.
        grid_spacing: Cell width, scalar, one per axis or one per block and axis.

    Returns:
        The blocked field.
    """
    dtype = conserved_states.dtype
    num_blocks = conserved_states.shape[0]
    lower_corners = jnp.asarray(lower_corners, dtype=dtype).reshape(num_blocks, 3)
    grid_spacings = jnp.broadcast_to(
        jnp.asarray(grid_spacing, dtype=dtype), (num_blocks, 3)
    )
    return BlockedField(conserved_states, lower_corners, grid_spacings)


@jaxtyped(typechecker=typechecker)
@partial(jax.jit, static_argnames=["config"])
def get_cell_centers(
    field_view: FieldView, config: ConditionConfig
) -> Float[Array, "3 num_cells_x num_cells_y num_cells_z"]:
    """Physical cell-center coordinates of every cell of the block,
    ghost cells included.

    Args:
        field_view: The field view.
        config: The condition configuration.

    Returns:
        The x, y and z coordinates of the cell centers.
    """
    ngc = config.num_ghost_cells
    shape = field_view.conserved_state.shape[1:]
    dtype = field_view.conserved_state.dtype

    axes = [
        field_view.lower_corner[axis]
        + (jnp.arange(shape[axis], dtype=dtype) - ngc + 0.5) * field_view.grid_spacing[axis]
        for axis in range(3)
    ]

    return jnp.array(jnp.meshgrid(*axes, indexing="ij"))


@partial(jax.jit, static_argnames=["config"])
def get_physical_mask(field_view: FieldView, config: ConditionConfig):
    """Boolean mask of the physical (non-ghost) cells of the block."""
    ngc = config.num_ghost_cells
    shape = field_view.conserved_state.shape[1:]
    mask = jnp.zeros(shape, dtype=bool)
    return mask.at[
        ngc : shape[0] - ngc, ngc : shape[1] - ngc, ngc : shape[2] - ngc
    ].set(True)

from typing import NamedTuple, Tuple, Union

from jaxtyping import Array, Float

from colliding_winds.errors import ConfigurationError

# ===================== constant definition =====================

# driver states
UNINITIALIZED = 0
ACTIVE = 1

# axes
XAXIS = 0
YAXIS = 1
ZAXIS = 2

# number of wind sources in a colliding wind binary
NUM_WIND_SOURCES = 2

# ============================================================

# ===================== type definitions =====================

STATE_TYPE = Float[Array, "num_vars num_cells_x num_cells_y num_cells_z"]

BLOCKED_STATE_TYPE = Float[
    Array, "num_blocks num_vars num_cells_x num_cells_y num_cells_z"
]

FIELD_TYPE = Float[Array, "num_cells_x num_cells_y num_cells_z"]

SCALAR_TYPE = Union[float, Float[Array, ""]]

# =============================================================


class ConditionConfig(NamedTuple):
    """
    Static configuration of the wind conditions. Changing
    any of these values requires recompilation of the
    injection kernels, so they are passed as static
    arguments to the jitted functions.
    """

    #: Depth of the ghost cell layer around every block.
    num_ghost_cells: int = 1

    #: Whether the host carries a passive magnetic field
    #: (three extra equations after the energy).
    mhd: bool = False

    #: Number of passive scalars after all other variables.
    num_passive_scalars: int = 0

    #: Write the wind density of source i into passive
    #: scalar i (and zero into the other wind tracer).
    trace_wind_density: bool = False

    #: Also overwrite ghost cells that lie inside a wind sphere.
    inject_ghost_cells: bool = True

    #: The density singularity at the source center is
    #: avoided by clamping the distance to at least
    #: min_radius_cells * (smallest cell width).
    min_radius_cells: float = 1.0

    #: Iteration bound of the Kepler solver.
    max_kepler_iterations: int = 50

    #: Absolute tolerance on the eccentric anomaly.
    kepler_tolerance: float = 1e-10

    #: Axes along which the host mirrors the domain at
    #: its lower face. Wind sources are then also imposed
    #: at their mirror images.
    mirrored_axes: Tuple[bool, bool, bool] = (False, False, False)


def finalize_config(config: ConditionConfig) -> ConditionConfig:
    """Finalizes the condition configuration."""

    if config.num_ghost_cells < 0:
        raise ConfigurationError("The number of ghost cells must not be negative.")

    if config.num_passive_scalars < 0:
        raise ConfigurationError("The number of passive scalars must not be negative.")

    if not config.min_radius_cells > 0:
        raise ConfigurationError(
            f"The minimum radius clamp must be positive, got {config.min_radius_cells} cells."
        )

    if config.max_kepler_iterations < 1:
        raise ConfigurationError("The Kepler solver needs at least one iteration.")

    if not config.kepler_tolerance > 0:
        raise ConfigurationError("The Kepler tolerance must be positive.")

    if len(config.mirrored_axes) != 3:
        raise ConfigurationError(
            "mirrored_axes needs one entry per axis (x, y, z)."
        )

    # lists are not hashable, which static arguments have to be
    config = config._replace(
        mirrored_axes=tuple(bool(axis) for axis in config.mirrored_axes)
    )

    if config.trace_wind_density and config.num_passive_scalars < NUM_WIND_SOURCES:
        print(
            "Tracing the wind density needs one passive scalar per wind source, "
            f"setting num_passive_scalars to {NUM_WIND_SOURCES}."
        )
        config = config._replace(num_passive_scalars=NUM_WIND_SOURCES)

    return config

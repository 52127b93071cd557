import itertools
from functools import partial

import jax
import jax.numpy as jnp
from beartype import beartype as typechecker
from jaxtyping import Array, Float, jaxtyped

from colliding_winds.data_classes.field_view import (
    BlockedField,
    FieldView,
    get_cell_centers,
    get_physical_mask,
)
from colliding_winds.fluid_equations.fluid import (
    pressure_from_temperature,
    total_energy_from_primitives,
)
from colliding_winds.fluid_equations.registered_variables import RegisteredVariables
from colliding_winds.option_classes.condition_config import (
    NUM_WIND_SOURCES,
    STATE_TYPE,
    ConditionConfig,
)
from colliding_winds.option_classes.condition_params import ConditionParams
from colliding_winds._physics_modules._stellar_wind.stellar_wind_options import WindSource

# ================= Spherical wind imposition =================

# Every cell whose center lies strictly inside the source radius is
# overwritten with the steady, constant-velocity wind solution
#
#   rho(r) = Mdot / (4 pi r^2 v_inf),   v = v_inf r_hat,
#
# with an ideal-gas thermal energy at the wind temperature. All other
# cells are left bit-identical, so repeated imposition is idempotent.


def _spherical_wind_overwrite(
    wind_source: WindSource,
    field_view: FieldView,
    config: ConditionConfig,
    params: ConditionParams,
    registered_variables: RegisteredVariables,
    source_slot: int,
) -> STATE_TYPE:
    conserved_state = field_view.conserved_state
    dtype = conserved_state.dtype

    cell_centers = get_cell_centers(field_view, config)
    offset = cell_centers - jnp.asarray(wind_source.center, dtype=dtype)[:, None, None, None]
    r = jnp.sqrt(jnp.sum(offset**2, axis=0))

    # cells exactly on the sphere count as outside
    injection_mask = r < wind_source.radius
    if not config.inject_ghost_cells:
        injection_mask = jnp.logical_and(injection_mask, get_physical_mask(field_view, config))

    # clamp the distance to avoid the r -> 0 singularity
    r_min = config.min_radius_cells * jnp.min(field_view.grid_spacing)
    r_eff = jnp.maximum(r, r_min)

    rho = wind_source.mass_loss_rate / (4 * jnp.pi * r_eff**2 * wind_source.terminal_velocity)

    # radial unit vector, zero for a cell centered on the source
    safe_r = jnp.where(r > 0, r, 1.0)
    direction = jnp.where(r > 0, offset / safe_r, 0.0)
    speed = jnp.where(r > 0, wind_source.terminal_velocity, 0.0)

    momentum = rho * speed * direction

    p = pressure_from_temperature(
        rho, wind_source.temperature, wind_source.mean_molecular_weight, params.gas_constant
    )
    E = total_energy_from_primitives(rho, speed, p, params.gamma)

    def overwrite(state, index, value):
        return state.at[index].set(jnp.where(injection_mask, value, state[index]))

    conserved_state = overwrite(conserved_state, registered_variables.density_index, rho)
    conserved_state = overwrite(conserved_state, registered_variables.momentum_index.x, momentum[0])
    conserved_state = overwrite(conserved_state, registered_variables.momentum_index.y, momentum[1])
    conserved_state = overwrite(conserved_state, registered_variables.momentum_index.z, momentum[2])
    conserved_state = overwrite(conserved_state, registered_variables.energy_index, E)

    # magnetic field and passive scalars are only touched
    # for the wind density tracers
    if registered_variables.wind_density_active:
        for slot in range(NUM_WIND_SOURCES):
            tracer = rho if slot == source_slot else jnp.zeros_like(rho)
            conserved_state = overwrite(
                conserved_state, registered_variables.wind_density_index + slot, tracer
            )

    return conserved_state


@jaxtyped(typechecker=typechecker)
@partial(jax.jit, static_argnames=["config", "registered_variables", "source_slot"])
def impose_spherical_wind(
    wind_source: WindSource,
    field_view: FieldView,
    config: ConditionConfig,
    params: ConditionParams,
    registered_variables: RegisteredVariables,
    source_slot: int = 0,
) -> FieldView:
    """Overwrite all cells of a block within the source radius with
    the analytic spherical wind.

    Args:
        wind_source: The wind source.
        field_view: The block to inject into.
        config: The condition configuration.
        params: The condition parameters.
        registered_variables: The registered variables.
        source_slot: Which wind tracer the source writes to
            (only used with trace_wind_density).

    Returns:
        The field view with the wind imposed.
    """

    conserved_state = _spherical_wind_overwrite(
        wind_source, field_view, config, params, registered_variables, source_slot
    )

    return field_view._replace(conserved_state=conserved_state)


@jaxtyped(typechecker=typechecker)
@partial(jax.jit, static_argnames=["config", "registered_variables", "source_slot"])
def impose_spherical_wind_blocks(
    wind_source: WindSource,
    blocked_field: BlockedField,
    config: ConditionConfig,
    params: ConditionParams,
    registered_variables: RegisteredVariables,
    source_slot: int = 0,
) -> BlockedField:
    """Impose the spherical wind on every block of the host array.

    The blocks are independent, so the injection is vectorized over
    the block axis.
    """

    def inject_block(conserved_state, lower_corner, grid_spacing):
        field_view = FieldView(conserved_state, lower_corner, grid_spacing)
        return _spherical_wind_overwrite(
            wind_source, field_view, config, params, registered_variables, source_slot
        )

    conserved_states = jax.vmap(inject_block)(
        blocked_field.conserved_states,
        blocked_field.lower_corners,
        blocked_field.grid_spacings,
    )

    return blocked_field._replace(conserved_states=conserved_states)


# ================= Mirror images =================


def source_images(
    center: Float[Array, "3"], config: ConditionConfig
) -> Float[Array, "num_images 3"]:
    """All physical images of a source center when the host mirrors
    the domain at the lower face (coordinate 0) of some axes.

    The first image is always the source itself.
    """

    mirrored = [axis for axis in range(3) if config.mirrored_axes[axis]]

    images = []
    for num_flips in range(len(mirrored) + 1):
        for flipped_axes in itertools.combinations(mirrored, num_flips):
            sign = jnp.array([-1.0 if axis in flipped_axes else 1.0 for axis in range(3)])
            images.append(sign * center)

    return jnp.stack(images)


@jaxtyped(typechecker=typechecker)
@partial(jax.jit, static_argnames=["config", "registered_variables", "source_slot"])
def impose_wind_with_images(
    wind_source: WindSource,
    field_view: FieldView,
    config: ConditionConfig,
    params: ConditionParams,
    registered_variables: RegisteredVariables,
    source_slot: int = 0,
) -> FieldView:
    """Impose the wind of a source and of all its mirror images."""

    for image in source_images(wind_source.center, config):
        field_view = impose_spherical_wind(
            wind_source._replace(center=image),
            field_view,
            config,
            params,
            registered_variables,
            source_slot,
        )

    return field_view


@jaxtyped(typechecker=typechecker)
@partial(jax.jit, static_argnames=["config", "registered_variables", "source_slot"])
def impose_wind_with_images_blocks(
    wind_source: WindSource,
    blocked_field: BlockedField,
    config: ConditionConfig,
    params: ConditionParams,
    registered_variables: RegisteredVariables,
    source_slot: int = 0,
) -> BlockedField:
    """Blocked variant of impose_wind_with_images."""

    for image in source_images(wind_source.center, config):
        blocked_field = impose_spherical_wind_blocks(
            wind_source._replace(center=image),
            blocked_field,
            config,
            params,
            registered_variables,
            source_slot,
        )

    return blocked_field

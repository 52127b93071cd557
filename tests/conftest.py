# 64-bit precision, has to be set before any array is created
import jax

jax.config.update("jax_enable_x64", True)

import jax.numpy as jnp
import pytest
from astropy import units as u

from colliding_winds import (
    CodeUnits,
    ConditionConfig,
    ConditionParams,
    OrbitalElements,
    create_wind_source,
    get_field_view,
    get_registered_variables,
)


def make_background(registered_variables, num_cells=12, num_ghost_cells=2, rho=1.0, energy=1.0):
    """Uniform background at rest, every other variable set to 0.5."""
    n = num_cells + 2 * num_ghost_cells
    state = 0.5 * jnp.ones((registered_variables.num_vars, n, n, n))
    state = state.at[registered_variables.density_index].set(rho)
    for index in registered_variables.momentum_index:
        state = state.at[index].set(0.0)
    state = state.at[registered_variables.energy_index].set(energy)
    return state


@pytest.fixture
def config():
    return ConditionConfig(num_ghost_cells=2)


@pytest.fixture
def params():
    return ConditionParams(
        box_size=(12.0, 12.0, 12.0),
        gamma=5 / 3,
        gas_constant=1.0,
        time_scale=1.0,
        orbital_elements=OrbitalElements(
            period=2.0, eccentricity=0.0, semi_major_axis=4.0, mass_ratio=1.0
        ),
    )


@pytest.fixture
def field_view(config):
    registered_variables = get_registered_variables(config)
    state = make_background(registered_variables, num_ghost_cells=config.num_ghost_cells)
    return get_field_view(state, lower_corner=0.0, grid_spacing=1.0)


@pytest.fixture
def wind_source():
    # centered on a cell corner, so no cell center
    # lies close to the sphere of radius sqrt(5)
    return create_wind_source(
        center=[6.0, 6.0, 6.0],
        radius=jnp.sqrt(5.0).item(),
        mass_loss_rate=10.0,
        terminal_velocity=2.0,
        temperature=3.0,
        mean_molecular_weight=0.5,
    )


@pytest.fixture
def code_units():
    return CodeUnits(1 * u.AU, 1e-15 * u.M_sun, 1 * u.km / u.s)

import logging

import jax.numpy as jnp
import numpy as np
import pytest
from astropy import units as u

from colliding_winds import (
    ACTIVE,
    UNINITIALIZED,
    BlockedField,
    ConditionDriver,
    ConditionStateError,
    ConfigurationError,
    FieldView,
    OrbitalElements,
    WindSource,
    compute_binary,
    create_wind_source,
    get_blocked_field,
    get_field_view,
)
from colliding_winds._physics_modules._stellar_wind.stellar_wind_presets import (
    binary_orbital_elements,
    o_star_wind_template,
    wr_wind_template,
)
from colliding_winds.option_classes.condition_params import ConditionParams

from conftest import make_background


@pytest.fixture
def templates():
    wind1 = create_wind_source([0.0, 0.0, 0.0], 1.5, 10.0, 2.0, 1.0e5, 0.61)
    wind2 = create_wind_source([0.0, 0.0, 0.0], 1.5, 1.0, 1.0, 1.0e4, 0.61)
    return wind1, wind2


@pytest.fixture
def driver(config, params, templates):
    return ConditionDriver(config, params, *templates)


def test_refresh_before_initialize_is_rejected(driver, field_view):
    assert driver.state == UNINITIALIZED
    with pytest.raises(ConditionStateError):
        driver.refresh(field_view, 0.0)


def test_initialize_only_once(driver, field_view):
    field_view = driver.initialize(field_view)
    assert driver.state == ACTIVE

    with pytest.raises(ConditionStateError):
        driver.initialize(field_view)


def test_initialize_places_the_winds_on_the_orbit(driver, config, params, field_view):
    result = driver.initialize(field_view)

    binary_state = compute_binary(params.initial_phase, driver.config, params)
    np.testing.assert_allclose(driver.wind1.center, binary_state.positions[0])
    np.testing.assert_allclose(driver.wind2.center, binary_state.positions[1])

    # circular orbit of separation 4 around the box center, periastron along +x
    np.testing.assert_allclose(driver.wind1.center, [4.0, 6.0, 6.0], atol=1e-12)
    np.testing.assert_allclose(driver.wind2.center, [8.0, 6.0, 6.0], atol=1e-12)

    assert isinstance(result, FieldView)
    assert not np.array_equal(result.conserved_state, field_view.conserved_state)


def test_refresh_uses_the_phase_offset(driver, field_view):
    field_view = driver.initialize(field_view)
    driver.refresh(field_view, 0.0)

    np.testing.assert_allclose(driver.phase, 0.25)


def test_refresh_after_one_period_returns_to_the_start(driver, params, field_view):
    field_view = driver.initialize(field_view)
    period_in_code_time = params.orbital_elements.period / params.time_scale

    first = driver.refresh(field_view, 0.5)
    phase, center1, center2 = driver.phase, driver.wind1.center, driver.wind2.center

    second = driver.refresh(field_view, 0.5 + period_in_code_time)

    np.testing.assert_allclose(jnp.mod(driver.phase - phase, 1.0), 0.0, atol=1e-12)
    np.testing.assert_allclose(driver.wind1.center, center1, atol=1e-12)
    np.testing.assert_allclose(driver.wind2.center, center2, atol=1e-12)
    np.testing.assert_allclose(first.conserved_state, second.conserved_state, atol=1e-12)


def test_refresh_only_moves_the_centers(driver, templates, field_view):
    field_view = driver.initialize(field_view)
    driver.refresh(field_view, 0.3)

    for wind_source, template in zip((driver.wind1, driver.wind2), templates):
        for field in WindSource._fields:
            if field != "center":
                assert getattr(wind_source, field) == getattr(template, field)


def test_refresh_is_idempotent(driver, field_view):
    field_view = driver.initialize(field_view)

    once = driver.refresh(field_view, 0.7)
    twice = driver.refresh(once, 0.7)

    np.testing.assert_array_equal(once.conserved_state, twice.conserved_state)


def test_driver_accepts_blocked_fields(driver, config):
    registered_variables = driver.registered_variables
    block = make_background(registered_variables, num_cells=6, num_ghost_cells=config.num_ghost_cells)
    states = jnp.stack([block] * 8)
    lower_corners = jnp.array(
        [[x, y, z] for x in (0.0, 6.0) for y in (0.0, 6.0) for z in (0.0, 6.0)]
    )

    blocked_field = get_blocked_field(states, lower_corners, 1.0)
    result = driver.initialize(blocked_field)

    assert isinstance(result, BlockedField)
    assert result.conserved_states.shape == states.shape

    result = driver.refresh(result, 0.1)
    assert isinstance(result, BlockedField)


def test_non_convergence_is_counted_and_logged(config, params, templates, field_view, caplog):
    config = config._replace(max_kepler_iterations=1)
    params = params._replace(
        initial_phase=0.3,
        orbital_elements=params.orbital_elements._replace(eccentricity=0.9, semi_major_axis=2.0),
    )
    driver = ConditionDriver(config, params, *templates)

    with caplog.at_level(logging.WARNING, logger="colliding_winds.condition_driver"):
        driver.initialize(field_view)

    assert driver.nonconvergence_count == 1
    assert driver.state == ACTIVE
    assert "did not converge" in caplog.text


@pytest.mark.parametrize(
    "orbital_elements",
    [
        OrbitalElements(period=0.0),
        OrbitalElements(eccentricity=1.5),
    ],
)
def test_invalid_orbit_fails_at_construction(config, params, templates, orbital_elements):
    with pytest.raises(ConfigurationError):
        ConditionDriver(config, params._replace(orbital_elements=orbital_elements), *templates)


def test_invalid_wind_fails_at_construction(config, params, templates):
    with pytest.raises(ConfigurationError):
        ConditionDriver(config, params, WindSource(radius=-1.0), templates[1])

    with pytest.raises(ConfigurationError):
        ConditionDriver(config, params, templates[0], WindSource(mass_loss_rate=0.0))


def test_invalid_box_fails_at_construction(config, params, templates):
    with pytest.raises(ConfigurationError):
        ConditionDriver(config, params._replace(box_size=(1.0, 0.0, 1.0)), *templates)


def test_physical_binary_setup(code_units, config):
    # WC7 + O4-5 binary on a 20 AU grid with 1 AU cells
    params = ConditionParams(
        box_size=(20.0, 20.0, 20.0),
        gas_constant=code_units.gas_constant(),
        time_scale=code_units.time_scale(u.s),
        orbital_elements=binary_orbital_elements(code_units, period=8 * u.yr, separation=10 * u.AU),
    )
    driver = ConditionDriver(
        config, params, wr_wind_template(code_units), o_star_wind_template(code_units)
    )

    state = make_background(driver.registered_variables, num_cells=20, num_ghost_cells=2)
    field_view = get_field_view(state, 0.0, 1.0)

    field_view = driver.initialize(field_view)
    np.testing.assert_allclose(
        jnp.linalg.norm(driver.wind2.center - driver.wind1.center), 10.0, rtol=1e-10
    )

    eight_years = (8 * u.yr).to(code_units.code_time).value
    driver.refresh(field_view, 1.0)
    center = driver.wind1.center
    driver.refresh(field_view, 1.0 + eight_years)
    np.testing.assert_allclose(driver.wind1.center, center, atol=1e-8)

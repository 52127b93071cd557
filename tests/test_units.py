import numpy as np
import pytest
from astropy import constants as c
from astropy import units as u

from colliding_winds import CodeUnits


def test_lengths_and_velocities(code_units):
    assert code_units.to_code(2 * u.AU) == pytest.approx(2.0)
    assert code_units.to_code(1.5e8 * u.km) == pytest.approx(1.5e8 / 1.495978707e8)
    assert code_units.to_code(1000 * u.km / u.s) == pytest.approx(1000.0)


def test_mass_loss_rate(code_units):
    mdot = 4.5e-7 * u.M_sun / u.yr
    code_time_in_yr = (1 * u.AU / (u.km / u.s)).to(u.yr).value

    expected = 4.5e-7 / 1e-15 * code_time_in_yr
    assert code_units.to_code(mdot) == pytest.approx(expected, rel=1e-12)


def test_temperatures_and_dimensionless_pass_through(code_units):
    assert code_units.to_code(1.0e4 * u.K) == 1.0e4
    assert code_units.to_code(0.61 * u.dimensionless_unscaled) == pytest.approx(0.61)


def test_unknown_units_are_rejected(code_units):
    with pytest.raises(ValueError):
        code_units.to_code(1.0 * u.A)


def test_time_scale(code_units):
    expected = (1.495978707e8 * u.km / (u.km / u.s)).to(u.s).value
    assert code_units.time_scale(u.s) == pytest.approx(expected)
    assert code_units.time_scale(u.yr) == pytest.approx(expected / (365.25 * 86400))


def test_gas_constant(code_units):
    # k_B / m_H in (km/s)^2 per K
    expected = (c.k_B / (c.m_p + c.m_e)).to(u.km**2 / u.s**2 / u.K).value
    assert code_units.gas_constant() == pytest.approx(expected)
    assert code_units.gas_constant() == pytest.approx(8.25e-3, rel=1e-2)


def test_init_from_unit_params():
    code_units = CodeUnits.init_from_unit_params(1.495978707e13, 1.0e18, 1.0e5)

    assert code_units.to_code(1 * u.AU) == pytest.approx(1.0)
    np.testing.assert_allclose(code_units.to_code(1 * u.km / u.s), 1.0)

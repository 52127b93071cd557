from astropy import units as u

from colliding_winds._physics_modules._orbit._orbit_options import OrbitalElements
from colliding_winds._physics_modules._stellar_wind.stellar_wind_options import (
    WindSource,
    create_wind_source,
)
from colliding_winds.units.unit_helpers import CodeUnits

# mean molecular weight of fully ionized gas with solar abundances
MU_IONIZED = 0.61

# wind parameters of the WC7 + O4-5 colliding wind binary


def wr_wind_template(code_units: CodeUnits) -> WindSource:
    """Wind of the Wolf-Rayet (WC7) primary."""
    return create_wind_source(
        center=[0.0, 0.0, 0.0],
        radius=code_units.to_code(2.0 * u.AU),
        mass_loss_rate=code_units.to_code(4.5e-7 * u.M_sun / u.yr),
        terminal_velocity=code_units.to_code(1000 * u.km / u.s),
        temperature=1.0e5,
        mean_molecular_weight=MU_IONIZED,
    )


def o_star_wind_template(code_units: CodeUnits) -> WindSource:
    """Wind of the O4-5 secondary."""
    return create_wind_source(
        center=[0.0, 0.0, 0.0],
        radius=code_units.to_code(2.0 * u.AU),
        mass_loss_rate=code_units.to_code(4.5e-8 * u.M_sun / u.yr),
        terminal_velocity=code_units.to_code(500 * u.km / u.s),
        temperature=1.0e4,
        mean_molecular_weight=MU_IONIZED,
    )


def binary_orbital_elements(
    code_units: CodeUnits,
    period=8.0 * u.yr,
    separation=10.0 * u.AU,
    eccentricity=0.0,
    mass_ratio=1.0,
    period_unit=u.s,
) -> OrbitalElements:
    """Orbital elements with the period expressed in period_unit,
    matching CodeUnits.time_scale(period_unit)."""
    return OrbitalElements(
        period=u.Quantity(period).to(period_unit).value,
        eccentricity=float(eccentricity),
        semi_major_axis=code_units.to_code(separation),
        mass_ratio=float(mass_ratio),
    )

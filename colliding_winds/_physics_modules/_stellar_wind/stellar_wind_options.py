from typing import NamedTuple, Union

import jax.numpy as jnp
from jaxtyping import Array, Float

from colliding_winds.errors import ConfigurationError


class WindSource(NamedTuple):
    """A spherical stellar wind source. Only the center changes
    during a run, it follows the star along its orbit."""

    #: Position of the star.
    center: Float[Array, "3"] = jnp.zeros(3)

    #: Radius of the region overwritten by the wind solution.
    radius: Union[float, Float[Array, ""]] = 1.0

    #: Mass-loss rate of the star.
    mass_loss_rate: Union[float, Float[Array, ""]] = 1.0

    #: Terminal velocity of the wind.
    terminal_velocity: Union[float, Float[Array, ""]] = 1.0

    #: Temperature of the wind in Kelvin.
    temperature: Union[float, Float[Array, ""]] = 1.0e4

    #: Mean molecular weight of the wind material.
    mean_molecular_weight: Union[float, Float[Array, ""]] = 0.61


def create_wind_source(
    center,
    radius,
    mass_loss_rate,
    terminal_velocity,
    temperature,
    mean_molecular_weight,
) -> WindSource:
    """Construct a wind source, rejecting unphysical parameters.

    Injection runs every timestep and has no failure path, so
    all checks happen here.

    Raises:
        ConfigurationError: if any of the scalar parameters is not
            strictly positive or the center is not a finite 3D point.
    """

    center = jnp.asarray(center, dtype=jnp.result_type(float))
    if center.shape != (3,) or not bool(jnp.all(jnp.isfinite(center))):
        raise ConfigurationError(f"The wind center must be a finite 3D point, got {center}.")

    for name, value in (
        ("radius", radius),
        ("mass_loss_rate", mass_loss_rate),
        ("terminal_velocity", terminal_velocity),
        ("temperature", temperature),
        ("mean_molecular_weight", mean_molecular_weight),
    ):
        if not value > 0:
            raise ConfigurationError(f"The wind {name} must be positive, got {value}.")

    return WindSource(
        center=center,
        radius=float(radius),
        mass_loss_rate=float(mass_loss_rate),
        terminal_velocity=float(terminal_velocity),
        temperature=float(temperature),
        mean_molecular_weight=float(mean_molecular_weight),
    )


def validate_wind_source(wind_source: WindSource) -> WindSource:
    """Re-run the construction checks on an existing source."""
    return create_wind_source(*wind_source)

from typing import NamedTuple, Union

import jax.numpy as jnp
from jaxtyping import Array, Bool, Float, Int

from colliding_winds.errors import ConfigurationError

# body indices in the positions / velocities arrays
PRIMARY = 0
SECONDARY = 1


class OrbitalElements(NamedTuple):
    """Orbital elements of the binary, constant for a run."""

    #: Orbital period, in the time unit reached by
    #: current_time * time_scale (e.g. seconds).
    period: Union[float, Float[Array, ""]] = 1.0

    #: Eccentricity, 0 <= e < 1.
    eccentricity: Union[float, Float[Array, ""]] = 0.0

    #: Semi-major axis of the relative orbit in code units,
    #: i.e. the mean separation of the two stars.
    semi_major_axis: Union[float, Float[Array, ""]] = 1.0

    #: Mass ratio m2 / m1.
    mass_ratio: Union[float, Float[Array, ""]] = 1.0

    #: Rotation of the periastron direction within
    #: the orbital plane (radians, about z).
    argument_of_periastron: Union[float, Float[Array, ""]] = 0.0

    #: Tilt of the orbital plane about the x axis (radians).
    #: Zero keeps both stars in the z = domain_depth / 2 plane.
    inclination: Union[float, Float[Array, ""]] = 0.0


class BinaryState(NamedTuple):
    """Positions and velocities of both stars at a given phase."""

    #: orbital phase in [0, 1), 0 is periastron
    phase: Float[Array, ""]

    #: positions of the primary and the secondary
    positions: Float[Array, "2 3"]

    #: velocities of the primary and the secondary
    velocities: Float[Array, "2 3"]

    #: whether the Kepler solve reached the tolerance
    converged: Bool[Array, ""]

    #: number of Newton iterations used
    iterations: Int[Array, ""]


def validate_orbital_elements(orbital_elements: OrbitalElements) -> OrbitalElements:
    """Check the orbital elements, raising a ConfigurationError
    if they do not describe a bound Keplerian orbit."""

    if not orbital_elements.period > 0:
        raise ConfigurationError(
            f"The orbital period must be positive, got {orbital_elements.period}."
        )

    if not 0.0 <= orbital_elements.eccentricity < 1.0:
        raise ConfigurationError(
            f"The eccentricity must lie in [0, 1), got {orbital_elements.eccentricity}."
        )

    if not orbital_elements.semi_major_axis > 0:
        raise ConfigurationError(
            f"The semi-major axis must be positive, got {orbital_elements.semi_major_axis}."
        )

    if not orbital_elements.mass_ratio > 0:
        raise ConfigurationError(
            f"The mass ratio must be positive, got {orbital_elements.mass_ratio}."
        )

    if not (
        jnp.isfinite(orbital_elements.argument_of_periastron)
        and jnp.isfinite(orbital_elements.inclination)
    ):
        raise ConfigurationError("The orbit orientation angles must be finite.")

    # plain floats, so that integers given by the user trace as floats
    return OrbitalElements(*(float(value) for value in orbital_elements))

from typing import NamedTuple, Tuple

from colliding_winds._physics_modules._orbit._orbit_options import (
    OrbitalElements,
    validate_orbital_elements,
)
from colliding_winds.errors import ConfigurationError


class ConditionParams(NamedTuple):
    """
    Different from the condition configuration, the condition
    parameters do not require recompilation when changed.
    All values are in code units unless noted otherwise.
    """

    #: Physical extent of the domain along x, y and z.
    #: The orbit is centered in the domain, so the stars
    #: move in the z = box_size[2] / 2 plane.
    box_size: Tuple[float, float, float] = (1.0, 1.0, 1.0)

    #: The adiabatic index of the gas.
    gamma: float = 5 / 3

    #: k_B / m_H in code velocity^2 per Kelvin, see
    #: CodeUnits.gas_constant.
    gas_constant: float = 1.0

    #: Factor converting code time into the time unit
    #: of the orbital period.
    time_scale: float = 1.0

    #: Phase at initialization, 0 is periastron.
    initial_phase: float = 0.0

    #: Lag between the time origin and periastron, in periods.
    phase_offset: float = 0.25

    #: The orbital elements of the binary.
    orbital_elements: OrbitalElements = OrbitalElements()


def validate_params(params: ConditionParams) -> ConditionParams:
    """Check the condition parameters, raising a ConfigurationError
    on values no run could use."""

    if len(params.box_size) != 3 or not all(extent > 0 for extent in params.box_size):
        raise ConfigurationError(
            f"The box size must have three positive extents, got {params.box_size}."
        )

    if not params.gamma > 1:
        raise ConfigurationError(f"The adiabatic index must exceed 1, got {params.gamma}.")

    if not params.gas_constant > 0:
        raise ConfigurationError("The gas constant must be positive.")

    if not params.time_scale > 0:
        raise ConfigurationError("The time scale must be positive.")

    return params._replace(
        box_size=tuple(float(extent) for extent in params.box_size),
        gamma=float(params.gamma),
        gas_constant=float(params.gas_constant),
        time_scale=float(params.time_scale),
        initial_phase=float(params.initial_phase),
        phase_offset=float(params.phase_offset),
        orbital_elements=validate_orbital_elements(params.orbital_elements),
    )

from typing import NamedTuple, Union

from colliding_winds.option_classes.condition_config import (
    NUM_WIND_SOURCES,
    ConditionConfig,
)


class StaticIntVector(NamedTuple):
    x: int
    y: int
    z: int


class RegisteredVariables(NamedTuple):
    """The registered variables are the equations
    stored in the conserved state array handed over by
    the host. The order is fixed by the host:

        0: rho
        1: rho*u
        2: rho*v
        3: rho*w
        4: E (kinetic + thermal)
        5-7: B_x, B_y, B_z (if the passive field is enabled)
        then the passive scalars.
    """

    #: Number of variables
    num_vars: int = 5

    # Baseline variables

    #: Density index
    density_index: int = 0

    #: Momentum density indices
    momentum_index: StaticIntVector = StaticIntVector(1, 2, 3)

    #: Total energy index
    energy_index: int = 4

    #: Magnetic field index
    magnetic_index: Union[int, StaticIntVector] = -1
    magnetic_active: bool = False

    #: Index of the first passive scalar
    passive_scalar_index: int = -1
    num_passive_scalars: int = 0

    #: wind density tracers, one per wind source
    wind_density_index: int = -1
    wind_density_active: bool = False


def get_registered_variables(config: ConditionConfig) -> RegisteredVariables:
    """Get the registered variables for the host layout.

    Args:
        config: The condition configuration.

    Returns:
        The registered variables.
    """

    registered_variables = RegisteredVariables()

    if config.mhd:
        registered_variables = registered_variables._replace(
            magnetic_index=StaticIntVector(5, 6, 7),
            magnetic_active=True,
            num_vars=registered_variables.num_vars + 3,
        )

    if config.num_passive_scalars > 0:
        registered_variables = registered_variables._replace(
            passive_scalar_index=registered_variables.num_vars,
            num_passive_scalars=config.num_passive_scalars,
            num_vars=registered_variables.num_vars + config.num_passive_scalars,
        )

    # the wind tracers occupy the first passive scalar slots
    if config.trace_wind_density and config.num_passive_scalars >= NUM_WIND_SOURCES:
        registered_variables = registered_variables._replace(
            wind_density_index=registered_variables.passive_scalar_index,
            wind_density_active=True,
        )

    return registered_variables

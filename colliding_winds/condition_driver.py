"""Initial and per-step wind conditions of a colliding wind binary.

The host engine calls :meth:`ConditionDriver.initialize` once after
building the base grid and imposing the background state, and
:meth:`ConditionDriver.refresh` once per timestep after its own
boundary exchange, so that the injected cells are not overwritten
by the generic boundary handling.
"""

import logging
from typing import Union

import jax.numpy as jnp

from colliding_winds._physics_modules._orbit._orbit import compute_binary
from colliding_winds._physics_modules._orbit._orbit_options import (
    PRIMARY,
    SECONDARY,
    BinaryState,
)
from colliding_winds._physics_modules._stellar_wind.stellar_wind import (
    impose_wind_with_images,
    impose_wind_with_images_blocks,
)
from colliding_winds._physics_modules._stellar_wind.stellar_wind_options import (
    WindSource,
    validate_wind_source,
)
from colliding_winds.data_classes.field_view import BlockedField, FieldView
from colliding_winds.errors import ConditionStateError
from colliding_winds.fluid_equations.registered_variables import get_registered_variables
from colliding_winds.option_classes.condition_config import (
    ACTIVE,
    UNINITIALIZED,
    ConditionConfig,
    finalize_config,
)
from colliding_winds.option_classes.condition_params import (
    ConditionParams,
    validate_params,
)

logger = logging.getLogger(__name__)

FIELD = Union[FieldView, BlockedField]


class ConditionDriver:
    """Owns the two wind sources and the orbital phase of the run.

    All parameters are checked on construction, so configuration
    errors surface before the first injection. Apart from the
    centers, which follow the stars, the wind sources never change.
    """

    def __init__(
        self,
        config: ConditionConfig,
        params: ConditionParams,
        wind1_template: WindSource,
        wind2_template: WindSource,
    ):
        self.config = finalize_config(config)
        self.params = validate_params(params)
        self.registered_variables = get_registered_variables(self.config)

        self._wind_templates = (
            validate_wind_source(wind1_template),
            validate_wind_source(wind2_template),
        )

        self.state = UNINITIALIZED
        self.phase = None
        self.binary_state = None
        self.wind1 = None
        self.wind2 = None

        # number of orbit evaluations where the Kepler solve hit its iteration bound
        self.nonconvergence_count = 0

    # ------------------------------------------------------------------

    def initialize(self, field: FIELD) -> FIELD:
        """Place both stars at the initial phase and impose their winds.

        Raises:
            ConditionStateError: if called more than once.
        """
        if self.state != UNINITIALIZED:
            raise ConditionStateError("initialize() can only be called once.")

        binary_state = self._update_orbit(self.params.initial_phase)

        self.wind1 = self._wind_templates[PRIMARY]._replace(
            center=binary_state.positions[PRIMARY]
        )
        self.wind2 = self._wind_templates[SECONDARY]._replace(
            center=binary_state.positions[SECONDARY]
        )

        self.state = ACTIVE

        logger.debug(
            "initialized winds at phase %.6f, centers %s and %s",
            float(self.phase),
            self.wind1.center,
            self.wind2.center,
        )

        return self._impose_winds(field)

    def refresh(self, field: FIELD, current_time) -> FIELD:
        """Advance the binary to current_time and re-impose both winds.

        Raises:
            ConditionStateError: if initialize() has not been called.
        """
        if self.state != ACTIVE:
            raise ConditionStateError("refresh() called before initialize().")

        binary_state = self._update_orbit(self.phase_at(current_time))

        # only the centers follow the orbit
        self.wind1 = self.wind1._replace(center=binary_state.positions[PRIMARY])
        self.wind2 = self.wind2._replace(center=binary_state.positions[SECONDARY])

        logger.debug("refreshed winds at t = %s, phase %.6f", current_time, float(self.phase))

        return self._impose_winds(field)

    # ------------------------------------------------------------------

    def phase_at(self, current_time):
        """Orbital phase at the given code time, before reduction into [0, 1)."""
        period = self.params.orbital_elements.period
        return (
            jnp.mod(current_time * self.params.time_scale, period) / period
            + self.params.phase_offset
        )

    def _update_orbit(self, phase) -> BinaryState:
        phase = jnp.asarray(phase, dtype=jnp.result_type(float))
        binary_state = compute_binary(phase, self.config, self.params)

        if not bool(binary_state.converged):
            self.nonconvergence_count += 1
            logger.warning(
                "Kepler solver did not converge within %d iterations at phase %.6f, "
                "using the last iterate (%d occurrences so far).",
                self.config.max_kepler_iterations,
                float(binary_state.phase),
                self.nonconvergence_count,
            )

        self.binary_state = binary_state
        self.phase = binary_state.phase

        return binary_state

    def _impose_winds(self, field: FIELD) -> FIELD:
        if isinstance(field, BlockedField):
            impose = impose_wind_with_images_blocks
        elif isinstance(field, FieldView):
            impose = impose_wind_with_images
        else:
            raise TypeError(
                f"Expected a FieldView or BlockedField, got {type(field).__name__}."
            )

        for source_slot, wind_source in enumerate((self.wind1, self.wind2)):
            field = impose(
                wind_source,
                field,
                self.config,
                self.params,
                self.registered_variables,
                source_slot,
            )

        return field

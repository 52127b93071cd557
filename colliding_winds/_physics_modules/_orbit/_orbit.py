# general
from functools import partial
import jax
import jax.numpy as jnp
from jax import lax

# typing
from beartype import beartype as typechecker
from jaxtyping import Array, Bool, Float, Int, Real, jaxtyped
from typing import Tuple, Union

# colliding_winds classes
from colliding_winds.option_classes.condition_config import ConditionConfig
from colliding_winds.option_classes.condition_params import ConditionParams
from colliding_winds._physics_modules._orbit._orbit_options import (
    BinaryState,
    OrbitalElements,
)


def _solve_kepler(
    mean_anomaly: Float[Array, ""],
    eccentricity: Union[float, Float[Array, ""]],
    max_iterations: int,
    tolerance: float,
) -> Tuple[Float[Array, ""], Bool[Array, ""], Int[Array, ""]]:
    """
    Solve Kepler's equation E - e sin(E) = M for the eccentric
    anomaly E by Newton iteration.

    The iteration stops once the Newton step falls below the
    tolerance (floored at a few machine epsilons of the working
    precision) or after max_iterations steps. In the latter case
    the last iterate is returned together with converged = False.
    """

    dtype = mean_anomaly.dtype
    tolerance = jnp.maximum(tolerance, 8 * jnp.finfo(dtype).eps)

    # for very eccentric orbits starting at pi avoids
    # overshooting near periastron
    E0 = jnp.where(eccentricity < 0.8, mean_anomaly, jnp.pi * jnp.ones_like(mean_anomaly))

    def cond_fn(carry):
        _, step, iteration = carry
        return jnp.logical_and(jnp.abs(step) > tolerance, iteration < max_iterations)

    def body_fn(carry):
        E, _, iteration = carry
        residual = E - eccentricity * jnp.sin(E) - mean_anomaly
        step = residual / (1.0 - eccentricity * jnp.cos(E))
        return E - step, step, iteration + 1

    carry0 = (E0, jnp.asarray(jnp.inf, dtype=dtype), jnp.asarray(0, dtype=jnp.int32))
    E, step, iterations = lax.while_loop(cond_fn, body_fn, carry0)

    converged = jnp.abs(step) <= tolerance

    return E, converged, iterations


def _rotation_matrix(
    argument_of_periastron: Union[float, Float[Array, ""]],
    inclination: Union[float, Float[Array, ""]],
) -> Float[Array, "3 3"]:
    """Perifocal frame -> domain frame: rotation about z by the
    argument of periastron followed by a tilt about x."""
    cw, sw = jnp.cos(argument_of_periastron), jnp.sin(argument_of_periastron)
    ci, si = jnp.cos(inclination), jnp.sin(inclination)

    rot_z = jnp.array([[cw, -sw, 0.0], [sw, cw, 0.0], [0.0, 0.0, 1.0]])
    rot_x = jnp.array([[1.0, 0.0, 0.0], [0.0, ci, -si], [0.0, si, ci]])

    return rot_x @ rot_z


@jaxtyped(typechecker=typechecker)
@partial(jax.jit, static_argnames=["max_iterations", "tolerance"])
def _relative_orbit(
    phase: Union[int, float, Real[Array, ""]],
    orbital_elements: OrbitalElements,
    time_scale: Union[int, float, Real[Array, ""]],
    max_iterations: int,
    tolerance: float,
) -> Tuple[
    Float[Array, "3"], Float[Array, "3"], Bool[Array, ""], Int[Array, ""]
]:
    """Position and velocity of the secondary relative to the
    primary in the perifocal frame (periastron along +x).

    Args:
        phase: The orbital phase, already reduced into [0, 1).
        orbital_elements: The orbital elements.
        time_scale: Code time -> period time unit.
        max_iterations: Iteration bound of the Kepler solver.
        tolerance: Tolerance of the Kepler solver.

    Returns:
        Relative position, relative velocity, the convergence flag
        and the number of Newton iterations.
    """

    e = orbital_elements.eccentricity
    a = orbital_elements.semi_major_axis

    mean_anomaly = jnp.asarray(2 * jnp.pi * phase, dtype=jnp.result_type(float))
    E, converged, iterations = _solve_kepler(mean_anomaly, e, max_iterations, tolerance)

    # mean motion in code time
    mean_motion = 2 * jnp.pi * time_scale / orbital_elements.period
    E_dot = mean_motion / (1.0 - e * jnp.cos(E))

    sqrt_one_minus_e2 = jnp.sqrt(1.0 - e**2)

    position = jnp.array(
        [a * (jnp.cos(E) - e), a * sqrt_one_minus_e2 * jnp.sin(E), 0.0]
    )
    velocity = jnp.array(
        [-a * jnp.sin(E) * E_dot, a * sqrt_one_minus_e2 * jnp.cos(E) * E_dot, 0.0]
    )

    return position, velocity, converged, iterations


def get_orbit_center(params: ConditionParams) -> Float[Array, "3"]:
    """The barycenter of the binary, fixed at the domain center,
    so that an uninclined orbit lies in the z = depth / 2 plane."""
    return jnp.array(params.box_size) / 2


@jaxtyped(typechecker=typechecker)
@partial(jax.jit, static_argnames=["config"])
def compute_binary(
    phase: Union[int, float, Real[Array, ""]],
    config: ConditionConfig,
    params: ConditionParams,
) -> BinaryState:
    """Compute the positions and velocities of both stars at the
    given orbital phase.

    The phase is reduced modulo 1, phase 0 being periastron and
    0.5 apoastron. The result is a pure function of the phase and
    the orbital elements; for a circular orbit it reduces to
    uniform circular motion.

    Args:
        phase: The orbital phase.
        config: The condition configuration.
        params: The condition parameters.

    Returns:
        The binary state.
    """

    # integer inputs trace as integers, work in floating point throughout
    float_dtype = jnp.result_type(float)
    phase = jnp.mod(jnp.asarray(phase, dtype=float_dtype), 1.0)
    orbital_elements = OrbitalElements(
        *(jnp.asarray(value, dtype=float_dtype) for value in params.orbital_elements)
    )
    time_scale = jnp.asarray(params.time_scale, dtype=float_dtype)

    relative_position, relative_velocity, converged, iterations = _relative_orbit(
        phase,
        orbital_elements,
        time_scale,
        config.max_kepler_iterations,
        config.kepler_tolerance,
    )

    rotation = _rotation_matrix(
        orbital_elements.argument_of_periastron, orbital_elements.inclination
    )
    relative_position = rotation @ relative_position
    relative_velocity = rotation @ relative_velocity

    # split the relative orbit about the barycenter,
    # m1 r1 + m2 r2 = 0 with q = m2 / m1
    q = orbital_elements.mass_ratio
    weights = jnp.array([-q / (1.0 + q), 1.0 / (1.0 + q)])

    center = get_orbit_center(params)
    positions = center[None, :] + weights[:, None] * relative_position[None, :]
    velocities = weights[:, None] * relative_velocity[None, :]

    return BinaryState(
        phase=phase,
        positions=positions,
        velocities=velocities,
        converged=converged,
        iterations=iterations,
    )


def separation(binary_state: BinaryState) -> Float[Array, ""]:
    """Distance between the two stars."""
    return jnp.linalg.norm(binary_state.positions[1] - binary_state.positions[0])

import jax
import jax.numpy as jnp


@jax.jit
def pressure_from_temperature(rho, temperature, mean_molecular_weight, gas_constant):
    """Calculate the ideal-gas pressure p = rho k_B T / (mu m_H).

    Args:
        rho: The density.
        temperature: The temperature in Kelvin.
        mean_molecular_weight: The mean molecular weight mu.
        gas_constant: k_B / m_H in code velocity^2 per Kelvin.

    Returns:
        The pressure.
    """
    return rho * gas_constant * temperature / mean_molecular_weight


@jax.jit
def total_energy_from_primitives(rho, u, p, gamma):
    """Calculate the total energy from the primitive variables.

    Args:
        rho: The density.
        u: The absolute velocity.
        p: The pressure.
        gamma: The adiabatic index.

    Returns:
        The total energy.
    """

    return p / (gamma - 1) + 0.5 * rho * u**2


@jax.jit
def temperature_from_conserved(rho, momentum, E, mean_molecular_weight, gas_constant, gamma):
    """Invert the ideal-gas energy for the temperature.

    Args:
        rho: The density.
        momentum: The momentum density, components along the first axis.
        E: The total energy.
        mean_molecular_weight: The mean molecular weight mu.
        gas_constant: k_B / m_H in code velocity^2 per Kelvin.
        gamma: The adiabatic index.

    Returns:
        The temperature in Kelvin.
    """
    kinetic = 0.5 * jnp.sum(momentum**2, axis=0) / rho
    p = (gamma - 1) * (E - kinetic)
    return p * mean_molecular_weight / (rho * gas_constant)

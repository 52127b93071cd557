## Unit helpers

# The following functions are used to convert the physical
# configuration of the binary (AU, solar masses per year,
# km/s, ...) into the units of the host code.

# ===== imports =======
from astropy import units as u
from astropy import constants as c
# =====================


# ============ CODE UNITS CLASS ============

class CodeUnits:

    def __init__(self, unit_length, unit_mass, unit_velocity):
        # expects input in astropy units
        # e.g. unit_length = 1 * u.AU
        #      unit_mass = 1e-15 * u.M_sun
        #      unit_velocity = 1 * u.km / u.s

        self.code_length = u.def_unit('code_length', unit_length)

        self.code_mass = u.def_unit('code_mass', unit_mass)
        self.code_velocity = u.def_unit('code_velocity', unit_velocity)
        self.code_time = self.code_length / self.code_velocity
        self.code_density = self.code_mass / self.code_length**3
        self.code_pressure = self.code_mass / self.code_length / self.code_time**2
        self.code_mass_loss_rate = self.code_mass / self.code_time

    @staticmethod
    def init_from_unit_params(UnitLength_in_cm, UnitMass_in_g, UnitVelocity_in_cm_per_s):
        return CodeUnits(UnitLength_in_cm * u.cm, UnitMass_in_g * u.g, UnitVelocity_in_cm_per_s * u.cm / u.s)

    def to_code(self, quantity):
        """Convert an astropy quantity into a plain float in code units.
        Dimensionless quantities and temperatures are passed through."""
        quantity = u.Quantity(quantity)

        if quantity.unit.is_equivalent(u.K):
            return quantity.to(u.K).value

        for code_unit in (
            self.code_length,
            self.code_mass,
            self.code_velocity,
            self.code_time,
            self.code_density,
            self.code_pressure,
            self.code_mass_loss_rate,
        ):
            if quantity.unit.is_equivalent(code_unit):
                return quantity.to(code_unit).value

        if quantity.unit.is_equivalent(u.dimensionless_unscaled):
            return quantity.to(u.dimensionless_unscaled).value

        raise ValueError(f"No code unit equivalent to {quantity.unit}.")

    def time_scale(self, period_unit=u.s):
        """Factor converting code time into period_unit, the t_sc
        in phase = mod(t * t_sc, period) / period."""
        return (1 * self.code_time).to(period_unit).value

    def gas_constant(self):
        """k_B / m_H in code_velocity^2 per Kelvin, so that
        p = rho * gas_constant * T / mu in code units."""
        return (c.k_B / (c.m_p + c.m_e) * u.K).to(self.code_velocity**2).value

    def print_unit_summary(self):
        print(f"Code length in cm: {self.code_length.to(u.cm)}")
        print(f"Code mass in g: {self.code_mass.to(u.g)}")
        print(f"Code velocity in cm/s: {self.code_velocity.to(u.cm / u.s)}")
        print(f"Code time in s: {self.code_time.to(u.s)}")
        print(f"Code density in g/cm^3: {self.code_density.to(u.g / u.cm**3)}")
        print(f"Code pressure in g/cm/s^2: {self.code_pressure.to(u.g / u.cm / u.s**2)}")

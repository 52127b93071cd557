# data structures
from colliding_winds.option_classes.condition_config import ConditionConfig
from colliding_winds.option_classes.condition_params import ConditionParams
from colliding_winds._physics_modules._orbit._orbit_options import OrbitalElements, BinaryState
from colliding_winds._physics_modules._stellar_wind.stellar_wind_options import WindSource
from colliding_winds.data_classes.field_view import FieldView, BlockedField

# constants
from colliding_winds.option_classes.condition_config import (
    UNINITIALIZED,
    ACTIVE,
)

# errors
from colliding_winds.errors import ConfigurationError, ConditionStateError

# initialization functions
from colliding_winds.option_classes.condition_config import finalize_config
from colliding_winds.fluid_equations.registered_variables import get_registered_variables
from colliding_winds.data_classes.field_view import get_field_view, get_blocked_field
from colliding_winds._physics_modules._stellar_wind.stellar_wind_options import create_wind_source

# orbit and wind kernels
from colliding_winds._physics_modules._orbit._orbit import compute_binary, separation
from colliding_winds._physics_modules._stellar_wind.stellar_wind import (
    impose_spherical_wind,
    impose_spherical_wind_blocks,
)

# run
from colliding_winds.condition_driver import ConditionDriver

# units
from colliding_winds.units import CodeUnits

# diagnostics
from colliding_winds.fluid_equations.fluid import temperature_from_conserved

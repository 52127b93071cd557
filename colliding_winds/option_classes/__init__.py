# baseline options
from colliding_winds.option_classes.condition_config import ConditionConfig
from colliding_winds.option_classes.condition_params import ConditionParams

# module options
from colliding_winds._physics_modules._orbit._orbit_options import OrbitalElements
from colliding_winds._physics_modules._stellar_wind.stellar_wind_options import WindSource

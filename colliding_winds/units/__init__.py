from colliding_winds.units.unit_helpers import CodeUnits

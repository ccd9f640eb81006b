from .state import SimulationStateHeader, SimulationState
from .boundary import (
    Side,
    BoundaryKind,
    Boundary,
    BoundaryConditions,
    CurrentWeather
)
from .surface import ThermalSurface, SurfaceStatus
from .zone import ThermalZone
from .thermal_model import ThermalModel

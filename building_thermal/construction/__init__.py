from .discretization import (
    Discretization,
    Layer,
    Solid,
    CavitySegment,
    Undefined,
    Segment
)
from .network import Film, ThermalNetwork

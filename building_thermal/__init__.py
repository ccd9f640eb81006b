from .pint_setup import UNITS, Quantity
from .logging import ModuleLogger
from .exceptions import (
    ThermalModelError,
    DiscretizationError,
    ModelDefinitionError,
    CorrelationWarning
)
from .settings import DiscretizationSettings, ThermalSettings

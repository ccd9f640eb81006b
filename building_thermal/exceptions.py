"""Exceptions and warnings raised by the thermal engine."""


class ThermalModelError(Exception):
    """Base class of all errors raised while building or marching a thermal
    model."""
    pass


class DiscretizationError(ThermalModelError):
    """Raised when a construction cannot be turned into a valid finite
    difference network, or when the network degenerates numerically during a
    march (non-positive resistance, non-finite node temperature, singular
    algebraic system)."""
    pass


class ModelDefinitionError(ThermalModelError):
    """Raised when the model definitions refer to something that does not
    exist or is not usable (unknown construction, unknown space, ...)."""
    pass


class CorrelationWarning(Warning):
    """Issued when an empirical correlation is evaluated outside its range of
    validity."""
    pass

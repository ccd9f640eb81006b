"""
Configuration of the thermal engine.

The defaults of the module can be overridden by creating a `ThermalSettings`
object with other values and passing it to `ThermalModel`.
"""
from dataclasses import dataclass, field
from building_thermal import Quantity


Q_ = Quantity

# maximum thickness of a finite difference element
MAX_DX = Q_(4.0, 'cm')

# smallest micro-step a massive layer may demand; layers that would need a
# smaller one are modelled as pure resistances
MIN_DT = Q_(60.0, 's')

# fraction of the explicit stability limit that is actually used
SAFETY_FACTOR = 0.5

# upper bound of the combined convective and radiative film coefficient of a
# surface without a fixed convection coefficient
MAX_FILM_COEFFICIENT = Q_(20.0, 'W / (m ** 2 * K)')

INITIAL_TEMPERATURE = Q_(22.0, 'degC')


@dataclass
class DiscretizationSettings:
    """
    Groups the parameters that control how constructions are discretized.

    Attributes
    ----------
    max_dx: Quantity
        Maximum thickness of a finite difference element.
    min_dt: Quantity
        Minimum micro-step. A massive layer whose stability limit is smaller
        than `min_dt` is treated as a no-mass layer.
    safety_factor: float
        Factor (0 < f <= 1) applied to the explicit stability limit
        C / G of each massive node, with C its capacitance and G the sum of
        the conductances that connect it to its neighbours.
    max_film_coefficient: Quantity
        Film coefficient assumed on a side without a fixed convection
        coefficient when the stable micro-step is determined.
    """
    max_dx: Quantity = MAX_DX
    min_dt: Quantity = MIN_DT
    safety_factor: float = SAFETY_FACTOR
    max_film_coefficient: Quantity = MAX_FILM_COEFFICIENT

    def __post_init__(self):
        if self.max_dx.to('m').m <= 0.0:
            raise ValueError("max_dx must be positive")
        if self.min_dt.to('s').m <= 0.0:
            raise ValueError("min_dt must be positive")
        if not (0.0 < self.safety_factor <= 1.0):
            raise ValueError(
                f"safety factor {self.safety_factor} out of range ]0, 1]"
            )
        if self.max_film_coefficient.to('W / (m ** 2 * K)').m <= 0.0:
            raise ValueError("max_film_coefficient must be positive")

    @property
    def dx_max(self) -> float:
        """Maximum element thickness in m."""
        return self.max_dx.to('m').m

    @property
    def dt_min(self) -> float:
        """Minimum micro-step in s."""
        return self.min_dt.to('s').m

    @property
    def h_film_max(self) -> float:
        """Film coefficient bound in W / (m ** 2.K)."""
        return self.max_film_coefficient.to('W / (m ** 2 * K)').m


@dataclass
class ThermalSettings:
    """
    Global settings of a `ThermalModel`.

    Attributes
    ----------
    discretization: DiscretizationSettings
        See `DiscretizationSettings`.
    initial_temperature: Quantity
        Initial value of all node and zone air temperatures.
    air_reference_temperature: Quantity
        Temperature at which the density and specific heat of zone air are
        evaluated.
    """
    discretization: DiscretizationSettings = field(default_factory=DiscretizationSettings)
    initial_temperature: Quantity = INITIAL_TEMPERATURE
    air_reference_temperature: Quantity = Q_(22.0, 'degC')

"""Boundaries of surfaces and the conditions that prevail on them."""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from building_thermal import Quantity


Q_ = Quantity


class Side(Enum):
    FRONT = 'front'
    BACK = 'back'


class BoundaryKind(Enum):
    EXTERIOR = 'exterior'
    ZONE = 'zone'


@dataclass(frozen=True)
class Boundary:
    """What one side of a surface faces: the outdoors, or the zone with index
    `zone_index` in the model."""
    kind: BoundaryKind
    zone_index: int | None = None

    @classmethod
    def exterior(cls) -> Boundary:
        return cls(BoundaryKind.EXTERIOR)

    @classmethod
    def zone(cls, index: int) -> Boundary:
        return cls(BoundaryKind.ZONE, index)

    @property
    def is_exterior(self) -> bool:
        return self.kind is BoundaryKind.EXTERIOR


@dataclass
class BoundaryConditions:
    """
    Conditions on one side of a surface during a micro-step (SI floats).

    Attributes
    ----------
    air_temperature: float
        Temperature of the air (degC).
    convection_coefficient: float | None, default None
        Convection coefficient (W / (m ** 2.K)). If None, the surface uses
        its fixed coefficient or the TARP model.
    radiant_temperature: float | None, default None
        Mean radiant temperature (degC) of the surroundings. If None, there
        is no longwave exchange.
    radiation_coefficient: float, default 0.0
        Linearised radiation coefficient (W / (m ** 2.K)).
    solar_irradiance: float, default 0.0
        Incident solar irradiance (W / m ** 2).
    wind_speed: float, default 0.0
        Wind speed (m / s); only used on exterior sides.
    """
    air_temperature: float
    convection_coefficient: float | None = None
    radiant_temperature: float | None = None
    radiation_coefficient: float = 0.0
    solar_irradiance: float = 0.0
    wind_speed: float = 0.0


@dataclass
class CurrentWeather:
    """
    Outdoor conditions during a main time step.

    Attributes
    ----------
    T_db: Quantity
        Dry-bulb temperature.
    wind_speed: Quantity, default 0 m/s
        Wind speed.
    horizontal_ir: Quantity | None, default None
        Infrared irradiance from the sky on a horizontal plane.
    sky_emissivity: float | None, default None
        Emissivity of the sky; used when `horizontal_ir` is missing.
    """
    T_db: Quantity
    wind_speed: Quantity = Q_(0.0, 'm / s')
    horizontal_ir: Quantity | None = None
    sky_emissivity: float | None = None

    @property
    def dry_bulb(self) -> float:
        return self.T_db.to('degC').m

    @property
    def wind(self) -> float:
        return self.wind_speed.to('m / s').m

    @property
    def ir(self) -> float | None:
        if self.horizontal_ir is None:
            return None
        return self.horizontal_ir.to('W / m ** 2').m

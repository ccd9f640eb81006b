"""
THERMAL ZONE
------------
The air of a zone is a single well-mixed node. Its heat balance is linearised
as

    C * dT/dt = A - B * T

with
    A = sum(h_i * A_i * T_s,i) + m_inf * cp * T_out + m_vent * cp * T_vent
        + Q_hvac + Q_lighting
    B = sum(h_i * A_i) + m_inf * cp + m_vent * cp

where the sums run over all surface sides that face the zone. With A and B
constant during a time step, the equation has the closed form solution

    T(t) = A / B + (T_0 - A / B) * exp(-B * t / C)

whose average over [0, t] is

    A / B + C * (T_0 - A / B) / (B * t) * (1 - exp(-B * t / C))

The zone is updated with this solution only; it is never iterated with the
surfaces that bound it.
"""
from __future__ import annotations
import math
from typing import TYPE_CHECKING
from building_thermal import Quantity
from building_thermal.definitions import Space
from building_thermal.exceptions import ModelDefinitionError
from building_thermal.heat_transfer.gas import AIR
from building_thermal.model.boundary import Side
from building_thermal.model.state import SimulationState, SimulationStateHeader

if TYPE_CHECKING:
    from building_thermal.model.surface import ThermalSurface


# below this value of B (W / K) the zone is considered disconnected
_B_MIN = 1.e-9


class ThermalZone:
    """Air node of a space."""

    def __init__(self):
        self.name: str = ''
        self.index: int = 0
        self.volume: float = 0.0
        self.rho_air: float = 1.2
        self.cp_air: float = 1005.0
        self.surfaces: list[tuple[ThermalSurface, Side]] = []
        self._T_offset: int = 0
        self._hvac_offset: int = 0
        self._lighting_offset: int = 0
        self._infiltration_offset: int = 0
        self._ventilation_offset: int = 0
        self._ventilation_T_offset: int = 0

    @classmethod
    def create(
        cls,
        space: Space,
        index: int,
        header: SimulationStateHeader,
        initial_temperature: Quantity = Quantity(22.0, 'degC'),
        air_reference_temperature: Quantity = Quantity(22.0, 'degC')
    ) -> ThermalZone:
        """
        Creates a `ThermalZone` for `space` and registers its state elements
        in `header`:
        - the air temperature (degC), written by the zone;
        - the heating (> 0) or cooling (< 0) power delivered by HVAC (W);
        - the heat released by lighting (W);
        - the infiltration air flow (m³/s), which enters at the outdoor
        temperature;
        - the ventilation air flow (m³/s) and its supply temperature (degC).
        All but the first are inputs, written by the caller.
        """
        zone = cls()
        zone.name = space.name
        zone.index = index
        zone.volume = space.volume.to('m ** 3').m
        if not zone.volume > 0.0:
            raise ModelDefinitionError(f"space '{space.name}' has a volume of {zone.volume} m³")
        T_ref = air_reference_temperature.to('K').m
        zone.rho_air = AIR.density(T_ref)
        zone.cp_air = AIR.heat_capacity(T_ref)
        T_init = initial_temperature.to('degC').m
        prefix = f"space:{space.name}"
        zone._T_offset = header.push(f"{prefix}:dry_bulb_temperature", T_init)
        zone._hvac_offset = header.push(f"{prefix}:heating_cooling_power", 0.0)
        zone._lighting_offset = header.push(f"{prefix}:lighting_power", 0.0)
        zone._infiltration_offset = header.push(f"{prefix}:infiltration_volume", 0.0)
        zone._ventilation_offset = header.push(f"{prefix}:ventilation_volume", 0.0)
        zone._ventilation_T_offset = header.push(f"{prefix}:ventilation_temperature", T_init)
        return zone

    @property
    def capacitance(self) -> float:
        """Heat capacity (J / K) of the zone air."""
        return self.volume * self.rho_air * self.cp_air

    @property
    def temperature_index(self) -> int:
        return self._T_offset

    @property
    def heating_cooling_power_index(self) -> int:
        return self._hvac_offset

    @property
    def lighting_power_index(self) -> int:
        return self._lighting_offset

    @property
    def infiltration_volume_index(self) -> int:
        return self._infiltration_offset

    @property
    def ventilation_volume_index(self) -> int:
        return self._ventilation_offset

    @property
    def ventilation_temperature_index(self) -> int:
        return self._ventilation_T_offset

    def temperature(self, state: SimulationState) -> float:
        return float(state[self._T_offset])

    def set_temperature(self, state: SimulationState, T: float) -> None:
        state[self._T_offset] = T

    def add_surface(self, surface: ThermalSurface, side: Side) -> None:
        self.surfaces.append((surface, side))

    def coefficients(self, state: SimulationState, T_out: float) -> tuple[float, float]:
        """Returns the coefficients A (W) and B (W / K) of the linearised heat
        balance, using the surface temperatures and convection coefficients
        currently in `state`."""
        a = state[self._hvac_offset] + state[self._lighting_offset]
        b = 0.0
        for surface, side in self.surfaces:
            hA = surface.convection_coefficient(state, side) * surface.area
            a += hA * surface.surface_temperature(state, side)
            b += hA
        m_cp_inf = state[self._infiltration_offset] * self.rho_air * self.cp_air
        a += m_cp_inf * T_out
        b += m_cp_inf
        m_cp_vent = state[self._ventilation_offset] * self.rho_air * self.cp_air
        a += m_cp_vent * state[self._ventilation_T_offset]
        b += m_cp_vent
        return float(a), float(b)

    def future_temperature(self, a: float, b: float, T_0: float, dt: float) -> float:
        """Temperature (degC) of the zone air after `dt` seconds."""
        c = self.capacitance
        if abs(b) < _B_MIN:
            return T_0 + a * dt / c
        T_inf = a / b
        return T_inf + (T_0 - T_inf) * math.exp(-b * dt / c)

    def mean_temperature(self, a: float, b: float, T_0: float, dt: float) -> float:
        """Average temperature (degC) of the zone air over the next `dt`
        seconds."""
        c = self.capacitance
        if abs(b) < _B_MIN:
            return T_0 + a * dt / (2 * c)
        if dt <= 0.0:
            return T_0
        T_inf = a / b
        return T_inf + c * (T_0 - T_inf) / (b * dt) * (1 - math.exp(-b * dt / c))

    def __str__(self):
        return (
            f"Zone '{self.name}': V = {self.volume:.3g} m³, "
            f"C = {self.capacitance / 1000:.3g} kJ/K, "
            f"{len(self.surfaces)} surface side(s)"
        )
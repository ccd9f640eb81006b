"""
THERMAL SURFACE
---------------
Transient heat transfer through an opaque surface or a fenestration.

The node temperatures of a surface live in the simulation state. Every call
to `ThermalSurface.march` advances them by one micro-step:

1. The convection coefficients of both sides are determined (imposed by the
caller, fixed by the surface definition, or calculated with the TARP model)
and the absorbed solar radiation is distributed over the nodes.
2. The temperatures of the no-mass nodes are solved algebraically.
3. The temperatures of the massive nodes are advanced with the classical
4th-order Runge-Kutta method. At each of the four stages the conductances of
the cavities are re-evaluated and the no-mass nodes are solved again.
4. The new node temperatures and the convective heat flows on both sides are
written back to the state.

A construction without massive nodes is solved algebraically only.
"""
from __future__ import annotations
import math
from enum import Enum
import numpy as np
from building_thermal import Quantity
from building_thermal.construction.discretization import Discretization
from building_thermal.construction.network import Film, ThermalNetwork
from building_thermal.definitions import Surface
from building_thermal.exceptions import (
    DiscretizationError,
    ModelDefinitionError,
    ThermalModelError
)
from building_thermal.heat_transfer.convection import (
    Roughness,
    natural_convection_coefficient,
    exterior_convection_coefficient
)
from building_thermal.heat_transfer.radiation import radiation_coefficient
from building_thermal.logging import ModuleLogger
from building_thermal.model.boundary import Boundary, BoundaryConditions, Side
from building_thermal.model.state import SimulationState, SimulationStateHeader
from building_thermal.optics.glazing import Glazing


logger = ModuleLogger.get_logger(__name__)
logger.setLevel(ModuleLogger.WARNING)

# surface temperature (degC) at which the radiation coefficient of a side with
# a fixed convection coefficient is bounded
_T_SURFACE_MAX = 60.0


class SurfaceStatus(Enum):
    IDLE = 'idle'
    INTEGRATING = 'integrating'


def _fixed_coefficient(hc: Quantity | None) -> float | None:
    if hc is None:
        return None
    h = hc.to('W / (m ** 2 * K)').m
    if not h > 0.0:
        raise ModelDefinitionError(f"convection coefficient {h} W/(m².K) is not positive")
    return h


class ThermalSurface:
    """
    Opaque surface or fenestration, as seen by the thermal model.

    Opaque surfaces absorb solar radiation on their two outer faces only.
    Fenestrations with glazing layers absorb it in each pane, according to the
    optics of the glazing stack.
    """
    def __init__(self):
        self.name: str = ''
        self.area: float = 1.0
        self.tilt: float = 90.0
        self.perimeter: float = 4.0
        self.roughness: Roughness = Roughness.MEDIUM_ROUGH
        self.is_fenestration: bool = False
        self.discretization: Discretization | None = None
        self.network: ThermalNetwork | None = None
        self.front: Boundary = Boundary.exterior()
        self.back: Boundary = Boundary.exterior()
        self.status = SurfaceStatus.IDLE
        self.tstep_subdivision: int = 1
        self._hc_fixed: dict[Side, float | None] = {Side.FRONT: None, Side.BACK: None}
        self._T_offset: int = 0
        self._hc_offsets: dict[Side, int] = {}
        self._flow_offsets: dict[Side, int] = {}
        self._solar_offsets: dict[Side, int] = {}
        self._front_alphas: list[float] = []
        self._back_alphas: list[float] = []

    @classmethod
    def create(
        cls,
        definition: Surface,
        discretization: Discretization,
        front: Boundary,
        back: Boundary,
        header: SimulationStateHeader,
        initial_temperature: float = 22.0,
        is_fenestration: bool = False
    ) -> ThermalSurface:
        """
        Creates a `ThermalSurface` and registers its state elements in
        `header`. The number of micro-steps in which the surface must
        divide the main time step, given its fixed convection coefficients,
        is kept in `tstep_subdivision`.

        Parameters
        ----------
        definition: Surface
            Definition of the surface or fenestration.
        discretization: Discretization
            Discretization of the construction of the surface.
        front, back: Boundary
            What the front and back side of the surface face.
        header: SimulationStateHeader
            Header of the simulation state.
        initial_temperature: float, default 22.0
            Initial temperature (degC) of the nodes.
        is_fenestration: bool, default False
            Whether the surface is a fenestration.

        Raises
        ------
        ModelDefinitionError
            If the area is not positive, or if a fixed convection coefficient
            is not positive or is infinite on a side that faces a zone.
        """
        surf = cls()
        surf.name = definition.name
        surf.area = definition.area
        if not surf.area > 0.0:
            raise ModelDefinitionError(
                f"surface '{definition.name}' has an area of {surf.area} m²"
            )
        surf.tilt = definition.tilt.to('deg').m
        surf.perimeter = definition.perimeter
        surf.roughness = definition.roughness
        surf.is_fenestration = is_fenestration
        surf.discretization = discretization
        surf.network = ThermalNetwork(discretization, surf.tilt, definition.height_m)
        surf.front = front
        surf.back = back
        surf._hc_fixed[Side.FRONT] = _fixed_coefficient(definition.front_hc)
        surf._hc_fixed[Side.BACK] = _fixed_coefficient(definition.back_hc)
        for side, boundary in ((Side.FRONT, front), (Side.BACK, back)):
            h = surf._hc_fixed[side]
            if not boundary.is_exterior and h is not None and math.isinf(h):
                raise ModelDefinitionError(
                    f"surface '{definition.name}': the {side.value} side faces "
                    f"a zone and cannot have an infinite convection coefficient"
                )
        surf.tstep_subdivision = discretization.subdivisions(
            surf._film_bound(Side.FRONT),
            surf._film_bound(Side.BACK)
        )

        kind = 'fenestration' if is_fenestration else 'surface'
        prefix = f"{kind}:{definition.name}"
        for i in range(discretization.n_nodes):
            offset = header.push(f"{prefix}:node_temperature[{i}]", initial_temperature)
            if i == 0:
                surf._T_offset = offset
        for side in Side:
            h = surf._hc_fixed[side]
            if h is None:
                h = natural_convection_coefficient(initial_temperature, initial_temperature, 0.0)
            surf._hc_offsets[side] = header.push(f"{prefix}:{side.value}_convection_coefficient", h)
            surf._flow_offsets[side] = header.push(f"{prefix}:{side.value}_convective_heat_flow", 0.0)
            surf._solar_offsets[side] = header.push(f"{prefix}:{side.value}_solar_irradiance", 0.0)

        glazing_layers = discretization.glazing_layers
        if is_fenestration and glazing_layers:
            glazings = [layer.glazing for layer in glazing_layers]
            surf._front_alphas = Glazing.absorptances(glazings)
            surf._back_alphas = Glazing.back_absorptances(glazings)
        return surf

    def _film_bound(self, side: Side) -> float:
        # largest film coefficient the side can have while marching
        h = self._hc_fixed[side]
        if h is None:
            return self.discretization.max_film_coefficient
        if math.isinf(h):
            return h
        return h + radiation_coefficient(self.emissivity(side), _T_SURFACE_MAX)

    def boundary(self, side: Side) -> Boundary:
        return self.front if side is Side.FRONT else self.back

    def emissivity(self, side: Side) -> float:
        if side is Side.FRONT:
            return self.discretization.front_emissivity
        return self.discretization.back_emissivity

    def cos_tilt(self, side: Side) -> float:
        """Cosine of the tilt of the outward normal of `side`."""
        cos_front = math.cos(math.radians(self.tilt))
        return cos_front if side is Side.FRONT else -cos_front

    def side_tilt(self, side: Side) -> float:
        return self.tilt if side is Side.FRONT else 180.0 - self.tilt

    @property
    def n_nodes(self) -> int:
        return self.discretization.n_nodes

    def temperatures(self, state: SimulationState) -> np.ndarray:
        """Returns a copy of the node temperatures (degC)."""
        return np.array(state[self._T_offset:self._T_offset + self.n_nodes], dtype=float)

    def set_temperatures(self, state: SimulationState, T: np.ndarray) -> None:
        state[self._T_offset:self._T_offset + self.n_nodes] = T

    def surface_temperature(self, state: SimulationState, side: Side) -> float:
        i = self._T_offset if side is Side.FRONT else self._T_offset + self.n_nodes - 1
        return float(state[i])

    def convection_coefficient(self, state: SimulationState, side: Side) -> float:
        return float(state[self._hc_offsets[side]])

    def convective_heat_flow(self, state: SimulationState, side: Side) -> float:
        """Convective heat flow (W / m ** 2) from the air on `side` into the
        surface during the last micro-step."""
        return float(state[self._flow_offsets[side]])

    def solar_irradiance_index(self, side: Side) -> int:
        """Offset in the state of the solar irradiance (W / m ** 2) incident
        on `side`, written by the caller."""
        return self._solar_offsets[side]

    def solar_irradiance(self, state: SimulationState, side: Side) -> float:
        return float(state[self.solar_irradiance_index(side)])

    def march(
        self,
        state: SimulationState,
        front: BoundaryConditions,
        back: BoundaryConditions,
        dt: float
    ) -> tuple[float, float]:
        """
        Advances the node temperatures of the surface by `dt` seconds.

        Parameters
        ----------
        state: SimulationState
            The simulation state; the node temperatures, convection
            coefficients and heat flows of the surface are updated in place.
        front, back: BoundaryConditions
            Conditions on the front and back side during the micro-step.
        dt: float
            Length of the micro-step (s).

        Returns
        -------
        The convective heat flows (W / m ** 2) into the surface on the front
        and the back side. At steady state they are opposite.

        Raises
        ------
        DiscretizationError
            If the network degenerates numerically.
        ThermalModelError
            If the surface is already being integrated.
        """
        if self.status is SurfaceStatus.INTEGRATING:
            raise ThermalModelError(f"surface '{self.name}' is already being integrated")
        self.status = SurfaceStatus.INTEGRATING
        try:
            T = self.temperatures(state)
            film_front = self._film(Side.FRONT, front, T[0])
            film_back = self._film(Side.BACK, back, T[-1])
            state[self._hc_offsets[Side.FRONT]] = film_front.h_c
            state[self._hc_offsets[Side.BACK]] = film_back.h_c
            q_solar = self._absorbed_solar(front.solar_irradiance, back.solar_irradiance)
            T, u = self._advance(T, film_front, film_back, q_solar, dt)
            if not np.all(np.isfinite(T)):
                raise DiscretizationError(
                    f"surface '{self.name}': node temperatures are not finite"
                )
            q_front = self._heat_flow(film_front, T[0], T[1], u[0])
            q_back = self._heat_flow(film_back, T[-1], T[-2], u[-1])
            self.set_temperatures(state, T)
            state[self._flow_offsets[Side.FRONT]] = q_front
            state[self._flow_offsets[Side.BACK]] = q_back
        finally:
            self.status = SurfaceStatus.IDLE
        return q_front, q_back

    def _film(self, side: Side, bc: BoundaryConditions, T_surf: float) -> Film:
        h_c = bc.convection_coefficient
        if h_c is None:
            h_c = self._hc_fixed[side]
        if h_c is None:
            if self.boundary(side).is_exterior:
                h_c = exterior_convection_coefficient(
                    bc.air_temperature, T_surf, self.cos_tilt(side),
                    bc.wind_speed, self.area, self.perimeter, self.roughness
                )
            else:
                h_c = natural_convection_coefficient(
                    bc.air_temperature, T_surf, self.cos_tilt(side)
                )
        if bc.radiant_temperature is None:
            return Film(bc.air_temperature, h_c)
        return Film(bc.air_temperature, h_c, bc.radiant_temperature, bc.radiation_coefficient)

    def _absorbed_solar(self, I_front: float, I_back: float) -> np.ndarray:
        q = np.zeros(self.n_nodes)
        if self._front_alphas:
            layers = self.discretization.glazing_layers
            for layer, a_f, a_b in zip(layers, self._front_alphas, self._back_alphas):
                # each pane passes its absorbed share to both of its faces
                q_layer = a_f * I_front + a_b * I_back
                q[layer.first_node] += q_layer / 2
                q[layer.last_node] += q_layer / 2
        else:
            q[0] += self.discretization.front_solar_absorptance * I_front
            q[-1] += self.discretization.back_solar_absorptance * I_back
        return q

    def _advance(
        self,
        T: np.ndarray,
        front: Film,
        back: Film,
        q_solar: np.ndarray,
        dt: float
    ) -> tuple[np.ndarray, np.ndarray]:
        network = self.network
        massive, no_mass = network.free_nodes(front, back)
        if front.is_pinned:
            T[0] = front.T_air
        if back.is_pinned:
            T[-1] = back.T_air
        q = network.heat_input(front, back, q_solar)
        C = network.C[massive]

        def rates(T_stage: np.ndarray) -> np.ndarray:
            u_stage = network.conductances(T_stage)
            d_stage = network.diagonal(u_stage, front, back)
            network.solve_no_mass(T_stage, u_stage, d_stage, q, no_mass)
            flows = network.net_flows(T_stage, u_stage, d_stage, q)
            return flows[massive] / C

        if len(massive) > 0:
            k1 = rates(T)
            T2 = T.copy()
            T2[massive] += dt / 2 * k1
            k2 = rates(T2)
            T3 = T.copy()
            T3[massive] += dt / 2 * k2
            k3 = rates(T3)
            T4 = T.copy()
            T4[massive] += dt * k3
            k4 = rates(T4)
            T[massive] += dt / 6 * (k1 + 2 * k2 + 2 * k3 + k4)

        u = network.conductances(T)
        d = network.diagonal(u, front, back)
        network.solve_no_mass(T, u, d, q, no_mass)
        return T, u

    @staticmethod
    def _heat_flow(film: Film, T_surf: float, T_next: float, u_first: float) -> float:
        if film.is_pinned:
            # conduction into the first segment
            return u_first * (T_surf - T_next)
        return film.h_c * (film.T_air - T_surf)

    def __str__(self):
        kind = 'Fenestration' if self.is_fenestration else 'Surface'
        return (
            f"{kind} '{self.name}': A = {self.area:.3g} m², tilt = {self.tilt:.3g}°, "
            f"{self.n_nodes} nodes ({self.discretization.n_massive_nodes} massive)"
        )

"""
THERMAL MODEL OF A BUILDING
---------------------------
Couples the surfaces and fenestrations of a building to the air of its zones
and to the outdoor environment.

Each main time step is divided into a number of micro-steps, set by the most
restrictive construction or surface of the building. In every micro-step:

(a) the average air temperature of every zone during the micro-step is
estimated with the analytical zone update, and together with the mean radiant
temperature of the zone it is frozen;
(b) all surfaces and fenestrations are marched with the frozen zone
conditions as boundary conditions, in any order;
(c) the air temperature of every zone is updated analytically with the new
surface temperatures.

The zones and the surfaces are coupled only once per micro-step: the model is
a single-pass predictor, not an iterative solver.
"""
from __future__ import annotations
from building_thermal.construction.discretization import Discretization
from building_thermal.definitions import Building, Surface
from building_thermal.exceptions import ModelDefinitionError, ThermalModelError
from building_thermal.heat_transfer.radiation import (
    exterior_radiant_temperature,
    radiation_coefficient
)
from building_thermal.logging import ModuleLogger
from building_thermal.model.boundary import (
    Boundary,
    BoundaryConditions,
    CurrentWeather,
    Side
)
from building_thermal.model.state import SimulationState, SimulationStateHeader
from building_thermal.model.surface import ThermalSurface
from building_thermal.model.zone import ThermalZone
from building_thermal.settings import ThermalSettings


logger = ModuleLogger.get_logger(__name__)
logger.setLevel(ModuleLogger.INFO)


class _ZoneSnapshot:
    """Conditions of a zone, frozen during a micro-step."""

    def __init__(self, air_temperature: float, radiant_temperature: float | None):
        self.air_temperature = air_temperature
        self.radiant_temperature = radiant_temperature
        self.radiation_coefficients: dict[tuple[int, Side], float] = {}


class ThermalModel:
    """Finite difference thermal model of a building."""

    def __init__(
        self,
        building: Building,
        header: SimulationStateHeader,
        n_steps_per_hour: int = 4,
        settings: ThermalSettings | None = None
    ):
        """
        Creates the thermal model of `building` and registers its state
        elements in `header`.

        Parameters
        ----------
        building: Building
            The definitions of the building.
        header: SimulationStateHeader
            Header of the simulation state.
        n_steps_per_hour: int, default 4
            Number of main time steps per hour.
        settings: ThermalSettings, optional
            Global settings of the model.

        Raises
        ------
        ModelDefinitionError
            If a surface refers to a construction or a space that does not
            exist, or cannot be made into a valid thermal surface.
        DiscretizationError
            If a construction cannot be discretized.
        """
        if n_steps_per_hour <= 0:
            raise ValueError(f"n_steps_per_hour must be positive, not {n_steps_per_hour}")
        self.settings = settings or ThermalSettings()
        self.building = building
        self.dt = 3600.0 / n_steps_per_hour
        self.discretizations: list[Discretization] = []
        self._discretization_index: dict[str, int] = {}
        T_init = self.settings.initial_temperature.to('degC').m

        self.zones: list[ThermalZone] = [
            ThermalZone.create(
                space, i, header,
                self.settings.initial_temperature,
                self.settings.air_reference_temperature
            )
            for i, space in enumerate(building.spaces)
        ]
        self.surfaces: list[ThermalSurface] = [
            self._create_surface(s, header, T_init, False)
            for s in building.surfaces
        ]
        self.fenestrations: list[ThermalSurface] = [
            self._create_surface(f, header, T_init, True)
            for f in building.fenestrations
        ]
        # a fixed convection coefficient can make a surface stiffer than its
        # construction
        self.dt_subdivisions = max(
            [d.tstep_subdivision for d in self.discretizations]
            + [s.tstep_subdivision for s in self.surfaces + self.fenestrations],
            default=1
        )
        logger.info(
            f"model of '{building.name}': {len(self.zones)} zone(s), "
            f"{len(self.surfaces)} surface(s), {len(self.fenestrations)} "
            f"fenestration(s), {len(self.discretizations)} construction(s); "
            f"time step {self.dt} s in {self.dt_subdivisions} micro-step(s)"
        )

    @property
    def micro_dt(self) -> float:
        """Length of a micro-step (s)."""
        return self.dt / self.dt_subdivisions

    def discretization(self, construction: str) -> Discretization:
        """Returns the discretization of `construction`, creating it the
        first time it is asked for."""
        index = self._discretization_index.get(construction)
        if index is None:
            d = Discretization.create(
                self.building.get_construction(construction),
                self.building,
                self.dt,
                self.settings.discretization
            )
            self.discretizations.append(d)
            index = len(self.discretizations) - 1
            self._discretization_index[construction] = index
        return self.discretizations[index]

    def _boundary(self, space_name: str | None) -> Boundary:
        if space_name is None:
            return Boundary.exterior()
        return Boundary.zone(self.building.get_space_index(space_name))

    def _create_surface(
        self,
        definition: Surface,
        header: SimulationStateHeader,
        initial_temperature: float,
        is_fenestration: bool
    ) -> ThermalSurface:
        front = self._boundary(definition.front_boundary)
        back = self._boundary(definition.back_boundary)
        surface = ThermalSurface.create(
            definition,
            self.discretization(definition.construction),
            front, back, header,
            initial_temperature,
            is_fenestration
        )
        for side, boundary in ((Side.FRONT, front), (Side.BACK, back)):
            if not boundary.is_exterior:
                self.zones[boundary.zone_index].add_surface(surface, side)
        return surface

    def zone(self, name: str) -> ThermalZone:
        for zone in self.zones:
            if zone.name == name:
                return zone
        raise ModelDefinitionError(f"zone '{name}' not found")

    def surface(self, name: str) -> ThermalSurface:
        for surface in self.surfaces + self.fenestrations:
            if surface.name == name:
                return surface
        raise ModelDefinitionError(f"surface '{name}' not found")

    def march(self, state: SimulationState, weather: CurrentWeather) -> None:
        """
        Advances the model by one main time step. The node temperatures,
        zone air temperatures, convection coefficients and heat flows in
        `state` are updated in place.

        Parameters
        ----------
        state: SimulationState
            Simulation state created from the header passed to the model.
        weather: CurrentWeather
            Outdoor conditions during the time step.

        Raises
        ------
        ThermalModelError
            If a surface fails to march; `state` may then be partially
            updated.
        """
        try:
            for _ in range(self.dt_subdivisions):
                self._micro_step(state, weather)
        except ThermalModelError as err:
            logger.error(f"march of '{self.building.name}' failed: {err}")
            raise

    def _micro_step(self, state: SimulationState, weather: CurrentWeather) -> None:
        dt = self.micro_dt
        T_out = weather.dry_bulb

        # (a) frozen zone conditions
        snapshots = []
        for zone in self.zones:
            a, b = zone.coefficients(state, T_out)
            T_0 = zone.temperature(state)
            T_mean = zone.mean_temperature(a, b, T_0, dt)
            snapshots.append(self._zone_snapshot(zone, state, T_mean))

        # (b) surfaces
        for surface in self.surfaces + self.fenestrations:
            front = self._conditions(surface, Side.FRONT, state, weather, snapshots)
            back = self._conditions(surface, Side.BACK, state, weather, snapshots)
            surface.march(state, front, back, dt)

        # (c) zone correction
        for zone in self.zones:
            a, b = zone.coefficients(state, T_out)
            T_0 = zone.temperature(state)
            zone.set_temperature(state, zone.future_temperature(a, b, T_0, dt))

    @staticmethod
    def _zone_snapshot(
        zone: ThermalZone,
        state: SimulationState,
        T_air: float
    ) -> _ZoneSnapshot:
        # The mean radiant temperature is weighted with A * h_r, so that the
        # longwave exchange between the surfaces of a zone sums to zero.
        snapshot = _ZoneSnapshot(T_air, None)
        num = 0.0
        den = 0.0
        for surface, side in zone.surfaces:
            h_r = radiation_coefficient(surface.emissivity(side), T_air)
            snapshot.radiation_coefficients[(id(surface), side)] = h_r
            num += surface.area * h_r * surface.surface_temperature(state, side)
            den += surface.area * h_r
        if den > 0.0:
            snapshot.radiant_temperature = num / den
        return snapshot

    @staticmethod
    def _conditions(
        surface: ThermalSurface,
        side: Side,
        state: SimulationState,
        weather: CurrentWeather,
        snapshots: list[_ZoneSnapshot]
    ) -> BoundaryConditions:
        solar = surface.solar_irradiance(state, side)
        boundary = surface.boundary(side)
        if boundary.is_exterior:
            T_db = weather.dry_bulb
            T_rad = exterior_radiant_temperature(
                T_db, surface.side_tilt(side), weather.ir, weather.sky_emissivity
            )
            T_surf = surface.surface_temperature(state, side)
            h_r = radiation_coefficient(surface.emissivity(side), (T_surf + T_rad) / 2)
            return BoundaryConditions(
                air_temperature=T_db,
                radiant_temperature=T_rad,
                radiation_coefficient=h_r,
                solar_irradiance=solar,
                wind_speed=weather.wind
            )
        snapshot = snapshots[boundary.zone_index]
        return BoundaryConditions(
            air_temperature=snapshot.air_temperature,
            radiant_temperature=snapshot.radiant_temperature,
            radiation_coefficient=snapshot.radiation_coefficients[(id(surface), side)],
            solar_irradiance=solar
        )

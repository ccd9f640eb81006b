"""
DISCRETIZATION OF CONSTRUCTIONS
-------------------------------
A construction is turned into a one-dimensional finite difference network of
nodes connected by segments, using control volumes:

- A massive layer is divided into n = ceil(thickness / dx_max) elements of
equal thickness dx. Each element is a segment with resistance dx / k (two
half-element resistances dx / (2k) in series between the nodes that bound it)
and with capacitance rho * c * dx, of which each bounding node receives half.
- A no-mass layer is a single segment with its thermal resistance and without
capacitance.
- A gas layer is a single cavity segment, whose resistance depends on the
temperatures of its bounding nodes and is evaluated while marching.

A network with m segments has m + 1 nodes. Node 0 is the front surface, node
m the back surface.

The explicit stability limit of a massive node is C / G, with C the
capacitance of the node and G the sum of the conductances that connect it to
the nearest massive nodes or to the environment. A connection runs through
all no-mass segments and cavities in between, and ends in the film of the
surface if it reaches one. The discretization keeps the smallest number of
subdivisions of the main time step that respects this limit (times a safety
factor) for its most restrictive node. A massive layer whose own elements
would need a micro-step shorter than the minimum allowed micro-step is
modelled as a no-mass layer instead.
"""
from __future__ import annotations
import math
import warnings
from dataclasses import dataclass, field
import numpy as np
from building_thermal.exceptions import (
    CorrelationWarning,
    DiscretizationError,
    ModelDefinitionError
)
from building_thermal.heat_transfer.cavity import Cavity
from building_thermal.heat_transfer.gas import Gas, get_gas
from building_thermal.logging import ModuleLogger
from building_thermal.definitions import (
    Building,
    Construction,
    GasSubstance,
    Material,
    Substance
)
from building_thermal.optics.glazing import Glazing
from building_thermal.settings import DiscretizationSettings


logger = ModuleLogger.get_logger(__name__)
logger.setLevel(ModuleLogger.WARNING)

# surface temperatures (degC) between which the conductance of a cavity is
# bounded
_CAVITY_T_RANGE = (-20.0, 60.0)


@dataclass(frozen=True)
class Solid:
    """Segment with a fixed resistance (m ** 2.K / W) and capacitance
    (J / (m ** 2.K)); the capacitance of a no-mass segment is 0."""
    resistance: float
    capacitance: float = 0.0


@dataclass(frozen=True)
class CavitySegment:
    """Gas layer between two solid layers. The emissivities are those of the
    solid faces on its front and back side."""
    thickness: float
    gas: Gas
    eps_front: float
    eps_back: float


@dataclass(frozen=True)
class Undefined:
    """Segment without thermal properties."""
    pass


Segment = Solid | CavitySegment | Undefined


@dataclass(frozen=True)
class Layer:
    """
    Position of a construction layer in the network.

    Attributes
    ----------
    material: str
        Name of the material of the layer.
    n_elements: int
        Number of massive elements; 0 for no-mass layers and cavities.
    first_node: int
        Index of the node on the front face of the layer.
    last_node: int
        Index of the node on the back face of the layer.
    glazing: Glazing | None
        Optical properties if the layer is a glazing pane.
    """
    material: str
    n_elements: int
    first_node: int
    last_node: int
    glazing: Glazing | None = None


def _cavity_conductance_bound(segment: CavitySegment) -> float:
    """Largest conductance (W / (m ** 2.K)) of a cavity within the
    temperature range of buildings. Convection is taken for a horizontal
    cavity heated from below, radiation at the upper end of the range."""
    cavity = Cavity(
        segment.gas, segment.thickness, 1.0, 0.0,
        segment.eps_front, segment.eps_back
    )
    T_low, T_high = _CAVITY_T_RANGE
    with warnings.catch_warnings():
        warnings.simplefilter('ignore', CorrelationWarning)
        h_c = max(
            cavity.convection_coefficient(T_low, T_high),
            cavity.convection_coefficient(T_high, T_low)
        )
    return h_c + cavity.radiation_coefficient(T_high, T_high)


@dataclass(frozen=True, eq=False)
class Discretization:
    """
    Finite difference network of a construction. A `Discretization` is
    created once per construction and is shared by all surfaces made of that
    construction; it cannot be modified after creation.

    Attributes
    ----------
    construction: str
        Name of the construction.
    segments: tuple[Segment, ...]
        Segments from the front to the back surface.
    layers: tuple[Layer, ...]
        Position of each construction layer in the network.
    main_dt: float
        Main time step of the simulation (s).
    safety_factor: float
        Factor applied to the stability limit of the massive nodes.
    max_film_coefficient: float
        Film coefficient (W / (m ** 2.K)) assumed on both sides when the
        number of subdivisions of the construction is determined.
    """
    construction: str
    segments: tuple[Segment, ...]
    layers: tuple[Layer, ...] = ()
    main_dt: float = 3600.0
    safety_factor: float = 0.5
    max_film_coefficient: float = 20.0
    front_solar_absorptance: float = 0.0
    back_solar_absorptance: float = 0.0
    front_emissivity: float = 0.0
    back_emissivity: float = 0.0
    _node_capacitances: np.ndarray = field(init=False, repr=False)
    _cavity_bounds: dict[int, float] = field(init=False, repr=False)

    def __post_init__(self):
        C = np.zeros(len(self.segments) + 1)
        cavity_bounds = {}
        for i, segment in enumerate(self.segments):
            match segment:
                case Solid(capacitance=c) if c > 0.0:
                    C[i] += c / 2
                    C[i + 1] += c / 2
                case CavitySegment():
                    cavity_bounds[i] = _cavity_conductance_bound(segment)
                case _:
                    pass
        C.setflags(write=False)
        object.__setattr__(self, '_node_capacitances', C)
        object.__setattr__(self, '_cavity_bounds', cavity_bounds)

    @classmethod
    def create(
        cls,
        construction: Construction,
        building: Building,
        main_dt: float,
        settings: DiscretizationSettings | None = None
    ) -> Discretization:
        """
        Creates the `Discretization` of `construction`.

        Parameters
        ----------
        construction: Construction
            The construction to discretize.
        building: Building
            Provides the materials and substances the construction refers to.
        main_dt: float
            Main time step of the simulation (s).
        settings: DiscretizationSettings, optional
            Maximum element thickness, minimum micro-step, safety factor and
            film coefficient bound.

        Raises
        ------
        DiscretizationError
            If a material or substance is unknown, if a thickness or a
            conductivity is not positive, or if a gas layer is placed on the
            outside of the construction or next to another gas layer.
        """
        settings = settings or DiscretizationSettings()
        if main_dt <= 0.0:
            raise DiscretizationError(f"main time step {main_dt} s is not positive")
        if not construction.materials:
            raise DiscretizationError(f"construction '{construction.name}' has no layers")

        layers_data = [
            cls._lookup(building, construction, name)
            for name in construction.materials
        ]
        cls._check_gas_layers(construction, layers_data)

        segments: list[Segment] = []
        layers: list[Layer] = []
        for i, (material, substance) in enumerate(layers_data):
            first_node = len(segments)
            if isinstance(substance, GasSubstance):
                prev_substance = layers_data[i - 1][1]
                next_substance = layers_data[i + 1][1]
                segments.append(CavitySegment(
                    thickness=cls._thickness(material),
                    gas=cls._gas(substance),
                    eps_front=prev_substance.back_emissivity,
                    eps_back=next_substance.front_emissivity
                ))
                n_elements = 0
            else:
                layer_segments, n_elements = cls._discretize_solid(
                    material, substance, settings
                )
                segments.extend(layer_segments)
            layers.append(Layer(
                material=material.name,
                n_elements=n_elements,
                first_node=first_node,
                last_node=len(segments),
                glazing=substance.glazing() if isinstance(substance, Substance) else None
            ))

        front_substance = layers_data[0][1]
        back_substance = layers_data[-1][1]
        d = cls(
            construction=construction.name,
            segments=tuple(segments),
            layers=tuple(layers),
            main_dt=main_dt,
            safety_factor=settings.safety_factor,
            max_film_coefficient=settings.h_film_max,
            front_solar_absorptance=front_substance.front_solar_absorptance,
            back_solar_absorptance=back_substance.back_solar_absorptance,
            front_emissivity=front_substance.front_emissivity,
            back_emissivity=back_substance.back_emissivity
        )
        dt_stable = d.stable_time_step(settings.h_film_max, settings.h_film_max)
        if dt_stable < settings.dt_min:
            logger.warning(
                f"construction '{construction.name}': stable micro-step "
                f"{dt_stable:.3g} s is shorter than {settings.dt_min} s"
            )
        logger.debug(
            f"construction '{construction.name}': {len(segments)} segments, "
            f"{d.n_massive_nodes} massive nodes, "
            f"{d.tstep_subdivision} subdivision(s) of {main_dt} s"
        )
        return d

    @staticmethod
    def _lookup(
        building: Building,
        construction: Construction,
        name: str
    ) -> tuple[Material, Substance | GasSubstance]:
        try:
            material = building.get_material(name)
            substance = building.get_substance(material.substance)
        except ModelDefinitionError as err:
            raise DiscretizationError(
                f"construction '{construction.name}': {err}"
            ) from err
        return material, substance

    @staticmethod
    def _check_gas_layers(
        construction: Construction,
        layers_data: list[tuple[Material, Substance | GasSubstance]]
    ) -> None:
        is_gas = [isinstance(s, GasSubstance) for _, s in layers_data]
        if is_gas[0] or is_gas[-1]:
            raise DiscretizationError(
                f"construction '{construction.name}': a gas layer cannot be "
                f"the first or the last layer"
            )
        for a, b in zip(is_gas, is_gas[1:]):
            if a and b:
                raise DiscretizationError(
                    f"construction '{construction.name}': two gas layers "
                    f"cannot be adjacent"
                )

    @staticmethod
    def _thickness(material: Material) -> float:
        t = material.thickness.to('m').m
        if not t > 0.0:
            raise DiscretizationError(
                f"material '{material.name}' has a thickness of {t} m"
            )
        return t

    @staticmethod
    def _gas(substance: GasSubstance) -> Gas:
        try:
            return get_gas(substance.gas)
        except KeyError as err:
            raise DiscretizationError(
                f"substance '{substance.name}': {err.args[0]}"
            ) from None

    @classmethod
    def _discretize_solid(
        cls,
        material: Material,
        substance: Substance,
        settings: DiscretizationSettings
    ) -> tuple[list[Solid], int]:
        """Returns the segments of a solid layer and its number of massive
        elements."""
        t = cls._thickness(material)
        if not substance.is_massive and material.R is not None:
            R = material.R.to('m ** 2 * K / W').m
            if not R > 0.0:
                raise DiscretizationError(
                    f"material '{material.name}' has a thermal resistance of "
                    f"{R} m².K/W"
                )
            return [Solid(R)], 0
        k = substance.k.to('W / (m * K)').m
        if not k > 0.0:
            raise DiscretizationError(
                f"substance '{substance.name}' has a thermal conductivity of "
                f"{k} W/(m.K)"
            )
        if not substance.is_massive:
            return [Solid(t / k)], 0

        rho = substance.rho.to('kg / m ** 3').m
        c = substance.c.to('J / (kg * K)').m
        n = max(1, math.ceil(t / settings.dx_max - 1.e-9))
        dx = t / n
        dt_stable = settings.safety_factor * rho * c * dx ** 2 / (2 * k)
        if dt_stable < settings.dt_min:
            logger.warning(
                f"material '{material.name}': stable time step {dt_stable:.3g} s "
                f"is shorter than {settings.dt_min} s; the layer is modelled "
                f"without thermal mass"
            )
            return [Solid(t / k)], 0
        return [Solid(dx / k, rho * c * dx) for _ in range(n)], n

    def _link_conductance(self, node: int, step: int, h_end: float) -> float:
        # Conductance between `node` and the nearest massive node or the
        # environment in direction `step` (-1 = to the front, +1 = to the back).
        R = 0.0
        j = node
        while True:
            s = j if step > 0 else j - 1
            if not 0 <= s < len(self.segments):
                if h_end <= 0.0:
                    return 0.0
                R += 1 / h_end
                break
            match self.segments[s]:
                case Solid(resistance=r):
                    R += r
                case CavitySegment():
                    R += 1 / self._cavity_bounds[s]
                case Undefined():
                    raise DiscretizationError(
                        f"segment {s} of '{self.construction}' is undefined"
                    )
            j += step
            if self._node_capacitances[j] > 0.0:
                break
        if not R > 0.0:
            raise DiscretizationError(
                f"construction '{self.construction}': node {node} has a "
                f"connection without resistance"
            )
        return 1 / R

    def stable_time_step(self, h_front: float, h_back: float) -> float:
        """
        Returns the longest micro-step (s) with which the massive nodes can be
        marched, if the film coefficients on the front and back side do not
        exceed `h_front` and `h_back` (W / (m ** 2.K)). An infinite film
        coefficient holds the surface node at the air temperature.

        Returns infinity for a construction without massive nodes.
        """
        pinned = set()
        if math.isinf(h_front):
            pinned.add(0)
        if math.isinf(h_back):
            pinned.add(self.n_nodes - 1)
        dt = math.inf
        for i in np.flatnonzero(self._node_capacitances):
            if i in pinned:
                continue
            G = self._link_conductance(i, -1, h_front) + self._link_conductance(i, 1, h_back)
            if G > 0.0:
                dt = min(dt, self.safety_factor * self._node_capacitances[i] / G)
        return dt

    def subdivisions(self, h_front: float, h_back: float) -> int:
        """Returns the number of micro-steps in which the main time step must
        be divided for film coefficients up to `h_front` and `h_back`."""
        dt = self.stable_time_step(h_front, h_back)
        if math.isinf(dt):
            return 1
        return max(1, math.ceil(self.main_dt / dt - 1.e-9))

    @property
    def tstep_subdivision(self) -> int:
        """Number of subdivisions of the main time step, with the film
        coefficient bound on both sides."""
        return self.subdivisions(self.max_film_coefficient, self.max_film_coefficient)

    @property
    def n_nodes(self) -> int:
        return len(self.segments) + 1

    @property
    def node_capacitances(self) -> np.ndarray:
        """Capacitance (J / (m ** 2.K)) of each node; 0 for no-mass nodes."""
        return self._node_capacitances.copy()

    @property
    def n_massive_nodes(self) -> int:
        return int(np.count_nonzero(self._node_capacitances))

    @property
    def has_cavity(self) -> bool:
        return any(isinstance(s, CavitySegment) for s in self.segments)

    @property
    def elements(self) -> tuple[int, ...]:
        """Number of massive elements per layer (0 = no-mass or cavity)."""
        return tuple(layer.n_elements for layer in self.layers)

    @property
    def glazing_layers(self) -> tuple[Layer, ...]:
        return tuple(layer for layer in self.layers if layer.glazing is not None)

    @property
    def r_value(self) -> float:
        """Unit thermal resistance (m ** 2.K / W) of the construction,
        surface films excluded.

        Raises
        ------
        DiscretizationError
            If the construction contains a cavity, whose resistance depends on
            the temperatures of the construction.
        """
        R = 0.0
        for segment in self.segments:
            match segment:
                case Solid(resistance=r):
                    R += r
                case CavitySegment():
                    raise DiscretizationError(
                        f"construction '{self.construction}' contains a "
                        f"cavity: its R-value depends on temperature"
                    )
                case Undefined():
                    raise DiscretizationError(
                        f"construction '{self.construction}' contains an "
                        f"undefined segment"
                    )
        return R

    def __str__(self):
        lines = [f"Discretization of '{self.construction}':"]
        for layer in self.layers:
            kind = f"{layer.n_elements} element(s)" if layer.n_elements else "no-mass"
            lines.append(
                f"  {layer.material}: nodes {layer.first_node}-{layer.last_node}, {kind}"
            )
        lines.append(f"  subdivisions: {self.tstep_subdivision}")
        return '\n'.join(lines)

"""
Read-only description of a building: the substances, materials and
constructions of its envelope, its spaces, and the surfaces and fenestrations
that bound them.

These records are what a model loader produces. `ThermalModel` only reads
them; all derived data (discretizations, node temperatures, ...) lives
elsewhere.
"""
from __future__ import annotations
import math
from dataclasses import dataclass, field
from building_thermal import Quantity
from building_thermal.exceptions import ModelDefinitionError
from building_thermal.heat_transfer.convection import Roughness
from building_thermal.optics.glazing import Glazing


Q_ = Quantity


@dataclass
class Substance:
    """
    Dataclass that groups the physical properties of a solid substance.

    Attributes
    ----------
    name: str
        Unique name of the substance.
    k: Quantity
        Thermal conductivity.
    rho: Quantity | None, default None
        Mass density. A substance without mass density or specific heat is
        "no-mass": a layer made of it is a pure thermal resistance.
    c: Quantity | None, default None
        Specific heat capacity.
    front_solar_absorptance, back_solar_absorptance: float, default 0.7
        Fraction of the solar irradiance absorbed by the front/back face of
        an opaque layer.
    front_emissivity, back_emissivity: float, default 0.9
        Thermal (infrared) absorptance of the front/back face.
    solar_transmittance: float | None, default None
        Normal solar transmittance. Only glazing substances have one.
    front_solar_reflectance, back_solar_reflectance: float | None
        Normal solar reflectance of a glazing substance. If missing, it is
        derived from the transmittance and the solar absorptance.
    """
    name: str
    k: Quantity
    rho: Quantity | None = None
    c: Quantity | None = None
    front_solar_absorptance: float = 0.7
    back_solar_absorptance: float = 0.7
    front_emissivity: float = 0.9
    back_emissivity: float = 0.9
    solar_transmittance: float | None = None
    front_solar_reflectance: float | None = None
    back_solar_reflectance: float | None = None

    @property
    def is_massive(self) -> bool:
        return self.rho is not None and self.c is not None

    @property
    def is_glazing(self) -> bool:
        return self.solar_transmittance is not None

    def glazing(self) -> Glazing | None:
        """Returns the optical properties of a glazing substance, or None if
        the substance is opaque."""
        if not self.is_glazing:
            return None
        tau = self.solar_transmittance
        rho_f = self.front_solar_reflectance
        if rho_f is None:
            rho_f = max(0.0, 1.0 - tau - self.front_solar_absorptance)
        rho_b = self.back_solar_reflectance
        if rho_b is None:
            rho_b = max(0.0, 1.0 - tau - self.back_solar_absorptance)
        return Glazing(tau, rho_f, rho_b)


@dataclass
class GasSubstance:
    """
    Substance that fills a cavity.

    Attributes
    ----------
    name: str
        Unique name of the substance.
    gas: str, default 'air'
        One of 'air', 'argon', 'krypton' or 'xenon'.
    """
    name: str
    gas: str = 'air'


@dataclass
class Material:
    """
    Layer of a construction.

    Attributes
    ----------
    name: str
        Unique name of the material.
    substance: str
        Name of the substance the layer is made of.
    thickness: Quantity
        Thickness of the layer.
    R: Quantity | None, default None
        Unit thermal resistance. Only used with no-mass substances; when
        given, it replaces thickness / conductivity.
    """
    name: str
    substance: str
    thickness: Quantity
    R: Quantity | None = None


@dataclass
class Construction:
    """
    Ordered list of material names, from the front (usually the exterior) to
    the back side of a surface.
    """
    name: str
    materials: list[str] = field(default_factory=list)


@dataclass
class Space:
    """
    Volume of air enclosed by surfaces and fenestrations.

    Attributes
    ----------
    name: str
        Unique name of the space.
    volume: Quantity
        Air volume of the space.
    """
    name: str
    volume: Quantity


@dataclass
class Surface:
    """
    Opaque building element.

    Attributes
    ----------
    name: str
        Unique name of the surface.
    construction: str
        Name of the construction of the surface.
    A: Quantity
        Area of the surface.
    tilt: Quantity, default 90°
        Angle between the outward normal of the front side and the zenith:
        0° faces upwards (e.g. a roof), 90° is vertical, 180° faces downwards.
    height: Quantity | None, default None
        Height of the surface. If None, the surface is taken to be square.
    front_boundary, back_boundary: str | None, default None
        Name of the space on the front/back side, or None if that side
        faces the outdoors.
    front_hc, back_hc: Quantity | None, default None
        Fixed convection coefficient of the front/back side. If None, it is
        calculated with the TARP model at every time step. An infinite value
        holds the surface at the air temperature on that side.
    roughness: Roughness, default MEDIUM_ROUGH
        Roughness of the exterior side(s), for the wind driven convection.
    """
    name: str
    construction: str
    A: Quantity
    tilt: Quantity = Q_(90.0, 'deg')
    height: Quantity | None = None
    front_boundary: str | None = None
    back_boundary: str | None = None
    front_hc: Quantity | None = None
    back_hc: Quantity | None = None
    roughness: Roughness = Roughness.MEDIUM_ROUGH

    @property
    def area(self) -> float:
        return self.A.to('m ** 2').m

    @property
    def height_m(self) -> float:
        if self.height is not None:
            return self.height.to('m').m
        return math.sqrt(self.area)

    @property
    def perimeter(self) -> float:
        h = self.height_m
        return 2 * (h + self.area / h)


@dataclass
class Fenestration(Surface):
    """
    Window, door or other building element whose construction may contain
    glazing layers and gas cavities. The solar irradiance on a fenestration
    is absorbed by its panes according to the optics of the glazing stack.
    """
    roughness: Roughness = Roughness.VERY_SMOOTH


class Building:
    """
    Container of all the definitions of a building. Lookups of unknown names
    raise `ModelDefinitionError`.
    """
    def __init__(self, name: str = 'building'):
        self.name = name
        self.substances: dict[str, Substance | GasSubstance] = {}
        self.materials: dict[str, Material] = {}
        self.constructions: dict[str, Construction] = {}
        self.spaces: list[Space] = []
        self.surfaces: list[Surface] = []
        self.fenestrations: list[Fenestration] = []

    def add_substance(self, substance: Substance | GasSubstance) -> Substance | GasSubstance:
        self.substances[substance.name] = substance
        return substance

    def add_material(self, material: Material) -> Material:
        self.materials[material.name] = material
        return material

    def add_construction(self, construction: Construction) -> Construction:
        self.constructions[construction.name] = construction
        return construction

    def add_space(self, space: Space) -> Space:
        self.spaces.append(space)
        return space

    def add_surface(self, surface: Surface) -> Surface:
        self.surfaces.append(surface)
        return surface

    def add_fenestration(self, fenestration: Fenestration) -> Fenestration:
        self.fenestrations.append(fenestration)
        return fenestration

    def get_substance(self, name: str) -> Substance | GasSubstance:
        try:
            return self.substances[name]
        except KeyError:
            raise ModelDefinitionError(f"substance '{name}' not found") from None

    def get_material(self, name: str) -> Material:
        try:
            return self.materials[name]
        except KeyError:
            raise ModelDefinitionError(f"material '{name}' not found") from None

    def get_construction(self, name: str) -> Construction:
        try:
            return self.constructions[name]
        except KeyError:
            raise ModelDefinitionError(f"construction '{name}' not found") from None

    def get_space_index(self, name: str) -> int:
        for i, space in enumerate(self.spaces):
            if space.name == name:
                return i
        raise ModelDefinitionError(f"space '{name}' not found")

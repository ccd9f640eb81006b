"""
Surface convection coefficients of the TARP model, as described in the
EnergyPlus Engineering Reference.

- `natural_convection_coefficient` is used for the sides of a surface that
face a zone.
- `exterior_convection_coefficient` adds a wind driven (forced) component and
is used for the sides of a surface that face the outdoors.
"""
from enum import Enum
import math


# lower limit of the convection coefficient, W / (m ** 2.K)
MIN_H = 0.15


class Roughness(Enum):
    """Roughness classes of the TARP model with their multiplier `R_f` of the
    forced convection component."""
    VERY_ROUGH = 2.17       # stucco
    ROUGH = 1.67            # brick
    MEDIUM_ROUGH = 1.52     # concrete
    MEDIUM_SMOOTH = 1.13    # clear pine
    SMOOTH = 1.11           # smooth plaster
    VERY_SMOOTH = 1.0       # glass


def natural_convection_coefficient(
    T_air: float,
    T_surf: float,
    cos_tilt: float
) -> float:
    """Calculates the natural convection coefficient (W / (m ** 2.K)) between
    a surface and the surrounding air.

    Parameters
    ----------
    T_air: float
        Air temperature (degC or K).
    T_surf: float
        Surface temperature (same unit as `T_air`).
    cos_tilt: float
        Cosine of the tilt of the surface normal: 0 for a vertical surface,
        positive when the surface faces upwards, negative when it faces
        downwards.

    Returns
    -------
    h: float
        Natural convection coefficient, not smaller than `MIN_H`.

    Notes
    -----
    The TARP model distinguishes three cases:
    - a vertical surface, or no temperature difference;
    - buoyancy driven flow along the surface (cold surface facing downwards,
    or warm surface facing upwards), with enhanced heat transfer;
    - stratified flow (warm surface facing downwards, or cold surface facing
    upwards), with reduced heat transfer.
    """
    delta_T = T_air - T_surf
    abs_delta_T = abs(delta_T)
    if abs_delta_T < 1.e-3 or abs(cos_tilt) < 1.e-3:
        h = 1.31 * abs_delta_T ** (1 / 3)
    elif delta_T * cos_tilt > 0.0:
        h = 9.482 * abs_delta_T ** (1 / 3) / (7.238 - abs(cos_tilt))
    else:
        h = 1.81 * abs_delta_T ** (1 / 3) / (1.382 + abs(cos_tilt))
    return max(h, MIN_H)


def exterior_convection_coefficient(
    T_air: float,
    T_surf: float,
    cos_tilt: float,
    wind_speed: float,
    area: float,
    perimeter: float,
    roughness: Roughness = Roughness.MEDIUM_ROUGH
) -> float:
    """Calculates the convection coefficient (W / (m ** 2.K)) of a surface
    exposed to the outdoor air: the sum of the forced component
    h_f = 2.537 * R_f * (P * V / A) ** 0.5 and the natural component. Every surface is
    taken to face the wind.

    Parameters
    ----------
    T_air, T_surf, cos_tilt:
        See `natural_convection_coefficient`.
    wind_speed: float
        Local wind speed (m / s).
    area: float
        Area of the surface (m ** 2).
    perimeter: float
        Perimeter of the surface (m).
    roughness: Roughness, default MEDIUM_ROUGH
        Roughness of the surface.
    """
    h_f = 2.537 * roughness.value * math.sqrt(perimeter * max(wind_speed, 0.0) / area)
    h_n = natural_convection_coefficient(T_air, T_surf, cos_tilt)
    return h_f + h_n

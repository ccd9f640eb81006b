"""Longwave radiation exchange of building surfaces (SI floats)."""
import math
from building_thermal.constants import SIGMA, T_ZERO


def radiation_coefficient(emissivity: float, T_m: float) -> float:
    """Linearised radiative heat transfer coefficient (W / (m ** 2.K)) of a
    grey surface with `emissivity` exchanging radiation with black
    surroundings around the mean temperature `T_m` (degC)."""
    return 4 * emissivity * SIGMA * (T_m + T_ZERO) ** 3


def radiant_temperature(irradiance: float) -> float:
    """Temperature (degC) of the black body that emits the infrared
    `irradiance` (W / m ** 2)."""
    return (max(irradiance, 0.0) / SIGMA) ** 0.25 - T_ZERO


def sky_irradiance(T_db: float, sky_emissivity: float) -> float:
    """Infrared irradiance (W / m ** 2) emitted by the sky on a horizontal
    plane, given the outdoor dry-bulb temperature `T_db` (degC)."""
    return sky_emissivity * SIGMA * (T_db + T_ZERO) ** 4


def exterior_radiant_temperature(
    T_db: float,
    tilt: float,
    horizontal_ir: float | None = None,
    sky_emissivity: float | None = None
) -> float:
    """Mean radiant temperature (degC) of the outdoor environment seen by a
    surface with `tilt` (deg, 0 = facing upwards, 90 = vertical).

    The surface sees the sky with view factor (1 + cos(tilt)) / 2 and the
    ground, assumed at the dry-bulb temperature, with the complement. The sky
    irradiance is `horizontal_ir` if given, else it follows from
    `sky_emissivity`; without both, the sky is at the dry-bulb temperature.
    """
    T_db_abs = T_db + T_ZERO
    if horizontal_ir is not None:
        E_sky = horizontal_ir
    elif sky_emissivity is not None:
        E_sky = sky_irradiance(T_db, sky_emissivity)
    else:
        E_sky = SIGMA * T_db_abs ** 4
    F_sky = (1 + math.cos(math.radians(tilt))) / 2
    E = F_sky * E_sky + (1 - F_sky) * SIGMA * T_db_abs ** 4
    return radiant_temperature(E)

"""Dimensionless numbers of free convection problems (SI floats)."""
from building_thermal.constants import G


def rayleigh_number(
    rho: float,
    mu: float,
    k: float,
    cp: float,
    L_char: float,
    beta: float,
    delta_T: float,
    g: float = G
) -> float:
    """Calculates the Rayleigh number of a layer of fluid.

    Parameters
    ----------
    rho: float
        Mass density of the fluid (kg / m ** 3).
    mu: float
        Dynamic viscosity of the fluid (Pa.s).
    k: float
        Thermal conductivity of the fluid (W / (m.K)).
    cp: float
        Specific heat of the fluid (J / (kg.K)).
    L_char: float
        Characteristic length (m).
    beta: float
        Volumetric thermal expansion coefficient (1 / K). For an ideal gas, it
        is the inverse of its absolute temperature.
    delta_T: float
        Temperature difference that drives the flow (K).
    g: float, default 9.81 m / s ** 2
        Gravitational acceleration.

    Returns
    -------
    Ra: float
        Rayleigh number.
    """
    Ra = rho ** 2 * L_char ** 3 * g * beta * cp * abs(delta_T) / (mu * k)
    return Ra


def prandtl_number(mu: float, k: float, cp: float) -> float:
    """Calculates the Prandtl number of a fluid."""
    Pr = mu * cp / k
    return Pr

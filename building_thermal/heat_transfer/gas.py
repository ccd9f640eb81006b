"""
Thermophysical properties of the fill gases of glazing cavities.

The properties are linear polynomials of the absolute temperature, with the
coefficients of ISO 15099:2003, Annex B (Table B.1). The density follows from
the ideal-gas law at standard atmospheric pressure.
"""
from dataclasses import dataclass
from numpy.polynomial import Polynomial
from building_thermal.constants import R_UNIVERSAL, P_STD
from building_thermal.heat_transfer.general import prandtl_number


@dataclass(frozen=True)
class Gas:
    """
    Fill gas of a cavity.

    Attributes
    ----------
    name: str
        Name of the gas.
    k: Polynomial
        Thermal conductivity (W / (m.K)) as function of T (K).
    mu: Polynomial
        Dynamic viscosity (Pa.s) as function of T (K).
    cp: Polynomial
        Specific heat at constant pressure (J / (kg.K)) as function of T (K).
    molar_mass: float
        Molar mass (kg / kmol).
    """
    name: str
    k: Polynomial
    mu: Polynomial
    cp: Polynomial
    molar_mass: float

    def thermal_conductivity(self, T: float) -> float:
        return float(self.k(T))

    def dynamic_viscosity(self, T: float) -> float:
        return float(self.mu(T))

    def heat_capacity(self, T: float) -> float:
        return float(self.cp(T))

    def density(self, T: float) -> float:
        """Density (kg / m ** 3) at absolute temperature `T` (K) and
        standard atmospheric pressure."""
        return P_STD * self.molar_mass / (R_UNIVERSAL * T)

    def prandtl_number(self, T: float) -> float:
        return prandtl_number(
            self.dynamic_viscosity(T),
            self.thermal_conductivity(T),
            self.heat_capacity(T)
        )


AIR = Gas(
    name='air',
    k=Polynomial([2.873e-3, 7.760e-5]),
    mu=Polynomial([3.723e-6, 4.94e-8]),
    cp=Polynomial([1002.7370, 1.2324e-2]),
    molar_mass=28.97
)

ARGON = Gas(
    name='argon',
    k=Polynomial([2.285e-3, 5.149e-5]),
    mu=Polynomial([3.379e-6, 6.451e-8]),
    cp=Polynomial([521.9285]),
    molar_mass=39.948
)

KRYPTON = Gas(
    name='krypton',
    k=Polynomial([9.443e-4, 2.826e-5]),
    mu=Polynomial([2.213e-6, 7.777e-8]),
    cp=Polynomial([248.0907]),
    molar_mass=83.8
)

XENON = Gas(
    name='xenon',
    k=Polynomial([4.538e-4, 1.723e-5]),
    mu=Polynomial([1.069e-6, 7.414e-8]),
    cp=Polynomial([158.3397]),
    molar_mass=131.30
)

GASES: dict[str, Gas] = {gas.name: gas for gas in (AIR, ARGON, KRYPTON, XENON)}


def get_gas(name: str) -> Gas:
    """Returns the standard gas called `name` (case insensitive).

    Raises
    ------
    KeyError
        If `name` is not one of 'air', 'argon', 'krypton' or 'xenon'.
    """
    try:
        return GASES[name.strip().lower()]
    except KeyError:
        raise KeyError(f"unknown gas '{name}'") from None

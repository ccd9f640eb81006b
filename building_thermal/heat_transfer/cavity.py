"""
Correlations for the heat transfer across a gas filled cavity between two
parallel panes (e.g. the gap of a multi-pane window or an air space in a
wall), with the spacing L between the panes being much less than the height H
of the cavity.

The convective part follows the Nusselt number correlations of ISO 15099:2003,
§5.3.3.2; the radiative part is the exchange between two grey parallel plates
linearised around the mean temperature of the cavity.

The correlations were taken from:
ISO 15099:2003. Thermal performance of windows, doors and shading devices.
Detailed calculations.
"""
from __future__ import annotations
import math
import warnings
from building_thermal import Quantity
from building_thermal.constants import SIGMA, T_ZERO
from building_thermal.exceptions import CorrelationWarning, DiscretizationError
from building_thermal.heat_transfer.gas import Gas
from building_thermal.heat_transfer.general import rayleigh_number


# half width of the band (rad) in which a tilt angle counts as exactly 60° or
# exactly 90°
_ANGLE_TOLERANCE = math.radians(0.5)

_DEG_60 = math.pi / 3
_DEG_90 = math.pi / 2

# Rayleigh number of a cavity without temperature difference
_RA_MIN = 1.e-7


def _nusselt_number_hollands(Ra: float, gamma: float, a_gi: float) -> float:
    """Average Nusselt number of a cavity acc. to the correlation of Hollands
    et al. (1976) when 0 <= tilt angle < 60° (ISO 15099, eq. 43-44).

    Parameters
    ----------
    Ra: float
        Rayleigh number based on the thickness of the cavity.
    gamma: float
        Tilt angle in radians.
    a_gi: float
        Aspect ratio of the cavity: height divided by thickness.

    Returns
    -------
    Nu: float
        Average Nusselt number.

    Notes
    -----
    The correlation is valid if:
    - 0 < Ra < 1.e5
    - a_gi > 20
    """
    if Ra > 1.e5:
        warnings.warn(f"Rayleigh number {Ra} out of range ]0, 1.e5[", CorrelationWarning)
    if a_gi <= 20:
        warnings.warn(f"Aspect ratio {a_gi} is not larger than 20", CorrelationWarning)
    Ra_cos = Ra * math.cos(gamma)
    a = max(0.0, 1 - 1708 / Ra_cos)
    b = 1 - 1708 * math.sin(1.8 * gamma) ** 1.6 / Ra_cos
    c = max(0.0, (Ra_cos / 5830) ** (1 / 3) - 1)
    Nu = 1 + 1.44 * a * b + c
    return Nu


def _nusselt_number_60(Ra: float, a_gi: float) -> float:
    """Average Nusselt number of a cavity with tilt angle 60° (ISO 15099,
    eq. 45-48).

    Parameters
    ----------
    Ra: float
        Rayleigh number based on the thickness of the cavity.
    a_gi: float
        Aspect ratio of the cavity: height divided by thickness.

    Returns
    -------
    Nu: float
        Average Nusselt number.

    Notes
    -----
    The correlation is valid if:
    - 0 < Ra < 1.e7
    - a_gi > 20
    """
    if Ra > 1.e7:
        warnings.warn(f"Rayleigh number {Ra} out of range ]0, 1.e7[", CorrelationWarning)
    G = 0.5 / (1 + (Ra / 3160) ** 20.6) ** 0.1
    Nu1 = (1 + (0.0936 * Ra ** 0.314 / (1 + G)) ** 7) ** (1 / 7)
    Nu2 = (0.104 + 0.175 / a_gi) * Ra ** 0.283
    return max(Nu1, Nu2)


def _nusselt_number_90(Ra: float, a_gi: float) -> float:
    """Average Nusselt number of a vertical cavity (ISO 15099, eq. 49-53)."""
    if Ra <= 1.e4:
        Nu1 = 1 + 1.7596678e-10 * Ra ** 2.2984755
    elif Ra < 5.e4:
        Nu1 = 0.028154 * Ra ** 0.4134
    else:
        Nu1 = 0.0673838 * Ra ** (1 / 3)
    Nu2 = 0.242 * (Ra / a_gi) ** 0.272
    return max(Nu1, Nu2)


def _nusselt_number_60_90(Ra: float, gamma: float, a_gi: float) -> float:
    """Average Nusselt number when 60° < tilt angle < 90°: linear
    interpolation between the 60° and the 90° correlation."""
    Nu_60 = _nusselt_number_60(Ra, a_gi)
    Nu_90 = _nusselt_number_90(Ra, a_gi)
    Nu = Nu_60 + (Nu_90 - Nu_60) * (gamma - _DEG_60) / (_DEG_90 - _DEG_60)
    return Nu


def _nusselt_number_arnold(Ra: float, gamma: float, a_gi: float) -> float:
    """Average Nusselt number acc. to the correlation of Arnold et al. (1975)
    when 90° < tilt angle <= 180° (ISO 15099, eq. 54)."""
    Nu_90 = _nusselt_number_90(Ra, a_gi)
    Nu = 1 + (Nu_90 - 1) * math.sin(gamma)
    return Nu


def average_nusselt_number(Ra: float, gamma: float, a_gi: float) -> float:
    """Average Nusselt number of a cavity when 0 <= tilt angle <= pi rad.

    Parameters
    ----------
    Ra: float
        Rayleigh number based on the thickness of the cavity.
    gamma: float
        Tilt angle in radians.
    a_gi: float
        Aspect ratio of the cavity: height divided by thickness.

    Returns
    -------
    Nu: float
        Average Nusselt number.

    Notes
    -----
    - If tilt angle `gamma` = 0 rad, the cavity is horizontal and heated from
    below.
    - If tilt angle `gamma` = pi/2 rad, the cavity is vertical.
    - If tilt angle `gamma` = pi rad, the cavity is horizontal and heated from
    above.
    - Tilt angles within 0.5° of 60° and 90° use the 60° and 90° correlation.
    Nu is continuous inside these bands, not at their edges: at 59.5° the
    Hollands correlation hands over to the 60° correlation with a step of a
    few percent, and just outside the 60° and 90° bands the interpolation
    and the Arnold correlation differ from the band value by a fraction of
    Nu_90 - Nu_60 and of Nu_90 - 1. These steps belong to the ISO 15099
    correlations themselves.
    """
    gamma = min(max(gamma, 0.0), math.pi)
    if gamma < _DEG_60 - _ANGLE_TOLERANCE:
        return _nusselt_number_hollands(Ra, gamma, a_gi)
    if gamma < _DEG_60 + _ANGLE_TOLERANCE:
        return _nusselt_number_60(Ra, a_gi)
    if gamma < _DEG_90 - _ANGLE_TOLERANCE:
        return _nusselt_number_60_90(Ra, gamma, a_gi)
    if gamma < _DEG_90 + _ANGLE_TOLERANCE:
        return _nusselt_number_90(Ra, a_gi)
    return _nusselt_number_arnold(Ra, gamma, a_gi)


def radiation_coefficient(T_m: float, eps_1: float, eps_2: float) -> float:
    """Linearised radiative heat transfer coefficient (W / (m ** 2.K)) between
    two grey parallel plates with emissivities `eps_1` and `eps_2` at mean
    absolute temperature `T_m` (K)."""
    if eps_1 <= 0.0 or eps_2 <= 0.0:
        return 0.0
    return 4 * SIGMA * T_m ** 3 / (1 / eps_1 + 1 / eps_2 - 1)


class Cavity:
    """
    Gas filled cavity bounded by two parallel panes.

    All methods take the temperatures of the front and back pane in degC and
    return SI floats, so that they can be evaluated at every stage of a time
    integration step.
    """
    def __init__(
        self,
        gas: Gas,
        thickness: float,
        height: float,
        tilt: float,
        eps_front: float = 0.84,
        eps_back: float = 0.84
    ) -> None:
        """Creates a `Cavity` instance.

        Parameters
        ----------
        gas: Gas
            Fill gas of the cavity.
        thickness: float
            Distance between the panes (m).
        height: float
            Height of the cavity (m).
        tilt: float
            Tilt angle in degrees: 0° is horizontal, 90° is vertical.
        eps_front: float, default 0.84
            Emissivity of the pane surface on the front side of the cavity.
        eps_back: float, default 0.84
            Emissivity of the pane surface on the back side of the cavity.
        """
        if thickness <= 0.0:
            raise DiscretizationError(f"cavity thickness {thickness} m is not positive")
        if height <= 0.0:
            raise DiscretizationError(f"cavity height {height} m is not positive")
        self.gas = gas
        self.thickness = thickness
        self.height = height
        self.tilt = tilt
        self.eps_front = eps_front
        self.eps_back = eps_back

    @classmethod
    def create(
        cls,
        gas: Gas,
        thickness: Quantity,
        height: Quantity,
        tilt: Quantity,
        eps_front: float = 0.84,
        eps_back: float = 0.84
    ) -> Cavity:
        """Creates a `Cavity` from quantities."""
        return cls(
            gas,
            thickness.to('m').m,
            height.to('m').m,
            tilt.to('deg').m,
            eps_front,
            eps_back
        )

    @property
    def aspect_ratio(self) -> float:
        return self.height / self.thickness

    def effective_tilt(self, t_front: float, t_back: float) -> float:
        """Returns the tilt angle (rad) seen by the correlations. When the
        front pane is the warmer one, the cavity is heated from the other side
        and the supplementary angle applies."""
        gamma = math.radians(self.tilt)
        if t_front > t_back:
            gamma = math.pi - gamma
        return gamma

    def rayleigh_number(self, t_front: float, t_back: float) -> float:
        delta_T = t_front - t_back
        if abs(delta_T) < 1.e-10:
            return _RA_MIN
        T_m = (t_front + t_back) / 2 + T_ZERO
        Ra = rayleigh_number(
            rho=self.gas.density(T_m),
            mu=self.gas.dynamic_viscosity(T_m),
            k=self.gas.thermal_conductivity(T_m),
            cp=self.gas.heat_capacity(T_m),
            L_char=self.thickness,
            beta=1 / T_m,
            delta_T=delta_T
        )
        return Ra

    def nusselt_number(self, t_front: float, t_back: float) -> float:
        Ra = self.rayleigh_number(t_front, t_back)
        gamma = self.effective_tilt(t_front, t_back)
        return average_nusselt_number(Ra, gamma, self.aspect_ratio)

    def convection_coefficient(self, t_front: float, t_back: float) -> float:
        """Convective heat transfer coefficient (W / (m ** 2.K))."""
        T_m = (t_front + t_back) / 2 + T_ZERO
        Nu = self.nusselt_number(t_front, t_back)
        return Nu * self.gas.thermal_conductivity(T_m) / self.thickness

    def radiation_coefficient(self, t_front: float, t_back: float) -> float:
        """Radiative heat transfer coefficient (W / (m ** 2.K))."""
        T_m = (t_front + t_back) / 2 + T_ZERO
        return radiation_coefficient(T_m, self.eps_front, self.eps_back)

    def u_value(self, t_front: float, t_back: float) -> float:
        """Thermal transmittance (W / (m ** 2.K)) of the cavity."""
        h_c = self.convection_coefficient(t_front, t_back)
        h_r = self.radiation_coefficient(t_front, t_back)
        return h_c + h_r

    def resistance(self, t_front: float, t_back: float) -> float:
        """Unit thermal resistance (m ** 2.K / W) of the cavity."""
        return 1 / self.u_value(t_front, t_back)

"""
THERMAL NETWORK OF A SURFACE
----------------------------
Turns the discretization of a construction into the system of equations

    C * dT/dt = K * T + q

where T holds the temperatures of the nodes, C their capacitances (0 for
no-mass nodes), K is the tridiagonal conductance matrix and q the vector of
heat inputs (heat exchanged with the environment on both sides and absorbed
solar radiation).

Because K is tridiagonal, it is stored as the conductances u of the segments
between adjacent nodes: K[i, i+1] = K[i+1, i] = u[i] and
K[i, i] = -(u[i-1] + u[i] + g[i]), with g the film coefficients of the two
surface nodes.

The temperatures of no-mass nodes follow from the algebraic equations
K_NN * T_N = -(K_NM * T_M + q_N). The restriction of a tridiagonal matrix to a
sorted subset of its nodes is tridiagonal again, so this system is solved as a
banded system.
"""
from __future__ import annotations
import math
from dataclasses import dataclass
import numpy as np
from scipy.linalg import solve_banded, LinAlgError
from building_thermal.construction.discretization import (
    Discretization,
    Solid,
    CavitySegment,
    Undefined
)
from building_thermal.exceptions import DiscretizationError
from building_thermal.heat_transfer.cavity import Cavity


@dataclass
class Film:
    """
    Heat exchange between a surface node and the environment on one side of
    the construction.

    Attributes
    ----------
    T_air: float
        Air temperature (degC).
    h_c: float
        Convection coefficient (W / (m ** 2.K)). If infinite, the surface
        node is held at `T_air`.
    T_rad: float
        Mean radiant temperature of the environment (degC).
    h_r: float
        Linearised radiation coefficient (W / (m ** 2.K)).
    """
    T_air: float
    h_c: float
    T_rad: float = 0.0
    h_r: float = 0.0

    @property
    def is_pinned(self) -> bool:
        return math.isinf(self.h_c)

    @property
    def conductance(self) -> float:
        return self.h_c + self.h_r

    @property
    def heat_input(self) -> float:
        """Term added to q on the surface node."""
        return self.h_c * self.T_air + self.h_r * self.T_rad


class ThermalNetwork:
    """
    Thermal network of one surface.

    The discretization is shared between surfaces, but the cavities are not:
    their tilt and height belong to the surface.
    """
    def __init__(self, discretization: Discretization, tilt: float = 90.0, height: float = 1.0):
        self.discretization = discretization
        self.n_nodes = discretization.n_nodes
        self.C = discretization.node_capacitances
        self._u_solid = np.zeros(len(discretization.segments))
        self.cavities: dict[int, Cavity] = {}
        for i, segment in enumerate(discretization.segments):
            match segment:
                case Solid(resistance=R):
                    if not R > 0.0:
                        raise DiscretizationError(
                            f"segment {i} of '{discretization.construction}' "
                            f"has a non-positive resistance {R}"
                        )
                    self._u_solid[i] = 1 / R
                case CavitySegment(thickness=t, gas=gas, eps_front=e_f, eps_back=e_b):
                    self.cavities[i] = Cavity(gas, t, height, tilt, e_f, e_b)
                case Undefined():
                    raise DiscretizationError(
                        f"segment {i} of '{discretization.construction}' is undefined"
                    )
        self.massive = np.flatnonzero(self.C > 0.0)

    def conductances(self, T: np.ndarray) -> np.ndarray:
        """Returns the conductance (W / (m ** 2.K)) of each segment at node
        temperatures `T`."""
        u = self._u_solid.copy()
        for i, cavity in self.cavities.items():
            u[i] = cavity.u_value(T[i], T[i + 1])
            if not (u[i] > 0.0 and math.isfinite(u[i])):
                raise DiscretizationError(
                    f"cavity {i} of '{self.discretization.construction}' has "
                    f"conductance {u[i]} at {T[i]} / {T[i + 1]} degC"
                )
        return u

    def free_nodes(self, front: Film, back: Film) -> tuple[np.ndarray, np.ndarray]:
        """Returns the indexes of the massive nodes and of the no-mass nodes
        whose temperature is not imposed by a pinned film."""
        pinned = set()
        if front.is_pinned:
            pinned.add(0)
        if back.is_pinned:
            pinned.add(self.n_nodes - 1)
        massive = np.array([i for i in self.massive if i not in pinned], dtype=int)
        no_mass = np.array(
            [i for i in range(self.n_nodes) if self.C[i] == 0.0 and i not in pinned],
            dtype=int
        )
        return massive, no_mass

    def heat_input(self, front: Film, back: Film, q_solar: np.ndarray) -> np.ndarray:
        q = q_solar.copy()
        if not front.is_pinned:
            q[0] += front.heat_input
        if not back.is_pinned:
            q[-1] += back.heat_input
        return q

    def diagonal(self, u: np.ndarray, front: Film, back: Film) -> np.ndarray:
        d = np.zeros(self.n_nodes)
        d[:-1] -= u
        d[1:] -= u
        if not front.is_pinned:
            d[0] -= front.conductance
        if not back.is_pinned:
            d[-1] -= back.conductance
        return d

    @staticmethod
    def net_flows(T: np.ndarray, u: np.ndarray, d: np.ndarray, q: np.ndarray) -> np.ndarray:
        """Returns K * T + q (W / m ** 2) for each node."""
        flows = d * T + q
        flows[:-1] += u * T[1:]
        flows[1:] += u * T[:-1]
        return flows

    def solve_no_mass(
        self,
        T: np.ndarray,
        u: np.ndarray,
        d: np.ndarray,
        q: np.ndarray,
        nodes: np.ndarray
    ) -> None:
        """Solves the temperatures of the no-mass `nodes` in place, given the
        temperatures of all other nodes in `T`."""
        m = len(nodes)
        if m == 0:
            return
        ab = np.zeros((3, m))
        ab[1, :] = d[nodes]
        rhs = -q[nodes]
        in_set = np.zeros(self.n_nodes, dtype=bool)
        in_set[nodes] = True
        for k, i in enumerate(nodes):
            if i > 0:
                if in_set[i - 1]:
                    # lower diagonal of row k
                    ab[2, k - 1] = u[i - 1]
                else:
                    rhs[k] -= u[i - 1] * T[i - 1]
            if i < self.n_nodes - 1:
                if in_set[i + 1]:
                    ab[0, k + 1] = u[i]
                else:
                    rhs[k] -= u[i] * T[i + 1]
        try:
            T[nodes] = solve_banded((1, 1), ab, rhs)
        except (LinAlgError, ValueError) as err:
            raise DiscretizationError(
                f"no-mass nodes of '{self.discretization.construction}' "
                f"cannot be solved: {err}"
            ) from err

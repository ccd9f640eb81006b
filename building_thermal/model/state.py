"""
Flat buffer with the state of a simulation.

The buffer is owned by the caller. While a `ThermalModel` is built, it
registers every value it needs in a `SimulationStateHeader`, which returns the
stable integer offset of the value in the buffer; the model keeps only these
offsets. Other parts of a simulation (weather, HVAC, lighting, ...) write
their inputs to the same buffer through their own offsets.
"""
from __future__ import annotations
import numpy as np
import pandas as pd


class SimulationStateHeader:
    """Registry of the elements of a simulation state."""

    def __init__(self):
        self.elements: list[str] = []
        self._initial_values: list[float] = []

    def push(self, name: str, initial_value: float) -> int:
        """Registers element `name` and returns its offset in the buffer."""
        if name in self.elements:
            raise ValueError(f"state element '{name}' is already registered")
        self.elements.append(name)
        self._initial_values.append(float(initial_value))
        return len(self.elements) - 1

    def __len__(self):
        return len(self.elements)

    def take_values(self) -> SimulationState:
        """Returns a new `SimulationState` filled with the initial values."""
        return SimulationState(self.elements, self._initial_values)


class SimulationState:
    """Values of the simulation state, indexed by the offsets handed out by a
    `SimulationStateHeader`."""

    def __init__(self, elements: list[str], values: list[float]):
        self.elements = list(elements)
        self.values = np.array(values, dtype=float)

    def __len__(self):
        return len(self.values)

    def __getitem__(self, index):
        return self.values[index]

    def __setitem__(self, index, value):
        self.values[index] = value

    def to_series(self) -> pd.Series:
        """Returns a copy of the state as a `pandas.Series` indexed by the
        names of the elements."""
        return pd.Series(self.values.copy(), index=pd.Index(self.elements, name='element'))

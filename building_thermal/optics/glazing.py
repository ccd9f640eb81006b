"""
Solar optical properties of glazing systems at normal incidence, according to
ISO 9050:2003, §5.

A glazing system is an ordered stack of panes, front (usually outdoors) to
back. The properties of two adjacent layers combine into the properties of an
equivalent single layer, taking the inter-reflections between them into
account. Because of the inter-reflections, the combination is associative but
not commutative.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class Glazing:
    """
    Optical properties of a pane (or of an equivalent layer made of several
    panes) at normal incidence.

    Attributes
    ----------
    tau: float
        Solar transmittance.
    rho_front: float
        Solar reflectance for radiation incident on the front side.
    rho_back: float
        Solar reflectance for radiation incident on the back side.
    """
    tau: float
    rho_front: float
    rho_back: float

    def __post_init__(self):
        for name in ('tau', 'rho_front', 'rho_back'):
            value = getattr(self, name)
            if not (0.0 <= value <= 1.0):
                raise ValueError(f"{name} {value} out of range [0, 1]")
        if self.tau + max(self.rho_front, self.rho_back) > 1.0 + 1.e-12:
            raise ValueError(
                "transmittance and reflectance cannot add up to more than 1"
            )

    @property
    def alpha_front(self) -> float:
        """Solar absorptance for radiation incident on the front side."""
        return 1.0 - self.tau - self.rho_front

    @property
    def alpha_back(self) -> float:
        """Solar absorptance for radiation incident on the back side."""
        return 1.0 - self.tau - self.rho_back

    def reversed(self) -> Glazing:
        """Returns the same layer seen from the back."""
        return Glazing(self.tau, self.rho_back, self.rho_front)

    def combined_tau(self, other: Glazing) -> float:
        return self.tau * other.tau / (1.0 - self.rho_back * other.rho_front)

    def combined_rho_front(self, other: Glazing) -> float:
        return (
            self.rho_front
            + self.tau ** 2 * other.rho_front
            / (1.0 - self.rho_back * other.rho_front)
        )

    def combined_rho_back(self, other: Glazing) -> float:
        return (
            other.rho_back
            + other.tau ** 2 * self.rho_back
            / (1.0 - other.rho_front * self.rho_back)
        )

    def combine(self, other: Glazing) -> Glazing:
        """Returns the equivalent layer of this layer in front of `other`."""
        return Glazing(
            tau=self.combined_tau(other),
            rho_front=self.combined_rho_front(other),
            rho_back=self.combined_rho_back(other)
        )

    def combined_alphas(self, other: Glazing) -> tuple[float, float]:
        """Returns the fractions of the radiation incident on the front of
        this layer that are absorbed by this layer and by `other` when this
        layer is placed in front of `other`."""
        denom = 1.0 - self.rho_back * other.rho_front
        a1 = self.alpha_front + self.alpha_back * self.tau * other.rho_front / denom
        a2 = other.alpha_front * self.tau / denom
        return a1, a2

    @staticmethod
    def combine_layers(layers: Sequence[Glazing]) -> Glazing:
        """Returns the equivalent layer of the ordered stack `layers`."""
        if not layers:
            raise ValueError("cannot combine an empty stack of glazing layers")
        if len(layers) == 1:
            return layers[0]
        return layers[0].combine(Glazing.combine_layers(layers[1:]))

    @staticmethod
    def absorptances(layers: Sequence[Glazing]) -> list[float]:
        """Returns for each layer of the ordered stack `layers` the fraction
        of the radiation incident on the front of the stack that the layer
        absorbs. The fractions add up to the front absorptance of the whole
        stack."""
        if not layers:
            return []
        if len(layers) == 1:
            return [layers[0].alpha_front]
        alphas = []
        alpha_acc = 0.0
        for i in range(1, len(layers)):
            # absorbed by the first i layers together
            front = Glazing.combine_layers(layers[:i])
            back = Glazing.combine_layers(layers[i:])
            a_front, _ = front.combined_alphas(back)
            alphas.append(a_front - alpha_acc)
            alpha_acc = a_front
        front = Glazing.combine_layers(layers[:-1])
        _, a_last = front.combined_alphas(layers[-1])
        alphas.append(a_last)
        return alphas

    @staticmethod
    def back_absorptances(layers: Sequence[Glazing]) -> list[float]:
        """Same as `absorptances`, for radiation incident on the back of the
        stack. The fractions are returned in front-to-back order."""
        reversed_layers = [layer.reversed() for layer in reversed(layers)]
        return list(reversed(Glazing.absorptances(reversed_layers)))

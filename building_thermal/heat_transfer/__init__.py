from .gas import Gas, AIR, ARGON, KRYPTON, XENON, get_gas
from .cavity import Cavity, average_nusselt_number
from .convection import (
    Roughness,
    natural_convection_coefficient,
    exterior_convection_coefficient
)

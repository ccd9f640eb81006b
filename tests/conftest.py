import pytest
from building_thermal import Quantity
from building_thermal.definitions import (
    Building,
    Construction,
    GasSubstance,
    Material,
    Substance
)


Q_ = Quantity


@pytest.fixture
def building() -> Building:
    """Building with the substances and materials used by most tests."""
    b = Building('test building')
    b.add_substance(Substance(
        'concrete',
        k=Q_(0.816, 'W / (m * K)'),
        rho=Q_(1700.0, 'kg / m ** 3'),
        c=Q_(800.0, 'J / (kg * K)')
    ))
    b.add_substance(Substance('insulation', k=Q_(0.04, 'W / (m * K)')))
    b.add_substance(Substance(
        'glass',
        k=Q_(1.0, 'W / (m * K)'),
        rho=Q_(2500.0, 'kg / m ** 3'),
        c=Q_(840.0, 'J / (kg * K)'),
        front_emissivity=0.84,
        back_emissivity=0.84,
        solar_transmittance=0.77,
        front_solar_reflectance=0.07,
        back_solar_reflectance=0.07
    ))
    b.add_substance(Substance(
        'steel',
        k=Q_(50.0, 'W / (m * K)'),
        rho=Q_(7800.0, 'kg / m ** 3'),
        c=Q_(500.0, 'J / (kg * K)')
    ))
    b.add_substance(GasSubstance('air_gap', 'air'))
    b.add_material(Material('concrete_200', 'concrete', Q_(200.0, 'mm')))
    b.add_material(Material('concrete_100', 'concrete', Q_(100.0, 'mm')))
    b.add_material(Material('insulation_50', 'insulation', Q_(50.0, 'mm')))
    b.add_material(Material('glass_6', 'glass', Q_(6.0, 'mm')))
    b.add_material(Material('air_12', 'air_gap', Q_(12.0, 'mm')))
    b.add_material(Material('steel_2', 'steel', Q_(2.0, 'mm')))
    b.add_construction(Construction('concrete_wall', ['concrete_200']))
    b.add_construction(Construction('insulated_wall', ['concrete_100', 'insulation_50']))
    b.add_construction(Construction('insulation_only', ['insulation_50']))
    b.add_construction(Construction('double_glazing', ['glass_6', 'air_12', 'glass_6']))
    b.add_construction(Construction('steel_core_wall', ['concrete_100', 'steel_2', 'concrete_100']))
    b.add_construction(Construction('cavity_wall', ['concrete_100', 'air_12', 'concrete_100']))
    return b

import dataclasses
import math
import numpy as np
import pytest
from building_thermal import Quantity
from building_thermal.construction.discretization import (
    CavitySegment,
    Discretization,
    Solid
)
from building_thermal.definitions import Construction, GasSubstance, Material, Substance
from building_thermal.exceptions import DiscretizationError
from building_thermal.heat_transfer.gas import AIR
from building_thermal.settings import DiscretizationSettings


Q_ = Quantity


def discretize(building, name, main_dt=900.0, **settings):
    return Discretization.create(
        building.get_construction(name),
        building,
        main_dt,
        DiscretizationSettings(**settings)
    )


def test_massive_layer_is_split_in_equal_elements(building):
    d = discretize(building, 'concrete_wall')
    assert d.elements == (5,)
    assert d.n_nodes == 6
    assert all(isinstance(s, Solid) for s in d.segments)
    assert all(s.resistance == pytest.approx(0.04 / 0.816) for s in d.segments)


def test_element_thickness_does_not_exceed_max_dx(building):
    d = discretize(building, 'concrete_wall', max_dx=Q_(3.0, 'cm'))
    assert d.elements == (7,)


def test_node_capacitances_add_up_to_layer_capacitance(building):
    d = discretize(building, 'concrete_wall')
    C = d.node_capacitances
    assert C.sum() == pytest.approx(1700.0 * 800.0 * 0.2)
    # surface nodes get half an element, interior nodes a full one
    assert C[0] == pytest.approx(C[1] / 2)
    assert C[-1] == pytest.approx(C[1] / 2)


def test_r_value_equals_sum_of_layer_resistances(building):
    d = discretize(building, 'insulated_wall')
    expected = 0.1 / 0.816 + 0.05 / 0.04
    assert d.r_value == pytest.approx(expected, rel=1e-6)


def test_no_mass_construction_has_no_massive_nodes(building):
    d = discretize(building, 'insulation_only')
    assert d.n_massive_nodes == 0
    assert d.elements == (0,)
    assert d.segments == (Solid(0.05 / 0.04),)
    assert d.tstep_subdivision == 1


def test_no_mass_material_with_given_resistance(building):
    building.add_material(Material('membrane', 'insulation', Q_(1.0, 'mm'), R=Q_(0.3, 'm ** 2 * K / W')))
    building.add_construction(Construction('membrane_only', ['membrane']))
    d = discretize(building, 'membrane_only')
    assert d.r_value == pytest.approx(0.3)


def test_discretization_is_deterministic(building):
    d1 = discretize(building, 'insulated_wall')
    d2 = discretize(building, 'insulated_wall')
    assert d1.segments == d2.segments
    assert d1.elements == d2.elements
    assert np.array_equal(d1.node_capacitances, d2.node_capacitances)


def test_subdivision_respects_stability_limit_of_surface_nodes(building):
    d = discretize(building, 'concrete_wall', main_dt=900.0)
    dx = 0.04
    C_surface = 1700.0 * 800.0 * dx / 2
    # surface node: half an element, one element resistance and the film
    dt_surface = 0.5 * C_surface / (0.816 / dx + 20.0)
    dt_interior = 0.5 * 1700.0 * 800.0 * dx ** 2 / (2 * 0.816)
    assert d.stable_time_step(20.0, 20.0) == pytest.approx(dt_surface)
    assert dt_surface < dt_interior
    assert d.tstep_subdivision == 3
    assert 900.0 / d.tstep_subdivision <= dt_surface
    assert 900.0 / (d.tstep_subdivision - 1) > dt_surface


def test_pinned_surface_nodes_do_not_limit_the_micro_step(building):
    d = discretize(building, 'concrete_wall', main_dt=900.0)
    dt_interior = 0.5 * 1700.0 * 800.0 * 0.04 ** 2 / (2 * 0.816)
    inf = float('inf')
    assert d.stable_time_step(inf, inf) == pytest.approx(dt_interior)
    assert d.subdivisions(inf, inf) == 2


def test_stiff_link_through_demoted_layer_sets_the_micro_step(building):
    d = discretize(building, 'steel_core_wall', main_dt=900.0)
    # the steel sheet has no mass of its own but still couples the concrete
    # nodes on either side of it
    assert d.elements == (3, 0, 3)
    assert isinstance(d.segments[3], Solid) and d.segments[3].capacitance == 0.0
    dx = 0.1 / 3
    C_node = 1700.0 * 800.0 * dx / 2
    dt_link = 0.5 * C_node / (0.816 / dx + 1 / (0.002 / 50.0))
    assert d.stable_time_step(20.0, 20.0) == pytest.approx(dt_link)
    assert d.tstep_subdivision == math.ceil(900.0 / dt_link)


def test_fixed_film_coefficient_refines_the_micro_step(building):
    d = discretize(building, 'concrete_wall', main_dt=900.0)
    assert d.subdivisions(1000.0, 20.0) > d.tstep_subdivision
    assert d.subdivisions(20.0, 20.0) == d.tstep_subdivision


def test_cavity_between_massive_layers_limits_the_micro_step(building):
    d = discretize(building, 'cavity_wall', main_dt=900.0)
    assert d.has_cavity
    assert d.n_massive_nodes == 8
    inf = float('inf')
    dx = 0.1 / 3
    C_node = 1700.0 * 800.0 * dx / 2
    dt = d.stable_time_step(inf, inf)
    dt_interior = 0.5 * 1700.0 * 800.0 * dx ** 2 / (2 * 0.816)
    assert dt < dt_interior
    # the nodes on either side of the cavity govern; their link through the
    # cavity conducts more than still air but less than a film
    u_cavity = 0.5 * C_node / dt - 0.816 / dx
    assert AIR.thermal_conductivity(293.15) / 0.012 < u_cavity < 20.0


def test_discretization_cannot_be_modified(building):
    d = discretize(building, 'insulated_wall')
    with pytest.raises(dataclasses.FrozenInstanceError):
        d.segments = ()
    C = d.node_capacitances
    C[:] = 0.0
    assert d.n_massive_nodes > 0
    with pytest.raises(ValueError):
        d._node_capacitances[0] = 1.0


def test_thin_massive_layer_is_modelled_without_mass(building):
    building.add_construction(Construction('single_glazing', ['glass_6']))
    d = discretize(building, 'single_glazing')
    assert d.n_massive_nodes == 0
    assert d.r_value == pytest.approx(0.006 / 1.0)


def test_cavity_takes_emissivities_of_adjacent_layers(building):
    d = discretize(building, 'double_glazing')
    assert d.has_cavity
    cavity = d.segments[1]
    assert isinstance(cavity, CavitySegment)
    assert cavity.thickness == pytest.approx(0.012)
    assert cavity.eps_front == pytest.approx(0.84)
    assert cavity.eps_back == pytest.approx(0.84)
    assert [layer.glazing is not None for layer in d.layers] == [True, False, True]
    assert building.get_substance('glass').is_glazing
    assert not building.get_substance('concrete').is_glazing
    with pytest.raises(DiscretizationError):
        d.r_value


@pytest.mark.parametrize('materials', [
    ['air_12', 'glass_6'],
    ['glass_6', 'air_12'],
    ['glass_6', 'air_12', 'air_12', 'glass_6'],
    [],
])
def test_invalid_gas_layer_positions_are_rejected(building, materials):
    building.add_construction(Construction('bad', materials))
    with pytest.raises(DiscretizationError):
        discretize(building, 'bad')


def test_unknown_material_or_substance_is_rejected(building):
    building.add_construction(Construction('unknown_material', ['concrete_200', 'wood_18']))
    with pytest.raises(DiscretizationError):
        discretize(building, 'unknown_material')
    building.add_material(Material('wood_18', 'wood', Q_(18.0, 'mm')))
    with pytest.raises(DiscretizationError):
        discretize(building, 'unknown_material')


def test_unknown_gas_is_rejected(building):
    building.add_substance(GasSubstance('helium_gap', 'helium'))
    building.add_material(Material('helium_12', 'helium_gap', Q_(12.0, 'mm')))
    building.add_construction(Construction('helium_glazing', ['glass_6', 'helium_12', 'glass_6']))
    with pytest.raises(DiscretizationError):
        discretize(building, 'helium_glazing')


def test_non_positive_thickness_or_conductivity_is_rejected(building):
    building.add_material(Material('no_thickness', 'concrete', Q_(0.0, 'mm')))
    building.add_construction(Construction('flat', ['no_thickness']))
    with pytest.raises(DiscretizationError):
        discretize(building, 'flat')
    building.add_substance(Substance('perfect_insulator', k=Q_(0.0, 'W / (m * K)')))
    building.add_material(Material('perfect_insulation', 'perfect_insulator', Q_(10.0, 'cm')))
    building.add_construction(Construction('perfect', ['perfect_insulation']))
    with pytest.raises(DiscretizationError):
        discretize(building, 'perfect')

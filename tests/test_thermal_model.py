import pytest
from building_thermal import Quantity
from building_thermal.definitions import (
    Building,
    Construction,
    Fenestration,
    Material,
    Space,
    Substance,
    Surface
)
from building_thermal.exceptions import ModelDefinitionError
from building_thermal.model import (
    CurrentWeather,
    Side,
    SimulationStateHeader,
    ThermalModel
)
from building_thermal.settings import ThermalSettings


Q_ = Quantity

H = Q_(10.0, 'W / (m ** 2 * K)')


def simple_building(R_wall: float = 0.5) -> Building:
    """A box with a single no-mass wall and no longwave exchange."""
    b = Building('box')
    b.add_substance(Substance(
        'board', k=Q_(0.04, 'W / (m * K)'),
        front_emissivity=0.0, back_emissivity=0.0
    ))
    b.add_material(Material('board', 'board', Q_(0.04 * R_wall, 'm')))
    b.add_construction(Construction('wall', ['board']))
    b.add_space(Space('room', Q_(40.0, 'm ** 3')))
    b.add_surface(Surface(
        'wall', 'wall', A=Q_(20.0, 'm ** 2'),
        front_boundary='room', front_hc=H, back_hc=H
    ))
    return b


def run(model, state, hours, T_db):
    weather = CurrentWeather(T_db=Q_(T_db, 'degC'))
    n_steps = round(hours * 3600 / model.dt)
    for _ in range(n_steps):
        model.march(state, weather)


def test_heated_box_reaches_analytical_steady_state():
    header = SimulationStateHeader()
    model = ThermalModel(simple_building(), header, n_steps_per_hour=4)
    state = header.take_values()
    room = model.zone('room')
    state[room.heating_cooling_power_index] = 1000.0
    run(model, state, 72, T_db=0.0)
    UA = 20.0 / (0.1 + 0.5 + 0.1)
    assert room.temperature(state) == pytest.approx(1000.0 / UA, abs=0.01)
    # all heating power leaves through the wall
    q_in = model.surface('wall').convective_heat_flow(state, Side.FRONT)
    assert q_in * 20.0 == pytest.approx(1000.0, rel=1.e-3)


def test_unheated_box_follows_outdoor_temperature():
    header = SimulationStateHeader()
    model = ThermalModel(simple_building(), header)
    state = header.take_values()
    run(model, state, 48, T_db=5.0)
    assert model.zone('room').temperature(state) == pytest.approx(5.0, abs=0.01)


def test_infiltration_cools_the_zone():
    temperatures = []
    for infiltration in (0.0, 0.05):
        header = SimulationStateHeader()
        model = ThermalModel(simple_building(), header)
        state = header.take_values()
        room = model.zone('room')
        state[room.heating_cooling_power_index] = 1000.0
        state[room.infiltration_volume_index] = infiltration
        run(model, state, 24, T_db=0.0)
        temperatures.append(room.temperature(state))
    assert temperatures[1] < temperatures[0]


def massive_building(reverse: bool = False) -> Building:
    b = Building('massive box')
    b.add_substance(Substance(
        'concrete', k=Q_(1.4, 'W / (m * K)'),
        rho=Q_(2300.0, 'kg / m ** 3'), c=Q_(880.0, 'J / (kg * K)')
    ))
    b.add_substance(Substance('eps', k=Q_(0.035, 'W / (m * K)')))
    b.add_substance(Substance(
        'glass', k=Q_(1.0, 'W / (m * K)'),
        rho=Q_(2500.0, 'kg / m ** 3'), c=Q_(840.0, 'J / (kg * K)'),
        front_emissivity=0.84, back_emissivity=0.84,
        solar_transmittance=0.8, front_solar_reflectance=0.08, back_solar_reflectance=0.08
    ))
    b.add_material(Material('concrete_150', 'concrete', Q_(150.0, 'mm')))
    b.add_material(Material('eps_100', 'eps', Q_(100.0, 'mm')))
    b.add_material(Material('glass_4', 'glass', Q_(4.0, 'mm')))
    b.add_construction(Construction('ext_wall', ['eps_100', 'concrete_150']))
    b.add_construction(Construction('roof', ['eps_100', 'concrete_150']))
    b.add_construction(Construction('window', ['glass_4']))
    b.add_space(Space('room', Q_(75.0, 'm ** 3')))
    surfaces = [
        Surface('north', 'ext_wall', A=Q_(15.0, 'm ** 2'), back_boundary='room'),
        Surface('south', 'ext_wall', A=Q_(12.0, 'm ** 2'), back_boundary='room'),
        Surface('roof', 'roof', A=Q_(25.0, 'm ** 2'), tilt=Q_(0.0, 'deg'), back_boundary='room'),
    ]
    if reverse:
        surfaces.reverse()
    for s in surfaces:
        b.add_surface(s)
    b.add_fenestration(Fenestration('window', 'window', A=Q_(3.0, 'm ** 2'), back_boundary='room'))
    return b


def test_massive_box_cools_down_towards_outdoor_temperature():
    header = SimulationStateHeader()
    settings = ThermalSettings(initial_temperature=Q_(20.0, 'degC'))
    model = ThermalModel(massive_building(), header, n_steps_per_hour=4, settings=settings)
    state = header.take_values()
    room = model.zone('room')
    weather = CurrentWeather(T_db=Q_(10.0, 'degC'), wind_speed=Q_(3.0, 'm / s'))
    previous = room.temperature(state)
    for _ in range(48 * 4):
        model.march(state, weather)
        T = room.temperature(state)
        assert 10.0 - 0.01 <= T <= 20.0 + 0.01
    assert T < previous - 1.0


def test_surfaces_are_marched_against_the_same_zone_snapshot():
    results = []
    for reverse in (False, True):
        header = SimulationStateHeader()
        model = ThermalModel(massive_building(reverse), header)
        state = header.take_values()
        state[model.zone('room').heating_cooling_power_index] = 500.0
        weather = CurrentWeather(T_db=Q_(0.0, 'degC'), sky_emissivity=0.8)
        for _ in range(12):
            model.march(state, weather)
        results.append((
            model.zone('room').temperature(state),
            model.surface('roof').temperatures(state)
        ))
    assert results[0][0] == pytest.approx(results[1][0], rel=1e-9)
    assert results[0][1] == pytest.approx(results[1][1], rel=1e-9)


def test_most_restrictive_construction_sets_micro_steps():
    header = SimulationStateHeader()
    model = ThermalModel(massive_building(), header, n_steps_per_hour=1)
    assert model.dt_subdivisions == max(d.tstep_subdivision for d in model.discretizations)
    assert all(s.tstep_subdivision <= model.dt_subdivisions for s in model.surfaces)
    assert model.dt_subdivisions > 1
    assert model.micro_dt * model.dt_subdivisions == pytest.approx(3600.0)
    # constructions are discretized once and shared
    assert len(model.discretizations) == 3
    assert model.surface('north').discretization is model.surface('south').discretization


def test_unknown_construction_or_space_is_reported():
    b = simple_building()
    b.add_surface(Surface('ghost', 'no_such_construction', A=Q_(1.0, 'm ** 2')))
    with pytest.raises(ModelDefinitionError):
        ThermalModel(b, SimulationStateHeader())
    b = simple_building()
    b.add_surface(Surface('lost', 'wall', A=Q_(1.0, 'm ** 2'), back_boundary='attic'))
    with pytest.raises(ModelDefinitionError):
        ThermalModel(b, SimulationStateHeader())


def test_state_can_be_exported():
    header = SimulationStateHeader()
    ThermalModel(simple_building(), header)
    series = header.take_values().to_series()
    assert 'space:room:dry_bulb_temperature' in series.index
    assert 'surface:wall:back_convection_coefficient' in series.index
    assert len(series) == len(header)


def test_fixed_convection_coefficient_can_govern_micro_steps():
    b = massive_building()
    b.add_surface(Surface(
        'floor', 'ext_wall', A=Q_(25.0, 'm ** 2'), tilt=Q_(180.0, 'deg'),
        back_boundary='room', back_hc=Q_(500.0, 'W / (m ** 2 * K)')
    ))
    model = ThermalModel(b, SimulationStateHeader(), n_steps_per_hour=4)
    floor = model.surface('floor')
    assert floor.tstep_subdivision > floor.discretization.tstep_subdivision
    assert model.dt_subdivisions == floor.tstep_subdivision


def test_sun_through_the_window_warms_the_zone():
    temperatures = []
    for irradiance in (0.0, 500.0):
        header = SimulationStateHeader()
        model = ThermalModel(massive_building(), header)
        state = header.take_values()
        window = model.surface('window')
        state[window.solar_irradiance_index(Side.FRONT)] = irradiance
        run(model, state, 6, T_db=10.0)
        assert window.solar_irradiance(state, Side.FRONT) == irradiance
        temperatures.append(model.zone('room').temperature(state))
    assert temperatures[1] > temperatures[0]

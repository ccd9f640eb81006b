import math
import pytest
from building_thermal import Quantity
from building_thermal.exceptions import CorrelationWarning, DiscretizationError
from building_thermal.heat_transfer.cavity import Cavity, average_nusselt_number
from building_thermal.heat_transfer.gas import AIR


Q_ = Quantity


def nusselt(Ra, deg, a_gi):
    return average_nusselt_number(Ra, math.radians(deg), a_gi)


@pytest.mark.parametrize('deg, expected', [
    (30.0, 1.40474349200254),
    (60.0, 1.08005742342789),
    (73.0, 1.05703042079892),
    (90.0, 1.02691818659179),
    (134.0, 1.01936332296842),
])
def test_nusselt_number_low_rayleigh(deg, expected):
    assert nusselt(3638.21667064528, deg, 83.3333) == pytest.approx(expected, rel=1e-5)


@pytest.mark.parametrize('deg, expected', [
    (30.0, 1.0),
    (60.0, 1.00002777439094),
    (90.0, 1.00001526837795),
    (134.0, 1.00001098315195),
])
def test_nusselt_number_conduction_regime(deg, expected):
    assert nusselt(140.779077041012, deg, 200.0) == pytest.approx(expected, rel=1e-6)


@pytest.mark.parametrize('deg, expected', [
    (60.0, 11.5975502261096),
    (73.0, 11.4398529673101),
    (90.0, 11.2336334750340),
    (134.0, 8.361460),
])
def test_nusselt_number_high_rayleigh(deg, expected):
    assert nusselt(4633340.8866717, deg, 10.0) == pytest.approx(expected, rel=1e-5)


def test_hollands_correlation_warns_out_of_range():
    with pytest.warns(CorrelationWarning):
        Nu = nusselt(4633340.8866717, 30.0, 10.0)
    assert Nu == pytest.approx(10.2680981545288, rel=1e-5)


@pytest.mark.parametrize('Ra', [500.0, 3638.0, 2.e4, 1.e5])
@pytest.mark.parametrize('deg', [60.0, 90.0])
def test_nusselt_number_is_continuous_at_60_and_90_degrees(Ra, deg):
    eps = 1.e-4
    assert nusselt(Ra, deg - eps, 80.0) == pytest.approx(nusselt(Ra, deg + eps, 80.0), abs=1e-12)


@pytest.mark.parametrize('Ra', [500.0, 3638.0, 1.e4, 2.e4, 1.e5])
def test_nusselt_number_steps_at_band_edges_are_bounded(Ra):
    eps = 1.e-4
    a_gi = 80.0
    Nu_60 = nusselt(Ra, 60.0, a_gi)
    Nu_90 = nusselt(Ra, 90.0, a_gi)
    # Hollands hands over to the 60° correlation with a step of a few percent
    assert nusselt(Ra, 59.5 - eps, a_gi) == pytest.approx(Nu_60, rel=0.1)
    # the interpolation starts and ends half a degree away from its end points
    step = abs(Nu_90 - Nu_60) / 59
    assert abs(nusselt(Ra, 60.5 + eps, a_gi) - Nu_60) <= step + 1e-12
    assert abs(nusselt(Ra, 89.5 - eps, a_gi) - Nu_90) <= step + 1e-12
    assert abs(nusselt(Ra, 90.5 + eps, a_gi) - Nu_90) <= 1e-4 * (Nu_90 - 1) + 1e-12


def test_effective_tilt_flips_when_front_is_warmer():
    cavity = Cavity(AIR, 0.012, 1.0, 30.0)
    assert cavity.effective_tilt(10.0, 20.0) == pytest.approx(math.radians(30.0))
    assert cavity.effective_tilt(20.0, 10.0) == pytest.approx(math.radians(150.0))


def test_cavity_without_temperature_difference_conducts_only():
    cavity = Cavity(AIR, 0.012, 1.0, 90.0)
    assert cavity.rayleigh_number(15.0, 15.0) == pytest.approx(1.e-7)
    k = AIR.thermal_conductivity(15.0 + 273.15)
    assert cavity.convection_coefficient(15.0, 15.0) == pytest.approx(k / 0.012, rel=1e-6)


def test_u_value_of_inclined_cavity_lies_between_horizontal_and_vertical():
    # front warmer: heat flows downwards through a horizontal cavity
    t_front, t_back = 20.0, 10.0
    u = {
        tilt: Cavity(AIR, 0.02, 1.0, tilt).u_value(t_front, t_back)
        for tilt in (0.0, 45.0, 90.0)
    }
    assert u[0.0] < u[45.0] < u[90.0]


def test_cavity_heated_from_below_convects_more_than_vertical_cavity():
    t_front, t_back = 10.0, 20.0
    horizontal = Cavity(AIR, 0.02, 1.0, 0.0).convection_coefficient(t_front, t_back)
    vertical = Cavity(AIR, 0.02, 1.0, 90.0).convection_coefficient(t_front, t_back)
    assert horizontal > vertical


def test_radiation_coefficient_of_grey_plates():
    cavity = Cavity(AIR, 0.012, 1.0, 90.0, eps_front=0.84, eps_back=0.84)
    T_m = 15.0 + 273.15
    expected = 4 * 5.670374419e-8 * T_m ** 3 / (2 / 0.84 - 1)
    assert cavity.radiation_coefficient(20.0, 10.0) == pytest.approx(expected)
    assert cavity.resistance(20.0, 10.0) == pytest.approx(1 / cavity.u_value(20.0, 10.0))


def test_create_cavity_from_quantities():
    cavity = Cavity.create(AIR, Q_(12, 'mm'), Q_(1.5, 'm'), Q_(90, 'deg'))
    assert cavity.thickness == pytest.approx(0.012)
    assert cavity.aspect_ratio == pytest.approx(125.0)


def test_cavity_needs_positive_dimensions():
    with pytest.raises(DiscretizationError):
        Cavity(AIR, 0.0, 1.0, 90.0)
    with pytest.raises(DiscretizationError):
        Cavity(AIR, 0.012, 0.0, 90.0)

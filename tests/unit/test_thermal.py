from __future__ import annotations

import math

import pytest

from socdvfs.plant.thermal import (
    ThermalParams,
    ThermalState,
    steady_state_temp,
    step_thermal,
)


@pytest.fixture
def default_params() -> ThermalParams:
    """Default thermal parameters for testing."""
    return ThermalParams(
        ambient_c=25.0,
        r_th_c_per_w=8.0,
        tau_s=60.0,
    )


def test_thermal_state_initialization():
    """Test that thermal state can be initialized."""
    state = ThermalState(temp_c=25.0)
    assert state.temp_c == 25.0


def test_derived_thermal_capacitance(default_params):
    """C_th = tau / R_th."""
    assert default_params.c_th_j_per_c == pytest.approx(7.5)
    assert default_params.effective_tau_s == pytest.approx(60.0)


def test_steady_state_temperature(default_params):
    assert steady_state_temp(2.0, default_params) == pytest.approx(41.0)


def test_thermal_no_power_moves_toward_ambient(default_params):
    """
    With no power input and temp above ambient, temperature should decrease
    toward ambient.
    """
    state = ThermalState(temp_c=35.0)

    new_state = step_thermal(state, dt_s=0.25, power_w=0.0, p=default_params)

    assert new_state.temp_c < state.temp_c
    assert new_state.temp_c > default_params.ambient_c


def test_thermal_approach_without_overshoot(default_params):
    """
    Constant power held over many small steps approaches T_ss monotonically
    and never crosses it.
    """
    power_w = 2.0
    t_ss = steady_state_temp(power_w, default_params)
    state = ThermalState(temp_c=default_params.ambient_c)

    temps = [state.temp_c]
    for _ in range(2000):
        state = step_thermal(state, dt_s=0.25, power_w=power_w, p=default_params)
        temps.append(state.temp_c)

    for i in range(len(temps) - 1):
        assert temps[i] <= temps[i + 1]
        assert temps[i + 1] <= t_ss

    # 500 s is more than 8 time constants
    assert abs(temps[-1] - t_ss) < 0.01


def test_thermal_cooling_without_undershoot(default_params):
    """Cooling toward a lower steady state never drops below it."""
    state = ThermalState(temp_c=60.0)
    t_ss = steady_state_temp(1.0, default_params)

    for _ in range(1000):
        new_state = step_thermal(state, dt_s=0.25, power_w=1.0, p=default_params)
        assert new_state.temp_c <= state.temp_c
        assert new_state.temp_c >= t_ss
        state = new_state


def test_exact_exponential_solution(default_params):
    """One step of length tau covers 1 - 1/e of the gap."""
    state = ThermalState(temp_c=25.0)
    new_state = step_thermal(state, dt_s=60.0, power_w=2.0, p=default_params)
    expected = 25.0 + 16.0 * (1.0 - math.exp(-1.0))
    assert new_state.temp_c == pytest.approx(expected)


def test_step_size_independence(default_params):
    """
    Because the update is the analytic solution, one 10 s step equals forty
    0.25 s steps at the same power.
    """
    big = step_thermal(ThermalState(temp_c=30.0), dt_s=10.0, power_w=3.0, p=default_params)

    small = ThermalState(temp_c=30.0)
    for _ in range(40):
        small = step_thermal(small, dt_s=0.25, power_w=3.0, p=default_params)

    assert big.temp_c == pytest.approx(small.temp_c, rel=1e-9)


def test_huge_step_lands_on_steady_state(default_params):
    state = step_thermal(ThermalState(temp_c=25.0), dt_s=1e6, power_w=2.5, p=default_params)
    assert state.temp_c == pytest.approx(steady_state_temp(2.5, default_params))


def test_zero_tau_is_floored():
    """A zero time constant does not divide by zero."""
    params = ThermalParams(ambient_c=25.0, r_th_c_per_w=8.0, tau_s=0.0)
    state = step_thermal(ThermalState(temp_c=25.0), dt_s=0.25, power_w=1.0, p=params)
    assert state.temp_c == pytest.approx(33.0)


def test_higher_power_higher_temperature(default_params):
    low = ThermalState(temp_c=25.0)
    high = ThermalState(temp_c=25.0)
    for _ in range(100):
        low = step_thermal(low, dt_s=0.25, power_w=1.0, p=default_params)
        high = step_thermal(high, dt_s=0.25, power_w=4.0, p=default_params)
    assert high.temp_c > low.temp_c


def test_thermal_state_immutability(default_params):
    """
    Test that step_thermal returns a new state without mutating the input.
    """
    state = ThermalState(temp_c=25.0)

    new_state = step_thermal(state, dt_s=1.0, power_w=5.0, p=default_params)

    assert state.temp_c == 25.0
    assert new_state.temp_c != 25.0
    assert new_state is not state

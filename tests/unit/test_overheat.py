from __future__ import annotations

import pytest

from socdvfs.monitor.overheat import OverheatMonitor, OverheatParams, OverheatState


@pytest.fixture
def monitor() -> OverheatMonitor:
    return OverheatMonitor(OverheatParams(thermal_limit_c=42.0, grace_s=2.0))


def test_initial_state(monitor):
    state = monitor.initial_state()
    assert state.accumulated_s == 0.0
    assert not monitor.tripped(state)


def test_trips_exactly_at_grace(monitor):
    """Eight 0.25 s sub-steps above the margin fill a 2 s grace."""
    state = monitor.initial_state()
    for _ in range(7):
        state = monitor.step(state, temp_c=50.0, dt_s=0.25)
        assert not monitor.tripped(state)
    state = monitor.step(state, temp_c=50.0, dt_s=0.25)
    assert monitor.tripped(state)


def test_trip_temperature_is_strict(monitor):
    """Exactly limit + margin does not count as overheating."""
    state = monitor.step(OverheatState(accumulated_s=1.0), temp_c=47.0, dt_s=0.25)
    assert state.accumulated_s == pytest.approx(0.5)


def test_decay_twice_as_fast(monitor):
    state = monitor.initial_state()
    for _ in range(4):
        state = monitor.step(state, temp_c=50.0, dt_s=0.25)
    assert state.accumulated_s == pytest.approx(1.0)

    state = monitor.step(state, temp_c=40.0, dt_s=0.25)
    assert state.accumulated_s == pytest.approx(0.5)

    # Floored at zero
    for _ in range(3):
        state = monitor.step(state, temp_c=40.0, dt_s=0.25)
    assert state.accumulated_s == 0.0


def test_dips_below_margin_delay_trip(monitor):
    state = monitor.initial_state()
    for _ in range(6):
        state = monitor.step(state, temp_c=50.0, dt_s=0.25)
    state = monitor.step(state, temp_c=45.0, dt_s=0.25)
    assert state.accumulated_s == pytest.approx(1.0)
    for _ in range(3):
        state = monitor.step(state, temp_c=50.0, dt_s=0.25)
        assert not monitor.tripped(state)
    state = monitor.step(state, temp_c=50.0, dt_s=0.25)
    assert monitor.tripped(state)


def test_grace_floor():
    monitor = OverheatMonitor(OverheatParams(grace_s=0.2))
    assert monitor.params.effective_grace_s == 1.0
    state = monitor.initial_state()
    for _ in range(3):
        state = monitor.step(state, temp_c=60.0, dt_s=0.25)
    assert not monitor.tripped(state)
    state = monitor.step(state, temp_c=60.0, dt_s=0.25)
    assert monitor.tripped(state)


def test_step_returns_new_state(monitor):
    state = monitor.initial_state()
    new_state = monitor.step(state, temp_c=60.0, dt_s=0.25)
    assert state.accumulated_s == 0.0
    assert new_state is not state

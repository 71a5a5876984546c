from __future__ import annotations

import pytest

from socdvfs.control.governor import DvfsGovernor, GovernorParams
from socdvfs.control.interfaces import GovernorInputs, GovernorState


def _inputs(
    temp_c: float = 25.0,
    battery_pct: float = 100.0,
    workload_mix: float = 1.0,
    **kwargs,
) -> GovernorInputs:
    return GovernorInputs(
        dt_s=0.25,
        temp_c=temp_c,
        battery_pct=battery_pct,
        workload_mix=workload_mix,
        thermal_limit_c=42.0,
        **kwargs,
    )


def test_initial_state():
    state = DvfsGovernor().initial_state()
    assert state.index == 2
    assert state.cooldown_s == 0.0


def test_initial_index_clamped_to_table():
    gov = DvfsGovernor(params=GovernorParams(initial_index=99))
    assert gov.initial_state().index == 6


def test_slew_limit_one_step_per_cooldown():
    """
    Compute-bound target is P0; from P2 the governor moves one step, waits
    out the 0.3 s cooldown, then takes the next step.
    """
    gov = DvfsGovernor()
    state = gov.initial_state()

    state, out = gov.step(state, _inputs())
    assert out.index == 1
    assert out.changed
    assert state.cooldown_s == pytest.approx(0.3)

    # 0.05 s of cooldown left: hold
    state, out = gov.step(state, _inputs())
    assert out.index == 1
    assert not out.changed

    state, out = gov.step(state, _inputs())
    assert out.index == 0
    assert out.freq_ghz == 3.0
    assert out.vdd_v == 1.05


def test_step_does_not_mutate_state():
    gov = DvfsGovernor()
    state = GovernorState(index=2, cooldown_s=0.0)
    new_state, _ = gov.step(state, _inputs())
    assert state.index == 2
    assert state.cooldown_s == 0.0
    assert new_state is not state


def test_thermal_trigger_at_limit():
    gov = DvfsGovernor()
    state, out = gov.step(GovernorState(index=1), _inputs(temp_c=42.0, workload_mix=0.9))
    assert out.thermally_triggered
    assert out.index == 2
    assert state.index == 2
    assert "thermal_throttle" in out.rules_fired


def test_thermal_trigger_reported_during_cooldown():
    """Over the limit but still cooling down: flagged, index held."""
    gov = DvfsGovernor()
    state, out = gov.step(GovernorState(index=1, cooldown_s=0.3), _inputs(temp_c=45.0))
    assert out.thermally_triggered
    assert out.index == 1
    assert state.cooldown_s == pytest.approx(0.05)


def test_hysteresis_holds_index():
    gov = DvfsGovernor()
    _, out = gov.step(GovernorState(index=3), _inputs(temp_c=41.0))
    assert out.index == 3
    assert not out.changed
    assert not out.thermally_triggered


def test_below_hysteresis_band_speeds_up():
    gov = DvfsGovernor()
    _, out = gov.step(GovernorState(index=3), _inputs(temp_c=39.9))
    assert out.index == 2


def test_battery_floor_caps_performance():
    gov = DvfsGovernor()
    _, out = gov.step(GovernorState(index=3), _inputs(battery_pct=10.0))
    assert out.index == 3
    _, out = gov.step(GovernorState(index=2), _inputs(battery_pct=10.0))
    assert out.index == 3


def test_memory_bound_target_slows_down():
    gov = DvfsGovernor()
    _, out = gov.step(GovernorState(index=2), _inputs(workload_mix=0.0))
    assert out.index == 3
    assert out.desired_index == 6


def test_manual_override_clamps():
    gov = DvfsGovernor()
    state = GovernorState(index=4, cooldown_s=0.3)
    new_state, out = gov.step(
        state,
        _inputs(
            temp_c=90.0,
            battery_pct=1.0,
            manual_override=True,
            manual_freq_ghz=5.0,
            manual_vdd_v=0.5,
        ),
    )
    assert out.freq_ghz == 3.5
    assert out.vdd_v == 0.6
    assert out.index is None
    assert not out.thermally_triggered
    # Discrete state frozen, cooldown not consumed
    assert new_state is state
    assert new_state.index == 4
    assert new_state.cooldown_s == 0.3


def test_manual_override_within_bounds():
    gov = DvfsGovernor()
    _, out = gov.step(
        gov.initial_state(),
        _inputs(manual_override=True, manual_freq_ghz=2.0, manual_vdd_v=0.85),
    )
    assert out.freq_ghz == 2.0
    assert out.vdd_v == 0.85

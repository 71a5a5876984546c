from __future__ import annotations

from dataclasses import dataclass

SECONDS_PER_HOUR = 3600.0


@dataclass(frozen=True, slots=True)
class BatteryParams:
    capacity_wh: float         # Usable battery energy (Wh)


@dataclass(frozen=False, slots=True)
class EnergyState:
    """
    Energy drawn from the battery since reset.

    Only ever grows; reset() on the engine seeds a fresh zero state.
    """
    consumed_wh: float = 0.0


def step_energy(
    state: EnergyState,
    *,
    dt_s: float,
    power_w: float,
) -> EnergyState:
    """Accumulate power_w held for dt_s seconds, in watt-hours."""
    return EnergyState(consumed_wh=state.consumed_wh + power_w * dt_s / SECONDS_PER_HOUR)


def battery_pct(state: EnergyState, p: BatteryParams) -> float:
    """Remaining charge in percent, floored at 0."""
    return max(0.0, 100.0 * (1.0 - state.consumed_wh / p.capacity_wh))


def is_depleted(state: EnergyState, p: BatteryParams) -> bool:
    return state.consumed_wh >= p.capacity_wh

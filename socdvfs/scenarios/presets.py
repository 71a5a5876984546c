from __future__ import annotations

from typing import Callable

from socdvfs.config import SocConfig

# Type alias for scenario factories
Scenario = Callable[[], SocConfig]


def nominal() -> SocConfig:
    """
    Pure compute workload on the reference phone SoC.

    The governor should finish the workload (or run the battery flat) while
    keeping the die near the thermal limit, never overheating.
    """
    return SocConfig.from_args(
        workload_mix=1.0,
        ambient_c=25.0,
        thermal_limit_c=42.0,
        battery_wh=0.75,
        workload_gi=1000.0,
        tau_s=60.0,
    )


def memory_bound() -> SocConfig:
    """
    Memory-bound workload: low IPC and activity, governor targets slow P-states.
    """
    return SocConfig.from_args(workload_mix=0.1, workload_gi=300.0)


def hot_ambient() -> SocConfig:
    """
    Compute workload in a hot pocket; throttling starts almost immediately.

    Even the slowest P-state settles above limit + margin once leakage has
    warmed up, so the governor cannot save this run from overheating.
    """
    return SocConfig.from_args(
        workload_mix=1.0,
        ambient_c=38.0,
        thermal_limit_c=42.0,
        workload_gi=1000.0,
    )


def low_battery() -> SocConfig:
    """
    Small battery: the battery floor kicks in and the run likely depletes.
    """
    return SocConfig.from_args(
        workload_mix=0.9,
        battery_wh=0.1,
        workload_gi=2000.0,
    )


def manual_overclock() -> SocConfig:
    """
    Manual override at the top of the f/V range with no governor protection.

    With a short thermal time constant this overheats within seconds.
    """
    return SocConfig.from_args(
        workload_mix=1.0,
        manual_override=True,
        manual_freq_ghz=3.5,
        manual_vdd_v=1.1,
        tau_s=20.0,
        overheat_grace_s=2.0,
        battery_wh=5.0,
        workload_gi=1e6,
    )


def fast_thermal() -> SocConfig:
    """
    Small thermal mass (tau = 20 s): temperature tracks power closely.
    """
    return SocConfig.from_args(workload_mix=0.8, tau_s=20.0)


SCENARIOS: dict[str, Scenario] = {
    "nominal": nominal,
    "memory_bound": memory_bound,
    "hot_ambient": hot_ambient,
    "low_battery": low_battery,
    "manual_overclock": manual_overclock,
    "fast_thermal": fast_thermal,
}


def get_scenario(name: str) -> SocConfig:
    """
    Look up a scenario by name.

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return SCENARIOS[name]()
    except KeyError:
        raise ValueError(
            f"unknown scenario {name!r}; choose from {', '.join(sorted(SCENARIOS))}"
        ) from None

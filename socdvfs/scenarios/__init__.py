from __future__ import annotations

from socdvfs.scenarios.presets import (
    SCENARIOS,
    fast_thermal,
    get_scenario,
    hot_ambient,
    low_battery,
    manual_overclock,
    memory_bound,
    nominal,
)

__all__ = [
    "SCENARIOS",
    "get_scenario",
    "nominal",
    "memory_bound",
    "hot_ambient",
    "low_battery",
    "manual_overclock",
    "fast_thermal",
]

"""
Override rules for the automatic DVFS governor.

Each rule is a pure function ``(context, desired) -> int | None``. A rule
returns the new desired P-state index when it applies and ``None`` when it
does not. Rules only ever push the desired index towards slower P-states, so
chaining them in order means the strongest constraint wins.

Reference precedence:
    1. thermal_throttle  T >= limit            -> at least current + 1
    2. hysteresis_hold   limit - band < T < limit -> no faster than current
    3. battery_floor     battery < floor %     -> no faster than floor index

The battery floor is applied to the desired index already updated by the
thermal rules, so a simultaneous low-battery / over-temperature condition
resolves to max(thermal-forced index, floor index).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(frozen=True, slots=True)
class RuleContext:
    """
    Observations a rule may look at. Built once per governor decision.
    """
    current_index: int
    lowest_index: int
    temp_c: float
    thermal_limit_c: float
    hysteresis_c: float
    battery_pct: float
    battery_floor_pct: float
    battery_floor_index: int


RuleFn = Callable[[RuleContext, int], Optional[int]]


@dataclass(frozen=True, slots=True)
class OverrideRule:
    name: str
    apply: RuleFn
    thermal: bool = False           # Firing counts as a thermal trigger


@dataclass(frozen=True, slots=True)
class RuleDecision:
    desired_index: int
    rules_fired: tuple[str, ...]
    thermally_triggered: bool


def thermal_throttle(ctx: RuleContext, desired: int) -> int | None:
    if ctx.temp_c < ctx.thermal_limit_c:
        return None
    forced = min(ctx.current_index + 1, ctx.lowest_index)
    return max(desired, forced)


def hysteresis_hold(ctx: RuleContext, desired: int) -> int | None:
    # Just below the limit: allow slowing down, never speeding up
    if ctx.thermal_limit_c - ctx.hysteresis_c < ctx.temp_c < ctx.thermal_limit_c:
        return max(desired, ctx.current_index)
    return None


def battery_floor(ctx: RuleContext, desired: int) -> int | None:
    if ctx.battery_pct >= ctx.battery_floor_pct:
        return None
    floor = min(ctx.battery_floor_index, ctx.lowest_index)
    return max(desired, floor)


DEFAULT_RULES: tuple[OverrideRule, ...] = (
    OverrideRule(name="thermal_throttle", apply=thermal_throttle, thermal=True),
    OverrideRule(name="hysteresis_hold", apply=hysteresis_hold),
    OverrideRule(name="battery_floor", apply=battery_floor),
)


def apply_rules(
    ctx: RuleContext,
    target_index: int,
    rules: tuple[OverrideRule, ...] = DEFAULT_RULES,
) -> RuleDecision:
    """
    Run the override rules over the workload target in precedence order.

    Args:
        ctx: Observations for this decision
        target_index: Workload-derived target P-state
        rules: Ordered override rules

    Returns:
        RuleDecision with the final desired index and which rules fired
    """
    desired = target_index
    fired: list[str] = []
    thermal = False
    for rule in rules:
        result = rule.apply(ctx, desired)
        if result is None:
            continue
        desired = result
        fired.append(rule.name)
        thermal = thermal or rule.thermal

    return RuleDecision(
        desired_index=max(0, min(ctx.lowest_index, desired)),
        rules_fired=tuple(fired),
        thermally_triggered=thermal,
    )

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PowerParams:
    """
    Parameters for the CMOS power model.

    c_eff_nf must already be floored to a positive value by the caller;
    eval_power does not guard against non-positive capacitance.
    """
    c_eff_nf: float            # Effective switched capacitance (nF ~ W/(V^2*GHz))
    activity: float            # Switching activity factor alpha
    p_leak0_w: float           # Leakage at leak_ref_v / leak_ref_c (W)
    k_v: float                 # Leakage voltage sensitivity (1/V)
    gamma: float               # Leakage temperature sensitivity (1/°C)
    leak_ref_v: float = 0.8    # Reference voltage (V)
    leak_ref_c: float = 25.0   # Reference temperature (°C)


@dataclass(frozen=True, slots=True)
class PowerOutputs:
    dynamic_w: float
    leakage_w: float
    total_w: float


def activity_factor(workload_mix: float) -> float:
    """Switching activity: 0.5 for memory-bound code, 1.0 for pure compute."""
    return 0.5 + 0.5 * workload_mix


def eval_power(
    *,
    freq_ghz: float,
    vdd_v: float,
    temp_c: float,
    p: PowerParams,
) -> PowerOutputs:
    """
    Evaluate instantaneous chip power at an operating point.

    Physics:
    - Dynamic: P_dyn = C_eff * V^2 * f * alpha
    - Leakage: P_leak = P_leak0 * exp(k_V * (V - V_ref)) * exp(gamma * (T - T_ref))

    Args:
        freq_ghz: Core frequency (GHz)
        vdd_v: Supply voltage (V)
        temp_c: Die temperature at the start of the step (°C)
        p: Power parameters

    Returns:
        PowerOutputs with dynamic, leakage and total power (W)
    """
    dynamic_w = p.c_eff_nf * vdd_v * vdd_v * freq_ghz * p.activity
    leakage_w = (
        p.p_leak0_w
        * math.exp(p.k_v * (vdd_v - p.leak_ref_v))
        * math.exp(p.gamma * (temp_c - p.leak_ref_c))
    )
    return PowerOutputs(
        dynamic_w=dynamic_w,
        leakage_w=leakage_w,
        total_w=dynamic_w + leakage_w,
    )

from __future__ import annotations

import math
from dataclasses import dataclass

# Floor applied to tau and R_th so the update never divides by zero
MIN_THERMAL_CONSTANT = 1e-6


@dataclass(frozen=True, slots=True)
class ThermalParams:
    """
    Parameters for the thermal RC model.

    The die is a single thermal node coupled to ambient through R_th. The
    time constant tau is configured directly; the thermal capacitance is
    derived from it (C_th = tau / R_th).
    """
    ambient_c: float           # Ambient temperature (°C)
    r_th_c_per_w: float        # Thermal resistance (°C/W)
    tau_s: float               # Thermal time constant (s)

    @property
    def c_th_j_per_c(self) -> float:
        """Derived thermal capacitance (J/°C), informational."""
        return max(MIN_THERMAL_CONSTANT,
                   self.tau_s / max(MIN_THERMAL_CONSTANT, self.r_th_c_per_w))

    @property
    def effective_tau_s(self) -> float:
        return max(MIN_THERMAL_CONSTANT, self.r_th_c_per_w) * self.c_th_j_per_c


@dataclass(frozen=False, slots=True)
class ThermalState:
    """
    State of the thermal system.

    This is mutable to allow efficient state updates during simulation.
    """
    temp_c: float              # Current temperature (°C)


def steady_state_temp(power_w: float, p: ThermalParams) -> float:
    """Temperature the die would settle at if power_w were held forever."""
    return p.ambient_c + power_w * p.r_th_c_per_w


def step_thermal(
    state: ThermalState,
    *,
    dt_s: float,
    power_w: float,
    p: ThermalParams,
) -> ThermalState:
    """
    Step the thermal model forward by dt_s seconds.

    Physics:
    - First-order RC thermal model to ambient:
      dT/dt = (T_ss - T) / tau,  T_ss = T_ambient + P * R_th
    - Exact solution over a step of constant power:
      T(t + dt) = T + (T_ss - T) * (1 - exp(-dt / tau))

    The exact update is stable for any dt, so playback speed (which changes
    the sub-step size at the end of a budget) never changes stability.

    Args:
        state: Current thermal state
        dt_s: Time step in seconds
        power_w: Total chip power held over the step (W)
        p: Thermal parameters

    Returns:
        New thermal state (does not mutate input)
    """
    t_ss = steady_state_temp(power_w, p)
    blend = 1.0 - math.exp(-dt_s / p.effective_tau_s)
    temp_next = state.temp_c + (t_ss - state.temp_c) * blend

    return ThermalState(temp_c=temp_next)

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=False, slots=True)
class GovernorState:
    """
    Discrete governor state carried across sub-steps.

    While cooldown_s > 0 the P-state index may not change.
    """
    index: int                      # Current P-state index
    cooldown_s: float = 0.0         # Remaining slew cooldown (s)


@dataclass(frozen=True, slots=True)
class GovernorInputs:
    """
    Inputs to a governor.

    Governors receive the observations available at the start of a sub-step
    (temperature and battery before this step's update) plus the user knobs.
    They do not know about ticks, budgets, or the engine.
    """
    dt_s: float                     # Sub-step size (s)
    # Observations
    temp_c: float                   # Die temperature (°C)
    battery_pct: float              # Remaining battery [0, 100]
    # Knobs
    workload_mix: float             # Compute intensity [0, 1]
    thermal_limit_c: float          # Throttle threshold (°C)
    manual_override: bool = False   # Bypass automatic control
    manual_freq_ghz: float = 0.0    # Requested frequency in manual mode (GHz)
    manual_vdd_v: float = 0.0       # Requested voltage in manual mode (V)


@dataclass(frozen=True, slots=True)
class GovernorOutputs:
    """
    Outputs from a governor.

    The active operating point plus enough decision detail for the caller to
    derive the throttling indicator and log transitions.
    """
    freq_ghz: float                 # Active frequency (GHz)
    vdd_v: float                    # Active voltage (V)
    index: int | None               # Active P-state, None in manual mode
    thermally_triggered: bool = False
    changed: bool = False           # Index moved this step
    desired_index: int | None = None
    rules_fired: tuple[str, ...] = ()


class Governor(Protocol):
    """
    Protocol for DVFS governors.

    Governors map observations to an operating point. Their discrete state is
    passed in and returned explicitly so the engine owns it; step() must not
    mutate the state it is given.
    """

    def initial_state(self) -> GovernorState:
        """Return the state a freshly reset governor starts from."""
        ...

    def step(
        self,
        state: GovernorState,
        inputs: GovernorInputs,
    ) -> tuple[GovernorState, GovernorOutputs]:
        """
        Decide the operating point for the coming sub-step.

        Args:
            state: Governor state at the start of the step
            inputs: Current observations and knobs

        Returns:
            (new_state, outputs)
        """
        ...

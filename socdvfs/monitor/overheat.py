"""
Overheat monitor for the SoC simulation.

The monitor integrates time spent dangerously hot and decides when the run
must stop. It is a leaky accumulator rather than an instantaneous trip so
that short excursions above the margin are tolerated:

- While T > thermal_limit + margin, the accumulator grows by dt
- Otherwise it decays by decay * dt (twice as fast by default), never below 0
- The monitor trips once the accumulator reaches max(1 s, grace)

Example usage:
    >>> from socdvfs.monitor.overheat import OverheatMonitor, OverheatParams
    >>> monitor = OverheatMonitor(OverheatParams(thermal_limit_c=42.0, grace_s=2.0))
    >>> state = monitor.initial_state()
    >>> for _ in range(8):
    ...     state = monitor.step(state, temp_c=50.0, dt_s=0.25)
    >>> monitor.tripped(state)
    True
"""

from __future__ import annotations

from dataclasses import dataclass

# Grace below this is raised to it, whatever the configuration says
MIN_GRACE_S = 1.0


@dataclass
class OverheatParams:
    """
    Parameters for the overheat monitor.

    Attributes:
        thermal_limit_c: Governor throttle threshold (°C).
        grace_s: Accumulated time above limit + margin that ends the run.
                 Floored at MIN_GRACE_S.
        margin_c: Safety margin above the thermal limit. Only temperatures
                  strictly above limit + margin count as overheating.
        decay: Accumulator decay rate while below the margin, in seconds of
               accumulated time removed per second elapsed.
    """

    thermal_limit_c: float = 42.0
    grace_s: float = 5.0
    margin_c: float = 5.0
    decay: float = 2.0

    @property
    def effective_grace_s(self) -> float:
        return max(MIN_GRACE_S, self.grace_s)

    @property
    def trip_temp_c(self) -> float:
        return self.thermal_limit_c + self.margin_c


@dataclass
class OverheatState:
    """
    Overheat accumulator.

    Attributes:
        accumulated_s: Leaky integral of time spent above the trip
                       temperature. Never negative.
    """

    accumulated_s: float = 0.0


class OverheatMonitor:
    """
    Leaky-accumulator overheat detector.

    The state machine logic is:
    ```
    on reset:
        accumulated = 0

    on each sub-step (temperature after the thermal update):
        if T > limit + margin:
            accumulated += dt
        else:
            accumulated = max(0, accumulated - decay * dt)
        tripped = accumulated >= max(1, grace)
    ```

    Like the governor, the monitor holds only parameters; its state is passed
    in and returned so the engine owns it.
    """

    def __init__(self, params: OverheatParams | None = None):
        """
        Initialize the overheat monitor.

        Args:
            params: Monitor parameters. Uses default OverheatParams() if None.
        """
        self.params = params or OverheatParams()

    def initial_state(self) -> OverheatState:
        return OverheatState(accumulated_s=0.0)

    def step(self, state: OverheatState, *, temp_c: float, dt_s: float) -> OverheatState:
        """
        Advance the accumulator by one sub-step.

        Args:
            state: Accumulator state before the step
            temp_c: Die temperature after this step's thermal update (°C)
            dt_s: Sub-step size (s)

        Returns:
            New OverheatState (the input is not mutated)
        """
        if temp_c > self.params.trip_temp_c:
            accumulated = state.accumulated_s + dt_s
        else:
            accumulated = max(0.0, state.accumulated_s - self.params.decay * dt_s)
        return OverheatState(accumulated_s=accumulated)

    def tripped(self, state: OverheatState) -> bool:
        return state.accumulated_s >= self.params.effective_grace_s

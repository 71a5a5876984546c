from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from socdvfs.control.interfaces import GovernorState
from socdvfs.monitor.overheat import OverheatState
from socdvfs.plant.interfaces import PlantState


class TerminationReason(str, Enum):
    """
    Why a run stopped. Anything but RUNNING is terminal until reset().
    """
    RUNNING = "running"
    COMPLETED = "completed"
    BATTERY_DEPLETED = "battery"
    OVERHEATED = "overheat"
    RESET = "reset"

    @property
    def is_terminal(self) -> bool:
        return self is not TerminationReason.RUNNING


# Engine state

@dataclass(frozen=False, slots=True)
class EngineState:
    """
    Everything a run carries from one sub-step to the next.

    One value, owned by one engine, passed by reference into each sub-step.
    Tests can build one directly, run a sub-step and assert on it.
    """
    governor: GovernorState
    plant: PlantState
    overheat: OverheatState
    elapsed_s: float = 0.0          # Virtual time since reset (s)
    freq_ghz: float = 0.0           # Active operating point
    vdd_v: float = 0.0
    last_power_w: float = 0.0       # Power of the most recent sub-step (W)
    throttling: bool = False        # Thermally triggered or at/above limit
    termination: TerminationReason = TerminationReason.RUNNING


# Time-series recording

# slots are used to enforce good interface hygiene, disables dynamic attribute creation.
@dataclass(frozen=True, slots=True)
class Sample:
    """
    Outputs of one sub-step.

    Samples are produced once and never mutated; the trace only ever drops
    whole samples from its front.
    """
    elapsed_s: float        # Virtual time at the end of the step (s)
    power_w: float          # Total power over the step (W)
    temp_c: float           # Temperature after the step (°C)
    perf_mips: float        # Instruction rate (MIPS)
    energy_wh: float        # Energy consumed since reset (Wh)
    battery_pct: float      # Remaining battery [0, 100]
    freq_ghz: float         # Active frequency (GHz)
    vdd_v: float            # Active voltage (V)
    p_index: int | None = None   # Active P-state, None under manual override
    throttling: bool = False     # Throttling indicator after the step


@dataclass(frozen=True, slots=True)
class AdvanceResult:
    """
    Samples produced by one advance() call and the termination state after it.

    Unpacks as (samples, termination).
    """
    samples: list[Sample]
    termination: TerminationReason

    def __iter__(self) -> Iterator:
        return iter((self.samples, self.termination))


# Event recording

@dataclass(frozen=True, slots=True)
class DvfsEvent:
    """
    A discrete DVFS event detected between consecutive samples.

    kind is one of "pstate_change", "throttle_on", "throttle_off",
    "terminated".
    """
    elapsed_s: float        # Virtual time of the sample that raised it (s)
    kind: str
    p_index: int | None
    freq_ghz: float
    vdd_v: float
    temp_c: float
    detail: str = ""


# Run results

@dataclass(frozen=True, slots=True)
class RunMetrics:
    scenario_name: str
    start_time: str
    finish_time: str
    ticks: int
    total_samples: int
    elapsed_s: float
    termination: str
    final_temp_c: float
    peak_temp_c: float
    energy_wh: float
    battery_pct: float
    remaining_gi: float
    progress_pct: float
    throttled_s: float
    pstate_changes: int


@dataclass(frozen=True, slots=True)
class RunResult:
    """
    Complete results from a headless playback run.

    Attributes:
        metrics: Run-level summary (timing, termination, totals).
        samples: Full sample history of the run.
        events: DVFS events detected during the run.
        termination: Final termination reason.
    """
    metrics: RunMetrics
    samples: list[Sample]
    events: list[DvfsEvent] = field(default_factory=list)
    termination: TerminationReason = TerminationReason.RUNNING

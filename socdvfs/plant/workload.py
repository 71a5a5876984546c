from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class WorkloadParams:
    """
    Workload performance parameters.

    IPC is interpolated linearly between ipc_min (memory-bound, mix=0) and
    ipc_max (compute-bound, mix=1).
    """
    workload_mix: float        # Compute intensity [0, 1]
    ipc_min: float             # IPC at mix = 0
    ipc_max: float             # IPC at mix = 1

    @property
    def ipc(self) -> float:
        return self.ipc_min + (self.ipc_max - self.ipc_min) * self.workload_mix


@dataclass(frozen=False, slots=True)
class WorkloadState:
    remaining_gi: float        # Remaining work (billion instructions)

    @property
    def completed(self) -> bool:
        return self.remaining_gi <= 0.0


def eval_performance(freq_ghz: float, p: WorkloadParams) -> float:
    """Instruction rate in giga-instructions per second (IPC x GHz)."""
    return max(0.0, p.ipc * freq_ghz)


def step_workload(
    state: WorkloadState,
    *,
    dt_s: float,
    perf_gips: float,
) -> tuple[WorkloadState, bool]:
    """
    Retire perf_gips * dt_s billion instructions.

    Returns:
        (new_state, completed); remaining work is floored at 0
    """
    remaining = max(0.0, state.remaining_gi - perf_gips * dt_s)
    new_state = WorkloadState(remaining_gi=remaining)
    return new_state, new_state.completed


def progress_pct(state: WorkloadState, total_gi: float) -> float:
    """Share of the workload already retired, in percent."""
    if total_gi <= 0:
        return 0.0
    done = max(0.0, total_gi - state.remaining_gi)
    return max(0.0, min(100.0, 100.0 * done / total_gi))

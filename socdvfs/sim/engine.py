"""
Simulation engine for socdvfs.

This module provides the SimulationEngine class, the central orchestrator of
the closed-loop DVFS simulation. It manages:
- Virtual-time advancement in fixed sub-steps
- Governor decisions (automatic or manual override)
- Plant stepping (power, thermal, workload, battery)
- Overheat accumulation
- Termination detection with fixed precedence
- The bounded sample trace and DVFS event log

The engine is the authoritative timebase: no other component tracks time.
Time is virtual and decoupled from the rate at which advance() is called.

Architecture:
```
    SimulationEngine (Time Authority, single writer)
        |
        +-- EngineState (one owned value)
        |   |-- GovernorState   (index, cooldown)
        |   |-- PlantState      (thermal, workload, energy)
        |   |-- OverheatState   (accumulator)
        |   |-- elapsed, throttling, termination
        |
        +-- EngineContext (per-config collaborators)
        |   |-- Governor (DvfsGovernor by default)
        |   |-- OverheatMonitor
        |   |-- plant model parameters
        |
        v
    run_substep(state, ctx, dt):
        governor -> power -> thermal -> workload -> energy -> overheat
        -> Sample -> termination check
```

Example usage:
    >>> from socdvfs.config import SocConfig
    >>> from socdvfs.sim.engine import SimulationEngine
    >>>
    >>> engine = SimulationEngine(SocConfig.from_args(workload_mix=1.0))
    >>> samples, reason = engine.advance(5.0)   # 5 virtual seconds
    >>> print(len(samples), reason.value)
    20 running
"""

from __future__ import annotations

import copy
import logging
import math
from dataclasses import dataclass

from socdvfs.config import ModelConfig, SocConfig
from socdvfs.control.governor import DvfsGovernor, GovernorParams
from socdvfs.control.interfaces import Governor, GovernorInputs
from socdvfs.control.opp import OperatingPoint
from socdvfs.monitor.overheat import OverheatMonitor, OverheatParams
from socdvfs.plant import (
    BatteryParams,
    EnergyState,
    PowerParams,
    ThermalParams,
    ThermalState,
    WorkloadParams,
    WorkloadState,
    activity_factor,
    battery_pct,
    eval_plant_chain,
)
from socdvfs.plant.interfaces import PlantInputs, PlantState
from socdvfs.plant.workload import progress_pct
from socdvfs.sim.events import EventDetector
from socdvfs.sim.interfaces import (
    AdvanceResult,
    DvfsEvent,
    EngineState,
    Sample,
    TerminationReason,
)
from socdvfs.sim.trace import SampleTrace

logger = logging.getLogger(__name__)

# Budget left over below this is floating-point residue, not time to simulate
BUDGET_EPSILON_S = 1e-9


@dataclass(frozen=True, slots=True)
class EngineContext:
    """
    Collaborators and parameters derived from one SocConfig + ModelConfig.

    Rebuilt whenever the configuration changes; holds no run state.
    """
    config: SocConfig
    model: ModelConfig
    governor: Governor
    monitor: OverheatMonitor
    power_params: PowerParams
    thermal_params: ThermalParams
    workload_params: WorkloadParams
    battery_params: BatteryParams


def build_context(
    config: SocConfig,
    model: ModelConfig,
    governor: Governor | None = None,
) -> EngineContext:
    """
    Derive the per-run model parameters from the user knobs.

    Args:
        config: User knobs (already clamped by the caller)
        model: Fixed model constants
        governor: Custom governor; a DvfsGovernor over model.pstates if None

    Returns:
        EngineContext ready for run_substep()
    """
    if governor is None:
        governor = DvfsGovernor(
            table=model.pstates,
            params=GovernorParams(
                slew_step_s=model.slew_step_s,
                hysteresis_c=model.hysteresis_c,
                battery_floor_pct=model.battery_floor_pct,
                battery_floor_index=model.battery_floor_index,
                initial_index=model.initial_index,
                f_min_ghz=model.f_min_ghz,
                f_max_ghz=model.f_max_ghz,
                v_min_v=model.v_min_v,
                v_max_v=model.v_max_v,
            ),
        )

    return EngineContext(
        config=config,
        model=model,
        governor=governor,
        monitor=OverheatMonitor(OverheatParams(
            thermal_limit_c=config.thermal_limit_c,
            grace_s=config.overheat_grace_s,
            margin_c=model.overheat_margin_c,
            decay=model.overheat_decay,
        )),
        power_params=PowerParams(
            c_eff_nf=config.ceff_nf,
            activity=activity_factor(config.workload_mix),
            p_leak0_w=model.p_leak0_w,
            k_v=model.k_v,
            gamma=model.gamma,
            leak_ref_v=model.leak_ref_v,
            leak_ref_c=model.leak_ref_c,
        ),
        thermal_params=ThermalParams(
            ambient_c=config.ambient_c,
            r_th_c_per_w=model.r_th_c_per_w,
            tau_s=config.tau_s,
        ),
        workload_params=WorkloadParams(
            workload_mix=config.workload_mix,
            ipc_min=model.ipc_min,
            ipc_max=model.ipc_max,
        ),
        battery_params=BatteryParams(capacity_wh=config.battery_wh),
    )


def initial_state(ctx: EngineContext) -> EngineState:
    """Fresh run state: ambient temperature, full battery, all work pending."""
    gov_state = ctx.governor.initial_state()
    point = ctx.model.pstates[gov_state.index]
    return EngineState(
        governor=gov_state,
        plant=PlantState(
            thermal=ThermalState(temp_c=ctx.config.ambient_c),
            workload=WorkloadState(remaining_gi=ctx.config.workload_gi),
            energy=EnergyState(consumed_wh=0.0),
        ),
        overheat=ctx.monitor.initial_state(),
        freq_ghz=point.freq_ghz,
        vdd_v=point.vdd_v,
    )


def run_substep(state: EngineState, ctx: EngineContext, dt_s: float) -> Sample:
    """
    Execute one sub-step on `state` in place and return its sample.

    Order (each stage only sees outputs of earlier stages):
    1. Governor decision from the temperature / battery the step starts at
    2. Power at the chosen operating point and starting temperature
    3. Thermal update
    4. Workload and energy update
    5. Overheat accumulator update
    6. Sample, then termination check

    Every stage is computed before anything is written back, so the state is
    either fully advanced or untouched.

    Args:
        state: Engine state, mutated in place
        ctx: Per-config collaborators and parameters
        dt_s: Sub-step size (s)

    Returns:
        The Sample for this sub-step
    """
    cfg = ctx.config

    # ─────────────────────────────────────────────────────────────
    # 1. Governor
    # ─────────────────────────────────────────────────────────────
    gov_inputs = GovernorInputs(
        dt_s=dt_s,
        temp_c=state.plant.thermal.temp_c,
        battery_pct=battery_pct(state.plant.energy, ctx.battery_params),
        workload_mix=cfg.workload_mix,
        thermal_limit_c=cfg.thermal_limit_c,
        manual_override=cfg.manual_override,
        manual_freq_ghz=cfg.manual_freq_ghz,
        manual_vdd_v=cfg.manual_vdd_v,
    )
    gov_state, gov_out = ctx.governor.step(state.governor, gov_inputs)

    # ─────────────────────────────────────────────────────────────
    # 2-4. Power, thermal, workload, energy
    # ─────────────────────────────────────────────────────────────
    plant_state, out = eval_plant_chain(
        state.plant,
        PlantInputs(freq_ghz=gov_out.freq_ghz, vdd_v=gov_out.vdd_v, dt_s=dt_s),
        ctx.power_params,
        ctx.thermal_params,
        ctx.workload_params,
        ctx.battery_params,
    )

    # ─────────────────────────────────────────────────────────────
    # 5. Overheat accumulator
    # ─────────────────────────────────────────────────────────────
    overheat_state = ctx.monitor.step(state.overheat, temp_c=out.temp_c, dt_s=dt_s)

    throttling = gov_out.thermally_triggered or out.temp_c >= cfg.thermal_limit_c
    elapsed = state.elapsed_s + dt_s

    # ─────────────────────────────────────────────────────────────
    # Commit
    # ─────────────────────────────────────────────────────────────
    state.governor = gov_state
    state.plant = plant_state
    state.overheat = overheat_state
    state.elapsed_s = elapsed
    state.freq_ghz = gov_out.freq_ghz
    state.vdd_v = gov_out.vdd_v
    state.last_power_w = out.power_w
    state.throttling = throttling

    # ─────────────────────────────────────────────────────────────
    # 6. Termination: completion, then battery, then overheat.
    # Set once; a terminal reason is never overwritten.
    # ─────────────────────────────────────────────────────────────
    if state.termination is TerminationReason.RUNNING:
        if out.completed:
            state.termination = TerminationReason.COMPLETED
        elif out.depleted:
            state.termination = TerminationReason.BATTERY_DEPLETED
        elif ctx.monitor.tripped(overheat_state):
            state.termination = TerminationReason.OVERHEATED

    return Sample(
        elapsed_s=elapsed,
        power_w=out.power_w,
        temp_c=out.temp_c,
        perf_mips=out.perf_gips * 1000.0,
        energy_wh=out.energy_wh,
        battery_pct=out.battery_pct,
        freq_ghz=gov_out.freq_ghz,
        vdd_v=gov_out.vdd_v,
        p_index=gov_out.index,
        throttling=throttling,
    )


class SimulationEngine:
    """
    Simulation engine - the central orchestrator for socdvfs.

    The engine owns exactly one EngineState and is its only writer. Callers
    drive it with advance(budget) from a periodic tick and read snapshots
    between batches; there is no internal threading and nothing to cancel.

    Lifecycle:
        reset()  -> state seeded from the configuration, RUNNING
        advance() / step() while RUNNING
        terminal reason reached -> frozen until the next reset()

    Attributes:
        _model: Fixed model constants.
        _ctx: Collaborators derived from the current configuration.
        _state: The run state.
        _trace: Bounded sample trace.
        _events: DVFS events since the last reset.
    """

    def __init__(
        self,
        config: SocConfig | None = None,
        model: ModelConfig | None = None,
        governor: Governor | None = None,
        trace: SampleTrace | None = None,
    ) -> None:
        """
        Initialize the engine and reset it from `config`.

        Args:
            config: User knobs (defaults to SocConfig())
            model: Fixed model constants (defaults to ModelConfig())
            governor: Custom governor; a DvfsGovernor over model.pstates if None
            trace: Sample trace; a bounded trace sized from the model if None
        """
        self._model = model or ModelConfig()
        self._custom_governor = governor
        self._trace = trace or SampleTrace(
            capacity=self._model.trace_capacity,
            keep=self._model.trace_keep,
        )
        self._detector = EventDetector()
        self._events: list[DvfsEvent] = []
        self._ctx = build_context(config or SocConfig(), self._model, governor)
        self._state = initial_state(self._ctx)

    # ─────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────

    def reset(self, config: SocConfig | None = None) -> TerminationReason:
        """
        Re-seed all state, optionally from a new configuration.

        Clears the trace and event log and leaves the engine RUNNING.

        Args:
            config: New knobs; keeps the current configuration if None

        Returns:
            How the discarded run ended: its terminal reason, or RESET if it
            was still running.
        """
        previous = self._state.termination
        if previous is TerminationReason.RUNNING:
            previous = TerminationReason.RESET

        if config is not None:
            self._ctx = build_context(config, self._model, self._custom_governor)
        self._state = initial_state(self._ctx)
        self._trace.clear()
        self._detector.reset()
        self._events = []
        logger.debug("engine reset (previous run: %s)", previous.value)
        return previous

    def update_config(self, config: SocConfig) -> None:
        """
        Swap in new knobs without clearing run state.

        Takes effect from the next sub-step. Governor, thermal, energy and
        overheat state carry over, so toggling manual override off resumes
        automatic control from the last P-state. Workload size and ambient
        changes do not re-seed remaining work or temperature; use reset()
        for that.
        """
        self._ctx = build_context(config, self._model, self._custom_governor)

    # ─────────────────────────────────────────────────────────────────
    # Time advancement
    # ─────────────────────────────────────────────────────────────────

    def step(self, dt_s: float | None = None) -> Sample:
        """
        Execute a single sub-step and append it to the trace.

        Args:
            dt_s: Sub-step size; defaults to the model's fixed dt

        Returns:
            The Sample produced

        Raises:
            RuntimeError: If the run has already terminated
            ValueError: If dt_s is not a positive finite number
        """
        if self._state.termination.is_terminal:
            raise RuntimeError(
                f"run has terminated ({self._state.termination.value}); call reset()"
            )
        dt_s = self._model.dt_s if dt_s is None else float(dt_s)
        if not math.isfinite(dt_s) or dt_s <= 0:
            raise ValueError("dt_s must be a positive finite number")

        sample = self._substep(dt_s)
        self._trace.extend([sample])
        return sample

    def advance(self, budget_s: float) -> AdvanceResult:
        """
        Advance virtual time by up to `budget_s` seconds.

        Runs sub-steps of min(dt, remaining budget) until the budget is spent
        or a termination condition fires, whichever comes first. A terminated
        engine returns an empty batch.

        Args:
            budget_s: Virtual seconds to simulate (>= 0)

        Returns:
            AdvanceResult(samples, termination)

        Raises:
            ValueError: If budget_s is negative or not finite
        """
        budget_s = float(budget_s)
        if not math.isfinite(budget_s) or budget_s < 0:
            raise ValueError("budget_s must be a non-negative finite number")

        dt = self._model.dt_s
        remaining = budget_s
        samples: list[Sample] = []

        while remaining > BUDGET_EPSILON_S and not self._state.termination.is_terminal:
            h = min(dt, remaining)
            remaining -= h
            samples.append(self._substep(h))

        self._trace.extend(samples)
        return AdvanceResult(samples=samples, termination=self._state.termination)

    def _substep(self, dt_s: float) -> Sample:
        sample = run_substep(self._state, self._ctx, dt_s)

        events = self._detector.observe(sample)
        for event in events:
            if event.kind == "pstate_change":
                logger.debug(
                    "t=%.2fs %s at %.2f°C", event.elapsed_s, event.detail, event.temp_c
                )

        reason = self._state.termination
        if reason.is_terminal:
            events.append(self._detector.terminated(sample, reason))
            logger.info(
                "run terminated: %s at t=%.2fs (T=%.2f°C, E=%.4f Wh, remaining=%.1f GI)",
                reason.value,
                sample.elapsed_s,
                sample.temp_c,
                sample.energy_wh,
                self._state.plant.workload.remaining_gi,
            )

        self._events.extend(events)
        return sample

    # ─────────────────────────────────────────────────────────────────
    # Read-only accessors
    # ─────────────────────────────────────────────────────────────────

    @property
    def config(self) -> SocConfig:
        return self._ctx.config

    @property
    def model(self) -> ModelConfig:
        return self._model

    def snapshot(self) -> EngineState:
        """Independent deep copy of the run state."""
        return copy.deepcopy(self._state)

    @property
    def termination(self) -> TerminationReason:
        return self._state.termination

    @property
    def p_index(self) -> int | None:
        """Governor P-state, or None while manual override is active."""
        if self._ctx.config.manual_override:
            return None
        return self._state.governor.index

    @property
    def operating_point(self) -> OperatingPoint:
        """Operating point applied by the most recent sub-step."""
        return OperatingPoint(freq_ghz=self._state.freq_ghz, vdd_v=self._state.vdd_v)

    @property
    def throttling(self) -> bool:
        return self._state.throttling

    @property
    def elapsed_s(self) -> float:
        return self._state.elapsed_s

    @property
    def temperature_c(self) -> float:
        return self._state.plant.thermal.temp_c

    @property
    def remaining_gi(self) -> float:
        return self._state.plant.workload.remaining_gi

    @property
    def progress_pct(self) -> float:
        return progress_pct(self._state.plant.workload, self._ctx.config.workload_gi)

    @property
    def energy_wh(self) -> float:
        return self._state.plant.energy.consumed_wh

    @property
    def battery_pct(self) -> float:
        return battery_pct(self._state.plant.energy, self._ctx.battery_params)

    @property
    def steady_state_c(self) -> float:
        """Temperature the most recent power level would settle at."""
        return self._ctx.config.ambient_c + self._state.last_power_w * self._model.r_th_c_per_w

    @property
    def c_th_j_per_c(self) -> float:
        return self._ctx.thermal_params.c_th_j_per_c

    @property
    def last_sample(self) -> Sample | None:
        return self._trace.last()

    @property
    def trace(self) -> SampleTrace:
        return self._trace

    @property
    def events(self) -> list[DvfsEvent]:
        return list(self._events)

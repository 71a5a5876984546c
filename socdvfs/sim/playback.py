"""
Tick-based playback for the simulation engine.

An interactive front end calls tick() on a periodic wall-clock timer (100 ms
by default). Each tick asks the engine to advance by

    budget = tick_s * clamp(speed, 1, 50)

virtual seconds, so a faster speed fast-forwards the simulation without
changing the sub-step size or its numerical stability. Pausing simply stops
issuing ticks; there is never in-flight work to cancel.

run() drives the same ticks headlessly (no sleeping) for batch runs and the
CLI.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from socdvfs.config import RunConfig
from socdvfs.sim.engine import SimulationEngine
from socdvfs.sim.interfaces import (
    AdvanceResult,
    RunMetrics,
    RunResult,
    Sample,
    TerminationReason,
)

logger = logging.getLogger(__name__)

DEFAULT_TICK_S = 0.1
MIN_SPEED = 1.0
MAX_SPEED = 50.0


def clamp_speed(speed: float) -> float:
    return max(MIN_SPEED, min(MAX_SPEED, speed))


def tick_budget(tick_s: float, speed: float) -> float:
    """Virtual seconds one wall-clock tick is worth at `speed`."""
    return tick_s * clamp_speed(speed)


class PlaybackDriver:
    """
    Play / pause / reset control over a SimulationEngine.

    Mirrors an interactive front end: play() restarts a finished run, a run
    that terminates pauses itself, and reset() stops playback and re-seeds
    the engine.
    """

    def __init__(
        self,
        engine: SimulationEngine,
        tick_s: float = DEFAULT_TICK_S,
        speed: float | None = None,
    ):
        """
        Initialize the driver (paused).

        Args:
            engine: Engine to drive
            tick_s: Wall-clock tick period (s)
            speed: Fixed speed multiplier; if None the driver follows the
                   engine config, so update_config() and reset(config) change
                   the tick budget from the next tick
        """
        if tick_s <= 0:
            raise ValueError("tick_s must be > 0")
        self.engine = engine
        self.tick_s = tick_s
        self._speed_override = speed
        self.ticks = 0
        self._playing = False

    @property
    def playing(self) -> bool:
        return self._playing

    @property
    def speed(self) -> float:
        if self._speed_override is not None:
            return self._speed_override
        return self.engine.config.speed

    @property
    def budget_s(self) -> float:
        return tick_budget(self.tick_s, self.speed)

    def play(self) -> None:
        if self.engine.termination.is_terminal:
            self.engine.reset()
            self.ticks = 0
        self._playing = True
        logger.debug("play at %.1fx (%.2f virtual s per tick)", clamp_speed(self.speed), self.budget_s)

    def pause(self) -> None:
        self._playing = False
        logger.debug("pause at t=%.2fs", self.engine.elapsed_s)

    def reset(self) -> TerminationReason:
        self._playing = False
        self.ticks = 0
        return self.engine.reset()

    def tick(self, max_budget_s: float | None = None) -> AdvanceResult:
        """
        Advance the engine by one tick's worth of virtual time.

        Args:
            max_budget_s: Optional cap on this tick's budget

        Returns:
            The engine's AdvanceResult; empty while paused
        """
        if not self._playing:
            return AdvanceResult(samples=[], termination=self.engine.termination)

        budget = self.budget_s
        if max_budget_s is not None:
            budget = max(0.0, min(budget, max_budget_s))

        result = self.engine.advance(budget)
        self.ticks += 1
        if result.termination.is_terminal:
            self._playing = False
        return result

    def status_text(self) -> str:
        """Short run status for display."""
        reason = self.engine.termination
        if reason is TerminationReason.COMPLETED:
            return "Completed"
        if reason in (TerminationReason.BATTERY_DEPLETED, TerminationReason.OVERHEATED):
            return "Stopped"
        return "Running" if self._playing else "Paused"

    def run(self, run_config: RunConfig) -> RunResult:
        """
        Play headlessly until the run terminates or hits run_config.max_time_s.

        Ticks are issued back to back; wall-clock time plays no part.

        Args:
            run_config: Run name and virtual-time cap

        Returns:
            RunResult with the full sample history of this run
        """
        start_time = datetime.now(timezone.utc).isoformat()

        self.play()
        t_start = self.engine.elapsed_s
        start_temp = self.engine.temperature_c
        first_event = len(self.engine.events)
        samples: list[Sample] = []

        while self._playing:
            remaining = run_config.max_time_s - self.engine.elapsed_s
            if remaining <= 0:
                break
            result = self.tick(max_budget_s=remaining)
            samples.extend(result.samples)
            if not result.samples:
                break

        if self._playing:
            self.pause()

        finish_time = datetime.now(timezone.utc).isoformat()
        events = self.engine.events[first_event:]

        throttled_s = 0.0
        t_prev = t_start
        for s in samples:
            if s.throttling:
                throttled_s += s.elapsed_s - t_prev
            t_prev = s.elapsed_s

        metrics = RunMetrics(
            scenario_name=run_config.name,
            start_time=start_time,
            finish_time=finish_time,
            ticks=self.ticks,
            total_samples=len(samples),
            elapsed_s=self.engine.elapsed_s,
            termination=self.engine.termination.value,
            final_temp_c=self.engine.temperature_c,
            peak_temp_c=max([start_temp] + [s.temp_c for s in samples]),
            energy_wh=self.engine.energy_wh,
            battery_pct=self.engine.battery_pct,
            remaining_gi=self.engine.remaining_gi,
            progress_pct=self.engine.progress_pct,
            throttled_s=throttled_s,
            pstate_changes=sum(1 for e in events if e.kind == "pstate_change"),
        )

        return RunResult(
            metrics=metrics,
            samples=samples,
            events=events,
            termination=self.engine.termination,
        )

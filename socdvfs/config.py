from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from socdvfs.control.opp import OperatingPointTable, reference_table


def _clean_path_name(path_name: str) -> str:
    # Remove unsafe characters from directory name
    cleaned = [c if (c.isalnum() or c in ("-", "_")) else "_" for c in path_name]
    return "".join(cleaned).strip("_")


def _require_finite(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number")
    return value


# slots are used to enforce good interface hygiene, disables dynamic attribute creation.
@dataclass(frozen=True, slots=True)
class RunConfig:
    """
    RunConfig

    Definitions and configuration for a headless playback run

    Params:
    - name (str) : run name, used for the artifact directory
    - max_time_s (float) : virtual-time cap; the run stops here if nothing terminates it
    - tick_s (float) : wall-clock tick the playback driver emulates
    - out_dir (Path) : output directory for run artifacts
                       default: artifacts/runs/<timestamp>_<name>
    """
    name: str
    max_time_s: float
    tick_s: float
    out_dir: Path

    @staticmethod
    def from_args(
        *,
        name: str,
        max_time_s: float = 3600.0,
        tick_s: float = 0.1,
        out_dir: str | None = None,
    ) -> "RunConfig":
        if not isinstance(name, str) or not name:
            raise ValueError("name must be a non-empty string")
        max_time_s = _require_finite("max_time_s", max_time_s)
        tick_s = _require_finite("tick_s", tick_s)
        if max_time_s < 0:
            raise ValueError("max_time_s must be >= 0")
        if tick_s <= 0:
            raise ValueError("tick_s must be > 0")

        if out_dir is not None:
            out_dir = Path(out_dir)
        else:
            """
            Default output location:
            artifacts/runs/<timestamp>_<name>
            Timestamp is UTC in YYYYmmdd_HHMMSS format.
            """
            ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
            clean_name = _clean_path_name(name)

            # Check if name is empty after cleaning
            if not clean_name:
                clean_name = "run"
            out_dir = Path("artifacts").joinpath(f"runs/{ts}_{clean_name}")

        return RunConfig(
            name=name,
            max_time_s=max_time_s,
            tick_s=tick_s,
            out_dir=out_dir,
        )


@dataclass(frozen=True, slots=True)
class SocConfig:
    """
    User-facing knobs for one simulation run.

    Immutable snapshot; the engine picks up a new one only on reset() or an
    explicit update_config(). Use from_args() to get the caller-side
    clamping (C_eff floor, grace floor, mix range) applied.
    """
    workload_mix: float = 0.9            # 0 = memory-bound, 1 = compute-bound
    ceff_nf: float = 1.2                 # Effective switched capacitance (nF ~ W/(V^2*GHz))
    ambient_c: float = 25.0              # Ambient temperature (°C)
    thermal_limit_c: float = 42.0        # Throttle threshold (°C)
    overheat_grace_s: float = 5.0        # Time allowed above limit + margin (s)
    battery_wh: float = 0.75             # Battery capacity (Wh)
    workload_gi: float = 1000.0          # Total work (billion instructions)
    tau_s: float = 60.0                  # Thermal time constant (s)
    manual_override: bool = False        # Bypass the governor
    manual_freq_ghz: float = 2.2         # Manual frequency (GHz)
    manual_vdd_v: float = 0.9            # Manual supply voltage (V)
    speed: float = 75.0                  # Playback speed multiplier (clamped by the driver)

    @staticmethod
    def from_args(
        *,
        workload_mix: float = 0.9,
        ceff_nf: float = 1.2,
        ambient_c: float = 25.0,
        thermal_limit_c: float = 42.0,
        overheat_grace_s: float = 5.0,
        battery_wh: float = 0.75,
        workload_gi: float = 1000.0,
        tau_s: float = 60.0,
        manual_override: bool = False,
        manual_freq_ghz: float = 2.2,
        manual_vdd_v: float = 0.9,
        speed: float = 75.0,
    ) -> "SocConfig":
        # Capacitance and grace have usable floors
        ceff_nf = max(0.1, _require_finite("ceff_nf", ceff_nf))
        overheat_grace_s = max(1.0, _require_finite("overheat_grace_s", overheat_grace_s))

        workload_mix = _require_finite("workload_mix", workload_mix)
        workload_mix = max(0.0, min(1.0, workload_mix))

        ambient_c = _require_finite("ambient_c", ambient_c)
        thermal_limit_c = _require_finite("thermal_limit_c", thermal_limit_c)
        battery_wh = _require_finite("battery_wh", battery_wh)
        workload_gi = _require_finite("workload_gi", workload_gi)
        tau_s = _require_finite("tau_s", tau_s)
        manual_freq_ghz = _require_finite("manual_freq_ghz", manual_freq_ghz)
        manual_vdd_v = _require_finite("manual_vdd_v", manual_vdd_v)
        speed = _require_finite("speed", speed)

        if battery_wh <= 0:
            raise ValueError("battery_wh must be > 0")
        if tau_s <= 0:
            raise ValueError("tau_s must be > 0")
        if workload_gi < 0:
            raise ValueError("workload_gi must be >= 0")

        return SocConfig(
            workload_mix=workload_mix,
            ceff_nf=ceff_nf,
            ambient_c=ambient_c,
            thermal_limit_c=thermal_limit_c,
            overheat_grace_s=overheat_grace_s,
            battery_wh=battery_wh,
            workload_gi=workload_gi,
            tau_s=tau_s,
            manual_override=bool(manual_override),
            manual_freq_ghz=manual_freq_ghz,
            manual_vdd_v=manual_vdd_v,
            speed=speed,
        )


@dataclass(frozen=True, slots=True)
class ModelConfig:
    """
    Fixed model constants for the reference mobile SoC.
    """
    # Leakage power
    p_leak0_w: float = 0.6               # Leakage at reference voltage / temperature (W)
    leak_ref_v: float = 0.8              # Reference voltage for leakage (V)
    leak_ref_c: float = 25.0             # Reference temperature for leakage (°C)
    k_v: float = 2.0                     # Leakage voltage sensitivity (1/V)
    gamma: float = 0.04                  # Leakage temperature sensitivity (1/°C)

    # Performance
    ipc_min: float = 0.5                 # IPC of a memory-bound workload
    ipc_max: float = 2.0                 # IPC of a compute-bound workload

    # Thermal
    r_th_c_per_w: float = 8.0            # Thermal resistance junction-to-ambient (°C/W)

    # Integration
    dt_s: float = 0.25                   # Fixed sub-step size (s)

    # Manual override bounds
    f_min_ghz: float = 0.6
    f_max_ghz: float = 3.5
    v_min_v: float = 0.6
    v_max_v: float = 1.1

    # Governor
    slew_step_s: float = 0.3             # Cooldown after a P-state change (s)
    hysteresis_c: float = 2.0            # Hold band below the thermal limit (°C)
    battery_floor_pct: float = 20.0      # Below this battery %, cap performance
    battery_floor_index: int = 3         # ... at this P-state or slower
    initial_index: int = 2               # P-state after reset

    # Overheat monitor
    overheat_margin_c: float = 5.0       # Margin above thermal limit that counts as overheating
    overheat_decay: float = 2.0          # Accumulator decay rate when below (s per s)

    # Trace retention
    trace_capacity: int = 3000           # Trim the window once it holds more than this
    trace_keep: int = 1500               # ... down to this many newest samples

    pstates: OperatingPointTable = field(default_factory=reference_table)

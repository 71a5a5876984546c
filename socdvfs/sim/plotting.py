"""
Plotting utilities for socdvfs run artifacts.

This module provides functions for generating visualizations from run
results. Plots can be generated directly from RunResult objects or from
artifact files on disk.

Requires matplotlib: pip install socdvfs[plot]
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .interfaces import RunResult


def check_matplotlib_available() -> bool:
    """Check if matplotlib is available."""
    try:
        import matplotlib  # noqa: F401
        return True
    except ImportError:
        return False


def _require_matplotlib() -> None:
    if not check_matplotlib_available():
        raise RuntimeError(
            "matplotlib not installed. Install with: pip install socdvfs[plot]"
        )


def _draw(series: dict[str, list], title: str, thermal_limit_c: float | None):
    """Build the three-panel figure from column lists. Returns (fig, plt)."""
    import matplotlib.pyplot as plt

    t = series["elapsed_s"]
    fig, axes = plt.subplots(3, 1, figsize=(10, 7.5), sharex=True)

    # Panel 1: Power and temperature
    ax1 = axes[0]
    ax1.plot(t, series["power_w"], color="tab:red", linewidth=1.5, label="Power (W)")
    ax1.set_ylabel("Power (W)", color="tab:red")
    ax1.tick_params(axis="y", labelcolor="tab:red")
    ax1_twin = ax1.twinx()
    ax1_twin.plot(t, series["temp_c"], color="tab:blue", linewidth=1.5,
                  linestyle="--", label="Temp (°C)")
    if thermal_limit_c is not None:
        ax1_twin.axhline(y=thermal_limit_c, color="black", linestyle=":",
                         linewidth=1.5, label=f"Limit ({thermal_limit_c:.1f}°C)")
    ax1_twin.set_ylabel("Temperature (°C)", color="tab:blue")
    ax1_twin.tick_params(axis="y", labelcolor="tab:blue")
    ax1.grid(True, alpha=0.3)
    lines1, labels1 = ax1.get_legend_handles_labels()
    lines2, labels2 = ax1_twin.get_legend_handles_labels()
    ax1.legend(lines1 + lines2, labels1 + labels2, loc="upper left")

    # Panel 2: Performance and energy
    ax2 = axes[1]
    ax2.plot(t, series["perf_mips"], color="tab:green", linewidth=1.5, label="Perf (MIPS)")
    ax2.set_ylabel("MIPS", color="tab:green")
    ax2.tick_params(axis="y", labelcolor="tab:green")
    ax2_twin = ax2.twinx()
    ax2_twin.plot(t, series["energy_wh"], color="goldenrod", linewidth=1.5,
                  linestyle="--", label="Energy (Wh)")
    ax2_twin.set_ylabel("Wh", color="goldenrod")
    ax2.grid(True, alpha=0.3)
    lines1, labels1 = ax2.get_legend_handles_labels()
    lines2, labels2 = ax2_twin.get_legend_handles_labels()
    ax2.legend(lines1 + lines2, labels1 + labels2, loc="upper left")

    # Panel 3: Operating point and battery
    ax3 = axes[2]
    ax3.step(t, series["freq_ghz"], where="post", color="tab:purple",
             linewidth=1.5, label="f (GHz)")
    ax3.step(t, series["vdd_v"], where="post", color="tab:gray",
             linewidth=1.5, label="V (V)")
    ax3.set_ylabel("GHz / V")
    ax3_twin = ax3.twinx()
    ax3_twin.plot(t, series["battery_pct"], color="tab:olive", linewidth=1.0,
                  alpha=0.8, label="Battery (%)")
    ax3_twin.set_ylim(-5, 105)
    ax3_twin.set_ylabel("Battery (%)")
    ax3.grid(True, alpha=0.3)
    lines1, labels1 = ax3.get_legend_handles_labels()
    lines2, labels2 = ax3_twin.get_legend_handles_labels()
    ax3.legend(lines1 + lines2, labels1 + labels2, loc="upper right")
    ax3.set_xlabel("Time (s)")

    fig.suptitle(title, fontsize=14, fontweight="bold")
    plt.tight_layout()
    return fig, plt


def _save(fig, plt, output_path: Path, show: bool) -> None:
    plt.savefig(output_path, dpi=150, bbox_inches="tight")
    print(f"Plot saved to: {output_path}")
    if show:
        plt.show()
    plt.close(fig)


_COLUMNS = (
    "elapsed_s", "power_w", "temp_c", "perf_mips",
    "energy_wh", "battery_pct", "freq_ghz", "vdd_v",
)


def plot_simulation_results(
    result: "RunResult",
    output_path: Path | str | None = None,
    show: bool = False,
    title: str | None = None,
    thermal_limit_c: float | None = None,
) -> None:
    """
    Generate a three-panel plot of a run.

    Panels:
    1. Power and temperature (with optional thermal limit line)
    2. Performance and cumulative energy
    3. Frequency / voltage steps and battery level

    Args:
        result: RunResult from a playback run.
        output_path: Path to save the figure (PNG, PDF, etc.).
                     If None, saves to 'simulation_plot.png'.
        show: If True, also display the plot interactively.
        title: Optional title for the figure.
        thermal_limit_c: Draws a horizontal limit line when provided.

    Raises:
        RuntimeError: If matplotlib is not installed.
        ValueError: If the result has no samples.
    """
    _require_matplotlib()

    if not result.samples:
        raise ValueError("No samples in result")

    series = {c: [getattr(s, c) for s in result.samples] for c in _COLUMNS}
    if title is None:
        m = result.metrics
        title = f"socdvfs: {m.scenario_name} ({m.termination} at {m.elapsed_s:.1f} s)"

    fig, plt = _draw(series, title, thermal_limit_c)
    _save(fig, plt, Path(output_path or "simulation_plot.png"), show)


def plot_from_artifacts(
    artifact_dir: Path | str,
    output_path: Path | str | None = None,
    show: bool = False,
) -> None:
    """
    Generate a plot from artifact files on disk.

    Loads metrics.json and timeseries.json from the artifact directory.

    Args:
        artifact_dir: Directory containing the JSON artifacts.
        output_path: Path to save the figure. If None, saves to artifact_dir/plot.png.
        show: If True, also display the plot interactively.

    Raises:
        RuntimeError: If matplotlib is not installed.
        FileNotFoundError: If required artifact files are missing.
    """
    _require_matplotlib()

    artifact_dir = Path(artifact_dir)

    metrics_path = artifact_dir / "metrics.json"
    if not metrics_path.exists():
        raise FileNotFoundError(f"metrics.json not found in {artifact_dir}")
    with metrics_path.open() as f:
        metrics_data = json.load(f)

    timeseries_path = artifact_dir / "timeseries.json"
    if not timeseries_path.exists():
        raise FileNotFoundError(f"timeseries.json not found in {artifact_dir}")
    with timeseries_path.open() as f:
        timeseries_data = json.load(f)

    samples = timeseries_data.get("samples", [])
    if not samples:
        raise ValueError("No samples in timeseries.json")

    series = {c: [s[c] for s in samples] for c in _COLUMNS}

    run_info = metrics_data.get("run", {})
    scenario = run_info.get("scenario_name", "unknown")
    termination = run_info.get("termination", "unknown")
    limit = metrics_data.get("config", {}).get("thermal_limit_c")
    title = f"socdvfs: {scenario} ({termination})"

    fig, plt = _draw(series, title, limit)
    _save(fig, plt, Path(output_path) if output_path else artifact_dir / "plot.png", show)

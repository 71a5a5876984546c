"""
Command-line interface for socdvfs.

Runs a scenario headlessly to termination (or a virtual-time cap), writes
run artifacts and prints a one-line summary.

Usage:
    # Nominal compute workload
    socdvfs --name smoke --scenario nominal

    # Override individual knobs on top of a scenario
    socdvfs --scenario nominal --ambient 35 --tau 30

    # Manual f/V override, with a plot of the run
    socdvfs --manual --freq 3.2 --vdd 1.05 --plot

Entry points:
    - socdvfs: Direct CLI command (from pyproject.toml)
    - python -m socdvfs.cli: Module execution
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

from .config import RunConfig, SocConfig
from .scenarios import SCENARIOS, get_scenario
from .sim.engine import SimulationEngine
from .sim.metrics import write_run_artifacts
from .sim.playback import PlaybackDriver

# CLI flag -> SocConfig field
_KNOBS = {
    "workload_mix": "workload_mix",
    "ceff": "ceff_nf",
    "ambient": "ambient_c",
    "thermal_limit": "thermal_limit_c",
    "grace": "overheat_grace_s",
    "battery_wh": "battery_wh",
    "workload_gi": "workload_gi",
    "tau": "tau_s",
    "freq": "manual_freq_ghz",
    "vdd": "manual_vdd_v",
    "speed": "speed",
}


def _build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser for the CLI.

    Returns:
        Configured ArgumentParser with all supported options.
    """
    p = argparse.ArgumentParser(
        prog="socdvfs",
        description="socdvfs: SoC DVFS governor / thermal / battery simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  socdvfs --scenario nominal
      Run the nominal compute workload to completion

  socdvfs --scenario hot_ambient --plot
      Run with a hot ambient and save a plot next to the artifacts

  socdvfs --manual --freq 3.5 --vdd 1.1 --tau 20
      Bypass the governor and watch the overheat monitor stop the run
""",
    )

    # ─────────────────────────────────────────────────────────────────
    # Run parameters
    # ─────────────────────────────────────────────────────────────────
    p.add_argument(
        "--name",
        type=str,
        default=None,
        help="Run name for the artifact directory (default: scenario name)",
    )
    p.add_argument(
        "--scenario",
        type=str,
        default="nominal",
        choices=sorted(SCENARIOS),
        help="Base scenario (default: %(default)s)",
    )
    p.add_argument(
        "--max-time",
        type=float,
        default=3600.0,
        help="Virtual-time cap in seconds (default: %(default)s)",
    )
    p.add_argument(
        "--tick",
        type=float,
        default=0.1,
        help="Playback tick in seconds (default: %(default)s)",
    )
    p.add_argument(
        "--out-dir",
        type=str,
        default=None,
        help="Output directory (default: artifacts/runs/<timestamp>_<name>)",
    )
    p.add_argument(
        "--plot",
        action="store_true",
        help="Save plot.png in the output directory (requires matplotlib)",
    )
    p.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log termination (-v) and every P-state change (-vv)",
    )

    # ─────────────────────────────────────────────────────────────────
    # Knob overrides (default: take the scenario's value)
    # ─────────────────────────────────────────────────────────────────
    knobs = p.add_argument_group("knobs")
    knobs.add_argument("--workload-mix", type=float, help="0 = memory-bound, 1 = compute-bound")
    knobs.add_argument("--ceff", type=float, help="Effective capacitance (nF), floored at 0.1")
    knobs.add_argument("--ambient", type=float, help="Ambient temperature (°C)")
    knobs.add_argument("--thermal-limit", type=float, help="Throttle threshold (°C)")
    knobs.add_argument("--grace", type=float, help="Overheat grace (s), floored at 1")
    knobs.add_argument("--battery-wh", type=float, help="Battery capacity (Wh)")
    knobs.add_argument("--workload-gi", type=float, help="Workload (billion instructions)")
    knobs.add_argument("--tau", type=float, help="Thermal time constant (s)")
    knobs.add_argument("--manual", action="store_true", help="Manual f/V override")
    knobs.add_argument("--freq", type=float, help="Manual frequency (GHz)")
    knobs.add_argument("--vdd", type=float, help="Manual supply voltage (V)")
    knobs.add_argument("--speed", type=float, help="Playback speed, clamped to 1-50x")

    return p


def _soc_config_from_args(args: argparse.Namespace) -> SocConfig:
    base = dataclasses.asdict(get_scenario(args.scenario))
    for flag, field_name in _KNOBS.items():
        value = getattr(args, flag)
        if value is not None:
            base[field_name] = value
    if args.manual:
        base["manual_override"] = True
    return SocConfig.from_args(**base)


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI entry point.

    Parses arguments, configures the run, plays it to the end, and writes
    artifacts to disk.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code: 0 for success, 2 for invalid configuration
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=(logging.WARNING, logging.INFO, logging.DEBUG)[min(args.verbose, 2)],
        format="%(levelname)s %(name)s: %(message)s",
    )

    # ─────────────────────────────────────────────────────────────────
    # Build configuration
    # ─────────────────────────────────────────────────────────────────
    try:
        soc_config = _soc_config_from_args(args)
        run_config = RunConfig.from_args(
            name=args.name or args.scenario,
            max_time_s=args.max_time,
            tick_s=args.tick,
            out_dir=args.out_dir,
        )
    except ValueError as e:
        print(f"invalid configuration: {e}", file=sys.stderr)
        return 2

    # ─────────────────────────────────────────────────────────────────
    # Run headless playback
    # ─────────────────────────────────────────────────────────────────
    engine = SimulationEngine(soc_config)
    driver = PlaybackDriver(engine, tick_s=run_config.tick_s)
    result = driver.run(run_config)

    # ─────────────────────────────────────────────────────────────────
    # Write artifacts to disk
    # ─────────────────────────────────────────────────────────────────
    write_run_artifacts(
        out_path=run_config.out_dir,
        metrics=result.metrics,
        config=soc_config,
        model=engine.model,
        samples=result.samples,
        events=result.events,
    )
    metrics_file = run_config.out_dir / "metrics.json"

    if args.plot:
        from .sim.plotting import plot_simulation_results

        try:
            plot_simulation_results(
                result,
                output_path=run_config.out_dir / "plot.png",
                thermal_limit_c=soc_config.thermal_limit_c,
            )
        except RuntimeError as e:
            print(f"plot skipped: {e}", file=sys.stderr)

    # ─────────────────────────────────────────────────────────────────
    # Print summary to stdout
    # ─────────────────────────────────────────────────────────────────
    m = result.metrics
    print(f"{m.scenario_name}: ", end="")
    print(f"{m.termination} t={m.elapsed_s:.1f}s ", end="")
    print(f"peak={m.peak_temp_c:.1f}C ", end="")
    print(f"energy={m.energy_wh:.4f}Wh batt={m.battery_pct:.1f}% ", end="")
    print(f"progress={m.progress_pct:.1f}% throttled={m.throttled_s:.1f}s", end="")
    print(f" -> {metrics_file}")

    return 0


# Allow module execution: python -m socdvfs.cli
if __name__ == "__main__":
    sys.exit(main())

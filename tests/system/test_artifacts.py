from __future__ import annotations

import json
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from socdvfs.config import RunConfig, SocConfig
from socdvfs.sim.engine import SimulationEngine
from socdvfs.sim.metrics import write_run_artifacts
from socdvfs.sim.playback import PlaybackDriver


def _run():
    config = SocConfig.from_args(workload_mix=0.1, workload_gi=20.0)
    engine = SimulationEngine(config)
    result = PlaybackDriver(engine).run(RunConfig.from_args(name="artifacts"))
    return engine, result


def test_write_run_artifacts():
    engine, result = _run()

    with TemporaryDirectory() as td:
        out_dir = Path(td).joinpath("run")
        write_run_artifacts(
            out_path=out_dir,
            metrics=result.metrics,
            config=engine.config,
            model=engine.model,
            samples=result.samples,
            events=result.events,
        )

        data = json.loads(out_dir.joinpath("metrics.json").read_text(encoding="utf-8"))
        assert set(data.keys()) == {"run", "config", "model"}

        run = data["run"]
        assert set(run.keys()) >= {
            "scenario_name",
            "start_time",
            "finish_time",
            "termination",
            "elapsed_s",
            "energy_wh",
            "pstate_changes",
        }
        assert run["scenario_name"] == "artifacts"
        assert run["termination"] == "completed"
        assert data["config"]["workload_gi"] == 20.0
        assert data["model"]["dt_s"] == 0.25
        assert len(data["model"]["pstates"]["points"]) == 7

        ts = json.loads(out_dir.joinpath("timeseries.json").read_text(encoding="utf-8"))
        assert len(ts["samples"]) == run["total_samples"]
        assert set(ts["samples"][0].keys()) == {
            "elapsed_s",
            "power_w",
            "temp_c",
            "perf_mips",
            "energy_wh",
            "battery_pct",
            "freq_ghz",
            "vdd_v",
            "p_index",
            "throttling",
        }

        lines = out_dir.joinpath("events.jsonl").read_text(encoding="utf-8").splitlines()
        assert len(lines) == len(result.events)
        last = json.loads(lines[-1])
        assert last["kind"] == "terminated"
        assert last["detail"] == "completed"


def test_metrics_only():
    _, result = _run()
    with TemporaryDirectory() as td:
        out_dir = Path(td)
        write_run_artifacts(out_path=out_dir, metrics=result.metrics)
        data = json.loads(out_dir.joinpath("metrics.json").read_text(encoding="utf-8"))
        assert set(data.keys()) == {"run"}
        assert not out_dir.joinpath("timeseries.json").exists()
        assert not out_dir.joinpath("events.jsonl").exists()


def test_plot_from_artifacts(tmp_path):
    matplotlib = pytest.importorskip("matplotlib")
    matplotlib.use("Agg")
    from socdvfs.sim.plotting import plot_from_artifacts, plot_simulation_results

    engine, result = _run()
    write_run_artifacts(
        out_path=tmp_path,
        metrics=result.metrics,
        config=engine.config,
        samples=result.samples,
    )

    plot_from_artifacts(tmp_path)
    assert tmp_path.joinpath("plot.png").exists()

    direct = tmp_path / "direct.png"
    plot_simulation_results(result, output_path=direct, thermal_limit_c=42.0)
    assert direct.exists()


def test_plot_from_missing_artifacts(tmp_path):
    pytest.importorskip("matplotlib")
    from socdvfs.sim.plotting import plot_from_artifacts

    with pytest.raises(FileNotFoundError):
        plot_from_artifacts(tmp_path)

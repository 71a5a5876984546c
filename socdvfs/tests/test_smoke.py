from __future__ import annotations

import json
from pathlib import Path
from tempfile import TemporaryDirectory

from socdvfs.config import RunConfig, SocConfig
from socdvfs.sim.engine import SimulationEngine
from socdvfs.sim.metrics import write_run_artifacts
from socdvfs.sim.playback import PlaybackDriver


def test_smoke_engine_and_artifacts() -> None:
    cfg = RunConfig.from_args(
        name="smoke",
        max_time_s=10.0,
        tick_s=0.1,
        out_dir=None
    )

    engine = SimulationEngine(SocConfig.from_args(workload_mix=1.0))
    result = PlaybackDriver(engine, speed=10.0).run(cfg)

    # 10 s at 1 s per tick -> 10 ticks of 4 sub-steps
    assert result.metrics.ticks == 10
    assert result.metrics.total_samples == 40
    assert len(result.samples) == 40
    assert result.samples[0].elapsed_s == 0.25
    assert result.termination.value == "running"

    with TemporaryDirectory() as td:
        out_dir = Path(td).joinpath("run")
        write_run_artifacts(
            out_path=out_dir,
            metrics=result.metrics,
            config=engine.config,
            samples=result.samples,
            events=result.events,
        )

        p = out_dir.joinpath("metrics.json")
        assert p.exists()

        data = json.loads(p.read_text(encoding="utf-8"))
        assert "run" in data
        assert "config" in data

        run = data["run"]
        assert set(run.keys()) >= {
            "ticks",
            "total_samples",
            "start_time",
            "finish_time",
            "scenario_name",
        }
        assert run["ticks"] == 10
        assert run["total_samples"] == 40
        assert run["scenario_name"] == "smoke"

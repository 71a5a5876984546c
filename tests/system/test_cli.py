from __future__ import annotations

import json

from socdvfs.cli import main


def test_cli_run_writes_artifacts(tmp_path, capsys):
    out_dir = tmp_path / "run"
    code = main([
        "--name", "cli",
        "--scenario", "memory_bound",
        "--workload-gi", "20",
        "--out-dir", str(out_dir),
    ])
    assert code == 0

    data = json.loads(out_dir.joinpath("metrics.json").read_text(encoding="utf-8"))
    assert data["run"]["scenario_name"] == "cli"
    assert data["run"]["termination"] == "completed"
    assert data["config"]["workload_mix"] == 0.1
    assert data["config"]["workload_gi"] == 20.0
    assert out_dir.joinpath("timeseries.json").exists()

    out = capsys.readouterr().out
    assert out.startswith("cli: completed")


def test_cli_manual_override(tmp_path):
    out_dir = tmp_path / "manual"
    code = main([
        "--manual", "--freq", "3.5", "--vdd", "1.1",
        "--tau", "20", "--grace", "2", "--workload-gi", "1e6",
        "--out-dir", str(out_dir),
    ])
    assert code == 0
    data = json.loads(out_dir.joinpath("metrics.json").read_text(encoding="utf-8"))
    assert data["config"]["manual_override"] is True
    assert data["run"]["termination"] == "overheat"


def test_cli_time_cap(tmp_path):
    out_dir = tmp_path / "capped"
    assert main(["--max-time", "5", "--out-dir", str(out_dir)]) == 0
    data = json.loads(out_dir.joinpath("metrics.json").read_text(encoding="utf-8"))
    assert data["run"]["termination"] == "running"
    assert data["run"]["elapsed_s"] == 5.0


def test_cli_invalid_config(tmp_path, capsys):
    code = main(["--tau", "0", "--out-dir", str(tmp_path / "bad")])
    assert code == 2
    assert "invalid configuration" in capsys.readouterr().err
    assert not (tmp_path / "bad").exists()

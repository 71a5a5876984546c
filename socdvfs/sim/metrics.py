"""
Artifact writing for socdvfs simulation runs.

Artifacts are first-class outputs of a run, enabling:
- Regression testing (compare outputs across runs)
- Offline analysis (load and analyze without re-running)
- Integration with external tools (JSON/JSONL formats)

Artifact files produced:
- metrics.json: Run summary, configuration and model constants
- timeseries.json: Per-sub-step samples
- events.jsonl: DVFS events (P-state changes, throttle edges, termination)

Example artifact directory structure:
```
artifacts/runs/20240115_120000_nominal/
├── metrics.json       # Run summary
├── timeseries.json    # Sample history
└── events.jsonl       # DVFS event stream
```
"""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path

from socdvfs.config import ModelConfig, SocConfig
from socdvfs.sim.events import write_events_jsonl
from socdvfs.sim.interfaces import DvfsEvent, RunMetrics, Sample


def write_run_artifacts(
    *,
    out_path: Path,
    metrics: RunMetrics,
    config: SocConfig | None = None,
    model: ModelConfig | None = None,
    samples: list[Sample] | None = None,
    events: list[DvfsEvent] | None = None,
) -> None:
    """
    Write all run artifacts to disk.

    Creates the output directory (if needed) and writes each artifact that
    has data.

    Args:
        out_path: Output directory path. Created with parents if missing.
        metrics: Run summary. Always written.
        config: Knobs the run used, embedded in metrics.json when given.
        model: Model constants, embedded in metrics.json when given.
        samples: Sample history; writes timeseries.json when non-empty.
        events: DVFS events; writes events.jsonl when non-empty.

    Example:
        >>> write_run_artifacts(
        ...     out_path=Path("artifacts/runs/my_run"),
        ...     metrics=result.metrics,
        ...     config=engine.config,
        ...     samples=result.samples,
        ...     events=result.events,
        ... )
    """
    out_path = Path(out_path)
    out_path.mkdir(parents=True, exist_ok=True)

    _write_metrics_json(out_path, metrics, config, model)

    if samples is not None and len(samples) > 0:
        _write_timeseries_json(out_path, samples)

    if events is not None and len(events) > 0:
        write_events_jsonl(out_path, events)


def _write_metrics_json(
    out_path: Path,
    metrics: RunMetrics,
    config: SocConfig | None,
    model: ModelConfig | None,
) -> None:
    """
    Write metrics.json artifact.

    Schema:
    {
        "run": {
            "scenario_name": str,
            "start_time": str (ISO 8601),
            "finish_time": str (ISO 8601),
            "termination": str,
            "elapsed_s": float,
            ...
        },
        "config": {...} | absent,
        "model": {...} | absent
    }
    """
    payload: dict = {"run": asdict(metrics)}
    if config is not None:
        payload["config"] = asdict(config)
    if model is not None:
        payload["model"] = asdict(model)

    metrics_path = out_path / "metrics.json"
    metrics_path.write_text(
        json.dumps(payload, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )


def _write_timeseries_json(
    out_path: Path,
    samples: list[Sample],
) -> None:
    """
    Write timeseries.json artifact.

    Schema:
    {
        "samples": [
            {
                "elapsed_s": float,
                "power_w": float,
                "temp_c": float,
                "perf_mips": float,
                "energy_wh": float,
                "battery_pct": float,
                "freq_ghz": float,
                "vdd_v": float,
                "p_index": int | null,
                "throttling": bool
            },
            ...
        ]
    }
    """
    timeseries_payload = {
        "samples": [asdict(s) for s in samples],
    }
    timeseries_path = out_path / "timeseries.json"
    timeseries_path.write_text(
        json.dumps(timeseries_payload, indent=2) + "\n",
        encoding="utf-8",
    )

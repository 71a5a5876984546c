from __future__ import annotations

import json
import tempfile
from pathlib import Path

from socdvfs.sim.events import EventDetector, write_events_jsonl
from socdvfs.sim.interfaces import Sample, TerminationReason


def _sample(t: float, p_index: int | None = 2, throttling: bool = False,
            freq_ghz: float = 2.2) -> Sample:
    return Sample(
        elapsed_s=t,
        power_w=2.0,
        temp_c=40.0,
        perf_mips=4000.0,
        energy_wh=0.01,
        battery_pct=90.0,
        freq_ghz=freq_ghz,
        vdd_v=0.92,
        p_index=p_index,
        throttling=throttling,
    )


def test_first_sample_emits_nothing():
    detector = EventDetector()
    assert detector.observe(_sample(0.25, throttling=True)) == []


def test_pstate_change():
    detector = EventDetector()
    detector.observe(_sample(0.25, p_index=2))
    events = detector.observe(_sample(0.5, p_index=1, freq_ghz=2.6))
    assert len(events) == 1
    assert events[0].kind == "pstate_change"
    assert events[0].detail == "P2->P1"
    assert events[0].elapsed_s == 0.5


def test_manual_transition_detail():
    detector = EventDetector()
    detector.observe(_sample(0.25, p_index=2))
    events = detector.observe(_sample(0.5, p_index=None, freq_ghz=3.5))
    assert events[0].detail == "P2->manual"


def test_throttle_edges():
    detector = EventDetector()
    detector.observe(_sample(0.25))
    on = detector.observe(_sample(0.5, throttling=True))
    held = detector.observe(_sample(0.75, throttling=True))
    off = detector.observe(_sample(1.0))
    assert [e.kind for e in on] == ["throttle_on"]
    assert held == []
    assert [e.kind for e in off] == ["throttle_off"]


def test_reset_forgets_previous():
    detector = EventDetector()
    detector.observe(_sample(0.25, p_index=2))
    detector.reset()
    assert detector.observe(_sample(0.25, p_index=5)) == []


def test_terminated_event():
    event = EventDetector().terminated(_sample(3.0), TerminationReason.OVERHEATED)
    assert event.kind == "terminated"
    assert event.detail == "overheat"


def test_write_events_jsonl():
    detector = EventDetector()
    detector.observe(_sample(0.25))
    events = detector.observe(_sample(0.5, p_index=3, throttling=True, freq_ghz=1.8))

    with tempfile.TemporaryDirectory() as tmpdir:
        write_events_jsonl(Path(tmpdir), events)
        lines = Path(tmpdir, "events.jsonl").read_text(encoding="utf-8").splitlines()

    assert len(lines) == 2
    records = [json.loads(line) for line in lines]
    assert records[0]["kind"] == "pstate_change"
    assert records[1]["kind"] == "throttle_on"
    assert records[0]["p_index"] == 3


def test_no_events_no_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        write_events_jsonl(Path(tmpdir), [])
        assert not Path(tmpdir, "events.jsonl").exists()

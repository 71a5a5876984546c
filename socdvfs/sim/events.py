from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path

from socdvfs.sim.interfaces import DvfsEvent, Sample, TerminationReason


class EventDetector:
    """
    Edge detector that turns the sample stream into discrete DVFS events.

    Compares each sample against the previous one and emits P-state changes
    and throttle on/off edges; the engine adds a "terminated" event when a
    run ends.
    """

    def __init__(self) -> None:
        self._prev: Sample | None = None

    def reset(self) -> None:
        self._prev = None

    def observe(self, sample: Sample) -> list[DvfsEvent]:
        """
        Detect events raised by a new sample.

        Args:
            sample: The sample just produced

        Returns:
            Events in the order they occurred (possibly empty)
        """
        prev = self._prev
        self._prev = sample
        if prev is None:
            return []

        events: list[DvfsEvent] = []
        if sample.p_index != prev.p_index or sample.freq_ghz != prev.freq_ghz:
            events.append(_event(
                sample,
                "pstate_change",
                f"{_pname(prev.p_index)}->{_pname(sample.p_index)}",
            ))
        if sample.throttling and not prev.throttling:
            events.append(_event(sample, "throttle_on"))
        elif prev.throttling and not sample.throttling:
            events.append(_event(sample, "throttle_off"))
        return events

    def terminated(self, sample: Sample, reason: TerminationReason) -> DvfsEvent:
        return _event(sample, "terminated", reason.value)


def _pname(index: int | None) -> str:
    return "manual" if index is None else f"P{index}"


def _event(sample: Sample, kind: str, detail: str = "") -> DvfsEvent:
    return DvfsEvent(
        elapsed_s=sample.elapsed_s,
        kind=kind,
        p_index=sample.p_index,
        freq_ghz=sample.freq_ghz,
        vdd_v=sample.vdd_v,
        temp_c=sample.temp_c,
        detail=detail,
    )


def write_events_jsonl(out_path: Path, events: list[DvfsEvent]) -> None:
    """
    Write events to JSONL format (one JSON object per line).

    JSONL is efficient for streaming and appending.

    Args:
        out_path: Output directory
        events: List of DVFS events to write
    """
    if len(events) == 0:
        return

    out_path = Path(out_path)
    out_path.mkdir(parents=True, exist_ok=True)

    events_file = out_path.joinpath("events.jsonl")
    with events_file.open("w", encoding="utf-8") as f:
        for event in events:
            json.dump(asdict(event), f, sort_keys=True)
            f.write("\n")

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class OperatingPoint:
    """
    A single DVFS P-state.
    """
    freq_ghz: float         # Core clock (GHz)
    vdd_v: float            # Supply voltage (V)


@dataclass(frozen=True, slots=True)
class OperatingPointTable:
    """
    Ordered P-state table, index 0 is the highest performance / power point.

    Frequencies and voltages must both be monotonically non-increasing with
    index so that "higher index" always means "slower and cooler".
    """
    points: tuple[OperatingPoint, ...]

    def __post_init__(self) -> None:
        if len(self.points) == 0:
            raise ValueError("operating point table must not be empty")
        for i in range(1, len(self.points)):
            prev, cur = self.points[i - 1], self.points[i]
            if cur.freq_ghz > prev.freq_ghz:
                raise ValueError(
                    f"frequency must be non-increasing: P{i} ({cur.freq_ghz} GHz) "
                    f"> P{i - 1} ({prev.freq_ghz} GHz)"
                )
            if cur.vdd_v > prev.vdd_v:
                raise ValueError(
                    f"voltage must be non-increasing: P{i} ({cur.vdd_v} V) "
                    f"> P{i - 1} ({prev.vdd_v} V)"
                )

    def __len__(self) -> int:
        return len(self.points)

    def __getitem__(self, index: int) -> OperatingPoint:
        return self.points[index]

    @property
    def lowest_index(self) -> int:
        """Index of the slowest / lowest-power entry."""
        return len(self.points) - 1

    def clamp_index(self, index: int) -> int:
        return max(0, min(self.lowest_index, index))

    def target_index(self, workload_mix: float) -> int:
        """
        Workload-derived target P-state.

        The table is split evenly by (1 - mix): a pure compute workload
        (mix=1) targets P0, a pure memory-bound one (mix=0) the last entry.
        Halves round up.
        """
        idx = math.floor((1.0 - workload_mix) * self.lowest_index + 0.5)
        return self.clamp_index(idx)


def reference_table() -> OperatingPointTable:
    """Seven-entry mobile SoC P-state table used by the default model."""
    return OperatingPointTable(
        points=(
            OperatingPoint(freq_ghz=3.0, vdd_v=1.05),
            OperatingPoint(freq_ghz=2.6, vdd_v=0.98),
            OperatingPoint(freq_ghz=2.2, vdd_v=0.92),
            OperatingPoint(freq_ghz=1.8, vdd_v=0.86),
            OperatingPoint(freq_ghz=1.4, vdd_v=0.80),
            OperatingPoint(freq_ghz=1.0, vdd_v=0.74),
            OperatingPoint(freq_ghz=0.8, vdd_v=0.70),
        )
    )

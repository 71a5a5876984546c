"""
socdvfs: Closed-loop DVFS governor simulator for a System-on-Chip.

Features:
- Plant models: dynamic + leakage power, single-node thermal RC, workload, battery
- Governor: P-state table with thermal throttle, hysteresis, battery floor and slew limit
- Overheat monitor with grace period and decay
- Virtual-time engine with bounded trace and tick-based playback
- JSON/JSONL run artifacts and optional matplotlib plots
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"

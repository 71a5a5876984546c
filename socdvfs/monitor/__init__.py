"""
Safety monitors.

Stateful detectors that watch the plant and raise termination conditions.
"""

from .overheat import OverheatMonitor, OverheatParams, OverheatState

__all__ = ["OverheatMonitor", "OverheatParams", "OverheatState"]

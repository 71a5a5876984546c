from __future__ import annotations

from socdvfs.control.governor import DvfsGovernor, GovernorParams
from socdvfs.control.interfaces import (
    Governor,
    GovernorInputs,
    GovernorOutputs,
    GovernorState,
)
from socdvfs.control.opp import OperatingPoint, OperatingPointTable, reference_table
from socdvfs.control.rules import DEFAULT_RULES, OverrideRule, RuleContext, apply_rules

__all__ = [
    "Governor",
    "GovernorInputs",
    "GovernorOutputs",
    "GovernorState",
    "DvfsGovernor",
    "GovernorParams",
    "OperatingPoint",
    "OperatingPointTable",
    "reference_table",
    "DEFAULT_RULES",
    "OverrideRule",
    "RuleContext",
    "apply_rules",
]

from __future__ import annotations

from dataclasses import dataclass

from socdvfs.plant.battery import EnergyState
from socdvfs.plant.thermal import ThermalState
from socdvfs.plant.workload import WorkloadState


@dataclass(frozen=True, slots=True)
class PlantInputs:
    """
    Inputs to the plant model chain.
    """
    freq_ghz: float         # Active frequency (GHz)
    vdd_v: float            # Active supply voltage (V)
    dt_s: float             # Time step (seconds)


@dataclass(frozen=False, slots=True)
class PlantState:
    """
    Continuous plant state carried from one sub-step to the next.
    """
    thermal: ThermalState
    workload: WorkloadState
    energy: EnergyState


@dataclass(frozen=True, slots=True)
class PlantOutputs:
    """
    Outputs from the plant model chain.
    """
    power_w: float          # Total power (W)
    dynamic_w: float        # Switching power (W)
    leakage_w: float        # Leakage power (W)
    temp_c: float           # Temperature after the step (°C)
    steady_state_c: float   # Temperature this power would settle at (°C)
    perf_gips: float        # Instruction rate (GIPS)
    remaining_gi: float     # Remaining work (billion instructions)
    completed: bool         # Remaining work reached zero
    energy_wh: float        # Energy consumed since reset (Wh)
    battery_pct: float      # Remaining battery [0, 100]
    depleted: bool          # Consumed energy reached capacity

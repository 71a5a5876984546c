from __future__ import annotations

from socdvfs.plant.battery import (
    BatteryParams,
    EnergyState,
    battery_pct,
    is_depleted,
    step_energy,
)
from socdvfs.plant.interfaces import PlantInputs, PlantOutputs, PlantState
from socdvfs.plant.power import PowerParams, activity_factor, eval_power
from socdvfs.plant.thermal import (
    ThermalParams,
    ThermalState,
    steady_state_temp,
    step_thermal,
)
from socdvfs.plant.workload import (
    WorkloadParams,
    WorkloadState,
    eval_performance,
    step_workload,
)

__all__ = [
    "PlantInputs",
    "PlantOutputs",
    "PlantState",
    "PowerParams",
    "ThermalParams",
    "ThermalState",
    "WorkloadParams",
    "WorkloadState",
    "BatteryParams",
    "EnergyState",
    "activity_factor",
    "eval_power",
    "step_thermal",
    "steady_state_temp",
    "eval_performance",
    "step_workload",
    "step_energy",
    "battery_pct",
    "is_depleted",
    "eval_plant_chain",
]


def eval_plant_chain(
    plant_state: PlantState,
    inputs: PlantInputs,
    power_params: PowerParams,
    thermal_params: ThermalParams,
    workload_params: WorkloadParams,
    battery_params: BatteryParams,
) -> tuple[PlantState, PlantOutputs]:
    """
    Evaluate the complete plant model chain for one sub-step.

    This function chains together the power, thermal, workload and battery
    models. Power is evaluated at the temperature the step starts from; the
    thermal, workload and energy states are then evolved forward by dt.

    Args:
        plant_state: Current plant state (thermal, workload, energy)
        inputs: Plant inputs (active f/V, dt)
        power_params: Power model parameters
        thermal_params: Thermal model parameters
        workload_params: Workload performance parameters
        battery_params: Battery parameters

    Returns:
        Tuple of (new_plant_state, plant_outputs)
    """
    # Step 1: Power at the operating point and current temperature
    power = eval_power(
        freq_ghz=inputs.freq_ghz,
        vdd_v=inputs.vdd_v,
        temp_c=plant_state.thermal.temp_c,
        p=power_params,
    )

    # Step 2: Update thermal state with that power held over the step
    new_thermal = step_thermal(
        plant_state.thermal,
        dt_s=inputs.dt_s,
        power_w=power.total_w,
        p=thermal_params,
    )

    # Step 3: Retire work at the operating point's instruction rate
    perf_gips = eval_performance(inputs.freq_ghz, workload_params)
    new_workload, completed = step_workload(
        plant_state.workload,
        dt_s=inputs.dt_s,
        perf_gips=perf_gips,
    )

    # Step 4: Draw energy from the battery
    new_energy = step_energy(
        plant_state.energy,
        dt_s=inputs.dt_s,
        power_w=power.total_w,
    )

    new_state = PlantState(
        thermal=new_thermal,
        workload=new_workload,
        energy=new_energy,
    )

    # Combine outputs
    plant_outputs = PlantOutputs(
        power_w=power.total_w,
        dynamic_w=power.dynamic_w,
        leakage_w=power.leakage_w,
        temp_c=new_thermal.temp_c,
        steady_state_c=steady_state_temp(power.total_w, thermal_params),
        perf_gips=perf_gips,
        remaining_gi=new_workload.remaining_gi,
        completed=completed,
        energy_wh=new_energy.consumed_wh,
        battery_pct=battery_pct(new_energy, battery_params),
        depleted=is_depleted(new_energy, battery_params),
    )

    return new_state, plant_outputs

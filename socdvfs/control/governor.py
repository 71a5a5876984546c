from __future__ import annotations

from dataclasses import dataclass

from socdvfs.control.interfaces import GovernorInputs, GovernorOutputs, GovernorState
from socdvfs.control.opp import OperatingPointTable, reference_table
from socdvfs.control.rules import DEFAULT_RULES, OverrideRule, RuleContext, apply_rules


@dataclass
class GovernorParams:
    """
    Parameters for the DVFS governor.
    """
    slew_step_s: float = 0.3            # Cooldown after any P-state change (s)
    hysteresis_c: float = 2.0           # Hold band below the thermal limit (°C)
    battery_floor_pct: float = 20.0     # Battery % below which performance is capped
    battery_floor_index: int = 3        # Fastest P-state allowed on low battery
    initial_index: int = 2              # P-state after reset
    f_min_ghz: float = 0.6              # Manual override frequency bounds
    f_max_ghz: float = 3.5
    v_min_v: float = 0.6                # Manual override voltage bounds
    v_max_v: float = 1.1


class DvfsGovernor:
    """
    Hysteretic, slew-limited DVFS governor over a P-state table.

    Control law (automatic mode):
    - Target P-state from the workload mix (compute-heavy -> faster)
    - Override rules (thermal throttle, hysteresis hold, battery floor)
      raise the desired index in precedence order
    - At most one table step toward the desired index, and only once the
      slew cooldown has expired; every accepted change restarts it

    Manual override bypasses all of the above and clamps the requested f/V
    to the configured bounds. The discrete state is returned unchanged in
    that mode, so automatic control resumes from the last index.

    The governor itself holds only configuration; its state is passed in and
    returned by step().
    """

    def __init__(
        self,
        table: OperatingPointTable | None = None,
        params: GovernorParams | None = None,
        rules: tuple[OverrideRule, ...] = DEFAULT_RULES,
    ):
        """
        Initialize the governor.

        Args:
            table: P-state table (uses the reference table if None)
            params: Governor parameters (uses defaults if None)
            rules: Ordered override rules
        """
        self.table = table or reference_table()
        self.params = params or GovernorParams()
        self.rules = rules

    def initial_state(self) -> GovernorState:
        return GovernorState(
            index=self.table.clamp_index(self.params.initial_index),
            cooldown_s=0.0,
        )

    def step(
        self,
        state: GovernorState,
        inputs: GovernorInputs,
    ) -> tuple[GovernorState, GovernorOutputs]:
        """
        Decide the operating point for one sub-step.

        Args:
            state: Governor state at the start of the step
            inputs: Observations from before this step's plant update

        Returns:
            (new_state, outputs); the input state is not mutated
        """
        if inputs.manual_override:
            freq = max(self.params.f_min_ghz, min(self.params.f_max_ghz, inputs.manual_freq_ghz))
            vdd = max(self.params.v_min_v, min(self.params.v_max_v, inputs.manual_vdd_v))
            return state, GovernorOutputs(freq_ghz=freq, vdd_v=vdd, index=None)

        cooldown = max(0.0, state.cooldown_s - inputs.dt_s)
        cur = state.index

        ctx = RuleContext(
            current_index=cur,
            lowest_index=self.table.lowest_index,
            temp_c=inputs.temp_c,
            thermal_limit_c=inputs.thermal_limit_c,
            hysteresis_c=self.params.hysteresis_c,
            battery_pct=inputs.battery_pct,
            battery_floor_pct=self.params.battery_floor_pct,
            battery_floor_index=self.params.battery_floor_index,
        )
        decision = apply_rules(ctx, self.table.target_index(inputs.workload_mix), self.rules)
        desired = decision.desired_index

        # Slew limit: one table step per cooldown window
        index = cur
        if cooldown == 0.0:
            if desired < cur:
                index = cur - 1
            elif desired > cur:
                index = cur + 1

        changed = index != cur
        if changed:
            cooldown = self.params.slew_step_s

        point = self.table[index]
        return GovernorState(index=index, cooldown_s=cooldown), GovernorOutputs(
            freq_ghz=point.freq_ghz,
            vdd_v=point.vdd_v,
            index=index,
            thermally_triggered=decision.thermally_triggered,
            changed=changed,
            desired_index=desired,
            rules_fired=decision.rules_fired,
        )

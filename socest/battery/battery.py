import logging
import math
import numbers

from socest.battery.cell import CellType
from socest.battery.state import BatteryState
from socest.errors import InvalidArgumentError
from socest.uncertain.value import maximum, point

logger = logging.getLogger(__name__)


class Battery:
    def __init__(self, cell: CellType, capacity_mah: float) -> None:
        if cell is None:
            raise InvalidArgumentError("battery needs a cell model")
        self.cell = cell
        self.state = self.initialize_state(capacity_mah)

    def initialize_state(self, capacity_mah: float) -> BatteryState:
        """Fully charged, alive battery of the given rated capacity in mAh."""
        if not isinstance(capacity_mah, numbers.Real) or not math.isfinite(capacity_mah) or capacity_mah <= 0:
            raise InvalidArgumentError(f"capacity must be a positive number of mAh, got {capacity_mah!r}")

        electrical = self.cell.electrical
        total_capacity = 3600 * capacity_mah / 1000  # mAh -> C

        return BatteryState(
            total_capacity=total_capacity,
            remaining_capacity=total_capacity,
            soc=1.0,
            current=0.0,
            current_old=0.0,
            voltage=electrical.full_voltage,
            voltage_expended=electrical.expended_voltage,
            current_leak=electrical.leak_current,
            time_now=0.0,
            time_old=0.0,
            dead=False,
        )

    def update(self, time_now: float, current_load, voltage_load) -> None:
        """
        Input
            time_now: float
                Simulation time in s, not earlier than the previous update
            current_load: float | UncertainValue
                Current drawn at the load in A
            voltage_load: float | UncertainValue
                Voltage at the load in V
        """
        state: BatteryState = self.state

        if state.dead:
            return
        if time_now < state.time_old:
            raise InvalidArgumentError(f"time went backwards: {time_now} < {state.time_old}")

        # battery current from energy conservation, p_load = v_batt * i_batt
        current = (voltage_load * current_load) / state.voltage + state.current_leak

        # explicit Euler step, lagged by one sample
        remaining_capacity = state.remaining_capacity - state.current_old * (time_now - state.time_old)
        soc = maximum(remaining_capacity / state.total_capacity, 0.0)
        voltage = self.cell.soc_to_voltage(soc)

        # update state
        state.time_now = time_now
        state.current = current
        state.remaining_capacity = remaining_capacity
        state.soc = soc
        state.voltage = voltage
        state.dead = self.is_expended(voltage)
        state.current_old = current
        state.time_old = time_now

        if state.dead:
            logger.info("battery expended at t=%.0f s (soc %.4f, %.3f V)", time_now, point(soc), point(voltage))

    def set_soc(self, soc) -> None:
        """Overwrite the state of charge, e.g. with a fused estimate."""
        state: BatteryState = self.state

        soc = maximum(soc, 0.0)
        state.soc = soc
        state.remaining_capacity = soc * state.total_capacity
        state.voltage = self.cell.soc_to_voltage(soc)

        if self.is_expended(state.voltage):
            if not state.dead:
                logger.info("battery expended after soc override (soc %.4f)", point(soc))
            state.dead = True

    def is_expended(self, voltage) -> bool:
        # a branch is one decision for the whole ensemble, taken on its point estimate
        return point(voltage) <= self.state.voltage_expended

    @property
    def dead(self) -> bool:
        return self.state.dead

    @property
    def soc(self):
        return self.state.soc

    @property
    def voltage(self):
        return self.state.voltage

    @property
    def nominal_capacity(self) -> float:
        return self.state.total_capacity

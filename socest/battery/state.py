from dataclasses import dataclass

from socest.uncertain.value import UncertainValue

Quantity = float | UncertainValue


@dataclass(slots=True)
class BatteryState:
    total_capacity: float  # C
    remaining_capacity: Quantity  # C
    soc: Quantity  # p.u.
    current: Quantity  # A
    current_old: Quantity  # A
    voltage: Quantity  # V
    voltage_expended: float  # V
    current_leak: float  # A
    time_now: float  # s
    time_old: float  # s
    dead: bool

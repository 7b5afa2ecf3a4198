from dataclasses import dataclass

from socest.battery.cell import CellType
from socest.estimation.estimator import Estimator
from socest.sensor.sensor import SensorModel
from socest.uncertain.value import UncertainValue, std

DEFAULT_VOLTAGES = (4.10, 3.8, 2.7)  # V


@dataclass(slots=True)
class DirectMappingRecord:
    """
    Attributes:
        index: Position of the true voltage in the test set.
        voltage_measured: Noisy voltage reading in V.
        soc: Mapped state of charge in %.
        soc_std: Standard deviation of soc in %.
    """

    index: int
    voltage_measured: float | UncertainValue
    soc: float | UncertainValue
    soc_std: float


class DirectMapping(Estimator):
    """Read the voltage sensor and map the reading straight through the discharge curve."""

    name = "direct_mapping"

    def __init__(self, cell: CellType, sensors: SensorModel, voltages=DEFAULT_VOLTAGES) -> None:
        super().__init__(cell, sensors)
        self.voltages = tuple(voltages)

    def run(self) -> list[DirectMappingRecord]:
        records = []
        for index, voltage_true in enumerate(self.voltages):
            voltage_measured = self.sensors.measure_voltage(voltage_true)
            soc = self.cell.voltage_to_soc(voltage_measured)
            records.append(
                DirectMappingRecord(
                    index=index,
                    voltage_measured=voltage_measured,
                    soc=soc,
                    soc_std=std(soc),
                )
            )
        return records

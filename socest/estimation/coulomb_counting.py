import logging
from dataclasses import dataclass

from socest.battery.battery import Battery
from socest.estimation.estimator import DischargeEstimator
from socest.uncertain.value import UncertainValue, std

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CoulombCountingRecord:
    """
    Attributes:
        time: Simulation time in s.
        current_measured: Noisy load current reading in A.
        soc: Coulomb-counted state of charge in p.u.
        soc_std: Standard deviation of soc in p.u.
    """

    time: float
    current_measured: float | UncertainValue
    soc: float | UncertainValue
    soc_std: float


class CoulombCounting(DischargeEstimator):
    """Integrate the measured load current until the battery is expended."""

    name = "coulomb_counting"

    def run(self) -> list[CoulombCountingRecord]:
        battery = Battery(self.cell, self.capacity_mah)
        records = []
        time = 0.0

        while not battery.dead:
            self.check_steps(len(records))
            time += self.time_step

            current_true = self.draw_current()
            current_measured = self.sensors.measure_current(current_true)

            battery.update(time, current_measured, self.voltage_load)

            records.append(
                CoulombCountingRecord(
                    time=time,
                    current_measured=current_measured,
                    soc=battery.soc,
                    soc_std=std(battery.soc),
                )
            )

        logger.info("%s: battery expended after %d steps", self.name, len(records))
        return records

from abc import ABC, abstractmethod

import numpy as np

from socest.battery.cell import CellType
from socest.errors import InvalidArgumentError
from socest.sensor.sensor import SensorModel
from socest.uncertain.value import UncertainValue, sample


class Estimator(ABC):
    """Abstract base class for soc estimation strategies.

    Each call to :meth:`run` is an independent simulation that returns one
    record per step.
    """

    name: str = "estimator"

    def __init__(self, cell: CellType, sensors: SensorModel) -> None:
        if cell is None or sensors is None:
            raise InvalidArgumentError(f"{type(self).__name__} needs a cell model and a sensor model")
        self.cell = cell
        self.sensors = sensors

    @abstractmethod
    def run(self) -> list:
        """Run the strategy and return its records."""


class DischargeEstimator(Estimator):
    """Base for strategies that discharge a simulated battery until it is expended.

    The true load current of every step is drawn uniformly from
    ``[current_min, current_max]``.
    """

    def __init__(
        self,
        cell: CellType,
        sensors: SensorModel,
        capacity_mah: float = 1000.0,
        current_min: float = 0.1,  # A
        current_max: float = 0.5,  # A
        time_step: float = 1000.0,  # s
        voltage_load: float = 3.3,  # V
        max_steps: int = 100_000,
        rng=None,
    ) -> None:
        super().__init__(cell, sensors)
        if current_min > current_max:
            raise InvalidArgumentError(f"current range is inverted: [{current_min}, {current_max}]")
        if time_step <= 0:
            raise InvalidArgumentError(f"time step must be positive, got {time_step}")
        self.capacity_mah = capacity_mah
        self.current_min = current_min
        self.current_max = current_max
        self.time_step = time_step
        self.voltage_load = voltage_load
        self.max_steps = max_steps
        self.rng = np.random.default_rng(rng)

    def draw_current(self) -> float:
        return sample(UncertainValue.uniform(self.current_min, self.current_max, size=1, rng=self.rng), self.rng)

    def check_steps(self, steps: int) -> None:
        if steps >= self.max_steps:
            raise RuntimeError(f"{self.name}: battery still alive after {steps} steps")

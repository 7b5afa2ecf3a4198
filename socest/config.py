import math
import numbers
from dataclasses import dataclass

from socest.errors import InvalidArgumentError

DEFAULT_MEASURED_VOLTAGE_MEAN = 3.7  # V
DEFAULT_MEASURED_VOLTAGE_STD = 0.01  # V


@dataclass
class SimulationConfig:
    """
    battery_capacity_mah :
        rated capacity of the simulated battery in mAh
    current_min, current_max :
        range of the uniformly drawn true load current in A
    measured_voltage :
        measured voltage for the direct-mapping kernel in V; None uses
        Gaussian(DEFAULT_MEASURED_VOLTAGE_MEAN, measured_voltage_std)
    iterations :
        number of repeated kernel executions
    particles :
        ensemble size of every uncertain value
    seed :
        seed of the root random generator, None for fresh entropy
    time_step :
        simulated time between two battery updates in s
    voltage_load :
        load voltage in V
    voltage_noise_std, current_noise_std :
        sensor noise in V and A
    workers :
        threads used for repeated executions
    """

    battery_capacity_mah: float = 1000.0
    current_min: float = 0.1
    current_max: float = 0.5
    measured_voltage: float | None = None
    measured_voltage_std: float = DEFAULT_MEASURED_VOLTAGE_STD
    iterations: int = 1
    particles: int = 1000
    seed: int | None = None
    time_step: float = 1000.0
    voltage_load: float = 3.3
    voltage_noise_std: float = 0.01
    current_noise_std: float = 0.001
    workers: int = 1

    def validate(self) -> "SimulationConfig":
        for name in ("battery_capacity_mah", "time_step", "voltage_load"):
            _require_positive(name, getattr(self, name))
        for name in ("iterations", "particles", "workers"):
            value = getattr(self, name)
            if not isinstance(value, numbers.Integral) or value < 1:
                raise InvalidArgumentError(f"{name} must be a positive integer, got {value!r}")
        for name in ("current_min", "current_max"):
            _require_finite(name, getattr(self, name))
        if self.current_min > self.current_max:
            raise InvalidArgumentError(f"current range is inverted: [{self.current_min}, {self.current_max}]")
        for name in ("measured_voltage_std", "voltage_noise_std", "current_noise_std"):
            value = getattr(self, name)
            _require_finite(name, value)
            if value < 0:
                raise InvalidArgumentError(f"{name} must be non-negative, got {value}")
        if self.measured_voltage is not None:
            _require_finite("measured_voltage", self.measured_voltage)
        if self.seed is not None and (not isinstance(self.seed, numbers.Integral) or self.seed < 0):
            raise InvalidArgumentError(f"seed must be a non-negative integer, got {self.seed!r}")
        return self


def _require_finite(name: str, value) -> None:
    if not isinstance(value, numbers.Real) or not math.isfinite(value):
        raise InvalidArgumentError(f"{name} must be a finite number, got {value!r}")


def _require_positive(name: str, value) -> None:
    _require_finite(name, value)
    if value <= 0:
        raise InvalidArgumentError(f"{name} must be positive, got {value}")

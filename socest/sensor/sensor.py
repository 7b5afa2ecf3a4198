import numpy as np
from scipy.stats import norm

from socest.errors import InvalidArgumentError
from socest.uncertain.value import DEFAULT_PARTICLES, UncertainValue, as_particles


class GaussianSensor:
    """Sensor with additive zero-mean Gaussian noise.

    ``measure`` returns the distribution of a reading, ``likelihood`` the density
    of one concrete reading given candidate true values. A noise-free sensor
    (std == 0) passes values through unchanged.
    """

    def __init__(self, std: float, particles: int = DEFAULT_PARTICLES, rng=None) -> None:
        if not np.isfinite(std) or std < 0:
            raise InvalidArgumentError(f"sensor noise must be a finite non-negative std, got {std}")
        self.std = float(std)
        self.particles = particles
        self.rng = np.random.default_rng(rng)

    def measure(self, true_value):
        noise = UncertainValue.gaussian(0.0, self.std, size=self.particles, rng=self.rng)
        return true_value + noise

    def likelihood(self, observation: float, true_values) -> np.ndarray:
        x = as_particles(true_values)
        if self.std == 0:
            # std -> 0 limit of the normalised weights: keep the closest candidates
            distance = np.abs(x - observation)
            return (distance == distance.min()).astype(float)
        return norm.pdf(observation, loc=x, scale=self.std)


class SensorModel:
    """Voltage and current sensors of the measurement front end."""

    def __init__(
        self,
        voltage_std: float = 0.01,  # V
        current_std: float = 0.001,  # A
        particles: int = DEFAULT_PARTICLES,
        rng=None,
    ) -> None:
        rng = np.random.default_rng(rng)
        self.voltage = GaussianSensor(voltage_std, particles, rng)
        self.current = GaussianSensor(current_std, particles, rng)

    def measure_voltage(self, true_voltage):
        return self.voltage.measure(true_voltage)

    def measure_current(self, true_current):
        return self.current.measure(true_current)

"""Repeated execution, benchmarking and strategy runs.

Repetitions are independent: each one gets its own random generator spawned
from a single ``SeedSequence`` and builds its own inputs, so they can run on a
thread pool and are only merged (mean, variance) after all of them completed.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import numpy as np

from socest.battery.cell import CellType
from socest.config import DEFAULT_MEASURED_VOLTAGE_MEAN, SimulationConfig
from socest.errors import InvalidArgumentError
from socest.estimation import BayesianFusion, CoulombCounting, DirectMapping
from socest.model.cell.panasonic_cgr17500 import PanasonicCGR17500
from socest.sensor.sensor import SensorModel
from socest.uncertain.value import UncertainValue, sample

logger = logging.getLogger(__name__)

STRATEGIES = ("direct_mapping", "coulomb_counting", "bayesian_fusion")


@dataclass
class RepeatedResult:
    """
    Attributes:
        outputs: Kernel output of every repetition (soc in %, float or UncertainValue).
        samples: One concrete draw from each output.
        mean: Mean of samples.
        variance: Variance of samples (0 for a single repetition).
        elapsed_us: Wall-clock time of all repetitions in microseconds.
    """

    outputs: list = field(repr=False)
    samples: np.ndarray
    mean: float
    variance: float
    elapsed_us: int


def state_of_charge_kernel(cell: CellType, measured_voltage):
    """Soc in % of a (possibly uncertain) measured voltage."""
    return cell.voltage_to_soc(measured_voltage)


def measured_voltage_input(config: SimulationConfig, rng=None):
    if config.measured_voltage is not None:
        return float(config.measured_voltage)
    return UncertainValue.gaussian(
        DEFAULT_MEASURED_VOLTAGE_MEAN, config.measured_voltage_std, size=config.particles, rng=rng
    )


def _execute_once(cell: CellType, config: SimulationConfig, rng: np.random.Generator):
    soc = state_of_charge_kernel(cell, measured_voltage_input(config, rng))
    return soc, sample(soc, rng)


def run_repeated(config: SimulationConfig, cell: CellType | None = None) -> RepeatedResult:
    config.validate()
    cell = PanasonicCGR17500() if cell is None else cell
    rngs = [np.random.default_rng(s) for s in np.random.SeedSequence(config.seed).spawn(config.iterations)]

    start = time.perf_counter()
    if config.workers == 1:
        results = [_execute_once(cell, config, rng) for rng in rngs]
    else:
        with ThreadPoolExecutor(max_workers=config.workers) as executor:
            futures = [executor.submit(_execute_once, cell, config, rng) for rng in rngs]
            results = [future.result() for future in futures]
    elapsed_us = int((time.perf_counter() - start) * 1e6)

    outputs = [soc for soc, _ in results]
    samples = np.array([draw for _, draw in results])
    result = RepeatedResult(
        outputs=outputs,
        samples=samples,
        mean=float(samples.mean()),
        variance=float(samples.var()),
        elapsed_us=elapsed_us,
    )
    logger.info(
        "%d repetition(s) on %d worker(s): mean soc %.4f %%, variance %.4g, %d us",
        config.iterations,
        config.workers,
        result.mean,
        result.variance,
        elapsed_us,
    )
    return result


def benchmark(config: SimulationConfig, cell: CellType | None = None) -> tuple[float, int]:
    """Final soc in % and elapsed time in microseconds of one timed run."""
    result = run_repeated(config, cell)
    return result.mean, result.elapsed_us


def build_strategy(name: str, config: SimulationConfig, cell: CellType, rng):
    sensors = SensorModel(
        voltage_std=config.voltage_noise_std,
        current_std=config.current_noise_std,
        particles=config.particles,
        rng=rng,
    )
    if name == "direct_mapping":
        return DirectMapping(cell, sensors)

    discharge = dict(
        capacity_mah=config.battery_capacity_mah,
        current_min=config.current_min,
        current_max=config.current_max,
        time_step=config.time_step,
        voltage_load=config.voltage_load,
        rng=rng,
    )
    if name == "coulomb_counting":
        return CoulombCounting(cell, sensors, **discharge)
    if name == "bayesian_fusion":
        return BayesianFusion(cell, sensors, **discharge)
    raise InvalidArgumentError(f"unknown strategy {name!r}, expected one of {STRATEGIES}")


def run_strategies(
    config: SimulationConfig, strategies=STRATEGIES, cell: CellType | None = None
) -> dict[str, list]:
    """Run the selected strategies, each with its own generator, and return their records."""
    config.validate()
    cell = PanasonicCGR17500() if cell is None else cell
    rngs = np.random.SeedSequence(config.seed).spawn(len(strategies))

    records = {}
    for name, seed in zip(strategies, rngs):
        estimator = build_strategy(name, config, cell, np.random.default_rng(seed))
        records[name] = estimator.run()
        logger.info("%s: %d record(s)", name, len(records[name]))
    return records

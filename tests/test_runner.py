"""Tests for configuration, repeated execution and strategy runs."""

import numpy as np
import pytest

from socest.config import SimulationConfig
from socest.errors import InvalidArgumentError
from socest.model.cell.panasonic_cgr17500 import PanasonicCGR17500
from socest.simulation.runner import (
    STRATEGIES,
    RepeatedResult,
    benchmark,
    build_strategy,
    measured_voltage_input,
    run_repeated,
    run_strategies,
    state_of_charge_kernel,
)
from socest.uncertain import UncertainValue, point, std


# ===================================================================
# Configuration
# ===================================================================
class TestSimulationConfig:
    def test_defaults_are_valid(self):
        config = SimulationConfig()
        assert config.validate() is config

    @pytest.mark.parametrize(
        "overrides",
        [
            {"battery_capacity_mah": 0.0},
            {"battery_capacity_mah": float("nan")},
            {"time_step": -1.0},
            {"voltage_load": 0.0},
            {"iterations": 0},
            {"iterations": 1.5},
            {"particles": 0},
            {"workers": 0},
            {"current_min": 0.6, "current_max": 0.5},
            {"current_max": float("inf")},
            {"measured_voltage_std": -0.01},
            {"voltage_noise_std": float("nan")},
            {"current_noise_std": -1.0},
            {"measured_voltage": float("nan")},
            {"seed": -1},
        ],
    )
    def test_invalid_values(self, overrides):
        with pytest.raises(InvalidArgumentError):
            SimulationConfig(**overrides).validate()


# ===================================================================
# Kernel and repeated execution
# ===================================================================
class TestKernel:
    def test_point_voltage(self):
        cell = PanasonicCGR17500()
        assert state_of_charge_kernel(cell, 3.8) == pytest.approx(52.2169, abs=1e-3)

    def test_configured_voltage_is_point(self):
        assert measured_voltage_input(SimulationConfig(measured_voltage=3.8)) == 3.8

    def test_default_voltage_is_gaussian(self):
        voltage = measured_voltage_input(SimulationConfig(particles=20_000), rng=0)
        assert isinstance(voltage, UncertainValue)
        assert voltage.size == 20_000
        assert point(voltage) == pytest.approx(3.7, abs=1e-3)
        assert std(voltage) == pytest.approx(0.01, rel=0.05)


class TestRunRepeated:
    def test_point_input(self):
        result = run_repeated(SimulationConfig(measured_voltage=3.8, iterations=3, seed=0))
        assert isinstance(result, RepeatedResult)
        assert len(result.outputs) == 3
        np.testing.assert_allclose(result.samples, [52.2169] * 3, atol=1e-3)
        assert result.mean == pytest.approx(52.2169, abs=1e-3)
        assert result.variance == 0.0
        assert result.elapsed_us >= 0

    def test_uncertain_input(self):
        result = run_repeated(SimulationConfig(particles=5000, seed=1))
        (soc,) = result.outputs
        assert isinstance(soc, UncertainValue)
        assert point(soc) == pytest.approx(33.68, abs=0.2)
        assert std(soc) == pytest.approx(0.01 / 0.005395, rel=0.1)

    def test_seeded_runs_repeat(self):
        config = SimulationConfig(iterations=4, particles=200, seed=7)
        np.testing.assert_array_equal(run_repeated(config).samples, run_repeated(config).samples)

    def test_workers_do_not_change_results(self):
        sequential = run_repeated(SimulationConfig(iterations=6, particles=200, seed=3))
        threaded = run_repeated(SimulationConfig(iterations=6, particles=200, seed=3, workers=4))
        np.testing.assert_array_equal(sequential.samples, threaded.samples)

    def test_repetitions_differ(self):
        result = run_repeated(SimulationConfig(iterations=5, particles=200, seed=2))
        assert result.variance > 0

    def test_invalid_config(self):
        with pytest.raises(InvalidArgumentError):
            run_repeated(SimulationConfig(iterations=0))

    def test_benchmark(self):
        mean, elapsed_us = benchmark(SimulationConfig(measured_voltage=3.8, seed=0))
        assert mean == pytest.approx(52.2169, abs=1e-3)
        assert isinstance(elapsed_us, int)


# ===================================================================
# Strategies
# ===================================================================
class TestStrategies:
    def test_unknown_strategy(self):
        with pytest.raises(InvalidArgumentError):
            build_strategy("kalman", SimulationConfig(), PanasonicCGR17500(), np.random.default_rng(0))

    def test_build_uses_config(self):
        config = SimulationConfig(current_min=0.2, current_max=0.3, time_step=500.0)
        estimator = build_strategy("coulomb_counting", config, PanasonicCGR17500(), np.random.default_rng(0))
        assert (estimator.current_min, estimator.current_max) == (0.2, 0.3)
        assert estimator.time_step == 500.0

    def test_run_single_strategy(self):
        records = run_strategies(SimulationConfig(particles=200, seed=0), ["direct_mapping"])
        assert list(records) == ["direct_mapping"]
        assert len(records["direct_mapping"]) == 3

    def test_run_all_strategies(self):
        records = run_strategies(SimulationConfig(particles=200, seed=0))
        assert list(records) == list(STRATEGIES)
        assert all(len(r) > 0 for r in records.values())

    def test_unknown_strategy_in_run(self):
        with pytest.raises(InvalidArgumentError):
            run_strategies(SimulationConfig(seed=0), ["unknown"])

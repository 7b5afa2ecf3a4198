"""
Parameterized unit tests for cell discharge curves.

To add tests for a new cell model, append a ``CellModelSpec`` to the
``CELL_SPECS`` list. All generic checks (curve shape, round trip, uncertain
inputs) are run automatically for every entry.
"""

import math
from dataclasses import dataclass

import numpy as np
import pytest

from socest.battery.cell import CellType
from socest.model.cell.panasonic_cgr17500 import CGR17500_CURVE, PanasonicCGR17500
from socest.uncertain import UncertainValue, point, std


# ---------------------------------------------------------------------------
# Cell model registry
# ---------------------------------------------------------------------------
@dataclass
class CellModelSpec:
    """Everything the test suite needs to know about a cell model."""

    name: str
    factory: type  # CellType subclass (no-arg constructor)

    # soc range (p.u.) where voltage_to_soc(soc_to_voltage(soc)) must hold
    round_trip_low: float = 0.05
    round_trip_high: float = 0.95
    round_trip_tolerance: float = 0.01  # p.u.


CELL_SPECS: list[CellModelSpec] = [
    CellModelSpec(
        name="PanasonicCGR17500",
        factory=PanasonicCGR17500,
    ),
]


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------
@pytest.fixture(params=CELL_SPECS, ids=lambda s: s.name)
def spec(request) -> CellModelSpec:
    return request.param


@pytest.fixture()
def cell(spec) -> CellType:
    return spec.factory()


# ===================================================================
# Generic curve shape
# ===================================================================
class TestCurveShape:
    def test_monotonically_increasing(self, cell):
        """Voltage must not decrease as soc increases."""
        socs = np.linspace(0.0, 1.0, 1001)
        voltages = [cell.soc_to_voltage(float(s)) for s in socs]
        for k in range(1, len(voltages)):
            assert voltages[k] >= voltages[k - 1], f"voltage decreased from soc={socs[k - 1]} to soc={socs[k]}"

    def test_below_full_voltage(self, cell):
        assert cell.soc_to_voltage(1.0) <= cell.electrical.full_voltage

    def test_empty_cell_is_expended(self, cell):
        assert cell.soc_to_voltage(0.0) <= cell.electrical.expended_voltage

    def test_round_trip(self, cell, spec):
        for soc in np.linspace(spec.round_trip_low, spec.round_trip_high, 91):
            soc = float(soc)
            back = cell.voltage_to_soc(cell.soc_to_voltage(soc)) / 100
            assert back == pytest.approx(soc, abs=spec.round_trip_tolerance), f"round trip failed at soc={soc}"

    def test_uncertain_input_gives_uncertain_output(self, cell):
        soc = UncertainValue.gaussian(0.5, 0.01, size=5000, rng=0)
        voltage = cell.soc_to_voltage(soc)
        assert isinstance(voltage, UncertainValue)
        assert std(voltage) > 0
        assert isinstance(cell.voltage_to_soc(voltage), UncertainValue)


# ===================================================================
# Panasonic CGR-17500 fitted curve
# ===================================================================
class TestPanasonicCGR17500:
    c = CGR17500_CURVE

    def test_constants(self):
        c = self.c
        assert (c.linear_start_soc, c.linear_end_soc) == (17.0, 93.0)
        assert (c.linear_start_voltage, c.linear_end_voltage) == (3.61, 4.02)
        assert (c.linear_slope, c.linear_gain) == (3.51829, 0.005395)
        assert (c.lower_quadratic_scale, c.upper_quadratic_scale) == (160.0, 370.0)
        assert c.start_voltage_magic == pytest.approx(3.6098775, abs=1e-15)
        assert c.end_voltage_magic == 4.021363851351348
        assert c.gate_max_scale == 50.0

    def test_electrical_defaults(self):
        electrical = PanasonicCGR17500().electrical
        assert electrical.full_voltage == 4.2
        assert electrical.expended_voltage == 2.0
        assert electrical.leak_current == 1e-6

    def test_linear_region(self):
        cell = PanasonicCGR17500()
        assert cell.soc_to_voltage(0.5) == pytest.approx(3.51829 + 0.005395 * 50)
        assert cell.voltage_to_soc(3.8) == pytest.approx((3.8 - 3.51829) / 0.005395)

    def test_lower_tail(self):
        cell = PanasonicCGR17500()
        assert cell.soc_to_voltage(0.10) == pytest.approx(3.61 - (10 - 18) ** 2 / 160)
        assert cell.voltage_to_soc(2.7) == pytest.approx(-math.sqrt(160 * 0.91) + 18)

    def test_upper_tail(self):
        cell = PanasonicCGR17500()
        assert cell.soc_to_voltage(1.0) == pytest.approx(4.02 + (100 - 92) ** 2 / 370)
        assert cell.voltage_to_soc(4.10) == pytest.approx(math.sqrt(370 * 0.08) + 92)

    def test_uncertain_linear_region_mean(self):
        cell = PanasonicCGR17500()
        soc = UncertainValue.gaussian(0.5, 0.01, size=20_000, rng=1)
        voltage = cell.soc_to_voltage(soc)
        assert point(voltage) == pytest.approx(3.51829 + 0.005395 * 100 * point(soc), abs=1e-6)
        assert std(voltage) == pytest.approx(0.005395, rel=0.05)

    def test_shared_constants(self):
        assert PanasonicCGR17500().curve is PanasonicCGR17500().curve

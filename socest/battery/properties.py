from dataclasses import dataclass


@dataclass(frozen=True)
class CellProperties:
    """
    full_voltage :
        terminal voltage of a fully charged cell in V
    expended_voltage :
        terminal voltage at which the cell is considered dead in V
    leak_current :
        constant self-discharge current in A
    """

    full_voltage: float
    expended_voltage: float
    leak_current: float = 0.0


@dataclass(frozen=True)
class CurveParameters:
    """
    Fitted constants of a three-segment discharge curve (quadratic, linear, quadratic).

    linear_start_soc, linear_end_soc :
        soc boundaries of the linear region in %
    linear_start_voltage, linear_end_voltage :
        voltages at the linear region boundaries in V
    linear_slope, linear_gain :
        intercept (V) and gain (V/%) of the linear region
    lower_quadratic_scale, upper_quadratic_scale :
        scale factors of the quadratic tails in %^2/V
    start_voltage_magic, end_voltage_magic :
        gate anchors of the voltage -> soc direction in V; the two directions are
        fitted separately, these keep the round trip accurate
    gate_max_scale :
        logistic steepness relative to the gated quantity's support
    """

    linear_start_soc: float
    linear_end_soc: float
    linear_start_voltage: float
    linear_end_voltage: float
    linear_slope: float
    linear_gain: float
    lower_quadratic_scale: float
    upper_quadratic_scale: float
    start_voltage_magic: float
    end_voltage_magic: float
    gate_max_scale: float = 50.0

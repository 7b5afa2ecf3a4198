from socest.battery.cell import CellType
from socest.battery.properties import CellProperties, CurveParameters
from socest.uncertain.value import gate, sqrt

# Parameters fitted from Panasonic CGR-17500 discharge data
CGR17500_CURVE = CurveParameters(
    linear_start_soc=17.0,  # %
    linear_end_soc=93.0,  # %
    linear_start_voltage=3.61,  # V
    linear_end_voltage=4.02,  # V
    linear_slope=3.51829,  # V
    linear_gain=0.005395,  # V/%
    lower_quadratic_scale=160.0,
    upper_quadratic_scale=370.0,
    start_voltage_magic=3.6068775 + 0.003,  # V
    end_voltage_magic=4.021363851351348,  # V
    gate_max_scale=50.0,
)


class PanasonicCGR17500(CellType):
    """
    Generic Li-Ion cell (Panasonic CGR-17500). The discharge curve is a three-segment
    piecewise function, quadratic below 17 %, linear up to 93 % and quadratic above,
    blended with smooth gates so it also applies to uncertain inputs.
    """

    def __init__(self, curve: CurveParameters = CGR17500_CURVE) -> None:
        super().__init__(
            electrical=CellProperties(
                full_voltage=4.2,  # V
                expended_voltage=2.0,  # V
                leak_current=1e-6,  # A
            ),
            curve=curve,
        )

    def soc_to_voltage(self, soc):
        c = self.curve
        soc = soc * 100  # %

        f1 = c.linear_start_voltage - (soc - c.linear_start_soc - 1) ** 2 / c.lower_quadratic_scale
        f2 = c.linear_slope + c.linear_gain * soc
        f3 = c.linear_end_voltage + (soc - c.linear_end_soc + 1) ** 2 / c.upper_quadratic_scale

        activation1 = gate(soc, c.linear_start_soc, c.gate_max_scale)
        activation2 = gate(soc, c.linear_end_soc, c.gate_max_scale)

        return f1 + activation1 * (f2 - f1) + activation2 * (f3 - f2)

    def voltage_to_soc(self, voltage):
        c = self.curve

        f1 = -sqrt(c.lower_quadratic_scale * abs(voltage - c.linear_start_voltage)) + c.linear_start_soc + 1
        f2 = (voltage - c.linear_slope) / c.linear_gain
        f3 = sqrt(c.upper_quadratic_scale * abs(voltage - c.linear_end_voltage)) + c.linear_end_soc - 1

        activation1 = gate(voltage, c.start_voltage_magic, c.gate_max_scale)
        activation2 = gate(voltage, c.end_voltage_magic, c.gate_max_scale)

        return f1 + activation1 * (f2 - f1) + activation2 * (f3 - f2)

from abc import ABC, abstractmethod

from socest.battery.properties import CellProperties, CurveParameters


class CellType(ABC):
    def __init__(self, electrical: CellProperties, curve: CurveParameters) -> None:
        super().__init__()
        self.electrical = electrical
        self.curve = curve

    @abstractmethod
    def soc_to_voltage(self, soc):
        "terminal voltage in V for a soc in p.u."
        pass

    @abstractmethod
    def voltage_to_soc(self, voltage):
        "soc in % (0 - 100) for a terminal voltage in V"
        pass

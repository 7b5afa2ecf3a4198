import json
import logging
from dataclasses import fields

import pandas as pd

from socest.errors import OutputWriteError
from socest.estimation import BayesianFusionRecord, CoulombCountingRecord, DirectMappingRecord
from socest.uncertain.value import point, std

logger = logging.getLogger(__name__)


def records_to_frame(records: list) -> pd.DataFrame:
    """One row per record; uncertain values are reduced to their point estimate."""
    if not records:
        return pd.DataFrame()
    columns = [f.name for f in fields(records[0])]
    rows = [{key: _cell(key, getattr(r, key)) for key in columns} for r in records]
    return pd.DataFrame(rows, columns=columns)


def _cell(key: str, value):
    return value if key == "index" else point(value)


def samples_to_frame(name: str, outputs: list) -> pd.DataFrame:
    """Point estimate and standard deviation of each repetition's output."""
    return pd.DataFrame(
        {
            name: [point(value) for value in outputs],
            f"{name}_std": [std(value) for value in outputs],
        }
    )


def write_csv(path, frame: pd.DataFrame) -> None:
    try:
        frame.to_csv(path, index=False)
    except OSError as e:
        raise OutputWriteError(path, "could not write output CSV file") from e
    logger.info("wrote %d row(s) to %s", len(frame), path)


def to_json(variables: list[tuple[str, list[float]]], title: str = "Output variables") -> str:
    """
    Args:
        variables: (description, values) per output variable.
        title: Description of the whole variable set.
    """
    payload = {
        "description": title,
        "variables": [
            {
                "variableSymbol": f"outputVariables[{i}]",
                "variableDescription": description,
                "values": [float(v) for v in values],
            }
            for i, (description, values) in enumerate(variables)
        ],
    }
    return json.dumps(payload, indent=2)


## human-readable output
def format_kernel(description: str, outputs: list) -> list[str]:
    lines = []
    for value in outputs:
        line = f"{description} is {point(value):f}%"
        if std(value) > 0:
            line += f" (std {std(value):.4f}%)"
        lines.append(line + ".")
    return lines


def _direct_mapping(r: DirectMappingRecord) -> str:
    return f"Voltage[V]: {point(r.voltage_measured):.3f}\t SoC: {point(r.soc):.2f}\t SoC-std: {r.soc_std:.2f}"


def _coulomb_counting(r: CoulombCountingRecord) -> str:
    return (
        f"I[mA]: {1000 * point(r.current_measured):.0f}"
        f"\tSoC: {point(r.soc) * 100:.2f} SoC-std: {r.soc_std * 100:.2f}"
    )


def _bayesian_fusion(r: BayesianFusionRecord) -> str:
    return (
        f"I[mA]: {1000 * point(r.current_measured):.0f}\tSoC-> "
        f" True: {r.true_soc:.2f}"
        f" Measured: {r.measured_soc:.2f}"
        f" Prior: {point(r.prior_soc):.2f}"
        f" Posterior: {point(r.posterior_soc):.2f}"
        f" Posterior-std: {r.posterior_std:.2f}"
    )


_FORMATTERS = {
    DirectMappingRecord: ("Direct Voltage Mapping", _direct_mapping),
    CoulombCountingRecord: ("Coulomb Counting", _coulomb_counting),
    BayesianFusionRecord: ("Bayesian Estimation", _bayesian_fusion),
}


def format_records(records: list) -> list[str]:
    if not records:
        return []
    title, formatter = _FORMATTERS[type(records[0])]
    return [f"--- {title} ---", ""] + [formatter(r) for r in records] + [""]

"""
Battery state-of-charge estimation from the command line.

Usage:
    socest [-V VOLTAGE] [-M N] [-j] [-T] [-b] [-o PATH] [-s STRATEGY ...]

Without -V the measured voltage is Gaussian(3.7 V, 0.01 V).
"""

import argparse
import logging
import sys
from pathlib import Path

from socest.config import DEFAULT_MEASURED_VOLTAGE_MEAN, DEFAULT_MEASURED_VOLTAGE_STD, SimulationConfig
from socest.errors import InvalidArgumentError, OutputWriteError
from socest.io.output import format_kernel, format_records, records_to_frame, samples_to_frame, to_json, write_csv
from socest.simulation.runner import STRATEGIES, run_repeated, run_strategies

logger = logging.getLogger(__name__)

OUTPUT_NAME = "stateOfCharge"
OUTPUT_DESCRIPTION = "The state of charge of the battery"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="socest",
        description="Battery state estimation routines.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-o", "--output", type=Path, help="Path to the output CSV file.")
    parser.add_argument(
        "-M",
        "--multiple-executions",
        type=int,
        default=1,
        metavar="N",
        help="Repeatedly execute the kernel N times (default: 1).",
    )
    parser.add_argument("-T", "--time", action="store_true", help="Time the kernel execution and print it.")
    parser.add_argument(
        "-b",
        "--benchmarking",
        action="store_true",
        help="Print '<soc> <microseconds>' for benchmarking.",
    )
    parser.add_argument("-j", "--json", action="store_true", help="Print output in JSON format.")
    parser.add_argument(
        "-V",
        "--measured-voltage",
        type=float,
        metavar="VOLTS",
        help=f"Measured battery voltage (default: Gauss({DEFAULT_MEASURED_VOLTAGE_MEAN:.2f}, "
        f"{DEFAULT_MEASURED_VOLTAGE_STD:.2f})).",
    )
    parser.add_argument(
        "-s",
        "--strategies",
        nargs="+",
        choices=STRATEGIES,
        default=[],
        help="Also run the given estimation strategies.",
    )
    parser.add_argument("--capacity", type=float, default=1000.0, help="Battery capacity in mAh (default: 1000).")
    parser.add_argument(
        "--current-range",
        type=float,
        nargs=2,
        default=(0.1, 0.5),
        metavar=("MIN", "MAX"),
        help="Range of the uniformly drawn load current in A (default: 0.1 0.5).",
    )
    parser.add_argument("--particles", type=int, default=1000, help="Ensemble size of uncertain values.")
    parser.add_argument("--seed", type=int, help="Seed of the random generator.")
    parser.add_argument("--workers", type=int, default=1, help="Threads for repeated executions.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log progress (-vv for debug).")
    return parser


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    current_min, current_max = args.current_range
    return SimulationConfig(
        battery_capacity_mah=args.capacity,
        current_min=current_min,
        current_max=current_max,
        measured_voltage=args.measured_voltage,
        iterations=args.multiple_executions,
        particles=args.particles,
        seed=args.seed,
        workers=args.workers,
    ).validate()


def configure_logging(verbosity: int) -> None:
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbosity, logging.DEBUG)
    logging.basicConfig(level=level, stream=sys.stderr, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = config_from_args(args)
        result = run_repeated(config)
        strategy_records = run_strategies(config, args.strategies) if args.strategies else {}
    except InvalidArgumentError as e:
        parser.error(str(e))

    if args.benchmarking:
        print(f"{result.mean:f} {result.elapsed_us}")
        return 0

    if args.json:
        print(to_json([(OUTPUT_DESCRIPTION, result.samples)]))
    else:
        for line in format_kernel(OUTPUT_DESCRIPTION, result.outputs):
            print(line)
        for records in strategy_records.values():
            print()
            for line in format_records(records):
                print(line)

    if args.time:
        print(f"\nCPU time used: {result.elapsed_us / 1e6:f} seconds")

    if args.output is not None:
        try:
            write_csv(args.output, samples_to_frame(OUTPUT_NAME, result.outputs))
            for name, records in strategy_records.items():
                path = args.output.with_name(f"{args.output.stem}_{name}{args.output.suffix}")
                write_csv(path, records_to_frame(records))
        except OutputWriteError as e:
            logger.error("Could not write to output CSV file \"%s\".", e.path)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

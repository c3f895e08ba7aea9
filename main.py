#!/usr/bin/env python3
"""
Main script for running fall-of-potential EPR analysis.
"""

# Pipeline overview (README-style):
# 1) Load the survey CSV and convert rows into samples.
# 2) If a reference point is given (flags or a Reference row), overwrite
#    distances of GPS rows with the great-circle distance from it.
# 3) Drop excluded/blank rows and sort by distance.
# 4) Detect the knee, pick the tail, estimate V_inf, and derive Rg and the
#    fault-scaled EPR; classify the far-end plateau.
# 5) Export the sample table, the result summary, and the survey figure.

import argparse
import logging
import math
import sys
import time

from epr.analysis import (
    DEFAULT_N_LAST,
    DEFAULT_SAFETY_FACTOR,
    DEFAULT_SAMPLES_PER_SEGMENT,
    DEFAULT_TAIL_MIN,
    InstrumentSettings,
    InvalidInstrumentParameter,
    evaluate_snapshot,
    generate_dense_curve,
)
from epr.data_processing import (
    ReferencePoint,
    apply_reference_point,
    find_reference_point,
    load_survey_data,
    prepare_samples,
    samples_from_dataframe,
)
from epr.earthing.remote_voltage import RemoteStrategy
from epr.output import save_survey_to_csv
from epr.plotting import plot_survey
from epr.reporting import print_result


def configure_logging(log_file: str = "epr_analysis.log") -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, mode="w"),
        ],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Earth potential rise analysis of a fall-of-potential survey."
    )
    parser.add_argument("csv", help="Survey CSV with Distance (m) and Voltage (mV).")
    parser.add_argument("--i-test", type=float, required=True, help="Test current (A).")
    parser.add_argument(
        "--i-fault", type=float, default=math.nan, help="Earth-fault current (A)."
    )
    parser.add_argument(
        "--safety-factor", type=float, default=DEFAULT_SAFETY_FACTOR
    )
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in RemoteStrategy],
        default=RemoteStrategy.EXTRAPOLATE.value,
    )
    parser.add_argument("--n-last", type=int, default=DEFAULT_N_LAST)
    parser.add_argument("--tail-min", type=int, default=DEFAULT_TAIL_MIN)
    parser.add_argument("--ref-lat", type=float, default=None)
    parser.add_argument("--ref-lon", type=float, default=None)
    parser.add_argument(
        "--samples-per-segment", type=int, default=DEFAULT_SAMPLES_PER_SEGMENT
    )
    parser.add_argument("--output-dir", default="output")
    parser.add_argument("--no-plot", action="store_true")
    parser.add_argument("--log-file", default="epr_analysis.log")
    return parser


def main(argv=None):
    """Main execution function with step timing logged."""

    args = build_parser().parse_args(argv)
    configure_logging(args.log_file)

    start_time = time.time()
    logging.info("Initializing EPR analysis for %s", args.csv)

    settings = InstrumentSettings(
        i_test=args.i_test,
        i_fault=args.i_fault,
        safety_factor=args.safety_factor,
        strategy=RemoteStrategy(args.strategy),
        n_last=args.n_last,
        tail_min=args.tail_min,
    )
    try:
        settings.validate()
    except InvalidInstrumentParameter as exc:
        logging.error("%s", exc)
        return 1

    df = load_survey_data(args.csv)
    samples = samples_from_dataframe(df)
    logging.info("Loaded %d survey rows", len(samples))

    if args.ref_lat is not None and args.ref_lon is not None:
        reference = ReferencePoint(lat=args.ref_lat, lon=args.ref_lon)
    else:
        reference = find_reference_point(df)
    if reference is not None:
        logging.info("Reference point: %.6f, %.6f", reference.lat, reference.lon)

    corrected = apply_reference_point(samples, reference)
    snapshot = prepare_samples(corrected)
    if not snapshot:
        logging.error("No usable samples in %s. Terminating execution.", args.csv)
        return 1

    step_start = time.time()
    result = evaluate_snapshot(snapshot, settings)
    dense = generate_dense_curve(snapshot, args.samples_per_segment)
    logging.info(
        "Analysis completed in %.2f seconds", time.time() - step_start
    )

    print_result(result, settings)

    samples_csv, result_csv = save_survey_to_csv(corrected, result, args.output_dir)
    logging.info("Generated output files:")
    logging.info("  - Samples CSV: %s", samples_csv)
    logging.info("  - Result CSV: %s", result_csv)

    if not args.no_plot:
        figure_path = plot_survey(
            snapshot, result, dense, settings.i_test, output_dir=args.output_dir
        )
        logging.info("  - Survey figure: %s", figure_path)

    logging.info("Total execution time: %.2f seconds", time.time() - start_time)
    return 0


if __name__ == "__main__":
    sys.exit(main())

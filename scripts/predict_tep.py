#!/usr/bin/env python
"""Predict thermoelectric properties over a temperature sweep for one or two compositions."""

import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pandas as pd

from pbte_lann.data.measurements import add_derived_columns, load_measurements
from pbte_lann.data.parameters import load_predictor
from pbte_lann.evaluation.metrics import compare_with_measurements, metrics_by_property
from pbte_lann.evaluation.uncertainty import IntervalFlags, derive_sweep
from pbte_lann.utils.config import load_config, save_config
from pbte_lann.utils.logging_utils import close_logging, create_run_directory, setup_logging
from pbte_lann.utils.numerics import linear_space


def main(args):
    """Main function."""
    config = load_config(args.config)

    run_dir = create_run_directory(Path(config['paths']['results_dir']), 'sweep')
    logger = setup_logging(run_dir, config['logging'])
    try:
        return run_sweeps(args, config, run_dir, logger)
    finally:
        close_logging()


def run_sweeps(args, config, run_dir, logger):
    """Predict, save and optionally compare every requested composition."""
    save_config(config, run_dir / 'config_used.yaml')

    predictor = load_predictor(
        config['paths']['parameters'],
        embedding_input_dim=config['model']['embedding_input_dim'],
        context_dim=config['model']['context_dim'],
    )
    flags = IntervalFlags.from_config(config.intervals)
    temperatures = linear_space(
        config['sweep']['min_temperature'],
        config['sweep']['max_temperature'],
        config['sweep']['num_nodes'],
    )

    compositions = [tuple(args.composition)]
    if args.composition2 is not None:
        compositions.append(tuple(args.composition2))

    frames = []
    for plot_id, (a, b) in enumerate(compositions, start=1):
        sweep = predictor.predict_sweep(a, b, temperatures)
        frame = derive_sweep(sweep, flags)
        frame.insert(0, 'plot', plot_id)
        frames.append(frame)
        peak = frame.loc[frame['figure_of_merit'].idxmax()]
        logger.info(
            f"Plot {plot_id} (a={a}, b={b}): peak zT {peak['figure_of_merit']:.3f} "
            f"at {peak['temperature']:.1f} degC"
        )

    predictions = pd.concat(frames, ignore_index=True)
    predictions_path = run_dir / 'predictions.csv'
    predictions.to_csv(predictions_path, index=False)
    logger.info(f"Saved predictions: {predictions_path}")

    if args.compare:
        measurements = add_derived_columns(load_measurements(config['paths']['measurements']))
        if args.label is not None:
            measurements = measurements[measurements['label'] == args.label]
            if measurements.empty:
                logger.error(f"No measurements with label '{args.label}'")
                return 1
        comparison = compare_with_measurements(predictor, measurements)
        metrics = metrics_by_property(comparison)
        comparison.to_csv(run_dir / 'comparison.csv', index=False)
        metrics.to_csv(run_dir / 'metrics.csv', index=False)
        for _, row in metrics.iterrows():
            logger.info(
                f"{row['property']:>24s}: MAPE {row['mape_pct']:.2f}%  R2 {row['r2']:.3f}  "
                f"95% coverage {row['coverage_95']:.2f}"
            )

    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='PbTe LANN temperature sweep')
    parser.add_argument('--config', type=str, default='configs/config.yaml',
                        help='Path to config file')
    parser.add_argument('--composition', type=float, nargs=2, default=[0.03, 0.0],
                        metavar=('A', 'B'), help='Dopant fractions of the first composition')
    parser.add_argument('--composition2', type=float, nargs=2, default=None,
                        metavar=('A', 'B'), help='Optional second composition')
    parser.add_argument('--compare', action='store_true',
                        help='Compare predictions with the reference measurements')
    parser.add_argument('--label', type=str, default=None,
                        help='Restrict the comparison to one measurement label, e.g. "x=0.030, y=0.000"')
    args = parser.parse_args()
    sys.exit(main(args))

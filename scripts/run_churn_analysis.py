#!/usr/bin/env python3
"""
Churn Analysis CLI

Usage:
    # Run with YAML config (recommended):
    python scripts/run_churn_analysis.py --config config/churn_analysis.yaml

    # Override specific settings via CLI:
    python scripts/run_churn_analysis.py \
        --config config/churn_analysis.yaml \
        --input data/telco_churn.csv \
        --seed 7
"""

import sys
import argparse
import json
from pathlib import Path

# Add project root to path
project_root = str(Path(__file__).resolve().parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from sklearn.neural_network import MLPClassifier

from churn_recipe.config.loader import load_config, save_config
from churn_recipe.core.exceptions import ChurnRecipeError
from churn_recipe.core.logger import get_logger, setup_logging
from churn_recipe.data.loader import load_dataset
from churn_recipe.experiment import run_experiment


def parse_args():
    parser = argparse.ArgumentParser(
        description='Customer Churn Feature Recipe and Evaluation',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        '--config', default=None,
        help='Path to YAML config file (e.g., config/churn_analysis.yaml)',
    )
    parser.add_argument(
        '--input', default=None,
        help='Path to the customer CSV file (overrides config)',
    )
    parser.add_argument(
        '--train-fraction', type=float, default=None,
        help='Fraction of records assigned to the training set',
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Random seed for the train/test split',
    )
    parser.add_argument(
        '--beta', type=float, default=None,
        help='Beta of the F-beta score',
    )
    parser.add_argument(
        '--log-level', default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Console log level',
    )
    parser.add_argument(
        '--output', default=None,
        help='Optional JSON file for the run report; the resolved config is saved next to it',
    )
    return parser.parse_args()


def _build_cli_overrides(args) -> dict:
    """Build a flat dot-notation override dict from CLI args."""
    return {
        "data.input_path": args.input,
        "splitting.train_fraction": args.train_fraction,
        "splitting.seed": args.seed,
        "evaluation.beta": args.beta,
        "reproducibility.log_level": args.log_level,
    }


def main() -> int:
    args = parse_args()
    config = load_config(args.config, cli_overrides=_build_cli_overrides(args))

    setup_logging(
        log_level=config.reproducibility.log_level,
        log_file=config.reproducibility.log_file,
    )
    logger = get_logger("run_churn_analysis")

    params = dict(config.classifier.params)
    if "hidden_layer_sizes" in params:
        params["hidden_layer_sizes"] = tuple(params["hidden_layer_sizes"])
    classifier = MLPClassifier(**params)

    try:
        dataset = load_dataset(config.data.input_path, config.data)
        result = run_experiment(dataset, config, classifier)
    except ChurnRecipeError as e:
        logger.error("Run failed: %s", e)
        return 1

    print(result.summary())

    if args.output:
        out_path = Path(args.output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2, default=str)
        save_config(config, str(out_path.with_name(out_path.stem + "_config.yaml")))
        logger.info("Report written to %s", out_path)

    return 0


if __name__ == '__main__':
    sys.exit(main())

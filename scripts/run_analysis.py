"""
Run the fake/real news analysis.

This script is a convenience wrapper around
`fakenews_analysis.training.train_ml.train_and_evaluate_models`, which:

- loads the configured dataset
- builds the text-structure features, vocabulary and PCA components
- trains the models listed in config/ml.yaml on one shared split
- evaluates them on the held-out documents
- writes metrics and importances under experiments/results/
- writes plots under experiments/figures/ and models under experiments/models/

Usage (from project root):

    python -m scripts.run_analysis
    # or
    python scripts/run_analysis.py --data-config config/data.yaml
"""

from __future__ import annotations

import argparse

from fakenews_analysis.evaluation.evaluate_models import print_model_ranking
from fakenews_analysis.training.train_ml import train_and_evaluate_models
from fakenews_analysis.utils.training_utils import load_train_config, get_logger


def parse_args() -> argparse.Namespace:
    """
    Parse command-line arguments.
    """
    parser = argparse.ArgumentParser(
        description="Train and compare fake/real news classifiers on text-structure features."
    )
    parser.add_argument(
        "--data-config",
        type=str,
        default="config/data.yaml",
        help="Path to data config YAML (default: config/data.yaml).",
    )
    parser.add_argument(
        "--features-config",
        type=str,
        default="config/features.yaml",
        help="Path to feature config YAML (default: config/features.yaml).",
    )
    parser.add_argument(
        "--ml-config",
        type=str,
        default="config/ml.yaml",
        help="Path to ML config YAML (default: config/ml.yaml).",
    )
    parser.add_argument(
        "--train-config",
        type=str,
        default="config/train.yaml",
        help="Path to global train config YAML (default: config/train.yaml).",
    )
    parser.add_argument(
        "--rank-by",
        type=str,
        default="accuracy",
        help="Metric used to rank models in the final summary (default: accuracy).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    # Load training config for logging / paths
    train_cfg = load_train_config(args.train_config)
    logger = get_logger(
        name="run_analysis",
        config=train_cfg,
        log_file_suffix="run",
    )

    logger.info("=" * 80)
    logger.info("Starting fake/real news analysis.")
    logger.info(
        "Configs: data=%s, features=%s, ml=%s, train=%s",
        args.data_config,
        args.features_config,
        args.ml_config,
        args.train_config,
    )

    metrics_df = train_and_evaluate_models(
        data_config_path=args.data_config,
        features_config_path=args.features_config,
        ml_config_path=args.ml_config,
        train_config_path=args.train_config,
    )

    if not metrics_df.empty:
        logger.info("Analysis completed.")
        print_model_ranking(metrics_df, metric=args.rank_by)
    else:
        logger.warning("Analysis finished, but metrics DataFrame is empty.")


if __name__ == "__main__":
    main()

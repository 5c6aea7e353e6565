"""
High-level utilities for inspecting and comparing model performance.

This module reads the result files written by
fakenews_analysis.training.train_ml:

- analysis_results.csv      (one row of metrics per model)
- metrics_<model>.json      (metrics + confusion matrix per model)
- importance_<model>.csv    (variable importance of tree models)

and provides helpers to rank models by a metric and to reload
confusion matrices and variable importances.

Usage examples (Python):

    from fakenews_analysis.evaluation.evaluate_models import (
        load_results,
        print_model_ranking,
        load_model_confusion_matrix,
        load_variable_importance,
        pretty_print_confusion_matrix,
    )

    df = load_results()
    print_model_ranking(df, metric="kappa")

    cm = load_model_confusion_matrix("svm_radial")
    if cm is not None:
        pretty_print_confusion_matrix(cm)

    top = load_variable_importance("rf_tokens").head(10)
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional, Sequence

import numpy as np
import pandas as pd

from fakenews_analysis.data.datasets import LABEL_NAMES
from fakenews_analysis.evaluation.metrics import METRIC_NAMES
from fakenews_analysis.utils.training_utils import load_train_config

RESULTS_FILENAME = "analysis_results.csv"


# ---------------------------------------------------------------------------
# Core loaders
# ---------------------------------------------------------------------------


def _load_json_if_exists(path: str) -> Optional[Dict[str, Any]]:
    """
    Load a JSON file if it exists, otherwise return None.
    """
    if not os.path.exists(path):
        return None
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _get_results_dir(train_config_path: str) -> str:
    """
    Get the results directory from the train config.
    """
    train_cfg = load_train_config(train_config_path)
    return train_cfg.get("paths", {}).get("results_dir", "experiments/results")


def load_results(
    train_config_path: str = "config/train.yaml",
    results_dir: Optional[str] = None,
) -> pd.DataFrame:
    """
    Load the per-model metrics table written by the last analysis run.

    Parameters
    ----------
    train_config_path : str
        Path to config/train.yaml, used to locate results_dir.
    results_dir : Optional[str]
        Explicit results directory; overrides the config.

    Returns
    -------
    pd.DataFrame
        One row per model; empty (with the metric columns) if no run
        has written results yet.
    """
    if results_dir is None:
        results_dir = _get_results_dir(train_config_path)

    csv_path = os.path.join(results_dir, RESULTS_FILENAME)
    if not os.path.exists(csv_path):
        return pd.DataFrame(columns=["model", *METRIC_NAMES])
    return pd.read_csv(csv_path)


def print_model_ranking(
    df: pd.DataFrame,
    metric: str = "accuracy",
    top_k: int = 10,
) -> None:
    """
    Print a ranking of models by a chosen metric.

    Parameters
    ----------
    df : pd.DataFrame
        DataFrame as returned by `load_results` or `run_analysis`.
    metric : str
        Metric to sort by (e.g., "accuracy", "kappa", "sensitivity").
    top_k : int
        Number of top models to display.
    """
    if df.empty:
        print("[evaluate_models] No results found (empty DataFrame).")
        return

    if metric not in df.columns:
        print(f"[evaluate_models] Metric '{metric}' not found in DataFrame columns.")
        print("Available columns:", list(df.columns))
        return

    top_df = df.sort_values(metric, ascending=False, na_position="last").head(top_k)

    display_cols = [c for c in ("model", *METRIC_NAMES) if c in top_df.columns]

    print(f"\nTop {min(top_k, len(top_df))} models by '{metric}':\n")
    with pd.option_context("display.max_rows", None, "display.width", 120):
        print(top_df[display_cols].to_string(index=False))
    print("")


# ---------------------------------------------------------------------------
# Confusion matrix helpers
# ---------------------------------------------------------------------------


def load_model_confusion_matrix(
    model_name: str,
    train_config_path: str = "config/train.yaml",
    results_dir: Optional[str] = None,
) -> Optional[np.ndarray]:
    """
    Load the confusion matrix saved for a model, if available.

    Returns
    -------
    Optional[np.ndarray]
        2x2 matrix (rows = true label, columns = predicted label), or None
        if the model has no saved metrics.
    """
    if results_dir is None:
        results_dir = _get_results_dir(train_config_path)

    metrics_data = _load_json_if_exists(os.path.join(results_dir, f"metrics_{model_name}.json"))
    if metrics_data is None:
        return None

    cm = metrics_data.get("confusion_matrix", None)
    if cm is None:
        return None

    return np.asarray(cm)


def load_variable_importance(
    model_name: str,
    train_config_path: str = "config/train.yaml",
    results_dir: Optional[str] = None,
) -> Optional[pd.DataFrame]:
    """
    Load the variable-importance table saved for a tree model.

    Returns None for models without saved importances (e.g. SVMs).
    """
    if results_dir is None:
        results_dir = _get_results_dir(train_config_path)

    csv_path = os.path.join(results_dir, f"importance_{model_name}.csv")
    if not os.path.exists(csv_path):
        return None
    return pd.read_csv(csv_path)


def pretty_print_confusion_matrix(
    cm: np.ndarray,
    labels: Sequence[str] = LABEL_NAMES,
) -> None:
    """
    Pretty-print a confusion matrix in the console.

    Parameters
    ----------
    cm : np.ndarray
        Confusion matrix of shape (n_classes, n_classes).
    labels : Sequence[str]
        Class labels in the order corresponding to the confusion matrix.
    """
    cm = np.asarray(cm)
    if cm.ndim != 2 or cm.shape[0] != cm.shape[1]:
        raise ValueError("Confusion matrix must be a square 2D array.")

    n = cm.shape[0]
    if len(labels) != n:
        raise ValueError(
            f"Number of labels ({len(labels)}) does not match CM size ({n})."
        )

    print("\nConfusion Matrix (rows: true, columns: predicted):")
    header = [""] + list(labels)
    row_format = "{:>10}" * (len(header))
    print(row_format.format(*header))

    for i in range(n):
        row_values = [labels[i]] + [str(int(v)) for v in cm[i]]
        print(row_format.format(*row_values))
    print("")


# ---------------------------------------------------------------------------
# Simple CLI
# ---------------------------------------------------------------------------


def _cli() -> None:
    """
    Simple CLI entry point for quick inspection from the terminal.

    Examples:

        python -m fakenews_analysis.evaluation.evaluate_models
        python -m fakenews_analysis.evaluation.evaluate_models --metric kappa
    """
    import argparse

    parser = argparse.ArgumentParser(
        description="Inspect and compare the fake-news classifiers of the last run."
    )
    parser.add_argument(
        "--train-config",
        type=str,
        default="config/train.yaml",
        help="Path to global train config (default: config/train.yaml).",
    )
    parser.add_argument(
        "--metric",
        type=str,
        default="accuracy",
        help="Metric to rank models by (default: accuracy).",
    )
    parser.add_argument(
        "--show-confusion",
        action="store_true",
        help="Also print every model's confusion matrix.",
    )
    parser.add_argument(
        "--show-importance",
        type=int,
        default=0,
        metavar="K",
        help="Also print the top-K variables of every tree model.",
    )

    args = parser.parse_args()

    df = load_results(train_config_path=args.train_config)
    print_model_ranking(df, metric=args.metric)

    if args.show_confusion:
        for model_name in df.get("model", []):
            cm = load_model_confusion_matrix(model_name, train_config_path=args.train_config)
            if cm is not None:
                print(f"[{model_name}]")
                pretty_print_confusion_matrix(cm)

    if args.show_importance > 0:
        for model_name in df.get("model", []):
            importance = load_variable_importance(model_name, train_config_path=args.train_config)
            if importance is not None:
                print(f"[{model_name}] top {args.show_importance} variables:")
                print(importance.head(args.show_importance).to_string(index=False))
                print("")


if __name__ == "__main__":
    _cli()

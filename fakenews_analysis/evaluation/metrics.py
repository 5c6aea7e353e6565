"""
Evaluation metrics for the fake/real news classifiers.

This module centralizes the confusion-matrix summary reported for every
model:

- confusion matrix (rows = true label, columns = predicted label, label
  order fake, real)
- accuracy
- sensitivity (true-positive rate of the fake class)
- specificity (true-positive rate of the real class)
- balanced accuracy
- Cohen's kappa

and the impurity-based variable importance of tree ensembles.

Ratios whose denominator is zero (e.g. a test set without fake articles)
are reported as NaN and logged rather than replaced by a default value.
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, Dict, Sequence, Union

import numpy as np
import pandas as pd
from sklearn.metrics import accuracy_score, cohen_kappa_score, confusion_matrix

from fakenews_analysis.data.datasets import LABEL_ORDER
from fakenews_analysis.models.fitted import FittedModel

logger = logging.getLogger(__name__)

ArrayLike = Union[Sequence[int], np.ndarray]

METRIC_NAMES = ("accuracy", "sensitivity", "specificity", "balanced_accuracy", "kappa")


def _ratio(num: float, den: float, name: str) -> float:
    if den == 0:
        logger.warning("%s is undefined (zero denominator); reporting NaN.", name)
        return float("nan")
    return float(num) / float(den)


def _kappa(y_true: np.ndarray, y_pred: np.ndarray, labels: Sequence[int]) -> float:
    # Chance agreement of 1 (a single label on both sides) leaves kappa 0/0.
    with warnings.catch_warnings(), np.errstate(divide="ignore", invalid="ignore"):
        warnings.simplefilter("ignore")
        kappa = float(cohen_kappa_score(y_true, y_pred, labels=list(labels)))
    if not np.isfinite(kappa):
        logger.warning("Kappa is undefined (chance agreement is 1); reporting NaN.")
        return float("nan")
    return kappa


def compute_confusion_metrics(
    y_true: ArrayLike,
    y_pred: ArrayLike,
) -> Dict[str, Any]:
    """
    Compute the confusion-matrix summary for a set of predictions.

    Parameters
    ----------
    y_true : ArrayLike
        Ground-truth labels (0 = fake, 1 = real).
    y_pred : ArrayLike
        Predicted labels, same shape as y_true.

    Returns
    -------
    Dict[str, Any]
        Keys "accuracy", "sensitivity", "specificity",
        "balanced_accuracy", "kappa", "n" and "confusion_matrix" (2x2
        nested list, rows = true label, columns = predicted label).
    """
    y_true_arr = np.asarray(y_true).astype(int)
    y_pred_arr = np.asarray(y_pred).astype(int)

    if y_true_arr.shape != y_pred_arr.shape:
        raise ValueError(
            f"y_true and y_pred must have the same shape, got "
            f"{y_true_arr.shape} and {y_pred_arr.shape}"
        )
    if y_true_arr.size == 0:
        raise ValueError("Cannot evaluate an empty prediction set.")

    labels = [int(label) for label in LABEL_ORDER]
    cm = confusion_matrix(y_true_arr, y_pred_arr, labels=labels)

    # Fake is the positive class.
    tp, fn = cm[0, 0], cm[0, 1]
    fp, tn = cm[1, 0], cm[1, 1]

    accuracy = accuracy_score(y_true_arr, y_pred_arr)
    sensitivity = _ratio(tp, tp + fn, "Sensitivity")
    specificity = _ratio(tn, tn + fp, "Specificity")
    balanced_accuracy = (sensitivity + specificity) / 2.0
    kappa = _kappa(y_true_arr, y_pred_arr, labels)

    return {
        "accuracy": float(accuracy),
        "sensitivity": sensitivity,
        "specificity": specificity,
        "balanced_accuracy": float(balanced_accuracy),
        "kappa": kappa,
        "n": int(cm.sum()),
        "confusion_matrix": cm.tolist(),
    }


def evaluate_model(model: FittedModel, test_frame: pd.DataFrame) -> Dict[str, Any]:
    """
    Score a fitted model on held-out rows and summarize the predictions.

    `test_frame` must contain the "label" column and every column the
    model was trained on; it is not modified.
    """
    y_pred = model.predict(test_frame)
    metrics = compute_confusion_metrics(test_frame["label"].to_numpy(), y_pred)
    if model.best_params:
        metrics["best_params"] = model.best_params
    return metrics


def variable_importance(model: FittedModel) -> pd.DataFrame:
    """
    Impurity-based importance of each feature of a tree ensemble.

    Returns
    -------
    pd.DataFrame
        Columns ["feature", "importance"], sorted by importance descending.

    Raises
    ------
    ValueError
        If the model does not expose feature importances.
    """
    estimator = model.final_estimator
    importances = getattr(estimator, "feature_importances_", None)
    if importances is None:
        raise ValueError(f"Model '{model.name}' does not provide feature importances.")

    df = pd.DataFrame(
        {"feature": list(model.feature_columns), "importance": np.asarray(importances, dtype=float)}
    )
    return df.sort_values("importance", ascending=False, kind="mergesort").reset_index(drop=True)

"""
Plotting utilities for the fake/real news analysis.

This module provides helpers to visualize:

- model-level metrics (e.g., accuracy or kappa across the four models)
- confusion matrices for individual models
- variable importance of the Random Forest models
- explained variance of the retained principal components

Every function returns the (fig, ax) pair, optionally saves the figure,
and closes it when `show` is False so batch runs do not accumulate open
figures.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from fakenews_analysis.data.datasets import LABEL_NAMES


def _finish(fig, out_path: Optional[str], show: bool) -> None:
    fig.tight_layout()

    if out_path is not None:
        fig.savefig(out_path, dpi=300, bbox_inches="tight")

    if show:
        plt.show()
    else:
        plt.close(fig)


# ---------------------------------------------------------------------------
# Bar plots for model metrics
# ---------------------------------------------------------------------------


def plot_metric_bar(
    results_df: pd.DataFrame,
    metric: str = "accuracy",
    figsize: Tuple[float, float] = (8.0, 5.0),
    rotate_xticks: int = 30,
    title: Optional[str] = None,
    out_path: Optional[str] = None,
    show: bool = True,
):
    """
    Plot a bar chart of a chosen metric across models.

    Parameters
    ----------
    results_df : pd.DataFrame
        Results table with a "model" column and one column per metric.
    metric : str
        Metric column to plot (default: "accuracy").
    figsize : Tuple[float, float]
        Figure size in inches.
    rotate_xticks : int
        Rotation angle for x-axis tick labels.
    title : Optional[str]
        Title for the plot. If None, a default is constructed.
    out_path : Optional[str]
        If provided, save the figure to this path (e.g., PNG).
    show : bool
        If True, call plt.show(). If False, close the figure.

    Returns
    -------
    (fig, ax)
        Matplotlib Figure and Axes objects.
    """
    if results_df.empty:
        raise ValueError("results_df is empty; nothing to plot.")

    if metric not in results_df.columns:
        raise ValueError(
            f"Metric '{metric}' not found in DataFrame columns. "
            f"Available columns: {list(results_df.columns)}"
        )

    df_sorted = results_df.sort_values(metric, ascending=False, na_position="last")
    scores = pd.to_numeric(df_sorted[metric], errors="coerce")
    models = df_sorted["model"].astype(str)

    fig, ax = plt.subplots(figsize=figsize)
    positions = np.arange(len(models))
    ax.bar(positions, scores.fillna(0.0))

    ax.set_ylabel(metric)
    ax.set_xlabel("Model")
    ax.set_title(title or f"Model comparison by {metric}")

    # Kappa can be negative.
    finite = scores.dropna()
    lower = min(0.0, float(finite.min())) if not finite.empty else 0.0
    upper = float(finite.max()) * 1.05 if not finite.empty and finite.max() > 0 else 1.0
    ax.set_ylim(lower, upper)

    ax.set_xticks(positions)
    ax.set_xticklabels(models, rotation=rotate_xticks, ha="right")

    # Annotate bars with metric values
    for i, v in enumerate(scores):
        if np.isnan(v):
            continue
        ax.text(i, v, f"{v:.3f}", ha="center", va="bottom", fontsize=9)

    _finish(fig, out_path, show)
    return fig, ax


# ---------------------------------------------------------------------------
# Confusion matrix plots
# ---------------------------------------------------------------------------


def plot_confusion_matrix(
    cm: np.ndarray,
    labels: Sequence[str] = LABEL_NAMES,
    normalize: bool = False,
    figsize: Tuple[float, float] = (5.0, 4.0),
    title: Optional[str] = None,
    out_path: Optional[str] = None,
    show: bool = True,
):
    """
    Plot a confusion matrix as a heatmap.

    Parameters
    ----------
    cm : np.ndarray
        Confusion matrix, rows = true labels, columns = predicted labels.
    labels : Sequence[str]
        Class labels in matrix order (default: fake, real).
    normalize : bool
        If True, normalize each row to sum to 1.0.

    Returns
    -------
    (fig, ax)
        Matplotlib Figure and Axes objects.
    """
    cm = np.asarray(cm)
    if cm.ndim != 2 or cm.shape[0] != cm.shape[1]:
        raise ValueError("Confusion matrix must be a square 2D array.")

    n_classes = cm.shape[0]
    if len(labels) != n_classes:
        raise ValueError(
            f"Number of labels ({len(labels)}) does not match CM size ({n_classes})."
        )

    if normalize:
        row_sums = cm.sum(axis=1, keepdims=True)
        cm_display = np.divide(
            cm, row_sums, out=np.zeros(cm.shape, dtype=float), where=row_sums != 0
        )
        fmt = ".2f"
    else:
        cm_display = cm
        fmt = "d"

    fig, ax = plt.subplots(figsize=figsize)
    im = ax.imshow(cm_display, interpolation="nearest", cmap="Blues")
    fig.colorbar(im, ax=ax)

    ax.set(
        xticks=np.arange(n_classes),
        yticks=np.arange(n_classes),
        xticklabels=labels,
        yticklabels=labels,
        ylabel="True label",
        xlabel="Predicted label",
    )

    if title is None:
        title = "Normalized confusion matrix" if normalize else "Confusion matrix"
    ax.set_title(title)

    # Annotate each cell
    thresh = cm_display.max() / 2.0 if cm_display.size > 0 else 0.5
    for i in range(n_classes):
        for j in range(n_classes):
            value = cm_display[i, j]
            ax.text(
                j,
                i,
                format(value, fmt),
                ha="center",
                va="center",
                color="white" if value > thresh else "black",
            )

    _finish(fig, out_path, show)
    return fig, ax


# ---------------------------------------------------------------------------
# Feature-level plots
# ---------------------------------------------------------------------------


def plot_variable_importance(
    importance_df: pd.DataFrame,
    top_k: Optional[int] = 20,
    figsize: Tuple[float, float] = (7.0, 6.0),
    title: Optional[str] = None,
    out_path: Optional[str] = None,
    show: bool = True,
):
    """
    Horizontal bar chart of feature importances, largest on top.

    `importance_df` is the output of
    fakenews_analysis.evaluation.metrics.variable_importance.
    """
    if importance_df.empty:
        raise ValueError("importance_df is empty; nothing to plot.")

    df = importance_df.sort_values("importance", ascending=False)
    if top_k is not None and top_k > 0:
        df = df.head(top_k)
    df = df.iloc[::-1]

    fig, ax = plt.subplots(figsize=figsize)
    ax.barh(df["feature"].astype(str), df["importance"])
    ax.set_xlabel("Mean decrease in impurity")
    ax.set_title(title or "Variable importance")

    _finish(fig, out_path, show)
    return fig, ax


def plot_pca_variance(
    explained_variance_ratio: Sequence[float],
    figsize: Tuple[float, float] = (7.0, 4.5),
    out_path: Optional[str] = None,
    show: bool = True,
):
    """
    Per-component and cumulative explained variance of the retained components.
    """
    ratios = np.asarray(explained_variance_ratio, dtype=float)
    if ratios.size == 0:
        raise ValueError("No explained variance values to plot.")

    positions = np.arange(1, ratios.size + 1)

    fig, ax = plt.subplots(figsize=figsize)
    ax.bar(positions, ratios, label="Component")
    ax.plot(positions, np.cumsum(ratios), marker="o", color="tab:orange", label="Cumulative")
    ax.set_xticks(positions)
    ax.set_xticklabels([f"PC{i}" for i in positions])
    ax.set_ylabel("Explained variance ratio")
    ax.set_ylim(0.0, 1.05)
    ax.set_title("PCA explained variance")
    ax.legend()
    ax.grid(True, linestyle="--", alpha=0.6)

    _finish(fig, out_path, show)
    return fig, ax

"""
Feature engineering, training and evaluation pipeline.

This module runs the full fake/real news analysis:

- loading the semicolon-delimited news dataset
- normalizing, tokenizing and stemming article bodies
- counting tokens and keeping those at or above the mean corpus frequency
- building the document-feature matrix (length, vocab_size, richness and
  one column per vocabulary token)
- projecting a curated column subset onto its leading principal components
- drawing one train/test split of document ids shared by every model
- training the configured classifiers:
    * Random Forest on scalar features + curated tokens
    * Random Forest on scalar features + principal components
    * linear SVM on scalar features + curated tokens
    * radial SVM on scalar features + principal components (grid search)
- evaluating each model on the held-out documents (accuracy, sensitivity,
  specificity, balanced accuracy, kappa, confusion matrix)
- saving metrics, variable importances, plots and models under the
  directories configured in config/train.yaml

`run_pipeline` does the in-memory work and returns every intermediate
artifact; `train_and_evaluate_models` adds config loading and reporting.
This module is callable both as a library and as a script
(`python -m fakenews_analysis.training.train_ml`).
"""

from __future__ import annotations

import json
import math
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import joblib
import numpy as np
import pandas as pd
from sklearn.model_selection import GridSearchCV

from fakenews_analysis.data.datasets import (
    DEFAULT_DATA_CONFIG_PATH,
    LABEL_ORDER,
    load_news_dataset,
)
from fakenews_analysis.data.split import (
    Split,
    apply_split,
    get_split_config,
    split_documents,
)
from fakenews_analysis.errors import ModelTrainingError
from fakenews_analysis.evaluation.evaluate_models import RESULTS_FILENAME
from fakenews_analysis.evaluation.metrics import (
    METRIC_NAMES,
    evaluate_model,
    variable_importance,
)
from fakenews_analysis.evaluation.plots import (
    plot_confusion_matrix,
    plot_metric_bar,
    plot_pca_variance,
    plot_variable_importance,
)
from fakenews_analysis.features.feature_matrix import (
    SCALAR_COLUMNS,
    build_feature_matrix,
    token_column_name,
)
from fakenews_analysis.features.pca import (
    PCAResult,
    append_components,
    component_names,
    reduce_with_pca,
)
from fakenews_analysis.features.preprocessing import (
    DEFAULT_FEATURE_CONFIG_PATH,
    iter_corpus_tokens,
    load_feature_config,
)
from fakenews_analysis.features.vocabulary import (
    VocabularyFilterResult,
    count_tokens,
    filter_vocabulary,
)
from fakenews_analysis.models.fitted import FittedModel, select_features
from fakenews_analysis.models.ml_models import (
    DEFAULT_ML_CONFIG_PATH,
    build_model,
    load_ml_config,
)
from fakenews_analysis.utils.training_utils import (
    DEFAULT_TRAIN_CONFIG_PATH,
    ensure_dir_exists,
    get_logger,
    load_train_config,
    seed_everything,
)

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    frame: pd.DataFrame
    vocabulary: VocabularyFilterResult
    pca: PCAResult
    split: Split
    models: Dict[str, FittedModel]
    metrics: Dict[str, Dict[str, Any]]

    def metrics_frame(self) -> pd.DataFrame:
        """One row per model with the scalar metrics, in training order."""
        records = [
            {"model": name, **{k: m[k] for k in (*METRIC_NAMES, "n")}}
            for name, m in self.metrics.items()
        ]
        return pd.DataFrame(records, columns=["model", *METRIC_NAMES, "n"])


# ---------------------------------------------------------------------------
# Core helpers
# ---------------------------------------------------------------------------


def build_features(
    documents: pd.DataFrame,
    feature_cfg: Dict[str, Any],
):
    """
    Run the text stages and return (feature frame, vocabulary result, PCA result).

    The returned frame already carries the PC columns.
    """
    counts = count_tokens(iter_corpus_tokens(documents, feature_cfg))
    logger.info(
        "Counted %d distinct (document, token) pairs over %d documents.",
        len(counts),
        counts["id"].nunique() if not counts.empty else 0,
    )

    vocab_cfg = feature_cfg["vocabulary"] or {}
    vocabulary = filter_vocabulary(counts, rule=vocab_cfg.get("threshold_rule", "mean"))

    frame = build_feature_matrix(documents, vocabulary.counts)
    logger.info("Feature matrix: %d documents x %d columns.", *frame.shape)

    pca_cfg = feature_cfg["pca"]
    pca_result = reduce_with_pca(
        frame,
        tokens=pca_cfg.get("tokens", []) or [],
        n_components=int(pca_cfg.get("n_components", 8)),
        scalar_columns=pca_cfg.get("scalar_columns", SCALAR_COLUMNS),
    )
    logger.info(
        "Retained %d principal components explaining %.1f%% of the variance.",
        pca_result.pca.n_components_,
        100.0 * float(np.sum(pca_result.explained_variance_ratio)),
    )

    return append_components(frame, pca_result), vocabulary, pca_result


def resolve_feature_columns(
    feature_set: Dict[str, Any],
    n_components: int,
) -> List[str]:
    """
    Expand a feature-set entry of config/ml.yaml into column names.

    An entry may set `scalar` (include length, vocab_size, richness),
    `tokens` (list of vocabulary tokens) and `components` (include
    PC1..PCk).
    """
    columns: List[str] = []
    if bool(feature_set.get("scalar", True)):
        columns.extend(SCALAR_COLUMNS)
    columns.extend(token_column_name(t) for t in feature_set.get("tokens", []) or [])
    if bool(feature_set.get("components", False)):
        columns.extend(component_names(n_components))
    if not columns:
        raise ValueError(f"Feature set resolves to no columns: {feature_set}")
    return columns


def train_model(
    name: str,
    estimator: Any,
    train_frame: pd.DataFrame,
    columns: Sequence[str],
) -> FittedModel:
    """
    Fit `estimator` on the given columns of the training rows.

    Raises
    ------
    FeatureSchemaError, MissingValueError
        If the training rows lack a column or contain missing values.
    ModelTrainingError
        If only one class is present or fitting fails. Also raised when
        a grid search finds no candidate with a finite score, or the
        fitted class order differs from (fake, real).
    """
    X = select_features(train_frame, columns)
    y = train_frame["label"].astype(int)

    present = set(y.unique())
    expected = {int(label) for label in LABEL_ORDER}
    if present != expected:
        raise ModelTrainingError(
            f"Training rows for '{name}' contain label(s) {sorted(present)}; "
            f"both {sorted(expected)} are required."
        )

    try:
        estimator.fit(X, y)
    except ValueError as exc:
        raise ModelTrainingError(f"Training '{name}' failed: {exc}") from exc

    if isinstance(estimator, GridSearchCV):
        if not np.isfinite(estimator.best_score_):
            raise ModelTrainingError(
                f"Hyperparameter search for '{name}' found no candidate with a finite score."
            )
        logger.info(
            "Best parameters for %s: %s (cv score %.4f)",
            name,
            estimator.best_params_,
            estimator.best_score_,
        )

    model = FittedModel(name=name, estimator=estimator, feature_columns=tuple(columns))
    fitted_classes = tuple(int(c) for c in getattr(estimator, "classes_", ()))
    if fitted_classes != model.classes:
        raise ModelTrainingError(
            f"'{name}' was fitted with class order {fitted_classes}; "
            f"expected {model.classes}."
        )
    return model


def run_pipeline(
    documents: pd.DataFrame,
    feature_cfg: Dict[str, Any],
    ml_cfg: Dict[str, Any],
    train_fraction: float = 0.8,
    seed: int = 1,
) -> AnalysisResult:
    """
    Run every stage from ingested documents to evaluation metrics.

    Parameters
    ----------
    documents : pd.DataFrame
        Documents with columns ["id", "title", "text", "label"].
    feature_cfg : Dict[str, Any]
        Parsed config/features.yaml.
    ml_cfg : Dict[str, Any]
        Parsed config/ml.yaml.
    train_fraction : float
        Share of documents used for training.
    seed : int
        Seed of the train/test split.

    Returns
    -------
    AnalysisResult
        Feature frame, vocabulary, PCA, split, fitted models and metrics.
    """
    frame, vocabulary, pca_result = build_features(documents, feature_cfg)

    split = split_documents(list(frame.index), train_fraction=train_fraction, seed=seed)
    train_frame, test_frame = apply_split(frame, split)
    logger.info("Train size: %d, Test size: %d", len(train_frame), len(test_frame))

    n_components = int(pca_result.pca.n_components_)

    models: Dict[str, FittedModel] = {}
    metrics: Dict[str, Dict[str, Any]] = {}

    for name, model_cfg in ml_cfg["models"].items():
        logger.info("=" * 80)
        logger.info("Training model: %s", name)

        set_name = model_cfg["features"]
        if set_name not in ml_cfg["feature_sets"]:
            raise KeyError(f"Model '{name}' refers to unknown feature set '{set_name}'.")
        columns = resolve_feature_columns(ml_cfg["feature_sets"][set_name], n_components)

        estimator = build_model(str(model_cfg["type"]), ml_cfg)
        fitted = train_model(name, estimator, train_frame, columns)
        models[name] = fitted

        metrics[name] = evaluate_model(fitted, test_frame)
        logger.info(
            "Metrics for %s - acc: %.4f, sens: %.4f, spec: %.4f, kappa: %.4f",
            name,
            metrics[name]["accuracy"],
            metrics[name]["sensitivity"],
            metrics[name]["specificity"],
            metrics[name]["kappa"],
        )

    return AnalysisResult(
        frame=frame,
        vocabulary=vocabulary,
        pca=pca_result,
        split=split,
        models=models,
        metrics=metrics,
    )


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


def _json_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """Replace undefined (NaN) metrics with None so the file is strict JSON."""
    return {
        key: None if isinstance(value, float) and math.isnan(value) else value
        for key, value in record.items()
    }


def _save_reports(
    result: AnalysisResult,
    train_cfg: Dict[str, Any],
    run_logger: logging.Logger,
) -> pd.DataFrame:
    paths_cfg = train_cfg.get("paths", {}) or {}
    results_dir = paths_cfg.get("results_dir", "experiments/results")
    figures_dir = paths_cfg.get("figures_dir", "experiments/figures")
    models_dir = paths_cfg.get("models_dir", "experiments/models")

    save_cfg = train_cfg.get("save", {}) or {}
    plots_cfg = train_cfg.get("plots", {}) or {}
    save_plots = bool(plots_cfg.get("enabled", True))
    save_models = bool(save_cfg.get("save_models", True))
    overwrite = bool(save_cfg.get("overwrite_existing", False))

    ensure_dir_exists(results_dir)
    if save_plots:
        ensure_dir_exists(figures_dir)
    if save_models:
        ensure_dir_exists(models_dir)

    # Vocabulary and split, so a run can be audited afterwards.
    vocab_df = result.vocabulary.totals.rename("total").reset_index()
    vocab_df["kept"] = vocab_df["token"].isin(result.vocabulary.vocabulary)
    vocab_df.to_csv(os.path.join(results_dir, "vocabulary.csv"), index=False)

    with open(os.path.join(results_dir, "split.json"), "w", encoding="utf-8") as f:
        json.dump(
            {
                "train_ids": list(result.split.train_ids),
                "test_ids": list(result.split.test_ids),
                "vocabulary_threshold": result.vocabulary.threshold,
            },
            f,
            indent=2,
        )

    if save_plots:
        plot_pca_variance(
            result.pca.explained_variance_ratio,
            out_path=os.path.join(figures_dir, "pca_explained_variance.png"),
            show=False,
        )

    for name, model in result.models.items():
        metrics = result.metrics[name]
        metrics_json_path = os.path.join(results_dir, f"metrics_{name}.json")
        with open(metrics_json_path, "w", encoding="utf-8") as f:
            json.dump(_json_record({"model": name, **metrics}), f, indent=2, allow_nan=False)
        run_logger.info("Saved metrics JSON for %s to %s", name, metrics_json_path)

        if save_plots:
            plot_confusion_matrix(
                np.asarray(metrics["confusion_matrix"]),
                title=f"Confusion matrix - {name}",
                out_path=os.path.join(figures_dir, f"confusion_{name}.png"),
                show=False,
            )

        if hasattr(model.final_estimator, "feature_importances_"):
            importance_df = variable_importance(model)
            importance_df.to_csv(
                os.path.join(results_dir, f"importance_{name}.csv"), index=False
            )
            run_logger.info(
                "Top features for %s: %s",
                name,
                ", ".join(importance_df["feature"].head(5)),
            )
            if save_plots:
                plot_variable_importance(
                    importance_df,
                    title=f"Variable importance - {name}",
                    out_path=os.path.join(figures_dir, f"importance_{name}.png"),
                    show=False,
                )

        if save_models:
            model_path = os.path.join(models_dir, f"model_{name}.joblib")
            if not os.path.exists(model_path) or overwrite:
                joblib.dump(model, model_path)
                run_logger.info("Saved trained model '%s' to %s", name, model_path)
            else:
                run_logger.info(
                    "Model file already exists and overwrite_existing is False: %s",
                    model_path,
                )

    metrics_df = result.metrics_frame()
    csv_path = os.path.join(results_dir, RESULTS_FILENAME)
    metrics_df.to_csv(csv_path, index=False)
    run_logger.info("Saved aggregated metrics to %s", csv_path)

    if save_plots:
        for metric in plots_cfg.get("metrics", ["accuracy", "kappa"]):
            plot_metric_bar(
                metrics_df,
                metric=metric,
                out_path=os.path.join(figures_dir, f"comparison_{metric}.png"),
                show=False,
            )

    return metrics_df


# ---------------------------------------------------------------------------
# Training + evaluation
# ---------------------------------------------------------------------------


def train_and_evaluate_models(
    data_config_path: str = DEFAULT_DATA_CONFIG_PATH,
    features_config_path: str = DEFAULT_FEATURE_CONFIG_PATH,
    ml_config_path: str = DEFAULT_ML_CONFIG_PATH,
    train_config_path: str = DEFAULT_TRAIN_CONFIG_PATH,
    documents: Optional[pd.DataFrame] = None,
) -> pd.DataFrame:
    """
    End-to-end analysis run driven by the four YAML configs.

    Parameters
    ----------
    data_config_path : str
        Path to config/data.yaml.
    features_config_path : str
        Path to config/features.yaml.
    ml_config_path : str
        Path to config/ml.yaml.
    train_config_path : str
        Path to config/train.yaml.
    documents : Optional[pd.DataFrame]
        Already-loaded documents; when None the dataset named in the data
        config is read.

    Returns
    -------
    pd.DataFrame
        One row per model with columns ["model", "accuracy",
        "sensitivity", "specificity", "balanced_accuracy", "kappa", "n"].
    """
    feature_cfg = load_feature_config(features_config_path)
    ml_cfg = load_ml_config(ml_config_path)
    train_cfg = load_train_config(train_config_path)

    seed_everything(int(train_cfg.get("general", {}).get("random_state", 1)))

    run_logger = get_logger(
        name="fakenews_analysis",
        config=train_cfg,
        log_file_suffix="analysis",
    )

    if documents is None:
        documents = load_news_dataset(config_path=data_config_path)
    run_logger.info("Loaded dataset with %d documents.", len(documents))
    run_logger.info(
        "Label counts: %s",
        documents["label"].value_counts().sort_index().to_dict(),
    )

    split_cfg = get_split_config(data_config_path)
    result = run_pipeline(
        documents,
        feature_cfg,
        ml_cfg,
        train_fraction=float(split_cfg.get("train_fraction", 0.8)),
        seed=int(split_cfg.get("seed", 1)),
    )

    return _save_reports(result, train_cfg, run_logger)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """
    Main entry point when running this module as a script.
    """
    _ = train_and_evaluate_models()


if __name__ == "__main__":
    main()

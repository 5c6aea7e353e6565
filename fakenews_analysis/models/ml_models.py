"""
Classical machine learning model builders for fake-news detection.

This module provides helper functions to construct the four classifiers
compared in the analysis:

- Random Forest on scalar features + curated tokens ("rf_tokens")
- Random Forest on scalar features + principal components ("rf_pca")
- linear-kernel SVM on scalar features + curated tokens ("svm_linear")
- radial-kernel SVM on scalar features + principal components, with
  cost and gamma chosen by grid search ("svm_radial")

Hyperparameters and feature sets are read from config/ml.yaml so they can
be tuned without modifying code. The training pipeline (fit/predict,
metrics, reports) is implemented in fakenews_analysis/training/train_ml.py.
"""

from __future__ import annotations

from typing import Any, Dict, List

import numpy as np
from sklearn.ensemble import RandomForestClassifier
from sklearn.model_selection import GridSearchCV, StratifiedKFold
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler
from sklearn.svm import SVC

from fakenews_analysis.utils.training_utils import load_yaml_file, require_sections


DEFAULT_ML_CONFIG_PATH = "config/ml.yaml"


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------


def load_ml_config(config_path: str = DEFAULT_ML_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load and return the ML configuration dictionary.

    Parameters
    ----------
    config_path : str
        Path to the ML YAML configuration file.

    Returns
    -------
    Dict[str, Any]
        Parsed configuration with "general", "feature_sets", "models" and
        "ml_models" sections.
    """
    cfg = load_yaml_file(config_path, kind="ML config")
    require_sections(
        cfg, ("general", "feature_sets", "models", "ml_models"), config_path, "ML config"
    )
    return cfg


# ---------------------------------------------------------------------------
# Model builder helpers
# ---------------------------------------------------------------------------


def _maybe_wrap_with_scaler(model: Any, use_scaling: bool) -> Any:
    """
    Optionally put a StandardScaler in front of an SVM.

    The scaler is part of the estimator, so it is fitted on the training
    rows only and reapplied to whatever is scored later.
    """
    if not use_scaling:
        return model
    return Pipeline(
        [
            ("scaler", StandardScaler()),
            ("clf", model),
        ]
    )


def build_random_forest(cfg: Dict[str, Any]) -> RandomForestClassifier:
    mcfg = cfg["ml_models"].get("random_forest", {}) or {}
    return RandomForestClassifier(
        n_estimators=int(mcfg.get("n_estimators", 500)),
        criterion=str(mcfg.get("criterion", "gini")),
        max_depth=mcfg.get("max_depth", None),
        min_samples_split=int(mcfg.get("min_samples_split", 2)),
        min_samples_leaf=int(mcfg.get("min_samples_leaf", 1)),
        max_features=mcfg.get("max_features", "sqrt"),
        n_jobs=int(mcfg.get("n_jobs", 1)),
        random_state=int(cfg["general"].get("random_state", 1)),
    )


def build_svm_linear(cfg: Dict[str, Any]) -> Any:
    mcfg = cfg["ml_models"].get("svm_linear", {}) or {}
    svc = SVC(
        kernel="linear",
        C=float(mcfg.get("C", 1.0)),
        random_state=int(cfg["general"].get("random_state", 1)),
    )
    return _maybe_wrap_with_scaler(svc, bool(cfg["general"].get("use_feature_scaling", True)))


def exponent_grid(bounds: List[int], base: float = 10.0) -> List[float]:
    """
    Exponentially spaced candidates base**lo ... base**hi (inclusive).

    >>> exponent_grid([-2, 1])
    [0.01, 0.1, 1.0, 10.0]
    """
    lo, hi = int(bounds[0]), int(bounds[1])
    if hi < lo:
        raise ValueError(f"Invalid exponent range: {bounds}")
    return [float(v) for v in np.power(float(base), np.arange(lo, hi + 1))]


def build_svm_radial_search(cfg: Dict[str, Any]) -> GridSearchCV:
    """
    Build a grid search over cost (C) and kernel bandwidth (gamma) for a
    radial-kernel SVM.

    Candidate grids are powers of ten taken from the configured exponent
    ranges (cost 10^-2..10^5, gamma 10^-5..10^2 by default). Each
    candidate is scored by cross-validation on the training rows only.
    A failing candidate raises instead of being scored as NaN.
    """
    mcfg = cfg["ml_models"].get("svm_radial", {}) or {}
    general_cfg = cfg["general"]
    random_state = int(general_cfg.get("random_state", 1))
    use_scaling = bool(general_cfg.get("use_feature_scaling", True))

    svc = SVC(kernel="rbf", random_state=random_state)
    estimator = _maybe_wrap_with_scaler(svc, use_scaling)
    prefix = "clf__" if use_scaling else ""

    param_grid = {
        f"{prefix}C": exponent_grid(mcfg.get("cost_exponents", [-2, 5])),
        f"{prefix}gamma": exponent_grid(mcfg.get("gamma_exponents", [-5, 2])),
    }

    cv = StratifiedKFold(
        n_splits=int(mcfg.get("cv", 10)),
        shuffle=True,
        random_state=random_state,
    )

    return GridSearchCV(
        estimator,
        param_grid=param_grid,
        scoring=str(mcfg.get("scoring", "accuracy")),
        cv=cv,
        n_jobs=int(mcfg.get("n_jobs", 1)),
        refit=True,
        error_score="raise",
    )


_BUILDERS = {
    "random_forest": build_random_forest,
    "svm_linear": build_svm_linear,
    "svm_radial": build_svm_radial_search,
}


def build_model(model_type: str, cfg: Dict[str, Any]) -> Any:
    try:
        builder = _BUILDERS[model_type]
    except KeyError:
        raise ValueError(
            f"Unknown model type {model_type!r}; expected one of {sorted(_BUILDERS)}"
        ) from None
    return builder(cfg)


# ---------------------------------------------------------------------------
# Public factory: build all models
# ---------------------------------------------------------------------------


def build_all_ml_models(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build every model listed under "models" in the ML configuration.

    Parameters
    ----------
    cfg : Dict[str, Any]
        Parsed config/ml.yaml.

    Returns
    -------
    Dict[str, Any]
        Unfitted estimators keyed by model name, in config order
        (by default "rf_tokens", "rf_pca", "svm_linear", "svm_radial").
    """
    models: Dict[str, Any] = {}
    for name, model_cfg in cfg["models"].items():
        models[name] = build_model(str(model_cfg["type"]), cfg)
    return models

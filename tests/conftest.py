"""
Shared fixtures: a small synthetic news corpus and matching configs.

Every fake article carries the tokens {shock: 2, alien, hoax, secret}
and every real article {budget, report, tax} once each, plus a few
stopwords, punctuation and low-frequency words that the vocabulary
filter removes ("zebra", "lemon", "plan", "market").
"""

from __future__ import annotations

import copy

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest


FAKE_TEXTS = [
    "Shock! The alien hoax is a secret shock zebra.",
    "Secret alien shock and hoax, shock.",
    "The hoax: alien secret, shock shock.",
    "Alien shock hoax secret shock.",
    "Shock hoax, alien secret shock!",
]

REAL_TEXTS = [
    "Budget reports and tax plan lemon.",
    "The market report: budget tax.",
    "Tax plan report, budget market.",
    "Budget report is a tax plan.",
    "Market budget report tax plan.",
]

# Token totals: shock 10, alien/hoax/secret/budget/report/tax 5, plan 4,
# market 3, zebra 1, lemon 1 -> mean 49/11.
EXPECTED_VOCABULARY = ["alien", "budget", "hoax", "report", "secret", "shock", "tax"]
EXPECTED_THRESHOLD = 49.0 / 11.0


FEATURE_CFG = {
    "preprocessing": {
        "lowercase": True,
        "remove_punctuation": True,
        "stopwords": {"enabled": True, "source": "sklearn", "language": "english"},
        "stemming": {"enabled": True, "algorithm": "porter"},
    },
    "vocabulary": {"threshold_rule": "mean"},
    "pca": {
        "n_components": 1,
        "scalar_columns": ["length", "vocab_size", "richness"],
        "tokens": ["shock", "hoax", "budget", "tax"],
    },
}

ML_CFG = {
    "general": {"random_state": 1, "use_feature_scaling": True},
    "feature_sets": {
        "tokens": {"scalar": True, "tokens": ["shock", "hoax", "secret", "budget", "report"]},
        "pca": {"scalar": True, "components": True},
    },
    "models": {
        "rf_tokens": {"type": "random_forest", "features": "tokens"},
        "rf_pca": {"type": "random_forest", "features": "pca"},
        "svm_linear": {"type": "svm_linear", "features": "tokens"},
        "svm_radial": {"type": "svm_radial", "features": "pca"},
    },
    "ml_models": {
        "random_forest": {"n_estimators": 50, "max_features": "sqrt", "n_jobs": 1},
        "svm_linear": {"C": 1.0},
        "svm_radial": {
            "cost_exponents": [-1, 1],
            "gamma_exponents": [-2, 0],
            "cv": 2,
            "scoring": "accuracy",
            "n_jobs": 1,
        },
    },
}


@pytest.fixture
def news_documents() -> pd.DataFrame:
    ids = [f"d{i:02d}" for i in range(1, 11)]
    return pd.DataFrame(
        {
            "id": ids,
            "title": [f"Title {i}" for i in ids],
            "text": FAKE_TEXTS + REAL_TEXTS,
            "label": [0] * len(FAKE_TEXTS) + [1] * len(REAL_TEXTS),
        }
    )


@pytest.fixture
def feature_cfg():
    return copy.deepcopy(FEATURE_CFG)


@pytest.fixture
def ml_cfg():
    return copy.deepcopy(ML_CFG)

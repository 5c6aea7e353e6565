"""
Tests for PCA over the curated feature subset.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from fakenews_analysis.errors import FeatureSchemaError, UndefinedStatisticError
from fakenews_analysis.features.pca import (
    append_components,
    reconstruct_standardized,
    reduce_with_pca,
)


@pytest.fixture
def random_frame():
    rng = np.random.RandomState(0)
    n = 40
    base = rng.normal(size=(n, 3))
    data = {
        "length": rng.randint(20, 200, size=n),
        "vocab_size": rng.randint(10, 20, size=n),
        "richness": rng.uniform(0.1, 1.0, size=n),
        "trump": base[:, 0] * 3 + rng.normal(scale=0.1, size=n),
        "said": base[:, 0] + base[:, 1],
        "elect": base[:, 2],
    }
    return pd.DataFrame(data, index=[f"d{i}" for i in range(n)])


def test_scores_layout(random_frame):
    result = reduce_with_pca(random_frame, tokens=["trump", "said", "elect"], n_components=4)

    assert list(result.scores.columns) == ["PC1", "PC2", "PC3", "PC4"]
    assert list(result.scores.index) == list(random_frame.index)
    assert result.columns == ["length", "vocab_size", "richness", "trump", "said", "elect"]
    ratios = result.explained_variance_ratio
    assert np.all(np.diff(ratios) <= 1e-12)


def test_standardization_uses_full_frame(random_frame):
    result = reduce_with_pca(random_frame, tokens=["trump"], n_components=2)

    assert result.standardized.mean(axis=0) == pytest.approx(np.zeros(4), abs=1e-10)
    assert result.standardized.std(axis=0) == pytest.approx(np.ones(4))


def test_reconstruction_error_matches_dropped_variance(random_frame):
    result = reduce_with_pca(random_frame, tokens=["trump", "said", "elect"], n_components=3)

    reconstructed = reconstruct_standardized(result)
    residual = result.standardized - reconstructed

    total = np.sum(result.standardized ** 2)
    dropped_share = np.sum(residual ** 2) / total
    assert dropped_share == pytest.approx(1.0 - np.sum(result.explained_variance_ratio), abs=1e-8)


def test_full_rank_reconstruction_is_exact(random_frame):
    result = reduce_with_pca(random_frame, tokens=["trump", "said", "elect"], n_components=6)
    np.testing.assert_allclose(reconstruct_standardized(result), result.standardized, atol=1e-8)


def test_append_components(random_frame):
    result = reduce_with_pca(random_frame, tokens=["said"], n_components=2)
    frame = append_components(random_frame, result)

    assert list(frame.columns[-2:]) == ["PC1", "PC2"]
    assert len(frame) == len(random_frame)


def test_missing_curated_token_is_fatal(random_frame):
    with pytest.raises(FeatureSchemaError):
        reduce_with_pca(random_frame, tokens=["clinton"], n_components=2)


def test_constant_column_is_fatal(random_frame):
    random_frame["obama"] = 1
    with pytest.raises(UndefinedStatisticError):
        reduce_with_pca(random_frame, tokens=["obama"], n_components=2)


def test_too_many_components(random_frame):
    with pytest.raises(ValueError):
        reduce_with_pca(random_frame, tokens=["said"], n_components=5)

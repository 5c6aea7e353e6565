"""
Tests for scalar features and the wide document-feature matrix.
"""

from __future__ import annotations

import pandas as pd
import pytest

from fakenews_analysis.errors import EmptyCorpusError, UndefinedStatisticError
from fakenews_analysis.features.feature_matrix import (
    build_feature_matrix,
    build_wide_matrix,
    compute_scalar_features,
    token_column_name,
    token_columns,
)
from fakenews_analysis.features.preprocessing import iter_corpus_tokens
from fakenews_analysis.features.vocabulary import count_tokens, filter_vocabulary


@pytest.fixture
def filtered(news_documents, feature_cfg):
    counts = count_tokens(iter_corpus_tokens(news_documents, feature_cfg))
    return filter_vocabulary(counts).counts


def test_scalar_features_on_synthetic_corpus(filtered):
    scalar = compute_scalar_features(filtered)

    assert list(scalar.columns) == ["length", "vocab_size", "richness"]
    assert scalar.loc["d01"].tolist() == pytest.approx([5, 4, 0.8])
    assert scalar.loc["d06"].tolist() == pytest.approx([3, 3, 1.0])


def test_richness_bounds(filtered):
    scalar = compute_scalar_features(filtered)

    assert (scalar["richness"] > 0).all()
    assert (scalar["richness"] <= 1).all()
    assert (scalar["vocab_size"] <= scalar["length"]).all()


def test_zero_length_document_is_fatal():
    counts = pd.DataFrame({"id": ["a", "b"], "label": [0, 1], "token": ["x", "y"], "n": [2, 0]})
    with pytest.raises(UndefinedStatisticError):
        compute_scalar_features(counts)


def test_wide_matrix_fills_missing_with_zero(filtered):
    wide = build_wide_matrix(filtered)

    assert list(wide.columns) == sorted(wide.columns)
    assert not wide.isna().any().any()
    assert wide.loc["d06", "shock"] == 0
    assert wide.loc["d01", "shock"] == 2


def test_token_columns_sum_to_length(news_documents, filtered):
    frame = build_feature_matrix(news_documents, filtered)
    tokens = token_columns(frame)

    assert tokens == ["alien", "budget", "hoax", "report", "secret", "shock", "tax"]
    pd.testing.assert_series_equal(
        frame[tokens].sum(axis=1), frame["length"], check_names=False, check_dtype=False
    )


def test_feature_matrix_layout(news_documents, filtered):
    frame = build_feature_matrix(news_documents, filtered)

    assert list(frame.columns[:4]) == ["label", "length", "vocab_size", "richness"]
    assert list(frame.index) == list(news_documents["id"])
    assert frame.loc["d03", "label"] == 0
    assert frame.loc["d09", "label"] == 1


def test_document_without_surviving_tokens_is_dropped(news_documents, filtered, caplog):
    extra = pd.DataFrame(
        {"id": ["d11"], "title": ["t"], "text": ["zebra"], "label": [1]}
    )
    documents = pd.concat([news_documents, extra], ignore_index=True)

    with caplog.at_level("WARNING"):
        frame = build_feature_matrix(documents, filtered)

    assert "d11" not in frame.index
    assert len(frame) == 10
    assert "Dropped 1 document" in caplog.text


def test_empty_filtered_relation_is_fatal(news_documents):
    empty = pd.DataFrame(columns=["id", "label", "token", "n"])
    with pytest.raises(EmptyCorpusError):
        build_feature_matrix(news_documents, empty)


def test_reserved_token_names_are_renamed():
    assert token_column_name("length") == "length_"
    assert token_column_name("label") == "label_"
    assert token_column_name("PC3") == "PC3_"
    assert token_column_name("trump") == "trump"

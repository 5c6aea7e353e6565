"""
Tests for text normalization, tokenization and stemming.
"""

from __future__ import annotations

import types

import pytest

from fakenews_analysis.features.preprocessing import (
    build_stemmer,
    get_stopword_set,
    iter_corpus_tokens,
    normalize_text,
    tokenize_document,
)


def test_normalize_text_lowercases_and_deletes_punctuation():
    assert normalize_text("HELLO, World!") == "hello world"


def test_normalize_text_joins_words_around_inner_punctuation():
    # Punctuation is deleted, not replaced by whitespace.
    assert normalize_text("Don't stop-words") == "dont stopwords"


def test_normalize_text_empty_string():
    assert normalize_text("") == ""


def test_normalize_text_coerces_non_strings():
    assert normalize_text(42) == "42"


def test_tokenize_document_is_lazy_and_tags_tokens():
    stemmer = build_stemmer("porter")
    tokens = tokenize_document("the reports said", "a1", 1, {"the"}, stemmer)

    assert isinstance(tokens, types.GeneratorType)
    assert list(tokens) == [("a1", 1, "report"), ("a1", 1, "said")]


def test_stopwords_are_matched_before_stemming():
    stemmer = build_stemmer("porter")
    tokens = list(tokenize_document("running runs", "x", 0, {"running"}, stemmer))
    assert tokens == [("x", 0, "run")]


def test_stemming_is_a_pure_function_of_the_token():
    stemmer = build_stemmer("porter")
    first = [t for _, _, t in tokenize_document("reports report", "a", 0, set(), stemmer)]
    second = [t for _, _, t in tokenize_document("report reports", "b", 1, set(), stemmer)]
    assert first == ["report", "report"]
    assert second == first


def test_build_stemmer_rejects_unknown_algorithm():
    with pytest.raises(ValueError):
        build_stemmer("lancaster-ish")


def test_get_stopword_set_sources():
    assert "the" in get_stopword_set("sklearn")
    assert get_stopword_set("none") == set()
    with pytest.raises(ValueError):
        get_stopword_set("unknown")


def test_iter_corpus_tokens_drops_stopwords_and_stems(news_documents, feature_cfg):
    tokens = list(iter_corpus_tokens(news_documents.iloc[[5]], feature_cfg))

    assert [t for _, _, t in tokens] == ["budget", "report", "tax", "plan", "lemon"]
    assert {(doc_id, label) for doc_id, label, _ in tokens} == {("d06", 1)}


def test_iter_corpus_tokens_without_stemming(news_documents, feature_cfg):
    feature_cfg["preprocessing"]["stemming"]["enabled"] = False
    tokens = [t for _, _, t in iter_corpus_tokens(news_documents.iloc[[5]], feature_cfg)]
    assert "reports" in tokens

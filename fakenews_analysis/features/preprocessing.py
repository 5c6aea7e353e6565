"""
Text preprocessing utilities for the news-article analysis.

This module implements the text side of the feature pipeline:

- lowercasing
- punctuation removal (characters are deleted, not replaced by spaces)
- whitespace tokenization
- stopword removal
- stemming

Tokens are produced lazily as (document id, label, stem) tuples so the
whole corpus never has to be held as token lists. Configuration is driven
by config/features.yaml, so the pipeline can be tweaked without changing
this code.
"""

from __future__ import annotations

import string
from typing import Any, Dict, Iterator, Set, Tuple

import pandas as pd
from nltk.corpus import stopwords as nltk_stopwords
from nltk.stem import PorterStemmer, SnowballStemmer
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

from fakenews_analysis.utils.training_utils import load_yaml_file, require_sections


DEFAULT_FEATURE_CONFIG_PATH = "config/features.yaml"

TokenTuple = Tuple[str, int, str]

_PUNCT_TABLE = str.maketrans("", "", string.punctuation)


def load_feature_config(
    config_path: str = DEFAULT_FEATURE_CONFIG_PATH,
) -> Dict[str, Any]:
    """
    Load the feature-engineering configuration.

    Returns
    -------
    Dict[str, Any]
        Dictionary containing the "preprocessing", "vocabulary" and "pca"
        sections.
    """
    cfg = load_yaml_file(config_path, kind="Feature config")
    require_sections(cfg, ("preprocessing", "vocabulary", "pca"), config_path, "feature config")
    return cfg


# ---------------------------------------------------------------------------
# Basic text cleaning
# ---------------------------------------------------------------------------


def normalize_text(
    text: str,
    lowercase: bool = True,
    remove_punctuation: bool = True,
) -> str:
    """
    Lower-case a raw text and delete punctuation characters.

    Punctuation is removed outright rather than replaced with a space,
    so "don't" becomes "dont" while "end. Start" stays two words.

    Parameters
    ----------
    text : str
        Raw input text.
    lowercase : bool
        Convert text to lowercase if True.
    remove_punctuation : bool
        Delete characters from `string.punctuation` if True.

    Returns
    -------
    str
        Normalized text.
    """
    if not isinstance(text, str):
        text = str(text)

    if lowercase:
        text = text.lower()

    if remove_punctuation:
        text = text.translate(_PUNCT_TABLE)

    return text


# ---------------------------------------------------------------------------
# Stopwords and stemming
# ---------------------------------------------------------------------------


def get_stopword_set(source: str = "sklearn", language: str = "english") -> Set[str]:
    """
    Build the stopword set used to filter tokens.

    Parameters
    ----------
    source : str
        "sklearn" for scikit-learn's English list, "nltk" for the NLTK
        stopwords corpus (needs `nltk.download("stopwords")`), or "none".
    language : str
        Language for the NLTK corpus.

    Returns
    -------
    Set[str]
        Set of stopwords.
    """
    source = (source or "sklearn").lower()
    if source == "sklearn":
        if language.lower() != "english":
            raise ValueError("The sklearn stopword list is only available for English.")
        return set(ENGLISH_STOP_WORDS)
    if source == "nltk":
        return set(nltk_stopwords.words(language.lower()))
    if source == "none":
        return set()
    raise ValueError(f"Unknown stopword source: {source!r}")


def build_stemmer(algorithm: str = "porter"):
    """
    Build a stemming object based on the chosen algorithm.

    Parameters
    ----------
    algorithm : str
        Name of the stemming algorithm: "porter" or "snowball".

    Returns
    -------
    object
        Stemmer object with a .stem(token) method.
    """
    algo = (algorithm or "porter").lower()
    if algo == "porter":
        return PorterStemmer()
    if algo == "snowball":
        return SnowballStemmer("english")
    raise ValueError(f"Unknown stemming algorithm: {algorithm!r}")


# ---------------------------------------------------------------------------
# Tokenization
# ---------------------------------------------------------------------------


def tokenize_document(
    text: str,
    doc_id: str,
    label: int,
    stopword_set: Set[str],
    stemmer=None,
) -> Iterator[TokenTuple]:
    """
    Yield (doc_id, label, stem) for every non-stopword in a normalized text.

    Stopwords are matched on the unstemmed word. When `stemmer` is None,
    words are yielded unchanged.
    """
    for word in text.split():
        if word in stopword_set:
            continue
        yield doc_id, label, stemmer.stem(word) if stemmer is not None else word


def iter_corpus_tokens(
    documents: pd.DataFrame,
    feature_cfg: Dict[str, Any],
) -> Iterator[TokenTuple]:
    """
    Normalize, tokenize and stem every document of a corpus.

    Parameters
    ----------
    documents : pd.DataFrame
        Documents with columns ["id", "text", "label"].
    feature_cfg : Dict[str, Any]
        Parsed config/features.yaml.

    Yields
    ------
    Tuple[str, int, str]
        (document id, label, stemmed token).
    """
    cfg = feature_cfg["preprocessing"]

    lowercase = bool(cfg.get("lowercase", True))
    remove_punctuation = bool(cfg.get("remove_punctuation", True))

    sw_cfg = cfg.get("stopwords", {}) or {}
    if bool(sw_cfg.get("enabled", True)):
        stopword_set = get_stopword_set(
            source=sw_cfg.get("source", "sklearn"),
            language=sw_cfg.get("language", "english"),
        )
    else:
        stopword_set = set()

    stem_cfg = cfg.get("stemming", {}) or {}
    stemmer = None
    if bool(stem_cfg.get("enabled", True)):
        stemmer = build_stemmer(stem_cfg.get("algorithm", "porter"))

    for doc_id, text, label in zip(documents["id"], documents["text"], documents["label"]):
        normalized = normalize_text(text, lowercase=lowercase, remove_punctuation=remove_punctuation)
        yield from tokenize_document(normalized, doc_id, int(label), stopword_set, stemmer)

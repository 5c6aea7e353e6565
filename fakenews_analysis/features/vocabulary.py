"""
Token counting and vocabulary filtering.

Token tuples from the preprocessing stage are counted per document, and a
corpus-wide frequency cut keeps only the tokens whose total count reaches
a threshold. The default threshold is the population mean of the per-token
totals over all distinct tokens; it is a heuristic, kept configurable
through config/features.yaml ("vocabulary.threshold_rule").
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from fakenews_analysis.errors import EmptyCorpusError

logger = logging.getLogger(__name__)

COUNT_COLUMNS = ["id", "label", "token", "n"]


@dataclass
class VocabularyFilterResult:
    counts: pd.DataFrame
    vocabulary: List[str]
    threshold: float
    totals: pd.Series


def count_tokens(token_tuples: Iterable[Tuple[str, int, str]]) -> pd.DataFrame:
    """
    Count (document id, label, token) occurrences.

    Returns
    -------
    pd.DataFrame
        Columns ["id", "label", "token", "n"], one row per distinct
        (id, token) pair, sorted by id then token.
    """
    tokens = pd.DataFrame(list(token_tuples), columns=["id", "label", "token"])
    if tokens.empty:
        return pd.DataFrame(
            {"id": pd.Series(dtype=object), "label": pd.Series(dtype=int),
             "token": pd.Series(dtype=object), "n": pd.Series(dtype=int)}
        )

    counts = (
        tokens.groupby(["id", "label", "token"], sort=True)
        .size()
        .reset_index(name="n")
    )
    return counts[COUNT_COLUMNS]


def compute_threshold(totals: pd.Series, rule: str = "mean") -> float:
    """
    Compute the frequency cut from per-token corpus totals.

    Parameters
    ----------
    totals : pd.Series
        Total count per distinct token.
    rule : str
        "mean" (population mean) or "median".

    Raises
    ------
    EmptyCorpusError
        If there are no tokens, since the statistic is undefined.
    """
    if totals.empty:
        raise EmptyCorpusError("Cannot compute a vocabulary threshold over an empty corpus.")

    rule = (rule or "mean").lower()
    if rule == "mean":
        return float(totals.mean())
    if rule == "median":
        return float(totals.median())
    raise ValueError(f"Unknown vocabulary threshold rule: {rule!r}")


def filter_vocabulary(
    counts: pd.DataFrame,
    rule: str = "mean",
    threshold: Optional[float] = None,
) -> VocabularyFilterResult:
    """
    Keep tokens whose corpus-wide total count is >= the threshold.

    Parameters
    ----------
    counts : pd.DataFrame
        Output of `count_tokens`.
    rule : str
        Threshold rule used when `threshold` is None.
    threshold : Optional[float]
        Explicit cut. Passing the `threshold` of an earlier result
        re-applies that exact cut instead of recomputing it.

    Returns
    -------
    VocabularyFilterResult
        Filtered counts, sorted vocabulary, the threshold used, and the
        unfiltered per-token totals.

    Raises
    ------
    EmptyCorpusError
        If `counts` is empty or no token survives.
    """
    if counts.empty:
        raise EmptyCorpusError(
            "No tokens left after preprocessing; the vocabulary threshold is undefined."
        )

    totals = counts.groupby("token")["n"].sum()
    if threshold is None:
        threshold = compute_threshold(totals, rule=rule)

    kept = totals[totals >= threshold]
    if kept.empty:
        raise EmptyCorpusError(f"No token reaches the vocabulary threshold {threshold:.3f}.")

    vocabulary = sorted(kept.index)
    filtered = counts[counts["token"].isin(kept.index)].reset_index(drop=True)

    logger.info(
        "Vocabulary filter kept %d of %d tokens (threshold %.3f).",
        len(vocabulary),
        len(totals),
        threshold,
    )

    return VocabularyFilterResult(
        counts=filtered,
        vocabulary=vocabulary,
        threshold=float(threshold),
        totals=totals,
    )

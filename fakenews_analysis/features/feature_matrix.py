"""
Document-feature matrix construction.

From the filtered (id, label, token, n) relation we derive:

- scalar text-structure features per document: length (total surviving
  tokens), vocab_size (distinct surviving tokens) and richness
  (vocab_size / length)
- a wide matrix with one integer column per vocabulary token (0 where a
  document lacks the token)

Both are joined on the document id, anchored on the scalar features: a
document with no surviving token has no scalar row and is dropped from
the modeling frame.
"""

from __future__ import annotations

import logging
import re
from typing import List

import pandas as pd

from fakenews_analysis.errors import EmptyCorpusError, UndefinedStatisticError

logger = logging.getLogger(__name__)

SCALAR_COLUMNS = ["length", "vocab_size", "richness"]
RESERVED_COLUMNS = {"id", "label", *SCALAR_COLUMNS}
_COMPONENT_RE = re.compile(r"^PC\d+$")


def token_column_name(token: str) -> str:
    """
    Column name for a vocabulary token.

    Tokens equal to a reserved column name ("length", "label", "PC1", ...)
    get a trailing underscore so they cannot overwrite those columns.
    """
    if token in RESERVED_COLUMNS or _COMPONENT_RE.match(token):
        return f"{token}_"
    return token


def compute_scalar_features(filtered: pd.DataFrame) -> pd.DataFrame:
    """
    Compute length, vocab_size and richness per document.

    Parameters
    ----------
    filtered : pd.DataFrame
        Filtered token counts with columns ["id", "token", "n"].

    Returns
    -------
    pd.DataFrame
        Indexed by id with columns ["length", "vocab_size", "richness"].

    Raises
    ------
    UndefinedStatisticError
        If a document has length 0, which leaves richness undefined.
    """
    grouped = filtered.groupby("id", sort=False)
    scalar = pd.DataFrame(
        {
            "length": grouped["n"].sum(),
            "vocab_size": grouped["token"].nunique(),
        }
    )

    zero_length = scalar.index[scalar["length"] <= 0]
    if len(zero_length) > 0:
        raise UndefinedStatisticError(
            f"Richness is undefined for documents with zero length: {list(zero_length[:10])}"
        )

    scalar["richness"] = scalar["vocab_size"] / scalar["length"]
    scalar.index.name = "id"
    return scalar[SCALAR_COLUMNS]


def build_wide_matrix(filtered: pd.DataFrame) -> pd.DataFrame:
    """
    Pivot token counts into one column per token, missing counts as 0.

    Returns
    -------
    pd.DataFrame
        Indexed by id; token columns in sorted order.
    """
    wide = filtered.pivot_table(
        index="id",
        columns="token",
        values="n",
        aggfunc="sum",
        fill_value=0,
    )
    wide = wide.reindex(columns=sorted(wide.columns)).astype(int)
    wide.columns = [token_column_name(token) for token in wide.columns]
    wide.columns.name = None
    return wide


def build_feature_matrix(
    documents: pd.DataFrame,
    filtered: pd.DataFrame,
) -> pd.DataFrame:
    """
    Build the modeling frame: label, scalar features and token columns.

    Parameters
    ----------
    documents : pd.DataFrame
        Ingested documents with columns ["id", "label", ...]. Row order
        fixes the row order of the result.
    filtered : pd.DataFrame
        Filtered token counts.

    Returns
    -------
    pd.DataFrame
        Indexed by id with columns ["label", "length", "vocab_size",
        "richness", <tokens>...].

    Raises
    ------
    EmptyCorpusError
        If no document keeps at least one token.
    """
    if filtered.empty:
        raise EmptyCorpusError("No filtered token counts; cannot build a feature matrix.")

    scalar = compute_scalar_features(filtered)
    wide = build_wide_matrix(filtered)

    frame = scalar.join(wide, how="left")
    token_columns: List[str] = list(wide.columns)
    frame[token_columns] = frame[token_columns].fillna(0).astype(int)

    labels = documents.set_index("id")["label"]
    ordered_ids = [doc_id for doc_id in documents["id"] if doc_id in frame.index]

    dropped = len(documents) - len(ordered_ids)
    if dropped:
        logger.warning(
            "Dropped %d document(s) with no tokens surviving the vocabulary filter.",
            dropped,
        )
    if not ordered_ids:
        raise EmptyCorpusError("No document has a token left after filtering.")

    frame = frame.loc[ordered_ids]
    frame.insert(0, "label", labels.loc[ordered_ids].astype(int).values)
    frame.index.name = "id"
    return frame


def token_columns(frame: pd.DataFrame) -> List[str]:
    """Return the token columns of a feature frame in their stored order."""
    return [
        col for col in frame.columns
        if col not in RESERVED_COLUMNS and not _COMPONENT_RE.match(col)
    ]

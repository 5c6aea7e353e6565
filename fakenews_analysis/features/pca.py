"""
Principal Component Analysis over a curated feature subset.

The curated columns are the scalar text-structure features plus a list of
discriminative tokens chosen by whoever maintains config/features.yaml.
They are centered and scaled over the full frame and projected onto the
leading principal components, which are then appended to every feature
row as PC1..PCk.

Scaling statistics are computed on all documents, before the train/test
split, so the test documents influence the projection used for training.
This mirrors the analysis being reproduced and is a known limitation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.decomposition import PCA
from sklearn.preprocessing import StandardScaler

from fakenews_analysis.errors import FeatureSchemaError, UndefinedStatisticError
from fakenews_analysis.features.feature_matrix import SCALAR_COLUMNS, token_column_name


@dataclass
class PCAResult:
    columns: List[str]
    scaler: StandardScaler
    pca: PCA
    standardized: np.ndarray
    scores: pd.DataFrame

    @property
    def explained_variance_ratio(self) -> np.ndarray:
        return self.pca.explained_variance_ratio_


def component_names(n_components: int) -> List[str]:
    return [f"PC{i}" for i in range(1, n_components + 1)]


def resolve_pca_columns(
    tokens: Sequence[str],
    scalar_columns: Optional[Sequence[str]] = None,
) -> List[str]:
    """Map curated token names onto feature-frame column names."""
    scalar_columns = list(SCALAR_COLUMNS if scalar_columns is None else scalar_columns)
    return scalar_columns + [token_column_name(t) for t in tokens]


def reduce_with_pca(
    frame: pd.DataFrame,
    tokens: Sequence[str],
    n_components: int = 8,
    scalar_columns: Optional[Sequence[str]] = None,
) -> PCAResult:
    """
    Standardize the curated columns and keep the leading components.

    Parameters
    ----------
    frame : pd.DataFrame
        Feature frame indexed by document id.
    tokens : Sequence[str]
        Curated token list.
    n_components : int
        Number of leading components to retain.
    scalar_columns : Optional[Sequence[str]]
        Scalar features included ahead of the tokens; defaults to
        length, vocab_size and richness.

    Returns
    -------
    PCAResult
        Fitted scaler and PCA, standardized input, and component scores
        indexed like `frame`, ordered by descending explained variance.

    Raises
    ------
    FeatureSchemaError
        If a curated column is not in the frame.
    UndefinedStatisticError
        If a curated column is constant and cannot be scaled.
    ValueError
        If `n_components` exceeds what the data supports.
    """
    columns = resolve_pca_columns(tokens, scalar_columns)

    missing = [c for c in columns if c not in frame.columns]
    if missing:
        raise FeatureSchemaError(
            f"PCA column(s) not present in the feature matrix: {missing}. "
            "Curated tokens must survive the vocabulary filter."
        )

    values = frame[columns].to_numpy(dtype=float)

    constant = [c for c, std in zip(columns, values.std(axis=0)) if std == 0]
    if constant:
        raise UndefinedStatisticError(f"Cannot scale constant PCA column(s): {constant}")

    max_components = min(values.shape)
    if not 1 <= int(n_components) <= max_components:
        raise ValueError(
            f"n_components must be between 1 and {max_components} "
            f"for a {values.shape[0]}x{values.shape[1]} input, got {n_components}."
        )

    scaler = StandardScaler()
    standardized = scaler.fit_transform(values)

    pca = PCA(n_components=int(n_components), svd_solver="full")
    scores = pca.fit_transform(standardized)

    scores_df = pd.DataFrame(scores, index=frame.index, columns=component_names(int(n_components)))

    return PCAResult(
        columns=columns,
        scaler=scaler,
        pca=pca,
        standardized=standardized,
        scores=scores_df,
    )


def append_components(frame: pd.DataFrame, result: PCAResult) -> pd.DataFrame:
    """Return a copy of `frame` with the component scores as trailing columns."""
    return frame.join(result.scores, how="left")


def reconstruct_standardized(result: PCAResult) -> np.ndarray:
    """Rank-k reconstruction of the standardized input from the retained components."""
    return result.pca.inverse_transform(result.scores.to_numpy())

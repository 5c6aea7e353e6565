"""
Fitted model container.

A trained estimator is only meaningful together with the exact ordered
list of feature columns it saw during training and the label ordering
(0 = fake, 1 = real). FittedModel keeps the three together and refuses
to score a frame that does not carry every trained column.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Sequence, Tuple

import numpy as np
import pandas as pd

from fakenews_analysis.data.datasets import LABEL_ORDER
from fakenews_analysis.errors import FeatureSchemaError, MissingValueError


def select_features(frame: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    """
    Return `frame[columns]`, failing fast on absent columns or missing values.

    Raises
    ------
    FeatureSchemaError
        If any requested column is not in the frame.
    MissingValueError
        If any row has a missing value in a requested column.
    """
    columns = list(columns)
    missing = [c for c in columns if c not in frame.columns]
    if missing:
        raise FeatureSchemaError(
            f"Feature column(s) missing from frame: {missing}. "
            f"Available columns: {list(frame.columns)[:20]}..."
        )

    selected = frame[columns]
    na_counts = selected.isna().sum()
    na_columns = na_counts[na_counts > 0]
    if not na_columns.empty:
        raise MissingValueError(
            f"Missing values in required feature column(s): {na_columns.to_dict()}"
        )
    return selected


@dataclass
class FittedModel:
    name: str
    estimator: Any
    feature_columns: Tuple[str, ...]
    classes: Tuple[int, ...] = field(default=tuple(int(c) for c in LABEL_ORDER))

    def features(self, frame: pd.DataFrame) -> pd.DataFrame:
        """Trained columns of `frame`, in training order."""
        return select_features(frame, self.feature_columns)

    def predict(self, frame: pd.DataFrame) -> np.ndarray:
        return np.asarray(self.estimator.predict(self.features(frame))).astype(int)

    @property
    def best_params(self) -> dict:
        """Hyperparameters chosen by a grid search, empty for plain estimators."""
        return dict(getattr(self.estimator, "best_params_", {}) or {})

    @property
    def final_estimator(self) -> Any:
        """The classifier at the end of any search/pipeline wrapping."""
        est = getattr(self.estimator, "best_estimator_", self.estimator)
        steps: List = getattr(est, "steps", None) or []
        return steps[-1][1] if steps else est

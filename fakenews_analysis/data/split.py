"""
Train/test splitting utilities.

The split is drawn once per run over document ids and shared by every
model, so all of them are compared on the same held-out documents.

We rely on scikit-learn's train_test_split with shuffling and without
stratification: ids are sampled uniformly without replacement, the
sampled fraction becomes the training set and the remainder the test set.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple

import pandas as pd
from sklearn.model_selection import train_test_split

from fakenews_analysis.data.datasets import load_data_config, DEFAULT_DATA_CONFIG_PATH


@dataclass(frozen=True)
class Split:
    """Disjoint train/test partition of document ids."""

    train_ids: Tuple[str, ...]
    test_ids: Tuple[str, ...]


def get_split_config(
    config_path: str = DEFAULT_DATA_CONFIG_PATH,
) -> Dict[str, Any]:
    """
    Retrieve the 'split' section from the data configuration.
    """
    cfg = load_data_config(config_path)
    return cfg["split"]


def split_documents(
    ids: Sequence[str],
    train_fraction: float = 0.8,
    seed: int = 1,
) -> Split:
    """
    Partition document ids into train and test sets.

    Parameters
    ----------
    ids : Sequence[str]
        Document ids in a fixed order; the same order and seed always
        produce the same partition.
    train_fraction : float
        Share of documents assigned to the training set, in (0, 1).
    seed : int
        Random state for the sampler.

    Returns
    -------
    Split
        Train and test ids.

    Raises
    ------
    ValueError
        If the fraction is out of range, ids are duplicated, or there are
        too few ids to populate both sides.
    """
    if not 0.0 < float(train_fraction) < 1.0:
        raise ValueError(f"train_fraction must be in (0, 1), got {train_fraction}")

    ids = list(ids)
    if len(set(ids)) != len(ids):
        raise ValueError("Document ids passed to split_documents must be unique.")
    if len(ids) < 2:
        raise ValueError(f"Need at least 2 documents to split, got {len(ids)}.")

    train_ids, test_ids = train_test_split(
        ids,
        train_size=float(train_fraction),
        random_state=int(seed),
        shuffle=True,
        stratify=None,
    )
    return Split(train_ids=tuple(train_ids), test_ids=tuple(test_ids))


def apply_split(frame: pd.DataFrame, split: Split) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Select the train and test rows of a feature frame indexed by id.

    Raises
    ------
    KeyError
        If the split refers to ids that are not in the frame.
    """
    missing = [i for i in split.train_ids + split.test_ids if i not in frame.index]
    if missing:
        raise KeyError(f"Split ids not present in feature frame: {missing[:10]}")

    train_df = frame.loc[list(split.train_ids)]
    test_df = frame.loc[list(split.test_ids)]
    return train_df, test_df

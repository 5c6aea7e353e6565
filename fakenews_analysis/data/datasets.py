"""
Dataset loading utilities for the labeled news-article dataset.

This module is responsible for:
- reading the dataset configuration from config/data.yaml
- loading the delimited file (semicolon-separated by default) into a
  pandas DataFrame with columns id, title, text, label
- validating the column set, the label values and the uniqueness of ids
- converting labels to the two-valued `Label` enumeration (0 = fake,
  1 = real), which every later stage relies on

Anything that does not look like the expected file aborts the run with
a DatasetFormatError before any processing happens.
"""

from __future__ import annotations

import os
from enum import IntEnum
from typing import Any, Dict

import pandas as pd

from fakenews_analysis.errors import DatasetFormatError
from fakenews_analysis.utils.training_utils import load_yaml_file, require_sections


DEFAULT_DATA_CONFIG_PATH = "config/data.yaml"

REQUIRED_COLUMNS = ("id", "title", "text", "label")


class Label(IntEnum):
    """Article class. The integer value is the code found in the input file."""

    FAKE = 0
    REAL = 1


LABEL_ORDER = (Label.FAKE, Label.REAL)
LABEL_NAMES = tuple(label.name.lower() for label in LABEL_ORDER)


def load_data_config(config_path: str = DEFAULT_DATA_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load and return the full data configuration dictionary.

    Parameters
    ----------
    config_path : str, optional
        Path to the data YAML configuration file.

    Returns
    -------
    Dict[str, Any]
        Dictionary containing the "dataset" and "split" sections.
    """
    cfg = load_yaml_file(config_path, kind="Data config")
    require_sections(cfg, ("dataset", "split"), config_path, "data config")
    return cfg


def _parse_labels(raw: pd.Series) -> pd.Series:
    """
    Map raw label values ("0"/"1", 0/1) onto Label codes.

    Raises
    ------
    DatasetFormatError
        If any value is not one of the two label codes.
    """
    as_text = raw.astype(str).str.strip()
    valid = {str(int(label)): int(label) for label in Label}
    invalid = sorted(set(as_text[~as_text.isin(valid.keys())]))
    if invalid:
        raise DatasetFormatError(
            f"Unexpected label value(s) {invalid[:10]}; "
            f"expected one of {sorted(valid.keys())}."
        )
    return as_text.map(valid).astype(int)


def read_news_frame(
    csv_path: str,
    delimiter: str = ";",
    encoding: str = "utf-8",
) -> pd.DataFrame:
    """
    Read the raw delimited file and validate its shape.

    Parameters
    ----------
    csv_path : str
        Path to the delimited file.
    delimiter : str
        Field delimiter the file was written with.
    encoding : str
        File encoding.

    Returns
    -------
    pd.DataFrame
        DataFrame with columns ["id", "title", "text", "label"], label as
        integer Label codes, text and title as strings.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    DatasetFormatError
        If the file cannot be parsed, lacks required columns, has invalid
        labels or duplicated ids, or contains no rows.
    """
    if not os.path.exists(csv_path):
        raise FileNotFoundError(f"Dataset file not found at: {csv_path}")

    try:
        df = pd.read_csv(
            csv_path,
            sep=delimiter,
            encoding=encoding,
            dtype={"id": str, "label": str},
            keep_default_na=False,
        )
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise DatasetFormatError(f"Could not parse dataset file {csv_path}: {exc}") from exc

    # Validate expected columns
    missing_cols = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing_cols:
        raise DatasetFormatError(
            f"Missing required column(s) in dataset file: {missing_cols}. "
            f"Available columns: {list(df.columns)}. "
            f"Check that the delimiter {delimiter!r} matches the file."
        )

    if df.empty:
        raise DatasetFormatError(f"Dataset file contains no rows: {csv_path}")

    df = df[list(REQUIRED_COLUMNS)].copy()

    duplicated = df["id"][df["id"].duplicated()]
    if not duplicated.empty:
        raise DatasetFormatError(
            f"Document ids must be unique; duplicated: {list(duplicated.unique()[:10])}"
        )

    df["label"] = _parse_labels(df["label"])
    df["title"] = df["title"].astype(str)
    df["text"] = df["text"].astype(str)

    return df.reset_index(drop=True)


def load_news_dataset(
    config_path: str = DEFAULT_DATA_CONFIG_PATH,
) -> pd.DataFrame:
    """
    Load the news dataset according to the configuration.

    This function:
    - reads the file named in config/data.yaml with the configured delimiter
    - validates columns, labels and id uniqueness
    - optionally drops documents whose text is empty

    Parameters
    ----------
    config_path : str, optional
        Path to the data YAML configuration file.

    Returns
    -------
    pd.DataFrame
        DataFrame with columns ["id", "title", "text", "label"].
    """
    cfg = load_data_config(config_path)
    dataset_cfg = cfg["dataset"]

    csv_path = dataset_cfg.get("path", "data/raw/news.csv")
    delimiter = dataset_cfg.get("delimiter", ";")
    encoding = dataset_cfg.get("encoding", "utf-8")
    drop_empty_text = bool(dataset_cfg.get("drop_empty_text", True))

    df = read_news_frame(csv_path, delimiter=delimiter, encoding=encoding)

    if drop_empty_text:
        df = df[df["text"].str.strip() != ""]
        if df.empty:
            raise DatasetFormatError(f"Every document in {csv_path} has empty text.")
        df = df.reset_index(drop=True)

    return df

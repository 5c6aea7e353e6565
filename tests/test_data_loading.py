"""
Tests for dataset loading and configuration.

These tests validate that:

- the shipped data configuration can be loaded
- delimited files are read with the configured delimiter and validated
- malformed files abort with DatasetFormatError

The test against the real dataset is skipped if the raw file is not
available, so the suite still runs in a fresh clone without data.
"""

from __future__ import annotations

import os

import pytest
import yaml

from fakenews_analysis.data.datasets import (
    Label,
    load_data_config,
    load_news_dataset,
    read_news_frame,
)
from fakenews_analysis.errors import DatasetFormatError


def _write(path, content):
    path.write_text(content, encoding="utf-8")
    return str(path)


def test_load_data_config_has_required_keys():
    cfg = load_data_config("config/data.yaml")

    assert "dataset" in cfg
    assert "split" in cfg
    assert cfg["dataset"]["delimiter"] == ";"
    assert cfg["split"]["train_fraction"] == 0.8


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_data_config(str(tmp_path / "nope.yaml"))


def test_config_missing_section(tmp_path):
    path = _write(tmp_path / "data.yaml", "dataset:\n  path: x.csv\n")
    with pytest.raises(KeyError):
        load_data_config(path)


def test_read_semicolon_file(tmp_path):
    path = _write(
        tmp_path / "news.csv",
        "id;title;text;label\n"
        "1;A title;Some text, with commas;0\n"
        "2;Another;More text;1\n",
    )
    df = read_news_frame(path, delimiter=";")

    assert list(df.columns) == ["id", "title", "text", "label"]
    assert df["id"].tolist() == ["1", "2"]
    assert df["label"].tolist() == [Label.FAKE, Label.REAL]
    assert df.loc[0, "text"] == "Some text, with commas"


def test_wrong_delimiter_is_reported(tmp_path):
    path = _write(tmp_path / "news.csv", "id;title;text;label\n1;t;x;0\n")
    with pytest.raises(DatasetFormatError):
        read_news_frame(path, delimiter=",")


def test_invalid_label_is_fatal(tmp_path):
    path = _write(tmp_path / "news.csv", "id;title;text;label\n1;t;x;0\n2;t;y;fake\n")
    with pytest.raises(DatasetFormatError):
        read_news_frame(path)


def test_duplicate_ids_are_fatal(tmp_path):
    path = _write(tmp_path / "news.csv", "id;title;text;label\n1;t;x;0\n1;t;y;1\n")
    with pytest.raises(DatasetFormatError):
        read_news_frame(path)


def test_wrong_field_count_is_fatal(tmp_path):
    path = _write(tmp_path / "news.csv", "id;title;text;label\n1;t;x;0;extra;more\n")
    with pytest.raises(DatasetFormatError):
        read_news_frame(path)


def test_load_news_dataset_drops_empty_text(tmp_path):
    csv_path = _write(
        tmp_path / "news.csv",
        "id;title;text;label\n1;t;hello world;0\n2;t;;1\n3;t;more words;1\n",
    )
    cfg_path = tmp_path / "data.yaml"
    cfg_path.write_text(
        yaml.safe_dump(
            {
                "dataset": {"path": csv_path, "delimiter": ";", "drop_empty_text": True},
                "split": {"train_fraction": 0.8, "seed": 1},
            }
        ),
        encoding="utf-8",
    )

    df = load_news_dataset(str(cfg_path))
    assert df["id"].tolist() == ["1", "3"]


@pytest.mark.skipif(
    not os.path.exists(load_data_config("config/data.yaml")["dataset"]["path"]),
    reason="Raw dataset file not found; skipping dataset-dependent test.",
)
def test_load_news_dataset_returns_nonempty_df():
    df = load_news_dataset(config_path="config/data.yaml")

    assert not df.empty
    assert set(df["label"].unique()) <= {0, 1}
    assert df["id"].is_unique

"""
Exception types raised by the analysis pipeline.

Each class derives from the builtin exception a caller would naturally
catch (ValueError, KeyError, RuntimeError), so existing handlers keep
working while the pipeline can still tell the failure classes apart.
None of these are recoverable: the run stops and the message carries the
diagnostics.
"""

from __future__ import annotations


class DatasetFormatError(ValueError):
    """The input file is malformed (columns, labels, ids)."""


class EmptyCorpusError(ValueError):
    """No documents, tokens or vocabulary left to work with."""


class UndefinedStatisticError(ValueError):
    """A statistic cannot be computed (zero length, zero variance)."""


class FeatureSchemaError(KeyError):
    """A requested or trained feature column is absent."""


class MissingValueError(ValueError):
    """A required feature column contains missing values."""


class ModelTrainingError(RuntimeError):
    """Model fitting or hyperparameter search did not produce a usable model."""

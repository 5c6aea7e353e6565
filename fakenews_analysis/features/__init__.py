"""
Text preprocessing and feature extraction utilities.

This subpackage includes:
- text normalization, tokenization, stopword removal and stemming
- token counting and the mean-frequency vocabulary filter
- the document-feature matrix (scalar features + token columns)
- PCA over a curated column subset.
"""

"""
Top-level package for the fake/real news text-structure analysis.

This package contains modules for:
- loading and splitting the labeled news-article dataset
- text normalization, tokenization, stemming and vocabulary filtering
- document-feature matrix construction and PCA
- Random Forest and SVM model builders
- the training/evaluation pipeline
- metrics, result inspection and plotting helpers
- shared helper functions (config, logging, seeding)
"""

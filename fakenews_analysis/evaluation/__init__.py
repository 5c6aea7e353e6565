"""
Evaluation and analysis utilities.

This subpackage offers:
- confusion-matrix metrics (accuracy, sensitivity, specificity, kappa)
- variable importance for tree ensembles
- plotting functions for metrics, confusion matrices and PCA variance
- helpers to load and rank the saved results of a run.
"""

"""
Model definitions for fake-news detection.

This subpackage contains:
- Random Forest and SVM builders (including the radial-SVM grid search)
- the FittedModel container binding an estimator to its feature columns.
"""

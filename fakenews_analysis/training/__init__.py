"""
Training pipeline.

This subpackage provides the end-to-end run that builds features, trains
the four classifiers on a shared split and writes the evaluation reports.
"""

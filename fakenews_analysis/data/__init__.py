"""
Data loading and dataset utilities.

This subpackage provides:
- functions to load the delimited news dataset with validated labels
- the train/test split over document ids shared by all models.
"""

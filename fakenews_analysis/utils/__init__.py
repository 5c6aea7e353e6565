"""
Shared utility functions.

This subpackage includes:
- YAML config loading helpers
- seeding and reproducibility helpers
- directory management
- logging helpers used across the project.
"""

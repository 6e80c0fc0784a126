"""
Execution module

Provides the unified estimator and bootstrap runs.
"""

from .common import (
    ESTIMATOR_NAMES,
    build_estimators,
    compute_all_estimators,
    bootstrap_all_estimators,
)

__all__ = [
    "ESTIMATOR_NAMES",
    "build_estimators",
    "compute_all_estimators",
    "bootstrap_all_estimators",
]

"""Exceptions raised by the estimators and the bootstrap engine."""

from typing import Optional


class CausalBootstrapError(Exception):
    """Base class for all user-facing errors."""


class InvalidInput(CausalBootstrapError, ValueError):
    """Raised when call parameters are malformed (empty data, bad counts, bad percentiles)."""


class EstimatorFailure(CausalBootstrapError, RuntimeError):
    """Raised when the estimator fails on a bootstrap replicate

    Attributes:
        replication: Zero-based replication index, or None for the original data
    """

    def __init__(self, message: str, replication: Optional[int] = None):
        super().__init__(message)
        self.replication = replication

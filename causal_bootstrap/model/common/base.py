"""
Estimator interface

Anything that maps a dataframe to a fixed-length estimate vector can be
bootstrapped. Concrete estimators subclass BaseEstimator; plain callables are
wrapped with CallableEstimator.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence, Union

import numpy as np
import pandas as pd

from ...exceptions import InvalidInput

EFFECT_LABELS = ("mean_a0", "mean_a1", "difference")


def as_estimate_vector(value) -> np.ndarray:
    """Coerce a scalar, sequence, Series or array to a 1-D float array"""
    if isinstance(value, pd.Series):
        value = value.to_numpy()
    vector = np.atleast_1d(np.asarray(value, dtype=float))
    if vector.ndim != 1 or vector.size == 0:
        raise ValueError(
            f"Estimator must return a scalar or non-empty 1-D vector, got shape {vector.shape}"
        )
    return vector


class BaseEstimator(ABC):
    """Base class for estimators used with the bootstrap engine

    Subclasses implement estimate(), which must be deterministic given its
    input rows.
    """

    labels: Optional[Sequence[str]] = None

    @abstractmethod
    def estimate(self, df: pd.DataFrame) -> np.ndarray:
        """Compute the estimate vector from a dataframe"""

    def __call__(self, df: pd.DataFrame) -> np.ndarray:
        return as_estimate_vector(self.estimate(df))

    def get_labels(self, dimension: int) -> list:
        """Return coordinate labels, generating them if none are defined"""
        if self.labels is not None and len(self.labels) == dimension:
            return list(self.labels)
        return [f"estimate_{i}" for i in range(dimension)]


class CallableEstimator(BaseEstimator):
    """Adapter turning a plain function df -> estimate into an estimator"""

    def __init__(
        self,
        func: Callable[[pd.DataFrame], object],
        labels: Optional[Sequence[str]] = None,
    ):
        self.func = func
        self.labels = labels

    def estimate(self, df: pd.DataFrame) -> np.ndarray:
        return self.func(df)

    def __repr__(self) -> str:
        name = getattr(self.func, "__name__", repr(self.func))
        return f"CallableEstimator({name})"


def ensure_estimator(
    estimator: Union[BaseEstimator, Callable[[pd.DataFrame], object]],
) -> BaseEstimator:
    """Return estimator as a BaseEstimator, wrapping callables"""
    if isinstance(estimator, BaseEstimator):
        return estimator
    if callable(estimator):
        return CallableEstimator(estimator)
    raise InvalidInput(
        f"estimator must be a BaseEstimator or a callable, got {type(estimator).__name__}"
    )

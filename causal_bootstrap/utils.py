"""
Module providing general-purpose utility functions

This module provides functionality shared by the estimators:
- Input validation
- Data preprocessing
- Propensity score handling
- Weighted summaries

Estimator-specific logic is located in model/standard.
"""

import numpy as np
import pandas as pd
from typing import Dict, Optional, Sequence, Tuple

from .exceptions import InvalidInput


# =============================================================================
# Validation
# =============================================================================


def validate_dataset(df: pd.DataFrame, required_columns: Sequence[str] = ()) -> None:
    """Check that df is a non-empty dataframe containing required_columns

    Raises:
        InvalidInput: If df is not a dataframe, has no rows or lacks a column
    """
    if not isinstance(df, pd.DataFrame):
        raise InvalidInput(f"dataset must be a pandas DataFrame, got {type(df).__name__}")
    if len(df) == 0:
        raise InvalidInput("dataset must contain at least one row")
    missing = [col for col in required_columns if col not in df.columns]
    if missing:
        raise InvalidInput(f"dataset is missing required columns: {missing}")


def validate_replications(replications) -> int:
    """Return replications as int, raising InvalidInput unless it is a positive integer"""
    if isinstance(replications, bool) or not isinstance(replications, (int, np.integer)):
        raise InvalidInput(f"replications must be an integer, got {replications!r}")
    if replications <= 0:
        raise InvalidInput(f"replications must be positive, got {replications}")
    return int(replications)


# =============================================================================
# Data preprocessing
# =============================================================================


def observed_outcome_rows(df: pd.DataFrame, outcome_col: str) -> pd.DataFrame:
    """Return rows with a non-missing outcome (index reset)"""
    return df.loc[df[outcome_col].notna()].reset_index(drop=True)


def set_treatment(df: pd.DataFrame, treatment_col: str, value: int) -> pd.DataFrame:
    """Return a copy of df with every row's treatment forced to value"""
    df_set = df.copy()
    df_set[treatment_col] = value
    return df_set


# =============================================================================
# Propensity scores
# =============================================================================


def clip_ps(ps: np.ndarray, bounds: Optional[Tuple[float, float]]) -> np.ndarray:
    """Clip propensity scores (no-op when bounds is None)"""
    if bounds is None:
        return ps
    return np.clip(ps, bounds[0], bounds[1])


def prob_of_observed(ps: np.ndarray, treatment: np.ndarray) -> np.ndarray:
    """Probability of the treatment actually received: p if A=1 else 1-p"""
    return np.where(treatment == 1, ps, 1.0 - ps)


def weight_summary(weights: np.ndarray) -> Dict[str, float]:
    """Summarize inverse probability weights

    Large maxima or a mean far from 1 (unstabilized: 2) flag near
    violations of positivity.
    """
    weights = np.asarray(weights, dtype=float)
    return {
        "mean": float(np.mean(weights)),
        "std": float(np.std(weights, ddof=1)) if len(weights) > 1 else float("nan"),
        "min": float(np.min(weights)),
        "max": float(np.max(weights)),
        "n": int(len(weights)),
    }


def weighted_mean(values: np.ndarray, weights: np.ndarray) -> float:
    """Weighted mean sum(w * y) / sum(w)"""
    return float(np.sum(weights * values) / np.sum(weights))

"""Common utilities for estimation methods"""

from .base import (
    BaseEstimator,
    CallableEstimator,
    EFFECT_LABELS,
    as_estimate_vector,
    ensure_estimator,
)
from .fitters import fit_outcome_model, fit_propensity_model, predict
from .models import (
    EffectEstimate,
    BootstrapDistribution,
    SummaryStatistics,
    BootstrapResult,
)

__all__ = [
    "BaseEstimator",
    "CallableEstimator",
    "EFFECT_LABELS",
    "as_estimate_vector",
    "ensure_estimator",
    "fit_outcome_model",
    "fit_propensity_model",
    "predict",
    "EffectEstimate",
    "BootstrapDistribution",
    "SummaryStatistics",
    "BootstrapResult",
]

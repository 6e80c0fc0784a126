"""
Model estimators package

This package contains the estimation methods organized by approach:
- standard: G-formula, IPTW and AIPW estimators
- bootstrap: Non-parametric bootstrap engine
- common: Estimator interface, model fitters and result models
"""

# Standard estimation methods
from .standard import (
    GFormulaEstimator,
    IPTWEstimator,
    AIPWEstimator,
    estimate_gformula,
    estimate_ipw,
    estimate_aipw,
)

# Bootstrap
from .bootstrap import StandardBootstrap, BootstrapEngine

# Common utilities
from .common import (
    BaseEstimator,
    CallableEstimator,
    BootstrapDistribution,
    SummaryStatistics,
    BootstrapResult,
    EffectEstimate,
)

__all__ = [
    # Standard
    "GFormulaEstimator",
    "IPTWEstimator",
    "AIPWEstimator",
    "estimate_gformula",
    "estimate_ipw",
    "estimate_aipw",
    # Bootstrap
    "StandardBootstrap",
    "BootstrapEngine",
    # Common
    "BaseEstimator",
    "CallableEstimator",
    "BootstrapDistribution",
    "SummaryStatistics",
    "BootstrapResult",
    "EffectEstimate",
]

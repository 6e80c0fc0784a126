"""
Bootstrap confidence intervals for causal-effect estimators

Standardization (G-formula), IPTW and doubly robust (AIPW) estimators built on
formula-specified GLMs, and a seeded non-parametric bootstrap engine.
"""

from .exceptions import CausalBootstrapError, InvalidInput, EstimatorFailure
from .settings import Config, get_config, generate_data
from .model import (
    BaseEstimator,
    CallableEstimator,
    GFormulaEstimator,
    IPTWEstimator,
    AIPWEstimator,
    StandardBootstrap,
    BootstrapEngine,
    BootstrapDistribution,
    SummaryStatistics,
    BootstrapResult,
    EffectEstimate,
)

__version__ = "0.1.0"

__all__ = [
    "CausalBootstrapError",
    "InvalidInput",
    "EstimatorFailure",
    "Config",
    "get_config",
    "generate_data",
    "BaseEstimator",
    "CallableEstimator",
    "GFormulaEstimator",
    "IPTWEstimator",
    "AIPWEstimator",
    "StandardBootstrap",
    "BootstrapEngine",
    "BootstrapDistribution",
    "SummaryStatistics",
    "BootstrapResult",
    "EffectEstimate",
]

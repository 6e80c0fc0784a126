"""Standard causal-effect estimators (point treatment, no interference)"""

from .gformula import GFormulaEstimator, estimate_gformula
from .ipw import IPTWEstimator, estimate_ipw
from .aipw import AIPWEstimator, estimate_aipw

__all__ = [
    "GFormulaEstimator",
    "IPTWEstimator",
    "AIPWEstimator",
    "estimate_gformula",
    "estimate_ipw",
    "estimate_aipw",
]

"""
Common estimator calculation module

Provides the unified interface that computes the three course estimators
on one dataset and bootstraps them with a shared configuration.
"""

import logging
import pandas as pd
from typing import Dict, Optional

from ..settings import Config, NHEFS_COVARIATE_FORMULA
from ..model.common.base import BaseEstimator
from ..model.standard import GFormulaEstimator, IPTWEstimator, AIPWEstimator
from ..model.bootstrap import StandardBootstrap

logger = logging.getLogger(__name__)

# Constant definitions
ESTIMATOR_NAMES = {
    "G-formula": "gformula",
    "IPTW": "iptw",
    "AIPW": "aipw",
}


def build_estimators(
    config: Config,
    covariate_formula: str = NHEFS_COVARIATE_FORMULA,
    outcome_formula: Optional[str] = None,
    propensity_formula: Optional[str] = None,
) -> Dict[str, BaseEstimator]:
    """
    Build the G-formula, IPTW and AIPW estimators with a common adjustment set

    Args:
        config: Configuration object (column names, family, weights, trimming)
        covariate_formula: Right-hand side confounder terms
        outcome_formula: Full outcome formula (default "Y ~ A + covariates")
        propensity_formula: Full propensity formula (default "A ~ covariates")

    Returns:
        Dictionary of estimator name -> estimator
    """
    A, Y = config.treatment_col, config.outcome_col
    if outcome_formula is None:
        outcome_formula = f"{Y} ~ {A} + {covariate_formula}"
    if propensity_formula is None:
        propensity_formula = f"{A} ~ {covariate_formula}"

    return {
        "G-formula": GFormulaEstimator(
            outcome_formula,
            treatment_col=A,
            outcome_col=Y,
            family=config.outcome_family,
        ),
        "IPTW": IPTWEstimator(
            propensity_formula,
            treatment_col=A,
            outcome_col=Y,
            stabilized=config.stabilized_weights,
            ps_clip=config.ps_clip,
        ),
        "AIPW": AIPWEstimator(
            outcome_formula,
            propensity_formula,
            treatment_col=A,
            outcome_col=Y,
            family=config.outcome_family,
            ps_clip=config.ps_clip,
        ),
    }


def compute_all_estimators(
    df: pd.DataFrame,
    config: Optional[Config] = None,
    covariate_formula: str = NHEFS_COVARIATE_FORMULA,
    estimators: Optional[Dict[str, BaseEstimator]] = None,
) -> Dict[str, float]:
    """
    Common function to calculate all estimators

    Args:
        df: Dataframe (required columns: treatment, outcome, covariates)
        config: Configuration object
        covariate_formula: Right-hand side confounder terms
        estimators: Estimators to use (default build_estimators(config, covariate_formula))

    Returns:
        Dictionary of estimator results, keyed "<name>_<label>"
        (e.g. "gformula_difference")
    """
    if config is None:
        config = Config()
    if estimators is None:
        estimators = build_estimators(config, covariate_formula)

    results = {}
    for name, estimator in estimators.items():
        key = ESTIMATOR_NAMES.get(name, name)
        vector = estimator(df)
        for label, value in zip(estimator.get_labels(len(vector)), vector):
            results[f"{key}_{label}"] = float(value)
    return results


def bootstrap_all_estimators(
    df: pd.DataFrame,
    config: Optional[Config] = None,
    covariate_formula: str = NHEFS_COVARIATE_FORMULA,
    estimators: Optional[Dict[str, BaseEstimator]] = None,
) -> pd.DataFrame:
    """
    Bootstrap every estimator with the same seed and replication count

    Each estimator gets its own run seeded with config.random_seed, so all
    estimators see the same sequence of replicates.

    Args:
        df: Dataframe
        config: Configuration object (n_bootstrap, random_seed, confidence_level, ...)
        covariate_formula: Right-hand side confounder terms
        estimators: Estimators to use (default build_estimators(config, covariate_formula))

    Returns:
        Dataframe with one row per (estimator, label) and columns estimate,
        bootstrap_mean, std, percentile_lower/upper, normal_lower/upper
    """
    if config is None:
        config = Config()
    if estimators is None:
        estimators = build_estimators(config, covariate_formula)

    engine = StandardBootstrap(config)
    frames = []
    for name, estimator in estimators.items():
        logger.info("Bootstrapping %s", name)
        result = engine.bootstrap(df, estimator)
        frame = result.to_frame().reset_index()
        frame.insert(0, "estimator", name)
        frame["n_failures"] = result.distribution.n_failures
        frames.append(frame)

    return pd.concat(frames, ignore_index=True)

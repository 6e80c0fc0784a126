"""
Outcome and propensity model fitting

Thin wrappers around statsmodels GLMs specified by patsy formulas, e.g.
``"wt82_71 ~ qsmk + sex + age + I(age**2) + C(education)"``. Rows with a
missing outcome are dropped when fitting and can still be predicted.
"""

import numpy as np
import pandas as pd
import statsmodels.api as sm
from typing import Any

FAMILIES = {
    "gaussian": sm.families.Gaussian,
    "binomial": sm.families.Binomial,
    "poisson": sm.families.Poisson,
}


def get_family(family: str):
    """Return statsmodels family instance"""
    if family not in FAMILIES:
        raise ValueError(f"Unknown family '{family}'. Available: {list(FAMILIES)}")
    return FAMILIES[family]()


def fit_outcome_model(df: pd.DataFrame, formula: str, family: str = "gaussian") -> Any:
    """Fit an outcome regression

    Args:
        df: Dataframe (rows with missing outcome are dropped)
        formula: Patsy formula "outcome ~ terms"
        family: Outcome distribution ("gaussian", "binomial", "poisson")

    Returns:
        Fitted statsmodels GLMResults
    """
    model = sm.GLM.from_formula(formula, data=df, family=get_family(family))
    return model.fit()


def fit_propensity_model(df: pd.DataFrame, formula: str) -> Any:
    """Fit a logistic model for P(treatment = 1 | covariates)

    ``"qsmk ~ 1"`` gives the marginal model used as the numerator of
    stabilized weights.

    Args:
        df: Dataframe
        formula: Patsy formula "treatment ~ terms"

    Returns:
        Fitted statsmodels GLMResults
    """
    return fit_outcome_model(df, formula, family="binomial")


def predict(model: Any, df: pd.DataFrame) -> np.ndarray:
    """Predict on the response scale for every row of df"""
    return np.asarray(model.predict(df), dtype=float)

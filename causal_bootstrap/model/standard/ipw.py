"""
Inverse Probability of Treatment Weighting (IPTW) Estimator

Weights each observed outcome by the inverse probability of the treatment
actually received, optionally stabilized by the marginal probability.
"""

import numpy as np
import pandas as pd
import statsmodels.api as sm
from typing import Dict, Optional, Tuple
from scipy.stats import norm

from ...settings import Config
from ...utils import (
    clip_ps,
    observed_outcome_rows,
    prob_of_observed,
    validate_dataset,
    weight_summary,
    weighted_mean,
)
from ..common.base import BaseEstimator, EFFECT_LABELS
from ..common.fitters import fit_propensity_model, predict
from ..common.models import EffectEstimate


class IPTWEstimator(BaseEstimator):
    """IPTW estimator of E[Y^{a=0}], E[Y^{a=1}] and their difference

    Only rows with an observed outcome are used. Weights are 1/P(A=a|L) for the
    received treatment a; with stabilized=True the numerator is P(A=a) from
    numerator_formula (default: intercept only).

    Propensities of exactly 0 or 1 are not trimmed unless ps_clip is given;
    they produce infinite weights and a non-finite estimate.

    Args:
        propensity_formula: Patsy formula "A ~ confounders"
        treatment_col: Treatment variable column name
        outcome_col: Outcome variable column name
        stabilized: Whether to use stabilized weights
        numerator_formula: Formula for the stabilizing numerator model
        ps_clip: Optional (lower, upper) trimming bounds for propensity scores
    """

    labels = EFFECT_LABELS

    def __init__(
        self,
        propensity_formula: str,
        treatment_col: str = "qsmk",
        outcome_col: str = "wt82_71",
        stabilized: bool = True,
        numerator_formula: Optional[str] = None,
        ps_clip: Optional[Tuple[float, float]] = None,
    ):
        self.propensity_formula = propensity_formula
        self.treatment_col = treatment_col
        self.outcome_col = outcome_col
        self.stabilized = stabilized
        self.numerator_formula = numerator_formula or f"{treatment_col} ~ 1"
        self.ps_clip = ps_clip

    def _prepare(self, df: pd.DataFrame) -> pd.DataFrame:
        validate_dataset(df, [self.treatment_col, self.outcome_col])
        return observed_outcome_rows(df, self.outcome_col)

    def _weights(self, df_obs: pd.DataFrame) -> np.ndarray:
        A = df_obs[self.treatment_col].to_numpy()

        ps_model = fit_propensity_model(df_obs, self.propensity_formula)
        ps = clip_ps(predict(ps_model, df_obs), self.ps_clip)
        weights = 1.0 / prob_of_observed(ps, A)

        if self.stabilized:
            num_model = fit_propensity_model(df_obs, self.numerator_formula)
            weights = weights * prob_of_observed(predict(num_model, df_obs), A)

        return weights

    def weights(self, df: pd.DataFrame) -> np.ndarray:
        """Weights for the rows of df with an observed outcome"""
        return self._weights(self._prepare(df))

    def weight_summary(self, df: pd.DataFrame) -> Dict[str, float]:
        """Mean, std, min and max of the weights (positivity diagnostic)"""
        return weight_summary(self.weights(df))

    def estimate(self, df: pd.DataFrame) -> np.ndarray:
        df_obs = self._prepare(df)
        w = self._weights(df_obs)
        A = df_obs[self.treatment_col].to_numpy()
        Y = df_obs[self.outcome_col].to_numpy(dtype=float)

        treated = A == 1
        mean1 = weighted_mean(Y[treated], w[treated])
        mean0 = weighted_mean(Y[~treated], w[~treated])
        return np.array([mean0, mean1, mean1 - mean0])

    def fit_msm(self, df: pd.DataFrame, confidence_level: float = 0.95) -> EffectEstimate:
        """Fit the weighted marginal structural model Y ~ A with a robust variance

        The HC0 sandwich variance is conservative for IPTW and gives the
        closed-form interval that the bootstrap is compared against.

        Returns:
            Effect of treatment with robust standard error and Wald interval
        """
        df_obs = self._prepare(df)
        w = self._weights(df_obs)
        msm = sm.WLS.from_formula(
            f"{self.outcome_col} ~ {self.treatment_col}", data=df_obs, weights=w
        ).fit(cov_type="HC0")

        estimate = float(msm.params[self.treatment_col])
        se = float(msm.bse[self.treatment_col])
        z = norm.ppf(1 - (1 - confidence_level) / 2)
        return EffectEstimate(
            estimate=estimate,
            standard_error=se,
            ci_lower=estimate - z * se,
            ci_upper=estimate + z * se,
            confidence_level=confidence_level,
            method="robust-sandwich",
            label="difference",
        )

    def __repr__(self) -> str:
        return (
            f"IPTWEstimator('{self.propensity_formula}', stabilized={self.stabilized})"
        )


def estimate_ipw(
    df: pd.DataFrame,
    config: Optional[Config] = None,
    covariate_formula: str = "1",
) -> np.ndarray:
    """Calculate the IPTW estimate with a logistic propensity model

    Args:
        df: Dataframe
        config: Configuration object (column names, weight stabilization, trimming)
        covariate_formula: Right-hand side terms for the propensity model

    Returns:
        Array [mean under a=0, mean under a=1, difference]
    """
    if config is None:
        config = Config()
    estimator = IPTWEstimator(
        propensity_formula=f"{config.treatment_col} ~ {covariate_formula}",
        treatment_col=config.treatment_col,
        outcome_col=config.outcome_col,
        stabilized=config.stabilized_weights,
        ps_clip=config.ps_clip,
    )
    return estimator(df)

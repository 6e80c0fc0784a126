"""
Augmented Inverse Probability Weighting (AIPW) Estimator

Doubly robust: consistent if either the outcome model or the propensity
model is correctly specified.
"""

import numpy as np
import pandas as pd
from typing import Optional, Tuple

from ...settings import Config
from ...utils import clip_ps, observed_outcome_rows, set_treatment, validate_dataset
from ..common.base import BaseEstimator, EFFECT_LABELS
from ..common.fitters import fit_outcome_model, fit_propensity_model, predict


class AIPWEstimator(BaseEstimator):
    """Doubly robust estimator of E[Y^{a=0}], E[Y^{a=1}] and their difference

    On rows with an observed outcome:

        mu_1 = mean(m_1 + A (Y - m_1) / p)
        mu_0 = mean(m_0 + (1 - A) (Y - m_0) / (1 - p))

    where m_a are outcome-model predictions with treatment set to a and p is
    the fitted propensity score.

    Args:
        outcome_formula: Patsy formula for the outcome model (contains treatment)
        propensity_formula: Patsy formula "A ~ confounders"
        treatment_col: Treatment variable column name
        outcome_col: Outcome variable column name
        family: Outcome distribution of the outcome model
        ps_clip: Optional (lower, upper) trimming bounds for propensity scores
    """

    labels = EFFECT_LABELS

    def __init__(
        self,
        outcome_formula: str,
        propensity_formula: str,
        treatment_col: str = "qsmk",
        outcome_col: str = "wt82_71",
        family: str = "gaussian",
        ps_clip: Optional[Tuple[float, float]] = None,
    ):
        self.outcome_formula = outcome_formula
        self.propensity_formula = propensity_formula
        self.treatment_col = treatment_col
        self.outcome_col = outcome_col
        self.family = family
        self.ps_clip = ps_clip

    def estimate(self, df: pd.DataFrame) -> np.ndarray:
        validate_dataset(df, [self.treatment_col, self.outcome_col])
        df_obs = observed_outcome_rows(df, self.outcome_col)

        A = df_obs[self.treatment_col].to_numpy()
        Y = df_obs[self.outcome_col].to_numpy(dtype=float)

        # 1. Propensity score
        ps_model = fit_propensity_model(df_obs, self.propensity_formula)
        ps = clip_ps(predict(ps_model, df_obs), self.ps_clip)

        # 2. Outcome predictions under each treatment level
        out_model = fit_outcome_model(df_obs, self.outcome_formula, family=self.family)
        m0 = predict(out_model, set_treatment(df_obs, self.treatment_col, 0))
        m1 = predict(out_model, set_treatment(df_obs, self.treatment_col, 1))

        # 3. Augment predictions with weighted residuals
        mean1 = np.mean(m1 + A * (Y - m1) / ps)
        mean0 = np.mean(m0 + (1 - A) * (Y - m0) / (1 - ps))
        return np.array([mean0, mean1, mean1 - mean0])

    def __repr__(self) -> str:
        return (
            f"AIPWEstimator('{self.outcome_formula}', '{self.propensity_formula}')"
        )


def estimate_aipw(
    df: pd.DataFrame,
    config: Optional[Config] = None,
    covariate_formula: str = "1",
) -> np.ndarray:
    """Calculate the AIPW estimate using the same confounders in both models

    Args:
        df: Dataframe
        config: Configuration object
        covariate_formula: Right-hand side terms for the confounders

    Returns:
        Array [mean under a=0, mean under a=1, difference]
    """
    if config is None:
        config = Config()
    estimator = AIPWEstimator(
        outcome_formula=f"{config.outcome_col} ~ {config.treatment_col} + {covariate_formula}",
        propensity_formula=f"{config.treatment_col} ~ {covariate_formula}",
        treatment_col=config.treatment_col,
        outcome_col=config.outcome_col,
        family=config.outcome_family,
        ps_clip=config.ps_clip,
    )
    return estimator(df)

"""
Parametric G-formula (Standardization) Estimator

Averages model-predicted outcomes with treatment set to 0 and to 1 for
every subject.
"""

import numpy as np
import pandas as pd
from typing import Optional

from ...settings import Config
from ...utils import observed_outcome_rows, set_treatment, validate_dataset
from ..common.base import BaseEstimator, EFFECT_LABELS
from ..common.fitters import fit_outcome_model, predict


class GFormulaEstimator(BaseEstimator):
    """Standardization estimator of E[Y^{a=0}], E[Y^{a=1}] and their difference

    Args:
        outcome_formula: Patsy formula for the outcome model. Must contain the
            treatment column, e.g. "wt82_71 ~ qsmk + qsmk:smokeintensity + age"
        treatment_col: Treatment variable column name
        outcome_col: Outcome variable column name
        family: Outcome distribution of the outcome model
    """

    labels = EFFECT_LABELS

    def __init__(
        self,
        outcome_formula: str,
        treatment_col: str = "qsmk",
        outcome_col: str = "wt82_71",
        family: str = "gaussian",
    ):
        self.outcome_formula = outcome_formula
        self.treatment_col = treatment_col
        self.outcome_col = outcome_col
        self.family = family

    def predict_counterfactuals(self, df: pd.DataFrame):
        """Predicted outcomes for every row under treatment 0 and 1

        The outcome model is fitted on rows with an observed outcome; the
        predictions cover all rows of df, including those with a missing
        outcome.

        Returns:
            Tuple (predictions under a=0, predictions under a=1)
        """
        validate_dataset(df, [self.treatment_col, self.outcome_col])
        model = fit_outcome_model(
            observed_outcome_rows(df, self.outcome_col),
            self.outcome_formula,
            family=self.family,
        )
        y0 = predict(model, set_treatment(df, self.treatment_col, 0))
        y1 = predict(model, set_treatment(df, self.treatment_col, 1))
        return y0, y1

    def estimate(self, df: pd.DataFrame) -> np.ndarray:
        y0, y1 = self.predict_counterfactuals(df)
        mean0 = np.mean(y0)
        mean1 = np.mean(y1)
        return np.array([mean0, mean1, mean1 - mean0])

    def __repr__(self) -> str:
        return f"GFormulaEstimator('{self.outcome_formula}', family='{self.family}')"


def estimate_gformula(
    df: pd.DataFrame,
    config: Optional[Config] = None,
    covariate_formula: str = "1",
) -> np.ndarray:
    """Calculate the standardization estimate with a treatment-by-covariate outcome model

    The outcome model is "Y ~ A + <covariates>".

    Args:
        df: Dataframe
        config: Configuration object (column names and outcome family)
        covariate_formula: Right-hand side terms for the confounders

    Returns:
        Array [mean under a=0, mean under a=1, difference]
    """
    if config is None:
        config = Config()
    estimator = GFormulaEstimator(
        outcome_formula=f"{config.outcome_col} ~ {config.treatment_col} + {covariate_formula}",
        treatment_col=config.treatment_col,
        outcome_col=config.outcome_col,
        family=config.outcome_family,
    )
    return estimator(df)

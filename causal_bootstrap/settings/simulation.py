import numpy as np
import pandas as pd
from scipy.special import expit
from typing import Optional

from .config import Config

# Confounder adjustment set used throughout the course for NHEFS
NHEFS_COVARIATE_FORMULA = (
    "sex + race + age + I(age**2) + C(education) + smokeintensity"
    " + I(smokeintensity**2) + smokeyrs + I(smokeyrs**2) + C(exercise)"
    " + C(active) + wt71 + I(wt71**2)"
)


def _generate_covariates(n_units: int, rng: np.random.Generator) -> pd.DataFrame:
    """Common function to generate baseline confounders with NHEFS marginals"""
    sex = rng.binomial(1, 0.51, size=n_units)
    race = rng.binomial(1, 0.13, size=n_units)
    age = rng.integers(25, 75, size=n_units)
    education = rng.choice([1, 2, 3, 4, 5], size=n_units, p=[0.18, 0.22, 0.40, 0.09, 0.11])
    smokeintensity = np.clip(np.round(rng.gamma(3.0, 7.0, size=n_units)), 1, 80).astype(int)
    # Smoking years cannot exceed years since age 15
    smokeyrs = np.clip(age - 15 - rng.integers(0, 15, size=n_units), 1, None)
    exercise = rng.choice([0, 1, 2], size=n_units, p=[0.19, 0.42, 0.39])
    active = rng.choice([0, 1, 2], size=n_units, p=[0.45, 0.45, 0.10])
    wt71 = np.clip(rng.normal(71.0, 15.0, size=n_units), 40.0, 170.0)

    return pd.DataFrame(
        {
            "sex": sex,
            "race": race,
            "age": age,
            "education": education,
            "smokeintensity": smokeintensity,
            "smokeyrs": smokeyrs,
            "exercise": exercise,
            "active": active,
            "wt71": wt71,
        }
    )


def _generate_treatment(covariates: pd.DataFrame, rng: np.random.Generator) -> np.ndarray:
    """Common function to generate smoking cessation indicator qsmk

    Assignment follows a logit model in the confounders; probabilities are
    not clipped so positivity depends only on the covariate draw.
    """
    linear_predictor = (
        -1.3
        - 0.4 * covariates["sex"]
        - 0.8 * covariates["race"]
        + 0.04 * (covariates["age"] - 44)
        - 0.02 * (covariates["smokeintensity"] - 20)
        + 0.01 * (covariates["wt71"] - 71)
        + 0.15 * (covariates["education"] - 3)
    )
    prob = expit(linear_predictor.to_numpy())
    return (rng.uniform(0, 1, size=len(covariates)) < prob).astype(int)


def _generate_outcome(
    covariates: pd.DataFrame,
    qsmk: np.ndarray,
    config: Config,
    rng: np.random.Generator,
) -> np.ndarray:
    """Common function to generate weight gain wt82_71 (kg)

    The outcome model is linear in the confounders with a constant
    treatment effect equal to config.true_effect.
    """
    mean = (
        1.7
        + config.true_effect * qsmk
        - 0.1 * (covariates["age"] - 44)
        - 0.05 * (covariates["wt71"] - 71)
        + 0.5 * covariates["sex"]
        - 0.03 * (covariates["smokeyrs"] - 25)
        + 0.8 * (covariates["exercise"] == 0)
        - 1.0 * (covariates["active"] == 2)
    ).to_numpy()
    return mean + rng.normal(0.0, 7.0, size=len(covariates))


def generate_data(
    config: Optional[Config] = None,
    n_units: Optional[int] = None,
    seed: Optional[int] = None,
) -> pd.DataFrame:
    """Generate a synthetic dataset shaped like NHEFS

    The returned frame has one row per subject with the columns used by the
    course (seqn, qsmk, wt82_71 and the standard confounder set). A share of
    config.missing_outcome_rate outcomes is set to NaN to mimic loss to
    follow-up.

    Args:
        config: Configuration object (default Config() if None)
        n_units: Number of subjects (default config.n_units)
        seed: Random seed (default config.random_seed)

    Returns:
        Simulated dataframe
    """
    if config is None:
        config = Config()
    if n_units is None:
        n_units = config.n_units
    if seed is None:
        seed = config.random_seed
    if n_units < 1:
        raise ValueError(f"n_units must be positive, got {n_units}")

    rng = np.random.default_rng(seed)

    df = _generate_covariates(n_units, rng)
    qsmk = _generate_treatment(df, rng)
    y = _generate_outcome(df, qsmk, config, rng)

    missing = rng.uniform(0, 1, size=n_units) < config.missing_outcome_rate
    y[missing] = np.nan

    df.insert(0, config.id_col, np.arange(1, n_units + 1))
    df[config.treatment_col] = qsmk
    df[config.outcome_col] = y
    return df

"""Pytest shared setup."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from causal_bootstrap.settings import Config, generate_data  # noqa: E402

SIMPLE_COVARIATES = "sex + race + age + C(education) + smokeintensity + smokeyrs + C(exercise) + C(active) + wt71"


@pytest.fixture
def config() -> Config:
    return Config(n_bootstrap=20, random_seed=2024)


@pytest.fixture(scope="session")
def nhefs_like() -> pd.DataFrame:
    return generate_data(Config(), n_units=1200, seed=11)


@pytest.fixture(scope="session")
def small_nhefs_like() -> pd.DataFrame:
    return generate_data(Config(), n_units=300, seed=5)


@pytest.fixture
def indexed_frame() -> pd.DataFrame:
    """Rows carry their own position so replicates reveal the drawn indices."""
    return pd.DataFrame({"i": np.arange(6), "y": [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]})

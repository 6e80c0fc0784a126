from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from causal_bootstrap import Config
from causal_bootstrap.run import bootstrap_all_estimators, build_estimators, compute_all_estimators
from causal_bootstrap.settings import NHEFS_COVARIATE_FORMULA

from conftest import SIMPLE_COVARIATES


def test_build_estimators_uses_config_columns() -> None:
    config = Config(treatment_col="A", outcome_col="Y", stabilized_weights=False)
    estimators = build_estimators(config, "L1 + L2")
    assert set(estimators) == {"G-formula", "IPTW", "AIPW"}
    assert estimators["G-formula"].outcome_formula == "Y ~ A + L1 + L2"
    assert estimators["IPTW"].propensity_formula == "A ~ L1 + L2"
    assert estimators["IPTW"].stabilized is False
    assert estimators["AIPW"].treatment_col == "A"


def test_compute_all_estimators_keys(nhefs_like: pd.DataFrame) -> None:
    results = compute_all_estimators(nhefs_like, Config(), SIMPLE_COVARIATES)
    assert len(results) == 9
    for key in ("gformula", "iptw", "aipw"):
        assert results[f"{key}_difference"] == pytest.approx(
            results[f"{key}_mean_a1"] - results[f"{key}_mean_a0"]
        )


def test_full_course_adjustment_set_runs(nhefs_like: pd.DataFrame) -> None:
    results = compute_all_estimators(nhefs_like, Config(), NHEFS_COVARIATE_FORMULA)
    assert all(np.isfinite(v) for v in results.values())


def test_bootstrap_all_estimators_table(nhefs_like: pd.DataFrame) -> None:
    config = Config(n_bootstrap=8, random_seed=99)
    table = bootstrap_all_estimators(nhefs_like, config, SIMPLE_COVARIATES)

    assert len(table) == 9
    assert list(table["estimator"].unique()) == ["G-formula", "IPTW", "AIPW"]
    assert {"label", "estimate", "std", "percentile_lower", "normal_upper", "n_failures"} <= set(
        table.columns
    )
    assert (table["std"] >= 0).all()
    assert (table["normal_lower"] <= table["normal_upper"]).all()


def test_bootstrap_all_estimators_is_reproducible(small_nhefs_like: pd.DataFrame) -> None:
    config = Config(n_bootstrap=5, random_seed=1)
    formula = "sex + age + wt71"
    first = bootstrap_all_estimators(small_nhefs_like, config, formula)
    second = bootstrap_all_estimators(small_nhefs_like, config, formula)
    pd.testing.assert_frame_equal(first, second)

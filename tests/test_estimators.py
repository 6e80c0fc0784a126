from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from causal_bootstrap import (
    AIPWEstimator,
    CallableEstimator,
    Config,
    GFormulaEstimator,
    IPTWEstimator,
    InvalidInput,
    StandardBootstrap,
)
from causal_bootstrap.model.common import EFFECT_LABELS, ensure_estimator
from causal_bootstrap.model.common.fitters import (
    fit_outcome_model,
    fit_propensity_model,
    predict,
)
from causal_bootstrap.model.standard import estimate_aipw, estimate_gformula, estimate_ipw
from causal_bootstrap.utils import clip_ps, prob_of_observed

from conftest import SIMPLE_COVARIATES

TRUE_EFFECT = Config().true_effect


def _observed_difference_in_means(df: pd.DataFrame) -> float:
    obs = df.dropna(subset=["wt82_71"])
    return obs.loc[obs.qsmk == 1, "wt82_71"].mean() - obs.loc[obs.qsmk == 0, "wt82_71"].mean()


# -----------------------------------------------------------------------------
# Fitters
# -----------------------------------------------------------------------------


def test_outcome_model_drops_missing_outcomes_and_predicts_all_rows(
    small_nhefs_like: pd.DataFrame,
) -> None:
    model = fit_outcome_model(small_nhefs_like, "wt82_71 ~ qsmk + age")
    assert model.nobs == small_nhefs_like["wt82_71"].notna().sum()
    assert predict(model, small_nhefs_like).shape == (len(small_nhefs_like),)


def test_marginal_propensity_model_predicts_treated_share(small_nhefs_like: pd.DataFrame) -> None:
    model = fit_propensity_model(small_nhefs_like, "qsmk ~ 1")
    p = predict(model, small_nhefs_like)
    np.testing.assert_allclose(p, small_nhefs_like["qsmk"].mean())


def test_unknown_family_is_rejected(small_nhefs_like: pd.DataFrame) -> None:
    with pytest.raises(ValueError):
        fit_outcome_model(small_nhefs_like, "wt82_71 ~ qsmk", family="gamma-ish")


# -----------------------------------------------------------------------------
# G-formula
# -----------------------------------------------------------------------------


def test_gformula_without_confounders_is_difference_in_means(
    small_nhefs_like: pd.DataFrame,
) -> None:
    est = GFormulaEstimator("wt82_71 ~ qsmk").estimate(small_nhefs_like)
    assert est[2] == pytest.approx(_observed_difference_in_means(small_nhefs_like))
    assert est[1] - est[0] == pytest.approx(est[2])


def test_gformula_predicts_rows_with_missing_outcome(small_nhefs_like: pd.DataFrame) -> None:
    assert small_nhefs_like["wt82_71"].isna().any()
    y0, y1 = GFormulaEstimator("wt82_71 ~ qsmk + age").predict_counterfactuals(small_nhefs_like)
    assert len(y0) == len(y1) == len(small_nhefs_like)
    assert np.all(np.isfinite(y0))


def test_gformula_recovers_simulated_effect(nhefs_like: pd.DataFrame) -> None:
    est = estimate_gformula(nhefs_like, Config(), SIMPLE_COVARIATES)
    assert est[2] == pytest.approx(TRUE_EFFECT, abs=1.5)


def test_gformula_does_not_modify_input(small_nhefs_like: pd.DataFrame) -> None:
    before = small_nhefs_like.copy()
    GFormulaEstimator("wt82_71 ~ qsmk + age").estimate(small_nhefs_like)
    pd.testing.assert_frame_equal(small_nhefs_like, before)


# -----------------------------------------------------------------------------
# IPTW
# -----------------------------------------------------------------------------


def test_iptw_with_marginal_propensity_is_difference_in_means(
    small_nhefs_like: pd.DataFrame,
) -> None:
    est = IPTWEstimator("qsmk ~ 1", stabilized=False).estimate(small_nhefs_like)
    assert est[2] == pytest.approx(_observed_difference_in_means(small_nhefs_like))


def test_stabilized_weights_with_marginal_propensity_are_one(
    small_nhefs_like: pd.DataFrame,
) -> None:
    weights = IPTWEstimator("qsmk ~ 1", stabilized=True).weights(small_nhefs_like)
    np.testing.assert_allclose(weights, 1.0)
    assert len(weights) == small_nhefs_like["wt82_71"].notna().sum()


def test_stabilized_weights_use_numerator_model(small_nhefs_like: pd.DataFrame) -> None:
    estimator = IPTWEstimator(
        "qsmk ~ age + wt71", stabilized=True, numerator_formula="qsmk ~ sex"
    )
    weights = estimator.weights(small_nhefs_like)

    obs = small_nhefs_like.dropna(subset=["wt82_71"]).reset_index(drop=True)
    A = obs["qsmk"].to_numpy()
    p_num = predict(fit_propensity_model(obs, "qsmk ~ sex"), obs)
    p_den = predict(fit_propensity_model(obs, "qsmk ~ age + wt71"), obs)
    expected = np.where(A == 1, p_num / p_den, (1 - p_num) / (1 - p_den))

    np.testing.assert_allclose(weights, expected, rtol=1e-10)
    assert not np.allclose(weights, 1.0)
    unstabilized = IPTWEstimator("qsmk ~ age + wt71", stabilized=False).weights(small_nhefs_like)
    np.testing.assert_allclose(weights, unstabilized * np.where(A == 1, p_num, 1 - p_num))


def test_weight_summary_reports_positivity_diagnostics(nhefs_like: pd.DataFrame) -> None:
    estimator = IPTWEstimator(f"qsmk ~ {SIMPLE_COVARIATES}", stabilized=False)
    summary = estimator.weight_summary(nhefs_like)
    assert set(summary) == {"mean", "std", "min", "max", "n"}
    assert summary["min"] >= 1.0
    assert summary["max"] >= summary["mean"]


def test_iptw_recovers_simulated_effect(nhefs_like: pd.DataFrame) -> None:
    est = estimate_ipw(nhefs_like, Config(), SIMPLE_COVARIATES)
    assert est[2] == pytest.approx(TRUE_EFFECT, abs=1.5)


def test_msm_matches_iptw_point_estimate(nhefs_like: pd.DataFrame) -> None:
    estimator = IPTWEstimator(f"qsmk ~ {SIMPLE_COVARIATES}")
    msm = estimator.fit_msm(nhefs_like)
    assert msm.estimate == pytest.approx(estimator.estimate(nhefs_like)[2], rel=1e-6)
    assert msm.standard_error > 0
    assert msm.ci_lower < msm.estimate < msm.ci_upper
    assert msm.method == "robust-sandwich"


def test_iptw_trimming_is_applied(small_nhefs_like: pd.DataFrame) -> None:
    estimator = IPTWEstimator("qsmk ~ age + wt71", stabilized=False, ps_clip=(0.2, 0.8))
    weights = estimator.weights(small_nhefs_like)
    assert weights.max() <= 1 / 0.2 + 1e-9


def test_extreme_propensities_are_not_caught() -> None:
    ps = clip_ps(np.array([1.0, 0.0]), None)
    with np.errstate(divide="ignore"):
        weights = 1.0 / prob_of_observed(ps, np.array([0, 1]))
    assert np.all(np.isinf(weights))


# -----------------------------------------------------------------------------
# AIPW
# -----------------------------------------------------------------------------


def test_aipw_with_saturated_models_is_difference_in_means(
    small_nhefs_like: pd.DataFrame,
) -> None:
    est = AIPWEstimator("wt82_71 ~ qsmk", "qsmk ~ 1").estimate(small_nhefs_like)
    assert est[2] == pytest.approx(_observed_difference_in_means(small_nhefs_like))


def test_aipw_recovers_simulated_effect(nhefs_like: pd.DataFrame) -> None:
    est = estimate_aipw(nhefs_like, Config(), SIMPLE_COVARIATES)
    assert est[2] == pytest.approx(TRUE_EFFECT, abs=1.5)


def test_aipw_is_robust_to_a_misspecified_propensity_model(nhefs_like: pd.DataFrame) -> None:
    correct_outcome = f"wt82_71 ~ qsmk + {SIMPLE_COVARIATES}"
    est = AIPWEstimator(correct_outcome, "qsmk ~ 1").estimate(nhefs_like)
    assert est[2] == pytest.approx(TRUE_EFFECT, abs=1.5)


# -----------------------------------------------------------------------------
# Estimator interface
# -----------------------------------------------------------------------------


def test_effect_estimators_share_labels() -> None:
    for cls in (GFormulaEstimator, IPTWEstimator, AIPWEstimator):
        assert tuple(cls.labels) == EFFECT_LABELS


def test_callable_estimator_coerces_to_vector() -> None:
    estimator = CallableEstimator(lambda df: 3)
    vector = estimator(pd.DataFrame({"x": [1]}))
    assert vector.dtype == float
    np.testing.assert_array_equal(vector, [3.0])


def test_ensure_estimator_wraps_callables_and_rejects_others() -> None:
    assert isinstance(ensure_estimator(len), CallableEstimator)
    gf = GFormulaEstimator("wt82_71 ~ qsmk")
    assert ensure_estimator(gf) is gf
    with pytest.raises(InvalidInput):
        ensure_estimator(42)


def test_estimator_rejects_missing_columns() -> None:
    with pytest.raises(InvalidInput):
        GFormulaEstimator("y ~ a").estimate(pd.DataFrame({"y": [1.0, 2.0]}))


def test_bootstrap_of_gformula_is_reproducible(small_nhefs_like: pd.DataFrame) -> None:
    engine = StandardBootstrap(Config(n_bootstrap=10, random_seed=3))
    estimator = GFormulaEstimator("wt82_71 ~ qsmk + age + I(age**2) + wt71")
    first = engine.run(small_nhefs_like, estimator)
    second = engine.run(small_nhefs_like, estimator)
    np.testing.assert_array_equal(first.estimates, second.estimates)
    assert first.labels == list(EFFECT_LABELS)
    assert first.estimates.shape == (10, 3)

"""
Standard Bootstrap for Confidence Intervals

This module provides the non-parametric bootstrap where subjects are
resampled independently with replacement, together with percentile and
normal-approximation confidence intervals.
"""

import logging
import numpy as np
import pandas as pd
from typing import Any, Callable, Optional, Sequence, Tuple, Union
from scipy.stats import norm
from tqdm import tqdm

from ...exceptions import EstimatorFailure, InvalidInput
from ...settings import STREAM_MODES
from ...utils import validate_dataset, validate_replications
from ..common.base import BaseEstimator, as_estimate_vector, ensure_estimator
from ..common.models import BootstrapDistribution, BootstrapResult, SummaryStatistics
from .base_bootstrap import BaseBootstrap, _bootstrap_iteration_static

logger = logging.getLogger(__name__)


class StandardBootstrap(BaseBootstrap):
    """Standard bootstrap class

    Implements the bootstrap where each subject (row) is sampled
    independently. Works with any BaseEstimator or plain callable
    df -> estimate.

    Example:
        >>> engine = StandardBootstrap(get_config("course"))
        >>> result = engine.bootstrap(df, GFormulaEstimator("wt82_71 ~ qsmk + age"))
        >>> result.to_frame()
    """

    def _check_dimension(
        self, vector: np.ndarray, dimension: int, replication: Optional[int]
    ) -> None:
        if vector.shape[0] != dimension:
            raise EstimatorFailure(
                f"Estimator returned {vector.shape[0]} values on replicate "
                f"{replication}, expected {dimension}",
                replication=replication,
            )

    def run(
        self,
        df: pd.DataFrame,
        estimator: Union[BaseEstimator, Callable[[pd.DataFrame], Any]],
        replications: Optional[int] = None,
        seed: Optional[int] = None,
        failure_policy: Optional[str] = None,
        stream: Optional[str] = None,
        n_jobs: Optional[int] = None,
    ) -> BootstrapDistribution:
        """Compute the bootstrap distribution of an estimator

        With stream="shared" one generator seeded with seed draws n indices
        per replication, replications 1..R in order, without reseeding.
        With stream="spawned" every replication draws from its own child of
        SeedSequence(seed), which allows n_jobs != 1 and gives the same
        result for any n_jobs.

        Args:
            df: Dataset with at least one row (not modified)
            estimator: BaseEstimator or callable returning a scalar or vector
            replications: Number of bootstrap replications (default config.n_bootstrap)
            seed: Random seed (default config.random_seed)
            failure_policy: "raise" or "redraw" (default config.failure_policy)
            stream: "shared" or "spawned" (default "spawned" when n_jobs != 1,
                otherwise config.stream)
            n_jobs: Parallel jobs for the "spawned" stream (default config.n_jobs)

        Returns:
            BootstrapDistribution with exactly `replications` rows

        Raises:
            InvalidInput: If df is empty, replications is not positive, or
                stream="shared" is requested together with n_jobs != 1
            EstimatorFailure: If the estimator fails under the failure policy
        """
        validate_dataset(df)
        if replications is None:
            replications = self.config.n_bootstrap
        replications = validate_replications(replications)
        if seed is None:
            seed = self.config.random_seed
        if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)) or seed < 0:
            raise InvalidInput(f"seed must be a non-negative integer, got {seed!r}")
        seed = int(seed)
        estimator = ensure_estimator(estimator)
        failure_policy = self._resolve_failure_policy(failure_policy)
        if n_jobs is None:
            n_jobs = self.config.n_jobs
        if stream is None:
            # Parallel runs need one sub-stream per replication
            stream = "spawned" if n_jobs != 1 else self.config.stream
        if stream not in STREAM_MODES:
            raise InvalidInput(f"stream must be one of {STREAM_MODES}, got '{stream}'")
        if stream == "shared" and n_jobs != 1:
            raise InvalidInput(
                "Parallel execution requires stream='spawned'; the shared stream is sequential"
            )

        logger.info(
            "Running %d bootstrap replications of %r (n=%d, seed=%d, stream=%s)",
            replications,
            estimator,
            len(df),
            seed,
            stream,
        )

        max_redraws = self.config.max_redraws
        if stream == "shared":
            rng = np.random.default_rng(seed)
            results = [
                _bootstrap_iteration_static(
                    df, estimator, rng, b, failure_policy, max_redraws
                )
                for b in tqdm(
                    range(replications),
                    desc="Running bootstrap",
                    disable=not self.config.verbose,
                )
            ]
        else:
            generators = self._spawn_generators(seed, replications)
            iteration_args = [
                (df, estimator, generators[b], b, failure_policy, max_redraws)
                for b in range(replications)
            ]
            results = self._run_parallel_bootstrap(
                iteration_func=_bootstrap_iteration_static,
                iteration_args=iteration_args,
                n_jobs=n_jobs,
            )

        dimension = results[0][0].shape[0]
        for b, (vector, _) in enumerate(results):
            self._check_dimension(vector, dimension, b)

        n_failures = sum(failed for _, failed in results)
        if n_failures:
            logger.warning(
                "%d bootstrap replicates were redrawn after estimator failure", n_failures
            )

        distribution = BootstrapDistribution(
            estimates=np.vstack([vector for vector, _ in results]),
            labels=estimator.get_labels(dimension),
            seed=seed,
            replications=replications,
            n_failures=n_failures,
            stream=stream,
        )
        logger.info(
            "Finished %d bootstrap replications of %r (%d redraws)",
            replications,
            estimator,
            n_failures,
        )
        return distribution

    def summarize(
        self,
        distribution: Union[BootstrapDistribution, np.ndarray, Sequence],
        percentiles: Optional[Sequence[float]] = None,
    ) -> SummaryStatistics:
        """Summarize a bootstrap distribution coordinate by coordinate

        Args:
            distribution: BootstrapDistribution, or array of shape (R,) or (R, k)
            percentiles: Percentiles in [0, 100] (default config.percentiles)

        Returns:
            SummaryStatistics with mean, sample std (ddof=1) and percentiles

        Raises:
            InvalidInput: If the distribution is empty or a percentile is out of range
        """
        if percentiles is None:
            percentiles = self.config.percentiles

        if isinstance(distribution, BootstrapDistribution):
            estimates = distribution.estimates
            labels = distribution.labels
        else:
            estimates = np.asarray(distribution, dtype=float)
            if estimates.ndim == 1:
                estimates = estimates[:, np.newaxis]
            if estimates.ndim != 2:
                raise InvalidInput(
                    f"distribution must be 1- or 2-dimensional, got shape {estimates.shape}"
                )
            labels = [f"estimate_{i}" for i in range(estimates.shape[1])]

        if estimates.shape[0] == 0:
            raise InvalidInput("Cannot summarize an empty bootstrap distribution")
        for q in percentiles:
            if not 0.0 <= q <= 100.0:
                raise InvalidInput(f"Percentiles must be in [0, 100], got {q}")

        mean, std, values = self._compute_summary(estimates, percentiles)
        return SummaryStatistics(labels=labels, mean=mean, std=std, percentiles=values)

    def normal_interval(
        self,
        point_estimate,
        bootstrap_std,
        confidence_level: Optional[float] = None,
    ) -> Tuple:
        """Symmetric interval point_estimate +/- z * bootstrap_std

        z is the two-sided normal critical value for confidence_level
        (1.959964 for 0.95). Works element-wise on arrays.

        Returns:
            Tuple (lower, upper)
        """
        if confidence_level is None:
            confidence_level = self.config.confidence_level
        if not 0.0 < confidence_level < 1.0:
            raise InvalidInput(
                f"confidence_level must be in (0, 1), got {confidence_level}"
            )
        z = norm.ppf(1 - (1 - confidence_level) / 2)
        point_estimate = np.asarray(point_estimate, dtype=float)
        bootstrap_std = np.asarray(bootstrap_std, dtype=float)
        lower = point_estimate - z * bootstrap_std
        upper = point_estimate + z * bootstrap_std
        if lower.ndim == 0:
            return float(lower), float(upper)
        return lower, upper

    def bootstrap(
        self,
        df: pd.DataFrame,
        estimator: Union[BaseEstimator, Callable[[pd.DataFrame], Any]],
        replications: Optional[int] = None,
        seed: Optional[int] = None,
        percentiles: Optional[Sequence[float]] = None,
        confidence_level: Optional[float] = None,
        **run_kwargs,
    ) -> BootstrapResult:
        """Point estimate on df with bootstrap percentile and normal intervals

        Args:
            df: Dataset
            estimator: BaseEstimator or callable
            replications: Number of replications (default config.n_bootstrap)
            seed: Random seed (default config.random_seed)
            percentiles: Extra percentiles to report in the summary
                (default config.percentiles); the interval bounds are always included
            confidence_level: Interval level (default config.confidence_level)
            **run_kwargs: Passed to run() (failure_policy, stream, n_jobs)

        Returns:
            BootstrapResult
        """
        if confidence_level is None:
            confidence_level = self.config.confidence_level
        if not 0.0 < confidence_level < 1.0:
            raise InvalidInput(
                f"confidence_level must be in (0, 1), got {confidence_level}"
            )
        validate_dataset(df)
        estimator = ensure_estimator(estimator)

        try:
            point_estimate = as_estimate_vector(estimator(df))
        except Exception as e:
            raise EstimatorFailure(f"Estimator failed on the original data: {e}") from e

        distribution = self.run(df, estimator, replications, seed, **run_kwargs)
        self._check_dimension(point_estimate, distribution.dimension, None)

        if percentiles is None:
            percentiles = self.config.percentiles
        alpha = 1 - confidence_level
        # Rounded so that 0.95 gives exactly 2.5 and 97.5
        lower_q = round(100 * alpha / 2, 10)
        upper_q = round(100 * (1 - alpha / 2), 10)
        requested = sorted({float(q) for q in percentiles} | {lower_q, upper_q})
        summary = self.summarize(distribution, percentiles=requested)

        return BootstrapResult(
            point_estimate=point_estimate,
            distribution=distribution,
            summary=summary,
            confidence_level=confidence_level,
            percentile_interval=(summary.percentile(lower_q), summary.percentile(upper_q)),
            normal_interval=self.normal_interval(
                point_estimate, summary.std, confidence_level
            ),
        )

"""
Base Bootstrap Class

This module provides the base class for bootstrap implementations: random
stream management, single-replicate execution under a failure policy,
parallel execution and distribution summaries.
"""

import logging
import warnings
import numpy as np
import pandas as pd
from typing import List, Optional, Any, Callable, Sequence, Tuple
from joblib import Parallel, delayed

from ...exceptions import EstimatorFailure, InvalidInput
from ...settings import Config, FAILURE_POLICIES
from ..common.base import BaseEstimator, as_estimate_vector

logger = logging.getLogger(__name__)


def _draw_replicate(
    df: pd.DataFrame, rng: np.random.Generator
) -> Tuple[np.ndarray, pd.DataFrame]:
    """Draw n row indices with replacement and build the replicate

    Row order follows the drawn indices; duplicates are kept.
    """
    n_units = len(df)
    bootstrap_indices = rng.choice(n_units, size=n_units, replace=True)
    bootstrap_df = df.iloc[bootstrap_indices].reset_index(drop=True)
    return bootstrap_indices, bootstrap_df


# Top-level function: to make it usable from joblib workers
def _bootstrap_iteration_static(
    df: pd.DataFrame,
    estimator: BaseEstimator,
    rng: np.random.Generator,
    replication: int,
    failure_policy: str,
    max_redraws: int,
) -> Tuple[np.ndarray, int]:
    """Execute one bootstrap replication

    Args:
        df: Original dataframe (not modified)
        estimator: Estimator applied to the replicate
        rng: Generator to draw from (shared stream or this replication's own)
        replication: Zero-based replication index (for error reporting)
        failure_policy: "raise" or "redraw"
        max_redraws: Maximum number of redraws for this replication

    Returns:
        Tuple of (estimate vector, number of failed draws)

    Raises:
        EstimatorFailure: If the estimator fails and the policy is "raise",
            or if it keeps failing after max_redraws redraws
    """
    n_failed = 0
    while True:
        _, bootstrap_df = _draw_replicate(df, rng)
        try:
            return as_estimate_vector(estimator(bootstrap_df)), n_failed
        except Exception as e:
            if failure_policy == "raise":
                raise EstimatorFailure(
                    f"Estimator failed on bootstrap replicate {replication}: {e}",
                    replication=replication,
                ) from e
            n_failed += 1
            if n_failed > max_redraws:
                raise EstimatorFailure(
                    f"Estimator failed on bootstrap replicate {replication} "
                    f"after {max_redraws} redraws: {e}",
                    replication=replication,
                ) from e
            logger.warning(
                "Estimator failed on bootstrap replicate %d (%s); drawing a fresh replicate",
                replication,
                e,
            )


class BaseBootstrap:
    """Base class for bootstrap

    Provides common random stream, parallel execution and summary logic.
    """

    def __init__(self, config: Optional[Config] = None):
        """Initialize BaseBootstrap

        Args:
            config: Config object (uses default Config() if None)
        """
        if config is None:
            config = Config()
        self.config = config

    def _resolve_failure_policy(self, failure_policy: Optional[str]) -> str:
        if failure_policy is None:
            failure_policy = self.config.failure_policy
        if failure_policy not in FAILURE_POLICIES:
            raise InvalidInput(
                f"failure_policy must be one of {FAILURE_POLICIES}, got '{failure_policy}'"
            )
        return failure_policy

    def _spawn_generators(
        self, seed: int, n_bootstrap: int
    ) -> List[np.random.Generator]:
        """Generate an independent generator for each replication

        Each replication b gets child b of SeedSequence(seed), so results do
        not depend on the order in which replications are executed.

        Args:
            seed: Base random seed
            n_bootstrap: Number of bootstrap iterations

        Returns:
            List of generators, one per replication
        """
        children = np.random.SeedSequence(seed).spawn(n_bootstrap)
        return [np.random.default_rng(child) for child in children]

    def _run_parallel_bootstrap(
        self,
        iteration_func: Callable,
        iteration_args: List[tuple],
        n_jobs: Optional[int] = None,
    ) -> List[Any]:
        """Execute bootstrap iterations in parallel

        Results are returned in the order of iteration_args.

        Args:
            iteration_func: Function to execute each iteration
            iteration_args: List of arguments to pass to each iteration
            n_jobs: Number of jobs for parallel execution (-1 uses all cores)

        Returns:
            List of iteration results
        """
        if n_jobs is None:
            n_jobs = self.config.n_jobs

        # Threading backend: estimators and dataframes are shared without pickling
        return Parallel(n_jobs=n_jobs, backend="threading")(
            delayed(iteration_func)(*args) for args in iteration_args
        )

    def _compute_summary(
        self,
        estimates: np.ndarray,
        percentiles: Sequence[float],
    ) -> Tuple[np.ndarray, np.ndarray, dict]:
        """Calculate mean, sample standard deviation and percentiles per column

        Percentiles use linear interpolation between order statistics
        (R quantile type 7). Non-finite values are not removed.

        Args:
            estimates: Array of shape (replications, k)
            percentiles: Percentiles in [0, 100]

        Returns:
            Tuple of (mean, std, {percentile: values})
        """
        if not np.all(np.isfinite(estimates)):
            n_bad = int(np.sum(~np.all(np.isfinite(estimates), axis=1)))
            warnings.warn(
                f"Bootstrap distribution contains {n_bad} replicates with NaN or "
                f"infinite values; summaries will not be finite.",
                RuntimeWarning,
            )

        mean = np.mean(estimates, axis=0)
        std = np.std(estimates, axis=0, ddof=1)
        values = {
            float(q): np.percentile(estimates, q, axis=0, method="linear")
            for q in percentiles
        }
        return mean, std, values

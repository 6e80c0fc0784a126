"""
Common Pydantic models for estimator and bootstrap results

Estimators with the same purpose use common models.
"""

from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Dict, List, Optional, Tuple
import numpy as np
import pandas as pd


class EffectEstimate(BaseModel):
    """Single effect estimate with standard error and confidence interval"""

    estimate: float = Field(description="Point estimate")
    standard_error: float = Field(description="Standard error")
    ci_lower: float = Field(description="Lower confidence bound")
    ci_upper: float = Field(description="Upper confidence bound")
    confidence_level: float = Field(gt=0.0, lt=1.0, description="Confidence level")
    method: str = Field(description="How the interval was obtained")
    label: str = Field(default="difference", description="Name of the estimand")

    @field_validator("standard_error")
    @classmethod
    def validate_non_negative(cls, v):
        """Standard errors must be non-negative; NaN is allowed"""
        if not np.isnan(v) and v < 0:
            raise ValueError(f"standard_error must be non-negative, got {v}")
        return v


class BootstrapDistribution(BaseModel):
    """Bootstrap distribution of an estimate vector

    Row b of estimates holds the estimate for replicate b, in generation order.
    """

    estimates: np.ndarray = Field(description="Array of shape (replications, k)")
    labels: List[str] = Field(description="Names of the k coordinates")
    seed: int = Field(description="Seed that initialized the random stream")
    replications: int = Field(gt=0, description="Configured replication count")
    n_failures: int = Field(
        default=0, ge=0, description="Replicates discarded and redrawn after estimator failure"
    )
    stream: str = Field(default="shared", description="Random stream mode")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("estimates")
    @classmethod
    def validate_shape(cls, v):
        """Check the estimates array is two-dimensional"""
        v = np.asarray(v, dtype=float)
        if v.ndim != 2:
            raise ValueError(f"estimates must be 2-dimensional, got shape {v.shape}")
        return v

    def __len__(self) -> int:
        return self.estimates.shape[0]

    @property
    def dimension(self) -> int:
        return self.estimates.shape[1]

    def to_frame(self) -> pd.DataFrame:
        """Return the distribution as a dataframe (one row per replicate)"""
        return pd.DataFrame(self.estimates, columns=self.labels)


class SummaryStatistics(BaseModel):
    """Per-coordinate summary of a bootstrap distribution"""

    labels: List[str] = Field(description="Names of the coordinates")
    mean: np.ndarray = Field(description="Mean of each coordinate")
    std: np.ndarray = Field(description="Sample standard deviation (ddof=1)")
    percentiles: Dict[float, np.ndarray] = Field(
        description="Requested percentile -> value per coordinate"
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def percentile(self, q: float) -> np.ndarray:
        """Return the values for one requested percentile

        Keys are matched with np.isclose, so derived values such as
        100 * (1 - 0.95) / 2 find the 2.5 entry.
        """
        for key, values in self.percentiles.items():
            if np.isclose(key, float(q), rtol=0.0, atol=1e-9):
                return values
        raise KeyError(f"Percentile {q} was not computed; available: {sorted(self.percentiles)}")

    def to_frame(self) -> pd.DataFrame:
        """Return a tidy dataframe indexed by coordinate label"""
        data = {"mean": self.mean, "std": self.std}
        for q, values in self.percentiles.items():
            data[f"p{q:g}"] = values
        return pd.DataFrame(data, index=pd.Index(self.labels, name="label"))


class BootstrapResult(BaseModel):
    """Point estimate on the original data with bootstrap uncertainty"""

    point_estimate: np.ndarray = Field(description="Estimate on the original data")
    distribution: BootstrapDistribution
    summary: SummaryStatistics
    confidence_level: float = Field(gt=0.0, lt=1.0)
    percentile_interval: Tuple[np.ndarray, np.ndarray] = Field(
        description="Percentile interval (lower, upper)"
    )
    normal_interval: Tuple[np.ndarray, np.ndarray] = Field(
        description="Point estimate +/- z * bootstrap standard deviation"
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def labels(self) -> List[str]:
        return self.distribution.labels

    def effect(self, label: Optional[str] = None, method: str = "normal") -> EffectEstimate:
        """Return one coordinate as an EffectEstimate

        Args:
            label: Coordinate label (default: last coordinate)
            method: "normal" or "percentile"
        """
        if method not in ("normal", "percentile"):
            raise ValueError(f"method must be 'normal' or 'percentile', got '{method}'")
        idx = len(self.labels) - 1 if label is None else self.labels.index(label)
        lower, upper = (
            self.normal_interval if method == "normal" else self.percentile_interval
        )
        return EffectEstimate(
            estimate=float(self.point_estimate[idx]),
            standard_error=float(self.summary.std[idx]),
            ci_lower=float(lower[idx]),
            ci_upper=float(upper[idx]),
            confidence_level=self.confidence_level,
            method=f"bootstrap-{method}",
            label=self.labels[idx],
        )

    def to_frame(self) -> pd.DataFrame:
        """Return one row per coordinate with estimate, std and both intervals"""
        return pd.DataFrame(
            {
                "estimate": self.point_estimate,
                "bootstrap_mean": self.summary.mean,
                "std": self.summary.std,
                "percentile_lower": self.percentile_interval[0],
                "percentile_upper": self.percentile_interval[1],
                "normal_lower": self.normal_interval[0],
                "normal_upper": self.normal_interval[1],
            },
            index=pd.Index(self.labels, name="label"),
        )

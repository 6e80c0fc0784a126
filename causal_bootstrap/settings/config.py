"""
Analysis settings and parameter management

This module centrally manages the parameters used by the estimators and the
bootstrap engine, allowing users to easily change settings.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Any, Optional, Tuple
from scipy.stats import norm

logger = logging.getLogger(__name__)

FAILURE_POLICIES = ("raise", "redraw")
STREAM_MODES = ("shared", "spawned")


@dataclass
class Config:
    """Unified configuration class"""

    # === Bootstrap Settings ===
    random_seed: int = 42
    n_bootstrap: int = 500
    confidence_level: float = 0.95
    percentiles: Tuple[float, ...] = (2.5, 97.5)
    # "raise": abort on the first failed replicate
    # "redraw": discard the failed replicate and draw a fresh one
    failure_policy: str = "raise"
    max_redraws: int = 10
    # "shared": one generator stream for all replications (sequential)
    # "spawned": one SeedSequence child per replication (parallel-safe)
    stream: str = "shared"
    n_jobs: int = 1
    verbose: bool = False  # Whether to show progress bars

    # === Data Settings (NHEFS column names) ===
    treatment_col: str = "qsmk"
    outcome_col: str = "wt82_71"
    id_col: str = "seqn"

    # === Estimator Settings ===
    outcome_family: str = "gaussian"
    stabilized_weights: bool = True
    ps_clip_min: Optional[float] = None  # No trimming unless both bounds are set
    ps_clip_max: Optional[float] = None

    # === Simulation Settings ===
    n_units: int = 1629
    true_effect: float = 3.5
    missing_outcome_rate: float = 0.04

    def __post_init__(self):
        """Post-initialization processing"""
        if self.failure_policy not in FAILURE_POLICIES:
            raise ValueError(
                f"failure_policy must be one of {FAILURE_POLICIES}, got '{self.failure_policy}'"
            )
        if self.stream not in STREAM_MODES:
            raise ValueError(
                f"stream must be one of {STREAM_MODES}, got '{self.stream}'"
            )
        if not 0.0 < self.confidence_level < 1.0:
            raise ValueError(
                f"confidence_level must be in (0, 1), got {self.confidence_level}"
            )
        self.percentiles = tuple(float(p) for p in self.percentiles)

        # Dynamically calculate z_critical based on confidence_level
        self.z_critical = norm.ppf(1 - (1 - self.confidence_level) / 2)

    @property
    def ps_clip(self) -> Optional[Tuple[float, float]]:
        """Propensity score trimming bounds, or None when trimming is off"""
        if self.ps_clip_min is None or self.ps_clip_max is None:
            return None
        return (self.ps_clip_min, self.ps_clip_max)


# Preset definitions (simplified as dictionary)
CONFIG_PRESETS = {
    "default": {},
    # Fast settings for smoke tests and interactive exploration
    "quick": {"n_bootstrap": 100},
    # Settings used in the course notebooks
    "course": {"n_bootstrap": 1000, "random_seed": 1234},
}


def get_config(
    config_name: str = "default", overrides: Optional[Dict[str, Any]] = None
) -> Config:
    """
    Return configuration based on configuration name (with override functionality)

    Args:
        config_name: Base configuration name ("default", "quick", "course")
        overrides: Dictionary of settings to override

    Returns:
        Configuration object
    """
    if config_name not in CONFIG_PRESETS:
        raise ValueError(
            f"Unknown config name '{config_name}'. Available: {list(CONFIG_PRESETS)}"
        )

    params = dict(CONFIG_PRESETS[config_name])

    # Apply override processing
    if overrides:
        for key, value in overrides.items():
            if key in Config.__dataclass_fields__:
                params[key] = value
            else:
                logger.warning("Unknown config key '%s' - skipping", key)

    return Config(**params)

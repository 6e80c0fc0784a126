"""
Common functions module

Provides common processing such as setting display.
"""

from typing import Optional
from .config import Config, get_config, CONFIG_PRESETS


def print_config_summary(config: Optional[Config] = None) -> None:
    """Display configuration summary"""
    if config is None:
        config = get_config("default")

    print("=== Configuration Summary ===")
    print(f"Bootstrap replications: {config.n_bootstrap}")
    print(f"Random Seed: {config.random_seed}")
    print(f"Confidence Level: {config.confidence_level} (z = {config.z_critical:.6f})")
    print(f"Percentiles: {config.percentiles}")
    print(f"Failure Policy: {config.failure_policy} (max redraws: {config.max_redraws})")
    print(f"Random Stream: {config.stream} (n_jobs: {config.n_jobs})")
    print(f"Treatment / Outcome: {config.treatment_col} / {config.outcome_col}")
    print("=============================")


def print_preset_summary() -> None:
    """Display available configuration presets"""
    print("=== Configuration Presets ===")
    for name, overrides in CONFIG_PRESETS.items():
        print(f"{name}:")
        if overrides:
            for key, value in overrides.items():
                print(f"  {key}: {value}")
        else:
            print("  (defaults)")
    print("=============================")

"""
Settings module for configuration and data generation

This module provides configuration management and the synthetic
NHEFS-shaped data generator used for examples and tests.
"""

# Config related
from .config import (
    Config,
    get_config,
    CONFIG_PRESETS,
    FAILURE_POLICIES,
    STREAM_MODES,
)

# Common functions
from .functions import (
    print_config_summary,
    print_preset_summary,
)

# DGP for simulation
from .simulation import (
    generate_data,
    NHEFS_COVARIATE_FORMULA,
)

__all__ = [
    # Config
    "Config",
    "get_config",
    "CONFIG_PRESETS",
    "FAILURE_POLICIES",
    "STREAM_MODES",
    # Functions
    "print_config_summary",
    "print_preset_summary",
    # Simulation
    "generate_data",
    "NHEFS_COVARIATE_FORMULA",
]

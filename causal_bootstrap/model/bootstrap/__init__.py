"""
Bootstrap methods for confidence intervals

This module provides the standard (subject-level) non-parametric bootstrap
with percentile and normal-approximation intervals.
"""

from .standard_bootstrap import StandardBootstrap
from .base_bootstrap import BaseBootstrap

# The standard bootstrap is the engine used throughout the package
BootstrapEngine = StandardBootstrap

__all__ = [
    "StandardBootstrap",
    "BaseBootstrap",
    "BootstrapEngine",
]

"""Slicing Pie equity engine - vesting, projections and valuation.

This package provides the computation core of a Slicing Pie equity tool:
- Straight-line vesting with a cliff, in calendar months
- Roster-wide projections at any date
- Company valuation (manual or metrics-driven) and per-contributor equity values

The domain layer is designed to be:
- Framework-agnostic (no web or storage dependencies)
- Pure (every calculation is a function of its arguments)
- Unaware of feature flags (the composition root decides what to run)
"""

from .errors import ConfigurationError, DegenerateInputWarning
from .schemas import *  # noqa: F403, F401
from .calculators import (
    compute_vesting_status,
    project,
    compute_valuation,
    evaluate_valuation,
    allocate,
)

__version__ = "0.1.0"

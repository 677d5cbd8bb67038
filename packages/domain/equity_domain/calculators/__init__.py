"""Pure computation functions for vesting, projection, valuation and slices.

Every function here is synchronous and side-effect free: the result depends
only on the arguments, so calls are safe from any number of threads.

Usage:
    from equity_domain.calculators import compute_vesting_status, project, allocate

    status = compute_vesting_status(date(2026, 1, 1), contributor)
    projection = project(date(2026, 1, 1), roster)
    rows = allocate(compute_valuation(config), projection)
"""

from .vesting import (
    add_months,
    months_between,
    cliff_date,
    full_vest_date,
    compute_vesting_status,
)
from .projection import project
from .valuation import (
    ValuationStrategy,
    SDEMultipleStrategy,
    confidence_level,
    evaluate_valuation,
    compute_valuation,
    allocate,
)
from .slices import (
    multiplier_for,
    calculate_slices,
    slices_by_contributor,
    build_roster,
)

__all__ = [
    # Vesting
    "add_months",
    "months_between",
    "cliff_date",
    "full_vest_date",
    "compute_vesting_status",
    # Projection
    "project",
    # Valuation
    "ValuationStrategy",
    "SDEMultipleStrategy",
    "confidence_level",
    "evaluate_valuation",
    "compute_valuation",
    "allocate",
    # Slices
    "multiplier_for",
    "calculate_slices",
    "slices_by_contributor",
    "build_roster",
]

"""Equity domain schemas.

This package contains all Pydantic models for the equity domain layer:
- Base types and conventions
- Contributors, vesting configuration and vesting status
- Contributions and Slicing Pie multipliers
- Projections (roster-wide vesting at a date)
- Valuation configuration, history and equity value rows
- Export/import payload

Usage:
    from equity_domain.schemas import (
        Contributor, VestingConfig, ValuationConfig, BusinessMetrics
    )
"""

# Base types
from .base import (
    DomainModel,
    SliceCount,
    Cents,
    NonNegativeCents,
    PercentValue,
    MonthCount,
    ContributorId,
    EntryId,
)

# Contributors and vesting
from .contributors import (
    VestingState,
    VestingConfig,
    Contributor,
    VestingStatus,
)

# Contributions
from .contributions import (
    ContributionType,
    Contribution,
    MULTIPLIERS,
)

# Projection
from .projection import (
    ContributorProjection,
    ProjectionTotals,
    ProjectionResult,
)

# Valuation
from .valuation import (
    ValuationMode,
    ConfidenceLevel,
    MAX_HISTORY_ENTRIES,
    ProfitYear,
    BusinessMetrics,
    ValuationConfig,
    ValuationBreakdown,
    ValuationResult,
    ValuationHistoryEntry,
    ValuationHistory,
    EquityValueRow,
)

# Export/import
from .equity_data import EquityData

__all__ = [
    # Base types
    "DomainModel",
    "SliceCount",
    "Cents",
    "NonNegativeCents",
    "PercentValue",
    "MonthCount",
    "ContributorId",
    "EntryId",
    # Contributors
    "VestingState",
    "VestingConfig",
    "Contributor",
    "VestingStatus",
    # Contributions
    "ContributionType",
    "Contribution",
    "MULTIPLIERS",
    # Projection
    "ContributorProjection",
    "ProjectionTotals",
    "ProjectionResult",
    # Valuation
    "ValuationMode",
    "ConfidenceLevel",
    "MAX_HISTORY_ENTRIES",
    "ProfitYear",
    "BusinessMetrics",
    "ValuationConfig",
    "ValuationBreakdown",
    "ValuationResult",
    "ValuationHistoryEntry",
    "ValuationHistory",
    "EquityValueRow",
    # Export/import
    "EquityData",
]

"""Company valuation models.

The company's total value comes from one of two mutually exclusive sources:
- manual: a figure the user typed in
- auto: derived from business metrics (profit, profit history, churn)

All monetary values are integer cents. Only display formatting divides by 100.

This module handles:
- Business metrics and their entry-time validation
- The persisted valuation configuration
- The append-only valuation history (bounded to the most recent entries)
- Equity value rows (computed per render, never stored)
"""

import uuid
from typing import List, Literal, Optional, TYPE_CHECKING
from datetime import datetime, timezone
from pydantic import Field, ConfigDict, model_validator

from .base import (
    DomainModel,
    Cents,
    NonNegativeCents,
    PercentValue,
    SliceCount,
    ContributorId,
    EntryId,
)

if TYPE_CHECKING:
    from ..calculators.valuation import ValuationStrategy


ValuationMode = Literal["manual", "auto"]
ConfidenceLevel = Literal["high", "medium", "low"]

# Maximum number of history entries retained (oldest evicted first)
MAX_HISTORY_ENTRIES = 20

# Maximum number of previous years of profit history
MAX_PROFIT_HISTORY_YEARS = 5


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Business Metrics
# =============================================================================

class ProfitYear(DomainModel):
    """Profit for one past fiscal year."""

    year: int = Field(
        ge=1900,
        description="Fiscal year (e.g., 2024)"
    )

    profit: Cents = Field(
        description="Profit in cents (negative = loss)"
    )


class BusinessMetrics(DomainModel):
    """Business performance inputs for auto valuation.

    Example:
        BusinessMetrics(
            current_year_profit=12_000_000,      # $120,000
            profit_history=[
                ProfitYear(year=2024, profit=10_000_000),
                ProfitYear(year=2023, profit=8_000_000),
            ],
            churn_rate=5.0,
        )

    current_year is optional. When omitted it is taken to be the year after
    the newest history entry, which keeps valuations deterministic.
    """

    current_year_profit: Cents = Field(
        default=0,
        description="Current year profit in cents (may be negative)"
    )

    profit_history: List[ProfitYear] = Field(
        default_factory=list,
        description="Up to 5 previous years, strictly descending by year"
    )

    churn_rate: Optional[PercentValue] = Field(
        default=None,
        description="Customer churn rate 0-100. None = not provided"
    )

    current_year: Optional[int] = Field(
        default=None,
        description="Fiscal year of current_year_profit. None = year after newest history entry"
    )

    @model_validator(mode='after')
    def validate_history(self):
        """Validate profit history length, ordering and year bounds."""
        history = self.profit_history
        if len(history) > MAX_PROFIT_HISTORY_YEARS:
            raise ValueError(
                f"profit_history supports at most {MAX_PROFIT_HISTORY_YEARS} years, got {len(history)}"
            )

        for newer, older in zip(history, history[1:]):
            if older.year >= newer.year:
                raise ValueError("profit_history must be strictly descending by year")

        if self.current_year is not None and history:
            if history[0].year >= self.current_year:
                raise ValueError(
                    f"profit_history years must be before current_year ({self.current_year})"
                )

        return self

    @property
    def effective_current_year(self) -> Optional[int]:
        """Year attributed to current_year_profit (None if unknown and no history)."""
        if self.current_year is not None:
            return self.current_year
        if self.profit_history:
            return self.profit_history[0].year + 1
        return None

    @property
    def years_of_data(self) -> int:
        """Number of years with profit data, including the current year."""
        return len(self.profit_history) + 1


# =============================================================================
# Valuation Configuration
# =============================================================================

class ValuationConfig(DomainModel):
    """Persisted valuation settings.

    mode selects which of manual_value / business_metrics is authoritative.
    The other field is kept so that switching modes back and forth does not
    lose data. A config can be incomplete (the default is manual mode with no
    value); computing a valuation from it raises ConfigurationError.

    enabled and disclaimer_acknowledged belong to the settings UI; the
    valuation math ignores them.
    """

    enabled: bool = Field(
        default=False,
        description="Whether the valuation feature is switched on"
    )

    disclaimer_acknowledged: bool = Field(
        default=False,
        description="User accepted the valuation disclaimer"
    )

    mode: ValuationMode = Field(
        default="manual",
        description="Which valuation source is authoritative"
    )

    manual_value: Optional[NonNegativeCents] = Field(
        default=None,
        description="User-entered company value in cents (manual mode)"
    )

    business_metrics: Optional[BusinessMetrics] = Field(
        default=None,
        description="Business metrics (auto mode)"
    )

    last_updated: datetime = Field(
        default_factory=_utcnow,
        description="When the configuration last changed"
    )


class ValuationBreakdown(DomainModel):
    """How an auto valuation was assembled."""

    average_profit: Cents
    base_multiple: float
    growth_multiplier: float
    retention_multiplier: float


class ValuationResult(DomainModel):
    """A computed company valuation with metadata."""

    value: NonNegativeCents

    mode: ValuationMode

    confidence: Optional[ConfidenceLevel] = Field(
        default=None,
        description="Data completeness for auto valuations. None for manual values"
    )

    breakdown: Optional[ValuationBreakdown] = None


# =============================================================================
# Valuation History
# =============================================================================

class ValuationHistoryEntry(DomainModel):
    """Immutable snapshot of a saved valuation."""

    model_config = ConfigDict(frozen=True)

    id: EntryId = Field(
        default_factory=lambda: str(uuid.uuid4())
    )

    timestamp: datetime = Field(
        default_factory=_utcnow
    )

    mode: ValuationMode

    value: NonNegativeCents

    # Snapshot of inputs (for display/restore)
    manual_value: Optional[NonNegativeCents] = None
    business_metrics: Optional[BusinessMetrics] = None


class ValuationHistory(DomainModel):
    """Newest-first log of saved valuations, bounded to MAX_HISTORY_ENTRIES.

    Usage:
        history = ValuationHistory()
        entry = history.record(config)
        restored = history.restore_into(entry.id, other_config)
    """

    entries: List[ValuationHistoryEntry] = Field(
        default_factory=list,
        description="Saved valuations, newest first"
    )

    max_entries: int = Field(
        default=MAX_HISTORY_ENTRIES,
        ge=1,
        description="Retention limit; oldest entries are evicted first"
    )

    def record(
        self,
        config: ValuationConfig,
        strategy: Optional["ValuationStrategy"] = None,
        timestamp: Optional[datetime] = None,
    ) -> ValuationHistoryEntry:
        """Compute the config's current value and append it to the history.

        Args:
            config: Configuration to snapshot
            strategy: Auto valuation strategy (default: SDE multiple)
            timestamp: Entry time (default: now, UTC)

        Returns:
            The new entry

        Raises:
            ConfigurationError: If no valuation can be computed from config
        """
        from ..calculators.valuation import compute_valuation

        value = compute_valuation(config, strategy=strategy)
        entry = ValuationHistoryEntry(
            timestamp=timestamp or _utcnow(),
            mode=config.mode,
            value=value,
            manual_value=config.manual_value,
            business_metrics=(
                config.business_metrics.model_copy(deep=True)
                if config.business_metrics is not None
                else None
            ),
        )
        self.entries = ([entry] + self.entries)[: self.max_entries]
        return entry

    def find(self, entry_id: str) -> ValuationHistoryEntry:
        """Get an entry by id.

        Raises:
            KeyError: If no entry has this id
        """
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        raise KeyError(f"Valuation history entry '{entry_id}' not found")

    def restore_into(self, entry_id: str, config: ValuationConfig) -> ValuationConfig:
        """Return a copy of config carrying the inputs saved in an entry.

        The feature switches (enabled, disclaimer_acknowledged) are kept from
        config; mode, manual value and metrics come from the entry.
        """
        entry = self.find(entry_id)
        return config.model_copy(update={
            "mode": entry.mode,
            "manual_value": entry.manual_value,
            "business_metrics": (
                entry.business_metrics.model_copy(deep=True)
                if entry.business_metrics is not None
                else None
            ),
            "last_updated": _utcnow(),
        })

    def clear(self) -> None:
        self.entries = []

    @property
    def latest(self) -> Optional[ValuationHistoryEntry]:
        return self.entries[0] if self.entries else None


# =============================================================================
# Equity Value Row
# =============================================================================

class EquityValueRow(DomainModel):
    """Dollar value of one contributor's stake. Computed, never stored.

    The vested_* fields are only populated when the vesting view is active.
    """

    contributor_id: ContributorId

    contributor_name: str

    slices: SliceCount

    percentage: PercentValue = Field(
        description="Share of total slices (0-100)"
    )

    total_value: NonNegativeCents

    vested_slices: Optional[SliceCount] = None

    vested_percentage: Optional[PercentValue] = None

    vested_value: Optional[NonNegativeCents] = None

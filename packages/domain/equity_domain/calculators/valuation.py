"""Valuation calculator.

Two steps:
1. compute_valuation: total company value in cents from a ValuationConfig.
   Manual mode returns the entered value; auto mode delegates to a pluggable
   ValuationStrategy (default: SDEMultipleStrategy).
2. allocate: split a total value across contributors pro rata to slices.

Allocation floors every row, so the sum of row values may fall short of the
total by at most (number of contributors - 1) cents. That shortfall is
expected and is never redistributed.
"""

import math
import warnings
from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import Field

from ..errors import ConfigurationError, DegenerateInputWarning
from ..log import get_logger
from ..schemas import (
    BusinessMetrics,
    DomainModel,
    EquityValueRow,
    ProjectionResult,
    ValuationBreakdown,
    ValuationConfig,
    ValuationResult,
)

logger = get_logger(__name__)


# =============================================================================
# Strategies
# =============================================================================

class ValuationStrategy(DomainModel, ABC):
    """Turns business metrics into a company valuation.

    Implementations must be deterministic, never return a negative value, and
    be non-decreasing in current_year_profit. Optional metrics (history,
    churn) must fall back to documented defaults instead of failing.
    """

    @abstractmethod
    def evaluate(self, metrics: BusinessMetrics) -> ValuationResult:
        pass


class SDEMultipleStrategy(ValuationStrategy):
    """Seller's-discretionary-earnings multiple with growth and retention adjustments.

    value = average_profit x base_multiple x growth_multiplier x retention_multiplier

    - average_profit: mean of the current year and all history years
    - growth_multiplier: 1 + growth_weight x annualised growth from the
      earliest to the latest year, clamped to [growth_floor, growth_cap].
      1.0 without history or when the earliest year's profit is zero.
    - retention_multiplier: 1 - churn_weight x churn/100, clamped to
      [retention_floor, 1.0]. 1.0 when churn is not provided.

    Negative results are floored at zero.

    Example:
        current $120k, history $100k (2024), $80k (2023), churn 10%
        average = $100k
        growth = (120 - 80) / 80 / 2 = 0.25 -> multiplier 1.125
        retention = 1 - 0.03 = 0.97
        value = $100k x 3.0 x 1.125 x 0.97 = $327,375
    """

    base_multiple: float = Field(default=3.0, gt=0)
    growth_weight: float = Field(default=0.5, ge=0)
    growth_floor: float = Field(default=0.5, gt=0)
    growth_cap: float = Field(default=2.0, gt=0)
    churn_weight: float = Field(default=0.3, ge=0)
    retention_floor: float = Field(default=0.5, gt=0, le=1)

    def growth_multiplier(self, metrics: BusinessMetrics) -> float:
        current_year = metrics.effective_current_year
        if current_year is None or not metrics.profit_history:
            return 1.0

        points = [(current_year, metrics.current_year_profit)]
        points += [(p.year, p.profit) for p in metrics.profit_history]
        points.sort()

        earliest_year, earliest_profit = points[0]
        latest_year, latest_profit = points[-1]
        years = latest_year - earliest_year

        if years == 0 or earliest_profit == 0:
            return 1.0

        growth_rate = (latest_profit - earliest_profit) / abs(earliest_profit) / years
        multiplier = 1 + growth_rate * self.growth_weight
        return max(self.growth_floor, min(self.growth_cap, multiplier))

    def retention_multiplier(self, metrics: BusinessMetrics) -> float:
        if metrics.churn_rate is None:
            return 1.0
        multiplier = 1 - (metrics.churn_rate / 100) * self.churn_weight
        return max(self.retention_floor, min(1.0, multiplier))

    def evaluate(self, metrics: BusinessMetrics) -> ValuationResult:
        profits = [metrics.current_year_profit] + [p.profit for p in metrics.profit_history]
        average_profit = sum(profits) / len(profits)

        growth = self.growth_multiplier(metrics)
        retention = self.retention_multiplier(metrics)

        adjusted = average_profit * self.base_multiple * growth * retention
        value = max(0, math.floor(adjusted + 0.5))

        return ValuationResult(
            value=value,
            mode="auto",
            confidence=confidence_level(metrics),
            breakdown=ValuationBreakdown(
                average_profit=math.floor(average_profit + 0.5),
                base_multiple=self.base_multiple,
                growth_multiplier=round(growth, 4),
                retention_multiplier=round(retention, 4),
            ),
        )


def confidence_level(metrics: BusinessMetrics) -> str:
    """Rate how complete the metrics are.

    high: 3+ years of profit data and a churn rate
    medium: 2+ years of data or a churn rate
    low: current year only
    """
    has_churn = metrics.churn_rate is not None
    if metrics.years_of_data >= 3 and has_churn:
        return "high"
    if metrics.years_of_data >= 2 or has_churn:
        return "medium"
    return "low"


# =============================================================================
# Valuation
# =============================================================================

def evaluate_valuation(
    config: ValuationConfig,
    strategy: Optional[ValuationStrategy] = None,
) -> ValuationResult:
    """Compute the company valuation with metadata.

    Args:
        config: Valuation configuration
        strategy: Auto valuation strategy (default: SDEMultipleStrategy())

    Returns:
        ValuationResult (confidence and breakdown are set for auto mode only)

    Raises:
        ConfigurationError: If the field required by config.mode is missing
            or the manual value is negative
    """
    if config.mode == "manual":
        if config.manual_value is None:
            raise ConfigurationError("Manual valuation mode requires manual_value")
        if config.manual_value < 0:
            raise ConfigurationError(
                f"manual_value cannot be negative, got {config.manual_value}"
            )
        return ValuationResult(value=config.manual_value, mode="manual")

    if config.mode == "auto":
        if config.business_metrics is None:
            raise ConfigurationError("Auto valuation mode requires business_metrics")
        strategy = strategy or SDEMultipleStrategy()
        result = strategy.evaluate(config.business_metrics)
        logger.debug(
            "valuation.auto",
            strategy=type(strategy).__name__,
            value=result.value,
            confidence=result.confidence,
        )
        return result

    raise ConfigurationError(f"Unknown valuation mode: {config.mode!r}")


def compute_valuation(
    config: ValuationConfig,
    strategy: Optional[ValuationStrategy] = None,
) -> int:
    """Total company value in cents. See evaluate_valuation."""
    return evaluate_valuation(config, strategy=strategy).value


# =============================================================================
# Allocation
# =============================================================================

def allocate(
    total_value_cents: int,
    projection: ProjectionResult,
    include_vested: bool = True,
) -> List[EquityValueRow]:
    """Distribute a company value across contributors pro rata to slices.

    row.total_value  = floor(V * slices / total_slices)
    row.vested_value = floor(V * vested_slices / total_slices)

    Args:
        total_value_cents: Company value V in cents
        projection: Projection supplying slices and vested slices
        include_vested: Populate the vested_* columns (vesting view active)

    Returns:
        One EquityValueRow per contributor, in projection order. Every value
        is 0 when the pie has no slices.

    Raises:
        ConfigurationError: If total_value_cents is negative
    """
    if total_value_cents < 0:
        raise ConfigurationError(
            f"Cannot allocate a negative valuation: {total_value_cents}"
        )

    total_slices = projection.totals.total_slices
    if projection.per_contributor and total_slices == 0:
        warnings.warn(
            "Allocating a valuation across a pie with zero slices",
            DegenerateInputWarning,
            stacklevel=2,
        )
        logger.warning(
            "allocation.zero_total_slices",
            contributors=len(projection.per_contributor),
        )

    def share(slices: int) -> int:
        if total_slices == 0:
            return 0
        return total_value_cents * slices // total_slices

    def percentage(slices: int) -> float:
        if total_slices == 0:
            return 0.0
        return slices / total_slices * 100

    rows: List[EquityValueRow] = []
    for item in projection.per_contributor:
        row = EquityValueRow(
            contributor_id=item.contributor_id,
            contributor_name=item.contributor_name,
            slices=item.slices,
            percentage=percentage(item.slices),
            total_value=share(item.slices),
        )
        if include_vested:
            row.vested_slices = item.vested_slices
            row.vested_percentage = percentage(item.vested_slices)
            row.vested_value = share(item.vested_slices)
        rows.append(row)

    return rows

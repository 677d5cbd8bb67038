"""Projected equity distribution models.

A ProjectionResult is the roster-wide view of vesting at a target date. The
same shape serves the "current" dashboard (target date = today) and what-if
projections (target date in the future).
"""

from typing import Dict, List, Optional
from datetime import date
from pydantic import Field

from .base import DomainModel, ContributorId, SliceCount, PercentValue
from .contributors import VestingState


# =============================================================================
# Per-Contributor Projection
# =============================================================================

class ContributorProjection(DomainModel):
    """Vesting split of one contributor at the projection date."""

    contributor_id: ContributorId

    contributor_name: str

    slices: SliceCount = Field(
        description="Total slices (vested + unvested)"
    )

    vested_slices: SliceCount

    unvested_slices: SliceCount

    percent_vested: PercentValue

    state: VestingState

    cliff_date: Optional[date] = None

    full_vest_date: Optional[date] = None


# =============================================================================
# Totals
# =============================================================================

class ProjectionTotals(DomainModel):
    """Roster-wide slice totals."""

    total_slices: SliceCount = 0
    total_vested: SliceCount = 0
    total_unvested: SliceCount = 0

    @property
    def overall_percent_vested(self) -> float:
        """Vested share of all slices (0-100).

        An empty pie reports 100: there is nothing left to vest.
        """
        if self.total_slices == 0:
            return 100.0
        return self.total_vested / self.total_slices * 100


# =============================================================================
# Projection Result
# =============================================================================

class ProjectionResult(DomainModel):
    """Projected equity distribution at target_date.

    Usage:
        result = project(date(2026, 1, 1), roster)
        result.totals.total_vested
        result.next_cliff_date
    """

    target_date: date

    per_contributor: List[ContributorProjection] = Field(
        default_factory=list,
        description="One entry per roster member, in roster order"
    )

    totals: ProjectionTotals = Field(
        default_factory=ProjectionTotals
    )

    next_cliff_date: Optional[date] = Field(
        default=None,
        description="Earliest cliff strictly after target_date (None if none pending)"
    )

    next_full_vest_date: Optional[date] = Field(
        default=None,
        description="Earliest full-vest date strictly after target_date (None if none pending)"
    )

    def for_contributor(self, contributor_id: str) -> ContributorProjection:
        """Look up one contributor's projection.

        Raises:
            KeyError: If the contributor is not in the projection
        """
        for item in self.per_contributor:
            if item.contributor_id == contributor_id:
                return item
        raise KeyError(f"Contributor '{contributor_id}' not in projection")

    def count_by_state(self) -> Dict[str, int]:
        """Count contributors pre-cliff, vesting and fully vested.

        Contributors without a vesting schedule count as fully vested.
        """
        counts = {"preCliff": 0, "vesting": 0, "fullyVested": 0}
        for item in self.per_contributor:
            if item.state == "none":
                counts["fullyVested"] += 1
            else:
                counts[item.state] += 1
        return counts

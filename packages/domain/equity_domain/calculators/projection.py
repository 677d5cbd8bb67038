"""Projection engine.

Runs the vesting calculator across the roster at one target date and
aggregates the result. Pure function of (target_date, roster).
"""

import warnings
from datetime import date
from typing import List, Optional, Sequence

from ..errors import ConfigurationError, DegenerateInputWarning
from ..log import get_logger
from ..schemas import (
    Contributor,
    ContributorProjection,
    ProjectionResult,
    ProjectionTotals,
)
from .vesting import compute_vesting_status

logger = get_logger(__name__)


def _earliest(current: Optional[date], candidate: date) -> date:
    return candidate if current is None or candidate < current else current


def project(target_date: date, roster: Sequence[Contributor]) -> ProjectionResult:
    """Project the equity distribution at target_date.

    Args:
        target_date: Date to project to (today for the current view)
        roster: Contributors to include

    Returns:
        ProjectionResult with per-contributor splits, totals and the next
        pending cliff / full-vest dates

    Raises:
        ConfigurationError: If contributor ids are not unique or a vesting
            config is malformed
    """
    if not roster:
        warnings.warn(
            "Projection requested for an empty roster",
            DegenerateInputWarning,
            stacklevel=2,
        )
        logger.warning("projection.empty_roster", target_date=target_date.isoformat())
        return ProjectionResult(target_date=target_date)

    seen = set()
    items: List[ContributorProjection] = []
    total_slices = 0
    total_vested = 0
    next_cliff: Optional[date] = None
    next_full_vest: Optional[date] = None

    for contributor in roster:
        if contributor.id in seen:
            raise ConfigurationError(f"Duplicate contributor id in roster: '{contributor.id}'")
        seen.add(contributor.id)

        status = compute_vesting_status(target_date, contributor)

        items.append(ContributorProjection(
            contributor_id=contributor.id,
            contributor_name=contributor.display_name,
            slices=contributor.slices,
            vested_slices=status.vested_slices,
            unvested_slices=status.unvested_slices,
            percent_vested=status.percent_vested,
            state=status.state,
            cliff_date=status.cliff_date,
            full_vest_date=status.full_vest_date,
        ))

        total_slices += contributor.slices
        total_vested += status.vested_slices

        if status.cliff_date is not None and status.cliff_date > target_date:
            next_cliff = _earliest(next_cliff, status.cliff_date)

        if (
            status.state != "fullyVested"
            and status.full_vest_date is not None
            and status.full_vest_date > target_date
        ):
            next_full_vest = _earliest(next_full_vest, status.full_vest_date)

    result = ProjectionResult(
        target_date=target_date,
        per_contributor=items,
        totals=ProjectionTotals(
            total_slices=total_slices,
            total_vested=total_vested,
            total_unvested=total_slices - total_vested,
        ),
        next_cliff_date=next_cliff,
        next_full_vest_date=next_full_vest,
    )

    logger.debug(
        "projection.computed",
        target_date=target_date.isoformat(),
        contributors=len(items),
        total_slices=total_slices,
        total_vested=total_vested,
    )
    return result

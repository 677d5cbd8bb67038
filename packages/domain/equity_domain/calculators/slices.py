"""Slicing Pie slice calculations.

Turns contributions into slices and builds the roster the vesting and
valuation calculators consume.
"""

from collections import defaultdict
from decimal import Decimal, ROUND_FLOOR
from typing import Dict, Iterable, List, Optional, Sequence

from ..schemas import Contribution, Contributor
from ..schemas.contributions import MULTIPLIERS


def multiplier_for(contribution_type: str) -> int:
    """Slicing Pie multiplier for a contribution type.

    Raises:
        KeyError: If the contribution type is unknown
    """
    return MULTIPLIERS[contribution_type]


def calculate_slices(
    contribution_type: str,
    value: Decimal,
    hourly_rate: Optional[Decimal] = None,
) -> int:
    """Slices earned by one contribution, floored to a whole slice.

    time: hours x hourly_rate x 2 (a missing rate counts as 0)
    other types: value x multiplier
    """
    multiplier = multiplier_for(contribution_type)
    amount = Decimal(value)
    if contribution_type == "time":
        amount *= Decimal(hourly_rate or 0)
    amount *= multiplier
    return int(amount.to_integral_value(rounding=ROUND_FLOOR))


def slices_by_contributor(contributions: Iterable[Contribution]) -> Dict[str, int]:
    """Sum contribution slices per contributor id."""
    totals: Dict[str, int] = defaultdict(int)
    for contribution in contributions:
        totals[contribution.contributor_id] += contribution.slices
    return dict(totals)


def build_roster(
    contributors: Sequence[Contributor],
    contributions: Iterable[Contribution],
) -> List[Contributor]:
    """Return copies of contributors with slices summed from contributions.

    Contributors without contributions get 0 slices. The input contributors
    are not modified.
    """
    totals = slices_by_contributor(contributions)
    return [
        contributor.model_copy(update={"slices": totals.get(contributor.id, 0)})
        for contributor in contributors
    ]

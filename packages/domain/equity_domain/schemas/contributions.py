"""Contributions and the Slicing Pie multipliers.

Each contribution converts a raw value into slices using a fixed multiplier
per contribution type:

    time          2x  (hours x hourly rate x 2)
    cash          4x
    non-cash      2x  fair market value
    idea          1x  negotiated value
    relationship  1x  negotiated value

A contributor's slices are the sum of the slices of their contributions.
"""

from typing import Dict, Literal, Optional
from datetime import date
from decimal import Decimal
from pydantic import Field, computed_field, model_validator

from .base import DomainModel, ContributorId, SliceCount


ContributionType = Literal["time", "cash", "non-cash", "idea", "relationship"]

MULTIPLIERS: Dict[str, int] = {
    "time": 2,
    "cash": 4,
    "non-cash": 2,
    "idea": 1,
    "relationship": 1,
}


class Contribution(DomainModel):
    """A single contribution made by a contributor.

    Examples:
        40 unpaid hours at $50/hour:
            type="time", value=40, hourly_rate=50 -> 4,000 slices

        $10,000 cash investment:
            type="cash", value=10_000 -> 40,000 slices
    """

    id: Optional[str] = Field(
        default=None,
        description="Contribution identifier (optional)"
    )

    contributor_id: ContributorId

    type: ContributionType

    value: Decimal = Field(
        ge=0,
        description="Raw value: hours for time contributions, dollars otherwise"
    )

    hourly_rate: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Contributor's hourly rate in dollars (time contributions only)"
    )

    contribution_date: date

    description: Optional[str] = None

    manual_slices: Optional[SliceCount] = Field(
        default=None,
        description="Negotiated slice count. None = derive from type/value"
    )

    @model_validator(mode='before')
    @classmethod
    def accept_slices_override(cls, data):
        """Accept slices=... as the manual override on input."""
        if isinstance(data, dict) and "slices" in data:
            data = dict(data)
            slices = data.pop("slices")
            data.setdefault("manual_slices", slices)
        return data

    @model_validator(mode='after')
    def validate_rate(self):
        """Time contributions are priced by the hour."""
        if self.type == "time" and self.hourly_rate is None:
            raise ValueError("time contributions require hourly_rate")
        return self

    @computed_field
    @property
    def slices(self) -> int:
        """Slices earned: manual_slices when set, otherwise derived from type/value."""
        if self.manual_slices is not None:
            return self.manual_slices

        from ..calculators.slices import calculate_slices

        return calculate_slices(self.type, self.value, self.hourly_rate)

    @property
    def multiplier(self) -> int:
        return MULTIPLIERS[self.type]

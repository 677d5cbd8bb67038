"""Export/import payload.

EquityData is the opaque blob the storage collaborator reads and writes. The
engine only defines its shape and the JSON round trip; where the blob lives
(browser storage, a file, a database column) is not the engine's concern.
"""

from typing import List, Optional
from datetime import datetime, timezone
from pydantic import Field, model_validator

from .base import DomainModel
from .contributors import Contributor
from .contributions import Contribution
from .valuation import ValuationConfig, ValuationHistory


class EquityData(DomainModel):
    """Full application state for backup and restore.

    Disabling a feature never strips data from this payload: vesting configs
    and valuation settings are carried through unchanged either way.
    """

    company_name: str = Field(
        default="My Startup",
        description="Company display name"
    )

    contributors: List[Contributor] = Field(
        default_factory=list
    )

    contributions: List[Contribution] = Field(
        default_factory=list
    )

    valuation_config: Optional[ValuationConfig] = None

    valuation_history: ValuationHistory = Field(
        default_factory=ValuationHistory
    )

    exported_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @model_validator(mode='after')
    def validate_references(self):
        """Contributor ids are unique and every contribution references one."""
        ids = [c.id for c in self.contributors]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate contributor ids in payload")

        known = set(ids)
        for contribution in self.contributions:
            if contribution.contributor_id not in known:
                raise ValueError(
                    f"Contribution references unknown contributor '{contribution.contributor_id}'"
                )
        return self

    def to_json(self, indent: Optional[int] = 2) -> str:
        return self.model_dump_json(indent=indent)

    @classmethod
    def from_json(cls, payload: str) -> "EquityData":
        return cls.model_validate_json(payload)

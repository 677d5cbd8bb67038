"""Contributor, vesting configuration and vesting status models.

A Contributor is read from the roster collaborator; the engine never mutates
it. VestingConfig is embedded in a Contributor and validated when a form
collaborator creates or edits it. VestingStatus is computed per query and never
persisted.
"""

from typing import Literal, Optional
from datetime import date
from pydantic import Field, model_validator

from ..errors import ConfigurationError
from .base import DomainModel, ContributorId, SliceCount, PercentValue, MonthCount


VestingState = Literal["none", "preCliff", "vesting", "fullyVested"]


# =============================================================================
# Vesting Configuration
# =============================================================================

class VestingConfig(DomainModel):
    """Straight-line vesting schedule with a cliff.

    Before the cliff nothing is vested. From the cliff onward the vested share
    grows linearly with whole elapsed months until vesting_months, at which
    point the contributor is fully vested.

    Examples:
        Standard founder schedule (4 years, 1 year cliff):
            start_date=2024-01-01, cliff_months=12, vesting_months=48

        No cliff, 2 years:
            start_date=2024-01-01, cliff_months=0, vesting_months=24
    """

    start_date: date = Field(
        description="Vesting clock start (may be in the future)"
    )

    cliff_months: int = Field(
        default=0,
        description="Months before any equity counts as vested (0-24 typical)"
    )

    vesting_months: int = Field(
        description="Total months until 100% vested (12-60 typical)"
    )

    @model_validator(mode='after')
    def validate_schedule(self):
        """Reject degenerate schedules at entry time."""
        self.check()
        return self

    def check(self) -> None:
        """Validate the schedule.

        Raises:
            ConfigurationError: If vesting_months <= 0, cliff_months < 0 or
                cliff_months > vesting_months
        """
        if self.vesting_months <= 0:
            raise ConfigurationError(
                f"vesting_months must be positive, got {self.vesting_months}"
            )
        if self.cliff_months < 0:
            raise ConfigurationError(
                f"cliff_months cannot be negative, got {self.cliff_months}"
            )
        if self.cliff_months > self.vesting_months:
            raise ConfigurationError(
                f"cliff_months ({self.cliff_months}) cannot exceed "
                f"vesting_months ({self.vesting_months})"
            )


# =============================================================================
# Contributor
# =============================================================================

class Contributor(DomainModel):
    """A person holding slices in the pie.

    slices is vesting-agnostic: it is the stake the contributor would own if
    fully vested. A contributor without a vesting config is always fully vested
    (backward compatible with rosters created before vesting existed).
    """

    id: ContributorId = Field(
        description="Unique contributor identifier"
    )

    name: Optional[str] = Field(
        default=None,
        description="Display name. None = use the identifier"
    )

    slices: SliceCount = Field(
        default=0,
        description="Total slices accumulated"
    )

    vesting: Optional[VestingConfig] = Field(
        default=None,
        description="Vesting schedule. None = always fully vested"
    )

    @property
    def display_name(self) -> str:
        return self.name or self.id


# =============================================================================
# Vesting Status
# =============================================================================

class VestingStatus(DomainModel):
    """Computed vesting state of one contributor at one date.

    Invariant: vested_slices + unvested_slices == contributor.slices.
    """

    state: VestingState

    percent_vested: PercentValue

    vested_slices: SliceCount

    unvested_slices: SliceCount

    cliff_date: Optional[date] = Field(
        default=None,
        description="start_date + cliff_months. None when no vesting config"
    )

    full_vest_date: Optional[date] = Field(
        default=None,
        description="start_date + vesting_months. None when no vesting config"
    )

    months_elapsed: MonthCount = Field(
        default=0,
        description="Whole months since start_date (0 before the start)"
    )

    months_until_cliff: MonthCount = Field(
        default=0,
        description="Whole months remaining until the cliff"
    )

    months_until_full_vest: MonthCount = Field(
        default=0,
        description="Whole months remaining until fully vested"
    )

    @property
    def total_slices(self) -> int:
        return self.vested_slices + self.unvested_slices

"""Vesting calculator.

Straight-line vesting after a cliff, counted in whole calendar months.

Month arithmetic uses calendar months (dateutil.relativedelta), not 30-day
blocks: Jan 31 + 1 month is the last day of February. months_between is the
inverse of add_months, so a contributor whose cliff date is today has reached
the cliff today.
"""

from datetime import date

from dateutil.relativedelta import relativedelta

from ..log import get_logger
from ..schemas import Contributor, VestingConfig, VestingStatus

logger = get_logger(__name__)


def add_months(start: date, months: int) -> date:
    """Add calendar months, clamping to the last day of the target month.

    Args:
        start: Date to count from
        months: Calendar months to add (may be negative)

    Returns:
        The shifted date, e.g. 2024-01-31 + 1 -> 2024-02-29
    """
    return start + relativedelta(months=months)


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end.

    Returns the largest n such that add_months(start, n) <= end. Negative when
    end is before start.

    Examples:
        months_between(2024-01-01, 2024-02-01) -> 1
        months_between(2024-01-15, 2024-02-14) -> 0
        months_between(2024-01-31, 2024-02-29) -> 1
    """
    if end < start:
        return -months_between(end, start)

    months = (end.year - start.year) * 12 + (end.month - start.month)
    if add_months(start, months) > end:
        months -= 1
    return months


def cliff_date(config: VestingConfig) -> date:
    """Date the cliff is reached.

    Args:
        config: Vesting schedule

    Returns:
        start_date + cliff_months calendar months (start_date when there is
        no cliff)
    """
    return add_months(config.start_date, config.cliff_months)


def full_vest_date(config: VestingConfig) -> date:
    """Date the contributor becomes fully vested.

    Args:
        config: Vesting schedule

    Returns:
        start_date + vesting_months calendar months
    """
    return add_months(config.start_date, config.vesting_months)


def compute_vesting_status(as_of_date: date, contributor: Contributor) -> VestingStatus:
    """Compute a contributor's vesting status at a date.

    Args:
        as_of_date: Any calendar date (past, present or future)
        contributor: Contributor to evaluate

    Returns:
        VestingStatus with state, percent vested and the vested/unvested split

    Raises:
        ConfigurationError: If the contributor's vesting config is malformed

    Example:
        start 2024-01-01, 12 month cliff, 48 months, 1000 slices
        at 2024-06-01 -> preCliff, 0%, 0 vested
        at 2026-01-01 -> vesting, 50%, 500 vested
        at 2028-01-01 -> fullyVested, 100%, 1000 vested
    """
    slices = contributor.slices
    config = contributor.vesting

    # No vesting config = 100% vested
    if config is None:
        return VestingStatus(
            state="none",
            percent_vested=100.0,
            vested_slices=slices,
            unvested_slices=0,
        )

    config.check()

    # Negative before the start date; countdowns include the wait to start
    raw_elapsed = months_between(config.start_date, as_of_date)
    elapsed = max(0, raw_elapsed)
    cliff = config.cliff_months
    total = config.vesting_months

    # Before the start date nothing has begun, even with a zero-month cliff
    if elapsed < cliff or as_of_date < config.start_date:
        state = "preCliff"
        percent = 0.0
        vested = 0
    elif elapsed >= total:
        state = "fullyVested"
        percent = 100.0
        vested = slices
    else:
        state = "vesting"
        percent = 100.0 * elapsed / total
        # Integer floor keeps vested + unvested == slices exactly
        vested = slices * elapsed // total

    logger.debug(
        "vesting.status",
        contributor_id=contributor.id,
        as_of=as_of_date.isoformat(),
        state=state,
        months_elapsed=elapsed,
    )

    return VestingStatus(
        state=state,
        percent_vested=percent,
        vested_slices=vested,
        unvested_slices=slices - vested,
        cliff_date=cliff_date(config),
        full_vest_date=full_vest_date(config),
        months_elapsed=elapsed,
        months_until_cliff=max(0, cliff - raw_elapsed),
        months_until_full_vest=max(0, total - raw_elapsed),
    )

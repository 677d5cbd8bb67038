"""Composition root for the equity views.

Feature flags are resolved by the host application and passed in as plain
values. This module is the only place that looks at them: it decides which
blocks run and whether vested columns are produced. The calculators always
compute correctly regardless of flags.
"""

from datetime import date
from typing import List, Optional, Sequence

from .blocks import Block, BlockContext, BlockExecutor, EquityValuesBlock, ProjectionBlock
from .calculators.valuation import ValuationStrategy
from .log import get_logger
from .schemas import Contributor, ValuationConfig
from .settings import FeatureFlags

logger = get_logger(__name__)


def run_equity_views(
    roster: Sequence[Contributor],
    as_of_date: date,
    valuation_config: Optional[ValuationConfig] = None,
    *,
    flags: FeatureFlags,
    strategy: Optional[ValuationStrategy] = None,
) -> BlockContext:
    """Compute every view the active features need.

    Args:
        roster: Contributors with their slices
        as_of_date: Date for the vesting view (today, or a projection date)
        valuation_config: Valuation settings; equity values are skipped when None
        flags: Resolved feature flags
        strategy: Auto valuation strategy (default: SDE multiple)

    Returns:
        BlockContext holding projection_result, vesting_by_contributor and
        vesting_summary, plus company_valuation and equity_values when
        valuation is active.

    Raises:
        ConfigurationError: If a vesting or valuation config is malformed
    """
    blocks: List[Block] = [ProjectionBlock()]

    context = BlockContext()
    context.set("roster", list(roster))
    context.set("as_of_date", as_of_date)

    if flags.valuation_active and valuation_config is not None:
        blocks.append(EquityValuesBlock(
            include_vested=flags.vesting_active,
            strategy=strategy,
        ))
        context.set("valuation_config", valuation_config)

    logger.debug(
        "equity_views.run",
        as_of_date=as_of_date.isoformat(),
        vesting_active=flags.vesting_active,
        valuation_active=flags.valuation_active,
        blocks=[type(b).__name__ for b in blocks],
    )

    return BlockExecutor(blocks).execute(context)

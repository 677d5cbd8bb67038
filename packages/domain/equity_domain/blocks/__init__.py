"""Computation blocks for equity views.

This package turns domain schemas into DataFrames for rendering collaborators
(dashboard, projections page, equity values table).

Architecture:
    Schemas (data models) → Calculators (pure functions) → Blocks → DataFrames

Available blocks:
- ProjectionBlock: roster + date → projection and vesting DataFrames
- EquityValuesBlock: projection + valuation config → equity values DataFrame

Usage:
    from equity_domain.blocks import BlockContext, BlockExecutor, ProjectionBlock

    context = BlockContext()
    context.set("roster", roster)
    context.set("as_of_date", date.today())
    BlockExecutor([ProjectionBlock()]).execute(context)

    vesting_df = context.get("vesting_by_contributor")
"""

from .base import Block, BlockExecutor, BlockContext, CircularDependencyError
from .projection import ProjectionBlock
from .equity_values import EquityValuesBlock

__all__ = [
    "Block",
    "BlockExecutor",
    "BlockContext",
    "CircularDependencyError",
    "ProjectionBlock",
    "EquityValuesBlock",
]

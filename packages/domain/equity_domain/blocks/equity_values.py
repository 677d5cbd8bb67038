"""Equity values computation block.

Prices each contributor's slices at the configured company valuation.

Output:
- company_valuation: total company value in cents
- equity_values: DataFrame with one row per contributor
"""

from typing import List, Optional
import pandas as pd

from .base import Block, BlockContext
from ..calculators import allocate, compute_valuation
from ..calculators.valuation import ValuationStrategy
from ..schemas import ProjectionResult, ValuationConfig


BASE_COLUMNS = [
    "contributor_id",
    "contributor_name",
    "slices",
    "percentage",
    "total_value",
]

VESTED_COLUMNS = [
    "vested_slices",
    "vested_percentage",
    "vested_value",
]


class EquityValuesBlock(Block):
    """Allocates the company valuation across the projected roster.

    Inputs (from context):
        - projection_result: ProjectionResult (from ProjectionBlock)
        - valuation_config: ValuationConfig

    Outputs (to context):
        - company_valuation: int, total value in cents
        - equity_values: DataFrame with columns:
            * contributor_id, contributor_name
            * slices: Total slices
            * percentage: Share of total slices (0-100)
            * total_value: Value of all slices in cents
            * vested_slices, vested_percentage, vested_value: only when
              include_vested=True

    Raises:
        ConfigurationError: If the valuation config cannot produce a value
    """

    def __init__(
        self,
        include_vested: bool = True,
        strategy: Optional[ValuationStrategy] = None,
        projection_key: str = "projection_result",
        config_key: str = "valuation_config",
    ):
        """Initialize EquityValuesBlock.

        Args:
            include_vested: Add the vested columns (vesting view active)
            strategy: Auto valuation strategy (default: SDE multiple)
            projection_key: Context key for the ProjectionResult
            config_key: Context key for the ValuationConfig
        """
        self.include_vested = include_vested
        self.strategy = strategy
        self.projection_key = projection_key
        self.config_key = config_key

    def inputs(self) -> List[str]:
        return [self.projection_key, self.config_key]

    def outputs(self) -> List[str]:
        return ["company_valuation", "equity_values"]

    def execute(self, context: BlockContext) -> None:
        projection: ProjectionResult = context.get(self.projection_key)
        config: ValuationConfig = context.get(self.config_key)

        value = compute_valuation(config, strategy=self.strategy)
        context.set("company_valuation", value)

        rows = allocate(value, projection, include_vested=self.include_vested)
        columns = BASE_COLUMNS + (VESTED_COLUMNS if self.include_vested else [])

        if not rows:
            context.set("equity_values", pd.DataFrame(columns=columns))
            return

        df = pd.DataFrame([row.model_dump() for row in rows])[columns]
        df = df.sort_values("total_value", ascending=False, kind="stable").reset_index(drop=True)
        context.set("equity_values", df)

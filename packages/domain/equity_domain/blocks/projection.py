"""Projection computation block.

Projects the roster to a date and converts the result into DataFrames for the
dashboard, the projections page and charts.

Output DataFrames:
- vesting_by_contributor: per-contributor vested/unvested split
- vesting_summary: single row of roster-wide totals and upcoming dates
"""

from typing import List
import pandas as pd

from .base import Block, BlockContext
from ..calculators import project
from ..schemas import ProjectionResult


VESTING_COLUMNS = [
    "contributor_id",
    "contributor_name",
    "state",
    "slices",
    "vested_slices",
    "unvested_slices",
    "percent_vested",
    "cliff_date",
    "full_vest_date",
]


class ProjectionBlock(Block):
    """Runs the projection engine for a roster at a date.

    Inputs (from context):
        - roster: List[Contributor]
        - as_of_date: date to project to

    Outputs (to context):
        - projection_result: ProjectionResult
        - vesting_by_contributor: DataFrame with VESTING_COLUMNS, sorted by
          slices descending
        - vesting_summary: DataFrame with single row:
            * as_of_date
            * total_slices, total_vested, total_unvested
            * overall_percent_vested
            * contributors_pre_cliff, contributors_vesting,
              contributors_fully_vested
            * next_cliff_date, next_full_vest_date

    Example:
        context = BlockContext()
        context.set("roster", roster)
        context.set("as_of_date", date(2026, 1, 1))

        ProjectionBlock().execute(context)
        summary_df = context.get("vesting_summary")
    """

    def __init__(self, roster_key: str = "roster", date_key: str = "as_of_date"):
        self.roster_key = roster_key
        self.date_key = date_key

    def inputs(self) -> List[str]:
        return [self.roster_key, self.date_key]

    def outputs(self) -> List[str]:
        return [
            "projection_result",
            "vesting_by_contributor",
            "vesting_summary",
        ]

    def execute(self, context: BlockContext) -> None:
        result = project(context.get(self.date_key), context.get(self.roster_key))

        context.set("projection_result", result)
        context.set("vesting_by_contributor", self._by_contributor(result))
        context.set("vesting_summary", self._summary(result))

    def _by_contributor(self, result: ProjectionResult) -> pd.DataFrame:
        if not result.per_contributor:
            return pd.DataFrame(columns=VESTING_COLUMNS)

        df = pd.DataFrame([item.model_dump() for item in result.per_contributor])
        df = df[VESTING_COLUMNS]

        # Largest stakes first; stable so ties keep roster order
        return df.sort_values("slices", ascending=False, kind="stable").reset_index(drop=True)

    def _summary(self, result: ProjectionResult) -> pd.DataFrame:
        counts = result.count_by_state()
        totals = result.totals

        return pd.DataFrame([{
            "as_of_date": result.target_date,
            "total_slices": totals.total_slices,
            "total_vested": totals.total_vested,
            "total_unvested": totals.total_unvested,
            "overall_percent_vested": totals.overall_percent_vested,
            "contributors_pre_cliff": counts["preCliff"],
            "contributors_vesting": counts["vesting"],
            "contributors_fully_vested": counts["fullyVested"],
            "next_cliff_date": result.next_cliff_date,
            "next_full_vest_date": result.next_full_vest_date,
        }])

"""Tests for the valuation calculator.

Tests cover:
- Manual and auto valuation, including ConfigurationError cases
- The SDE multiple strategy (growth, retention, confidence, defaults)
- Determinism and monotonicity in current-year profit
- Pluggable strategies
- Allocation rounding bounds and zero-slice guard
- Valuation history FIFO, lookup and restore
"""

import pytest
from datetime import date, datetime, timezone

from pydantic import ValidationError

from equity_domain import ConfigurationError, DegenerateInputWarning
from equity_domain.calculators import (
    SDEMultipleStrategy,
    ValuationStrategy,
    allocate,
    compute_valuation,
    evaluate_valuation,
    project,
)
from equity_domain.schemas import (
    BusinessMetrics,
    Contributor,
    ProfitYear,
    ValuationConfig,
    ValuationHistory,
    ValuationResult,
    VestingConfig,
)


def metrics(current=12_000_000, history=(), churn=None, current_year=None):
    return BusinessMetrics(
        current_year_profit=current,
        profit_history=[ProfitYear(year=y, profit=p) for y, p in history],
        churn_rate=churn,
        current_year=current_year,
    )


def auto_config(**kwargs):
    return ValuationConfig(mode="auto", business_metrics=metrics(**kwargs))


# =============================================================================
# Manual Mode
# =============================================================================

class TestManualValuation:

    def test_returns_manual_value_verbatim(self):
        config = ValuationConfig(mode="manual", manual_value=50_000_000)
        assert compute_valuation(config) == 50_000_000

    def test_zero_is_allowed(self):
        assert compute_valuation(ValuationConfig(mode="manual", manual_value=0)) == 0

    def test_missing_manual_value(self):
        with pytest.raises(ConfigurationError, match="manual_value"):
            compute_valuation(ValuationConfig(mode="manual"))

    def test_negative_manual_value_rejected_at_entry(self):
        with pytest.raises(ValidationError):
            ValuationConfig(mode="manual", manual_value=-1)

    def test_negative_manual_value_rejected_at_use(self):
        config = ValuationConfig.model_construct(
            mode="manual", manual_value=-100, business_metrics=None
        )
        with pytest.raises(ConfigurationError, match="negative"):
            compute_valuation(config)

    def test_manual_result_has_no_breakdown(self):
        result = evaluate_valuation(ValuationConfig(mode="manual", manual_value=10))
        assert result.mode == "manual"
        assert result.confidence is None
        assert result.breakdown is None

    def test_metrics_ignored_in_manual_mode(self):
        config = ValuationConfig(
            mode="manual", manual_value=1_000, business_metrics=metrics(current=10**9)
        )
        assert compute_valuation(config) == 1_000


# =============================================================================
# Auto Mode
# =============================================================================

class TestAutoValuation:

    def test_missing_metrics(self):
        with pytest.raises(ConfigurationError, match="business_metrics"):
            compute_valuation(ValuationConfig(mode="auto", manual_value=5))

    def test_current_year_only(self):
        """$120k profit x 3.0, no adjustments."""
        result = evaluate_valuation(auto_config(current=12_000_000))
        assert result.value == 36_000_000
        assert result.confidence == "low"
        assert result.breakdown.growth_multiplier == 1.0
        assert result.breakdown.retention_multiplier == 1.0

    def test_full_formula(self):
        """average $100k, growth 25%/yr -> 1.125, churn 10% -> 0.97."""
        config = auto_config(
            current=12_000_000,
            history=[(2024, 10_000_000), (2023, 8_000_000)],
            churn=10.0,
        )
        result = evaluate_valuation(config)
        assert result.breakdown.average_profit == 10_000_000
        assert result.breakdown.growth_multiplier == pytest.approx(1.125)
        assert result.breakdown.retention_multiplier == pytest.approx(0.97)
        assert result.value == 32_737_500
        assert result.confidence == "high"

    def test_negative_profit_floors_at_zero(self):
        assert compute_valuation(auto_config(current=-5_000_000)) == 0

    def test_growth_multiplier_clamped(self):
        strategy = SDEMultipleStrategy()
        boom = metrics(current=100_000_000, history=[(2024, 1_000_000)])
        bust = metrics(current=-100_000_000, history=[(2024, 1_000_000)])
        assert strategy.growth_multiplier(boom) == 2.0
        assert strategy.growth_multiplier(bust) == 0.5

    def test_growth_neutral_when_earliest_profit_zero(self):
        m = metrics(current=5_000_000, history=[(2024, 0)])
        assert SDEMultipleStrategy().growth_multiplier(m) == 1.0

    def test_retention_multiplier_clamped(self):
        strategy = SDEMultipleStrategy(churn_weight=1.0)
        assert strategy.retention_multiplier(metrics(churn=100.0)) == 0.5
        assert strategy.retention_multiplier(metrics(churn=0.0)) == 1.0

    def test_explicit_current_year_spreads_growth(self):
        """A gap year halves the annualised growth rate."""
        strategy = SDEMultipleStrategy()
        adjacent = metrics(current=2_000_000, history=[(2024, 1_000_000)])
        gapped = metrics(current=2_000_000, history=[(2024, 1_000_000)], current_year=2026)
        assert strategy.growth_multiplier(adjacent) == pytest.approx(1.5)
        assert strategy.growth_multiplier(gapped) == pytest.approx(1.25)

    def test_confidence_levels(self):
        assert evaluate_valuation(auto_config()).confidence == "low"
        assert evaluate_valuation(auto_config(churn=5.0)).confidence == "medium"
        assert evaluate_valuation(auto_config(history=[(2024, 1)])).confidence == "medium"
        assert evaluate_valuation(
            auto_config(history=[(2024, 1), (2023, 1)], churn=5.0)
        ).confidence == "high"

    def test_deterministic(self):
        config = auto_config(history=[(2024, 9_000_000), (2022, 4_000_000)], churn=3.5)
        assert compute_valuation(config) == compute_valuation(config)

    def test_monotonic_in_current_year_profit(self):
        history = [(2024, 9_000_000), (2023, 7_500_000), (2022, -2_000_000)]
        previous = -1
        for current in range(-20_000_000, 60_000_001, 2_500_000):
            value = compute_valuation(auto_config(current=current, history=history, churn=12.0))
            assert value >= 0
            assert value >= previous
            previous = value

    def test_custom_strategy(self):
        class FlatStrategy(ValuationStrategy):
            amount: int = 42

            def evaluate(self, metrics):
                return ValuationResult(value=self.amount, mode="auto", confidence="low")

        assert compute_valuation(auto_config(), strategy=FlatStrategy()) == 42

    def test_strategy_parameters(self):
        config = auto_config(current=1_000_000)
        assert compute_valuation(config, strategy=SDEMultipleStrategy(base_multiple=5.0)) == 5_000_000


class TestBusinessMetricsValidation:

    def test_history_must_descend(self):
        with pytest.raises(ValidationError, match="descending"):
            metrics(history=[(2022, 1), (2023, 1)])

    def test_history_years_unique(self):
        with pytest.raises(ValidationError, match="descending"):
            metrics(history=[(2023, 1), (2023, 2)])

    def test_history_limited_to_five_years(self):
        with pytest.raises(ValidationError, match="at most 5"):
            metrics(history=[(2024 - i, 1) for i in range(6)])

    def test_history_before_current_year(self):
        with pytest.raises(ValidationError, match="before current_year"):
            metrics(history=[(2025, 1)], current_year=2025)

    def test_rejected_edit_leaves_metrics_unchanged(self):
        m = metrics(history=[(2024, 1_000_000)])
        with pytest.raises(ValidationError, match="before current_year"):
            m.current_year = 2024
        assert m.current_year is None
        assert m.effective_current_year == 2025

    def test_rejected_history_edit_leaves_metrics_unchanged(self):
        m = metrics(history=[(2024, 1), (2023, 2)])
        with pytest.raises(ValidationError, match="descending"):
            m.profit_history = [ProfitYear(year=2022, profit=1), ProfitYear(year=2023, profit=1)]
        assert [p.year for p in m.profit_history] == [2024, 2023]

    def test_churn_range(self):
        with pytest.raises(ValidationError):
            metrics(churn=101.0)
        with pytest.raises(ValidationError):
            metrics(churn=-1.0)

    def test_effective_current_year(self):
        assert metrics().effective_current_year is None
        assert metrics(history=[(2024, 1)]).effective_current_year == 2025
        assert metrics(history=[(2024, 1)], current_year=2026).effective_current_year == 2026


# =============================================================================
# Allocation
# =============================================================================

class TestAllocation:

    def test_two_contributor_split(self):
        roster = [
            Contributor(id="alice", slices=600),
            Contributor(id="bob", slices=400),
        ]
        value = compute_valuation(ValuationConfig(mode="manual", manual_value=50_000_000))
        rows = allocate(value, project(date(2026, 1, 1), roster))

        assert [r.total_value for r in rows] == [30_000_000, 20_000_000]
        assert sum(r.total_value for r in rows) == 50_000_000
        assert rows[0].percentage == pytest.approx(60.0)

    def test_vested_columns(self):
        roster = [
            Contributor(
                id="alice",
                slices=1000,
                vesting=VestingConfig(start_date=date(2024, 1, 1), cliff_months=12, vesting_months=48),
            ),
            Contributor(id="bob", slices=1000),
        ]
        rows = allocate(1_000_000, project(date(2026, 1, 1), roster))

        assert rows[0].vested_slices == 500
        assert rows[0].vested_percentage == pytest.approx(25.0)
        assert rows[0].vested_value == 250_000
        assert rows[0].total_value == 500_000
        assert rows[1].vested_value == 500_000

    def test_without_vested_columns(self):
        rows = allocate(100, project(date(2026, 1, 1), [Contributor(id="a", slices=1)]), include_vested=False)
        assert rows[0].vested_slices is None
        assert rows[0].vested_value is None
        assert rows[0].total_value == 100

    def test_floor_rounding_bound(self):
        roster = [Contributor(id=f"c{i}", slices=s) for i, s in enumerate([1, 1, 1, 7, 13])]
        projection = project(date(2026, 1, 1), roster)
        for total in (0, 1, 2, 99, 100, 12_345, 1_000_003, 987_654_321):
            rows = allocate(total, projection)
            allocated = sum(r.total_value for r in rows)
            assert allocated <= total
            assert total - allocated < len(roster)

    def test_three_way_split_loses_at_most_two_cents(self):
        roster = [Contributor(id=x, slices=1) for x in "abc"]
        rows = allocate(100, project(date(2026, 1, 1), roster))
        assert [r.total_value for r in rows] == [33, 33, 33]

    def test_zero_total_slices(self):
        roster = [Contributor(id="a", slices=0), Contributor(id="b", slices=0)]
        with pytest.warns(DegenerateInputWarning):
            rows = allocate(1_000_000, project(date(2026, 1, 1), roster))
        assert all(r.total_value == 0 for r in rows)
        assert all(r.vested_value == 0 for r in rows)
        assert all(r.percentage == 0 for r in rows)

    def test_empty_projection(self):
        with pytest.warns(DegenerateInputWarning):
            projection = project(date(2026, 1, 1), [])
        assert allocate(50_000_000, projection) == []

    def test_negative_total_rejected(self):
        projection = project(date(2026, 1, 1), [Contributor(id="a", slices=1)])
        with pytest.raises(ConfigurationError):
            allocate(-1, projection)


# =============================================================================
# Valuation History
# =============================================================================

class TestValuationHistory:

    def test_record_prepends_entry(self):
        history = ValuationHistory()
        first = history.record(ValuationConfig(mode="manual", manual_value=100))
        second = history.record(ValuationConfig(mode="manual", manual_value=200))

        assert history.entries == [second, first]
        assert history.latest.value == 200
        assert first.mode == "manual"
        assert first.manual_value == 100

    def test_fifo_eviction_keeps_most_recent_twenty(self):
        history = ValuationHistory()
        for value in range(25):
            history.record(ValuationConfig(mode="manual", manual_value=value))

        assert len(history.entries) == 20
        assert history.entries[0].value == 24
        assert history.entries[-1].value == 5

    def test_entries_are_immutable(self):
        history = ValuationHistory()
        entry = history.record(ValuationConfig(mode="manual", manual_value=100))
        with pytest.raises(ValidationError):
            entry.value = 5

    def test_snapshot_is_independent_of_config(self):
        config = auto_config(current=1_000_000)
        history = ValuationHistory()
        entry = history.record(config)
        config.business_metrics.current_year_profit = 9_000_000
        assert entry.business_metrics.current_year_profit == 1_000_000
        assert entry.value == 3_000_000

    def test_record_uses_timestamp(self):
        stamp = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        entry = ValuationHistory().record(ValuationConfig(mode="manual", manual_value=1), timestamp=stamp)
        assert entry.timestamp == stamp

    def test_record_incomplete_config_fails(self):
        history = ValuationHistory()
        with pytest.raises(ConfigurationError):
            history.record(ValuationConfig(mode="manual"))
        assert history.entries == []

    def test_restore_into(self):
        history = ValuationHistory()
        entry = history.record(auto_config(current=2_000_000, churn=4.0))

        current = ValuationConfig(
            enabled=True, disclaimer_acknowledged=True, mode="manual", manual_value=7
        )
        restored = history.restore_into(entry.id, current)

        assert restored.mode == "auto"
        assert restored.manual_value is None
        assert restored.business_metrics.churn_rate == 4.0
        assert restored.enabled is True
        assert restored.disclaimer_acknowledged is True
        assert current.mode == "manual"

    def test_find_unknown_entry(self):
        with pytest.raises(KeyError):
            ValuationHistory().find("missing")

    def test_clear(self):
        history = ValuationHistory()
        history.record(ValuationConfig(mode="manual", manual_value=1))
        history.clear()
        assert history.entries == []
        assert history.latest is None

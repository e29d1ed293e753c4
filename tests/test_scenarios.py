"""Tests for the sensitivity analysis."""

import pytest

from firb_engine.calculations.cashflow import project_investment
from firb_engine.calculations.trace import TraceContext
from firb_engine.scenarios import (
    INTEREST_RATE_OFFSETS,
    VACANCY_SCENARIOS,
    run_sensitivity,
)


@pytest.fixture
def sensitivity(foreign_purchase, investment_inputs, foreign_costs, benchmarks):
    return run_sensitivity(foreign_purchase, investment_inputs, foreign_costs, benchmarks)


@pytest.fixture
def base_run(foreign_purchase, investment_inputs, foreign_costs, benchmarks):
    return project_investment(foreign_purchase, investment_inputs, foreign_costs, benchmarks)


class TestVacancySensitivity:
    """Tests for the vacancy table."""

    def test_rates(self, sensitivity):
        assert [row.rate for row in sensitivity.vacancy] == list(VACANCY_SCENARIOS)

    def test_base_row_matches_projection(self, sensitivity, base_run):
        """The 5% row is the base case (fixture vacancy is 5%)."""
        base_row = next(row for row in sensitivity.vacancy if row.rate == 5.0)
        first = base_run.projections[0]

        assert base_row.after_tax_cash_flow == pytest.approx(first.after_tax_cash_flow)
        assert base_row.annual_rent == pytest.approx(first.rental_income)
        assert base_row.impact == pytest.approx(0.0)

    def test_cash_flow_falls_with_vacancy(self, sensitivity):
        flows = [row.after_tax_cash_flow for row in sensitivity.vacancy]

        assert flows == sorted(flows, reverse=True)


class TestInterestRateSensitivity:
    """Tests for the interest rate table."""

    def test_rates_offset_from_base(self, sensitivity, investment_inputs):
        expected = [investment_inputs.interest_rate + offset for offset in INTEREST_RATE_OFFSETS]

        assert [row.rate for row in sensitivity.interest_rate] == pytest.approx(expected)

    def test_base_row_matches_projection(self, sensitivity, base_run):
        base_row = sensitivity.interest_rate[INTEREST_RATE_OFFSETS.index(0.0)]
        first = base_run.projections[0]

        assert base_row.annual_cost == pytest.approx(first.loan_repayment)
        assert base_row.monthly_repayment == pytest.approx(first.loan_repayment / 12)
        assert base_row.impact == pytest.approx(0.0)

    def test_repayments_rise_with_rate(self, sensitivity):
        costs = [row.annual_cost for row in sensitivity.interest_rate]

        assert costs == sorted(costs)

    def test_rate_never_negative(self, foreign_purchase, investment_inputs, foreign_costs, benchmarks):
        low = investment_inputs.with_changes(interest_rate=1.0)
        result = run_sensitivity(foreign_purchase, low, foreign_costs, benchmarks)

        assert min(row.rate for row in result.interest_rate) == 0.0

    def test_rate_capped_near_upper_bound(self, foreign_purchase, investment_inputs, foreign_costs, benchmarks):
        """A base rate near 100% still produces a full table within the valid range."""
        high = investment_inputs.with_changes(interest_rate=99.5)
        result = run_sensitivity(foreign_purchase, high, foreign_costs, benchmarks)

        assert [row.rate for row in result.interest_rate] == pytest.approx([97.5, 98.5, 99.5, 100.0, 100.0])


class TestGrowthSensitivity:
    """Tests for the capital growth table."""

    def test_labels_and_rates(self, sensitivity):
        assert [row.label for row in sensitivity.growth] == ["Pessimistic", "Base", "Optimistic"]
        assert [row.rate for row in sensitivity.growth] == pytest.approx([4.0, 6.0, 8.0])

    def test_base_row_matches_projection(self, sensitivity, base_run):
        final = base_run.projections[-1]
        base_row = sensitivity.growth[1]

        assert base_row.value_at_end == pytest.approx(final.property_value)
        assert base_row.equity_at_end == pytest.approx(final.equity)
        assert base_row.total_return == pytest.approx(final.cumulative_return)

    def test_returns_rise_with_growth(self, sensitivity):
        returns = [row.total_return for row in sensitivity.growth]

        assert returns == sorted(returns)

    def test_pessimistic_floored_at_zero(self, foreign_purchase, investment_inputs, foreign_costs, benchmarks):
        flat = investment_inputs.with_changes(capital_growth_rate=1.0)
        result = run_sensitivity(foreign_purchase, flat, foreign_costs, benchmarks)

        assert result.growth[0].rate == 0.0

    def test_optimistic_capped_and_reported(self, foreign_purchase, investment_inputs, foreign_costs, benchmarks):
        """The optimistic row reports the capped rate its values were computed at."""
        steep = investment_inputs.with_changes(capital_growth_rate=99.0)
        result = run_sensitivity(foreign_purchase, steep, foreign_costs, benchmarks)
        optimistic = result.growth[-1]
        capped = project_investment(
            foreign_purchase, steep.with_changes(capital_growth_rate=100.0), foreign_costs, benchmarks,
        )

        assert optimistic.rate == 100.0
        assert optimistic.value_at_end == pytest.approx(capped.projections[-1].property_value)


class TestSensitivityBehaviour:
    """Cross-cutting properties."""

    def test_deterministic(self, sensitivity, foreign_purchase, investment_inputs, foreign_costs, benchmarks):
        assert run_sensitivity(foreign_purchase, investment_inputs, foreign_costs, benchmarks) == sensitivity

    def test_does_not_trace_into_active_context(self, foreign_purchase, investment_inputs, foreign_costs, benchmarks):
        with TraceContext() as ctx:
            run_sensitivity(foreign_purchase, investment_inputs, foreign_costs, benchmarks)

        assert ctx.traces == {}

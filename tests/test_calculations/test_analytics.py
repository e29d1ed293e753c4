"""Integration tests for the end-to-end analysis."""

from dataclasses import replace

import pytest

from firb_engine import analyze, ValidationError
from firb_engine.calculations.analytics import (
    calculate_firb,
    calculate_investment_analytics,
    generate_default_inputs,
)
from firb_engine.calculations.metrics import Verdict
from firb_engine.models.benchmarks import Benchmarks
from firb_engine.models.lookups import DenialReason


@pytest.fixture
def analytics(foreign_purchase, investment_inputs, foreign_costs, benchmarks):
    return calculate_investment_analytics(foreign_purchase, investment_inputs, foreign_costs, benchmarks)


class TestCalculateFIRB:
    """Tests for eligibility plus costs."""

    def test_reference_purchase(self, foreign_purchase):
        result = calculate_firb(foreign_purchase)

        assert result.eligibility.can_purchase
        assert result.eligibility.approval_fee_tier == 30_300
        assert result.costs.one_time_costs["approval_fee"] == result.eligibility.approval_fee_tier

    def test_denied_purchase_still_has_costs(self, foreign_established_purchase):
        """Costs are reported even when the purchase is denied."""
        result = calculate_firb(foreign_established_purchase)

        assert not result.eligibility.can_purchase
        assert result.costs.total_upfront_cost > 0


class TestGenerateDefaultInputs:
    """Tests for default investment assumptions."""

    def test_rent_from_state_yield(self, foreign_purchase, foreign_costs):
        """NSW benchmark yield of 3.2% on $1.5M is about $923 a week."""
        inputs = generate_default_inputs(foreign_purchase, foreign_costs)

        assert inputs.weekly_rent == 923
        assert inputs.loan_amount == pytest.approx(1_050_000)
        assert inputs.hold_period == 10
        assert inputs.loan_term == 30
        assert inputs.capital_growth_rate == 6.0

    def test_explicit_yield_and_growth(self, foreign_purchase, foreign_costs):
        inputs = generate_default_inputs(foreign_purchase, foreign_costs, gross_yield=5.2, capital_growth=4.0)

        assert inputs.weekly_rent == 1_500
        assert inputs.capital_growth_rate == 4.0

    def test_uses_benchmarks(self, foreign_purchase, foreign_costs):
        benchmarks = Benchmarks(interest_rate_percent=5.9, vacancy_rate_percent=2.5)
        inputs = generate_default_inputs(foreign_purchase, foreign_costs, benchmarks)

        assert inputs.interest_rate == 5.9
        assert inputs.vacancy_rate == 2.5
        assert inputs.annual_council_rates == foreign_costs.recurring_annual_costs["council_rates"]


class TestInvestmentAnalytics:
    """Tests for the investment analysis."""

    def test_projection_length(self, analytics, investment_inputs):
        assert len(analytics.yearly_projections) == investment_inputs.hold_period

    def test_gross_yield(self, analytics):
        assert analytics.rental_yield.gross == pytest.approx(1_100 * 52 / 1_500_000 * 100)
        # NSW benchmark is 3.2%
        assert analytics.rental_yield.above_benchmark

    def test_loan_metrics(self, analytics):
        assert analytics.loan_metrics.lvr == pytest.approx(70.0)
        assert analytics.loan_metrics.equity_at_start == pytest.approx(450_000)
        final = analytics.yearly_projections[-1]
        assert analytics.loan_metrics.loan_balance_at_end == pytest.approx(final.loan_balance)
        assert analytics.loan_metrics.equity_at_end == pytest.approx(final.equity)

    def test_foreign_buyer_tax_position(self, analytics):
        """Foreign buyers get no CGT discount and pay withholding on a large sale."""
        tax = analytics.tax_analysis

        assert not tax.residency.is_australian_tax_resident
        assert not tax.cgt_on_exit.discount_applied
        assert tax.cgt_on_exit.withholding_tax > 0
        assert tax.cgt_on_exit.cgt_amount >= 0
        assert tax.monthly_tax_saving == pytest.approx(tax.annual_tax_saving / 12)

    def test_deductions_match_first_year(self, analytics):
        first = analytics.yearly_projections[0]
        assert analytics.tax_analysis.deductions.loan_interest == pytest.approx(first.interest)

    def test_score_and_recommendation(self, analytics):
        score = analytics.score

        assert 0 <= score.overall <= 10
        assert analytics.recommendation.rating == score.overall
        assert analytics.recommendation.verdict == score.verdict
        assert isinstance(score.verdict, Verdict)
        assert "Foreign buyer costs reduce returns" in analytics.recommendation.risks_to_consider

    def test_recommendation_text_has_no_currency_symbol(self, analytics):
        rec = analytics.recommendation
        texts = [rec.description, *rec.strengths, *rec.weaknesses, *rec.key_takeaways]

        assert all("$" not in text for text in texts)

    def test_comparisons(self, analytics):
        assert len(analytics.comparisons) == 5
        assert analytics.comparisons[0].total_return == pytest.approx(analytics.roi.total_return)

    def test_cash_invested(self, analytics, foreign_costs):
        assert analytics.total_cash_invested == pytest.approx(450_000 + foreign_costs.total_upfront_cost)

    def test_equity_irr_defined(self, analytics):
        assert analytics.equity_irr is not None

    def test_loan_above_value_rejected(self, foreign_purchase, investment_inputs, foreign_costs, benchmarks):
        inputs = investment_inputs.with_changes(loan_amount=2_000_000)

        with pytest.raises(ValidationError):
            calculate_investment_analytics(foreign_purchase, inputs, foreign_costs, benchmarks)

    def test_idempotent(self, foreign_purchase, investment_inputs, foreign_costs, benchmarks, analytics):
        """Results (excluding the trace context) are identical on rerun."""
        again = calculate_investment_analytics(foreign_purchase, investment_inputs, foreign_costs, benchmarks)

        assert again == analytics


class TestAnalyze:
    """Tests for the single entry point."""

    def test_denied_purchase_has_no_investment(self, foreign_established_purchase):
        result = analyze(foreign_established_purchase)

        assert not result.eligibility.can_purchase
        assert result.eligibility.reason_for_denial == DenialReason.ESTABLISHED_DWELLING_PROHIBITED
        assert result.investment is None

    def test_allowed_purchase_with_defaults(self, australian_purchase):
        result = analyze(australian_purchase)

        assert result.eligibility.can_purchase
        assert result.investment is not None
        assert result.costs.one_time_costs["approval_fee"] == 0
        assert result.investment.tax_analysis.residency.is_australian_tax_resident
        assert result.investment.tax_analysis.cgt_on_exit.discount_applied

    def test_explicit_investment_inputs(self, foreign_purchase, investment_inputs):
        result = analyze(foreign_purchase, investment_inputs)

        assert result.investment.rental_yield.weekly_rent == 1_100

    def test_temporary_resident_during_ban(self, temporary_purchase):
        """A temporary resident can buy new but not established during the ban."""
        from firb_engine.models.lookups import PropertyType

        new = analyze(temporary_purchase)
        established = analyze(replace(
            temporary_purchase,
            property_type=PropertyType.ESTABLISHED_DWELLING,
            intends_to_occupy=True,
        ))

        assert new.eligibility.can_purchase
        assert new.eligibility.approval_fee_tier > 0
        assert not established.eligibility.can_purchase
        assert established.eligibility.reason_for_denial == DenialReason.TEMPORARY_BAN

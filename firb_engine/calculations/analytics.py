"""Orchestration: eligibility, costs and investment analytics in one pass.

This module wires the individual engines together. Eligibility and costs run
first; their outputs feed the loan and cash flow projection, whose
year-by-year output feeds sensitivity, tax and scoring.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..models.benchmarks import Benchmarks
from ..models.inputs import InvestmentInputs, PurchaseInputs
from ..models.lookups import get_citizenship_rules, get_state_rules
from ..scenarios import SensitivityAnalysis, run_sensitivity
from .cashflow import (
    AnnualCashFlow,
    YearlyProjection,
    holding_costs,
    management_fees,
    project_investment,
    summarize_first_year,
)
from .costs import CostBreakdown, calculate_costs
from .debt import LoanMetrics, summarize_loan
from .eligibility import EligibilityResult, evaluate_eligibility
from .metrics import (
    BreakEven,
    CapitalGrowth,
    InvestmentComparison,
    InvestmentScore,
    Recommendation,
    RentalYield,
    ReturnMetrics,
    build_recommendation,
    calculate_capital_growth,
    calculate_equity_irr,
    calculate_rental_yield,
    calculate_returns,
    calculate_sub_scores,
    compare_investments,
    find_break_even,
    score_investment,
)
from .taxes import (
    CGTResult,
    TaxDeductions,
    TaxResidency,
    calculate_cgt,
    calculate_deductions,
    calculate_tax_benefit,
    determine_tax_residency,
)
from .trace import TraceContext, trace

logger = logging.getLogger(__name__)

DEFAULT_CAPITAL_GROWTH = 6.0
DEFAULT_LOAN_TERM_YEARS = 30
DEFAULT_HOLD_YEARS = 10


@dataclass(frozen=True)
class FIRBResult:
    """Eligibility and cost breakdown for a purchase."""

    eligibility: EligibilityResult
    costs: CostBreakdown


@dataclass(frozen=True)
class TaxAnalysis:
    """First-year deductions and the CGT position on exit."""

    deductions: TaxDeductions
    annual_tax_saving: float
    marginal_tax_rate: float
    residency: TaxResidency
    cgt_on_exit: CGTResult

    @property
    def monthly_tax_saving(self) -> float:
        return self.annual_tax_saving / 12


@dataclass(frozen=True)
class InvestmentAnalytics:
    """Complete investment analysis over the hold period."""

    rental_yield: RentalYield
    cash_flow: AnnualCashFlow
    roi: ReturnMetrics
    capital_growth: CapitalGrowth
    loan_metrics: LoanMetrics
    yearly_projections: Tuple[YearlyProjection, ...]
    comparisons: Tuple[InvestmentComparison, ...]
    sensitivity: SensitivityAnalysis
    tax_analysis: TaxAnalysis
    score: InvestmentScore
    recommendation: Recommendation
    break_even: BreakEven
    equity_irr: Optional[float]  # %, None when undefined
    total_cash_invested: float
    trace_context: Optional[TraceContext] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class AnalysisResult:
    """Everything the engine computes for one request."""

    purchase: PurchaseInputs
    benchmarks: Benchmarks
    eligibility: EligibilityResult
    costs: CostBreakdown
    investment: Optional[InvestmentAnalytics] = None  # None when the purchase is denied


def calculate_firb(purchase: PurchaseInputs, benchmarks: Optional[Benchmarks] = None) -> FIRBResult:
    """Assess eligibility and calculate the cost breakdown.

    Args:
        purchase: Buyer and property details.
        benchmarks: Resolved benchmarks (defaults when None).

    Returns:
        FIRBResult.
    """
    benchmarks = benchmarks or Benchmarks()
    eligibility = evaluate_eligibility(
        purchase.citizenship_status,
        purchase.property_type,
        purchase.property_value,
        purchase.visa_type,
        purchase.is_ordinarily_resident,
        intends_to_occupy=purchase.intends_to_occupy,
        is_redevelopment=purchase.is_redevelopment,
        expedited=purchase.expedited,
        as_of=purchase.as_of,
    )
    return FIRBResult(eligibility=eligibility, costs=calculate_costs(purchase, benchmarks))


def generate_default_inputs(
    purchase: PurchaseInputs,
    costs: CostBreakdown,
    benchmarks: Optional[Benchmarks] = None,
    gross_yield: Optional[float] = None,
    capital_growth: Optional[float] = None,
) -> InvestmentInputs:
    """Build sensible investment assumptions from the purchase and benchmarks.

    Rent is derived from the gross yield (the state benchmark unless given).
    Holding costs are pre-filled from the cost breakdown.

    Args:
        purchase: Buyer and property details.
        costs: Cost breakdown for the purchase.
        benchmarks: Resolved benchmarks (defaults when None).
        gross_yield: Gross rental yield in percent.
        capital_growth: Annual capital growth in percent.

    Returns:
        InvestmentInputs.
    """
    benchmarks = benchmarks or Benchmarks()
    if gross_yield is None:
        gross_yield = get_state_rules(purchase.state).gross_yield_benchmark
    weekly_rent = round(purchase.property_value * gross_yield / 100 / 52)
    recurring = costs.recurring_annual_costs

    return InvestmentInputs(
        weekly_rent=weekly_rent,
        vacancy_rate=benchmarks.vacancy_rate_percent,
        rent_growth_rate=benchmarks.rent_growth_percent,
        property_management_fee=benchmarks.management_fee_percent,
        letting_fee_weeks=benchmarks.letting_fee_weeks,
        annual_council_rates=recurring["council_rates"],
        annual_insurance=recurring["insurance"],
        annual_maintenance=recurring["maintenance"],
        annual_strata_fees=purchase.property_value * benchmarks.strata_fee_percent / 100,
        loan_amount=purchase.loan_amount,
        interest_rate=benchmarks.interest_rate_percent,
        loan_term=DEFAULT_LOAN_TERM_YEARS,
        hold_period=DEFAULT_HOLD_YEARS,
        capital_growth_rate=DEFAULT_CAPITAL_GROWTH if capital_growth is None else capital_growth,
        marginal_tax_rate=benchmarks.default_marginal_tax_rate,
        selling_costs=benchmarks.selling_costs_percent,
        cgt_withholding_rate=benchmarks.cgt_withholding,
    )


def _first_year_deductions(
    inputs: InvestmentInputs,
    costs: CostBreakdown,
    first_year: YearlyProjection,
    depreciation: float,
) -> TaxDeductions:
    holding = holding_costs(inputs, costs)
    return calculate_deductions(
        loan_interest=first_year.interest,
        council_rates=holding["council_rates"],
        land_tax=holding["land_tax"],
        land_tax_surcharge=holding["land_tax_surcharge"],
        property_management=management_fees(inputs, first_year.rental_income),
        maintenance=holding["maintenance"],
        insurance=holding["insurance"],
        strata_fees=holding["strata_fees"],
        depreciation=depreciation,
    )


def calculate_investment_analytics(
    purchase: PurchaseInputs,
    inputs: InvestmentInputs,
    costs: CostBreakdown,
    benchmarks: Optional[Benchmarks] = None,
) -> InvestmentAnalytics:
    """Run the full investment analysis with an audit trace.

    Args:
        purchase: Buyer and property details.
        inputs: Investment assumptions.
        costs: Cost breakdown for the purchase.
        benchmarks: Resolved benchmarks (defaults when None).

    Returns:
        InvestmentAnalytics with the trace context attached.

    Raises:
        ValidationError: If the loan exceeds the property value.
    """
    benchmarks = benchmarks or Benchmarks()
    inputs.validate_against(purchase.property_value)
    property_value = purchase.property_value
    logger.debug(
        "Investment analytics: value %.0f, loan %.0f, hold %d years",
        property_value, inputs.loan_amount, inputs.hold_period,
    )

    with TraceContext() as ctx:
        trace("inputs.property_value", property_value, {})
        trace("inputs.loan_amount", inputs.loan_amount, {})

        run = project_investment(purchase, inputs, costs, benchmarks)
        projections = run.projections
        first, final = projections[0], projections[-1]
        invested = run.total_cash_invested

        # === Yield, returns and growth ===
        state_rules = get_state_rules(purchase.state)
        rental_yield = calculate_rental_yield(
            inputs, property_value, costs.total_acquisition_cost, first, state_rules.gross_yield_benchmark,
        )
        returns = calculate_returns(projections, invested)
        growth = calculate_capital_growth(property_value, final.property_value, inputs.capital_growth_rate)
        loan_metrics = summarize_loan(
            run.loan_schedule,
            inputs.loan_amount,
            inputs.interest_rate,
            inputs.loan_term,
            inputs.loan_type,
            property_value,
            final.property_value,
        )

        # === Tax ===
        deductions = _first_year_deductions(inputs, costs, first, run.depreciation)
        tax_saving = calculate_tax_benefit(deductions.total, first.rental_income, inputs.marginal_tax_rate)
        residency = determine_tax_residency(purchase.citizenship_status, purchase.is_ordinarily_resident)
        cgt = calculate_cgt(
            sale_price=final.property_value,
            purchase_price=property_value,
            purchase_costs=costs.total_upfront_cost,
            selling_costs_percent=inputs.selling_costs,
            is_australian_tax_resident=residency.is_australian_tax_resident,
            marginal_tax_rate=inputs.marginal_tax_rate,
            hold_years=inputs.hold_period,
            capital_improvements=inputs.capital_improvements,
            withholding_rate=inputs.cgt_withholding_rate,
        )
        tax_analysis = TaxAnalysis(
            deductions=deductions,
            annual_tax_saving=tax_saving,
            marginal_tax_rate=inputs.marginal_tax_rate,
            residency=residency,
            cgt_on_exit=cgt,
        )

        # === Score and recommendation ===
        breakdown = calculate_sub_scores(
            gross_yield=rental_yield.gross,
            capital_growth_rate=inputs.capital_growth_rate,
            after_tax_cash_flow=first.after_tax_cash_flow,
            total_cash_invested=invested,
            tax_benefit=first.tax_benefit,
            net_cash_flow=first.net_cash_flow,
        )
        score = score_investment(breakdown)
        trace("returns.overall_score", score.overall, {
            "returns.gross_yield": rental_yield.gross,
            "cashflow.after_tax_cash_flow": first.after_tax_cash_flow,
            "tax.tax_benefit": first.tax_benefit,
        })
        pays_foreign_costs = get_citizenship_rules(
            purchase.citizenship_status, purchase.is_ordinarily_resident,
        ).pays_foreign_surcharge
        recommendation = build_recommendation(
            score, rental_yield, inputs, first, returns, loan_metrics.lvr, pays_foreign_costs,
        )

        equity_irr = calculate_equity_irr(
            invested, projections, cgt.net_proceeds_after_tax - final.loan_balance,
        )
        sensitivity = run_sensitivity(purchase, inputs, costs, benchmarks)

    return InvestmentAnalytics(
        rental_yield=rental_yield,
        cash_flow=summarize_first_year(inputs, costs, first),
        roi=returns,
        capital_growth=growth,
        loan_metrics=loan_metrics,
        yearly_projections=projections,
        comparisons=compare_investments(invested, inputs.hold_period, benchmarks, returns),
        sensitivity=sensitivity,
        tax_analysis=tax_analysis,
        score=score,
        recommendation=recommendation,
        break_even=find_break_even(projections),
        equity_irr=equity_irr,
        total_cash_invested=invested,
        trace_context=ctx,
    )


def analyze(
    purchase: PurchaseInputs,
    investment: Optional[InvestmentInputs] = None,
    benchmarks: Optional[Benchmarks] = None,
) -> AnalysisResult:
    """Run the whole engine for one purchase.

    Investment analytics are skipped when the purchase is denied. When no
    investment assumptions are given, defaults are generated from the
    purchase and benchmarks.

    Args:
        purchase: Buyer and property details.
        investment: Investment assumptions, or None for defaults.
        benchmarks: Resolved benchmarks (defaults when None).

    Returns:
        AnalysisResult.
    """
    benchmarks = benchmarks or Benchmarks()
    firb = calculate_firb(purchase, benchmarks)

    analytics = None
    if firb.eligibility.can_purchase:
        inputs = investment or generate_default_inputs(purchase, firb.costs, benchmarks)
        analytics = calculate_investment_analytics(purchase, inputs, firb.costs, benchmarks)
    else:
        logger.debug("Skipping investment analytics: %s", firb.eligibility.reason_for_denial)

    return AnalysisResult(
        purchase=purchase,
        benchmarks=benchmarks,
        eligibility=firb.eligibility,
        costs=firb.costs,
        investment=analytics,
    )

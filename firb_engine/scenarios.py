"""Sensitivity analysis: re-run the projection with one assumption changed.

Each scenario substitutes a single field of the investment inputs and reruns
the same projection used for the base case, so the base row of every table
matches the base analysis exactly.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from .calculations.cashflow import InvestmentProjection, project_investment
from .calculations.costs import CostBreakdown
from .calculations.metrics import calculate_returns
from .calculations.trace import TraceContext
from .models.benchmarks import Benchmarks
from .models.inputs import InvestmentInputs, PurchaseInputs

logger = logging.getLogger(__name__)

VACANCY_SCENARIOS = (0.0, 5.0, 10.0, 15.0, 20.0)
INTEREST_RATE_OFFSETS = (-2.0, -1.0, 0.0, 1.0, 2.0)
GROWTH_RATE_OFFSET = 2.0

# Input validation accepts percentage rates in this range only
MIN_RATE = 0.0
MAX_RATE = 100.0


@dataclass(frozen=True)
class VacancyScenario:
    """First-year cash flow at one vacancy rate."""

    rate: float
    annual_rent: float  # After vacancy
    net_cash_flow: float
    after_tax_cash_flow: float
    impact: float  # After-tax change vs the base case


@dataclass(frozen=True)
class InterestRateScenario:
    """First-year cash flow at one interest rate."""

    rate: float
    monthly_repayment: float
    annual_cost: float  # First-year loan repayments
    net_cash_flow: float
    after_tax_cash_flow: float
    impact: float  # After-tax change vs the base case


@dataclass(frozen=True)
class GrowthScenario:
    """End-of-hold position at one capital growth rate."""

    label: str
    rate: float
    value_at_end: float
    equity_at_end: float
    total_return: float
    annualized_roi: float


@dataclass(frozen=True)
class SensitivityAnalysis:
    """Vacancy, interest rate and growth sensitivity tables."""

    vacancy: Tuple[VacancyScenario, ...]
    interest_rate: Tuple[InterestRateScenario, ...]
    growth: Tuple[GrowthScenario, ...]


def _clamp_rate(rate: float) -> float:
    return min(MAX_RATE, max(MIN_RATE, rate))


def _rerun(
    purchase: PurchaseInputs,
    inputs: InvestmentInputs,
    costs: CostBreakdown,
    benchmarks: Benchmarks,
) -> InvestmentProjection:
    # Scenario runs must not overwrite the base case audit trail
    with TraceContext(enabled=False):
        return project_investment(purchase, inputs, costs, benchmarks)


def vacancy_sensitivity(
    purchase: PurchaseInputs,
    inputs: InvestmentInputs,
    costs: CostBreakdown,
    benchmarks: Benchmarks,
    base_after_tax: float,
) -> Tuple[VacancyScenario, ...]:
    rows = []
    for rate in VACANCY_SCENARIOS:
        first = _rerun(purchase, inputs.with_changes(vacancy_rate=rate), costs, benchmarks).projections[0]
        rows.append(VacancyScenario(
            rate=rate,
            annual_rent=first.rental_income,
            net_cash_flow=first.net_cash_flow,
            after_tax_cash_flow=first.after_tax_cash_flow,
            impact=first.after_tax_cash_flow - base_after_tax,
        ))
    return tuple(rows)


def interest_rate_sensitivity(
    purchase: PurchaseInputs,
    inputs: InvestmentInputs,
    costs: CostBreakdown,
    benchmarks: Benchmarks,
    base_after_tax: float,
) -> Tuple[InterestRateScenario, ...]:
    rows = []
    for offset in INTEREST_RATE_OFFSETS:
        rate = _clamp_rate(inputs.interest_rate + offset)
        first = _rerun(purchase, inputs.with_changes(interest_rate=rate), costs, benchmarks).projections[0]
        rows.append(InterestRateScenario(
            rate=rate,
            monthly_repayment=first.loan_repayment / 12,
            annual_cost=first.loan_repayment,
            net_cash_flow=first.net_cash_flow,
            after_tax_cash_flow=first.after_tax_cash_flow,
            impact=first.after_tax_cash_flow - base_after_tax,
        ))
    return tuple(rows)


def growth_sensitivity(
    purchase: PurchaseInputs,
    inputs: InvestmentInputs,
    costs: CostBreakdown,
    benchmarks: Benchmarks,
) -> Tuple[GrowthScenario, ...]:
    base = inputs.capital_growth_rate
    scenarios = (
        ("Pessimistic", _clamp_rate(base - GROWTH_RATE_OFFSET)),
        ("Base", base),
        ("Optimistic", _clamp_rate(base + GROWTH_RATE_OFFSET)),
    )

    rows = []
    for label, rate in scenarios:
        run = _rerun(purchase, inputs.with_changes(capital_growth_rate=rate), costs, benchmarks)
        final = run.projections[-1]
        returns = calculate_returns(run.projections, run.total_cash_invested)
        rows.append(GrowthScenario(
            label=label,
            rate=rate,
            value_at_end=final.property_value,
            equity_at_end=final.equity,
            total_return=returns.total_return,
            annualized_roi=returns.annualized_roi,
        ))
    return tuple(rows)


def run_sensitivity(
    purchase: PurchaseInputs,
    inputs: InvestmentInputs,
    costs: CostBreakdown,
    benchmarks: Benchmarks,
) -> SensitivityAnalysis:
    """Run the vacancy, interest rate and growth sensitivity tables.

    Args:
        purchase: Buyer and property details.
        inputs: Base investment assumptions.
        costs: Cost breakdown for the purchase.
        benchmarks: Resolved benchmarks.

    Returns:
        SensitivityAnalysis. Deterministic for the same arguments.
    """
    logger.debug("Running sensitivity analysis")
    base_after_tax = _rerun(purchase, inputs, costs, benchmarks).projections[0].after_tax_cash_flow

    return SensitivityAnalysis(
        vacancy=vacancy_sensitivity(purchase, inputs, costs, benchmarks, base_after_tax),
        interest_rate=interest_rate_sensitivity(purchase, inputs, costs, benchmarks, base_after_tax),
        growth=growth_sensitivity(purchase, inputs, costs, benchmarks),
    )

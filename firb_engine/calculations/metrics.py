"""Investment metrics: yield, ROI, comparisons, break-even, IRR and scoring."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

import numpy as np
import numpy_financial as npf

from ..models.benchmarks import Benchmarks
from ..models.inputs import InvestmentInputs
from .cashflow import YearlyProjection
from .trace import trace

# Sub-score calibration: these values earn a full 10
FULL_SCORE_GROSS_YIELD = 5.0
FULL_SCORE_CAPITAL_GROWTH = 7.0
CASH_FLOW_SCORE_MIDPOINT = 5.0
CASH_FLOW_SCORE_SCALE = 50.0
RISK_PROFILE_BASELINE = 7.0
MAX_SUB_SCORE = 10.0


class Verdict(str, Enum):
    """Overall investment verdict banded from the score."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    MODERATE = "Moderate"
    POOR = "Poor"
    NOT_RECOMMENDED = "Not Recommended"


# Lower bound of each verdict band, highest first
VERDICT_BANDS: Tuple[Tuple[float, Verdict], ...] = (
    (8.0, Verdict.EXCELLENT),
    (6.5, Verdict.GOOD),
    (5.0, Verdict.MODERATE),
    (3.5, Verdict.POOR),
)


@dataclass(frozen=True)
class ScoreBreakdown:
    """Five sub-scores, each in [0, 10]."""

    rental_yield: float
    capital_growth: float
    cash_flow: float
    tax_efficiency: float
    risk_profile: float

    def as_tuple(self) -> Tuple[float, ...]:
        return (
            self.rental_yield,
            self.capital_growth,
            self.cash_flow,
            self.tax_efficiency,
            self.risk_profile,
        )


@dataclass(frozen=True)
class InvestmentScore:
    """Overall score with its breakdown and verdict."""

    overall: float
    breakdown: ScoreBreakdown
    verdict: Verdict


@dataclass(frozen=True)
class RentalYield:
    """Gross and net rental yield against the state benchmark."""

    gross: float  # %
    net: float  # % of total acquisition cost
    weekly_rent: float
    annual_rent: float
    effective_rent: float  # After vacancy
    benchmark: float  # State gross yield benchmark (%)

    @property
    def above_benchmark(self) -> bool:
        return self.gross > self.benchmark


@dataclass(frozen=True)
class ReturnMetrics:
    """Return on the cash invested over the hold period."""

    total_return: float
    total_roi: float  # %
    annualized_roi: float  # % a year, simple average
    cash_on_cash: float  # First-year after-tax cash flow / cash invested (%)


@dataclass(frozen=True)
class CapitalGrowth:
    """Projected change in property value over the hold period."""

    initial_value: float
    value_at_end: float
    total_appreciation: float
    annual_growth_rate: float
    total_percentage_gain: float


@dataclass(frozen=True)
class InvestmentComparison:
    """Outcome of investing the same cash elsewhere."""

    name: str
    rate: float  # Annual rate (%)
    total_return: float
    annualized_return: float


@dataclass(frozen=True)
class BreakEven:
    """When the investment stops needing cash and recovers its outlay."""

    years_to_positive_cash_flow: Optional[int]
    years_to_cumulative_break_even: Optional[int]
    total_cash_required: float  # Sum of negative after-tax cash flows


@dataclass(frozen=True)
class Recommendation:
    """Plain-language recommendation derived from the score."""

    verdict: Verdict
    rating: float
    description: str
    strengths: Tuple[str, ...]
    weaknesses: Tuple[str, ...]
    suitable_for: Tuple[str, ...]
    risks_to_consider: Tuple[str, ...]
    key_takeaways: Tuple[str, ...]


def clamp_score(value: float) -> float:
    """Clamp a sub-score to [0, 10]."""
    return min(MAX_SUB_SCORE, max(0.0, value))


def calculate_sub_scores(
    gross_yield: float,
    capital_growth_rate: float,
    after_tax_cash_flow: float,
    total_cash_invested: float,
    tax_benefit: float,
    net_cash_flow: float,
) -> ScoreBreakdown:
    """Score each dimension of the investment out of 10.

    Args:
        gross_yield: Gross rental yield (%).
        capital_growth_rate: Assumed capital growth (%).
        after_tax_cash_flow: First-year after-tax cash flow.
        total_cash_invested: Deposit plus upfront costs.
        tax_benefit: First-year tax benefit.
        net_cash_flow: First-year pre-tax cash flow.

    Returns:
        ScoreBreakdown with every sub-score clamped to [0, 10].
    """
    if total_cash_invested > 0:
        cash_flow = CASH_FLOW_SCORE_MIDPOINT + after_tax_cash_flow / total_cash_invested * CASH_FLOW_SCORE_SCALE
    else:
        cash_flow = CASH_FLOW_SCORE_MIDPOINT

    if net_cash_flow == 0:
        tax_efficiency = MAX_SUB_SCORE if tax_benefit > 0 else 0.0
    else:
        tax_efficiency = tax_benefit / abs(net_cash_flow) * 10

    return ScoreBreakdown(
        rental_yield=clamp_score(gross_yield / FULL_SCORE_GROSS_YIELD * 10),
        capital_growth=clamp_score(capital_growth_rate / FULL_SCORE_CAPITAL_GROWTH * 10),
        cash_flow=clamp_score(cash_flow),
        tax_efficiency=clamp_score(tax_efficiency),
        risk_profile=RISK_PROFILE_BASELINE,
    )


def verdict_for(overall: float) -> Verdict:
    """Band an overall score into a verdict."""
    for lower_bound, verdict in VERDICT_BANDS:
        if overall >= lower_bound:
            return verdict
    return Verdict.NOT_RECOMMENDED


def score_investment(breakdown: ScoreBreakdown) -> InvestmentScore:
    """Combine sub-scores into an overall score and verdict.

    The overall score is the mean of the five sub-scores rounded to one
    decimal place.
    """
    overall = round(sum(breakdown.as_tuple()) / len(breakdown.as_tuple()), 1)
    return InvestmentScore(overall=overall, breakdown=breakdown, verdict=verdict_for(overall))


def calculate_rental_yield(
    inputs: InvestmentInputs,
    property_value: float,
    total_acquisition_cost: float,
    first_year: YearlyProjection,
    benchmark: float,
) -> RentalYield:
    """Gross yield on price and net yield on the total acquisition cost."""
    annual_rent = inputs.weekly_rent * 52
    gross = annual_rent / property_value * 100 if property_value > 0 else 0.0
    trace("returns.gross_yield", gross, {
        "inputs.weekly_rent": inputs.weekly_rent,
        "inputs.property_value": property_value,
    })
    net_income = first_year.rental_income - first_year.operating_expenses
    net = net_income / total_acquisition_cost * 100 if total_acquisition_cost > 0 else 0.0
    return RentalYield(
        gross=gross,
        net=net,
        weekly_rent=inputs.weekly_rent,
        annual_rent=annual_rent,
        effective_rent=first_year.rental_income,
        benchmark=benchmark,
    )


def calculate_returns(
    projections: Sequence[YearlyProjection],
    total_cash_invested: float,
) -> ReturnMetrics:
    """Total and annualized ROI from the final projected year."""
    if not projections:
        return ReturnMetrics(0.0, 0.0, 0.0, 0.0)

    total_return = projections[-1].cumulative_return
    if total_cash_invested > 0:
        total_roi = total_return / total_cash_invested * 100
        cash_on_cash = projections[0].after_tax_cash_flow / total_cash_invested * 100
    else:
        total_roi = cash_on_cash = 0.0
    trace("returns.total_roi", total_roi, {
        "cashflow.after_tax_cash_flow": projections[-1].cumulative_cash_flow,
        "costs.total_upfront": total_cash_invested,
    })

    return ReturnMetrics(
        total_return=total_return,
        total_roi=total_roi,
        annualized_roi=total_roi / len(projections),
        cash_on_cash=cash_on_cash,
    )


def calculate_capital_growth(
    property_value: float,
    value_at_end: float,
    growth_rate: float,
) -> CapitalGrowth:
    appreciation = value_at_end - property_value
    return CapitalGrowth(
        initial_value=property_value,
        value_at_end=value_at_end,
        total_appreciation=appreciation,
        annual_growth_rate=growth_rate,
        total_percentage_gain=appreciation / property_value * 100 if property_value > 0 else 0.0,
    )


def compare_investments(
    total_cash_invested: float,
    hold_years: int,
    benchmarks: Benchmarks,
    property_returns: ReturnMetrics,
) -> Tuple[InvestmentComparison, ...]:
    """Compare the property with compounding the same cash at benchmark rates.

    Returns:
        Property first, then ASX equities, term deposit, bonds and savings.
    """
    alternatives = (
        ("ASX equities", benchmarks.asx_total_return),
        ("Term deposit", benchmarks.term_deposit_rate),
        ("Government bonds", benchmarks.bond_rate),
        ("High interest savings", benchmarks.savings_rate),
    )

    comparisons = [InvestmentComparison(
        name="Property",
        rate=property_returns.annualized_roi,
        total_return=property_returns.total_return,
        annualized_return=property_returns.annualized_roi,
    )]
    for name, rate in alternatives:
        total = total_cash_invested * (1 + rate / 100) ** hold_years - total_cash_invested
        comparisons.append(InvestmentComparison(
            name=name,
            rate=rate,
            total_return=total,
            annualized_return=rate,
        ))
    return tuple(comparisons)


def find_break_even(projections: Sequence[YearlyProjection]) -> BreakEven:
    """Locate the first positive after-tax year and the cumulative break-even."""
    positive_year = next((p.year for p in projections if p.after_tax_cash_flow >= 0), None)
    break_even_year = next((p.year for p in projections if p.cumulative_return >= 0), None)
    cash_required = sum(-p.after_tax_cash_flow for p in projections if p.after_tax_cash_flow < 0)
    return BreakEven(
        years_to_positive_cash_flow=positive_year,
        years_to_cumulative_break_even=break_even_year,
        total_cash_required=cash_required,
    )


def calculate_equity_irr(
    total_cash_invested: float,
    projections: Sequence[YearlyProjection],
    net_exit_proceeds: float,
) -> Optional[float]:
    """Annual equity IRR in percent, or None when undefined.

    Cash flows are the initial outlay, each year's after-tax cash flow, and
    the net exit proceeds (after selling costs, loan payoff and CGT) added
    to the final year.
    """
    if total_cash_invested <= 0 or not projections:
        return None

    cash_flows = [-total_cash_invested] + [p.after_tax_cash_flow for p in projections]
    cash_flows[-1] += net_exit_proceeds

    irr = npf.irr(np.array(cash_flows))
    if irr is None or np.isnan(irr):
        return None
    result = float(irr) * 100
    trace("returns.equity_irr", result, {
        "cashflow.after_tax_cash_flow": sum(p.after_tax_cash_flow for p in projections),
        "costs.total_upfront": total_cash_invested,
    })
    return result


def build_recommendation(
    score: InvestmentScore,
    rental_yield: RentalYield,
    inputs: InvestmentInputs,
    first_year: YearlyProjection,
    returns: ReturnMetrics,
    lvr: float,
    pays_foreign_costs: bool,
) -> Recommendation:
    """Describe the investment in plain language.

    Amounts are rounded numbers without currency formatting; presentation is
    left to the caller.
    """
    verdict = score.verdict
    after_tax = first_year.after_tax_cash_flow
    gross = rental_yield.gross

    strengths = []
    weaknesses = []
    if rental_yield.above_benchmark:
        strengths.append(f"Strong rental yield ({gross:.1f}%) above the {rental_yield.benchmark}% state average")
    else:
        weaknesses.append(f"Below average rental yield ({gross:.1f}%) against {rental_yield.benchmark}%")
    if inputs.capital_growth_rate >= 6:
        strengths.append("Good capital growth potential")
    elif inputs.capital_growth_rate < 4:
        weaknesses.append("Limited capital growth potential")
    if after_tax >= 0:
        strengths.append("Positive cash flow after tax")
    else:
        weaknesses.append(f"Negative cash flow after tax ({abs(round(after_tax)):,} a year)")
    if first_year.tax_benefit > 5000:
        strengths.append(f"Significant tax benefits ({round(first_year.tax_benefit):,} a year)")
    if returns.total_roi > 60:
        strengths.append(f"Strong {inputs.hold_period}-year return ({returns.total_roi:.1f}% ROI)")

    suitable_for = []
    if after_tax < 0:
        suitable_for.append("Investors with stable income to cover negative cash flow")
        suitable_for.append("High income earners benefiting from negative gearing")
    if inputs.hold_period >= 10:
        suitable_for.append("Long-term wealth building (10+ years)")
    if gross > 4:
        suitable_for.append("Investors seeking rental income")
    if inputs.capital_growth_rate >= 6:
        suitable_for.append("Capital growth focused investors")

    risks = []
    if inputs.vacancy_rate >= 10:
        risks.append("High vacancy risk")
    if lvr > 80:
        risks.append("High leverage (LVR above 80%)")
    if after_tax < -20000:
        risks.append("Significant ongoing cash requirement")
    if pays_foreign_costs:
        risks.append("Foreign buyer costs reduce returns")
        risks.append("Currency exchange risk")
    risks.append("Market downturn risk")

    gearing = "negatively geared" if after_tax < 0 else "positively geared"
    if verdict in (Verdict.EXCELLENT, Verdict.GOOD):
        outlook = "This investment shows strong potential for wealth building with a balanced risk-return profile."
    elif verdict == Verdict.MODERATE:
        outlook = "This investment has moderate potential. Consider your risk tolerance and cash flow capacity carefully."
    else:
        outlook = "This investment may not meet typical return expectations. Review all assumptions and consider alternatives."
    description = (
        f"This is a {verdict.value.upper()} investment opportunity. The property is {gearing} "
        f"with a {gross:.1f}% gross rental yield. Over {inputs.hold_period} years, the projected "
        f"total ROI is {returns.total_roi:.1f}%. {outlook}"
    )

    monthly = round(first_year.net_cash_flow / 12)
    takeaways = [
        f"Rental yield of {gross:.1f}% ({'above' if gross > 4 else 'below'} average)",
        (
            f"Requires {abs(monthly):,} a month in cash contributions"
            if monthly < 0
            else f"Generates {monthly:,} a month in positive cash flow"
        ),
        f"Projected {inputs.hold_period}-year ROI of {returns.total_roi:.1f}%",
    ]
    if pays_foreign_costs:
        takeaways.append("Foreign buyer costs significantly impact returns")
    takeaways.append("Long-term capital growth is key to success")

    return Recommendation(
        verdict=verdict,
        rating=score.overall,
        description=description,
        strengths=tuple(strengths),
        weaknesses=tuple(weaknesses),
        suitable_for=tuple(suitable_for),
        risks_to_consider=tuple(risks),
        key_takeaways=tuple(takeaways),
    )

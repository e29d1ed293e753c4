"""Year-by-year rental cash flow projection."""

import logging
from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

from ..models.benchmarks import Benchmarks
from ..models.inputs import InvestmentInputs, PurchaseInputs
from .costs import CostBreakdown
from .debt import LoanYear, project_loan
from .taxes import estimate_depreciation
from .trace import trace

logger = logging.getLogger(__name__)

WEEKS_PER_YEAR = 52


@dataclass(frozen=True)
class YearlyProjection:
    """One year of the investment projection.

    ``equity`` is always ``property_value - loan_balance``. ``expenses``
    includes loan interest; ``net_cash_flow`` deducts the full loan
    repayment instead, so interest is counted once.
    """

    year: int
    property_value: float  # End of year
    loan_balance: float  # End of year
    equity: float
    rental_income: float  # After vacancy
    expenses: float  # Operating expenses + interest
    loan_repayment: float  # Interest + principal
    net_cash_flow: float
    tax_benefit: float
    after_tax_cash_flow: float
    cumulative_cash_flow: float
    cumulative_return: float
    interest: float
    operating_expenses: float


@dataclass(frozen=True)
class AnnualCashFlow:
    """First-year cash flow broken down by line item."""

    rental_income: float  # Gross, before vacancy
    vacancy_cost: float
    effective_income: float
    loan_repayments: float
    property_management: float  # Management and letting fees
    council_rates: float
    insurance: float
    maintenance: float
    land_tax: float  # Including any foreign owner surcharge
    strata_fees: float
    other_expenses: float  # Vacancy fee
    total_expenses: float  # Operating expenses + loan repayments
    net_cash_flow: float
    tax_benefit: float
    after_tax_cash_flow: float

    @property
    def monthly_net_cash_flow(self) -> float:
        return self.net_cash_flow / 12

    @property
    def monthly_after_tax_cash_flow(self) -> float:
        return self.after_tax_cash_flow / 12


def holding_costs(inputs: InvestmentInputs, costs: CostBreakdown) -> Dict[str, float]:
    """Annual holding costs, with investor overrides applied over the estimates."""
    recurring = costs.recurring_annual_costs

    def _pick(override, key):
        return float(override) if override is not None else recurring[key]

    return {
        "council_rates": _pick(inputs.annual_council_rates, "council_rates"),
        "insurance": _pick(inputs.annual_insurance, "insurance"),
        "maintenance": _pick(inputs.annual_maintenance, "maintenance"),
        "land_tax": recurring["land_tax"],
        "land_tax_surcharge": recurring["land_tax_surcharge"],
        "vacancy_fee": recurring["vacancy_fee"],
        "strata_fees": inputs.annual_strata_fees,
    }


def gross_annual_rent(inputs: InvestmentInputs, year: int = 1) -> float:
    """Annual rent before vacancy, grown to the given year."""
    growth = (1 + inputs.rent_growth_rate / 100) ** (year - 1)
    return inputs.weekly_rent * WEEKS_PER_YEAR * growth


def management_fees(inputs: InvestmentInputs, rental_income: float, year: int = 1) -> float:
    """Property management plus letting fees, zero when self-managed."""
    if inputs.self_managed:
        return 0.0
    weekly_rent = gross_annual_rent(inputs, year) / WEEKS_PER_YEAR
    return rental_income * inputs.property_management_fee / 100 + weekly_rent * inputs.letting_fee_weeks


def project_property_value(property_value: float, growth_rate: float, years: int) -> float:
    """Compound the property value forward by whole years."""
    return property_value * (1 + growth_rate / 100) ** years


def _loan_row(loan_schedule: Sequence[LoanYear], year: int) -> LoanYear:
    if year <= len(loan_schedule):
        return loan_schedule[year - 1]
    return LoanYear(year, 0.0, 0.0, 0.0, 0.0, 0.0)


def project_cash_flows(
    inputs: InvestmentInputs,
    property_value: float,
    costs: CostBreakdown,
    loan_schedule: Sequence[LoanYear],
    inflation_rate: float,
    depreciation: float,
    total_cash_invested: float,
) -> Tuple[YearlyProjection, ...]:
    """Project rental cash flows over the hold period.

    Rent grows at the rent growth rate and is reduced by vacancy. Holding
    costs and strata grow with inflation. Negative cash flow earns a tax
    benefit at the marginal rate; positive cash flow earns the depreciation
    tax shield.

    Args:
        inputs: Investment assumptions.
        property_value: Purchase price.
        costs: Cost breakdown for the purchase.
        loan_schedule: Amortization rows (missing years mean no loan).
        inflation_rate: Annual cost inflation in percent.
        depreciation: Annual depreciation deduction.
        total_cash_invested: Deposit plus upfront costs.

    Returns:
        Tuple of YearlyProjection, one per hold year.
    """
    logger.debug("Projecting %d years of cash flow", inputs.hold_period)
    base_holding = sum(holding_costs(inputs, costs).values())
    mtr = inputs.marginal_tax_rate / 100

    projections = []
    cumulative = 0.0
    for year in range(1, inputs.hold_period + 1):
        rental_income = gross_annual_rent(inputs, year) * (1 - inputs.vacancy_rate / 100)
        trace("cashflow.rental_income", rental_income, {
            "inputs.weekly_rent": inputs.weekly_rent,
            "inputs.rent_growth_rate": inputs.rent_growth_rate,
            "inputs.vacancy_rate": inputs.vacancy_rate,
        }, period=year)

        inflation = (1 + inflation_rate / 100) ** (year - 1)
        operating = management_fees(inputs, rental_income, year) + base_holding * inflation
        trace("cashflow.operating_expenses", operating, {
            "cashflow.rental_income": rental_income,
            "costs.total_annual": base_holding,
            "benchmarks.inflation_rate": inflation_rate,
        }, period=year)

        loan = _loan_row(loan_schedule, year)
        net = trace("cashflow.net_cash_flow", rental_income - operating - loan.repayment, {
            "cashflow.rental_income": rental_income,
            "cashflow.operating_expenses": operating,
            "debt.annual_interest": loan.interest,
        }, period=year)

        benefit = -net * mtr if net < 0 else depreciation * mtr
        trace("tax.tax_benefit", benefit, {
            "cashflow.net_cash_flow": net,
            "tax.depreciation": depreciation,
            "inputs.marginal_tax_rate": inputs.marginal_tax_rate,
        }, period=year)
        after_tax = trace("cashflow.after_tax_cash_flow", net + benefit, {
            "cashflow.net_cash_flow": net,
            "tax.tax_benefit": benefit,
        }, period=year)
        cumulative += after_tax

        value = project_property_value(property_value, inputs.capital_growth_rate, year)
        balance = loan.closing_balance
        equity = value - balance

        projections.append(YearlyProjection(
            year=year,
            property_value=value,
            loan_balance=balance,
            equity=equity,
            rental_income=rental_income,
            expenses=operating + loan.interest,
            loan_repayment=loan.repayment,
            net_cash_flow=net,
            tax_benefit=benefit,
            after_tax_cash_flow=after_tax,
            cumulative_cash_flow=cumulative,
            cumulative_return=equity - total_cash_invested + cumulative,
            interest=loan.interest,
            operating_expenses=operating,
        ))

    return tuple(projections)


def summarize_first_year(
    inputs: InvestmentInputs,
    costs: CostBreakdown,
    first_year: YearlyProjection,
) -> AnnualCashFlow:
    """Break the first projected year into line items."""
    holding = holding_costs(inputs, costs)
    gross = gross_annual_rent(inputs)
    return AnnualCashFlow(
        rental_income=gross,
        vacancy_cost=gross - first_year.rental_income,
        effective_income=first_year.rental_income,
        loan_repayments=first_year.loan_repayment,
        property_management=management_fees(inputs, first_year.rental_income),
        council_rates=holding["council_rates"],
        insurance=holding["insurance"],
        maintenance=holding["maintenance"],
        land_tax=holding["land_tax"] + holding["land_tax_surcharge"],
        strata_fees=holding["strata_fees"],
        other_expenses=holding["vacancy_fee"],
        total_expenses=first_year.operating_expenses + first_year.loan_repayment,
        net_cash_flow=first_year.net_cash_flow,
        tax_benefit=first_year.tax_benefit,
        after_tax_cash_flow=first_year.after_tax_cash_flow,
    )


@dataclass(frozen=True)
class InvestmentProjection:
    """Loan schedule and cash flows for one set of assumptions."""

    loan_schedule: Tuple[LoanYear, ...]
    projections: Tuple[YearlyProjection, ...]
    depreciation: float
    total_cash_invested: float  # Deposit plus upfront costs


def total_cash_invested(property_value: float, loan_amount: float, costs: CostBreakdown) -> float:
    """Deposit plus every upfront cost."""
    return property_value - loan_amount + costs.total_upfront_cost


def project_investment(
    purchase: PurchaseInputs,
    inputs: InvestmentInputs,
    costs: CostBreakdown,
    benchmarks: Benchmarks,
) -> InvestmentProjection:
    """Run the loan schedule and cash flow projection for one scenario.

    Args:
        purchase: Buyer and property details.
        inputs: Investment assumptions.
        costs: Cost breakdown for the purchase.
        benchmarks: Resolved benchmarks (inflation).

    Returns:
        InvestmentProjection.
    """
    property_value = purchase.property_value
    schedule = project_loan(
        inputs.loan_amount,
        inputs.interest_rate,
        inputs.loan_term,
        inputs.loan_type,
        inputs.interest_only_years,
        hold_years=inputs.hold_period,
    )
    depreciation = estimate_depreciation(
        property_value,
        purchase.property_type,
        inputs.building_age,
        is_income_producing=inputs.weekly_rent > 0,
    )
    invested = total_cash_invested(property_value, inputs.loan_amount, costs)
    projections = project_cash_flows(
        inputs,
        property_value,
        costs,
        schedule,
        benchmarks.inflation_rate,
        depreciation,
        invested,
    )
    return InvestmentProjection(
        loan_schedule=schedule,
        projections=projections,
        depreciation=depreciation,
        total_cash_invested=invested,
    )

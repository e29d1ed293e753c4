"""Loan amortization and loan metrics for the purchase loan."""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy_financial as npf

from ..errors import ComputationError
from ..models.lookups import LoanType
from .trace import trace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoanYear:
    """One year of the amortization schedule."""

    year: int
    opening_balance: float
    interest: float
    principal: float
    closing_balance: float
    repayment: float  # interest + principal


@dataclass(frozen=True)
class LoanMetrics:
    """Summary of the loan over the hold period."""

    lvr: float  # Loan to value ratio (%)
    initial_loan_amount: float
    monthly_repayment: float  # First-year scheduled payment
    annual_repayment: float  # First-year total
    total_interest_paid: float
    total_principal_paid: float
    loan_balance_at_end: float
    equity_at_start: float
    equity_at_end: float
    equity_gain: float


def calculate_monthly_payment(
    principal: float,
    annual_rate: float,
    months: int,
) -> float:
    """Calculate the monthly principal and interest payment.

    Args:
        principal: Amount borrowed.
        annual_rate: Annual interest rate in percent (6.5 = 6.5%).
        months: Number of monthly payments.

    Returns:
        Monthly payment (positive).

    Example:
        >>> round(calculate_monthly_payment(400_000, 6.0, 360), 2)
        2398.2
    """
    if principal <= 0 or months <= 0:
        return 0.0
    monthly_rate = annual_rate / 100 / 12
    if monthly_rate == 0:
        return principal / months
    return float(-npf.pmt(rate=monthly_rate, nper=months, pv=principal, fv=0))


def calculate_interest_only_payment(principal: float, annual_rate: float) -> float:
    """Monthly payment during an interest-only period."""
    return principal * annual_rate / 100 / 12


def calculate_lvr(loan_amount: float, property_value: float) -> float:
    """Loan to value ratio in percent."""
    if property_value <= 0:
        return 0.0
    return loan_amount / property_value * 100


def project_loan(
    loan_amount: float,
    interest_rate: float,
    term_years: int,
    loan_type: LoanType = LoanType.PRINCIPAL_AND_INTEREST,
    interest_only_years: int = 0,
    hold_years: Optional[int] = None,
) -> Tuple[LoanYear, ...]:
    """Simulate the loan month by month and aggregate it into years.

    Interest accrues monthly on the opening balance. Principal and interest
    loans pay the annuity amount from the first month. Interest-only loans pay
    interest only for ``interest_only_years`` (the whole term when zero),
    then amortize the full balance over the remaining term. The final
    scheduled month clears whatever balance remains, so the balance is
    exactly zero at the end of the term.

    Args:
        loan_amount: Amount borrowed.
        interest_rate: Annual interest rate in percent.
        term_years: Loan term in years.
        loan_type: Repayment structure.
        interest_only_years: Interest-only period for interest-only loans.
        hold_years: Number of yearly rows to emit (defaults to the term).
            Years past the end of the loan carry zero balance and payments.

    Returns:
        Tuple of LoanYear, one per year.

    Raises:
        ComputationError: If the amount or term is negative, or a positive
            amount has no term to repay it over.
    """
    if loan_amount < 0:
        raise ComputationError(f"loan_amount must be non-negative, got {loan_amount}")
    if term_years < 0:
        raise ComputationError(f"term_years must be non-negative, got {term_years}")
    if loan_amount > 0 and term_years == 0:
        raise ComputationError("A loan needs a term of at least one year")
    if interest_only_years < 0:
        raise ComputationError(f"interest_only_years must be non-negative, got {interest_only_years}")

    rows_to_emit = term_years if hold_years is None else hold_years
    if rows_to_emit < 0:
        raise ComputationError(f"hold_years must be non-negative, got {hold_years}")

    term_months = term_years * 12
    if loan_type == LoanType.INTEREST_ONLY:
        io_years = interest_only_years if interest_only_years > 0 else term_years
        io_months = min(io_years * 12, term_months)
    else:
        io_months = 0

    monthly_rate = interest_rate / 100 / 12
    # Balance is unchanged through the IO period, so the amortizing payment is fixed
    amortizing_payment = calculate_monthly_payment(loan_amount, interest_rate, term_months - io_months)
    logger.debug(
        "Projecting loan %.0f at %.2f%% over %d years (%d IO months)",
        loan_amount, interest_rate, term_years, io_months,
    )

    balance = float(loan_amount)
    schedule = []
    for year in range(1, rows_to_emit + 1):
        opening = balance
        year_interest = 0.0
        year_principal = 0.0

        for month_in_year in range(12):
            month = (year - 1) * 12 + month_in_year + 1
            if balance <= 0 or month > term_months:
                break

            interest = balance * monthly_rate
            if month == term_months:
                principal = balance
            elif month <= io_months:
                principal = 0.0
            else:
                principal = min(amortizing_payment - interest, balance)

            year_interest += interest
            year_principal += principal
            balance = 0.0 if month == term_months else balance - principal

        schedule.append(LoanYear(
            year=year,
            opening_balance=opening,
            interest=year_interest,
            principal=year_principal,
            closing_balance=balance,
            repayment=year_interest + year_principal,
        ))
        trace("debt.annual_interest", year_interest, {
            "inputs.loan_amount": loan_amount,
            "inputs.interest_rate": interest_rate,
        }, period=year)

    return tuple(schedule)


def summarize_loan(
    schedule: Sequence[LoanYear],
    loan_amount: float,
    interest_rate: float,
    term_years: int,
    loan_type: LoanType,
    property_value: float,
    final_property_value: float,
) -> LoanMetrics:
    """Aggregate an amortization schedule into loan metrics.

    Args:
        schedule: Output of :func:`project_loan` over the hold period.
        loan_amount: Amount borrowed.
        interest_rate: Annual interest rate in percent.
        term_years: Loan term in years.
        loan_type: Repayment structure.
        property_value: Purchase price.
        final_property_value: Projected value at the end of the hold.

    Returns:
        LoanMetrics.
    """
    if loan_type == LoanType.INTEREST_ONLY:
        monthly = calculate_interest_only_payment(loan_amount, interest_rate)
    else:
        monthly = calculate_monthly_payment(loan_amount, interest_rate, term_years * 12)
    trace("debt.monthly_payment", monthly, {
        "inputs.loan_amount": loan_amount,
        "inputs.interest_rate": interest_rate,
    })

    lvr = trace("debt.lvr", calculate_lvr(loan_amount, property_value), {
        "inputs.loan_amount": loan_amount,
        "inputs.property_value": property_value,
    })
    end_balance = schedule[-1].closing_balance if schedule else loan_amount
    equity_at_start = property_value - loan_amount
    equity_at_end = final_property_value - end_balance

    return LoanMetrics(
        lvr=lvr,
        initial_loan_amount=loan_amount,
        monthly_repayment=monthly,
        annual_repayment=schedule[0].repayment if schedule else 0.0,
        total_interest_paid=sum(row.interest for row in schedule),
        total_principal_paid=sum(row.principal for row in schedule),
        loan_balance_at_end=end_balance,
        equity_at_start=equity_at_start,
        equity_at_end=equity_at_end,
        equity_gain=equity_at_end - equity_at_start,
    )

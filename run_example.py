#!/usr/bin/env python3
"""Example script to run the FIRB engine on a few reference purchases."""

import logging
import sys
from datetime import date
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from firb_engine import (
    AustralianState,
    CitizenshipStatus,
    InvestmentInputs,
    PropertyType,
    PurchaseInputs,
    analyze,
)
from firb_engine.export import projections_to_dataframe, sensitivity_to_dataframes


def get_reference_purchase() -> PurchaseInputs:
    """Foreign national buying a $1.5M new dwelling in Sydney."""
    return PurchaseInputs(
        citizenship_status=CitizenshipStatus.FOREIGN_NATIONAL,
        property_type=PropertyType.NEW_DWELLING,
        property_value=1_500_000,
        state=AustralianState.NSW,
        deposit_percent=30.0,
        as_of=date(2026, 1, 15),
    )


def get_reference_investment() -> InvestmentInputs:
    return InvestmentInputs(
        weekly_rent=1_100,
        loan_amount=1_050_000,
        interest_rate=6.5,
        hold_period=10,
        capital_growth_rate=6.0,
        marginal_tax_rate=37.0,
    )


def print_eligibility(result):
    eligibility = result.eligibility
    print("ELIGIBILITY")
    print("-" * 60)
    print(f"  Can purchase:       {eligibility.can_purchase}")
    print(f"  Requires approval:  {eligibility.requires_approval}")
    if eligibility.approval_fee_tier is not None:
        print(f"  Application fee:    ${eligibility.approval_fee_tier:,.0f}")
    if eligibility.reason_for_denial is not None:
        print(f"  Denied:             {eligibility.reason_for_denial.value}")
    for condition in eligibility.conditions:
        print(f"    - {condition}")
    print()


def print_costs(result):
    costs = result.costs
    print("COSTS")
    print("-" * 60)
    for name, value in costs.one_time_costs.items():
        print(f"  {name:<22} ${value:>12,.0f}")
    print(f"  {'Total upfront':<22} ${costs.total_upfront_cost:>12,.0f}")
    print()
    for name, value in costs.recurring_annual_costs.items():
        print(f"  {name:<22} ${value:>12,.0f} / yr")
    print(f"  {'Total annual':<22} ${costs.total_annual_cost:>12,.0f} / yr")
    print()


def print_investment(result):
    analytics = result.investment
    if analytics is None:
        print("Investment analysis skipped: purchase is not permitted.")
        return

    print("INVESTMENT")
    print("-" * 60)
    print(f"  Gross yield:        {analytics.rental_yield.gross:.2f}%")
    print(f"  Net yield:          {analytics.rental_yield.net:.2f}%")
    print(f"  Cash invested:      ${analytics.total_cash_invested:,.0f}")
    print(f"  Year 1 after tax:   ${analytics.cash_flow.after_tax_cash_flow:,.0f}")
    print(f"  Total ROI:          {analytics.roi.total_roi:.1f}%")
    if analytics.equity_irr is not None:
        print(f"  Equity IRR:         {analytics.equity_irr:.2f}%")
    print(f"  CGT on exit:        ${analytics.tax_analysis.cgt_on_exit.cgt_amount:,.0f}")
    print(f"  Score:              {analytics.score.overall}/10 ({analytics.score.verdict.value})")
    print()
    print(analytics.recommendation.description)
    print()

    df = projections_to_dataframe(analytics.yearly_projections)
    columns = ["property_value", "loan_balance", "equity", "net_cash_flow", "after_tax_cash_flow"]
    print(df[columns].round(0).to_string())
    print()

    for name, table in sensitivity_to_dataframes(analytics.sensitivity).items():
        print(f"Sensitivity: {name}")
        print(table.round(2).to_string(index=False))
        print()

    print(analytics.trace_context.summary())


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("\n" + "=" * 60)
    print("FIRB CALCULATOR")
    print("=" * 60 + "\n")

    purchase = get_reference_purchase()
    result = analyze(purchase, get_reference_investment())
    print_eligibility(result)
    print_costs(result)
    print_investment(result)

    print("=" * 60)
    print("Established dwelling, foreign national")
    print("=" * 60 + "\n")
    denied = analyze(PurchaseInputs(
        citizenship_status=CitizenshipStatus.FOREIGN_NATIONAL,
        property_type=PropertyType.ESTABLISHED_DWELLING,
        property_value=800_000,
        state=AustralianState.VIC,
    ))
    print_eligibility(denied)
    print_investment(denied)


if __name__ == "__main__":
    main()

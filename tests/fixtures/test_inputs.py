"""Reference purchases and investment assumptions used across the tests."""

from datetime import date

from firb_engine.models.benchmarks import Benchmarks
from firb_engine.models.inputs import InvestmentInputs, PurchaseInputs
from firb_engine.models.lookups import (
    AustralianState,
    CitizenshipStatus,
    PropertyType,
)


def get_foreign_new_dwelling_purchase() -> PurchaseInputs:
    """Foreign national buying a $1.5M new dwelling in NSW.

    These inputs should produce:
    - FIRB approval required, fee $30,300
    - Foreign purchaser surcharge $120,000 (8%)
    - Transfer duty $64,909
    """
    return PurchaseInputs(
        citizenship_status=CitizenshipStatus.FOREIGN_NATIONAL,
        property_type=PropertyType.NEW_DWELLING,
        property_value=1_500_000,
        state=AustralianState.NSW,
        deposit_percent=30.0,
    )


def get_foreign_established_purchase() -> PurchaseInputs:
    """Foreign national buying an $800k established dwelling in VIC (denied)."""
    return PurchaseInputs(
        citizenship_status=CitizenshipStatus.FOREIGN_NATIONAL,
        property_type=PropertyType.ESTABLISHED_DWELLING,
        property_value=800_000,
        state=AustralianState.VIC,
    )


def get_australian_purchase() -> PurchaseInputs:
    """Australian citizen buying a $750k established dwelling in QLD."""
    return PurchaseInputs(
        citizenship_status=CitizenshipStatus.AUSTRALIAN,
        property_type=PropertyType.ESTABLISHED_DWELLING,
        property_value=750_000,
        state=AustralianState.QLD,
    )


def get_temporary_resident_purchase() -> PurchaseInputs:
    """Temporary resident (482 visa) buying a $900k new dwelling in VIC."""
    return PurchaseInputs(
        citizenship_status=CitizenshipStatus.TEMPORARY_RESIDENT,
        property_type=PropertyType.NEW_DWELLING,
        property_value=900_000,
        state=AustralianState.VIC,
        visa_type="482",
        as_of=date(2026, 1, 15),
    )


def get_investment_inputs(loan_amount: float = 1_050_000) -> InvestmentInputs:
    """Investment assumptions matching the foreign new dwelling purchase.

    Rent of $1,100 a week is roughly a 3.8% gross yield on $1.5M.
    """
    return InvestmentInputs(
        weekly_rent=1_100,
        vacancy_rate=5.0,
        rent_growth_rate=3.0,
        property_management_fee=8.0,
        letting_fee_weeks=2.0,
        loan_amount=loan_amount,
        interest_rate=6.5,
        loan_term=30,
        hold_period=10,
        capital_growth_rate=6.0,
        marginal_tax_rate=37.0,
        selling_costs=4.0,
    )


def get_default_benchmarks() -> Benchmarks:
    return Benchmarks()

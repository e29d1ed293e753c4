"""Rental tax deductions, depreciation estimates and capital gains tax on exit."""

from dataclasses import dataclass
from typing import Optional

from ..models.lookups import CitizenshipStatus, PropertyType, PROPERTY_TYPE_RULES
from .trace import trace

# Depreciation policy assumptions
BUILDING_SHARE = 0.70  # Share of price attributed to the building
CAPITAL_WORKS_RATE = 0.025  # 2.5% a year over 40 years
CAPITAL_WORKS_LIFE_YEARS = 40
PLANT_SHARE = 0.10  # Share of price attributed to fixtures
PLANT_RATE = 0.20  # Diminishing value rate
PLANT_ELIGIBLE_AGE_YEARS = 5
PLANT_DECAY_PER_YEAR = 0.2

CGT_DISCOUNT = 0.5
CGT_DISCOUNT_MIN_HOLD_YEARS = 1
FOREIGN_WITHHOLDING_THRESHOLD = 750_000.0


@dataclass(frozen=True)
class TaxResidency:
    """Australian tax residency of a buyer."""

    is_australian_tax_resident: bool
    explanation: str


@dataclass(frozen=True)
class TaxDeductions:
    """Annual deductible expenses of a rental property."""

    loan_interest: float
    council_rates: float
    land_tax: float
    land_tax_surcharge: float
    property_management: float
    maintenance: float
    insurance: float
    strata_fees: float
    depreciation: float

    @property
    def total(self) -> float:
        return (
            self.loan_interest
            + self.council_rates
            + self.land_tax
            + self.land_tax_surcharge
            + self.property_management
            + self.maintenance
            + self.insurance
            + self.strata_fees
            + self.depreciation
        )


@dataclass(frozen=True)
class CGTResult:
    """Capital gains tax position on sale at the end of the hold."""

    sale_price: float
    original_purchase_price: float
    purchase_costs: float
    improvement_costs: float
    selling_costs: float
    cost_base: float
    capital_gain: float
    capital_loss: float
    discount_applied: bool
    cgt_rate: float  # Effective rate on the gain (%)
    cgt_amount: float
    withholding_tax: float  # Foreign resident withholding, credited on assessment
    net_proceeds_after_tax: float


def estimate_depreciation(
    property_value: float,
    property_type: PropertyType,
    building_age: Optional[int] = None,
    is_income_producing: bool = True,
) -> float:
    """Estimate annual depreciation deductions.

    Capital works are claimed on the building share while the building is
    younger than its 40 year life. Plant and equipment are claimed only on
    new dwellings younger than five years, tapering with age.

    Args:
        property_value: Purchase price used as the cost basis.
        property_type: Property category.
        building_age: Age in years (defaults by property type).
        is_income_producing: Depreciation is only claimable on rentals.

    Returns:
        Annual depreciation in dollars.
    """
    rules = PROPERTY_TYPE_RULES[property_type]
    if not is_income_producing or not rules.capital_works_eligible:
        return 0.0

    age = rules.default_building_age if building_age is None else building_age
    depreciation = 0.0
    if age < CAPITAL_WORKS_LIFE_YEARS:
        depreciation += property_value * BUILDING_SHARE * CAPITAL_WORKS_RATE
    if rules.plant_equipment_eligible and age < PLANT_ELIGIBLE_AGE_YEARS:
        depreciation += property_value * PLANT_SHARE * PLANT_RATE * (1 - PLANT_DECAY_PER_YEAR * age)

    return trace("tax.depreciation", depreciation, {"inputs.property_value": property_value})


def calculate_deductions(
    loan_interest: float,
    council_rates: float,
    land_tax: float,
    land_tax_surcharge: float,
    property_management: float,
    maintenance: float,
    insurance: float,
    strata_fees: float,
    depreciation: float,
) -> TaxDeductions:
    """Collect one year's deductible expenses."""
    return TaxDeductions(
        loan_interest=loan_interest,
        council_rates=council_rates,
        land_tax=land_tax,
        land_tax_surcharge=land_tax_surcharge,
        property_management=property_management,
        maintenance=maintenance,
        insurance=insurance,
        strata_fees=strata_fees,
        depreciation=depreciation,
    )


def calculate_tax_benefit(
    total_deductions: float,
    rental_income: float,
    marginal_tax_rate: float,
) -> float:
    """Tax saved by offsetting a net rental loss against other income.

    Args:
        total_deductions: Deductible expenses for the year.
        rental_income: Assessable rental income for the year.
        marginal_tax_rate: Marginal rate in percent.

    Returns:
        Tax benefit, zero when the property is positively geared.
    """
    return max(0.0, total_deductions - rental_income) * marginal_tax_rate / 100


def determine_tax_residency(
    citizenship_status: CitizenshipStatus,
    is_ordinarily_resident: Optional[bool] = None,
) -> TaxResidency:
    """Classify a buyer as an Australian or foreign tax resident.

    Citizens and permanent residents are residents unless explicitly not
    ordinarily resident. Temporary residents and foreign nationals are
    treated as foreign residents.
    """
    if citizenship_status == CitizenshipStatus.AUSTRALIAN:
        if is_ordinarily_resident is False:
            return TaxResidency(False, "Australian citizen not ordinarily resident (foreign tax resident)")
        return TaxResidency(True, "Australian citizen ordinarily resident in Australia")

    if citizenship_status == CitizenshipStatus.PERMANENT_RESIDENT:
        if is_ordinarily_resident is False:
            return TaxResidency(False, "Permanent resident not ordinarily resident (foreign tax resident)")
        return TaxResidency(True, "Permanent resident ordinarily resident in Australia")

    if citizenship_status == CitizenshipStatus.TEMPORARY_RESIDENT:
        return TaxResidency(False, "Temporary resident (treated as foreign tax resident)")

    return TaxResidency(False, "Foreign person (foreign tax resident)")


def calculate_cgt(
    sale_price: float,
    purchase_price: float,
    purchase_costs: float,
    selling_costs_percent: float,
    is_australian_tax_resident: bool,
    marginal_tax_rate: float,
    hold_years: int,
    capital_improvements: float = 0.0,
    withholding_rate: float = 12.5,
) -> CGTResult:
    """Calculate capital gains tax on sale.

    Cost base is the purchase price plus purchase costs and capital
    improvements. Selling costs reduce the sale proceeds. Australian tax
    residents holding for at least a year get the 50% discount. Foreign
    residents selling at or above $750,000 have a share of the price
    withheld at settlement, reported separately from the CGT itself.

    Args:
        sale_price: Gross sale price.
        purchase_price: Original purchase price.
        purchase_costs: Duty, surcharge, legal and FIRB fees paid on purchase.
        selling_costs_percent: Agent and legal costs as % of sale price.
        is_australian_tax_resident: Tax residency at sale.
        marginal_tax_rate: Marginal rate in percent.
        hold_years: Years held.
        capital_improvements: Capital spent on improvements.
        withholding_rate: Foreign resident withholding rate in percent.

    Returns:
        CGTResult, never with a negative tax amount.
    """
    selling_costs = sale_price * selling_costs_percent / 100
    net_sale = sale_price - selling_costs
    cost_base = purchase_price + purchase_costs + capital_improvements

    difference = net_sale - cost_base
    capital_gain = trace("tax.capital_gain", max(0.0, difference), {
        "inputs.selling_costs": selling_costs_percent,
    })
    capital_loss = max(0.0, -difference)

    discount_applied = is_australian_tax_resident and hold_years >= CGT_DISCOUNT_MIN_HOLD_YEARS
    discount = CGT_DISCOUNT if discount_applied else 1.0
    cgt_rate = marginal_tax_rate * discount
    cgt_amount = trace("tax.cgt", capital_gain * cgt_rate / 100, {
        "tax.capital_gain": capital_gain,
        "inputs.marginal_tax_rate": marginal_tax_rate,
    })

    withholding = 0.0
    if not is_australian_tax_resident and sale_price >= FOREIGN_WITHHOLDING_THRESHOLD:
        withholding = sale_price * withholding_rate / 100

    return CGTResult(
        sale_price=sale_price,
        original_purchase_price=purchase_price,
        purchase_costs=purchase_costs,
        improvement_costs=capital_improvements,
        selling_costs=selling_costs,
        cost_base=cost_base,
        capital_gain=capital_gain,
        capital_loss=capital_loss,
        discount_applied=discount_applied,
        cgt_rate=cgt_rate,
        cgt_amount=cgt_amount,
        withholding_tax=withholding,
        net_proceeds_after_tax=net_sale - cgt_amount,
    )

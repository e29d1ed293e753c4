"""One-time and recurring cost calculations for a property purchase."""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from ..models.benchmarks import Benchmarks
from ..models.inputs import PurchaseInputs
from ..models.lookups import (
    AustralianState,
    CitizenshipStatus,
    EntityType,
    PropertyType,
    PROPERTY_TYPE_RULES,
    VACANCY_DAYS_THRESHOLD,
    EXPEDITED_FEE_MULTIPLIER,
    effective_status,
    get_approval_fee,
    get_citizenship_rules,
    get_state_rules,
)
from .trace import trace

logger = logging.getLogger(__name__)

# Land value approximated as a share of the property value
LAND_VALUE_SHARE = 0.30

LEGAL_FEE_BASE = 1_500.0
LEGAL_FEE_RATE = 0.001
LEGAL_FEE_CAP = 5_000.0

LOAN_APPLICATION_FEE = 600.0
LOAN_VALUATION_FEE = 300.0

INSURANCE_BASE = 1_200.0
INSURANCE_CAP = 3_000.0

ONE_TIME_COST_KEYS = (
    "approval_fee",
    "transfer_duty",
    "surcharge",
    "legal_fees",
    "inspection_fees",
    "loan_costs",
)
RECURRING_COST_KEYS = (
    "council_rates",
    "insurance",
    "maintenance",
    "land_tax",
    "land_tax_surcharge",
    "vacancy_fee",
)


@dataclass(frozen=True)
class CostBreakdown:
    """One-time and recurring costs of a purchase.

    Totals always equal the sums of their maps.
    """

    one_time_costs: Mapping[str, float]
    recurring_annual_costs: Mapping[str, float]
    total_upfront_cost: float
    total_annual_cost: float
    property_value: float
    loan_amount: float

    @property
    def total_acquisition_cost(self) -> float:
        """Purchase price plus every upfront cost."""
        return self.property_value + self.total_upfront_cost


def calculate_transfer_duty(
    property_value: float,
    state: AustralianState,
    first_home_concession: bool = False,
) -> float:
    """Calculate base transfer (stamp) duty from the state's bracket table.

    Args:
        property_value: Dutiable value.
        state: State or territory.
        first_home_concession: Apply the first home discount if the value is
            within the state's concession threshold.

    Returns:
        Duty in dollars.
    """
    rules = get_state_rules(state)
    duty = 0.0
    for bracket in rules.duty_brackets:
        if property_value <= bracket.upper:
            duty = bracket.base + (property_value - bracket.lower) * bracket.rate / 100
            break

    if first_home_concession and property_value <= rules.first_home_threshold:
        duty *= 1 - rules.first_home_discount

    return max(duty, 0.0)


def calculate_foreign_surcharge(
    property_value: float,
    state: AustralianState,
    citizenship_status: CitizenshipStatus,
    is_ordinarily_resident: Optional[bool] = None,
) -> float:
    """Foreign purchaser duty surcharge, zero for buyers who do not pay it."""
    if not get_citizenship_rules(citizenship_status, is_ordinarily_resident).pays_foreign_surcharge:
        return 0.0
    return property_value * get_state_rules(state).foreign_surcharge_pct / 100


def estimate_legal_fees(property_value: float) -> float:
    """Legal and conveyancing fees, capped."""
    return min(LEGAL_FEE_BASE + property_value * LEGAL_FEE_RATE, LEGAL_FEE_CAP)


def estimate_loan_costs(loan_amount: float, basis_points: float) -> float:
    """Loan establishment costs: application, valuation and lender fees."""
    if loan_amount <= 0:
        return 0.0
    return LOAN_APPLICATION_FEE + LOAN_VALUATION_FEE + loan_amount * basis_points / 10_000


def calculate_land_tax(
    property_value: float,
    state: AustralianState,
) -> float:
    """Annual land tax at the state's base rate on the taxable land value."""
    rules = get_state_rules(state)
    taxable = property_value * LAND_VALUE_SHARE - rules.land_tax_threshold
    if taxable <= 0:
        return 0.0
    return taxable * rules.land_tax_rate / 100


def calculate_land_tax_surcharge(
    property_value: float,
    state: AustralianState,
) -> float:
    """Extra annual land tax charged to foreign owners in states that levy it."""
    rules = get_state_rules(state)
    if not rules.levies_land_tax_surcharge:
        return 0.0
    taxable = property_value * LAND_VALUE_SHARE - rules.land_tax_threshold
    if taxable <= 0:
        return 0.0
    return taxable * (rules.land_tax_foreign_rate - rules.land_tax_rate) / 100


def _estimate_insurance(property_value: float, property_type: PropertyType, benchmarks: Benchmarks) -> float:
    type_rules = PROPERTY_TYPE_RULES[property_type]
    if type_rules.fixed_insurance is not None:
        return float(type_rules.fixed_insurance)
    return min(INSURANCE_BASE + property_value * benchmarks.insurance_percent / 100, INSURANCE_CAP)


def _estimate_maintenance(property_value: float, property_type: PropertyType, benchmarks: Benchmarks) -> float:
    type_rules = PROPERTY_TYPE_RULES[property_type]
    if type_rules.fixed_maintenance is not None:
        return float(type_rules.fixed_maintenance)
    return property_value * benchmarks.maintenance_percent / 100 * type_rules.maintenance_multiplier


def calculate_costs(purchase: PurchaseInputs, benchmarks: Benchmarks) -> CostBreakdown:
    """Calculate the full one-time and recurring cost breakdown.

    Args:
        purchase: Buyer and property details.
        benchmarks: Resolved benchmark percentages.

    Returns:
        CostBreakdown with both cost maps and their totals.
    """
    value = purchase.property_value
    state = purchase.state
    property_type = purchase.property_type
    rules = get_citizenship_rules(purchase.citizenship_status, purchase.is_ordinarily_resident)
    type_rules = PROPERTY_TYPE_RULES[property_type]
    logger.debug(
        "Calculating costs: %s %s in %s at %.0f",
        purchase.citizenship_status.value, property_type.value, state.value, value,
    )

    # === One-time costs ===
    base_fee = get_approval_fee(value, property_type) if rules.requires_approval else 0.0
    approval_fee = base_fee * EXPEDITED_FEE_MULTIPLIER if purchase.expedited else base_fee
    trace("eligibility.approval_fee", approval_fee, {"inputs.property_value": value})

    status = effective_status(purchase.citizenship_status, purchase.is_ordinarily_resident)
    concession = (
        purchase.is_first_home
        and rules.first_home_eligible
        and status in (CitizenshipStatus.AUSTRALIAN, CitizenshipStatus.PERMANENT_RESIDENT)
        and purchase.entity_type == EntityType.INDIVIDUAL
    )
    transfer_duty = trace(
        "costs.transfer_duty",
        calculate_transfer_duty(value, state, concession),
        {"inputs.property_value": value},
        notes="First home concession applied" if concession else "",
    )
    surcharge = trace(
        "costs.surcharge",
        calculate_foreign_surcharge(value, state, purchase.citizenship_status, purchase.is_ordinarily_resident),
        {"inputs.property_value": value},
    )
    legal_fees = trace("costs.legal_fees", estimate_legal_fees(value), {"inputs.property_value": value})
    loan_amount = purchase.loan_amount
    loan_costs = trace(
        "costs.loan_costs",
        estimate_loan_costs(loan_amount, benchmarks.loan_cost_basis_points),
        {"inputs.loan_amount": loan_amount},
    )

    one_time = {
        "approval_fee": approval_fee,
        "transfer_duty": transfer_duty,
        "surcharge": surcharge,
        "legal_fees": legal_fees,
        "inspection_fees": float(type_rules.inspection_fee),
        "loan_costs": loan_costs,
    }

    # === Recurring annual costs ===
    council_rates = trace(
        "costs.council_rates",
        value * benchmarks.council_rate_percent / 100,
        {"inputs.property_value": value, "benchmarks.council_rate_percent": benchmarks.council_rate_percent},
    )
    land_tax = trace("costs.land_tax", calculate_land_tax(value, state), {"inputs.property_value": value})

    land_tax_surcharge = 0.0
    if rules.pays_land_tax_surcharge and type_rules.residential:
        land_tax_surcharge = calculate_land_tax_surcharge(value, state)
    trace("costs.land_tax_surcharge", land_tax_surcharge, {"inputs.property_value": value})

    vacancy_fee = 0.0
    if (
        rules.requires_approval
        and type_rules.residential
        and purchase.days_vacant_per_year > VACANCY_DAYS_THRESHOLD
    ):
        vacancy_fee = base_fee
    trace("costs.vacancy_fee", vacancy_fee, {"eligibility.approval_fee": base_fee})

    recurring = {
        "council_rates": council_rates,
        "insurance": _estimate_insurance(value, property_type, benchmarks),
        "maintenance": _estimate_maintenance(value, property_type, benchmarks),
        "land_tax": land_tax,
        "land_tax_surcharge": land_tax_surcharge,
        "vacancy_fee": vacancy_fee,
    }

    total_upfront = trace("costs.total_upfront", sum(one_time.values()), {
        "eligibility.approval_fee": approval_fee,
        "costs.transfer_duty": transfer_duty,
        "costs.surcharge": surcharge,
        "costs.legal_fees": legal_fees,
        "costs.loan_costs": loan_costs,
    })
    total_annual = trace("costs.total_annual", sum(recurring.values()), {
        "costs.council_rates": council_rates,
        "costs.land_tax": land_tax,
        "costs.land_tax_surcharge": land_tax_surcharge,
        "costs.vacancy_fee": vacancy_fee,
    })

    return CostBreakdown(
        one_time_costs=MappingProxyType(one_time),
        recurring_annual_costs=MappingProxyType(recurring),
        total_upfront_cost=total_upfront,
        total_annual_cost=total_annual,
        property_value=value,
        loan_amount=loan_amount,
    )

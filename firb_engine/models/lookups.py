"""Lookup tables for states, citizenship statuses, property types and FIRB fees.

Every per-state and per-status rule is held as a record keyed by its enum so
the calculation modules never branch on state or status names directly.
"""

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple


class CitizenshipStatus(str, Enum):
    """Buyer residency status, which selects the eligibility and surcharge rules."""

    AUSTRALIAN = "australian"
    PERMANENT_RESIDENT = "permanent-resident"
    TEMPORARY_RESIDENT = "temporary-resident"
    FOREIGN_NATIONAL = "foreign-national"


class PropertyType(str, Enum):
    """Property category as assessed by FIRB."""

    NEW_DWELLING = "new-dwelling"
    ESTABLISHED_DWELLING = "established-dwelling"
    VACANT_LAND = "vacant-land"
    COMMERCIAL = "commercial"


class AustralianState(str, Enum):
    """State or territory in which the property sits."""

    NSW = "NSW"
    VIC = "VIC"
    QLD = "QLD"
    SA = "SA"
    WA = "WA"
    TAS = "TAS"
    ACT = "ACT"
    NT = "NT"


class EntityType(str, Enum):
    """Legal entity making the purchase."""

    INDIVIDUAL = "individual"
    COMPANY = "company"
    TRUST = "trust"


class LoanType(str, Enum):
    """Repayment structure of the purchase loan."""

    PRINCIPAL_AND_INTEREST = "principal-and-interest"
    INTEREST_ONLY = "interest-only"


class DenialReason(str, Enum):
    """Reason code attached to an eligibility denial."""

    ESTABLISHED_DWELLING_PROHIBITED = "established-dwelling-prohibited"
    ESTABLISHED_FOR_INVESTMENT = "established-dwelling-for-investment"
    TEMPORARY_BAN = "temporary-ban-on-established-dwellings"
    MISSING_VISA_TYPE = "missing-visa-type"
    UNKNOWN_VISA_TYPE = "unknown-visa-type"
    INVALID_PROPERTY_VALUE = "invalid-property-value"
    INVALID_CITIZENSHIP_STATUS = "invalid-citizenship-status"
    INVALID_PROPERTY_TYPE = "invalid-property-type"


@dataclass(frozen=True)
class DutyBracket:
    """One row of a progressive transfer duty schedule.

    Duty for a value falling in this bracket is
    ``base + (value - lower) * rate / 100``.
    """

    upper: float  # Inclusive upper bound of the bracket
    rate: float  # Marginal rate (%) above ``lower``
    base: float  # Duty payable at ``lower``
    lower: float = 0.0


@dataclass(frozen=True)
class StateRules:
    """Numeric duty and tax rules for one state or territory."""

    duty_brackets: Tuple[DutyBracket, ...]
    foreign_surcharge_pct: float  # Foreign purchaser duty surcharge (% of value)
    land_tax_threshold: float  # Land value below which no land tax is payable
    land_tax_rate: float  # Base land tax rate (%) above the threshold
    land_tax_foreign_rate: float  # Rate (%) charged to foreign owners
    gross_yield_benchmark: float  # Typical gross rental yield (%) in the state
    first_home_threshold: float = 600_000.0  # Max value for the concession
    first_home_discount: float = 0.5  # Share of duty waived for first home buyers

    @property
    def levies_land_tax_surcharge(self) -> bool:
        """Whether foreign owners pay more land tax than residents."""
        return self.land_tax_foreign_rate > self.land_tax_rate


# Stamp duty schedules and surcharges, state revenue offices (verified Oct 2025).
# VIC and NT apply a flat rate to the whole value in their middle bands,
# expressed here as a bracket with lower=0.
STATE_RULES: Dict[AustralianState, StateRules] = {
    AustralianState.NSW: StateRules(
        duty_brackets=(
            DutyBracket(upper=17_000, rate=1.25, base=0, lower=0),
            DutyBracket(upper=36_000, rate=1.5, base=212, lower=17_000),
            DutyBracket(upper=97_000, rate=1.75, base=497, lower=36_000),
            DutyBracket(upper=364_000, rate=3.5, base=1_564, lower=97_000),
            DutyBracket(upper=1_212_000, rate=4.5, base=10_909, lower=364_000),
            DutyBracket(upper=math.inf, rate=5.5, base=49_069, lower=1_212_000),
        ),
        foreign_surcharge_pct=8.0,
        land_tax_threshold=1_075_000,
        land_tax_rate=1.6,
        land_tax_foreign_rate=5.0,
        gross_yield_benchmark=3.2,
    ),
    AustralianState.VIC: StateRules(
        duty_brackets=(
            DutyBracket(upper=25_000, rate=1.4, base=0, lower=0),
            DutyBracket(upper=130_000, rate=2.4, base=350, lower=25_000),
            DutyBracket(upper=960_000, rate=6.0, base=2_870, lower=130_000),
            DutyBracket(upper=2_000_000, rate=5.5, base=0, lower=0),
            DutyBracket(upper=math.inf, rate=6.5, base=110_000, lower=2_000_000),
        ),
        foreign_surcharge_pct=8.0,
        land_tax_threshold=300_000,
        land_tax_rate=0.2,
        land_tax_foreign_rate=2.0,
        gross_yield_benchmark=3.4,
    ),
    AustralianState.QLD: StateRules(
        duty_brackets=(
            DutyBracket(upper=5_000, rate=0.0, base=0, lower=0),
            DutyBracket(upper=75_000, rate=1.5, base=0, lower=5_000),
            DutyBracket(upper=540_000, rate=3.5, base=1_050, lower=75_000),
            DutyBracket(upper=1_000_000, rate=4.5, base=17_325, lower=540_000),
            DutyBracket(upper=math.inf, rate=5.75, base=38_025, lower=1_000_000),
        ),
        foreign_surcharge_pct=7.0,
        land_tax_threshold=600_000,
        land_tax_rate=1.7,
        land_tax_foreign_rate=2.0,
        gross_yield_benchmark=4.5,
    ),
    AustralianState.SA: StateRules(
        duty_brackets=(
            DutyBracket(upper=12_000, rate=1.0, base=0, lower=0),
            DutyBracket(upper=30_000, rate=2.0, base=120, lower=12_000),
            DutyBracket(upper=50_000, rate=3.0, base=480, lower=30_000),
            DutyBracket(upper=100_000, rate=3.5, base=1_080, lower=50_000),
            DutyBracket(upper=200_000, rate=4.0, base=2_830, lower=100_000),
            DutyBracket(upper=250_000, rate=4.25, base=6_830, lower=200_000),
            DutyBracket(upper=300_000, rate=4.75, base=8_955, lower=250_000),
            DutyBracket(upper=math.inf, rate=5.0, base=11_330, lower=300_000),
        ),
        foreign_surcharge_pct=7.0,
        land_tax_threshold=482_000,
        land_tax_rate=0.5,
        land_tax_foreign_rate=0.5,  # No separate foreign rate
        gross_yield_benchmark=4.1,
    ),
    AustralianState.WA: StateRules(
        duty_brackets=(
            DutyBracket(upper=120_000, rate=1.9, base=0, lower=0),
            DutyBracket(upper=150_000, rate=2.85, base=2_280, lower=120_000),
            DutyBracket(upper=360_000, rate=3.8, base=3_135, lower=150_000),
            DutyBracket(upper=725_000, rate=4.75, base=11_115, lower=360_000),
            DutyBracket(upper=math.inf, rate=5.15, base=28_453, lower=725_000),
        ),
        foreign_surcharge_pct=7.0,
        land_tax_threshold=300_000,
        land_tax_rate=0.4,
        land_tax_foreign_rate=0.4,  # No separate foreign rate
        gross_yield_benchmark=4.2,
    ),
    AustralianState.TAS: StateRules(
        duty_brackets=(
            DutyBracket(upper=3_000, rate=0.0, base=50, lower=0),
            DutyBracket(upper=25_000, rate=1.75, base=50, lower=3_000),
            DutyBracket(upper=75_000, rate=2.25, base=435, lower=25_000),
            DutyBracket(upper=200_000, rate=3.5, base=1_560, lower=75_000),
            DutyBracket(upper=375_000, rate=4.0, base=5_935, lower=200_000),
            DutyBracket(upper=725_000, rate=4.25, base=12_935, lower=375_000),
            DutyBracket(upper=math.inf, rate=4.5, base=27_810, lower=725_000),
        ),
        foreign_surcharge_pct=8.0,
        land_tax_threshold=50_000,
        land_tax_rate=0.55,
        land_tax_foreign_rate=1.5,
        gross_yield_benchmark=4.8,
    ),
    AustralianState.ACT: StateRules(
        duty_brackets=(
            DutyBracket(upper=200_000, rate=0.0, base=20, lower=0),
            DutyBracket(upper=300_000, rate=2.2, base=2_400, lower=200_000),
            DutyBracket(upper=500_000, rate=3.4, base=4_600, lower=300_000),
            DutyBracket(upper=750_000, rate=4.32, base=11_400, lower=500_000),
            DutyBracket(upper=1_000_000, rate=5.9, base=22_200, lower=750_000),
            DutyBracket(upper=math.inf, rate=6.4, base=36_950, lower=1_000_000),
        ),
        foreign_surcharge_pct=4.0,
        land_tax_threshold=0,
        land_tax_rate=0.0,  # ACT rates investment land through a separate system
        land_tax_foreign_rate=0.0,
        gross_yield_benchmark=3.8,
    ),
    AustralianState.NT: StateRules(
        duty_brackets=(
            DutyBracket(upper=525_000, rate=0.0, base=0, lower=0),
            DutyBracket(upper=3_000_000, rate=4.95, base=0, lower=0),
            DutyBracket(upper=5_000_000, rate=5.75, base=122_513, lower=3_000_000),
            DutyBracket(upper=math.inf, rate=5.95, base=237_513, lower=5_000_000),
        ),
        foreign_surcharge_pct=0.0,
        land_tax_threshold=0,
        land_tax_rate=0.0,  # No land tax in NT
        land_tax_foreign_rate=0.0,
        gross_yield_benchmark=5.5,
    ),
}


@dataclass(frozen=True)
class CitizenshipRules:
    """FIRB and surcharge treatment for one citizenship status."""

    requires_approval: bool
    pays_foreign_surcharge: bool  # Foreign purchaser duty surcharge
    pays_land_tax_surcharge: bool  # Foreign owner land tax surcharge
    first_home_eligible: bool
    allowed_property_types: FrozenSet[PropertyType]
    processing_time: Optional[str] = None


_ALL_TYPES = frozenset(PropertyType)

CITIZENSHIP_RULES: Dict[CitizenshipStatus, CitizenshipRules] = {
    CitizenshipStatus.AUSTRALIAN: CitizenshipRules(
        requires_approval=False,
        pays_foreign_surcharge=False,
        pays_land_tax_surcharge=False,
        first_home_eligible=True,
        allowed_property_types=_ALL_TYPES,
    ),
    CitizenshipStatus.PERMANENT_RESIDENT: CitizenshipRules(
        requires_approval=False,
        pays_foreign_surcharge=False,
        pays_land_tax_surcharge=False,
        first_home_eligible=True,
        allowed_property_types=_ALL_TYPES,
    ),
    # Established dwellings are allowed only as a principal residence
    CitizenshipStatus.TEMPORARY_RESIDENT: CitizenshipRules(
        requires_approval=True,
        pays_foreign_surcharge=True,
        pays_land_tax_surcharge=False,
        first_home_eligible=False,
        allowed_property_types=_ALL_TYPES,
        processing_time="30 days",
    ),
    # Established dwellings are allowed only for redevelopment
    CitizenshipStatus.FOREIGN_NATIONAL: CitizenshipRules(
        requires_approval=True,
        pays_foreign_surcharge=True,
        pays_land_tax_surcharge=True,
        first_home_eligible=False,
        allowed_property_types=frozenset({
            PropertyType.NEW_DWELLING,
            PropertyType.VACANT_LAND,
            PropertyType.COMMERCIAL,
        }),
        processing_time="30 days",
    ),
}


@dataclass(frozen=True)
class PropertyTypeRules:
    """Cost and depreciation assumptions for one property type."""

    inspection_fee: float
    maintenance_multiplier: float = 1.0  # Applied to the maintenance benchmark
    fixed_insurance: Optional[float] = None  # Replaces the percentage estimate
    fixed_maintenance: Optional[float] = None  # Replaces the percentage estimate
    residential: bool = True
    default_building_age: int = 0
    capital_works_eligible: bool = True
    plant_equipment_eligible: bool = False


PROPERTY_TYPE_RULES: Dict[PropertyType, PropertyTypeRules] = {
    PropertyType.NEW_DWELLING: PropertyTypeRules(
        inspection_fee=500,
        plant_equipment_eligible=True,
    ),
    PropertyType.ESTABLISHED_DWELLING: PropertyTypeRules(
        inspection_fee=800,  # Building and pest
        maintenance_multiplier=1.5,
        default_building_age=10,
    ),
    PropertyType.VACANT_LAND: PropertyTypeRules(
        inspection_fee=300,  # Soil and environmental
        fixed_insurance=200,
        fixed_maintenance=500,
        capital_works_eligible=False,
    ),
    PropertyType.COMMERCIAL: PropertyTypeRules(
        inspection_fee=500,
        residential=False,
    ),
}


@dataclass(frozen=True)
class FeeTier:
    """FIRB application fee payable for values up to ``max_value``."""

    max_value: float
    fee: float


# FIRB application fees 1 July 2025 - 30 June 2026 (ATO)
APPROVAL_FEE_TIERS: Tuple[FeeTier, ...] = (
    FeeTier(75_000, 4_500),
    FeeTier(1_000_000, 15_100),
    FeeTier(2_000_000, 30_300),
    FeeTier(3_000_000, 60_600),
    FeeTier(4_000_000, 90_900),
    FeeTier(5_000_000, 121_200),
    FeeTier(6_000_000, 151_500),
    FeeTier(7_000_000, 181_800),
    FeeTier(8_000_000, 212_100),
    FeeTier(9_000_000, 242_400),
    FeeTier(10_000_000, 272_700),
)

ESTABLISHED_APPROVAL_FEE_TIERS: Tuple[FeeTier, ...] = (
    FeeTier(75_000, 13_500),
    FeeTier(1_000_000, 45_300),
    FeeTier(2_000_000, 90_900),
    FeeTier(3_000_000, 181_800),
    FeeTier(4_000_000, 272_700),
    FeeTier(5_000_000, 363_600),
    FeeTier(6_000_000, 454_500),
    FeeTier(7_000_000, 545_400),
    FeeTier(8_000_000, 636_300),
    FeeTier(9_000_000, 727_200),
    FeeTier(10_000_000, 818_100),
)

# Published maximum fees (properties over $40M)
APPROVAL_FEE_CAP = 1_205_200
ESTABLISHED_APPROVAL_FEE_CAP = 3_357_300

EXPEDITED_FEE_MULTIPLIER = 2

KNOWN_VISA_TYPES: FrozenSet[str] = frozenset({"485", "457", "482", "500", "820", "489", "other"})

# Temporary ban on foreign purchases of established dwellings
TEMPORARY_BAN_START = date(2025, 4, 1)
TEMPORARY_BAN_END = date(2027, 3, 31)

VACANCY_DAYS_THRESHOLD = 183
VACANT_LAND_CONSTRUCTION_YEARS = 4


def effective_status(
    status: CitizenshipStatus,
    is_ordinarily_resident: Optional[bool] = None,
) -> CitizenshipStatus:
    """Resolve the status whose rules apply to a buyer.

    Australian citizens who are explicitly not ordinarily resident are
    assessed as foreign nationals. Unknown residency defaults to resident.
    """
    if status == CitizenshipStatus.AUSTRALIAN and is_ordinarily_resident is False:
        return CitizenshipStatus.FOREIGN_NATIONAL
    return status


def get_citizenship_rules(
    status: CitizenshipStatus,
    is_ordinarily_resident: Optional[bool] = None,
) -> CitizenshipRules:
    """Get the rules record for a buyer after residency resolution."""
    return CITIZENSHIP_RULES[effective_status(status, is_ordinarily_resident)]


def get_state_rules(state: AustralianState) -> StateRules:
    """Get the duty and land tax record for a state.

    Raises:
        KeyError: If state is not an AustralianState.
    """
    return STATE_RULES[state]


def get_approval_fee(
    property_value: float,
    property_type: PropertyType = PropertyType.NEW_DWELLING,
) -> float:
    """Look up the FIRB application fee for a property value.

    Values above the last published breakpoint ($10M) add one tier step per
    additional part-million, up to the published maximum fee.

    Args:
        property_value: Purchase price.
        property_type: Established dwellings use the higher fee table.

    Returns:
        Fee in dollars.
    """
    if property_type == PropertyType.ESTABLISHED_DWELLING:
        tiers, cap = ESTABLISHED_APPROVAL_FEE_TIERS, ESTABLISHED_APPROVAL_FEE_CAP
    else:
        tiers, cap = APPROVAL_FEE_TIERS, APPROVAL_FEE_CAP

    for tier in tiers:
        if property_value <= tier.max_value:
            return float(tier.fee)

    top, previous = tiers[-1], tiers[-2]
    step = top.fee - previous.fee
    additional_millions = math.ceil((property_value - top.max_value) / 1_000_000)
    return float(min(top.fee + additional_millions * step, cap))


def is_temporary_ban_active(as_of: date) -> bool:
    """Whether the established-dwelling ban is in force on a date."""
    return TEMPORARY_BAN_START <= as_of <= TEMPORARY_BAN_END

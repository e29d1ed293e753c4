"""Input data model for purchase cost and investment calculations."""

from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

from ..errors import ValidationError
from .lookups import (
    AustralianState,
    CitizenshipStatus,
    EntityType,
    LoanType,
    PropertyType,
)

MAX_HOLD_YEARS = 50
MAX_LOAN_TERM_YEARS = 50


def _check_percent(name: str, value: float) -> None:
    if not 0 <= value <= 100:
        raise ValidationError(f"{name} must be between 0 and 100, got {value}")


def _check_non_negative(name: str, value: float) -> None:
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")


@dataclass(frozen=True)
class PurchaseInputs:
    """Buyer and property details for eligibility and cost calculations."""

    citizenship_status: CitizenshipStatus
    property_type: PropertyType
    property_value: float
    state: AustralianState
    visa_type: Optional[str] = None
    is_ordinarily_resident: Optional[bool] = None
    is_first_home: bool = False
    deposit_percent: float = 20.0
    entity_type: EntityType = EntityType.INDIVIDUAL
    expedited: bool = False  # Expedited FIRB processing (double fee)
    intends_to_occupy: bool = False  # Principal place of residence
    is_redevelopment: bool = False  # Established dwelling to be redeveloped
    days_vacant_per_year: int = 0
    as_of: Optional[date] = None  # Assessment date for time-limited policies

    def __post_init__(self) -> None:
        _check_non_negative("property_value", self.property_value)
        _check_percent("deposit_percent", self.deposit_percent)
        if not 0 <= self.days_vacant_per_year <= 366:
            raise ValidationError(
                f"days_vacant_per_year must be between 0 and 366, got {self.days_vacant_per_year}"
            )

    @property
    def loan_amount(self) -> float:
        """Loan implied by the deposit percentage."""
        return self.property_value * (1 - self.deposit_percent / 100)

    @property
    def deposit_amount(self) -> float:
        return self.property_value * self.deposit_percent / 100


@dataclass(frozen=True)
class InvestmentInputs:
    """Rental, financing, tax and exit assumptions for investment analytics.

    All rates are percentages (6.5 means 6.5%).
    """

    # === Rental ===
    weekly_rent: float
    vacancy_rate: float = 5.0
    rent_growth_rate: float = 3.0

    # === Management ===
    property_management_fee: float = 8.0  # % of collected rent
    letting_fee_weeks: float = 2.0  # Weeks of rent per year
    self_managed: bool = False

    # === Holding cost overrides (None = use the cost breakdown) ===
    annual_council_rates: Optional[float] = None
    annual_insurance: Optional[float] = None
    annual_maintenance: Optional[float] = None
    annual_strata_fees: float = 0.0

    # === Financing ===
    loan_amount: float = 0.0
    interest_rate: float = 6.5
    loan_term: int = 30
    loan_type: LoanType = LoanType.PRINCIPAL_AND_INTEREST
    interest_only_years: int = 0

    # === Strategy ===
    hold_period: int = 10
    capital_growth_rate: float = 6.0

    # === Tax ===
    marginal_tax_rate: float = 37.0
    building_age: Optional[int] = None  # None = property type default
    capital_improvements: float = 0.0

    # === Exit ===
    selling_costs: float = 4.0  # % of sale price
    cgt_withholding_rate: float = 12.5

    def __post_init__(self) -> None:
        if not 1 <= self.hold_period <= MAX_HOLD_YEARS:
            raise ValidationError(
                f"hold_period must be between 1 and {MAX_HOLD_YEARS} years, got {self.hold_period}"
            )
        if not 1 <= self.loan_term <= MAX_LOAN_TERM_YEARS:
            raise ValidationError(
                f"loan_term must be between 1 and {MAX_LOAN_TERM_YEARS} years, got {self.loan_term}"
            )
        if self.interest_only_years < 0:
            raise ValidationError("interest_only_years must be non-negative")

        for name in (
            "vacancy_rate",
            "rent_growth_rate",
            "property_management_fee",
            "interest_rate",
            "capital_growth_rate",
            "marginal_tax_rate",
            "selling_costs",
            "cgt_withholding_rate",
        ):
            _check_percent(name, getattr(self, name))

        for name in (
            "weekly_rent",
            "letting_fee_weeks",
            "annual_strata_fees",
            "loan_amount",
            "capital_improvements",
        ):
            _check_non_negative(name, getattr(self, name))

        for name in ("annual_council_rates", "annual_insurance", "annual_maintenance", "building_age"):
            value = getattr(self, name)
            if value is not None:
                _check_non_negative(name, value)

    def with_changes(self, **changes) -> "InvestmentInputs":
        """Copy with some fields replaced (re-validated)."""
        return replace(self, **changes)

    def validate_against(self, property_value: float) -> None:
        """Check invariants that depend on the property value.

        Raises:
            ValidationError: If the loan exceeds the property value.
        """
        if self.loan_amount > property_value:
            raise ValidationError(
                f"loan_amount {self.loan_amount:,.0f} exceeds property value {property_value:,.0f}"
            )

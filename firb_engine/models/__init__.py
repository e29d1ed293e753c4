"""Data models for the FIRB calculation engine."""

from .lookups import (
    CitizenshipStatus,
    PropertyType,
    AustralianState,
    EntityType,
    LoanType,
    DenialReason,
    DutyBracket,
    StateRules,
    CitizenshipRules,
    PropertyTypeRules,
    FeeTier,
    STATE_RULES,
    CITIZENSHIP_RULES,
    PROPERTY_TYPE_RULES,
    APPROVAL_FEE_TIERS,
    ESTABLISHED_APPROVAL_FEE_TIERS,
    effective_status,
    get_approval_fee,
    get_citizenship_rules,
    get_state_rules,
    is_temporary_ban_active,
)
from .benchmarks import (
    BenchmarkProvider,
    Benchmarks,
    DEFAULT_COST_BENCHMARKS,
    DEFAULT_MACRO_BENCHMARKS,
    collect_benchmarks,
)
from .inputs import (
    PurchaseInputs,
    InvestmentInputs,
    MAX_HOLD_YEARS,
)

__all__ = [
    "CitizenshipStatus",
    "PropertyType",
    "AustralianState",
    "EntityType",
    "LoanType",
    "DenialReason",
    "DutyBracket",
    "StateRules",
    "CitizenshipRules",
    "PropertyTypeRules",
    "FeeTier",
    "STATE_RULES",
    "CITIZENSHIP_RULES",
    "PROPERTY_TYPE_RULES",
    "APPROVAL_FEE_TIERS",
    "ESTABLISHED_APPROVAL_FEE_TIERS",
    "effective_status",
    "get_approval_fee",
    "get_citizenship_rules",
    "get_state_rules",
    "is_temporary_ban_active",
    "BenchmarkProvider",
    "Benchmarks",
    "DEFAULT_COST_BENCHMARKS",
    "DEFAULT_MACRO_BENCHMARKS",
    "collect_benchmarks",
    "PurchaseInputs",
    "InvestmentInputs",
    "MAX_HOLD_YEARS",
]

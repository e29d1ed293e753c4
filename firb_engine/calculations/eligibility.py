"""FIRB eligibility assessment for a buyer and property combination."""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

from ..models.lookups import (
    CitizenshipStatus,
    DenialReason,
    PropertyType,
    EXPEDITED_FEE_MULTIPLIER,
    KNOWN_VISA_TYPES,
    VACANCY_DAYS_THRESHOLD,
    VACANT_LAND_CONSTRUCTION_YEARS,
    effective_status,
    get_approval_fee,
    get_citizenship_rules,
    is_temporary_ban_active,
)
from .trace import trace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EligibilityResult:
    """Outcome of an eligibility assessment.

    When ``can_purchase`` is False, ``requires_approval`` is False,
    ``approval_fee_tier`` is None and ``reason_for_denial`` is set.
    """

    can_purchase: bool
    requires_approval: bool
    approval_fee_tier: Optional[float]
    conditions: Tuple[str, ...] = ()
    reason_for_denial: Optional[DenialReason] = None
    allowed_property_types: Tuple[PropertyType, ...] = ()
    recommendations: Tuple[str, ...] = ()
    processing_time: Optional[str] = None


@dataclass
class _Assessment:
    """Working state while the rules are applied."""

    conditions: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    denial: Optional[DenialReason] = None


def _deny(
    reason: DenialReason,
    message: str,
    allowed: Tuple[PropertyType, ...] = (),
) -> EligibilityResult:
    logger.debug("Eligibility denied: %s", reason.value)
    return EligibilityResult(
        can_purchase=False,
        requires_approval=False,
        approval_fee_tier=None,
        conditions=(message,),
        reason_for_denial=reason,
        allowed_property_types=allowed,
    )


def _assess_temporary_resident(
    property_type: PropertyType,
    visa_type: Optional[str],
    intends_to_occupy: bool,
    assessment: _Assessment,
) -> None:
    """Apply temporary resident rules, recording a denial or conditions."""
    visa = str(visa_type).strip().lower() if visa_type is not None else ""
    if not visa:
        assessment.denial = DenialReason.MISSING_VISA_TYPE
        assessment.conditions.append("A visa type is required to assess a temporary resident")
        return
    if visa not in KNOWN_VISA_TYPES:
        assessment.denial = DenialReason.UNKNOWN_VISA_TYPE
        assessment.conditions.append(f"Visa type '{visa_type}' is not recognised")
        return

    if property_type == PropertyType.ESTABLISHED_DWELLING:
        if not intends_to_occupy:
            assessment.denial = DenialReason.ESTABLISHED_FOR_INVESTMENT
            assessment.conditions.append(
                "Temporary residents may buy one established dwelling only as their "
                "principal place of residence, not as an investment"
            )
            return
        assessment.conditions.append(
            "Only one established dwelling may be held; it must be occupied as your "
            "principal place of residence and sold within 6 months of ceasing to live "
            "there or of your visa ending"
        )

    if property_type == PropertyType.NEW_DWELLING:
        assessment.conditions.append(
            "Must be purchased from the developer; off-the-plan purchases must result "
            "in a new dwelling on completion"
        )

    if visa == "500":
        assessment.recommendations.append(
            "As a student visa holder, ensure the property can serve as your primary residence"
        )


def _assess_foreign_national(
    property_type: PropertyType,
    is_redevelopment: bool,
    assessment: _Assessment,
) -> None:
    """Apply foreign national rules, recording a denial or conditions."""
    if property_type == PropertyType.ESTABLISHED_DWELLING:
        if not is_redevelopment:
            assessment.denial = DenialReason.ESTABLISHED_DWELLING_PROHIBITED
            assessment.conditions.append(
                "Foreign persons may only purchase new dwellings, off-the-plan properties "
                "or vacant land for development"
            )
            return
        assessment.conditions.append(
            "Approval is conditional on redeveloping the established dwelling to "
            "increase housing supply"
        )

    if property_type == PropertyType.NEW_DWELLING:
        assessment.conditions.append(
            "Must be purchased from the developer; off-the-plan purchases must result "
            "in a new dwelling on completion"
        )

    if property_type == PropertyType.VACANT_LAND:
        assessment.conditions.append(
            f"Construction must commence within {VACANT_LAND_CONSTRUCTION_YEARS} years "
            "of approval"
        )

    if property_type != PropertyType.COMMERCIAL:
        assessment.conditions.append(
            f"An annual vacancy fee applies if the dwelling is not occupied or genuinely "
            f"available for rent for at least {VACANCY_DAYS_THRESHOLD} days a year"
        )
    assessment.conditions.append("The ATO must be notified within 30 days of settlement")


def evaluate_eligibility(
    citizenship_status: CitizenshipStatus,
    property_type: PropertyType,
    property_value: float,
    visa_type: Optional[str] = None,
    is_ordinarily_resident: Optional[bool] = None,
    *,
    intends_to_occupy: bool = False,
    is_redevelopment: bool = False,
    expedited: bool = False,
    as_of: Optional[date] = None,
) -> EligibilityResult:
    """Classify a purchase against residency and property-type rules.

    Never raises for a business outcome: ineligible or malformed combinations
    return a denial with a reason code.

    Args:
        citizenship_status: Buyer residency status.
        property_type: Property category.
        property_value: Purchase price.
        visa_type: Visa subclass, required for temporary residents.
        is_ordinarily_resident: Residency flag; False moves Australian
            citizens onto the foreign national rules.
        intends_to_occupy: Buyer will live in the property.
        is_redevelopment: Established dwelling assessed for redevelopment.
        expedited: Expedited processing (fee multiplied).
        as_of: Assessment date; time-limited bans are checked only when given.

    Returns:
        EligibilityResult.
    """
    try:
        citizenship_status = CitizenshipStatus(citizenship_status)
    except ValueError:
        return _deny(
            DenialReason.INVALID_CITIZENSHIP_STATUS,
            f"Citizenship status '{citizenship_status}' is not recognised",
        )
    try:
        property_type = PropertyType(property_type)
    except ValueError:
        return _deny(
            DenialReason.INVALID_PROPERTY_TYPE,
            f"Property type '{property_type}' is not recognised",
        )
    if property_value < 0:
        return _deny(DenialReason.INVALID_PROPERTY_VALUE, "Property value must be non-negative")

    status = effective_status(citizenship_status, is_ordinarily_resident)
    rules = get_citizenship_rules(citizenship_status, is_ordinarily_resident)
    allowed = tuple(t for t in PropertyType if t in rules.allowed_property_types)

    if not rules.requires_approval:
        if citizenship_status == CitizenshipStatus.PERMANENT_RESIDENT:
            recommendations = (
                "As a permanent resident you have the same purchasing rights as an Australian citizen",
            )
        else:
            recommendations = ("No FIRB approval required - you can purchase immediately",)
        return EligibilityResult(
            can_purchase=True,
            requires_approval=False,
            approval_fee_tier=None,
            allowed_property_types=allowed,
            recommendations=recommendations,
        )

    assessment = _Assessment()

    if (
        as_of is not None
        and property_type == PropertyType.ESTABLISHED_DWELLING
        and is_temporary_ban_active(as_of)
    ):
        return _deny(
            DenialReason.TEMPORARY_BAN,
            "Foreign persons, including temporary residents, may not purchase established "
            "dwellings between 1 April 2025 and 31 March 2027",
            allowed,
        )

    if citizenship_status != status:
        assessment.conditions.append(
            "As you are not ordinarily resident in Australia, FIRB approval is required"
        )

    if status == CitizenshipStatus.TEMPORARY_RESIDENT:
        _assess_temporary_resident(property_type, visa_type, intends_to_occupy, assessment)
    else:
        _assess_foreign_national(property_type, is_redevelopment, assessment)

    if assessment.denial is not None:
        return _deny(assessment.denial, assessment.conditions[-1], allowed)

    if property_type == PropertyType.COMMERCIAL:
        assessment.conditions.append(
            "Commercial land is assessed against separate FIRB monetary thresholds"
        )

    fee = get_approval_fee(property_value, property_type)
    if expedited:
        fee *= EXPEDITED_FEE_MULTIPLIER
    trace("eligibility.approval_fee", fee, {"inputs.property_value": property_value})

    assessment.recommendations.extend([
        "Apply for FIRB approval before signing any contract",
        "Budget for foreign buyer duty surcharges and the FIRB application fee",
    ])

    return EligibilityResult(
        can_purchase=True,
        requires_approval=True,
        approval_fee_tier=fee,
        conditions=tuple(assessment.conditions),
        allowed_property_types=allowed,
        recommendations=tuple(assessment.recommendations),
        processing_time=rules.processing_time,
    )

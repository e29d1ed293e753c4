"""Tests for FIRB eligibility assessment."""

from datetime import date

import pytest

from firb_engine.calculations.eligibility import evaluate_eligibility
from firb_engine.models.lookups import (
    CitizenshipStatus,
    DenialReason,
    PropertyType,
    get_approval_fee,
)


class TestResidentBuyers:
    """Citizens and permanent residents need no approval."""

    @pytest.mark.parametrize("status", [CitizenshipStatus.AUSTRALIAN, CitizenshipStatus.PERMANENT_RESIDENT])
    @pytest.mark.parametrize("property_type", list(PropertyType))
    def test_allowed_without_approval(self, status, property_type):
        """Any property type is allowed with no fee."""
        result = evaluate_eligibility(status, property_type, 750_000)

        assert result.can_purchase
        assert not result.requires_approval
        assert result.approval_fee_tier is None
        assert result.reason_for_denial is None
        assert set(result.allowed_property_types) == set(PropertyType)

    def test_citizen_not_ordinarily_resident_needs_approval(self):
        """Non-resident citizens are assessed as foreign nationals."""
        result = evaluate_eligibility(
            CitizenshipStatus.AUSTRALIAN,
            PropertyType.NEW_DWELLING,
            900_000,
            is_ordinarily_resident=False,
        )

        assert result.can_purchase
        assert result.requires_approval
        assert result.approval_fee_tier == 15_100
        assert any("ordinarily resident" in c for c in result.conditions)

    def test_citizen_with_unknown_residency_is_resident(self):
        """Missing residency information defaults to resident."""
        result = evaluate_eligibility(
            CitizenshipStatus.AUSTRALIAN,
            PropertyType.ESTABLISHED_DWELLING,
            900_000,
            is_ordinarily_resident=None,
        )

        assert result.can_purchase
        assert not result.requires_approval


class TestForeignNational:
    """Foreign national rules."""

    def test_established_dwelling_denied(self):
        """Foreign nationals cannot buy established dwellings."""
        result = evaluate_eligibility(
            CitizenshipStatus.FOREIGN_NATIONAL,
            PropertyType.ESTABLISHED_DWELLING,
            800_000,
        )

        assert not result.can_purchase
        assert not result.requires_approval
        assert result.approval_fee_tier is None
        assert result.reason_for_denial == DenialReason.ESTABLISHED_DWELLING_PROHIBITED
        assert PropertyType.ESTABLISHED_DWELLING not in result.allowed_property_types

    def test_established_dwelling_for_redevelopment_allowed(self):
        """Redevelopment of an established dwelling can be approved."""
        result = evaluate_eligibility(
            CitizenshipStatus.FOREIGN_NATIONAL,
            PropertyType.ESTABLISHED_DWELLING,
            800_000,
            is_redevelopment=True,
        )

        assert result.can_purchase
        assert result.requires_approval
        # Established dwellings use the higher fee table
        assert result.approval_fee_tier == 45_300
        assert any("redevelop" in c for c in result.conditions)

    def test_new_dwelling_allowed_with_fee(self):
        """$1.5M new dwelling sits in the $1M-$2M fee tier."""
        result = evaluate_eligibility(
            CitizenshipStatus.FOREIGN_NATIONAL,
            PropertyType.NEW_DWELLING,
            1_500_000,
        )

        assert result.can_purchase
        assert result.requires_approval
        assert result.approval_fee_tier == 30_300
        assert result.processing_time == "30 days"

    def test_vacant_land_has_construction_condition(self):
        """Vacant land requires construction to start within 4 years."""
        result = evaluate_eligibility(
            CitizenshipStatus.FOREIGN_NATIONAL,
            PropertyType.VACANT_LAND,
            500_000,
        )

        assert result.can_purchase
        assert any("4 years" in c for c in result.conditions)

    def test_commercial_has_no_vacancy_condition(self):
        """The vacancy fee condition applies to dwellings only."""
        result = evaluate_eligibility(
            CitizenshipStatus.FOREIGN_NATIONAL,
            PropertyType.COMMERCIAL,
            2_500_000,
        )

        assert result.can_purchase
        assert not any("vacancy fee" in c for c in result.conditions)
        assert any("Commercial" in c for c in result.conditions)

    def test_expedited_doubles_fee(self):
        """Expedited processing doubles the application fee."""
        standard = evaluate_eligibility(
            CitizenshipStatus.FOREIGN_NATIONAL, PropertyType.NEW_DWELLING, 1_500_000,
        )
        expedited = evaluate_eligibility(
            CitizenshipStatus.FOREIGN_NATIONAL, PropertyType.NEW_DWELLING, 1_500_000, expedited=True,
        )

        assert expedited.approval_fee_tier == 2 * standard.approval_fee_tier


class TestTemporaryResident:
    """Temporary resident rules."""

    def test_missing_visa_denied(self):
        """A temporary resident with no visa type cannot be assessed."""
        result = evaluate_eligibility(
            CitizenshipStatus.TEMPORARY_RESIDENT,
            PropertyType.NEW_DWELLING,
            600_000,
        )

        assert not result.can_purchase
        assert result.reason_for_denial == DenialReason.MISSING_VISA_TYPE

    def test_unknown_visa_denied(self):
        """Unrecognised visa subclasses are rejected."""
        result = evaluate_eligibility(
            CitizenshipStatus.TEMPORARY_RESIDENT,
            PropertyType.NEW_DWELLING,
            600_000,
            visa_type="999",
        )

        assert not result.can_purchase
        assert result.reason_for_denial == DenialReason.UNKNOWN_VISA_TYPE

    def test_established_for_investment_denied(self):
        """Established dwellings must be the principal residence."""
        result = evaluate_eligibility(
            CitizenshipStatus.TEMPORARY_RESIDENT,
            PropertyType.ESTABLISHED_DWELLING,
            700_000,
            visa_type="482",
        )

        assert not result.can_purchase
        assert result.reason_for_denial == DenialReason.ESTABLISHED_FOR_INVESTMENT

    def test_established_to_occupy_allowed_outside_ban(self):
        """Owner-occupation is allowed when no ban date applies."""
        result = evaluate_eligibility(
            CitizenshipStatus.TEMPORARY_RESIDENT,
            PropertyType.ESTABLISHED_DWELLING,
            700_000,
            visa_type="482",
            intends_to_occupy=True,
            as_of=date(2024, 6, 1),
        )

        assert result.can_purchase
        assert result.requires_approval
        assert result.approval_fee_tier == get_approval_fee(700_000, PropertyType.ESTABLISHED_DWELLING)

    def test_established_during_ban_denied(self):
        """Established dwellings are banned between April 2025 and March 2027."""
        result = evaluate_eligibility(
            CitizenshipStatus.TEMPORARY_RESIDENT,
            PropertyType.ESTABLISHED_DWELLING,
            700_000,
            visa_type="482",
            intends_to_occupy=True,
            as_of=date(2026, 1, 1),
        )

        assert not result.can_purchase
        assert result.reason_for_denial == DenialReason.TEMPORARY_BAN

    def test_new_dwelling_not_affected_by_ban(self):
        """The ban covers established dwellings only."""
        result = evaluate_eligibility(
            CitizenshipStatus.TEMPORARY_RESIDENT,
            PropertyType.NEW_DWELLING,
            700_000,
            visa_type="500",
            as_of=date(2026, 1, 1),
        )

        assert result.can_purchase
        assert result.recommendations

    def test_student_visa_recommendation_with_padded_visa(self):
        """Visa types are matched after trimming whitespace."""
        result = evaluate_eligibility(
            CitizenshipStatus.TEMPORARY_RESIDENT,
            PropertyType.NEW_DWELLING,
            700_000,
            visa_type=" 500 ",
        )

        assert result.can_purchase
        assert any("student visa" in r for r in result.recommendations)


class TestInvariants:
    """Properties every eligibility result must satisfy."""

    def test_negative_value_denied(self):
        """A negative price is a denial, not an exception."""
        result = evaluate_eligibility(
            CitizenshipStatus.FOREIGN_NATIONAL, PropertyType.NEW_DWELLING, -1,
        )

        assert not result.can_purchase
        assert result.reason_for_denial == DenialReason.INVALID_PROPERTY_VALUE

    def test_unrecognised_citizenship_denied(self):
        """A status outside the known set is a denial, not an exception."""
        result = evaluate_eligibility("martian", PropertyType.NEW_DWELLING, 500_000)

        assert not result.can_purchase
        assert result.approval_fee_tier is None
        assert result.reason_for_denial == DenialReason.INVALID_CITIZENSHIP_STATUS

    def test_unrecognised_property_type_denied(self):
        result = evaluate_eligibility(CitizenshipStatus.FOREIGN_NATIONAL, "castle", 500_000)

        assert not result.can_purchase
        assert result.reason_for_denial == DenialReason.INVALID_PROPERTY_TYPE

    def test_status_given_as_string_value(self):
        """Enum values passed as plain strings are accepted."""
        result = evaluate_eligibility("foreign-national", "new-dwelling", 1_500_000)

        assert result.can_purchase
        assert result.approval_fee_tier == 30_300

    @pytest.mark.parametrize("status", [CitizenshipStatus.TEMPORARY_RESIDENT, CitizenshipStatus.FOREIGN_NATIONAL])
    @pytest.mark.parametrize("property_type", list(PropertyType))
    @pytest.mark.parametrize("value", [50_000, 950_000, 4_200_000, 15_000_000])
    def test_approved_foreign_purchases_carry_fee(self, status, property_type, value):
        """Any allowed temporary or foreign purchase requires approval and a positive fee."""
        result = evaluate_eligibility(status, property_type, value, visa_type="482", intends_to_occupy=True)

        if result.can_purchase:
            assert result.requires_approval
            assert result.approval_fee_tier is not None and result.approval_fee_tier > 0
        else:
            assert result.reason_for_denial is not None
            assert result.approval_fee_tier is None

    @pytest.mark.parametrize("property_type", list(PropertyType))
    @pytest.mark.parametrize("value", [0, 800_000, 3_000_000])
    def test_permanent_resident_never_denied_where_foreign_denied(self, property_type, value):
        """Moving from foreign national to permanent resident never adds a denial."""
        foreign = evaluate_eligibility(CitizenshipStatus.FOREIGN_NATIONAL, property_type, value)
        resident = evaluate_eligibility(CitizenshipStatus.PERMANENT_RESIDENT, property_type, value)

        if not foreign.can_purchase:
            assert resident.can_purchase

    def test_idempotent(self):
        """Identical inputs give identical results."""
        first = evaluate_eligibility(CitizenshipStatus.FOREIGN_NATIONAL, PropertyType.VACANT_LAND, 1_200_000)
        second = evaluate_eligibility(CitizenshipStatus.FOREIGN_NATIONAL, PropertyType.VACANT_LAND, 1_200_000)

        assert first == second

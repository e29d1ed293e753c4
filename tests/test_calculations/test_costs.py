"""Tests for purchase and holding cost calculations."""

from dataclasses import replace

import pytest

from firb_engine.calculations.costs import (
    ONE_TIME_COST_KEYS,
    RECURRING_COST_KEYS,
    calculate_costs,
    calculate_foreign_surcharge,
    calculate_land_tax,
    calculate_land_tax_surcharge,
    calculate_transfer_duty,
    estimate_legal_fees,
    estimate_loan_costs,
)
from firb_engine.models.inputs import PurchaseInputs
from firb_engine.models.lookups import (
    AustralianState,
    CitizenshipStatus,
    EntityType,
    PropertyType,
)


class TestTransferDuty:
    """Tests for bracket-based transfer duty."""

    def test_nsw_top_bracket(self):
        """$1.5M in NSW falls in the 5.5% bracket above $1.212M."""
        duty = calculate_transfer_duty(1_500_000, AustralianState.NSW)

        assert duty == pytest.approx(49_069 + 288_000 * 0.055)

    def test_duty_increases_with_value(self):
        """Duty is non-decreasing in the property value for every state."""
        values = [100_000, 400_000, 800_000, 1_500_000, 3_000_000]
        for state in AustralianState:
            duties = [calculate_transfer_duty(v, state) for v in values]
            assert duties == sorted(duties), f"Duty not monotonic in {state.value}"

    def test_first_home_concession_reduces_duty(self):
        """The first home concession halves duty under the threshold."""
        full = calculate_transfer_duty(500_000, AustralianState.NSW)
        concession = calculate_transfer_duty(500_000, AustralianState.NSW, first_home_concession=True)

        assert concession == pytest.approx(full / 2)

    def test_first_home_concession_ignored_above_threshold(self):
        """Values above the threshold pay full duty."""
        full = calculate_transfer_duty(900_000, AustralianState.NSW)
        concession = calculate_transfer_duty(900_000, AustralianState.NSW, first_home_concession=True)

        assert concession == full


class TestSurcharges:
    """Tests for foreign purchaser and land tax surcharges."""

    def test_foreign_surcharge_nsw(self):
        """NSW charges 8% to foreign purchasers."""
        surcharge = calculate_foreign_surcharge(
            1_500_000, AustralianState.NSW, CitizenshipStatus.FOREIGN_NATIONAL,
        )

        assert surcharge == pytest.approx(120_000)

    def test_no_surcharge_for_residents(self):
        """Citizens and permanent residents pay no surcharge."""
        for status in (CitizenshipStatus.AUSTRALIAN, CitizenshipStatus.PERMANENT_RESIDENT):
            assert calculate_foreign_surcharge(1_500_000, AustralianState.NSW, status) == 0

    def test_nt_has_no_surcharges(self):
        """The Northern Territory levies neither surcharge."""
        assert calculate_foreign_surcharge(
            1_500_000, AustralianState.NT, CitizenshipStatus.FOREIGN_NATIONAL,
        ) == 0
        assert calculate_land_tax_surcharge(5_000_000, AustralianState.NT) == 0

    def test_land_tax_surcharge_vic(self):
        """VIC charges the foreign rate above the base rate on land value."""
        # Land value 450k less 300k threshold, 1.8% extra
        assert calculate_land_tax_surcharge(1_500_000, AustralianState.VIC) == pytest.approx(2_700)
        assert calculate_land_tax(1_500_000, AustralianState.VIC) == pytest.approx(300)

    def test_land_tax_below_threshold_is_zero(self):
        """NSW land value of $450k is under the threshold."""
        assert calculate_land_tax(1_500_000, AustralianState.NSW) == 0
        assert calculate_land_tax_surcharge(1_500_000, AustralianState.NSW) == 0


class TestFees:
    """Tests for legal and loan fees."""

    def test_legal_fees_capped(self):
        """Legal fees never exceed the cap."""
        assert estimate_legal_fees(500_000) == pytest.approx(2_000)
        assert estimate_legal_fees(10_000_000) == 5_000

    def test_loan_costs_zero_without_loan(self):
        """Cash purchases carry no loan costs."""
        assert estimate_loan_costs(0, 10) == 0

    def test_loan_costs_include_basis_points(self):
        """Application and valuation fees plus the lender basis points."""
        assert estimate_loan_costs(1_050_000, 10) == pytest.approx(900 + 1_050)


class TestCalculateCosts:
    """Tests for the full cost breakdown."""

    def test_foreign_new_dwelling_breakdown(self, foreign_costs):
        """Reference purchase: $1.5M new dwelling in NSW, foreign buyer."""
        one_time = foreign_costs.one_time_costs

        assert one_time["approval_fee"] == 30_300
        assert one_time["surcharge"] == pytest.approx(120_000)
        assert one_time["transfer_duty"] == pytest.approx(64_909)
        assert one_time["legal_fees"] == pytest.approx(3_000)
        assert one_time["loan_costs"] == pytest.approx(1_950)
        assert foreign_costs.total_upfront_cost == pytest.approx(220_659)

    def test_totals_equal_sums(self, foreign_costs, australian_purchase, benchmarks):
        """Totals equal the sum of each cost map."""
        for costs in (foreign_costs, calculate_costs(australian_purchase, benchmarks)):
            assert costs.total_upfront_cost == pytest.approx(sum(costs.one_time_costs.values()))
            assert costs.total_annual_cost == pytest.approx(sum(costs.recurring_annual_costs.values()))

    def test_all_keys_present(self, foreign_costs):
        """Every cost line item is reported, even when zero."""
        assert set(foreign_costs.one_time_costs) == set(ONE_TIME_COST_KEYS)
        assert set(foreign_costs.recurring_annual_costs) == set(RECURRING_COST_KEYS)

    def test_all_costs_non_negative(self, foreign_costs):
        """No line item is negative."""
        for value in list(foreign_costs.one_time_costs.values()) + list(foreign_costs.recurring_annual_costs.values()):
            assert value >= 0

    def test_cost_maps_are_read_only(self, foreign_costs):
        """Cost maps cannot be modified after calculation."""
        with pytest.raises(TypeError):
            foreign_costs.one_time_costs["approval_fee"] = 0

    def test_australian_pays_no_foreign_costs(self, australian_purchase, benchmarks):
        """Residents pay no FIRB fee, surcharge or vacancy fee."""
        costs = calculate_costs(australian_purchase, benchmarks)

        assert costs.one_time_costs["approval_fee"] == 0
        assert costs.one_time_costs["surcharge"] == 0
        assert costs.recurring_annual_costs["land_tax_surcharge"] == 0
        assert costs.recurring_annual_costs["vacancy_fee"] == 0

    def test_first_home_concession_for_individual_only(self, benchmarks):
        """Companies do not receive the first home concession."""
        individual = PurchaseInputs(
            citizenship_status=CitizenshipStatus.AUSTRALIAN,
            property_type=PropertyType.NEW_DWELLING,
            property_value=500_000,
            state=AustralianState.NSW,
            is_first_home=True,
        )
        company = replace(individual, entity_type=EntityType.COMPANY)

        individual_duty = calculate_costs(individual, benchmarks).one_time_costs["transfer_duty"]
        company_duty = calculate_costs(company, benchmarks).one_time_costs["transfer_duty"]

        assert individual_duty < company_duty

    def test_first_home_concession_not_for_foreign_buyers(self, foreign_purchase, benchmarks):
        """Foreign buyers pay full duty even when flagged as a first home."""
        flagged = replace(foreign_purchase, is_first_home=True)

        assert (
            calculate_costs(flagged, benchmarks).one_time_costs["transfer_duty"]
            == calculate_costs(foreign_purchase, benchmarks).one_time_costs["transfer_duty"]
        )

    def test_expedited_doubles_only_approval_fee(self, foreign_purchase, benchmarks):
        """Expedited processing doubles the upfront fee, not the vacancy fee."""
        vacant = replace(foreign_purchase, days_vacant_per_year=200)
        expedited = replace(vacant, expedited=True)

        standard_costs = calculate_costs(vacant, benchmarks)
        expedited_costs = calculate_costs(expedited, benchmarks)

        assert expedited_costs.one_time_costs["approval_fee"] == 60_600
        assert expedited_costs.recurring_annual_costs["vacancy_fee"] == (
            standard_costs.recurring_annual_costs["vacancy_fee"]
        )


class TestVacancyFee:
    """Tests for the annual vacancy fee."""

    @pytest.mark.parametrize("days, expected", [(0, 0), (183, 0), (184, 30_300), (366, 30_300)])
    def test_vacancy_fee_threshold(self, foreign_purchase, benchmarks, days, expected):
        """The fee applies only when vacant for more than 183 days."""
        purchase = replace(foreign_purchase, days_vacant_per_year=days)

        assert calculate_costs(purchase, benchmarks).recurring_annual_costs["vacancy_fee"] == expected

    def test_commercial_skips_residential_levies(self, benchmarks):
        """Commercial property pays neither the vacancy fee nor the land tax surcharge."""
        purchase = PurchaseInputs(
            citizenship_status=CitizenshipStatus.FOREIGN_NATIONAL,
            property_type=PropertyType.COMMERCIAL,
            property_value=1_500_000,
            state=AustralianState.VIC,
            days_vacant_per_year=250,
        )
        costs = calculate_costs(purchase, benchmarks)

        assert costs.recurring_annual_costs["vacancy_fee"] == 0
        assert costs.recurring_annual_costs["land_tax_surcharge"] == 0
        assert costs.recurring_annual_costs["land_tax"] > 0


class TestNorthernTerritory:
    """NT levies no land tax."""

    @pytest.mark.parametrize("value", [300_000, 1_500_000, 8_000_000])
    def test_nt_land_tax_always_zero(self, foreign_purchase, benchmarks, value):
        purchase = replace(foreign_purchase, state=AustralianState.NT, property_value=value)
        recurring = calculate_costs(purchase, benchmarks).recurring_annual_costs

        assert recurring["land_tax"] == 0
        assert recurring["land_tax_surcharge"] == 0


class TestMonotonicity:
    """Costs grow with the property value."""

    def test_upfront_costs_increase_with_value(self, foreign_purchase, benchmarks):
        """Total upfront cost is non-decreasing in the property value."""
        totals = [
            calculate_costs(replace(foreign_purchase, property_value=v), benchmarks).total_upfront_cost
            for v in (600_000, 1_000_000, 1_500_000, 2_500_000)
        ]

        assert totals == sorted(totals)

    def test_idempotent(self, foreign_purchase, benchmarks):
        """Identical inputs give identical cost breakdowns."""
        first = calculate_costs(foreign_purchase, benchmarks)
        second = calculate_costs(foreign_purchase, benchmarks)

        assert dict(first.one_time_costs) == dict(second.one_time_costs)
        assert dict(first.recurring_annual_costs) == dict(second.recurring_annual_costs)

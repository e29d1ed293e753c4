"""Formula registry for transparent calculation auditing.

This module holds a central registry of the FIRB cost and investment
formulas, so every traced value can be explained in terms of its inputs.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Set, Tuple


class FormulaCategory(str, Enum):
    """Categories for organizing formulas."""
    INPUT = "Input"
    ELIGIBILITY = "Eligibility"
    ACQUISITION = "Acquisition"
    HOLDING = "Holding"
    FINANCING = "Financing"
    CASH_FLOW = "Cash Flow"
    TAX = "Tax"
    RETURNS = "Returns"


@dataclass(frozen=True)
class FormulaDefinition:
    """Definition of a single calculation formula.

    Attributes:
        field_path: Dot-notation path to the field (e.g., "costs.transfer_duty")
        name: Human-readable name (e.g., "Transfer Duty")
        formula: Symbolic formula (e.g., "base + (value - lower) × rate")
        inputs: Input field paths that feed into this formula
        category: Category for grouping formulas
        unit: Display unit (e.g., "$", "%", "years")
        notes: Optional explanation or caveats
    """
    field_path: str
    name: str
    formula: str
    inputs: Tuple[str, ...]
    category: FormulaCategory
    unit: str = "$"
    notes: str = ""


def _user_input(field_path: str, name: str, unit: str = "$", notes: str = "") -> FormulaDefinition:
    return FormulaDefinition(
        field_path=field_path,
        name=name,
        formula="User input",
        inputs=(),
        category=FormulaCategory.INPUT,
        unit=unit,
        notes=notes,
    )


def _build_formulas() -> Dict[str, FormulaDefinition]:
    """Build the table of all calculation formulas."""

    # =========================================================================
    # INPUT FIELDS
    # =========================================================================
    inputs = [
        _user_input("inputs.property_value", "Property Value"),
        _user_input("inputs.deposit_percent", "Deposit", unit="%"),
        _user_input("inputs.weekly_rent", "Weekly Rent"),
        _user_input("inputs.vacancy_rate", "Vacancy Rate", unit="%"),
        _user_input("inputs.rent_growth_rate", "Rent Growth", unit="%"),
        _user_input("inputs.capital_growth_rate", "Capital Growth", unit="%"),
        _user_input("inputs.interest_rate", "Interest Rate", unit="%"),
        _user_input("inputs.loan_amount", "Loan Amount"),
        _user_input("inputs.marginal_tax_rate", "Marginal Tax Rate", unit="%"),
        _user_input("inputs.selling_costs", "Selling Costs", unit="%"),
        _user_input(
            "benchmarks.council_rate_percent", "Council Rate", unit="%",
            notes="State and property type benchmark, or default",
        ),
        _user_input("benchmarks.inflation_rate", "Inflation", unit="%"),
    ]

    # =========================================================================
    # ELIGIBILITY
    # =========================================================================
    eligibility = [
        FormulaDefinition(
            field_path="eligibility.approval_fee",
            name="FIRB Application Fee",
            formula="fee_tier(property_value) × (2 if expedited else 1)",
            inputs=("inputs.property_value",),
            category=FormulaCategory.ELIGIBILITY,
            notes="Established dwellings use the higher fee table",
        ),
    ]

    # =========================================================================
    # ACQUISITION (one-time costs)
    # =========================================================================
    acquisition = [
        FormulaDefinition(
            field_path="costs.transfer_duty",
            name="Transfer Duty",
            formula="base + (property_value - lower) × rate",
            inputs=("inputs.property_value",),
            category=FormulaCategory.ACQUISITION,
            notes="Progressive state schedule; first home concession may apply",
        ),
        FormulaDefinition(
            field_path="costs.surcharge",
            name="Foreign Purchaser Duty Surcharge",
            formula="property_value × state_surcharge_rate",
            inputs=("inputs.property_value",),
            category=FormulaCategory.ACQUISITION,
        ),
        FormulaDefinition(
            field_path="costs.legal_fees",
            name="Legal Fees",
            formula="min(1500 + property_value × 0.1%, 5000)",
            inputs=("inputs.property_value",),
            category=FormulaCategory.ACQUISITION,
        ),
        FormulaDefinition(
            field_path="costs.loan_costs",
            name="Loan Establishment Costs",
            formula="600 + 300 + loan_amount × basis_points / 10000",
            inputs=("inputs.loan_amount",),
            category=FormulaCategory.ACQUISITION,
            notes="Application, valuation and mortgage registration",
        ),
        FormulaDefinition(
            field_path="costs.total_upfront",
            name="Total Upfront Costs",
            formula="approval_fee + transfer_duty + surcharge + legal_fees + inspection_fees + loan_costs",
            inputs=(
                "eligibility.approval_fee",
                "costs.transfer_duty",
                "costs.surcharge",
                "costs.legal_fees",
                "costs.loan_costs",
            ),
            category=FormulaCategory.ACQUISITION,
        ),
    ]

    # =========================================================================
    # HOLDING (annual costs)
    # =========================================================================
    holding = [
        FormulaDefinition(
            field_path="costs.council_rates",
            name="Council Rates",
            formula="property_value × council_rate",
            inputs=("inputs.property_value", "benchmarks.council_rate_percent"),
            category=FormulaCategory.HOLDING,
        ),
        FormulaDefinition(
            field_path="costs.land_tax",
            name="Land Tax",
            formula="max(0, property_value × 30% - threshold) × land_tax_rate",
            inputs=("inputs.property_value",),
            category=FormulaCategory.HOLDING,
            notes="Land value approximated as 30% of property value",
        ),
        FormulaDefinition(
            field_path="costs.land_tax_surcharge",
            name="Foreign Owner Land Tax Surcharge",
            formula="max(0, property_value × 30% - threshold) × (foreign_rate - base_rate)",
            inputs=("inputs.property_value",),
            category=FormulaCategory.HOLDING,
        ),
        FormulaDefinition(
            field_path="costs.vacancy_fee",
            name="Annual Vacancy Fee",
            formula="approval_fee if days_vacant > 183 else 0",
            inputs=("eligibility.approval_fee",),
            category=FormulaCategory.HOLDING,
        ),
        FormulaDefinition(
            field_path="costs.total_annual",
            name="Total Annual Costs",
            formula="council_rates + insurance + maintenance + land_tax + land_tax_surcharge + vacancy_fee",
            inputs=(
                "costs.council_rates",
                "costs.land_tax",
                "costs.land_tax_surcharge",
                "costs.vacancy_fee",
            ),
            category=FormulaCategory.HOLDING,
        ),
    ]

    # =========================================================================
    # FINANCING
    # =========================================================================
    financing = [
        FormulaDefinition(
            field_path="debt.monthly_payment",
            name="Monthly P&I Payment",
            formula="PMT(rate / 12, term × 12, -loan_amount)",
            inputs=("inputs.loan_amount", "inputs.interest_rate"),
            category=FormulaCategory.FINANCING,
        ),
        FormulaDefinition(
            field_path="debt.annual_interest",
            name="Annual Interest",
            formula="Σ monthly opening_balance × rate / 12",
            inputs=("inputs.loan_amount", "inputs.interest_rate"),
            category=FormulaCategory.FINANCING,
        ),
        FormulaDefinition(
            field_path="debt.lvr",
            name="Loan to Value Ratio",
            formula="loan_amount / property_value",
            inputs=("inputs.loan_amount", "inputs.property_value"),
            category=FormulaCategory.FINANCING,
            unit="%",
        ),
    ]

    # =========================================================================
    # CASH FLOW
    # =========================================================================
    cash_flow = [
        FormulaDefinition(
            field_path="cashflow.rental_income",
            name="Rental Income",
            formula="weekly_rent × 52 × (1 + rent_growth)^(year-1) × (1 - vacancy)",
            inputs=("inputs.weekly_rent", "inputs.rent_growth_rate", "inputs.vacancy_rate"),
            category=FormulaCategory.CASH_FLOW,
        ),
        FormulaDefinition(
            field_path="cashflow.operating_expenses",
            name="Operating Expenses",
            formula="management + letting + (holding_costs + strata) × (1 + inflation)^(year-1)",
            inputs=("cashflow.rental_income", "costs.total_annual", "benchmarks.inflation_rate"),
            category=FormulaCategory.CASH_FLOW,
        ),
        FormulaDefinition(
            field_path="cashflow.net_cash_flow",
            name="Net Cash Flow",
            formula="rental_income - operating_expenses - loan_repayment",
            inputs=("cashflow.rental_income", "cashflow.operating_expenses", "debt.annual_interest"),
            category=FormulaCategory.CASH_FLOW,
            notes="Interest is part of the loan repayment and is not deducted twice",
        ),
        FormulaDefinition(
            field_path="cashflow.after_tax_cash_flow",
            name="After-Tax Cash Flow",
            formula="net_cash_flow + tax_benefit",
            inputs=("cashflow.net_cash_flow", "tax.tax_benefit"),
            category=FormulaCategory.CASH_FLOW,
        ),
    ]

    # =========================================================================
    # TAX
    # =========================================================================
    tax = [
        FormulaDefinition(
            field_path="tax.depreciation",
            name="Depreciation",
            formula="capital_works + plant_and_equipment",
            inputs=("inputs.property_value",),
            category=FormulaCategory.TAX,
            notes="Policy estimate: 2.5% of a 70% building share",
        ),
        FormulaDefinition(
            field_path="tax.tax_benefit",
            name="Tax Benefit",
            formula="-net_cash_flow × mtr if net_cash_flow < 0 else depreciation × mtr",
            inputs=("cashflow.net_cash_flow", "tax.depreciation", "inputs.marginal_tax_rate"),
            category=FormulaCategory.TAX,
        ),
        FormulaDefinition(
            field_path="tax.capital_gain",
            name="Capital Gain",
            formula="max(0, sale_price × (1 - selling_costs) - cost_base)",
            inputs=("inputs.selling_costs", "inputs.capital_growth_rate"),
            category=FormulaCategory.TAX,
        ),
        FormulaDefinition(
            field_path="tax.cgt",
            name="Capital Gains Tax",
            formula="capital_gain × discount × mtr",
            inputs=("tax.capital_gain", "inputs.marginal_tax_rate"),
            category=FormulaCategory.TAX,
            notes="50% discount for Australian tax residents after 12 months",
        ),
    ]

    # =========================================================================
    # RETURNS
    # =========================================================================
    returns = [
        FormulaDefinition(
            field_path="returns.gross_yield",
            name="Gross Rental Yield",
            formula="weekly_rent × 52 / property_value",
            inputs=("inputs.weekly_rent", "inputs.property_value"),
            category=FormulaCategory.RETURNS,
            unit="%",
        ),
        FormulaDefinition(
            field_path="returns.total_roi",
            name="Total ROI",
            formula="total_return / total_cash_invested",
            inputs=("cashflow.after_tax_cash_flow", "costs.total_upfront"),
            category=FormulaCategory.RETURNS,
            unit="%",
        ),
        FormulaDefinition(
            field_path="returns.equity_irr",
            name="Equity IRR",
            formula="IRR([-cash_invested, after_tax_cf..., final + net_sale_proceeds])",
            inputs=("cashflow.after_tax_cash_flow", "costs.total_upfront"),
            category=FormulaCategory.RETURNS,
            unit="%",
        ),
        FormulaDefinition(
            field_path="returns.overall_score",
            name="Investment Score",
            formula="round(mean(yield, growth, cash_flow, tax_efficiency, risk), 1)",
            inputs=("returns.gross_yield", "cashflow.after_tax_cash_flow", "tax.tax_benefit"),
            category=FormulaCategory.RETURNS,
            unit="/10",
        ),
    ]

    all_formulas = inputs + eligibility + acquisition + holding + financing + cash_flow + tax + returns
    return {formula.field_path: formula for formula in all_formulas}


_FORMULAS: Mapping[str, FormulaDefinition] = MappingProxyType(_build_formulas())


class FormulaRegistry:
    """Central, read-only registry of all calculation formulas.

    Maps field paths to their formula definitions, enabling formula lookup
    and dependency analysis.
    """

    @classmethod
    def get(cls, field_path: str) -> Optional[FormulaDefinition]:
        """Get formula definition by field path."""
        return _FORMULAS.get(field_path)

    @classmethod
    def get_all(cls) -> Dict[str, FormulaDefinition]:
        """Get all registered formulas."""
        return dict(_FORMULAS)

    @classmethod
    def get_by_category(cls, category: FormulaCategory) -> List[FormulaDefinition]:
        """Get all formulas in a category."""
        return [f for f in _FORMULAS.values() if f.category == category]

    @classmethod
    def get_inputs(cls, field_path: str) -> Tuple[str, ...]:
        """Get the input field paths for a formula."""
        formula = cls.get(field_path)
        return formula.inputs if formula else ()

    @classmethod
    def get_dependents(cls, field_path: str) -> List[str]:
        """Get all formulas that use this field as an input."""
        return [path for path, formula in _FORMULAS.items() if field_path in formula.inputs]

    @classmethod
    def get_all_ancestors(cls, field_path: str) -> Set[str]:
        """Get all upstream dependencies recursively."""
        ancestors = set()
        to_process = list(cls.get_inputs(field_path))

        while to_process:
            current = to_process.pop()
            if current not in ancestors:
                ancestors.add(current)
                to_process.extend(cls.get_inputs(current))

        return ancestors

    @classmethod
    def get_all_descendants(cls, field_path: str) -> Set[str]:
        """Get all downstream dependencies recursively."""
        descendants = set()
        to_process = list(cls.get_dependents(field_path))

        while to_process:
            current = to_process.pop()
            if current not in descendants:
                descendants.add(current)
                to_process.extend(cls.get_dependents(current))

        return descendants

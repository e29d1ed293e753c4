"""Calculation modules for the FIRB engine."""

from .eligibility import evaluate_eligibility, EligibilityResult
from .costs import (
    calculate_costs,
    calculate_transfer_duty,
    calculate_foreign_surcharge,
    calculate_land_tax,
    calculate_land_tax_surcharge,
    estimate_legal_fees,
    estimate_loan_costs,
    CostBreakdown,
    ONE_TIME_COST_KEYS,
    RECURRING_COST_KEYS,
)
from .debt import (
    project_loan,
    summarize_loan,
    calculate_monthly_payment,
    calculate_interest_only_payment,
    calculate_lvr,
    LoanYear,
    LoanMetrics,
)
from .taxes import (
    estimate_depreciation,
    calculate_deductions,
    calculate_tax_benefit,
    determine_tax_residency,
    calculate_cgt,
    TaxDeductions,
    TaxResidency,
    CGTResult,
)
from .cashflow import (
    project_cash_flows,
    project_investment,
    summarize_first_year,
    YearlyProjection,
    AnnualCashFlow,
    InvestmentProjection,
)
from .metrics import (
    calculate_sub_scores,
    score_investment,
    verdict_for,
    calculate_rental_yield,
    calculate_returns,
    compare_investments,
    find_break_even,
    calculate_equity_irr,
    build_recommendation,
    Verdict,
    ScoreBreakdown,
    InvestmentScore,
    RentalYield,
    ReturnMetrics,
    CapitalGrowth,
    InvestmentComparison,
    BreakEven,
    Recommendation,
)

# Calculation tracing
from .formula_registry import FormulaCategory, FormulaDefinition, FormulaRegistry
from .trace import TraceContext, TracedValue, trace

# Orchestration (imports the sensitivity analyzer, so it comes last)
from .analytics import (
    calculate_firb,
    generate_default_inputs,
    calculate_investment_analytics,
    analyze,
    FIRBResult,
    TaxAnalysis,
    InvestmentAnalytics,
    AnalysisResult,
)

__all__ = [
    # Eligibility
    "evaluate_eligibility",
    "EligibilityResult",
    # Costs
    "calculate_costs",
    "calculate_transfer_duty",
    "calculate_foreign_surcharge",
    "calculate_land_tax",
    "calculate_land_tax_surcharge",
    "estimate_legal_fees",
    "estimate_loan_costs",
    "CostBreakdown",
    "ONE_TIME_COST_KEYS",
    "RECURRING_COST_KEYS",
    # Debt
    "project_loan",
    "summarize_loan",
    "calculate_monthly_payment",
    "calculate_interest_only_payment",
    "calculate_lvr",
    "LoanYear",
    "LoanMetrics",
    # Taxes
    "estimate_depreciation",
    "calculate_deductions",
    "calculate_tax_benefit",
    "determine_tax_residency",
    "calculate_cgt",
    "TaxDeductions",
    "TaxResidency",
    "CGTResult",
    # Cash flow
    "project_cash_flows",
    "project_investment",
    "summarize_first_year",
    "YearlyProjection",
    "AnnualCashFlow",
    "InvestmentProjection",
    # Metrics
    "calculate_sub_scores",
    "score_investment",
    "verdict_for",
    "calculate_rental_yield",
    "calculate_returns",
    "compare_investments",
    "find_break_even",
    "calculate_equity_irr",
    "build_recommendation",
    "Verdict",
    "ScoreBreakdown",
    "InvestmentScore",
    "RentalYield",
    "ReturnMetrics",
    "CapitalGrowth",
    "InvestmentComparison",
    "BreakEven",
    "Recommendation",
    # Tracing
    "FormulaCategory",
    "FormulaDefinition",
    "FormulaRegistry",
    "TraceContext",
    "TracedValue",
    "trace",
    # Orchestration
    "calculate_firb",
    "generate_default_inputs",
    "calculate_investment_analytics",
    "analyze",
    "FIRBResult",
    "TaxAnalysis",
    "InvestmentAnalytics",
    "AnalysisResult",
]

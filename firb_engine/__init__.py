"""FIRB eligibility, purchase cost and investment analytics engine."""

import logging

from .errors import FIRBEngineError, ValidationError, ComputationError
from .models import (
    AustralianState,
    CitizenshipStatus,
    EntityType,
    LoanType,
    PropertyType,
    Benchmarks,
    BenchmarkProvider,
    collect_benchmarks,
    InvestmentInputs,
    PurchaseInputs,
)
from .calculations import (
    analyze,
    calculate_firb,
    calculate_investment_analytics,
    generate_default_inputs,
    AnalysisResult,
    Verdict,
)
from .scenarios import run_sensitivity, SensitivityAnalysis

__version__ = "0.1.0"

# Library logging: callers configure handlers
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "FIRBEngineError",
    "ValidationError",
    "ComputationError",
    "AustralianState",
    "CitizenshipStatus",
    "EntityType",
    "LoanType",
    "PropertyType",
    "Benchmarks",
    "BenchmarkProvider",
    "collect_benchmarks",
    "InvestmentInputs",
    "PurchaseInputs",
    "analyze",
    "calculate_firb",
    "calculate_investment_analytics",
    "generate_default_inputs",
    "AnalysisResult",
    "Verdict",
    "run_sensitivity",
    "SensitivityAnalysis",
    "__version__",
]

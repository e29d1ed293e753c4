"""Plain data and DataFrame views of engine results.

The engine returns frozen dataclasses. These helpers turn them into
JSON-compatible dicts (enums as their values, non-finite numbers as None)
and into pandas DataFrames for tabular inspection. Formatting for display
is left to the caller.
"""

import math
from dataclasses import fields, is_dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, Mapping

import numpy as np
import pandas as pd

from ..calculations.cashflow import YearlyProjection
from ..calculations.formula_registry import FormulaCategory, FormulaRegistry
from ..calculations.trace import TraceContext
from ..scenarios import SensitivityAnalysis


def _public_properties(obj) -> Dict[str, Any]:
    cls = type(obj)
    return {
        name: getattr(obj, name)
        for name in dir(cls)
        if not name.startswith("_") and isinstance(getattr(cls, name), property)
    }


def to_dict(obj: Any) -> Any:
    """Convert an engine result into plain JSON-compatible data.

    Dataclasses become dicts (including their public properties), tuples
    become lists, enums become their values and NaN or infinite numbers
    become None. Attached trace contexts are omitted.

    Args:
        obj: Any engine result or value.

    Returns:
        Dicts, lists, strings, numbers, booleans and None only.
    """
    if isinstance(obj, Enum):
        return obj.value
    if obj is None or isinstance(obj, (bool, str)):
        return obj
    if isinstance(obj, (int, np.integer)):
        return int(obj)
    if isinstance(obj, (float, np.floating)):
        value = float(obj)
        return value if math.isfinite(value) else None
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, TraceContext):
        return None
    if is_dataclass(obj) and not isinstance(obj, type):
        data = {
            f.name: to_dict(getattr(obj, f.name))
            for f in fields(obj)
            if not isinstance(getattr(obj, f.name), TraceContext)
        }
        for name, value in _public_properties(obj).items():
            data.setdefault(name, to_dict(value))
        return data
    if isinstance(obj, Mapping):
        return {str(to_dict(k)): to_dict(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [to_dict(item) for item in obj]
    raise TypeError(f"Cannot serialize {type(obj).__name__}")


def projections_to_dataframe(projections: Iterable[YearlyProjection]) -> pd.DataFrame:
    """Year-by-year projection as a DataFrame indexed by year."""
    rows = [to_dict(p) for p in projections]
    df = pd.DataFrame(rows, columns=[f.name for f in fields(YearlyProjection)])
    return df.set_index("year")


def sensitivity_to_dataframes(sensitivity: SensitivityAnalysis) -> Dict[str, pd.DataFrame]:
    """Each sensitivity table as its own DataFrame.

    Returns:
        Dict with "vacancy", "interest_rate" and "growth" DataFrames.
    """
    return {
        "vacancy": pd.DataFrame([to_dict(row) for row in sensitivity.vacancy]),
        "interest_rate": pd.DataFrame([to_dict(row) for row in sensitivity.interest_rate]),
        "growth": pd.DataFrame([to_dict(row) for row in sensitivity.growth]),
    }


def traces_to_dataframe(trace_context: TraceContext) -> pd.DataFrame:
    """Traced calculations sorted by field path, one row per trace."""
    rows = []
    for trace_key in sorted(trace_context.traces):
        traced = trace_context.traces[trace_key]
        rows.append({
            "field_path": traced.field_path,
            "period": traced.period,
            "value": traced.value,
            "computed_formula": traced.computed_formula,
            "category": traced.formula_def.category.value if traced.formula_def else None,
            "notes": traced.notes or None,
        })
    return pd.DataFrame(rows, columns=["field_path", "period", "value", "computed_formula", "category", "notes"])


def formula_registry_to_dataframe() -> pd.DataFrame:
    """All registered formulas grouped by category."""
    all_formulas = FormulaRegistry.get_all()
    rows = []
    for category in FormulaCategory:
        for field_path, formula in sorted(all_formulas.items()):
            if formula.category != category:
                continue
            rows.append({
                "category": category.value,
                "name": formula.name,
                "field_path": field_path,
                "formula": formula.formula,
                "inputs": ", ".join(formula.inputs) if formula.inputs else "-",
                "unit": formula.unit,
                "notes": formula.notes or "-",
            })
    return pd.DataFrame(rows)

"""Calculation tracing for transparent audit trails.

This module provides runtime tracing of calculations, capturing
the actual values used in each formula for auditing.
"""

from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from .formula_registry import FormulaRegistry, FormulaDefinition


@dataclass
class TracedValue:
    """A single traced calculation.

    Captures the formula definition, actual input values,
    computed result, and formatted formula string.
    """
    field_path: str
    value: float
    formula_def: Optional[FormulaDefinition]
    input_values: Dict[str, float]
    computed_formula: str  # Formula with values substituted
    timestamp: datetime = field(default_factory=datetime.now)
    period: Optional[int] = None
    notes: str = ""

    def format_inputs(self) -> str:
        """Format input values for display."""
        return ", ".join(
            f"{name.split('.')[-1]}={_format_value(val)}"
            for name, val in self.input_values.items()
        )


def _format_value(value) -> str:
    """Format a value for display."""
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return str(value)
    if abs(value) >= 1_000_000:
        return f"{value / 1_000_000:,.2f}M"
    if abs(value) >= 1_000:
        return f"{value / 1_000:,.1f}K"
    if value == 0:
        return "0"
    if abs(value) < 1:
        return f"{value:.4f}"
    return f"{value:,.2f}"


_current_context: ContextVar[Optional["TraceContext"]] = ContextVar(
    "firb_trace_context", default=None
)


class TraceContext:
    """Context manager for capturing calculation traces.

    Usage:
        with TraceContext() as ctx:
            analytics = calculate_investment_analytics(purchase, inputs, costs, benchmarks)
            # ctx.traces now contains all traced calculations

    The active context is held in a context variable, so trace() calls made
    anywhere in the call stack reach it while concurrent threads and tasks
    each keep their own.
    """

    def __init__(self, enabled: bool = True):
        """Initialize trace context.

        Args:
            enabled: If False, trace() calls are no-ops.
        """
        self.enabled = enabled
        self.traces: Dict[str, TracedValue] = {}
        self._start_time = datetime.now()
        self._token = None

    def __enter__(self) -> "TraceContext":
        self._token = _current_context.set(self)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        _current_context.reset(self._token)
        self._token = None

    def trace(
        self,
        field_path: str,
        value: float,
        input_values: Dict[str, float],
        period: Optional[int] = None,
        notes: str = "",
    ) -> None:
        """Record a traced calculation.

        Args:
            field_path: The formula field path (e.g., "costs.transfer_duty")
            value: The calculated result
            input_values: Dict of input name -> value used in calculation
            period: Optional year number for year-specific values
            notes: Optional notes about this specific calculation
        """
        if not self.enabled:
            return

        formula_def = FormulaRegistry.get(field_path)
        formula = formula_def.formula if formula_def else field_path
        if input_values:
            values = ", ".join(_format_value(v) for v in input_values.values())
            computed_formula = f"{formula} with ({values}) = {_format_value(value)}"
        else:
            computed_formula = f"{formula} = {_format_value(value)}"

        # Year-specific values get their own key
        trace_key = f"{field_path}:{period}" if period is not None else field_path

        self.traces[trace_key] = TracedValue(
            field_path=field_path,
            value=value,
            formula_def=formula_def,
            input_values=dict(input_values),
            computed_formula=computed_formula,
            period=period,
            notes=notes,
        )

    def get_trace(self, field_path: str, period: Optional[int] = None) -> Optional[TracedValue]:
        """Get a specific trace by field path and optional period."""
        trace_key = f"{field_path}:{period}" if period is not None else field_path
        return self.traces.get(trace_key)

    def get_traces_for_period(self, period: int) -> Dict[str, TracedValue]:
        """Get all traces for a specific year."""
        return {k: v for k, v in self.traces.items() if v.period == period}

    def get_traces_by_category(self, category: str) -> Dict[str, TracedValue]:
        """Get all traces in a specific category."""
        return {
            k: v for k, v in self.traces.items()
            if v.formula_def and v.formula_def.category.value == category
        }

    def get_calculation_chain(self, field_path: str, period: Optional[int] = None) -> List[TracedValue]:
        """Get the full calculation chain for a value (all upstream traces).

        Returns traces in order from inputs to final value.
        """
        chain = []
        visited = set()

        def _collect_chain(path: str, per: Optional[int]):
            trace_key = f"{path}:{per}" if per is not None else path
            if trace_key in visited:
                return
            visited.add(trace_key)

            traced = self.get_trace(path, per)
            if traced is None and per is not None:
                traced = self.get_trace(path)
            if traced:
                for input_path in traced.input_values:
                    _collect_chain(input_path, per)
                chain.append(traced)

        _collect_chain(field_path, period)
        return chain

    def summary(self) -> str:
        """Generate a summary of all traces."""
        lines = [
            f"Trace Summary ({len(self.traces)} calculations traced)",
            f"Duration: {datetime.now() - self._start_time}",
            "",
        ]

        by_category: Dict[str, List[TracedValue]] = {}
        for traced in self.traces.values():
            cat = traced.formula_def.category.value if traced.formula_def else "Unknown"
            by_category.setdefault(cat, []).append(traced)

        for category, traces in sorted(by_category.items()):
            lines.append(f"=== {category} ({len(traces)} traces) ===")
            for traced in traces[:5]:
                lines.append(f"  {traced.field_path}: {traced.computed_formula}")
            if len(traces) > 5:
                lines.append(f"  ... and {len(traces) - 5} more")
            lines.append("")

        return "\n".join(lines)

    @staticmethod
    def current() -> Optional["TraceContext"]:
        """Get the active trace context for this thread or task."""
        return _current_context.get()


def trace(
    field_path: str,
    value: float,
    input_values: Dict[str, float],
    period: Optional[int] = None,
    notes: str = "",
) -> float:
    """Trace a calculation and return the value.

    This can be used inline in calculations:
        duty = trace("costs.transfer_duty", duty, {"inputs.property_value": value})

    Returns:
        The value (unchanged), allowing inline usage
    """
    ctx = TraceContext.current()
    if ctx:
        ctx.trace(field_path, value, input_values, period, notes)
    return value

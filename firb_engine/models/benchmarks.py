"""Benchmark reference rates and their documented fallback defaults.

Benchmarks (interest rates, council and insurance percentages, comparison
returns) are fetched by the host application before the engine runs. The
engine only ever sees a fully populated :class:`Benchmarks` record, built once
by merging whatever the provider returned over the defaults below.
"""

import logging
from dataclasses import dataclass, fields
from typing import Dict, Iterable, Mapping, Optional, Protocol

from .lookups import AustralianState, PropertyType

logger = logging.getLogger(__name__)


# Cost benchmarks are keyed by state and property type (all values in %)
DEFAULT_COST_BENCHMARKS: Dict[str, float] = {
    "council_rate_percent": 0.3,
    "insurance_percent": 0.2,
    "maintenance_percent": 1.0,  # New dwellings; established scale this up
    "vacancy_rate_percent": 5.0,
    "management_fee_percent": 8.0,
    "letting_fee_weeks": 2.0,
    "rent_growth_percent": 3.0,
    "interest_rate_percent": 6.5,
    "selling_costs_percent": 4.0,
    "loan_cost_basis_points": 10.0,
    "strata_fee_percent": 0.0,
}

# Macro benchmarks are national (all values in %)
DEFAULT_MACRO_BENCHMARKS: Dict[str, float] = {
    "asx_total_return": 7.2,
    "term_deposit_rate": 4.0,
    "bond_rate": 4.5,
    "savings_rate": 4.5,
    "cgt_withholding": 12.5,
    "default_marginal_tax_rate": 37.0,
    "default_interest_rate": 6.5,
    "inflation_rate": 3.0,
}

COST_METRICS = tuple(DEFAULT_COST_BENCHMARKS)
MACRO_METRICS = tuple(DEFAULT_MACRO_BENCHMARKS)


class BenchmarkProvider(Protocol):
    """Source of benchmark values, implemented by the host application."""

    def get_cost_benchmarks(
        self,
        state: AustralianState,
        property_type: PropertyType,
        metric_names: Iterable[str],
    ) -> Mapping[str, float]:
        ...

    def get_macro_benchmarks(self, metric_names: Iterable[str]) -> Mapping[str, float]:
        ...


@dataclass(frozen=True)
class Benchmarks:
    """Resolved benchmark values used by a single calculation."""

    # Cost benchmarks
    council_rate_percent: float = DEFAULT_COST_BENCHMARKS["council_rate_percent"]
    insurance_percent: float = DEFAULT_COST_BENCHMARKS["insurance_percent"]
    maintenance_percent: float = DEFAULT_COST_BENCHMARKS["maintenance_percent"]
    vacancy_rate_percent: float = DEFAULT_COST_BENCHMARKS["vacancy_rate_percent"]
    management_fee_percent: float = DEFAULT_COST_BENCHMARKS["management_fee_percent"]
    letting_fee_weeks: float = DEFAULT_COST_BENCHMARKS["letting_fee_weeks"]
    rent_growth_percent: float = DEFAULT_COST_BENCHMARKS["rent_growth_percent"]
    interest_rate_percent: float = DEFAULT_COST_BENCHMARKS["interest_rate_percent"]
    selling_costs_percent: float = DEFAULT_COST_BENCHMARKS["selling_costs_percent"]
    loan_cost_basis_points: float = DEFAULT_COST_BENCHMARKS["loan_cost_basis_points"]
    strata_fee_percent: float = DEFAULT_COST_BENCHMARKS["strata_fee_percent"]

    # Macro benchmarks
    asx_total_return: float = DEFAULT_MACRO_BENCHMARKS["asx_total_return"]
    term_deposit_rate: float = DEFAULT_MACRO_BENCHMARKS["term_deposit_rate"]
    bond_rate: float = DEFAULT_MACRO_BENCHMARKS["bond_rate"]
    savings_rate: float = DEFAULT_MACRO_BENCHMARKS["savings_rate"]
    cgt_withholding: float = DEFAULT_MACRO_BENCHMARKS["cgt_withholding"]
    default_marginal_tax_rate: float = DEFAULT_MACRO_BENCHMARKS["default_marginal_tax_rate"]
    default_interest_rate: float = DEFAULT_MACRO_BENCHMARKS["default_interest_rate"]
    inflation_rate: float = DEFAULT_MACRO_BENCHMARKS["inflation_rate"]

    @classmethod
    def from_partial(
        cls,
        cost: Optional[Mapping[str, float]] = None,
        macro: Optional[Mapping[str, float]] = None,
    ) -> "Benchmarks":
        """Merge partial benchmark maps over the defaults.

        Unknown keys and ``None`` values are ignored, so a provider may return
        anything from an empty map to a full set.

        Args:
            cost: Cost benchmark values by metric name.
            macro: Macro benchmark values by metric name.

        Returns:
            Benchmarks with every field populated.
        """
        known = {f.name for f in fields(cls)}
        merged: Dict[str, float] = {}
        for source in (cost or {}, macro or {}):
            for name, value in source.items():
                if name in known and value is not None:
                    merged[name] = float(value)
        # Lending rate falls back to the national default before the constant
        if "interest_rate_percent" not in merged and "default_interest_rate" in merged:
            merged["interest_rate_percent"] = merged["default_interest_rate"]
        return cls(**merged)


def missing_metrics(
    returned: Mapping[str, float],
    requested: Iterable[str],
) -> list:
    """List the requested metrics a provider did not supply."""
    return [name for name in requested if returned.get(name) is None]


def collect_benchmarks(
    provider: Optional[BenchmarkProvider],
    state: AustralianState,
    property_type: PropertyType,
) -> Benchmarks:
    """Query a provider and merge its answers over the defaults.

    Called by the host application before invoking the engine. Every missing
    value is logged and replaced by its documented default.

    Args:
        provider: Benchmark source, or None to use defaults only.
        state: State for cost benchmarks.
        property_type: Property type for cost benchmarks.

    Returns:
        Fully populated Benchmarks.
    """
    if provider is None:
        logger.debug("No benchmark provider configured; using defaults")
        return Benchmarks()

    cost = dict(provider.get_cost_benchmarks(state, property_type, COST_METRICS) or {})
    macro = dict(provider.get_macro_benchmarks(MACRO_METRICS) or {})

    for name in missing_metrics(cost, COST_METRICS):
        logger.info(
            "Cost benchmark %s missing for %s/%s; using default %s",
            name, state.value, property_type.value, DEFAULT_COST_BENCHMARKS[name],
        )
    for name in missing_metrics(macro, MACRO_METRICS):
        logger.info(
            "Macro benchmark %s missing; using default %s",
            name, DEFAULT_MACRO_BENCHMARKS[name],
        )

    return Benchmarks.from_partial(cost, macro)

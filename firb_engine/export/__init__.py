"""Export module for plain data and tabular views of results."""

from .serialize import (
    to_dict,
    projections_to_dataframe,
    sensitivity_to_dataframes,
    traces_to_dataframe,
    formula_registry_to_dataframe,
)

__all__ = [
    "to_dict",
    "projections_to_dataframe",
    "sensitivity_to_dataframes",
    "traces_to_dataframe",
    "formula_registry_to_dataframe",
]

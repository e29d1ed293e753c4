"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from firb_engine.calculations.costs import calculate_costs
from tests.fixtures.test_inputs import (
    get_australian_purchase,
    get_default_benchmarks,
    get_foreign_established_purchase,
    get_foreign_new_dwelling_purchase,
    get_investment_inputs,
    get_temporary_resident_purchase,
)


@pytest.fixture
def benchmarks():
    """Default benchmarks (no provider)."""
    return get_default_benchmarks()


@pytest.fixture
def foreign_purchase():
    """Foreign national, $1.5M new dwelling in NSW."""
    return get_foreign_new_dwelling_purchase()


@pytest.fixture
def foreign_established_purchase():
    """Foreign national, $800k established dwelling in VIC."""
    return get_foreign_established_purchase()


@pytest.fixture
def australian_purchase():
    """Australian citizen, $750k established dwelling in QLD."""
    return get_australian_purchase()


@pytest.fixture
def temporary_purchase():
    """Temporary resident on a 482 visa, $900k new dwelling in VIC."""
    return get_temporary_resident_purchase()


@pytest.fixture
def investment_inputs():
    """Investment assumptions for the foreign new dwelling purchase."""
    return get_investment_inputs()


@pytest.fixture
def foreign_costs(foreign_purchase, benchmarks):
    """Cost breakdown for the foreign new dwelling purchase."""
    return calculate_costs(foreign_purchase, benchmarks)

"""Distribution calculation engine."""

from distribution_engine.calculators.aggregator import Aggregator
from distribution_engine.calculators.allocation_resolver import AllocationResolver
from distribution_engine.calculators.engine import DistributionEngine
from distribution_engine.calculators.free_capacity import FreeCapacityCalculator
from distribution_engine.calculators.intervals import DateRange, InvalidDateRangeError
from distribution_engine.calculators.proration import ProrationEngine
from distribution_engine.calculators.selection import DataSelectionPolicy
from distribution_engine.calculators.types import CalculationResult, FreeCapacityResult

__all__ = [
    "Aggregator",
    "AllocationResolver",
    "CalculationResult",
    "DataSelectionPolicy",
    "DateRange",
    "DistributionEngine",
    "FreeCapacityCalculator",
    "FreeCapacityResult",
    "InvalidDateRangeError",
    "ProrationEngine",
]

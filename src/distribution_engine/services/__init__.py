"""Distribution engine services."""

from distribution_engine.services.allocation_guard import (
    AllocationCapacityGuard,
    CapacityExceededError,
    ProposedAllocation,
)
from distribution_engine.services.distribution_service import (
    DistributionService,
    ProfileNotFoundError,
    ProjectNotFoundError,
    QueryRangeTooLargeError,
)
from distribution_engine.services.repository import DistributionRepository, DistributionStore

__all__ = [
    "AllocationCapacityGuard",
    "CapacityExceededError",
    "DistributionRepository",
    "DistributionService",
    "DistributionStore",
    "ProfileNotFoundError",
    "ProjectNotFoundError",
    "ProposedAllocation",
    "QueryRangeTooLargeError",
]

"""Capacity and registration package.

This package provides the registration eligibility checks and the participation
management for events.
"""

from .enums import Reasons
from .evaluator import RegistrationEvaluator, capacity_snapshot
from .gates import is_full
from .manager import ParticipationService, RegistrationManager
from .types import CapacitySnapshot, RegistrationConflictError, RegistrationEligibility

__all__ = [
    "Reasons",
    "RegistrationEligibility",
    "RegistrationConflictError",
    "CapacitySnapshot",
    "RegistrationEvaluator",
    "RegistrationManager",
    "ParticipationService",
    "capacity_snapshot",
    "is_full",
]

"""Types and exceptions for the registration system."""

import uuid

from pydantic import BaseModel

from events.models import Event


class RegistrationEligibility(BaseModel):
    """Result of a registration check on an event."""

    allowed: bool
    event_id: uuid.UUID
    status: Event.Status
    reason: str | None = None  # we don't use the enum here because we want translation


class CapacitySnapshot(BaseModel):
    """Participant counts and capacity flags exposed to the outer layer."""

    event_id: uuid.UUID
    status: Event.Status
    capacity_max: int | None
    participant_count: int
    registered_count: int
    remaining_places: int | None
    is_full: bool
    can_register: bool


class RegistrationConflictError(Exception):
    """Raised when a registration or confirmation is refused by the state of the event."""

    def __init__(self, message: str, eligibility: RegistrationEligibility) -> None:
        """Initialize the exception with eligibility details."""
        super().__init__(message)
        self.eligibility = eligibility

"""Registration gate classes.

Each gate performs one check. Gates are composed by the RegistrationEvaluator, and the
first refusing gate determines the outcome.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

from django.utils.translation import gettext as _

from events.models import Event

from .enums import Reasons
from .types import RegistrationEligibility

if TYPE_CHECKING:
    from .evaluator import RegistrationEvaluator


def is_full(capacity_max: int | None, participant_count: int) -> bool:
    """Whether active participants reach capacity.

    An unset capacity is never full; a capacity of zero is always full.
    """
    if capacity_max is None:
        return False
    return participant_count >= capacity_max


class BaseRegistrationGate(abc.ABC):
    """Abstract Base Class for a composable registration check."""

    def __init__(self, handler: RegistrationEvaluator) -> None:
        """Initialize the registration check."""
        self.handler = handler
        self.event = handler.event

    @abc.abstractmethod
    def check(self) -> RegistrationEligibility | None:
        """Return a refusal, or None to let the next gate decide."""

    def refuse(self, reason: Reasons) -> RegistrationEligibility:
        return RegistrationEligibility(
            allowed=False, event_id=self.event.pk, status=self.handler.status, reason=_(reason)
        )


class EventStatusGate(BaseRegistrationGate):
    """Gate #1: Finished and cancelled events take no registrations."""

    def check(self) -> RegistrationEligibility | None:
        """Check the derived status."""
        if self.handler.status == Event.Status.FINISHED:
            return self.refuse(Reasons.EVENT_HAS_FINISHED)
        if self.handler.status == Event.Status.CANCELLED:
            return self.refuse(Reasons.EVENT_IS_CANCELLED)
        return None


class RegistrationDeadlineGate(BaseRegistrationGate):
    """Gate #2: Registration closes strictly after the deadline."""

    def check(self) -> RegistrationEligibility | None:
        """Check if the registration deadline has passed."""
        deadline = self.event.registration_deadline
        if deadline and self.handler.now > deadline:
            return self.refuse(Reasons.REGISTRATION_DEADLINE_PASSED)
        return None


class CapacityGate(BaseRegistrationGate):
    """Gate #3: Checks if the event has space for another active participant."""

    def check(self) -> RegistrationEligibility | None:
        """Check capacity against active participants."""
        if is_full(self.event.capacity_max, self.handler.participant_count):
            return self.refuse(Reasons.EVENT_IS_FULL)
        return None


REGISTRATION_GATES: list[type[BaseRegistrationGate]] = [
    EventStatusGate,
    RegistrationDeadlineGate,
    CapacityGate,
]

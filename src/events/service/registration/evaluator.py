"""RegistrationEvaluator: capacity and registration eligibility for an event."""

from datetime import datetime

from django.utils import timezone

from events.models import Event
from events.service.status import derive_status

from .gates import REGISTRATION_GATES, BaseRegistrationGate, is_full
from .types import CapacitySnapshot, RegistrationEligibility


class RegistrationEvaluator:
    """Combine derived status, capacity, participant count and deadline into eligibility.

    All inputs are read once at construction, so evaluation is pure and repeatable. The
    evaluator alone cannot prevent two concurrent registrations from both passing; the
    caller must count and insert under a lock (see ``RegistrationManager``).
    """

    def __init__(
        self,
        event: Event,
        now: datetime | None = None,
        participant_count: int | None = None,
    ) -> None:
        """Initialize the evaluator.

        Args:
            event: The event being registered to.
            now: The evaluation instant. Defaults to the current time.
            participant_count: Active (confirmed + present) participants. Counted from the
                database when omitted.
        """
        self.event = event
        self.now = now or timezone.now()
        self.participant_count = event.participant_count if participant_count is None else participant_count
        self.status = derive_status(event.status, event.date_start, event.date_end, self.now)
        self._gates: list[BaseRegistrationGate] = [gate(self) for gate in REGISTRATION_GATES]

    def evaluate(self) -> RegistrationEligibility:
        """Run the gates in order; the first refusal wins."""
        for gate in self._gates:
            if result := gate.check():
                return result
        return RegistrationEligibility(allowed=True, event_id=self.event.pk, status=self.status)

    def can_register(self) -> bool:
        """Whether a new registration would be accepted."""
        return self.evaluate().allowed

    def is_full(self) -> bool:
        """Whether capacity is reached."""
        return is_full(self.event.capacity_max, self.participant_count)

    def snapshot(self, registered_count: int | None = None) -> CapacitySnapshot:
        """Counts and flags for display."""
        capacity = self.event.capacity_max
        return CapacitySnapshot(
            event_id=self.event.pk,
            status=self.status,
            capacity_max=capacity,
            participant_count=self.participant_count,
            registered_count=self.event.registered_count if registered_count is None else registered_count,
            remaining_places=None if capacity is None else max(capacity - self.participant_count, 0),
            is_full=self.is_full(),
            can_register=self.can_register(),
        )


def capacity_snapshot(event: Event, now: datetime | None = None) -> CapacitySnapshot:
    """Return the capacity snapshot of an event at ``now``."""
    return RegistrationEvaluator(event, now=now).snapshot()

"""RegistrationManager and ParticipationService for participant registration."""

from datetime import datetime

import structlog
from django.contrib.auth.base_user import AbstractBaseUser
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext as _

from events.exceptions import AlreadyRegisteredError, InvalidParticipationTransitionError
from events.models import Event, Participation
from events.service.status import derive_status

from .enums import Reasons
from .evaluator import RegistrationEvaluator
from .gates import is_full
from .types import RegistrationConflictError, RegistrationEligibility

logger = structlog.get_logger(__name__)


class RegistrationManager:
    """The Registration Manager Class.

    It is responsible for registering a user to an event, ensuring eligibility checks pass
    and that concurrent registrations cannot exceed capacity.
    """

    def __init__(self, user: AbstractBaseUser, event: Event) -> None:
        """Initialize the RegistrationManager."""
        self.user = user
        self.event = event

    def check_eligibility(self, now: datetime | None = None) -> RegistrationEligibility:
        """Evaluate registration without side effects.

        Returns:
            RegistrationEligibility
        """
        return RegistrationEvaluator(self.event, now=now).evaluate()

    @transaction.atomic
    def register(
        self,
        role: Participation.Role = Participation.Role.PARTICIPANT,
        notes: str = "",
        now: datetime | None = None,
    ) -> Participation:
        """Register the user to the event.

        The participation is created confirmed, so it takes a place right away. Counting active
        participants and inserting happen while the event row is locked, so two concurrent
        registrations cannot both take the last place. A previously cancelled participation is
        reactivated instead of duplicated.

        Returns:
            Participation

        Raises:
            AlreadyRegisteredError: the user already holds a participation that is not cancelled.
            RegistrationConflictError: the event refuses registrations (finished, cancelled,
                past deadline or full).
        """
        now = now or timezone.now()
        event = Event.objects.select_for_update().get(pk=self.event.pk)
        existing = (
            Participation.objects.select_for_update().filter(event=event, participant=self.user).first()
        )
        if existing and existing.status != Participation.Status.CANCELLED:
            raise AlreadyRegisteredError("The user is already registered to this event.")

        count = Participation.objects.filter(event=event).active().count()
        eligibility = RegistrationEvaluator(event, now=now, participant_count=count).evaluate()
        if not eligibility.allowed:
            logger.info(
                "registration_refused",
                event_id=str(event.pk),
                user_id=str(self.user.pk),
                reason=eligibility.reason,
            )
            raise RegistrationConflictError("The user cannot register to this event.", eligibility=eligibility)

        if existing:
            existing.status = Participation.Status.CONFIRMED
            existing.registered_at = now
            existing.role = role
            existing.notes = notes
            existing.validated_at = now
            existing.validated_by = None
            existing.save()
            participation = existing
        else:
            participation = Participation.objects.create(
                event=event,
                participant=self.user,
                registered_at=now,
                status=Participation.Status.CONFIRMED,
                validated_at=now,
                role=role,
                notes=notes,
            )
        logger.info(
            "participation_registered",
            event_id=str(event.pk),
            user_id=str(self.user.pk),
            participation_id=str(participation.pk),
            reactivated=existing is not None,
        )
        return participation

    def cancel(self) -> Participation:
        """Cancel the user's own participation (soft)."""
        participation = Participation.objects.get(event=self.event, participant=self.user)
        return ParticipationService(participation).cancel()


class ParticipationService:
    """Status changes of a single participation.

    Participations are never deleted once registered; cancelling is a status change.
    """

    TRANSITIONS: dict[str, frozenset[str]] = {
        Participation.Status.REGISTERED: frozenset(
            {Participation.Status.CONFIRMED, Participation.Status.CANCELLED}
        ),
        Participation.Status.CONFIRMED: frozenset(
            {Participation.Status.PRESENT, Participation.Status.ABSENT, Participation.Status.CANCELLED}
        ),
        Participation.Status.PRESENT: frozenset({Participation.Status.ABSENT}),
        Participation.Status.ABSENT: frozenset({Participation.Status.PRESENT}),
        Participation.Status.CANCELLED: frozenset(),
    }

    def __init__(self, participation: Participation) -> None:
        """Initialize the service."""
        self.participation = participation

    def _assert_transition(self, target: Participation.Status) -> None:
        current = self.participation.status
        if target not in self.TRANSITIONS[current]:
            raise InvalidParticipationTransitionError(f"Cannot move a participation from {current} to {target}.")

    def _set_status(self, target: Participation.Status) -> Participation:
        self._assert_transition(target)
        old_status = self.participation.status
        self.participation.status = target
        self.participation.save()
        logger.info(
            "participation_status_changed",
            participation_id=str(self.participation.pk),
            event_id=str(self.participation.event_id),
            old=old_status,
            new=target,
        )
        return self.participation

    @transaction.atomic
    def confirm(self, validated_by: AbstractBaseUser | None = None, now: datetime | None = None) -> Participation:
        """Confirm a pending registration (one added as ``registered`` by an organizer).

        Confirmation makes it count against capacity.

        Raises:
            InvalidParticipationTransitionError: the participation is not in ``registered``.
            RegistrationConflictError: the event is already full.
        """
        self._assert_transition(Participation.Status.CONFIRMED)
        now = now or timezone.now()
        event = Event.objects.select_for_update().get(pk=self.participation.event_id)
        count = Participation.objects.filter(event=event).active().count()
        if is_full(event.capacity_max, count):
            eligibility = RegistrationEligibility(
                allowed=False,
                event_id=event.pk,
                status=derive_status(event.status, event.date_start, event.date_end, now),
                reason=_(Reasons.EVENT_IS_FULL),
            )
            raise RegistrationConflictError("Event is full.", eligibility=eligibility)

        self.participation.validated_at = now
        self.participation.validated_by = validated_by
        return self._set_status(Participation.Status.CONFIRMED)

    def mark_present(self) -> Participation:
        """Record physical attendance."""
        self._assert_transition(Participation.Status.PRESENT)
        self.participation.presence_confirmed = True
        return self._set_status(Participation.Status.PRESENT)

    def mark_absent(self) -> Participation:
        """Record a no-show."""
        self._assert_transition(Participation.Status.ABSENT)
        self.participation.presence_confirmed = False
        return self._set_status(Participation.Status.ABSENT)

    def cancel(self) -> Participation:
        """Cancel the participation. The record is kept."""
        return self._set_status(Participation.Status.CANCELLED)

    def evaluate(
        self,
        score: int,
        comment: str = "",
        recommends: bool | None = None,
        now: datetime | None = None,
    ) -> Participation:
        """Record the participant's evaluation of the event (score 1 to 5).

        When the event issues certificates, the certificate is generated with the evaluation.

        Raises:
            InvalidParticipationTransitionError: the participation is not confirmed or present.
            django.core.exceptions.ValidationError: the score is out of range.
        """
        if not self.participation.is_active:
            raise InvalidParticipationTransitionError("Only confirmed or present participants can evaluate an event.")
        self.participation.evaluation_score = score
        self.participation.evaluation_comment = comment
        self.participation.recommends = recommends
        if self.participation.event.issues_certificate and self.participation.certificate_generated_at is None:
            self.participation.certificate_generated_at = now or timezone.now()
        self.participation.save()
        logger.info(
            "participation_evaluated",
            participation_id=str(self.participation.pk),
            event_id=str(self.participation.event_id),
            score=score,
        )
        return self.participation

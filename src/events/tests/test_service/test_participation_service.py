import typing as t
from datetime import UTC, datetime

import pytest
from django.contrib.auth.models import User
from django.core.exceptions import ValidationError

from events.exceptions import InvalidParticipationTransitionError
from events.models import Event, Participation
from events.service.registration import ParticipationService, Reasons, RegistrationConflictError

pytestmark = pytest.mark.django_db


def test_confirm_records_validation(registration: Participation, organizer_user: User) -> None:
    now = datetime(2025, 5, 21, tzinfo=UTC)

    participation = ParticipationService(registration).confirm(validated_by=organizer_user, now=now)

    participation.refresh_from_db()
    assert participation.status == Participation.Status.CONFIRMED
    assert participation.validated_at == now
    assert participation.validated_by == organizer_user
    assert participation.event.participant_count == 1


def test_confirm_is_refused_when_full(
    festival: Event, confirmed_pair: list[Participation], registration: Participation
) -> None:
    with pytest.raises(RegistrationConflictError) as exc_info:
        ParticipationService(registration).confirm()

    assert exc_info.value.eligibility.reason == Reasons.EVENT_IS_FULL
    registration.refresh_from_db()
    assert registration.status == Participation.Status.REGISTERED


def test_attendance_flow(registration: Participation) -> None:
    service = ParticipationService(registration)
    service.confirm()

    service.mark_present()
    assert registration.presence_confirmed is True

    service.mark_absent()
    registration.refresh_from_db()
    assert registration.status == Participation.Status.ABSENT
    assert registration.presence_confirmed is False


@pytest.mark.parametrize(
    "method",
    ["mark_present", "mark_absent"],
)
def test_attendance_requires_confirmation(registration: Participation, method: str) -> None:
    with pytest.raises(InvalidParticipationTransitionError):
        getattr(ParticipationService(registration), method)()

    assert registration.status == Participation.Status.REGISTERED
    assert registration.presence_confirmed is False


def test_cancelled_is_final(registration: Participation) -> None:
    service = ParticipationService(registration)
    service.cancel()

    with pytest.raises(InvalidParticipationTransitionError):
        service.confirm()
    assert Participation.objects.filter(pk=registration.pk).exists()


def test_evaluate_generates_certificate(festival: Event, registration: Participation) -> None:
    festival.issues_certificate = True
    festival.save()
    service = ParticipationService(registration)
    service.confirm()
    service.mark_present()
    now = datetime(2025, 6, 4, tzinfo=UTC)

    participation = service.evaluate(5, comment="Très bien", recommends=True, now=now)

    assert participation.evaluation_score == 5
    assert participation.recommends is True
    assert participation.certificate_generated_at == now
    assert festival.average_rating is not None


def test_evaluate_without_certificate(registration: Participation) -> None:
    service = ParticipationService(registration)
    service.confirm()

    participation = service.evaluate(3)

    assert participation.certificate_generated_at is None


def test_evaluate_requires_active_participation(registration: Participation) -> None:
    with pytest.raises(InvalidParticipationTransitionError):
        ParticipationService(registration).evaluate(4)


@pytest.mark.parametrize("score", [0, 6])
def test_evaluate_rejects_out_of_range_score(registration: Participation, score: int) -> None:
    service = ParticipationService(registration)
    service.confirm()

    with pytest.raises(ValidationError):
        service.evaluate(score)


def test_confirmed_participants_fill_capacity(
    festival: Event, user_factory: t.Callable[[str], User]
) -> None:
    first, second, third = (
        Participation.objects.create(event=festival, participant=user_factory(name)) for name in ("a", "b", "c")
    )
    ParticipationService(first).confirm()
    ParticipationService(second).confirm()

    assert festival.is_full() is True
    with pytest.raises(RegistrationConflictError):
        ParticipationService(third).confirm()

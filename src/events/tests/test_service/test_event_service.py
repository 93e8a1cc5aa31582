from datetime import UTC, datetime

import pytest
from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from pydantic import ValidationError as PydanticValidationError

from events.models import Event, Participation
from events.service.event_service import EventPayload, create_event, update_event

pytestmark = pytest.mark.django_db


def test_create_event_from_plain_string(organizer_user: User) -> None:
    payload = EventPayload(
        name="مهرجان الشعر",
        date_start=datetime(2030, 3, 1, tzinfo=UTC),
        date_end=datetime(2030, 3, 2, tzinfo=UTC),
        capacity_max=50,
    )

    event = create_event(organizer_user, payload, lang="ar")

    assert event.name == {"ar": "مهرجان الشعر"}
    assert event.status == Event.Status.PLANNED
    assert event.organizer == organizer_user


def test_create_event_validates_dates(organizer_user: User) -> None:
    payload = EventPayload(
        name={"fr": "Salon"},
        date_start=datetime(2030, 3, 2, tzinfo=UTC),
        date_end=datetime(2030, 3, 1, tzinfo=UTC),
    )

    with pytest.raises(ValidationError):
        create_event(organizer_user, payload)


def test_payload_rejects_negative_capacity() -> None:
    with pytest.raises(PydanticValidationError):
        EventPayload(capacity_max=-1)


def test_update_event_merges_translations(festival: Event) -> None:
    event = update_event(festival, EventPayload(name="Book Festival", venue="Oran"), lang="en")

    event.refresh_from_db()
    assert event.name == {"fr": "Festival du livre", "ar": "مهرجان الكتاب", "en": "Book Festival"}
    assert event.venue == "Oran"
    assert event.capacity_max == 2


def test_update_capacity_below_active_count(festival: Event, confirmed_pair: list[Participation]) -> None:
    event = update_event(festival, EventPayload(capacity_max=1))

    assert event.capacity_max == 1
    assert Participation.objects.filter(event=event).active().count() == 2

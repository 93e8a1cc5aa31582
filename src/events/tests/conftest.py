import typing as t
from datetime import UTC, date, datetime, time

import pytest
from django.contrib.auth.models import User

from events.models import Event, Participation, Programme
from events.service.programme import ProgrammeScheduler


@pytest.fixture
def confirmed_pair(festival: Event, user_factory: t.Callable[[str], User]) -> list[Participation]:
    """Two confirmed participants, which fills the festival."""
    return [
        Participation.objects.create(
            event=festival, participant=user_factory(name), status=Participation.Status.CONFIRMED
        )
        for name in ("amina", "yacine")
    ]


@pytest.fixture
def registration(festival: Event, participant_user: User) -> Participation:
    return Participation.objects.create(event=festival, participant=participant_user)


@pytest.fixture
def undated_event(organizer_user: User) -> Event:
    return Event.objects.create(name={"ar": "أمسية شعرية"}, organizer=organizer_user)


@pytest.fixture
def programme_factory(festival: Event) -> t.Callable[..., Programme]:
    def _make(title: str, slot_date: date = date(2025, 6, 2)) -> Programme:
        return ProgrammeScheduler(festival).add({"fr": title}, slot_date, time(10, 0), time(11, 30))

    return _make


@pytest.fixture
def five_slots(programme_factory: t.Callable[..., Programme]) -> list[Programme]:
    return [programme_factory(f"Slot {i}") for i in range(5)]


@pytest.fixture
def during_festival() -> datetime:
    return datetime(2025, 6, 2, 12, 0, tzinfo=UTC)

"""Shared fixtures for the CultureHub test suite."""

import typing as t
from datetime import UTC, datetime

import pytest
from django.contrib.auth.models import User

from events.models import Event


@pytest.fixture
def organizer_user(django_user_model: t.Type[User]) -> User:
    return django_user_model.objects.create_user(username="organizer", email="organizer@example.com", password="pass")


@pytest.fixture
def participant_user(django_user_model: t.Type[User]) -> User:
    return django_user_model.objects.create_user(
        username="participant", email="participant@example.com", password="pass"
    )


@pytest.fixture
def user_factory(django_user_model: t.Type[User]) -> t.Callable[[str], User]:
    def _make(username: str) -> User:
        return django_user_model.objects.create_user(
            username=username, email=f"{username}@example.com", password="pass"
        )

    return _make


@pytest.fixture
def festival_start() -> datetime:
    return datetime(2025, 6, 1, 9, 0, tzinfo=UTC)


@pytest.fixture
def festival_end() -> datetime:
    return datetime(2025, 6, 3, 18, 0, tzinfo=UTC)


@pytest.fixture
def festival(organizer_user: User, festival_start: datetime, festival_end: datetime) -> Event:
    """A three-day book festival with two places, registration closing on May 30th."""
    return Event.objects.create(
        name={"fr": "Festival du livre", "ar": "مهرجان الكتاب"},
        date_start=festival_start,
        date_end=festival_end,
        registration_deadline=datetime(2025, 5, 30, 23, 59, tzinfo=UTC),
        capacity_max=2,
        organizer=organizer_user,
        venue="Bibliothèque nationale",
    )


@pytest.fixture
def open_event(organizer_user: User, festival_start: datetime, festival_end: datetime) -> Event:
    """Same dates as the festival, without capacity or deadline."""
    return Event.objects.create(
        name={"fr": "Lecture publique"},
        date_start=festival_start,
        date_end=festival_end,
        organizer=organizer_user,
    )

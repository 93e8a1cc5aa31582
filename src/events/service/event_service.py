import typing as t
from datetime import datetime
from decimal import Decimal

import structlog
from django.contrib.auth.base_user import AbstractBaseUser
from pydantic import BaseModel, Field

from common.i18n import DEFAULT_LANGUAGE, prepare_multilingual_value
from events.models import Event

from . import update_db_instance

logger = structlog.get_logger(__name__)

MULTILINGUAL_FIELDS = ("name", "description", "accessibility")

LocalizedInput = dict[str, str] | str


class EventPayload(BaseModel):
    """Editable event attributes. Localized fields accept a language-map or a plain string."""

    name: LocalizedInput | None = None
    description: LocalizedInput | None = None
    accessibility: LocalizedInput | None = None
    date_start: datetime | None = None
    date_end: datetime | None = None
    registration_deadline: datetime | None = None
    capacity_max: int | None = Field(default=None, ge=0)
    venue: str | None = None
    fee: Decimal | None = Field(default=None, ge=0)
    registration_required: bool | None = None
    minimum_age: int | None = Field(default=None, ge=0, le=120)
    issues_certificate: bool | None = None


def _prepare(data: dict[str, t.Any], lang: str, event: Event | None = None) -> dict[str, t.Any]:
    for field in MULTILINGUAL_FIELDS:
        if field in data:
            existing = getattr(event, field) if event else None
            data[field] = prepare_multilingual_value(data[field], lang, existing)
    return data


def create_event(organizer: AbstractBaseUser | None, payload: EventPayload, lang: str = DEFAULT_LANGUAGE) -> Event:
    """Create an event. Its status starts as planned and is derived from its dates.

    Raises:
        django.core.exceptions.ValidationError: invalid dates or missing name.
    """
    data = _prepare(payload.model_dump(exclude_unset=True), lang)
    event = Event(organizer=organizer, **data)
    event.save()
    logger.info("event_created", event_id=str(event.pk), status=event.status)
    return event


def update_event(event: Event, payload: EventPayload, lang: str = DEFAULT_LANGUAGE) -> Event:
    """Apply a partial update. Localized strings are merged into the stored language-maps.

    A lower capacity is accepted even when more participants are already active: capacity
    only applies to registrations made from now on.
    """
    data = _prepare(payload.model_dump(exclude_unset=True), lang, event)
    event = update_db_instance(event, **data)
    logger.info("event_updated", event_id=str(event.pk), fields=sorted(data))
    return event

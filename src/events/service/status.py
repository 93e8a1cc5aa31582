"""Event lifecycle status derivation.

An event's status is either *derived* from ``(now, date_start, date_end)`` or a sticky
*override* set by an authorized actor. Internally the two are distinct types so that
derivation can never replace an override; they are flattened to ``Event.Status`` at the
model boundary.

Derivation rule, applied everywhere:

- ``now < date_start``: planned
- ``date_start <= now <= date_end``: ongoing (inclusive on both ends)
- ``now > date_end``: finished

With a missing bound the derivation is a no-op.
"""

import typing as t
from dataclasses import dataclass
from datetime import datetime

import structlog
from django.utils import timezone

from events.exceptions import MissingEventDatesError
from events.models import Event

logger = structlog.get_logger(__name__)

DERIVED_STATUSES = frozenset({Event.Status.PLANNED, Event.Status.ONGOING, Event.Status.FINISHED})
OVERRIDE_STATUSES = frozenset({Event.Status.CANCELLED, Event.Status.POSTPONED})


@dataclass(frozen=True)
class Derived:
    """A status computed from the date bounds."""

    status: Event.Status

    def __post_init__(self) -> None:
        if self.status not in DERIVED_STATUSES:
            raise ValueError(f"{self.status!r} is not a derived status.")


@dataclass(frozen=True)
class Override:
    """A sticky status set explicitly (cancelled or postponed)."""

    status: Event.Status

    def __post_init__(self) -> None:
        if self.status not in OVERRIDE_STATUSES:
            raise ValueError(f"{self.status!r} is not an override status.")


Lifecycle = Derived | Override


def lifecycle_of(status: str) -> Lifecycle:
    """Lift a stored flat status into its tagged form."""
    value = Event.Status(status)
    if value in OVERRIDE_STATUSES:
        return Override(value)
    return Derived(value)


def status_from_bounds(date_start: datetime, date_end: datetime, now: datetime) -> Event.Status:
    """Pure date comparison. Both bounds are required."""
    if now < date_start:
        return Event.Status.PLANNED
    if now <= date_end:
        return Event.Status.ONGOING
    return Event.Status.FINISHED


def derive(
    lifecycle: Lifecycle, date_start: datetime | None, date_end: datetime | None, now: datetime
) -> Lifecycle:
    """Advance a lifecycle to ``now``. Overrides and incomplete bounds are returned unchanged."""
    match lifecycle:
        case Override():
            return lifecycle
        case Derived() if date_start is None or date_end is None:
            return lifecycle
        case _:
            return Derived(status_from_bounds(t.cast(datetime, date_start), t.cast(datetime, date_end), now))


def derive_status(
    current: str, date_start: datetime | None, date_end: datetime | None, now: datetime | None = None
) -> Event.Status:
    """Derive the flat status of an event at ``now`` (defaults to the current time).

    Idempotent: applying it again at the same instant returns the same value.
    """
    return derive(lifecycle_of(current), date_start, date_end, now or timezone.now()).status


def require_derived_status(
    current: str, date_start: datetime | None, date_end: datetime | None, now: datetime | None = None
) -> Event.Status:
    """Like ``derive_status``, for an explicit request that must not silently keep a stale value.

    Raises:
        MissingEventDatesError: If the status is not overridden and a bound is missing.
    """
    lifecycle = lifecycle_of(current)
    if isinstance(lifecycle, Derived):
        missing = [name for name, value in (("date_start", date_start), ("date_end", date_end)) if value is None]
        if missing:
            raise MissingEventDatesError(f"Cannot derive the event status without {', '.join(missing)}.", missing)
    return derive(lifecycle, date_start, date_end, now or timezone.now()).status


def refresh_event_status(event: Event, now: datetime | None = None, commit: bool = True) -> bool:
    """Recompute the cached status of an event.

    Args:
        event: The event to refresh.
        now: The instant to derive at.
        commit: Persist the new status when it changed.

    Returns:
        Whether the status changed.
    """
    new_status = derive_status(event.status, event.date_start, event.date_end, now)
    if new_status == event.status:
        return False
    old_status = event.status
    event.status = new_status
    if commit:
        event.save(update_fields=["status", "updated_at"])
        logger.info("event_status_refreshed", event_id=str(event.pk), old=old_status, new=new_status)
    return True


def override_status(event: Event, status: Event.Status) -> Event:
    """Set a sticky status (cancelled or postponed) on an event."""
    lifecycle = Override(Event.Status(status))
    event.status = lifecycle.status
    event.save(update_fields=["status", "updated_at"])
    logger.info("event_status_overridden", event_id=str(event.pk), status=lifecycle.status)
    return event


def clear_override(event: Event, now: datetime | None = None) -> Event:
    """Lift a sticky status and return the event to date-based derivation.

    Without both bounds the event falls back to planned, its creation status.
    """
    if not isinstance(lifecycle_of(event.status), Override):
        return event
    lifecycle = derive(Derived(Event.Status.PLANNED), event.date_start, event.date_end, now or timezone.now())
    event.status = lifecycle.status
    event.save(update_fields=["status", "updated_at"])
    logger.info("event_status_override_cleared", event_id=str(event.pk), status=event.status)
    return event

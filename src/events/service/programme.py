"""Programme slot validation and ordering.

Slots of an event are kept in a contiguous order ``0..n-1``. Every change of membership or
position goes through ``OrderedSlots`` and is renumbered as a whole, so gaps and duplicates
cannot appear.
"""

import datetime
import typing as t
from uuid import UUID

import structlog
from django.db import transaction
from django.utils import timezone

from events.exceptions import InvalidScheduleError
from events.models import Event, Programme

logger = structlog.get_logger(__name__)

T = t.TypeVar("T")


def _as_date(value: datetime.datetime | datetime.date) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return timezone.localdate(value) if timezone.is_aware(value) else value.date()
    return value


def duration_minutes(start_time: datetime.time, end_time: datetime.time) -> int:
    """Minutes between two times of the same day."""
    start = datetime.datetime.combine(datetime.date.min, start_time)
    end = datetime.datetime.combine(datetime.date.min, end_time)
    return int((end - start).total_seconds() // 60)


def check_slot(
    date_start: datetime.datetime | datetime.date | None,
    date_end: datetime.datetime | datetime.date | None,
    slot_date: datetime.date,
    start_time: datetime.time,
    end_time: datetime.time,
) -> None:
    """Validate a slot against date bounds (date-only, inclusive) and its own time range.

    A missing bound leaves that side unchecked.

    Raises:
        InvalidScheduleError: keyed by the offending field(s).
    """
    errors: dict[str, str] = {}
    if date_start is not None and slot_date < _as_date(date_start):
        errors["date"] = "The programme date is before the start of the event."
    elif date_end is not None and slot_date > _as_date(date_end):
        errors["date"] = "The programme date is after the end of the event."
    if end_time <= start_time:
        errors["end_time"] = "End time must be after start time."
    if errors:
        raise InvalidScheduleError(errors)


def validate_slot(
    event: Event, slot_date: datetime.date, start_time: datetime.time, end_time: datetime.time
) -> int:
    """Validate a new or edited slot against its event.

    Returns:
        The slot duration in minutes.

    Raises:
        InvalidScheduleError: keyed by the offending field(s).
    """
    check_slot(event.date_start, event.date_end, slot_date, start_time, end_time)
    return duration_minutes(start_time, end_time)


class OrderedSlots(t.Generic[T]):
    """An ordered list whose positions are always ``0..n-1``.

    Moving an item from ``i`` to ``j`` shifts every item strictly between them by one.
    """

    def __init__(self, items: t.Iterable[T] = ()) -> None:
        self._items: list[T] = list(items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> t.Iterator[T]:
        return iter(self._items)

    def __getitem__(self, position: int) -> T:
        return self._items[position]

    def _check_position(self, position: int, upper: int) -> None:
        if not 0 <= position <= upper:
            raise IndexError(f"Position {position} is out of range 0..{upper}.")

    def index(self, item: T) -> int:
        return self._items.index(item)

    def insert(self, item: T, position: int | None = None) -> int:
        """Insert ``item`` at ``position`` (default: last). Returns its position."""
        if position is None:
            position = len(self._items)
        self._check_position(position, len(self._items))
        self._items.insert(position, item)
        return position

    def move(self, from_position: int, to_position: int) -> None:
        last = len(self._items) - 1
        self._check_position(from_position, last)
        self._check_position(to_position, last)
        item = self._items.pop(from_position)
        self._items.insert(to_position, item)

    def remove(self, position: int) -> T:
        self._check_position(position, len(self._items) - 1)
        return self._items.pop(position)

    def positions(self) -> list[tuple[int, T]]:
        """Every item with its position."""
        return list(enumerate(self._items))


class ProgrammeScheduler:
    """Create, reorder and remove the programme slots of one event.

    Every operation runs in a transaction with the event's slots locked, and persists the
    renumbered orders.
    """

    def __init__(self, event: Event) -> None:
        """Initialize the scheduler."""
        self.event = event

    def slots(self) -> list[Programme]:
        """The event's slots in programme order."""
        return list(Programme.objects.for_event(self.event.pk))

    def _locked_slots(self) -> OrderedSlots[Programme]:
        return OrderedSlots(Programme.objects.select_for_update().for_event(self.event.pk))

    def _persist(self, slots: OrderedSlots[Programme]) -> list[Programme]:
        changed = []
        for position, programme in slots.positions():
            if programme.order != position:
                programme.order = position
                changed.append(programme)
        if changed:
            Programme.objects.bulk_update(changed, ["order"])
        return list(slots)

    def _position_of(self, slots: OrderedSlots[Programme], programme: Programme) -> int:
        for position, candidate in slots.positions():
            if candidate.pk == programme.pk:
                return position
        raise Programme.DoesNotExist(f"Programme {programme.pk} does not belong to event {self.event.pk}.")

    @transaction.atomic
    def add(
        self,
        title: dict[str, str],
        date: datetime.date,
        start_time: datetime.time,
        end_time: datetime.time,
        position: int | None = None,
        **fields: t.Any,
    ) -> Programme:
        """Create a slot and insert it at ``position`` (default: last).

        Raises:
            InvalidScheduleError: the slot does not fit the event.
            IndexError: ``position`` is out of range.
        """
        validate_slot(self.event, date, start_time, end_time)
        slots = self._locked_slots()
        programme = Programme(
            event=self.event,
            title=title,
            date=date,
            start_time=start_time,
            end_time=end_time,
            **fields,
        )
        programme.save()
        slots.insert(programme, position)
        self._persist(slots)
        logger.info(
            "programme_added",
            event_id=str(self.event.pk),
            programme_id=str(programme.pk),
            order=programme.order,
        )
        return programme

    @transaction.atomic
    def move(self, programme: Programme, to_position: int) -> list[Programme]:
        """Move a slot to ``to_position``, shifting the slots in between.

        Returns:
            The event's slots in their new order.
        """
        slots = self._locked_slots()
        from_position = self._position_of(slots, programme)
        slots.move(from_position, to_position)
        result = self._persist(slots)
        programme.order = to_position
        logger.info(
            "programme_moved",
            event_id=str(self.event.pk),
            programme_id=str(programme.pk),
            from_position=from_position,
            to_position=to_position,
        )
        return result

    @transaction.atomic
    def remove(self, programme: Programme) -> list[Programme]:
        """Delete a slot and close the gap.

        Returns:
            The remaining slots in order.
        """
        slots = self._locked_slots()
        removed = slots.remove(self._position_of(slots, programme))
        removed.delete()
        logger.info("programme_removed", event_id=str(self.event.pk), programme_id=str(programme.pk))
        return self._persist(slots)

    @transaction.atomic
    def reorder(self, programme_ids: t.Sequence[UUID]) -> list[Programme]:
        """Apply a complete new order given as the list of the event's slot ids.

        Raises:
            InvalidScheduleError: the ids are not exactly the event's slots.
        """
        slots = self._locked_slots()
        by_id = {programme.pk: programme for programme in slots}
        if len(programme_ids) != len(by_id) or set(programme_ids) != set(by_id):
            raise InvalidScheduleError({"programmes": "The new order must list every programme of the event once."})
        return self._persist(OrderedSlots(by_id[pk] for pk in programme_ids))

    @transaction.atomic
    def duplicate(self, programme: Programme) -> Programme:
        """Copy a slot to the end of the programme, reset to planned."""
        copy = self.add(
            title=dict(programme.title),
            date=programme.date,
            start_time=programme.start_time,
            end_time=programme.end_time,
            description=dict(programme.description),
            activity_type=programme.activity_type,
            location_detail=programme.location_detail,
            max_participants=programme.max_participants,
            required_level=programme.required_level,
            main_language=programme.main_language,
            translation_available=programme.translation_available,
            recording_allowed=programme.recording_allowed,
            live_stream=programme.live_stream,
            organizer_notes=programme.organizer_notes,
        )
        logger.info("programme_duplicated", source_id=str(programme.pk), programme_id=str(copy.pk))
        return copy

    @transaction.atomic
    def normalize(self) -> list[Programme]:
        """Renumber the slots to ``0..n-1`` keeping their relative order."""
        return self._persist(self._locked_slots())

    def set_status(self, programme: Programme, status: Programme.Status) -> Programme:
        """Set the author-controlled status of a slot."""
        programme.status = Programme.Status(status)
        Programme.objects.filter(pk=programme.pk).update(status=programme.status, updated_at=timezone.now())
        logger.info("programme_status_set", programme_id=str(programme.pk), status=programme.status)
        return programme

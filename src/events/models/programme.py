import typing as t

from django.db import models

from common.fields import MultilingualField
from common.i18n import resolve
from common.models import TimeStampedModel


class ProgrammeQuerySet(models.QuerySet["Programme"]):
    def for_event(self, event_id: t.Any) -> t.Self:
        """The slots of one event, in programme order."""
        return self.filter(event_id=event_id).order_by("order", "created_at")


class Programme(TimeStampedModel):
    """A timed sub-activity scheduled within an event's date range.

    ``order`` is unique and contiguous (0..n-1) per event: new slots are appended, and every
    other change of position goes through ``ProgrammeScheduler``.
    ``status`` is set by the organizer and is never derived from the slot's date.
    """

    class Status(models.TextChoices):
        PLANNED = "planned"
        ONGOING = "ongoing"
        FINISHED = "finished"
        CANCELLED = "cancelled"
        POSTPONED = "postponed"

    class ActivityType(models.TextChoices):
        CONFERENCE = "conference"
        WORKSHOP = "workshop"
        SHOW = "show"
        EXHIBITION = "exhibition"
        VISIT = "visit"
        TASTING = "tasting"
        SCREENING = "screening"
        CONCERT = "concert"
        READING = "reading"
        DEBATE = "debate"
        TRAINING = "training"
        CEREMONY = "ceremony"
        OTHER = "other"

    class Level(models.TextChoices):
        BEGINNER = "beginner"
        INTERMEDIATE = "intermediate"
        ADVANCED = "advanced"
        EXPERT = "expert"

    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="programmes")
    title = MultilingualField(required_any=("fr", "ar"))
    description = MultilingualField(blank=True, rich_text=True)
    date = models.DateField(db_index=True)
    start_time = models.TimeField()
    end_time = models.TimeField()
    order = models.PositiveIntegerField(default=0, db_index=True)
    activity_type = models.CharField(
        max_length=20, choices=ActivityType.choices, default=ActivityType.OTHER, db_index=True
    )
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PLANNED, db_index=True)
    location_detail = models.CharField(max_length=255, blank=True, default="")
    max_participants = models.PositiveIntegerField(null=True, blank=True)
    required_level = models.CharField(max_length=20, choices=Level.choices, blank=True, default="")
    main_language = models.CharField(max_length=10, default="ar")
    translation_available = models.BooleanField(default=False)
    recording_allowed = models.BooleanField(default=False)
    live_stream = models.BooleanField(default=False)
    organizer_notes = models.TextField(blank=True, default="")

    objects = ProgrammeQuerySet.as_manager()

    class Meta:
        ordering = ["event", "order"]
        indexes = [
            models.Index(fields=["event", "order"], name="idx_programme_event_order"),
        ]
        constraints = [
            # Checked at commit: renumbering passes through duplicate orders.
            models.UniqueConstraint(
                fields=["event", "order"],
                name="unique_programme_event_order",
                deferrable=models.Deferrable.DEFERRED,
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order}. {self.get_title()}"

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Append a new slot after the last slot of its event.

        Positions of existing slots only change through ``ProgrammeScheduler``.
        """
        if self._state.adding and self.event_id is not None:
            last = Programme.objects.filter(event_id=self.event_id).aggregate(last=models.Max("order"))["last"]
            self.order = 0 if last is None else last + 1
        super().save(*args, **kwargs)

    def clean(self) -> None:
        """Check the slot against its event's date range and its own time range."""
        super().clean()
        from events.service.programme import validate_slot

        if self.event_id is None or None in (self.date, self.start_time, self.end_time):
            return
        validate_slot(self.event, self.date, self.start_time, self.end_time)

    def get_title(self, lang: str | None = None) -> str:
        """The slot title in ``lang``."""
        return resolve(self.title, lang)

    def get_description(self, lang: str | None = None) -> str:
        """The slot description in ``lang``."""
        return resolve(self.description, lang)

    @property
    def duration_minutes(self) -> int | None:
        """Length of the slot in minutes."""
        from events.service.programme import duration_minutes

        if self.start_time is None or self.end_time is None:
            return None
        return duration_minutes(self.start_time, self.end_time)

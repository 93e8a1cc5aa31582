import typing as t
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Avg, Q
from django.utils import timezone

from common.fields import MultilingualField
from common.i18n import resolve
from common.models import TimeStampedModel


class EventQuerySet(models.QuerySet["Event"]):
    def with_organizer(self) -> t.Self:
        """Select the organizer and the event type."""
        return self.select_related("organizer", "event_type")

    def with_participant_counts(self) -> t.Self:
        """Annotate active (confirmed + present) and registered (non-cancelled) participant counts."""
        from .participation import Participation

        return self.annotate(
            active_participants=models.Count(
                "participations",
                filter=Q(participations__status__in=Participation.ACTIVE_STATUSES),
                distinct=True,
            ),
            registered_participants=models.Count(
                "participations",
                filter=~Q(participations__status=Participation.Status.CANCELLED),
                distinct=True,
            ),
        )

    def active(self, now: datetime | None = None) -> t.Self:
        """Events that are ongoing, or planned and not yet over."""
        now = now or timezone.now()
        return self.filter(
            Q(status=Event.Status.ONGOING) | Q(status=Event.Status.PLANNED, date_end__gte=now)
        ).order_by("date_start")

    def upcoming(self, now: datetime | None = None) -> t.Self:
        """Events starting after ``now`` that are not cancelled."""
        now = now or timezone.now()
        return self.filter(date_start__gt=now).exclude(status=Event.Status.CANCELLED).order_by("date_start")

    def derivable(self) -> t.Self:
        """Events whose status can be derived from dates: both bounds present and no sticky override."""
        return self.filter(date_start__isnull=False, date_end__isnull=False).exclude(
            status__in=[Event.Status.CANCELLED, Event.Status.POSTPONED]
        )


class EventManager(models.Manager["Event"]):
    def get_queryset(self) -> EventQuerySet:
        """Get base queryset for events."""
        return EventQuerySet(self.model, using=self._db)

    def with_organizer(self) -> EventQuerySet:
        """Returns a queryset selecting the organizer and the event type."""
        return self.get_queryset().with_organizer()

    def with_participant_counts(self) -> EventQuerySet:
        """Returns a queryset annotated with participant counts."""
        return self.get_queryset().with_participant_counts()

    def active(self, now: datetime | None = None) -> EventQuerySet:
        """Returns the currently active events."""
        return self.get_queryset().active(now)

    def upcoming(self, now: datetime | None = None) -> EventQuerySet:
        """Returns the upcoming events."""
        return self.get_queryset().upcoming(now)

    def derivable(self) -> EventQuerySet:
        """Returns events whose status can be derived."""
        return self.get_queryset().derivable()


class Event(TimeStampedModel):
    class Status(models.TextChoices):
        PLANNED = "planned"
        ONGOING = "ongoing"
        FINISHED = "finished"
        CANCELLED = "cancelled"
        POSTPONED = "postponed"

    name = MultilingualField(required_any=("fr", "ar"))
    description = MultilingualField(blank=True, rich_text=True)
    accessibility = MultilingualField(blank=True, rich_text=True)
    date_start = models.DateTimeField(null=True, blank=True, db_index=True)
    date_end = models.DateTimeField(null=True, blank=True, db_index=True)
    registration_deadline = models.DateTimeField(null=True, blank=True, db_index=True)
    capacity_max = models.PositiveIntegerField(
        null=True, blank=True, help_text="Maximum number of active participants. Empty means unlimited."
    )
    status = models.CharField(choices=Status.choices, max_length=10, default=Status.PLANNED, db_index=True)
    organizer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="organized_events",
    )
    event_type = models.ForeignKey(
        "taxonomy.EventType", on_delete=models.PROTECT, null=True, blank=True, related_name="events"
    )
    venue = models.CharField(max_length=255, blank=True, default="")
    fee = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0"), validators=[MinValueValidator(Decimal("0"))]
    )
    registration_required = models.BooleanField(default=False)
    minimum_age = models.PositiveSmallIntegerField(null=True, blank=True, validators=[MaxValueValidator(120)])
    issues_certificate = models.BooleanField(default=False)

    objects = EventManager()

    class Meta:
        indexes = [
            models.Index(fields=["status", "date_start"], name="idx_status_date_start"),
        ]
        ordering = ["date_start"]

    def __str__(self) -> str:
        return self.get_name()

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Refresh the cached status from the date bounds on full saves.

        Partial saves (``update_fields``) come from services that already derived the status
        at their own instant.
        """
        if kwargs.get("update_fields") is None:
            self.refresh_status(commit=False)
        super().save(*args, **kwargs)

    def clean(self) -> None:
        """Validate date bounds and the registration deadline."""
        super().clean()
        if self.date_start and self.date_end and self.date_end < self.date_start:
            raise DjangoValidationError({"date_end": "End date must be after start date."})
        if self.registration_deadline and self.date_start and self.registration_deadline > self.date_start:
            raise DjangoValidationError(
                {"registration_deadline": "Registration deadline must not be after the start of the event."}
            )

    def get_name(self, lang: str | None = None) -> str:
        """The event name in ``lang``."""
        return resolve(self.name, lang)

    def get_description(self, lang: str | None = None) -> str:
        """The event description in ``lang``."""
        return resolve(self.description, lang)

    def get_accessibility(self, lang: str | None = None) -> str:
        """The accessibility notes in ``lang``."""
        return resolve(self.accessibility, lang)

    @property
    def is_overridden(self) -> bool:
        """Whether the status is a sticky override (cancelled or postponed)."""
        return self.status in (self.Status.CANCELLED, self.Status.POSTPONED)

    def current_status(self, now: datetime | None = None) -> "Event.Status":
        """The status derived at ``now``, without touching the stored value."""
        from events.service.status import derive_status

        return derive_status(self.status, self.date_start, self.date_end, now)

    def refresh_status(self, now: datetime | None = None, commit: bool = True) -> bool:
        """Recompute the cached status. Returns whether it changed."""
        from events.service.status import refresh_event_status

        return refresh_event_status(self, now=now, commit=commit)

    @property
    def participant_count(self) -> int:
        """Active participants (confirmed + present)."""
        if hasattr(self, "active_participants"):
            return t.cast(int, self.active_participants)
        return self.participations.active().count()

    @property
    def registered_count(self) -> int:
        """Every participation that is not cancelled."""
        if hasattr(self, "registered_participants"):
            return t.cast(int, self.registered_participants)
        return self.participations.registered().count()

    def is_full(self) -> bool:
        """Whether capacity is reached by active participants."""
        from events.service.registration import is_full

        return is_full(self.capacity_max, self.participant_count)

    def can_register(self, now: datetime | None = None) -> bool:
        """Whether a new registration would be accepted at ``now``."""
        from events.service.registration import RegistrationEvaluator

        return RegistrationEvaluator(self, now=now).can_register()

    @property
    def duration_hours(self) -> int | None:
        """Rounded number of hours between the bounds."""
        if not self.date_start or not self.date_end:
            return None
        return round((self.date_end - self.date_start).total_seconds() / 3600)

    @property
    def average_rating(self) -> Decimal | None:
        """Mean evaluation score given by participants, to one decimal."""
        result = self.participations.filter(evaluation_score__isnull=False).aggregate(avg=Avg("evaluation_score"))
        if result["avg"] is None:
            return None
        return Decimal(str(result["avg"])).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

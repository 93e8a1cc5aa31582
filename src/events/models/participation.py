import typing as t

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from common.models import TimeStampedModel


class ParticipationQuerySet(models.QuerySet["Participation"]):
    """Custom queryset for Participation model."""

    def active(self) -> t.Self:
        """Participations that count against capacity (confirmed + present)."""
        return self.filter(status__in=Participation.ACTIVE_STATUSES)

    def registered(self) -> t.Self:
        """Every participation that was not cancelled."""
        return self.exclude(status=Participation.Status.CANCELLED)

    def with_participant(self) -> t.Self:
        """Select the related participant."""
        return self.select_related("participant")


class ParticipationManager(models.Manager["Participation"]):
    """Custom manager for Participation."""

    def get_queryset(self) -> ParticipationQuerySet:
        """Get base queryset."""
        return ParticipationQuerySet(self.model, using=self._db)

    def active(self) -> ParticipationQuerySet:
        """Returns participations counting against capacity."""
        return self.get_queryset().active()

    def registered(self) -> ParticipationQuerySet:
        """Returns non-cancelled participations."""
        return self.get_queryset().registered()

    def with_participant(self) -> ParticipationQuerySet:
        """Returns a queryset with the participant selected."""
        return self.get_queryset().with_participant()


class Participation(TimeStampedModel):
    class Status(models.TextChoices):
        REGISTERED = "registered", "Registered"
        CONFIRMED = "confirmed", "Confirmed"
        PRESENT = "present", "Present"
        ABSENT = "absent", "Absent"
        CANCELLED = "cancelled", "Cancelled"

    class Role(models.TextChoices):
        PARTICIPANT = "participant", "Participant"
        ORGANIZER = "organizer", "Organizer"
        SPEAKER = "speaker", "Speaker"
        VOLUNTEER = "volunteer", "Volunteer"
        STAFF = "staff", "Staff"

    ACTIVE_STATUSES: t.ClassVar[tuple[str, ...]] = (Status.CONFIRMED, Status.PRESENT)

    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="participations")
    participant = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="participations"
    )
    registered_at = models.DateTimeField(default=timezone.now, db_index=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.REGISTERED, db_index=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.PARTICIPANT, db_index=True)
    notes = models.TextField(blank=True, default="")
    validated_at = models.DateTimeField(null=True, blank=True)
    validated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="validated_participations",
    )
    presence_confirmed = models.BooleanField(default=False)
    evaluation_score = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    evaluation_comment = models.TextField(blank=True, default="")
    recommends = models.BooleanField(null=True, blank=True)
    certificate_generated_at = models.DateTimeField(null=True, blank=True)

    objects = ParticipationManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["event", "participant"],
                name="unique_event_participant",
            )
        ]
        ordering = ["registered_at"]

    def __str__(self) -> str:
        return f"Participation: {self.participant_id} -> {self.event_id} ({self.status})"

    @property
    def is_active(self) -> bool:
        """Whether this participation counts against capacity."""
        return self.status in self.ACTIVE_STATUSES

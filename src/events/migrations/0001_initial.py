import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import common.fields


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("taxonomy", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("name", common.fields.MultilingualField(default=dict, required_any=("fr", "ar"))),
                ("description", common.fields.MultilingualField(blank=True, default=dict, rich_text=True)),
                ("accessibility", common.fields.MultilingualField(blank=True, default=dict, rich_text=True)),
                ("date_start", models.DateTimeField(blank=True, db_index=True, null=True)),
                ("date_end", models.DateTimeField(blank=True, db_index=True, null=True)),
                ("registration_deadline", models.DateTimeField(blank=True, db_index=True, null=True)),
                (
                    "capacity_max",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Maximum number of active participants. Empty means unlimited.",
                        null=True,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("planned", "Planned"),
                            ("ongoing", "Ongoing"),
                            ("finished", "Finished"),
                            ("cancelled", "Cancelled"),
                            ("postponed", "Postponed"),
                        ],
                        db_index=True,
                        default="planned",
                        max_length=10,
                    ),
                ),
                ("venue", models.CharField(blank=True, default="", max_length=255)),
                (
                    "fee",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0"),
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                ("registration_required", models.BooleanField(default=False)),
                (
                    "minimum_age",
                    models.PositiveSmallIntegerField(
                        blank=True, null=True, validators=[django.core.validators.MaxValueValidator(120)]
                    ),
                ),
                ("issues_certificate", models.BooleanField(default=False)),
                (
                    "event_type",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="events",
                        to="taxonomy.eventtype",
                    ),
                ),
                (
                    "organizer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="organized_events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["date_start"],
                "indexes": [models.Index(fields=["status", "date_start"], name="idx_status_date_start")],
            },
        ),
        migrations.CreateModel(
            name="Participation",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("registered_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("registered", "Registered"),
                            ("confirmed", "Confirmed"),
                            ("present", "Present"),
                            ("absent", "Absent"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="registered",
                        max_length=20,
                    ),
                ),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("participant", "Participant"),
                            ("organizer", "Organizer"),
                            ("speaker", "Speaker"),
                            ("volunteer", "Volunteer"),
                            ("staff", "Staff"),
                        ],
                        db_index=True,
                        default="participant",
                        max_length=20,
                    ),
                ),
                ("notes", models.TextField(blank=True, default="")),
                ("validated_at", models.DateTimeField(blank=True, null=True)),
                ("presence_confirmed", models.BooleanField(default=False)),
                (
                    "evaluation_score",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(5),
                        ],
                    ),
                ),
                ("evaluation_comment", models.TextField(blank=True, default="")),
                ("recommends", models.BooleanField(blank=True, null=True)),
                ("certificate_generated_at", models.DateTimeField(blank=True, null=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participations",
                        to="events.event",
                    ),
                ),
                (
                    "participant",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "validated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="validated_participations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["registered_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("event", "participant"), name="unique_event_participant")
                ],
            },
        ),
        migrations.CreateModel(
            name="Programme",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("title", common.fields.MultilingualField(default=dict, required_any=("fr", "ar"))),
                ("description", common.fields.MultilingualField(blank=True, default=dict, rich_text=True)),
                ("date", models.DateField(db_index=True)),
                ("start_time", models.TimeField()),
                ("end_time", models.TimeField()),
                ("order", models.PositiveIntegerField(db_index=True, default=0)),
                (
                    "activity_type",
                    models.CharField(
                        choices=[
                            ("conference", "Conference"),
                            ("workshop", "Workshop"),
                            ("show", "Show"),
                            ("exhibition", "Exhibition"),
                            ("visit", "Visit"),
                            ("tasting", "Tasting"),
                            ("screening", "Screening"),
                            ("concert", "Concert"),
                            ("reading", "Reading"),
                            ("debate", "Debate"),
                            ("training", "Training"),
                            ("ceremony", "Ceremony"),
                            ("other", "Other"),
                        ],
                        db_index=True,
                        default="other",
                        max_length=20,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("planned", "Planned"),
                            ("ongoing", "Ongoing"),
                            ("finished", "Finished"),
                            ("cancelled", "Cancelled"),
                            ("postponed", "Postponed"),
                        ],
                        db_index=True,
                        default="planned",
                        max_length=10,
                    ),
                ),
                ("location_detail", models.CharField(blank=True, default="", max_length=255)),
                ("max_participants", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "required_level",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("beginner", "Beginner"),
                            ("intermediate", "Intermediate"),
                            ("advanced", "Advanced"),
                            ("expert", "Expert"),
                        ],
                        default="",
                        max_length=20,
                    ),
                ),
                ("main_language", models.CharField(default="ar", max_length=10)),
                ("translation_available", models.BooleanField(default=False)),
                ("recording_allowed", models.BooleanField(default=False)),
                ("live_stream", models.BooleanField(default=False)),
                ("organizer_notes", models.TextField(blank=True, default="")),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="programmes",
                        to="events.event",
                    ),
                ),
            ],
            options={
                "ordering": ["event", "order"],
                "indexes": [models.Index(fields=["event", "order"], name="idx_programme_event_order")],
                "constraints": [
                    models.UniqueConstraint(
                        deferrable=django.db.models.Deferrable.DEFERRED,
                        fields=("event", "order"),
                        name="unique_programme_event_order",
                    )
                ],
            },
        ),
    ]

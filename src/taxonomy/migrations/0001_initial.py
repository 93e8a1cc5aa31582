import uuid

import django.db.models.deletion
from django.db import migrations, models

import common.fields


class Migration(migrations.Migration):
    initial = True

    dependencies: list[tuple[str, str]] = []

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("name", common.fields.MultilingualField(default=dict, required_any=("fr", "ar"))),
                ("description", common.fields.MultilingualField(blank=True, default=dict)),
            ],
            options={
                "verbose_name_plural": "categories",
            },
        ),
        migrations.CreateModel(
            name="EventType",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("name", common.fields.MultilingualField(default=dict, required_any=("fr", "ar"))),
                ("description", common.fields.MultilingualField(blank=True, default=dict)),
            ],
            options={
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Genre",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("name", common.fields.MultilingualField(default=dict, required_any=("fr", "ar"))),
                ("description", common.fields.MultilingualField(blank=True, default=dict)),
            ],
            options={
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="WorkType",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("name", common.fields.MultilingualField(default=dict, required_any=("fr", "ar"))),
                ("description", common.fields.MultilingualField(blank=True, default=dict)),
            ],
            options={
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="GenreCategory",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("display_order", models.PositiveIntegerField(db_index=True, default=0)),
                ("active", models.BooleanField(db_index=True, default=True)),
                (
                    "category",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="genre_links",
                        to="taxonomy.category",
                    ),
                ),
                (
                    "genre",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="category_links",
                        to="taxonomy.genre",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "genre categories",
                "ordering": ["display_order"],
                "constraints": [
                    models.UniqueConstraint(fields=("genre", "category"), name="unique_genre_category"),
                ],
            },
        ),
        migrations.AddField(
            model_name="genre",
            name="categories",
            field=models.ManyToManyField(
                blank=True, related_name="genres", through="taxonomy.GenreCategory", to="taxonomy.category"
            ),
        ),
        migrations.CreateModel(
            name="WorkTypeGenre",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("display_order", models.PositiveIntegerField(db_index=True, default=0)),
                ("active", models.BooleanField(db_index=True, default=True)),
                (
                    "genre",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="work_type_links",
                        to="taxonomy.genre",
                    ),
                ),
                (
                    "work_type",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="genre_links",
                        to="taxonomy.worktype",
                    ),
                ),
            ],
            options={
                "ordering": ["display_order"],
                "constraints": [
                    models.UniqueConstraint(fields=("work_type", "genre"), name="unique_work_type_genre"),
                ],
            },
        ),
        migrations.AddField(
            model_name="worktype",
            name="genres",
            field=models.ManyToManyField(
                blank=True, related_name="work_types", through="taxonomy.WorkTypeGenre", to="taxonomy.genre"
            ),
        ),
    ]

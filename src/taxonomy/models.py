import typing as t

from django.db import models

from common.fields import MultilingualField
from common.i18n import resolve
from common.models import TimeStampedModel


class LocalizedNameMixin(models.Model):
    name = MultilingualField(required_any=("fr", "ar"))
    description = MultilingualField(blank=True)

    class Meta:
        abstract = True

    def get_name(self, lang: str | None = None) -> str:
        """The display name in ``lang``, with the standard fallback chain."""
        return resolve(self.name, lang)

    def __str__(self) -> str:
        return self.get_name()


class WorkType(LocalizedNameMixin, TimeStampedModel):
    """Top level of the work classification (book, film, music...)."""

    genres = models.ManyToManyField(  # type: ignore[var-annotated]
        "taxonomy.Genre", through="taxonomy.WorkTypeGenre", related_name="work_types", blank=True
    )


class Genre(LocalizedNameMixin, TimeStampedModel):
    categories = models.ManyToManyField(  # type: ignore[var-annotated]
        "taxonomy.Category", through="taxonomy.GenreCategory", related_name="genres", blank=True
    )


class Category(LocalizedNameMixin, TimeStampedModel):
    class Meta:
        verbose_name_plural = "categories"


class EventType(LocalizedNameMixin, TimeStampedModel):
    """Kind of cultural event (festival, exhibition, conference...)."""


class TaxonomyLinkQuerySet(models.QuerySet[t.Any]):
    def active(self) -> t.Self:
        """Only links that are switched on."""
        return self.filter(active=True)


class TaxonomyLink(TimeStampedModel):
    """An ordered, activatable association between two classification levels."""

    display_order = models.PositiveIntegerField(default=0, db_index=True)
    active = models.BooleanField(default=True, db_index=True)

    objects = TaxonomyLinkQuerySet.as_manager()

    class Meta:
        abstract = True


class WorkTypeGenre(TaxonomyLink):
    work_type = models.ForeignKey(WorkType, on_delete=models.CASCADE, related_name="genre_links")
    genre = models.ForeignKey(Genre, on_delete=models.CASCADE, related_name="work_type_links")

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["work_type", "genre"], name="unique_work_type_genre"),
        ]
        ordering = ["display_order"]

    def __str__(self) -> str:
        return f"{self.work_type} -> {self.genre} ({self.display_order})"


class GenreCategory(TaxonomyLink):
    genre = models.ForeignKey(Genre, on_delete=models.CASCADE, related_name="category_links")
    category = models.ForeignKey(Category, on_delete=models.CASCADE, related_name="genre_links")

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["genre", "category"], name="unique_genre_category"),
        ]
        ordering = ["display_order"]
        verbose_name_plural = "genre categories"

    def __str__(self) -> str:
        return f"{self.genre} -> {self.category} ({self.display_order})"

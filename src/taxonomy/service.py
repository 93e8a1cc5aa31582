"""WorkType -> Genre -> Category hierarchy resolution."""

import typing as t
from collections import defaultdict
from uuid import UUID

import structlog
from pydantic import BaseModel

from common.i18n import resolve

from .models import GenreCategory, WorkTypeGenre

logger = structlog.get_logger(__name__)


class CategoryNode(BaseModel):
    id: UUID
    name: str
    display_order: int


class GenreNode(BaseModel):
    id: UUID
    name: str
    display_order: int
    categories: list[CategoryNode]


def _sort_key(link: t.Any, target: t.Any, lang: str | None) -> tuple[int, str]:
    return link.display_order, resolve(target.name, lang).casefold()


def build_genre_tree(
    genre_links: t.Iterable[WorkTypeGenre],
    category_links: t.Iterable[GenreCategory],
    lang: str | None = None,
) -> list[GenreNode]:
    """Assemble the ordered genre/category tree from link records.

    Inactive links are dropped at both levels. Genres are ordered by link display order
    (ties broken by resolved name), and so are the categories within each genre. A genre
    left without categories is kept with an empty list.

    Args:
        genre_links: WorkType -> Genre links of a single work type, with ``genre`` loaded.
        category_links: Genre -> Category links, with ``category`` loaded. Links of genres
            not present in ``genre_links`` are ignored.
        lang: Language used to resolve names.

    Returns:
        The list of genre nodes.
    """
    categories_by_genre: dict[UUID, list[GenreCategory]] = defaultdict(list)
    for category_link in category_links:
        if category_link.active:
            categories_by_genre[category_link.genre_id].append(category_link)

    active_genre_links = [link for link in genre_links if link.active]
    active_genre_links.sort(key=lambda link: _sort_key(link, link.genre, lang))

    tree = []
    for genre_link in active_genre_links:
        links = sorted(categories_by_genre[genre_link.genre_id], key=lambda cl: _sort_key(cl, cl.category, lang))
        tree.append(
            GenreNode(
                id=genre_link.genre_id,
                name=resolve(genre_link.genre.name, lang),
                display_order=genre_link.display_order,
                categories=[
                    CategoryNode(
                        id=link.category_id,
                        name=resolve(link.category.name, lang),
                        display_order=link.display_order,
                    )
                    for link in links
                ],
            )
        )
    return tree


def genre_tree(work_type_id: UUID, lang: str | None = None) -> list[GenreNode]:
    """Return the genres of a work type, each carrying its categories.

    Args:
        work_type_id: The work type to resolve.
        lang: Language used to resolve names.
    """
    genre_links = list(WorkTypeGenre.objects.active().filter(work_type_id=work_type_id).select_related("genre"))
    genre_ids = [link.genre_id for link in genre_links]
    category_links = GenreCategory.objects.active().filter(genre_id__in=genre_ids).select_related("category")
    tree = build_genre_tree(genre_links, category_links, lang)
    logger.debug("genre_tree_resolved", work_type_id=str(work_type_id), genres=len(tree))
    return tree


def categories_for_genre(genre_id: UUID, lang: str | None = None) -> list[CategoryNode]:
    """Return the active categories of a single genre, ordered."""
    links = GenreCategory.objects.active().filter(genre_id=genre_id).select_related("category")
    return [
        CategoryNode(id=link.category_id, name=resolve(link.category.name, lang), display_order=link.display_order)
        for link in sorted(links, key=lambda cl: _sort_key(cl, cl.category, lang))
    ]

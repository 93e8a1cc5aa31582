import pytest

from taxonomy.models import Category, Genre, GenreCategory, WorkType, WorkTypeGenre
from taxonomy.service import build_genre_tree, categories_for_genre, genre_tree

pytestmark = pytest.mark.django_db


@pytest.fixture
def literature() -> WorkType:
    return WorkType.objects.create(name={"fr": "Littérature", "ar": "أدب"})


@pytest.fixture
def genres(literature: WorkType) -> dict[str, Genre]:
    made = {
        "roman": Genre.objects.create(name={"fr": "Roman", "ar": "رواية"}),
        "poesie": Genre.objects.create(name={"fr": "Poésie", "ar": "شعر"}),
        "conte": Genre.objects.create(name={"fr": "Conte", "ar": "حكاية"}),
        "essai": Genre.objects.create(name={"fr": "Essai", "ar": "مقال"}),
    }
    WorkTypeGenre.objects.create(work_type=literature, genre=made["roman"], display_order=1)
    WorkTypeGenre.objects.create(work_type=literature, genre=made["poesie"], display_order=0)
    WorkTypeGenre.objects.create(work_type=literature, genre=made["conte"], display_order=1)
    WorkTypeGenre.objects.create(work_type=literature, genre=made["essai"], display_order=0, active=False)
    return made


@pytest.fixture
def categories(genres: dict[str, Genre]) -> dict[str, Category]:
    made = {
        "historique": Category.objects.create(name={"fr": "Historique"}),
        "policier": Category.objects.create(name={"fr": "Policier"}),
        "libre": Category.objects.create(name={"ar": "شعر حر"}),
        "archive": Category.objects.create(name={"fr": "Archive"}),
    }
    GenreCategory.objects.create(genre=genres["roman"], category=made["policier"], display_order=2)
    GenreCategory.objects.create(genre=genres["roman"], category=made["historique"], display_order=1)
    GenreCategory.objects.create(genre=genres["roman"], category=made["archive"], display_order=0, active=False)
    GenreCategory.objects.create(genre=genres["poesie"], category=made["libre"], display_order=0)
    return made


def test_genre_tree_orders_and_filters(literature: WorkType, categories: dict[str, Category]) -> None:
    tree = genre_tree(literature.pk, "fr")

    assert [genre.name for genre in tree] == ["Poésie", "Conte", "Roman"]
    by_name = {genre.name: genre for genre in tree}
    assert [c.name for c in by_name["Roman"].categories] == ["Historique", "Policier"]
    assert [c.name for c in by_name["Poésie"].categories] == ["شعر حر"]
    assert by_name["Conte"].categories == []


def test_genre_tree_resolves_names_in_requested_language(
    literature: WorkType, categories: dict[str, Category]
) -> None:
    tree = genre_tree(literature.pk, "ar")

    assert [genre.name for genre in tree] == ["شعر", "حكاية", "رواية"]


def test_genre_tree_of_work_type_without_genres(literature: WorkType) -> None:
    assert genre_tree(WorkType.objects.create(name={"fr": "Cinéma"}).pk) == []


def test_build_genre_tree_ignores_links_of_other_genres(
    literature: WorkType, genres: dict[str, Genre], categories: dict[str, Category]
) -> None:
    genre_links = WorkTypeGenre.objects.filter(genre=genres["conte"]).select_related("genre")
    category_links = GenreCategory.objects.select_related("category")

    tree = build_genre_tree(genre_links, category_links, "fr")

    assert len(tree) == 1
    assert tree[0].categories == []


def test_categories_for_genre(genres: dict[str, Genre], categories: dict[str, Category]) -> None:
    result = categories_for_genre(genres["roman"].pk)

    assert [c.name for c in result] == ["Historique", "Policier"]
    assert [c.display_order for c in result] == [1, 2]


def test_localized_name(genres: dict[str, Genre]) -> None:
    assert genres["roman"].get_name("tz-ltn") == "Roman"
    assert str(genres["roman"]) == "Roman"

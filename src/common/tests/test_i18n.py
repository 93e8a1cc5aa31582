import pytest

from common.i18n import (
    merge_translations,
    prepare_multilingual_value,
    resolve,
    resolve_deep,
    translation_status,
)


@pytest.mark.parametrize(
    "value,lang,expected",
    [
        ({"fr": "Festival", "ar": "مهرجان", "en": "Festival EN"}, "en", "Festival EN"),
        ({"fr": "Festival", "ar": "مهرجان"}, "ar", "مهرجان"),
        ({"ar": "مهرجان"}, "en", "مهرجان"),
        ({"fr": "Festival", "ar": "مهرجان"}, "en", "Festival"),
        ({"tz-ltn": "Tafaska"}, "en", "Tafaska"),
        ({"fr": "", "ar": "   ", "en": "Festival"}, "tz-tfng", "Festival"),
        ({}, "fr", ""),
        ({"fr": ""}, "fr", ""),
    ],
)
def test_resolve_fallback_chain(value: dict[str, str], lang: str, expected: str) -> None:
    """Requested language, then French, then Arabic, then the first non-empty entry."""
    assert resolve(value, lang) == expected


def test_resolve_defaults_to_french() -> None:
    assert resolve({"ar": "مهرجان", "fr": "Festival"}) == "Festival"


def test_resolve_first_non_empty_follows_insertion_order() -> None:
    assert resolve({"tz-tfng": "ⵜⴰⴼⴰⵙⴽⴰ", "en": "Tafaska"}, "fr") == "ⵜⴰⴼⴰⵙⴽⴰ"


def test_resolve_never_raises_on_odd_input() -> None:
    assert resolve(None, "fr") == ""
    assert resolve("plain", "ar") == "plain"
    assert resolve(42, "fr") == ""  # type: ignore[arg-type]
    assert resolve({"fr": None, "ar": "مهرجان"}, "fr") == "مهرجان"  # type: ignore[dict-item]


def test_resolve_deep_resolves_nested_maps() -> None:
    payload = {
        "name": {"fr": "Atelier", "ar": "ورشة"},
        "programmes": [{"title": {"ar": "محاضرة"}, "order": 0}],
        "venue": "Oran",
    }

    result = resolve_deep(payload, "fr")

    assert result == {"name": "Atelier", "programmes": [{"title": "محاضرة", "order": 0}], "venue": "Oran"}


def test_resolve_deep_only_listed_fields() -> None:
    payload = {"name": {"fr": "Atelier"}, "description": {"fr": "Texte"}}

    result = resolve_deep(payload, "fr", fields={"name"})

    assert result == {"name": "Atelier", "description": {"fr": "Texte"}}


def test_translation_status() -> None:
    status = translation_status({"fr": "Festival", "ar": "مهرجان", "en": " "})

    assert status.complete == ["fr", "ar"]
    assert status.missing == ["en", "tz-ltn", "tz-tfng"]
    assert status.percentage == 40


def test_merge_translations_keeps_existing_languages() -> None:
    assert merge_translations({"fr": "Festival", "ar": "مهرجان"}, {"fr": "Fête"}) == {"fr": "Fête", "ar": "مهرجان"}
    assert merge_translations(None, "Fête") == {"fr": "Fête"}


def test_prepare_multilingual_value() -> None:
    existing = {"fr": "Festival"}

    assert prepare_multilingual_value("مهرجان", "ar", existing) == {"fr": "Festival", "ar": "مهرجان"}
    assert prepare_multilingual_value({"en": "Festival"}, "fr", existing) == {"fr": "Festival", "en": "Festival"}
    assert prepare_multilingual_value(None, "fr", existing) == existing
    assert prepare_multilingual_value(None) == {}

"""Multilingual content resolution.

Every localized field (event names, programme titles, taxonomy labels...) is stored as a
language-map: a sparse mapping from language code to display string, e.g.
``{"fr": "Festival du livre", "ar": "مهرجان الكتاب"}``.

``resolve`` is the single resolution contract for those maps. The fallback chain is fixed:
requested language, then French, then Arabic, then the first non-empty entry in insertion
order, then the empty string. It never raises.
"""

import typing as t

from pydantic import BaseModel

SUPPORTED_LANGUAGES: tuple[str, ...] = ("fr", "ar", "en", "tz-ltn", "tz-tfng")
DEFAULT_LANGUAGE = "fr"
FALLBACK_LANGUAGES: tuple[str, ...] = ("fr", "ar")

LanguageMap = t.Mapping[str, str]


class TranslationStatus(BaseModel):
    """Translation coverage of a single language-map."""

    percentage: int
    complete: list[str]
    missing: list[str]


def _text(value: t.Any) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return ""


def resolve(value: LanguageMap | str | None, lang: str | None = None) -> str:
    """Resolve a language-map to one display string.

    Args:
        value: The language-map. A plain string is returned as is.
        lang: The requested language code. Defaults to French.

    Returns:
        The best available translation, or an empty string.
    """
    if isinstance(value, str):
        return value
    if not isinstance(value, t.Mapping):
        return ""

    for code in (lang or DEFAULT_LANGUAGE, *FALLBACK_LANGUAGES):
        if text := _text(value.get(code)):
            return text

    for candidate in value.values():
        if text := _text(candidate):
            return text
    return ""


def is_language_map(value: t.Any) -> bool:
    """Whether the value looks like a language-map (a dict keyed by at least one known language)."""
    return isinstance(value, dict) and any(key in SUPPORTED_LANGUAGES for key in value)


def resolve_deep(data: t.Any, lang: str | None = None, fields: t.Collection[str] | None = None) -> t.Any:
    """Resolve every language-map nested in a payload of dicts and lists.

    Args:
        data: A dict, a list, or any other value (returned unchanged).
        lang: The requested language code.
        fields: If given, only language-maps stored under these keys are resolved.

    Returns:
        A copy of the payload with language-maps replaced by strings.
    """
    if isinstance(data, list):
        return [resolve_deep(item, lang, fields) for item in data]
    if not isinstance(data, dict):
        return data

    result: dict[str, t.Any] = {}
    for key, value in data.items():
        if is_language_map(value):
            result[key] = resolve(value, lang) if fields is None or key in fields else value
        else:
            result[key] = resolve_deep(value, lang, fields)
    return result


def has_translation(value: LanguageMap | None, lang: str) -> bool:
    """Whether the language-map carries a non-blank entry for ``lang``."""
    if not isinstance(value, t.Mapping):
        return False
    return bool(_text(value.get(lang)))


def translation_status(value: LanguageMap | None) -> TranslationStatus:
    """Report which supported languages are filled in."""
    complete = [lang for lang in SUPPORTED_LANGUAGES if has_translation(value, lang)]
    missing = [lang for lang in SUPPORTED_LANGUAGES if lang not in complete]
    percentage = round(len(complete) / len(SUPPORTED_LANGUAGES) * 100)
    return TranslationStatus(percentage=percentage, complete=complete, missing=missing)


def merge_translations(existing: LanguageMap | str | None, updates: LanguageMap | str | None) -> dict[str, str]:
    """Merge ``updates`` into ``existing``. Plain strings are taken as the default language."""
    merged: dict[str, str] = {}
    for part in (existing, updates):
        if isinstance(part, str):
            merged[DEFAULT_LANGUAGE] = part
        elif isinstance(part, t.Mapping):
            merged.update(part)
    return merged


def prepare_multilingual_value(
    value: LanguageMap | str | None, lang: str = DEFAULT_LANGUAGE, existing: LanguageMap | None = None
) -> dict[str, str]:
    """Turn user input into a language-map ready to be stored.

    A string is stored under ``lang``; a language-map is merged over the existing value;
    ``None`` keeps the existing value.
    """
    if value is None:
        return dict(existing or {})
    if isinstance(value, str):
        return merge_translations(existing, {lang: value})
    if is_language_map(value):
        return merge_translations(existing, value)
    return dict(existing or {})

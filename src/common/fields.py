"""Custom Django fields for CultureHub.

This module provides the language-map field used by every localized attribute, with
built-in validation and HTML sanitization of each translation.
"""

from __future__ import annotations

import typing as t
from urllib.parse import unquote, urlparse

import nh3
from django.core.exceptions import ValidationError
from django.db import models
from django.utils.deconstruct import deconstructible
from django.utils.translation import gettext_lazy as _

from .i18n import SUPPORTED_LANGUAGES

# Registry of all models using MultilingualField
# Format: {model_class: [field_name1, field_name2, ...]}
_multilingual_field_registry: dict[type[models.Model], list[str]] = {}


def get_multilingual_field_registry() -> dict[type[models.Model], list[str]]:
    """Get the registry of all models using MultilingualField.

    Returns:
        A dictionary mapping model classes to lists of field names.
    """
    return _multilingual_field_registry.copy()


ALLOWED_TAGS = {
    "p",
    "br",
    "strong",
    "em",
    "b",
    "i",
    "u",
    "ul",
    "ol",
    "li",
    "a",
    "blockquote",
}

ALLOWED_URL_SCHEMES = {"http", "https", "mailto"}

ALLOWED_ATTRIBUTES: dict[str, set[str]] = {
    "a": {"href", "title"},
}


def _filter_attributes(element: str, attribute: str, value: str) -> str | None:
    """Drop links whose URL-decoded scheme is not allowed.

    nh3 checks ``url_schemes`` on the raw value only, so ``javascript%3A...`` would slip through.
    """
    if element == "a" and attribute == "href":
        parsed = urlparse(unquote(value))
        if parsed.scheme and parsed.scheme not in ALLOWED_URL_SCHEMES:
            return None
    return value


def sanitize_html(html: str | None) -> str:
    """Sanitize HTML using nh3 with a safe allowlist.

    Args:
        html: The HTML string to sanitize (can be None)

    Returns:
        Sanitized HTML string, or empty string if None
    """
    if not html:
        return ""

    return nh3.clean(
        html,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        attribute_filter=_filter_attributes,
        url_schemes=ALLOWED_URL_SCHEMES,
        strip_comments=True,
    )


@deconstructible
class LanguageMapValidator:
    """Validate that a value is a mapping of supported language code to string.

    Args:
        required_any: If given, at least one of these languages must carry a non-blank value.
    """

    def __init__(self, required_any: t.Sequence[str] | None = None) -> None:
        self.required_any = tuple(required_any or ())

    def __call__(self, value: t.Any) -> None:
        if not isinstance(value, dict):
            raise ValidationError(_("Expected a mapping of language code to text."), code="invalid")
        unknown = [code for code in value if code not in SUPPORTED_LANGUAGES]
        if unknown:
            raise ValidationError(
                _("Unsupported language code(s): %(codes)s."),
                code="unsupported_language",
                params={"codes": ", ".join(sorted(unknown))},
            )
        if any(not isinstance(text, str) for text in value.values()):
            raise ValidationError(_("Translations must be strings."), code="invalid")
        if self.required_any and not any((value.get(code) or "").strip() for code in self.required_any):
            raise ValidationError(
                _("A translation is required in one of: %(codes)s."),
                code="required",
                params={"codes": ", ".join(self.required_any)},
            )

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LanguageMapValidator) and self.required_any == other.required_any


if t.TYPE_CHECKING:

    class MultilingualField(models.JSONField[dict[str, str], dict[str, str]]):
        """Type stub for MultilingualField."""

        ...

else:

    class MultilingualField(models.JSONField):
        """A JSONField storing one logical text as a language-map.

        Stored values look like ``{"fr": "Conférence", "ar": "محاضرة"}``. The value is validated by
        ``LanguageMapValidator`` during ``full_clean``. With ``rich_text=True`` each translation is
        HTML and is sanitized with nh3 at save time; otherwise it is plain text and stored as given.

        Usage:
            class Programme(models.Model):
                title = MultilingualField(required_any=("fr", "ar"))
                description = MultilingualField(rich_text=True)

            programme.title  # {"fr": "...", ...}
            resolve(programme.title, "en")  # display string
        """

        description = "A field that stores a text in several languages"

        def __init__(
            self,
            *args: t.Any,
            required_any: t.Sequence[str] | None = None,
            rich_text: bool = False,
            **kwargs: t.Any,
        ) -> None:
            """Initialize the MultilingualField."""
            self.required_any = tuple(required_any or ())
            self.rich_text = rich_text
            kwargs.setdefault("default", dict)
            kwargs.setdefault("blank", not self.required_any)
            super().__init__(*args, **kwargs)

        def deconstruct(self) -> tuple[str, str, list[t.Any], dict[str, t.Any]]:
            name, path, args, kwargs = super().deconstruct()
            if self.required_any:
                kwargs["required_any"] = self.required_any
            if self.rich_text:
                kwargs["rich_text"] = True
            return name, path, args, kwargs

        def validate(self, value: t.Any, model_instance: models.Model | None) -> None:
            """Run the default checks, then the language-map checks."""
            super().validate(value, model_instance)
            LanguageMapValidator(self.required_any)(value)

        def contribute_to_class(self, cls: type[models.Model], name: str, private_only: bool = False) -> None:
            """Register this field with the model in the multilingual field registry."""
            super().contribute_to_class(cls, name, private_only)

            if cls not in _multilingual_field_registry:
                _multilingual_field_registry[cls] = []
            if name not in _multilingual_field_registry[cls]:
                _multilingual_field_registry[cls].append(name)

        def pre_save(self, model_instance: models.Model, add: bool) -> t.Any:
            """Sanitize every translation of a rich text field before saving."""
            value = getattr(model_instance, self.attname)

            if self.rich_text and isinstance(value, dict):
                sanitized = {
                    code: sanitize_html(text) if isinstance(text, str) else text for code, text in value.items()
                }
                setattr(model_instance, self.attname, sanitized)
                return sanitized

            return super().pre_save(model_instance, add)

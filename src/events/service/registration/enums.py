"""Enums for the registration system."""

from enum import StrEnum

from django.utils.translation import gettext_noop


class Reasons(StrEnum):
    """Reasons why a registration is refused.

    Note: Strings are marked with _noop() for translation extraction.
    The actual translation happens in gates.py when using _(Reasons.XXX).
    """

    EVENT_HAS_FINISHED = gettext_noop("Event has finished.")
    EVENT_IS_CANCELLED = gettext_noop("Event has been cancelled.")
    REGISTRATION_DEADLINE_PASSED = gettext_noop("The registration deadline has passed.")
    EVENT_IS_FULL = gettext_noop("Event is full.")

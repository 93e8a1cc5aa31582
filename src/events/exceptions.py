from django.core.exceptions import ValidationError as DjangoValidationError


class InvalidScheduleError(DjangoValidationError):
    """Raised when a programme slot does not fit its event (date range or time range)."""


class MissingEventDatesError(Exception):
    """Raised when a status derivation is explicitly requested for an event without both date bounds."""

    def __init__(self, message: str, missing: list[str]) -> None:
        """Keep the names of the missing bounds."""
        super().__init__(message)
        self.missing = missing


class AlreadyRegisteredError(Exception):
    """Raised when a user already holds an active participation for an event."""


class InvalidParticipationTransitionError(Exception):
    """Raised when a participation status change is not allowed from its current status."""

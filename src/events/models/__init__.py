from .event import Event
from .participation import Participation
from .programme import Programme

__all__ = [
    "Event",
    "Participation",
    "Programme",
]

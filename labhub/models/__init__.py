"""Database models."""

from labhub.models.booking import Booking
from labhub.models.resource import Resource

__all__ = [
    "Booking",
    "Resource",
]

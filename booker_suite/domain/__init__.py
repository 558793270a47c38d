"""Domain models - booking resource and session token."""

from .booking import Booking, BookingDates
from .session import SessionToken

__all__ = ["Booking", "BookingDates", "SessionToken"]

"""
Hard-coded request fixtures used by the lifecycle and the live suite.

Raw payloads (missing or mistyped fields) are plain dicts because the
Booking model cannot represent them.
"""

from typing import Any, Dict

from .booking import Booking, BookingDates


def new_booking() -> Booking:
    """The booking created at the start of every run."""
    return Booking(
        first_name="John",
        last_name="Doe",
        total_price=150.0,
        deposit_paid=True,
        booking_dates=BookingDates("2024-01-01", "2024-01-07"),
        additional_needs="Breakfast",
    )


def updated_booking() -> Booking:
    """Full replacement sent with PUT."""
    return Booking(
        first_name="Jane",
        last_name="Smith",
        total_price=250.0,
        deposit_paid=False,
        booking_dates=BookingDates("2024-03-01", "2024-03-10"),
        additional_needs="Lunch",
    )


def placeholder_booking() -> Booking:
    """Body sent when updating an identifier that does not exist."""
    return Booking(
        first_name="Test",
        last_name="User",
        total_price=100.0,
        deposit_paid=True,
        booking_dates=BookingDates("2024-01-01", "2024-01-07"),
        additional_needs="None",
    )


def partial_update_payload() -> Dict[str, Any]:
    return {"firstname": "UpdatedJane", "totalprice": 300}


def missing_firstname_payload() -> Dict[str, Any]:
    """Required firstname left out; the service answers 500."""
    return {
        "lastname": "Smith",
        "totalprice": 200,
        "depositpaid": True,
        "bookingdates": {"checkin": "2024-02-01", "checkout": "2024-02-07"},
    }


def invalid_types_payload() -> Dict[str, Any]:
    """String where number/boolean expected; the service still answers 200."""
    return {
        "firstname": "John",
        "lastname": "Doe",
        "totalprice": "invalid_price",
        "depositpaid": "not_boolean",
        "bookingdates": {"checkin": "2024-01-01", "checkout": "2024-01-07"},
    }

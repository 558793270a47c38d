"""
Booking domain model.

Represents a booking as the Restful Booker service exchanges it. Python
attribute names are snake_case; the wire names are the service's flat
lowercase keys (firstname, totalprice, bookingdates, ...).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class BookingDates:
    """Stay dates as ISO "YYYY-MM-DD" strings."""

    checkin: str
    checkout: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BookingDates":
        return cls(checkin=data.get("checkin"), checkout=data.get("checkout"))

    def to_dict(self) -> Dict[str, Any]:
        return {"checkin": self.checkin, "checkout": self.checkout}


@dataclass
class Booking:
    """
    Booking resource.

    Attributes:
        first_name: Guest first name ("firstname")
        last_name: Guest last name ("lastname")
        total_price: Total price ("totalprice")
        deposit_paid: Whether the deposit was paid ("depositpaid")
        booking_dates: Check-in/check-out ("bookingdates")
        additional_needs: Optional free text ("additionalneeds")
        booking_id: Server-assigned identifier ("bookingid"); None until created
        extra_fields: Keys returned by the server that the model does not know
    """

    first_name: str
    last_name: str
    total_price: float
    deposit_paid: bool
    booking_dates: BookingDates
    additional_needs: Optional[str] = None
    booking_id: Optional[int] = None
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    # Python attribute -> wire key
    FIELD_NAMES = {
        "first_name": "firstname",
        "last_name": "lastname",
        "total_price": "totalprice",
        "deposit_paid": "depositpaid",
        "booking_dates": "bookingdates",
        "additional_needs": "additionalneeds",
    }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], booking_id: Optional[int] = None) -> "Booking":
        """
        Create Booking from a GET /booking/{id} body.

        Args:
            data: Wire-format booking dict
            booking_id: Identifier, when known from the URL or a create response

        Returns:
            Booking instance
        """
        wire_keys = set(cls.FIELD_NAMES.values()) | {"bookingid"}
        dates = data.get("bookingdates") or {}

        return cls(
            first_name=data.get("firstname"),
            last_name=data.get("lastname"),
            total_price=data.get("totalprice"),
            deposit_paid=data.get("depositpaid"),
            booking_dates=BookingDates.from_dict(dates),
            additional_needs=data.get("additionalneeds"),
            booking_id=booking_id if booking_id is not None else data.get("bookingid"),
            extra_fields={k: v for k, v in data.items() if k not in wire_keys},
        )

    @classmethod
    def from_create_response(cls, data: Dict[str, Any]) -> "Booking":
        """Parse the POST /booking response: {"bookingid": n, "booking": {...}}."""
        return cls.from_dict(data.get("booking") or {}, booking_id=data.get("bookingid"))

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert Booking to the request payload.

        The identifier and extra_fields are never part of the payload;
        additionalneeds is omitted when unset.
        """
        data: Dict[str, Any] = {
            "firstname": self.first_name,
            "lastname": self.last_name,
            "totalprice": self.total_price,
            "depositpaid": self.deposit_paid,
            "bookingdates": self.booking_dates.to_dict(),
        }
        if self.additional_needs is not None:
            data["additionalneeds"] = self.additional_needs
        return data

    def expected_fields(self, prefix: str = "") -> Dict[str, Any]:
        """
        Dotted-path expectations for the echoed body.

        Example:
            >>> booking.expected_fields("booking.")["booking.bookingdates.checkin"]
            "2024-01-01"

        Args:
            prefix: Path prefix ("booking." for the create response, "" for GET)
        """
        expected = {
            f"{prefix}firstname": self.first_name,
            f"{prefix}lastname": self.last_name,
            f"{prefix}totalprice": self.total_price,
            f"{prefix}depositpaid": self.deposit_paid,
            f"{prefix}bookingdates.checkin": self.booking_dates.checkin,
            f"{prefix}bookingdates.checkout": self.booking_dates.checkout,
        }
        if self.additional_needs is not None:
            expected[f"{prefix}additionalneeds"] = self.additional_needs
        return expected


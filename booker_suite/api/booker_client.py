"""
Restful Booker API Client

Thin wrapper over requests.Session for every endpoint the suite exercises.
Methods return the raw requests.Response: the caller decides which status
codes are acceptable, so non-2xx answers are never raised here.
"""

from typing import Any, Dict, Optional, Union

import requests

from booker_suite.config.settings import Settings
from booker_suite.domain.booking import Booking
from booker_suite.domain.session import SessionToken
from booker_suite.utils.logger import get_logger, log_operation

logger = get_logger(__name__)

Payload = Union[Booking, Dict[str, Any]]


class BookerAPIError(RuntimeError):
    """Raised when a request never produced an HTTP response (DNS, connection, TLS...)."""

    def __init__(self, method: str, url: str, reason: str) -> None:
        super().__init__(f"{method} {url} failed: {reason}")
        self.method = method
        self.url = url
        self.reason = reason


class RestfulBookerClient:
    """
    Client for the Restful Booker booking API.

    No retries and no timeout are configured; requests defaults apply.
    """

    LISTING_FILTERS = ("firstname", "lastname", "checkin", "checkout")

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Endpoint configuration (defaults from environment)
            session: Optional requests.Session (useful for testing)
        """
        self.settings = settings or Settings()
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "RestfulBookerClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    @log_operation("ping")
    def ping(self) -> requests.Response:
        """GET /ping health check; the service answers 201."""
        return self._request("GET", self.settings.ping_url)

    @log_operation("create_token")
    def create_token(self, credentials: Optional[Dict[str, str]] = None) -> requests.Response:
        """
        POST /auth with credentials in the body.

        Args:
            credentials: {"username", "password"}; defaults to the configured ones

        The exchange is logged without bodies: the request carries the
        password and the response carries the token.
        """
        return self._request(
            "POST",
            self.settings.auth_url,
            json=credentials if credentials is not None else self.settings.load_credentials(),
            log_bodies=False,
        )

    @log_operation("create_booking")
    def create_booking(self, booking: Payload) -> requests.Response:
        """POST /booking. Accepts a Booking or a raw dict (for malformed payloads)."""
        return self._request("POST", self.settings.booking_url(), json=self._payload(booking))

    @log_operation("get_booking")
    def get_booking(self, booking_id: int) -> requests.Response:
        return self._request("GET", self.settings.booking_url(booking_id))

    @log_operation("list_bookings")
    def list_bookings(self, **filters: Any) -> requests.Response:
        """
        GET /booking, optionally filtered.

        Args:
            **filters: firstname, lastname, checkin, checkout

        Raises:
            ValueError: If an unsupported filter is passed
        """
        unknown = set(filters) - set(self.LISTING_FILTERS)
        if unknown:
            raise ValueError(f"Unsupported booking filters: {sorted(unknown)}")
        params = {k: v for k, v in filters.items() if v is not None}
        return self._request("GET", self.settings.booking_url(), params=params or None)

    @log_operation("update_booking")
    def update_booking(
        self,
        booking_id: int,
        booking: Payload,
        token: Optional[SessionToken] = None,
        basic_auth: Optional[str] = None,
    ) -> requests.Response:
        """
        PUT /booking/{id}.

        Args:
            booking_id: Target identifier
            booking: Full replacement body
            token: Session token sent as a cookie
            basic_auth: Value for the Authorization header ("Basic ...")
        """
        return self._request(
            "PUT",
            self.settings.booking_url(booking_id),
            json=self._payload(booking),
            headers=self._auth_headers(token, basic_auth),
        )

    @log_operation("partial_update_booking")
    def partial_update_booking(
        self,
        booking_id: int,
        fields: Dict[str, Any],
        token: Optional[SessionToken] = None,
        basic_auth: Optional[str] = None,
    ) -> requests.Response:
        """PATCH /booking/{id} with only the fields to change."""
        return self._request(
            "PATCH",
            self.settings.booking_url(booking_id),
            json=dict(fields),
            headers=self._auth_headers(token, basic_auth),
        )

    @log_operation("delete_booking")
    def delete_booking(
        self,
        booking_id: int,
        token: Optional[SessionToken] = None,
        basic_auth: Optional[str] = None,
    ) -> requests.Response:
        """DELETE /booking/{id}; the service answers 201 on success."""
        return self._request(
            "DELETE",
            self.settings.booking_url(booking_id),
            headers=self._auth_headers(token, basic_auth),
        )

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    @staticmethod
    def _payload(booking: Payload) -> Dict[str, Any]:
        if isinstance(booking, Booking):
            return booking.to_dict()
        return dict(booking)

    @staticmethod
    def _auth_headers(
        token: Optional[SessionToken], basic_auth: Optional[str]
    ) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if token is not None:
            headers.update(token.cookie_header())
        if basic_auth:
            headers["Authorization"] = basic_auth
        return headers

    def _request(
        self, method: str, url: str, log_bodies: bool = True, **kwargs: Any
    ) -> requests.Response:
        """
        Send a request and return the response whatever its status.

        Args:
            log_bodies: Include request and response bodies in the debug log

        Raises:
            BookerAPIError: On transport-level failure
        """
        if not kwargs.get("headers"):
            kwargs.pop("headers", None)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(
                "Request failed before a response was received",
                context={"method": method, "url": url},
                error=str(e),
            )
            raise BookerAPIError(method, url, str(e)) from e

        logger.http_exchange(
            f"{method} {url} -> {response.status_code}", response, include_bodies=log_bodies
        )
        return response

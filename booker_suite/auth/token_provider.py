"""
Token provider - acquires the session token once per run.

Any failure while talking to POST /auth is converted into a degraded-mode
SessionToken instead of an exception, so that only the steps needing
authorization are affected (they skip).
"""

import base64
from typing import Optional

import jsonschema

from booker_suite.api.booker_client import BookerAPIError, RestfulBookerClient
from booker_suite.config.settings import SecretRedactionFilter
from booker_suite.domain.session import SessionToken
from booker_suite.utils.logger import get_logger
from booker_suite.validation.schemas import TOKEN_SCHEMA

logger = get_logger(__name__)


def basic_auth_header(username: str, password: str) -> str:
    """
    Build an HTTP Basic Authorization header value.

    Example:
        >>> basic_auth_header("admin", "password123")
        "Basic YWRtaW46cGFzc3dvcmQxMjM="
    """
    raw = f"{username}:{password}".encode("utf-8")
    return "Basic " + base64.b64encode(raw).decode("ascii")


class BookerAuthenticator:
    """
    Obtains and caches the session token.

    The token is requested at most once per authenticator; callers share the
    instance across the ordered steps of a run.
    """

    def __init__(
        self,
        client: RestfulBookerClient,
        redaction_filter: Optional[SecretRedactionFilter] = None,
    ):
        """
        Initialize the authenticator.

        Args:
            client: API client used for POST /auth; its settings supply the credentials
            redaction_filter: Optional filter that learns the token once obtained
        """
        self.client = client
        self.redaction_filter = redaction_filter
        self._token: Optional[SessionToken] = None

    @property
    def basic_auth(self) -> str:
        settings = self.client.settings
        return basic_auth_header(settings.username, settings.password)

    def get_token(self) -> SessionToken:
        """Return the cached token, acquiring it on first use."""
        if self._token is None:
            self._token = self.obtain_token()
        return self._token

    def obtain_token(self) -> SessionToken:
        """
        POST /auth and extract the token.

        Returns:
            SessionToken; its value is None when acquisition failed for any reason
        """
        try:
            response = self.client.create_token()
        except BookerAPIError as e:
            logger.warning(
                "Failed to get auth token; continuing without authentication",
                operation="obtain_token",
                error=str(e),
            )
            return SessionToken.unavailable(str(e))

        if response.status_code != 200:
            reason = f"auth endpoint answered HTTP {response.status_code}"
            logger.warning(
                "Failed to get auth token; continuing without authentication",
                operation="obtain_token",
                context={"status_code": response.status_code},
                error=reason,
            )
            return SessionToken.unavailable(reason)

        try:
            body = response.json()
        except ValueError as e:
            logger.warning(
                "Auth response is not JSON; continuing without authentication",
                operation="obtain_token",
                error=str(e),
            )
            return SessionToken.unavailable(f"invalid auth response: {e}")

        try:
            jsonschema.validate(instance=body, schema=TOKEN_SCHEMA)
        except jsonschema.ValidationError as e:
            # Bad credentials come back as 200 {"reason": "Bad credentials"}
            reason = body.get("reason") if isinstance(body, dict) else None
            reason = reason or f"invalid auth response: {e.message}"
            logger.warning(
                "Auth endpoint returned no token; continuing without authentication",
                operation="obtain_token",
                error=reason,
            )
            return SessionToken.unavailable(reason)

        token = SessionToken.from_dict(body)
        if self.redaction_filter is not None:
            self.redaction_filter.add_secret(token.value)
        logger.info(
            "Auth token obtained",
            operation="obtain_token",
            context={"token_masked": token.masked},
        )
        return token

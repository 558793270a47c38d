"""
Session token domain model.

Holds the opaque token returned by POST /auth for the duration of one run.
There is no refresh or expiry handling; a token with no value means the
suite runs in degraded mode and auth-dependent steps skip.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from booker_suite.utils.logger import mask_token


@dataclass
class SessionToken:
    """
    Session token for authenticated requests.

    Attributes:
        value: Token string, or None when acquisition failed
        obtained_at: UTC timestamp of acquisition
        failure_reason: Why no token is available (degraded mode only)
    """

    value: Optional[str] = None
    obtained_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    failure_reason: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionToken":
        """
        Create SessionToken from the auth response body.

        The service answers 200 with {"reason": "Bad credentials"} instead of
        an error status, so a missing token is not an exception here.
        """
        token = data.get("token")
        if not token:
            return cls.unavailable(data.get("reason") or "response carried no token")
        return cls(value=str(token))

    @classmethod
    def unavailable(cls, reason: str) -> "SessionToken":
        """Degraded-mode token."""
        return cls(value=None, failure_reason=reason)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.value)

    @property
    def masked(self) -> str:
        return mask_token(self.value)

    def cookie_header(self) -> Dict[str, str]:
        """Header dict carrying the token as the service expects it."""
        if not self.value:
            return {}
        return {"Cookie": f"token={self.value}"}

"""Auth module - session token acquisition"""

from .token_provider import BookerAuthenticator, basic_auth_header

__all__ = ["BookerAuthenticator", "basic_auth_header"]

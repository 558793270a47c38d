"""API module - Restful Booker HTTP client"""

from .booker_client import BookerAPIError, RestfulBookerClient

__all__ = ["BookerAPIError", "RestfulBookerClient"]

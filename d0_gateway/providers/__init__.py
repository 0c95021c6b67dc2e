"""
External API providers
"""
from .pagespeed import PageSpeedClient
from .website import PageResponse, WebsiteClient

__all__ = [
    "PageSpeedClient",
    "WebsiteClient",
    "PageResponse",
]

"""
D0 Gateway - Unified access to every external HTTP service

No other domain makes direct external calls - everything goes through this gateway.
"""

from .base import BaseAPIClient
from .providers import PageResponse, PageSpeedClient, WebsiteClient

__all__ = [
    "BaseAPIClient",
    "PageSpeedClient",
    "WebsiteClient",
    "PageResponse",
]

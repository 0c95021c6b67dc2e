"""Core utilities and configuration for SitePulse"""
from core.config import settings
from core.exceptions import ExternalAPIError, SitePulseError, ValidationError
from core.logging import get_logger

__all__ = [
    "settings",
    "get_logger",
    "SitePulseError",
    "ValidationError",
    "ExternalAPIError",
]

"""
D1 Analysis exceptions
"""
from typing import Optional

from core.exceptions import SitePulseError, ValidationError


class AnalysisError(SitePulseError):
    """Base exception for analysis errors"""

    def __init__(self, message: str, url: Optional[str] = None, **details):
        super().__init__(
            message=message,
            error_code="ANALYSIS_ERROR",
            details={"url": url, **details} if url else details,
            status_code=500,
        )


class DocumentFetchError(AnalysisError):
    """Raised when the page under analysis cannot be fetched, nothing can be scored"""

    def __init__(self, url: str, reason: str):
        super().__init__(message=f"Failed to analyze website: {reason}", url=url)
        self.error_code = "DOCUMENT_FETCH_ERROR"
        self.status_code = 502


class MessageNotFoundError(AnalysisError):
    """Raised when the message catalog has no template for an id"""

    def __init__(self, template_id: str, locale: str):
        super().__init__(
            message=f"No message template '{template_id}' for locale '{locale}'",
            template_id=template_id,
            locale=locale,
        )


class InvalidURLError(ValidationError):
    """Raised when a website address cannot be normalised"""

    def __init__(self, url: str, reason: str = "Invalid website URL"):
        super().__init__(message=reason, field="url", value=url)

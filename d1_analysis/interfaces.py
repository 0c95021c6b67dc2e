"""
Collaborator interfaces for the analysis engine

The engine only talks to the network through these abstractions. Concrete
httpx implementations live in ``d1_analysis.fetcher`` and
``d1_analysis.audit``; tests substitute in-memory fakes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional

from .document import ParsedDocument
from .models import AuditSignal
from .types import Locale


@dataclass
class FetchedPage:
    """The page under analysis, fetched and parsed once"""

    document: ParsedDocument
    headers: Dict[str, str] = field(default_factory=dict)
    elapsed_ms: int = 0
    final_url: Optional[str] = None
    status_code: int = 200


class DocumentFetcher(ABC):
    """Fetches and parses the page under analysis"""

    @abstractmethod
    async def fetch(self, url: str) -> FetchedPage:
        """
        Fetch the page

        Raises:
            DocumentFetchError: when no document could be retrieved. This is
            the only failure that aborts an analysis.
        """


class ResourceProbe(ABC):
    """Best-effort lookups of well-known site resources"""

    @abstractmethod
    async def exists(self, url: str) -> bool:
        """True when the resource answers with a 2xx status, False on any failure"""

    @abstractmethod
    async def fetch_text(self, url: str) -> Optional[str]:
        """Body of the resource, or None when it is absent or unreachable"""


class AuditProvider(ABC):
    """Source of third-party Lighthouse metrics"""

    @abstractmethod
    async def fetch(self, url: str, strategy: str, locale: Locale) -> Optional[AuditSignal]:
        """
        Run an audit for url

        Returns:
            AuditSignal, or None when no signal is available for any reason
        """

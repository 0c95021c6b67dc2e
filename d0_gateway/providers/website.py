"""
Plain HTTP access to the website under analysis

Fetches the page itself and probes well-known resources such as robots.txt
and sitemap.xml. Unlike the JSON API providers this client returns raw text.
"""
import time
from dataclasses import dataclass, field
from typing import Dict, Optional

import httpx

from core.config import get_settings
from core.exceptions import ExternalAPIError
from core.logging import get_logger


@dataclass
class PageResponse:
    """Raw HTTP response for a fetched page or resource"""

    url: str
    status_code: int
    text: str
    headers: Dict[str, str] = field(default_factory=dict)
    elapsed_ms: int = 0

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class WebsiteClient:
    """HTTP client for the analyzed site itself"""

    provider = "website"

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self.settings = get_settings()
        self.logger = get_logger("gateway.website", domain="d0")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            follow_redirects=True,
            max_redirects=self.settings.max_redirects,
            headers={"User-Agent": self.settings.user_agent},
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def _get(self, url: str, timeout: float) -> PageResponse:
        start = time.perf_counter()
        response = await self.client.get(url, timeout=timeout)
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        return PageResponse(
            url=str(response.url),
            status_code=response.status_code,
            text=response.text,
            headers={k.lower(): v for k, v in response.headers.items()},
            elapsed_ms=elapsed_ms,
        )

    async def fetch_page(self, url: str) -> PageResponse:
        """
        Fetch the page under analysis

        Redirects and client errors are accepted, only server errors and
        transport failures are raised.

        Raises:
            ExternalAPIError: When the page cannot be retrieved
        """
        timeout = self.settings.document_timeout
        try:
            page = await self._get(url, timeout)
        except httpx.TimeoutException as e:
            raise ExternalAPIError(
                provider=self.provider, message=f"Timed out after {timeout}s fetching {url}", status_code=504
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ExternalAPIError(provider=self.provider, message=f"Could not fetch {url}: {e}") from e

        if page.status_code >= 500:
            raise ExternalAPIError(
                provider=self.provider,
                message=f"Server error fetching {url}",
                status_code=page.status_code,
            )

        self.logger.info(
            f"Fetched {url}",
            extra={"status_code": page.status_code, "elapsed_ms": page.elapsed_ms},
        )
        return page

    async def fetch_resource(self, url: str) -> Optional[PageResponse]:
        """Best-effort fetch of an auxiliary resource, None on any transport error"""
        try:
            return await self._get(url, self.settings.probe_timeout)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.logger.warning(f"Probe for {url} failed: {e}")
            return None

"""
HTTP implementations of the document fetcher and resource probe
"""
from typing import Optional

from core.exceptions import ExternalAPIError
from core.logging import get_logger
from d0_gateway.providers.website import WebsiteClient

from .document import ParsedDocument
from .exceptions import DocumentFetchError
from .interfaces import DocumentFetcher, FetchedPage, ResourceProbe

logger = get_logger(__name__, domain="d1")


class HttpDocumentFetcher(DocumentFetcher):
    """Fetches the page with the website client and parses it with BeautifulSoup"""

    def __init__(self, client: Optional[WebsiteClient] = None, parser: str = "html.parser"):
        self.client = client or WebsiteClient()
        self.parser = parser

    async def fetch(self, url: str) -> FetchedPage:
        try:
            response = await self.client.fetch_page(url)
        except ExternalAPIError as e:
            raise DocumentFetchError(url, e.message) from e

        return FetchedPage(
            document=ParsedDocument(response.text, parser=self.parser),
            headers=response.headers,
            elapsed_ms=response.elapsed_ms,
            final_url=response.url,
            status_code=response.status_code,
        )


class HttpResourceProbe(ResourceProbe):
    """Resource probe where anything but a 2xx answer means absent"""

    def __init__(self, client: Optional[WebsiteClient] = None):
        self.client = client or WebsiteClient()

    async def exists(self, url: str) -> bool:
        response = await self.client.fetch_resource(url)
        return response is not None and response.ok

    async def fetch_text(self, url: str) -> Optional[str]:
        response = await self.client.fetch_resource(url)
        if response is None or not response.ok:
            logger.debug(f"{url} not available")
            return None
        return response.text

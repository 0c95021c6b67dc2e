"""
Test Helper Utilities

Page builders and in-memory collaborators shared by the analysis tests.
"""
import asyncio
from typing import Dict, List, Optional
from urllib.parse import urlparse

from d1_analysis.checks import PageContext
from d1_analysis.document import ParsedDocument
from d1_analysis.interfaces import AuditProvider, DocumentFetcher, FetchedPage, ResourceProbe
from d1_analysis.models import AuditSignal

SITE_URL = "https://www.acme-bakery.se"
TITLE = "Acme Bakery - Fresh sourdough bread delivered daily now"
DESCRIPTION = (
    "Acme Bakery bakes sourdough loaves, cinnamon buns and seasonal pastries every morning "
    "and delivers them fresh to homes and offices across the city."
)
VIEWPORT = "width=device-width, initial-scale=1"
# 11 words, repeated to 110 words per paragraph
PARAGRAPH = "Our bakers start before dawn to shape every loaf by hand. " * 10
ROBOTS_TXT = "User-agent: *\nDisallow: /admin\nSitemap: https://www.acme-bakery.se/sitemap.xml\n"

IMAGES = "".join(
    f'<img src="/img/{i}.jpg" srcset="/img/{i}.jpg 1x, /img/{i}@2x.jpg 2x" alt="Loaf number {i}" loading="lazy">'
    for i in range(1, 11)
)

STRUCTURED_DATA = '<script type="application/ld+json">{"@context": "https://schema.org", "@type": "Bakery"}</script>'


def render_page(
    title: Optional[str] = TITLE,
    description: Optional[str] = DESCRIPTION,
    viewport: Optional[str] = VIEWPORT,
    lang: Optional[str] = None,
    head: str = "",
    body: str = "",
) -> str:
    """
    A page that passes every check except the ones switched off

    Pass None for title, description or viewport to leave them out. The
    default page has no lang attribute.
    """
    head_parts = ['<meta charset="utf-8">']
    if title is not None:
        head_parts.append(f"<title>{title}</title>")
    if description is not None:
        head_parts.append(f'<meta name="description" content="{description}">')
    if viewport is not None:
        head_parts.append(f'<meta name="viewport" content="{viewport}">')
    head_parts.extend(
        [
            '<link rel="canonical" href="https://www.acme-bakery.se/">',
            '<meta property="og:title" content="Acme Bakery">',
            '<meta property="og:description" content="Fresh bread every morning">',
            '<meta property="og:image" content="https://www.acme-bakery.se/og.jpg">',
            '<meta name="twitter:card" content="summary_large_image">',
            '<link rel="stylesheet" href="/css/site.css">',
            '<link rel="icon" href="/favicon.ico">',
            STRUCTURED_DATA,
            head,
        ]
    )

    head_html = "".join(head_parts)
    html_open = f'<html lang="{lang}">' if lang else "<html>"
    return f"""<!DOCTYPE html>
{html_open}
<head>
{head_html}
</head>
<body>
<a href="#main">Skip to main content</a>
<header><nav><a href="/">Home</a><a href="/bread">Bread</a><a href="/pastries">Pastries</a><a href="/contact">Contact</a></nav></header>
<main id="main">
<h1>Fresh bread every morning</h1>
<p>{PARAGRAPH}</p>
<h2>Our bread</h2>
<section>{IMAGES}</section>
<h2>Visit us</h2>
<p>{PARAGRAPH}</p>
<p>{PARAGRAPH}</p>
<button class="btn-primary">Order now</button>
</main>
<footer><p>Acme Bakery, Storgatan 1</p></footer>
{body}
</body>
</html>"""


def make_page(
    html: str,
    url: str = SITE_URL,
    load_time_ms: int = 1200,
    robots_txt: Optional[str] = ROBOTS_TXT,
    has_sitemap: bool = True,
) -> PageContext:
    """Page context with the probe results already filled in"""
    return PageContext(
        document=ParsedDocument(html),
        url=url,
        load_time_ms=load_time_ms,
        has_robots_txt=robots_txt is not None,
        robots_txt=robots_txt,
        has_sitemap=has_sitemap,
    )


class FakeFetcher(DocumentFetcher):
    def __init__(self, html: str = "", elapsed_ms: int = 1200, error: Exception = None):
        self.html = html
        self.elapsed_ms = elapsed_ms
        self.error = error
        self.calls: List[str] = []

    async def fetch(self, url: str) -> FetchedPage:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return FetchedPage(document=ParsedDocument(self.html), elapsed_ms=self.elapsed_ms, final_url=url)


class FakeProbe(ResourceProbe):
    """Serves resources by path regardless of scheme and host"""

    def __init__(self, resources: Optional[Dict[str, str]] = None, error: Exception = None, delay: float = 0):
        self.resources = {"/robots.txt": ROBOTS_TXT, "/sitemap.xml": "<urlset/>"} if resources is None else resources
        self.error = error
        self.delay = delay
        self.requested: List[str] = []

    async def _request(self, url: str) -> None:
        self.requested.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error

    async def exists(self, url: str) -> bool:
        await self._request(url)
        return urlparse(url).path in self.resources

    async def fetch_text(self, url: str) -> Optional[str]:
        await self._request(url)
        return self.resources.get(urlparse(url).path)


class FakeAuditProvider(AuditProvider):
    def __init__(self, signal: Optional[AuditSignal] = None, error: Exception = None, delay: float = 0):
        self.signal = signal
        self.error = error
        self.delay = delay
        self.calls = []

    async def fetch(self, url, strategy, locale):
        self.calls.append((url, strategy, locale))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.signal

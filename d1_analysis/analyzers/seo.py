"""
SEO analyzer

On-page and technical search engine checks. Besides the document the
analyzer looks at robots.txt and the XML sitemap, both fetched through a
best-effort resource probe.
"""
import asyncio
from dataclasses import replace
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urljoin, urlparse

from core.config import get_settings
from core.logging import get_logger

from ..checks import Check, Evaluation, Finding, Outcome, PageContext, run_checks
from ..constants import (
    LOAD_TIME_WARNING_MS,
    MAX_URL_LENGTH,
    META_DESCRIPTION_MAX_LENGTH,
    META_DESCRIPTION_MIN_LENGTH,
    MIN_INTERNAL_LINKS,
    MIN_WORD_COUNT,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)
from ..document import attribute
from ..types import Category, Severity

logger = get_logger(__name__, domain="d1")


def site_origin(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def hostname(url: str, base: Optional[str] = None) -> Optional[str]:
    """Host of ``url`` resolved against ``base``, None when it cannot be parsed"""
    try:
        return urlparse(urljoin(base, url) if base else url).hostname
    except ValueError:
        return None


def blocks_whole_site(robots_txt: str) -> bool:
    """True when robots.txt has a bare ``Disallow: /`` rule"""
    for line in robots_txt.splitlines():
        directive, _, value = line.split("#", 1)[0].partition(":")
        if directive.strip().lower() == "disallow" and value.strip() == "/":
            return True
    return False


async def _guarded(awaitable, timeout: float, fallback, resource: str):
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except Exception as e:
        logger.warning(f"Probe for {resource} failed, treating it as absent: {e!r}")
        return fallback


async def probe_site_resources(
    url: str, probe, timeout: Optional[float] = None
) -> Tuple[Optional[str], bool]:
    """Fetch robots.txt and look for a sitemap concurrently

    Returns the robots.txt body (None when absent) and whether a sitemap was
    found. Probe errors and timeouts count as absent resources.
    """
    origin = site_origin(url)
    timeout = timeout or get_settings().probe_timeout

    async def find_sitemap() -> bool:
        if await probe.exists(f"{origin}/sitemap.xml"):
            return True
        return await probe.exists(f"{origin}/sitemap_index.xml")

    robots_txt, has_sitemap = await asyncio.gather(
        _guarded(probe.fetch_text(f"{origin}/robots.txt"), timeout, None, f"{origin}/robots.txt"),
        _guarded(find_sitemap(), timeout, False, f"{origin} sitemap"),
    )
    logger.debug(f"Probed {origin}: robots.txt={robots_txt is not None}, sitemap={has_sitemap}")
    return robots_txt, has_sitemap


def check_https(page: PageContext) -> Optional[Outcome]:
    if not page.url.lower().startswith("https://"):
        return Outcome.issue(Severity.ERROR, "seo.not_https", deduction=15)
    return None


def check_robots_rules(page: PageContext) -> Optional[Outcome]:
    if page.robots_txt and blocks_whole_site(page.robots_txt):
        return Outcome.issue(Severity.WARNING, "seo.robots_blocks_site", deduction=8)
    return None


def check_robots_present(page: PageContext) -> Optional[Outcome]:
    if not page.has_robots_txt:
        return Outcome.issue(Severity.INFO, "seo.missing_robots", deduction=3)
    return None


def check_sitemap(page: PageContext) -> Optional[Outcome]:
    if not page.has_sitemap:
        return Outcome.issue(Severity.WARNING, "seo.missing_sitemap", deduction=8)
    return None


def check_load_time(page: PageContext) -> Optional[Outcome]:
    if page.load_time_ms > LOAD_TIME_WARNING_MS:
        steps = (page.load_time_ms - LOAD_TIME_WARNING_MS) // 1000
        return Outcome.issue(
            Severity.WARNING, "seo.slow_load", deduction=min(15, steps * 3), seconds=page.load_time_ms / 1000
        )
    return None


def check_title(page: PageContext) -> Optional[Outcome]:
    title = page.document.title
    if not title:
        return Outcome.issue(Severity.ERROR, "seo.missing_title", deduction=20)

    outcome = Outcome()
    if len(title) < TITLE_MIN_LENGTH:
        outcome = Outcome.issue(Severity.WARNING, "seo.short_title", deduction=8, length=len(title))
    elif len(title) > TITLE_MAX_LENGTH:
        outcome = Outcome.issue(Severity.WARNING, "seo.long_title", deduction=5, length=len(title))

    words = title.lower().split()
    if any(len(word) > 3 and word in words[:index] for index, word in enumerate(words)):
        outcome.findings.append(Finding(Severity.INFO, "seo.title_repeated_words"))
    return outcome


def check_meta_description(page: PageContext) -> Optional[Outcome]:
    description = page.document.meta_content("description")
    if not description:
        return Outcome.issue(Severity.ERROR, "seo.missing_meta_description", deduction=12)
    if len(description) < META_DESCRIPTION_MIN_LENGTH:
        return Outcome.issue(
            Severity.WARNING, "seo.short_meta_description", deduction=6, length=len(description)
        )
    if len(description) > META_DESCRIPTION_MAX_LENGTH:
        return Outcome.issue(
            Severity.WARNING, "seo.long_meta_description", deduction=4, length=len(description)
        )
    return None


def check_h1(page: PageContext) -> Optional[Outcome]:
    h1_count = page.document.count("h1")
    if h1_count == 0:
        return Outcome.issue(Severity.ERROR, "seo.no_h1", deduction=15)
    if h1_count > 1:
        return Outcome.issue(Severity.WARNING, "seo.multiple_h1", deduction=8, count=h1_count)
    return None


def check_h1_matches_title(page: PageContext) -> Optional[Outcome]:
    h1 = page.document.first("h1")
    title = page.document.title
    if h1 is None or not title:
        return None
    h1_text = h1.get_text().strip()
    if h1_text and h1_text.lower() == title.lower():
        return Outcome.issue(Severity.INFO, "seo.h1_matches_title")
    return None


def images_with_alt(page: PageContext) -> int:
    return sum(1 for img in page.document.select("img") if (attribute(img, "alt") or "").strip())


def check_image_alt(page: PageContext) -> Optional[Outcome]:
    total = page.document.count("img")
    missing = total - images_with_alt(page)
    if missing:
        return Outcome.issue(
            Severity.WARNING, "seo.images_missing_alt", deduction=min(10, missing * 2), missing=missing, total=total
        )
    return None


def check_srcset(page: PageContext) -> Optional[Outcome]:
    total = page.document.count("img")
    if total > 5 and page.document.count("img[srcset]") < total * 0.3:
        return Outcome.issue(Severity.INFO, "seo.few_srcset", deduction=3)
    return None


def check_viewport(page: PageContext) -> Optional[Outcome]:
    if not page.document.exists('meta[name="viewport"]'):
        return Outcome.issue(Severity.ERROR, "seo.missing_viewport", deduction=15)
    content = page.document.attr('meta[name="viewport"]', "content")
    if content and "width=device-width" not in content:
        return Outcome.issue(Severity.WARNING, "seo.viewport_not_device_width", deduction=8)
    return None


def check_canonical(page: PageContext) -> Optional[Outcome]:
    canonical = page.document.attr('link[rel="canonical"]', "href")
    if not canonical:
        return Outcome.issue(Severity.INFO, "seo.missing_canonical", deduction=4)
    target = hostname(canonical, base=page.url)
    if target and target != hostname(page.url):
        return Outcome.issue(Severity.WARNING, "seo.canonical_other_domain", deduction=6)
    return None


def check_open_graph(page: PageContext) -> Optional[Outcome]:
    doc = page.document
    properties = ("og:title", "og:description", "og:image")
    if not all(doc.exists(f'meta[property="{prop}"]') for prop in properties):
        return Outcome.issue(Severity.INFO, "seo.incomplete_open_graph", deduction=5)
    return None


def check_twitter_card(page: PageContext) -> Optional[Outcome]:
    if not page.document.exists('meta[name="twitter:card"]'):
        return Outcome.issue(Severity.INFO, "seo.missing_twitter_card", deduction=3)
    return None


def check_structured_data(page: PageContext) -> Optional[Outcome]:
    doc = page.document
    if not doc.exists('script[type="application/ld+json"]') and not doc.exists("[itemscope], [itemtype]"):
        return Outcome.issue(Severity.WARNING, "seo.missing_structured_data", deduction=8)
    return None


def count_internal_links(page: PageContext) -> int:
    site_host = hostname(page.url)
    internal = 0
    for link in page.document.select("a[href]"):
        href = attribute(link, "href")
        if not href:
            continue
        try:
            is_internal = urlparse(urljoin(page.url, href)).hostname == site_host
        except ValueError:
            is_internal = href.startswith(("/", "#"))
        if is_internal:
            internal += 1
    return internal


def check_internal_links(page: PageContext) -> Optional[Outcome]:
    internal = count_internal_links(page)
    if internal < MIN_INTERNAL_LINKS:
        return Outcome.issue(Severity.WARNING, "seo.few_internal_links", deduction=7, count=internal)
    return None


def check_url_length(page: PageContext) -> Optional[Outcome]:
    if len(page.url) > MAX_URL_LENGTH:
        return Outcome.issue(Severity.INFO, "seo.long_url", deduction=2)
    return None


def check_url_query(page: PageContext) -> Optional[Outcome]:
    if urlparse(page.url).query:
        return Outcome.issue(Severity.INFO, "seo.url_has_query")
    return None


def check_content_length(page: PageContext) -> Optional[Outcome]:
    words = page.document.word_count()
    if words < MIN_WORD_COUNT:
        return Outcome.issue(Severity.WARNING, "seo.thin_content", deduction=10, count=words)
    return None


def check_language(page: PageContext) -> Optional[Outcome]:
    # Scored by the accessibility analyzer
    if not page.document.html_lang:
        return Outcome.issue(Severity.INFO, "seo.missing_lang")
    return None


def check_hreflang(page: PageContext) -> Optional[Outcome]:
    if page.document.html_lang and not page.document.exists('link[rel="alternate"][hreflang]'):
        return Outcome.issue(Severity.INFO, "seo.missing_hreflang")
    return None


SEO_CHECKS = (
    Check("https", check_https),
    Check("robots_rules", check_robots_rules),
    Check("robots_present", check_robots_present),
    Check("sitemap", check_sitemap),
    Check("load_time", check_load_time),
    Check("title", check_title),
    Check("meta_description", check_meta_description),
    Check("h1", check_h1),
    Check("h1_matches_title", check_h1_matches_title),
    Check("image_alt", check_image_alt),
    Check("srcset", check_srcset),
    Check("viewport", check_viewport),
    Check("canonical", check_canonical),
    Check("open_graph", check_open_graph),
    Check("twitter_card", check_twitter_card),
    Check("structured_data", check_structured_data),
    Check("internal_links", check_internal_links),
    Check("url_length", check_url_length),
    Check("url_query", check_url_query),
    Check("content_length", check_content_length),
    Check("language", check_language),
    Check("hreflang", check_hreflang),
)


def seo_metrics(page: PageContext) -> Dict[str, Any]:
    doc = page.document
    return {
        "technical": {
            "load_speed": page.load_time_ms / 1000,
            "mobile_optimized": doc.exists('meta[name="viewport"]'),
            "https_enabled": page.url.lower().startswith("https://"),
            "has_robots_txt": page.has_robots_txt,
            "has_sitemap": page.has_sitemap,
        },
        "on_page": {
            "has_unique_title": bool(doc.title),
            "has_meta_description": bool(doc.meta_content("description")),
            "has_h1": doc.exists("h1"),
            "header_structure": [heading.name for heading in doc.select("h1, h2, h3, h4, h5, h6")],
            "images_with_alt": images_with_alt(page),
            "total_images": doc.count("img"),
        },
    }


def evaluate_seo(page: PageContext) -> Evaluation:
    return run_checks(Category.SEO, SEO_CHECKS, page, seo_metrics)


async def inspect_seo(page: PageContext, probe, probe_timeout: Optional[float] = None) -> Evaluation:
    """Probe robots.txt and the sitemap, then evaluate the SEO catalog"""
    robots_txt, has_sitemap = await probe_site_resources(page.url, probe, timeout=probe_timeout)
    probed = replace(page, has_robots_txt=robots_txt is not None, robots_txt=robots_txt, has_sitemap=has_sitemap)
    return evaluate_seo(probed)

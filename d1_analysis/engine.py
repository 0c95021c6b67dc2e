"""
Website analyzer

Orchestrates one analysis: fetch and parse the page, run the three category
analyzers concurrently, optionally blend in a PageSpeed audit, and build the
overview.
"""
import asyncio
import time
from typing import Optional, Union

from core.config import Settings, get_settings
from core.exceptions import ValidationError
from core.logging import get_logger
from d0_gateway.providers.website import WebsiteClient

from .analyzers import analyze_accessibility, analyze_design, analyze_seo
from .audit import PageSpeedAuditProvider
from .blender import blend_audit
from .checks import PageContext
from .constants import AUDIT_STRATEGY
from .fetcher import HttpDocumentFetcher, HttpResourceProbe
from .interfaces import AuditProvider, DocumentFetcher, ResourceProbe
from .messages import MessageCatalog, default_catalog
from .models import AnalysisResult, AuditSignal
from .overview import build_overview
from .types import AnalysisMode, Locale
from .urls import normalize_url

logger = get_logger(__name__, domain="d1")


class WebsiteAnalyzer:
    """
    Scores a webpage for accessibility, SEO and design

    Collaborators default to the httpx backed implementations, which share one
    website client. The analyzer keeps no state between calls.
    """

    def __init__(
        self,
        fetcher: Optional[DocumentFetcher] = None,
        probe: Optional[ResourceProbe] = None,
        audit_provider: Optional[AuditProvider] = None,
        catalog: Optional[MessageCatalog] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.catalog = catalog or default_catalog()

        self._website_client: Optional[WebsiteClient] = None
        if fetcher is None or probe is None:
            self._website_client = WebsiteClient()
        self.fetcher = fetcher or HttpDocumentFetcher(self._website_client)
        self.probe = probe or HttpResourceProbe(self._website_client)
        self.audit_provider = audit_provider or PageSpeedAuditProvider(catalog=self.catalog)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        if self._website_client is not None:
            await self._website_client.close()

    def _resolve_mode(self, mode: Union[str, AnalysisMode, None]) -> AnalysisMode:
        value = mode or self.settings.default_analysis_mode
        try:
            return AnalysisMode(value.lower() if isinstance(value, str) else value)
        except ValueError as e:
            raise ValidationError(f"Unknown analysis mode: {value}", field="mode") from e

    async def _fetch_audit(self, url: str, locale: Locale) -> Optional[AuditSignal]:
        try:
            return await asyncio.wait_for(
                self.audit_provider.fetch(url, AUDIT_STRATEGY, locale),
                timeout=self.settings.audit_timeout,
            )
        except Exception as e:
            logger.warning(f"Audit enrichment failed for {url}, using local scores: {e!r}")
            return None

    async def analyze(
        self,
        url: str,
        locale: Union[str, Locale, None] = None,
        mode: Union[str, AnalysisMode, None] = None,
    ) -> AnalysisResult:
        """
        Analyze a website

        Args:
            url: Website address, https is assumed when the scheme is missing
            locale: Language of every message in the result, defaults to settings
            mode: "deep" blends a PageSpeed audit into the scores, "basic" does not

        Returns:
            AnalysisResult

        Raises:
            InvalidURLError: If the address cannot be normalised
            DocumentFetchError: If the page cannot be fetched
        """
        url = normalize_url(url)
        locale = Locale.parse(locale or self.settings.default_locale)
        mode = self._resolve_mode(mode)
        start = time.perf_counter()
        logger.info(f"Starting analysis for {url}", extra={"locale": locale.value, "mode": mode.value})

        fetched = await self.fetcher.fetch(url)
        page = PageContext(document=fetched.document, url=url, load_time_ms=fetched.elapsed_ms)

        accessibility, seo, design = await asyncio.gather(
            asyncio.to_thread(analyze_accessibility, page, locale, self.catalog),
            analyze_seo(page, self.probe, locale, self.catalog, probe_timeout=self.settings.probe_timeout),
            asyncio.to_thread(analyze_design, page, locale, self.catalog),
        )

        if mode == AnalysisMode.DEEP:
            signal = await self._fetch_audit(url, locale)
            accessibility, seo, design = blend_audit(accessibility, seo, design, signal, locale, self.catalog)

        overview = build_overview([accessibility, seo, design], locale, self.catalog)
        result = AnalysisResult(
            url=url,
            locale=locale,
            accessibility=accessibility,
            seo=seo,
            design=design,
            overview=overview,
        )

        logger.info(
            f"Finished analysis for {url}",
            extra={
                "overall_score": overview.overall_score,
                "accessibility_score": accessibility.score,
                "seo_score": seo.score,
                "design_score": design.score,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return result


async def analyze_website(
    url: str,
    locale: Union[str, Locale, None] = None,
    mode: Union[str, AnalysisMode, None] = None,
) -> AnalysisResult:
    """Analyze one website with the default collaborators"""
    async with WebsiteAnalyzer() as analyzer:
        return await analyzer.analyze(url, locale=locale, mode=mode)

"""
PageSpeed Insights audit provider

Turns a raw PageSpeed Insights v5 response into an ``AuditSignal`` with
pre-formatted flags. The provider never raises: any failure is logged and
reported as "no signal".
"""
from typing import Any, Dict, List, Optional

from core.config import get_settings
from core.logging import get_logger
from d0_gateway.providers.pagespeed import PageSpeedClient

from .constants import (
    CLS_FLAG_ERROR,
    CLS_FLAG_WARNING,
    LCP_ERROR_SECONDS,
    LCP_WARNING_SECONDS,
    TBT_FLAG_ERROR_MS,
    TBT_FLAG_WARNING_MS,
)
from .interfaces import AuditProvider
from .messages import MessageCatalog, default_catalog
from .models import AuditFlag, AuditSignal
from .types import Locale, Severity

logger = get_logger(__name__, domain="d1")


def _category_score(categories: Dict[str, Any], name: str) -> Optional[int]:
    category = categories.get(name)
    if not category:
        return None
    return round((category.get("score") or 0) * 100)


def _numeric(audits: Dict[str, Any], audit_id: str) -> Optional[float]:
    value = (audits.get(audit_id) or {}).get("numericValue")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _seconds(audits: Dict[str, Any], audit_id: str) -> Optional[float]:
    value = _numeric(audits, audit_id)
    return value / 1000 if value is not None else None


def _flag(catalog: MessageCatalog, locale: Locale, severity: Severity, code: str, **params) -> AuditFlag:
    return AuditFlag(
        severity=severity,
        message=catalog.get(f"audit.{code}.message", locale, params),
        recommendation=catalog.get(f"audit.{code}.recommendation", locale, params),
    )


def summarize_pagespeed(
    payload: Dict[str, Any], catalog: Optional[MessageCatalog] = None, locale: Locale = Locale.SV
) -> Optional[AuditSignal]:
    """
    Summarize a PageSpeed Insights response

    Args:
        payload: Decoded runPagespeed response
        catalog: Message catalog used for the flag texts
        locale: Locale of the flag texts

    Returns:
        AuditSignal, or None when the payload has no Lighthouse result
    """
    lighthouse = (payload or {}).get("lighthouseResult")
    if not lighthouse:
        return None

    catalog = catalog or default_catalog()
    categories = lighthouse.get("categories") or {}
    audits = lighthouse.get("audits") or {}

    lcp = _seconds(audits, "largest-contentful-paint")
    cls = _numeric(audits, "cumulative-layout-shift")
    tbt = _numeric(audits, "total-blocking-time")
    viewport_score = (audits.get("viewport") or {}).get("score")
    viewport_ok = (viewport_score or 0) >= 1

    flags: List[AuditFlag] = []
    if lcp is not None and lcp > LCP_WARNING_SECONDS:
        severity = Severity.ERROR if lcp > LCP_ERROR_SECONDS else Severity.WARNING
        flags.append(_flag(catalog, locale, severity, "lcp", seconds=lcp))
    if cls is not None and cls > CLS_FLAG_WARNING:
        severity = Severity.ERROR if cls > CLS_FLAG_ERROR else Severity.WARNING
        flags.append(_flag(catalog, locale, severity, "cls", value=cls))
    if tbt is not None and tbt > TBT_FLAG_WARNING_MS:
        severity = Severity.ERROR if tbt > TBT_FLAG_ERROR_MS else Severity.WARNING
        flags.append(_flag(catalog, locale, severity, "tbt", ms=tbt))
    if not viewport_ok:
        flags.append(_flag(catalog, locale, Severity.ERROR, "viewport"))

    return AuditSignal(
        performance_score=_category_score(categories, "performance"),
        accessibility_score=_category_score(categories, "accessibility"),
        lcp_seconds=lcp,
        fcp_seconds=_seconds(audits, "first-contentful-paint"),
        cls=cls,
        tbt_ms=tbt,
        interactive_seconds=_seconds(audits, "interactive"),
        speed_index_seconds=_seconds(audits, "speed-index"),
        mobile_optimized=viewport_ok,
        flags=flags,
    )


class PageSpeedAuditProvider(AuditProvider):
    """Audit provider backed by the PageSpeed Insights API"""

    def __init__(self, client: Optional[PageSpeedClient] = None, catalog: Optional[MessageCatalog] = None):
        self.settings = get_settings()
        self._client = client
        self.catalog = catalog or default_catalog()

    async def fetch(self, url: str, strategy: str, locale: Locale) -> Optional[AuditSignal]:
        if not self.settings.enable_pagespeed:
            logger.debug("PageSpeed enrichment disabled")
            return None

        client = self._client or PageSpeedClient()
        try:
            payload = await client.analyze_url(url, strategy=strategy)
            return summarize_pagespeed(payload, self.catalog, locale)
        except Exception as e:
            logger.warning(f"PageSpeed audit failed for {url}, continuing without it: {e}")
            return None
        finally:
            if self._client is None:
                await client.close()

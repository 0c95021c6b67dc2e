"""
Category analyzers

Each analyzer is an ordered tuple of checks evaluated by the shared scoring
loop. The ``analyze_*`` helpers evaluate a catalog and render the result in
one locale.
"""
from typing import Optional

from ..checks import PageContext
from ..messages import MessageCatalog, default_catalog
from ..models import CategoryResult
from ..types import Locale
from .accessibility import ACCESSIBILITY_CHECKS, evaluate_accessibility
from .design import DESIGN_CHECKS, evaluate_design
from .seo import SEO_CHECKS, evaluate_seo, inspect_seo


def analyze_accessibility(
    page: PageContext, locale: Locale = Locale.SV, catalog: Optional[MessageCatalog] = None
) -> CategoryResult:
    return evaluate_accessibility(page).render(catalog or default_catalog(), locale)


def analyze_design(
    page: PageContext, locale: Locale = Locale.SV, catalog: Optional[MessageCatalog] = None
) -> CategoryResult:
    return evaluate_design(page).render(catalog or default_catalog(), locale)


async def analyze_seo(
    page: PageContext,
    probe,
    locale: Locale = Locale.SV,
    catalog: Optional[MessageCatalog] = None,
    probe_timeout: Optional[float] = None,
) -> CategoryResult:
    evaluation = await inspect_seo(page, probe, probe_timeout=probe_timeout)
    return evaluation.render(catalog or default_catalog(), locale)


__all__ = [
    "ACCESSIBILITY_CHECKS",
    "DESIGN_CHECKS",
    "SEO_CHECKS",
    "analyze_accessibility",
    "analyze_design",
    "analyze_seo",
    "evaluate_accessibility",
    "evaluate_design",
    "evaluate_seo",
]

"""
D1 Analysis - heuristic webpage quality scoring

Scores a page for accessibility, SEO and design/UX, optionally blends in a
PageSpeed Insights audit, and summarizes the result with priority issues and
quick wins.
"""
from .engine import WebsiteAnalyzer, analyze_website
from .exceptions import AnalysisError, DocumentFetchError, InvalidURLError, MessageNotFoundError
from .models import AnalysisResult, AuditFlag, AuditSignal, CategoryResult, Issue, OverviewResult
from .types import AnalysisMode, Category, Locale, Severity

__all__ = [
    "WebsiteAnalyzer",
    "analyze_website",
    "AnalysisError",
    "DocumentFetchError",
    "InvalidURLError",
    "MessageNotFoundError",
    "AnalysisResult",
    "AuditFlag",
    "AuditSignal",
    "CategoryResult",
    "Issue",
    "OverviewResult",
    "AnalysisMode",
    "Category",
    "Locale",
    "Severity",
]

"""
Test the website analyzer end to end with in-memory collaborators
"""
import logging

import pytest

from core.config import Settings
from core.exceptions import ValidationError
from d1_analysis.engine import WebsiteAnalyzer
from d1_analysis.exceptions import DocumentFetchError, InvalidURLError
from d1_analysis.models import AuditSignal
from d1_analysis.types import Locale, Severity
from tests.helpers import SITE_URL, FakeAuditProvider, FakeFetcher, FakeProbe, render_page

pytestmark = pytest.mark.unit


@pytest.fixture
def settings():
    return Settings(default_analysis_mode="deep", default_locale="sv", audit_timeout=5)


def make_analyzer(settings, catalog, html=None, audit=None, fetcher=None, probe=None):
    return WebsiteAnalyzer(
        fetcher=fetcher or FakeFetcher(render_page() if html is None else html),
        probe=probe or FakeProbe(),
        audit_provider=audit or FakeAuditProvider(),
        catalog=catalog,
        settings=settings,
    )


class TestWebsiteAnalyzer:
    @pytest.mark.asyncio
    async def test_page_without_lang(self, settings, catalog):
        """Test that a page only missing its lang attribute scores 92/100/100"""
        analyzer = make_analyzer(settings, catalog)

        result = await analyzer.analyze(SITE_URL, locale="en", mode="basic")

        assert result.accessibility.score == 92
        assert result.seo.score == 100
        assert result.design.score == 100
        assert result.overview.overall_score == 97
        assert result.accessibility.issues[0].message == "Language attribute missing on HTML element"
        assert result.overview.priority_issues == [
            "Accessibility: Language attribute missing on HTML element",
            "SEO: Language declaration missing in HTML",
        ]
        assert result.overview.quick_wins == ["Add a lang attribute to the HTML element"]
        assert result.overview.summary.startswith("Impressive!")

    @pytest.mark.asyncio
    async def test_missing_basics_over_http(self, settings, catalog):
        html = render_page(title=None, description=None, viewport=None)
        analyzer = make_analyzer(settings, catalog, html=html)

        result = await analyzer.analyze("http://www.acme-bakery.se", locale="en", mode="basic")

        assert result.seo.score == 38
        assert result.design.score == 80
        assert result.overview.overall_score == 70
        errors = [issue.message for issue in result.seo.issues if issue.severity == Severity.ERROR]
        assert "Page title (title tag) is missing" in errors
        assert "Viewport meta tag is missing" in errors
        priority = result.overview.priority_issues
        assert priority.index("SEO: Viewport meta tag is missing") < priority.index(
            "SEO: Page title (title tag) is missing"
        )

    @pytest.mark.asyncio
    async def test_deep_mode_blends_audit(self, settings, catalog):
        audit = FakeAuditProvider(AuditSignal(lcp_seconds=5.0))
        analyzer = make_analyzer(settings, catalog, audit=audit)

        result = await analyzer.analyze(SITE_URL, locale=Locale.EN)

        assert audit.calls == [(SITE_URL, "mobile", Locale.EN)]
        assert result.seo.score == 90
        assert result.seo.issues[-1].severity == Severity.ERROR
        assert result.seo.issues[-1].message == "LCP is 5.0s"
        assert result.seo.technical_metrics["technical"]["load_speed"] == 5.0
        assert result.overview.overall_score == 94

    @pytest.mark.asyncio
    async def test_basic_mode_skips_audit(self, settings, catalog):
        audit = FakeAuditProvider(AuditSignal(lcp_seconds=5.0))
        analyzer = make_analyzer(settings, catalog, audit=audit)

        result = await analyzer.analyze(SITE_URL, mode="basic")

        assert audit.calls == []
        assert result.seo.score == 100

    @pytest.mark.asyncio
    async def test_mode_defaults_to_settings(self, catalog):
        audit = FakeAuditProvider()
        analyzer = make_analyzer(Settings(default_analysis_mode="basic"), catalog, audit=audit)

        await analyzer.analyze(SITE_URL)

        assert audit.calls == []

    @pytest.mark.asyncio
    async def test_audit_failure_keeps_local_scores(self, settings, catalog, caplog):
        audit = FakeAuditProvider(error=RuntimeError("PageSpeed exploded"))
        analyzer = make_analyzer(settings, catalog, audit=audit)

        with caplog.at_level(logging.WARNING):
            result = await analyzer.analyze(SITE_URL, mode="deep")

        assert result.seo.score == 100
        assert result.overview.overall_score == 97
        assert "PageSpeed exploded" in caplog.text

    @pytest.mark.asyncio
    async def test_audit_timeout_keeps_local_scores(self, catalog):
        audit = FakeAuditProvider(AuditSignal(lcp_seconds=5.0), delay=1)
        analyzer = make_analyzer(Settings(audit_timeout=0.01), catalog, audit=audit)

        result = await analyzer.analyze(SITE_URL, mode="deep")

        assert result.seo.score == 100

    @pytest.mark.asyncio
    async def test_fetch_failure_is_fatal(self, settings, catalog):
        fetcher = FakeFetcher(error=DocumentFetchError(SITE_URL, "website API error: Server error"))
        analyzer = make_analyzer(settings, catalog, fetcher=fetcher)

        with pytest.raises(DocumentFetchError) as exc_info:
            await analyzer.analyze(SITE_URL)

        assert exc_info.value.details["url"] == SITE_URL

    @pytest.mark.asyncio
    async def test_invalid_url_is_rejected_before_fetching(self, settings, catalog):
        fetcher = FakeFetcher(render_page())
        analyzer = make_analyzer(settings, catalog, fetcher=fetcher)

        with pytest.raises(InvalidURLError):
            await analyzer.analyze("not a domain")

        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_unknown_mode(self, settings, catalog):
        analyzer = make_analyzer(settings, catalog)

        with pytest.raises(ValidationError):
            await analyzer.analyze(SITE_URL, mode="turbo")

    @pytest.mark.asyncio
    async def test_url_is_normalised(self, settings, catalog):
        fetcher = FakeFetcher(render_page())
        analyzer = make_analyzer(settings, catalog, fetcher=fetcher)

        result = await analyzer.analyze("  www.acme-bakery.se ", mode="basic")

        assert fetcher.calls == [SITE_URL]
        assert result.url == SITE_URL

    @pytest.mark.asyncio
    async def test_default_locale_is_swedish(self, settings, catalog):
        result = await make_analyzer(settings, catalog).analyze(SITE_URL, mode="basic")

        assert result.locale == Locale.SV
        assert result.accessibility.issues[0].message == "Språkattribut saknas på HTML-elementet"
        assert result.overview.priority_issues[0].startswith("Tillgänglighet: ")

    @pytest.mark.asyncio
    async def test_missing_site_resources(self, settings, catalog):
        analyzer = make_analyzer(settings, catalog, probe=FakeProbe({}))

        result = await analyzer.analyze(SITE_URL, locale="en", mode="basic")

        assert result.seo.score == 89
        assert result.seo.technical_metrics["technical"]["has_sitemap"] is False

    @pytest.mark.asyncio
    async def test_unreachable_site_resources_do_not_abort_analysis(self, settings, catalog):
        probe = FakeProbe(error=TimeoutError("timed out"))
        analyzer = make_analyzer(settings, catalog, probe=probe)

        result = await analyzer.analyze(SITE_URL, locale="en", mode="basic")

        assert result.seo.score == 89
        assert result.seo.technical_metrics["technical"]["has_robots_txt"] is False
        assert result.seo.technical_metrics["technical"]["has_sitemap"] is False
        assert result.overview.overall_score == 94

    @pytest.mark.asyncio
    async def test_resource_timeout_comes_from_settings(self, catalog):
        analyzer = make_analyzer(Settings(probe_timeout=0.01), catalog, probe=FakeProbe(delay=1))

        result = await analyzer.analyze(SITE_URL, locale="en", mode="basic")

        assert result.seo.technical_metrics["technical"]["has_sitemap"] is False

    @pytest.mark.asyncio
    async def test_analysis_is_deterministic(self, settings, catalog):
        analyzer = make_analyzer(settings, catalog, audit=FakeAuditProvider(AuditSignal(lcp_seconds=3.1, cls=0.3)))

        first = await analyzer.analyze(SITE_URL, locale="en")
        second = await analyzer.analyze(SITE_URL, locale="en")

        assert first.to_dict() == second.to_dict()

    @pytest.mark.asyncio
    async def test_result_shape(self, settings, catalog):
        result = await make_analyzer(settings, catalog).analyze(SITE_URL, locale="en", mode="basic")
        data = result.to_dict()

        assert set(data) == {"url", "locale", "accessibility", "seo", "design", "overview"}
        assert data["locale"] == "en"
        assert data["seo"]["technical"]["https_enabled"] is True
        assert data["design"]["navigation"] == {"clear": True, "accessible": True}
        assert all(0 <= category.score <= 100 for category in result.categories)
        assert len(data["overview"]["priority_issues"]) <= 6
        assert len(data["overview"]["quick_wins"]) <= 7

    @pytest.mark.asyncio
    async def test_context_manager_leaves_injected_collaborators_alone(self, settings, catalog):
        async with make_analyzer(settings, catalog) as analyzer:
            result = await analyzer.analyze(SITE_URL, mode="basic")

        assert result.overview.overall_score == 97
        assert analyzer._website_client is None

"""
Test blending of PageSpeed audit signals into local scores
"""
import pytest

from d1_analysis.blender import blend_audit, route_flag
from d1_analysis.models import AuditFlag, AuditSignal, CategoryResult, Issue
from d1_analysis.types import Category, Locale, Severity

pytestmark = pytest.mark.unit


def flag(message: str, severity: Severity = Severity.WARNING) -> AuditFlag:
    return AuditFlag(severity=severity, message=message, recommendation="Fix it")


@pytest.fixture
def local_results():
    """Local scores for a page that only lacks a lang attribute"""
    accessibility = CategoryResult(
        category=Category.ACCESSIBILITY,
        score=92,
        issues=[Issue(Severity.WARNING, "Language attribute missing on HTML element", "Add lang")],
    )
    seo = CategoryResult(
        category=Category.SEO,
        score=100,
        technical_metrics={"technical": {"load_speed": 1.2, "https_enabled": True}},
    )
    design = CategoryResult(category=Category.DESIGN, score=100, technical_metrics={"load_time": 1.2})
    return accessibility, seo, design


class TestRouteFlag:
    @pytest.mark.parametrize(
        "message,category",
        [
            ("LCP is 5.0s (target < 2.5s)", Category.SEO),
            ("Total Blocking Time is 700ms", Category.SEO),
            ("Speed Index is high", Category.SEO),
            ("Time to Interactive is 9s", Category.SEO),
            ("CLS is 0.30 (target < 0.1)", Category.DESIGN),
            ("Cumulative layout shift, CLS too high", Category.DESIGN),
            ("Background and foreground colors lack contrast", Category.SEO),
            ("Viewport meta missing or invalid", Category.ACCESSIBILITY),
            ("Buttons do not have an accessible name", Category.ACCESSIBILITY),
        ],
    )
    def test_routing(self, message, category):
        assert route_flag(flag(message)) == category


class TestBlendAudit:
    def test_no_signal_returns_inputs(self, local_results):
        blended = blend_audit(*local_results, None, Locale.EN)

        assert blended.accessibility is local_results[0]
        assert blended.seo is local_results[1]
        assert blended.design is local_results[2]

    def test_slow_lcp(self, local_results, catalog):
        """Test that an LCP of 5.0s costs SEO 10 points and adds an error"""
        blended = blend_audit(*local_results, AuditSignal(lcp_seconds=5.0), Locale.EN, catalog)

        assert blended.seo.score == 90
        assert blended.seo.issues[-1] == Issue(
            Severity.ERROR, "LCP is 5.0s", "Optimize images and render-blocking resources."
        )
        assert blended.seo.technical_metrics["technical"]["load_speed"] == 5.0
        assert blended.accessibility.score == 92
        assert blended.design.score == 100

    def test_moderate_lcp_is_a_warning(self, local_results, catalog):
        blended = blend_audit(*local_results, AuditSignal(lcp_seconds=3.0), Locale.EN, catalog)

        assert blended.seo.score == 95
        assert blended.seo.issues[-1].severity == Severity.WARNING

    def test_fast_lcp_only_updates_load_speed(self, local_results, catalog):
        blended = blend_audit(*local_results, AuditSignal(lcp_seconds=0.9), Locale.EN, catalog)

        assert blended.seo.score == 100
        assert blended.seo.issues == []
        # The slower of the two measurements wins
        assert blended.seo.technical_metrics["technical"]["load_speed"] == 1.2

    def test_inputs_are_not_mutated(self, local_results, catalog):
        accessibility, seo, design = local_results

        blend_audit(accessibility, seo, design, AuditSignal(lcp_seconds=5.0, cls=0.4), Locale.EN, catalog)

        assert seo.score == 100
        assert seo.issues == []
        assert seo.technical_metrics["technical"]["load_speed"] == 1.2
        assert design.issues == []

    def test_full_signal(self, local_results, catalog):
        signal = AuditSignal(
            accessibility_score=80,
            lcp_seconds=5.0,
            tbt_ms=700,
            cls=0.3,
            speed_index_seconds=4.8,
            mobile_optimized=False,
            flags=[
                flag("LCP is 5.0s (target < 2.5s)", Severity.ERROR),
                flag("CLS is 0.30 (target < 0.1)", Severity.ERROR),
                flag("Viewport meta missing or invalid", Severity.ERROR),
            ],
        )

        blended = blend_audit(*local_results, signal, Locale.EN, catalog)

        # round(92 * 0.6 + 80 * 0.4) = round(87.2)
        assert blended.accessibility.score == 87
        assert blended.seo.score == 80
        assert blended.design.score == 90

        assert [issue.message for issue in blended.seo.issues] == [
            "LCP is 5.0s",
            "Total Blocking Time is 700ms",
            "Viewport meta missing/invalid per Lighthouse",
            "LCP is 5.0s (target < 2.5s)",
        ]
        assert [issue.message for issue in blended.design.issues] == [
            "CLS is 0.30",
            "Speed Index 4.8s",
            "CLS is 0.30 (target < 0.1)",
        ]
        assert blended.design.issues[1].severity == Severity.INFO
        assert blended.accessibility.issues[-1].message == "Viewport meta missing or invalid"

    def test_accessibility_blend_is_rounded(self, catalog):
        accessibility = CategoryResult(Category.ACCESSIBILITY, score=75)
        seo = CategoryResult(Category.SEO, score=100)
        design = CategoryResult(Category.DESIGN, score=100)

        # 75 * 0.6 + 50 * 0.4 = 65.0, 76 * 0.6 + 50 * 0.4 = 65.6
        assert blend_audit(accessibility, seo, design, AuditSignal(accessibility_score=50)).accessibility.score == 65
        accessibility.score = 76
        assert blend_audit(accessibility, seo, design, AuditSignal(accessibility_score=50)).accessibility.score == 66

    def test_scores_are_clamped(self, catalog):
        accessibility = CategoryResult(Category.ACCESSIBILITY, score=50)
        seo = CategoryResult(Category.SEO, score=5)
        design = CategoryResult(Category.DESIGN, score=4)

        blended = blend_audit(
            accessibility, seo, design, AuditSignal(lcp_seconds=6.0, tbt_ms=900, cls=0.5), Locale.SV, catalog
        )

        assert blended.seo.score == 0
        assert blended.design.score == 0
        assert blended.seo.technical_metrics == {"technical": {"load_speed": 6.0}}

    def test_issues_in_swedish(self, local_results, catalog):
        blended = blend_audit(*local_results, AuditSignal(tbt_ms=800), Locale.SV, catalog)

        assert blended.seo.score == 90
        assert "800" in blended.seo.issues[-1].message

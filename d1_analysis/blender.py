"""
External audit blender

Folds a PageSpeed/Lighthouse signal into the locally computed category
results. Inputs are left untouched, blended copies are returned.
"""
import copy
import re
from dataclasses import replace
from typing import List, NamedTuple, Optional

from .checks import clamp_score, round_half_up
from .constants import (
    AUDIT_ACCESSIBILITY_WEIGHT,
    AUDIT_FLAG_DESIGN_OR_SEO_PATTERN,
    CLS_BLEND_THRESHOLD,
    CLS_PENALTY,
    LCP_ERROR_PENALTY,
    LCP_ERROR_SECONDS,
    LCP_WARNING_PENALTY,
    LCP_WARNING_SECONDS,
    LOCAL_ACCESSIBILITY_WEIGHT,
    SPEED_INDEX_INFO_SECONDS,
    TBT_ERROR_MS,
    TBT_PENALTY,
)
from .messages import MessageCatalog, default_catalog
from .models import AuditFlag, AuditSignal, CategoryResult, Issue
from .types import Category, Locale, Severity

_DESIGN_OR_SEO_FLAG = re.compile(AUDIT_FLAG_DESIGN_OR_SEO_PATTERN, re.IGNORECASE)


class BlendedResults(NamedTuple):
    accessibility: CategoryResult
    seo: CategoryResult
    design: CategoryResult


def route_flag(flag: AuditFlag) -> Category:
    """Category an audit flag is reported under"""
    if _DESIGN_OR_SEO_FLAG.search(flag.message):
        return Category.DESIGN if "cls" in flag.message.lower() else Category.SEO
    return Category.ACCESSIBILITY


class _Draft:
    """Mutable working copy of one category result"""

    def __init__(self, result: CategoryResult):
        self.result = result
        self.score = result.score
        self.issues: List[Issue] = list(result.issues)
        self.metrics = copy.deepcopy(result.technical_metrics)

    def finish(self) -> CategoryResult:
        return replace(
            self.result,
            score=clamp_score(self.score),
            issues=self.issues,
            technical_metrics=self.metrics,
        )


def blend_audit(
    accessibility: CategoryResult,
    seo: CategoryResult,
    design: CategoryResult,
    signal: Optional[AuditSignal],
    locale: Locale = Locale.SV,
    catalog: Optional[MessageCatalog] = None,
) -> BlendedResults:
    """
    Blend an audit signal into the three category results

    Args:
        accessibility: Local accessibility result
        seo: Local SEO result
        design: Local design result
        signal: Audit signal, None leaves the results as they are
        locale: Locale of the issues added by the blender
        catalog: Message catalog for those issues

    Returns:
        BlendedResults with every score re-clamped to [0, 100]
    """
    if signal is None:
        return BlendedResults(accessibility, seo, design)

    catalog = catalog or default_catalog()
    drafts = {
        Category.ACCESSIBILITY: _Draft(accessibility),
        Category.SEO: _Draft(seo),
        Category.DESIGN: _Draft(design),
    }
    a11y, seo_draft, design_draft = drafts[Category.ACCESSIBILITY], drafts[Category.SEO], drafts[Category.DESIGN]

    def issue(severity: Severity, code: str, **params) -> Issue:
        return Issue(
            severity=severity,
            message=catalog.get(f"blend.{code}.message", locale, params),
            recommendation=catalog.get(f"blend.{code}.recommendation", locale, params),
        )

    if signal.accessibility_score is not None:
        a11y.score = round_half_up(
            a11y.score * LOCAL_ACCESSIBILITY_WEIGHT + signal.accessibility_score * AUDIT_ACCESSIBILITY_WEIGHT
        )

    if signal.lcp_seconds is not None:
        lcp = signal.lcp_seconds
        if lcp > LCP_WARNING_SECONDS:
            severe = lcp > LCP_ERROR_SECONDS
            seo_draft.score -= LCP_ERROR_PENALTY if severe else LCP_WARNING_PENALTY
            seo_draft.issues.append(issue(Severity.ERROR if severe else Severity.WARNING, "lcp", seconds=lcp))
        technical = seo_draft.metrics.setdefault("technical", {})
        technical["load_speed"] = max(technical.get("load_speed") or 0, lcp)

    if signal.tbt_ms is not None and signal.tbt_ms > TBT_ERROR_MS:
        seo_draft.issues.append(issue(Severity.ERROR, "tbt", ms=signal.tbt_ms))
        seo_draft.score -= TBT_PENALTY

    if signal.cls is not None and signal.cls > CLS_BLEND_THRESHOLD:
        design_draft.issues.append(issue(Severity.WARNING, "cls", value=signal.cls))
        design_draft.score -= CLS_PENALTY

    if signal.speed_index_seconds is not None and signal.speed_index_seconds > SPEED_INDEX_INFO_SECONDS:
        design_draft.issues.append(issue(Severity.INFO, "speed_index", seconds=signal.speed_index_seconds))

    if signal.mobile_optimized is False:
        seo_draft.issues.append(issue(Severity.ERROR, "not_mobile_friendly"))

    for flag in signal.flags:
        drafts[route_flag(flag)].issues.append(flag.to_issue())

    return BlendedResults(a11y.finish(), seo_draft.finish(), design_draft.finish())

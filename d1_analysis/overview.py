"""
Overview summarizer

Overall score, the narrative summary and the ranked priority issue list
derived from the three (possibly blended) category results.
"""
from typing import List, NamedTuple, Optional, Sequence

from .checks import clamp_score, round_half_up
from .constants import (
    MAX_PRIORITY_ISSUES,
    PRIORITY_KEYWORD_BOOSTS,
    SEVERITY_PRIORITY,
    SUMMARY_EXCELLENT,
    SUMMARY_GOOD,
    SUMMARY_OK,
    SUMMARY_OK_CRITICAL,
    SUMMARY_POOR_CRITICAL,
    SUMMARY_WEAKEST_FOCUS,
)
from .messages import MessageCatalog, default_catalog
from .models import CategoryResult, Issue, OverviewResult
from .quick_wins import select_quick_wins
from .types import Category, Locale


class AreaScore(NamedTuple):
    category: Category
    score: int


def overall_score(results: Sequence[CategoryResult]) -> int:
    """Rounded mean of the category scores"""
    if not results:
        return 0
    return clamp_score(round_half_up(sum(result.score for result in results) / len(results)))


def rank_areas(results: Sequence[CategoryResult]) -> List[AreaScore]:
    """Areas from strongest to weakest, ties keep accessibility, SEO, design order"""
    order = list(Category)
    areas = sorted((AreaScore(r.category, r.score) for r in results), key=lambda a: order.index(a.category))
    return sorted(areas, key=lambda area: area.score, reverse=True)


def count_critical_issues(results: Sequence[CategoryResult]) -> int:
    return sum(len(result.errors) for result in results)


def issue_priority(issue: Issue) -> int:
    """Severity weight plus the boost of the first keyword found in the message"""
    priority = SEVERITY_PRIORITY[issue.severity]
    message = issue.message.lower()
    for keyword, boost in PRIORITY_KEYWORD_BOOSTS:
        if keyword in message:
            return priority + boost
    return priority


def rank_priority_issues(
    results: Sequence[CategoryResult],
    locale: Locale = Locale.SV,
    catalog: Optional[MessageCatalog] = None,
    limit: int = MAX_PRIORITY_ISSUES,
) -> List[str]:
    """
    Most important issues across all categories

    Issues are collected in category order then check order, and the sort is
    stable so equal priorities keep that order.

    Returns:
        Up to ``limit`` strings formatted as "<Category label>: <message>"
    """
    catalog = catalog or default_catalog()
    collected = [(result.category, issue) for result in results for issue in result.issues]
    ranked = sorted(collected, key=lambda item: issue_priority(item[1]), reverse=True)
    return [
        f"{catalog.get(f'labels.{category.value}', locale)}: {issue.message}"
        for category, issue in ranked[:limit]
    ]


def generate_summary(
    overall: int,
    results: Sequence[CategoryResult],
    locale: Locale = Locale.SV,
    catalog: Optional[MessageCatalog] = None,
) -> str:
    catalog = catalog or default_catalog()
    areas = rank_areas(results)
    strongest, weakest = areas[0], areas[-1]
    critical = count_critical_issues(results)
    params = {
        "overall": overall,
        "strongest": catalog.get(f"areas.{strongest.category.value}", locale),
        "strongest_score": strongest.score,
        "weakest": catalog.get(f"areas.{weakest.category.value}", locale),
        "weakest_score": weakest.score,
        "critical": critical,
    }

    if overall >= SUMMARY_EXCELLENT:
        parts = ["excellent", "excellent_focus" if weakest.score < SUMMARY_WEAKEST_FOCUS else "excellent_keep"]
    elif overall >= SUMMARY_GOOD:
        parts = ["good", "good_critical" if critical > 0 else "good_improve"]
    elif overall >= SUMMARY_OK:
        parts = ["ok", "ok_critical" if critical > SUMMARY_OK_CRITICAL else "ok_focus"]
    else:
        parts = ["poor"]
        if critical > SUMMARY_POOR_CRITICAL:
            parts.append("poor_critical")
        parts.append("poor_closing")

    return " ".join(catalog.get(f"summary.{part}", locale, params) for part in parts)


def build_overview(
    results: Sequence[CategoryResult],
    locale: Locale = Locale.SV,
    catalog: Optional[MessageCatalog] = None,
) -> OverviewResult:
    catalog = catalog or default_catalog()
    overall = overall_score(results)
    return OverviewResult(
        overall_score=overall,
        summary=generate_summary(overall, results, locale, catalog),
        priority_issues=rank_priority_issues(results, locale, catalog),
        quick_wins=select_quick_wins(results, locale, catalog),
    )

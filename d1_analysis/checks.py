"""
Rule catalog primitives and the shared scoring loop

A category is described by an ordered tuple of ``Check`` entries. Each check
inspects the page and returns an ``Outcome`` (findings, strengths and a score
deduction) or None. Outcomes hold message ids rather than text so one
evaluation can be rendered in any locale.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .constants import MAX_SCORE, MIN_SCORE
from .document import ParsedDocument
from .models import CategoryResult, Issue
from .types import Category, Locale, Severity


def clamp_score(score: float) -> int:
    return int(max(MIN_SCORE, min(MAX_SCORE, score)))


def round_half_up(value: float) -> int:
    """Round .5 upwards rather than to the nearest even number"""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class Finding:
    """Locale independent issue: a message id plus its template parameters"""

    severity: Severity
    code: str
    params: Mapping[str, Any] = field(default_factory=dict)
    element: Optional[str] = None


@dataclass(frozen=True)
class Strength:
    code: str
    params: Mapping[str, Any] = field(default_factory=dict)


@dataclass
class Outcome:
    """Effect of one check on the category"""

    findings: List[Finding] = field(default_factory=list)
    strengths: List[Strength] = field(default_factory=list)
    deduction: int = 0

    @classmethod
    def issue(cls, severity: Severity, code: str, deduction: int = 0, element: str = None, **params) -> "Outcome":
        return cls(findings=[Finding(severity, code, params, element)], deduction=deduction)

    @classmethod
    def strength(cls, code: str, **params) -> "Outcome":
        return cls(strengths=[Strength(code, params)])


@dataclass
class PageContext:
    """Everything a check may look at

    Probe results are only filled in for the SEO analyzer, load time is
    supplied by the caller.
    """

    document: ParsedDocument
    url: str
    load_time_ms: int = 0
    has_robots_txt: bool = False
    robots_txt: Optional[str] = None
    has_sitemap: bool = False


@dataclass(frozen=True)
class Check:
    name: str
    inspect: Callable[[PageContext], Optional[Outcome]]


@dataclass
class Evaluation:
    """Result of running one catalog, before localisation"""

    category: Category
    score: int
    findings: List[Finding]
    strengths: List[Strength]
    metrics: Dict[str, Any]

    def render(self, catalog, locale: Locale) -> CategoryResult:
        issues = [
            Issue(
                severity=finding.severity,
                message=catalog.get(f"{finding.code}.message", locale, finding.params),
                recommendation=catalog.get(f"{finding.code}.recommendation", locale, finding.params),
                element=finding.element,
            )
            for finding in self.findings
        ]
        strengths = [catalog.get(strength.code, locale, strength.params) for strength in self.strengths]
        return CategoryResult(
            category=self.category,
            score=self.score,
            issues=issues,
            strengths=strengths,
            technical_metrics=dict(self.metrics),
        )


def run_checks(
    category: Category,
    checks: Sequence[Check],
    page: PageContext,
    metrics: Callable[[PageContext], Dict[str, Any]] = None,
) -> Evaluation:
    """Evaluate checks in catalog order starting from a perfect score

    The running score may drop below zero, only the final clamp applies the
    floor.
    """
    score = MAX_SCORE
    findings: List[Finding] = []
    strengths: List[Strength] = []

    for check in checks:
        outcome = check.inspect(page)
        if outcome is None:
            continue
        score -= outcome.deduction
        findings.extend(outcome.findings)
        strengths.extend(outcome.strengths)

    return Evaluation(
        category=category,
        score=clamp_score(score),
        findings=findings,
        strengths=strengths,
        metrics=metrics(page) if metrics else {},
    )

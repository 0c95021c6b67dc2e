"""
D1 Analysis Models

Plain data structures produced by the scoring engine. Everything here is
JSON serialisable through ``to_dict``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .types import Category, Locale, Severity


@dataclass(frozen=True)
class Issue:
    """A single detected defect with remediation text"""

    severity: Severity
    message: str
    recommendation: str
    element: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "type": self.severity.value,
            "message": self.message,
            "recommendation": self.recommendation,
        }
        if self.element is not None:
            data["element"] = self.element
        return data


@dataclass
class CategoryResult:
    """Score, issues and strengths for one quality dimension"""

    category: Category
    score: int
    issues: List[Issue] = field(default_factory=list)
    strengths: List[str] = field(default_factory=list)
    technical_metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def errors(self) -> List[Issue]:
        return [issue for issue in self.issues if issue.severity == Severity.ERROR]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "issues": [issue.to_dict() for issue in self.issues],
            "strengths": list(self.strengths),
            **self.technical_metrics,
        }


@dataclass(frozen=True)
class AuditFlag:
    """Pre-formatted finding reported by the audit provider"""

    severity: Severity
    message: str
    recommendation: str

    def to_issue(self) -> Issue:
        return Issue(severity=self.severity, message=self.message, recommendation=self.recommendation)


@dataclass
class AuditSignal:
    """Summary of a third-party Lighthouse run

    Every metric is optional, the provider may omit any of them.
    """

    performance_score: Optional[int] = None
    accessibility_score: Optional[int] = None
    lcp_seconds: Optional[float] = None
    fcp_seconds: Optional[float] = None
    cls: Optional[float] = None
    tbt_ms: Optional[float] = None
    interactive_seconds: Optional[float] = None
    speed_index_seconds: Optional[float] = None
    mobile_optimized: Optional[bool] = None
    flags: List[AuditFlag] = field(default_factory=list)


@dataclass
class OverviewResult:
    overall_score: int
    summary: str
    priority_issues: List[str] = field(default_factory=list)
    quick_wins: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_score": self.overall_score,
            "summary": self.summary,
            "priority_issues": list(self.priority_issues),
            "quick_wins": list(self.quick_wins),
        }


@dataclass
class AnalysisResult:
    """Complete result of one analysis run, owned by the caller"""

    url: str
    locale: Locale
    accessibility: CategoryResult
    seo: CategoryResult
    design: CategoryResult
    overview: OverviewResult

    @property
    def categories(self) -> List[CategoryResult]:
        return [self.accessibility, self.seo, self.design]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "locale": self.locale.value,
            "accessibility": self.accessibility.to_dict(),
            "seo": self.seo.to_dict(),
            "design": self.design.to_dict(),
            "overview": self.overview.to_dict(),
        }

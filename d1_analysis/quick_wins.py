"""
Quick win selector

A fixed catalog of remediation actions. An action is offered when one of its
keywords appears in the message of an issue from its category, and offered
actions are ranked by impact against effort.
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .constants import MAX_QUICK_WINS
from .messages import MessageCatalog, default_catalog
from .models import CategoryResult
from .types import Category, Locale, Severity


@dataclass(frozen=True)
class QuickWin:
    action: str
    category: Category
    keywords: Tuple[str, ...]
    effort: int  # 1 (trivial) to 5
    impact: int  # 1 to 10
    errors_only: bool = False

    @property
    def score(self) -> int:
        return self.impact * 2 - self.effort

    def applies_to(self, result: CategoryResult) -> bool:
        for issue in result.issues:
            if self.errors_only and issue.severity != Severity.ERROR:
                continue
            message = issue.message.lower()
            if any(keyword in message for keyword in self.keywords):
                return True
        return False


QUICK_WINS = (
    QuickWin("alt_text", Category.ACCESSIBILITY, ("alt",), effort=2, impact=8),
    QuickWin("lang", Category.ACCESSIBILITY, ("språk", "lang"), effort=1, impact=6),
    QuickWin("meta_description", Category.SEO, ("meta description",), effort=2, impact=9),
    QuickWin("title", Category.SEO, ("title",), effort=1, impact=10, errors_only=True),
    QuickWin("robots", Category.SEO, ("robots.txt",), effort=1, impact=5),
    QuickWin("sitemap", Category.SEO, ("sitemap",), effort=2, impact=7),
    QuickWin("canonical", Category.SEO, ("canonical",), effort=1, impact=6),
    QuickWin("open_graph", Category.SEO, ("open graph", "social"), effort=2, impact=7),
    QuickWin("h1", Category.SEO, ("h1",), effort=1, impact=8),
    QuickWin("viewport", Category.DESIGN, ("viewport",), effort=1, impact=10, errors_only=True),
    QuickWin("favicon", Category.DESIGN, ("favicon",), effort=1, impact=4),
    QuickWin("labels", Category.ACCESSIBILITY, ("label", "etikett"), effort=2, impact=7),
    QuickWin("lazy_loading", Category.DESIGN, ("lazy",), effort=2, impact=8),
    QuickWin("structured_data", Category.SEO, ("strukturerad data", "schema"), effort=3, impact=8),
    QuickWin("semantic_html", Category.ACCESSIBILITY, ("main", "landmark"), effort=2, impact=6),
)


def select_quick_wins(
    results: Sequence[CategoryResult],
    locale: Locale = Locale.SV,
    catalog: Optional[MessageCatalog] = None,
    limit: int = MAX_QUICK_WINS,
) -> List[str]:
    """Localized actions of the best matching quick wins, best first"""
    catalog = catalog or default_catalog()
    by_category = {result.category: result for result in results}

    matched = [
        win for win in QUICK_WINS
        if win.category in by_category and win.applies_to(by_category[win.category])
    ]
    # sorted() is stable, equal scores keep catalog order
    ranked = sorted(matched, key=lambda win: win.score, reverse=True)
    return [catalog.get(f"quick_wins.{win.action}", locale) for win in ranked[:limit]]

"""
Parsed document

Read-only query layer over BeautifulSoup used by every check. Missing
elements are normal input: lookups return empty lists, None or "" instead of
raising.
"""
import re
from typing import List, Optional, Set, Union

from bs4 import BeautifulSoup, Tag
from bs4.element import NavigableString, PreformattedString

_WHITESPACE = re.compile(r"\s+")
_NON_VISIBLE = {"script", "style", "noscript", "template"}


def attribute(element: Tag, name: str) -> Optional[str]:
    """Attribute value as a string, joining multi-valued attributes like class"""
    value = element.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return value


def element_text(element: Tag) -> str:
    return _WHITESPACE.sub(" ", element.get_text(" ")).strip()


class ParsedDocument:
    """Queryable view of a fetched HTML page"""

    def __init__(self, html: Union[str, bytes], parser: str = "html.parser"):
        self.soup = BeautifulSoup(html or "", parser)
        self._label_targets: Optional[Set[str]] = None

    def select(self, selector: str) -> List[Tag]:
        return self.soup.select(selector)

    def count(self, selector: str) -> int:
        return len(self.soup.select(selector))

    def exists(self, selector: str) -> bool:
        return self.soup.select_one(selector) is not None

    def first(self, selector: str) -> Optional[Tag]:
        return self.soup.select_one(selector)

    def attr(self, selector: str, name: str) -> Optional[str]:
        """Attribute of the first element matching selector"""
        element = self.first(selector)
        if element is None:
            return None
        return attribute(element, name)

    @property
    def html_lang(self) -> Optional[str]:
        lang = self.attr("html", "lang")
        return lang.strip() if lang and lang.strip() else None

    @property
    def title(self) -> str:
        element = self.first("title")
        return element.get_text().strip() if element else ""

    def meta_content(self, name: str) -> Optional[str]:
        element = self.first(f'meta[name="{name}"]')
        if element is None:
            return None
        content = attribute(element, "content")
        return content.strip() if content is not None else None

    @property
    def label_targets(self) -> Set[str]:
        """Ids referenced by <label for=...>"""
        if self._label_targets is None:
            self._label_targets = {
                attribute(label, "for") for label in self.select("label[for]") if attribute(label, "for")
            }
        return self._label_targets

    def has_label(self, element: Tag) -> bool:
        element_id = attribute(element, "id")
        return bool(element_id) and element_id in self.label_targets

    def body_text(self) -> str:
        """Visible body text with whitespace collapsed"""
        root = self.soup.body or self.soup
        parts = []
        for node in root.descendants:
            if not isinstance(node, NavigableString) or isinstance(node, PreformattedString):
                continue
            if node.parent is not None and node.parent.name in _NON_VISIBLE:
                continue
            parts.append(str(node))
        return _WHITESPACE.sub(" ", " ".join(parts)).strip()

    def word_count(self) -> int:
        return len(self.body_text().split())


def style_property(element: Tag, name: str) -> Optional[str]:
    """Value of one declaration in an inline style attribute"""
    style = attribute(element, "style") or ""
    for declaration in style.split(";"):
        prop, _, value = declaration.partition(":")
        if prop.strip().lower() == name:
            return value.strip().lower()
    return None

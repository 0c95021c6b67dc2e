"""
Accessibility analyzer

Structural WCAG heuristics: alt text, headings, form labels, link and button
names, language, landmarks, keyboard access and media captions.
"""
from typing import Any, Dict, Optional

from ..checks import Check, Evaluation, Outcome, PageContext, run_checks
from ..constants import GENERIC_LINK_TEXTS, SKIP_LINK_WORDS
from ..document import element_text
from ..types import Category, Severity

FORM_FIELDS = 'input:not([type="hidden"]), textarea, select'


def check_images_missing_alt(page: PageContext) -> Optional[Outcome]:
    images = page.document.select("img")
    missing = sum(1 for img in images if img.get("alt") is None)
    if missing:
        return Outcome.issue(
            Severity.ERROR, "accessibility.images_missing_alt", deduction=min(30, missing * 5), count=missing
        )
    if images:
        return Outcome.strength("accessibility.strengths.images_have_alt", count=len(images))
    return None


def check_images_empty_alt(page: PageContext) -> Optional[Outcome]:
    empty = sum(1 for img in page.document.select("img") if img.get("alt") == "")
    if empty > 5:
        return Outcome.issue(Severity.WARNING, "accessibility.images_empty_alt", deduction=5, count=empty)
    return None


def check_h1(page: PageContext) -> Optional[Outcome]:
    h1_count = page.document.count("h1")
    if h1_count == 0:
        return Outcome.issue(Severity.ERROR, "accessibility.no_h1", deduction=15)
    if h1_count > 1:
        return Outcome.issue(Severity.WARNING, "accessibility.multiple_h1", deduction=10, count=h1_count)
    return Outcome.strength("accessibility.strengths.single_h1")


def check_heading_hierarchy(page: PageContext) -> Optional[Outcome]:
    doc = page.document
    if doc.exists("h1") and not doc.exists("h2") and doc.exists("h3, h4"):
        return Outcome.issue(Severity.WARNING, "accessibility.broken_heading_hierarchy", deduction=8)
    return None


def check_form_labels(page: PageContext) -> Optional[Outcome]:
    doc = page.document
    fields = doc.select(FORM_FIELDS)
    unlabeled = [
        field
        for field in fields
        if not doc.has_label(field)
        and not field.get("aria-label")
        and not field.get("aria-labelledby")
        and not field.get("title")
    ]
    if unlabeled:
        return Outcome.issue(
            Severity.ERROR,
            "accessibility.unlabeled_fields",
            deduction=min(20, len(unlabeled) * 5),
            count=len(unlabeled),
        )
    if fields:
        return Outcome.strength("accessibility.strengths.fields_labeled")
    return None


def check_required_fields(page: PageContext) -> Optional[Outcome]:
    required = page.document.select("input[required], textarea[required], select[required]")
    if not required:
        return None
    marked = sum(1 for field in required if field.get("aria-required") == "true")
    if marked < len(required):
        return Outcome.issue(Severity.INFO, "accessibility.required_without_aria", deduction=3)
    return None


def check_empty_links(page: PageContext) -> Optional[Outcome]:
    empty = sum(
        1
        for link in page.document.select("a")
        if not element_text(link) and not link.get("aria-label") and not link.get("title")
    )
    if empty:
        return Outcome.issue(
            Severity.ERROR, "accessibility.links_without_text", deduction=min(15, empty * 3), count=empty
        )
    return None


def check_generic_links(page: PageContext) -> Optional[Outcome]:
    generic = sum(1 for link in page.document.select("a") if element_text(link).lower() in GENERIC_LINK_TEXTS)
    if generic > 3:
        return Outcome.issue(Severity.WARNING, "accessibility.generic_link_text", deduction=5, count=generic)
    return None


def check_button_names(page: PageContext) -> Optional[Outcome]:
    unnamed = sum(
        1 for button in page.document.select('button, [role="button"]')
        if not element_text(button) and not button.get("aria-label")
    )
    if unnamed:
        return Outcome.issue(Severity.ERROR, "accessibility.buttons_without_text", deduction=unnamed * 5, count=unnamed)
    return None


def check_language(page: PageContext) -> Optional[Outcome]:
    lang = page.document.html_lang
    if not lang:
        return Outcome.issue(Severity.WARNING, "accessibility.missing_lang", deduction=8)
    return Outcome.strength("accessibility.strengths.lang_set", lang=lang)


def check_main_landmark(page: PageContext) -> Optional[Outcome]:
    if not page.document.exists('main, [role="main"]'):
        return Outcome.issue(Severity.WARNING, "accessibility.no_main", deduction=7)
    return Outcome.strength("accessibility.strengths.main_landmark")


def check_nav_landmark(page: PageContext) -> Optional[Outcome]:
    if not page.document.exists('nav, [role="navigation"]'):
        return Outcome.issue(Severity.INFO, "accessibility.no_nav", deduction=3)
    return None


def check_skip_link(page: PageContext) -> Optional[Outcome]:
    for link in page.document.select('a[href^="#"]'):
        text = element_text(link).lower()
        if any(word in text for word in SKIP_LINK_WORDS):
            return None
    return Outcome.issue(Severity.INFO, "accessibility.no_skip_link", deduction=3)


def check_inline_colors(page: PageContext) -> Optional[Outcome]:
    if page.document.count('[style*="color"]') > 10:
        return Outcome.issue(Severity.INFO, "accessibility.inline_colors")
    return None


def check_negative_tabindex(page: PageContext) -> Optional[Outcome]:
    negative = page.document.count('[tabindex^="-"]')
    if negative:
        return Outcome.issue(Severity.WARNING, "accessibility.negative_tabindex", deduction=5, count=negative)
    return None


def check_focusable_elements(page: PageContext) -> Optional[Outcome]:
    focusable = page.document.count("a, button, input, select, textarea, [tabindex]")
    if focusable:
        return Outcome.strength("accessibility.strengths.focusable", count=focusable)
    return None


def check_video_captions(page: PageContext) -> Optional[Outcome]:
    uncaptioned = sum(
        1
        for video in page.document.select("video")
        if not video.select('track[kind="captions"], track[kind="subtitles"]')
    )
    if uncaptioned:
        return Outcome.issue(
            Severity.WARNING, "accessibility.videos_without_captions", deduction=uncaptioned * 8, count=uncaptioned
        )
    return None


def check_title_attributes(page: PageContext) -> Optional[Outcome]:
    if page.document.count("[title]") > 20:
        return Outcome.issue(Severity.INFO, "accessibility.many_title_attributes")
    return None


ACCESSIBILITY_CHECKS = (
    Check("images_missing_alt", check_images_missing_alt),
    Check("images_empty_alt", check_images_empty_alt),
    Check("h1", check_h1),
    Check("heading_hierarchy", check_heading_hierarchy),
    Check("form_labels", check_form_labels),
    Check("required_fields", check_required_fields),
    Check("empty_links", check_empty_links),
    Check("generic_links", check_generic_links),
    Check("button_names", check_button_names),
    Check("language", check_language),
    Check("main_landmark", check_main_landmark),
    Check("nav_landmark", check_nav_landmark),
    Check("skip_link", check_skip_link),
    Check("inline_colors", check_inline_colors),
    Check("negative_tabindex", check_negative_tabindex),
    Check("focusable_elements", check_focusable_elements),
    Check("video_captions", check_video_captions),
    Check("title_attributes", check_title_attributes),
)


def accessibility_metrics(page: PageContext) -> Dict[str, Any]:
    doc = page.document
    images = doc.select("img")
    return {
        "technical": {
            "total_images": len(images),
            "images_without_alt": sum(1 for img in images if img.get("alt") is None),
            "h1_count": doc.count("h1"),
            "form_fields": doc.count(FORM_FIELDS),
            "lang": doc.html_lang,
            "has_main_landmark": doc.exists('main, [role="main"]'),
            "has_nav_landmark": doc.exists('nav, [role="navigation"]'),
        }
    }


def evaluate_accessibility(page: PageContext) -> Evaluation:
    return run_checks(Category.ACCESSIBILITY, ACCESSIBILITY_CHECKS, page, accessibility_metrics)

"""
Design and UX analyzer

Heuristics for responsiveness, performance, typography, navigation,
layout, calls to action, media, forms and branding. Everything is read from
the static markup and inline styles, nothing is rendered.
"""
import re
from typing import Any, Dict, Optional

from ..checks import Check, Evaluation, Outcome, PageContext, run_checks
from ..constants import LOAD_TIME_ERROR_MS, LOAD_TIME_WARNING_MS, MIN_FONT_SIZE_PX
from ..document import attribute, element_text, style_property
from ..types import Category, Severity

FONT_SIZE_PX = re.compile(r"font-size:\s*(\d+)px")
LIGHT_TEXT = '[style*="color: white"], [style*="color: #fff"]'
LIGHT_BACKGROUNDS = ("white", "#fff", "rgb(255")
NAV_ELEMENTS = 'nav, [role="navigation"], header nav'
NAV_LINKS = 'nav a, [role="navigation"] a, header nav a'
MOBILE_MENU = '[class*="mobile"], [class*="hamburger"], [class*="menu-toggle"]'
BUTTONS = 'button, [type="submit"], .btn, .button, a[class*="button"]'
DEFAULT_CONTRAST_RATIO = 4.5


def has_viewport(page: PageContext) -> bool:
    return page.document.exists('meta[name="viewport"]')


def light_text_on_light_background(page: PageContext) -> int:
    """Elements with white inline text on a white inline background

    Only the element's own and its parent's inline ``background-color`` are
    considered.
    """
    count = 0
    for element in page.document.select(LIGHT_TEXT):
        background = style_property(element, "background-color")
        if not background and element.parent is not None:
            background = style_property(element.parent, "background-color")
        if background and any(light in background for light in LIGHT_BACKGROUNDS):
            count += 1
    return count


def check_viewport(page: PageContext) -> Optional[Outcome]:
    if not has_viewport(page):
        return Outcome.issue(Severity.ERROR, "design.missing_viewport", deduction=20)
    content = page.document.attr('meta[name="viewport"]', "content")
    if content and "user-scalable=no" in content:
        return Outcome.issue(Severity.WARNING, "design.viewport_blocks_zoom", deduction=8)
    return None


def check_responsive_images(page: PageContext) -> Optional[Outcome]:
    total = page.document.count("img")
    if total > 5 and page.document.count("img[srcset], picture img") < total * 0.3:
        return Outcome.issue(Severity.INFO, "design.few_responsive_images", deduction=5)
    return None


def check_load_time(page: PageContext) -> Optional[Outcome]:
    load_time = page.load_time_ms
    seconds = load_time / 1000
    if load_time > LOAD_TIME_ERROR_MS:
        steps = (load_time - LOAD_TIME_ERROR_MS) // 1000
        return Outcome.issue(Severity.ERROR, "design.very_slow_load", deduction=min(25, steps * 5), seconds=seconds)
    if load_time > LOAD_TIME_WARNING_MS:
        steps = (load_time - LOAD_TIME_WARNING_MS) // 1000
        return Outcome.issue(Severity.WARNING, "design.slow_load", deduction=min(15, steps * 4), seconds=seconds)
    return None


def check_stylesheets(page: PageContext) -> Optional[Outcome]:
    stylesheets = page.document.count('link[rel="stylesheet"]')
    if stylesheets > 3:
        return Outcome.issue(Severity.INFO, "design.many_stylesheets", deduction=3, count=stylesheets)
    return None


def check_scripts(page: PageContext) -> Optional[Outcome]:
    scripts = page.document.count("script[src]")
    if scripts > 5:
        return Outcome.issue(Severity.INFO, "design.many_scripts", deduction=3, count=scripts)
    return None


def check_line_length(page: PageContext) -> Optional[Outcome]:
    wide = sum(
        1
        for element in page.document.select("p, div")
        if element_text(element) and "max-width" not in (attribute(element, "style") or "")
    )
    if wide > 10:
        return Outcome.issue(Severity.INFO, "design.wide_text_blocks", deduction=3)
    return None


def check_heading_hierarchy(page: PageContext) -> Optional[Outcome]:
    if page.document.count("h1, h2, h3") <= 2:
        return Outcome.issue(Severity.WARNING, "design.weak_hierarchy", deduction=10)
    return None


def check_font_size(page: PageContext) -> Optional[Outcome]:
    for element in page.document.select("[style]"):
        match = FONT_SIZE_PX.search(attribute(element, "style") or "")
        if match and int(match.group(1)) < MIN_FONT_SIZE_PX:
            return Outcome.issue(Severity.WARNING, "design.small_text", deduction=7)
    return None


def check_navigation(page: PageContext) -> Optional[Outcome]:
    if not page.document.exists(NAV_ELEMENTS):
        return Outcome.issue(Severity.WARNING, "design.no_navigation", deduction=15)
    links = page.document.count(NAV_LINKS)
    if links > 15:
        return Outcome.issue(Severity.INFO, "design.many_nav_links", deduction=4, count=links)
    return None


def check_mobile_menu(page: PageContext) -> Optional[Outcome]:
    doc = page.document
    if has_viewport(page) and not doc.exists(MOBILE_MENU) and doc.count(NAV_LINKS) > 5:
        return Outcome.issue(Severity.WARNING, "design.no_mobile_menu", deduction=8)
    return None


def check_contrast(page: PageContext) -> Optional[Outcome]:
    if light_text_on_light_background(page):
        return Outcome.issue(Severity.WARNING, "design.low_contrast", deduction=10)
    return None


def check_sections(page: PageContext) -> Optional[Outcome]:
    if not page.document.exists("section, article, main > div"):
        return Outcome.issue(Severity.INFO, "design.limited_structure", deduction=4)
    return None


def check_heading_spacing(page: PageContext) -> Optional[Outcome]:
    cramped = sum(
        1
        for heading in page.document.select("h1, h2, h3, h4")
        if "margin" not in (attribute(heading, "style") or "") and heading.find_next_sibling() is not None
    )
    if cramped > 3:
        return Outcome.issue(Severity.INFO, "design.headings_lack_spacing", deduction=3)
    return None


def check_calls_to_action(page: PageContext) -> Optional[Outcome]:
    buttons = page.document.select(BUTTONS)
    if not buttons:
        return Outcome.issue(Severity.WARNING, "design.no_buttons", deduction=12)
    primary = [
        button for button in buttons
        if "primary" in (attribute(button, "class") or "") or "cta" in (attribute(button, "class") or "")
    ]
    if not primary:
        return Outcome.issue(Severity.INFO, "design.no_primary_cta", deduction=5)
    return None


def check_lazy_loading(page: PageContext) -> Optional[Outcome]:
    total = page.document.count("img")
    if total > 5 and page.document.count('img[loading="lazy"]') < total * 0.5:
        return Outcome.issue(Severity.INFO, "design.few_lazy_images", deduction=4)
    return None


def check_image_alt(page: PageContext) -> Optional[Outcome]:
    missing = sum(1 for img in page.document.select("img") if not (attribute(img, "alt") or "").strip())
    if missing:
        return Outcome.issue(Severity.WARNING, "design.images_missing_alt", deduction=min(10, missing * 2), count=missing)
    return None


def check_forms(page: PageContext) -> Optional[Outcome]:
    doc = page.document
    if not doc.exists("form"):
        return None

    inputs = doc.select("input, textarea, select")
    unlabeled = sum(
        1
        for field in inputs
        if attribute(field, "type") not in ("hidden", "submit")
        and not doc.has_label(field)
        and not attribute(field, "placeholder")
    )

    outcome = Outcome()
    if unlabeled:
        outcome = Outcome.issue(Severity.WARNING, "design.fields_missing_labels", deduction=8, count=unlabeled)
    if not doc.exists("[required], [pattern], [min], [max]") and len(inputs) > 2:
        validation = Outcome.issue(Severity.INFO, "design.no_form_validation", deduction=4)
        outcome.findings.extend(validation.findings)
        outcome.deduction += validation.deduction
    return outcome


def check_footer(page: PageContext) -> Optional[Outcome]:
    if not page.document.exists('footer, [role="contentinfo"]'):
        return Outcome.issue(Severity.INFO, "design.no_footer", deduction=5)
    return None


def check_favicon(page: PageContext) -> Optional[Outcome]:
    if not page.document.exists('link[rel*="icon"]'):
        return Outcome.issue(Severity.INFO, "design.no_favicon", deduction=3)
    return None


DESIGN_CHECKS = (
    Check("viewport", check_viewport),
    Check("responsive_images", check_responsive_images),
    Check("load_time", check_load_time),
    Check("stylesheets", check_stylesheets),
    Check("scripts", check_scripts),
    Check("line_length", check_line_length),
    Check("heading_hierarchy", check_heading_hierarchy),
    Check("font_size", check_font_size),
    Check("navigation", check_navigation),
    Check("mobile_menu", check_mobile_menu),
    Check("contrast", check_contrast),
    Check("sections", check_sections),
    Check("heading_spacing", check_heading_spacing),
    Check("calls_to_action", check_calls_to_action),
    Check("lazy_loading", check_lazy_loading),
    Check("image_alt", check_image_alt),
    Check("forms", check_forms),
    Check("footer", check_footer),
    Check("favicon", check_favicon),
)


def design_metrics(page: PageContext) -> Dict[str, Any]:
    doc = page.document
    paragraphs = doc.select("p")
    average_paragraph = sum(len(p.get_text()) for p in paragraphs) / len(paragraphs) if paragraphs else 0
    has_nav = doc.exists(NAV_ELEMENTS)
    return {
        "responsive": has_viewport(page),
        "load_time": page.load_time_ms / 1000,
        "color_contrast": {
            "sufficient": light_text_on_light_background(page) == 0,
            "ratio": DEFAULT_CONTRAST_RATIO,
        },
        "typography": {
            "readable": average_paragraph < 1000,
            "hierarchy": doc.count("h1, h2, h3") > 2,
        },
        "navigation": {
            "clear": has_nav,
            "accessible": has_nav and doc.exists(NAV_LINKS),
        },
    }


def evaluate_design(page: PageContext) -> Evaluation:
    return run_checks(Category.DESIGN, DESIGN_CHECKS, page, design_metrics)

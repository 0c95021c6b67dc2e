"""Scoring constants for the analyzers, the audit blender and the overview.

The numbers are empirical. They are kept together here so they can be tuned
without touching the scoring loop.
"""

from .types import Severity

MAX_SCORE = 100
MIN_SCORE = 0

# Audit blending
AUDIT_STRATEGY = "mobile"
LOCAL_ACCESSIBILITY_WEIGHT = 0.6
AUDIT_ACCESSIBILITY_WEIGHT = 0.4
LCP_WARNING_SECONDS = 2.5
LCP_ERROR_SECONDS = 4.0
LCP_WARNING_PENALTY = 5
LCP_ERROR_PENALTY = 10
TBT_ERROR_MS = 600
TBT_PENALTY = 10
CLS_BLEND_THRESHOLD = 0.25
CLS_PENALTY = 10
SPEED_INDEX_INFO_SECONDS = 4.0
AUDIT_FLAG_DESIGN_OR_SEO_PATTERN = r"contrast|layout|cls|lcp|speed|blocking|interactive"

# Audit summarisation (raw Lighthouse payload to flags)
CLS_FLAG_WARNING = 0.1
CLS_FLAG_ERROR = 0.25
TBT_FLAG_WARNING_MS = 200
TBT_FLAG_ERROR_MS = 600

# Load time thresholds (milliseconds)
LOAD_TIME_WARNING_MS = 3000
LOAD_TIME_ERROR_MS = 5000

# Text heuristics
GENERIC_LINK_TEXTS = ("klicka här", "läs mer", "here", "click here", "more")
SKIP_LINK_WORDS = ("skip", "hoppa")
TITLE_MIN_LENGTH = 30
TITLE_MAX_LENGTH = 60
META_DESCRIPTION_MIN_LENGTH = 120
META_DESCRIPTION_MAX_LENGTH = 160
MIN_WORD_COUNT = 300
MIN_INTERNAL_LINKS = 3
MAX_URL_LENGTH = 100
MIN_FONT_SIZE_PX = 12

# Overview
SEVERITY_PRIORITY = {
    Severity.ERROR: 10,
    Severity.WARNING: 5,
    Severity.INFO: 2,
}

# Ordered: the first keyword found in a message decides the boost
PRIORITY_KEYWORD_BOOSTS = (
    ("https", 20),
    ("viewport", 18),
    ("title", 17),
    ("h1", 16),
    ("meta description", 15),
    ("alt", 14),
    ("label", 14),
    ("lang", 13),
    ("sitemap", 12),
    ("robots", 11),
    ("navigation", 10),
    ("laddning", 15),
    ("load", 15),
    ("prestanda", 14),
    ("performance", 14),
    ("mobil", 13),
    ("mobile", 13),
)

MAX_PRIORITY_ISSUES = 6
MAX_QUICK_WINS = 7

SUMMARY_EXCELLENT = 85
SUMMARY_GOOD = 70
SUMMARY_OK = 50
SUMMARY_WEAKEST_FOCUS = 75
SUMMARY_OK_CRITICAL = 3
SUMMARY_POOR_CRITICAL = 5

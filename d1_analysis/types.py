"""
D1 Analysis Types

Enums shared by the analyzers, the blender and the overview.
"""

from enum import Enum


class Severity(str, Enum):
    """Severity of a detected issue"""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Category(str, Enum):
    """Quality dimension scored by one analyzer

    Declaration order is the fixed area order used for tie breaking.
    """

    ACCESSIBILITY = "accessibility"
    SEO = "seo"
    DESIGN = "design"


class Locale(str, Enum):
    """Languages the message catalog is written in"""

    SV = "sv"
    EN = "en"

    @classmethod
    def parse(cls, value) -> "Locale":
        """Anything that is not English falls back to Swedish"""
        if isinstance(value, Locale):
            return value
        if isinstance(value, str) and value.strip().lower() == cls.EN.value:
            return cls.EN
        return cls.SV


class AnalysisMode(str, Enum):
    """Whether PageSpeed data is blended into the local scores"""

    DEEP = "deep"
    BASIC = "basic"

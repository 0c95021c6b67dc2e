"""
Message catalog

Every user facing string (issue messages, recommendations, strengths,
summaries, category labels and quick win actions) lives in one YAML file per
locale under ``locales/``. Templates are addressed by dotted ids such as
``seo.missing_title.message`` and filled with ``str.format``.
"""
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from core.logging import get_logger

from .exceptions import MessageNotFoundError
from .types import Locale

logger = get_logger(__name__, domain="d1")

LOCALES_DIR = Path(__file__).parent / "locales"


class MessageCatalog:
    """Localized message templates loaded from YAML"""

    def __init__(self, locales_dir: Optional[Path] = None):
        self.locales_dir = Path(locales_dir) if locales_dir else LOCALES_DIR
        self._templates: Dict[Locale, Dict[str, Any]] = {}

    def _load(self, locale: Locale) -> Dict[str, Any]:
        if locale not in self._templates:
            path = self.locales_dir / f"{locale.value}.yaml"
            with open(path, "r", encoding="utf-8") as f:
                self._templates[locale] = yaml.safe_load(f) or {}
            logger.debug(f"Loaded message catalog {path.name}")
        return self._templates[locale]

    def template(self, template_id: str, locale: Locale) -> str:
        node: Any = self._load(locale)
        for part in template_id.split("."):
            if not isinstance(node, dict) or part not in node:
                raise MessageNotFoundError(template_id, locale.value)
            node = node[part]
        if not isinstance(node, str):
            raise MessageNotFoundError(template_id, locale.value)
        return node

    def get(self, template_id: str, locale: Locale, params: Optional[Mapping[str, Any]] = None) -> str:
        """Render the template for ``template_id`` in ``locale``"""
        text = self.template(template_id, Locale.parse(locale))
        if params:
            return text.format(**params)
        return text


@lru_cache()
def default_catalog() -> MessageCatalog:
    return MessageCatalog()

"""
Google PageSpeed Insights API v5 client implementation
"""
from typing import Any, Dict, List, Optional

from ..base import BaseAPIClient

DEFAULT_CATEGORIES = ["performance", "accessibility", "seo", "best-practices"]


class PageSpeedClient(BaseAPIClient):
    """Google PageSpeed Insights API v5 client"""

    def __init__(self, api_key: Optional[str] = None, **kwargs):
        super().__init__(provider="pagespeed", api_key=api_key, **kwargs)

    def _get_base_url(self) -> str:
        """Get PageSpeed API base URL"""
        return self.settings.pagespeed_base_url

    def _get_headers(self) -> Dict[str, str]:
        """Get PageSpeed API headers"""
        return {"Accept": "application/json"}

    async def analyze_url(
        self,
        url: str,
        strategy: str = "mobile",
        categories: Optional[List[str]] = None,
        locale: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Analyze a URL with PageSpeed Insights

        Args:
            url: URL to analyze (required)
            strategy: Analysis strategy - 'mobile' or 'desktop'
            categories: Lighthouse categories to run, defaults to performance,
                accessibility, seo and best-practices
            locale: Locale for audit titles (e.g. 'en')

        Returns:
            Dict containing the raw PageSpeed analysis results
        """
        if strategy not in ("mobile", "desktop"):
            raise ValueError(f"Unsupported strategy: {strategy}")

        # PSI expects one category parameter per category
        params: List[tuple] = [("url", url), ("strategy", strategy)]
        for category in categories or DEFAULT_CATEGORIES:
            params.append(("category", category))

        # The API runs keyless with a lower quota
        if self.api_key:
            params.append(("key", self.api_key))
        if locale:
            params.append(("locale", locale))

        return await self.make_request("GET", "/pagespeedonline/v5/runPagespeed", params=params)


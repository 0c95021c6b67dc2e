"""
Base API client with common functionality for all external API providers
"""

import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from core.config import get_settings
from core.exceptions import ExternalAPIError
from core.logging import get_logger


class BaseAPIClient(ABC):
    """Abstract base class for all external API clients"""

    def __init__(
        self,
        provider: str,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.provider = provider
        self.settings = get_settings()
        self.logger = get_logger(f"gateway.{provider}", domain="d0")

        self.api_key = api_key or self.settings.get_api_key(provider)
        self.base_url = base_url or self._get_base_url()
        self.timeout = timeout or self.settings.request_timeout_for(provider)

        # HTTP client with proper timeouts
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout), headers=self._get_headers()
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it"""
        if self._owns_client:
            await self.client.aclose()

    @abstractmethod
    def _get_base_url(self) -> str:
        """Get the base URL for this provider"""

    @abstractmethod
    def _get_headers(self) -> dict[str, str]:
        """Get authentication headers for this provider"""

    async def make_request(self, method: str, endpoint: str, **kwargs) -> dict[str, Any]:
        """
        Make an API request and decode the JSON body

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            **kwargs: Additional arguments passed to httpx

        Returns:
            Dict containing the API response

        Raises:
            ExternalAPIError: When the API returns an error or cannot be reached
        """
        operation = f"{method}:{endpoint}"
        url = f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"
        start_time = time.time()
        response = None

        try:
            response = await self.client.request(method, url, timeout=self.timeout, **kwargs)

            if response.status_code >= 400:
                error_msg = f"HTTP {response.status_code}"
                try:
                    error_data = response.json()
                    error_msg = error_data.get("error", {}).get("message", error_msg)
                except Exception:
                    error_msg = response.text or error_msg

                raise ExternalAPIError(
                    provider=self.provider,
                    message=error_msg,
                    status_code=response.status_code,
                    response_body=response.text,
                )

            return response.json()

        except ExternalAPIError:
            raise
        except httpx.TimeoutException as e:
            raise ExternalAPIError(
                provider=self.provider, message=f"Request timed out after {self.timeout}s", status_code=504
            ) from e
        except Exception as e:
            raise ExternalAPIError(provider=self.provider, message=str(e), status_code=500) from e

        finally:
            duration_ms = int((time.time() - start_time) * 1000)
            status_code = response.status_code if response is not None else 0
            self.logger.debug(
                f"{operation} finished",
                extra={"status_code": status_code, "duration_ms": duration_ms},
            )

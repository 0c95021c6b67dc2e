"""
Configuration management using Pydantic Settings
Handles environment variables and validation
"""
from functools import lru_cache
from typing import Optional

from pydantic import ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings

from core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Environment
    environment: str = Field(default="development")
    debug: bool = Field(default=False)

    # Application
    app_name: str = "SitePulse"
    app_version: str = "0.1.0"

    # External APIs
    google_api_key: Optional[SecretStr] = Field(default=None, description="PageSpeed Insights API key")
    enable_pagespeed: bool = Field(default=True, description="Enable PageSpeed Insights enrichment")
    pagespeed_base_url: str = Field(default="https://www.googleapis.com")

    # Analysis
    default_analysis_mode: str = Field(default="deep", description="deep blends PageSpeed data, basic is local only")
    default_locale: str = Field(default="sv")

    # Timeouts (seconds)
    document_timeout: float = Field(default=30.0)
    probe_timeout: float = Field(default=5.0)
    audit_timeout: float = Field(default=120.0)
    max_redirects: int = Field(default=5)
    user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        )
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")  # json or text

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        allowed = ["development", "test", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("default_analysis_mode")
    @classmethod
    def validate_analysis_mode(cls, v):
        allowed = ["deep", "basic"]
        if v.lower() not in allowed:
            raise ValueError(f"Analysis mode must be one of: {allowed}")
        return v.lower()

    @field_validator("default_locale")
    @classmethod
    def validate_locale(cls, v):
        allowed = ["sv", "en"]
        if v.lower() not in allowed:
            raise ValueError(f"Locale must be one of: {allowed}")
        return v.lower()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def request_timeout_for(self, service: str) -> float:
        """Get the request timeout in seconds for an outbound service"""
        timeouts = {
            "pagespeed": self.audit_timeout,
        }
        return timeouts.get(service, self.document_timeout)

    def get_api_key(self, service: str) -> Optional[str]:
        """Get API key for a service, None when the service runs keyless"""
        keys = {
            "pagespeed": self.google_api_key.get_secret_value() if self.google_api_key else None,
        }
        if service not in keys:
            raise ConfigurationError(f"No API key setting for service: {service}", setting=service)
        return keys[service]

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    def model_dump(self, **kwargs):
        """Override to mask sensitive fields when serializing"""
        data = super().model_dump(**kwargs)

        for field in ["google_api_key"]:
            if field in data and data[field]:
                if hasattr(data[field], "get_secret_value"):
                    value = data[field].get_secret_value()
                else:
                    value = str(data[field])

                # Keep first 4 chars for identification
                if len(value) > 4:
                    data[field] = value[:4] + "*" * (len(value) - 4)
                else:
                    data[field] = "*" * len(value)

        return data


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Global settings instance
settings = get_settings()

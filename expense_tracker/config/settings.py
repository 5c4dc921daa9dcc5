"""
Configuration Management for Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here. The two backend connection values
(SUPABASE_URL, SUPABASE_ANON_KEY) are required for a working app, but their
absence must NOT stop startup: it is reported and calls fail downstream.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SupabaseSettings(BaseSettings):
    """Supabase (database + auth) connection configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SUPABASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    url: str = Field(
        default="",
        description="Supabase project URL"
    )
    anon_key: str = Field(
        default="",
        description="Supabase public (anon) API key"
    )

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.anon_key)

    @property
    def missing_values(self) -> list[str]:
        missing = []
        if not self.url:
            missing.append("SUPABASE_URL")
        if not self.anon_key:
            missing.append("SUPABASE_ANON_KEY")
        return missing


class MindeeSettings(BaseSettings):
    """Mindee document extraction configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MINDEE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_key: str = Field(
        ...,
        description="Mindee API key"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )

    # Backend
    invoices_table: str = Field(
        default="invoices",
        description="Name of the invoices table"
    )
    placeholder_image_url: str = Field(
        default="https://picsum.photos/seed/invoice/200/300",
        description="Image reference stored with every saved invoice"
    )

    # Extraction
    extractor_backend: str = Field(
        default="mock",
        pattern="^(mock|mindee)$",
        description="Which document extractor to use"
    )
    extraction_delay_seconds: float = Field(
        default=2.0,
        ge=0.0,
        description="Simulated latency of the mock extractor"
    )
    min_extraction_confidence: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Below this, a real extraction is rejected as low confidence"
    )

    # UI
    toast_duration_seconds: float = Field(
        default=5.0,
        gt=0.0,
        description="How long a notification stays visible"
    )
    max_upload_size_mb: int = Field(
        default=5,
        ge=1,
        description="Upload size shown in the UI copy (not enforced)"
    )
    supported_image_formats: str = Field(
        default="png,jpg,jpeg,webp,gif",
        description="Comma-separated list of accepted image extensions"
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def supported_formats_list(self) -> list[str]:
        """Get supported formats as a list."""
        return [fmt.strip().lower() for fmt in self.supported_image_formats.split(",") if fmt.strip()]


class Settings(BaseSettings):
    """
    Root settings container.

    Sub-settings are loaded lazily so a missing optional service
    (e.g. Mindee) only fails when it is actually used.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def supabase(self) -> SupabaseSettings:
        return SupabaseSettings()

    @property
    def mindee(self) -> MindeeSettings:
        return MindeeSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings(settings: Optional[Settings] = None) -> dict[str, object]:
    """
    Check which services are configured.

    Returns a dict of {service_name: is_valid} plus "<service>_error"
    entries with the reason for anything that is not.
    """
    results: dict[str, object] = {}
    settings = settings or get_settings()

    supabase = settings.supabase
    results["supabase"] = supabase.is_configured
    if not supabase.is_configured:
        results["supabase_error"] = f"Missing {', '.join(supabase.missing_values)}"

    try:
        _ = settings.mindee
        results["mindee"] = True
    except Exception as e:
        results["mindee"] = False
        results["mindee_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results

"""Application configuration using Pydantic Settings with YAML support.

This module provides centralized configuration management with:
- YAML-based configuration files organized by domain
- Environment-specific overrides (local, test, development, production)
- Environment variable loading for provider credentials
- Type validation and coercion
- Caching for performance
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from typing import TYPE_CHECKING

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


class Provider(StrEnum):
    """Generative model backends able to perform recipe extraction."""

    GEMINI = "gemini"
    OPENAI = "openai"


# =============================================================================
# Nested Configuration Models (from YAML)
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "Recipe Extraction Service"
    version: str = "0.1.0"
    debug: bool = False


class ServerSettings(BaseModel):
    """Server configuration settings."""

    host: str = "127.0.0.1"
    port: int = 8000


class ApiSettings(BaseModel):
    """API configuration settings."""

    v1_prefix: str = "/api/v1/recipe-extraction"
    cors_origins: list[str] = []


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"


class MetricsSettings(BaseModel):
    """Metrics configuration settings."""

    enabled: bool = True


class TelemetrySettings(BaseModel):
    """Extraction outcome telemetry settings."""

    enabled: bool = True


class ObservabilitySettings(BaseModel):
    """Observability configuration settings."""

    metrics: MetricsSettings = MetricsSettings()
    telemetry: TelemetrySettings = TelemetrySettings()


class GeminiSettings(BaseModel):
    """Google Gemini generateContent configuration."""

    url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-2.5-flash"
    timeout: float = 60.0
    temperature: float = 0.1
    max_output_tokens: int = 8192
    requests_per_minute: float = 60.0


class OpenAISettings(BaseModel):
    """OpenAI chat completions configuration."""

    url: str = "https://api.openai.com/v1"
    model: str = "gpt-4o"
    timeout: float = 60.0
    temperature: float = 0.1
    max_tokens: int | None = None
    requests_per_minute: float = 60.0


class LLMSettings(BaseModel):
    """Model provider configuration."""

    default_provider: Provider = Provider.GEMINI
    gemini: GeminiSettings = GeminiSettings()
    openai: OpenAISettings = OpenAISettings()


class AcquisitionSettings(BaseModel):
    """Content acquisition ladder configuration.

    Every network call in the ladder runs under its own timeout.
    """

    user_agent: str = "Mozilla/5.0 (compatible; SnapRecipes/1.0)"
    rotating_user_agents: list[str] = [
        (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
        ),
        (
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_4) AppleWebKit/605.1.15 "
            "(KHTML, like Gecko) Version/17.4 Safari/605.1.15"
        ),
        (
            "Mozilla/5.0 (iPhone; CPU iPhone OS 17_4 like Mac OS X) "
            "AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.4 "
            "Mobile/15E148 Safari/604.1"
        ),
    ]
    platform_api_url: str = "https://www.tikwm.com/api/"
    reader_url: str = "https://r.jina.ai/"
    search_url: str = "https://html.duckduckgo.com/html/"
    platform_timeout: float = 10.0
    preview_timeout: float = 5.0
    reader_timeout: float = 25.0
    direct_fetch_timeout: float = 15.0
    search_timeout: float = 10.0
    min_content_chars: int = 250
    max_page_chars: int = 15000
    search_min_chars: int = 500
    bot_challenge_markers: list[str] = [
        "just a moment",
        "challenge-platform",
        "verification successful",
        "attention required",
        "enable javascript and cookies",
    ]


class ExtractionSettings(BaseModel):
    """Orchestration and windowing configuration."""

    max_window_chars: int = 40000
    lead_in_chars: int = 2000
    server_side_acquisition_enabled: bool = True


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Application settings with YAML + environment variable support.

    Configuration is loaded from multiple sources with the following priority
    (highest to lowest):
    1. Environment variables
    2. .env file (credentials only)
    3. Environment-specific YAML files (config/environments/{APP_ENV}/)
    4. Base YAML files (config/base/)
    5. Default values in code

    Environment variables can override any setting using the nested delimiter '__'.
    For example: LLM__DEFAULT_PROVIDER=openai overrides llm.default_provider.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    APP_ENV: str = "development"

    app: AppSettings = AppSettings()
    server: ServerSettings = ServerSettings()
    api: ApiSettings = ApiSettings()
    logging: LoggingSettings = LoggingSettings()
    observability: ObservabilitySettings = ObservabilitySettings()
    llm: LLMSettings = LLMSettings()
    acquisition: AcquisitionSettings = AcquisitionSettings()
    extraction: ExtractionSettings = ExtractionSettings()

    # Credentials (from .env only - never in YAML)
    GEMINI_API_KEY: str = ""
    OPENAI_API_KEY: str = ""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Place the YAML files below env vars and .env in priority."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.APP_ENV == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.APP_ENV == "test"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Using lru_cache ensures settings are only loaded once.
    """
    return Settings()

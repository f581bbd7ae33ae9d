"""
Configuration management system using Pydantic Settings.
Supports environment-based configuration for different deployment environments.
"""

import os
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Optional, Dict, Any, List, Sequence, Tuple
from enum import Enum


class Environment(str, Enum):
    """Supported deployment environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Supported log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class QuoteSettings(BaseSettings):
    """Daily selection, search and quota configuration"""

    pivot_language: str = Field(default="en", description="Language whose quotes carry full translations")
    secondary_language: str = Field(default="de", description="Second generation language for pivot-language requests")
    supported_languages: List[str] = Field(default_factory=lambda: ["en", "de"])
    repeat_window_days: int = Field(default=30, ge=0, le=3650)
    dedup_prefix_length: int = Field(default=50, ge=1, le=500)
    ai_searches_per_day: int = Field(default=10, ge=0, le=1000)
    page_size: int = Field(default=3, ge=1, le=50)
    search_cache_ttl_seconds: int = Field(default=600, ge=10, le=86400)
    history_limit_free: int = Field(default=3, ge=1, le=100)
    history_limit_premium: int = Field(default=7, ge=1, le=365)
    seed_on_startup: bool = Field(default=True)

    @field_validator('supported_languages', mode='before')
    @classmethod
    def parse_languages(cls, v):
        """Parse supported languages from a comma-separated environment variable"""
        if isinstance(v, str):
            return [lang.strip().lower() for lang in v.split(",") if lang.strip()]
        return v

    model_config = {"env_prefix": "QUOTES_", "env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


class GenerationSettings(BaseSettings):
    """External text-generation provider configuration"""

    api_url: str = Field(default="https://openrouter.ai/api/v1/chat/completions")
    api_key: Optional[str] = Field(default=None)
    model: str = Field(default="anthropic/claude-3-haiku")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4000, ge=100, le=32000)
    timeout_seconds: float = Field(default=30.0, ge=1.0, le=300.0)
    quotes_per_search: int = Field(default=3, ge=1, le=10)
    min_text_length: int = Field(default=10, ge=1, le=200)
    referer: str = Field(default="https://heutedu.app")
    app_title: str = Field(default="Heute Du App")

    model_config = {
        "env_prefix": "GENERATION_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class RedisSettings(BaseSettings):
    """Redis cache configuration"""

    enabled: bool = Field(default=True)
    host: str = Field(default="redis")  # Default to docker service name
    port: int = Field(default=6379, ge=1, le=65535)
    password: Optional[str] = Field(default=None)
    db: int = Field(default=0, ge=0, le=15)
    socket_timeout: int = Field(default=5, ge=1, le=30)

    @property
    def url(self) -> str:
        """Generate Redis URL from configuration"""
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"

    model_config = {"env_prefix": "REDIS_", "env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


class SecuritySettings(BaseSettings):
    """Session and CORS configuration"""

    session_ttl_hours: int = Field(default=24, ge=1, le=24 * 90)
    bcrypt_rounds: int = Field(default=12, ge=4, le=16)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(
        default_factory=lambda: ["GET", "POST", "DELETE"]
    )
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from environment variable or list"""
        if isinstance(v, str):
            origin_list = v.split(",")
            return [origin.strip() for origin in origin_list if origin.strip()]
        return v or ["*"]

    model_config = {"env_prefix": "SECURITY_", "env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


class Settings(BaseSettings):
    """Main application settings"""

    # Application Configuration
    app_name: str = Field(default="Quote of the Day Backend")
    app_version: str = Field(default="1.0.0")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)

    # Server Configuration
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)
    reload: bool = Field(default=False)
    workers: int = Field(default=1, ge=1, le=16)

    # Logging Configuration
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: str = Field(default="json", description="json or text")

    # Storage Configuration
    database_url: str = Field(default="sqlite:///./quoteday.db")
    database_echo: bool = Field(default=False)

    # Nested Settings
    quotes: QuoteSettings = Field(default_factory=QuoteSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment setting"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def get_cors_config(self) -> Dict[str, Any]:
        """Get CORS configuration for FastAPI"""
        return {
            "allow_origins": self.security.cors_origins,
            "allow_credentials": self.security.cors_allow_credentials,
            "allow_methods": self.security.cors_allow_methods,
            "allow_headers": self.security.cors_allow_headers,
        }

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


NESTED_GROUPS = (
    ("quotes", QuoteSettings),
    ("generation", GenerationSettings),
    ("redis", RedisSettings),
    ("security", SecuritySettings),
)


def default_env_files() -> Tuple[str, ...]:
    """``.env`` then ``.env.<ENVIRONMENT>``; later files win and missing ones are skipped."""
    environment = os.getenv("ENVIRONMENT", Environment.DEVELOPMENT.value).strip().lower()
    return (".env", f".env.{environment}")


def build_settings(env_files: Optional[Sequence[str]] = None, **overrides: Any) -> Settings:
    """
    Build settings whose nested groups read the same env files as the top level.

    Args:
        env_files: dotenv files in increasing priority (default: ``default_env_files()``)
        **overrides: field values that beat both files and process environment
    """
    files = tuple(env_files) if env_files is not None else default_env_files()
    for name, group in NESTED_GROUPS:
        if name not in overrides:
            overrides[name] = group(_env_file=files)
    return Settings(_env_file=files, **overrides)


# Global settings instance
settings = build_settings()


def get_settings() -> Settings:
    """Get application settings instance"""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment and files"""
    global settings
    settings = build_settings()
    return settings

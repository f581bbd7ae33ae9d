"""
Configuration loader utility for environment-specific settings.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .settings import Settings, Environment, build_settings

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Utility class for loading environment-specific configurations"""

    @staticmethod
    def load_environment_config(environment: Optional[str] = None) -> Settings:
        """
        Load configuration for the specified environment.

        Args:
            environment: Target environment (development, staging, production, testing)
                        If None, uses ENVIRONMENT env var or defaults to development

        Returns:
            Settings instance with environment-specific configuration
        """
        if environment is None:
            environment = os.getenv("ENVIRONMENT", "development")

        env = Environment(environment.lower())
        env_file_path = Path(f".env.{env.value}")

        if not env_file_path.exists():
            logger.warning(f"Environment file {env_file_path} not found, using .env and defaults")
        return build_settings((".env", str(env_file_path)), environment=env)

    @staticmethod
    def get_available_environments() -> list[str]:
        """Get list of available environment configurations"""
        env_files = []
        for env_file in Path(".").glob(".env.*"):
            env_name = env_file.name.replace(".env.", "")
            if env_name in {e.value for e in Environment}:
                env_files.append(env_name)
        return sorted(env_files)

    @staticmethod
    def create_sample_env_file(environment: str, output_path: Optional[str] = None) -> str:
        """
        Write a sample .env file for ``environment`` filled with the current defaults.

        Returns:
            Path to the created sample file
        """
        env = Environment(environment.lower())
        if output_path is None:
            output_path = f".env.{env.value}.sample"

        defaults = build_settings((), environment=env)
        development = env == Environment.DEVELOPMENT
        sample_content = f"""# Sample configuration for {env.value} environment
# Copy this file to .env.{env.value} and modify as needed

ENVIRONMENT={env.value}
DEBUG={"true" if development else "false"}
HOST={defaults.host}
PORT={defaults.port}
RELOAD={"true" if development else "false"}
WORKERS={1 if development else 4}
LOG_LEVEL={defaults.log_level.value}
LOG_FORMAT={"text" if development else "json"}
DATABASE_URL={defaults.database_url}

# Daily selection, search and quotas
QUOTES_REPEAT_WINDOW_DAYS={defaults.quotes.repeat_window_days}
QUOTES_AI_SEARCHES_PER_DAY={defaults.quotes.ai_searches_per_day}
QUOTES_PAGE_SIZE={defaults.quotes.page_size}
QUOTES_SEARCH_CACHE_TTL_SECONDS={defaults.quotes.search_cache_ttl_seconds}
QUOTES_SEED_ON_STARTUP={str(defaults.quotes.seed_on_startup).lower()}

# Generation provider
GENERATION_API_KEY=your-api-key-here
GENERATION_MODEL={defaults.generation.model}
GENERATION_TIMEOUT_SECONDS={defaults.generation.timeout_seconds}

# Redis
REDIS_ENABLED={str(defaults.redis.enabled).lower()}
REDIS_HOST={defaults.redis.host}
REDIS_PORT={defaults.redis.port}

# Sessions
SECURITY_SESSION_TTL_HOURS={defaults.security.session_ttl_hours}
SECURITY_BCRYPT_ROUNDS={defaults.security.bcrypt_rounds}
"""

        with open(output_path, "w") as f:
            f.write(sample_content)
        logger.info(f"Wrote sample configuration to {output_path}")
        return output_path


def load_config_for_environment(environment: Optional[str] = None) -> Settings:
    """Convenience function to load configuration for an environment"""
    return ConfigLoader.load_environment_config(environment)

#!/usr/bin/env python3
"""
Centralized Configuration Manager

Provides a single source of truth for all application configuration,
including environment variables, defaults, and validation.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Optional, Dict

from .env_loader import load_env_file

logger = logging.getLogger(__name__)


@dataclass
class DatabaseConfig:
    """Database connection configuration."""
    database_url: Optional[str] = None
    connection_timeout: int = 30
    max_retries: int = 3


@dataclass
class IntegrationConfig:
    """External integration configuration."""
    openai_api_key: Optional[str] = None
    chat_model: str = "gpt-4o-mini"
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = 1536
    llm_timeout_seconds: int = 30


@dataclass
class ApplicationConfig:
    """Core application configuration."""
    # Response cache
    cache_ttl_seconds: int = 86400  # 24 hours
    cache_sweep_interval_seconds: int = 3600  # 1 hour

    # Handler tunables
    vector_search_top_k: int = 2
    keyword_top_n: int = 5
    top_entities_limit: int = 10

    # Ingestion
    max_concurrent_ingest: int = 5
    fetch_timeout: int = 20
    fetch_user_agent: str = "Mozilla/5.0 (compatible; ArticleAssistant/1.0)"
    startup_articles_file: str = "resources/data/startup_articles.txt"

    # Logging
    log_level: str = "INFO"
    verbose_logging: bool = False


@dataclass
class Config:
    """Master configuration container."""
    database: DatabaseConfig
    integrations: IntegrationConfig
    app: ApplicationConfig

    environment: str = field(default_factory=lambda: os.getenv('ENVIRONMENT', 'development'))

    def has_openai(self) -> bool:
        """Check if OpenAI integration is available."""
        return bool(self.integrations.openai_api_key)

    def has_database(self) -> bool:
        """Check if a database URL is configured."""
        return bool(self.database.database_url)


class ConfigManager:
    """Manages application configuration with validation and environment loading."""

    def __init__(self, env_file_path: str = ".env", load_env: bool = True):
        """
        Initialize configuration manager.

        Args:
            env_file_path: Path to .env file relative to project root
            load_env: Whether to read the .env file at all
        """
        self._config: Optional[Config] = None
        if load_env:
            load_env_file(env_file_path)

    def get_config(self, force_reload: bool = False) -> Config:
        """
        Get application configuration.

        Args:
            force_reload: Force reloading configuration from environment

        Returns:
            Complete configuration object
        """
        if self._config is None or force_reload:
            self._config = self._build_config()
        return self._config

    def _build_config(self) -> Config:
        """Build configuration from environment variables."""
        database_config = DatabaseConfig(
            database_url=os.getenv('DATABASE_URL'),
            connection_timeout=int(os.getenv('DB_CONNECTION_TIMEOUT', '30')),
            max_retries=int(os.getenv('DB_MAX_RETRIES', '3'))
        )

        integration_config = IntegrationConfig(
            openai_api_key=os.getenv('OPENAI_API_KEY'),
            chat_model=os.getenv('OPENAI_CHAT_MODEL', 'gpt-4o-mini'),
            embedding_model=os.getenv('OPENAI_EMBEDDING_MODEL', 'text-embedding-3-small'),
            embedding_dimensions=int(os.getenv('EMBEDDING_DIMENSIONS', '1536')),
            llm_timeout_seconds=int(os.getenv('LLM_TIMEOUT', '30'))
        )

        app_config = ApplicationConfig(
            cache_ttl_seconds=int(os.getenv('CHAT_CACHE_TTL', '86400')),
            cache_sweep_interval_seconds=int(os.getenv('CACHE_SWEEP_INTERVAL', '3600')),
            vector_search_top_k=int(os.getenv('VECTOR_SEARCH_TOP_K', '2')),
            keyword_top_n=int(os.getenv('KEYWORD_TOP_N', '5')),
            top_entities_limit=int(os.getenv('TOP_ENTITIES_LIMIT', '10')),
            max_concurrent_ingest=int(os.getenv('MAX_CONCURRENT_INGEST', '5')),
            fetch_timeout=int(os.getenv('FETCH_TIMEOUT', '20')),
            fetch_user_agent=os.getenv('FETCH_USER_AGENT', 'Mozilla/5.0 (compatible; ArticleAssistant/1.0)'),
            startup_articles_file=os.getenv('STARTUP_ARTICLES_FILE', 'resources/data/startup_articles.txt'),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
            verbose_logging=os.getenv('VERBOSE_LOGGING', 'false').lower() == 'true'
        )

        config = Config(
            database=database_config,
            integrations=integration_config,
            app=app_config
        )

        self._validate_config(config)
        return config

    def _validate_config(self, config: Config) -> None:
        """Validate configuration values."""
        errors = []

        url = config.database.database_url
        if url and not url.startswith(('postgres://', 'postgresql://')):
            errors.append("DATABASE_URL must start with postgres:// or postgresql://")

        if config.app.cache_ttl_seconds < 1:
            errors.append("CHAT_CACHE_TTL must be at least 1 second")

        if config.app.cache_sweep_interval_seconds < 1:
            errors.append("CACHE_SWEEP_INTERVAL must be at least 1 second")

        if config.app.vector_search_top_k < 1:
            errors.append("VECTOR_SEARCH_TOP_K must be at least 1")

        if config.app.keyword_top_n < 1:
            errors.append("KEYWORD_TOP_N must be at least 1")

        if config.app.top_entities_limit < 1:
            errors.append("TOP_ENTITIES_LIMIT must be at least 1")

        if config.app.max_concurrent_ingest < 1 or config.app.max_concurrent_ingest > 20:
            errors.append("MAX_CONCURRENT_INGEST must be between 1 and 20")

        if config.app.fetch_timeout < 1:
            errors.append("FETCH_TIMEOUT must be at least 1 second")

        if config.integrations.llm_timeout_seconds < 1:
            errors.append("LLM_TIMEOUT must be at least 1 second")

        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if config.app.log_level not in valid_log_levels:
            errors.append(f"LOG_LEVEL must be one of: {', '.join(valid_log_levels)}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        logger.debug("Configuration validation passed")

    def get_database_connection_string(self) -> str:
        """Get the PostgreSQL connection string, failing loudly when missing."""
        url = self.get_config().database.database_url
        if not url:
            raise ValueError("Required environment variable DATABASE_URL is not set")
        return url

    def update_logging(self) -> None:
        """Configure logging based on current configuration."""
        config = self.get_config()

        numeric_level = getattr(logging, config.app.log_level)
        logging.getLogger().setLevel(numeric_level)

        if config.app.verbose_logging:
            format_str = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
        else:
            format_str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

        for handler in logging.getLogger().handlers:
            handler.setLevel(numeric_level)
            formatter = logging.Formatter(format_str, datefmt='%Y-%m-%d %H:%M:%S')
            handler.setFormatter(formatter)

    def get_integration_status(self) -> Dict[str, bool]:
        """Get status of all integrations."""
        config = self.get_config()
        return {
            'openai': config.has_openai(),
            'database': config.has_database(),
        }


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_config() -> Config:
    """Get application configuration."""
    return get_config_manager().get_config()


def reset_config() -> None:
    """Reset configuration manager (useful for testing)."""
    global _config_manager
    _config_manager = None

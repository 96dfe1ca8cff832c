#!/usr/bin/env python3
"""
Database Facade

Single entry point that owns the connection and exposes the per-table
services plus schema setup and health reporting.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, Optional

import psycopg

from core.exceptions import StoreOperationError
from .connection_manager import ConnectionManager
from .article_service import ArticleService
from .cache_service import ChatCacheService

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent.parent.parent.parent / 'sql' / 'schema.sql'


class DatabaseFacade:
    """Unified database interface over the modular services."""

    def __init__(self, config, connection_manager: Optional[ConnectionManager] = None):
        """
        Initialize database facade with configuration.

        Args:
            config: Master Config object
            connection_manager: Pre-built connection manager (tests inject fakes)
        """
        self.config = config
        self.connection_manager = connection_manager or ConnectionManager(config.database)

        self.articles = ArticleService(self.connection_manager)
        self.chat_cache = ChatCacheService(self.connection_manager)

    def apply_schema(self, schema_path: Optional[Path] = None) -> None:
        """
        Create extensions, tables and indexes if they do not exist.

        Raises:
            FileNotFoundError: If the schema file is missing
            StoreOperationError: If any statement fails
        """
        path = Path(schema_path or SCHEMA_PATH)
        sql = path.read_text(encoding='utf-8')

        try:
            with self.connection_manager.transaction() as cursor:
                cursor.execute(sql)
            logger.info(f"Applied schema from {path}")

        except psycopg.Error as e:
            logger.error(f"Failed to apply schema: {e}")
            raise StoreOperationError('apply_schema', 'all', e) from e

    def health_check(self) -> Dict[str, Any]:
        """Check database connection and return table statistics."""
        health_info = self.connection_manager.health_check()

        if not health_info.get('connected', False):
            health_info['timestamp'] = datetime.now(timezone.utc).isoformat()
            return health_info

        tables_info = {}

        try:
            article_stats = self.articles.get_article_stats()
            tables_info['articles'] = {
                'count': article_stats.get('total_articles', 0),
                'with_embedding': article_stats.get('with_embedding', 0),
                'recent_24h': article_stats.get('articles_24h', 0)
            }
        except StoreOperationError as e:
            logger.warning(f"Could not get article stats: {e}")
            tables_info['articles'] = {'error': str(e)}

        try:
            cache_stats = self.chat_cache.stats()
            tables_info['chat_cache'] = {
                'count': cache_stats.get('total_entries', 0),
                'live': cache_stats.get('live_entries', 0),
                'expired': cache_stats.get('expired_entries', 0)
            }
        except StoreOperationError as e:
            logger.warning(f"Could not get chat cache stats: {e}")
            tables_info['chat_cache'] = {'error': str(e)}

        health_info['tables'] = tables_info
        health_info['timestamp'] = datetime.now(timezone.utc).isoformat()
        return health_info

    def close(self):
        """Close database connection."""
        self.connection_manager.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def create_database(config) -> DatabaseFacade:
    """Build a facade from the master config."""
    return DatabaseFacade(config)

#!/usr/bin/env python3
"""
Database package for the article assistant.

Provides modular database services with proper separation of concerns.
"""

from .connection_manager import ConnectionManager
from .article_service import ArticleService
from .cache_service import ChatCacheService
from .database_facade import DatabaseFacade, create_database
from .store_port import ArticleStorePort

__all__ = [
    'ConnectionManager',
    'ArticleService',
    'ChatCacheService',
    'ArticleStorePort',
    'DatabaseFacade',
    'create_database'
]

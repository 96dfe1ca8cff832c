#!/usr/bin/env python3
"""
Chat Cache Database Service

Persists chat responses in the chat_cache table keyed by request hash.
"""

import logging
from typing import Dict, Any, Optional

import psycopg
from psycopg.types.json import Jsonb

from core.exceptions import StoreOperationError

logger = logging.getLogger(__name__)


class ChatCacheService:
    """Service for chat_cache table operations."""

    def __init__(self, connection_manager):
        self.connection_manager = connection_manager

    def get_live(self, request_hash: str) -> Optional[Dict[str, Any]]:
        """
        Get the cached response payload for a hash if it has not expired.

        Returns:
            Response payload dict, or None on miss or expiry
        """
        try:
            with self.connection_manager.get_cursor() as cursor:
                cursor.execute("""
                    SELECT response_json
                    FROM chat_cache
                    WHERE request_hash = %s AND expires_at > NOW()
                """, (request_hash,))

                row = cursor.fetchone()
                return row['response_json'] if row else None

        except psycopg.Error as e:
            logger.error(f"Failed to read chat cache: {e}")
            raise StoreOperationError('select', 'chat_cache', e) from e

    def put(self, request_hash: str, request_payload: Dict[str, Any],
            response_payload: Dict[str, Any], ttl_seconds: int) -> None:
        """Insert or refresh the row for a hash with a new expiry."""
        try:
            with self.connection_manager.get_cursor() as cursor:
                cursor.execute("""
                    INSERT INTO chat_cache (request_hash, request_json, response_json, created_at, expires_at)
                    VALUES (%s, %s, %s, NOW(), NOW() + make_interval(secs => %s))
                    ON CONFLICT (request_hash) DO UPDATE SET
                        request_json = EXCLUDED.request_json,
                        response_json = EXCLUDED.response_json,
                        created_at = EXCLUDED.created_at,
                        expires_at = EXCLUDED.expires_at
                """, (request_hash, Jsonb(request_payload), Jsonb(response_payload), ttl_seconds))

        except psycopg.Error as e:
            logger.error(f"Failed to write chat cache: {e}")
            raise StoreOperationError('upsert', 'chat_cache', e) from e

    def delete_expired(self) -> int:
        """
        Remove rows whose expiry has passed.

        Returns:
            Number of rows deleted
        """
        try:
            with self.connection_manager.get_cursor() as cursor:
                cursor.execute("DELETE FROM chat_cache WHERE expires_at <= NOW()")
                return cursor.rowcount

        except psycopg.Error as e:
            logger.error(f"Failed to sweep chat cache: {e}")
            raise StoreOperationError('delete', 'chat_cache', e) from e

    def clear(self) -> int:
        try:
            with self.connection_manager.get_cursor() as cursor:
                cursor.execute("DELETE FROM chat_cache")
                return cursor.rowcount

        except psycopg.Error as e:
            logger.error(f"Failed to clear chat cache: {e}")
            raise StoreOperationError('delete', 'chat_cache', e) from e

    def stats(self) -> Dict[str, Any]:
        try:
            with self.connection_manager.get_cursor() as cursor:
                cursor.execute("""
                    SELECT
                        COUNT(*) AS total_entries,
                        COUNT(CASE WHEN expires_at > NOW() THEN 1 END) AS live_entries,
                        COUNT(CASE WHEN expires_at <= NOW() THEN 1 END) AS expired_entries,
                        MIN(created_at) AS oldest_entry,
                        MAX(expires_at) AS latest_expiry
                    FROM chat_cache
                """)
                return dict(cursor.fetchone())

        except psycopg.Error as e:
            logger.error(f"Failed to get chat cache stats: {e}")
            raise StoreOperationError('stats', 'chat_cache', e) from e

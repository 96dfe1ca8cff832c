#!/usr/bin/env python3
"""
Database Connection Manager

Owns the single PostgreSQL connection shared by the article and chat cache
services: connect with retries, reconnect when the connection drops, and
report health including the pgvector extension version.
"""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Optional

import psycopg
from psycopg.rows import dict_row

from core.exceptions import ErrorRecovery, StoreConnectionError

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Autocommit connection returning dict rows, reopened on demand."""

    def __init__(self, config, connect_on_init: bool = True,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Args:
            config: DatabaseConfig instance
            connect_on_init: Open the connection immediately
            sleep: Backoff sleep between connection attempts
        """
        self.config = config
        self.connection: Optional[psycopg.Connection] = None
        self._lock = threading.Lock()
        self._sleep = sleep
        if connect_on_init:
            self._connect()

    def _connect(self) -> None:
        """
        Open a new connection, retrying up to config.max_retries times.

        Raises:
            StoreConnectionError: If DATABASE_URL is missing or every attempt fails
        """
        url = self.config.database_url
        if not url:
            raise StoreConnectionError(ValueError("DATABASE_URL is not set"))

        attempts = max(1, self.config.max_retries)
        for attempt in range(attempts):
            try:
                self.connection = psycopg.connect(
                    url,
                    row_factory=dict_row,
                    autocommit=True,
                    connect_timeout=self.config.connection_timeout
                )
                logger.debug("Database connection established")
                return
            except psycopg.OperationalError as e:
                error = StoreConnectionError(e)
                if attempt == attempts - 1:
                    logger.error(f"Database connection failed after {attempts} attempts: {e}")
                    raise error from e
                delay = ErrorRecovery.get_retry_delay(error, attempt)
                logger.warning(f"Database connection attempt {attempt + 1} failed, retrying in {delay}s: {e}")
                self._sleep(delay)

    def ensure_connection(self) -> None:
        """Reconnect if the connection is closed or no longer answers."""
        with self._lock:
            if self.connection is None or self.connection.closed:
                self._connect()
                return
            try:
                self.connection.execute("SELECT 1")
            except psycopg.Error:
                logger.warning("Connection test failed, reconnecting...")
                self._connect()

    def get_connection(self) -> psycopg.Connection:
        """
        Raises:
            StoreConnectionError: If connection cannot be established
        """
        self.ensure_connection()
        return self.connection

    @contextmanager
    def get_cursor(self):
        """Cursor in autocommit mode: each statement is its own atomic unit."""
        connection = self.get_connection()
        with connection.cursor() as cursor:
            yield cursor

    @contextmanager
    def transaction(self):
        """Cursor whose statements commit or roll back together."""
        connection = self.get_connection()
        with connection.transaction():
            with connection.cursor() as cursor:
                yield cursor

    def health_check(self) -> Dict[str, Any]:
        """Connection status, server version and installed pgvector version."""
        try:
            with self.get_cursor() as cursor:
                cursor.execute("SELECT version() AS version")
                version = cursor.fetchone()['version']

                cursor.execute("SELECT extversion FROM pg_extension WHERE extname = 'vector'")
                vector_row = cursor.fetchone()

        except (psycopg.Error, StoreConnectionError) as e:
            logger.error(f"Database health check failed: {e}")
            return {'connected': False, 'error': str(e)}

        return {
            'connected': True,
            'version': version,
            'pgvector': vector_row['extversion'] if vector_row else None,
            'transaction_status': self.connection.info.transaction_status.name
        }

    def close(self) -> None:
        if self.connection is not None and not self.connection.closed:
            self.connection.close()
            logger.debug("Database connection closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

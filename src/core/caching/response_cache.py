#!/usr/bin/env python3
"""
Response cache in front of the planning/execution pipeline.

Keys are SHA-256 digests of the request's canonical JSON, so field order
never changes the key. Rows live in the chat_cache table with an expiry.
"""

import hashlib
import json
import logging
import threading
from typing import Any, Dict, Optional

from core.models.chat import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)


def canonical_json(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, sort_keys=True, separators=(',', ':'), ensure_ascii=False)


def request_hash(payload: Dict[str, Any]) -> str:
    """Hex SHA-256 of the canonical JSON of a request payload."""
    return hashlib.sha256(canonical_json(payload).encode('utf-8')).hexdigest()


def _payload(request) -> Dict[str, Any]:
    if isinstance(request, ChatRequest):
        return request.to_dict()
    return dict(request)


class ResponseCache:
    """
    Hash-keyed, TTL-expiring cache of chat responses.

    Backed by a store exposing get_live/put/delete_expired/clear/stats
    (ChatCacheService in production).
    """

    def __init__(self, store, ttl_seconds: int = 86400):
        self.store = store
        self.ttl_seconds = ttl_seconds
        self._lock = threading.Lock()
        self._stats = {
            'hits': 0,
            'misses': 0,
            'sets': 0,
            'decode_errors': 0,
            'swept': 0
        }

    def _count(self, name: str, amount: int = 1) -> None:
        with self._lock:
            self._stats[name] += amount

    def get(self, request) -> Optional[ChatResponse]:
        """
        Look up a live response for the request.

        Returns:
            Cached response, or None on miss, expiry or an undecodable row
        """
        key = request_hash(_payload(request))
        data = self.store.get_live(key)

        if data is None:
            self._count('misses')
            logger.debug(f"Cache miss for {key[:8]}")
            return None

        try:
            response = ChatResponse.from_dict(data)
        except ValueError as e:
            self._count('decode_errors')
            self._count('misses')
            logger.warning(f"Discarding undecodable cache row {key[:8]}: {e}")
            return None

        self._count('hits')
        logger.info(f"Cache hit for {key[:8]}")
        return response

    def set(self, request, response: ChatResponse) -> str:
        """
        Store a response for the request, replacing any existing row.

        Returns:
            The request hash used as key
        """
        payload = _payload(request)
        key = request_hash(payload)
        self.store.put(key, payload, response.to_dict(), self.ttl_seconds)
        self._count('sets')
        logger.debug(f"Cached response for {key[:8]} (TTL: {self.ttl_seconds}s)")
        return key

    def sweep(self) -> int:
        """
        Delete rows whose expiry has passed.

        Returns:
            Number of rows removed
        """
        removed = self.store.delete_expired()
        self._count('swept', removed)
        if removed:
            logger.info(f"Swept {removed} expired cache entries")
        return removed

    def clear(self) -> int:
        removed = self.store.clear()
        logger.info(f"Cleared {removed} cache entries")
        return removed

    def get_stats(self) -> Dict[str, Any]:
        """Process-local counters plus table statistics."""
        with self._lock:
            stats = dict(self._stats)
        lookups = stats['hits'] + stats['misses']
        stats['hit_rate'] = stats['hits'] / lookups if lookups else 0.0
        stats['ttl_seconds'] = self.ttl_seconds
        stats['table'] = self.store.stats()
        return stats

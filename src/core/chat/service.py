#!/usr/bin/env python3
"""
Chat entry point.

cache lookup -> plan -> execute -> cache store
"""

import logging
from typing import Optional

from core.exceptions import StoreError
from core.models.chat import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)


class ChatService:
    """Answers chat requests through the response cache, planner and registry."""

    def __init__(self, planner, registry, cache=None):
        """
        Args:
            planner: QueryPlanner
            registry: CommandRegistry
            cache: ResponseCache, or None to run uncached
        """
        self.planner = planner
        self.registry = registry
        self.cache = cache

    def chat(self, request: ChatRequest, use_cache: bool = True) -> ChatResponse:
        """
        Answer one request.

        Raises:
            ValueError: If the query is blank
            PlanningError: If the query cannot be planned
            StoreError, GenerationError: On upstream failures inside a handler
        """
        if not request.query or not request.query.strip():
            raise ValueError("Query must not be empty")

        cache = self.cache if use_cache else None

        cached = self._lookup(cache, request)
        if cached is not None:
            return cached

        plan = self.planner.plan(request.query)
        response = self.registry.execute(plan, request.query)

        self._store(cache, request, response)
        return response

    def ask(self, query: str, use_cache: bool = True) -> ChatResponse:
        return self.chat(ChatRequest(query=query), use_cache=use_cache)

    @staticmethod
    def _lookup(cache, request: ChatRequest) -> Optional[ChatResponse]:
        if cache is None:
            return None
        try:
            return cache.get(request)
        except StoreError as e:
            logger.warning(f"Cache lookup failed, continuing uncached: {e}")
            return None

    @staticmethod
    def _store(cache, request: ChatRequest, response: ChatResponse) -> None:
        if cache is None:
            return
        try:
            cache.set(request, response)
        except StoreError as e:
            logger.warning(f"Cache store failed, response not cached: {e}")

#!/usr/bin/env python3
"""
Dependency Injection Container

Every long-lived service (config, database, LLM client, chat pipeline,
ingestion) is built here on first use, so commands and tests never wire
dependencies by hand.
"""

import logging
import threading
from functools import wraps
from typing import Any, Callable, Dict, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


def singleton(factory_func: Callable[[], T]) -> Callable[[], T]:
    """Mark a factory so the container builds its service only once."""
    @wraps(factory_func)
    def wrapper():
        return factory_func()

    wrapper._is_singleton = True
    return wrapper


class Container:
    """Named service factories plus the instances already built from them."""

    def __init__(self):
        self._factories: Dict[str, Callable[[], Any]] = {}
        self._instances: Dict[str, Any] = {}
        # Re-entrant: factories resolve their own dependencies through get()
        self._lock = threading.RLock()

    def register_singleton(self, service_name: str, factory: Callable[[], T]) -> None:
        """Register a factory whose first product is reused; drops any cached instance."""
        if not getattr(factory, '_is_singleton', False):
            factory = singleton(factory)
        with self._lock:
            self._factories[service_name] = factory
            self._instances.pop(service_name, None)

    def register_factory(self, service_name: str, factory: Callable[[], T]) -> None:
        """Register a factory called on every get()."""
        with self._lock:
            self._factories[service_name] = factory

    def register_instance(self, service_name: str, instance: T) -> None:
        """Use a ready-made instance (tests inject fakes this way)."""
        with self._lock:
            self._instances[service_name] = instance

    def get(self, service_name: str) -> Any:
        """
        Resolve a service by name.

        Raises:
            KeyError: If nothing is registered under the name
        """
        with self._lock:
            if service_name in self._instances:
                return self._instances[service_name]

            factory = self._factories.get(service_name)
            if factory is None:
                raise KeyError(f"Service '{service_name}' not registered")

            instance = factory()
            if getattr(factory, '_is_singleton', False):
                self._instances[service_name] = instance
                logger.debug(f"Created singleton instance for '{service_name}'")
            return instance

    def has(self, service_name: str) -> bool:
        return service_name in self._factories or service_name in self._instances

    def reset_singleton(self, service_name: str) -> None:
        """Forget a built instance; the next get() rebuilds it."""
        with self._lock:
            self._instances.pop(service_name, None)

    def clear(self) -> None:
        with self._lock:
            self._factories.clear()
            self._instances.clear()


_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Global container with the default services registered."""
    global _container
    with _container_lock:
        if _container is None:
            _container = Container()
            _setup_default_services(_container)
        return _container


def reset_container() -> None:
    """Drop the global container (tests start from a fresh one)."""
    global _container
    with _container_lock:
        if _container is not None:
            _container.clear()
        _container = None


def _setup_default_services(container: Container) -> None:
    """Set up default service registrations with configuration injection."""

    @singleton
    def create_config():
        from core.config import get_config
        return get_config()

    @singleton
    def create_database():
        from core.database import create_database
        return create_database(container.get('config'))

    @singleton
    def create_llm_client():
        from integrations.openai_client import create_openai_client
        return create_openai_client(container.get('config'))

    @singleton
    def create_response_cache():
        from core.caching import ResponseCache
        config = container.get('config')
        return ResponseCache(
            container.get('database').chat_cache,
            ttl_seconds=config.app.cache_ttl_seconds
        )

    def create_cache_sweeper():
        from core.caching import CacheSweeper
        config = container.get('config')
        return CacheSweeper(
            container.get('response_cache'),
            interval_seconds=config.app.cache_sweep_interval_seconds
        )

    @singleton
    def create_planner():
        from core.planning import QueryPlanner
        return QueryPlanner(container.get('llm_client'))

    @singleton
    def create_command_registry():
        from core.executor import build_default_registry
        return build_default_registry(
            container.get('database').articles,
            container.get('llm_client'),
            container.get('config').app
        )

    @singleton
    def create_chat_service():
        from core.chat import ChatService
        return ChatService(
            container.get('planner'),
            container.get('command_registry'),
            container.get('response_cache')
        )

    def create_content_fetcher():
        from core.ingestion import ContentFetcher
        config = container.get('config')
        return ContentFetcher(
            timeout=config.app.fetch_timeout,
            user_agent=config.app.fetch_user_agent
        )

    @singleton
    def create_ingest_service():
        from core.ingestion import IngestService
        return IngestService(
            container.get('database').articles,
            container.get('llm_client'),
            container.get('content_fetcher')
        )

    @singleton
    def create_batch_ingestor():
        from core.ingestion import BatchIngestor
        config = container.get('config')
        return BatchIngestor(
            container.get('ingest_service'),
            max_concurrent=config.app.max_concurrent_ingest
        )

    container.register_singleton('config', create_config)
    container.register_singleton('database', create_database)
    container.register_singleton('llm_client', create_llm_client)
    container.register_singleton('response_cache', create_response_cache)
    container.register_singleton('planner', create_planner)
    container.register_singleton('command_registry', create_command_registry)
    container.register_singleton('chat_service', create_chat_service)
    container.register_singleton('ingest_service', create_ingest_service)
    container.register_singleton('batch_ingestor', create_batch_ingestor)

    # Non-singletons
    container.register_factory('cache_sweeper', create_cache_sweeper)
    container.register_factory('content_fetcher', create_content_fetcher)

    logger.debug("Default services registered in container")

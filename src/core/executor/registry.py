#!/usr/bin/env python3
"""
Command registry.

Maps command names from the closed CommandName set to handlers and
dispatches plans to them.
"""

import logging
from typing import Dict, List, Union

from core.models.chat import ChatResponse, CommandName, Plan
from .base import CommandHandler

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Dispatches plans by command name."""

    def __init__(self):
        self._handlers: Dict[str, CommandHandler] = {}

    def register(self, name: Union[str, CommandName], handler: CommandHandler) -> None:
        """
        Bind a handler to a command name.

        Raises:
            ValueError: If the name is not a known command
        """
        command = CommandName.lookup(name.value if isinstance(name, CommandName) else name)
        if command is None:
            raise ValueError(f"Unknown command name: {name}")
        self._handlers[command.value] = handler
        logger.debug(f"Registered handler {handler.__class__.__name__} for '{command.value}'")

    def commands(self) -> List[str]:
        return sorted(self._handlers)

    def execute(self, plan: Plan, query: str) -> ChatResponse:
        """
        Run the handler for the plan's command.

        Unknown commands produce a 'Command not supported' response instead
        of an error. Handler exceptions propagate unchanged.
        """
        handler = self._handlers.get(plan.command)
        if handler is None:
            logger.warning(f"No handler for command '{plan.command}'")
            return ChatResponse.text(plan.command, f"Command not supported: {plan.command}")

        response = handler.handle(plan, query)
        if response.task != plan.command:
            logger.error(f"Handler for '{plan.command}' returned task '{response.task}'; correcting")
            response.task = plan.command
        return response


def build_default_registry(store, generator, settings=None) -> CommandRegistry:
    """
    Wire all handlers.

    Args:
        store: ArticleStorePort implementation
        generator: TextGenerationPort implementation
        settings: ApplicationConfig, or None for defaults
    """
    from .url_commands import (
        CompareArticlesHandler, KeywordsOrTopicsHandler, SentimentHandler, SummaryHandler,
        ToneKeyDifferencesHandler
    )
    from .search_commands import FilterByTopicHandler, MostPositiveArticleHandler, TopEntitiesHandler

    top_k = getattr(settings, 'vector_search_top_k', 2)
    top_n = getattr(settings, 'keyword_top_n', 5)
    entity_limit = getattr(settings, 'top_entities_limit', 10)

    handlers = [
        SummaryHandler(store),
        KeywordsOrTopicsHandler(store, top_n=top_n),
        SentimentHandler(store),
        CompareArticlesHandler(store, generator),
        ToneKeyDifferencesHandler(store, generator),
        MostPositiveArticleHandler(store, generator, top_k=top_k),
        TopEntitiesHandler(store, limit=entity_limit),
        FilterByTopicHandler(store, generator, top_k=top_k),
    ]

    registry = CommandRegistry()
    for handler in handlers:
        registry.register(handler.name, handler)
    return registry

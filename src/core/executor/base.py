#!/usr/bin/env python3
"""
Command handler contract and shared helpers.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Sequence

from core.database.store_port import ArticleStorePort
from core.models.article import Article
from core.models.chat import ChatResponse, CommandName, Plan, ResponseType, Source

logger = logging.getLogger(__name__)


class CommandHandler(ABC):
    """
    One retrieval/synthesis strategy bound to a command name.

    Missing arguments and empty results come back as soft-failure
    responses. Store and generation faults propagate.
    """

    name: CommandName

    def __init__(self, store: ArticleStorePort):
        self.store = store
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def handle(self, plan: Plan, query: str) -> ChatResponse:
        pass

    @property
    def command(self) -> str:
        return self.name.value

    def soft_failure(self, message: str) -> ChatResponse:
        self.logger.info(f"{self.command}: {message}")
        return ChatResponse.text(self.command, message)

    def respond(self, answer: str, articles: Sequence[Article] = (),
                response_type: ResponseType = ResponseType.TEXT) -> ChatResponse:
        return ChatResponse(
            answer=answer,
            task=self.command,
            sources=[Source.from_article(a) for a in articles],
            response_type=response_type
        )

    def resolve_in_order(self, urls: Sequence[str]) -> List[Article]:
        """Look up articles by URL and return them in requested order, skipping misses."""
        by_url = {article.url: article for article in self.store.find_by_urls(urls)}
        resolved = []
        seen = set()
        for url in urls:
            if url in by_url and url not in seen:
                resolved.append(by_url[url])
                seen.add(url)
        return resolved

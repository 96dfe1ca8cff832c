#!/usr/bin/env python3
"""
Article store contract used by the command handlers.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from core.models.article import Article


class ArticleStorePort(ABC):
    """Read side of the article store plus the ingestion upsert."""

    @abstractmethod
    def find_by_urls(self, urls: Sequence[str]) -> List[Article]:
        pass

    @abstractmethod
    def vector_search(self, embedding: List[float], limit: int,
                      urls: Optional[Sequence[str]] = None) -> List[Article]:
        pass

    @abstractmethod
    def top_entities(self, limit: int, urls: Optional[Sequence[str]] = None) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    def upsert(self, article: Article) -> Article:
        pass

    @abstractmethod
    def url_exists(self, url: str) -> bool:
        pass

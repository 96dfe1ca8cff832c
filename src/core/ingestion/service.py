#!/usr/bin/env python3
"""
Single-article ingestion pipeline.

fetch -> summarize -> embed summary -> extract semantics -> upsert
"""

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from core.models.article import Article

logger = logging.getLogger(__name__)

STATUS_INGESTED = "ingested"
STATUS_SKIPPED = "skipped"


@dataclass
class IngestResult:
    url: str
    status: str
    article: Optional[Article] = None

    def to_dict(self):
        return {
            'url': self.url,
            'status': self.status,
            'article': self.article.to_dict() if self.article else None
        }


def validate_url(url: str) -> str:
    """
    Normalize and check an article URL.

    Raises:
        ValueError: If the URL is not http(s) with a host
    """
    url = (url or "").strip()
    parsed = urlparse(url)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise ValueError(f"Invalid article URL: {url!r}")
    return url


class IngestService:
    """Turns a URL into a stored article with embedding and semantic metadata."""

    def __init__(self, store, llm_client, fetcher):
        """
        Args:
            store: ArticleStorePort implementation
            llm_client: OpenAIClient (summarize, embed, extract_semantics)
            fetcher: ContentFetcher
        """
        self.store = store
        self.llm = llm_client
        self.fetcher = fetcher

    def ingest_url(self, url: str, force: bool = False) -> IngestResult:
        """
        Ingest one article.

        Args:
            url: Article URL
            force: Re-ingest even if the URL is already stored

        Raises:
            ValueError: If the URL is invalid
            FetchError, ExtractionError: If the page cannot be read
            GenerationError: If summarization or embedding fails
            StoreError: If the upsert fails
        """
        url = validate_url(url)

        if not force and self.store.url_exists(url):
            logger.info(f"Skipping {url}: already ingested")
            return IngestResult(url=url, status=STATUS_SKIPPED)

        content = self.fetcher.fetch_and_extract(url)
        logger.debug(f"Extracted {len(content.text)} chars from {url} via {content.extraction_method}")

        summary = self.llm.summarize(content.text)
        embedding = self.llm.embed(summary)
        analysis = self.llm.extract_semantics(content.text)

        article = Article(url=url, title=content.title or url, summary=summary, embedding=embedding)
        article.apply_analysis(analysis)

        stored = self.store.upsert(article)
        logger.info(f"Ingested {url} (sentiment: {stored.sentiment.value} {stored.sentiment_score:.2f})")
        return IngestResult(url=url, status=STATUS_INGESTED, article=stored)

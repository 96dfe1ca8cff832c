#!/usr/bin/env python3
"""
Article Database Service

Handles all database operations on the articles table: exact URL lookup,
vector similarity search, JSONB aggregates and the atomic upsert.
"""

import logging
from typing import List, Dict, Any, Optional, Sequence

import psycopg
from psycopg.types.json import Jsonb

from core.exceptions import StoreOperationError
from core.models.article import Article, vector_literal
from .store_port import ArticleStorePort

logger = logging.getLogger(__name__)

ARTICLE_COLUMNS = """
    id::text AS id, url, title, summary, sentiment, sentiment_score::float AS sentiment_score,
    tone, entities, keywords, topics, created_at, updated_at
"""

# JSONB array column -> (label key, numeric key) for aggregation
AGGREGATE_FIELDS = {
    'entities': ('name', 'confidence'),
    'keywords': ('term', 'relevance'),
    'topics': ('name', 'score'),
}


class ArticleService(ArticleStorePort):
    """Service for article-related database operations."""

    def __init__(self, connection_manager):
        """
        Initialize article service.

        Args:
            connection_manager: Database connection manager instance
        """
        self.connection_manager = connection_manager

    def find_by_urls(self, urls: Sequence[str]) -> List[Article]:
        """
        Get all articles whose URL is in the given set.

        Result order is unspecified; callers reorder as needed.

        Args:
            urls: URLs to look up

        Returns:
            Matching articles (possibly fewer than requested)
        """
        unique_urls = list(dict.fromkeys(u for u in urls if u))
        if not unique_urls:
            return []

        try:
            with self.connection_manager.get_cursor() as cursor:
                cursor.execute(f"""
                    SELECT {ARTICLE_COLUMNS}
                    FROM articles
                    WHERE url = ANY(%s)
                """, (unique_urls,))

                return [Article.from_dict(row) for row in cursor.fetchall()]

        except psycopg.Error as e:
            logger.error(f"Failed to find articles by URL: {e}")
            raise StoreOperationError('select', 'articles', e) from e

    def find_by_url(self, url: str) -> Optional[Article]:
        """Get a single article by URL, or None."""
        articles = self.find_by_urls([url])
        return articles[0] if articles else None

    def url_exists(self, url: str) -> bool:
        try:
            with self.connection_manager.get_cursor() as cursor:
                cursor.execute("SELECT 1 AS found FROM articles WHERE url = %s", (url,))
                return cursor.fetchone() is not None

        except psycopg.Error as e:
            logger.error(f"Failed to check article existence: {e}")
            raise StoreOperationError('select', 'articles', e) from e

    def vector_search(self, embedding: List[float], limit: int,
                      urls: Optional[Sequence[str]] = None) -> List[Article]:
        """
        Find the K nearest articles by cosine distance.

        Args:
            embedding: Query embedding
            limit: Maximum number of results
            urls: Optional allow-list restricting the search

        Returns:
            Articles ordered by ascending distance, each with `similarity` set
        """
        literal = vector_literal(embedding)
        where = ["embedding IS NOT NULL"]
        params: List[Any] = [literal]

        if urls:
            where.append("url = ANY(%s)")
            params.append(list(urls))

        params.extend([literal, limit])

        try:
            with self.connection_manager.get_cursor() as cursor:
                cursor.execute(f"""
                    SELECT {ARTICLE_COLUMNS},
                           1 - (embedding <=> %s::vector) AS similarity
                    FROM articles
                    WHERE {' AND '.join(where)}
                    ORDER BY embedding <=> %s::vector
                    LIMIT %s
                """, params)

                return [Article.from_dict(row) for row in cursor.fetchall()]

        except psycopg.Error as e:
            logger.error(f"Vector search failed: {e}")
            raise StoreOperationError('vector_search', 'articles', e) from e

    def aggregate_json_field(self, field: str, limit: int,
                             urls: Optional[Sequence[str]] = None) -> List[Dict[str, Any]]:
        """
        Flatten a JSONB array column and count occurrences per label.

        Args:
            field: One of 'entities', 'keywords', 'topics'
            limit: Maximum number of groups
            urls: Optional URL scope

        Returns:
            Rows of {'name', 'count', 'avg_score'} ordered by count desc,
            then average score desc
        """
        if field not in AGGREGATE_FIELDS:
            raise ValueError(f"Cannot aggregate unknown field: {field}")
        label_key, score_key = AGGREGATE_FIELDS[field]

        where = [f"{field} IS NOT NULL"]
        params: List[Any] = []
        if urls:
            where.append("url = ANY(%s)")
            params.append(list(urls))
        params.append(limit)

        try:
            with self.connection_manager.get_cursor() as cursor:
                cursor.execute(f"""
                    SELECT elem->>'{label_key}' AS name,
                           COUNT(*) AS count,
                           AVG((elem->>'{score_key}')::float) AS avg_score
                    FROM articles, jsonb_array_elements({field}) AS elem
                    WHERE {' AND '.join(where)}
                    GROUP BY elem->>'{label_key}'
                    ORDER BY count DESC, avg_score DESC
                    LIMIT %s
                """, params)

                return [
                    {
                        'name': row['name'],
                        'count': int(row['count']),
                        'avg_score': float(row['avg_score'] or 0.0)
                    }
                    for row in cursor.fetchall()
                ]

        except psycopg.Error as e:
            logger.error(f"Failed to aggregate {field}: {e}")
            raise StoreOperationError('aggregate', 'articles', e) from e

    def top_entities(self, limit: int, urls: Optional[Sequence[str]] = None) -> List[Dict[str, Any]]:
        """Most frequently mentioned entities with their average confidence."""
        return self.aggregate_json_field('entities', limit, urls)

    def upsert(self, article: Article) -> Article:
        """
        Insert or replace an article keyed by URL in one statement.

        Derived fields are overwritten; id and created_at are preserved.

        Args:
            article: Article to store

        Returns:
            The stored article as read back from the database
        """
        embedding = vector_literal(article.embedding) if article.embedding else None

        try:
            with self.connection_manager.get_cursor() as cursor:
                cursor.execute(f"""
                    INSERT INTO articles (url, title, summary, embedding, sentiment, sentiment_score,
                                          tone, entities, keywords, topics, created_at, updated_at)
                    VALUES (%s, %s, %s, %s::vector, %s, %s, %s, %s, %s, %s, NOW(), NOW())
                    ON CONFLICT (url) DO UPDATE SET
                        title = EXCLUDED.title,
                        summary = EXCLUDED.summary,
                        embedding = EXCLUDED.embedding,
                        sentiment = EXCLUDED.sentiment,
                        sentiment_score = EXCLUDED.sentiment_score,
                        tone = EXCLUDED.tone,
                        entities = EXCLUDED.entities,
                        keywords = EXCLUDED.keywords,
                        topics = EXCLUDED.topics,
                        updated_at = NOW()
                    RETURNING {ARTICLE_COLUMNS}
                """, (
                    article.url,
                    article.title,
                    article.summary,
                    embedding,
                    article.sentiment.value,
                    article.sentiment_score,
                    article.tone,
                    Jsonb([e.to_dict() for e in article.entities]),
                    Jsonb([k.to_dict() for k in article.keywords]),
                    Jsonb([t.to_dict() for t in article.topics])
                ))

                stored = Article.from_dict(cursor.fetchone())
                stored.embedding = article.embedding
                logger.debug(f"Upserted article {stored.url} (id={stored.id})")
                return stored

        except psycopg.Error as e:
            logger.error(f"Failed to upsert article {article.url}: {e}")
            raise StoreOperationError('upsert', 'articles', e) from e

    def count_articles(self) -> int:
        try:
            with self.connection_manager.get_cursor() as cursor:
                cursor.execute("SELECT COUNT(*) AS count FROM articles")
                result = cursor.fetchone()
                return result['count'] if result else 0

        except psycopg.Error as e:
            logger.error(f"Failed to get articles count: {e}")
            raise StoreOperationError('count', 'articles', e) from e

    def get_article_stats(self) -> Dict[str, Any]:
        """
        Get article statistics.

        Returns:
            Dictionary with totals, embedding coverage and sentiment breakdown
        """
        try:
            with self.connection_manager.get_cursor() as cursor:
                cursor.execute("""
                    SELECT
                        COUNT(*) AS total_articles,
                        COUNT(embedding) AS with_embedding,
                        COUNT(CASE WHEN created_at >= NOW() - INTERVAL '24 hours' THEN 1 END) AS articles_24h,
                        MIN(created_at) AS oldest_article,
                        MAX(updated_at) AS newest_update
                    FROM articles
                """)

                stats = dict(cursor.fetchone())

                cursor.execute("""
                    SELECT sentiment, COUNT(*) AS count
                    FROM articles
                    GROUP BY sentiment
                    ORDER BY count DESC
                """)

                stats['by_sentiment'] = {row['sentiment']: row['count'] for row in cursor.fetchall()}
                return stats

        except psycopg.Error as e:
            logger.error(f"Failed to get article stats: {e}")
            raise StoreOperationError('stats', 'articles', e) from e

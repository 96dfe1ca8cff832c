import sys
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from core.database.store_port import ArticleStorePort  # noqa: E402
from core.exceptions import GenerationError, StoreOperationError  # noqa: E402
from core.llm.port import TextGenerationPort  # noqa: E402
from core.models.article import Article, SemanticEntity, SemanticKeyword, SemanticTopic  # noqa: E402


Reply = Union[str, Exception]


class FakeGenerator(TextGenerationPort):
    """
    Scripted text-generation port.

    Replies are taken from `replies` in order, or from `responder(prompt)`
    when given. An Exception reply is raised instead of returned.
    """

    def __init__(self, replies: Optional[List[Reply]] = None,
                 responder: Optional[Callable[[str], Reply]] = None,
                 embedding: Optional[List[float]] = None) -> None:
        self.replies = list(replies or [])
        self.responder = responder
        self.embedding = embedding or [0.1, 0.2, 0.3]
        self.calls: List[Dict[str, Any]] = []
        self.embed_calls: List[str] = []
        self.embed_error: Optional[Exception] = None

    def generate(self, prompt: str, *, temperature: float = 0.0, max_tokens: Optional[int] = None) -> str:
        self.calls.append({"prompt": prompt, "temperature": temperature, "max_tokens": max_tokens})
        if self.responder is not None:
            reply = self.responder(prompt)
        elif self.replies:
            reply = self.replies.pop(0)
        else:
            raise AssertionError(f"Unexpected generate call: {prompt[:80]!r}")
        if isinstance(reply, Exception):
            raise reply
        return reply

    def embed(self, text: str) -> List[float]:
        self.embed_calls.append(text)
        if self.embed_error is not None:
            raise self.embed_error
        return list(self.embedding)


class FakeArticleStore(ArticleStorePort):
    """
    In-memory article store.

    find_by_urls returns matches in reverse insertion order so callers
    must restore the requested order themselves.
    """

    def __init__(self, articles: Sequence[Article] = ()) -> None:
        self.articles: Dict[str, Article] = {}
        for article in articles:
            self.articles[article.url] = article
        self.search_results: Optional[List[Article]] = None
        self.failing: Dict[str, Exception] = {}
        self.calls: List[Dict[str, Any]] = []

    def _check(self, operation: str, **kwargs) -> None:
        self.calls.append({"operation": operation, **kwargs})
        if operation in self.failing:
            raise self.failing[operation]

    def fail(self, operation: str, error: Optional[Exception] = None) -> None:
        self.failing[operation] = error or StoreOperationError(operation, "articles", RuntimeError("boom"))

    def find_by_urls(self, urls: Sequence[str]) -> List[Article]:
        self._check("find_by_urls", urls=list(urls))
        wanted = set(urls)
        return [a for a in reversed(list(self.articles.values())) if a.url in wanted]

    def vector_search(self, embedding: List[float], limit: int,
                      urls: Optional[Sequence[str]] = None) -> List[Article]:
        self._check("vector_search", embedding=list(embedding), limit=limit, urls=urls)
        pool = self.search_results if self.search_results is not None else list(self.articles.values())
        if urls:
            pool = [a for a in pool if a.url in urls]
        return pool[:limit]

    def top_entities(self, limit: int, urls: Optional[Sequence[str]] = None) -> List[Dict[str, Any]]:
        self._check("top_entities", limit=limit, urls=urls)
        counts: Dict[str, int] = {}
        scores: Dict[str, List[float]] = {}
        for article in self.articles.values():
            if urls and article.url not in urls:
                continue
            for entity in article.entities:
                counts[entity.name] = counts.get(entity.name, 0) + 1
                scores.setdefault(entity.name, []).append(entity.confidence)
        rows = [
            {"name": name, "count": counts[name], "avg_score": sum(scores[name]) / len(scores[name])}
            for name in counts
        ]
        rows.sort(key=lambda r: (-r["count"], -r["avg_score"]))
        return rows[:limit]

    def upsert(self, article: Article) -> Article:
        self._check("upsert", url=article.url)
        existing = self.articles.get(article.url)
        if existing is not None:
            article.id = existing.id
            article.created_at = existing.created_at
        else:
            article.id = article.id or f"id-{len(self.articles) + 1}"
            article.created_at = datetime.now(timezone.utc)
        article.updated_at = datetime.now(timezone.utc)
        self.articles[article.url] = article
        return article

    def url_exists(self, url: str) -> bool:
        self._check("url_exists", url=url)
        return url in self.articles


class FakeCacheStore:
    """chat_cache table in memory with a controllable clock."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.rows: Dict[str, Dict[str, Any]] = {}
        self.failing: Dict[str, Exception] = {}

    def fail(self, operation: str) -> None:
        self.failing[operation] = StoreOperationError(operation, "chat_cache", RuntimeError("db down"))

    def _check(self, operation: str) -> None:
        if operation in self.failing:
            raise self.failing[operation]

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)

    def get_live(self, request_hash: str) -> Optional[Dict[str, Any]]:
        self._check("get_live")
        row = self.rows.get(request_hash)
        if row is None or row["expires_at"] <= self.now:
            return None
        return row["response_json"]

    def put(self, request_hash: str, request_payload: Dict[str, Any],
            response_payload: Dict[str, Any], ttl_seconds: int) -> None:
        self._check("put")
        self.rows[request_hash] = {
            "request_json": request_payload,
            "response_json": response_payload,
            "created_at": self.now,
            "expires_at": self.now + timedelta(seconds=ttl_seconds),
        }

    def delete_expired(self) -> int:
        self._check("delete_expired")
        expired = [key for key, row in self.rows.items() if row["expires_at"] <= self.now]
        for key in expired:
            del self.rows[key]
        return len(expired)

    def clear(self) -> int:
        removed = len(self.rows)
        self.rows.clear()
        return removed

    def stats(self) -> Dict[str, Any]:
        live = sum(1 for row in self.rows.values() if row["expires_at"] > self.now)
        return {"total_entries": len(self.rows), "live_entries": live, "expired_entries": len(self.rows) - live}


class FakeCursor:
    """Records statements and replays scripted rows."""

    def __init__(self, fetchone_results: Optional[List[Any]] = None,
                 fetchall_results: Optional[List[List[Dict[str, Any]]]] = None,
                 rowcount: int = 0, error: Optional[Exception] = None) -> None:
        self.fetchone_results = list(fetchone_results or [])
        self.fetchall_results = list(fetchall_results or [])
        self.rowcount = rowcount
        self.error = error
        self.executed: List[Dict[str, Any]] = []

    def execute(self, sql: str, params: Any = None) -> None:
        self.executed.append({"sql": " ".join(sql.split()), "params": params})
        if self.error is not None:
            raise self.error

    def fetchone(self) -> Any:
        return self.fetchone_results.pop(0) if self.fetchone_results else None

    def fetchall(self) -> List[Dict[str, Any]]:
        return self.fetchall_results.pop(0) if self.fetchall_results else []


class FakeConnectionManager:
    def __init__(self, cursor: FakeCursor) -> None:
        self.cursor = cursor
        self.transactions = 0

    @contextmanager
    def get_cursor(self):
        yield self.cursor

    @contextmanager
    def transaction(self):
        self.transactions += 1
        yield self.cursor


def build_article(url: str, **overrides: Any) -> Article:
    fields: Dict[str, Any] = {
        "title": f"Title for {url.rsplit('/', 1)[-1]}",
        "summary": f"Summary of {url}",
        "id": f"id-{url.rsplit('/', 1)[-1]}",
        "sentiment": "neutral",
        "sentiment_score": 0.5,
    }
    fields.update(overrides)
    return Article(url=url, **fields)


@pytest.fixture
def make_article() -> Callable[..., Article]:
    return build_article


@pytest.fixture
def sample_articles() -> List[Article]:
    return [
        build_article(
            "https://news.example.com/a",
            title="Solar farms expand",
            summary="Solar capacity doubled across the region.",
            sentiment="positive",
            sentiment_score=0.8,
            entities=[SemanticEntity("OpenAI", "organization", 0.9), SemanticEntity("Berlin", "location", 0.7)],
            keywords=[SemanticKeyword("solar", 0.9), SemanticKeyword("energy", 0.8)],
            topics=[SemanticTopic("climate", 0.9)],
        ),
        build_article(
            "https://news.example.com/b",
            title="Grid failures",
            summary="Outages hit three cities after the storm.",
            sentiment="negative",
            sentiment_score=0.2,
            entities=[SemanticEntity("OpenAI", "organization", 0.7)],
            keywords=[SemanticKeyword("energy", 0.7), SemanticKeyword("storm", 0.9)],
            topics=[SemanticTopic("infrastructure", 0.8), SemanticTopic("climate", 0.6)],
        ),
        build_article(
            "https://news.example.com/c",
            title="Markets steady",
            summary="Stocks were flat on Tuesday.",
            sentiment="neutral",
            sentiment_score=0.5,
        ),
    ]


@pytest.fixture
def article_store(sample_articles) -> FakeArticleStore:
    return FakeArticleStore(sample_articles)


@pytest.fixture
def cache_store() -> FakeCacheStore:
    return FakeCacheStore()


@pytest.fixture
def fake_generator_factory():
    def _factory(replies: Optional[List[Reply]] = None,
                 responder: Optional[Callable[[str], Reply]] = None) -> FakeGenerator:
        return FakeGenerator(replies=replies, responder=responder)

    return _factory


@pytest.fixture
def generation_error() -> GenerationError:
    return GenerationError("openai", "gpt-4o-mini", RuntimeError("upstream unavailable"))


@pytest.fixture
def make_store() -> Callable[..., FakeArticleStore]:
    def _factory(articles: Sequence[Article] = ()) -> FakeArticleStore:
        return FakeArticleStore(articles)

    return _factory

#!/usr/bin/env python3
"""
Article data model.

Represents an ingested article with its embedding and the semantic
metadata extracted at ingestion time.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field

from dateutil import parser as date_parser


def _parse_datetime_safe(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError, TypeError):
        return None


def _clamp_unit(value: Any, default: float = 0.0) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return max(0.0, min(1.0, number))


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"

    @classmethod
    def normalize(cls, value: Any) -> 'Sentiment':
        """Map any label to a known sentiment, defaulting to neutral."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or '').strip().lower())
        except ValueError:
            return cls.NEUTRAL


@dataclass
class SemanticEntity:
    name: str
    category: str = ""
    confidence: float = 0.0

    def __post_init__(self):
        self.name = (self.name or "").strip()
        self.confidence = _clamp_unit(self.confidence)

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'category': self.category, 'confidence': self.confidence}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SemanticEntity':
        return cls(
            name=data.get('name', ''),
            category=data.get('category', '') or '',
            confidence=data.get('confidence', 0.0)
        )


@dataclass
class SemanticKeyword:
    term: str
    relevance: float = 0.0
    context: str = ""

    def __post_init__(self):
        self.term = (self.term or "").strip()
        self.relevance = _clamp_unit(self.relevance)

    def to_dict(self) -> Dict[str, Any]:
        return {'term': self.term, 'relevance': self.relevance, 'context': self.context}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SemanticKeyword':
        return cls(
            term=data.get('term', ''),
            relevance=data.get('relevance', 0.0),
            context=data.get('context', '') or ''
        )


@dataclass
class SemanticTopic:
    name: str
    score: float = 0.0
    description: str = ""

    def __post_init__(self):
        self.name = (self.name or "").strip()
        self.score = _clamp_unit(self.score)

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'score': self.score, 'description': self.description}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SemanticTopic':
        return cls(
            name=data.get('name', ''),
            score=data.get('score', 0.0),
            description=data.get('description', '') or ''
        )


def _items(values: Any, item_cls) -> list:
    """Build a list of semantic items, skipping anything that is not a mapping."""
    result = []
    for value in values or []:
        if isinstance(value, item_cls):
            result.append(value)
        elif isinstance(value, dict):
            result.append(item_cls.from_dict(value))
    return result


@dataclass
class SemanticAnalysis:
    """
    Output of semantic extraction for one article.

    Scores are clamped into [0, 1]; an unknown sentiment label becomes neutral.
    """
    entities: List[SemanticEntity] = field(default_factory=list)
    keywords: List[SemanticKeyword] = field(default_factory=list)
    topics: List[SemanticTopic] = field(default_factory=list)
    sentiment: Sentiment = Sentiment.NEUTRAL
    sentiment_score: float = 0.5
    tone: str = ""

    def __post_init__(self):
        self.sentiment = Sentiment.normalize(self.sentiment)
        self.sentiment_score = _clamp_unit(self.sentiment_score, default=0.5)

    @classmethod
    def empty(cls) -> 'SemanticAnalysis':
        """Neutral analysis used when extraction output cannot be parsed."""
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SemanticAnalysis':
        return cls(
            entities=_items(data.get('entities'), SemanticEntity),
            keywords=_items(data.get('keywords'), SemanticKeyword),
            topics=_items(data.get('topics'), SemanticTopic),
            sentiment=data.get('sentiment'),
            sentiment_score=data.get('sentiment_score', 0.5),
            tone=str(data.get('tone') or '')
        )


@dataclass
class Article:
    """
    A single ingested article.

    `url` is the natural key. Upserts replace every derived field but keep
    `id` and `created_at` of the stored row.
    """
    url: str
    title: str = ""
    summary: str = ""
    id: Optional[str] = None
    embedding: Optional[List[float]] = None
    sentiment: Sentiment = Sentiment.NEUTRAL
    sentiment_score: float = 0.5
    tone: str = ""
    entities: List[SemanticEntity] = field(default_factory=list)
    keywords: List[SemanticKeyword] = field(default_factory=list)
    topics: List[SemanticTopic] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Only set on vector search results
    similarity: Optional[float] = None

    def __post_init__(self):
        """Clean and validate data after initialization."""
        self.url = (self.url or "").strip()
        self.title = (self.title or "").strip()
        self.summary = (self.summary or "").strip()
        self.tone = (self.tone or "").strip()
        if self.id is not None:
            self.id = str(self.id)
        self.sentiment = Sentiment.normalize(self.sentiment)
        self.sentiment_score = _clamp_unit(self.sentiment_score, default=0.5)
        self.entities = _items(self.entities, SemanticEntity)
        self.keywords = _items(self.keywords, SemanticKeyword)
        self.topics = _items(self.topics, SemanticTopic)
        if self.embedding is not None:
            self.embedding = [float(v) for v in self.embedding]

    def apply_analysis(self, analysis: SemanticAnalysis) -> None:
        """Copy semantic extraction output onto this article."""
        self.entities = list(analysis.entities)
        self.keywords = list(analysis.keywords)
        self.topics = list(analysis.topics)
        self.sentiment = analysis.sentiment
        self.sentiment_score = analysis.sentiment_score
        self.tone = analysis.tone

    def to_dict(self, include_embedding: bool = False) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = {
            'id': self.id,
            'url': self.url,
            'title': self.title,
            'summary': self.summary,
            'sentiment': self.sentiment.value,
            'sentiment_score': self.sentiment_score,
            'tone': self.tone,
            'entities': [e.to_dict() for e in self.entities],
            'keywords': [k.to_dict() for k in self.keywords],
            'topics': [t.to_dict() for t in self.topics],
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
        if include_embedding:
            data['embedding'] = self.embedding
        if self.similarity is not None:
            data['similarity'] = self.similarity
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Article':
        """Create Article from a dictionary or a database row."""
        embedding = data.get('embedding')
        if isinstance(embedding, str):
            embedding = parse_vector_literal(embedding)

        similarity = data.get('similarity')
        return cls(
            id=data.get('id'),
            url=data.get('url', ''),
            title=data.get('title', '') or '',
            summary=data.get('summary', '') or '',
            embedding=embedding,
            sentiment=data.get('sentiment'),
            sentiment_score=data.get('sentiment_score', 0.5),
            tone=data.get('tone', '') or '',
            entities=data.get('entities') or [],
            keywords=data.get('keywords') or [],
            topics=data.get('topics') or [],
            created_at=_parse_datetime_safe(data.get('created_at')),
            updated_at=_parse_datetime_safe(data.get('updated_at')),
            similarity=float(similarity) if similarity is not None else None
        )

    def __repr__(self):
        return f"Article(url='{self.url}', title='{self.title[:50]}', sentiment='{self.sentiment.value}')"


def vector_literal(values: List[float]) -> str:
    """Render an embedding as a pgvector text literal, e.g. '[0.1,0.2]'."""
    return "[" + ",".join(str(float(v)) for v in values) + "]"


def parse_vector_literal(text: str) -> List[float]:
    body = text.strip().lstrip('[').rstrip(']')
    if not body:
        return []
    return [float(part) for part in body.split(',')]

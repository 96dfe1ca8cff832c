#!/usr/bin/env python3
"""
Chat data models.

Plan is the planner's output, ChatRequest/ChatResponse are the wire
shapes of the chat entry point.
"""

from enum import Enum
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field


class CommandName(str, Enum):
    """Closed set of commands the planner may emit."""
    SUMMARY = "summary"
    KEYWORDS_OR_TOPICS = "keywords_or_topics"
    GET_SENTIMENT = "get_sentiment"
    COMPARE_ARTICLES = "compare_articles"
    TONE_KEY_DIFFERENCES = "tone_key_differences"
    MOST_POSITIVE_ARTICLE_FOR_FILTER = "most_positive_article_for_filter"
    GET_TOP_ENTITIES = "get_top_entities"
    FILTER_BY_SPECIFIC_TOPIC = "filter_by_specific_topic"

    @classmethod
    def lookup(cls, name: str) -> Optional['CommandName']:
        try:
            return cls(name)
        except ValueError:
            return None


class ResponseType(str, Enum):
    TEXT = "text"
    ARTICLE_LIST = "article_list"
    DATA = "data"


@dataclass
class Plan:
    """Structured command produced from a natural-language query."""
    command: str
    args: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {'command': self.command, 'args': dict(self.args)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Plan':
        return cls(command=data.get('command', ''), args=dict(data.get('args') or {}))


@dataclass
class Source:
    id: Optional[str]
    url: str
    title: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'url': self.url, 'title': self.title}

    @classmethod
    def from_article(cls, article) -> 'Source':
        return cls(id=article.id, url=article.url, title=article.title)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Source':
        return cls(id=data.get('id'), url=data.get('url', ''), title=data.get('title', '') or '')


@dataclass
class ChatRequest:
    query: str

    def to_dict(self) -> Dict[str, Any]:
        return {'query': self.query}


@dataclass
class ChatResponse:
    """
    Answer returned by every handler.

    `task` always names the command that produced the response.
    """
    answer: str
    task: str
    sources: List[Source] = field(default_factory=list)
    response_type: ResponseType = ResponseType.TEXT

    def __post_init__(self):
        self.response_type = ResponseType(self.response_type)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'answer': self.answer,
            'sources': [s.to_dict() for s in self.sources],
            'response_type': self.response_type.value,
            'task': self.task
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChatResponse':
        """
        Rebuild a response from its wire form.

        Raises:
            ValueError: If required fields are missing or malformed
        """
        if not isinstance(data, dict):
            raise ValueError("Chat response payload must be an object")
        if not isinstance(data.get('answer'), str) or not isinstance(data.get('task'), str):
            raise ValueError("Chat response payload requires string 'answer' and 'task'")
        return cls(
            answer=data['answer'],
            task=data['task'],
            sources=[Source.from_dict(s) for s in data.get('sources') or [] if isinstance(s, dict)],
            response_type=data.get('response_type', ResponseType.TEXT.value)
        )

    @classmethod
    def text(cls, command: str, answer: str, sources: Optional[List[Source]] = None) -> 'ChatResponse':
        """Plain text response, also used for soft failures."""
        return cls(answer=answer, task=command, sources=sources or [], response_type=ResponseType.TEXT)

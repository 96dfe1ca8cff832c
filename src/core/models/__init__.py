#!/usr/bin/env python3
"""
Core data models for the article assistant.

Contains all data structures used throughout the application.
"""

from .article import (
    Article, SemanticAnalysis, SemanticEntity, SemanticKeyword, SemanticTopic, Sentiment,
    vector_literal
)
from .chat import ChatRequest, ChatResponse, CommandName, Plan, ResponseType, Source

__all__ = [
    'Article', 'SemanticAnalysis', 'SemanticEntity', 'SemanticKeyword', 'SemanticTopic', 'Sentiment',
    'vector_literal',
    'ChatRequest', 'ChatResponse', 'CommandName', 'Plan', 'ResponseType', 'Source'
]

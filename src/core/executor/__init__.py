#!/usr/bin/env python3
"""
Command execution: registry, handlers and candidate validation.
"""

from .base import CommandHandler
from .registry import CommandRegistry, build_default_registry
from .search_commands import FilterByTopicHandler, MostPositiveArticleHandler, TopEntitiesHandler
from .url_commands import (
    CompareArticlesHandler, KeywordsOrTopicsHandler, SentimentHandler, SummaryHandler,
    ToneKeyDifferencesHandler
)
from .validation import CandidateValidator, ValidationOutcome

__all__ = [
    'CommandHandler',
    'CommandRegistry',
    'build_default_registry',
    'SummaryHandler',
    'KeywordsOrTopicsHandler',
    'SentimentHandler',
    'CompareArticlesHandler',
    'ToneKeyDifferencesHandler',
    'MostPositiveArticleHandler',
    'TopEntitiesHandler',
    'FilterByTopicHandler',
    'CandidateValidator',
    'ValidationOutcome'
]

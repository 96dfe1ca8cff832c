#!/usr/bin/env python3
"""
Standardized exception hierarchy for the article assistant.

Soft failures (missing arguments, unknown articles, unsupported commands)
never raise; they come back as ordinary chat responses. Everything here is
for upstream faults that must propagate out of a handler.
"""

from typing import Optional, Dict, Any


class ArticleAssistantError(Exception):
    """Base exception for all article assistant errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            context: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'context': self.context
        }


# Store-related exceptions
class StoreError(ArticleAssistantError):
    """Base exception for article store and cache table errors."""
    pass


class StoreConnectionError(StoreError):
    """Failed to connect to the database."""

    def __init__(self, original_error: Exception):
        message = "Failed to connect to database"
        context = {'original_error': str(original_error)}
        super().__init__(message, context=context)


class StoreOperationError(StoreError):
    """A single store statement failed."""

    def __init__(self, operation: str, table: str, original_error: Exception):
        message = f"Database {operation} failed on table {table}"
        context = {
            'operation': operation,
            'table': table,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


# Text generation exceptions
class GenerationError(ArticleAssistantError):
    """The text-generation backend failed to produce text or an embedding."""

    def __init__(self, provider: str, model: str, original_error: Exception):
        message = f"Generation error from {provider} ({model}): {original_error}"
        context = {
            'provider': provider,
            'model': model,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


class GenerationTimeoutError(GenerationError):
    """Generation call exceeded its deadline."""

    def __init__(self, provider: str, model: str, timeout_seconds: float, original_error: Exception):
        super().__init__(provider, model, original_error)
        self.message = f"{provider} ({model}) timed out after {timeout_seconds}s"
        self.args = (self.message,)
        self.context['timeout_seconds'] = timeout_seconds


class PlanningError(ArticleAssistantError):
    """The planner could not turn a query into a usable plan."""

    def __init__(self, message: str, raw_output: Optional[str] = None, original_error: Optional[Exception] = None):
        context = {}
        if raw_output is not None:
            context['raw_output'] = raw_output[:500]
        if original_error is not None:
            context['original_error'] = str(original_error)
        super().__init__(message, context=context)


# Ingestion exceptions
class IngestionError(ArticleAssistantError):
    """Base exception for ingestion pipeline errors."""

    def __init__(self, url: str, stage: str, original_error: Optional[Exception] = None):
        message = f"Ingestion failed at {stage} for {url}"
        if original_error is not None:
            message += f": {original_error}"
        context = {
            'url': url,
            'stage': stage,
            'original_error': str(original_error) if original_error else None
        }
        super().__init__(message, context=context)


class FetchError(IngestionError):
    """Article page could not be downloaded."""

    def __init__(self, url: str, original_error: Optional[Exception] = None):
        super().__init__(url, 'fetch', original_error)


class ExtractionError(IngestionError):
    """No readable text could be extracted from the page."""

    def __init__(self, url: str, original_error: Optional[Exception] = None):
        super().__init__(url, 'extract', original_error)


# Configuration-related exceptions
class ConfigurationError(ArticleAssistantError):
    """Configuration is invalid or missing."""

    def __init__(self, config_key: str, issue: str):
        message = f"Configuration error for {config_key}: {issue}"
        context = {
            'config_key': config_key,
            'issue': issue
        }
        super().__init__(message, context=context)


# Recovery utilities
class ErrorRecovery:
    """Utilities for error recovery and retry logic."""

    @staticmethod
    def is_retryable_error(error: Exception) -> bool:
        """Check if an error is potentially retryable."""
        retryable_types = [
            StoreConnectionError,
            GenerationTimeoutError,
            FetchError
        ]
        return any(isinstance(error, error_type) for error_type in retryable_types)

    @staticmethod
    def get_retry_delay(error: Exception, attempt: int) -> int:
        """Get recommended retry delay in seconds (exponential, capped at 60s)."""
        return min(2 ** attempt, 60)

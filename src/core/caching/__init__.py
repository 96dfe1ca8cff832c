#!/usr/bin/env python3
"""
Response caching for the chat pipeline.
"""

from .response_cache import ResponseCache, canonical_json, request_hash
from .sweeper import CacheSweeper

__all__ = ['ResponseCache', 'CacheSweeper', 'canonical_json', 'request_hash']

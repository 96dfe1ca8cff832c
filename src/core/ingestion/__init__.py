#!/usr/bin/env python3
"""
Article ingestion: fetch, analyze and store.
"""

from .batch import BatchIngestor, IngestReport, read_url_file
from .fetcher import ContentFetcher, ExtractedContent
from .service import IngestResult, IngestService, validate_url

__all__ = [
    'BatchIngestor', 'IngestReport', 'read_url_file',
    'ContentFetcher', 'ExtractedContent',
    'IngestService', 'IngestResult', 'validate_url'
]

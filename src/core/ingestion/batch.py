#!/usr/bin/env python3
"""
Bulk ingestion with bounded concurrency.

Each URL runs the single-article pipeline on a worker thread; one URL's
failure never aborts the batch.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Union

from core.exceptions import ArticleAssistantError, ErrorRecovery
from .service import STATUS_SKIPPED

logger = logging.getLogger(__name__)


@dataclass
class IngestReport:
    total: int = 0
    succeeded: int = 0
    skipped: int = 0
    failed: int = 0
    errors: Dict[str, str] = field(default_factory=dict)
    # Failed URLs with transient errors
    retryable: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            'total': self.total,
            'succeeded': self.succeeded,
            'skipped': self.skipped,
            'failed': self.failed,
            'errors': dict(self.errors),
            'retryable': list(self.retryable)
        }


def read_url_file(path: Union[str, Path]) -> List[str]:
    """
    Read one URL per line, skipping blanks and '#' comments.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    urls = []
    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#'):
                urls.append(line)
    return urls


class BatchIngestor:
    """Runs IngestService.ingest_url over many URLs."""

    def __init__(self, ingest_service, max_concurrent: int = 5):
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self.ingest_service = ingest_service
        self.max_concurrent = max_concurrent

    def ingest_many(self, urls: Iterable[str], force: bool = False) -> IngestReport:
        """
        Ingest URLs concurrently.

        Returns:
            Aggregated counts with per-URL error messages
        """
        unique_urls = list(dict.fromkeys(u.strip() for u in urls if u and u.strip()))
        report = IngestReport(total=len(unique_urls))
        if not unique_urls:
            return report

        logger.info(f"Ingesting {len(unique_urls)} URLs (max {self.max_concurrent} concurrent)")

        with ThreadPoolExecutor(max_workers=self.max_concurrent, thread_name_prefix="ingest") as executor:
            future_map = {
                executor.submit(self.ingest_service.ingest_url, url, force): url
                for url in unique_urls
            }

            for future in as_completed(future_map):
                url = future_map[future]
                try:
                    result = future.result()
                except (ArticleAssistantError, ValueError) as e:
                    report.failed += 1
                    report.errors[url] = str(e)
                    if ErrorRecovery.is_retryable_error(e):
                        report.retryable.append(url)
                    logger.error(f"Failed to ingest {url}: {e}")
                    continue
                except Exception as e:
                    report.failed += 1
                    report.errors[url] = f"Unexpected error: {e}"
                    logger.error(f"Unexpected error ingesting {url}: {e}", exc_info=True)
                    continue

                if result.status == STATUS_SKIPPED:
                    report.skipped += 1
                else:
                    report.succeeded += 1

        logger.info(
            f"Ingestion complete: {report.succeeded} ingested, {report.skipped} skipped, "
            f"{report.failed} failed of {report.total}"
        )
        return report

    def ingest_file(self, path: Union[str, Path], force: bool = False) -> IngestReport:
        """Ingest every URL listed in a file; a missing file yields an empty report."""
        try:
            urls = read_url_file(path)
        except FileNotFoundError:
            logger.warning(f"URL file not found: {path}")
            return IngestReport()
        return self.ingest_many(urls, force=force)

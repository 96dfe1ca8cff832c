#!/usr/bin/env python3
"""
Ingest command: fetch, analyze and store articles.
"""

from argparse import Namespace
from pathlib import Path

from .base import BaseCommand
from core.env_loader import PROJECT_ROOT


class IngestCommand(BaseCommand):
    """Article ingestion operations."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        return self.dispatch(subcommand, args, "ingest")

    def url(self, args: Namespace) -> int:
        """Ingest a single article URL."""
        result = self.ingest_service.ingest_url(args.url, force=args.force)

        if result.article is None:
            print(f"⏭️  {result.url}: already ingested (use --force to refresh)")
            return 0

        article = result.article
        print(f"✅ Ingested {article.url}")
        print(f"   Title: {article.title}")
        print(f"   Sentiment: {article.sentiment.value} ({article.sentiment_score:.2f})")
        print(f"   Entities: {len(article.entities)}, keywords: {len(article.keywords)}, topics: {len(article.topics)}")
        return 0

    def file(self, args: Namespace) -> int:
        """Ingest every URL in a file, several at a time."""
        path = Path(args.path)
        if not path.exists():
            raise FileNotFoundError(f"URL file not found: {path}")
        return self._report(self.batch_ingestor.ingest_file(path, force=args.force))

    def startup(self, args: Namespace) -> int:
        """Ingest the configured startup article list."""
        path = Path(self.config.app.startup_articles_file)
        if not path.is_absolute():
            path = PROJECT_ROOT / path
        return self._report(self.batch_ingestor.ingest_file(path, force=args.force))

    def _report(self, report) -> int:
        print("📥 Ingestion Report")
        print("=" * 30)
        print(f"  Total: {report.total}")
        print(f"  ✅ Ingested: {report.succeeded}")
        print(f"  ⏭️  Skipped: {report.skipped}")
        print(f"  ❌ Failed: {report.failed}")
        for url, error in report.errors.items():
            print(f"     {url}: {error}")
        if report.retryable:
            print(f"  🔁 Retryable (transient errors): {len(report.retryable)}")
        return 0 if report.failed == 0 else 1

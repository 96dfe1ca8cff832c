#!/usr/bin/env python3
"""
Database command: schema setup and statistics.
"""

from argparse import Namespace

from .base import BaseCommand


class DatabaseCommand(BaseCommand):
    """Database schema and statistics."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        return self.dispatch(subcommand, args, "db")

    def init(self, args: Namespace) -> int:
        """Create extensions, tables and indexes."""
        self.database.apply_schema(args.schema)
        print("✅ Schema applied")
        return 0

    def stats(self, args: Namespace) -> int:
        stats = self.database.articles.get_article_stats()
        if args.json:
            self.print_json(stats)
            return 0

        print("📊 Article Statistics")
        print("=" * 30)
        print(f"  Total articles: {stats.get('total_articles', 0)}")
        print(f"  With embedding: {stats.get('with_embedding', 0)}")
        print(f"  Added in last 24h: {stats.get('articles_24h', 0)}")
        for sentiment, count in stats.get('by_sentiment', {}).items():
            print(f"  {sentiment}: {count}")
        return 0

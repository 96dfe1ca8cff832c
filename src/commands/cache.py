#!/usr/bin/env python3
"""
Cache command: maintain the chat response cache.
"""

from argparse import Namespace

from .base import BaseCommand


class CacheCommand(BaseCommand):
    """Chat response cache maintenance."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        return self.dispatch(subcommand, args, "cache")

    def sweep(self, args: Namespace) -> int:
        """Delete expired cache rows."""
        removed = self.response_cache.sweep()
        print(f"🧹 Removed {removed} expired cache entries")
        return 0

    def stats(self, args: Namespace) -> int:
        stats = self.response_cache.get_stats()
        table = stats.get('table', {})
        print("💾 Chat Cache")
        print("=" * 30)
        print(f"  Entries: {table.get('total_entries', 0)} ({table.get('live_entries', 0)} live, "
              f"{table.get('expired_entries', 0)} expired)")
        print(f"  TTL: {stats['ttl_seconds']}s")
        print(f"  Oldest entry: {table.get('oldest_entry')}")
        return 0

    def clear(self, args: Namespace) -> int:
        """Delete every cache row."""
        if not args.force:
            answer = input("Delete all cached responses? [y/N] ").strip().lower()
            if answer not in ('y', 'yes'):
                print("Aborted")
                return 1
        removed = self.response_cache.clear()
        print(f"🗑️  Removed {removed} cache entries")
        return 0

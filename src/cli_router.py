#!/usr/bin/env python3
"""
CLI Router for the article assistant.

Modular command architecture: each top-level command maps to a command class.
"""

import argparse
import logging
import sys
from typing import Optional, List

from core.env_loader import load_env_file
from commands import get_command, COMMANDS

logger = logging.getLogger(__name__)


class CLIRouter:
    """
    CLI router for article assistant commands.

    Command structure:
    - python run.py chat ask "Summarize https://example.com/a"
    - python run.py ingest file urls.txt
    - python run.py cache sweep
    - python run.py db init
    """

    def __init__(self):
        """Initialize CLI router."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            description="Article assistant: ask questions about ingested news articles",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._get_examples_text()
        )

        subparsers = parser.add_subparsers(
            dest='command',
            help='Available commands',
            metavar='{command}'
        )

        self._add_chat_parser(subparsers)
        self._add_ingest_parser(subparsers)
        self._add_cache_parser(subparsers)
        self._add_db_parser(subparsers)
        self._add_health_parser(subparsers)

        return parser

    def _add_chat_parser(self, subparsers):
        """Add chat command parser."""
        chat_parser = subparsers.add_parser(
            'chat',
            help='Ask questions about the ingested articles'
        )

        chat_subparsers = chat_parser.add_subparsers(
            dest='subcommand',
            help='Chat operations',
            metavar='{ask,repl}'
        )

        ask_parser = chat_subparsers.add_parser('ask', help='Answer a single question')
        ask_parser.add_argument('query', help='Natural-language question')
        ask_parser.add_argument('--json', action='store_true', help='Print the raw response as JSON')
        ask_parser.add_argument('--no-cache', action='store_true', help='Bypass the response cache')

        repl_parser = chat_subparsers.add_parser('repl', help='Interactive question loop')
        repl_parser.add_argument('--no-cache', action='store_true', help='Bypass the response cache')

    def _add_ingest_parser(self, subparsers):
        """Add ingest command parser."""
        ingest_parser = subparsers.add_parser(
            'ingest',
            help='Fetch, analyze and store articles'
        )

        ingest_subparsers = ingest_parser.add_subparsers(
            dest='subcommand',
            help='Ingestion operations',
            metavar='{url,file,startup}'
        )

        url_parser = ingest_subparsers.add_parser('url', help='Ingest a single article')
        url_parser.add_argument('url', help='Article URL')
        url_parser.add_argument('--force', action='store_true', help='Re-ingest even if already stored')

        file_parser = ingest_subparsers.add_parser('file', help='Ingest every URL in a file (one per line)')
        file_parser.add_argument('path', help='Path to URL list')
        file_parser.add_argument('--force', action='store_true', help='Re-ingest even if already stored')

        startup_parser = ingest_subparsers.add_parser('startup', help='Ingest the configured startup article list')
        startup_parser.add_argument('--force', action='store_true', help='Re-ingest even if already stored')

    def _add_cache_parser(self, subparsers):
        """Add cache command parser."""
        cache_parser = subparsers.add_parser(
            'cache',
            help='Chat response cache maintenance'
        )

        cache_subparsers = cache_parser.add_subparsers(
            dest='subcommand',
            help='Cache operations',
            metavar='{sweep,stats,clear}'
        )

        cache_subparsers.add_parser('sweep', help='Delete expired cache entries')
        cache_subparsers.add_parser('stats', help='Show cache statistics')

        clear_parser = cache_subparsers.add_parser('clear', help='Delete all cache entries')
        clear_parser.add_argument('--force', action='store_true', help='Skip confirmation prompt')

    def _add_db_parser(self, subparsers):
        """Add db command parser."""
        db_parser = subparsers.add_parser(
            'db',
            help='Database schema and statistics'
        )

        db_subparsers = db_parser.add_subparsers(
            dest='subcommand',
            help='Database operations',
            metavar='{init,stats}'
        )

        init_parser = db_subparsers.add_parser('init', help='Create extensions, tables and indexes')
        init_parser.add_argument('--schema', default=None, help='Schema file (default: sql/schema.sql)')

        stats_parser = db_subparsers.add_parser('stats', help='Show article statistics')
        stats_parser.add_argument('--json', action='store_true', help='Print statistics as JSON')

    def _add_health_parser(self, subparsers):
        """Add health command parser."""
        health_parser = subparsers.add_parser(
            'health',
            help='System health monitoring and diagnostics'
        )

        health_subparsers = health_parser.add_subparsers(
            dest='subcommand',
            help='Health operations',
            metavar='{check,database,integrations}'
        )

        health_subparsers.add_parser('check', help='Run comprehensive health check')
        health_subparsers.add_parser('database', help='Check database health')

        integrations_parser = health_subparsers.add_parser('integrations', help='Check integration health')
        integrations_parser.add_argument('--test', action='store_true', help='Test actual connections')

    def _get_examples_text(self) -> str:
        """Get examples text for help."""
        return """
Examples:
  # First run
  python run.py db init
  python run.py ingest startup

  # Ask questions
  python run.py chat ask "Summarize https://example.com/story"
  python run.py chat ask "Which article about climate is the most positive?" --json
  python run.py chat repl

  # Maintenance
  python run.py ingest file urls.txt
  python run.py cache sweep
  python run.py health check

"""

    def route_command(self, args: Optional[List[str]] = None) -> int:
        """
        Route command to appropriate handler.

        Args:
            args: Command line arguments (uses sys.argv if None)

        Returns:
            Exit code
        """
        try:
            if args is None:
                args = sys.argv[1:]

            parsed_args = self.parser.parse_args(args)

            if not parsed_args.command:
                self.parser.print_help()
                return 1

            return self._handle_command(parsed_args)

        except SystemExit as e:
            # argparse calls sys.exit() on error or help
            return e.code if e.code is not None else 0
        except Exception as e:
            logger.error(f"CLI routing error: {e}", exc_info=True)
            return 1

    def _handle_command(self, args: argparse.Namespace) -> int:
        """Handle command structure."""
        logger.debug(f"Handling command: {args.command}")

        if args.command not in COMMANDS:
            available = ', '.join(COMMANDS.keys())
            logger.error(f"Unknown command '{args.command}'. Available: {available}")
            return 1

        subcommand = getattr(args, 'subcommand', None)
        if not subcommand:
            logger.error(f"No subcommand specified for '{args.command}'")
            self.parser.parse_args([args.command, '--help'])
            return 1

        try:
            command = get_command(args.command)
            return command.execute(subcommand, args)
        except Exception as e:
            logger.error(f"Error executing {args.command} {subcommand}: {e}", exc_info=True)
            return 1


def main(args: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code
    """
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    load_env_file()

    from core.config import get_config_manager
    try:
        get_config_manager().update_logging()
    except ValueError as e:
        logger.warning(f"Configuration problem, keeping default logging: {e}")

    router = CLIRouter()
    return router.route_command(args)


if __name__ == '__main__':
    exit_code = main()
    sys.exit(exit_code)

#!/usr/bin/env python3
"""
Base command class for the modular command architecture.

Provides common functionality and interface that all commands inherit.
Uses dependency injection for better testability and maintainability.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, List
from argparse import Namespace
from core.container import get_container

logger = logging.getLogger(__name__)


class BaseCommand(ABC):
    """
    Base class for all CLI command endpoints.

    Services are resolved lazily from the dependency injection container,
    so commands that never touch the database never open a connection.
    """

    def __init__(self, container=None):
        """
        Initialize base command with dependency injection container.

        Args:
            container: Optional container instance. If None, uses global container.
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self._container = container or get_container()

    @property
    def config(self):
        """Get configuration from container."""
        return self._container.get('config')

    @property
    def database(self):
        """Get database facade from container."""
        return self._container.get('database')

    @property
    def llm_client(self):
        """Get OpenAI client from container."""
        return self._container.get('llm_client')

    @property
    def chat_service(self):
        return self._container.get('chat_service')

    @property
    def response_cache(self):
        return self._container.get('response_cache')

    @property
    def ingest_service(self):
        return self._container.get('ingest_service')

    @property
    def batch_ingestor(self):
        return self._container.get('batch_ingestor')

    def create_cache_sweeper(self):
        """Create a new (stopped) cache sweeper."""
        return self._container.get('cache_sweeper')

    @abstractmethod
    def execute(self, subcommand: str, args: Namespace) -> int:
        """
        Execute the command with given subcommand and arguments.

        Args:
            subcommand: The specific action to perform
            args: Parsed command line arguments

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        pass

    def get_available_subcommands(self) -> List[str]:
        """
        Get list of available subcommands for this command.

        Returns:
            List of subcommand names
        """
        methods = []
        for attr_name in type(self).__dict__:
            if not attr_name.startswith('_') and callable(getattr(self, attr_name)):
                if attr_name not in ['execute', 'get_available_subcommands', 'handle_error']:
                    methods.append(attr_name)
        return methods

    def dispatch(self, subcommand: str, args: Namespace, context: str) -> int:
        """Call the method named after the subcommand, mapping errors to exit codes."""
        try:
            if subcommand not in self.get_available_subcommands():
                available = ", ".join(self.get_available_subcommands())
                self.logger.error(f"Unknown subcommand '{subcommand}'. Available: {available}")
                return 1
            return getattr(self, subcommand)(args)

        except Exception as e:
            return self.handle_error(e, f"{context} {subcommand}")

    def handle_error(self, error: BaseException, context: str = "") -> int:
        """
        Standard error handling for commands.

        Args:
            error: The exception that occurred
            context: Additional context about where the error occurred

        Returns:
            Appropriate exit code
        """
        error_msg = f"{context}: {error}" if context else str(error)

        if isinstance(error, KeyboardInterrupt):
            self.logger.info("Command interrupted by user")
            return 130

        self.logger.error(error_msg, exc_info=self.logger.isEnabledFor(logging.DEBUG))

        if isinstance(error, FileNotFoundError):
            return 2
        elif isinstance(error, PermissionError):
            return 13
        elif isinstance(error, ValueError):
            return 22
        else:
            return 1

    @staticmethod
    def print_json(data: Any) -> None:
        print(json.dumps(data, indent=2, ensure_ascii=False, default=str))

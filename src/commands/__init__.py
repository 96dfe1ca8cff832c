#!/usr/bin/env python3
"""
Command endpoints for the article assistant.

Each top-level CLI command is handled by a dedicated command class.
"""

from typing import Dict, Type
from .base import BaseCommand
from .chat import ChatCommand
from .ingest import IngestCommand
from .cache import CacheCommand
from .db import DatabaseCommand
from .health import HealthCommand

# Command registry for easy extension
COMMANDS: Dict[str, Type[BaseCommand]] = {
    'chat': ChatCommand,
    'ingest': IngestCommand,
    'cache': CacheCommand,
    'db': DatabaseCommand,
    'health': HealthCommand,
}


def get_command(command_name: str) -> BaseCommand:
    """Get a command instance by name."""
    if command_name not in COMMANDS:
        available = ', '.join(COMMANDS.keys())
        raise ValueError(f"Unknown command '{command_name}'. Available: {available}")

    command_class = COMMANDS[command_name]
    return command_class()


def list_commands() -> Dict[str, str]:
    """Get list of available commands with descriptions."""
    commands = {}
    for name, command_class in COMMANDS.items():
        commands[name] = getattr(command_class, '__doc__', 'No description available')
    return commands

#!/usr/bin/env python3
"""
Environment variable loader with .env file support.

Values already present in the process environment always win.
"""

import os
from pathlib import Path
import logging
from typing import Optional

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent

_loaded_paths = set()


def parse_env_line(line: str) -> Optional[tuple]:
    """
    Parse one KEY=VALUE line.

    Returns:
        (key, value) tuple, or None for blank lines, comments and malformed lines
    """
    line = line.strip()
    if not line or line.startswith('#') or '=' not in line:
        return None

    key, value = line.split('=', 1)
    key = key.strip()
    if key.startswith('export '):
        key = key[len('export '):].strip()
    value = value.strip()

    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        value = value[1:-1]

    return (key, value) if key else None


def load_env_file(env_file_path: str = ".env") -> int:
    """
    Load environment variables from .env file if it exists.

    Args:
        env_file_path: Path to .env file, relative to the project root

    Returns:
        Number of variables set
    """
    env_path = Path(env_file_path)
    if not env_path.is_absolute():
        env_path = PROJECT_ROOT / env_file_path

    if env_path in _loaded_paths:
        return 0

    if not env_path.exists():
        logger.debug(f"No .env file found at {env_path}")
        return 0

    try:
        with open(env_path, 'r', encoding='utf-8') as f:
            lines = f.readlines()
    except OSError as e:
        logger.error(f"Error reading .env file {env_path}: {e}")
        return 0

    loaded_count = 0
    for line_num, line in enumerate(lines, 1):
        parsed = parse_env_line(line)
        if parsed is None:
            if line.strip() and not line.strip().startswith('#'):
                logger.warning(f"Invalid .env format at line {line_num}")
            continue

        key, value = parsed
        if key not in os.environ:
            os.environ[key] = value
            loaded_count += 1
            logger.debug(f"Loaded {key} from .env")
        else:
            logger.debug(f"Skipped {key} (already in environment)")

    _loaded_paths.add(env_path)
    logger.info(f"Loaded {loaded_count} variables from {env_path}")
    return loaded_count

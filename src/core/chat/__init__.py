#!/usr/bin/env python3
"""
Chat entry point.
"""

from .service import ChatService

__all__ = ['ChatService']

#!/usr/bin/env python3
"""
Text-generation port.

Everything that plans, synthesizes or embeds depends on this contract only.
"""

from .port import TextGenerationPort

__all__ = ['TextGenerationPort']

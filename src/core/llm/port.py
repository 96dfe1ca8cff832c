#!/usr/bin/env python3
"""
Text-generation port definition.
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class TextGenerationPort(ABC):
    """
    Given a prompt, return generated text; given text, return an embedding.

    Implementations must be safe to call concurrently and raise
    core.exceptions.GenerationError on any backend failure.
    """

    @abstractmethod
    def generate(self, prompt: str, *, temperature: float = 0.0, max_tokens: Optional[int] = None) -> str:
        """Return the model's completion for a single user prompt."""
        pass

    @abstractmethod
    def embed(self, text: str) -> List[float]:
        """Return the embedding vector for the text."""
        pass

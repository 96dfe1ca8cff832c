#!/usr/bin/env python3
"""
OpenAI integration for the article assistant.

Implements the text-generation port (chat completions and embeddings) and
adds the ingestion helpers built on top of it:
- Summarization of article text
- Semantic extraction (entities, keywords, topics, sentiment, tone)
"""

import os
import logging
from typing import List, Optional

import openai
from openai import OpenAI

from core.exceptions import ConfigurationError, GenerationError, GenerationTimeoutError
from core.json_validator import JSONValidationError, parse_json_object
from core.llm.port import TextGenerationPort
from core.models.article import SemanticAnalysis
from core.prompts import AssistantPrompts

logger = logging.getLogger(__name__)

# ~4 characters per token; keep article text well inside the context window
MAX_INPUT_CHARS = 24000


def truncate_for_model(text: str, max_chars: int = MAX_INPUT_CHARS) -> str:
    """Cut text to the character budget, marking the cut with an ellipsis."""
    if len(text) <= max_chars:
        return text
    logger.debug(f"Truncating input from {len(text)} to {max_chars} chars")
    return text[:max_chars - 3] + "..."


class OpenAIClient(TextGenerationPort):
    """Client for the OpenAI API."""

    PROVIDER = "openai"

    def __init__(self, api_key: Optional[str] = None, chat_model: str = "gpt-4o-mini",
                 embedding_model: str = "text-embedding-3-small", timeout_seconds: float = 30,
                 dimensions: Optional[int] = None, client: Optional[OpenAI] = None):
        """
        Initialize OpenAI client.

        Args:
            api_key: OpenAI API key. If None, tries to get from environment.
            chat_model: Model used for all completions
            embedding_model: Model used for embeddings
            timeout_seconds: Per-request deadline
            dimensions: Embedding size requested from the API, or None for the model default
            client: Pre-built SDK client (tests inject fakes)
        """
        if client is None:
            api_key = api_key or os.getenv('OPENAI_API_KEY')
            if not api_key:
                raise ValueError("OpenAI API key not provided and not found in OPENAI_API_KEY environment variable")
            client = OpenAI(api_key=api_key, timeout=timeout_seconds, max_retries=0)

        self.client = client
        self.model = chat_model
        self.embedding_model = embedding_model
        self.timeout_seconds = timeout_seconds
        self.dimensions = dimensions

    def _wrap_error(self, error: Exception, model: str) -> GenerationError:
        if isinstance(error, openai.APITimeoutError):
            return GenerationTimeoutError(self.PROVIDER, model, self.timeout_seconds, error)
        return GenerationError(self.PROVIDER, model, error)

    def generate(self, prompt: str, *, temperature: float = 0.0, max_tokens: Optional[int] = None) -> str:
        """
        Run one chat completion for a single user prompt.

        Raises:
            GenerationError: On API failure or an empty completion
            GenerationTimeoutError: When the request exceeds the deadline
        """
        preview = prompt if len(prompt) <= 300 else prompt[:300] + "..."
        logger.debug(f"LLM prompt ({len(prompt)} chars): {preview}")

        request = {
            'model': self.model,
            'messages': [{"role": "user", "content": prompt}],
            'temperature': temperature,
        }
        if max_tokens is not None:
            request['max_tokens'] = max_tokens

        try:
            response = self.client.chat.completions.create(**request)
        except openai.OpenAIError as e:
            logger.error(f"OpenAI completion failed: {e}")
            raise self._wrap_error(e, self.model) from e

        if not response.choices:
            raise GenerationError(self.PROVIDER, self.model, ValueError("no choices returned"))

        content = response.choices[0].message.content or ""
        usage = getattr(response, 'usage', None)
        if usage is not None:
            logger.debug(f"OpenAI call tokens: {usage.prompt_tokens} prompt + {usage.completion_tokens} completion")
        return content

    def embed(self, text: str) -> List[float]:
        """
        Embed text with the configured embedding model.

        Raises:
            GenerationError: On API failure or an empty result
        """
        request = {'model': self.embedding_model, 'input': [text]}
        if self.dimensions is not None:
            request['dimensions'] = self.dimensions

        try:
            response = self.client.embeddings.create(**request)
        except openai.OpenAIError as e:
            logger.error(f"OpenAI embedding failed: {e}")
            raise self._wrap_error(e, self.embedding_model) from e

        if not response.data:
            raise GenerationError(self.PROVIDER, self.embedding_model, ValueError("no embedding returned"))
        return list(response.data[0].embedding)

    def summarize(self, text: str) -> str:
        """Concise summary of article text."""
        return self.generate(AssistantPrompts.summarize(truncate_for_model(text)), temperature=0.0).strip()

    def extract_semantics(self, text: str) -> SemanticAnalysis:
        """
        Extract entities, keywords, topics, sentiment and tone.

        Unparseable model output yields an empty neutral analysis;
        API failures still raise.
        """
        raw = self.generate(AssistantPrompts.extract_semantics(truncate_for_model(text)), temperature=0.0)
        try:
            data = parse_json_object(raw)
        except JSONValidationError as e:
            logger.warning(f"Semantic extraction returned unparseable output, using neutral analysis: {e}")
            return SemanticAnalysis.empty()
        return SemanticAnalysis.from_dict(data)

    def test_connection(self) -> bool:
        """Test OpenAI API connection."""
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": "Hello"}],
                max_tokens=5
            )
        except openai.OpenAIError as e:
            logger.error(f"OpenAI API connection test failed: {e}")
            return False

        if response and response.choices:
            logger.info("OpenAI API connection test successful")
            return True

        logger.error("OpenAI API connection test failed: no response")
        return False


def create_openai_client(config) -> OpenAIClient:
    """Build the client from the master config."""
    if not config.has_openai():
        raise ConfigurationError('OPENAI_API_KEY', 'not set')
    return OpenAIClient(
        api_key=config.integrations.openai_api_key,
        chat_model=config.integrations.chat_model,
        embedding_model=config.integrations.embedding_model,
        timeout_seconds=config.integrations.llm_timeout_seconds,
        dimensions=config.integrations.embedding_dimensions
    )

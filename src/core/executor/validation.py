#!/usr/bin/env python3
"""
LLM validation pass for vector-search candidates.

Vector similarity over-recalls, so each candidate gets a YES/NO
classification call. A failed call keeps the candidate (fail-open).
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from core.exceptions import GenerationError
from core.llm.port import TextGenerationPort
from core.models.article import Article
from core.prompts import AssistantPrompts

logger = logging.getLogger(__name__)


@dataclass
class ValidationFailure:
    url: str
    error: str


@dataclass
class ValidationOutcome:
    """Result of folding the validation pass over a candidate list."""
    validated: List[Article] = field(default_factory=list)
    soft_failures: List[ValidationFailure] = field(default_factory=list)
    rejected: List[Article] = field(default_factory=list)


def is_affirmative(answer: str) -> bool:
    return "YES" in (answer or "").upper()


class CandidateValidator:
    """Asks the model whether each candidate explicitly discusses the filter."""

    def __init__(self, generator: TextGenerationPort):
        self.generator = generator

    def validate(self, filter_text: str, candidates: Sequence[Article]) -> ValidationOutcome:
        """
        Classify candidates in order.

        Returns:
            Outcome whose `validated` list preserves candidate order
        """
        outcome = ValidationOutcome()
        for candidate in candidates:
            prompt = AssistantPrompts.validate_candidate(filter_text, candidate.title, candidate.summary)
            try:
                answer = self.generator.generate(prompt, temperature=0.0)
            except GenerationError as e:
                self._keep_on_failure(outcome, candidate, e)
                continue

            if is_affirmative(answer):
                logger.debug(f"Validated {candidate.url} for '{filter_text}'")
                outcome.validated.append(candidate)
            else:
                logger.debug(f"Rejected {candidate.url} for '{filter_text}'")
                outcome.rejected.append(candidate)
        return outcome

    @staticmethod
    def _keep_on_failure(outcome: ValidationOutcome, candidate: Article, error: Exception) -> None:
        """Fail open: a validation error counts as a soft failure and keeps the candidate."""
        logger.warning(f"Validation call failed for {candidate.url}, keeping candidate: {error}")
        outcome.soft_failures.append(ValidationFailure(url=candidate.url, error=str(error)))
        outcome.validated.append(candidate)

#!/usr/bin/env python3
"""
Handlers that search the corpus instead of taking explicit URLs.

The two filter-based handlers embed the filter, take the top-K nearest
articles, and run the candidate validation pass before answering.
get_top_entities answers from a store-side aggregate.
"""

from abc import abstractmethod
from typing import Optional

from core.exceptions import StoreError
from core.llm.port import TextGenerationPort
from core.models.chat import ChatResponse, CommandName, Plan, ResponseType
from core.planning.arguments import FilterArgs, ScopeArgs, decode_arguments
from .base import CommandHandler
from .validation import CandidateValidator, ValidationOutcome

NO_MATCHES_MESSAGE = "No articles found for the given filter"


class _FilteredSearchHandler(CommandHandler):
    """Embed, vector search, validate."""

    missing_filter_message = ""

    def __init__(self, store, generator: TextGenerationPort, top_k: int = 2,
                 validator: Optional[CandidateValidator] = None):
        super().__init__(store)
        self.generator = generator
        self.top_k = top_k
        self.validator = validator or CandidateValidator(generator)

    def search(self, filter_text: str) -> Optional[ValidationOutcome]:
        """
        Run the candidate pipeline.

        Returns:
            Validation outcome, or None when the vector search found nothing
        """
        embedding = self.generator.embed(filter_text)
        candidates = self.store.vector_search(embedding, self.top_k)
        self.logger.info(f"Vector search found {len(candidates)} candidates for '{filter_text}'")
        if not candidates:
            return None

        outcome = self.validator.validate(filter_text, candidates)
        if outcome.soft_failures:
            self.logger.warning(
                f"{len(outcome.soft_failures)} validation calls failed for '{filter_text}'; candidates kept"
            )
        return outcome

    def handle(self, plan: Plan, query: str) -> ChatResponse:
        args: FilterArgs = decode_arguments(plan.command, plan.args)
        if not args.filter:
            return self.soft_failure(self.missing_filter_message)

        outcome = self.search(args.filter)
        if outcome is None:
            return self.soft_failure(NO_MATCHES_MESSAGE)
        if not outcome.validated:
            return self.soft_failure(self.all_rejected_message(args.filter))
        return self.answer(args.filter, outcome)

    @abstractmethod
    def all_rejected_message(self, filter_text: str) -> str:
        pass

    @abstractmethod
    def answer(self, filter_text: str, outcome: ValidationOutcome) -> ChatResponse:
        pass


class MostPositiveArticleHandler(_FilteredSearchHandler):
    """Highest sentiment score among validated candidates."""

    name = CommandName.MOST_POSITIVE_ARTICLE_FOR_FILTER
    missing_filter_message = "Filter required for finding most positive article"

    def all_rejected_message(self, filter_text: str) -> str:
        return f"No articles found that explicitly discuss '{filter_text}'"

    def answer(self, filter_text: str, outcome: ValidationOutcome) -> ChatResponse:
        # max() returns the first maximal element, so earlier candidates win ties
        best = max(outcome.validated, key=lambda a: a.sentiment_score)
        answer = (
            f"Most positive article about '{filter_text}' "
            f"(validated from {len(outcome.validated)} candidates):\n"
            f"{best.url}\n"
            f"Title: {best.title}\n"
            f"Sentiment: {best.sentiment.value} ({best.sentiment_score:.2f})"
        )
        return self.respond(answer, [best])


class FilterByTopicHandler(_FilteredSearchHandler):
    """List validated articles about a topic."""

    name = CommandName.FILTER_BY_SPECIFIC_TOPIC
    missing_filter_message = "Filter required for article search"

    def all_rejected_message(self, filter_text: str) -> str:
        return f"No articles found that explicitly discuss {filter_text}"

    def answer(self, filter_text: str, outcome: ValidationOutcome) -> ChatResponse:
        lines = [f"Articles about {filter_text}:"]
        for i, article in enumerate(outcome.validated, 1):
            lines.append(f"{i}. {article.title}\n   {article.url}")
        return self.respond("\n".join(lines), outcome.validated, ResponseType.ARTICLE_LIST)


class TopEntitiesHandler(CommandHandler):
    """Most mentioned entities, optionally scoped to some URLs."""

    name = CommandName.GET_TOP_ENTITIES

    def __init__(self, store, limit: int = 10):
        super().__init__(store)
        self.limit = limit

    def handle(self, plan: Plan, query: str) -> ChatResponse:
        args: ScopeArgs = decode_arguments(plan.command, plan.args)
        scope = args.urls or None

        entities = self.store.top_entities(self.limit, scope)
        if not entities:
            return self.soft_failure("No entities found")

        lines = ["Top entities:"]
        for i, entity in enumerate(entities, 1):
            lines.append(
                f"{i}. {entity['name']} (mentions: {entity['count']}, confidence: {entity['avg_score']:.2f})"
            )

        sources = []
        if args.urls:
            try:
                sources = self.resolve_in_order(args.urls)
            except StoreError as e:
                self.logger.warning(f"Could not load scope articles for sources: {e}")
        return self.respond("\n".join(lines), sources, ResponseType.DATA)

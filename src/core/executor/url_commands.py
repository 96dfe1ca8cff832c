#!/usr/bin/env python3
"""
Handlers for commands that operate on explicit article URLs.
"""

from abc import abstractmethod
from collections import Counter
from typing import Iterable, List

from core.llm.port import TextGenerationPort
from core.models.article import Article, Sentiment
from core.models.chat import ChatResponse, CommandName, Plan
from core.planning.arguments import UrlArgs, decode_arguments
from core.prompts import AssistantPrompts
from .base import CommandHandler

POSITIVE_THRESHOLD = 0.6
NEGATIVE_THRESHOLD = 0.4


def classify_mean_score(mean: float) -> Sentiment:
    """Positive strictly above 0.6, negative strictly below 0.4, neutral otherwise."""
    if mean > POSITIVE_THRESHOLD:
        return Sentiment.POSITIVE
    if mean < NEGATIVE_THRESHOLD:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def top_by_count(labels: Iterable[str], limit: int) -> List[str]:
    """
    Most frequent labels, highest count first.

    Equal counts keep the order in which labels were first seen.
    """
    counts = Counter()
    first_seen = {}
    for label in labels:
        if not label:
            continue
        counts[label] += 1
        first_seen.setdefault(label, len(first_seen))
    ranked = sorted(counts, key=lambda label: (-counts[label], first_seen[label]))
    return ranked[:limit]


class SummaryHandler(CommandHandler):
    """Return the stored summary of a single article."""

    name = CommandName.SUMMARY

    def handle(self, plan: Plan, query: str) -> ChatResponse:
        args: UrlArgs = decode_arguments(plan.command, plan.args)
        if not args.urls:
            return self.soft_failure("Article URL required for summary")

        url = args.urls[0]
        articles = self.resolve_in_order([url])
        if not articles:
            return self.soft_failure(f"Article not found: {url}")

        article = articles[0]
        return self.respond(article.summary, [article])


class KeywordsOrTopicsHandler(CommandHandler):
    """Aggregate keyword and topic frequency across the requested articles."""

    name = CommandName.KEYWORDS_OR_TOPICS

    def __init__(self, store, top_n: int = 5):
        super().__init__(store)
        self.top_n = top_n

    def handle(self, plan: Plan, query: str) -> ChatResponse:
        args: UrlArgs = decode_arguments(plan.command, plan.args)
        if not args.urls:
            return self.soft_failure("URLs required to extract keywords/topics")

        articles = self.resolve_in_order(args.urls)
        keywords = top_by_count((k.term for a in articles for k in a.keywords), self.top_n)
        topics = top_by_count((t.name for a in articles for t in a.topics), self.top_n)

        if not keywords and not topics:
            return self.soft_failure("No keywords/topics found")

        sections = []
        if keywords:
            sections.append(self._numbered("Top Keywords:", keywords))
        if topics:
            sections.append(self._numbered("Top Topics:", topics))

        return self.respond("\n".join(sections), articles)

    @staticmethod
    def _numbered(heading: str, items: List[str]) -> str:
        lines = [heading] + [f"{i}. {item}" for i, item in enumerate(items, 1)]
        return "\n".join(lines) + "\n"


class SentimentHandler(CommandHandler):
    """Mean sentiment score across the requested articles."""

    name = CommandName.GET_SENTIMENT

    def handle(self, plan: Plan, query: str) -> ChatResponse:
        args: UrlArgs = decode_arguments(plan.command, plan.args)
        if not args.urls:
            return self.soft_failure("URLs required for sentiment analysis")

        articles = self.resolve_in_order(args.urls)
        if not articles:
            return self.soft_failure("No articles found for the provided URLs")

        mean = sum(a.sentiment_score for a in articles) / len(articles)
        overall = classify_mean_score(mean)

        details = "\n".join(
            f"{a.url}: {a.sentiment.value} ({a.sentiment_score:.2f})" for a in articles
        )
        answer = f"Overall sentiment: {overall.value} ({mean:.2f})\nArticles:\n{details}"
        return self.respond(answer, articles)


class _PairwiseHandler(CommandHandler):
    """Shared flow for handlers that send two resolved summaries to the model."""

    missing_urls_message = ""
    unresolved_message = ""

    def __init__(self, store, generator: TextGenerationPort):
        super().__init__(store)
        self.generator = generator

    @abstractmethod
    def build_prompt(self, first: Article, second: Article) -> str:
        pass

    def handle(self, plan: Plan, query: str) -> ChatResponse:
        args: UrlArgs = decode_arguments(plan.command, plan.args)
        if len(args.urls) < 2:
            return self.soft_failure(self.missing_urls_message)

        articles = self.resolve_in_order(args.urls)
        if len(articles) < 2:
            return self.soft_failure(self.unresolved_message)

        pair = articles[:2]
        answer = self.generator.generate(self.build_prompt(*pair), temperature=0.0)
        return self.respond(answer.strip(), pair)


class CompareArticlesHandler(_PairwiseHandler):
    name = CommandName.COMPARE_ARTICLES
    missing_urls_message = "At least 2 URLs required for comparison"
    unresolved_message = "Could not find at least 2 articles for comparison"

    def build_prompt(self, first: Article, second: Article) -> str:
        return AssistantPrompts.compare([first.summary, second.summary])


class ToneKeyDifferencesHandler(_PairwiseHandler):
    name = CommandName.TONE_KEY_DIFFERENCES
    missing_urls_message = "At least 2 URLs required for tone comparison"
    unresolved_message = "Could not find at least 2 articles for tone comparison"

    def build_prompt(self, first: Article, second: Article) -> str:
        return AssistantPrompts.tone_compare(first.summary, second.summary)

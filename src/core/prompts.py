#!/usr/bin/env python3
"""
Prompt templates for the article assistant.

All planning, synthesis, validation and extraction prompts live here so the
handlers and the OpenAI client only fill in values.
"""

from typing import List


class AssistantPrompts:
    """Collection of prompts used by the planner, handlers and ingestion."""

    # ---------- PLANNER ----------
    PLANNER_TEMPLATE = """You are a query planner for an article assistant. Map user queries to commands with arguments.

Supported commands:
- summary: Get summary of a specific article (requires urls)
- keywords_or_topics: Extract keywords/topics from articles (requires urls)
- get_sentiment: Get sentiment of articles (requires urls)
- compare_articles: Compare multiple articles (requires at least 2 urls)
- tone_key_differences: Analyze tone differences between articles (requires at least 2 urls)
- filter_by_specific_topic: Find articles by topic/filter (uses filter argument)
- most_positive_article_for_filter: Find the most positive article about a topic (uses filter argument)
- get_top_entities: Get most common entities across articles (no arguments, optional urls)

Rules:
1. Extract URLs from the query if provided
2. Extract the filter/topic from the query for search commands
3. Return JSON only, in this exact format:
{{"command": "command_name", "args": {{"urls": ["url1"], "filter": "topic"}}}}

Examples:
- "Summary of https://example.com" -> {{"command": "summary", "args": {{"urls": ["https://example.com"]}}}}
- "What articles discuss AI?" -> {{"command": "filter_by_specific_topic", "args": {{"filter": "AI"}}}}
- "Most positive about AI regulation" -> {{"command": "most_positive_article_for_filter", "args": {{"filter": "AI regulation"}}}}
- "How does the tone differ between https://a.com/x and https://b.com/y?" -> {{"command": "tone_key_differences", "args": {{"urls": ["https://a.com/x", "https://b.com/y"]}}}}
- "Top entities" -> {{"command": "get_top_entities", "args": {{}}}}

Query: {query}"""

    PLANNER_MAX_TOKENS = 500

    @classmethod
    def planner(cls, query: str) -> str:
        return cls.PLANNER_TEMPLATE.format(query=query)

    # ---------- SYNTHESIS ----------
    @staticmethod
    def compare(summaries: List[str]) -> str:
        return "Compare these summaries and highlight key differences:\n" + "\n---\n".join(summaries)

    @staticmethod
    def tone_compare(first: str, second: str) -> str:
        return "Compare tone across these summaries:\n" + f"{first}\n---\n{second}"

    @staticmethod
    def summarize(text: str) -> str:
        return "Summarize this text concisely while preserving key information:\n" + text

    # ---------- CANDIDATE VALIDATION ----------
    @staticmethod
    def validate_candidate(filter_text: str, title: str, summary: str) -> str:
        return (
            f"Does this article explicitly discuss {filter_text}?\n\n"
            f"Title: {title}\n"
            f"Summary: {summary}\n\n"
            "Answer with only 'YES' or 'NO'."
        )

    # ---------- SEMANTIC EXTRACTION ----------
    SEMANTICS_TEMPLATE = """Extract entities, keywords, topics, sentiment, and tone from this text. Return JSON in this exact format:
{{
  "entities": [{{"name": "entity_name", "category": "person|organization|location|technology|other", "confidence": 0.85}}],
  "keywords": [{{"term": "keyword", "relevance": 0.8, "context": "brief context"}}],
  "topics": [{{"name": "topic_name", "score": 0.75, "description": "brief description"}}],
  "sentiment": "positive|negative|neutral",
  "sentiment_score": 0.75,
  "tone": "professional|casual|analytical|critical|optimistic|pessimistic"
}}

Rules:
- Extract 3-7 entities, 5-10 keywords, 2-5 topics
- sentiment_score must be a number between 0.0 and 1.0
- Only include items with confidence/relevance/score >= 0.6
- Sort by score/confidence/relevance (highest first)
- Return valid JSON only

Text: {text}"""

    @classmethod
    def extract_semantics(cls, text: str) -> str:
        return cls.SEMANTICS_TEMPLATE.format(text=text)

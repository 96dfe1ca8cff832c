import pytest

from core.models.chat import Plan, ResponseType
from core.models.article import Sentiment
from core.executor.url_commands import (
    CompareArticlesHandler, KeywordsOrTopicsHandler, SentimentHandler, SummaryHandler, _PairwiseHandler,
    ToneKeyDifferencesHandler, classify_mean_score, top_by_count
)

A = "https://news.example.com/a"
B = "https://news.example.com/b"
C = "https://news.example.com/c"
MISSING = "https://news.example.com/missing"


def test_summary_returns_stored_summary(article_store):
    response = SummaryHandler(article_store).handle(Plan("summary", {"urls": [B, A]}), "q")

    assert response.answer == "Outages hit three cities after the storm."
    assert response.task == "summary"
    assert [s.url for s in response.sources] == [B]
    assert response.response_type == ResponseType.TEXT


def test_summary_soft_failures(article_store):
    handler = SummaryHandler(article_store)

    assert handler.handle(Plan("summary", {}), "q").answer == "Article URL required for summary"
    assert handler.handle(Plan("summary", {"urls": [MISSING]}), "q").answer == f"Article not found: {MISSING}"


def test_keywords_ranked_by_count_then_first_seen(article_store):
    response = KeywordsOrTopicsHandler(article_store).handle(Plan("keywords_or_topics", {"urls": [A, B]}), "q")

    assert "Top Keywords:\n1. energy\n2. solar\n3. storm" in response.answer
    assert "Top Topics:\n1. climate\n2. infrastructure" in response.answer
    assert [s.url for s in response.sources] == [A, B]


def test_keywords_respects_top_n(article_store):
    response = KeywordsOrTopicsHandler(article_store, top_n=1).handle(
        Plan("keywords_or_topics", {"urls": [A, B]}), "q"
    )

    assert "1. energy" in response.answer
    assert "2." not in response.answer


def test_keywords_soft_failures(article_store):
    handler = KeywordsOrTopicsHandler(article_store)

    assert handler.handle(Plan("keywords_or_topics", {}), "q").answer == "URLs required to extract keywords/topics"
    assert handler.handle(Plan("keywords_or_topics", {"urls": [C]}), "q").answer == "No keywords/topics found"


def test_top_by_count_ignores_blank_labels():
    assert top_by_count(["b", "", "a", "b", "a", "c"], 5) == ["b", "a", "c"]


def test_sentiment_mean_classification(article_store):
    response = SentimentHandler(article_store).handle(Plan("get_sentiment", {"urls": [A, B]}), "q")

    assert response.answer.startswith("Overall sentiment: neutral (0.50)")
    assert f"{A}: positive (0.80)" in response.answer
    assert f"{B}: negative (0.20)" in response.answer


def test_sentiment_single_positive(article_store):
    response = SentimentHandler(article_store).handle(Plan("get_sentiment", {"urls": [A]}), "q")
    assert response.answer.startswith("Overall sentiment: positive")


def test_sentiment_soft_failures(article_store):
    handler = SentimentHandler(article_store)

    assert handler.handle(Plan("get_sentiment", {}), "q").answer == "URLs required for sentiment analysis"
    assert handler.handle(Plan("get_sentiment", {"urls": [MISSING]}), "q").answer == \
        "No articles found for the provided URLs"


def test_classify_mean_score_boundaries():
    """Thresholds are strict: exactly 0.6 and 0.4 stay neutral."""
    assert classify_mean_score(0.61) == Sentiment.POSITIVE
    assert classify_mean_score(0.6) == Sentiment.NEUTRAL
    assert classify_mean_score(0.4) == Sentiment.NEUTRAL
    assert classify_mean_score(0.39) == Sentiment.NEGATIVE


def test_compare_uses_first_two_in_requested_order(article_store, fake_generator_factory):
    generator = fake_generator_factory(["  They differ in mood.  "])
    response = CompareArticlesHandler(article_store, generator).handle(
        Plan("compare_articles", {"urls": [B, A, C]}), "q"
    )

    assert response.answer == "They differ in mood."
    assert [s.url for s in response.sources] == [B, A]
    prompt = generator.calls[0]["prompt"]
    assert prompt.index("Outages hit") < prompt.index("Solar capacity")
    assert "Stocks were flat" not in prompt
    assert generator.calls[0]["temperature"] == 0.0


def test_compare_skips_unresolved_urls(article_store, fake_generator_factory):
    generator = fake_generator_factory(["diff"])
    response = CompareArticlesHandler(article_store, generator).handle(
        Plan("compare_articles", {"urls": [MISSING, C, A]}), "q"
    )

    assert [s.url for s in response.sources] == [C, A]


def test_compare_soft_failures(article_store, fake_generator_factory):
    generator = fake_generator_factory([])
    handler = CompareArticlesHandler(article_store, generator)

    assert handler.handle(Plan("compare_articles", {"urls": [A]}), "q").answer == \
        "At least 2 URLs required for comparison"
    assert handler.handle(Plan("compare_articles", {"urls": [A, MISSING]}), "q").answer == \
        "Could not find at least 2 articles for comparison"
    assert generator.calls == []


def test_tone_comparison(article_store, fake_generator_factory):
    generator = fake_generator_factory(["A is upbeat, B is grim."])
    response = ToneKeyDifferencesHandler(article_store, generator).handle(
        Plan("tone_key_differences", {"urls": [A, B]}), "q"
    )

    assert response.task == "tone_key_differences"
    assert response.answer == "A is upbeat, B is grim."
    assert generator.calls[0]["prompt"].startswith("Compare tone across these summaries:")


def test_tone_soft_failures(article_store, fake_generator_factory):
    handler = ToneKeyDifferencesHandler(article_store, fake_generator_factory([]))

    assert handler.handle(Plan("tone_key_differences", {}), "q").answer == \
        "At least 2 URLs required for tone comparison"
    assert handler.handle(Plan("tone_key_differences", {"urls": [MISSING, A]}), "q").answer == \
        "Could not find at least 2 articles for tone comparison"


def test_pairwise_handler_requires_prompt_builder(article_store, fake_generator_factory):
    class NoPrompt(_PairwiseHandler):
        pass

    with pytest.raises(TypeError):
        NoPrompt(article_store, fake_generator_factory())

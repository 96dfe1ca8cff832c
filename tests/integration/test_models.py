import inspect

import pytest

from core.models.article import (
    Article, SemanticAnalysis, Sentiment, parse_vector_literal, vector_literal
)
from core.models import chat as chat_models
from core.models.chat import ChatResponse, CommandName, ResponseType, Source


def test_sentiment_normalize_defaults_to_neutral():
    assert Sentiment.normalize("Positive") == Sentiment.POSITIVE
    assert Sentiment.normalize(" negative ") == Sentiment.NEGATIVE
    assert Sentiment.normalize("ecstatic") == Sentiment.NEUTRAL
    assert Sentiment.normalize(None) == Sentiment.NEUTRAL


def test_semantic_analysis_clamps_scores_and_skips_bad_items():
    analysis = SemanticAnalysis.from_dict({
        "entities": [{"name": "Acme", "confidence": 1.7}, "not a mapping"],
        "keywords": [{"term": "growth", "relevance": -2}],
        "topics": None,
        "sentiment": "POSITIVE",
        "sentiment_score": "0.9",
        "tone": "upbeat",
    })

    assert [e.name for e in analysis.entities] == ["Acme"]
    assert analysis.entities[0].confidence == 1.0
    assert analysis.keywords[0].relevance == 0.0
    assert analysis.topics == []
    assert analysis.sentiment == Sentiment.POSITIVE
    assert analysis.sentiment_score == 0.9


def test_empty_analysis_is_neutral():
    analysis = SemanticAnalysis.empty()
    assert analysis.sentiment == Sentiment.NEUTRAL
    assert analysis.sentiment_score == 0.5
    assert analysis.entities == []


def test_article_from_row_parses_jsonb_and_vector():
    article = Article.from_dict({
        "id": 42,
        "url": " https://x.com/1 ",
        "title": None,
        "embedding": "[0.1,0.2]",
        "sentiment": "negative",
        "sentiment_score": 0.1,
        "entities": [{"name": "Acme", "category": "organization", "confidence": 0.8}],
        "created_at": "2024-03-01T10:00:00+00:00",
    })

    assert article.id == "42"
    assert article.url == "https://x.com/1"
    assert article.title == ""
    assert article.embedding == [0.1, 0.2]
    assert article.entities[0].category == "organization"
    assert article.created_at.year == 2024


def test_article_to_dict_omits_embedding_by_default(make_article):
    article = make_article("https://x.com/1", embedding=[1.0])

    assert "embedding" not in article.to_dict()
    assert article.to_dict(include_embedding=True)["embedding"] == [1.0]


def test_vector_literal_helpers():
    assert vector_literal([1, 0.5]) == "[1.0,0.5]"
    assert parse_vector_literal("[1.0, 0.5]") == [1.0, 0.5]
    assert parse_vector_literal("[]") == []


def test_command_name_lookup():
    assert CommandName.lookup("get_top_entities") == CommandName.GET_TOP_ENTITIES
    assert CommandName.lookup("translate") is None
    assert len(CommandName) == 8


def test_chat_response_wire_shape():
    response = ChatResponse(
        answer="a", task="filter_by_specific_topic",
        sources=[Source(id="1", url="https://x.com/1", title="One")],
        response_type="article_list",
    )

    assert response.response_type == ResponseType.ARTICLE_LIST
    assert response.to_dict() == {
        "answer": "a",
        "sources": [{"id": "1", "url": "https://x.com/1", "title": "One"}],
        "response_type": "article_list",
        "task": "filter_by_specific_topic",
    }


@pytest.mark.parametrize("payload", [None, [], {"answer": "a"}, {"answer": 1, "task": "summary"}])
def test_chat_response_from_dict_rejects_malformed(payload):
    with pytest.raises(ValueError):
        ChatResponse.from_dict(payload)


def test_retryable_errors():
    from core.exceptions import (
        ErrorRecovery, FetchError, GenerationError, GenerationTimeoutError, StoreConnectionError
    )

    assert ErrorRecovery.is_retryable_error(FetchError("https://x.com"))
    assert ErrorRecovery.is_retryable_error(StoreConnectionError(RuntimeError("refused")))
    assert ErrorRecovery.is_retryable_error(GenerationTimeoutError("openai", "m", 30, RuntimeError("slow")))
    assert not ErrorRecovery.is_retryable_error(GenerationError("openai", "m", RuntimeError("bad request")))
    assert not ErrorRecovery.is_retryable_error(ValueError("bad url"))
    assert ErrorRecovery.get_retry_delay(FetchError("https://x.com"), 10) == 60


def test_chat_models_do_not_depend_on_planning():
    assert "core.planning" not in inspect.getsource(chat_models)

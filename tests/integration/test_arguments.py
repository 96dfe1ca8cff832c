import pytest

from core.models.chat import Plan
from core.planning.arguments import FilterArgs, ScopeArgs, UrlArgs, decode_arguments, decode_urls


@pytest.mark.parametrize("command", [
    "summary", "keywords_or_topics", "get_sentiment", "compare_articles", "tone_key_differences",
])
def test_url_commands_decode_to_url_args(command):
    args = decode_arguments(command, {"urls": ["https://a.com", "https://b.com"]})
    assert args == UrlArgs(urls=["https://a.com", "https://b.com"])


@pytest.mark.parametrize("command", ["most_positive_article_for_filter", "filter_by_specific_topic"])
def test_filter_commands_decode_to_filter_args(command):
    assert decode_arguments(command, {"filter": "  climate  "}) == FilterArgs(filter="climate")


def test_top_entities_decodes_to_scope():
    assert decode_arguments("get_top_entities", {}) == ScopeArgs(urls=[])
    assert decode_arguments("get_top_entities", {"urls": ["https://a.com"]}) == ScopeArgs(urls=["https://a.com"])


def test_bare_string_url_becomes_list():
    """A single URL given as a string is treated as a one-element list."""
    assert decode_urls("https://a.com") == ["https://a.com"]


def test_non_string_and_blank_urls_are_dropped():
    assert decode_urls(["https://a.com", 3, None, "  ", {"u": 1}, "https://b.com"]) == [
        "https://a.com", "https://b.com"
    ]
    assert decode_urls({"url": "https://a.com"}) == []
    assert decode_urls(None) == []


def test_non_string_filter_decodes_empty():
    assert decode_arguments("filter_by_specific_topic", {"filter": 42}) == FilterArgs(filter="")


def test_plan_args_decode_by_command():
    plan = Plan(command="summary", args={"urls": "https://a.com"})
    assert decode_arguments(plan.command, plan.args) == UrlArgs(urls=["https://a.com"])

#!/usr/bin/env python3
"""
Typed plan arguments.

Planner output is free-form JSON; handlers work with these structures
instead. Decoding never fails: malformed values decode to empty arguments
and the handler turns that into a soft failure.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from core.models.chat import CommandName


@dataclass(frozen=True)
class UrlArgs:
    """Arguments for commands that operate on explicit article URLs."""
    urls: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FilterArgs:
    """Arguments for commands that search by a topic filter."""
    filter: str = ""


@dataclass(frozen=True)
class ScopeArgs:
    """Optional URL scope; an empty list means the whole corpus."""
    urls: List[str] = field(default_factory=list)


PlanArguments = Union[UrlArgs, FilterArgs, ScopeArgs]

URL_COMMANDS = {
    CommandName.SUMMARY,
    CommandName.KEYWORDS_OR_TOPICS,
    CommandName.GET_SENTIMENT,
    CommandName.COMPARE_ARTICLES,
    CommandName.TONE_KEY_DIFFERENCES,
}

FILTER_COMMANDS = {
    CommandName.MOST_POSITIVE_ARTICLE_FOR_FILTER,
    CommandName.FILTER_BY_SPECIFIC_TOPIC,
}


def decode_urls(value: Any) -> List[str]:
    """Normalize a urls value: a bare string becomes one URL, non-strings and blanks are dropped."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    urls = []
    for item in value:
        if isinstance(item, str) and item.strip():
            urls.append(item.strip())
    return urls


def decode_filter(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()


def decode_arguments(command: str, args: Dict[str, Any]) -> PlanArguments:
    """Decode raw plan args into the typed structure for the command."""
    args = args if isinstance(args, dict) else {}
    name = CommandName.lookup(command)

    if name in URL_COMMANDS:
        return UrlArgs(urls=decode_urls(args.get('urls')))
    if name in FILTER_COMMANDS:
        return FilterArgs(filter=decode_filter(args.get('filter')))
    return ScopeArgs(urls=decode_urls(args.get('urls')))
